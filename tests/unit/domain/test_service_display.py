"""Tests for per-service display metadata."""

import pytest

from musichub.domain.entities import ServiceType
from musichub.domain.value_objects.service_display import display_name, icon_path


class TestDisplayName:
    def test_known_titles(self) -> None:
        assert display_name(ServiceType.GOOGLE) == "Google Play Music"
        assert display_name(ServiceType.AMAZON) == "Amazon Cloud Drive"
        assert display_name(ServiceType.YOUTUBE) == "YouTube"

    def test_unmapped_falls_back_to_value(self) -> None:
        assert display_name(ServiceType.TUNEZ) == "tunez"
        assert display_name(ServiceType.FILE_SYSTEM) == "filesystem"


class TestIconPath:
    def test_tunez_has_icon(self) -> None:
        assert icon_path(ServiceType.TUNEZ) == "SVG/tunez.svg"

    def test_unmapped_is_empty(self) -> None:
        assert icon_path(ServiceType.FILE_SYSTEM) == ""

    @pytest.mark.parametrize("service", list(ServiceType))
    def test_total_over_enum(self, service: ServiceType) -> None:
        assert isinstance(display_name(service), str)
        assert isinstance(icon_path(service), str)
