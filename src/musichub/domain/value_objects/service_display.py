"""Human-readable titles and icon resources per service."""

from musichub.domain.entities import ServiceType

_DISPLAY_NAMES: dict[ServiceType, str] = {
    ServiceType.AMAZON: "Amazon Cloud Drive",
    ServiceType.DROPBOX: "Dropbox",
    ServiceType.GOOGLE: "Google Play Music",
    ServiceType.SOUNDCLOUD: "SoundCloud",
    ServiceType.YOUTUBE: "YouTube",
    ServiceType.ONEDRIVE: "OneDrive",
}

_ICON_PATHS: dict[ServiceType, str] = {
    ServiceType.AMAZON: "SVG/amazon.svg",
    ServiceType.DROPBOX: "SVG/dropbox-outline.svg",
    ServiceType.GOOGLE: "SVG/googleMusic.svg",
    ServiceType.SOUNDCLOUD: "SVG/soundCloudColor.svg",
    ServiceType.YOUTUBE: "SVG/youtubeLogo.svg",
    ServiceType.ONEDRIVE: "SVG/onedrive.svg",
    ServiceType.TUNEZ: "SVG/tunez.svg",
}


def display_name(service: ServiceType) -> str:
    """Get the title shown for a service.

    Falls back to the raw enum value for services without a custom title.
    """
    return _DISPLAY_NAMES.get(service, service.value)


def icon_path(service: ServiceType) -> str:
    """Get the icon resource path for a service, or "" if there is none."""
    return _ICON_PATHS.get(service, "")
