"""Infrastructure persistence layer."""

from .database import Database
from .models import Base, ServiceConfigModel, TrackModel
from .repositories import ServiceConfigRepository, TrackLibraryRepository

__all__ = [
    "Base",
    "Database",
    "ServiceConfigModel",
    "ServiceConfigRepository",
    "TrackLibraryRepository",
    "TrackModel",
]
