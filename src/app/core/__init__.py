"""
Core module - Configuration, database, logging, email and external clients.
"""

from app.core.config import DirectoryServiceConfig, get_settings, settings
from app.core.database import Base, close_db, get_db, init_db
from app.core.directory import (
    DirectoryServiceClient,
    close_directory_client,
    get_directory_client,
    init_directory_client,
)

__all__ = [
    # Config
    "settings",
    "get_settings",
    "DirectoryServiceConfig",
    # Database
    "Base",
    "get_db",
    "init_db",
    "close_db",
    # Directory service
    "DirectoryServiceClient",
    "init_directory_client",
    "get_directory_client",
    "close_directory_client",
]
