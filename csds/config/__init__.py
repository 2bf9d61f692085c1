"""Configuration for the preprocessing pipeline."""

from .platforms import (
    CANONICAL_FIELDS,
    DEFAULT_ACCOUNT_SOURCES,
    DEFAULT_OBJECT_ID_SOURCES,
    PlatformTag,
)
from .settings import Settings, load_settings

__all__ = [
    "CANONICAL_FIELDS",
    "DEFAULT_ACCOUNT_SOURCES",
    "DEFAULT_OBJECT_ID_SOURCES",
    "PlatformTag",
    "Settings",
    "load_settings",
]
