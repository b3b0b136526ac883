"""
Domain models: Pydantic types for offsetup.

All models are re-exported here for convenient access:

    from offsetup.core.models import Manifest, Platform, Source
"""

from offsetup.core.models.manifest import (
    KNOWN_PACKAGE_MANAGERS,
    Application,
    Dependencies,
    Download,
    Exposes,
    Manifest,
    Platform,
    Ports,
    Source,
    System,
    unknown_managers,
)

__all__ = [
    "Application",
    "Dependencies",
    "Download",
    "Exposes",
    "KNOWN_PACKAGE_MANAGERS",
    "Manifest",
    "Platform",
    "Ports",
    "Source",
    "System",
    "unknown_managers",
]
