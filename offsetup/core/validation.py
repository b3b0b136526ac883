"""
Manifest validation: cross-field rules the schema cannot express.

Validation returns errors as data. The config resolver never calls it;
the install use case does, before anything is dispatched.
"""

from __future__ import annotations

from pydantic import BaseModel

from offsetup.core.models.manifest import Manifest, Source

DOWNLOAD_DIRECTORY_REQUIRED = "download_directory_required"
DOWNLOAD_IS_REQUIRED = "download_is_required"


class ValidationError(BaseModel):
    """One violated rule."""

    code: str
    message: str
    path: str = ""

    def __str__(self) -> str:
        where = f"{self.path}: " if self.path else ""
        return f"{where}{self.message} ({self.code})"


def validate_source(source: Source, path: str = "") -> list[ValidationError]:
    """Check that ``download`` and ``download_directory`` come as a pair."""
    has_download = source.download is not None
    has_directory = source.download_directory is not None

    if has_download and not has_directory:
        return [ValidationError(
            code=DOWNLOAD_DIRECTORY_REQUIRED,
            message="download is set but download_directory is missing",
            path=path,
        )]
    if has_directory and not has_download:
        return [ValidationError(
            code=DOWNLOAD_IS_REQUIRED,
            message="download_directory is set but download is missing",
            path=path,
        )]
    return []


def validate_manifest(manifest: Manifest) -> list[ValidationError]:
    """Validate every platform source in the manifest."""
    errors: list[ValidationError] = []
    for path, source in manifest.sources():
        errors.extend(validate_source(source, path=path))
    return errors
