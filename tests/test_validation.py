"""
Tests for the Source pairing rule and manifest-wide validation.
"""

from pathlib import Path

import pytest

from offsetup.core.config.loader import resolve
from offsetup.core.models import Download, Manifest, Source
from offsetup.core.validation import (
    DOWNLOAD_DIRECTORY_REQUIRED,
    DOWNLOAD_IS_REQUIRED,
    validate_manifest,
    validate_source,
)

DOWNLOAD = Download.model_validate({
    "uri": "http://download.redis.io/releases/redis-5.0.4.tar.gz",
    "sha512": "336929c81a476e2a",
})


class TestValidateSource:
    @pytest.mark.parametrize(
        "download, directory",
        [(DOWNLOAD, "/opt/downloads"), (None, None)],
        ids=["both", "neither"],
    )
    def test_valid(self, download, directory):
        source = Source(download=download, download_directory=directory)
        assert validate_source(source) == []

    def test_download_without_directory(self):
        errors = validate_source(Source(download=DOWNLOAD))
        assert [e.code for e in errors] == [DOWNLOAD_DIRECTORY_REQUIRED]
        assert errors[0].code == "download_directory_required"

    def test_directory_without_download(self):
        errors = validate_source(Source(download_directory="/opt/downloads"))
        assert [e.code for e in errors] == [DOWNLOAD_IS_REQUIRED]
        assert errors[0].code == "download_is_required"

    def test_system_alone_is_valid(self):
        assert validate_source(Source(system={"apt": ["make", "gcc"]})) == []

    def test_path_in_message(self):
        errors = validate_source(Source(download=DOWNLOAD), path="dependencies.platforms.mac.source")
        assert errors[0].path == "dependencies.platforms.mac.source"
        assert str(errors[0]).startswith("dependencies.platforms.mac.source: ")


class TestValidateManifest:
    def test_redis_example_is_invalid(self, fixtures_dir: Path):
        manifest = resolve(fixtures_dir / "redis.yml", environ={})
        errors = validate_manifest(manifest)
        assert sorted(e.path for e in errors) == [
            "dependencies.platforms.mac.source",
            "dependencies.platforms.ubuntu.source",
        ]
        assert {e.code for e in errors} == {DOWNLOAD_DIRECTORY_REQUIRED}

    def test_simple_example_is_valid(self, fixtures_dir: Path):
        manifest = resolve(fixtures_dir / "simple.yml", environ={})
        assert validate_manifest(manifest) == []

    def test_paired_source_is_valid(self):
        manifest = Manifest.model_validate({
            "name": "demo",
            "version": "1",
            "dependencies": {
                "platforms": {
                    "windows": {
                        "versions": [">=7600"],
                        "source": {
                            "download_directory": "C:\\opt\\Downloads",
                            "download": {
                                "uri": "https://www.7-zip.org/a/7z1900-x64.msi",
                                "sha512": "7837a867",
                            },
                        },
                    },
                },
            },
        })
        assert validate_manifest(manifest) == []
