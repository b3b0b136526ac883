"""
Tests for the manifest models.
"""

import pytest
from pydantic import ValidationError

from offsetup.core.models import (
    Application,
    Download,
    Exposes,
    Manifest,
    Platform,
    Source,
    unknown_managers,
)


class TestManifest:
    def test_minimal(self):
        manifest = Manifest.model_validate({"name": "demo", "version": "1.0.0"})
        assert manifest.dependencies is None
        assert manifest.exposes is None
        assert manifest.debug is None
        assert manifest.dry_run is None

    def test_name_and_version_required(self):
        with pytest.raises(ValidationError):
            Manifest.model_validate({"name": "demo"})
        with pytest.raises(ValidationError):
            Manifest.model_validate({"version": "1"})

    def test_numeric_version_coerced(self):
        manifest = Manifest.model_validate({"name": "demo", "version": 1.5})
        assert manifest.version == "1.5"

    def test_frozen(self):
        manifest = Manifest.model_validate({"name": "demo", "version": "1"})
        with pytest.raises(ValidationError):
            manifest.name = "other"

    def test_unknown_keys_ignored(self):
        manifest = Manifest.model_validate({
            "name": "demo",
            "version": "1",
            "dependencies": {
                "platforms": {
                    "windows": {
                        "versions": [">=7600"],
                        "install_prefix": "C:\\opt\\bin",
                        "install_all": True,
                    },
                },
            },
        })
        windows = manifest.dependencies.platforms["windows"]
        assert windows.versions == [">=7600"]

    def test_platform_entries_and_sources(self):
        manifest = Manifest.model_validate({
            "name": "demo",
            "version": "1",
            "dependencies": {
                "platforms": {
                    "ubuntu": {"versions": ["22.04"], "source": {"download_directory": "/tmp"}},
                    "mac": {"versions": [">=10.14"]},
                },
            },
        })
        assert [key for key, _ in manifest.platform_entries()] == ["ubuntu", "mac"]
        assert [path for path, _ in manifest.sources()] == [
            "dependencies.platforms.ubuntu.source",
        ]

    def test_no_dependencies_iterates_empty(self):
        manifest = Manifest.model_validate({"name": "demo", "version": "1"})
        assert list(manifest.platform_entries()) == []
        assert list(manifest.application_entries()) == []
        assert list(manifest.sources()) == []


class TestPlatform:
    def test_versions_required_non_empty(self):
        with pytest.raises(ValidationError):
            Platform.model_validate({})
        with pytest.raises(ValidationError):
            Platform.model_validate({"versions": []})

    def test_full_entry(self):
        platform = Platform.model_validate({
            "versions": ["14.04", ">16.04"],
            "arch": "x86_64",
            "system": {"apt": ["redis"]},
            "pre_install": ["sudo apt update"],
            "install_priority": ["docker", "native"],
            "skip_install": False,
            "fail_silently": True,
        })
        assert platform.system == {"apt": ["redis"]}
        assert platform.fail_silently is True

    def test_numeric_versions_coerced(self):
        platform = Platform.model_validate({"versions": [7600]})
        assert platform.versions == ["7600"]


class TestApplication:
    def test_all_optional(self):
        app = Application.model_validate({})
        assert app.pkg is None
        assert app.install_priority is None

    def test_fields(self):
        app = Application.model_validate({
            "pkg": "https://github.com/offscale/offpostgres",
            "version": ">9.6.4",
            "env": "RDBMS_URI",
            "skip_install": True,
        })
        assert app.env == "RDBMS_URI"
        assert app.skip_install is True


class TestDownload:
    def test_uri_parsed(self):
        download = Download.model_validate({
            "uri": "http://download.redis.io/releases/redis-5.0.4.tar.gz",
            "sha512": "abc",
            "extract": True,
        })
        assert download.hostname == "download.redis.io"
        assert download.uri.scheme == "http"

    def test_relative_uri_rejected(self):
        with pytest.raises(ValidationError):
            Download.model_validate({"uri": "releases/redis.tar.gz", "sha512": "abc"})

    def test_sha512_required(self):
        with pytest.raises(ValidationError):
            Download.model_validate({"uri": "https://example.com/a.zip"})


class TestSource:
    def test_structurally_accepts_unpaired_fields(self):
        # pairing is checked by the validation engine, not the schema
        source = Source.model_validate({
            "download": {"uri": "https://example.com/a.zip", "sha512": "abc"},
        })
        assert source.download_directory is None


class TestExposes:
    def test_ports_variant(self):
        exposes = Exposes.model_validate({"ports": {"tcp": [80, 443]}})
        assert exposes.kind == "ports"
        assert exposes.ports.tcp == [80, 443]
        assert exposes.ports.udp is None

    def test_port_out_of_range(self):
        with pytest.raises(ValidationError):
            Exposes.model_validate({"ports": {"tcp": [70000]}})
        with pytest.raises(ValidationError):
            Exposes.model_validate({"ports": {"udp": [-1]}})

    def test_variant_required(self):
        with pytest.raises(ValidationError):
            Exposes.model_validate({})


class TestUnknownManagers:
    def test_known_only(self):
        assert unknown_managers({"apt": ["redis"], "brew": ["redis"], "0install": []}) == []

    def test_reports_unknown(self):
        assert unknown_managers({"apt": [], "zypper": [], "conda": []}) == ["conda", "zypper"]

    def test_none(self):
        assert unknown_managers(None) == []
