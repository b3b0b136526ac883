"""
Shared test fixtures and configuration.
"""

import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from offsetup.adapters.mock import MockCommandRunner
from offsetup.core.platform.identity import Architecture, PlatformIdentity, PlatformName


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def write_manifest(tmp_path: Path) -> Callable[[str], Path]:
    """Write dedented YAML to offsetup.yml in a temp directory."""

    def _write(content: str, name: str = "offsetup.yml") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content))
        return path

    return _write


@pytest.fixture
def mock_runner() -> MockCommandRunner:
    return MockCommandRunner()


@pytest.fixture
def ubuntu() -> PlatformIdentity:
    return PlatformIdentity(
        name=PlatformName.UBUNTU, versions=("22.04",), architecture=Architecture.X86_64,
    )


@pytest.fixture
def windows() -> PlatformIdentity:
    return PlatformIdentity(
        name=PlatformName.WINDOWS,
        versions=("Windows 10", "18362", "1903"),
        architecture=Architecture.X86_64,
    )
