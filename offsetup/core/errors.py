"""
Error kinds raised across the core.

Everything the CLI should report as a clean failure derives from
``OffSetupError``. Command failures are not exceptions: they are
recorded as failed receipts by the command runners.
"""

from __future__ import annotations


class OffSetupError(Exception):
    """Base class for errors reported at the CLI boundary."""


class ConfigError(OffSetupError):
    """Raised when the manifest is missing, malformed or cannot be coerced."""


class UnknownPlatformError(OffSetupError):
    """Raised when the host identity matches no known OS family or product."""
