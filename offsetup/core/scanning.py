"""
Language dependency scanner.

Walks a source tree and reports which language toolchains it needs,
judged by file extension. Used by ``offsetup new`` to seed a manifest.
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)


class LangDependencyName(str, Enum):
    GO = "Go"
    NODEJS = "NodeJS"
    PYTHON = "Python"
    RUST = "Rust"


_EXTENSIONS: dict[str, LangDependencyName] = {
    "go": LangDependencyName.GO,
    "rs": LangDependencyName.RUST,
    "js": LangDependencyName.NODEJS,
    "ts": LangDependencyName.NODEJS,
    "py": LangDependencyName.PYTHON,
}


def classify(filename: str) -> LangDependencyName | None:
    """Language for a file name, by lower-cased extension."""
    suffix = Path(filename).suffix
    if not suffix:
        return None
    return _EXTENSIONS.get(suffix[1:].lower())


def scan(root: str | Path) -> frozenset[LangDependencyName] | None:
    """Collect the languages found under ``root``.

    Directories that cannot be listed are skipped. Symbolic links are not
    followed and do not count as source files.

    Returns:
        The set of languages, or None if no file matched.
    """
    found: set[LangDependencyName] = set()

    for dirpath, _dirnames, filenames in os.walk(root):
        for filename in filenames:
            lang = classify(filename)
            if lang is None or lang in found:
                continue
            path = os.path.join(dirpath, filename)
            if os.path.islink(path) or not os.path.isfile(path):
                continue
            found.add(lang)

    logger.debug("Scanned %s: %s", root, sorted(lang.value for lang in found))
    return frozenset(found) if found else None
