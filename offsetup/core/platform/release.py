"""
Windows 10 build number → release label (e.g. 18362 → "1903").

Each range runs from the first Insider preview build of a release to
its public release build, inclusive. Ranges are ordered and disjoint;
lookup returns the first match.
"""

from __future__ import annotations

from typing import NamedTuple


class ReleaseRange(NamedTuple):
    preview_start: int
    release_build: int
    label: str

    def contains(self, build: int) -> bool:
        return self.preview_start <= build <= self.release_build


WINDOWS_10_RELEASES: tuple[ReleaseRange, ...] = (
    ReleaseRange(9841, 10240, "1507"),
    ReleaseRange(10525, 10586, "1511"),
    ReleaseRange(11082, 14393, "1607"),
    ReleaseRange(14901, 15063, "1703"),
    ReleaseRange(16170, 16299, "1709"),
    ReleaseRange(16353, 17134, "1803"),
    ReleaseRange(17604, 17763, "1809"),
    ReleaseRange(18204, 18362, "1903"),
    ReleaseRange(18836, 18908, "20H1"),  # preview
)


def map_build_to_release(build: int) -> str | None:
    """Return the release label whose range contains ``build``, if any."""
    for release in WINDOWS_10_RELEASES:
        if release.contains(build):
            return release.label
    return None
