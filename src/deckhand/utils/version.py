"""Version category comparison used to gate conditional task execution."""

import re
from enum import IntFlag
from typing import Tuple

_VERSION_PATTERN = re.compile(
    r"^v?(?P<major>\d+)(?:\.(?P<minor>\d+))?(?:\.(?P<patch>\d+))?"
    r"(?:-(?P<prerelease>[0-9A-Za-z.-]+))?"
    r"(?:\+(?P<build>[0-9A-Za-z.-]+))?$"
)


class VersionCategory(IntFlag):
    """Magnitude of the difference between two versions."""

    MAJOR = 1
    MINOR = 2
    PATCH = 4
    NONE = 8


MATCH_MAJOR_DIFFERENCE = VersionCategory.MAJOR
MATCH_MINOR_DIFFERENCE = VersionCategory.MINOR
MATCH_PATCH_DIFFERENCE = VersionCategory.PATCH
MATCH_NO_DIFFERENCE = VersionCategory.NONE
MATCH_ALL_DIFFERENCE = (
    VersionCategory.MAJOR
    | VersionCategory.MINOR
    | VersionCategory.PATCH
    | VersionCategory.NONE
)


def parse_version(version: str) -> Tuple[int, int, int]:
    """Parse a version string into its (major, minor, patch) components.

    Pre-release and build metadata are accepted but discarded. Missing minor
    or patch components count as 0.

    Raises:
        ValueError: If the version string cannot be parsed
    """
    match = _VERSION_PATTERN.match(str(version).strip())
    if match is None:
        raise ValueError(f'"{version}" is not a valid version.')

    return (
        int(match.group("major")),
        int(match.group("minor") or 0),
        int(match.group("patch") or 0),
    )


def categorize(version_a: str, version_b: str) -> VersionCategory:
    """Return the most significant component in which two versions differ."""
    components_a = parse_version(version_a)
    components_b = parse_version(version_b)

    for category, a, b in zip(
        (VersionCategory.MAJOR, VersionCategory.MINOR, VersionCategory.PATCH),
        components_a,
        components_b,
    ):
        if a != b:
            return category

    return VersionCategory.NONE


def validate_strategy(strategy) -> VersionCategory:
    """Validate a strategy bitmask and return it as a VersionCategory.

    Raises:
        ValueError: If the strategy is not a non-empty combination of known flags
    """
    if (
        isinstance(strategy, bool)
        or not isinstance(strategy, int)
        or strategy <= 0
        or strategy & ~int(MATCH_ALL_DIFFERENCE)
    ):
        raise ValueError(f'The strategy type "{strategy}" is invalid.')

    return VersionCategory(strategy)


def matches_strategy(strategy: int, version_a: str, version_b: str) -> bool:
    """Check whether the difference between two versions is selected by strategy."""
    return bool(categorize(version_a, version_b) & strategy)
