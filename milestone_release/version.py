# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Semantic version value parsed from milestone titles and tags.

References:
    - Semantic Versioning 2.0.0: https://semver.org/
    - Recommended SemVer regex: https://semver.org/#is-there-a-suggested-regular-expression-regex-to-check-a-semver-string
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from milestone_release.branch import BranchName
from milestone_release.errors import InvalidVersionFormat

logger = logging.getLogger(__name__)

# ASCII digits only: str patterns would otherwise accept any Unicode digit for \d
_NUMBER = r"0|[1-9][0-9]*"
_PRERELEASE_IDENTIFIER = r"0|[1-9][0-9]*|[0-9]*[a-zA-Z-][0-9a-zA-Z-]*"
_BUILD_IDENTIFIER = r"[0-9a-zA-Z-]+"
_PRERELEASE = rf"(?:{_PRERELEASE_IDENTIFIER})(?:\.(?:{_PRERELEASE_IDENTIFIER}))*"
_BUILDMETADATA = rf"{_BUILD_IDENTIFIER}(?:\.{_BUILD_IDENTIFIER})*"

SEMVER_PATTERN = re.compile(
    rf"(?P<major>{_NUMBER})\.(?P<minor>{_NUMBER})\.(?P<patch>{_NUMBER})"
    rf"(?:-(?P<prerelease>{_PRERELEASE}))?"
    rf"(?:\+(?P<buildmetadata>{_BUILDMETADATA}))?"
)

# Optional leading 'v', as used by most tag and milestone naming schemes
VERSION_PATTERN = re.compile(rf"v?{SEMVER_PATTERN.pattern}")


@dataclass(frozen=True)
class SemVerVersion:
    """Immutable semantic version.

    Instances come from parse() or from one of the next_*() derivations,
    never from mutation. Direct construction is validated against the same
    grammar and raises InvalidVersionFormat.
    """

    major: int
    minor: int
    patch: int
    prerelease: str = ""
    buildmetadata: str = ""

    def __post_init__(self) -> None:
        numbers = (self.major, self.minor, self.patch)
        if not all(isinstance(n, int) and not isinstance(n, bool) and n >= 0 for n in numbers):
            raise InvalidVersionFormat(".".join(str(n) for n in numbers))
        if self.prerelease and not re.fullmatch(_PRERELEASE, self.prerelease):
            raise InvalidVersionFormat(self.full_release_name())
        if self.buildmetadata and not re.fullmatch(_BUILDMETADATA, self.buildmetadata):
            raise InvalidVersionFormat(self.full_release_name())

    @classmethod
    def parse(cls, text: str) -> SemVerVersion:
        """Parse a milestone title or tag into a version.

        Args:
            text: Version text, optionally prefixed with 'v' (e.g., 'v1.2.3-rc.1+build.5').

        Returns:
            The parsed SemVerVersion.

        Raises:
            InvalidVersionFormat: If text is empty or does not match the full grammar.

        Examples:
            >>> SemVerVersion.parse("v1.2.3")
            SemVerVersion(major=1, minor=2, patch=3, prerelease='', buildmetadata='')
            >>> SemVerVersion.parse("1.2.3-alpha.1+001").full_release_name()
            '1.2.3-alpha.1+001'
        """
        if not text:
            raise InvalidVersionFormat(text)

        match = VERSION_PATTERN.fullmatch(text)
        if match is None:
            logger.debug("Rejected version text '%s'", text)
            raise InvalidVersionFormat(text)

        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            prerelease=match.group("prerelease") or "",
            buildmetadata=match.group("buildmetadata") or "",
        )

    def full_release_name(self) -> str:
        """Return the canonical rendering, the inverse of parse() without the 'v'.

        Examples:
            >>> SemVerVersion(1, 4, 0).full_release_name()
            '1.4.0'
            >>> SemVerVersion(1, 4, 0, "rc.1", "sha.5114f85").full_release_name()
            '1.4.0-rc.1+sha.5114f85'
        """
        name = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            name += f"-{self.prerelease}"
        if self.buildmetadata:
            name += f"+{self.buildmetadata}"
        return name

    def __str__(self) -> str:
        return self.full_release_name()

    def next_patch(self) -> SemVerVersion:
        return SemVerVersion(self.major, self.minor, self.patch + 1)

    def next_minor(self) -> SemVerVersion:
        return SemVerVersion(self.major, self.minor + 1, 0)

    def next_major(self) -> SemVerVersion:
        return SemVerVersion(self.major + 1, 0, 0)

    def target_release_branch_name(self) -> BranchName:
        """Return the maintenance branch for this version's major.minor line.

        Examples:
            >>> SemVerVersion.parse("1.4.2").target_release_branch_name().name
            '1.4.x'
        """
        return BranchName.from_name(f"{self.major}.{self.minor}.x")

    def is_new_minor_release(self) -> bool:
        """True for X.Y.0 without prerelease or build metadata."""
        return self.patch == 0 and not self.prerelease and not self.buildmetadata

    def is_new_major_release(self) -> bool:
        """True for X.0.0 without prerelease or build metadata."""
        return self.minor == 0 and self.patch == 0 and not self.prerelease and not self.buildmetadata

    def less_than_equal(self, other: SemVerVersion) -> bool:
        """Compare rendered release names as plain strings.

        This is a lexicographic comparison, not SemVer precedence: '1.10.0'
        sorts before '1.9.0'. Release ordering decisions depend on it, so it
        must not be changed to numeric precedence without review.

        Examples:
            >>> SemVerVersion.parse("1.2.0").less_than_equal(SemVerVersion.parse("1.3.0"))
            True
            >>> SemVerVersion.parse("1.10.0").less_than_equal(SemVerVersion.parse("1.9.0"))
            True
        """
        return self.full_release_name() <= other.full_release_name()
