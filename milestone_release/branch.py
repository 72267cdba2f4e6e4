# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Release branch naming and validation.

Release branches are long-lived maintenance branches named after a
major.minor line (e.g., '1.4.x'). Every patch release of that line targets
the same branch.

References:
    - Semantic Versioning 2.0.0: https://semver.org/
    - git-check-ref-format: https://git-scm.com/docs/git-check-ref-format
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from milestone_release.errors import InvalidBranchName

if TYPE_CHECKING:
    from milestone_release.version import SemVerVersion

logger = logging.getLogger(__name__)

# SemVer 2.0.0 compliant: no leading zeros. Accepts 1.4, v1.4, 1.4.x and v1.4.x
RELEASE_BRANCH_PATTERN = re.compile(r"^v?(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)(?:\.x)?$")

# Sequences invalid in git refs (branch names and tags)
# See: https://git-scm.com/docs/git-check-ref-format
INVALID_REF_SEQUENCES = ["..", "~", "^", ":", "\\", " ", "\t", "\n", "*", "?", "["]

REMOTE_PREFIX = "origin/"


def validate_ref_name(name: str) -> bool:
    """Validate that a name is usable as a git branch name.

    Args:
        name: The branch name to validate.

    Returns:
        True if the name is non-empty and free of invalid ref sequences.

    Examples:
        >>> validate_ref_name("1.4.x")
        True
        >>> validate_ref_name("")
        False
        >>> validate_ref_name("bad..name")
        False
    """
    if not name:
        logger.warning("Empty branch name provided")
        return False

    for sequence in INVALID_REF_SEQUENCES:
        if sequence in name:
            logger.warning("Branch name '%s' contains invalid sequence %s", name, repr(sequence))
            return False

    return True


@dataclass(frozen=True)
class BranchName:
    """A validated git branch name."""

    name: str

    @classmethod
    def from_name(cls, name: str) -> BranchName:
        """Create a BranchName after validating it as a git ref.

        Raises:
            InvalidBranchName: If the name is empty or contains invalid ref sequences.
        """
        if not validate_ref_name(name):
            raise InvalidBranchName(f"'{name}' is not a valid branch name")
        return cls(name)

    def __str__(self) -> str:
        return self.name

    def is_release_branch(self) -> bool:
        """Check whether this branch names a major.minor maintenance line.

        Examples:
            >>> BranchName.from_name("1.4.x").is_release_branch()
            True
            >>> BranchName.from_name("v2.0").is_release_branch()
            True
            >>> BranchName.from_name("main").is_release_branch()
            False
        """
        return RELEASE_BRANCH_PATTERN.match(self.name) is not None

    def major_and_minor(self) -> tuple[int, int]:
        """Extract (major, minor) from a release branch name.

        Raises:
            InvalidBranchName: If this is not a release branch.
        """
        match = RELEASE_BRANCH_PATTERN.match(self.name)
        if match is None:
            raise InvalidBranchName(f"'{self.name}' is not a release branch")
        return int(match.group(1)), int(match.group(2))

    def target_minor_release_version(self) -> SemVerVersion:
        """Return the X.Y.0 version that opens this release branch."""
        from milestone_release.version import SemVerVersion

        major, minor = self.major_and_minor()
        return SemVerVersion(major, minor, 0)


def release_branch_name(version: SemVerVersion) -> BranchName:
    """Map a version to its release branch name.

    Args:
        version: The version being released.

    Returns:
        BranchName of the form '{major}.{minor}.x'.
    """
    return version.target_release_branch_name()


class ReleaseBranches:
    """Set of release branches known in a working copy.

    Non-release branches (main, feature branches, origin/HEAD) are dropped on
    construction.
    """

    def __init__(self, branches: Iterable[BranchName]) -> None:
        self._branches = tuple(sorted(set(branches), key=lambda b: b.major_and_minor()))

    @classmethod
    def from_names(cls, names: Iterable[str]) -> ReleaseBranches:
        """Build the set from raw branch names, with or without the 'origin/' prefix."""
        branches = []
        for raw in names:
            name = raw.strip()
            if name.startswith(REMOTE_PREFIX):
                name = name[len(REMOTE_PREFIX) :]
            if not validate_ref_name(name):
                continue
            branch = BranchName(name)
            if branch.is_release_branch():
                branches.append(branch)
        return cls(branches)

    def __iter__(self) -> Iterator[BranchName]:
        return iter(self._branches)

    def __len__(self) -> int:
        return len(self._branches)

    def contains(self, branch: BranchName) -> bool:
        return branch in self._branches
