# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Release planning from a closed milestone.

The planner turns a milestone title into a decision record. It never
touches the repository: branch creation, tagging and publishing are left to
the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from milestone_release.branch import BranchName, ReleaseBranches
from milestone_release.version import SemVerVersion

logger = logging.getLogger(__name__)

RELEASE_TYPE_MAJOR = "major"
RELEASE_TYPE_MINOR = "minor"
RELEASE_TYPE_PATCH = "patch"


@dataclass(frozen=True)
class ReleasePlan:
    """Decision record for one release run."""

    version: SemVerVersion
    release_type: str
    target_branch: BranchName
    branch_exists: bool

    @property
    def tag_name(self) -> str:
        return self.version.full_release_name()

    @property
    def create_branch(self) -> bool:
        """True if the target branch must be created before tagging."""
        return not self.branch_exists


def classify_release(version: SemVerVersion) -> str:
    """Classify a version as a major, minor or patch release.

    Versions carrying prerelease or build metadata never open a new line,
    so they classify as patch releases.

    Examples:
        >>> classify_release(SemVerVersion.parse("2.0.0"))
        'major'
        >>> classify_release(SemVerVersion.parse("2.1.0"))
        'minor'
        >>> classify_release(SemVerVersion.parse("2.0.0-rc1"))
        'patch'
    """
    if version.is_new_major_release():
        return RELEASE_TYPE_MAJOR
    if version.is_new_minor_release():
        return RELEASE_TYPE_MINOR
    return RELEASE_TYPE_PATCH


class ReleasePlanner:
    """Plan a release from a milestone title and the branches present in the working copy."""

    def plan(self, milestone_title: str, existing_branches: Iterable[str]) -> ReleasePlan:
        """Compute the release plan.

        Args:
            milestone_title: Title of the closed milestone (e.g., '1.4.0' or 'v1.4.0').
            existing_branches: Branch names in the working copy, with or without 'origin/'.

        Returns:
            ReleasePlan with the version, release type and target branch.

        Raises:
            InvalidVersionFormat: If the milestone title is not a semantic version.
        """
        version = SemVerVersion.parse(milestone_title)
        release_type = classify_release(version)
        target_branch = version.target_release_branch_name()
        branch_exists = ReleaseBranches.from_names(existing_branches).contains(target_branch)

        logger.info(
            "Milestone '%s' is a %s release targeting '%s' (%s)",
            milestone_title,
            release_type,
            target_branch,
            "existing branch" if branch_exists else "branch must be created",
        )

        return ReleasePlan(
            version=version,
            release_type=release_type,
            target_branch=target_branch,
            branch_exists=branch_exists,
        )
