# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Milestone Release Action - Core modules."""

from milestone_release.branch import BranchName, release_branch_name
from milestone_release.git import AuthenticatedRemoteFetcher, RemoteFetchOutcome
from milestone_release.planner import ReleasePlan, ReleasePlanner
from milestone_release.repository import RepositoryName
from milestone_release.version import SemVerVersion

__all__ = [
    "AuthenticatedRemoteFetcher",
    "BranchName",
    "ReleasePlan",
    "ReleasePlanner",
    "RemoteFetchOutcome",
    "RepositoryName",
    "SemVerVersion",
    "release_branch_name",
]
