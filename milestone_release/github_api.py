# Copyright (c) 2026 Mark Ferrell. MIT License.
"""GitHub API wrapper for milestone, branch and release operations.

References:
    - GitHub REST API: https://docs.github.com/en/rest
    - PyGithub Documentation: https://pygithub.readthedocs.io/
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from github import Github
from github.GithubException import GithubException

if TYPE_CHECKING:
    from github.GitRelease import GitRelease
    from github.Issue import Issue
    from github.Milestone import Milestone

logger = logging.getLogger(__name__)


class GitHubAPI:
    """Wrapper around PyGithub for the release workflow.

    Handles authentication via token input, defaulting to GITHUB_TOKEN
    environment variable if not provided.

    References:
        - Authentication: https://docs.github.com/en/rest/authentication
        - GITHUB_TOKEN: https://docs.github.com/en/actions/security-for-github-actions/security-guides/automatic-token-authentication
    """

    def __init__(self, token: str | None = None, repository: str | None = None) -> None:
        """Initialize the GitHub API client.

        Args:
            token: GitHub token for authentication. Defaults to GITHUB_TOKEN env var.
            repository: Repository in 'owner/repo' format. Defaults to GITHUB_REPOSITORY env var.

        References:
            - Get a repository: https://docs.github.com/en/rest/repos/repos#get-a-repository
        """
        self._token = token or os.environ.get("GITHUB_TOKEN", "")
        self._repository = repository or os.environ.get("GITHUB_REPOSITORY", "")

        if not self._token:
            raise ValueError("GitHub token is required. Set GITHUB_TOKEN or pass token parameter.")
        if not self._repository:
            raise ValueError("Repository is required. Set GITHUB_REPOSITORY or pass repository parameter.")

        self._github = Github(self._token)
        self._repo = self._github.get_repo(self._repository)

    def get_milestone(self, number: int) -> Milestone:
        """Get a milestone by number.

        Raises:
            GithubException: If the milestone does not exist or access fails.

        References:
            - Get a milestone: https://docs.github.com/en/rest/issues/milestones#get-a-milestone
        """
        return self._repo.get_milestone(number)

    def list_milestone_issues(self, number: int) -> list[Issue]:
        """List closed issues and pull requests of a milestone.

        Args:
            number: Milestone number.

        Returns:
            List of Issue objects; pull requests have a non-None pull_request attribute.

        References:
            - List repository issues: https://docs.github.com/en/rest/issues/issues#list-repository-issues
        """
        milestone = self.get_milestone(number)
        return list(self._repo.get_issues(milestone=milestone, state="closed"))

    def tag_exists(self, tag_name: str) -> bool:
        """Check if a tag exists in the repository.

        Args:
            tag_name: Name of the tag to check.

        Returns:
            True if the tag exists, False otherwise.

        References:
            - Get a reference: https://docs.github.com/en/rest/git/refs#get-a-reference
        """
        try:
            self._repo.get_git_ref(f"tags/{tag_name}")
            return True
        except GithubException:
            return False

    def create_branch(self, branch_name: str, from_branch: str | None = None) -> str:
        """Create a branch at the head of another branch.

        Args:
            branch_name: Name of the branch to create (e.g., '1.4.x').
            from_branch: Branch to start from. Defaults to the repository's default branch.

        Returns:
            SHA of the commit the new branch points to.

        Raises:
            GithubException: If the source branch is missing or the branch already exists.

        References:
            - Get a branch: https://docs.github.com/en/rest/branches/branches#get-a-branch
            - Create a reference: https://docs.github.com/en/rest/git/refs#create-a-reference
        """
        source = from_branch or self._repo.default_branch
        sha = self._repo.get_branch(source).commit.sha
        self._repo.create_git_ref(ref=f"refs/heads/{branch_name}", sha=sha)
        logger.info("Created branch '%s' from '%s' at %s", branch_name, source, sha[:7])
        return sha

    def create_release(
        self,
        tag_name: str,
        target_branch: str,
        body: str,
        prerelease: bool = False,
    ) -> GitRelease:
        """Create a release, tagging the head of target_branch.

        Args:
            tag_name: Tag and release name (e.g., '1.4.0').
            target_branch: Branch whose head gets tagged.
            body: Release notes in Markdown.
            prerelease: Mark the release as a prerelease.

        Returns:
            The created GitRelease.

        Raises:
            GithubException: If release creation fails.

        References:
            - Create a release: https://docs.github.com/en/rest/releases/releases#create-a-release
        """
        return self._repo.create_git_release(
            tag=tag_name,
            name=tag_name,
            message=body,
            prerelease=prerelease,
            target_commitish=target_branch,
        )
