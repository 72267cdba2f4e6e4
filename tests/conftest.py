"""Shared pytest fixtures for the test suite."""

import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest


def git(cwd: Path, *args: str) -> str:
    """Run a git command in cwd and return its stripped stdout, failing the test on error."""
    proc = subprocess.run(["git", *args], cwd=str(cwd), capture_output=True, text=True, check=True)
    return proc.stdout.strip()


def make_issue(
    number: int,
    title: str,
    author: str = "octocat",
    labels: tuple[str, ...] = (),
    pull_request: bool = False,
) -> MagicMock:
    """Create a mock PyGithub issue (or pull request) object.

    Args:
        number: Issue number.
        title: Issue title.
        author: Login of the issue author.
        labels: Label names attached to the issue.
        pull_request: Whether the issue is a pull request.
    """
    issue = MagicMock()
    issue.number = number
    issue.title = title
    issue.html_url = f"https://github.com/owner/repo/issues/{number}"
    issue.user.login = author
    issue.pull_request = MagicMock() if pull_request else None
    label_mocks = []
    for name in labels:
        label = MagicMock()
        label.name = name
        label_mocks.append(label)
    issue.labels = label_mocks
    return issue


@pytest.fixture
def issue_factory() -> Callable[..., MagicMock]:
    """Expose make_issue to tests as a fixture."""
    return make_issue


@pytest.fixture
def mock_github_api() -> MagicMock:
    """Create a mock GitHubAPI instance for unit tests."""
    mock_api = MagicMock()
    mock_api.tag_exists.return_value = False
    mock_api.list_milestone_issues.return_value = []
    mock_api.create_branch.return_value = "abc123def456"
    mock_api.create_release.return_value = MagicMock()
    return mock_api


@pytest.fixture
def git_repositories(tmp_path: Path) -> dict[str, Path]:
    """Create a source repository and a destination clone lagging behind it.

    The source has branches 'initial-branch' and 'new-branch'. The destination
    was cloned before 'new-branch' existed and its origin points elsewhere.
    """
    if shutil.which("git") is None:
        pytest.skip("git executable not available")

    source = tmp_path / "source"
    destination = tmp_path / "destination"
    source.mkdir()

    git(source, "init")
    git(source, "config", "user.email", "me@example.com")
    git(source, "config", "user.name", "Just Me")
    git(source, "commit", "--allow-empty", "-m", "a commit")
    git(source, "checkout", "-b", "initial-branch")
    git(tmp_path, "clone", str(source), str(destination))
    git(source, "checkout", "-b", "new-branch")
    git(source, "commit", "--allow-empty", "-m", "another commit")
    git(source, "tag", "1.0.0")

    git(destination, "remote", "set-url", "origin", "https://github.com/owner/repo.git")

    return {"source": source, "destination": destination}


@pytest.fixture
def milestone_payload() -> dict:
    """Sample milestone webhook payload."""
    return {
        "action": "closed",
        "milestone": {
            "number": 3,
            "title": "1.4.0",
            "html_url": "https://github.com/owner/repo/milestone/3",
        },
        "repository": {"full_name": "owner/repo"},
    }


@pytest.fixture
def run_git() -> Callable[..., str]:
    """Expose the git helper to tests as a fixture."""
    return git
