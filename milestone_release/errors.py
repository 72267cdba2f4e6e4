# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Typed errors raised by the release workflow.

Every failure a caller may want to map to an exit status is a subclass of
ReleaseError, so the entry point can report it without inspecting process
return codes.
"""

from __future__ import annotations


class ReleaseError(Exception):
    """Base class for all release workflow errors."""


class InvalidVersionFormat(ReleaseError, ValueError):
    """Milestone or tag text does not match the SemVer 2.0.0 grammar."""

    def __init__(self, text: str) -> None:
        super().__init__(f"'{text}' is not a valid semantic version")
        self.text = text


class InvalidBranchName(ReleaseError, ValueError):
    """Branch name is empty, contains invalid ref characters, or is not a release branch."""


class InvalidRepositoryIdentifier(ReleaseError, ValueError):
    """Repository identifier is not of the form 'owner/name'."""


class OwnerMismatch(ReleaseError):
    """Repository owner does not match the expected owner."""

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(f"Repository owner '{actual}' does not match expected owner '{expected}'")
        self.expected = expected
        self.actual = actual


class NotAGitWorkingCopy(ReleaseError):
    """Destination path is missing or is not a git working copy."""

    def __init__(self, path: str) -> None:
        super().__init__(f"'{path}' is not a git working copy")
        self.path = path


class RemoteFetchFailed(ReleaseError):
    """Fetching from the authenticated remote failed or timed out.

    The stderr attribute has any embedded credentials redacted.
    """

    def __init__(self, message: str, stderr: str = "") -> None:
        super().__init__(message)
        self.stderr = stderr


class RemoteRestoreFailed(ReleaseError):
    """The original origin remote could not be restored.

    When the restore was attempted after a failed fetch, the fetch error is
    kept in fetch_error (and as __cause__) rather than being replaced.
    """

    def __init__(self, message: str, fetch_error: BaseException | None = None) -> None:
        super().__init__(message)
        self.fetch_error = fetch_error


class GitCommandFailed(ReleaseError):
    """A local git operation on the working copy failed or timed out."""
