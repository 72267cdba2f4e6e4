# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Fetch all refs through a temporarily authenticated origin remote.

The workspace clone made by actions/checkout has an origin pointing at the
canonical, unauthenticated repository URL and usually only one branch. To
plan a release we need every branch and tag, which for private repositories
requires the token. The token-bearing URI is swapped in as origin only for
the duration of the fetch and the original URL is always put back, so the
credential never stays in .git/config.

References:
    - git remote: https://git-scm.com/docs/git-remote
    - git fetch: https://git-scm.com/docs/git-fetch
    - git config: https://git-scm.com/docs/git-config
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from milestone_release.errors import (
    GitCommandFailed,
    NotAGitWorkingCopy,
    RemoteFetchFailed,
    RemoteRestoreFailed,
)
from milestone_release.process import CommandFailed, CommandResult, CommandTimedOut, run
from milestone_release.repository import AuthenticatedUri, redact_credentials

logger = logging.getLogger(__name__)

DEFAULT_FETCH_TIMEOUT_SECONDS = 300.0
_LOCAL_GIT_TIMEOUT_SECONDS = 30.0

ORIGIN = "origin"


@dataclass(frozen=True)
class RemoteFetchOutcome:
    """What a successful fetch left in the working copy."""

    remote_branches: tuple[str, ...]
    tags: tuple[str, ...]
    previous_author_name: str | None = None
    previous_author_email: str | None = None


def _git(
    working_copy: Path,
    *args: str,
    timeout: float = _LOCAL_GIT_TIMEOUT_SECONDS,
    check: bool = True,
) -> CommandResult:
    return run(["git", *args], cwd=working_copy, timeout=timeout, check=check)


def _optional_output(working_copy: Path, *args: str) -> str | None:
    """Return stripped stdout, or None when git exits non-zero (unset key, missing remote)."""
    result = _git(working_copy, *args, check=False)
    if result.returncode != 0:
        return None
    return result.stdout.strip()


def ensure_working_copy(working_copy: Path) -> None:
    """Raise NotAGitWorkingCopy unless the path is the top level of a git working copy.

    A subdirectory of some enclosing working copy is rejected too, so that
    the enclosing repository's remotes and config are never touched.
    """
    if not working_copy.is_dir():
        raise NotAGitWorkingCopy(str(working_copy))
    try:
        result = _git(working_copy, "rev-parse", "--show-toplevel")
    except CommandFailed as e:
        raise NotAGitWorkingCopy(str(working_copy)) from e
    toplevel = result.stdout.strip()
    if not toplevel or Path(toplevel).resolve() != working_copy.resolve():
        logger.debug("'%s' is inside the working copy at '%s'", working_copy, toplevel)
        raise NotAGitWorkingCopy(str(working_copy))


def list_remote_branches(working_copy: Path) -> tuple[str, ...]:
    """List branches fetched from origin, without the 'origin/' prefix.

    Examples:
        >>> list_remote_branches(Path("."))  # doctest: +SKIP
        ('1.4.x', 'main')
    """
    result = _git(
        working_copy,
        "for-each-ref",
        "--format=%(refname:strip=3)",
        f"refs/remotes/{ORIGIN}/",
    )
    branches = [line.strip() for line in result.stdout.splitlines() if line.strip()]
    return tuple(b for b in branches if b != "HEAD")


def list_tags(working_copy: Path) -> tuple[str, ...]:
    result = _git(working_copy, "for-each-ref", "--format=%(refname:strip=2)", "refs/tags/")
    return tuple(line.strip() for line in result.stdout.splitlines() if line.strip())


class AuthenticatedRemoteFetcher:
    """Fetch every branch and tag through an authenticated origin, then set the commit author.

    Args:
        author_name: Value for the local user.name.
        author_email: Value for the local user.email.
        timeout: Maximum seconds the fetch may take before it counts as failed.

    Example:
        fetcher = AuthenticatedRemoteFetcher("Release Bot", "bot@example.com")
        uri = RepositoryName.from_full_name("foo/bar").uri_with_token_authentication(token)
        outcome = fetcher(uri, Path("/github/workspace"))
    """

    def __init__(
        self,
        author_name: str,
        author_email: str,
        timeout: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
    ) -> None:
        self._author_name = author_name
        self._author_email = author_email
        self._timeout = timeout

    def __call__(self, source_uri: AuthenticatedUri | str, working_copy: Path) -> RemoteFetchOutcome:
        """Run capture, replace, fetch, restore and identity configuration.

        Args:
            source_uri: URI to fetch from, already carrying any credentials.
            working_copy: Path to an existing git working copy.

        Returns:
            RemoteFetchOutcome describing the refs now present.

        Raises:
            NotAGitWorkingCopy: If working_copy is not a git working copy.
            RemoteFetchFailed: If the fetch exits non-zero or times out. Origin is restored first.
            RemoteRestoreFailed: If the original origin could not be put back.
            GitCommandFailed: If any other git step on the working copy fails.
        """
        working_copy = Path(working_copy)
        ensure_working_copy(working_copy)
        try:
            return self._fetch_and_configure(working_copy, str(source_uri))
        except CommandFailed as e:
            raise GitCommandFailed(str(e)) from e

    def _fetch_and_configure(self, working_copy: Path, source_uri: str) -> RemoteFetchOutcome:
        previous_name = _optional_output(working_copy, "config", "--local", "--get", "user.name")
        previous_email = _optional_output(working_copy, "config", "--local", "--get", "user.email")

        with self._replaced_origin(working_copy, source_uri):
            self._fetch(working_copy)
            remote_branches = list_remote_branches(working_copy)
            tags = list_tags(working_copy)

        _git(working_copy, "config", "user.name", self._author_name)
        _git(working_copy, "config", "user.email", self._author_email)
        logger.info("Configured commit author '%s <%s>'", self._author_name, self._author_email)

        return RemoteFetchOutcome(
            remote_branches=remote_branches,
            tags=tags,
            previous_author_name=previous_name,
            previous_author_email=previous_email,
        )

    @contextmanager
    def _replaced_origin(self, working_copy: Path, source_uri: str) -> Iterator[None]:
        """Point origin at source_uri for the duration of the block.

        The original origin is restored on every exit path. A restore failure
        is raised as RemoteRestoreFailed and chains, rather than hides, any
        error raised inside the block.
        """
        original_url = _optional_output(working_copy, "remote", "get-url", ORIGIN)
        logger.debug("Captured origin %s", redact_credentials(original_url or "<none>"))

        try:
            if original_url is not None:
                _git(working_copy, "remote", "remove", ORIGIN)
            _git(working_copy, "remote", "add", ORIGIN, source_uri)
            yield
        except BaseException as error:
            try:
                self._restore_origin(working_copy, original_url)
            except CommandFailed as restore_error:
                raise RemoteRestoreFailed(
                    f"Failed to restore origin remote after an error: {restore_error}",
                    fetch_error=error,
                ) from error
            raise
        else:
            try:
                self._restore_origin(working_copy, original_url)
            except CommandFailed as restore_error:
                raise RemoteRestoreFailed(f"Failed to restore origin remote: {restore_error}") from restore_error

    def _restore_origin(self, working_copy: Path, original_url: str | None) -> None:
        # set-url keeps the refs/remotes/origin/* just fetched; remove would delete them
        current_url = _optional_output(working_copy, "remote", "get-url", ORIGIN)
        if original_url is None:
            if current_url is not None:
                _git(working_copy, "remote", "remove", ORIGIN)
            logger.debug("Removed temporary origin remote")
            return

        if current_url is None:
            _git(working_copy, "remote", "add", ORIGIN, original_url)
        else:
            _git(working_copy, "remote", "set-url", ORIGIN, original_url)
        logger.debug("Restored origin remote to %s", redact_credentials(original_url))

    def _fetch(self, working_copy: Path) -> None:
        logger.info("Fetching all branches and tags into %s", working_copy)
        try:
            _git(working_copy, "fetch", "--all", "--tags", timeout=self._timeout)
        except CommandTimedOut as e:
            raise RemoteFetchFailed(f"git fetch timed out after {self._timeout}s", stderr=e.stderr) from e
        except CommandFailed as e:
            stderr = redact_credentials(e.stderr.strip())
            logger.error("git fetch failed (exit %d): %s", e.returncode, stderr)
            raise RemoteFetchFailed(f"git fetch failed (exit {e.returncode})", stderr=stderr) from e
