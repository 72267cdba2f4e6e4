# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Main entry point for the Milestone Release Action.

This module reads the milestone event, fetches the repository with an
authenticated remote, plans the release and publishes it on GitHub.

References:
    - GitHub Actions Environment Variables:
      https://docs.github.com/en/actions/writing-workflows/choosing-what-your-workflow-does/store-information-in-variables#default-environment-variables
    - GitHub Actions Outputs:
      https://docs.github.com/en/actions/writing-workflows/choosing-what-your-workflow-does/passing-information-between-jobs#setting-an-output-parameter
    - Milestone webhook payload:
      https://docs.github.com/en/webhooks/webhook-events-and-payloads#milestone
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from github.GithubException import GithubException

from milestone_release.changelog import ChangelogEntry, build_changelog
from milestone_release.errors import ReleaseError
from milestone_release.git import DEFAULT_FETCH_TIMEOUT_SECONDS, AuthenticatedRemoteFetcher
from milestone_release.github_api import GitHubAPI
from milestone_release.planner import ReleasePlanner
from milestone_release.repository import RepositoryName

logger = logging.getLogger(__name__)


@dataclass
class ActionInputs:
    """Parsed action inputs from CLI arguments or environment variables."""

    token: str
    debug: bool
    dry_run: bool
    git_author_name: str = ""
    git_author_email: str = ""
    expected_owner: str = ""
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT_SECONDS


@dataclass
class GitHubContext:
    """GitHub event context from environment variables."""

    event_name: str
    event_path: str
    workspace: str
    repository: str


@dataclass
class MilestoneEvent:
    """The parts of a milestone webhook payload the release needs."""

    action: str
    milestone_number: int
    milestone_title: str
    repository: str
    milestone_url: str = ""


@dataclass
class ActionOutputs:
    """Action outputs to be written to GITHUB_OUTPUT."""

    tag: str = ""
    branch: str = ""
    release_type: str = "skipped"
    created_branch: bool = False


def parse_inputs(args: list[str] | None = None) -> ActionInputs:
    """Parse action inputs from CLI arguments or environment variables.

    CLI arguments take precedence over environment variables.

    Args:
        args: Optional list of CLI arguments. If None, uses environment
              variables only (GitHub Actions mode).

    Returns:
        ActionInputs with parsed values.
    """
    parser = argparse.ArgumentParser(
        description="Milestone Release Action - Release a closed milestone as a SemVer tag",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables (used as defaults when CLI args not provided):
  INPUT_TOKEN, GITHUB_TOKEN                       GitHub token for authentication
  INPUT_DEBUG                                     Enable debug logging (true/false)
  INPUT_DRY_RUN                                   Don't create branches or releases (true/false)
  INPUT_GIT_AUTHOR_NAME, GIT_AUTHOR_NAME          Commit author name for the workspace
  INPUT_GIT_AUTHOR_EMAIL, GIT_AUTHOR_EMAIL        Commit author email for the workspace
  INPUT_EXPECTED_OWNER, GITHUB_REPOSITORY_OWNER   Refuse to release repositories of other owners
  INPUT_FETCH_TIMEOUT                             Seconds allowed for git fetch (default: 300)

Examples:
  # Run with environment variables (GitHub Actions mode)
  python -m milestone_release.main

  # Run with CLI arguments (local testing)
  python -m milestone_release.main --token ghp_xxx --dry-run --debug
        """,
    )

    parser.add_argument(
        "--token",
        default=os.environ.get("INPUT_TOKEN", os.environ.get("GITHUB_TOKEN", "")),
        help="GitHub token for authentication (default: from INPUT_TOKEN or GITHUB_TOKEN env)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=os.environ.get("INPUT_DEBUG", "false").lower() == "true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=os.environ.get("INPUT_DRY_RUN", "false").lower() == "true",
        help="Dry-run mode - fetch and plan, but don't create branches or releases",
    )
    parser.add_argument(
        "--git-author-name",
        default=os.environ.get("INPUT_GIT_AUTHOR_NAME", os.environ.get("GIT_AUTHOR_NAME", "")),
        help="Commit author name configured in the workspace",
    )
    parser.add_argument(
        "--git-author-email",
        default=os.environ.get("INPUT_GIT_AUTHOR_EMAIL", os.environ.get("GIT_AUTHOR_EMAIL", "")),
        help="Commit author email configured in the workspace",
    )
    parser.add_argument(
        "--expected-owner",
        default=os.environ.get("INPUT_EXPECTED_OWNER", os.environ.get("GITHUB_REPOSITORY_OWNER", "")),
        help="Only release repositories owned by this account (case-sensitive)",
    )
    parser.add_argument(
        "--fetch-timeout",
        type=float,
        default=os.environ.get("INPUT_FETCH_TIMEOUT", str(DEFAULT_FETCH_TIMEOUT_SECONDS)),
        help="Seconds allowed for fetching the repository (default: 300)",
    )

    # Use empty list for GitHub Actions mode (env vars only), or provided args for CLI
    parsed = parser.parse_args(args if args is not None else [])

    if parsed.fetch_timeout <= 0:
        logger.error("Invalid fetch-timeout '%s': must be a positive number of seconds", parsed.fetch_timeout)
        sys.exit(1)

    return ActionInputs(
        token=parsed.token,
        debug=parsed.debug,
        dry_run=parsed.dry_run,
        git_author_name=parsed.git_author_name,
        git_author_email=parsed.git_author_email,
        expected_owner=parsed.expected_owner,
        fetch_timeout=parsed.fetch_timeout,
    )


def parse_context() -> GitHubContext:
    """Parse GitHub context from environment variables."""
    return GitHubContext(
        event_name=os.environ.get("GITHUB_EVENT_NAME", ""),
        event_path=os.environ.get("GITHUB_EVENT_PATH", ""),
        workspace=os.environ.get("GITHUB_WORKSPACE", "."),
        repository=os.environ.get("GITHUB_REPOSITORY", ""),
    )


def load_milestone_event(path: str) -> MilestoneEvent:
    """Load the milestone webhook payload written by the runner.

    Args:
        path: Path to the JSON payload (GITHUB_EVENT_PATH).

    Returns:
        MilestoneEvent with the fields the release needs.

    Raises:
        ValueError: If the payload is not a milestone event.
    """
    with open(path) as f:
        payload = json.load(f)

    milestone = payload.get("milestone")
    repository = payload.get("repository")
    if not isinstance(milestone, dict) or not isinstance(repository, dict):
        raise ValueError(f"Event payload at '{path}' is not a milestone event")

    return MilestoneEvent(
        action=payload.get("action", ""),
        milestone_number=int(milestone["number"]),
        milestone_title=milestone["title"],
        repository=repository["full_name"],
        milestone_url=milestone.get("html_url", ""),
    )


def set_outputs(outputs: ActionOutputs) -> None:
    """Write action outputs to GITHUB_OUTPUT file.

    Args:
        outputs: ActionOutputs to write.
    """
    output_file = os.environ.get("GITHUB_OUTPUT", "")
    if not output_file:
        logger.warning("GITHUB_OUTPUT not set, outputs will not be written")
        return

    with open(output_file, "a") as f:
        f.write(f"tag={outputs.tag}\n")
        f.write(f"branch={outputs.branch}\n")
        f.write(f"release-type={outputs.release_type}\n")
        f.write(f"created-branch={str(outputs.created_branch).lower()}\n")

    logger.info("Set outputs: tag=%s, branch=%s, release-type=%s", outputs.tag, outputs.branch, outputs.release_type)


def configure_logging(debug: bool) -> None:
    """Configure logging based on debug flag.

    Args:
        debug: If True, enable DEBUG level logging.
    """
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def run_release(
    api: GitHubAPI,
    fetcher: AuthenticatedRemoteFetcher,
    planner: ReleasePlanner,
    event: MilestoneEvent,
    inputs: ActionInputs,
    workspace: Path,
) -> ActionOutputs:
    """Release a closed milestone.

    Fetches all refs into the workspace, plans the release, creates the
    release branch if needed and publishes the release with its changelog.

    Args:
        api: GitHubAPI instance.
        fetcher: Fetcher used to update the workspace.
        planner: Planner deciding version and target branch.
        event: The closed milestone event.
        inputs: Action inputs.
        workspace: Path to the repository working copy.

    Returns:
        ActionOutputs describing the release.

    Raises:
        ReleaseError: On invalid input, owner mismatch or fetch failure.
        GithubException: If a GitHub API call fails.
    """
    outputs = ActionOutputs()

    repository = RepositoryName.from_full_name(event.repository)
    if inputs.expected_owner:
        repository.assert_matches_owner(inputs.expected_owner)

    outcome = fetcher(repository.uri_with_token_authentication(inputs.token), workspace)
    logger.debug("Fetched %d branches and %d tags", len(outcome.remote_branches), len(outcome.tags))

    plan = planner.plan(event.milestone_title, outcome.remote_branches)
    outputs.tag = plan.tag_name
    outputs.branch = plan.target_branch.name

    if plan.tag_name in outcome.tags or api.tag_exists(plan.tag_name):
        logger.info("Tag '%s' already exists, skipping release", plan.tag_name)
        return outputs

    outputs.release_type = plan.release_type

    if plan.create_branch:
        if inputs.dry_run:
            logger.info("[DRY-RUN] Would create branch '%s' from the default branch", plan.target_branch)
        else:
            api.create_branch(plan.target_branch.name)
        outputs.created_branch = True

    entries = [ChangelogEntry.from_issue(issue) for issue in api.list_milestone_issues(event.milestone_number)]
    changelog = build_changelog(plan.version, entries, event.milestone_url)

    if inputs.dry_run:
        logger.info("[DRY-RUN] Would create release '%s' on '%s'", plan.tag_name, plan.target_branch)
        logger.debug("[DRY-RUN] Release notes:\n%s", changelog)
    else:
        api.create_release(
            plan.tag_name,
            plan.target_branch.name,
            changelog,
            prerelease=bool(plan.version.prerelease),
        )
        logger.info("Created release '%s' on '%s'", plan.tag_name, plan.target_branch)

    return outputs


def main(args: list[str] | None = None) -> None:
    """Main entry point for the action."""
    inputs = parse_inputs(args)
    configure_logging(inputs.debug)

    context = parse_context()
    logger.debug("Event: %s, Repository: %s", context.event_name, context.repository)

    if not inputs.token:
        logger.error("GitHub token is required. Set INPUT_TOKEN or GITHUB_TOKEN.")
        sys.exit(1)

    if not inputs.git_author_name or not inputs.git_author_email:
        logger.error("Git author name and email are required. Set GIT_AUTHOR_NAME and GIT_AUTHOR_EMAIL.")
        sys.exit(1)

    if context.event_name != "milestone":
        logger.warning("Unhandled event: %s. Skipping.", context.event_name)
        set_outputs(ActionOutputs())
        return

    try:
        event = load_milestone_event(context.event_path)
    except (OSError, ValueError, KeyError) as e:
        logger.error("Failed to read event payload: %s", e)
        sys.exit(1)

    if event.action != "closed":
        logger.info("Milestone '%s' was %s, not closed. Skipping.", event.milestone_title, event.action)
        set_outputs(ActionOutputs())
        return

    try:
        api = GitHubAPI(token=inputs.token, repository=event.repository)
    except (ValueError, GithubException) as e:
        logger.error("Failed to initialize GitHub API: %s", e)
        sys.exit(1)

    fetcher = AuthenticatedRemoteFetcher(
        inputs.git_author_name,
        inputs.git_author_email,
        timeout=inputs.fetch_timeout,
    )

    try:
        outputs = run_release(api, fetcher, ReleasePlanner(), event, inputs, Path(context.workspace))
    except (ReleaseError, GithubException) as e:
        logger.error("Release of milestone '%s' failed: %s", event.milestone_title, e)
        sys.exit(1)

    set_outputs(outputs)


if __name__ == "__main__":  # pragma: no cover
    main(sys.argv[1:])
