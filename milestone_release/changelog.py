# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Changelog rendering for a milestone release.

Entries are plain records so the renderer does not depend on the shape of
PyGithub objects; ChangelogEntry.from_issue() does the conversion.

References:
    - List repository issues: https://docs.github.com/en/rest/issues/issues#list-repository-issues
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from github.Issue import Issue

    from milestone_release.version import SemVerVersion

logger = logging.getLogger(__name__)

UNLABELLED_SECTION = "Other"


@dataclass(frozen=True)
class ChangelogEntry:
    """One closed issue or pull request of the milestone."""

    number: int
    title: str
    url: str
    author: str
    is_pull_request: bool = False
    labels: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_issue(cls, issue: Issue) -> ChangelogEntry:
        """Convert a PyGithub Issue (which also represents pull requests)."""
        return cls(
            number=issue.number,
            title=issue.title,
            url=issue.html_url,
            author=issue.user.login if issue.user is not None else "ghost",
            is_pull_request=issue.pull_request is not None,
            labels=tuple(label.name for label in issue.labels),
        )

    def section(self) -> str:
        return self.labels[0] if self.labels else UNLABELLED_SECTION

    def render(self) -> str:
        return f"- [#{self.number}: {self.title}]({self.url}) thanks to @{self.author}"


def build_changelog(version: SemVerVersion, entries: Iterable[ChangelogEntry], milestone_url: str = "") -> str:
    """Render the release notes for a milestone.

    Args:
        version: The version being released.
        entries: Closed issues and pull requests of the milestone.
        milestone_url: Optional link to the milestone page.

    Returns:
        Markdown release notes.

    Examples:
        >>> print(build_changelog(SemVerVersion.parse("1.4.0"), []))
        ### Release Notes for 1.4.0
        <BLANKLINE>
        No issues or pull requests were resolved in this milestone.
    """
    entries = sorted(entries, key=lambda e: e.number)
    name = version.full_release_name()
    heading = f"### Release Notes for [{name}]({milestone_url})" if milestone_url else f"### Release Notes for {name}"

    if not entries:
        return f"{heading}\n\nNo issues or pull requests were resolved in this milestone."

    issues = [e for e in entries if not e.is_pull_request]
    pull_requests = [e for e in entries if e.is_pull_request]
    contributors = {e.author for e in entries}

    lines = [
        heading,
        "",
        f"- Total issues resolved: **{len(issues)}**",
        f"- Total pull requests resolved: **{len(pull_requests)}**",
        f"- Total contributors: **{len(contributors)}**",
    ]

    sections: dict[str, list[ChangelogEntry]] = {}
    for entry in entries:
        sections.setdefault(entry.section(), []).append(entry)

    # Labelled sections alphabetically, unlabelled entries last
    ordered = sorted(s for s in sections if s != UNLABELLED_SECTION)
    if UNLABELLED_SECTION in sections:
        ordered.append(UNLABELLED_SECTION)

    for section in ordered:
        lines.extend(["", f"#### {section}", ""])
        lines.extend(entry.render() for entry in sections[section])

    logger.debug("Rendered changelog with %d entries in %d sections", len(entries), len(ordered))
    return "\n".join(lines)
