# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Unit tests for changelog rendering."""

from __future__ import annotations

from milestone_release.changelog import ChangelogEntry, build_changelog
from milestone_release.version import SemVerVersion


class TestChangelogEntry:
    """Tests for ChangelogEntry."""

    def test_from_issue(self, issue_factory) -> None:
        issue = issue_factory(12, "Fix crash", author="alice", labels=("Bug", "Help Wanted"))

        entry = ChangelogEntry.from_issue(issue)

        assert entry.number == 12
        assert entry.title == "Fix crash"
        assert entry.url == "https://github.com/owner/repo/issues/12"
        assert entry.author == "alice"
        assert entry.is_pull_request is False
        assert entry.labels == ("Bug", "Help Wanted")

    def test_from_pull_request(self, issue_factory) -> None:
        entry = ChangelogEntry.from_issue(issue_factory(13, "Add feature", pull_request=True))

        assert entry.is_pull_request is True

    def test_section(self) -> None:
        assert ChangelogEntry(1, "t", "u", "a", labels=("Enhancement",)).section() == "Enhancement"
        assert ChangelogEntry(1, "t", "u", "a").section() == "Other"

    def test_render(self) -> None:
        entry = ChangelogEntry(7, "Fix it", "https://example.com/7", "bob")

        assert entry.render() == "- [#7: Fix it](https://example.com/7) thanks to @bob"


class TestBuildChangelog:
    """Tests for build_changelog()."""

    def test_empty_milestone(self) -> None:
        changelog = build_changelog(SemVerVersion.parse("1.4.0"), [])

        assert changelog == (
            "### Release Notes for 1.4.0\n\nNo issues or pull requests were resolved in this milestone."
        )

    def test_heading_links_milestone(self) -> None:
        changelog = build_changelog(
            SemVerVersion.parse("1.4.0"),
            [],
            milestone_url="https://github.com/owner/repo/milestone/3",
        )

        assert changelog.startswith("### Release Notes for [1.4.0](https://github.com/owner/repo/milestone/3)")

    def test_totals(self) -> None:
        entries = [
            ChangelogEntry(1, "Issue one", "u1", "alice"),
            ChangelogEntry(2, "PR two", "u2", "bob", is_pull_request=True),
            ChangelogEntry(3, "PR three", "u3", "alice", is_pull_request=True),
        ]

        changelog = build_changelog(SemVerVersion.parse("1.4.0"), entries)

        assert "- Total issues resolved: **1**" in changelog
        assert "- Total pull requests resolved: **2**" in changelog
        assert "- Total contributors: **2**" in changelog

    def test_sections_grouped_by_first_label(self) -> None:
        entries = [
            ChangelogEntry(3, "Unlabelled", "u3", "carol"),
            ChangelogEntry(2, "New thing", "u2", "bob", labels=("Enhancement",)),
            ChangelogEntry(1, "Broken thing", "u1", "alice", labels=("Bug", "Enhancement")),
        ]

        changelog = build_changelog(SemVerVersion.parse("1.4.1"), entries)
        lines = changelog.splitlines()

        bug = lines.index("#### Bug")
        enhancement = lines.index("#### Enhancement")
        other = lines.index("#### Other")
        assert bug < enhancement < other
        assert lines[bug + 2] == "- [#1: Broken thing](u1) thanks to @alice"
        assert lines[enhancement + 2] == "- [#2: New thing](u2) thanks to @bob"
        assert lines[other + 2] == "- [#3: Unlabelled](u3) thanks to @carol"

    def test_entries_sorted_by_number_within_section(self) -> None:
        entries = [
            ChangelogEntry(9, "Later", "u9", "a", labels=("Bug",)),
            ChangelogEntry(4, "Earlier", "u4", "a", labels=("Bug",)),
        ]

        changelog = build_changelog(SemVerVersion.parse("1.0.1"), entries)

        assert changelog.index("#4: Earlier") < changelog.index("#9: Later")
