# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Unit tests for release planning from milestone titles."""

from __future__ import annotations

import pytest

from milestone_release.branch import BranchName
from milestone_release.errors import InvalidVersionFormat
from milestone_release.planner import ReleasePlanner, classify_release
from milestone_release.version import SemVerVersion


class TestClassifyRelease:
    """Tests for classify_release()."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("2.0.0", "major"),
            ("0.0.0", "major"),
            ("2.1.0", "minor"),
            ("2.1.3", "patch"),
            ("2.0.0-rc.1", "patch"),
            ("2.1.0+build.1", "patch"),
        ],
    )
    def test_classification(self, text: str, expected: str) -> None:
        assert classify_release(SemVerVersion.parse(text)) == expected


class TestReleasePlanner:
    """Tests for ReleasePlanner.plan()."""

    def test_patch_release_on_existing_branch(self) -> None:
        plan = ReleasePlanner().plan("1.4.2", ["main", "1.3.x", "1.4.x"])

        assert plan.version == SemVerVersion(1, 4, 2)
        assert plan.release_type == "patch"
        assert plan.target_branch == BranchName("1.4.x")
        assert plan.branch_exists is True
        assert plan.create_branch is False
        assert plan.tag_name == "1.4.2"

    def test_new_minor_release_needs_branch(self) -> None:
        plan = ReleasePlanner().plan("1.5.0", ["main", "1.4.x"])

        assert plan.release_type == "minor"
        assert plan.target_branch == BranchName("1.5.x")
        assert plan.create_branch is True

    def test_new_major_release(self) -> None:
        plan = ReleasePlanner().plan("v2.0.0", ["main"])

        assert plan.release_type == "major"
        assert plan.target_branch.name == "2.0.x"
        assert plan.tag_name == "2.0.0"

    def test_remote_prefixed_branch_names(self) -> None:
        """Branch names as listed by 'git branch -r' are recognised."""
        plan = ReleasePlanner().plan("1.4.1", ["origin/main", "origin/1.4.x"])

        assert plan.branch_exists is True

    def test_no_branches(self) -> None:
        plan = ReleasePlanner().plan("0.1.0", [])

        assert plan.create_branch is True

    def test_prerelease_keeps_suffix_in_tag(self) -> None:
        plan = ReleasePlanner().plan("3.0.0-rc.1", ["3.0.x"])

        assert plan.tag_name == "3.0.0-rc.1"
        assert plan.release_type == "patch"
        assert plan.branch_exists is True

    @pytest.mark.parametrize("title", ["", "Next release", "1.4", "01.4.0", "1.4.0.1"])
    def test_invalid_milestone_title(self, title: str) -> None:
        with pytest.raises(InvalidVersionFormat):
            ReleasePlanner().plan(title, ["1.4.x"])
