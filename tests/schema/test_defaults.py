"""Tests for the built-in schema, label formatters and icon resolvers.

Covers:
- DEFAULT_SCHEMA shape (parsed from DEFAULT_SCHEMA_DATA)
- created/updated epoch formatters, including unparseable values
- score_icon mapping and the score resolver's branch-aware lookup
- overallScore: building, failed, verified and minimum-score outcomes
"""

from __future__ import annotations

from typing import Any

import pytest

from json_schema_tree.paths.resolver import PropertyValue, resolve
from json_schema_tree.schema.defaults import (
    DEFAULT_SCHEMA,
    DEFAULT_SCHEMA_DATA,
    default_formatters,
    default_icon_resolvers,
    score_icon,
)
from json_schema_tree.schema.nodes import parse_schema


def _change(*approvals: tuple[str, Any]) -> dict[str, Any]:
    return {
        "currentPatchSet": {
            "approvals": [
                {"type": kind, "value": value, "by": {"name": f"user{i}"}}
                for i, (kind, value) in enumerate(approvals)
            ]
        }
    }


def _overall(record: dict[str, Any], threshold: int = 2) -> str | None:
    resolver = default_icon_resolvers(threshold)["overallScore"]
    return resolver(record, PropertyValue(value="x", indexes=(), path="subject"))


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


class TestDefaultSchema:
    def test_parsed_from_data(self) -> None:
        assert parse_schema(DEFAULT_SCHEMA_DATA) == DEFAULT_SCHEMA

    def test_grouping_levels(self) -> None:
        project = DEFAULT_SCHEMA[0]
        branch = project.children[0]
        status = branch.children[0]
        change = status.children[0]
        assert [project.path, branch.path, status.path, change.path] == [
            "project",
            "branch",
            "status",
            "subject",
        ]
        assert change.change_tracked
        assert change.has_context_menu
        assert change.icon == "overallScore"

    def test_change_level_children(self) -> None:
        change = DEFAULT_SCHEMA[0].children[0].children[0].children[0]
        assert [child.path for child in change.children] == [
            "patchSets.number",
            "currentPatchSet.number",
            "currentPatchSet.approvals.by.name",
            "id",
            "createdOn",
            "lastUpdated",
            "owner.name",
            "comments",
        ]

    def test_file_level_binds_fetch_command(self) -> None:
        change = DEFAULT_SCHEMA[0].children[0].children[0].children[0]
        files = change.children[0].children[0]
        assert files.command == "fetch"
        assert len(files.arguments) == 4


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


class TestFormatters:
    def test_created_renders_utc_date(self) -> None:
        record = {"createdOn": 1700000000}
        value = resolve(record, "createdOn")[0]
        assert default_formatters()["created"](record, value) == "Created: Tue 14/11/2023, 22:13"

    def test_updated_prefix(self) -> None:
        record = {"lastUpdated": 1700003600}
        value = resolve(record, "lastUpdated")[0]
        assert default_formatters()["updated"](record, value) == "Updated: Tue 14/11/2023, 23:13"

    def test_numeric_string_accepted(self) -> None:
        record = {"createdOn": "1700000000"}
        value = resolve(record, "createdOn")[0]
        assert default_formatters()["created"](record, value).endswith("22:13")

    def test_unparseable_value_rendered_verbatim(self) -> None:
        record = {"createdOn": "yesterday"}
        value = resolve(record, "createdOn")[0]
        assert default_formatters()["created"](record, value) == "Created: yesterday"


# ---------------------------------------------------------------------------
# Icons
# ---------------------------------------------------------------------------


class TestScoreIcon:
    @pytest.mark.parametrize(
        ("score", "icon"),
        [(-2, "minus-two"), (-1, "minus-one"), (1, "plus-one"), (2, "plus-two")],
    )
    def test_known_scores(self, score: int, icon: str) -> None:
        assert score_icon(score) == icon

    @pytest.mark.parametrize("score", [0, 3, None])
    def test_no_icon(self, score: int | None) -> None:
        assert score_icon(score) is None


class TestScoreResolver:
    def test_uses_approval_branch_of_value(self) -> None:
        record = _change(("Verified", "1"), ("Code-Review", "-2"))
        resolver = default_icon_resolvers()["score"]
        values = resolve(record, "currentPatchSet.approvals.by.name")
        assert [resolver(record, value) for value in values] == ["plus-one", "minus-two"]


class TestOverallScore:
    def test_no_verified_vote_is_building(self) -> None:
        assert _overall(_change(("Code-Review", "2"))) == "building"

    def test_no_approvals_is_building(self) -> None:
        assert _overall({"currentPatchSet": {"approvals": []}}) == "building"

    def test_failed_verification(self) -> None:
        assert _overall(_change(("Verified", "-1"), ("Code-Review", "2"))) == "failed"

    def test_verified_below_threshold(self) -> None:
        assert _overall(_change(("Verified", "1"), ("Code-Review", "2"))) == "verified"

    def test_negative_vote_below_threshold(self) -> None:
        assert _overall(_change(("Verified", "1"), ("Code-Review", "-1"))) == "minus-one"

    def test_veto_wins_within_category(self) -> None:
        record = _change(("Verified", "1"), ("Code-Review", "-2"), ("Code-Review", "2"))
        assert _overall(record) == "minus-two"

    def test_minimum_across_categories_at_threshold(self) -> None:
        record = _change(("Verified", "1"), ("Code-Review", "2"), ("Design", "1"))
        assert _overall(record) == "plus-one"

    def test_threshold_is_configurable(self) -> None:
        record = _change(("Verified", "1"), ("Code-Review", "2"))
        assert _overall(record, threshold=1) == "plus-two"
