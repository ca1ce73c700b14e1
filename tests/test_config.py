"""Tests for TreeConfig and SortOrder.

Covers:
- Default values
- Frozen (immutable) enforcement
- __post_init__ validation of key_field, sort_order and approval_threshold
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from json_schema_tree.config import SortOrder, TreeConfig

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestTreeConfigDefaults:
    def test_defaults(self) -> None:
        config = TreeConfig()
        assert config.key_field == "number"
        assert config.sort_order is SortOrder.ASCENDING
        assert config.filter_case_sensitive is False
        assert config.hide_empty_roots is True
        assert config.approval_threshold == 2

    def test_sort_order_values(self) -> None:
        assert SortOrder.ASCENDING == "ascending"
        assert SortOrder.DESCENDING == "descending"

    def test_frozen(self) -> None:
        config = TreeConfig()
        with pytest.raises(FrozenInstanceError):
            config.key_field = "id"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestTreeConfigValidation:
    def test_empty_key_field_disables_tracking(self) -> None:
        assert TreeConfig(key_field="").key_field == ""

    def test_nested_key_field(self) -> None:
        assert TreeConfig(key_field="change.id").key_field == "change.id"

    @pytest.mark.parametrize("key_field", [".", " ", ". ."])
    def test_blank_key_field_rejected(self, key_field: str) -> None:
        with pytest.raises(ValueError, match="key_field"):
            TreeConfig(key_field=key_field)

    def test_plain_string_sort_order_rejected(self) -> None:
        with pytest.raises(ValueError, match="sort_order"):
            TreeConfig(sort_order="up")  # type: ignore[arg-type]

    def test_negative_threshold_rejected(self) -> None:
        with pytest.raises(ValueError, match="approval_threshold"):
            TreeConfig(approval_threshold=-1)

    def test_zero_threshold_accepted(self) -> None:
        assert TreeConfig(approval_threshold=0).approval_threshold == 0
