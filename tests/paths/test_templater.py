"""Tests for label/tooltip template expansion."""

from __future__ import annotations

from json_schema_tree.paths.templater import expand, expand_all, placeholders, stringify

RECORD = {
    "number": 42,
    "subject": "Refactor",
    "owner": {"name": "Alice", "username": "alice"},
    "patchSets": [
        {"revision": "r1", "comments": [{"line": 1, "message": "a"}]},
        {"revision": "r2", "comments": [{"line": 7, "message": "b"}, {"line": 9, "message": "c"}]},
    ],
}


class TestStringify:
    def test_none_is_empty(self) -> None:
        assert stringify(None) == ""

    def test_scalars_use_str(self) -> None:
        assert stringify(5) == "5"
        assert stringify("x") == "x"

    def test_containers_are_compact_json(self) -> None:
        assert stringify({"a": [1, 2]}) == '{"a":[1,2]}'


class TestPlaceholders:
    def test_lists_paths_in_order(self) -> None:
        assert placeholders("${number} ${ owner.name }") == ["number", "owner.name"]

    def test_no_placeholders(self) -> None:
        assert placeholders("plain") == []


class TestExpand:
    def test_plain_fields(self) -> None:
        assert expand("${number} ${subject}", RECORD) == "42 Refactor"

    def test_nested_field(self) -> None:
        assert expand("Owner: ${owner.name} (${owner.username})", RECORD) == "Owner: Alice (alice)"

    def test_uses_index_context(self) -> None:
        template = "line ${patchSets.comments.line}: ${patchSets.comments.message}"
        assert expand(template, RECORD, (1, 1)) == "line 9: c"
        assert expand(template, RECORD, (0, 0)) == "line 1: a"

    def test_unresolvable_placeholder_renders_empty(self) -> None:
        assert expand("[${missing.field}]", RECORD) == "[]"

    def test_list_without_index_renders_empty(self) -> None:
        assert expand("${patchSets.revision}", RECORD) == ""

    def test_text_without_placeholders_unchanged(self) -> None:
        assert expand("Comments", RECORD) == "Comments"


class TestExpandAll:
    def test_expands_each_argument_with_shared_indexes(self) -> None:
        args = expand_all(["${number}", "${patchSets.revision}"], RECORD, (0,))
        assert args == ["42", "r1"]
