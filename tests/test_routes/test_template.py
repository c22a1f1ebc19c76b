"""Tests for wpapi.routes.template -- path template tokenizer and identifiers."""

from __future__ import annotations

import pytest

from wpapi.exceptions import DescriptorError
from wpapi.models import PathLiteral, PathParam
from wpapi.routes.template import parse_template, to_identifier


# ---------------------------------------------------------------------------
# parse_template
# ---------------------------------------------------------------------------


class TestParseTemplate:
    def test_literal_only(self) -> None:
        assert parse_template("/wp/v2/posts") == [
            PathLiteral(value="wp"),
            PathLiteral(value="v2"),
            PathLiteral(value="posts"),
        ]

    def test_single_param(self) -> None:
        tokens = parse_template("/wp/v2/posts/(?P<id>[\\d]+)")
        assert tokens[-1] == PathParam(name="id", pattern="[\\d]+")
        assert len(tokens) == 4

    def test_params_keep_declared_order(self) -> None:
        tokens = parse_template("/wp/v2/posts/(?P<parent>[\\d]+)/revisions/(?P<id>[\\d]+)")
        params = [t.name for t in tokens if isinstance(t, PathParam)]
        assert params == ["parent", "id"]
        assert tokens[4] == PathLiteral(value="revisions")

    def test_character_class_with_dash(self) -> None:
        tokens = parse_template("/myplugin/v1/customendpoint/(?P<thing>[\\w-]+)")
        assert tokens[-1] == PathParam(name="thing", pattern="[\\w-]+")

    def test_slash_inside_pattern_does_not_split(self) -> None:
        tokens = parse_template("/wp/v2/plugins/(?P<plugin>[^.\\/]+(?:\\/[^.\\/]+)?)")
        assert len(tokens) == 4
        assert tokens[-1] == PathParam(name="plugin", pattern="[^.\\/]+(?:\\/[^.\\/]+)?")

    def test_paren_inside_character_class(self) -> None:
        tokens = parse_template("/ns/v1/items/(?P<key>[)(a-z]+)")
        assert tokens[-1] == PathParam(name="key", pattern="[)(a-z]+")

    def test_nested_group(self) -> None:
        tokens = parse_template("/ns/v1/items/(?P<slug>(?:foo|bar)-\\d+)")
        assert tokens[-1] == PathParam(name="slug", pattern="(?:foo|bar)-\\d+")

    def test_escaped_paren_in_pattern(self) -> None:
        tokens = parse_template("/ns/v1/items/(?P<x>a\\)b)")
        assert tokens[-1] == PathParam(name="x", pattern="a\\)b")

    def test_empty_segments_ignored(self) -> None:
        assert parse_template("//wp//v2/") == [PathLiteral(value="wp"), PathLiteral(value="v2")]

    def test_empty_template(self) -> None:
        assert parse_template("") == []


class TestParseTemplateErrors:
    def test_unterminated_name(self) -> None:
        with pytest.raises(DescriptorError, match="Unterminated"):
            parse_template("/wp/v2/posts/(?P<id")

    def test_unbalanced_group(self) -> None:
        with pytest.raises(DescriptorError, match="Unbalanced"):
            parse_template("/wp/v2/posts/(?P<id>[\\d]+")

    @pytest.mark.parametrize("name", ["", "1id", "bad-name"])
    def test_invalid_param_name(self, name: str) -> None:
        with pytest.raises(DescriptorError, match="Invalid parameter name"):
            parse_template(f"/wp/v2/posts/(?P<{name}>\\d+)")

    def test_stray_paren(self) -> None:
        with pytest.raises(DescriptorError, match="Unexpected"):
            parse_template("/wp/v2/posts)")

    def test_mixed_segment(self) -> None:
        with pytest.raises(DescriptorError, match="mixing"):
            parse_template("/wp/v2/posts-(?P<id>\\d+)")

    def test_non_string(self) -> None:
        with pytest.raises(DescriptorError):
            parse_template(42)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# to_identifier
# ---------------------------------------------------------------------------


class TestToIdentifier:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("posts", "posts"),
            ("block-types", "block_types"),
            ("_fields", "fields"),
            ("_embed", "embed"),
            ("class", "class_"),
            ("2fa", "n2fa"),
            ("---", "param"),
            ("modified_before", "modified_before"),
        ],
    )
    def test_conversion(self, name: str, expected: str) -> None:
        assert to_identifier(name) == expected

    def test_result_is_identifier(self) -> None:
        assert to_identifier("menu-items.v2").isidentifier()
