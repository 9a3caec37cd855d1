"""Unit tests for resource path resolution."""

import pytest

from funcapp_gen.core.paths import (
    UnsupportedPathSegmentError,
    join_route,
    path_segments,
    resolve_resource_path,
)
from funcapp_gen.core.ports.syntax import SyntaxKind, SyntaxNode
from funcapp_gen.core.syntax import parse_source


def _segments(expression: str) -> list[SyntaxNode]:
    document = parse_source(f"path = {expression}\n")
    assignment = document.root.children[0].children[0]
    value = assignment.field("right")
    assert value is not None
    return path_segments(value)


class TestPathSegments:
    def test_flattens_slash_expression_in_order(self) -> None:
        segments = _segments('"/api" / orders / "pending"')
        assert [s.kind for s in segments] == [
            SyntaxKind.STRING_LITERAL,
            SyntaxKind.SLASH_TOKEN,
            SyntaxKind.IDENTIFIER,
            SyntaxKind.SLASH_TOKEN,
            SyntaxKind.STRING_LITERAL,
        ]

    def test_other_operators_stay_whole(self) -> None:
        segments = _segments('"a" + "b"')
        assert len(segments) == 1
        assert segments[0].kind is SyntaxKind.BINARY_OPERATOR


class TestResolveResourcePath:
    def test_identifiers_joined_by_slash(self) -> None:
        assert resolve_resource_path(_segments("a / b")) == "a/b"

    def test_strips_exactly_one_leading_slash(self) -> None:
        assert resolve_resource_path(_segments('"/x" / y')) == "x/y"

    def test_only_one_slash_is_stripped(self) -> None:
        assert resolve_resource_path(_segments('"//x"')) == "/x"

    def test_empty_sequence(self) -> None:
        assert resolve_resource_path([]) == ""

    def test_single_identifier_is_unchanged(self) -> None:
        assert resolve_resource_path(_segments("orders")) == "orders"

    def test_literal_quotes_are_stripped(self) -> None:
        assert resolve_resource_path(_segments("'/orders/pending'")) == "orders/pending"

    def test_unrecognized_segments_are_skipped(self) -> None:
        assert resolve_resource_path(_segments('"a" / f(x) / "b"')) == "a//b"

    def test_non_slash_operator_resolves_to_empty(self) -> None:
        assert resolve_resource_path(_segments('"a" + "b"')) == ""

    def test_strict_mode_rejects_unrecognized_segment(self) -> None:
        with pytest.raises(UnsupportedPathSegmentError) as excinfo:
            resolve_resource_path(_segments('"a" / f(x)'), strict=True)
        assert excinfo.value.node.text == "f(x)"

    def test_strict_mode_accepts_supported_segments(self) -> None:
        assert resolve_resource_path(_segments('"/a" / b'), strict=True) == "a/b"


class TestJoinRoute:
    @pytest.mark.parametrize(
        ("parts", "expected"),
        [
            (("api", "orders"), "api/orders"),
            (("/api/", "/orders"), "api/orders"),
            (("", "orders"), "orders"),
            (("api", ""), "api"),
            (("", ""), ""),
        ],
    )
    def test_join(self, parts: tuple[str, str], expected: str) -> None:
        assert join_route(*parts) == expected
