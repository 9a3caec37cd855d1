import logging
from collections.abc import Iterable

from funcapp_gen.core.ports.syntax import SyntaxKind, SyntaxNode

logger = logging.getLogger(__name__)


class UnsupportedPathSegmentError(ValueError):
    def __init__(self, node: SyntaxNode) -> None:
        super().__init__(f"Unsupported resource path segment: {node.text}")
        self.node = node


def path_segments(expression: SyntaxNode) -> list[SyntaxNode]:
    """Flatten a ``/``-joined path expression into its ordered leaf segments."""
    if expression.kind is SyntaxKind.BINARY_OPERATOR:
        operator = expression.field("operator")
        left = expression.field("left")
        right = expression.field("right")
        if operator is not None and operator.kind is SyntaxKind.SLASH_TOKEN and left is not None and right is not None:
            return [*path_segments(left), operator, *path_segments(right)]
    return [expression]


def resolve_resource_path(segments: Iterable[SyntaxNode], strict: bool = False) -> str:
    """Concatenate path segments into a route with no leading slash.

    String literals contribute their text without quotes, slash tokens a ``/`` and identifiers
    their name. Other segments are skipped, or rejected when *strict* is set.
    """
    out: list[str] = []
    for node in segments:
        if node.kind is SyntaxKind.STRING_LITERAL:
            out.append(node.text[1:-1])
        elif node.kind is SyntaxKind.SLASH_TOKEN:
            out.append(node.text)
        elif node.kind is SyntaxKind.IDENTIFIER:
            out.append(node.text)
        elif strict:
            raise UnsupportedPathSegmentError(node)
        else:
            logger.debug("Skipping path segment %r", node.text)
    path = "".join(out)
    if path.startswith("/"):
        return path[1:]
    return path


def join_route(*parts: str) -> str:
    return "/".join(p.strip("/") for p in parts if p.strip("/"))
