import re
from bisect import bisect_right
from pathlib import Path

from tree_sitter import Node, Tree
from tree_sitter_language_pack import get_parser

from funcapp_gen.core.ports.syntax import SyntaxKind, SyntaxNode
from funcapp_gen.models import LinePosition, LineRange, SourceLocation

_KIND_BY_TYPE = {
    "identifier": SyntaxKind.IDENTIFIER,
    "/": SyntaxKind.SLASH_TOKEN,
    "float": SyntaxKind.FLOAT_LITERAL,
    "true": SyntaxKind.BOOLEAN_LITERAL,
    "false": SyntaxKind.BOOLEAN_LITERAL,
    "none": SyntaxKind.NONE_LITERAL,
    "module": SyntaxKind.MODULE,
    "class_definition": SyntaxKind.CLASS_DEFINITION,
    "function_definition": SyntaxKind.FUNCTION_DEFINITION,
    "decorated_definition": SyntaxKind.DECORATED_DEFINITION,
    "decorator": SyntaxKind.DECORATOR,
    "call": SyntaxKind.CALL,
    "attribute": SyntaxKind.ATTRIBUTE,
    "argument_list": SyntaxKind.ARGUMENT_LIST,
    "keyword_argument": SyntaxKind.KEYWORD_ARGUMENT,
    "binary_operator": SyntaxKind.BINARY_OPERATOR,
    "parameters": SyntaxKind.PARAMETERS,
    "typed_parameter": SyntaxKind.TYPED_PARAMETER,
    "typed_default_parameter": SyntaxKind.TYPED_DEFAULT_PARAMETER,
    "default_parameter": SyntaxKind.DEFAULT_PARAMETER,
    "type": SyntaxKind.TYPE,
    "block": SyntaxKind.BLOCK,
    "expression_statement": SyntaxKind.EXPRESSION_STATEMENT,
    "assignment": SyntaxKind.ASSIGNMENT,
    "import_statement": SyntaxKind.IMPORT,
    "import_from_statement": SyntaxKind.IMPORT,
    "comment": SyntaxKind.COMMENT,
}

_DECIMAL_RE = re.compile(r"[0-9]+")


def _is_plain_string(text: str) -> bool:
    """True for a single-line quoted literal with no prefix and no triple quotes."""
    if len(text) < 2 or text[0] not in "\"'":
        return False
    if text[:3] in ('"""', "'''"):
        return False
    return text[-1] == text[0] and "\n" not in text


def classify(node_type: str, text: str) -> SyntaxKind:
    if node_type == "string":
        return SyntaxKind.STRING_LITERAL if _is_plain_string(text) else SyntaxKind.TEMPLATE_STRING
    if node_type == "integer":
        return SyntaxKind.DECIMAL_INTEGER_LITERAL if _DECIMAL_RE.fullmatch(text) else SyntaxKind.OTHER
    return _KIND_BY_TYPE.get(node_type, SyntaxKind.OTHER)


class TreeSitterNode:
    """Adapts a tree-sitter node to the ``SyntaxNode`` protocol."""

    __slots__ = ("_node", "_document")

    def __init__(self, node: Node, document: "SourceDocument") -> None:
        self._node = node
        self._document = document

    @property
    def type(self) -> str:
        return self._node.type

    @property
    def kind(self) -> SyntaxKind:
        return classify(self._node.type, self.text)

    @property
    def children(self) -> list["TreeSitterNode"]:
        return [TreeSitterNode(child, self._document) for child in self._node.children]

    @property
    def text(self) -> str:
        return self._document.source[self.start_byte : self.end_byte].decode("utf-8")

    @property
    def start_byte(self) -> int:
        return self._node.start_byte

    @property
    def end_byte(self) -> int:
        return self._node.end_byte

    @property
    def parent(self) -> "TreeSitterNode | None":
        parent = self._node.parent
        return TreeSitterNode(parent, self._document) if parent is not None else None

    @property
    def document(self) -> "SourceDocument":
        return self._document

    def field(self, name: str) -> "TreeSitterNode | None":
        child = self._node.child_by_field_name(name)
        return TreeSitterNode(child, self._document) if child is not None else None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TreeSitterNode):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return f"TreeSitterNode({self.type!r}, {self.start_byte}..{self.end_byte})"

    def _key(self) -> tuple[int, str, int, int]:
        return (id(self._document), self._node.type, self.start_byte, self.end_byte)


def find_node(root: SyntaxNode, start: int, end: int) -> SyntaxNode | None:
    """Return the deepest node under *root* covering ``[start, end)``."""
    if start > end or start < root.start_byte or end > root.end_byte:
        return None
    node = root
    while True:
        for child in node.children:
            if child.start_byte <= start and end <= child.end_byte:
                node = child
                break
        else:
            return node


def _line_starts(source: bytes) -> list[int]:
    starts = [0]
    starts.extend(i + 1 for i, byte in enumerate(source) if byte == 0x0A)
    return starts


class SourceDocument:
    """A parsed source file with line/offset translation."""

    def __init__(self, source: bytes, path: str, tree: Tree) -> None:
        self.source = source
        self.path = path
        self._tree = tree
        self._line_starts = _line_starts(source)

    @property
    def root(self) -> TreeSitterNode:
        return TreeSitterNode(self._tree.root_node, self)

    def text_position_from(self, position: LinePosition) -> int | None:
        """Translate a line position into a byte offset, or None when it lies outside the document."""
        if position.line < 0 or position.offset < 0 or position.line >= len(self._line_starts):
            return None
        line_start = self._line_starts[position.line]
        next_line = position.line + 1
        line_end = self._line_starts[next_line] if next_line < len(self._line_starts) else len(self.source)
        offset = line_start + position.offset
        if offset > line_end:
            return None
        return offset

    def line_position_from(self, offset: int) -> LinePosition:
        line = bisect_right(self._line_starts, offset) - 1
        return LinePosition(line=line, offset=offset - self._line_starts[line])

    def line_range(self, node: SyntaxNode) -> LineRange:
        return LineRange(
            start=self.line_position_from(node.start_byte),
            end=self.line_position_from(node.end_byte),
        )

    def location_of(self, node: SyntaxNode) -> SourceLocation:
        return SourceLocation(
            path=self.path,
            line_range=self.line_range(node),
            start_byte=node.start_byte,
            end_byte=node.end_byte,
        )

    def find_node(self, start: int, end: int) -> SyntaxNode | None:
        return find_node(self.root, start, end)


def parse_source(source: str | bytes, path: str = "<source>") -> SourceDocument:
    source_bytes = source.encode("utf-8") if isinstance(source, str) else source
    tree = get_parser("python").parse(source_bytes)
    return SourceDocument(source_bytes, path, tree)


def parse_file(path: str | Path) -> SourceDocument:
    file_path = Path(path)
    try:
        source_bytes = file_path.read_bytes()
    except FileNotFoundError:
        raise FileNotFoundError(f"File not found: {path}") from None
    return parse_source(source_bytes, str(file_path))


def first_identifier(node: SyntaxNode) -> SyntaxNode | None:
    """Return the leftmost identifier in *node*'s subtree."""
    if node.kind is SyntaxKind.IDENTIFIER:
        return node
    for child in node.children:
        found = first_identifier(child)
        if found is not None:
            return found
    return None

