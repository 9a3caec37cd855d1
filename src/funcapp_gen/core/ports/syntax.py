from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Protocol

from funcapp_gen.models import LinePosition


class SyntaxKind(Enum):
    STRING_LITERAL = "string_literal"
    TEMPLATE_STRING = "template_string"
    DECIMAL_INTEGER_LITERAL = "decimal_integer_literal"
    FLOAT_LITERAL = "float_literal"
    BOOLEAN_LITERAL = "boolean_literal"
    NONE_LITERAL = "none_literal"
    SLASH_TOKEN = "slash_token"
    IDENTIFIER = "identifier"
    MODULE = "module"
    CLASS_DEFINITION = "class_definition"
    FUNCTION_DEFINITION = "function_definition"
    DECORATED_DEFINITION = "decorated_definition"
    DECORATOR = "decorator"
    CALL = "call"
    ATTRIBUTE = "attribute"
    ARGUMENT_LIST = "argument_list"
    KEYWORD_ARGUMENT = "keyword_argument"
    BINARY_OPERATOR = "binary_operator"
    PARAMETERS = "parameters"
    TYPED_PARAMETER = "typed_parameter"
    TYPED_DEFAULT_PARAMETER = "typed_default_parameter"
    DEFAULT_PARAMETER = "default_parameter"
    TYPE = "type"
    BLOCK = "block"
    EXPRESSION_STATEMENT = "expression_statement"
    ASSIGNMENT = "assignment"
    IMPORT = "import"
    COMMENT = "comment"
    OTHER = "other"


class SyntaxNode(Protocol):
    """Read-only view of a node in the host syntax tree."""

    @property
    def kind(self) -> SyntaxKind: ...

    @property
    def children(self) -> Sequence[SyntaxNode]: ...

    @property
    def text(self) -> str: ...

    @property
    def start_byte(self) -> int: ...

    @property
    def end_byte(self) -> int: ...

    @property
    def parent(self) -> SyntaxNode | None: ...

    @property
    def document(self) -> TextDocument: ...

    def field(self, name: str) -> SyntaxNode | None: ...


class TextDocument(Protocol):
    path: str

    @property
    def root(self) -> SyntaxNode: ...

    def text_position_from(self, position: LinePosition) -> int | None: ...

    def line_position_from(self, offset: int) -> LinePosition: ...

    def find_node(self, start: int, end: int) -> SyntaxNode | None: ...
