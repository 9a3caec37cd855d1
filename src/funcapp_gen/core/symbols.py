from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from funcapp_gen.constants import BUILTIN_NAMES
from funcapp_gen.core.ports.syntax import SyntaxKind, SyntaxNode, TextDocument
from funcapp_gen.models import LineRange


class SymbolKind(str, Enum):
    CLASS = "class"
    FUNCTION = "function"
    METHOD = "method"
    VARIABLE = "variable"
    BUILTIN = "builtin"


@dataclass(frozen=True)
class Symbol:
    name: str
    kind: SymbolKind
    location: LineRange | None = None


def locate_node(declaration: SyntaxNode, symbol: Symbol) -> SyntaxNode | None:
    """Map *symbol* back to the node that declares it in *declaration*'s document.

    Returns None for symbols without a location and for ranges the document cannot resolve.
    When the covering node is a single token, its enclosing node is returned instead.
    """
    if symbol.location is None:
        return None
    document = declaration.document
    start = document.text_position_from(symbol.location.start)
    end = document.text_position_from(symbol.location.end)
    if start is None or end is None:
        return None
    node = document.find_node(start, end)
    if node is None:
        return None
    if not node.children and node.parent is not None:
        return node.parent
    return node


def _definition(statement: SyntaxNode) -> SyntaxNode:
    if statement.kind is SyntaxKind.DECORATED_DEFINITION:
        definition = statement.field("definition")
        if definition is not None:
            return definition
    return statement


class SemanticModel:
    """Module-scope symbol table for one document."""

    def __init__(self, document: TextDocument) -> None:
        self._document = document
        self._symbols: dict[str, Symbol] = {}
        self._members: dict[Symbol, list[Symbol]] = {}
        self._classes: dict[LineRange, Symbol] = {}
        self._builtins = {name: Symbol(name, SymbolKind.BUILTIN) for name in BUILTIN_NAMES}
        self._collect(document.root)

    def lookup(self, name: str) -> Symbol | None:
        return self._symbols.get(name) or self._builtins.get(name)

    def members(self, class_symbol: Symbol) -> list[Symbol]:
        return list(self._members.get(class_symbol, []))

    def class_at(self, location: LineRange) -> Symbol | None:
        """Return the class whose name token spans *location*, even if the name was later rebound."""
        return self._classes.get(location)

    def _location(self, node: SyntaxNode) -> LineRange:
        return LineRange(
            start=self._document.line_position_from(node.start_byte),
            end=self._document.line_position_from(node.end_byte),
        )

    def _collect(self, root: SyntaxNode) -> None:
        for statement in root.children:
            definition = _definition(statement)
            name = definition.field("name")
            if definition.kind is SyntaxKind.CLASS_DEFINITION and name is not None:
                location = self._location(name)
                symbol = Symbol(name.text, SymbolKind.CLASS, location)
                self._symbols[name.text] = symbol
                self._classes[location] = symbol
                self._members[symbol] = self._collect_methods(definition)
            elif definition.kind is SyntaxKind.FUNCTION_DEFINITION and name is not None:
                self._symbols[name.text] = Symbol(name.text, SymbolKind.FUNCTION, self._location(name))
            elif definition.kind is SyntaxKind.EXPRESSION_STATEMENT:
                self._collect_assignment(definition)

    def _collect_methods(self, class_node: SyntaxNode) -> list[Symbol]:
        body = class_node.field("body")
        if body is None:
            return []
        methods = []
        for statement in body.children:
            definition = _definition(statement)
            name = definition.field("name")
            if definition.kind is SyntaxKind.FUNCTION_DEFINITION and name is not None:
                methods.append(Symbol(name.text, SymbolKind.METHOD, self._location(name)))
        return methods

    def _collect_assignment(self, statement: SyntaxNode) -> None:
        for child in statement.children:
            if child.kind is not SyntaxKind.ASSIGNMENT:
                continue
            target = child.field("left")
            if target is not None and target.kind is SyntaxKind.IDENTIFIER:
                self._symbols[target.text] = Symbol(target.text, SymbolKind.VARIABLE, self._location(target))
