"""Unit tests for the semantic model and symbol-to-node location."""

from funcapp_gen.core.ports.syntax import SyntaxKind
from funcapp_gen.core.symbols import SemanticModel, Symbol, SymbolKind, locate_node
from funcapp_gen.core.syntax import parse_source
from funcapp_gen.models import LinePosition, LineRange

SOURCE = """\
LIMIT = 10


class Order:
    id: str


class Service:
    def first(self):
        return 1

    @decorated
    def second(self):
        return 2


def helper():
    return None
"""

REBOUND_SOURCE = """\
class Svc:
    def old(self):
        pass

class Svc:
    def new(self):
        pass

Svc = 1
"""


class TestSemanticModel:
    def test_collects_module_symbols(self) -> None:
        model = SemanticModel(parse_source(SOURCE))

        order = model.lookup("Order")
        helper = model.lookup("helper")
        limit = model.lookup("LIMIT")

        assert order is not None and order.kind is SymbolKind.CLASS
        assert helper is not None and helper.kind is SymbolKind.FUNCTION
        assert limit is not None and limit.kind is SymbolKind.VARIABLE

    def test_symbol_location_is_the_name_token(self) -> None:
        model = SemanticModel(parse_source(SOURCE))

        order = model.lookup("Order")

        assert order is not None
        assert order.location == LineRange(
            start=LinePosition(line=3, offset=6),
            end=LinePosition(line=3, offset=11),
        )

    def test_builtins_have_no_location(self) -> None:
        model = SemanticModel(parse_source(SOURCE))

        builtin = model.lookup("str")

        assert builtin is not None
        assert builtin.kind is SymbolKind.BUILTIN
        assert builtin.location is None

    def test_unknown_name(self) -> None:
        assert SemanticModel(parse_source(SOURCE)).lookup("Missing") is None

    def test_members_include_decorated_methods(self) -> None:
        model = SemanticModel(parse_source(SOURCE))
        service = model.lookup("Service")
        assert service is not None

        members = model.members(service)

        assert [m.name for m in members] == ["first", "second"]
        assert all(m.kind is SymbolKind.METHOD for m in members)

    def test_class_at_survives_rebinding_and_redefinition(self) -> None:
        document = parse_source(REBOUND_SOURCE)
        model = SemanticModel(document)
        first, second = (statement.field("name") for statement in document.root.children[:2])
        assert first is not None and second is not None

        first_class = model.class_at(document.line_range(first))
        second_class = model.class_at(document.line_range(second))
        rebound = model.lookup("Svc")

        assert rebound is not None and rebound.kind is SymbolKind.VARIABLE
        assert first_class is not None and [m.name for m in model.members(first_class)] == ["old"]
        assert second_class is not None and [m.name for m in model.members(second_class)] == ["new"]
        assert model.class_at(document.line_range(document.root)) is None


class TestLocateNode:
    def test_symbol_without_location_is_not_found(self) -> None:
        document = parse_source(SOURCE)
        assert locate_node(document.root, Symbol("str", SymbolKind.BUILTIN)) is None

    def test_method_resolves_to_its_function_definition(self) -> None:
        document = parse_source(SOURCE)
        model = SemanticModel(document)
        service = model.lookup("Service")
        assert service is not None
        declaration = locate_node(document.root, service)
        assert declaration is not None

        nodes = [locate_node(declaration, member) for member in model.members(service)]

        assert [n.kind for n in nodes if n is not None] == [SyntaxKind.FUNCTION_DEFINITION] * 2
        assert nodes[1] is not None and nodes[1].text.startswith("def second")

    def test_identifier_range_returns_enclosing_node_not_ancestor(self) -> None:
        document = parse_source(SOURCE)
        limit = SemanticModel(document).lookup("LIMIT")
        assert limit is not None

        node = locate_node(document.root, limit)

        assert node is not None
        assert node.kind is SyntaxKind.ASSIGNMENT
        assert node.text == "LIMIT = 10"

    def test_class_resolves_to_class_definition(self) -> None:
        document = parse_source(SOURCE)
        order = SemanticModel(document).lookup("Order")
        assert order is not None

        node = locate_node(document.root, order)

        assert node is not None
        assert node.kind is SyntaxKind.CLASS_DEFINITION

    def test_out_of_range_location_is_not_found(self) -> None:
        document = parse_source(SOURCE)
        stale = Symbol(
            "gone",
            SymbolKind.FUNCTION,
            LineRange(start=LinePosition(line=400, offset=0), end=LinePosition(line=400, offset=4)),
        )

        assert locate_node(document.root, stale) is None

    def test_offset_past_line_end_is_not_found(self) -> None:
        document = parse_source(SOURCE)
        stale = Symbol(
            "gone",
            SymbolKind.FUNCTION,
            LineRange(start=LinePosition(line=0, offset=200), end=LinePosition(line=0, offset=204)),
        )

        assert locate_node(document.root, stale) is None
