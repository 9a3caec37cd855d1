"""Reading decorator annotations and extracting literal field values."""

from __future__ import annotations

from dataclasses import dataclass

from funcapp_gen.core.ports.syntax import SyntaxKind, SyntaxNode


class MissingFieldValueError(ValueError):
    """Raised when an annotation field has no value expression."""


@dataclass(frozen=True)
class AnnotationField:
    name: str
    node: SyntaxNode
    value: SyntaxNode | None


@dataclass(frozen=True)
class Annotation:
    name: str
    node: SyntaxNode
    fields: tuple[AnnotationField, ...] = ()
    positional: tuple[SyntaxNode, ...] = ()

    def field(self, name: str) -> AnnotationField | None:
        return next((f for f in self.fields if f.name == name), None)


def value_expression(field: AnnotationField) -> SyntaxNode:
    """Return the value expression of *field*; a field without one is a caller error."""
    if field.value is None:
        raise MissingFieldValueError(f"Annotation field '{field.name}' has no value expression")
    return field.value


def extract_annotation_value(field: AnnotationField) -> str | None:
    """Return the static value of *field*, or None when it is not a string or decimal integer literal.

    String literals lose their two delimiting quotes; integer literals are returned as written.
    The field must have a value expression.
    """
    expression = value_expression(field)
    if expression.kind is SyntaxKind.STRING_LITERAL:
        text = expression.text
        return text[1:-1]
    if expression.kind is SyntaxKind.DECIMAL_INTEGER_LITERAL:
        return expression.text
    return None


def _annotation_name(callee: SyntaxNode) -> str:
    if callee.kind is SyntaxKind.ATTRIBUTE:
        attribute = callee.field("attribute")
        if attribute is not None:
            return attribute.text
    return callee.text


def read_decorator(decorator: SyntaxNode) -> Annotation:
    expression = next(
        child for child in decorator.children if child.kind is not SyntaxKind.COMMENT and child.text != "@"
    )
    if expression.kind is not SyntaxKind.CALL:
        return Annotation(name=_annotation_name(expression), node=decorator)

    callee = expression.field("function")
    arguments = expression.field("arguments")
    fields: list[AnnotationField] = []
    positional: list[SyntaxNode] = []
    if arguments is not None:
        for argument in arguments.children:
            if argument.kind is SyntaxKind.KEYWORD_ARGUMENT:
                name = argument.field("name")
                fields.append(
                    AnnotationField(
                        name=name.text if name is not None else "",
                        node=argument,
                        value=argument.field("value"),
                    )
                )
            elif argument.kind is not SyntaxKind.COMMENT and argument.text not in ("(", ")", ","):
                positional.append(argument)
    return Annotation(
        name=_annotation_name(callee) if callee is not None else expression.text,
        node=decorator,
        fields=tuple(fields),
        positional=tuple(positional),
    )


def annotations_of(definition: SyntaxNode) -> list[Annotation]:
    """Return the annotations attached to a class or function definition, in source order."""
    parent = definition.parent
    if parent is None or parent.kind is not SyntaxKind.DECORATED_DEFINITION:
        return []
    return [read_decorator(child) for child in parent.children if child.kind is SyntaxKind.DECORATOR]
