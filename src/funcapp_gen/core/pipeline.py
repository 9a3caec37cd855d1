"""Turns annotated service declarations into a function-app descriptor."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from funcapp_gen.config import AnalyzerConfig
from funcapp_gen.constants import (
    ANNOTATION_FIELDS,
    AUTH_LEVELS,
    BLOB_OUTPUT,
    DEFAULT,
    HTTP_METHODS,
    HTTP_PAYLOAD,
    IN_MSG,
    OUT_MSG,
    PARAMETER_BUILTINS,
    QUEUE_OUTPUT,
    RESP,
    SERVICE_KINDS,
    TRIGGER_FOR_SERVICE,
)
from funcapp_gen.core.annotations import (
    Annotation,
    AnnotationField,
    annotations_of,
    extract_annotation_value,
    value_expression,
)
from funcapp_gen.core.diagnostics import (
    AzureFunctionsError,
    DiagnosticCode,
    DiagnosticProperty,
    DiagnosticReporter,
    create_diagnostic,
)
from funcapp_gen.core.paths import UnsupportedPathSegmentError, join_route, path_segments, resolve_resource_path
from funcapp_gen.core.ports.diagnostics import DiagnosticSink
from funcapp_gen.core.ports.syntax import SyntaxKind, SyntaxNode
from funcapp_gen.core.symbols import SemanticModel, locate_node
from funcapp_gen.core.syntax import SourceDocument, first_identifier
from funcapp_gen.models import Binding, FunctionApp, FunctionDescriptor, HostSettings

logger = logging.getLogger(__name__)

TRIGGER_ANNOTATIONS = frozenset(TRIGGER_FOR_SERVICE.values())
OUTPUT_ANNOTATIONS = frozenset({QUEUE_OUTPUT, BLOB_OUTPUT})

_FUNCTION_NAME_RE = re.compile(r"[A-Za-z][A-Za-z0-9_-]{0,127}")
_NAME_UNSAFE_RE = re.compile(r"[^A-Za-z0-9_-]+")
_DECIMAL_RE = re.compile(r"[0-9]+")

_PARAMETER_KINDS = (
    SyntaxKind.IDENTIFIER,
    SyntaxKind.DEFAULT_PARAMETER,
    SyntaxKind.TYPED_PARAMETER,
    SyntaxKind.TYPED_DEFAULT_PARAMETER,
)


@dataclass(frozen=True)
class ServiceSettings:
    kind: str
    class_name: str
    route_prefix: str = ""
    auth_level: str = "anonymous"
    queue_name: str | None = None
    connection: str | None = None
    schedule: str | None = None


def _name_of(definition: SyntaxNode) -> str:
    name = definition.field("name")
    return name.text if name is not None else "<anonymous>"


def _encloses(outer: SyntaxNode, inner: SyntaxNode) -> bool:
    return outer.start_byte <= inner.start_byte and inner.end_byte <= outer.end_byte


def service_declarations(root: SyntaxNode) -> Iterator[SyntaxNode]:
    """Yield module-level class definitions that carry a service annotation."""
    for statement in root.children:
        if statement.kind is not SyntaxKind.DECORATED_DEFINITION:
            continue
        definition = statement.field("definition")
        if definition is None or definition.kind is not SyntaxKind.CLASS_DEFINITION:
            continue
        if any(a.name in SERVICE_KINDS for a in annotations_of(definition)):
            yield definition


class ExtractionPipeline:
    def __init__(self, document: SourceDocument, sink: DiagnosticSink, config: AnalyzerConfig) -> None:
        self._document = document
        self._config = config
        self._reporter = DiagnosticReporter(sink)
        self._model = SemanticModel(document)
        self._function_names: set[str] = set()
        self._host = HostSettings(
            handler_executable=config.handler_executable,
            extension_bundle_version=config.extension_bundle_version,
        )

    def run(self) -> FunctionApp:
        functions: list[FunctionDescriptor] = []
        for declaration in service_declarations(self._document.root):
            try:
                functions.extend(self.analyze_service(declaration))
            except AzureFunctionsError as exc:
                logger.info("Skipping service %s: %s", _name_of(declaration), exc)
                self._reporter.forward(exc.diagnostic)
        logger.info("Extracted %d function(s) from %s", len(functions), self._document.path)
        return FunctionApp(host=self._host, functions=functions)

    def analyze_service(self, declaration: SyntaxNode) -> list[FunctionDescriptor]:
        class_name = _name_of(declaration)
        services = [a for a in annotations_of(declaration) if a.name in SERVICE_KINDS]
        if len(services) > 1:
            raise self._error(services[1].node, DiagnosticCode.MULTIPLE_ANNOTATIONS, "service")
        service = services[0]
        self._check_fields(service)
        settings = self._service_settings(service, class_name)
        logger.debug("Analyzing %s service %s", settings.kind, class_name)

        functions: list[FunctionDescriptor] = []
        has_triggers = False
        name_node = declaration.field("name")
        class_symbol = self._model.class_at(self._document.line_range(name_node)) if name_node is not None else None
        members = self._model.members(class_symbol) if class_symbol is not None else []
        for member in members:
            node = locate_node(declaration, member)
            if node is None or node.kind is not SyntaxKind.FUNCTION_DEFINITION or not _encloses(declaration, node):
                continue
            annotations = annotations_of(node)
            if not any(a.name in TRIGGER_ANNOTATIONS for a in annotations):
                continue
            has_triggers = True
            try:
                functions.append(self._analyze_function(settings, node, annotations))
            except AzureFunctionsError as exc:
                logger.info("Skipping function %s.%s: %s", class_name, member.name, exc)
                self._reporter.forward(exc.diagnostic)

        if not has_triggers:
            self._report(declaration.field("name") or declaration, DiagnosticCode.NO_TRIGGER_FUNCTIONS)
        return functions

    # -------------------------------------------------------------------
    # Services
    # -------------------------------------------------------------------

    def _service_settings(self, service: Annotation, class_name: str) -> ServiceSettings:
        kind = SERVICE_KINDS[service.name]
        if kind == "http":
            auth_level = self._optional_value(service, "auth_level") or self._config.default_auth_level
            if auth_level not in AUTH_LEVELS:
                raise self._error(
                    self._anchor(service, "auth_level"), DiagnosticCode.INVALID_FIELD_VALUE, auth_level, "auth_level"
                )
            return ServiceSettings(
                kind=kind,
                class_name=class_name,
                route_prefix=self._path_value(service, "base_path"),
                auth_level=auth_level,
            )
        if kind == "queue":
            queue_name = self._required_value(service, "queue_name")
            connection = self._required_value(service, "connection")
            self._apply_host_setting(service, "batch_size", "queue_batch_size")
            self._apply_host_setting(service, "max_dequeue_count", "queue_max_dequeue_count")
            return ServiceSettings(kind=kind, class_name=class_name, queue_name=queue_name, connection=connection)

        schedule = self._required_value(service, "schedule")
        if len(schedule.split()) != 6:
            raise self._error(
                self._anchor(service, "schedule"), DiagnosticCode.INVALID_FIELD_VALUE, schedule, "schedule"
            )
        return ServiceSettings(kind=kind, class_name=class_name, schedule=schedule)

    def _apply_host_setting(self, service: Annotation, field_name: str, setting: str) -> None:
        value = self._integer_value(service, field_name)
        if value is None:
            return
        current = getattr(self._host, setting)
        if current is None:
            setattr(self._host, setting, value)
        elif current != value:
            self._report(
                self._anchor(service, field_name), DiagnosticCode.CONFLICTING_HOST_SETTING, field_name, current
            )

    # -------------------------------------------------------------------
    # Functions
    # -------------------------------------------------------------------

    def _analyze_function(
        self, settings: ServiceSettings, node: SyntaxNode, annotations: Sequence[Annotation]
    ) -> FunctionDescriptor:
        triggers = [a for a in annotations if a.name in TRIGGER_ANNOTATIONS]
        if len(triggers) > 1:
            raise self._error(triggers[1].node, DiagnosticCode.MULTIPLE_ANNOTATIONS, "trigger")
        trigger = triggers[0]
        if trigger.name != TRIGGER_FOR_SERVICE[settings.kind]:
            raise self._error(trigger.node, DiagnosticCode.TRIGGER_NOT_ALLOWED, trigger.name, settings.kind)
        self._check_fields(trigger)

        method_name = _name_of(node)
        if settings.kind == "http":
            bindings, default_name = self._http_bindings(settings, trigger)
            self._check_parameters(node)
        elif settings.kind == "queue":
            bindings = [
                Binding(
                    type="queueTrigger",
                    direction="in",
                    name=IN_MSG,
                    queue_name=settings.queue_name,
                    connection=settings.connection,
                )
            ]
            default_name = f"{settings.class_name}-{method_name}"
        else:
            bindings = [Binding(type="timerTrigger", direction="in", name=IN_MSG, schedule=settings.schedule)]
            default_name = f"{settings.class_name}-{method_name}"

        outputs = [a for a in annotations if a.name in OUTPUT_ANNOTATIONS]
        if len(outputs) > 1:
            raise self._error(outputs[1].node, DiagnosticCode.MULTIPLE_ANNOTATIONS, "output")
        for output in outputs:
            self._check_fields(output)
            bindings.append(self._output_binding(output))

        name = self._function_name(trigger, default_name, node)
        if settings.kind == "http" and bindings[0].methods is None:
            self._report(trigger.node, DiagnosticCode.ACCEPTS_ALL_METHODS, name)
        return FunctionDescriptor(
            name=name,
            service=settings.class_name,
            handler=f"{settings.class_name}.{method_name}",
            bindings=bindings,
        )

    def _http_bindings(self, settings: ServiceSettings, trigger: Annotation) -> tuple[list[Binding], str]:
        method = self._required_value(trigger, "method").lower()
        if method not in HTTP_METHODS:
            raise self._error(self._anchor(trigger, "method"), DiagnosticCode.UNSUPPORTED_HTTP_METHOD, method)
        route = join_route(settings.route_prefix, self._path_value(trigger, "path"))
        default_name = f"{method}-{route.replace('/', '-')}" if route else f"{method}-root"
        bindings = [
            Binding(
                type="httpTrigger",
                direction="in",
                name=HTTP_PAYLOAD,
                auth_level=settings.auth_level,
                methods=None if method == DEFAULT else [method],
                route=route or None,
            ),
            Binding(type="http", direction="out", name=RESP),
        ]
        return bindings, _NAME_UNSAFE_RE.sub("", default_name)

    def _output_binding(self, output: Annotation) -> Binding:
        if output.name == QUEUE_OUTPUT:
            queue_name = self._required_value(output, "queue_name")
            return Binding(
                type="queue",
                direction="out",
                name=OUT_MSG,
                queue_name=queue_name,
                connection=self._required_value(output, "connection"),
            )
        path = self._required_value(output, "path")
        return Binding(
            type="blob",
            direction="out",
            name=OUT_MSG,
            path=path,
            connection=self._required_value(output, "connection"),
            data_type="string",
        )

    def _function_name(self, trigger: Annotation, default_name: str, node: SyntaxNode) -> str:
        explicit = self._optional_value(trigger, "name")
        name = explicit if explicit is not None else default_name
        anchor = self._anchor(trigger, "name") if explicit is not None else node.field("name") or node
        if not _FUNCTION_NAME_RE.fullmatch(name):
            raise self._error(anchor, DiagnosticCode.INVALID_FUNCTION_NAME, name)
        if name in self._function_names:
            raise self._error(anchor, DiagnosticCode.DUPLICATE_FUNCTION_NAME, name)
        self._function_names.add(name)
        return name

    def _check_parameters(self, function_node: SyntaxNode) -> None:
        parameters = function_node.field("parameters")
        if parameters is None:
            return
        declared = [child for child in parameters.children if child.kind in _PARAMETER_KINDS]
        for index, parameter in enumerate(declared):
            if index == 0 and parameter.kind is SyntaxKind.IDENTIFIER and parameter.text in ("self", "cls"):
                continue
            if parameter.kind is SyntaxKind.IDENTIFIER:
                raise self._error(parameter, DiagnosticCode.MISSING_PARAMETER_TYPE, parameter.text)
            if parameter.kind is SyntaxKind.DEFAULT_PARAMETER:
                name = parameter.field("name")
                raise self._error(
                    parameter, DiagnosticCode.MISSING_PARAMETER_TYPE, name.text if name else parameter.text
                )
            type_node = parameter.field("type")
            if type_node is not None:
                self._check_parameter_type(function_node, type_node)

    def _check_parameter_type(self, function_node: SyntaxNode, type_node: SyntaxNode) -> None:
        identifier = first_identifier(type_node)
        symbol = self._model.lookup(identifier.text) if identifier is not None else None
        if symbol is None:
            raise self._error(type_node, DiagnosticCode.UNSUPPORTED_PARAMETER_TYPE, type_node.text)
        if symbol.location is None:
            if symbol.name in PARAMETER_BUILTINS:
                return
            raise self._error(type_node, DiagnosticCode.UNSUPPORTED_PARAMETER_TYPE, type_node.text)
        declaration = locate_node(function_node, symbol)
        if declaration is None or declaration.kind is not SyntaxKind.CLASS_DEFINITION:
            raise self._error(type_node, DiagnosticCode.UNSUPPORTED_PARAMETER_TYPE, type_node.text)

    # -------------------------------------------------------------------
    # Field extraction
    # -------------------------------------------------------------------

    def _check_fields(self, annotation: Annotation) -> None:
        allowed = ANNOTATION_FIELDS.get(annotation.name, frozenset())
        for field in annotation.fields:
            if field.name in allowed:
                continue
            self._reporter.report_with_properties(
                self._document.location_of(field.node),
                DiagnosticCode.UNKNOWN_FIELD,
                [DiagnosticProperty("annotation", annotation.name), DiagnosticProperty("field", field.name)],
                field.name,
            )
        for node in annotation.positional:
            self._report(node, DiagnosticCode.POSITIONAL_ARGUMENT)

    def _literal(self, field: AnnotationField) -> str:
        value = extract_annotation_value(field)
        if value is None:
            raise self._error(field.node, DiagnosticCode.NON_LITERAL_FIELD_VALUE, field.name)
        return value

    def _required_value(self, annotation: Annotation, name: str) -> str:
        field = annotation.field(name)
        if field is None:
            raise self._error(annotation.node, DiagnosticCode.MISSING_REQUIRED_FIELD, name, annotation.name)
        return self._literal(field)

    def _optional_value(self, annotation: Annotation, name: str) -> str | None:
        field = annotation.field(name)
        return self._literal(field) if field is not None else None

    def _integer_value(self, annotation: Annotation, name: str) -> int | None:
        value = self._optional_value(annotation, name)
        if value is None:
            return None
        if not _DECIMAL_RE.fullmatch(value) or int(value) == 0:
            raise self._error(self._anchor(annotation, name), DiagnosticCode.INVALID_FIELD_VALUE, value, name)
        return int(value)

    def _path_value(self, annotation: Annotation, name: str) -> str:
        field = annotation.field(name)
        if field is None:
            return ""
        expression = value_expression(field)
        try:
            return resolve_resource_path(path_segments(expression), strict=self._config.strict_paths)
        except UnsupportedPathSegmentError as exc:
            raise self._error(exc.node, DiagnosticCode.UNSUPPORTED_PATH_SEGMENT, exc.node.text) from exc

    # -------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------

    def _anchor(self, annotation: Annotation, name: str) -> SyntaxNode:
        field = annotation.field(name)
        return field.node if field is not None else annotation.node

    def _error(self, node: SyntaxNode, code: DiagnosticCode, *args: object) -> AzureFunctionsError:
        return AzureFunctionsError(create_diagnostic(code, self._document.location_of(node), *args))

    def _report(self, node: SyntaxNode, code: DiagnosticCode, *args: object) -> None:
        self._reporter.report(self._document.location_of(node), code, *args)


def analyze_document(
    document: SourceDocument, sink: DiagnosticSink, config: AnalyzerConfig | None = None
) -> FunctionApp:
    return ExtractionPipeline(document, sink, config or AnalyzerConfig.from_env()).run()
