from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from funcapp_gen.core.ports.diagnostics import DiagnosticSink
from funcapp_gen.models import SourceLocation

logger = logging.getLogger(__name__)


class DiagnosticSeverity(str, Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


class DiagnosticCode(Enum):
    """Diagnostic table: stable code, ``%s``-style message template and severity."""

    INVALID_FIELD_VALUE = ("AZ0001", "Invalid value '%s' for field '%s'", DiagnosticSeverity.ERROR)
    NON_LITERAL_FIELD_VALUE = (
        "AZ0002",
        "Value of field '%s' must be a string or integer literal",
        DiagnosticSeverity.ERROR,
    )
    MISSING_REQUIRED_FIELD = ("AZ0003", "Missing required field '%s' in annotation '%s'", DiagnosticSeverity.ERROR)
    UNSUPPORTED_HTTP_METHOD = ("AZ0004", "Unsupported HTTP method '%s'", DiagnosticSeverity.ERROR)
    DUPLICATE_FUNCTION_NAME = ("AZ0005", "Duplicate function name '%s'", DiagnosticSeverity.ERROR)
    UNSUPPORTED_PATH_SEGMENT = ("AZ0006", "Unsupported resource path segment '%s'", DiagnosticSeverity.ERROR)
    NO_TRIGGER_FUNCTIONS = ("AZ0007", "Service declares no trigger functions", DiagnosticSeverity.WARNING)
    UNSUPPORTED_PARAMETER_TYPE = ("AZ0008", "Unsupported parameter type '%s'", DiagnosticSeverity.ERROR)
    INVALID_FUNCTION_NAME = ("AZ0009", "Invalid function name '%s'", DiagnosticSeverity.ERROR)
    UNKNOWN_FIELD = ("AZ0010", "Unknown annotation field '%s'", DiagnosticSeverity.WARNING)
    MULTIPLE_ANNOTATIONS = ("AZ0011", "Multiple %s annotations on one declaration", DiagnosticSeverity.ERROR)
    POSITIONAL_ARGUMENT = ("AZ0012", "Positional annotation arguments are ignored", DiagnosticSeverity.WARNING)
    MISSING_PARAMETER_TYPE = ("AZ0013", "Missing type annotation for parameter '%s'", DiagnosticSeverity.ERROR)
    TRIGGER_NOT_ALLOWED = ("AZ0014", "Trigger '%s' is not allowed in a %s service", DiagnosticSeverity.ERROR)
    ACCEPTS_ALL_METHODS = ("AZ0015", "Function '%s' accepts all HTTP methods", DiagnosticSeverity.INFO)
    CONFLICTING_HOST_SETTING = (
        "AZ0016",
        "Conflicting value for host setting '%s'; keeping '%s'",
        DiagnosticSeverity.WARNING,
    )

    def __init__(self, code: str, template: str, severity: DiagnosticSeverity) -> None:
        self.code = code
        self.template = template
        self.severity = severity

    def render(self, *args: object) -> str:
        """Substitute *args* into the template; a placeholder/argument mismatch raises ``TypeError``."""
        return self.template % args


@dataclass(frozen=True)
class DiagnosticProperty:
    key: str
    value: object


@dataclass(frozen=True)
class Diagnostic:
    code: DiagnosticCode
    message: str
    location: SourceLocation
    properties: tuple[DiagnosticProperty, ...] = field(default=())

    @property
    def severity(self) -> DiagnosticSeverity:
        return self.code.severity

    def __str__(self) -> str:
        return f"{self.location}: {self.severity.value} {self.code.code}: {self.message}"


def create_diagnostic(
    code: DiagnosticCode,
    location: SourceLocation,
    *args: object,
    properties: Sequence[DiagnosticProperty] = (),
) -> Diagnostic:
    return Diagnostic(code=code, message=code.render(*args), location=location, properties=tuple(properties))


class AzureFunctionsError(Exception):
    """Carries a diagnostic up to the point where the current declaration is abandoned."""

    def __init__(self, diagnostic: Diagnostic) -> None:
        super().__init__(diagnostic.message)
        self.diagnostic = diagnostic


class CollectingSink:
    """Diagnostic sink that keeps every diagnostic in arrival order."""

    def __init__(self) -> None:
        self.diagnostics: list[Diagnostic] = []

    def report_diagnostic(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    @property
    def has_errors(self) -> bool:
        return any(d.severity is DiagnosticSeverity.ERROR for d in self.diagnostics)


class DiagnosticReporter:
    def __init__(self, sink: DiagnosticSink) -> None:
        self._sink = sink

    def report(self, location: SourceLocation, code: DiagnosticCode, *args: object) -> Diagnostic:
        diagnostic = create_diagnostic(code, location, *args)
        self.forward(diagnostic)
        return diagnostic

    def report_with_properties(
        self,
        location: SourceLocation,
        code: DiagnosticCode,
        properties: Sequence[DiagnosticProperty],
        arg: object,
    ) -> Diagnostic:
        diagnostic = create_diagnostic(code, location, arg, properties=properties)
        self.forward(diagnostic)
        return diagnostic

    def forward(self, diagnostic: Diagnostic) -> None:
        logger.debug("%s %s at %s", diagnostic.severity.value, diagnostic.code.code, diagnostic.location)
        self._sink.report_diagnostic(diagnostic)
