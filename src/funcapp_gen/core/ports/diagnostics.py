from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from funcapp_gen.core.diagnostics import Diagnostic


class DiagnosticSink(Protocol):
    def report_diagnostic(self, diagnostic: "Diagnostic") -> None: ...
