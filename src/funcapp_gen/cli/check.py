from collections.abc import Sequence
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from funcapp_gen.config import AnalyzerConfig
from funcapp_gen.core.diagnostics import CollectingSink, Diagnostic, DiagnosticSeverity
from funcapp_gen.core.pipeline import analyze_document
from funcapp_gen.core.syntax import parse_file

console = Console()

_SEVERITY_STYLES = {
    DiagnosticSeverity.ERROR: "red",
    DiagnosticSeverity.WARNING: "yellow",
    DiagnosticSeverity.INFO: "cyan",
}


def print_diagnostics(diagnostics: Sequence[Diagnostic]) -> None:
    for diagnostic in diagnostics:
        style = _SEVERITY_STYLES[diagnostic.severity]
        console.print(
            f"{escape(str(diagnostic.location))}: [{style}]{diagnostic.severity.value}[/{style}] "
            f"{diagnostic.code.code}: {escape(diagnostic.message)}",
            highlight=False,
        )


def resolve_config(strict: bool | None, auth_level: str | None, handler: str | None) -> AnalyzerConfig:
    config = AnalyzerConfig.from_env()
    if strict is not None:
        config.strict_paths = strict
    if auth_level is not None:
        config.default_auth_level = auth_level
    if handler is not None:
        config.handler_executable = handler
    return config


def check(
    path: Annotated[str, typer.Argument(help="Python module declaring services.")],
    strict: Annotated[
        bool | None, typer.Option("--strict/--lenient", help="Reject unsupported resource path segments.")
    ] = None,
) -> None:
    """Analyze a module and report diagnostics."""
    try:
        document = parse_file(path)
    except OSError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1) from None

    sink = CollectingSink()
    app = analyze_document(document, sink, resolve_config(strict, None, None))
    print_diagnostics(sink.diagnostics)
    if sink.has_errors:
        raise typer.Exit(1)
    console.print(f"[green]OK[/green] {len(app.functions)} function(s) in {path}")
