from rich.console import Console
from rich.table import Table

from funcapp_gen.core.diagnostics import DiagnosticCode

console = Console()


def codes() -> None:
    """List the diagnostic codes."""
    table = Table(show_lines=False)
    for header in ("code", "severity", "message"):
        table.add_column(header)
    for code in DiagnosticCode:
        table.add_row(code.code, code.severity.value, code.template)
    console.print(table)
    console.print(f"({len(DiagnosticCode)} codes)")

