from typing import Annotated

import typer
from rich.console import Console

from funcapp_gen.cli.check import print_diagnostics, resolve_config
from funcapp_gen.core.diagnostics import CollectingSink
from funcapp_gen.core.generator import build as _build

console = Console()


def build(
    path: Annotated[str, typer.Argument(help="Python module declaring services.")],
    output: Annotated[str, typer.Option("--output", "-o", help="Directory to write the function app to.")] = "target",
    template: Annotated[
        str | None, typer.Option(help="Runtime template archive to unpack into the output directory.")
    ] = None,
    strict: Annotated[
        bool | None, typer.Option("--strict/--lenient", help="Reject unsupported resource path segments.")
    ] = None,
    auth_level: Annotated[str | None, typer.Option(help="Default auth level for HTTP services.")] = None,
    handler: Annotated[str | None, typer.Option(help="Custom handler executable named in host.json.")] = None,
) -> None:
    """Generate host.json and function.json files for a module."""
    sink = CollectingSink()
    try:
        result = _build(path, output, sink, resolve_config(strict, auth_level, handler), template)
    except OSError as exc:
        print_diagnostics(sink.diagnostics)
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from None

    print_diagnostics(sink.diagnostics)
    if result.has_errors:
        console.print("[red]Build failed[/red]")
        raise typer.Exit(1)
    for function in result.app.functions:
        console.print(f"[green]Generated[/green] {function.name} ({function.handler})")
    console.print(f"[green]Wrote[/green] {len(result.written)} file(s) to {output}")
