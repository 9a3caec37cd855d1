from typing import Annotated

import typer
from rich.console import Console

from funcapp_gen.core.archive import extract_archive

console = Console()


def unpack(
    archive: Annotated[str, typer.Argument(help="Zip archive to unpack.")],
    target: Annotated[str, typer.Argument(help="Directory to unpack into.")],
) -> None:
    """Unpack a runtime template archive, refusing entries outside the target."""
    try:
        extract_archive(archive, target)
    except OSError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from None
    console.print(f"[green]Unpacked[/green] {archive} into {target}")
