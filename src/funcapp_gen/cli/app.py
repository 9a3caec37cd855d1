import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from funcapp_gen.cli.archive import unpack
from funcapp_gen.cli.build import build
from funcapp_gen.cli.check import check
from funcapp_gen.cli.codes import codes

app = typer.Typer(
    name="funcapp-gen",
    help="funcapp-gen: check annotated services and generate function-app descriptors.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def _configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log analysis steps.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


app.command("check")(check)
app.command("build")(build)
app.command("unpack")(unpack)
app.command("codes")(codes)


def main() -> None:
    app()
