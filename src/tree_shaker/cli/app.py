import logging
import os
from typing import Annotated

import typer

from tree_shaker.cli.shake import bundle, report, shake

app = typer.Typer(
    name="tree-shaker",
    help="Tree shaker: drop unused import declarations from ES module graphs.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    level = "DEBUG" if verbose else os.getenv("TREE_SHAKER_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


app.command("shake")(shake)
app.command("bundle")(bundle)
app.command("report")(report)


def main() -> None:
    app()
