import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tree_shaker.core.shaker import Bundle, tree_shaker
from tree_shaker.errors import TreeShakerError
from tree_shaker.loader.filesystem import get_loader
from tree_shaker.models import ShakerOptions

console = Console()
err_console = Console(stderr=True)


def _parse_chunk(value: str) -> tuple[str, str]:
    name, sep, entry = value.partition("=")
    if not sep or not name or not entry:
        raise typer.BadParameter(f"Expected NAME=ENTRY, got '{value}'.", param_hint="--chunk")
    return name, entry


def _build(options: ShakerOptions) -> Bundle:
    return asyncio.run(tree_shaker(options, get_loader()))


def shake(
    entry: Annotated[str, typer.Argument(help="Entry module specifier, e.g. ./src/index.js.")],
    parent: Annotated[Path, typer.Option(help="Base location the entry is resolved against.")] = Path("."),
    entry_only: Annotated[bool, typer.Option(help="Print only the entry module instead of the whole chunk.")] = False,
) -> None:
    """Print one chunk with unused imports removed."""
    shaken = _build(ShakerOptions(input=entry, parent=parent))
    try:
        code = shaken.shake() if entry_only else shaken.chunks[0].generate()
    except TreeShakerError as exc:
        err_console.print(f"[red]Failed[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    typer.echo(code, nl=False)


def bundle(
    chunk: Annotated[list[str], typer.Option("--chunk", "-c", help="Output NAME=ENTRY pair; repeatable.")],
    parent: Annotated[Path, typer.Option(help="Base location entries are resolved against.")] = Path("."),
    out_dir: Annotated[Path | None, typer.Option(help="Write each chunk to OUT_DIR/NAME instead of stdout.")] = None,
) -> None:
    """Build several chunks; failed chunks are reported and withheld."""
    chunks = dict(_parse_chunk(value) for value in chunk)
    results = _build(ShakerOptions(chunks=chunks, parent=parent)).generate_settled()

    for result in results:
        if result.code is None:
            err_console.print(f"[red]Failed[/red] chunk {result.name}: {escape(str(result.error))}")
            continue
        if out_dir is None:
            typer.echo(result.code, nl=False)
            continue
        target = out_dir / result.name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(result.code, encoding="utf-8")
        console.print(f"[green]Wrote[/green] chunk {result.name} to {target}")

    if any(not result.ok for result in results):
        raise typer.Exit(code=1)


def report(
    entry: Annotated[str, typer.Argument(help="Entry module specifier, e.g. ./src/index.js.")],
    parent: Annotated[Path, typer.Option(help="Base location the entry is resolved against.")] = Path("."),
) -> None:
    """List the import declarations that would be removed, per module."""
    built = _build(ShakerOptions(input=entry, parent=parent)).chunks[0]
    if built.error is not None:
        err_console.print(f"[red]Failed[/red] {escape(str(built.error))}")
        raise typer.Exit(code=1)

    table = Table(show_lines=False)
    for header in ("module", "source", "start", "end"):
        table.add_column(header)
    rows = 0
    removed = built.graph.removed_imports_by_module()
    for key in built.graph.dependency_order():
        for declaration in removed[key]:
            table.add_row(key, str(declaration.source), str(declaration.span.start), str(declaration.span.end))
            rows += 1
    console.print(table)
    console.print(f"({rows} rows)")
