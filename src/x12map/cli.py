import logging
from pathlib import Path
from typing import Any

import orjson
import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler

from x12map.errors import X12MapError
from x12map.mapping.loader import MapFile, load_map_file
from x12map.mapping.reviver import dump_map
from x12map.maps.ts944 import CATALOG
from x12map.segment import DEFAULT_FIELD_TERMINATOR, Delimiters
from x12map.transaction import Transaction

app = typer.Typer(help="Map X12 documents to JSON and back.")
console = Console()

FIELD_TERMINATOR_OPTION = typer.Option(
    DEFAULT_FIELD_TERMINATOR, "--field-terminator", "-f", help="Separator between fields."
)
LINE_TERMINATOR_OPTION = typer.Option(
    "\\n", "--line-terminator", "-l", help="Separator between segments; escapes like \\n or ~\\n."
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log extraction details."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _unescape(value: str) -> str:
    if not value:
        raise typer.BadParameter("Terminators must not be empty.")
    return value.encode("latin-1", "backslashreplace").decode("unicode_escape")


def _read_text(path: Path) -> str:
    if not path.is_file():
        raise typer.BadParameter(f"Input file not found: {path}")
    return path.read_text(encoding="utf-8")


def _load_map(path: Path) -> MapFile:
    if not path.is_file():
        raise typer.BadParameter(f"Map file not found: {path}")
    try:
        return load_map_file(path)
    except (ValueError, KeyError, TypeError, yaml.YAMLError) as exc:
        raise typer.BadParameter(f"Invalid map file {path}: {exc}") from exc


def _load_transaction(input: Path, field_terminator: str, line_terminator: str) -> Transaction:
    delimiters = Delimiters(
        field_terminator=_unescape(field_terminator), line_terminator=_unescape(line_terminator)
    )
    return Transaction.from_text(_read_text(input), delimiters)


def _emit(payload: Any, output: Path | None) -> None:
    if output:
        output.write_bytes(orjson.dumps(payload, option=orjson.OPT_INDENT_2))
        console.print(f"[bold green]Wrote[/] {output}")
    else:
        typer.echo(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())


@app.command()
def segments(
    input: Path = typer.Argument(..., help="X12 document to parse."),
    map_file: Path | None = typer.Option(
        None, "--map", "-m", help="Map file whose loop definitions should be run."
    ),
    infer_loops: bool = typer.Option(False, "--infer-loops", help="Infer one loop from repeats."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Optional path for JSON."),
    field_terminator: str = FIELD_TERMINATOR_OPTION,
    line_terminator: str = LINE_TERMINATOR_OPTION,
) -> None:
    """Dump parsed segments (and loop groups) as JSON."""
    transaction = _load_transaction(input, field_terminator, line_terminator)
    if map_file:
        _load_map(map_file).apply(transaction)
    if infer_loops:
        transaction.infer_loops()
    _emit(transaction.to_dict(), output)


@app.command("type")
def transaction_type(
    input: Path = typer.Argument(..., help="X12 document to inspect."),
    field_terminator: str = FIELD_TERMINATOR_OPTION,
    line_terminator: str = LINE_TERMINATOR_OPTION,
) -> None:
    """Print the transaction set identifier (ST01)."""
    transaction = _load_transaction(input, field_terminator, line_terminator)
    try:
        code = transaction.get_type()
    except X12MapError as exc:
        console.print(f"[bold red]{exc}[/]")
        raise typer.Exit(code=1) from exc
    console.print(code.content)


@app.command("map")
def map_document(
    input: Path = typer.Argument(..., help="X12 document to map."),
    map_file: Path = typer.Option(..., "--map", "-m", help="YAML or JSON map file."),
    infer_loops: bool = typer.Option(
        False, "--infer-loops", help="Infer a loop when the map file defines none."
    ),
    output: Path | None = typer.Option(None, "--output", "-o", help="Optional path for JSON."),
    field_terminator: str = FIELD_TERMINATOR_OPTION,
    line_terminator: str = LINE_TERMINATOR_OPTION,
) -> None:
    """Extract a JSON tree from an X12 document."""
    transaction = _load_transaction(input, field_terminator, line_terminator)
    spec = _load_map(map_file)
    spec.apply(transaction)
    if infer_loops and not spec.loops:
        transaction.infer_loops()
    _emit(transaction.map_segments(spec.map), output)


@app.command()
def generate(
    data: Path = typer.Argument(..., help="JSON tree produced by `map` or by hand."),
    map_file: Path = typer.Option(..., "--map", "-m", help="YAML or JSON map file."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Optional path for X12."),
    field_terminator: str = FIELD_TERMINATOR_OPTION,
    line_terminator: str = LINE_TERMINATOR_OPTION,
) -> None:
    """Render X12 text from a JSON tree."""
    try:
        payload = orjson.loads(_read_text(data))
    except orjson.JSONDecodeError as exc:
        raise typer.BadParameter(f"Invalid JSON in {data}: {exc}") from exc
    spec = _load_map(map_file)
    text = Transaction().to_x12(
        payload,
        spec.map,
        field_terminator=_unescape(field_terminator),
        line_terminator=_unescape(line_terminator),
    )
    if output:
        output.write_text(text)
        console.print(f"[bold green]Wrote[/] {output}")
    else:
        typer.echo(text, nl=False)


@app.command()
def catalog(
    name: str = typer.Argument(..., help=f"Bundled map name: {', '.join(sorted(CATALOG))}."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Optional path for JSON."),
) -> None:
    """Export a bundled map as a JSON map file."""
    if name not in CATALOG:
        raise typer.BadParameter(f"Unknown map '{name}'. Choose from {sorted(CATALOG)}.")
    _emit({"name": name, "map": dump_map(CATALOG[name])}, output)


if __name__ == "__main__":
    app()
