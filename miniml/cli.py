import logging
from pathlib import Path
from typing import Any

import typer
from lark.exceptions import UnexpectedInput
from rich.console import Console
from rich.logging import RichHandler

from miniml.ast.nodes import Program
from miniml.parser.parser import parse as miniml_parse
from miniml.typechecker.errors import TypeInferenceError
from miniml.typechecker.infer import infer_program
from miniml.typechecker.typecheck import get_type_str

app = typer.Typer(pretty_exceptions_enable=False)
console = Console()


@app.callback()
def configure(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        envvar="MINIML_VERBOSE",
        help="Log inference steps",
    ),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load(input_file: Path) -> Program:
    try:
        return miniml_parse(input_file)
    except UnexpectedInput as e:
        console.print(f"Syntax error: {e}", style="bold red", markup=False)
        raise typer.Exit(code=1)


@app.command()
def parse(
    input_file: Path = typer.Argument(..., exists=True, help="Path to input file"),
) -> None:
    console.print(_load(input_file))


@app.command()
def types(
    input_file: Path = typer.Argument(..., exists=True, help="Path to input file"),
) -> None:
    print(get_type_str(_load(input_file)).rstrip("\n"))


@app.command()
def typecheck(
    input_file: Path = typer.Argument(..., exists=True, help="Path to input file"),
) -> None:
    program = _load(input_file)
    try:
        infer_program(program)
    except TypeInferenceError as e:
        console.print(f"Type checking failed: {e}", style="bold red", markup=False)
        raise typer.Exit(code=1)
    console.print("Type checking succeeded", style="bold green")


def main() -> Any:
    return app()
