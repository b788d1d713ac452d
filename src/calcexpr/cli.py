"""
calcexpr CLI.

Commands:
- eval:   Evaluate an expression with -v name=value bindings
- tokens: Show the lexer output and the expression's unknowns
- tree:   Show the parsed tree, fully parenthesised
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from pydantic import ValidationError
from rich.table import Table

from calcexpr._version import get_version
from calcexpr.core.config import CONFIG_FILENAME, DEFAULT_CONFIG, CalcConfig, load_config
from calcexpr.core.errors import CalcError
from calcexpr.core.expression_lang.evaluator import Number, evaluate_once
from calcexpr.core.expression_lang.lexer import lex
from calcexpr.core.expression_lang.parser import parse_expr

app = typer.Typer(
    help="Evaluate arithmetic expressions over named variables.",
    no_args_is_help=True,
)

console = Console()
logger = logging.getLogger("calcexpr.cli")


def version_callback(value: bool) -> None:
    """Print the calcexpr version and exit."""
    if value:
        console.print(f"calcexpr {get_version()}")
        raise typer.Exit()


def _fail(error: Exception) -> NoReturn:
    """Print an engine error and exit with status 1."""
    console.print(str(error), style="red", markup=False, highlight=False)
    raise typer.Exit(1)


def _config(ctx: typer.Context) -> CalcConfig:
    """Configuration loaded by the app callback."""
    return ctx.obj if isinstance(ctx.obj, CalcConfig) else DEFAULT_CONFIG


def parse_assignment(text: str) -> tuple[str, Number]:
    """Split a ``name=value`` binding from the command line."""
    name, sep, raw = text.partition("=")
    name = name.strip()
    raw = raw.strip()
    if not sep or not name:
        raise typer.BadParameter(f"Expected name=value, got {text!r}")
    try:
        value = float(raw)
    except ValueError:
        raise typer.BadParameter(f"Value for {name!r} is not a number: {raw!r}") from None
    if value.is_integer() and "." not in raw and "e" not in raw.lower():
        return name, int(raw)
    return name, value


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_path: Path = typer.Option(
        Path(CONFIG_FILENAME), "--config", "-c", help="Path to calcexpr.toml"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Load configuration and set up logging."""
    try:
        config = load_config(config_path)
    except ValidationError as e:
        _fail(e)
    ctx.obj = config
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.debug(f"Loaded configuration from {config_path}: {config}")


@app.command(name="eval")
def eval_command(
    ctx: typer.Context,
    expression: str = typer.Argument(..., help="Expression to evaluate"),
    var: list[str] = typer.Option(
        [], "--var", "-v", help="Variable binding as name=value (repeatable)"
    ),
) -> None:
    """Evaluate an expression."""
    bindings = dict(parse_assignment(item) for item in var)
    try:
        result = evaluate_once(expression, bindings, _config(ctx))
    except (CalcError, ArithmeticError, ValueError) as e:
        _fail(e)
    console.print(result)


@app.command(name="tokens")
def tokens_command(
    ctx: typer.Context,
    expression: str = typer.Argument(..., help="Expression to tokenize"),
) -> None:
    """Show the tokens and unknowns of an expression."""
    try:
        tokens, unknowns = lex(expression, max_length=_config(ctx).max_expression_length)
    except CalcError as e:
        _fail(e)

    table = Table(title="Tokens")
    table.add_column("#", justify="right")
    table.add_column("Kind")
    table.add_column("Value")
    table.add_column("Pos", justify="right")
    for i, tok in enumerate(tokens):
        table.add_row(str(i), str(tok.kind), tok.value, str(tok.pos))
    console.print(table)
    console.print(f"Unknowns: {', '.join(unknowns) if unknowns else '(none)'}")


@app.command(name="tree")
def tree_command(
    ctx: typer.Context,
    expression: str = typer.Argument(..., help="Expression to parse"),
) -> None:
    """Show the parsed expression, fully parenthesised."""
    try:
        tree, _ = parse_expr(expression, _config(ctx))
    except CalcError as e:
        _fail(e)
    console.print(str(tree), highlight=False, markup=False)


def main() -> None:
    """Entry point for the calcexpr console script."""
    app()


if __name__ == "__main__":
    main()
