"""Combinator command-line interface."""

from __future__ import annotations

from pathlib import Path

import click

from combinator import __version__
from combinator.arithmetic import parse_expression
from combinator.config import CombinatorConfig, find_config, load_config
from combinator.core import optional_string, sequence_all
from combinator.errors import CompileError, DiagnosticRenderer
from combinator.evaluator import evaluate_source
from combinator.primitives import char, ident, literal, nat
from combinator.regex import compile_pattern, parse_regex

# NAME=VALUE, value an optionally negative integer
_definition = sequence_all(
    [ident, char("="), optional_string(literal("-")), nat],
    lambda name, _eq, sign, value: (name, -value if sign else value),
)


def _load_config(config_path: str | None) -> CombinatorConfig:
    if config_path is not None:
        return load_config(Path(config_path))
    try:
        return load_config(find_config())
    except FileNotFoundError:
        return CombinatorConfig()


def _parse_definitions(definitions: tuple[str, ...]) -> dict[str, int]:
    store: dict[str, int] = {}
    for text in definitions:
        result = _definition.parse(text)
        if result is None or result[1]:
            raise click.BadParameter(
                f"expected NAME=INTEGER, got {text!r}", param_hint="'-D'",
            )
        name, value = result[0]
        store[name] = value
    return store


@click.group()
@click.version_option(__version__, prog_name="combinator")
def main() -> None:
    """Parser-combinator toolkit: evaluate arithmetic and match regular expressions."""


@main.command(name="eval")
@click.argument("expression")
@click.option(
    "-D", "--define", "definitions", multiple=True, metavar="NAME=VALUE",
    help="Bind an identifier to an integer.",
)
@click.option(
    "--config", "config_path", default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a combinator.toml file.",
)
@click.option("--no-color", is_flag=True, help="Disable colored diagnostics.")
def eval_cmd(
    expression: str, definitions: tuple[str, ...], config_path: str | None, no_color: bool,
) -> None:
    """Evaluate an arithmetic expression."""
    try:
        config = _load_config(config_path)
    except ValueError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)
    store = _parse_definitions(definitions)

    result = evaluate_source(expression, store, config=config.evaluation)
    if not result.ok:
        renderer = DiagnosticRenderer(color=config.output.color and not no_color)
        for diag in result.diagnostics:
            click.echo(renderer.render(diag, expression), err=True)
        raise SystemExit(1)
    click.echo(str(result.value))


@main.command(name="match")
@click.argument("pattern")
@click.argument("texts", nargs=-1, required=True)
@click.option("--no-color", is_flag=True, help="Disable colored diagnostics.")
def match_cmd(pattern: str, texts: tuple[str, ...], no_color: bool) -> None:
    """Match a regular expression against the start of each TEXT."""
    try:
        matcher = compile_pattern(pattern)
    except CompileError as e:
        renderer = DiagnosticRenderer(color=not no_color)
        for diag in e.diagnostics:
            click.echo(renderer.render(diag, pattern), err=True)
        raise SystemExit(1)

    for text in texts:
        result = matcher.parse(text)
        if result is None:
            click.echo(f"{text!r}: no match")
        else:
            matched, rest = result
            click.echo(f"{text!r}: matched {matched!r}, remainder {rest!r}")


@main.command()
@click.argument("source")
@click.option("--regex", "as_regex", is_flag=True, help="Parse SOURCE as a regular expression.")
def tree(source: str, as_regex: bool) -> None:
    """View the parse tree of an expression or regular expression."""
    kind = "regular expression" if as_regex else "arithmetic expression"
    try:
        node = parse_regex(source) if as_regex else parse_expression(source)
    except RecursionError:
        click.echo(f"error: {kind} is nested too deeply", err=True)
        raise SystemExit(1)
    if node is None:
        click.echo(f"error: not a valid {kind}: {source!r}", err=True)
        raise SystemExit(1)
    _dump_tree(node, 0)


def _dump_tree(node: object, depth: int) -> None:
    """Print a readable tree dump."""
    indent = "  " * depth
    name = type(node).__name__

    if hasattr(node, "__dataclass_fields__"):
        fields = node.__dataclass_fields__  # type: ignore[union-attr]
        children = [f for f in fields if f != "span"]
        click.echo(f"{indent}{name}")
        for field_name in children:
            value = getattr(node, field_name)
            if hasattr(value, "__dataclass_fields__"):
                click.echo(f"{indent}  {field_name}:")
                _dump_tree(value, depth + 2)
            else:
                click.echo(f"{indent}  {field_name}: {value!r}")
    else:
        click.echo(f"{indent}{name}: {node!r}")
