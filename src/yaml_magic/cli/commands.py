"""
CLI commands for yaml_magic.

Reformats, inspects and edits YAML files while keeping their comments and
blank lines.
"""

from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from yaml_magic.core.document import YamlMagic
from yaml_magic.core.extractor import extract_annotations
from yaml_magic.core.nodes import Mapping
from yaml_magic.core.parser import YAMLParser
from yaml_magic.core.serializer import render
from yaml_magic.errors import YamlMagicError
from yaml_magic.utils.logging import setup_logging


def _fail(console: Console, logger, error: Exception) -> None:
    logger.error(f"Error: {error}")
    console.print(f"[bold red]Error: {escape(str(error))}[/bold red]")
    raise click.Abort()


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
@click.option("--debug", is_flag=True, help="Debug output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, debug: bool):
    """YamlMagic - edit YAML files without losing comments and blank lines."""
    log_level = "DEBUG" if debug else "INFO" if verbose else "WARNING"
    ctx.obj = setup_logging(log_level)


@cli.command("format")
@click.argument("yaml_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--check", is_flag=True, help="Only report whether the file would change")
@click.option("--header", default=None, help="Comment line written at the top of the file")
@click.pass_obj
def format_file(logger, yaml_file: Path, check: bool, header: Optional[str]):
    """Rewrite YAML_FILE in canonical layout, keeping comments."""
    console = Console()
    try:
        document = YamlMagic.load(str(yaml_file))
        original = yaml_file.read_text(encoding="utf-8")

        if check:
            if document.to_string() != original:
                console.print(f"[yellow]{yaml_file} would be reformatted[/yellow]")
                raise SystemExit(1)
            console.print(f"[green]{yaml_file} is already formatted[/green]")
            return

        document.save(header=header)
        logger.info(f"Formatted {yaml_file}")
        console.print(
            Panel.fit(
                f"[bold green]Formatted {yaml_file}[/bold green]",
                title="YamlMagic",
                border_style="green",
            )
        )
    except YamlMagicError as e:
        _fail(console, logger, e)


@cli.command("check")
@click.argument("yaml_files", nargs=-1, required=True, type=click.Path(dir_okay=False))
@click.pass_obj
def check_files(logger, yaml_files: Tuple[str, ...]):
    """Report which of YAML_FILES cannot be loaded as documents."""
    console = Console()
    failures = YAMLParser().check_files(list(yaml_files))

    if not failures:
        console.print(f"[green]{len(yaml_files)} file(s) OK[/green]")
        return

    table = Table(title="Invalid YAML files")
    table.add_column("File", style="cyan")
    table.add_column("Reason", style="red")
    for file_path, reason in failures.items():
        logger.error(f"{file_path}: {reason}")
        table.add_row(escape(file_path), escape(reason))
    console.print(table)
    raise SystemExit(1)


@cli.command("get")
@click.argument("yaml_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("key")
@click.pass_obj
def get_value(logger, yaml_file: Path, key: str):
    """Print the value stored under KEY."""
    console = Console()
    try:
        document = YamlMagic.load(str(yaml_file))
    except YamlMagicError as e:
        _fail(console, logger, e)

    node = document.node(key)
    if node is None:
        console.print(f"[bold red]Key not found: {key}[/bold red]")
        raise click.Abort()

    snippet = Mapping()
    snippet[key] = node
    console.print(Syntax(render(snippet).rstrip("\n"), "yaml"))


@cli.command("set")
@click.argument("yaml_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("key")
@click.argument("value")
@click.option("-c", "--comment", default=None, help="Comment placed above the key")
@click.pass_obj
def set_value(logger, yaml_file: Path, key: str, value: str, comment: Optional[str]):
    """Set KEY to VALUE (read as YAML) and save YAML_FILE."""
    console = Console()
    try:
        document = YamlMagic.load(str(yaml_file))
        document[key] = YAMLParser().parse_value(value)
        if comment:
            document.add_comment(comment, before=key)
        document.save()
    except YamlMagicError as e:
        _fail(console, logger, e)

    logger.info(f"Set {key} in {yaml_file}")
    console.print(f"[green]Set {key} in {yaml_file}[/green]")


@cli.command("annotations")
@click.argument("yaml_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def show_annotations(logger, yaml_file: Path):
    """List the comments and blank-line runs of YAML_FILE and their anchors."""
    console = Console()
    try:
        content, tree = YAMLParser().load_yaml_file(str(yaml_file))
    except YamlMagicError as e:
        _fail(console, logger, e)

    comments, break_lines = extract_annotations(content, tree)

    table = Table(title=f"Annotations in {yaml_file}")
    table.add_column("Kind", style="cyan")
    table.add_column("Anchor Key", style="magenta")
    table.add_column("Occurrence", style="green")
    table.add_column("Content")

    for comment in comments:
        table.add_row(
            "comment",
            comment.anchor_key or "-",
            str(comment.anchor_occurrence),
            escape(comment.text),
        )
    for break_line in break_lines:
        table.add_row(
            "blank",
            break_line.anchor_key or "-",
            str(break_line.anchor_occurrence),
            f"{break_line.count} line(s)",
        )

    console.print(table)
