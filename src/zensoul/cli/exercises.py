"""CLI: zensoul exercises"""

import json

import click
from rich.console import Console
from rich.table import Table

from zensoul.catalog import ExerciseCatalog

console = Console()


@click.command("exercises")
@click.option("--json-output", "--json", is_flag=True)
def exercises_cmd(json_output: bool):
    """List available exercises."""
    catalog = ExerciseCatalog()
    if json_output:
        click.echo(json.dumps([e.model_dump(by_alias=True) for e in catalog], indent=2))
        return
    table = Table(title=f"Exercises ({len(catalog)} total)")
    table.add_column("Key", style="bold")
    table.add_column("Type")
    table.add_column("Title")
    table.add_column("Steps")
    for e in catalog:
        table.add_row(e.key, e.type, e.title, " / ".join(s.label for s in e.steps))
    console.print(table)
