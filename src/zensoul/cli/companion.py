"""CLI: zensoul suggest, zensoul affirm, zensoul sounds, zensoul journal"""

import json
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from zensoul.cli.practice import run_breathing, run_guided

console = Console()


def _get_client(need_oracle: bool = False):
    from zensoul.cli.main import _get_client
    return _get_client(need_oracle)


def _run(coro):
    from zensoul.cli.main import _run
    return _run(coro)


@click.command("suggest")
@click.argument("mood")
@click.option("--start", "start_now", is_flag=True, help="Start the suggested exercise right away")
@click.option("--cycles", default=3, type=click.IntRange(min=1))
@click.option("--json-output", "--json", is_flag=True)
def suggest_cmd(mood: str, start_now: bool, cycles: int, json_output: bool):
    """Ask the AI companion for an exercise that fits MOOD."""

    async def _suggest():
        client = _get_client(need_oracle=True)
        try:
            with console.status("Finding an exercise..."):
                result = await client.recommend(mood)
            if json_output:
                body = result.exercise.model_dump(by_alias=True) if result.exercise else None
                click.echo(json.dumps({"category": result.category, "message": result.message, "exercise": body}))
                return
            if not result.ok:
                console.print(f"[yellow]{result.message}[/yellow]")
                return
            exercise = result.exercise
            console.print(f"[green]{exercise.title}[/green] ({exercise.type})")
            console.print(exercise.description)
            for i, step in enumerate(exercise.steps, 1):
                seconds = f" ({step.duration}s)" if exercise.timed else ""
                console.print(f"  {i}. {step.label}{seconds}: {step.instruction}")
            console.print(f"[dim]Tip: {result.message}[/dim]")
            if start_now:
                console.print()
                if exercise.timed:
                    await run_breathing(client, cycles)
                else:
                    await run_guided(client)
        finally:
            await client.close()

    try:
        _run(_suggest())
    except (KeyboardInterrupt, click.Abort):
        console.print("\n[dim]Stopped.[/dim]")


@click.command("affirm")
@click.option("--mood", default=None, help="How you are feeling")
def affirm_cmd(mood: Optional[str]):
    """Print a personalized affirmation."""

    async def _affirm():
        client = _get_client(need_oracle=True)
        try:
            with console.status("Thinking..."):
                text = await client.affirmation(mood)
            console.print(f"[magenta]{text}[/magenta]")
        finally:
            await client.close()

    _run(_affirm())


@click.command("sounds")
@click.argument("mood")
@click.option("--json-output", "--json", is_flag=True)
def sounds_cmd(mood: str, json_output: bool):
    """Suggest relaxing sounds for MOOD (e.g. "ocean waves", "feeling stressed")."""

    async def _sounds():
        client = _get_client(need_oracle=True)
        try:
            with console.status("Curating sounds..."):
                result = await client.sounds(mood)
        finally:
            await client.close()
        if json_output:
            body = [c.model_dump() for c in result.categories]
            click.echo(json.dumps({"message": result.message, "sections": body}))
            return
        if not result.ok:
            console.print(f"[yellow]{result.message}[/yellow]")
        for category in result.categories:
            table = Table(title=category.section, title_justify="left")
            table.add_column("Track", style="green")
            table.add_column("Description")
            table.add_column("YouTube", style="dim")
            for track in category.tracks:
                table.add_row(track.title, track.description, track.youtube)
            console.print(table)

    _run(_sounds())


@click.command("journal")
@click.argument("entry", required=False)
@click.option("--file", "entry_file", type=click.File("r"), help="Read the entry from a file ('-' for stdin)")
def journal_cmd(entry: Optional[str], entry_file):
    """Get insights on a journal ENTRY. Nothing is stored."""
    if entry_file is not None:
        entry = entry_file.read()
    if not entry or not entry.strip():
        console.print("[red]Write something first: pass ENTRY or --file.[/red]")
        raise SystemExit(1)

    async def _analyze():
        client = _get_client(need_oracle=True)
        try:
            with console.status("Reading your entry..."):
                return await client.analyze_journal(entry)
        finally:
            await client.close()

    console.print(_run(_analyze()), markup=False)
