"""CLI: zensoul breathe, zensoul guide"""

import asyncio

import click
from rich.console import Console

from zensoul.client import AsyncZenSoul
from zensoul.errors import SessionError
from zensoul.models.session import SessionEvent, SessionState

console = Console()


def _get_client(need_oracle: bool = False):
    from zensoul.cli.main import _get_client
    return _get_client(need_oracle)


def _run(coro):
    from zensoul.cli.main import _run
    return _run(coro)


def _print_step(client: AsyncZenSoul) -> None:
    step = client.session.step
    color = getattr(step, "color", "cyan")
    console.print(f"[bold {color}]{step.label}[/] {step.instruction}")


async def run_breathing(client: AsyncZenSoul, cycles: int) -> None:
    """Run the active breathing exercise until `cycles` full rounds have completed."""
    session = client.session
    done = asyncio.Event()
    completed = 0

    def on_event(event: str, state: SessionState) -> None:
        nonlocal completed
        if event == SessionEvent.TICK:
            console.print(f"  {state.remaining}", highlight=False)
        elif event == SessionEvent.ADVANCE:
            if state.step_index == 0:
                completed += 1
                console.print(f"[dim]cycle {completed}/{cycles}[/dim]")
                if completed >= cycles:
                    session.pause()
                    done.set()
                    return
            _print_step(client)

    remove = session.add_listener(on_event)
    console.print(f"[cyan]{session.exercise.title}[/cyan] (Ctrl+C to stop)\n")
    _print_step(client)
    session.start()
    try:
        await done.wait()
    finally:
        remove()
    if session.exercise.note:
        console.print(f"\n[dim]{session.exercise.note}[/dim]")


async def run_guided(client: AsyncZenSoul) -> None:
    """Prompt for an answer on every guided step, then print the companion's feedback."""
    session = client.session
    console.print(f"[cyan]{session.exercise.title}[/cyan]: {session.exercise.description}\n")
    session.start()
    for i in range(len(session.exercise.steps)):
        session.go_to(i)
        _print_step(client)
        answer = click.prompt(session.step.prompt or "Your answer", default="", show_default=False)
        session.record_response(answer)
    if not session.responses:
        console.print("[yellow]No answers recorded.[/yellow]")
        return
    with console.status("Asking for feedback..."):
        feedback = await client.feedback()
    if feedback:
        console.print(f"\n[green]{feedback}[/green]")


def _activate(client: AsyncZenSoul, exercise: str, timed: bool):
    try:
        active = client.switch_exercise(exercise)
    except SessionError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)
    if active.timed != timed:
        hint = "zensoul breathe" if active.timed else "zensoul guide"
        console.print(f"[red]{active.title} is a {active.type} exercise. Use `{hint}`.[/red]")
        raise SystemExit(1)
    return active


@click.command("breathe")
@click.argument("exercise", default="breathing-478")
@click.option("--cycles", default=3, type=click.IntRange(min=1), help="Full rounds before stopping")
def breathe_cmd(exercise: str, cycles: int):
    """Run a timed breathing exercise."""
    client = _get_client()
    _activate(client, exercise, timed=True)

    async def _breathe():
        try:
            await run_breathing(client, cycles)
        finally:
            await client.close()

    try:
        _run(_breathe())
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped.[/dim]")


@click.command("guide")
@click.argument("exercise", default="grounding-54321")
def guide_cmd(exercise: str):
    """Walk through a guided exercise and get AI feedback on your answers."""
    client = _get_client(need_oracle=True)
    _activate(client, exercise, timed=False)

    async def _guide():
        try:
            await run_guided(client)
        finally:
            await client.close()

    try:
        _run(_guide())
    except (KeyboardInterrupt, click.Abort):
        console.print("\n[dim]Stopped.[/dim]")
