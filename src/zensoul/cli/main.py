"""
ZenSoul CLI — `zensoul` command.

Commands:
  zensoul exercises            List the exercise catalog
  zensoul breathe [key]        Run a timed breathing exercise
  zensoul guide [key]          Walk through a guided exercise, then get feedback
  zensoul suggest <mood>       Ask the AI companion for a new exercise
  zensoul affirm               Print an affirmation
  zensoul sounds <mood>        Suggest relaxing sounds
  zensoul journal <entry>      Get insights on a journal entry
  zensoul config <cmd>         Manage the Gemini API key
"""

import asyncio
import logging

try:
    import click
    from rich.console import Console
    from rich.logging import RichHandler
except ImportError:
    raise SystemExit("CLI requires extras: pip install zensoul[cli]")

from zensoul.client import AsyncZenSoul
from zensoul.config import load_settings
from zensoul.errors import ConfigError

console = Console()


def _get_client(need_oracle: bool = False) -> AsyncZenSoul:
    try:
        settings = load_settings()
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)
    if need_oracle and not settings.gemini_api_key:
        console.print("[red]No Gemini API key. Run `zensoul config set-key` or set GEMINI_API_KEY.[/red]")
        raise SystemExit(1)
    return AsyncZenSoul(settings=settings)


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option("0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output")
def main(verbose: bool):
    """ZenSoul CLI — breathe, ground yourself, and ask for a new exercise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


# Register subcommands from separate modules
from zensoul.cli.config import config
from zensoul.cli.exercises import exercises_cmd
from zensoul.cli.practice import breathe_cmd, guide_cmd
from zensoul.cli.companion import suggest_cmd, affirm_cmd, sounds_cmd, journal_cmd

main.add_command(config)
main.add_command(exercises_cmd)
main.add_command(breathe_cmd)
main.add_command(guide_cmd)
main.add_command(suggest_cmd)
main.add_command(affirm_cmd)
main.add_command(sounds_cmd)
main.add_command(journal_cmd)


if __name__ == "__main__":
    main()
