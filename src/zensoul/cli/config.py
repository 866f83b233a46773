"""CLI: zensoul config set-key|show|clear"""

from typing import Optional

import click
from rich.console import Console

from zensoul.config import load_config, save_config

console = Console()


@click.group()
def config():
    """Gemini API key and model settings."""


@config.command("set-key")
@click.option("--model", default=None, help="Gemini model name")
def config_set_key(model: Optional[str]):
    """Store a Gemini API key in ~/.zensoul/config.json."""
    cfg = load_config()
    key = click.prompt("Gemini API key", hide_input=True)
    cfg["gemini_api_key"] = key.strip()
    if model:
        cfg["gemini_model"] = model
    save_config(cfg)
    console.print("[green]API key saved.[/green]")


@config.command("show")
def config_show():
    """Show current settings (API key masked)."""
    cfg = load_config()
    key = cfg.get("gemini_api_key")
    if key:
        console.print(f"[green]API key set[/green] (...{key[-4:]})")
    else:
        console.print("[yellow]No API key saved. Run `zensoul config set-key`.[/yellow]")
    for name in ("gemini_model", "base_url"):
        if cfg.get(name):
            console.print(f"{name}: {cfg[name]}")


@config.command("clear")
def config_clear():
    """Clear saved settings."""
    save_config({})
    console.print("[green]Settings cleared.[/green]")
