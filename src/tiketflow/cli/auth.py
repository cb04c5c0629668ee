"""CLI: tiketflow auth login|status|logout"""

from typing import Optional

import click
from rich.console import Console

from tiketflow.transport.http import DEFAULT_BASE_URL

console = Console()


def _load_config() -> dict:
    from tiketflow.cli.main import _load_config
    return _load_config()


def _save_config(cfg: dict) -> None:
    from tiketflow.cli.main import _save_config
    _save_config(cfg)


@click.group()
def auth():
    """Authentication commands."""


@auth.command("login")
@click.option("--token", default=None, help="API bearer token")
@click.option("--base-url", default=None, help="Backend API base URL")
def auth_login(token: Optional[str], base_url: Optional[str]):
    """Save an API token for later commands."""
    cfg = _load_config()
    if not token:
        token = click.prompt("Token", hide_input=True)
    url = base_url or cfg.get("base_url", DEFAULT_BASE_URL)
    _save_config({**cfg, "token": token, "base_url": url})
    console.print(f"[green]Token saved for {url}[/green]")
    console.print("[dim]Config written to ~/.tiketflow/config.json[/dim]")


@auth.command("status")
def auth_status():
    """Show current auth status."""
    cfg = _load_config()
    if cfg.get("token"):
        console.print(f"[green]Logged in[/green] to {cfg.get('base_url', DEFAULT_BASE_URL)}")
    else:
        console.print("[yellow]Not logged in. Run `tiketflow auth login`.[/yellow]")


@auth.command("logout")
def auth_logout():
    """Clear saved credentials."""
    _save_config({})
    console.print("[green]Logged out.[/green]")
