"""
tiketflow CLI — `tiketflow` command.

Commands:
  tiketflow auth login             Save an API token
  tiketflow actions list <ticket>  Workflow actions available on a ticket
  tiketflow actions run <ticket> <action>
                                   Run an action, prompting for its form
  tiketflow services list          Service categories
"""

import asyncio
import json
import logging
from pathlib import Path

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install tiketflow[cli]")

from tiketflow.client import AsyncTiketFlow

console = Console()
CONFIG_FILE = Path.home() / ".tiketflow" / "config.json"


def _load_config() -> dict:
    try:
        return json.loads(CONFIG_FILE.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _save_config(cfg: dict) -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(cfg, indent=2))


def _get_client() -> AsyncTiketFlow:
    cfg = _load_config()
    if not cfg.get("token"):
        console.print("[red]Not logged in. Run `tiketflow auth login` first.[/red]")
        raise SystemExit(1)
    if cfg.get("base_url"):
        return AsyncTiketFlow.from_env(token=cfg["token"], base_url=cfg["base_url"])
    return AsyncTiketFlow.from_env(token=cfg["token"])


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option("0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Log HTTP and workflow activity")
def main(verbose: bool):
    """tiketflow CLI — ticket workflow actions from the terminal."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register subcommands from separate modules
from tiketflow.cli.auth import auth
from tiketflow.cli.actions import actions
from tiketflow.cli.services import services

main.add_command(auth)
main.add_command(actions)
main.add_command(services)


if __name__ == "__main__":
    main()
