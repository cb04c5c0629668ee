"""CLI: tiketflow services list"""

import json

import click
from rich.console import Console
from rich.table import Table

console = Console()


def _get_client():
    from tiketflow.cli.main import _get_client
    return _get_client()


def _run(coro):
    from tiketflow.cli.main import _run
    return _run(coro)


@click.group()
def services():
    """Service directory."""


@services.command("list")
@click.option("--json-output", "--json", is_flag=True)
def services_list(json_output):
    """List service categories."""

    async def _list():
        async with _get_client() as client:
            categories = await client.services.list_categories()
        if json_output:
            click.echo(json.dumps([c.model_dump(mode="json") for c in categories], indent=2))
            return
        table = Table(title=f"Service categories ({len(categories)})")
        table.add_column("Slug", style="bold")
        table.add_column("Name")
        table.add_column("Type")
        table.add_column("Form fields", justify="right")
        table.add_column("Active")
        for c in categories:
            table.add_row(c.slug, c.name, c.type, str(len(c.form_schema)), "yes" if c.is_active else "no")
        console.print(table)

    _run(_list())
