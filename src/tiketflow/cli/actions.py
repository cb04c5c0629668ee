"""CLI: tiketflow actions list|run"""

import json

import click
from rich.console import Console
from rich.table import Table

from tiketflow.controller import ControllerState, Notice
from tiketflow.errors import ControllerError
from tiketflow.forms import FormSession

console = Console()


def _get_client():
    from tiketflow.cli.main import _get_client
    return _get_client()


def _run(coro):
    from tiketflow.cli.main import _run
    return _run(coro)


def _print_notice(notice: Notice) -> None:
    color = "green" if notice.level == "success" else "red"
    console.print(f"[{color}]{notice.message}[/{color}]")


def _prompt_field(session: FormSession, name: str) -> None:
    slot = session.slot(name)
    field = slot.field
    label = field.display_label + (" *" if slot.required else "")
    current = slot.read(session.payload)

    if slot.widget == "switch":
        session.set_value(name, click.confirm(label, default=bool(current)))
        return
    if slot.widget == "select":
        if not field.options:
            console.print(f"[yellow]{field.display_label}: no options configured[/yellow]")
            return
        choice_type = click.Choice(field.options) if slot.required else None
        value = click.prompt(
            f"{label} [{'/'.join(field.options)}]", type=choice_type,
            default=current or "", show_default=False, show_choices=False,
        )
        session.set_value(name, value)
        return

    value = click.prompt(f"{label} ({slot.placeholder})", default=slot.display(session.payload), show_default=False)
    session.set_value(name, value)


@click.group()
def actions():
    """Ticket workflow actions."""


@actions.command("list")
@click.argument("ticket_id")
@click.option("--json-output", "--json", is_flag=True)
def actions_list(ticket_id, json_output):
    """List actions available on a ticket."""

    async def _list():
        async with _get_client() as client:
            items = await client.catalog.load_actions(ticket_id)
        if json_output:
            click.echo(json.dumps([a.model_dump(mode="json") for a in items], indent=2))
            return
        if not items:
            console.print(f"[yellow]No actions available for ticket {ticket_id}.[/yellow]")
            return
        table = Table(title=f"Actions for ticket {ticket_id}")
        table.add_column("ID", style="bold")
        table.add_column("Label")
        table.add_column("Variant")
        table.add_column("Form fields")
        for a in items:
            table.add_row(a.id, a.label, a.variant, ", ".join(f.name for f in a.require_form) or "-")
        console.print(table)

    _run(_list())


@actions.command("run")
@click.argument("ticket_id")
@click.argument("action_id")
def actions_run(ticket_id, action_id):
    """Run an action, prompting for its form fields if it has any."""

    async def _execute():
        async with _get_client() as client:
            controller = client.action_controller(ticket_id, notify=_print_notice)
            with console.status("Loading actions..."):
                await controller.refresh()
            try:
                session = await controller.select_action(action_id)
            except ControllerError as e:
                console.print(f"[red]{e}[/red]")
                raise SystemExit(1)

            pending = session.names if session else []
            while controller.state == ControllerState.AWAITING_FORM:
                for name in pending:
                    _prompt_field(session, name)
                if await controller.confirm():
                    break
                if session.errors:
                    for error in session.errors.values():
                        console.print(f"[red]{error.message}[/red]")
                    pending = list(session.errors)
                else:
                    pending = []
                    if not click.confirm("Retry?", default=True):
                        controller.cancel()

            if controller.last_error:
                raise SystemExit(1)

    _run(_execute())
