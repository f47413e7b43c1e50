from __future__ import annotations

import pathlib
from typing import Optional

import click

from . import storage
from .csv_codec import is_csv_safe
from .errors import TodoListError
from .logging_config import setup_logging
from .repositories import TodoList
from .settings import STORAGE_FORMATS, get_settings
from .utils import parse_item_ref


class _Context:
    def __init__(self, name: str, fmt: str) -> None:
        self.name = name
        self.fmt = fmt

    def load(self) -> TodoList:
        try:
            return storage.load(self.name, self.fmt)
        except TodoListError as exc:
            raise click.ClickException(str(exc)) from exc

    def save(self, todo_list: TodoList) -> None:
        try:
            storage.save(todo_list, self.name, self.fmt)
        except TodoListError as exc:
            raise click.ClickException(str(exc)) from exc


def _render_bool(value: bool) -> str:
    return "true" if value else "false"


@click.group()
@click.option("--name", default=None, help="Storage file base name (default: $TODO_STORAGE_NAME or 'todo_list').")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(STORAGE_FORMATS),
    default=None,
    help="Storage format (default: $TODO_STORAGE_FORMAT or 'json').",
)
@click.pass_context
def main(ctx: click.Context, name: Optional[str], fmt: Optional[str]) -> None:
    """
    Manage a local todo list.
    """
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_json)
    ctx.obj = _Context(name or settings.storage_name, fmt or settings.storage_format)


@main.command()
@click.argument("description")
@click.pass_obj
def add(obj: _Context, description: str) -> None:
    """Add a new item."""
    if obj.fmt == "csv" and not is_csv_safe(description):
        raise click.ClickException("Descriptions stored as CSV cannot contain commas or line breaks.")
    todo_list = obj.load()
    try:
        inserted = todo_list.insert(description)
    except TodoListError as exc:
        raise click.ClickException(str(exc)) from exc
    if inserted:
        obj.save(todo_list)
        click.echo("Todo item saved!")
    else:
        click.echo("Todo item already exist!")


@main.command()
@click.argument("item")
@click.pass_obj
def remove(obj: _Context, item: str) -> None:
    """Remove an item by id or description."""
    todo_list = obj.load()
    ref = parse_item_ref(item)
    if isinstance(ref, int):
        removed = todo_list.remove_by_id(ref)
        if removed is None:
            click.echo(f"There is no item with the given id: {ref} !")
            return
    else:
        removed = todo_list.remove_by_description(ref)
        if removed is None:
            click.echo(f"There is no item with the given description: {item} !")
            return
    obj.save(todo_list)
    click.echo(f"Todo item deleted with success! -> {removed.id} : {removed.description}")


@main.command()
@click.argument("item")
@click.pass_obj
def update(obj: _Context, item: str) -> None:
    """Toggle the completion of an item by id or description."""
    todo_list = obj.load()
    ref = parse_item_ref(item)
    if isinstance(ref, int):
        done = todo_list.update_by_id(ref)
        label = "id"
    else:
        done = todo_list.update_by_description(ref)
        label = "description"
    if done is None:
        click.echo(f"There is no item with the given {label}: {ref} !")
        return
    obj.save(todo_list)
    click.echo(f"Todo item update with success! -> {ref} : {_render_bool(done)}")


@main.command()
@click.option("--compact", is_flag=True, help="Print compact JSON instead of indented JSON.")
@click.pass_obj
def show(obj: _Context, compact: bool) -> None:
    """Print the whole list as JSON."""
    todo_list = obj.load()
    click.echo(todo_list.to_json() if compact else todo_list.to_json_pretty())


@main.command()
@click.argument("path", required=False, type=click.Path(dir_okay=False, path_type=pathlib.Path))
@click.pass_obj
def export(obj: _Context, path: Optional[pathlib.Path]) -> None:
    """Write the list as CSV to PATH (default: <name>.csv)."""
    todo_list = obj.load()
    target = path or storage.storage_path(obj.name, "csv")
    unsafe = sorted(item.description for item in todo_list if not is_csv_safe(item.description))
    if unsafe:
        raise click.ClickException(
            "Cannot export items whose description contains a comma or line break: " + ", ".join(repr(d) for d in unsafe)
        )
    try:
        storage.save_path(todo_list, target, "csv")
    except TodoListError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Exported {len(todo_list)} item(s) to {target}")


@main.command(name="import")
@click.argument("path", required=False, type=click.Path(dir_okay=False, path_type=pathlib.Path))
@click.pass_obj
def import_(obj: _Context, path: Optional[pathlib.Path]) -> None:
    """Replace the list with the CSV content of PATH (default: <name>.csv)."""
    source = path or storage.storage_path(obj.name, "csv")
    if not source.exists():
        raise click.ClickException(f"No such file: {source}")
    try:
        todo_list = storage.load_path(source, "csv")
    except TodoListError as exc:
        raise click.ClickException(str(exc)) from exc
    obj.save(todo_list)
    click.echo(f"Imported {len(todo_list)} item(s) from {source}")


if __name__ == "__main__":
    main()
