"""Command-line dispatcher for the task tracker.

Each process run performs exactly one command. Commands form a closed click
group; an unrecognised name is rejected at parse time, before the store is
touched. Store errors surface as 'Error: <message>' with exit status 1,
usage errors with exit status 2.
"""
from __future__ import annotations
import functools
from typing import List, Optional

import click

from config import StoreConfig
from models import DONE, IN_PROGRESS, Task, parse_timestamp
from storage import InvalidStatusError, TaskStore, TaskTrackerError
from theme import color, BOLD, HEADER_COLOR, ID_COLOR, RULE_COLOR, STATUS_COLOR

RULE = '-' * 40

# descriptions may start with '-' (e.g. "-5 degrees outside")
DESCRIPTION_SETTINGS = {'ignore_unknown_options': True}

USAGE = "\n".join((
    "Task Tracker CLI - Available commands:",
    '  add "description"         - Add a new task',
    '  update <id> "description" - Update a task',
    "  delete <id>               - Delete a task",
    "  mark-in-progress <id>     - Mark task as in-progress",
    "  mark-done <id>            - Mark task as done",
    "  list [status]             - List all tasks or filter by status",
    "                              Status can be: todo, in-progress, done",
    "  help                      - Show this help",
))


class TaskGroup(click.Group):
    """Group that reports unknown names as 'Unknown command: <name>'."""

    def resolve_command(self, ctx, args):
        cmd_name = click.utils.make_str(args[0])
        if (
            not cmd_name.startswith('-')
            and self.get_command(ctx, cmd_name) is None
            and not ctx.resilient_parsing
        ):
            raise click.UsageError(f"Unknown command: {cmd_name}", ctx)
        return super().resolve_command(ctx, args)


def reports_errors(f):
    """Turn store errors into click errors so they print as 'Error: ...'."""
    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except TaskTrackerError as exc:
            raise click.ClickException(str(exc)) from exc
    return wrapper


def _non_empty(ctx: click.Context, param: click.Parameter, value: str) -> str:
    if not value.strip():
        raise click.BadParameter("task description cannot be empty")
    return value


def _local_time(stamp: str) -> str:
    try:
        return parse_timestamp(stamp).astimezone().strftime('%Y-%m-%d %H:%M:%S')
    except ValueError:
        return stamp


def print_tasks(tasks: List[Task]) -> None:
    """Print one block per task separated by rule lines."""
    click.echo()
    click.echo(color('Tasks:', HEADER_COLOR, BOLD))
    click.echo(color(RULE, RULE_COLOR))
    for task in tasks:
        click.echo(f"ID: {color(str(task.id), ID_COLOR)}")
        click.echo(f"Description: {task.description}")
        click.echo(f"Status: {color(task.status, STATUS_COLOR.get(task.status, ''))}")
        click.echo(f"Created: {_local_time(task.created_at)}")
        click.echo(f"Updated: {_local_time(task.updated_at)}")
        click.echo(color(RULE, RULE_COLOR))


@click.group(name='task-cli', cls=TaskGroup, invoke_without_command=True)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Track short text tasks in a local JSON file."""
    if ctx.obj is None:
        ctx.obj = TaskStore(StoreConfig.from_env())
    if ctx.invoked_subcommand is None:
        click.echo(USAGE)


@cli.command('add', context_settings=DESCRIPTION_SETTINGS)
@click.argument('description', callback=_non_empty)
@click.pass_obj
@reports_errors
def add_cmd(store: TaskStore, description: str) -> None:
    """Add a new task."""
    task_id = store.add(description)
    click.echo(f"Task added successfully (ID: {task_id})")


@cli.command('update', context_settings=DESCRIPTION_SETTINGS)
@click.argument('task_id', metavar='ID', type=int)
@click.argument('description', callback=_non_empty)
@click.pass_obj
@reports_errors
def update_cmd(store: TaskStore, task_id: int, description: str) -> None:
    """Replace a task's description."""
    store.update(task_id, description)
    click.echo(f"Task {task_id} updated successfully.")


@cli.command('delete')
@click.argument('task_id', metavar='ID', type=int)
@click.pass_obj
@reports_errors
def delete_cmd(store: TaskStore, task_id: int) -> None:
    """Delete a task."""
    store.delete(task_id)
    click.echo(f"Task {task_id} deleted successfully.")


def _mark(store: TaskStore, task_id: int, status: str) -> None:
    store.set_status(task_id, status)
    click.echo(f"Task {task_id} marked as {status}")


@cli.command('mark-in-progress')
@click.argument('task_id', metavar='ID', type=int)
@click.pass_obj
@reports_errors
def mark_in_progress_cmd(store: TaskStore, task_id: int) -> None:
    """Mark a task as in-progress."""
    _mark(store, task_id, IN_PROGRESS)


@cli.command('mark-done')
@click.argument('task_id', metavar='ID', type=int)
@click.pass_obj
@reports_errors
def mark_done_cmd(store: TaskStore, task_id: int) -> None:
    """Mark a task as done."""
    _mark(store, task_id, DONE)


@cli.command('list')
@click.argument('status', required=False)
@click.pass_obj
@reports_errors
def list_cmd(store: TaskStore, status: Optional[str]) -> None:
    """List all tasks, or only those with STATUS."""
    if status is not None and status not in store.config.statuses:
        raise click.UsageError(str(InvalidStatusError(status, store.config.statuses)))
    tasks = store.list(status)
    if not tasks:
        click.echo(f'No tasks with status "{status}" found' if status else 'No tasks found')
        return
    print_tasks(tasks)


@cli.command('help')
def help_cmd() -> None:
    """Show available commands."""
    click.echo(USAGE)
