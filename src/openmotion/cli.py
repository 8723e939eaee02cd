"""OpenMotion CLI - Task Planner."""

import json
import logging
import sys

import click

from .config import load_config
from .core.state import TaskNotFoundError
from .core.tasks import Priority, Task
from .workflows import (
    add as add_task,
    complete,
    delete as delete_task,
    export_calendar,
    get_store,
    list_tasks,
    reschedule as reschedule_tasks,
)

DATETIME_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M:%S"]


@click.group()
@click.version_option(package_name="openmotion")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, debug: bool):
    """OpenMotion - auto-scheduling task planner."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )
    config = load_config()
    store = get_store(config)
    ctx.obj = {"config": config, "store": store}
    # Short-lived process: write whatever is pending before exit
    ctx.call_on_close(store.close)


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _format_task(task: Task) -> str:
    check = "x" if task.completed else " "
    when = "--:--"
    if task.scheduled_start:
        when = f"{task.scheduled_start:%a %H:%M}-{task.scheduled_end:%H:%M}"
    due = f" (due {task.due:%Y-%m-%d %H:%M})" if task.due else ""
    tags = "".join(f" #{t}" for t in sorted(task.tags))
    return f"[{check}] {task.id[:8]} {when:15} [{task.priority.label:6}] {task.title} ({task.duration}m){due}{tags}"


@main.command()
@click.argument("title")
@click.option("--duration", "-d", type=int, default=None, help="Minutes (default from config)")
@click.option(
    "--priority",
    "-p",
    type=click.Choice([p.name.lower() for p in Priority], case_sensitive=False),
    default=None,
    help="Priority (default from config)",
)
@click.option("--due", type=click.DateTime(formats=DATETIME_FORMATS), default=None, help="Due date/time")
@click.option("--tag", "-t", "tags", multiple=True, help="Tag (repeatable)")
@click.pass_obj
def add(obj, title: str, duration: int | None, priority: str | None, due, tags: tuple[str, ...]):
    """Add a task and reschedule."""
    try:
        task = add_task(
            obj["config"], obj["store"], title, duration=duration, priority=priority, due=due, tags=list(tags)
        )
    except ValueError as e:
        _fail(e)
    click.echo(f"Added {task.id[:8]}: {task.title} at {task.scheduled_start:%a %H:%M}")


@main.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--all", "show_all", is_flag=True, help="Include completed tasks")
@click.pass_obj
def list_cmd(obj, as_json: bool, show_all: bool):
    """List tasks in schedule order."""
    try:
        tasks = list_tasks(obj["store"], include_completed=show_all)
    except ValueError as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps([t.to_dict() for t in tasks], indent=2))
        return

    if not tasks:
        click.echo("No tasks yet.")
        return

    click.echo(f"Tasks ({len(tasks)})")
    for task in tasks:
        click.echo(_format_task(task))


@main.command()
@click.argument("task_id")
@click.pass_obj
def done(obj, task_id: str):
    """Toggle a task's completion."""
    try:
        task = complete(obj["config"], obj["store"], task_id)
    except (TaskNotFoundError, ValueError) as e:
        _fail(e)
    state_label = "done" if task.completed else "not done"
    click.echo(f"✓ {task.title} marked {state_label}")


@main.command()
@click.argument("task_id")
@click.pass_obj
def delete(obj, task_id: str):
    """Delete a task."""
    try:
        task = delete_task(obj["config"], obj["store"], task_id)
    except (TaskNotFoundError, ValueError) as e:
        _fail(e)
    click.echo(f"Deleted {task.title}")


@main.command()
@click.pass_obj
def reschedule(obj):
    """Re-run the scheduler from now."""
    try:
        tasks = reschedule_tasks(obj["config"], obj["store"])
    except ValueError as e:
        _fail(e)
    pending = sum(1 for t in tasks if not t.completed)
    click.echo(f"Rescheduled {pending} pending tasks.")


@main.command()
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None, help="Output .ics path")
@click.pass_obj
def export(obj, output: str | None):
    """Export scheduled tasks as an .ics calendar."""
    try:
        path = export_calendar(obj["config"], obj["store"], output)
    except ValueError as e:
        _fail(e)
    click.echo(f"Calendar saved to {path}")


if __name__ == "__main__":
    main()
