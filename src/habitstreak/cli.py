"""Command-line front end for HabitStreak."""

from __future__ import annotations

import functools

import click

from .config import BaseConfig
from .context import AppContext, create_app_context
from .errors import ConnectivityError, ValidationError
from .infra.database import store_errors
from .infra.indexes import HABIT_LOGS_BY_DATE_INDEX, create_composite_indexes, has_index
from .logging_config import setup_logging
from .services.diagnostics import check_connection, check_permissions


def _surface_errors(command):
    """Turn store and validation failures into CLI errors the user can retry."""

    @functools.wraps(command)
    def wrapper(*args, **kwargs):
        try:
            return command(*args, **kwargs)
        except ValidationError as exc:
            raise click.UsageError(str(exc)) from exc
        except ConnectivityError as exc:
            raise click.ClickException(f"Habit store unavailable: {exc}") from exc

    return wrapper


@click.group()
@click.option(
    "--verbose/--quiet",
    default=None,
    help="Console logging at INFO or WARNING level (default: HABITSTREAK_DEV_MODE)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool | None) -> None:
    """Track daily habits and their streaks."""

    config = BaseConfig()
    if verbose is not None:
        config.DEV_MODE = verbose
    setup_logging(config)
    try:
        app = create_app_context(config)
    except ConnectivityError as exc:
        raise click.ClickException(f"Habit store unavailable: {exc}") from exc
    ctx.obj = app
    ctx.call_on_close(app.dispose)


@cli.command("add")
@click.argument("name")
@click.option("--description", "-d", default=None, help="Optional description")
@click.pass_obj
@_surface_errors
def add_habit(app: AppContext, name: str, description: str | None) -> None:
    """Create a habit."""

    habit = app.tracker.add_habit(name, description)
    click.echo(f"Created habit {habit.id}: {habit.name}")


@cli.command("list")
@click.pass_obj
@_surface_errors
def list_habits(app: AppContext) -> None:
    """Show habits with their streak and today's state."""

    habits = app.tracker.list_habits_with_stats()
    if not habits:
        click.echo("No habits yet.")
    for item in habits:
        mark = "x" if item.completed_today else " "
        click.echo(f"[{mark}] {item.id}  {item.name}  streak={item.streak}")
    if app.index_advisory.message:
        click.secho(app.index_advisory.message, fg="yellow", err=True)


@cli.command("toggle")
@click.argument("habit_id")
@click.pass_obj
@_surface_errors
def toggle(app: AppContext, habit_id: str) -> None:
    """Mark today's completion on or off."""

    state = app.tracker.toggle_completion(habit_id)
    if state is None:
        raise click.ClickException(f"No habit with id {habit_id}")
    click.echo("Completed today." if state else "Marked as not completed today.")


@cli.command("history")
@click.argument("habit_id")
@click.pass_obj
@_surface_errors
def history(app: AppContext, habit_id: str) -> None:
    """List a habit's logs, newest first."""

    logs = app.tracker.get_history(habit_id)
    if not logs:
        click.echo("No history yet.")
    for log in logs:
        status = "done" if log.completed else "missed"
        line = f"{log.log_date:%a %b %d %Y}  {status}"
        if log.notes:
            line += f"  {log.notes}"
        click.echo(line)
    if app.index_advisory.message:
        click.secho(app.index_advisory.message, fg="yellow", err=True)


@cli.command("delete")
@click.argument("habit_id")
@click.confirmation_option(prompt="Delete this habit and its whole history?")
@click.pass_obj
@_surface_errors
def delete_habit(app: AppContext, habit_id: str) -> None:
    """Delete a habit and its logs."""

    if not app.tracker.delete_habit(habit_id):
        raise click.ClickException(f"No habit with id {habit_id}")
    click.echo("Habit deleted.")


@cli.command("create-indexes")
@click.pass_obj
@_surface_errors
def create_indexes(app: AppContext) -> None:
    """Provision the composite indexes used by history queries."""

    with store_errors("create indexes"):
        created = create_composite_indexes(app.engine)
    if created:
        click.echo(f"Created: {', '.join(created)}")
    else:
        click.echo("All indexes already exist.")


@cli.command("doctor")
@click.pass_obj
def doctor(app: AppContext) -> None:
    """Check store connectivity, permissions and indexes."""

    ok = check_connection(app.session_factory)
    click.echo(f"connection: {'ok' if ok else 'FAILED'}")
    permissions = check_permissions(app.session_factory)
    for name, granted in permissions.as_dict().items():
        click.echo(f"{name}: {'yes' if granted else 'NO'}")
    indexed = has_index(app.engine, HABIT_LOGS_BY_DATE_INDEX)
    click.echo(f"index {HABIT_LOGS_BY_DATE_INDEX}: {'present' if indexed else 'missing'}")
    if not (ok and permissions.all_granted):
        raise click.exceptions.Exit(1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
