"""Mandalart CLI."""

import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from mandalart.errors import AuthError, MandalartError

console = Console()


def _fail(message: str):
    console.print(f"[red]Failed: {message}[/red]")
    raise click.exceptions.Exit(1)


def _get_app():
    from .app import build_app

    try:
        return build_app()
    except MandalartError as e:
        _fail(str(e))


def _logged_in_controller(app):
    """Controller for history commands; generation is never called, so no API key is needed."""
    from .controller import MandalartController

    controller = MandalartController(
        generator=None,
        history=app.history,
        user=app.auth.current_user(),
        locale=app.config.locale,
        events=app.events,
    )
    if controller.user is None:
        console.print("[yellow]Not logged in. Run 'mandalart login <email>' first.[/yellow]")
        raise click.exceptions.Exit(1)
    return controller


def _resolve_id(controller, prefix: str) -> str:
    """Accept a full history id or a unique prefix of one."""
    matches = [item.id for item in controller.history() if item.id.startswith(prefix)]
    if not matches:
        _fail(f"No saved mandalart matches {prefix}")
    if len(matches) > 1:
        _fail(f"Ambiguous id {prefix}: {len(matches)} matches")
    return matches[0]


class MandalartGroup(click.Group):
    """Reports planner errors as a message and exit code 1 instead of a traceback."""

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except MandalartError as e:
            _fail(str(e))


@click.group(cls=MandalartGroup)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def main(verbose: bool):
    """Mandalart - turn a goal into a 9x9 action plan."""
    from .config import env_flag
    from .logging import setup_logging

    debug = verbose or env_flag("MANDALART_DEBUG")
    setup_logging(logging.DEBUG if debug else logging.WARNING)


@main.command()
def version():
    """Show version."""
    from . import __version__
    console.print(f"mandalart v{__version__}")


@main.command()
def init():
    """Initialize the database tables."""
    from .config import AppConfig
    from .db.migrations import run_migrations

    config = AppConfig.from_env()
    if config.backend == "local":
        console.print(f"[blue]Local backend: data is kept in {config.home_dir / 'local'}[/blue]")
        return

    try:
        db_path = config.db_path
    except MandalartError as e:
        _fail(str(e))
    console.print(f"[blue]Initializing database at {db_path}[/blue]")
    run_migrations(db_path)
    console.print("[green]Database initialized successfully![/green]")


@main.command(name="config")
def show_config():
    """Show the active configuration and any problems."""
    from .config import AppConfig

    config = AppConfig.from_env()
    try:
        console.print(config.display())
    except MandalartError as e:
        console.print(f"[red]{e}[/red]")
    try:
        config.validate()
        console.print("[green]Configuration OK[/green]")
    except MandalartError as e:
        console.print(f"[yellow]{e}[/yellow]")


@main.command()
@click.argument("email")
@click.option("--password", "-p", prompt=True, hide_input=True, default="", show_default=False,
              help="Password (ignored by the local backend)")
def login(email: str, password: str):
    """Log in, creating the account on first use."""
    app = _get_app()
    try:
        user = app.auth.login(email, password)
    except AuthError as e:
        _fail(str(e))
    console.print(f"[green]Logged in as {user.name} <{user.email}>[/green]")


@main.command()
def logout():
    """Log out."""
    app = _get_app()
    app.auth.logout()
    console.print("[green]Logged out[/green]")


@main.command()
def whoami():
    """Show the logged-in user."""
    app = _get_app()
    user = app.auth.current_user()
    if user is None:
        console.print("[yellow]Not logged in[/yellow]")
        return
    console.print(f"{user.name} <{user.email}> [dim]{user.id}[/dim]")


@main.command()
@click.argument("goal", required=False)
def new(goal: Optional[str]):
    """Create a new Mandalart: goal, interview, grid."""
    from .render.console import render_grid

    app = _get_app()
    try:
        controller = app.controller()
    except MandalartError as e:
        _fail(str(e))

    if controller.user is None:
        console.print("[yellow]Not logged in: the plan will not be saved.[/yellow]")

    goal = goal or click.prompt("What is your main goal?", default="", show_default=False)
    if not goal.strip():
        console.print("[yellow]No goal given[/yellow]")
        return

    with console.status("Preparing questions..."):
        ok = controller.submit_goal(goal)
    if not ok:
        _fail(controller.error)

    for index, question in enumerate(controller.questions):
        console.print(f"\n[bold]Question {index + 1} of {len(controller.questions)}[/bold]")
        answer = ""
        while not answer.strip():
            answer = click.prompt(question.text)
        controller.set_answer(index, answer)

    while True:
        with console.status(f"Structuring \"{controller.goal}\" into 64 tasks..."):
            ok = controller.generate()
        if ok:
            break
        console.print(f"[red]{controller.error}[/red]")
        if not click.confirm("Try again?", default=True):
            raise click.exceptions.Exit(1)

    console.print(render_grid(controller.document, app.config.locale))
    if controller.error:
        console.print(f"[yellow]{controller.error}[/yellow]")
    if controller.active_history_id:
        console.print(f"[green]Saved as {controller.active_history_id}[/green]")


@main.command()
def history():
    """List saved Mandalarts, newest first."""
    from .render.console import render_history

    app = _get_app()
    controller = _logged_in_controller(app)
    items = controller.history()
    if not items:
        console.print("[yellow]No saved goals yet[/yellow]")
        return
    console.print(f"\n[bold]History: {len(items)} plans[/bold]")
    console.print(render_history(items))


@main.command()
@click.argument("history_id")
def show(history_id: str):
    """Show a saved grid."""
    from .render.console import render_grid

    app = _get_app()
    controller = _logged_in_controller(app)
    item = controller.open_history_item(_resolve_id(controller, history_id))
    console.print(render_grid(item.data, app.config.locale))


@main.command()
@click.argument("history_id")
@click.argument("sub_goal", type=click.IntRange(1, 8))
@click.argument("task", type=click.IntRange(1, 8))
def task(history_id: str, sub_goal: int, task: int):
    """Show one task's details (SUB_GOAL and TASK are 1-8)."""
    from .render.console import render_task_detail

    app = _get_app()
    controller = _logged_in_controller(app)
    item = controller.open_history_item(_resolve_id(controller, history_id))
    selected = item.data.sub_goals[sub_goal - 1]
    console.print(render_task_detail(selected, selected.tasks[task - 1], f"{sub_goal}.{task}"))


@main.command()
@click.argument("history_id")
@click.argument("row", type=click.IntRange(1, 9))
@click.argument("col", type=click.IntRange(1, 9))
def cell(history_id: str, row: int, col: int):
    """Show the task at grid ROW and COL (1-9, as printed by 'show')."""
    from .render.console import render_task_detail
    from .render.grid import locate_task

    app = _get_app()
    controller = _logged_in_controller(app)
    item = controller.open_history_item(_resolve_id(controller, history_id))
    located = locate_task(row - 1, col - 1)
    if located is None:
        console.print(f"[yellow]Cell {row},{col} holds a goal title, not a task[/yellow]")
        return
    sub_goal, task_index = located
    selected = item.data.sub_goals[sub_goal]
    console.print(render_task_detail(selected, selected.tasks[task_index], f"{sub_goal + 1}.{task_index + 1}"))


@main.command()
@click.argument("history_id")
@click.argument("sub_goal", type=click.IntRange(1, 8))
@click.argument("task", type=click.IntRange(1, 8))
@click.argument("item")
def toggle(history_id: str, sub_goal: int, task: int, item: str):
    """Check or uncheck a checklist ITEM (its id or 1-based position)."""
    from .render.console import render_task_detail

    app = _get_app()
    controller = _logged_in_controller(app)
    controller.open_history_item(_resolve_id(controller, history_id))

    current = controller.document.task(sub_goal - 1, task - 1)
    item_id = item
    if item.isdigit() and current.find_item(item) is None:
        position = int(item)
        if not 1 <= position <= len(current.checklist):
            _fail(f"Checklist has {len(current.checklist)} items")
        item_id = current.checklist[position - 1].id

    try:
        updated = controller.toggle_item(sub_goal - 1, task - 1, item_id)
    except KeyError as e:
        _fail(str(e))
    if controller.error:
        _fail(controller.error)

    console.print(render_task_detail(controller.document.sub_goals[sub_goal - 1], updated, f"{sub_goal}.{task}"))


@main.command()
@click.argument("history_id")
def delete(history_id: str):
    """Delete a saved Mandalart."""
    app = _get_app()
    controller = _logged_in_controller(app)
    resolved = _resolve_id(controller, history_id)
    controller.delete_history_item(resolved)
    console.print(f"[yellow]Deleted: {resolved}[/yellow]")


@main.command()
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
def clear(yes: bool):
    """Delete all saved Mandalarts."""
    app = _get_app()
    controller = _logged_in_controller(app)
    if not yes and not click.confirm("Delete your whole history?"):
        return
    removed = controller.clear_history()
    console.print(f"[yellow]Deleted {removed} plans[/yellow]")


@main.command()
@click.argument("history_id")
@click.option("--output", "-o", type=click.Path(file_okay=False, path_type=Path), default=Path("."),
              help="Directory for the PNG")
def export(history_id: str, output: Path):
    """Export a saved grid as a PNG image."""
    from .render.export import export_png

    app = _get_app()
    controller = _logged_in_controller(app)
    item = controller.open_history_item(_resolve_id(controller, history_id))
    try:
        result = export_png(item.data, output, app.config.locale, events=app.events)
    except MandalartError as e:
        _fail(str(e))
    console.print(f"[green]Saved image: {result.path}[/green]")


if __name__ == "__main__":
    main()
