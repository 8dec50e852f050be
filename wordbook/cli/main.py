"""
Typer CLI for the wordbook review engine.

Commands:
    wordbook db init                 - Initialize database tables
    wordbook add WORD...             - Add words to the learning set
    wordbook due                     - List words due for review
    wordbook stats                   - Show mastery level distribution
    wordbook review                  - Start an interactive review session
    wordbook notify show             - Show notification settings
    wordbook notify enable|disable   - Toggle review notifications globally
    wordbook notify policy NAME      - Configure one notification cadence
    wordbook watch                   - Run the background review checker

Usage:
    wordbook add serendipity ephemeral
    wordbook review
    wordbook notify policy daily --on --start 08:30
    wordbook watch --interval 30
"""

from __future__ import annotations

import time
from datetime import datetime
from zoneinfo import ZoneInfo

import typer
from loguru import logger
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from sqlalchemy import Engine

from wordbook.config import configure_logging, get_settings
from wordbook.core.errors import ConfigurationError, EmptySessionError
from wordbook.core.policies import NotificationPolicy
from wordbook.core.timeutils import utcnow
from wordbook.review import (
    BackgroundReviewChecker,
    DueItemScheduler,
    ReviewOutcome,
    ReviewRecordStore,
    ReviewSession,
    SettingsRepository,
)

app = typer.Typer(help="wordbook: spaced-repetition vocabulary review", no_args_is_help=True)
db_app = typer.Typer(help="Database management")
notify_app = typer.Typer(help="Review notification settings")
app.add_typer(db_app, name="db")
app.add_typer(notify_app, name="notify")

console = Console()


@app.callback()
def main_callback() -> None:
    """Spaced-repetition review engine for vocabulary flashcards."""
    configure_logging(get_settings())


# ========================================
# Context Builder (Dependency Injection)
# ========================================


class CLIContext:
    """Lazily initialized services shared by CLI commands."""

    def __init__(self, engine: Engine | None = None) -> None:
        self.engine = engine
        self._store: ReviewRecordStore | None = None
        self._settings_repo: SettingsRepository | None = None

    @property
    def store(self) -> ReviewRecordStore:
        if self._store is None:
            self._store = ReviewRecordStore(self.engine)
        return self._store

    @property
    def settings_repo(self) -> SettingsRepository:
        if self._settings_repo is None:
            self._settings_repo = SettingsRepository(self.engine)
        return self._settings_repo


def _build_context() -> CLIContext:
    return CLIContext()


def _local(value: datetime | None) -> str:
    if value is None:
        return "-"
    return value.astimezone().strftime("%Y-%m-%d %H:%M")


# ========================================
# Database
# ========================================


@db_app.command("init")
def db_init() -> None:
    """Create tables if they don't exist (safe to run multiple times)."""
    from wordbook.db.database import init_db

    init_db()
    rprint("[green]✓[/green] Database initialized!")


# ========================================
# Learning set
# ========================================


@app.command("add")
def add_words(words: list[str] = typer.Argument(..., help="Words to start learning")) -> None:
    """Add words to the learning set (existing words are left unchanged)."""
    ctx = _build_context()
    now = utcnow()
    for word in words:
        record = ctx.store.initialize_if_absent(word, now)
        rprint(f"[green]✓[/green] {word} [dim](next review {_local(record.next_due_at)})[/dim]")


@app.command("due")
def show_due(limit: int = typer.Option(50, "--limit", "-l", help="Max words to list")) -> None:
    """List words that are due for review."""
    ctx = _build_context()
    due = ctx.store.get_due_items(utcnow())

    if not due:
        rprint("[green]Nothing due for review.[/green]")
        return

    table = Table(title=f"{len(due)} words due")
    table.add_column("Word")
    table.add_column("Level", justify="right")
    table.add_column("Interval")
    table.add_column("Due since")

    for record in due[:limit]:
        table.add_row(
            record.item_id,
            str(record.mastery_level),
            record.interval_description,
            _local(record.next_due_at),
        )

    console.print(table)


@app.command("stats")
def show_stats() -> None:
    """Show how many words sit on each mastery level."""
    ctx = _build_context()
    stats = ctx.store.get_review_stats(utcnow())

    table = Table(title=f"{stats['total']} words ({stats['due']} due)")
    table.add_column("Level", justify="right")
    table.add_column("Words", justify="right")
    for key, value in stats.items():
        if key.startswith("level_"):
            table.add_row(key.removeprefix("level_"), str(value))

    console.print(table)


# ========================================
# Review
# ========================================


@app.command("review")
def review() -> None:
    """Review due words one at a time."""
    ctx = _build_context()
    session = ReviewSession(ctx.store)

    try:
        session.start(ctx.store.get_due_items(utcnow()))
    except EmptySessionError:
        rprint("[green]No words found for review.[/green]")
        return

    choices = {"r": ReviewOutcome.REMEMBERED, "f": ReviewOutcome.FORGOTTEN, "s": ReviewOutcome.SKIPPED}

    while not session.is_completed:
        record = session.current_item()
        console.print(
            Panel(
                f"[bold]{record.item_id}[/bold]",
                subtitle=f"{session.remaining_count} left · level {record.mastery_level}",
            )
        )
        answer = Prompt.ask("remembered (r) / forgot (f) / skip (s)", choices=list(choices), default="r")
        pending = session.record_decision(choices[answer])

        # Answer shown; the decision can still be changed until the user moves on
        while True:
            rprint(f"[dim]{record.item_id}: {pending.outcome.value}[/dim]")
            answer = Prompt.ask(
                "next (n) or change (r / f / s)", choices=["n", *choices], default="n"
            )
            if answer == "n":
                break
            pending = session.record_decision(choices[answer])

        session.advance()

    summary = session.summary()
    rprint(
        f"[bold]Done![/bold] {summary.remembered} remembered, "
        f"{summary.forgotten} forgotten, {summary.skipped} skipped"
    )
    if summary.failed_commits:
        rprint(f"[yellow]{summary.failed_commits} results could not be saved[/yellow]")


# ========================================
# Notifications
# ========================================


@notify_app.command("show")
def notify_show() -> None:
    """Show notification settings."""
    ctx = _build_context()
    repo = ctx.settings_repo

    enabled = repo.is_notification_permission_enabled()
    rprint(f"Notifications: {'[green]on[/green]' if enabled else '[red]off[/red]'}")

    table = Table()
    table.add_column("Policy")
    table.add_column("Enabled")
    table.add_column("Start")
    table.add_column("Cooldown")
    for entry in repo.get_all_policy_settings():
        table.add_row(
            f"[{entry.policy.color}]{entry.policy.display_name}[/]",
            "yes" if entry.enabled else "no",
            entry.start_time,
            str(entry.policy.cooldown),
        )
    console.print(table)


@notify_app.command("enable")
def notify_enable() -> None:
    """Allow review notifications."""
    _build_context().settings_repo.set_notification_permission_enabled(True)
    rprint("[green]✓[/green] Notifications enabled")


@notify_app.command("disable")
def notify_disable() -> None:
    """Turn off all review notifications."""
    _build_context().settings_repo.set_notification_permission_enabled(False)
    rprint("[green]✓[/green] Notifications disabled")


@notify_app.command("policy")
def notify_policy(
    name: str = typer.Argument(..., help="15m, hourly, daily, weekly or monthly"),
    enabled: bool | None = typer.Option(None, "--on/--off", help="Enable or disable"),
    start: str | None = typer.Option(None, "--start", help="Start time HH:MM"),
) -> None:
    """Configure one notification cadence."""
    repo = _build_context().settings_repo

    try:
        policy = NotificationPolicy.from_name(name)
        if start is not None:
            repo.set_policy_start_time(policy, start)
    except ConfigurationError as exc:
        rprint(f"[red]✗[/red] {exc}")
        raise typer.Exit(code=1)

    if enabled is not None:
        repo.set_policy_enabled(policy, enabled)

    rprint(
        f"[green]✓[/green] {policy.display_name}: "
        f"{'on' if repo.is_policy_enabled(policy) else 'off'} from {repo.get_policy_start_time(policy)}"
    )


@app.command("watch")
def watch(
    interval: float | None = typer.Option(
        None, "--interval", "-i", help="Seconds between checks (default from settings)"
    ),
) -> None:
    """Check for due words in the background and print reminders until Ctrl-C."""
    settings = get_settings()
    ctx = _build_context()
    tz = ZoneInfo(settings.timezone) if settings.timezone else None

    def show_reminder(count: int) -> None:
        console.print(
            Panel(f"You have [bold]{count}[/bold] words due for review!", title="Review Reminder")
        )

    scheduler = DueItemScheduler(ctx.store, ctx.settings_repo, show_reminder, tz=tz)
    checker = BackgroundReviewChecker(
        scheduler, interval_seconds=interval or settings.check_interval_seconds
    )
    checker.start()
    rprint("[dim]Watching for due words. Press Ctrl-C to stop.[/dim]")

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.debug("Interrupted by user")
    finally:
        checker.stop()
        ctx.store.close()


def run() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    run()
