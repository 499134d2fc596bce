"""retain CLI — add, review, and inspect spaced-repetition items."""

import asyncio
import json
import logging
import sys
import time
from dataclasses import asdict
from datetime import date, datetime
from pathlib import Path
from typing import Annotated

import typer

from retain.application.analytics import SessionAnalytics
from retain.application.config import AppConfig, resolve_config
from retain.application.progress import (
    accuracy_change,
    average_accuracy,
    next_review_label,
    progress_percentage,
)
from retain.application.review_service import ReviewService
from retain.consts import VERSION
from retain.domain.errors import InvalidQualityError, RetainError
from retain.domain.timestamps import utc_now
from retain.domain.validation import validate_quality
from retain.infrastructure.json_store import JsonItemStore
from retain.infrastructure.sinks import NullSoundSink

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="retain: spaced-repetition flashcards in your terminal.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage retain configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


_LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO}


def _configure_logging(verbose: int) -> None:
    logging.getLogger("retain").setLevel(_LOG_LEVELS.get(verbose, logging.DEBUG))


def _build_service(
    config: AppConfig, analytics: SessionAnalytics | None = None
) -> ReviewService:
    return ReviewService(
        store=JsonItemStore(config.store_path),
        clock=utc_now,
        analytics=analytics,
        sound=NullSoundSink(),
        record_history=config.history_enabled,
    )


def _prompt_quality() -> int:
    while True:
        raw = typer.prompt("Grade (1-5)", type=int)
        try:
            return validate_quality(raw)
        except InvalidQualityError as e:
            typer.secho(str(e), fg="yellow")


def _run(coro):
    """Run a coroutine, turning domain errors into a red message and exit 1."""
    try:
        return asyncio.run(coro)
    except RetainError as e:
        typer.secho(f"Error: {e}", fg="red", err=True)
        raise typer.Exit(1)


def _json_default(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Path):
        return str(value)
    raise TypeError(f"Cannot serialize {type(value).__name__}")


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    store: Annotated[
        Path | None, typer.Option("--store", help="Path to the item store JSON file.")
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for retain."""
    ctx.ensure_object(dict)
    # Each -v adds one level on top of the configured verbosity
    config = resolve_config({"store_path": store})
    if verbose:
        config = resolve_config({"store_path": store, "verbose": config.verbose + verbose})
    _configure_logging(config.verbose)
    ctx.obj["config"] = config


def _config(ctx: typer.Context) -> AppConfig:
    return ctx.obj["config"]


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def version():
    """Print the installed version."""
    typer.echo(VERSION)


@app.command()
def add(
    ctx: typer.Context,
    question: Annotated[str, typer.Argument(help="Prompt side of the card.")],
    answer: Annotated[str, typer.Argument(help="Answer side of the card.")],
    tags: Annotated[
        str | None, typer.Option("--tags", "-t", help="Comma-separated tags.")
    ] = None,
):
    """[bold green]Add[/bold green] a new item, due immediately."""
    service = _build_service(_config(ctx))
    item = _run(service.create_item(question, answer, tags=tags))
    typer.echo(item.id)


@app.command("import")
def import_deck(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="YAML deck file.")],
):
    """Create items from a YAML deck file."""
    from retain.infrastructure.deck_loader import load_deck

    service = _build_service(_config(ctx))

    async def run():
        specs = load_deck(path)
        for spec in specs:
            await service.create_item(spec.question, spec.answer, tags=spec.tags)
        return len(specs)

    count = _run(run())
    typer.secho(f"Imported {count} item(s) from {path}.", fg="green")


@app.command()
def review(
    ctx: typer.Context,
    item_id: Annotated[str, typer.Argument(help="Item to grade.")],
    quality: Annotated[int, typer.Argument(help="Grade 1-5; 3 and above means recalled.")],
):
    """Grade an item and reschedule it."""
    service = _build_service(_config(ctx))
    item = _run(service.review(item_id, quality))

    color = "green" if quality >= 3 else "yellow"
    typer.secho(
        f"{item.id}: interval {item.interval} day(s), strength {item.strength_factor:.2f}, "
        f"next review {item.next_review_at.isoformat()}",
        fg=color,
    )


@app.command()
def study(
    ctx: typer.Context,
    limit: Annotated[int, typer.Option(help="Maximum items to study.")] = 20,
):
    """[bold green]Study[/bold green] due items interactively, then show a session report."""
    analytics = SessionAnalytics(clock=utc_now)
    service = _build_service(_config(ctx), analytics=analytics)

    async def run():
        items = (await service.due_queue())[:limit]
        for idx, item in enumerate(items, start=1):
            typer.echo(f"\n[{idx}/{len(items)}] {item.question}")
            started = time.monotonic()
            typer.prompt("Press Enter to reveal", default="", show_default=False)
            typer.echo(f"Answer: {item.answer}")
            quality = _prompt_quality()
            elapsed_ms = int((time.monotonic() - started) * 1000)

            updated = await service.review(item.id, quality, response_time_ms=elapsed_ms)
            typer.echo(f"Next review in {updated.interval} day(s).")
        service.finish_session()
        return len(items)

    studied = _run(run())
    if not studied:
        typer.secho("Nothing due.", fg="green")
        return

    report = analytics.report()
    typer.echo(
        f"\nSession: {report.total_reviewed} reviewed, {report.correct_answers} correct, "
        f"{report.incorrect_answers} incorrect"
    )
    typer.echo(f"Average response: {report.average_response_time_ms / 1000:.1f}s")
    if report.most_difficult:
        typer.echo(f"Most difficult: {', '.join(report.most_difficult)}")


@app.command()
def due(
    ctx: typer.Context,
    limit: Annotated[int, typer.Option(help="Maximum items to list.")] = 20,
):
    """List items due for review, earliest first."""
    service = _build_service(_config(ctx))
    items = _run(service.due_queue())

    if not items:
        typer.secho("Nothing due.", fg="green")
        return

    for item in items[:limit]:
        tags = f"  [{', '.join(sorted(item.tags))}]" if item.tags else ""
        typer.echo(f"{item.id}  {item.question}{tags}")
    typer.echo(f"\nDue: {len(items)}")


@app.command()
def search(
    ctx: typer.Context,
    query: Annotated[str, typer.Argument(help="Text to look for.")],
    tag: Annotated[
        list[str] | None, typer.Option("--tag", help="Require this tag. Repeatable.")
    ] = None,
):
    """Search items by text and tags."""
    from retain.application.cards import filter_by_tags, search_items, sort_items

    config = _config(ctx)
    store = JsonItemStore(config.store_path)
    items = _run(store.list_items())
    matches = sort_items(filter_by_tags(search_items(items, query), tag or []), "due")

    now = utc_now()
    for item in matches:
        typer.echo(f"{item.id}  {item.question}  ({next_review_label(item, now)})")
    typer.echo(f"\nMatches: {len(matches)}")


@app.command()
def stats(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show progress: stages, accuracy, and streak."""
    config = _config(ctx)
    service = _build_service(config)

    async def run():
        return await service.progress(), await service.daily()

    summary, days = _run(run())
    change = accuracy_change(days, window=config.recent_window_days)

    if json_output:
        payload = asdict(summary)
        payload["progress_percentage"] = progress_percentage(summary)
        payload["average_daily_accuracy"] = average_accuracy(days)
        payload["accuracy_change"] = change
        typer.echo(json.dumps(payload, indent=2, default=_json_default))
        return

    typer.echo(
        f"Items: {summary.total_cards}  Due: {summary.due_cards}  "
        f"New: {summary.new_cards}  Learning: {summary.learning_cards}  "
        f"Mastered: {summary.mastered_cards}"
    )
    typer.echo(f"Mastery: {progress_percentage(summary):.1f}%")
    typer.echo(
        f"Accuracy: {summary.accuracy:.1f}% "
        f"({summary.correct_reviews}/{summary.total_reviews} reviews)"
    )
    arrow = "+" if change >= 0 else "-"
    typer.echo(
        f"Recent change: {arrow}{abs(change):.1f}% vs. average "
        f"(last {config.recent_window_days} days)"
    )
    typer.echo(f"Streak: {summary.streak}")


@app.command()
def daily(
    ctx: typer.Context,
    days: Annotated[int, typer.Option(help="Number of most recent days to show.")] = 14,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show per-day review totals, newest first."""
    service = _build_service(_config(ctx))
    rollup = _run(service.daily())[:days]

    if json_output:
        typer.echo(
            json.dumps([asdict(d) for d in rollup], indent=2, default=_json_default)
        )
        return

    if not rollup:
        typer.secho("No reviews yet.", fg="yellow")
        return

    for day in rollup:
        typer.echo(
            f"{day.date.isoformat()}  reviewed {day.reviewed_count:>3}  "
            f"correct {day.correct_count:>3}  accuracy {day.accuracy:5.1f}%  "
            f"streak {day.streak}"
        )


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _config(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
