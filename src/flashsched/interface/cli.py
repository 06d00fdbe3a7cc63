"""flashsched CLI — study queue, review and statistics commands over a deck file."""

import asyncio
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from flashsched.application.config import AppConfig, resolve_config
from flashsched.application.scheduling import StudyService, quality_label
from flashsched.domain.scheduling.models import Card, ResponseCategory
from flashsched.infrastructure.adapters.json_store import JsonCardStore

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="flashsched: SM-2 spaced-repetition scheduler for flashcard decks.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage flashsched configuration.")
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

DeckOption = Annotated[
    Path | None,
    typer.Option("--deck", help="Path to the JSON deck file. Defaults to config, or ./deck.json."),
]


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for flashsched."""
    ctx.ensure_object(dict)
    ctx.obj["verbose_bonus"] = verbose


def _set_verbosity(level: int) -> None:
    if level <= 0:
        log_level = logging.WARNING
    elif level == 1:
        log_level = logging.INFO
    else:
        log_level = logging.DEBUG
    logging.getLogger("flashsched").setLevel(log_level)


def _resolve(overrides: dict | None = None) -> AppConfig:
    """Resolve configuration, turning invalid settings into a clean exit."""
    try:
        return resolve_config(overrides)
    except ValidationError as e:
        typer.secho(f"Invalid configuration: {e}", fg="red", err=True)
        raise typer.Exit(1) from None


def _config_for(ctx: typer.Context, deck: Path | None) -> AppConfig:
    config = _resolve({"deck_path": deck})
    _set_verbosity(config.verbose + (ctx.obj or {}).get("verbose_bonus", 0))
    logger.debug(f"Using deck {config.deck_path}")
    return config


def _service_for(config: AppConfig) -> StudyService:
    return StudyService(JsonCardStore(config.deck_path))


def _run(coro):
    """Run a service call, turning store errors into a clean exit."""
    try:
        return asyncio.run(coro)
    except (KeyError, ValueError) as e:
        message = f"Unknown card: {e.args[0]}" if isinstance(e, KeyError) else str(e)
        typer.secho(message, fg="red", err=True)
        raise typer.Exit(1) from None


def _print_cards(cards: list[Card], empty_message: str) -> None:
    if not cards:
        typer.secho(empty_message, fg="yellow")
        return
    for card in cards:
        typer.echo(f"{card.id}\t{card.front}")
    typer.echo(f"\nTotal: {len(cards)}")


# ---------------------------------------------------------------------------
# Queue commands
# ---------------------------------------------------------------------------


@app.command()
def due(ctx: typer.Context, deck: DeckOption = None):
    """List cards that are due now, including never-reviewed cards."""
    service = _service_for(_config_for(ctx, deck))
    _print_cards(_run(service.get_due()), "No cards due.")


@app.command()
def difficult(ctx: typer.Context, deck: DeckOption = None):
    """List due cards with a poor review history or a low ease factor."""
    service = _service_for(_config_for(ctx, deck))
    _print_cards(_run(service.get_difficult()), "No difficult cards due.")


@app.command()
def repeat(ctx: typer.Context, deck: DeckOption = None):
    """List the repeat-session queue: difficult cards first, then due cards."""
    service = _service_for(_config_for(ctx, deck))
    _print_cards(_run(service.get_repeat_queue()), "Nothing to repeat.")


# ---------------------------------------------------------------------------
# Review
# ---------------------------------------------------------------------------


@app.command()
def review(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="Identifier of the card that was answered.")],
    quality: Annotated[
        int | None, typer.Option("--quality", "-q", help="Recall quality from 0 to 5.")
    ] = None,
    response: Annotated[
        ResponseCategory | None,
        typer.Option("--response", "-r", help="Coarse answer instead of a quality score."),
    ] = None,
    deck: DeckOption = None,
):
    """[bold green]Record[/bold green] an answer and reschedule the card."""
    if (quality is None) == (response is None):
        typer.secho("Pass exactly one of --quality or --response.", fg="red", err=True)
        raise typer.Exit(2)

    service = _service_for(_config_for(ctx, deck))
    card = _run(service.record_review(card_id, quality=quality, response=response))

    record = card.history[-1]
    state = card.state
    typer.echo(f"Card: {card.id}")
    typer.echo(f"Answer: {record.quality} ({quality_label(record.quality)})")
    typer.echo(
        f"Interval: {state.interval}d  Ease: {state.ease_factor}  "
        f"Repetitions: {state.repetitions}"
    )


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------


@app.command()
def stats(
    ctx: typer.Context,
    deck: DeckOption = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show deck statistics: due, difficult, mastery and average ease."""
    service = _service_for(_config_for(ctx, deck))
    summary = _run(service.get_stats())

    if json_output:
        typer.echo(json.dumps(dataclasses.asdict(summary), indent=2))
        return

    typer.echo(f"Total: {summary.total}  Reviewed: {summary.reviewed}")
    typer.echo(f"Due: {summary.due}  Difficult: {summary.difficult}")
    typer.echo(f"Mastered: {summary.mastered} ({summary.mastery_percentage}%)")
    typer.echo(f"Average ease: {summary.avg_ease_factor}")


@app.command()
def forecast(
    ctx: typer.Context,
    deck: DeckOption = None,
    days: Annotated[
        int | None, typer.Option(min=1, help="Number of days, today included.")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show how many reviews fall on each upcoming day (UTC)."""
    config = _config_for(ctx, deck)
    service = _service_for(config)
    schedule = _run(service.get_forecast(days or config.forecast_days))

    if json_output:
        typer.echo(json.dumps(schedule, indent=2))
        return

    for date, count in schedule.items():
        typer.echo(f"{date}  {count}")


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = _resolve()
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
