"""
Study Service — Application layer orchestrator.

Coordinates loading cards from the store, running the scheduling engine and
persisting the replacement state. The engine functions stay pure; this is
the only place where scheduling meets storage.
"""

import dataclasses
import logging

from flashsched.domain.constants import DEFAULT_FORECAST_DAYS
from flashsched.domain.scheduling.models import Card, ResponseCategory, ReviewRecord, StudyStats
from flashsched.domain.scheduling.ports import CardStore

from .card_selector import difficult_cards, due_cards, repeat_queue
from .review_calculator import (
    clamp_quality,
    compute_next,
    now_ms,
    quality_to_response,
    response_to_quality,
)
from .stats_reporter import study_stats, upcoming_reviews

logger = logging.getLogger(__name__)


def apply_review(
    card: Card,
    quality: float | None = None,
    response: ResponseCategory | str | None = None,
    now: int | None = None,
) -> Card:
    """
    Return a copy of `card` with its next state and one more history entry.

    Exactly one of `quality` or `response` must be given. A raw quality is
    categorized for the history; a response is mapped onto its fixed quality.
    """
    if (quality is None) == (response is None):
        raise ValueError("Pass exactly one of quality or response")
    if now is None:
        now = now_ms()

    if response is not None:
        score = response_to_quality(response)
        try:
            category = ResponseCategory(response)
        except ValueError:
            category = quality_to_response(score)
    else:
        score = clamp_quality(quality)
        category = quality_to_response(score)

    record = ReviewRecord(timestamp=now, response=category, quality=score)
    return dataclasses.replace(
        card,
        state=compute_next(card.state, score, now),
        history=card.history + (record,),
    )


class StudyService:
    """
    Application service for study sessions over a card store.

    Follows Dependency Inversion: depends on the CardStore abstraction,
    not on a concrete file format.
    """

    def __init__(self, store: CardStore):
        """
        Args:
            store: The repository (port) holding the cards.
        """
        self._store = store

    async def record_review(
        self,
        card_id: str,
        quality: float | None = None,
        response: ResponseCategory | str | None = None,
        now: int | None = None,
    ) -> Card:
        """
        Score one card, persist the result and return the updated card.

        Raises:
            KeyError: No card with that id exists in the store.
            ValueError: Neither or both of quality and response were given.
        """
        card = await self._store.get_card(card_id)
        if card is None:
            raise KeyError(card_id)

        updated = apply_review(card, quality=quality, response=response, now=now)
        await self._store.save_card(updated)

        state = updated.state
        logger.info(
            f"Reviewed {card_id}: quality={updated.history[-1].quality} "
            f"interval={state.interval}d ease={state.ease_factor} reps={state.repetitions}"
        )
        return updated

    async def get_due(self, now: int | None = None) -> list[Card]:
        return due_cards(await self._store.get_cards(), now if now is not None else now_ms())

    async def get_difficult(self, now: int | None = None) -> list[Card]:
        return difficult_cards(
            await self._store.get_cards(), now if now is not None else now_ms()
        )

    async def get_repeat_queue(self, now: int | None = None) -> list[Card]:
        """Difficult cards first, then the remaining due cards, each once."""
        return repeat_queue(await self._store.get_cards(), now if now is not None else now_ms())

    async def get_stats(self, now: int | None = None) -> StudyStats:
        return study_stats(await self._store.get_cards(), now)

    async def get_forecast(
        self, days: int = DEFAULT_FORECAST_DAYS, now: int | None = None
    ) -> dict[str, int]:
        return upcoming_reviews(await self._store.get_cards(), days, now)
