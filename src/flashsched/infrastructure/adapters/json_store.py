"""
JSON Card Store — Infrastructure adapter for deck files.

Implements CardStore on top of a single JSON document:

    {"cards": [{"id": ..., "front": ..., "back": ...,
                "sm2Data": {"easeFactor", "interval", "repetitions",
                            "nextReview", "lastReviewed"} | null,
                "reviewHistory": [{"timestamp", "response", "quality"?}]}]}

Unknown keys on a card are preserved across load/save.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from flashsched.domain.scheduling.models import (
    Card,
    ResponseCategory,
    ReviewRecord,
    SchedulingState,
)
from flashsched.domain.scheduling.ports import CardStore

logger = logging.getLogger(__name__)

_RESPONSE_VALUES = frozenset(category.value for category in ResponseCategory)


def state_from_dict(data: dict[str, Any] | None) -> SchedulingState | None:
    if not data:
        return None
    return SchedulingState(
        ease_factor=float(data["easeFactor"]),
        interval=int(data["interval"]),
        repetitions=int(data["repetitions"]),
        next_review=int(data["nextReview"]),
        last_reviewed=int(data["lastReviewed"]),
    )


def state_to_dict(state: SchedulingState | None) -> dict[str, Any] | None:
    if state is None:
        return None
    return {
        "easeFactor": state.ease_factor,
        "interval": state.interval,
        "repetitions": state.repetitions,
        "nextReview": state.next_review,
        "lastReviewed": state.last_reviewed,
    }


def record_from_dict(data: dict[str, Any]) -> ReviewRecord:
    response = data["response"]
    # Unknown categories are kept verbatim; the selector ignores them
    if response in _RESPONSE_VALUES:
        response = ResponseCategory(response)
    quality = data.get("quality")
    return ReviewRecord(
        timestamp=int(data["timestamp"]),
        response=response,
        quality=int(quality) if quality is not None else None,
    )


def record_to_dict(record: ReviewRecord) -> dict[str, Any]:
    response = record.response
    data: dict[str, Any] = {
        "timestamp": record.timestamp,
        "response": response.value if isinstance(response, ResponseCategory) else response,
    }
    if record.quality is not None:
        data["quality"] = record.quality
    return data


def card_from_dict(data: dict[str, Any]) -> Card:
    return Card(
        id=str(data["id"]),
        front=data.get("front", ""),
        back=data.get("back", ""),
        state=state_from_dict(data.get("sm2Data")),
        history=tuple(record_from_dict(r) for r in data.get("reviewHistory") or []),
    )


def card_to_dict(card: Card) -> dict[str, Any]:
    return {
        "id": card.id,
        "front": card.front,
        "back": card.back,
        "sm2Data": state_to_dict(card.state),
        "reviewHistory": [record_to_dict(r) for r in card.history],
    }


class JsonCardStore(CardStore):
    """
    Card store backed by a JSON deck file.

    A missing file is an empty deck. The file is re-read on every call so
    concurrent edits by other tools are picked up.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load_document(self) -> dict[str, Any]:
        if not self.path.exists():
            logger.debug(f"Deck file {self.path} does not exist, treating as empty")
            return {"cards": []}

        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"{self.path} is not valid JSON: {e}") from e

        if not isinstance(document, dict) or not isinstance(document.get("cards"), list):
            raise ValueError(f"{self.path} has no 'cards' list")
        return document

    def _write_document(self, document: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(document, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug(f"Saved {len(document['cards'])} cards to {self.path}")

    async def get_cards(self) -> list[Card]:
        cards: list[Card] = []
        for raw in self._load_document()["cards"]:
            try:
                cards.append(card_from_dict(raw))
            except (KeyError, TypeError, ValueError, OverflowError) as e:
                logger.warning(f"Skipping malformed card entry in {self.path}: {e}")
        logger.debug(f"Loaded {len(cards)} cards from {self.path}")
        return cards

    async def get_card(self, card_id: str) -> Card | None:
        for card in await self.get_cards():
            if card.id == card_id:
                return card
        return None

    async def save_card(self, card: Card) -> None:
        """
        Replace the card with the same id, or append it if it is new.
        """
        document = self._load_document()
        entries = document["cards"]

        for index, raw in enumerate(entries):
            if isinstance(raw, dict) and str(raw.get("id")) == card.id:
                entries[index] = {**raw, **card_to_dict(card)}
                break
        else:
            entries.append(card_to_dict(card))

        self._write_document(document)
