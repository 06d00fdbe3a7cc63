"""
Card selector for study sessions.

Filters a card collection into "due" and "difficult" sets. Input order is
preserved; callers that need priorities sort the result themselves.
"""

from collections.abc import Iterable

from flashsched.domain.constants import DIFFICULT_EASE_THRESHOLD
from flashsched.domain.scheduling.models import Card, ResponseCategory

_DIFFICULT_RESPONSES = (ResponseCategory.UNKNOWN, ResponseCategory.DIFFICULT)


def ensure_card_list(cards: Iterable[Card]) -> list[Card]:
    """Materialize a card collection, rejecting a lone card or string."""
    if isinstance(cards, (Card, str, bytes)):
        raise TypeError(f"expected a collection of cards, got {type(cards).__name__}")
    return list(cards)


def is_due(card: Card, now: int) -> bool:
    """A never-reviewed card is always due; otherwise next_review <= now."""
    if card.state is None:
        return True
    return card.state.next_review <= now


def is_difficult(card: Card) -> bool:
    """
    True if the card has a poor answer in its history or a low ease factor.

    Does not look at whether the card is due.
    """
    has_poor_history = any(
        record.response in _DIFFICULT_RESPONSES for record in card.history
    )
    has_low_ease = card.state is not None and card.state.ease_factor < DIFFICULT_EASE_THRESHOLD
    return has_poor_history or has_low_ease


def due_cards(cards: Iterable[Card], now: int) -> list[Card]:
    """Cards that are due at `now`, in input order."""
    return [card for card in ensure_card_list(cards) if is_due(card, now)]


def difficult_cards(cards: Iterable[Card], now: int) -> list[Card]:
    """Cards that are difficult AND currently due."""
    return [
        card for card in ensure_card_list(cards) if is_difficult(card) and is_due(card, now)
    ]


def repeat_queue(cards: Iterable[Card], now: int) -> list[Card]:
    """
    Build the queue for a repeat session: difficult cards, then due cards.

    Cards are de-duplicated by id (first occurrence wins), so a card that is
    both difficult and due appears once.
    """
    cards = ensure_card_list(cards)
    queue: list[Card] = []
    seen: set[str] = set()

    for card in difficult_cards(cards, now) + due_cards(cards, now):
        if card.id in seen:
            continue
        seen.add(card.id)
        queue.append(card)

    return queue
