"""
Review outcome calculator (SM-2).

Given a card's prior scheduling state and a 0-5 quality score, computes the
replacement state. This is a pure computation module with no I/O.

Quality scale:
    0 - Complete blackout
    1 - Incorrect response; correct one remembered
    2 - Incorrect response; correct one seemed easy to recall
    3 - Correct response recalled with serious difficulty
    4 - Correct response after hesitation
    5 - Perfect response
"""

import logging
import math
import time
from datetime import datetime, timedelta, timezone

from flashsched.application.utils.rounding import round_half_up, round_half_up_int
from flashsched.domain.constants import (
    CORRECT_THRESHOLD,
    FAILURE_EASE_PENALTY,
    FAILURE_INTERVAL,
    FIRST_INTERVAL,
    MAX_QUALITY,
    MIN_EASE_FACTOR,
    MIN_QUALITY,
    QUALITY_LABELS,
    SECOND_INTERVAL,
    UNKNOWN_QUALITY_LABEL,
)
from flashsched.domain.scheduling.models import ResponseCategory, SchedulingState

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)

_RESPONSE_QUALITY = {
    ResponseCategory.KNOW: 5,
    ResponseCategory.DIFFICULT: 3,
    ResponseCategory.UNKNOWN: 1,
}
_FALLBACK_QUALITY = 1


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)


def to_utc_datetime(timestamp: int) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime without float drift."""
    return _EPOCH + timedelta(milliseconds=timestamp)


def add_calendar_days(timestamp: int, days: int) -> int:
    """
    Add whole calendar days to an epoch-ms timestamp.

    Day arithmetic is done on the UTC calendar, so the time of day is kept.
    """
    shifted = to_utc_datetime(timestamp) + timedelta(days=days)
    return (shifted - _EPOCH) // _ONE_MS


def clamp_quality(quality: float) -> int:
    """
    Normalize any numeric quality into the integer range [0, 5].

    Rounds to the nearest integer (ties up), then clamps. NaN becomes 0.
    """
    if isinstance(quality, float) and math.isnan(quality):
        normalized = MIN_QUALITY
    else:
        # Clamp before rounding so infinities never reach math.floor
        bounded = max(MIN_QUALITY - 1, min(MAX_QUALITY + 1, quality))
        normalized = max(MIN_QUALITY, min(MAX_QUALITY, round_half_up_int(bounded)))

    if normalized != quality:
        logger.debug(f"Normalized quality {quality!r} to {normalized}")
    return normalized


def compute_next(
    prior: SchedulingState | None,
    quality: float,
    now: int | None = None,
) -> SchedulingState:
    """
    Compute the next scheduling state after a review.

    Args:
        prior: The card's current state, or None for a never-reviewed card.
        quality: Recall quality; clamped to [0, 5].
        now: Evaluation time in epoch ms. Defaults to the wall clock.

    Returns:
        A fresh SchedulingState replacing the prior one.
    """
    if now is None:
        now = now_ms()

    current = prior or SchedulingState.initial(now)
    quality = clamp_quality(quality)

    ease_factor = current.ease_factor
    interval = current.interval
    repetitions = current.repetitions

    if quality >= CORRECT_THRESHOLD:
        repetitions += 1

        if repetitions == 1:
            interval = FIRST_INTERVAL
        elif repetitions == 2:
            interval = SECOND_INTERVAL
        else:
            interval = round_half_up_int(interval * ease_factor)

        miss = MAX_QUALITY - quality
        ease_factor = max(MIN_EASE_FACTOR, ease_factor + (0.1 - miss * (0.08 + miss * 0.02)))
    else:
        repetitions = 0
        interval = FAILURE_INTERVAL
        ease_factor = max(MIN_EASE_FACTOR, ease_factor - FAILURE_EASE_PENALTY)

    return SchedulingState(
        ease_factor=round_half_up(ease_factor, 2),
        interval=interval,
        repetitions=repetitions,
        next_review=add_calendar_days(now, interval),
        last_reviewed=now,
    )


def response_to_quality(response: ResponseCategory | str) -> int:
    """
    Map a coarse response onto a quality score.

    know -> 5, difficult -> 3, unknown -> 1. Anything else also maps to 1.
    """
    try:
        category = ResponseCategory(response)
    except ValueError:
        return _FALLBACK_QUALITY
    return _RESPONSE_QUALITY[category]


def quality_to_response(quality: float) -> ResponseCategory:
    """Categorize a quality score for the review history."""
    quality = clamp_quality(quality)
    if quality > CORRECT_THRESHOLD:
        return ResponseCategory.KNOW
    if quality == CORRECT_THRESHOLD:
        return ResponseCategory.DIFFICULT
    return ResponseCategory.UNKNOWN


def quality_label(quality: int) -> str:
    """Human-readable description of a quality score."""
    return QUALITY_LABELS.get(quality, UNKNOWN_QUALITY_LABEL)
