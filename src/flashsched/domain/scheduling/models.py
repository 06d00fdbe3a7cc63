"""
Domain models for SM-2 scheduling.

These are pure data structures with no I/O or external dependencies.
Timestamps are integer epoch milliseconds.
"""

from dataclasses import dataclass, field
from enum import Enum

from flashsched.domain.constants import DEFAULT_EASE_FACTOR


class ResponseCategory(str, Enum):
    """Coarse three-way answer for UIs that do not collect a 0-5 score."""

    KNOW = "know"
    DIFFICULT = "difficult"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class SchedulingState:
    """
    Spaced-repetition memory of one card.

    Attributes:
        ease_factor: Interval growth multiplier, never below 1.3.
        interval: Days until the next review (>= 1).
        repetitions: Consecutive successful reviews since the last failure.
        next_review: Epoch ms when the card becomes due.
        last_reviewed: Epoch ms of the most recent evaluation.
    """

    ease_factor: float
    interval: int
    repetitions: int
    next_review: int
    last_reviewed: int

    @classmethod
    def initial(cls, now: int) -> "SchedulingState":
        """State substituted for a card that has never been reviewed."""
        return cls(
            ease_factor=DEFAULT_EASE_FACTOR,
            interval=1,
            repetitions=0,
            next_review=now,
            last_reviewed=now,
        )


@dataclass(frozen=True)
class ReviewRecord:
    """
    A single review log entry.

    Attributes:
        timestamp: Epoch ms of the review.
        response: Categorical answer given by the learner.
        quality: Raw 0-5 score, if one was collected.
    """

    timestamp: int
    response: ResponseCategory | str
    quality: int | None = None


@dataclass(frozen=True)
class Card:
    """
    A learning item as seen by the scheduler.

    The front/back text is opaque here. `history` is ordered oldest first.
    """

    id: str
    front: str = ""
    back: str = ""
    state: SchedulingState | None = None
    history: tuple[ReviewRecord, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class StudyStats:
    """Summary counters over a card collection."""

    total: int
    reviewed: int
    due: int
    difficult: int
    mastered: int
    mastery_percentage: int
    avg_ease_factor: float


@dataclass(frozen=True)
class SessionSummary:
    """
    Outcome of a finished study session.

    Attributes:
        total_cards: Number of cards queued for the session.
        reviewed_cards: Number of answers given during the session.
        average_quality: Mean quality score, two decimals.
        mastery_level: Tier label for the average quality.
        quality_distribution: Count per quality score, highest score first.
        forecast: Upcoming review load of the session's cards, per UTC date.
    """

    total_cards: int
    reviewed_cards: int
    average_quality: float
    mastery_level: str
    quality_distribution: dict[int, int]
    forecast: dict[str, int]


@dataclass(frozen=True)
class ReviewResults:
    """Tally of a review-mode pass over a set of cards."""

    total_cards: int
    known_cards: int
    difficult_cards: int
    unknown_cards: int
    accuracy: int  # percent of answers that were "know"


@dataclass(frozen=True)
class ExamAnswer:
    """One timed exam answer."""

    correct: bool
    time_spent_ms: int


@dataclass(frozen=True)
class ExamResults:
    """
    Score sheet of a finished exam.

    Attributes:
        score: Sum of per-answer points (base + streak bonus + time bonus).
        accuracy: Percent of questions answered correctly.
        streak: Correct answers in a row at the end of the exam.
        max_streak: Longest run of correct answers.
        time_spent_ms: Total exam duration.
        time_per_card: Average seconds per question, rounded.
    """

    total_questions: int
    correct_answers: int
    incorrect_answers: int
    score: int
    accuracy: int
    streak: int
    max_streak: int
    time_spent_ms: int
    time_per_card: int
