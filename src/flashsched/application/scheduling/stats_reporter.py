"""
Statistics and forecast reporting over a card collection.

This is a pure computation module with no I/O. Calendar dates are UTC.
"""

from collections.abc import Iterable
from datetime import timedelta

from flashsched.application.utils.rounding import round_half_up, round_half_up_int
from flashsched.domain.constants import (
    DEFAULT_EASE_FACTOR,
    DEFAULT_FORECAST_DAYS,
    EXAM_MAX_TIME_BONUS,
    EXAM_POINTS_PER_CORRECT,
    EXAM_TIME_BONUS_WINDOW_MS,
    MASTERY_EASE_THRESHOLD,
    MASTERY_INTERVAL_THRESHOLD,
    MAX_QUALITY,
    MIN_QUALITY,
    SESSION_MASTERY_FALLBACK,
    SESSION_MASTERY_LEVELS,
)
from flashsched.domain.scheduling.models import (
    Card,
    ExamAnswer,
    ExamResults,
    ResponseCategory,
    ReviewResults,
    SessionSummary,
    StudyStats,
)

from .card_selector import difficult_cards, due_cards, ensure_card_list
from .review_calculator import clamp_quality, now_ms, to_utc_datetime

_RESPONSE_VALUES = tuple(category.value for category in ResponseCategory)


def _is_mastered(card: Card) -> bool:
    state = card.state
    return (
        state is not None
        and state.ease_factor > MASTERY_EASE_THRESHOLD
        and state.interval > MASTERY_INTERVAL_THRESHOLD
    )


def study_stats(cards: Iterable[Card], now: int | None = None) -> StudyStats:
    """
    Aggregate scheduling state into summary counters.

    Args:
        cards: The card collection.
        now: Time used for the due/difficult counts. Defaults to the wall clock.
    """
    cards = ensure_card_list(cards)
    if now is None:
        now = now_ms()

    total = len(cards)
    scheduled = [card.state for card in cards if card.state is not None]
    mastered = sum(1 for card in cards if _is_mastered(card))

    if scheduled:
        avg_ease = sum(state.ease_factor for state in scheduled) / len(scheduled)
    else:
        avg_ease = DEFAULT_EASE_FACTOR

    return StudyStats(
        total=total,
        reviewed=len(scheduled),
        due=len(due_cards(cards, now)),
        difficult=len(difficult_cards(cards, now)),
        mastered=mastered,
        mastery_percentage=round_half_up_int(mastered / total * 100) if total else 0,
        avg_ease_factor=round_half_up(avg_ease, 2),
    )


def upcoming_reviews(
    cards: Iterable[Card],
    days: int = DEFAULT_FORECAST_DAYS,
    now: int | None = None,
) -> dict[str, int]:
    """
    Count reviews per UTC calendar day, from today to today + days - 1.

    Every day in range gets an entry, zero included. Keys are ISO dates
    ("YYYY-MM-DD") in chronological order. Unscheduled cards count nowhere.
    """
    cards = ensure_card_list(cards)
    if now is None:
        now = now_ms()

    today = to_utc_datetime(now).date()
    schedule = {(today + timedelta(days=offset)).isoformat(): 0 for offset in range(days)}

    for card in cards:
        if card.state is None:
            continue
        key = to_utc_datetime(card.state.next_review).date().isoformat()
        if key in schedule:
            schedule[key] += 1

    return schedule


def session_summary(
    qualities: Iterable[float],
    cards: Iterable[Card],
    days: int = DEFAULT_FORECAST_DAYS,
    now: int | None = None,
) -> SessionSummary:
    """
    Summarize a finished study session.

    Args:
        qualities: Quality scores given during the session, in order.
        cards: The session's cards, with their updated states.
        days: Forecast horizon.
        now: Forecast start time. Defaults to the wall clock.
    """
    cards = ensure_card_list(cards)
    scores = [clamp_quality(q) for q in qualities]
    distribution = {q: 0 for q in range(MAX_QUALITY, MIN_QUALITY - 1, -1)}
    for score in scores:
        distribution[score] += 1

    average = sum(scores) / len(scores) if scores else 0.0

    return SessionSummary(
        total_cards=len(cards),
        reviewed_cards=len(scores),
        average_quality=round_half_up(average, 2),
        mastery_level=session_mastery_level(average),
        quality_distribution=distribution,
        forecast=upcoming_reviews(cards, days, now),
    )


def session_mastery_level(average_quality: float) -> str:
    """Tier label for a session's unrounded average quality."""
    for threshold, label in SESSION_MASTERY_LEVELS:
        if average_quality >= threshold:
            return label
    return SESSION_MASTERY_FALLBACK


def review_results(
    responses: Iterable[ResponseCategory | str],
    total_cards: int | None = None,
) -> ReviewResults:
    """
    Tally the answers of a review-mode pass.

    Args:
        responses: One response per answered card.
        total_cards: Size of the reviewed set. Defaults to the number of answers.

    Accuracy is the rounded share of "know" answers, 0 when nothing was answered.
    Unrecognized responses count towards the answers but towards no category.
    """
    responses = list(responses)
    counts = {category: 0 for category in ResponseCategory}
    for response in responses:
        if response in _RESPONSE_VALUES:
            counts[ResponseCategory(response)] += 1

    answered = len(responses)
    known = counts[ResponseCategory.KNOW]

    return ReviewResults(
        total_cards=answered if total_cards is None else total_cards,
        known_cards=known,
        difficult_cards=counts[ResponseCategory.DIFFICULT],
        unknown_cards=counts[ResponseCategory.UNKNOWN],
        accuracy=round_half_up_int(known / answered * 100) if answered else 0,
    )


def exam_card_score(correct: bool, streak: int, time_spent_ms: int) -> int:
    """
    Points for one exam answer.

    A correct answer earns 10 points, plus the streak of correct answers
    before it, plus one point per whole second left in the 5 s bonus window.
    Wrong answers earn nothing.
    """
    if not correct:
        return 0
    time_spent_ms = max(0, time_spent_ms)
    time_bonus = 0
    if time_spent_ms < EXAM_TIME_BONUS_WINDOW_MS:
        time_bonus = max(0, EXAM_MAX_TIME_BONUS - time_spent_ms // 1000)
    return EXAM_POINTS_PER_CORRECT + streak + time_bonus


def exam_results(
    answers: Iterable[ExamAnswer],
    total_questions: int | None = None,
    time_spent_ms: int | None = None,
) -> ExamResults:
    """
    Score a finished exam.

    Args:
        answers: Answers in the order they were given.
        total_questions: Number of questions asked. Defaults to the number of answers.
        time_spent_ms: Wall-clock exam duration. Defaults to the sum of answer times.
    """
    answers = list(answers)
    total = len(answers) if total_questions is None else total_questions
    if time_spent_ms is None:
        time_spent_ms = sum(max(0, answer.time_spent_ms) for answer in answers)

    correct = score = streak = max_streak = 0
    for answer in answers:
        score += exam_card_score(answer.correct, streak, answer.time_spent_ms)
        if answer.correct:
            correct += 1
            streak += 1
            max_streak = max(max_streak, streak)
        else:
            streak = 0

    return ExamResults(
        total_questions=total,
        correct_answers=correct,
        incorrect_answers=len(answers) - correct,
        score=score,
        accuracy=round_half_up_int(correct / total * 100) if total else 0,
        streak=streak,
        max_streak=max_streak,
        time_spent_ms=time_spent_ms,
        time_per_card=round_half_up_int(time_spent_ms / total / 1000) if total else 0,
    )
