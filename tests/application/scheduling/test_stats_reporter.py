"""Tests for study statistics, review forecast and session, review and exam results."""

from conftest import DAY_MS, T0, make_card, make_state

from flashsched.application.scheduling.stats_reporter import (
    exam_card_score,
    exam_results,
    review_results,
    session_mastery_level,
    session_summary,
    study_stats,
    upcoming_reviews,
)
from flashsched.domain.scheduling.models import (
    ExamAnswer,
    ExamResults,
    ResponseCategory,
    ReviewResults,
    StudyStats,
)

# 2024-01-15T00:00:00Z, the start of T0's UTC day
MIDNIGHT = T0 - (10 * 60 + 30) * 60 * 1000


class TestStudyStats:
    def test_empty(self, now):
        assert study_stats([], now) == StudyStats(
            total=0,
            reviewed=0,
            due=0,
            difficult=0,
            mastered=0,
            mastery_percentage=0,
            avg_ease_factor=2.5,
        )

    def test_counts(self, now):
        cards = [
            make_card("new"),
            make_card(
                "mastered", make_state(ease_factor=2.8, interval=20, next_review=now + DAY_MS)
            ),
            make_card("hard", make_state(ease_factor=1.8, interval=1)),
            make_card("ok", make_state(ease_factor=2.5, interval=30, next_review=now + DAY_MS)),
        ]
        stats = study_stats(cards, now)

        assert stats.total == 4
        assert stats.reviewed == 3
        assert stats.due == 2
        assert stats.difficult == 1
        # ease 2.5 is not strictly above the mastery threshold
        assert stats.mastered == 1
        assert stats.mastery_percentage == 25
        assert stats.avg_ease_factor == 2.37

    def test_mastery_needs_both_thresholds(self, now):
        cards = [
            make_card("short", make_state(ease_factor=2.9, interval=7)),
            make_card("low", make_state(ease_factor=2.4, interval=40)),
        ]
        assert study_stats(cards, now).mastered == 0

    def test_mastery_percentage_rounds_half_up(self, now):
        mastered = make_card("m", make_state(ease_factor=2.6, interval=8))
        others = [make_card(str(i)) for i in range(7)]
        assert study_stats([mastered, *others], now).mastery_percentage == 13

    def test_mastery_percentage_two_thirds(self, now):
        cards = [
            make_card("a", make_state(ease_factor=2.6, interval=8)),
            make_card("b", make_state(ease_factor=2.6, interval=8)),
            make_card("c"),
        ]
        assert study_stats(cards, now).mastery_percentage == 67

    def test_average_ignores_unscheduled_cards(self, now):
        cards = [make_card("new"), make_card("s", make_state(ease_factor=1.9))]
        assert study_stats(cards, now).avg_ease_factor == 1.9


class TestUpcomingReviews:
    def test_always_one_entry_per_day(self, now):
        schedule = upcoming_reviews([], 7, now)
        assert list(schedule) == [
            "2024-01-15",
            "2024-01-16",
            "2024-01-17",
            "2024-01-18",
            "2024-01-19",
            "2024-01-20",
            "2024-01-21",
        ]
        assert set(schedule.values()) == {0}

    def test_buckets_by_utc_date(self, now):
        cards = [
            # Earlier today still counts for today
            make_card("morning", make_state(next_review=MIDNIGHT)),
            make_card("tonight", make_state(next_review=MIDNIGHT + DAY_MS - 1)),
            make_card("day2a", make_state(next_review=MIDNIGHT + 2 * DAY_MS)),
            make_card("day2b", make_state(next_review=MIDNIGHT + 2 * DAY_MS + 5000)),
            make_card("yesterday", make_state(next_review=MIDNIGHT - 1)),
            make_card("beyond", make_state(next_review=MIDNIGHT + 3 * DAY_MS)),
            make_card("new"),
        ]
        schedule = upcoming_reviews(cards, 3, now)

        assert schedule == {"2024-01-15": 2, "2024-01-16": 0, "2024-01-17": 2}

    def test_total_bounded_by_scheduled_cards(self, now):
        cards = [make_card(str(i), make_state(next_review=now + i * DAY_MS)) for i in range(10)]
        schedule = upcoming_reviews(cards + [make_card("new")], 7, now)

        assert len(schedule) == 7
        assert all(count >= 0 for count in schedule.values())
        assert sum(schedule.values()) == 7

    def test_zero_days(self, now):
        assert upcoming_reviews([make_card("a", make_state())], 0, now) == {}

    def test_month_rollover(self):
        jan_30 = T0 + 15 * DAY_MS
        assert list(upcoming_reviews([], 4, jan_30)) == [
            "2024-01-30",
            "2024-01-31",
            "2024-02-01",
            "2024-02-02",
        ]


class TestSessionSummary:
    def test_summary(self, now):
        cards = [make_card("a", make_state(next_review=now + DAY_MS))]
        summary = session_summary([5, 4, 4, 1], cards, 2, now)

        assert summary.total_cards == 1
        assert summary.reviewed_cards == 4
        assert summary.average_quality == 3.5
        assert summary.mastery_level == "Good"
        assert summary.quality_distribution == {5: 1, 4: 2, 3: 0, 2: 0, 1: 1, 0: 0}
        assert list(summary.quality_distribution) == [5, 4, 3, 2, 1, 0]
        assert summary.forecast == {"2024-01-15": 0, "2024-01-16": 1}

    def test_average_has_two_decimals(self, now):
        summary = session_summary([5, 4, 4], [], 1, now)
        assert summary.average_quality == 4.33
        assert summary.mastery_level == "Excellent"

    def test_empty_session(self, now):
        summary = session_summary([], [], 1, now)
        assert summary.total_cards == 0
        assert summary.reviewed_cards == 0
        assert summary.average_quality == 0.0
        assert summary.mastery_level == "Needs practice"
        assert sum(summary.quality_distribution.values()) == 0

    def test_scores_are_clamped(self, now):
        summary = session_summary([9, -2], [], 1, now)
        assert summary.quality_distribution[5] == 1
        assert summary.quality_distribution[0] == 1
        assert summary.average_quality == 2.5
        assert summary.mastery_level == "Satisfactory"

    def test_total_counts_cards_not_answers(self, now):
        cards = [make_card("a"), make_card("b"), make_card("c")]
        summary = session_summary([3], cards, 1, now)
        assert summary.total_cards == 3
        assert summary.reviewed_cards == 1


class TestSessionMasteryLevel:
    def test_tiers(self):
        assert session_mastery_level(5.0) == "Excellent"
        assert session_mastery_level(4.0) == "Excellent"
        assert session_mastery_level(3.99) == "Good"
        assert session_mastery_level(3.0) == "Good"
        assert session_mastery_level(2.0) == "Satisfactory"
        assert session_mastery_level(1.99) == "Needs practice"
        assert session_mastery_level(0.0) == "Needs practice"

    def test_uses_unrounded_average(self, now):
        summary = session_summary([4] * 999 + [3], [], 1, now)
        assert summary.average_quality == 4.0
        assert summary.mastery_level == "Good"


class TestReviewResults:
    def test_tallies(self):
        results = review_results(
            ["know", "know", "difficult", ResponseCategory.UNKNOWN, ResponseCategory.KNOW]
        )
        assert results == ReviewResults(
            total_cards=5,
            known_cards=3,
            difficult_cards=1,
            unknown_cards=1,
            accuracy=60,
        )

    def test_accuracy_rounds_half_up(self):
        # 1 of 8 known is 12.5%
        results = review_results(["know"] + ["unknown"] * 7)
        assert results.accuracy == 13

    def test_unrecognized_responses_count_as_answers_only(self):
        results = review_results(["know", "maybe"])
        assert results.known_cards == 1
        assert results.difficult_cards == 0
        assert results.unknown_cards == 0
        assert results.accuracy == 50

    def test_empty(self):
        results = review_results([])
        assert results.total_cards == 0
        assert results.accuracy == 0

    def test_explicit_total(self):
        results = review_results(["know"], total_cards=10)
        assert results.total_cards == 10
        assert results.accuracy == 100


class TestExamCardScore:
    def test_wrong_answer_scores_nothing(self):
        assert exam_card_score(False, 4, 100) == 0

    def test_time_bonus_per_whole_second_left(self):
        assert exam_card_score(True, 0, 0) == 15
        assert exam_card_score(True, 0, 999) == 15
        assert exam_card_score(True, 0, 1200) == 14
        assert exam_card_score(True, 0, 4999) == 11

    def test_no_time_bonus_from_five_seconds(self):
        assert exam_card_score(True, 0, 5000) == 10
        assert exam_card_score(True, 0, 60_000) == 10

    def test_streak_bonus(self):
        assert exam_card_score(True, 3, 6000) == 13

    def test_negative_time_earns_the_maximum_bonus(self):
        assert exam_card_score(True, 0, -2500) == 15


class TestExamResults:
    def test_results(self):
        answers = [
            ExamAnswer(correct=True, time_spent_ms=1200),
            ExamAnswer(correct=True, time_spent_ms=6000),
            ExamAnswer(correct=False, time_spent_ms=2000),
            ExamAnswer(correct=True, time_spent_ms=0),
        ]
        results = exam_results(answers)

        # 14 (bonus 4) + 11 (streak 1) + 0 + 15 (bonus 5, streak reset)
        assert results.score == 40
        assert results.total_questions == 4
        assert results.correct_answers == 3
        assert results.incorrect_answers == 1
        assert results.accuracy == 75
        assert results.streak == 1
        assert results.max_streak == 2
        assert results.time_spent_ms == 9200
        assert results.time_per_card == 2

    def test_explicit_totals(self):
        answers = [ExamAnswer(correct=True, time_spent_ms=8000)]
        results = exam_results(answers, total_questions=3, time_spent_ms=7500)

        assert results.accuracy == 33
        assert results.incorrect_answers == 0
        assert results.time_spent_ms == 7500
        # 2.5 s per card rounds up
        assert results.time_per_card == 3

    def test_empty(self):
        results = exam_results([])
        assert results == ExamResults(
            total_questions=0,
            correct_answers=0,
            incorrect_answers=0,
            score=0,
            accuracy=0,
            streak=0,
            max_streak=0,
            time_spent_ms=0,
            time_per_card=0,
        )
