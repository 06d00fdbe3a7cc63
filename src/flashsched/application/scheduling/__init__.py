# Application Scheduling Package
from .card_selector import difficult_cards, due_cards, is_difficult, is_due, repeat_queue
from .review_calculator import (
    clamp_quality,
    compute_next,
    quality_label,
    quality_to_response,
    response_to_quality,
)
from .service import StudyService, apply_review
from .stats_reporter import (
    exam_card_score,
    exam_results,
    review_results,
    session_mastery_level,
    session_summary,
    study_stats,
    upcoming_reviews,
)

__all__ = [
    "StudyService",
    "apply_review",
    "clamp_quality",
    "compute_next",
    "difficult_cards",
    "due_cards",
    "exam_card_score",
    "exam_results",
    "is_difficult",
    "is_due",
    "quality_label",
    "quality_to_response",
    "repeat_queue",
    "response_to_quality",
    "review_results",
    "session_mastery_level",
    "session_summary",
    "study_stats",
    "upcoming_reviews",
]
