# Domain Scheduling Package
from .models import (
    Card,
    ExamAnswer,
    ExamResults,
    ResponseCategory,
    ReviewRecord,
    ReviewResults,
    SchedulingState,
    SessionSummary,
    StudyStats,
)
from .ports import CardStore

__all__ = [
    "Card",
    "CardStore",
    "ExamAnswer",
    "ExamResults",
    "ResponseCategory",
    "ReviewRecord",
    "ReviewResults",
    "SchedulingState",
    "SessionSummary",
    "StudyStats",
]
