"""Centralized constants for the flashsched scheduler.

All magic numbers of the SM-2 model live here so every layer
imports from a single source of truth.
"""

# ---------- Quality scale ----------
MIN_QUALITY = 0
MAX_QUALITY = 5
CORRECT_THRESHOLD = 3  # quality >= 3 counts as a successful recall

QUALITY_LABELS = {
    0: "Complete blackout",
    1: "Incorrect; correct answer remembered",
    2: "Incorrect; correct answer seemed easy",
    3: "Correct with serious difficulty",
    4: "Correct after hesitation",
    5: "Perfect response",
}
UNKNOWN_QUALITY_LABEL = "Unknown"

# ---------- Ease factor ----------
DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
FAILURE_EASE_PENALTY = 0.2

# ---------- Intervals (days) ----------
FIRST_INTERVAL = 1
SECOND_INTERVAL = 6
FAILURE_INTERVAL = 1

# ---------- Classification ----------
DIFFICULT_EASE_THRESHOLD = 2.0
MASTERY_EASE_THRESHOLD = 2.5
MASTERY_INTERVAL_THRESHOLD = 7

# ---------- Forecast ----------
DEFAULT_FORECAST_DAYS = 7

# ---------- Time ----------
MS_PER_DAY = 86_400_000

# ---------- Session results ----------
# Minimum average quality for each repeat-session tier, best first
SESSION_MASTERY_LEVELS = (
    (4, "Excellent"),
    (3, "Good"),
    (2, "Satisfactory"),
)
SESSION_MASTERY_FALLBACK = "Needs practice"

EXAM_POINTS_PER_CORRECT = 10
EXAM_TIME_BONUS_WINDOW_MS = 5_000  # answers faster than this earn a bonus
EXAM_MAX_TIME_BONUS = 5
