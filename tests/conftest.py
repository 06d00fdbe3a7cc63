from datetime import datetime, timezone

import pytest

from flashsched.domain.scheduling.models import Card, ReviewRecord, SchedulingState

DAY_MS = 86_400_000

# 2024-01-15T10:30:00Z
T0 = int(datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc).timestamp()) * 1000


def make_state(
    ease_factor: float = 2.5,
    interval: int = 1,
    repetitions: int = 1,
    next_review: int = T0,
    last_reviewed: int | None = None,
) -> SchedulingState:
    return SchedulingState(
        ease_factor=ease_factor,
        interval=interval,
        repetitions=repetitions,
        next_review=next_review,
        last_reviewed=last_reviewed if last_reviewed is not None else next_review - DAY_MS,
    )


def make_card(
    card_id: str,
    state: SchedulingState | None = None,
    responses: tuple[str, ...] = (),
) -> Card:
    history = tuple(
        ReviewRecord(timestamp=T0 - (len(responses) - i) * DAY_MS, response=r)
        for i, r in enumerate(responses)
    )
    return Card(
        id=card_id,
        front=f"Front {card_id}",
        back=f"Back {card_id}",
        state=state,
        history=history,
    )


@pytest.fixture
def now():
    return T0


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Isolate config files and environment overrides
    monkeypatch.setenv("HOME", str(home))
    for var in ("FLASHSCHED_DECK_PATH", "FLASHSCHED_FORECAST_DAYS", "FLASHSCHED_VERBOSE"):
        monkeypatch.delenv(var, raising=False)
    return home
