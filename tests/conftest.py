"""Shared pytest fixtures."""

import base64
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from hunt.models import HuntItem
from hunt.repository import HuntStore


PNG_1X1_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mP8/x8AAwMCAO7+fJ8AAAAASUVORK5CYII="
)


class StepClock:
    """Deterministic clock: every call returns the previous value plus one minute."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)
        self.calls = 0

    def __call__(self) -> datetime:
        value = self.now + timedelta(minutes=self.calls)
        self.calls += 1
        return value


def item_fields(item: HuntItem) -> tuple:
    return (item.id, item.title, item.hint, item.found, item.photo_data, item.found_at, item.address)


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_1X1_BYTES


@pytest.fixture
def hunt_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "hunt.json"


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def store(hunt_path: Path, clock: StepClock) -> HuntStore:
    return HuntStore.open_at(hunt_path, clock=clock)
