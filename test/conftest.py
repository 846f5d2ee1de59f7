from __future__ import annotations

import pytest

# 2024-02-03T22:40:00Z
START_TIME = 1707000000


class FakeClock:
    """Manually advanced replacement for ``time.time``."""

    def __init__(self, now: float = START_TIME) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def tick(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
