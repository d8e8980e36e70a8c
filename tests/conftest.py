from __future__ import annotations

import pytest


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class Recorder:
    """Callable that remembers its calls."""

    def __init__(self, result=None, error: Exception | None = None) -> None:
        self.calls: list[tuple] = []
        self.result = result
        self.error = error

    def __call__(self, *args):
        self.calls.append(args)
        if self.error is not None:
            raise self.error
        return self.result

    @property
    def count(self) -> int:
        return len(self.calls)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def speaker() -> Recorder:
    return Recorder()


@pytest.fixture
def submitter() -> Recorder:
    return Recorder(result="pending")
