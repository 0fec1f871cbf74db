"""Shared fixtures for the Document Q&A UI tests."""

from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest

from docqa_ui.core.config import ClientConfig


class FakeClock:
    """Monotonic clock advanced only by FakeSleep."""

    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class FakeSleep:
    """Records requested delays and advances the fake clock instead."""

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        self.clock.now += seconds


def make_completion(
    text: Optional[str] = "An answer",
    usage: Optional[Dict[str, int]] = None
) -> Any:
    """Build an object shaped like a Together completion response."""
    choices = [] if text is None else [SimpleNamespace(text=text)]
    return SimpleNamespace(
        choices=choices,
        usage=SimpleNamespace(**usage) if usage is not None else None,
    )


class FakeCompletions:
    def __init__(self, response: Any = None, error: Optional[Exception] = None) -> None:
        self.response = response if response is not None else make_completion()
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


class FakeTogether:
    """Stand-in for AsyncTogether exposing ``completions.create``."""

    def __init__(self, response: Any = None, error: Optional[Exception] = None) -> None:
        self.completions = FakeCompletions(response, error)


@pytest.fixture  # type: ignore[misc]
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture  # type: ignore[misc]
def fake_sleep(clock: FakeClock) -> FakeSleep:
    return FakeSleep(clock)


@pytest.fixture  # type: ignore[misc]
def mock_config() -> ClientConfig:
    return ClientConfig(use_mock_data=True)


@pytest.fixture  # type: ignore[misc]
def live_config() -> ClientConfig:
    return ClientConfig(
        base_url="http://backend.test/api",
        use_mock_data=False,
    )
