"""Shared pytest fixtures."""

import pytest

from shopcache import MemoryBackend
from shopcache.types import ToastKind


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: int = 1_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class RecordingToastSink:
    """Toast sink that keeps every notification for assertions."""

    def __init__(self) -> None:
        self.toasts: list[tuple[str, ToastKind]] = []

    def show_toast(
        self, message: str, kind: ToastKind = "info", duration: int | None = None
    ) -> None:
        self.toasts.append((message, kind))

    @property
    def errors(self) -> list[str]:
        return [message for message, kind in self.toasts if kind == "error"]

    @property
    def successes(self) -> list[str]:
        return [message for message, kind in self.toasts if kind == "success"]


@pytest.fixture
def clock() -> FakeClock:
    """Create a fresh FakeClock for each test."""
    return FakeClock()


@pytest.fixture
def toast() -> RecordingToastSink:
    """Create a toast sink that records notifications."""
    return RecordingToastSink()


@pytest.fixture
def backend() -> MemoryBackend:
    """Create a fresh MemoryBackend for each test."""
    return MemoryBackend()
