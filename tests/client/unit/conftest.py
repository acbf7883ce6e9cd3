from __future__ import annotations

import asyncio
from typing import Callable

import pytest

from stonelotto.client.config import ClientSettings
from stonelotto.client.errors import GatewayError
from stonelotto.client.models import ChatMessage, SessionSnapshot
from stonelotto.client.services import Notice, SpeechParams


class ManualHandle:
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    def __init__(self) -> None:
        self.now = 0.0
        self.handles: list[ManualHandle] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    def advance(self, seconds: float) -> None:
        self.now += seconds
        due = [handle for handle in self.handles if handle.due <= self.now and not handle.cancelled]
        self.handles = [handle for handle in self.handles if handle not in due]
        for handle in sorted(due, key=lambda item: item.due):
            handle.callback()


class RecordingSpeech:
    def __init__(self) -> None:
        self.spoken: list[tuple[str, SpeechParams]] = []

    def speak(self, text: str, params: SpeechParams) -> None:
        self.spoken.append((text, params))


class RecordingNotifier:
    def __init__(self) -> None:
        self.notices: list[Notice] = []

    def notify(self, notice: Notice) -> None:
        self.notices.append(notice)


class FakeGateway:
    def __init__(self) -> None:
        self.roll_calls: list[int] = []
        self.message_calls: list[tuple[int, str]] = []
        self.fetch_calls: list[int] = []
        self.roll_result: int = 12
        self.roll_error: str | None = None
        self.message_error: str | None = None
        self.fetch_error: str | None = None
        self.snapshot: SessionSnapshot | None = None
        self.release = asyncio.Event()
        self.release.set()
        self._next_message_id = 1000

    async def submit_roll(self, game_id: int) -> int:
        self.roll_calls.append(game_id)
        await self.release.wait()
        if self.roll_error is not None:
            raise GatewayError(self.roll_error, status_code=400)
        return self.roll_result

    async def submit_message(self, game_id: int, content: str) -> ChatMessage:
        self.message_calls.append((game_id, content))
        if self.message_error is not None:
            raise GatewayError(self.message_error, status_code=500)
        self._next_message_id += 1
        return ChatMessage(id=self._next_message_id, user_id=7, content=content)

    async def fetch_snapshot(self, game_id: int) -> SessionSnapshot:
        self.fetch_calls.append(game_id)
        if self.fetch_error is not None:
            raise GatewayError(self.fetch_error)
        assert self.snapshot is not None
        return self.snapshot


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def speech() -> RecordingSpeech:
    return RecordingSpeech()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def settings() -> ClientSettings:
    return ClientSettings(
        server_url="http://testserver",
        token=None,
        poll_interval=0.01,
        settle_delay_ms=2000,
        announce_delay_ms=1000,
        game_sounds_enabled=True,
        music_enabled=False,
        request_timeout=1.0,
    )
