"""Collaborator seams for speech, music and user-visible notices."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Protocol, TextIO

logger = logging.getLogger(__name__)

BACKGROUND_TRACK = "BG_MUSIC_MAIN"


@dataclass(frozen=True)
class SpeechParams:
    rate: float = 0.8
    pitch: float = 0.7
    volume: float = 0.9


ANNOUNCEMENT_VOICE = SpeechParams()


@dataclass(frozen=True)
class Notice:
    title: str
    description: str
    destructive: bool = False


class SpeechService(Protocol):
    def speak(self, text: str, params: SpeechParams) -> None:
        """Speak ``text`` asynchronously; nothing is returned to the caller."""


class MusicService(Protocol):
    def play(self, track: str) -> None:
        """Start looping ``track``."""

    def stop(self) -> None:
        """Stop any background track."""


class Notifier(Protocol):
    def notify(self, notice: Notice) -> None:
        """Show a notice to the participant."""


class LoggingNotifier:
    def notify(self, notice: Notice) -> None:
        level = logging.WARNING if notice.destructive else logging.INFO
        logger.log(level, f"{notice.title}: {notice.description}")


class ConsoleNotifier:
    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout

    def notify(self, notice: Notice) -> None:
        marker = "!" if notice.destructive else "*"
        print(f"[{marker}] {notice.title} - {notice.description}", file=self._stream)


class ConsoleSpeechService:
    """Writes announcements to a stream instead of a speech engine."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout

    def speak(self, text: str, params: SpeechParams) -> None:
        print(f"[voice rate={params.rate} pitch={params.pitch} volume={params.volume}] {text}", file=self._stream)


class SilentMusicService:
    def __init__(self) -> None:
        self.current_track: str | None = None

    def play(self, track: str) -> None:
        self.current_track = track
        logger.debug(f"Music started: {track}")

    def stop(self) -> None:
        if self.current_track is not None:
            logger.debug(f"Music stopped: {self.current_track}")
        self.current_track = None
