"""Session orchestration: wires gateway snapshots into the client core."""

from __future__ import annotations

import asyncio
import logging

from stonelotto.client.announcer import OutcomeAnnouncer, winner_names
from stonelotto.client.catalog import STONE_CATALOG, StoneCatalog
from stonelotto.client.chat_tracker import ChatActivityTracker
from stonelotto.client.config import ClientSettings, load_settings
from stonelotto.client.errors import DuplicateSubmission, GatewayError, RoundNotActive
from stonelotto.client.gateway import SessionGateway
from stonelotto.client.models import ChatMessage, SessionSnapshot
from stonelotto.client.round_controller import RoundStateController
from stonelotto.client.services import (
    BACKGROUND_TRACK,
    LoggingNotifier,
    MusicService,
    Notice,
    Notifier,
    SilentMusicService,
    SpeechService,
)
from stonelotto.client.timers import PresentationTimers, Scheduler

logger = logging.getLogger(__name__)


class GameSession:
    def __init__(
        self,
        game_id: int,
        user_id: int,
        gateway: SessionGateway,
        speech: SpeechService,
        settings: ClientSettings | None = None,
        notifier: Notifier | None = None,
        music: MusicService | None = None,
        scheduler: Scheduler | None = None,
        catalog: StoneCatalog = STONE_CATALOG,
    ) -> None:
        self.game_id = game_id
        self.user_id = user_id
        self.settings = settings if settings is not None else load_settings()
        self._gateway = gateway
        self._notifier = notifier if notifier is not None else LoggingNotifier()
        self._music = music if music is not None else SilentMusicService()
        self._timers = PresentationTimers(scheduler)
        self._refresh_requested = asyncio.Event()
        self.snapshot: SessionSnapshot | None = None

        self.rounds = RoundStateController(
            game_id=game_id,
            gateway=gateway,
            timers=self._timers,
            notifier=self._notifier,
            settle_delay_ms=self.settings.settle_delay_ms,
            on_settled=self.request_refresh,
        )
        self.announcer = OutcomeAnnouncer(
            speech=speech,
            timers=self._timers,
            catalog=catalog,
            delay_ms=self.settings.announce_delay_ms,
            sounds_enabled=self.settings.game_sounds_enabled,
        )
        self.chat = ChatActivityTracker(game_id=game_id, gateway=gateway, notifier=self._notifier)
        self.music_enabled = False
        if self.settings.music_enabled:
            self.toggle_music()

    @property
    def sounds_enabled(self) -> bool:
        return self.announcer.sounds_enabled

    @property
    def closed(self) -> bool:
        return self._timers.closed

    def apply_snapshot(self, snapshot: SessionSnapshot) -> None:
        if self.closed:
            logger.debug(f"Ignoring snapshot for game {self.game_id} after teardown")
            return
        self.snapshot = snapshot
        self.rounds.enter_round(snapshot.round, snapshot.participant(self.user_id))
        self.announcer.observe(snapshot.round, snapshot.participants)
        self.chat.on_messages_updated(snapshot.messages)

    async def refresh(self) -> SessionSnapshot | None:
        self._refresh_requested.clear()
        try:
            snapshot = await self._gateway.fetch_snapshot(self.game_id)
        except GatewayError as exc:
            logger.warning(f"Refresh failed for game {self.game_id}: {exc.reason}")
            self._notifier.notify(Notice(title="Connection Problem", description=exc.reason, destructive=True))
            return None
        self.apply_snapshot(snapshot)
        return snapshot

    @property
    def refresh_pending(self) -> bool:
        return self._refresh_requested.is_set()

    def request_refresh(self) -> None:
        self._refresh_requested.set()

    async def roll(self) -> int | None:
        try:
            return await self.rounds.request_roll()
        except (DuplicateSubmission, RoundNotActive) as exc:
            logger.debug(f"Roll request ignored: {exc}")
            return None

    async def send_message(self, content: str | None = None) -> ChatMessage | None:
        created = await self.chat.submit_message(content)
        if created is not None:
            self.request_refresh()
        return created

    def open_chat(self) -> None:
        self.chat.open()

    def close_chat(self) -> None:
        self.chat.close()

    def toggle_sounds(self) -> bool:
        self.announcer.sounds_enabled = not self.announcer.sounds_enabled
        logger.info(f"Game sounds {'enabled' if self.announcer.sounds_enabled else 'disabled'}")
        return self.announcer.sounds_enabled

    def toggle_music(self) -> bool:
        self.music_enabled = not self.music_enabled
        if self.music_enabled:
            self._music.play(BACKGROUND_TRACK)
        else:
            self._music.stop()
        return self.music_enabled

    def winners(self) -> list[str]:
        if self.snapshot is None or not self.snapshot.round.has_outcome:
            return []
        return winner_names(self.snapshot.round, self.snapshot.participants)

    async def run(self, stop: asyncio.Event) -> None:
        """Refresh until ``stop`` is set, early whenever a refresh is requested."""
        while not stop.is_set():
            await self.refresh()
            waiters = {
                asyncio.ensure_future(stop.wait()),
                asyncio.ensure_future(self._refresh_requested.wait()),
            }
            try:
                await asyncio.wait(waiters, timeout=self.settings.poll_interval, return_when=asyncio.FIRST_COMPLETED)
            finally:
                for waiter in waiters:
                    waiter.cancel()

    def teardown(self) -> None:
        self.rounds.teardown()
        self._timers.close()
        if self.music_enabled:
            self.toggle_music()
        logger.info(f"Session for game {self.game_id} torn down")
