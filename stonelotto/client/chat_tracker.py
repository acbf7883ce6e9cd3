"""Unread chat tracking and message submission."""

from __future__ import annotations

import logging
from typing import Sequence

from stonelotto.client.errors import GatewayError, SubmissionFailed
from stonelotto.client.gateway import SessionGateway
from stonelotto.client.models import ChatMessage, ChatReadCursor
from stonelotto.client.services import LoggingNotifier, Notice, Notifier

logger = logging.getLogger(__name__)

BADGE_LIMIT = 9


class ChatActivityTracker:
    """Counts messages newer than the last acknowledged one.

    The unread count is independent of whether the chat surface is open; the
    session acknowledges explicitly when the surface is shown.
    """

    def __init__(self, game_id: int, gateway: SessionGateway, notifier: Notifier | None = None) -> None:
        self._game_id = game_id
        self._gateway = gateway
        self._notifier = notifier if notifier is not None else LoggingNotifier()
        self._messages: tuple[ChatMessage, ...] = ()
        self._cursor = ChatReadCursor()
        self.input_buffer = ""
        self.is_open = False
        self.last_error: SubmissionFailed | None = None

    @property
    def cursor(self) -> ChatReadCursor:
        return self._cursor

    @property
    def unread_count(self) -> int:
        return self._cursor.unread_count

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return self._messages

    @property
    def badge_label(self) -> str:
        count = self._cursor.unread_count
        if count <= 0:
            return ""
        if count > BADGE_LIMIT:
            return f"{BADGE_LIMIT}+"
        return str(count)

    @property
    def banner_text(self) -> str:
        count = self._cursor.unread_count
        if count <= 0:
            return ""
        return f"{count} new message{'s' if count > 1 else ''}"

    def on_messages_updated(self, messages: Sequence[ChatMessage]) -> None:
        self._messages = tuple(sorted(messages, key=lambda message: message.id))
        last_id = self._cursor.last_acknowledged_message_id
        unread = sum(1 for message in self._messages if last_id is None or message.id > last_id)
        if unread != self._cursor.unread_count:
            logger.debug(f"Unread messages for game {self._game_id}: {unread}")
        self._cursor = ChatReadCursor(last_acknowledged_message_id=last_id, unread_count=unread)

    def acknowledge(self) -> None:
        latest_id = max((message.id for message in self._messages), default=None)
        last_id = self._cursor.last_acknowledged_message_id
        if latest_id is None or (last_id is not None and latest_id < last_id):
            latest_id = last_id
        self._cursor = ChatReadCursor(last_acknowledged_message_id=latest_id, unread_count=0)

    def open(self) -> None:
        self.is_open = True
        self.acknowledge()

    def close(self) -> None:
        self.is_open = False

    async def submit_message(self, content: str | None = None) -> ChatMessage | None:
        """Send ``content`` (or the input buffer) as one chat message.

        Blank content sends nothing. On failure the buffer is kept for retry
        and ``None`` is returned.
        """
        text = (self.input_buffer if content is None else content).strip()
        if not text:
            logger.debug("Not sending blank chat message")
            return None

        self.last_error = None
        try:
            created = await self._gateway.submit_message(self._game_id, text)
        except GatewayError as exc:
            self.last_error = SubmissionFailed(exc.reason)
            logger.warning(f"Chat message failed for game {self._game_id}: {exc.reason}")
            self._notifier.notify(
                Notice(title="Message Failed", description=exc.reason or "Failed to send message", destructive=True)
            )
            return None

        self.input_buffer = ""
        logger.info(f"Sent chat message {created.id} to game {self._game_id}")
        return created
