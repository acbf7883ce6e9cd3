import asyncio

from stonelotto.client.chat_tracker import ChatActivityTracker
from stonelotto.client.models import ChatMessage


def _messages(*ids: int) -> list[ChatMessage]:
    return [ChatMessage(id=message_id, user_id=7, content=f"message {message_id}") for message_id in ids]


def _tracker(gateway, notifier) -> ChatActivityTracker:
    return ChatActivityTracker(game_id=42, gateway=gateway, notifier=notifier)


def test_everything_is_unread_before_first_acknowledgment(gateway, notifier) -> None:
    tracker = _tracker(gateway, notifier)

    tracker.on_messages_updated(_messages(1, 2))

    assert tracker.unread_count == 2
    assert tracker.cursor.last_acknowledged_message_id is None


def test_new_messages_after_cursor_and_repeated_acknowledge(gateway, notifier) -> None:
    tracker = _tracker(gateway, notifier)
    tracker.on_messages_updated(_messages(99, 100))
    tracker.acknowledge()
    assert tracker.cursor.last_acknowledged_message_id == 100

    tracker.on_messages_updated(_messages(99, 100, 101, 102, 103))
    assert tracker.unread_count == 3

    tracker.acknowledge()
    assert tracker.cursor.last_acknowledged_message_id == 103
    assert tracker.unread_count == 0

    tracker.acknowledge()
    assert tracker.cursor.last_acknowledged_message_id == 103
    assert tracker.unread_count == 0


def test_unread_count_does_not_depend_on_open_surface(gateway, notifier) -> None:
    tracker = _tracker(gateway, notifier)
    tracker.on_messages_updated(_messages(1))
    tracker.open()
    assert tracker.unread_count == 0

    tracker.on_messages_updated(_messages(1, 2))

    assert tracker.is_open is True
    assert tracker.unread_count == 1


def test_acknowledge_without_messages_keeps_empty_cursor(gateway, notifier) -> None:
    tracker = _tracker(gateway, notifier)

    tracker.acknowledge()
    tracker.on_messages_updated(_messages(5))

    assert tracker.cursor.last_acknowledged_message_id is None
    assert tracker.unread_count == 1


def test_badge_and_banner_labels(gateway, notifier) -> None:
    tracker = _tracker(gateway, notifier)
    assert tracker.badge_label == ""
    assert tracker.banner_text == ""

    tracker.on_messages_updated(_messages(1))
    assert tracker.badge_label == "1"
    assert tracker.banner_text == "1 new message"

    tracker.on_messages_updated(_messages(*range(1, 13)))
    assert tracker.badge_label == "9+"
    assert tracker.banner_text == "12 new messages"


def test_submit_message_sends_trimmed_buffer_and_clears_it(gateway, notifier) -> None:
    tracker = _tracker(gateway, notifier)
    tracker.input_buffer = "  good luck  "

    created = asyncio.run(tracker.submit_message())

    assert created is not None
    assert created.content == "good luck"
    assert gateway.message_calls == [(42, "good luck")]
    assert tracker.input_buffer == ""


def test_blank_message_is_not_sent(gateway, notifier) -> None:
    tracker = _tracker(gateway, notifier)
    tracker.input_buffer = "   "

    assert asyncio.run(tracker.submit_message()) is None
    assert asyncio.run(tracker.submit_message("\t\n")) is None
    assert gateway.message_calls == []


def test_failed_message_keeps_buffer_and_unread_state(gateway, notifier) -> None:
    gateway.message_error = "Chat unavailable"
    tracker = _tracker(gateway, notifier)
    tracker.on_messages_updated(_messages(1, 2))
    tracker.input_buffer = "hello"

    assert asyncio.run(tracker.submit_message()) is None

    assert gateway.message_calls == [(42, "hello")]
    assert tracker.input_buffer == "hello"
    assert tracker.unread_count == 2
    assert tracker.cursor.last_acknowledged_message_id is None
    assert tracker.last_error is not None
    assert notifier.notices[-1].title == "Message Failed"
    assert notifier.notices[-1].description == "Chat unavailable"
