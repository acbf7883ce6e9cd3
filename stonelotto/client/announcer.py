"""Once-per-round spoken announcement of the winning stone."""

from __future__ import annotations

import logging
from typing import Sequence

from stonelotto.client.catalog import STONE_CATALOG, PayoutClass, StoneCatalog
from stonelotto.client.errors import DataInconsistency
from stonelotto.client.models import Participant, Round
from stonelotto.client.services import ANNOUNCEMENT_VOICE, SpeechParams, SpeechService
from stonelotto.client.timers import PresentationTimers

logger = logging.getLogger(__name__)

ANNOUNCE_DELAY_MS = 1000

_TIER_PHRASES = {
    PayoutClass.TRIPLE: "{names} wins with triple payout! Incredible luck!",
    PayoutClass.SUPER: "{names} takes the super prize! Amazing!",
    PayoutClass.DOUBLE: "{names} gets double payout! Congratulations!",
    PayoutClass.NORMAL: "{names} takes the prize! Great roll!",
}


def placeholder_name(user_id: int) -> str:
    return f"Player {user_id}"


def winner_names(round: Round, participants: Sequence[Participant]) -> list[str]:
    """Resolve winner ids to display names.

    Names follow participant order; ids with no participant are logged as a
    data inconsistency and rendered with a placeholder after the known names.
    """
    winner_ids = round.winner_user_ids or frozenset()
    names: list[str] = []
    seen: set[int] = set()
    for participant in participants:
        if participant.user_id in winner_ids and participant.user_id not in seen:
            seen.add(participant.user_id)
            names.append(participant.display_name or placeholder_name(participant.user_id))

    for user_id in sorted(winner_ids - seen):
        logger.warning(f"Round {round.id} winner {user_id} has no participant", exc_info=DataInconsistency(user_id))
        names.append(placeholder_name(user_id))
    return names


def join_names(names: Sequence[str]) -> str:
    return " and ".join(names)


def compose_announcement(stone_id: int, names: Sequence[str], catalog: StoneCatalog = STONE_CATALOG) -> str:
    payout_class = catalog.classify(stone_id)
    phrase = _TIER_PHRASES[payout_class].format(names=join_names(names))
    return f"Stone {stone_id} wins! {phrase}"


class OutcomeAnnouncer:
    def __init__(
        self,
        speech: SpeechService,
        timers: PresentationTimers,
        catalog: StoneCatalog = STONE_CATALOG,
        delay_ms: int = ANNOUNCE_DELAY_MS,
        voice: SpeechParams = ANNOUNCEMENT_VOICE,
        sounds_enabled: bool = True,
    ) -> None:
        self._speech = speech
        self._timers = timers
        self._catalog = catalog
        self._delay_ms = delay_ms
        self._voice = voice
        self.sounds_enabled = sounds_enabled
        self._last_announced_round_id: int | None = None

    @property
    def last_announced_round_id(self) -> int | None:
        return self._last_announced_round_id

    def observe(self, round: Round, participants: Sequence[Participant]) -> str | None:
        """Schedule the announcement for a newly completed round.

        Returns the announcement text the first time a completed round id is
        seen and ``None`` on every other call.
        """
        if not round.has_outcome or round.winning_stone_id is None:
            return None
        if round.id == self._last_announced_round_id:
            return None

        # Marked before dispatch so re-observation during the delay stays a no-op.
        self._last_announced_round_id = round.id
        names = winner_names(round, participants)
        if not names:
            logger.info(f"Round {round.id} completed on stone {round.winning_stone_id} with no winners")
            return None

        message = compose_announcement(stone_id=round.winning_stone_id, names=names, catalog=self._catalog)
        logger.info(f"Round {round.id} completed: {message}")
        self._timers.schedule(self._delay_ms, lambda: self._speak(round.id, message))
        return message

    def _speak(self, round_id: int, message: str) -> None:
        if not self.sounds_enabled:
            logger.debug(f"Game sounds disabled, not speaking announcement for round {round_id}")
            return
        self._speech.speak(message, self._voice)
