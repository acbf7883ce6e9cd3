"""Local roll lifecycle for the current participant."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

from stonelotto.client.errors import DuplicateSubmission, GatewayError, RoundNotActive, SubmissionFailed
from stonelotto.client.gateway import SessionGateway
from stonelotto.client.models import LocalRoundView, Participant, Round, RoundStatus
from stonelotto.client.services import LoggingNotifier, Notice, Notifier
from stonelotto.client.timers import PresentationTimers

logger = logging.getLogger(__name__)

SETTLE_DELAY_MS = 2000


class RollState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    RESOLVED = "resolved"


class RoundStateController:
    """Gates roll submission to once per round and defers to server state.

    The state value changes immediately on every transition. The settling
    interval after a confirmed roll only drives ``is_settling`` and the
    completion notice.
    """

    def __init__(
        self,
        game_id: int,
        gateway: SessionGateway,
        timers: PresentationTimers,
        notifier: Notifier | None = None,
        settle_delay_ms: int = SETTLE_DELAY_MS,
        on_settled: Callable[[], None] | None = None,
    ) -> None:
        self._game_id = game_id
        self._gateway = gateway
        self._timers = timers
        self._notifier = notifier if notifier is not None else LoggingNotifier()
        self._settle_delay_ms = settle_delay_ms
        self._on_settled = on_settled

        self._round: Round | None = None
        self._state = RollState.IDLE
        self._selected_stone_id: int | None = None
        self._settle_timer: int | None = None
        self._settling = False
        self.last_error: SubmissionFailed | None = None
        self._closed = False

    @property
    def state(self) -> RollState:
        return self._state

    @property
    def round_id(self) -> int | None:
        return self._round.id if self._round is not None else None

    @property
    def selected_stone_id(self) -> int | None:
        return self._selected_stone_id

    @property
    def is_settling(self) -> bool:
        return self._settling

    @property
    def can_roll(self) -> bool:
        return (
            self._state == RollState.IDLE
            and self._round is not None
            and self._round.status == RoundStatus.ACTIVE
        )

    @property
    def view(self) -> LocalRoundView:
        return LocalRoundView(
            has_submitted_locally=self._state != RollState.IDLE,
            is_awaiting_confirmation=self._state == RollState.SUBMITTING,
            selected_stone_id=self._selected_stone_id,
        )

    def enter_round(self, round: Round, participant: Participant | None) -> None:
        if self._round is None or self._round.id != round.id:
            if self._round is not None:
                logger.info(f"Round changed from {self._round.id} to {round.id}, resetting roll state")
            self._reset()
        self._round = round
        if participant is not None:
            self.on_server_reconcile(participant)

    async def request_roll(self) -> int | None:
        """Submit one roll for the current round.

        Returns the resolved stone id, or ``None`` when the request failed and
        the controller went back to idle. Gateway failures never propagate.
        """
        if self._state != RollState.IDLE:
            raise DuplicateSubmission(self._state.value)
        if self._round is None or self._round.status != RoundStatus.ACTIVE:
            raise RoundNotActive(
                round_id=self.round_id,
                status=self._round.status.value if self._round is not None else None,
            )

        round_id = self._round.id
        self._state = RollState.SUBMITTING
        self.last_error = None
        logger.info(f"Submitting roll for game {self._game_id} round {round_id}")

        try:
            stone_id = await self._gateway.submit_roll(self._game_id)
        except GatewayError as exc:
            if self._closed:
                logger.debug(f"Dropping roll failure after teardown: {exc.reason}")
                return None
            if self.round_id != round_id:
                logger.debug(f"Dropping roll failure for superseded round {round_id}")
                return None
            self.on_roll_rejected(exc.reason)
            return None

        if self._closed:
            logger.debug(f"Dropping roll confirmation for stone {stone_id} after teardown")
            return None
        if self.round_id != round_id:
            logger.debug(f"Dropping roll confirmation for superseded round {round_id}")
            return None
        self.on_roll_confirmed(stone_id)
        return self._selected_stone_id if self._state == RollState.RESOLVED else None

    def on_roll_confirmed(self, stone_id: int) -> None:
        if self._closed or self._state != RollState.SUBMITTING:
            logger.debug(f"Ignoring roll confirmation for stone {stone_id} in state {self._state.value}")
            return

        self._state = RollState.RESOLVED
        self._selected_stone_id = stone_id
        self._settling = True
        self._timers.cancel(self._settle_timer)
        self._settle_timer = self._timers.schedule(self._settle_delay_ms, self._finish_settling)
        logger.info(f"Roll confirmed: stone {stone_id}")

    def on_roll_rejected(self, reason: str) -> None:
        if self._closed or self._state != RollState.SUBMITTING:
            logger.debug(f"Ignoring roll rejection in state {self._state.value}: {reason}")
            return

        self._state = RollState.IDLE
        self.last_error = SubmissionFailed(reason)
        logger.warning(f"Roll rejected for game {self._game_id}: {reason}")
        self._notifier.notify(Notice(title="Roll Failed", description=reason or "Failed to submit your roll", destructive=True))

    def on_server_reconcile(self, participant: Participant) -> None:
        server_roll = participant.submitted_roll
        if server_roll is None:
            return

        if self._state in (RollState.IDLE, RollState.SUBMITTING):
            logger.info(f"Server reports stone {server_roll} already rolled, resolving from {self._state.value}")
            self._state = RollState.RESOLVED
            self._selected_stone_id = server_roll
        elif self._selected_stone_id != server_roll:
            logger.warning(f"Local stone {self._selected_stone_id} differs from server stone {server_roll}, using server")
            self._selected_stone_id = server_roll

    def teardown(self) -> None:
        self._closed = True
        self._timers.cancel(self._settle_timer)
        self._settle_timer = None
        self._settling = False

    def _finish_settling(self) -> None:
        self._settle_timer = None
        self._settling = False
        self._notifier.notify(Notice(title="Roll Complete!", description=f"You rolled stone {self._selected_stone_id}!"))
        if self._on_settled is not None:
            self._on_settled()

    def _reset(self) -> None:
        self._timers.cancel(self._settle_timer)
        self._settle_timer = None
        self._settling = False
        self._state = RollState.IDLE
        self._selected_stone_id = None
        self.last_error = None
