"""Exception hierarchy for the client round and chat core."""

from __future__ import annotations


class StoneLottoError(Exception):
    """Base class for all client core errors."""


class DuplicateSubmission(StoneLottoError):
    """A roll was requested while the local roll state was not idle."""

    def __init__(self, state: str) -> None:
        self.state = state
        super().__init__(f"Roll already {state}")


class RoundNotActive(StoneLottoError):
    """A roll was requested while the round was not accepting rolls."""

    def __init__(self, round_id: int | None, status: str | None) -> None:
        self.round_id = round_id
        self.status = status
        super().__init__(f"Round {round_id} is not active (status={status})")


class GatewayError(StoneLottoError):
    """The session sync gateway rejected a request or could not be reached."""

    def __init__(self, reason: str, status_code: int | None = None) -> None:
        self.reason = reason
        self.status_code = status_code
        super().__init__(reason)


class SubmissionFailed(StoneLottoError):
    """A roll or chat submission failed and may be retried."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class DataInconsistency(StoneLottoError):
    """A snapshot references a participant that is not in the participant list."""

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        super().__init__(f"No participant for user {user_id}")
