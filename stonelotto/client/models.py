"""Snapshot models received from the gateway and core-owned view state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class RoundStatus(str, Enum):
    WAITING = "waiting"
    ACTIVE = "active"
    COMPLETED = "completed"


class Round(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    status: RoundStatus
    stake_amount: float = Field(default=0, alias="stake")
    pot_amount: float = Field(default=0, alias="stakePot")
    currency: str = ""
    winning_stone_id: int | None = Field(default=None, alias="winningNumber")
    winner_user_ids: frozenset[int] | None = Field(default=None, alias="winnerIds")
    voice_chat_enabled: bool = Field(default=False, alias="voiceChatEnabled")

    @property
    def is_completed(self) -> bool:
        return self.status == RoundStatus.COMPLETED

    @property
    def has_outcome(self) -> bool:
        return self.is_completed and self.winning_stone_id is not None and self.winner_user_ids is not None


class Participant(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    user_id: int = Field(alias="userId")
    display_name: str = Field(default="", alias="username")
    avatar_initials: str = Field(default="", alias="avatarInitials")
    submitted_roll: int | None = Field(default=None, alias="rolledNumber")

    @model_validator(mode="before")
    @classmethod
    def _flatten_user(cls, data: Any) -> Any:
        # Players arrive as {"userId": .., "rolledNumber": .., "user": {"username": ..}}.
        if isinstance(data, dict) and isinstance(data.get("user"), dict):
            merged = {key: value for key, value in data["user"].items() if key != "id"}
            merged.update({key: value for key, value in data.items() if key != "user"})
            return merged
        return data


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    user_id: int = Field(alias="userId")
    content: str
    ordinal: int | None = None


class SessionSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    round: Round = Field(alias="game")
    participants: tuple[Participant, ...] = Field(default=(), alias="players")
    messages: tuple[ChatMessage, ...] = ()

    @field_validator("messages")
    @classmethod
    def _order_messages(cls, messages: tuple[ChatMessage, ...]) -> tuple[ChatMessage, ...]:
        return tuple(sorted(messages, key=lambda message: message.id))

    def participant(self, user_id: int) -> Participant | None:
        for participant in self.participants:
            if participant.user_id == user_id:
                return participant
        return None


@dataclass(frozen=True)
class LocalRoundView:
    has_submitted_locally: bool = False
    is_awaiting_confirmation: bool = False
    selected_stone_id: int | None = None


@dataclass(frozen=True)
class ChatReadCursor:
    last_acknowledged_message_id: int | None = None
    unread_count: int = 0
