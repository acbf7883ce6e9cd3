"""Session sync gateway contract and its HTTP adapter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from stonelotto.client.config import ClientSettings
from stonelotto.client.errors import GatewayError
from stonelotto.client.models import ChatMessage, SessionSnapshot


class SessionGateway(Protocol):
    async def submit_roll(self, game_id: int) -> int:
        """Submit the participant's roll and return the assigned stone id."""

    async def submit_message(self, game_id: int, content: str) -> ChatMessage:
        """Create a chat message and return it."""

    async def fetch_snapshot(self, game_id: int) -> SessionSnapshot:
        """Return the current round, participant list and message list."""


def _error_reason(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return f"{response.status_code} {response.reason_phrase}".strip()


@dataclass
class HttpSessionGateway:
    base_url: str
    token: str | None = None
    timeout: float = 10.0
    transport: httpx.AsyncBaseTransport | None = None

    def _client(self) -> httpx.AsyncClient:
        params = {"token": self.token} if self.token else None
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            params=params,
            transport=self.transport,
        )

    async def _send(self, method: str, path: str, payload: dict[str, Any] | None = None) -> Any:
        try:
            async with self._client() as client:
                response = await client.request(method, path, json=payload)
        except httpx.HTTPError as exc:
            raise GatewayError(f"Could not reach game server: {exc}") from exc

        if response.is_error:
            raise GatewayError(_error_reason(response), status_code=response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise GatewayError("Game server returned malformed JSON", status_code=response.status_code) from exc

    async def submit_roll(self, game_id: int) -> int:
        body = await self._send("POST", f"/api/games/{game_id}/roll", {})
        rolled = body.get("rolledNumber") if isinstance(body, dict) else None
        if not isinstance(rolled, int) or isinstance(rolled, bool):
            raise GatewayError("Roll response did not include a stone number")
        return rolled

    async def submit_message(self, game_id: int, content: str) -> ChatMessage:
        body = await self._send("POST", f"/api/games/{game_id}/messages", {"content": content})
        try:
            return ChatMessage.model_validate(body)
        except ValidationError as exc:
            raise GatewayError(f"Malformed chat message: {exc.error_count()} error(s)") from exc

    async def fetch_snapshot(self, game_id: int) -> SessionSnapshot:
        body = await self._send("GET", f"/api/games/{game_id}")
        try:
            return SessionSnapshot.model_validate(body)
        except ValidationError as exc:
            raise GatewayError(f"Malformed game snapshot: {exc.error_count()} error(s)") from exc


def create_gateway(settings: ClientSettings) -> SessionGateway:
    return HttpSessionGateway(
        base_url=settings.server_url,
        token=settings.token,
        timeout=settings.request_timeout,
    )
