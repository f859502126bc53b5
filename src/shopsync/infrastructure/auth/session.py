"""Bearer-token session shared by every request to the catalog.

Token acquisition (login) happens elsewhere; this only holds the token,
injects it into requests and forgets it when the server rejects it.
"""

from __future__ import annotations

from collections.abc import Callable, Generator

import httpx
import structlog

logger = structlog.get_logger(__name__)


class AuthSession:

    def __init__(self, token: str | None = None) -> None:
        self._token = token
        self._on_invalidated: list[Callable[[], None]] = []

    @property
    def token(self) -> str | None:
        return self._token

    def on_invalidated(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` whenever the session is invalidated (e.g. a 401)."""
        self._on_invalidated.append(callback)

    def invalidate(self) -> None:
        self._token = None
        logger.warning("session_invalidated")
        for callback in list(self._on_invalidated):
            callback()


class BearerAuth(httpx.Auth):
    """Adds ``Authorization: Bearer <token>`` when the session has a token."""

    def __init__(self, session: AuthSession) -> None:
        self._session = session

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        if self._session.token:
            request.headers["Authorization"] = f"Bearer {self._session.token}"
        yield request
