"""Authentication repository: login, logout and remember-me."""

from __future__ import annotations

import logging
from typing import Optional

from launchpad.shared.core import events
from launchpad.shared.core.event_bus import EventBus, EventPayload
from launchpad.shared.core.failures import FailureType, RequestFailure
from launchpad.shared.core.result import RequestFailureError, Result, Success, async_guard, unwrap
from launchpad.shared.domain.entities import LoginRequest, LoginResponse
from launchpad.shared.infrastructure.network.rest_client import RestClient
from launchpad.shared.infrastructure.storage.session_store import AUTH_KEYS, SessionKey, SessionStore

logger = logging.getLogger(__name__)


class AuthenticationRepository:
    """Keeps the session store in step with the user's authentication state."""

    def __init__(self, client: RestClient, store: SessionStore, event_bus: Optional[EventBus] = None):
        self._client = client
        self._store = store
        self._event_bus = event_bus

    async def login(self, request: LoginRequest, remember_me: bool = False) -> Result[LoginResponse]:
        """Log in and persist the token pair and the logged-in flag.

        The access token is written before ``isLoggedIn`` so the flag never
        points at a missing token.
        """

        async def operation() -> LoginResponse:
            response = unwrap(await self._client.login(request.model_dump()))
            data = response.body.get("data") if isinstance(response.body, dict) else None
            if not isinstance(data, dict):
                raise RequestFailureError(
                    RequestFailure(FailureType.PARSING, "Login response has no data object", response.status_code)
                )
            tokens = LoginResponse.model_validate(data)

            self._store.set(SessionKey.ACCESS_TOKEN, tokens.access_token)
            if tokens.refresh_token:
                self._store.set(SessionKey.REFRESH_TOKEN, tokens.refresh_token)
            self._store.set(SessionKey.IS_LOGGED_IN, True)
            self._store.set(SessionKey.REMEMBER_ME, remember_me)
            return tokens

        result = await async_guard(operation)
        if isinstance(result, Success):
            logger.info("User logged in")
            await self._publish(events.TOPIC_SESSION_LOGGED_IN, events.create_session_logged_in_event(remember_me))
        else:
            logger.warning(f"Login failed: {result.failure.type.value}: {result.failure.message}")
        return result

    async def logout(self) -> Result[None]:
        self._store.remove(AUTH_KEYS)
        logger.info("User logged out")
        await self._publish(events.TOPIC_SESSION_LOGGED_OUT, events.create_session_logged_out_event())
        return Success(None)

    def check_remember_me(self) -> bool:
        return self._store.get_bool(SessionKey.REMEMBER_ME)

    def save_remember_me(self, value: bool) -> None:
        self._store.set(SessionKey.REMEMBER_ME, value)

    async def _publish(self, topic: str, payload: EventPayload) -> None:
        if self._event_bus is not None:
            await self._event_bus.publish(topic, payload)
