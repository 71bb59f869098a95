"""Authenticated request pipeline with single-flight token refresh.

Every request gets the stored access token as a bearer credential. When the
API answers 401 the pipeline runs one Refresh Cycle: the first failing
request exchanges the refresh token for a new access token while every other
request failing in the meantime waits in a FIFO queue. When the refresh
succeeds the original request and then the queue are replayed in arrival
order. When it fails the whole queue is rejected with ``unauthorized``, the
auth keys are cleared from the session store and ``session.expired`` is
published so the router can send the user to the login screen. A replay
that is still refused after a successful refresh ends the session the same
way, once per cycle.

The refresh call always goes through ``refresh_transport``, a transport that
is not wrapped by this pipeline. Sharing the main transport would let a 401
from the refresh endpoint re-enter the interceptor.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Iterable, Optional, Sequence

from launchpad.shared.core import events
from launchpad.shared.core.event_bus import EventBus
from launchpad.shared.core.failures import FailureType, RequestFailure, TransportError
from launchpad.shared.core.result import Error, Result
from launchpad.shared.infrastructure.network.endpoints import Endpoints
from launchpad.shared.infrastructure.network.middleware import (
    Handler,
    Middleware,
    compose,
    log_requests,
    transport_handler,
)
from launchpad.shared.infrastructure.network.transport import (
    HttpTransport,
    RequestDescriptor,
    Response,
    bearer,
)
from launchpad.shared.infrastructure.storage.session_store import AUTH_KEYS, SessionKey, SessionStore

logger = logging.getLogger(__name__)


@dataclass
class QueuedRequest:
    """A request suspended until the running Refresh Cycle completes."""

    request: RequestDescriptor
    future: asyncio.Future = field(repr=False)

    def resolve(self, result: Result[Response]) -> None:
        if not self.future.done():
            self.future.set_result(result)


class RefreshCycle:
    """At-most-one refresh in flight, plus the requests waiting on it.

    All methods are synchronous so that check-and-set of ``in_progress`` and
    the final drain/reset can never interleave with another task.
    """

    def __init__(self) -> None:
        self.in_progress = False
        self.queue: Deque[QueuedRequest] = deque()

    def begin(self) -> None:
        if self.in_progress:
            raise RuntimeError("A refresh cycle is already in progress")
        self.in_progress = True

    def enqueue(self, request: RequestDescriptor) -> QueuedRequest:
        if not self.in_progress:
            raise RuntimeError("Cannot queue a request without a refresh cycle")
        entry = QueuedRequest(request, asyncio.get_running_loop().create_future())
        self.queue.append(entry)
        return entry

    def next_queued(self) -> Optional[QueuedRequest]:
        return self.queue.popleft() if self.queue else None

    def reject_all(self, failure: RequestFailure) -> int:
        """Resolve every queued request with ``failure`` and end the cycle."""
        rejected = 0
        while self.queue:
            self.queue.popleft().resolve(Error(failure))
            rejected += 1
        self.finish()
        return rejected

    def finish(self) -> None:
        self.in_progress = False
        self.queue.clear()


class AuthenticatedRequestPipeline:
    """Sends API requests with bearer auth and transparent token refresh."""

    def __init__(
        self,
        transport: HttpTransport,
        refresh_transport: HttpTransport,
        store: SessionStore,
        *,
        cycle: Optional[RefreshCycle] = None,
        event_bus: Optional[EventBus] = None,
        refresh_path: str = Endpoints.REFRESH_TOKEN,
        no_refresh_paths: Iterable[str] = (Endpoints.LOGIN,),
        middlewares: Sequence[Middleware] = (),
    ):
        """Initialize the pipeline.

        Args:
            transport: Transport used for every API call
            refresh_transport: Separate transport used only for the refresh call
            store: Session store holding the tokens
            cycle: Refresh Cycle state, shared when several pipelines must agree
            event_bus: Bus that receives ``session.expired``
            refresh_path: Path of the token refresh endpoint
            no_refresh_paths: Paths whose 401 is returned as is (bad credentials)
            middlewares: Extra middlewares run inside the auth handling

        Raises:
            ValueError: If ``refresh_transport`` is the main transport
        """
        if refresh_transport is transport:
            raise ValueError("refresh_transport must be a separate transport instance")

        self.store = store
        self.cycle = cycle or RefreshCycle()
        self.event_bus = event_bus
        self.refresh_path = refresh_path
        self.no_refresh_paths = frozenset(no_refresh_paths) | {refresh_path}
        self._refresh_transport = refresh_transport
        self._handler: Handler = compose(
            transport_handler(transport),
            [self.refresh_on_unauthorized, self.attach_token, *middlewares, log_requests],
        )

    async def send(self, request: RequestDescriptor) -> Result[Response]:
        return await self._handler(request)

    # --- Middlewares ---

    async def attach_token(self, request: RequestDescriptor, call_next: Handler) -> Result[Response]:
        token = self.store.get_str(SessionKey.ACCESS_TOKEN)
        if token is not None:
            request = request.with_header("Authorization", bearer(token))
        return await call_next(request)

    async def refresh_on_unauthorized(self, request: RequestDescriptor, call_next: Handler) -> Result[Response]:
        result = await call_next(request)
        if not _is_unauthorized(result) or request.is_retry or request.path in self.no_refresh_paths:
            return result

        if self.cycle.in_progress:
            logger.debug(f"Refresh in progress, queuing {request.method} {request.path}")
            entry = self.cycle.enqueue(request)
            return await entry.future

        if not self.store.get(SessionKey.IS_LOGGED_IN):
            # Stale response from before the session was cleared
            return result

        self.cycle.begin()
        return await self._run_cycle(request, call_next)

    # --- Refresh Cycle ---

    async def _run_cycle(self, request: RequestDescriptor, call_next: Handler) -> Result[Response]:
        logger.info(f"Access token rejected on {request.path}, refreshing")
        try:
            try:
                failure = await self._refresh_access_token()
            except Exception as exc:
                failure = RequestFailure.from_exception(exc)

            if failure is not None:
                return await self._expire_session(failure, request)

            logger.info("Access token refreshed, replaying requests")
            result = await self._replay(request, call_next)
            rejected_path = await self._drain(call_next)
            if _is_unauthorized(result):
                rejected_path = request.path
            if rejected_path is not None:
                await self._end_session("Access token rejected after refresh", rejected_path)
            return result
        finally:
            # Only reached with the cycle open if the refreshing task was cancelled
            if self.cycle.in_progress:
                self.cycle.reject_all(RequestFailure(FailureType.UNKNOWN, "Token refresh was interrupted"))

    async def _refresh_access_token(self) -> Optional[RequestFailure]:
        """Exchange the refresh token; returns the failure or None on success."""
        refresh_token = self.store.get_str(SessionKey.REFRESH_TOKEN)
        if refresh_token is None:
            return RequestFailure.unauthorized("No refresh token stored")

        descriptor = RequestDescriptor(
            "GET",
            self.refresh_path,
            headers={"Authorization": bearer(refresh_token)},
        )
        try:
            response = await self._refresh_transport.dispatch(descriptor)
        except TransportError as exc:
            return exc.failure

        if not response.is_success:
            return RequestFailure.from_status(response.status_code, response.body)

        access_token = _token_from(response.body, "accessToken")
        if access_token is None:
            return RequestFailure(
                FailureType.PARSING,
                "Refresh response has no data.accessToken",
                response.status_code,
                response.body,
            )

        self.store.set(SessionKey.ACCESS_TOKEN, access_token)
        rotated = _token_from(response.body, "refreshToken")
        if rotated is not None:
            self.store.set(SessionKey.REFRESH_TOKEN, rotated)
        return None

    async def _replay(self, request: RequestDescriptor, call_next: Handler) -> Result[Response]:
        try:
            return await call_next(request.as_retry())
        except Exception as exc:
            return Error(RequestFailure.from_exception(exc))

    async def _drain(self, call_next: Handler) -> Optional[str]:
        """Replay queued requests in arrival order, including late arrivals.

        Returns the path of the first replay still refused with 401, if any.
        """
        rejected_path: Optional[str] = None
        while True:
            entry = self.cycle.next_queued()
            if entry is None:
                # No await between the empty check and the reset
                self.cycle.finish()
                return rejected_path
            if entry.future.cancelled():
                continue
            try:
                result = await self._replay(entry.request, call_next)
            except asyncio.CancelledError:
                # Hand the entry back so the cycle teardown rejects it
                self.cycle.queue.appendleft(entry)
                raise
            if rejected_path is None and _is_unauthorized(result):
                rejected_path = entry.request.path
            entry.resolve(result)

    async def _expire_session(self, failure: RequestFailure, request: RequestDescriptor) -> Result[Response]:
        logger.warning(f"Token refresh failed ({failure.type.value}): {failure.message}")
        terminal = RequestFailure.unauthorized(f"Session expired: {failure.message}")

        rejected = self.cycle.reject_all(terminal)
        logger.info(f"{rejected} queued request(s) rejected")
        await self._end_session(failure.message, request.path)
        return Error(terminal)

    async def _end_session(self, reason: str, path: str) -> None:
        """Remove the auth keys together and announce ``session.expired``."""
        self.store.remove(AUTH_KEYS)
        logger.info(f"Session cleared after 401 on {path}")

        if self.event_bus is not None:
            await self.event_bus.publish(
                events.TOPIC_SESSION_EXPIRED,
                events.create_session_expired_event(reason, path),
            )


def _is_unauthorized(result: Result[Response]) -> bool:
    return isinstance(result, Error) and result.failure.is_unauthorized


def _token_from(body: Any, name: str) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    data = body.get("data")
    if not isinstance(data, dict):
        return None
    token = data.get(name)
    return token if isinstance(token, str) and token else None
