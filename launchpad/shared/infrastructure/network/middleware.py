"""Request middleware composition.

A handler turns a ``RequestDescriptor`` into a ``Result``. A middleware wraps
the next handler and may rewrite the request or act on the result.
``compose`` chains them with the first middleware outermost.
"""

from __future__ import annotations

import logging
import time
from functools import partial
from typing import Awaitable, Callable, Sequence, TypeAlias

from launchpad.shared.core.failures import RequestFailure, TransportError
from launchpad.shared.core.result import Error, Result, Success
from launchpad.shared.infrastructure.network.transport import HttpTransport, RequestDescriptor, Response

logger = logging.getLogger(__name__)

Handler: TypeAlias = Callable[[RequestDescriptor], Awaitable[Result[Response]]]
Middleware: TypeAlias = Callable[[RequestDescriptor, Handler], Awaitable[Result[Response]]]


def compose(handler: Handler, middlewares: Sequence[Middleware]) -> Handler:
    for middleware in reversed(middlewares):
        handler = partial(middleware, call_next=handler)
    return handler


def transport_handler(transport: HttpTransport) -> Handler:
    """Terminal handler: dispatch and classify the outcome as a ``Result``."""

    async def dispatch(request: RequestDescriptor) -> Result[Response]:
        try:
            response = await transport.dispatch(request)
        except TransportError as exc:
            return Error(exc.failure)
        if response.is_success:
            return Success(response)
        return Error(RequestFailure.from_status(response.status_code, response.body))

    return dispatch


async def log_requests(request: RequestDescriptor, call_next: Handler) -> Result[Response]:
    """Debug-log every dispatch, retries included."""
    started = time.perf_counter()
    retry_marker = " (retry)" if request.is_retry else ""
    logger.debug(f"--> {request.method} {request.path}{retry_marker}")

    result = await call_next(request)

    elapsed_ms = (time.perf_counter() - started) * 1000
    if isinstance(result, Success):
        logger.debug(f"<-- {result.value.status_code} {request.path} ({elapsed_ms:.0f}ms)")
    else:
        failure = result.failure
        logger.debug(
            f"<-- {failure.status_code or '---'} {request.path} "
            f"{failure.type.value}: {failure.message} ({elapsed_ms:.0f}ms)"
        )
    return result
