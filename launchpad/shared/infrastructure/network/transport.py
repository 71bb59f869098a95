"""HTTP transport over ``httpx.AsyncClient``.

The transport knows nothing about tokens or retries. It turns a
``RequestDescriptor`` into a ``Response`` or raises ``TransportError`` when no
HTTP response could be obtained (timeouts, DNS, TLS, undecodable JSON).
Non-2xx statuses are returned as ordinary responses.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional

import httpx

from launchpad.shared.core.failures import FailureType, RequestFailure, TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestDescriptor:
    """Everything needed to (re)dispatch one API call."""

    method: str
    path: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None
    params: Optional[Mapping[str, Any]] = None
    # Set once the request has been replayed after a token refresh
    is_retry: bool = False

    def with_header(self, name: str, value: str) -> "RequestDescriptor":
        return replace(self, headers={**self.headers, name: value})

    def as_retry(self) -> "RequestDescriptor":
        return replace(self, is_retry=True)


@dataclass(frozen=True)
class Response:
    status_code: int
    body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class HttpTransport:
    """Dispatches request descriptors with one dedicated ``httpx.AsyncClient``."""

    def __init__(
        self,
        base_url: str,
        *,
        connect_timeout: float = 30.0,
        receive_timeout: float = 30.0,
        verify: bool = True,
        client: Optional[httpx.AsyncClient] = None,
        name: str = "main",
    ):
        """Initialize the transport.

        Args:
            base_url: API base URL request paths are resolved against
            connect_timeout: Connect timeout in seconds
            receive_timeout: Read/write timeout in seconds
            verify: Verify TLS certificates
            client: Pre-built client (tests plug in ``httpx.MockTransport`` here)
            name: Label used in log lines
        """
        self.name = name
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(receive_timeout, connect=connect_timeout),
            verify=verify,
            headers={"Accept": "application/json"},
        )

    async def dispatch(self, request: RequestDescriptor) -> Response:
        try:
            raw = await self._client.request(
                request.method,
                request.path,
                headers=dict(request.headers),
                params=request.params,
                json=request.body,
            )
        except httpx.HTTPError as exc:
            failure = RequestFailure.from_exception(exc)
            logger.debug(f"[{self.name}] {request.method} {request.path} failed: {failure.type.value}")
            raise TransportError(failure) from exc

        return Response(
            status_code=raw.status_code,
            body=_decode_body(raw),
            headers=dict(raw.headers),
        )

    async def aclose(self) -> None:
        await self._client.aclose()


def _decode_body(raw: httpx.Response) -> Any:
    if not raw.content:
        return None

    content_type = raw.headers.get("content-type", "")
    try:
        return raw.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        if "json" in content_type:
            raise TransportError(
                RequestFailure(
                    FailureType.PARSING,
                    f"Malformed JSON body: {exc}",
                    raw.status_code,
                )
            ) from exc
        return raw.text


def bearer(token: str) -> str:
    return f"Bearer {token}"
