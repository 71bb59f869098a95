"""Failure taxonomy shared by the network layer and the repositories."""

from __future__ import annotations

import json
import ssl
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import httpx
from pydantic import ValidationError


class FailureType(str, Enum):
    """Categories every request or session failure is reported as."""
    TIMEOUT = "timeout"
    NETWORK = "network"
    BAD_RESPONSE = "bad_response"
    BAD_CERTIFICATE = "bad_certificate"
    PARSING = "parsing"
    UNAUTHORIZED = "unauthorized"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class RequestFailure:
    """A categorized failure carried inside an ``Error`` result."""

    type: FailureType
    message: str
    status_code: Optional[int] = None
    body: Any = None

    @property
    def is_unauthorized(self) -> bool:
        return self.type is FailureType.UNAUTHORIZED

    @classmethod
    def unauthorized(cls, message: str = "Session expired", status_code: Optional[int] = 401) -> "RequestFailure":
        return cls(FailureType.UNAUTHORIZED, message, status_code)

    @classmethod
    def from_status(cls, status_code: int, body: Any = None) -> "RequestFailure":
        """Map a non-2xx HTTP status to the taxonomy."""
        message = _message_from_body(body) or f"Request failed with status {status_code}"
        if status_code == 401:
            failure_type = FailureType.UNAUTHORIZED
        elif status_code == 404:
            failure_type = FailureType.NOT_FOUND
        elif status_code in (400, 422):
            failure_type = FailureType.VALIDATION
        else:
            failure_type = FailureType.BAD_RESPONSE
        return cls(failure_type, message, status_code, body)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "RequestFailure":
        """Map an exception raised while talking to the API to the taxonomy."""
        if isinstance(exc, TransportError):
            return exc.failure
        if isinstance(exc, httpx.TimeoutException):
            return cls(FailureType.TIMEOUT, f"Request timed out: {exc}")
        if isinstance(exc, httpx.TransportError):
            if _is_certificate_error(exc):
                return cls(FailureType.BAD_CERTIFICATE, f"Certificate verification failed: {exc}")
            return cls(FailureType.NETWORK, f"Network error: {exc}")
        if isinstance(exc, (json.JSONDecodeError, httpx.DecodingError, ValidationError)):
            return cls(FailureType.PARSING, f"Could not parse response: {exc}")
        if isinstance(exc, httpx.HTTPStatusError):
            return cls.from_status(exc.response.status_code)
        return cls(FailureType.UNKNOWN, str(exc) or exc.__class__.__name__)


class TransportError(Exception):
    """Raised by a transport when a request could not produce an HTTP response."""

    def __init__(self, failure: RequestFailure):
        super().__init__(failure.message)
        self.failure = failure


def _is_certificate_error(exc: BaseException) -> bool:
    current: Optional[BaseException] = exc
    while current is not None:
        if isinstance(current, ssl.SSLCertVerificationError):
            return True
        if "CERTIFICATE_VERIFY_FAILED" in str(current):
            return True
        current = current.__cause__ or current.__context__
    return False


def _message_from_body(body: Any) -> Optional[str]:
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return None
