"""
Tests for the shared core: failures, results and the event bus.
"""

from __future__ import annotations

import asyncio
import json
import ssl

import httpx
import pytest
from pydantic import BaseModel, ValidationError

from launchpad.shared.core.event_bus import EventBus
from launchpad.shared.core.failures import FailureType, RequestFailure, TransportError
from launchpad.shared.core.result import Error, RequestFailureError, Success, async_guard, unwrap

from tests.fakes import Recorder


# ---------------------------------------------------------------------------
# Failure taxonomy
# ---------------------------------------------------------------------------


class TestRequestFailure:
    @pytest.mark.parametrize(
        "status, expected",
        [
            (401, FailureType.UNAUTHORIZED),
            (404, FailureType.NOT_FOUND),
            (400, FailureType.VALIDATION),
            (422, FailureType.VALIDATION),
            (500, FailureType.BAD_RESPONSE),
            (503, FailureType.BAD_RESPONSE),
        ],
    )
    def test_from_status(self, status: int, expected: FailureType) -> None:
        failure = RequestFailure.from_status(status)

        assert failure.type is expected
        assert failure.status_code == status

    def test_from_status_takes_message_from_body(self) -> None:
        assert RequestFailure.from_status(400, {"error": "Email taken"}).message == "Email taken"
        assert RequestFailure.from_status(500, {"detail": "boom"}).message == "boom"
        assert "500" in RequestFailure.from_status(500, "<html>").message

    def test_timeout_exception(self) -> None:
        failure = RequestFailure.from_exception(httpx.ConnectTimeout("timed out"))

        assert failure.type is FailureType.TIMEOUT

    def test_transport_exception_is_network(self) -> None:
        assert RequestFailure.from_exception(httpx.ConnectError("refused")).type is FailureType.NETWORK

    def test_certificate_failure_is_bad_certificate(self) -> None:
        cause = ssl.SSLCertVerificationError("certificate verify failed")
        exc = httpx.ConnectError("[SSL: CERTIFICATE_VERIFY_FAILED]")
        exc.__cause__ = cause

        assert RequestFailure.from_exception(exc).type is FailureType.BAD_CERTIFICATE

    def test_decode_errors_are_parsing(self) -> None:
        class Model(BaseModel):
            value: int

        with pytest.raises(ValidationError) as info:
            Model(value="not a number")

        assert RequestFailure.from_exception(json.JSONDecodeError("bad", "{", 0)).type is FailureType.PARSING
        assert RequestFailure.from_exception(info.value).type is FailureType.PARSING

    def test_transport_error_keeps_its_failure(self) -> None:
        failure = RequestFailure(FailureType.NETWORK, "offline")

        assert RequestFailure.from_exception(TransportError(failure)) is failure

    def test_anything_else_is_unknown(self) -> None:
        failure = RequestFailure.from_exception(KeyError("x"))

        assert failure.type is FailureType.UNKNOWN


# ---------------------------------------------------------------------------
# Result helpers
# ---------------------------------------------------------------------------


class TestResult:
    def test_when_dispatches_on_variant(self) -> None:
        failure = RequestFailure(FailureType.NOT_FOUND, "gone")

        assert Success(3).when(success=lambda v: v * 2, error=lambda f: -1) == 6
        assert Error(failure).when(success=lambda v: v, error=lambda f: f.message) == "gone"

    def test_unwrap(self) -> None:
        failure = RequestFailure(FailureType.VALIDATION, "bad")

        assert unwrap(Success("ok")) == "ok"
        with pytest.raises(RequestFailureError) as info:
            unwrap(Error(failure))
        assert info.value.failure is failure

    @pytest.mark.asyncio
    async def test_async_guard_wraps_value(self) -> None:
        async def operation() -> int:
            return 42

        result = await async_guard(operation)

        assert result == Success(42)
        assert result.is_success

    @pytest.mark.asyncio
    async def test_async_guard_keeps_raised_failure(self) -> None:
        failure = RequestFailure(FailureType.VALIDATION, "missing id")

        async def operation() -> None:
            raise RequestFailureError(failure)

        result = await async_guard(operation)

        assert result == Error(failure)

    @pytest.mark.asyncio
    async def test_async_guard_categorizes_exceptions(self) -> None:
        async def operation() -> None:
            raise httpx.ReadTimeout("slow")

        result = await async_guard(operation)

        assert not result.is_success
        assert result.failure.type is FailureType.TIMEOUT


# ---------------------------------------------------------------------------
# EventBus
# ---------------------------------------------------------------------------


class TestEventBus:
    @pytest.mark.asyncio
    async def test_publish_reaches_every_subscriber(self) -> None:
        bus = EventBus()
        first, second = Recorder(), Recorder()
        await bus.subscribe("topic", first)
        await bus.subscribe("topic", second)

        await bus.publish("topic", {"n": 1})
        assert await bus.wait_until_idle() is True

        assert first.payloads == [{"n": 1}]
        assert second.payloads == [{"n": 1}]

    @pytest.mark.asyncio
    async def test_duplicate_subscription_is_ignored(self) -> None:
        bus = EventBus()
        recorder = Recorder()
        await bus.subscribe("topic", recorder)
        await bus.subscribe("topic", recorder)

        assert bus.subscriber_count("topic") == 1

    @pytest.mark.asyncio
    async def test_failing_handler_is_isolated(self) -> None:
        bus = EventBus()
        recorder = Recorder()

        async def broken(payload) -> None:
            raise RuntimeError("handler bug")

        await bus.subscribe("topic", broken)
        await bus.subscribe("topic", recorder)

        await bus.publish("topic", {})
        await bus.wait_until_idle()

        assert recorder.payloads == [{}]

    @pytest.mark.asyncio
    async def test_wait_until_idle_covers_follow_up_events(self) -> None:
        bus = EventBus()
        recorder = Recorder()

        async def relay(payload) -> None:
            await asyncio.sleep(0)
            await bus.publish("second", payload)

        await bus.subscribe("first", relay)
        await bus.subscribe("second", recorder)

        await bus.publish("first", {"hop": 1})
        await bus.wait_until_idle()

        assert recorder.payloads == [{"hop": 1}]

    @pytest.mark.asyncio
    async def test_unsubscribe_and_clear(self) -> None:
        bus = EventBus()
        recorder = Recorder()
        await bus.subscribe("a", recorder)
        await bus.subscribe("b", recorder)

        await bus.unsubscribe("a", recorder)
        await bus.publish("a", {})
        await bus.wait_until_idle()
        assert recorder.payloads == []

        bus.clear()
        assert bus.subscriber_count("b") == 0
