"""Success/Error result values returned across layer boundaries."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, TypeVar, Union

from .failures import RequestFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def is_success(self) -> bool:
        return True

    @property
    def failure(self) -> None:
        return None

    def when(self, success: Callable[[T], R], error: Callable[[RequestFailure], R]) -> R:
        return success(self.value)


@dataclass(frozen=True)
class Error:
    failure: RequestFailure

    @property
    def is_success(self) -> bool:
        return False

    @property
    def value(self) -> None:
        return None

    def when(self, success: Callable[[T], R], error: Callable[[RequestFailure], R]) -> R:
        return error(self.failure)


Result = Union[Success[T], Error]


async def async_guard(operation: Callable[[], Awaitable[T]]) -> Result[T]:
    """Run ``operation`` and turn any raised exception into an ``Error``.

    ``RequestFailureError`` keeps its failure; anything else is categorized
    with :meth:`RequestFailure.from_exception`.
    """
    try:
        return Success(await operation())
    except RequestFailureError as exc:
        return Error(exc.failure)
    except Exception as exc:
        logger.debug(f"async_guard caught {exc.__class__.__name__}: {exc}")
        return Error(RequestFailure.from_exception(exc))


class RequestFailureError(Exception):
    """Raised inside guarded code to surface an ``Error`` result unchanged."""

    def __init__(self, failure: RequestFailure):
        super().__init__(failure.message)
        self.failure = failure


def unwrap(result: Result[T]) -> T:
    """Return the success value or raise ``RequestFailureError``."""
    if isinstance(result, Error):
        raise RequestFailureError(result.failure)
    return result.value
