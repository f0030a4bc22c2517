"""Last-call-wins execution of engine computations off the caller's thread."""

from __future__ import annotations

import itertools
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Generic, TypeVar
from uuid import uuid4

from stagemix.application.event_publisher import EventPublisher, NullEventPublisher
from stagemix.domain.events import StaleResultDiscarded

ResultT = TypeVar("ResultT")


class LatestResultRunner(Generic[ResultT]):
    """Run computations in a worker pool and keep only the newest submission's result.

    Every submission gets a generation token. When a computation finishes, its
    result is accepted only if no newer submission has been made since; a
    superseded result is dropped and reported as :class:`StaleResultDiscarded`.
    The caller's future still resolves either way.
    """

    def __init__(
        self,
        max_workers: int = 2,
        event_publisher: EventPublisher | None = None,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        self._executor = executor or ThreadPoolExecutor(max_workers=max(1, max_workers), thread_name_prefix="stagemix")
        self._owns_executor = executor is None
        self._event_publisher = event_publisher or NullEventPublisher()
        self._tokens = itertools.count(1)
        self._lock = threading.Lock()
        self._latest_token = 0
        self._accepted_token = 0
        self._latest_result: ResultT | None = None

    @property
    def latest_result(self) -> ResultT | None:
        with self._lock:
            return self._latest_result

    @property
    def accepted_token(self) -> int:
        with self._lock:
            return self._accepted_token

    def submit(self, fn: Callable[..., ResultT], *args: Any, **kwargs: Any) -> Future[ResultT]:
        with self._lock:
            token = next(self._tokens)
            self._latest_token = token
        return self._executor.submit(self._run, token, fn, args, kwargs)

    def _run(self, token: int, fn: Callable[..., ResultT], args: tuple, kwargs: dict) -> ResultT:
        result = fn(*args, **kwargs)
        with self._lock:
            is_current = token == self._latest_token
            if is_current:
                self._latest_result = result
                self._accepted_token = token
            latest_token = self._latest_token
        if not is_current:
            self._event_publisher.publish(
                StaleResultDiscarded(
                    correlation_id=str(uuid4()),
                    payload_summary={"token": token, "latest_token": latest_token},
                )
            )
        return result

    def shutdown(self, wait: bool = True) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def __enter__(self) -> "LatestResultRunner[ResultT]":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()
