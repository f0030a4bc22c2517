from __future__ import annotations

import threading

from stagemix.application.latest_result import LatestResultRunner
from stagemix.domain.events import StaleResultDiscarded


class RecordingPublisher:
    def __init__(self) -> None:
        self.events = []

    def publish(self, event) -> None:
        self.events.append(event)


def test_only_newest_submission_is_accepted() -> None:
    publisher = RecordingPublisher()
    release_first = threading.Event()

    def slow(value: str) -> str:
        release_first.wait(timeout=5)
        return value

    with LatestResultRunner(max_workers=2, event_publisher=publisher) as runner:
        first = runner.submit(slow, "first")
        second = runner.submit(lambda: "second")
        assert second.result(timeout=5) == "second"
        release_first.set()
        assert first.result(timeout=5) == "first"

        assert runner.latest_result == "second"
        assert runner.accepted_token == 2

    (event,) = publisher.events
    assert isinstance(event, StaleResultDiscarded)
    assert event.payload_summary == {"token": 1, "latest_token": 2}


def test_sequential_submissions_are_each_accepted() -> None:
    with LatestResultRunner(max_workers=1) as runner:
        assert runner.latest_result is None
        runner.submit(sum, [1, 2]).result(timeout=5)
        assert runner.latest_result == 3
        runner.submit(sum, [3, 4]).result(timeout=5)

        assert runner.latest_result == 7
        assert runner.accepted_token == 2
