"""Event publishing port used by the recommendation and analysis use cases."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from stagemix.domain.events import DomainEvent


class EventPublisher(Protocol):
    """Receives :mod:`stagemix.domain.events` instances as use cases complete.

    Publishers may be called from worker threads when results are computed by
    :class:`~stagemix.application.latest_result.LatestResultRunner`.
    """

    def publish(self, event: DomainEvent) -> None: ...


@dataclass(frozen=True, slots=True)
class NullEventPublisher:
    """Drops every event; the default when no publisher is wired in."""

    def publish(self, event: DomainEvent) -> None:  # noqa: ARG002
        return None
