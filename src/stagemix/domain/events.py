"""Domain event contracts for recommendation and analysis workflows."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True, slots=True)
class DomainEvent:
    """Base domain event emitted by application services."""

    correlation_id: str
    payload_summary: dict[str, Any]
    occurred_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))


@dataclass(frozen=True, slots=True)
class RecommendationGenerated(DomainEvent):
    """Starting settings were generated for a service."""


@dataclass(frozen=True, slots=True)
class SnapshotImported(DomainEvent):
    """A mixer snapshot file was parsed into channel readings."""


@dataclass(frozen=True, slots=True)
class SnapshotAnalyzed(DomainEvent):
    """A snapshot was compared against a recommendation and graded."""


@dataclass(frozen=True, slots=True)
class AnalysisFailed(DomainEvent):
    """Import or analysis was rejected for a correlation id."""


@dataclass(frozen=True, slots=True)
class StaleResultDiscarded(DomainEvent):
    """A superseded computation finished and its result was dropped."""
