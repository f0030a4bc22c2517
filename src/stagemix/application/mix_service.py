"""Application services orchestrating recommendation and analysis use-cases."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from uuid import uuid4

from stagemix.application.event_publisher import EventPublisher, NullEventPublisher
from stagemix.delta import ConsoleMismatchError, analyze
from stagemix.domain.console import MixerModel
from stagemix.domain.events import AnalysisFailed, RecommendationGenerated, SnapshotAnalyzed, SnapshotImported
from stagemix.domain.models import MixerSnapshot, Service, SPLPreference
from stagemix.domain.policies import DEFAULT_TOLERANCE_POLICY, DeltaTolerancePolicy
from stagemix.domain.results import MixerAnalysis, MixerSettingRecommendation
from stagemix.domain.sources import InputSource
from stagemix.recommendation import DEFAULT_TUNING, RecommendationTuning, generate
from stagemix.snapshot_import import SnapshotImportError, load_snapshot


@dataclass(slots=True)
class GenerateRecommendation:
    """Use case that produces starting settings for a service."""

    tuning: RecommendationTuning = DEFAULT_TUNING
    event_publisher: EventPublisher = NullEventPublisher()

    def run(self, service: Service, correlation_id: str | None = None) -> MixerSettingRecommendation:
        run_correlation_id = correlation_id or str(uuid4())
        recommendation = generate(service, self.tuning)
        self.event_publisher.publish(
            RecommendationGenerated(
                correlation_id=run_correlation_id,
                payload_summary={
                    "service": service.name,
                    "console": service.console.value,
                    "detail_level": service.detail_level.value,
                    "channel_count": len(recommendation.channels),
                    "key_warning_count": recommendation.key_warning_count,
                    "note_count": len(recommendation.notes),
                },
            )
        )
        return recommendation


@dataclass(slots=True)
class ImportMixerSnapshot:
    """Use case that reads a snapshot export from disk."""

    event_publisher: EventPublisher = NullEventPublisher()

    def from_path(self, path: Path, console: MixerModel | None = None, correlation_id: str | None = None) -> MixerSnapshot:
        run_correlation_id = correlation_id or str(uuid4())
        try:
            snapshot = load_snapshot(path, console=console)
        except SnapshotImportError as error:
            self.event_publisher.publish(
                AnalysisFailed(
                    correlation_id=run_correlation_id,
                    payload_summary={"stage": "import", "code": error.code, "error": error.message},
                )
            )
            raise
        self.event_publisher.publish(
            SnapshotImported(
                correlation_id=run_correlation_id,
                payload_summary={
                    "source": path.as_posix(),
                    "console": snapshot.console.value,
                    "channel_count": len(snapshot.channels),
                },
            )
        )
        return snapshot


@dataclass(slots=True)
class AnalyzeMixerSnapshot:
    """Use case that grades a snapshot against a recommendation."""

    tolerance: DeltaTolerancePolicy = DEFAULT_TOLERANCE_POLICY
    event_publisher: EventPublisher = NullEventPublisher()

    def run(
        self,
        snapshot: MixerSnapshot,
        recommendation: MixerSettingRecommendation,
        channel_mapping: Mapping[int, InputSource] | None = None,
        spl_preference: SPLPreference | None = None,
        correlation_id: str | None = None,
    ) -> MixerAnalysis:
        run_correlation_id = correlation_id or str(uuid4())
        try:
            analysis = analyze(
                snapshot,
                recommendation,
                channel_mapping,
                spl_preference,
                tolerance=self.tolerance,
            )
        except ConsoleMismatchError as error:
            self.event_publisher.publish(
                AnalysisFailed(
                    correlation_id=run_correlation_id,
                    payload_summary={"stage": "analysis", "code": error.code, "error": error.message},
                )
            )
            raise
        self.event_publisher.publish(
            SnapshotAnalyzed(
                correlation_id=run_correlation_id,
                payload_summary={
                    "snapshot": snapshot.name,
                    "grade": analysis.grade.value,
                    "within_fraction": analysis.within_fraction,
                    "mapped_count": len(analysis.deltas),
                    "unmapped_count": len(analysis.unmapped),
                    "spl_estimate_db": analysis.spl_estimate.estimated_db if analysis.spl_estimate else None,
                },
            )
        )
        return analysis
