"""API-facing handlers that delegate to application services."""

from __future__ import annotations

from stagemix.application.mix_service import AnalyzeMixerSnapshot, GenerateRecommendation
from stagemix.delta import ConsoleMismatchError
from stagemix.domain.console import MixerModel
from stagemix.domain.models import MixerSnapshot
from stagemix.domain.results import MixerAnalysis, MixerSettingRecommendation
from stagemix.infrastructure.logging_event_publisher import LoggingEventPublisher
from stagemix.interfaces.schemas import AnalyzeRequest, ServiceDocument
from stagemix.options import SnapshotFormat
from stagemix.recommendation import resolve_recommendation_tuning
from stagemix.snapshot_import import SnapshotImportError, parse_snapshot_csv, parse_snapshot_json

_event_publisher = LoggingEventPublisher()
analyze_service = AnalyzeMixerSnapshot(event_publisher=_event_publisher)


def recommend_document(
    document: ServiceDocument,
    tuning_profile: str,
    correlation_id: str,
) -> MixerSettingRecommendation:
    use_case = GenerateRecommendation(
        tuning=resolve_recommendation_tuning(tuning_profile),
        event_publisher=_event_publisher,
    )
    return use_case.run(document.to_domain(), correlation_id=correlation_id)


def analyze_document(
    request: AnalyzeRequest,
    tuning_profile: str,
    correlation_id: str,
) -> MixerAnalysis:
    recommendation = recommend_document(request.service, tuning_profile, correlation_id)
    return analyze_service.run(
        request.snapshot.to_domain(),
        recommendation,
        channel_mapping=request.channel_mapping,
        spl_preference=request.spl_preference.to_domain() if request.spl_preference else None,
        correlation_id=correlation_id,
    )


def import_snapshot_bytes(
    payload: bytes,
    snapshot_format: SnapshotFormat,
    console: MixerModel | None,
    name: str | None = None,
) -> MixerSnapshot:
    try:
        text = payload.decode("utf-8-sig")
    except UnicodeDecodeError as error:
        raise SnapshotImportError("invalid_encoding", "Snapshot exports must be UTF-8 text.") from error

    if snapshot_format is SnapshotFormat.JSON:
        return parse_snapshot_json(text, console=console, name=name)
    if console is None:
        raise SnapshotImportError("console_required", "A console model is required to import a CSV snapshot.")
    return parse_snapshot_csv(text, console, name=name or "Imported snapshot")


__all__ = [
    "ConsoleMismatchError",
    "SnapshotImportError",
    "analyze_document",
    "import_snapshot_bytes",
    "recommend_document",
]
