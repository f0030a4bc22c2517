"""CLI-facing handlers that delegate to application services."""

from __future__ import annotations

import json
from pathlib import Path
from uuid import uuid4

from stagemix.application.mix_service import (
    AnalyzeMixerSnapshot,
    GenerateRecommendation,
    ImportMixerSnapshot,
)
from stagemix.domain.console import MixerModel
from stagemix.domain.models import DetailLevel, Service, SPLFlaggingMode
from stagemix.domain.results import MixerAnalysis, MixerSettingRecommendation
from stagemix.domain.sources import InputSource
from stagemix.inference import infer
from stagemix.infrastructure.logging_event_publisher import LoggingEventPublisher
from stagemix.interfaces.schemas import ServiceDocument, to_payload
from stagemix.options import parse_case_insensitive_enum
from stagemix.utils.config import EngineConfig, load_engine_config

_event_publisher = LoggingEventPublisher()
import_snapshot = ImportMixerSnapshot(event_publisher=_event_publisher)


def load_service(service_path: Path, detail_level: DetailLevel | None = None) -> Service:
    payload = json.loads(service_path.read_text(encoding="utf-8"))
    document = ServiceDocument.model_validate(payload)
    if detail_level is not None:
        document = document.model_copy(update={"detail_level": detail_level})
    return document.to_domain()


def load_config(config_path: Path | None) -> EngineConfig:
    if config_path is None:
        return EngineConfig()
    return load_engine_config(config_path)


def parse_channel_mapping(entries: list[str]) -> dict[int, InputSource]:
    """Parse ``NUMBER=SOURCE`` pairs such as ``3=snare``."""

    mapping: dict[int, InputSource] = {}
    for entry in entries:
        number, separator, source = entry.partition("=")
        if not separator or not number.strip().isdigit():
            raise ValueError(f"Channel mapping '{entry}' must look like NUMBER=SOURCE.")
        mapping[int(number.strip())] = parse_case_insensitive_enum(source.strip(), InputSource)
    return mapping


def write_report(result: object, report_json: Path) -> Path:
    report_json.parent.mkdir(parents=True, exist_ok=True)
    report_json.write_text(json.dumps(to_payload(result), indent=2))
    return report_json


def recommend_from_path(
    service_path: Path,
    config_path: Path | None = None,
    detail_level: DetailLevel | None = None,
    report_json: Path | None = None,
    correlation_id: str | None = None,
) -> MixerSettingRecommendation:
    config = load_config(config_path)
    service = load_service(service_path, detail_level=detail_level)
    use_case = GenerateRecommendation(
        tuning=config.recommendation_tuning(),
        event_publisher=_event_publisher,
    )
    recommendation = use_case.run(service, correlation_id=correlation_id or str(uuid4()))
    if report_json is not None:
        write_report(recommendation, report_json)
    return recommendation


def analyze_from_paths(
    service_path: Path,
    snapshot_path: Path,
    mapping_entries: list[str] | None = None,
    config_path: Path | None = None,
    console: MixerModel | None = None,
    spl_target_db: float | None = None,
    spl_mode: SPLFlaggingMode | None = None,
    calibration_offset_db: float | None = None,
    report_json: Path | None = None,
    correlation_id: str | None = None,
) -> MixerAnalysis:
    run_correlation_id = correlation_id or str(uuid4())
    config = load_config(config_path)
    service = load_service(service_path)
    snapshot = import_snapshot.from_path(
        snapshot_path,
        console=console or service.console,
        correlation_id=run_correlation_id,
    )
    recommendation = GenerateRecommendation(
        tuning=config.recommendation_tuning(),
        event_publisher=_event_publisher,
    ).run(service, correlation_id=run_correlation_id)

    spl_update: dict[str, object] = {}
    if spl_target_db is not None:
        spl_update["target_db"] = spl_target_db
    if spl_mode is not None:
        spl_update["mode"] = spl_mode
    if calibration_offset_db is not None:
        spl_update["calibration_offset_db"] = calibration_offset_db
    spl_preference = config.spl.model_copy(update=spl_update).to_preference()

    analysis = AnalyzeMixerSnapshot(
        tolerance=config.tolerance_policy(),
        event_publisher=_event_publisher,
    ).run(
        snapshot,
        recommendation,
        channel_mapping=parse_channel_mapping(mapping_entries or []),
        spl_preference=spl_preference,
        correlation_id=run_correlation_id,
    )
    if report_json is not None:
        write_report(analysis, report_json)
    return analysis


def infer_labels(labels: list[str]) -> list[tuple[str, InputSource | None]]:
    return [(label, infer(label)) for label in labels]


def format_recommendation(recommendation: MixerSettingRecommendation) -> list[str]:
    lines: list[str] = []
    for item in recommendation.channels:
        low, high = item.gain_range_db
        line = (
            f"{item.channel.label}: gain {low:g}..{high:g} dB, "
            f"fader {item.fader_start_db:g} dB, headroom {item.headroom_db:g} dB"
        )
        if item.hpf_hz is not None:
            line += f", HPF {item.hpf_hz:g} Hz"
        lines.append(line)
        for band in item.eq_bands or ():
            lines.append(f"  EQ {band.band_type.value} {band.frequency_hz:g} Hz {band.gain_db:+g} dB ({band.reason})")
        if item.compressor is not None:
            lines.append(
                f"  Comp {item.compressor.ratio:g}:1 at {item.compressor.threshold_db:g} dB, "
                f"attack {item.compressor.attack_ms:g} ms, release {item.compressor.release_ms:g} ms"
            )
        for warning in item.key_warnings or ():
            lines.append(f"  [{warning.severity.value}] {warning.song_title}: {warning.suggestion}")
        for note in item.notes:
            lines.append(f"  Note: {note}")
    for note in recommendation.notes:
        lines.append(f"Note: {note}")
    return lines


def format_analysis(analysis: MixerAnalysis) -> list[str]:
    lines = [
        f"{analysis.snapshot_name}: {analysis.grade.label} "
        f"({analysis.within_fraction:.0%} of graded channels within tolerance)"
    ]
    for delta in analysis.deltas:
        gain = "n/a" if delta.gain_delta_db is None else f"{delta.gain_delta_db:+g} dB"
        lines.append(
            f"#{delta.channel_number} {delta.name} -> {delta.source.value}: "
            f"{delta.classification.value} (gain {gain}, HPF {delta.hpf_status.value})"
        )
        for suggestion in delta.suggestions:
            lines.append(f"  {suggestion}")
    for channel in analysis.unmapped:
        lines.append(f"#{channel.channel_number} {channel.name}: unmapped ({channel.reason.value})")
    if analysis.spl_estimate is not None:
        lines.append(
            f"Estimated level {analysis.spl_estimate.estimated_db:g} dB SPL "
            f"(target {analysis.spl_estimate.target_db:g} dB)"
        )
    for suggestion in analysis.suggestions:
        lines.append(f"Suggestion: {suggestion}")
    return lines
