"""Compare a captured mixer snapshot against a recommendation."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from stagemix.domain.models import MixerSnapshot, SnapshotChannel, SPLPreference
from stagemix.domain.policies import DEFAULT_TOLERANCE_POLICY, DeltaTolerancePolicy
from stagemix.domain.results import (
    AnalysisGrade,
    ChannelDelta,
    ChannelRecommendation,
    DeltaClass,
    EqBandDelta,
    HpfStatus,
    MixerAnalysis,
    MixerSettingRecommendation,
    SPLEstimate,
    UnmappedChannel,
    UnmappedReason,
)
from stagemix.domain.services import is_finite_reading
from stagemix.domain.sources import InputSource
from stagemix.inference import infer

# Typical program peak below full scale when a channel is gain-staged correctly.
_NOMINAL_HEADROOM_DB = 18.0
_MISSING_HPF_SUGGESTION_COUNT = 3
_HOT_CHANNEL_SUGGESTION_COUNT = 2


@dataclass(frozen=True, slots=True)
class ConsoleMismatchError(ValueError):
    """Snapshot and recommendation come from consoles that stage gain differently."""

    code: str
    message: str

    def __str__(self) -> str:
        return self.message

    def as_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


def ensure_compatible(snapshot: MixerSnapshot, recommendation: MixerSettingRecommendation) -> None:
    snapshot_spec = snapshot.console.spec
    recommended_spec = recommendation.service.console_spec
    if not snapshot_spec.is_compatible_with(recommended_spec):
        raise ConsoleMismatchError(
            "console_mismatch",
            f"Snapshot console {snapshot_spec.short_name} cannot be compared with a "
            f"recommendation for {recommended_spec.short_name}.",
        )


def _reading(value: float | None) -> float | None:
    return float(value) if is_finite_reading(value) else None


def _channel_name(snapshot_channel: SnapshotChannel) -> str:
    return "" if snapshot_channel.name is None else str(snapshot_channel.name)


def _classify(delta: float, tolerance: float) -> DeltaClass:
    if abs(delta) <= tolerance:
        return DeltaClass.WITHIN
    return DeltaClass.UNDER if delta < 0 else DeltaClass.OVER


def gain_delta_db(gain_db: float, gain_range_db: tuple[float, float]) -> float:
    """Distance from the nearer bound of the recommended window; zero inside it."""

    low, high = gain_range_db
    if gain_db < low:
        return gain_db - low
    if gain_db > high:
        return gain_db - high
    return 0.0


def _hpf_comparison(
    reading_hz: float | None,
    recommended_hz: float | None,
    tolerance: DeltaTolerancePolicy,
) -> tuple[float | None, HpfStatus]:
    if recommended_hz is None and reading_hz is None:
        return None, HpfStatus.NOT_APPLICABLE
    if recommended_hz is None:
        return None, HpfStatus.UNEXPECTED
    if reading_hz is None:
        return None, HpfStatus.MISSING
    delta = reading_hz - recommended_hz
    if abs(delta) / recommended_hz <= tolerance.hpf_relative:
        return delta, HpfStatus.WITHIN
    return delta, HpfStatus.UNDER if delta < 0 else HpfStatus.OVER


def _eq_comparison(
    snapshot_channel: SnapshotChannel,
    recommended: ChannelRecommendation,
    tolerance: DeltaTolerancePolicy,
) -> tuple[tuple[EqBandDelta, ...], list[str]]:
    readings = [
        band
        for band in snapshot_channel.eq_bands or ()
        if is_finite_reading(band.frequency_hz) and band.frequency_hz > 0 and is_finite_reading(band.gain_db)
    ]
    if not recommended.eq_bands or not readings:
        return (), []

    deltas: list[EqBandDelta] = []
    matched: set[int] = set()
    suggestions: list[str] = []
    for band in recommended.eq_bands:
        candidates = [
            (abs(reading.frequency_hz - band.frequency_hz) / band.frequency_hz, position)
            for position, reading in enumerate(readings)
            if position not in matched
            and abs(reading.frequency_hz - band.frequency_hz) / band.frequency_hz <= tolerance.eq_frequency_match_relative
        ]
        if not candidates:
            deltas.append(EqBandDelta(band.frequency_hz, band.gain_db, None, None, False))
            continue
        _, position = min(candidates)
        matched.add(position)
        actual = readings[position].gain_db
        delta = round(actual - band.gain_db, 1)
        flagged = abs(delta) > tolerance.eq_gain_db
        deltas.append(EqBandDelta(band.frequency_hz, band.gain_db, actual, delta, flagged))
        if flagged:
            suggestions.append(
                f"EQ at {band.frequency_hz:.0f} Hz is {actual:+.1f} dB; recommended {band.gain_db:+.1f} dB."
            )

    for position, reading in enumerate(readings):
        if position not in matched and reading.gain_db > tolerance.unrecommended_boost_db:
            suggestions.append(
                f"Unplanned {reading.gain_db:+.1f} dB boost at {reading.frequency_hz:.0f} Hz; check it is intentional."
            )
    return tuple(deltas), suggestions


def _compressor_comparison(
    snapshot_channel: SnapshotChannel,
    recommended: ChannelRecommendation,
    tolerance: DeltaTolerancePolicy,
) -> tuple[float | None, float | None, list[str]]:
    compressor = recommended.compressor
    if compressor is None:
        return None, None, []
    threshold = _reading(snapshot_channel.comp_threshold_db)
    ratio = _reading(snapshot_channel.comp_ratio)
    threshold_delta = round(threshold - compressor.threshold_db, 1) if threshold is not None else None
    ratio_delta = round(ratio - compressor.ratio, 2) if ratio is not None else None

    suggestions: list[str] = []
    if threshold_delta is not None and abs(threshold_delta) > tolerance.compressor_threshold_db:
        suggestions.append(f"Compressor threshold is {threshold:.1f} dB; recommended {compressor.threshold_db:.1f} dB.")
    if ratio_delta is not None and abs(ratio_delta) > tolerance.compressor_ratio:
        suggestions.append(f"Compressor ratio is {ratio:.1f}:1; recommended {compressor.ratio:.1f}:1.")
    return ratio_delta, threshold_delta, suggestions


def _pick_recommendation(
    snapshot_channel: SnapshotChannel,
    candidates: Sequence[ChannelRecommendation],
) -> ChannelRecommendation:
    name = _channel_name(snapshot_channel).strip().lower()
    for candidate in candidates:
        if candidate.channel.label.strip().lower() == name:
            return candidate
    return candidates[0]


def compare_channel(
    snapshot_channel: SnapshotChannel,
    source: InputSource,
    recommended: ChannelRecommendation,
    tolerance: DeltaTolerancePolicy = DEFAULT_TOLERANCE_POLICY,
) -> ChannelDelta:
    suggestions: list[str] = []
    label = recommended.channel.label

    gain = _reading(snapshot_channel.gain_db)
    if gain is None:
        gain_delta = None
        classification = DeltaClass.NO_DATA
    else:
        gain_delta = round(gain_delta_db(gain, recommended.gain_range_db), 1)
        classification = _classify(gain_delta, tolerance.gain_db)
        low, high = recommended.gain_range_db
        if classification is DeltaClass.UNDER:
            suggestions.append(f"Raise gain on {label} toward {low:.1f}-{high:.1f} dB.")
        elif classification is DeltaClass.OVER:
            suggestions.append(f"Lower gain on {label} toward {low:.1f}-{high:.1f} dB.")

    fader = _reading(snapshot_channel.fader_db)
    if fader is None:
        fader_delta = None
        fader_status = DeltaClass.NO_DATA
    else:
        fader_delta = round(fader - recommended.fader_start_db, 1)
        fader_status = _classify(fader_delta, tolerance.fader_db)

    if recommended.eq_bands is None:
        # Filter settings were gated out by the detail level.
        hpf_delta, hpf_status = None, HpfStatus.NOT_APPLICABLE
    else:
        hpf_delta, hpf_status = _hpf_comparison(_reading(snapshot_channel.hpf_hz), recommended.hpf_hz, tolerance)
    if hpf_status is HpfStatus.MISSING and recommended.hpf_hz is not None:
        suggestions.append(f"Engage the HPF on {label} at about {recommended.hpf_hz:.0f} Hz.")
    elif hpf_status in (HpfStatus.UNDER, HpfStatus.OVER) and recommended.hpf_hz is not None:
        suggestions.append(f"Move the HPF on {label} to about {recommended.hpf_hz:.0f} Hz.")

    eq_deltas, eq_suggestions = _eq_comparison(snapshot_channel, recommended, tolerance)
    ratio_delta, threshold_delta, compressor_suggestions = _compressor_comparison(
        snapshot_channel, recommended, tolerance
    )
    suggestions.extend(eq_suggestions)
    suggestions.extend(compressor_suggestions)

    return ChannelDelta(
        channel_number=snapshot_channel.number,
        name=_channel_name(snapshot_channel),
        source=source,
        recommended_label=label,
        classification=classification,
        gain_delta_db=gain_delta,
        fader_delta_db=fader_delta,
        fader_status=fader_status,
        hpf_delta_hz=hpf_delta,
        hpf_status=hpf_status,
        eq_deltas=eq_deltas,
        compressor_ratio_delta=ratio_delta,
        compressor_threshold_delta_db=threshold_delta,
        suggestions=tuple(suggestions),
    )


def grade_for(within_fraction: float, graded_count: int, tolerance: DeltaTolerancePolicy) -> AnalysisGrade:
    if graded_count == 0:
        return AnalysisGrade.NEEDS_ATTENTION
    if within_fraction >= 1.0:
        return AnalysisGrade.CLEAN
    if within_fraction >= tolerance.good_fraction:
        return AnalysisGrade.GOOD
    if within_fraction >= tolerance.needs_attention_fraction:
        return AnalysisGrade.NEEDS_ATTENTION
    return AnalysisGrade.OVER_TARGET


def estimate_spl(
    snapshot: MixerSnapshot,
    mapped_numbers: set[int],
    recommendation: MixerSettingRecommendation,
    preference: SPLPreference | None,
) -> SPLEstimate | None:
    """Rough house level from the hottest mapped channel; needs a calibration offset."""

    if preference is None or not is_finite_reading(preference.calibration_offset_db):
        return None
    levels = [
        channel.gain_db + channel.fader_db
        for channel in snapshot.channels
        if channel.number in mapped_numbers
        and is_finite_reading(channel.gain_db)
        and is_finite_reading(channel.fader_db)
    ]
    if not levels:
        return None
    intensity_offset = max(
        (song.intensity.fader_offset_db for song in recommendation.service.setlist),
        default=0.0,
    )
    estimated = max(levels) - _NOMINAL_HEADROOM_DB + preference.calibration_offset_db + intensity_offset
    return SPLEstimate(
        estimated_db=round(estimated, 1),
        target_db=preference.target_db,
        flag_level_db=preference.flag_level_db,
    )


def _global_suggestions(
    deltas: Sequence[ChannelDelta],
    unmapped: Sequence[UnmappedChannel],
    spl_estimate: SPLEstimate | None,
) -> tuple[str, ...]:
    suggestions: list[str] = []
    if unmapped:
        suggestions.append(
            f"{len(unmapped)} channel(s) could not be matched to the plan; map them manually to include them."
        )
    missing_hpf = sum(1 for delta in deltas if delta.hpf_status is HpfStatus.MISSING)
    if missing_hpf >= _MISSING_HPF_SUGGESTION_COUNT:
        suggestions.append(f"{missing_hpf} channels have no HPF engaged; low-end rumble will add up in the room.")
    hot = sum(1 for delta in deltas if delta.classification is DeltaClass.OVER)
    if hot >= _HOT_CHANNEL_SUGGESTION_COUNT:
        suggestions.append(f"{hot} channels are gained above plan; pull preamps down before reaching for faders.")
    if spl_estimate is not None and spl_estimate.is_over_target:
        suggestions.append(
            f"Estimated level of {spl_estimate.estimated_db:.0f} dB SPL is over the {spl_estimate.target_db:.0f} dB target; "
            "bring the master down."
        )
    return tuple(suggestions)


def analyze(
    snapshot: MixerSnapshot,
    recommendation: MixerSettingRecommendation,
    channel_mapping: Mapping[int, InputSource] | None = None,
    spl_preference: SPLPreference | None = None,
    tolerance: DeltaTolerancePolicy = DEFAULT_TOLERANCE_POLICY,
) -> MixerAnalysis:
    """Grade every snapshot channel against its recommended settings.

    Raises :class:`ConsoleMismatchError` when the two consoles stage gain
    differently. Channels that cannot be resolved are reported as unmapped.
    """

    ensure_compatible(snapshot, recommendation)
    mapping = channel_mapping or {}

    deltas: list[ChannelDelta] = []
    unmapped: list[UnmappedChannel] = []
    for snapshot_channel in snapshot.channels:
        name = _channel_name(snapshot_channel)
        source = mapping.get(snapshot_channel.number)
        if source is None:
            source = infer(name)
        if source is None:
            unmapped.append(
                UnmappedChannel(snapshot_channel.number, name, UnmappedReason.UNRECOGNIZED_NAME)
            )
            continue
        candidates = recommendation.for_source(source)
        if not candidates:
            unmapped.append(
                UnmappedChannel(
                    snapshot_channel.number,
                    name,
                    UnmappedReason.NO_RECOMMENDATION,
                    inferred_source=source,
                )
            )
            continue
        recommended = _pick_recommendation(snapshot_channel, candidates)
        deltas.append(compare_channel(snapshot_channel, source, recommended, tolerance))

    graded = [delta for delta in deltas if delta.is_graded]
    within = sum(1 for delta in graded if delta.classification is DeltaClass.WITHIN)
    within_fraction = within / len(graded) if graded else 0.0

    spl_estimate = estimate_spl(
        snapshot,
        {delta.channel_number for delta in deltas},
        recommendation,
        spl_preference,
    )
    return MixerAnalysis(
        snapshot_name=snapshot.name,
        deltas=tuple(deltas),
        unmapped=tuple(unmapped),
        grade=grade_for(within_fraction, len(graded), tolerance),
        within_fraction=round(within_fraction, 4),
        spl_estimate=spl_estimate,
        suggestions=_global_suggestions(deltas, unmapped, spl_estimate),
    )
