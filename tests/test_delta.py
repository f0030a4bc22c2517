from __future__ import annotations

import math

import pytest

from stagemix.delta import ConsoleMismatchError, analyze, gain_delta_db, grade_for
from stagemix.domain.console import MixerModel
from stagemix.domain.models import (
    DetailLevel,
    InputChannel,
    MixerSnapshot,
    Service,
    SnapshotChannel,
    SnapshotEqBand,
    SPLFlaggingMode,
    SPLPreference,
)
from stagemix.domain.policies import DEFAULT_TOLERANCE_POLICY
from stagemix.domain.results import AnalysisGrade, DeltaClass, HpfStatus, UnmappedReason
from stagemix.domain.sources import InputSource
from stagemix.recommendation import generate


def _snapshot(*channels: SnapshotChannel, console: MixerModel = MixerModel.X32) -> MixerSnapshot:
    return MixerSnapshot(name="Soundcheck", console=console, channels=channels)


def _simple_service(*channels: InputChannel, level: DetailLevel = DetailLevel.FULL) -> Service:
    return Service(name="Rehearsal", console=MixerModel.X32, channels=channels, detail_level=level)


def test_gain_delta_is_distance_from_nearer_bound() -> None:
    assert gain_delta_db(10.0, (11.0, 21.0)) == -1.0
    assert gain_delta_db(25.0, (11.0, 21.0)) == 4.0
    assert gain_delta_db(15.0, (11.0, 21.0)) == 0.0


@pytest.mark.parametrize(
    ("fraction", "graded", "expected"),
    [
        (1.0, 3, AnalysisGrade.CLEAN),
        (0.8, 5, AnalysisGrade.GOOD),
        (0.5, 2, AnalysisGrade.NEEDS_ATTENTION),
        (0.2, 5, AnalysisGrade.OVER_TARGET),
        (0.0, 0, AnalysisGrade.NEEDS_ATTENTION),
    ],
)
def test_grade_for_thresholds(fraction: float, graded: int, expected: AnalysisGrade) -> None:
    assert grade_for(fraction, graded, DEFAULT_TOLERANCE_POLICY) is expected


def test_gain_on_window_bound_is_within_with_zero_delta(service) -> None:
    recommendation = generate(service)
    channels = tuple(
        SnapshotChannel(number, item.channel.label, gain_db=item.gain_range_db[number % 2])
        for number, item in enumerate(recommendation.channels, start=1)
    )

    mapping = {channel.number: item.source for channel, item in zip(channels, recommendation.channels)}

    analysis = analyze(_snapshot(*channels), recommendation, mapping)

    assert len(analysis.deltas) == len(channels)
    for delta in analysis.deltas:
        assert delta.classification is DeltaClass.WITHIN
        assert delta.gain_delta_db == 0.0
    assert analysis.grade is AnalysisGrade.CLEAN
    assert analysis.within_fraction == 1.0


def test_unrecognized_names_never_raise(service) -> None:
    recommendation = generate(service)
    snapshot = _snapshot(
        SnapshotChannel(1, "Spare", gain_db=20.0),
        SnapshotChannel(2, "", gain_db=float("nan")),
        SnapshotChannel(3, "Ch 17"),
    )

    analysis = analyze(snapshot, recommendation)

    assert analysis.deltas == ()
    assert [channel.reason for channel in analysis.unmapped] == [UnmappedReason.UNRECOGNIZED_NAME] * 3
    assert analysis.grade is AnalysisGrade.NEEDS_ATTENTION
    assert analysis.within_fraction == 0.0
    assert not math.isnan(analysis.within_fraction)


def test_empty_snapshot_is_analyzed(service) -> None:
    analysis = analyze(_snapshot(), generate(service))

    assert analysis.deltas == ()
    assert analysis.unmapped == ()
    assert analysis.grade is AnalysisGrade.NEEDS_ATTENTION


def test_console_mismatch_raises(service) -> None:
    with pytest.raises(ConsoleMismatchError) as exc_info:
        analyze(_snapshot(console=MixerModel.SQ), generate(service))

    assert exc_info.value.code == "console_mismatch"
    assert exc_info.value.as_dict()["code"] == "console_mismatch"


def test_compatible_console_is_accepted(service) -> None:
    analysis = analyze(_snapshot(SnapshotChannel(1, "Kick", gain_db=2.0), console=MixerModel.M32), generate(service))

    assert analysis.deltas[0].source is InputSource.KICK


def test_source_without_recommendation_is_reported() -> None:
    recommendation = generate(_simple_service(InputChannel("Kick", InputSource.KICK)))

    analysis = analyze(_snapshot(SnapshotChannel(2, "Snare", gain_db=10.0)), recommendation)

    (unmapped,) = analysis.unmapped
    assert unmapped.reason is UnmappedReason.NO_RECOMMENDATION
    assert unmapped.inferred_source is InputSource.SNARE


def test_explicit_mapping_overrides_inference() -> None:
    recommendation = generate(_simple_service(InputChannel("Kick", InputSource.KICK)))

    analysis = analyze(_snapshot(SnapshotChannel(5, "Ch 5", gain_db=3.0)), recommendation, {5: InputSource.KICK})

    (delta,) = analysis.deltas
    assert delta.source is InputSource.KICK
    assert delta.recommended_label == "Kick"


def test_hot_gain_is_classified_over_with_suggestion(service) -> None:
    analysis = analyze(_snapshot(SnapshotChannel(7, "Lead Vocal", gain_db=30.0, hpf_hz=100.0)), generate(service))

    (delta,) = analysis.deltas
    assert delta.classification is DeltaClass.OVER
    assert delta.gain_delta_db == 9.0
    assert any("Lower gain" in suggestion for suggestion in delta.suggestions)
    assert analysis.grade is AnalysisGrade.OVER_TARGET


def test_missing_gain_reading_is_not_graded(service) -> None:
    analysis = analyze(_snapshot(SnapshotChannel(1, "Kick", gain_db=None, fader_db=-3.0)), generate(service))

    (delta,) = analysis.deltas
    assert delta.classification is DeltaClass.NO_DATA
    assert delta.gain_delta_db is None
    assert delta.fader_status is not DeltaClass.NO_DATA
    assert analysis.within_fraction == 0.0


@pytest.mark.parametrize(
    ("label", "hpf_reading", "expected"),
    [
        ("Lead Vocal", None, HpfStatus.MISSING),
        ("Lead Vocal", 105.0, HpfStatus.WITHIN),
        ("Lead Vocal", 150.0, HpfStatus.OVER),
        ("Lead Vocal", 60.0, HpfStatus.UNDER),
        ("Kick", 80.0, HpfStatus.UNEXPECTED),
        ("Kick", None, HpfStatus.NOT_APPLICABLE),
    ],
)
def test_hpf_statuses(service, label: str, hpf_reading: float | None, expected: HpfStatus) -> None:
    analysis = analyze(_snapshot(SnapshotChannel(1, label, gain_db=12.0, hpf_hz=hpf_reading)), generate(service))

    assert analysis.deltas[0].hpf_status is expected


def test_hpf_is_not_judged_when_detail_level_omits_it(make_service) -> None:
    recommendation = generate(make_service(detail_level=DetailLevel.ESSENTIALS))

    analysis = analyze(_snapshot(SnapshotChannel(1, "Kick", gain_db=2.0, hpf_hz=80.0)), recommendation)

    assert analysis.deltas[0].hpf_status is HpfStatus.NOT_APPLICABLE


def test_eq_and_compressor_comparison() -> None:
    recommendation = generate(_simple_service(InputChannel("Kick", InputSource.KICK)))
    snapshot = _snapshot(
        SnapshotChannel(
            1,
            "Kick",
            gain_db=2.0,
            eq_bands=(
                SnapshotEqBand(72.0, 2.0),
                SnapshotEqBand(4000.0, -3.0),
                SnapshotEqBand(1000.0, 6.0),
            ),
            comp_threshold_db=-30.0,
            comp_ratio=4.0,
        )
    )

    (delta,) = analyze(snapshot, recommendation).deltas

    by_frequency = {band.frequency_hz: band for band in delta.eq_deltas}
    assert by_frequency[70.0].delta_db == 0.0
    assert by_frequency[400.0].actual_gain_db is None
    assert by_frequency[4000.0].flagged
    assert delta.compressor_ratio_delta == 0.0
    assert delta.compressor_threshold_delta_db == -15.0
    assert any("Unplanned +6.0 dB boost at 1000 Hz" in suggestion for suggestion in delta.suggestions)
    assert any("Compressor threshold" in suggestion for suggestion in delta.suggestions)


def test_label_match_picks_between_duplicate_sources() -> None:
    recommendation = generate(
        _simple_service(
            InputChannel("BV 1", InputSource.BACKING_VOCAL),
            InputChannel("BV 2", InputSource.BACKING_VOCAL),
        )
    )

    analysis = analyze(_snapshot(SnapshotChannel(9, "bv 2", gain_db=15.0)), recommendation)

    assert analysis.deltas[0].recommended_label == "BV 2"


def test_spl_estimate_requires_calibration(service) -> None:
    snapshot = _snapshot(SnapshotChannel(1, "Lead Vocal", gain_db=20.0, fader_db=0.0))
    recommendation = generate(service)

    assert analyze(snapshot, recommendation, spl_preference=SPLPreference()).spl_estimate is None

    calibrated = SPLPreference(target_db=90.0, mode=SPLFlaggingMode.BALANCED, calibration_offset_db=100.0)
    analysis = analyze(snapshot, recommendation, spl_preference=calibrated)

    assert analysis.spl_estimate is not None
    assert analysis.spl_estimate.estimated_db == 107.0
    assert analysis.spl_estimate.is_over_target
    assert any("over the 90 dB target" in suggestion for suggestion in analysis.suggestions)


def test_partially_populated_channels_are_compared(service) -> None:
    snapshot = _snapshot(
        SnapshotChannel(1, None, gain_db=30.0),
        SnapshotChannel(2, "Kick", gain_db=30.0, eq_bands=None),
        SnapshotChannel(3, None),
    )

    analysis = analyze(snapshot, generate(service), {1: InputSource.KICK})

    unnamed, kick = analysis.deltas
    assert unnamed.name == ""
    assert unnamed.recommended_label == "Kick"
    assert unnamed.classification is DeltaClass.OVER
    assert kick.eq_deltas == ()
    assert kick.classification is DeltaClass.OVER
    (unmapped,) = analysis.unmapped
    assert unmapped.name == ""
    assert unmapped.reason is UnmappedReason.UNRECOGNIZED_NAME
