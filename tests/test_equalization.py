from __future__ import annotations

import pytest

from stagemix.domain.console import MixerModel
from stagemix.domain.models import (
    MicType,
    MusicalKey,
    Room,
    RoomSize,
    RoomSurface,
    Service,
    VocalProfile,
    VocalRange,
    VocalStyle,
)
from stagemix.domain.results import EqBand, EqBandType
from stagemix.domain.sources import InputSource
from stagemix.equalization import (
    build_eq_bands,
    emphasis_frequencies,
    key_bands,
    limit_to_console,
    merge_nearby,
    room_bands,
    vocal_bands,
)
from stagemix.recommendation import DEFAULT_TUNING

CLAMP = (-8.0, 6.0)


def _peak(frequency_hz: float, gain_db: float, reason: str = "test") -> EqBand:
    return EqBand(frequency_hz, 1.4, gain_db, EqBandType.PEAK, reason)


def test_merge_nearby_sums_gains_of_close_bands() -> None:
    merged = merge_nearby([_peak(300.0, -2.5, "mud"), _peak(310.0, -1.5, "power")], 0.15, CLAMP)

    assert len(merged) == 1
    assert merged[0].frequency_hz == 300.0
    assert merged[0].gain_db == -4.0
    assert merged[0].reason == "mud; power"


def test_merge_nearby_drops_bands_that_cancel() -> None:
    assert merge_nearby([_peak(1000.0, 1.0), _peak(1050.0, -1.0)], 0.15, CLAMP) == []


def test_merge_nearby_keeps_distinct_types_and_distant_bands() -> None:
    shelf = EqBand(8000.0, 0.7, 1.5, EqBandType.HIGH_SHELF, "air")
    merged = merge_nearby([_peak(8000.0, 2.0), shelf, _peak(200.0, -2.0)], 0.15, CLAMP)

    assert len(merged) == 3


def test_merge_nearby_clamps_summed_gain() -> None:
    merged = merge_nearby([_peak(400.0, -5.0), _peak(400.0, -5.0)], 0.15, CLAMP)

    assert merged[0].gain_db == -8.0


def test_limit_to_console_keeps_strongest_sorted_by_frequency() -> None:
    limited = limit_to_console([_peak(100.0, -1.0), _peak(3000.0, 3.0), _peak(300.0, -2.0)], 2)

    assert [band.frequency_hz for band in limited] == [300.0, 3000.0]


def test_vocal_bands_follow_mic_and_style() -> None:
    sung = vocal_bands(VocalProfile(VocalRange.TENOR, VocalStyle.CONTEMPORARY, MicType.DYNAMIC))
    spoken = vocal_bands(VocalProfile(VocalRange.BARITONE, VocalStyle.SPOKEN, MicType.LAVALIER))

    assert [band.frequency_hz for band in sung] == [200.0, 3500.0, 10_000.0]
    assert [band.frequency_hz for band in spoken] == [2750.0]


def test_room_bands_skip_drums_and_neutral_rooms() -> None:
    assert room_bands(InputSource.KICK, RoomSurface.REFLECTIVE) == []
    assert room_bands(InputSource.LEAD_VOCAL, RoomSurface.MIXED) == []

    (shelf,) = room_bands(InputSource.LEAD_VOCAL, RoomSurface.REFLECTIVE)
    assert shelf.band_type is EqBandType.HIGH_SHELF
    assert shelf.gain_db == -2.0


def test_key_bands_depend_on_source_role() -> None:
    (kick,) = key_bands(InputSource.KICK, [MusicalKey.G])
    (bass,) = key_bands(InputSource.BASS_DI, [MusicalKey.G])
    (keys,) = key_bands(InputSource.DIGITAL_PIANO, [MusicalKey.G])

    assert kick.frequency_hz == MusicalKey.G.bass_range_hz and kick.gain_db < 0
    assert bass.frequency_hz == MusicalKey.G.bass_range_hz and bass.gain_db > 0
    assert keys.frequency_hz == round(MusicalKey.G.fundamental_hz * 3.0, 1)
    assert key_bands(InputSource.LEAD_VOCAL, [MusicalKey.G]) == []


def test_build_eq_bands_merges_power_vocal_cut_into_mud_cut() -> None:
    service = Service(name="Gospel", console=MixerModel.X32, room=Room(RoomSize.MEDIUM, RoomSurface.MIXED))
    profile = VocalProfile(VocalRange.TENOR, VocalStyle.GOSPEL, MicType.DYNAMIC)

    bands = build_eq_bands(
        InputSource.LEAD_VOCAL,
        profile,
        service,
        DEFAULT_TUNING.mud_cut_db,
        DEFAULT_TUNING.eq_merge_ratio,
        DEFAULT_TUNING.eq_gain_clamp_db,
    )

    mud = next(band for band in bands if band.frequency_hz == 300.0)
    assert mud.gain_db == -4.0
    assert len(bands) <= MixerModel.X32.spec.eq_band_count


def test_emphasis_frequencies_only_report_boosts() -> None:
    assert emphasis_frequencies([_peak(70.0, 2.0), _peak(400.0, -2.5), _peak(4000.0, 3.0)]) == (70.0, 4000.0)


@pytest.mark.parametrize(
    ("surface", "expected"),
    [(RoomSurface.ABSORBENT, -1.5), (RoomSurface.MIXED, -2.5), (RoomSurface.REFLECTIVE, -4.0)],
)
def test_mud_cut_deepens_with_reflective_surfaces(surface: RoomSurface, expected: float) -> None:
    service = Service(name="Mud", console=MixerModel.X32, room=Room(RoomSize.MEDIUM, surface))

    bands = build_eq_bands(
        InputSource.KICK,
        None,
        service,
        DEFAULT_TUNING.mud_cut_db,
        DEFAULT_TUNING.eq_merge_ratio,
        DEFAULT_TUNING.eq_gain_clamp_db,
    )

    mud = next(band for band in bands if band.frequency_hz == 400.0)
    assert mud.gain_db == expected
