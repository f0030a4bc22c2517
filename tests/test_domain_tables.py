from __future__ import annotations

import pytest

from stagemix.domain.console import CONSOLE_SPECS, MixerModel
from stagemix.domain.models import (
    DetailLevel,
    InputChannel,
    MicType,
    MusicalKey,
    Room,
    RoomSize,
    RoomSurface,
    Service,
    SPLFlaggingMode,
    SPLPreference,
    StyleDynamics,
    VocalRange,
    VocalStyle,
    default_vocal_profile,
)
from stagemix.domain.services import require_complete_table
from stagemix.domain.sources import SOURCE_TRAITS, InputCategory, InputSource


def test_every_source_has_traits_and_category() -> None:
    assert len(InputSource) == 40
    assert set(SOURCE_TRAITS) == set(InputSource)
    for source in InputSource:
        assert isinstance(source.category, InputCategory)
        low, high = source.traits.level_range
        assert low < high


def test_every_console_has_a_spec() -> None:
    assert set(CONSOLE_SPECS) == set(MixerModel)
    for model in MixerModel:
        low, high = model.spec.gain_range_db
        assert low < high
        assert model.spec.eq_band_count >= 4


def test_require_complete_table_names_missing_members() -> None:
    with pytest.raises(LookupError, match="BALANCED"):
        require_complete_table({SPLFlaggingMode.STRICT: 1.0}, SPLFlaggingMode, "partial")


def test_line_level_sources_use_line_mic_kind() -> None:
    assert InputSource.BASS_DI.is_line_level
    assert InputSource.TRACKS_LEFT.is_line_level
    assert not InputSource.KICK.is_line_level
    assert InputSource.KICK.is_acoustic_drum
    assert not InputSource.ELECTRONIC_DRUMS.is_acoustic_drum


def test_key_frequencies_follow_equal_temperament_from_c1() -> None:
    assert MusicalKey.C.fundamental_hz == pytest.approx(32.7, abs=0.01)
    assert MusicalKey.A.fundamental_hz == pytest.approx(55.0, abs=0.01)
    assert MusicalKey.A.bass_range_hz == pytest.approx(110.0, abs=0.02)
    assert MusicalKey.A.low_mid_range_hz == pytest.approx(220.0, abs=0.04)
    assert MusicalKey.B.semitone == 11


def test_room_rt60_and_low_end_flag() -> None:
    assert Room(RoomSize.MEDIUM, RoomSurface.MIXED).rt60_seconds == pytest.approx(1.2)
    assert not Room(RoomSize.MEDIUM, RoomSurface.MIXED).has_low_end_problem
    assert Room(RoomSize.LARGE, RoomSurface.REFLECTIVE).rt60_seconds == pytest.approx(2.7)
    assert Room(RoomSize.LARGE, RoomSurface.REFLECTIVE).has_low_end_problem
    assert not Room(RoomSize.SMALL, RoomSurface.ABSORBENT).has_low_end_problem


def test_detail_levels_are_ordered() -> None:
    assert DetailLevel.FULL.includes(DetailLevel.DETAILED)
    assert DetailLevel.DETAILED.includes(DetailLevel.ESSENTIALS)
    assert not DetailLevel.ESSENTIALS.includes(DetailLevel.DETAILED)


def test_vocal_style_dynamics() -> None:
    assert VocalStyle.GOSPEL.dynamics is StyleDynamics.AGGRESSIVE
    assert VocalStyle.CONTEMPORARY.dynamics is StyleDynamics.MODERATE
    assert VocalStyle.CHOIR.dynamics is StyleDynamics.GENTLE
    assert VocalStyle.GOSPEL.is_aggressive


def test_default_vocal_profiles_depend_on_source() -> None:
    speech = default_vocal_profile(InputSource.PASTOR_LAPEL)
    assert speech.style is VocalStyle.SPOKEN
    assert speech.mic_type is MicType.LAVALIER

    choir = default_vocal_profile(InputSource.CHOIR)
    assert choir.range is VocalRange.ALTO
    assert choir.mic_type is MicType.CONDENSER_SDC

    lead = default_vocal_profile(InputSource.LEAD_VOCAL)
    assert lead.range is VocalRange.TENOR
    assert lead.mic_type is MicType.DYNAMIC


def test_console_compatibility_uses_gain_staging() -> None:
    assert MixerModel.X32.spec.is_compatible_with(MixerModel.M32.spec)
    assert MixerModel.YAMAHA_TF.spec.is_compatible_with(MixerModel.YAMAHA_CL.spec)
    assert not MixerModel.X32.spec.is_compatible_with(MixerModel.SQ.spec)


def test_service_active_channels_skip_inactive() -> None:
    service = Service(
        name="Midweek",
        console=MixerModel.SQ,
        channels=(
            InputChannel("Kick", InputSource.KICK),
            InputChannel("Spare", InputSource.SNARE, is_active=False),
        ),
    )

    assert [channel.label for channel in service.active_channels] == ["Kick"]
    assert service.console_spec is MixerModel.SQ.spec


def test_spl_preference_flag_level() -> None:
    assert SPLPreference(target_db=90.0, mode=SPLFlaggingMode.STRICT).flag_level_db == 92.0
    assert SPLPreference(target_db=95.0, mode=SPLFlaggingMode.VARIABLE).flag_level_db == 103.0
