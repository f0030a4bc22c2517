"""Turn a service description into starting mixer settings."""

from __future__ import annotations

from dataclasses import dataclass, replace

from stagemix.domain.models import (
    BandComposition,
    DetailLevel,
    InputChannel,
    RoomSurface,
    Service,
    StyleDynamics,
    VocalProfile,
    VocalStyle,
    default_vocal_profile,
)
from stagemix.domain.policies import DEFAULT_MASKING_POLICY, MaskingPolicy
from stagemix.domain.results import (
    ChannelRecommendation,
    CompressorSettings,
    MixerSettingRecommendation,
)
from stagemix.domain.services import clamp, floor_to_step, mean_or_default, round_to_step
from stagemix.domain.sources import InputCategory, InputSource, MicKind
from stagemix.equalization import build_eq_bands
from stagemix.key_conflicts import channel_emphasis, key_warnings_for
from stagemix.notes import channel_notes, service_notes

_REFERENCE_SPL_DB = 94.0


@dataclass(frozen=True, slots=True)
class RecommendationTuning:
    """Tunable constants for turning a service into channel settings."""

    gain_half_width_db: dict[MicKind, float]
    aggressive_window_tightening: float
    line_target_dbu: float
    eq_gain_clamp_db: tuple[float, float]
    eq_merge_ratio: float
    mud_cut_db: dict[RoomSurface, float]
    low_end_hpf_raise: float
    low_key_hpf_raise: float
    low_key_fundamental_hz: float
    hpf_step_hz: float
    intensity_fader_scale: float
    surface_fader_nudge_db: dict[RoomSurface, float]
    tracks_only_fader_offset_db: float
    makeup_reference_level_db: float
    makeup_fraction: float
    masking: MaskingPolicy = DEFAULT_MASKING_POLICY


@dataclass(frozen=True, slots=True)
class CompressorTemplate:
    threshold_db: float
    ratio: float
    attack_ms: float
    release_ms: float
    reason: str


RECOMMENDATION_TUNINGS: dict[str, RecommendationTuning] = {
    "default": RecommendationTuning(
        gain_half_width_db={MicKind.DYNAMIC: 5.0, MicKind.CONDENSER: 4.0, MicKind.LINE: 6.0},
        aggressive_window_tightening=0.6,
        line_target_dbu=6.0,
        eq_gain_clamp_db=(-8.0, 6.0),
        eq_merge_ratio=0.15,
        mud_cut_db={RoomSurface.ABSORBENT: -1.5, RoomSurface.MIXED: -2.5, RoomSurface.REFLECTIVE: -4.0},
        low_end_hpf_raise=1.15,
        low_key_hpf_raise=1.1,
        low_key_fundamental_hz=45.0,
        hpf_step_hz=5.0,
        intensity_fader_scale=0.5,
        surface_fader_nudge_db={RoomSurface.ABSORBENT: -1.0, RoomSurface.MIXED: 0.0, RoomSurface.REFLECTIVE: 1.0},
        tracks_only_fader_offset_db=-3.0,
        makeup_reference_level_db=-10.0,
        makeup_fraction=0.5,
    ),
    "conservative": RecommendationTuning(
        gain_half_width_db={MicKind.DYNAMIC: 4.0, MicKind.CONDENSER: 3.0, MicKind.LINE: 5.0},
        aggressive_window_tightening=0.7,
        line_target_dbu=4.0,
        eq_gain_clamp_db=(-6.0, 4.0),
        eq_merge_ratio=0.2,
        mud_cut_db={RoomSurface.ABSORBENT: -1.0, RoomSurface.MIXED: -2.0, RoomSurface.REFLECTIVE: -3.0},
        low_end_hpf_raise=1.1,
        low_key_hpf_raise=1.05,
        low_key_fundamental_hz=42.0,
        hpf_step_hz=5.0,
        intensity_fader_scale=0.3,
        surface_fader_nudge_db={RoomSurface.ABSORBENT: -0.5, RoomSurface.MIXED: 0.0, RoomSurface.REFLECTIVE: 0.5},
        tracks_only_fader_offset_db=-4.0,
        makeup_reference_level_db=-12.0,
        makeup_fraction=0.4,
    ),
}

DEFAULT_TUNING = RECOMMENDATION_TUNINGS["default"]

VOCAL_DYNAMICS: dict[StyleDynamics, tuple[float, float, float]] = {
    # (ratio, attack ms, release ms)
    StyleDynamics.GENTLE: (2.5, 15.0, 150.0),
    StyleDynamics.MODERATE: (3.0, 10.0, 120.0),
    StyleDynamics.AGGRESSIVE: (4.5, 4.0, 90.0),
}

SPEECH_COMPRESSOR = CompressorTemplate(-20.0, 4.0, 5.0, 80.0, "Even out spoken word so every sentence reads")

COMPRESSOR_TEMPLATES: dict[InputSource, CompressorTemplate] = {
    InputSource.KICK: CompressorTemplate(-15.0, 4.0, 10.0, 80.0, "Firm up kick transients"),
    InputSource.SNARE: CompressorTemplate(-12.0, 3.0, 5.0, 60.0, "Control snare peaks without losing crack"),
    InputSource.BASS_DI: CompressorTemplate(-18.0, 4.0, 15.0, 100.0, "Keep bass notes even in level"),
    InputSource.BASS_AMP: CompressorTemplate(-18.0, 4.0, 15.0, 100.0, "Keep bass notes even in level"),
    InputSource.ACOUSTIC_GUITAR_DI: CompressorTemplate(-16.0, 3.0, 20.0, 150.0, "Smooth strumming dynamics"),
    InputSource.ACOUSTIC_GUITAR_MIC: CompressorTemplate(-16.0, 3.0, 20.0, 150.0, "Smooth strumming dynamics"),
}


def resolve_recommendation_tuning(profile: str = "default") -> RecommendationTuning:
    try:
        return RECOMMENDATION_TUNINGS[profile]
    except KeyError as exc:
        allowed = ", ".join(sorted(RECOMMENDATION_TUNINGS))
        raise ValueError(f"Unknown recommendation profile '{profile}'. Allowed: {allowed}.") from exc


def resolve_profile(channel: InputChannel) -> tuple[VocalProfile | None, bool]:
    """Return the channel's vocal profile and whether a default was substituted."""

    if not channel.source.needs_vocal_profile:
        return None, False
    if channel.vocal_profile is not None:
        return channel.vocal_profile, False
    return default_vocal_profile(channel.source), True


def _window_mic_kind(source: InputSource, profile: VocalProfile | None) -> MicKind:
    if profile is None:
        return source.traits.mic_kind
    return MicKind.DYNAMIC if profile.mic_type.is_dynamic_family else MicKind.CONDENSER


def nominal_gain_db(
    source: InputSource,
    profile: VocalProfile | None,
    service: Service,
    tuning: RecommendationTuning = DEFAULT_TUNING,
) -> float:
    """Preamp gain that brings the expected source level to the console's nominal level."""

    traits = source.traits
    if source.is_line_level:
        return max(0.0, tuning.line_target_dbu - traits.level_midpoint)

    if profile is not None and source.category is InputCategory.VOCALS:
        expected_spl = profile.range.close_mic_spl_db
    else:
        expected_spl = traits.level_midpoint
    gain = service.console_spec.reference_gain_at_94_spl_db + (_REFERENCE_SPL_DB - expected_spl)
    if profile is not None:
        gain += profile.mic_type.sensitivity_offset_db
    if source.is_acoustic_drum:
        gain += service.drum_configuration.isolation_offset_db
    return gain


def gain_range_db(
    source: InputSource,
    profile: VocalProfile | None,
    service: Service,
    tuning: RecommendationTuning = DEFAULT_TUNING,
) -> tuple[float, float]:
    nominal = nominal_gain_db(source, profile, service, tuning)
    half_width = tuning.gain_half_width_db[_window_mic_kind(source, profile)]
    low = nominal - half_width
    high = nominal + half_width
    if profile is not None and profile.style.is_aggressive:
        high = low + (high - low) * (1.0 - tuning.aggressive_window_tightening)

    console_low, console_high = service.console_spec.gain_range_db
    return (
        clamp(round_to_step(low), console_low, console_high),
        clamp(round_to_step(high), console_low, console_high),
    )


def fader_start_db(source: InputSource, service: Service, tuning: RecommendationTuning = DEFAULT_TUNING) -> float:
    floor, ceiling = service.console_spec.fader_range_db
    baseline = source.traits.fader_baseline_db
    if baseline is None:
        return floor

    intensity = mean_or_default(song.intensity.fader_offset_db for song in service.setlist)
    value = baseline + intensity * tuning.intensity_fader_scale
    value += tuning.surface_fader_nudge_db[service.room.surface]
    if service.band_composition is BandComposition.TRACKS and source.category is InputCategory.PLAYBACK:
        value += tuning.tracks_only_fader_offset_db
    return clamp(round_to_step(value), floor, ceiling)


def hpf_hz(source: InputSource, service: Service, tuning: RecommendationTuning = DEFAULT_TUNING) -> float | None:
    """Baseline cutoff, raised for boomy rooms and low keys but never into the set's bass notes."""

    base = source.traits.base_hpf_hz
    if base is None:
        return None

    factor = 1.0
    # No room raise for guitars.
    if service.room.has_low_end_problem and source.category is not InputCategory.GUITARS:
        factor *= tuning.low_end_hpf_raise
    songs = service.setlist
    if songs and mean_or_default(song.key.fundamental_hz for song in songs) < tuning.low_key_fundamental_hz:
        factor *= tuning.low_key_hpf_raise
    if factor == 1.0:
        return base

    raised = round(base * factor, 2)
    if songs:
        raised = min(raised, min(song.key.bass_range_hz for song in songs))
    return max(base, floor_to_step(raised, tuning.hpf_step_hz))


def compressor_settings(
    source: InputSource,
    profile: VocalProfile | None,
    tuning: RecommendationTuning = DEFAULT_TUNING,
) -> CompressorSettings | None:
    if source.category is InputCategory.SPEECH or (profile is not None and profile.style is VocalStyle.SPOKEN):
        template = SPEECH_COMPRESSOR
    elif profile is not None:
        ratio, attack_ms, release_ms = VOCAL_DYNAMICS[profile.style.dynamics]
        template = CompressorTemplate(
            threshold_db=round(-18.0 - profile.style.dynamic_range_factor * 3.0, 1),
            ratio=ratio,
            attack_ms=attack_ms,
            release_ms=release_ms,
            reason=f"{profile.style.dynamics.value.capitalize()} control for {profile.style.value} vocals",
        )
    else:
        template = COMPRESSOR_TEMPLATES.get(source)
        if template is None:
            return None

    reduction_db = max(0.0, tuning.makeup_reference_level_db - template.threshold_db) * (1.0 - 1.0 / template.ratio)
    return CompressorSettings(
        threshold_db=template.threshold_db,
        ratio=template.ratio,
        attack_ms=template.attack_ms,
        release_ms=template.release_ms,
        makeup_gain_db=round_to_step(reduction_db * tuning.makeup_fraction),
        reason=template.reason,
    )


def recommend_channel(
    channel: InputChannel,
    service: Service,
    tuning: RecommendationTuning = DEFAULT_TUNING,
) -> ChannelRecommendation:
    """Settings for one channel, without the cross-channel key warnings."""

    source = channel.source
    level = service.detail_level
    profile, defaulted = resolve_profile(channel)
    gain_low, gain_high = gain_range_db(source, profile, service, tuning)

    recommendation = ChannelRecommendation(
        channel=channel,
        gain_range_db=(gain_low, gain_high),
        fader_start_db=fader_start_db(source, service, tuning),
        headroom_db=round(service.console_spec.max_gain_db - gain_high, 1),
        notes=channel_notes(channel, profile, defaulted, service),
    )
    if level.includes(DetailLevel.DETAILED):
        recommendation = replace(
            recommendation,
            hpf_hz=hpf_hz(source, service, tuning),
            eq_bands=build_eq_bands(
                source,
                profile,
                service,
                tuning.mud_cut_db,
                tuning.eq_merge_ratio,
                tuning.eq_gain_clamp_db,
            ),
        )
    if level.includes(DetailLevel.FULL):
        recommendation = replace(recommendation, compressor=compressor_settings(source, profile, tuning))
    return recommendation


def generate(service: Service, tuning: RecommendationTuning = DEFAULT_TUNING) -> MixerSettingRecommendation:
    """Recommend starting settings for every active channel of ``service``."""

    channels = [recommend_channel(channel, service, tuning) for channel in service.active_channels]

    if service.detail_level.includes(DetailLevel.DETAILED):
        emphases = tuple(channel_emphasis(item.channel, item.eq_bands) for item in channels)
        channels = [
            replace(item, key_warnings=key_warnings_for(index, emphases, service.setlist, tuning.masking))
            for index, item in enumerate(channels)
        ]

    return MixerSettingRecommendation(
        service=service,
        channels=tuple(channels),
        notes=service_notes(service),
    )
