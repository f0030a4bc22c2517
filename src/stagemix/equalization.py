"""Per-channel EQ band selection.

Bands come from four layers, applied in order: the source's own template
(mud cut, presence, low-end weight), the vocal profile, a room high-shelf
correction, and key-aware bands for each distinct key in the set list.
Nearby bands of the same type are merged and the result is trimmed to what
the console can actually hold.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from stagemix.domain.models import MicType, MusicalKey, RoomSurface, Service, VocalProfile, VocalStyle
from stagemix.domain.results import EqBand, EqBandType
from stagemix.domain.services import clamp, round_to_step
from stagemix.domain.sources import InputCategory, InputSource

_PEAK_Q = 1.4
_WIDE_Q = 1.0
_NARROW_Q = 2.0
_SHELF_Q = 0.7

_PROXIMITY_CUT_HZ = 200.0
_PROXIMITY_THRESHOLD = 0.5
_AIR_SHELF_HZ = 10_000.0
_ROOM_SHELF_HZ = 8_000.0
_POWER_VOCAL_CUT_HZ = 300.0

_NO_AIR_MICS = (MicType.LAVALIER, MicType.HEADSET)
_NO_ROOM_SHELF = (InputCategory.DRUMS, InputCategory.PLAYBACK)


def _peak(frequency_hz: float, gain_db: float, q: float, reason: str) -> EqBand:
    return EqBand(frequency_hz=round(frequency_hz, 1), q=q, gain_db=gain_db, band_type=EqBandType.PEAK, reason=reason)


def source_bands(source: InputSource, surface: RoomSurface, mud_cut_db: dict[RoomSurface, float]) -> list[EqBand]:
    traits = source.traits
    bands: list[EqBand] = []
    if traits.mud_cut_hz is not None:
        bands.append(
            _peak(
                traits.mud_cut_hz,
                mud_cut_db[surface],
                _PEAK_Q,
                f"Reduce low-mid mud on {traits.display_name} ({surface.value} room)",
            )
        )
    if traits.presence_boost is not None:
        frequency_hz, gain_db = traits.presence_boost
        bands.append(_peak(frequency_hz, gain_db, 1.2, f"Add clarity to {traits.display_name}"))
    if traits.low_boost is not None:
        frequency_hz, gain_db = traits.low_boost
        bands.append(_peak(frequency_hz, gain_db, _WIDE_Q, f"Add low-end weight to {traits.display_name}"))
    return bands


def vocal_bands(profile: VocalProfile) -> list[EqBand]:
    bands: list[EqBand] = []
    mic = profile.mic_type
    if mic.proximity_factor > _PROXIMITY_THRESHOLD:
        bands.append(
            _peak(_PROXIMITY_CUT_HZ, -2.0, _WIDE_Q, f"Tame proximity effect of a {mic.value} mic")
        )

    zone_low, zone_high = profile.range.presence_zone_hz
    bands.append(
        _peak((zone_low + zone_high) / 2.0, 2.0, 1.5, f"Presence for a {profile.range.value} voice")
    )

    if profile.style is not VocalStyle.SPOKEN and mic not in _NO_AIR_MICS:
        bands.append(
            EqBand(
                frequency_hz=_AIR_SHELF_HZ,
                q=_SHELF_Q,
                gain_db=1.5,
                band_type=EqBandType.HIGH_SHELF,
                reason="Air shelf for sung vocals",
            )
        )
    if profile.style.is_aggressive:
        bands.append(
            _peak(
                _POWER_VOCAL_CUT_HZ,
                -1.5,
                _PEAK_Q,
                f"Clean up low-mid build-up on powerful {profile.style.value} vocals",
            )
        )
    return bands


def room_bands(source: InputSource, surface: RoomSurface) -> list[EqBand]:
    if source.category in _NO_ROOM_SHELF or surface.hf_bias_db == 0.0:
        return []
    reason = (
        "Absorbent room swallows top end" if surface.hf_bias_db > 0 else "Reflective room exaggerates top end"
    )
    return [
        EqBand(
            frequency_hz=_ROOM_SHELF_HZ,
            q=_SHELF_Q,
            gain_db=surface.hf_bias_db,
            band_type=EqBandType.HIGH_SHELF,
            reason=reason,
        )
    ]


def key_bands(source: InputSource, keys: Iterable[MusicalKey]) -> list[EqBand]:
    bands: list[EqBand] = []
    category = source.category
    for key in keys:
        if source is InputSource.KICK:
            bands.append(_peak(key.bass_range_hz, -1.5, _NARROW_Q, f"Carve space for the bass note in {key.value}"))
        elif category is InputCategory.BASS:
            bands.append(_peak(key.bass_range_hz, 1.0, _NARROW_Q, f"Reinforce the root of {key.value}"))
        elif category in (InputCategory.GUITARS, InputCategory.KEYS):
            bands.append(
                _peak(key.fundamental_hz * 3.0, -1.0, _NARROW_Q, f"Clear the third harmonic of {key.value} for bass")
            )
    return bands


def merge_nearby(bands: Sequence[EqBand], merge_ratio: float, gain_clamp_db: tuple[float, float]) -> list[EqBand]:
    """Fold same-type bands whose centres sit within ``merge_ratio`` of each other."""

    merged: list[EqBand] = []
    for band in sorted(bands, key=lambda item: (item.frequency_hz, item.band_type.value)):
        index = next(
            (
                position
                for position in range(len(merged) - 1, -1, -1)
                if merged[position].band_type is band.band_type
                and abs(band.frequency_hz - merged[position].frequency_hz) / merged[position].frequency_hz <= merge_ratio
            ),
            None,
        )
        if index is None:
            merged.append(
                EqBand(band.frequency_hz, band.q, clamp(band.gain_db, *gain_clamp_db), band.band_type, band.reason)
            )
            continue
        previous = merged[index]
        reason = previous.reason if band.reason in previous.reason else f"{previous.reason}; {band.reason}"
        merged[index] = EqBand(
            frequency_hz=previous.frequency_hz,
            q=max(previous.q, band.q),
            gain_db=clamp(round_to_step(previous.gain_db + band.gain_db, 0.5), *gain_clamp_db),
            band_type=previous.band_type,
            reason=reason,
        )
    return [band for band in merged if band.gain_db != 0.0]


def limit_to_console(bands: Sequence[EqBand], band_count: int) -> tuple[EqBand, ...]:
    """Keep the ``band_count`` strongest moves, reported low to high."""

    strongest = sorted(bands, key=lambda item: abs(item.gain_db), reverse=True)[: max(band_count, 0)]
    return tuple(sorted(strongest, key=lambda item: item.frequency_hz))


def build_eq_bands(
    source: InputSource,
    profile: VocalProfile | None,
    service: Service,
    mud_cut_db: dict[RoomSurface, float],
    merge_ratio: float,
    gain_clamp_db: tuple[float, float],
) -> tuple[EqBand, ...]:
    surface = service.room.surface
    distinct_keys = tuple(dict.fromkeys(song.key for song in service.setlist))

    bands = source_bands(source, surface, mud_cut_db)
    if profile is not None:
        bands.extend(vocal_bands(profile))
    bands.extend(room_bands(source, surface))
    bands.extend(key_bands(source, distinct_keys))

    merged = merge_nearby(bands, merge_ratio, gain_clamp_db)
    return limit_to_console(merged, service.console_spec.eq_band_count)


def emphasis_frequencies(bands: Iterable[EqBand]) -> tuple[float, ...]:
    """Centres of the bands that push energy up."""

    return tuple(band.frequency_hz for band in bands if band.gain_db > 0)
