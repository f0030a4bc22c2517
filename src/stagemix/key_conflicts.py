"""Cross-channel masking warnings tied to each song's key."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from stagemix.domain.models import InputChannel, MusicalKey, SetlistSong
from stagemix.domain.policies import MaskingPolicy
from stagemix.domain.results import EqBand, KeyWarning, MaskingZone, WarningSeverity
from stagemix.domain.services import octave_distance
from stagemix.equalization import emphasis_frequencies


@dataclass(frozen=True, slots=True)
class ChannelEmphasis:
    """Where a channel pushes energy: explicit boost centres, else its nominal range."""

    label: str
    points_hz: tuple[float, ...]
    range_hz: tuple[float, float]

    def nearest(self, zone_hz: float) -> tuple[float, float]:
        """Return ``(separation_octaves, frequency_hz)`` of the closest emphasis to ``zone_hz``."""

        if self.points_hz:
            return min((octave_distance(point, zone_hz), point) for point in self.points_hz)
        low, high = self.range_hz
        if low <= zone_hz <= high:
            return 0.0, zone_hz
        edge = low if zone_hz < low else high
        return octave_distance(edge, zone_hz), edge


def channel_emphasis(channel: InputChannel, eq_bands: Sequence[EqBand] | None) -> ChannelEmphasis:
    return ChannelEmphasis(
        label=channel.label,
        points_hz=emphasis_frequencies(eq_bands or ()),
        range_hz=channel.source.traits.nominal_range_hz,
    )


def zone_frequency(key: MusicalKey, zone: MaskingZone) -> float:
    if zone is MaskingZone.BASS:
        return key.bass_range_hz
    return key.low_mid_range_hz


def severity_for(score: float, policy: MaskingPolicy) -> WarningSeverity:
    if score >= policy.high_severity_score:
        return WarningSeverity.HIGH
    if score >= policy.moderate_severity_score:
        return WarningSeverity.MODERATE
    return WarningSeverity.LOW


def _suggestion(severity: WarningSeverity, label: str, frequency_hz: float, song: SetlistSong, competitors: tuple[str, ...]) -> str:
    others = ", ".join(competitors)
    if severity is WarningSeverity.HIGH:
        return f"Cut {frequency_hz:.0f} Hz by 2-3 dB on {label} during '{song.title}' so it stops masking {others}."
    if severity is WarningSeverity.MODERATE:
        return f"Narrow the Q around {frequency_hz:.0f} Hz on {label} for '{song.title}'."
    return f"Stagger fader moves between {label} and {others} during '{song.title}'."


def key_warnings_for(
    index: int,
    emphases: Sequence[ChannelEmphasis],
    setlist: Sequence[SetlistSong],
    policy: MaskingPolicy,
) -> tuple[KeyWarning, ...]:
    """Warnings for the channel at ``index`` against every other channel and song.

    Reads the shared emphasis list only; each channel's warnings are derived
    independently of the others'.
    """

    own = emphases[index]
    half_bandwidth = policy.half_bandwidth_octaves
    warnings: list[KeyWarning] = []
    for song in setlist:
        for zone in MaskingZone:
            centre_hz = zone_frequency(song.key, zone)
            separation, frequency_hz = own.nearest(centre_hz)
            if separation > half_bandwidth:
                continue
            competitors = tuple(
                other.label
                for position, other in enumerate(emphases)
                if position != index and other.nearest(centre_hz)[0] <= half_bandwidth
            )
            if not competitors:
                continue
            score = (1.0 - separation / half_bandwidth) + policy.intensity_weights.get(song.intensity, 0.0)
            severity = severity_for(score, policy)
            warnings.append(
                KeyWarning(
                    song_title=song.title,
                    frequency_hz=round(frequency_hz, 1),
                    zone=zone,
                    severity=severity,
                    suggestion=_suggestion(severity, own.label, frequency_hz, song, competitors),
                    competing_channels=competitors,
                )
            )
    return tuple(warnings)
