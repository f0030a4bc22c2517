"""Domain value objects holding the named thresholds the engines apply."""

from __future__ import annotations

from dataclasses import dataclass, field

from stagemix.domain.models import SongIntensity


def _default_intensity_weights() -> dict[SongIntensity, float]:
    return {
        SongIntensity.SOFT: 0.0,
        SongIntensity.MEDIUM: 0.15,
        SongIntensity.DRIVING: 0.3,
        SongIntensity.ALL_OUT: 0.45,
    }


@dataclass(frozen=True, slots=True)
class MaskingPolicy:
    """Key-conflict detection thresholds.

    A channel overlaps a song's masking zone when one of its emphasis
    frequencies lies within ``half_bandwidth_octaves`` of the zone centre.
    Severity is ``1 - separation / half_bandwidth`` plus the intensity weight.
    """

    policy_id: str
    half_bandwidth_octaves: float = 1.0
    intensity_weights: dict[SongIntensity, float] = field(default_factory=_default_intensity_weights)
    high_severity_score: float = 1.1
    moderate_severity_score: float = 0.6
    policy_version: str = "v1"


@dataclass(frozen=True, slots=True)
class DeltaTolerancePolicy:
    """Tolerance bands used when grading a snapshot against a recommendation."""

    policy_id: str
    gain_db: float = 3.0
    fader_db: float = 2.0
    hpf_relative: float = 0.15
    eq_frequency_match_relative: float = 0.25
    eq_gain_db: float = 3.0
    unrecommended_boost_db: float = 4.0
    compressor_threshold_db: float = 6.0
    compressor_ratio: float = 1.5
    good_fraction: float = 0.8
    needs_attention_fraction: float = 0.5
    policy_version: str = "v1"


DEFAULT_MASKING_POLICY = MaskingPolicy(policy_id="key-masking-default", policy_version="v1")
DEFAULT_TOLERANCE_POLICY = DeltaTolerancePolicy(policy_id="delta-tolerance-default", policy_version="v1")
