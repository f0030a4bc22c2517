"""Engine outputs: channel recommendations and snapshot analyses."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum

from stagemix.domain.models import DetailLevel, InputChannel, Service
from stagemix.domain.sources import InputSource


class EqBandType(str, Enum):
    PEAK = "peak"
    LOW_SHELF = "low-shelf"
    HIGH_SHELF = "high-shelf"


@dataclass(frozen=True, slots=True)
class EqBand:
    frequency_hz: float
    q: float
    gain_db: float
    band_type: EqBandType
    reason: str


@dataclass(frozen=True, slots=True)
class CompressorSettings:
    threshold_db: float
    ratio: float
    attack_ms: float
    release_ms: float
    makeup_gain_db: float
    reason: str


class MaskingZone(str, Enum):
    """Low-frequency region of a song's key where instruments compete."""

    BASS = "bass"
    MUD = "mud"


class WarningSeverity(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


@dataclass(frozen=True, slots=True)
class KeyWarning:
    song_title: str
    frequency_hz: float
    zone: MaskingZone
    severity: WarningSeverity
    suggestion: str
    competing_channels: tuple[str, ...] = ()


# Minimum detail level at which each optional field is emitted.
_FIELD_MINIMUM_DETAIL: dict[str, DetailLevel] = {
    "gain_range_db": DetailLevel.ESSENTIALS,
    "fader_start_db": DetailLevel.ESSENTIALS,
    "headroom_db": DetailLevel.ESSENTIALS,
    "notes": DetailLevel.ESSENTIALS,
    "hpf_hz": DetailLevel.DETAILED,
    "eq_bands": DetailLevel.DETAILED,
    "key_warnings": DetailLevel.DETAILED,
    "compressor": DetailLevel.FULL,
}


def fields_for_detail(level: DetailLevel) -> frozenset[str]:
    """Channel fields a recommendation at ``level`` may populate."""

    return frozenset(name for name, minimum in _FIELD_MINIMUM_DETAIL.items() if level.includes(minimum))


@dataclass(frozen=True, slots=True)
class ChannelRecommendation:
    """Starting settings for one active input channel.

    Fields gated out by the detail level are ``None``. ``eq_bands`` and
    ``key_warnings`` are tuples (possibly empty) once they are computed.
    """

    channel: InputChannel
    gain_range_db: tuple[float, float]
    fader_start_db: float
    headroom_db: float
    hpf_hz: float | None = None
    eq_bands: tuple[EqBand, ...] | None = None
    compressor: CompressorSettings | None = None
    key_warnings: tuple[KeyWarning, ...] | None = None
    notes: tuple[str, ...] = ()

    @property
    def source(self) -> InputSource:
        return self.channel.source

    def populated_fields(self) -> frozenset[str]:
        return frozenset(
            item.name
            for item in fields(self)
            if item.name in _FIELD_MINIMUM_DETAIL and getattr(self, item.name) is not None
        )


@dataclass(frozen=True, slots=True)
class MixerSettingRecommendation:
    service: Service
    channels: tuple[ChannelRecommendation, ...]
    notes: tuple[str, ...] = ()

    def for_source(self, source: InputSource) -> tuple[ChannelRecommendation, ...]:
        return tuple(item for item in self.channels if item.source is source)

    @property
    def key_warning_count(self) -> int:
        return sum(len(item.key_warnings or ()) for item in self.channels)


class DeltaClass(str, Enum):
    WITHIN = "within"
    UNDER = "under"
    OVER = "over"
    NO_DATA = "no-data"


class HpfStatus(str, Enum):
    WITHIN = "within"
    UNDER = "under"
    OVER = "over"
    MISSING = "missing"
    UNEXPECTED = "unexpected"
    NOT_APPLICABLE = "not-applicable"


class UnmappedReason(str, Enum):
    UNRECOGNIZED_NAME = "unrecognized-name"
    NO_RECOMMENDATION = "no-recommendation"


class AnalysisGrade(str, Enum):
    """Aggregate health, sharing vocabulary with SPL session grading."""

    CLEAN = "clean"
    GOOD = "good"
    NEEDS_ATTENTION = "needs-attention"
    OVER_TARGET = "over-target"

    @property
    def label(self) -> str:
        return _GRADE_LABELS[self]


_GRADE_LABELS = {
    AnalysisGrade.CLEAN: "Clean Service",
    AnalysisGrade.GOOD: "Good Control",
    AnalysisGrade.NEEDS_ATTENTION: "Needs Attention",
    AnalysisGrade.OVER_TARGET: "Over Target",
}


@dataclass(frozen=True, slots=True)
class EqBandDelta:
    frequency_hz: float
    recommended_gain_db: float
    actual_gain_db: float | None
    delta_db: float | None
    flagged: bool


@dataclass(frozen=True, slots=True)
class ChannelDelta:
    """Comparison between one snapshot channel and its recommendation."""

    channel_number: int
    name: str
    source: InputSource
    recommended_label: str
    classification: DeltaClass
    gain_delta_db: float | None
    fader_delta_db: float | None
    fader_status: DeltaClass
    hpf_delta_hz: float | None
    hpf_status: HpfStatus
    eq_deltas: tuple[EqBandDelta, ...] = ()
    compressor_ratio_delta: float | None = None
    compressor_threshold_delta_db: float | None = None
    suggestions: tuple[str, ...] = ()

    @property
    def is_graded(self) -> bool:
        return self.classification is not DeltaClass.NO_DATA


@dataclass(frozen=True, slots=True)
class UnmappedChannel:
    channel_number: int
    name: str
    reason: UnmappedReason
    inferred_source: InputSource | None = None


@dataclass(frozen=True, slots=True)
class SPLEstimate:
    estimated_db: float
    target_db: float
    flag_level_db: float

    @property
    def is_over_target(self) -> bool:
        return self.estimated_db > self.flag_level_db


@dataclass(frozen=True, slots=True)
class MixerAnalysis:
    snapshot_name: str
    deltas: tuple[ChannelDelta, ...]
    unmapped: tuple[UnmappedChannel, ...]
    grade: AnalysisGrade
    within_fraction: float
    spl_estimate: SPLEstimate | None = None
    suggestions: tuple[str, ...] = ()
