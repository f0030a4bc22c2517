"""DDD domain layer."""

from .console import CONSOLE_SPECS, ConsoleSpec, MixerModel
from .events import (
    AnalysisFailed,
    DomainEvent,
    RecommendationGenerated,
    SnapshotAnalyzed,
    SnapshotImported,
    StaleResultDiscarded,
)
from .models import (
    BandComposition,
    ChannelMapping,
    DetailLevel,
    DrumConfiguration,
    InputChannel,
    MicType,
    MixerSnapshot,
    MusicalKey,
    Room,
    RoomSize,
    RoomSurface,
    Service,
    SetlistSong,
    SnapshotChannel,
    SnapshotEqBand,
    SongIntensity,
    SPLFlaggingMode,
    SPLPreference,
    StyleDynamics,
    VocalProfile,
    VocalRange,
    VocalStyle,
    default_vocal_profile,
)
from .policies import DEFAULT_MASKING_POLICY, DEFAULT_TOLERANCE_POLICY, DeltaTolerancePolicy, MaskingPolicy
from .results import (
    AnalysisGrade,
    ChannelDelta,
    ChannelRecommendation,
    CompressorSettings,
    DeltaClass,
    EqBand,
    EqBandDelta,
    EqBandType,
    HpfStatus,
    KeyWarning,
    MaskingZone,
    MixerAnalysis,
    MixerSettingRecommendation,
    SPLEstimate,
    UnmappedChannel,
    UnmappedReason,
    WarningSeverity,
    fields_for_detail,
)
from .sources import SOURCE_TRAITS, InputCategory, InputSource, MicKind, SourceTraits

__all__ = [
    "CONSOLE_SPECS",
    "ConsoleSpec",
    "MixerModel",
    "DomainEvent",
    "RecommendationGenerated",
    "SnapshotImported",
    "SnapshotAnalyzed",
    "AnalysisFailed",
    "StaleResultDiscarded",
    "BandComposition",
    "ChannelMapping",
    "DetailLevel",
    "DrumConfiguration",
    "InputChannel",
    "MicType",
    "MixerSnapshot",
    "MusicalKey",
    "Room",
    "RoomSize",
    "RoomSurface",
    "Service",
    "SetlistSong",
    "SnapshotChannel",
    "SnapshotEqBand",
    "SongIntensity",
    "SPLFlaggingMode",
    "SPLPreference",
    "StyleDynamics",
    "VocalProfile",
    "VocalRange",
    "VocalStyle",
    "default_vocal_profile",
    "DEFAULT_MASKING_POLICY",
    "DEFAULT_TOLERANCE_POLICY",
    "DeltaTolerancePolicy",
    "MaskingPolicy",
    "AnalysisGrade",
    "ChannelDelta",
    "ChannelRecommendation",
    "CompressorSettings",
    "DeltaClass",
    "EqBand",
    "EqBandDelta",
    "EqBandType",
    "HpfStatus",
    "KeyWarning",
    "MaskingZone",
    "MixerAnalysis",
    "MixerSettingRecommendation",
    "SPLEstimate",
    "UnmappedChannel",
    "UnmappedReason",
    "WarningSeverity",
    "fields_for_detail",
    "SOURCE_TRAITS",
    "InputCategory",
    "InputSource",
    "MicKind",
    "SourceTraits",
]
