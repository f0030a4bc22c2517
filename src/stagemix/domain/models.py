"""Domain models describing a service and a captured mixer snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from stagemix.domain.console import ConsoleSpec, MixerModel
from stagemix.domain.services import require_complete_table
from stagemix.domain.sources import InputCategory, InputSource

_C1_HZ = 32.703


class RoomSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"

    @property
    def base_rt60_seconds(self) -> float:
        return _ROOM_SIZE_RT60[self]


class RoomSurface(str, Enum):
    ABSORBENT = "absorbent"
    REFLECTIVE = "reflective"
    MIXED = "mixed"

    @property
    def rt60_multiplier(self) -> float:
        return _SURFACE_RT60_MULTIPLIER[self]

    @property
    def hf_bias_db(self) -> float:
        """High-shelf correction: dead rooms need air, live rooms need less top."""

        return _SURFACE_HF_BIAS_DB[self]


_ROOM_SIZE_RT60 = {RoomSize.SMALL: 0.8, RoomSize.MEDIUM: 1.2, RoomSize.LARGE: 1.8}
_SURFACE_RT60_MULTIPLIER = {RoomSurface.ABSORBENT: 0.6, RoomSurface.REFLECTIVE: 1.5, RoomSurface.MIXED: 1.0}
_SURFACE_HF_BIAS_DB = {RoomSurface.ABSORBENT: 1.5, RoomSurface.REFLECTIVE: -2.0, RoomSurface.MIXED: 0.0}
_LOW_END_PROBLEM_RT60_SECONDS = 1.5


@dataclass(frozen=True, slots=True)
class Room:
    """Acoustic description of the performance space."""

    size: RoomSize = RoomSize.MEDIUM
    surface: RoomSurface = RoomSurface.MIXED

    @property
    def rt60_seconds(self) -> float:
        return round(self.size.base_rt60_seconds * self.surface.rt60_multiplier, 3)

    @property
    def has_low_end_problem(self) -> bool:
        return self.rt60_seconds > _LOW_END_PROBLEM_RT60_SECONDS


class BandComposition(str, Enum):
    LIVE = "live"
    TRACKS = "tracks"
    HYBRID = "hybrid"
    ACOUSTIC = "acoustic"
    SOLO = "solo"


class DrumConfiguration(str, Enum):
    OPEN = "open"
    SHIELD = "shield"
    CAGE = "cage"
    ELECTRONIC = "electronic"

    @property
    def isolation_offset_db(self) -> float:
        return _DRUM_ISOLATION_DB[self]


_DRUM_ISOLATION_DB = {
    DrumConfiguration.OPEN: 0.0,
    DrumConfiguration.SHIELD: -6.0,
    DrumConfiguration.CAGE: -15.0,
    DrumConfiguration.ELECTRONIC: -30.0,
}


class DetailLevel(str, Enum):
    """How much of the channel strip a recommendation fills in."""

    ESSENTIALS = "essentials"
    DETAILED = "detailed"
    FULL = "full"

    @property
    def rank(self) -> int:
        return _DETAIL_RANKS[self]

    def includes(self, minimum: "DetailLevel") -> bool:
        return self.rank >= minimum.rank


_DETAIL_RANKS = {DetailLevel.ESSENTIALS: 0, DetailLevel.DETAILED: 1, DetailLevel.FULL: 2}


class SongIntensity(str, Enum):
    SOFT = "soft"
    MEDIUM = "medium"
    DRIVING = "driving"
    ALL_OUT = "all-out"

    @property
    def fader_offset_db(self) -> float:
        return _INTENSITY_FADER_OFFSET_DB[self]


_INTENSITY_FADER_OFFSET_DB = {
    SongIntensity.SOFT: -6.0,
    SongIntensity.MEDIUM: 0.0,
    SongIntensity.DRIVING: 3.0,
    SongIntensity.ALL_OUT: 5.0,
}


class MusicalKey(str, Enum):
    """The twelve song keys, in semitone order from C."""

    C = "C"
    C_SHARP = "C#"
    D = "D"
    E_FLAT = "Eb"
    E = "E"
    F = "F"
    F_SHARP = "F#"
    G = "G"
    A_FLAT = "Ab"
    A = "A"
    B_FLAT = "Bb"
    B = "B"

    @property
    def semitone(self) -> int:
        return list(MusicalKey).index(self)

    @property
    def fundamental_hz(self) -> float:
        """Root note in the lowest musical octave (C1 = 32.703 Hz)."""

        return round(_C1_HZ * 2.0 ** (self.semitone / 12.0), 2)

    @property
    def bass_range_hz(self) -> float:
        return round(self.fundamental_hz * 2.0, 2)

    @property
    def low_mid_range_hz(self) -> float:
        return round(self.fundamental_hz * 4.0, 2)


class VocalRange(str, Enum):
    SOPRANO = "soprano"
    MEZZO = "mezzo"
    ALTO = "alto"
    TENOR = "tenor"
    BARITONE = "baritone"
    BASS = "bass"

    @property
    def presence_zone_hz(self) -> tuple[float, float]:
        return _PRESENCE_ZONES_HZ[self]

    @property
    def close_mic_spl_db(self) -> float:
        return _CLOSE_MIC_SPL_DB[self]


_PRESENCE_ZONES_HZ = {
    VocalRange.SOPRANO: (3000.0, 6000.0),
    VocalRange.MEZZO: (2500.0, 5500.0),
    VocalRange.ALTO: (2500.0, 5000.0),
    VocalRange.TENOR: (2000.0, 5000.0),
    VocalRange.BARITONE: (1500.0, 4000.0),
    VocalRange.BASS: (1200.0, 3500.0),
}
_CLOSE_MIC_SPL_DB = {
    VocalRange.SOPRANO: 108.0,
    VocalRange.MEZZO: 106.0,
    VocalRange.ALTO: 104.0,
    VocalRange.TENOR: 106.0,
    VocalRange.BARITONE: 104.0,
    VocalRange.BASS: 102.0,
}


class StyleDynamics(str, Enum):
    """Dynamic character of a vocal style, used to pick compressor behaviour."""

    GENTLE = "gentle"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"


class VocalStyle(str, Enum):
    CONTEMPORARY = "contemporary"
    TRADITIONAL = "traditional"
    GOSPEL = "gospel"
    CHOIR = "choir"
    SPOKEN = "spoken"

    @property
    def dynamic_range_factor(self) -> float:
        return _STYLE_DYNAMIC_RANGE[self]

    @property
    def dynamics(self) -> StyleDynamics:
        factor = self.dynamic_range_factor
        if factor >= 1.2:
            return StyleDynamics.AGGRESSIVE
        if factor >= 0.9:
            return StyleDynamics.MODERATE
        return StyleDynamics.GENTLE

    @property
    def is_aggressive(self) -> bool:
        return self.dynamics is StyleDynamics.AGGRESSIVE


_STYLE_DYNAMIC_RANGE = {
    VocalStyle.CONTEMPORARY: 1.0,
    VocalStyle.TRADITIONAL: 0.8,
    VocalStyle.GOSPEL: 1.4,
    VocalStyle.CHOIR: 0.7,
    VocalStyle.SPOKEN: 0.6,
}


class MicType(str, Enum):
    DYNAMIC = "dynamic"
    CONDENSER_LDC = "condenser-ldc"
    CONDENSER_SDC = "condenser-sdc"
    RIBBON = "ribbon"
    LAVALIER = "lavalier"
    HEADSET = "headset"
    SHOTGUN = "shotgun"

    @property
    def sensitivity_offset_db(self) -> float:
        return _MIC_SENSITIVITY_OFFSET_DB[self]

    @property
    def proximity_factor(self) -> float:
        return _MIC_PROXIMITY_FACTOR[self]

    @property
    def is_dynamic_family(self) -> bool:
        return self in (MicType.DYNAMIC, MicType.RIBBON)


_MIC_SENSITIVITY_OFFSET_DB = {
    MicType.DYNAMIC: 0.0,
    MicType.CONDENSER_LDC: -10.0,
    MicType.CONDENSER_SDC: -12.0,
    MicType.RIBBON: 5.0,
    MicType.LAVALIER: -6.0,
    MicType.HEADSET: -8.0,
    MicType.SHOTGUN: -10.0,
}
_MIC_PROXIMITY_FACTOR = {
    MicType.DYNAMIC: 0.8,
    MicType.CONDENSER_LDC: 0.6,
    MicType.CONDENSER_SDC: 0.3,
    MicType.RIBBON: 0.9,
    MicType.LAVALIER: 0.1,
    MicType.HEADSET: 0.2,
    MicType.SHOTGUN: 0.2,
}

for _table, _enum_cls, _name in (
    (_ROOM_SIZE_RT60, RoomSize, "room size RT60"),
    (_SURFACE_RT60_MULTIPLIER, RoomSurface, "surface RT60 multiplier"),
    (_SURFACE_HF_BIAS_DB, RoomSurface, "surface HF bias"),
    (_DRUM_ISOLATION_DB, DrumConfiguration, "drum isolation"),
    (_DETAIL_RANKS, DetailLevel, "detail ranks"),
    (_INTENSITY_FADER_OFFSET_DB, SongIntensity, "intensity fader offset"),
    (_PRESENCE_ZONES_HZ, VocalRange, "presence zones"),
    (_CLOSE_MIC_SPL_DB, VocalRange, "close-mic SPL"),
    (_STYLE_DYNAMIC_RANGE, VocalStyle, "style dynamic range"),
    (_MIC_SENSITIVITY_OFFSET_DB, MicType, "mic sensitivity"),
    (_MIC_PROXIMITY_FACTOR, MicType, "mic proximity"),
):
    require_complete_table(_table, _enum_cls, _name)


@dataclass(frozen=True, slots=True)
class VocalProfile:
    """Singer or speaker characteristics for a vocal or speech channel."""

    range: VocalRange = VocalRange.TENOR
    style: VocalStyle = VocalStyle.CONTEMPORARY
    mic_type: MicType = MicType.DYNAMIC


def default_vocal_profile(source: InputSource) -> VocalProfile:
    """Profile assumed when a vocal or speech channel arrives without one."""

    mic_type = {
        InputSource.PASTOR_LAPEL: MicType.LAVALIER,
        InputSource.PASTOR_HEADSET: MicType.HEADSET,
        InputSource.CHOIR: MicType.CONDENSER_SDC,
    }.get(source, MicType.DYNAMIC)
    if source.category is InputCategory.SPEECH:
        return VocalProfile(VocalRange.BARITONE, VocalStyle.SPOKEN, mic_type)
    if source is InputSource.CHOIR:
        return VocalProfile(VocalRange.ALTO, VocalStyle.CHOIR, mic_type)
    return VocalProfile(VocalRange.TENOR, VocalStyle.CONTEMPORARY, mic_type)


@dataclass(frozen=True, slots=True)
class InputChannel:
    """One console input as planned for the service."""

    label: str
    source: InputSource
    vocal_profile: VocalProfile | None = None
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class SetlistSong:
    title: str
    key: MusicalKey
    tempo_bpm: int | None = None
    intensity: SongIntensity = SongIntensity.MEDIUM


@dataclass(frozen=True, slots=True)
class Service:
    """Declarative description of one event: console, room, band and set."""

    name: str
    console: MixerModel
    room: Room = field(default_factory=Room)
    band_composition: BandComposition = BandComposition.LIVE
    drum_configuration: DrumConfiguration = DrumConfiguration.OPEN
    channels: tuple[InputChannel, ...] = ()
    setlist: tuple[SetlistSong, ...] = ()
    detail_level: DetailLevel = DetailLevel.DETAILED

    @property
    def console_spec(self) -> ConsoleSpec:
        return self.console.spec

    @property
    def active_channels(self) -> tuple[InputChannel, ...]:
        return tuple(channel for channel in self.channels if channel.is_active)


@dataclass(frozen=True, slots=True)
class SnapshotEqBand:
    frequency_hz: float
    gain_db: float
    q: float | None = None


@dataclass(frozen=True, slots=True)
class SnapshotChannel:
    """One channel strip as read from a console or an exported show file."""

    number: int
    name: str
    gain_db: float | None = None
    fader_db: float | None = None
    hpf_hz: float | None = None
    phantom_power: bool = False
    pad: bool = False
    eq_bands: tuple[SnapshotEqBand, ...] = ()
    comp_threshold_db: float | None = None
    comp_ratio: float | None = None


@dataclass(frozen=True, slots=True)
class MixerSnapshot:
    name: str
    console: MixerModel
    channels: tuple[SnapshotChannel, ...] = ()


class SPLFlaggingMode(str, Enum):
    """How far over the SPL target the room may run before it is flagged."""

    STRICT = "strict"
    BALANCED = "balanced"
    VARIABLE = "variable"

    @property
    def threshold_db(self) -> float:
        return _SPL_MODE_THRESHOLD_DB[self]


_SPL_MODE_THRESHOLD_DB = {SPLFlaggingMode.STRICT: 2.0, SPLFlaggingMode.BALANCED: 5.0, SPLFlaggingMode.VARIABLE: 8.0}
require_complete_table(_SPL_MODE_THRESHOLD_DB, SPLFlaggingMode, "SPL mode thresholds")


@dataclass(frozen=True, slots=True)
class SPLPreference:
    target_db: float = 90.0
    mode: SPLFlaggingMode = SPLFlaggingMode.BALANCED
    calibration_offset_db: float | None = None

    @property
    def flag_level_db(self) -> float:
        return self.target_db + self.mode.threshold_db


ChannelMapping = dict[int, InputSource]
