"""Pydantic documents accepted by the CLI and API, and their domain conversions."""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from stagemix.domain.console import MixerModel
from stagemix.domain.models import (
    BandComposition,
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
    VocalProfile,
    VocalRange,
    VocalStyle,
)
from stagemix.domain.sources import InputSource
from stagemix.options import parse_case_insensitive_enum


def _enum_or_raw(value: Any, enum_cls: type[Enum]) -> Any:
    if isinstance(value, str) and not isinstance(value, enum_cls):
        return parse_case_insensitive_enum(value, enum_cls)
    return value


class VocalProfileDocument(BaseModel):
    range: VocalRange = VocalRange.TENOR
    style: VocalStyle = VocalStyle.CONTEMPORARY
    mic_type: MicType = MicType.DYNAMIC

    @field_validator("range", "style", "mic_type", mode="before")
    @classmethod
    def _parse_enums(cls, value: Any, info: ValidationInfo) -> Any:
        enum_cls = {"range": VocalRange, "style": VocalStyle, "mic_type": MicType}[info.field_name]
        return _enum_or_raw(value, enum_cls)

    def to_domain(self) -> VocalProfile:
        return VocalProfile(range=self.range, style=self.style, mic_type=self.mic_type)


class ChannelDocument(BaseModel):
    label: str = Field(..., min_length=1)
    source: InputSource
    vocal_profile: VocalProfileDocument | None = None
    active: bool = True

    @field_validator("source", mode="before")
    @classmethod
    def _parse_source(cls, value: Any) -> Any:
        return _enum_or_raw(value, InputSource)

    def to_domain(self) -> InputChannel:
        return InputChannel(
            label=self.label,
            source=self.source,
            vocal_profile=self.vocal_profile.to_domain() if self.vocal_profile else None,
            is_active=self.active,
        )


class SongDocument(BaseModel):
    title: str = Field(..., min_length=1)
    key: MusicalKey
    tempo_bpm: int | None = Field(None, gt=0, le=400)
    intensity: SongIntensity = SongIntensity.MEDIUM

    @field_validator("key", "intensity", mode="before")
    @classmethod
    def _parse_enums(cls, value: Any, info: ValidationInfo) -> Any:
        enum_cls = {"key": MusicalKey, "intensity": SongIntensity}[info.field_name]
        return _enum_or_raw(value, enum_cls)

    def to_domain(self) -> SetlistSong:
        return SetlistSong(title=self.title, key=self.key, tempo_bpm=self.tempo_bpm, intensity=self.intensity)


class RoomDocument(BaseModel):
    size: RoomSize = RoomSize.MEDIUM
    surface: RoomSurface = RoomSurface.MIXED

    @field_validator("size", "surface", mode="before")
    @classmethod
    def _parse_enums(cls, value: Any, info: ValidationInfo) -> Any:
        enum_cls = {"size": RoomSize, "surface": RoomSurface}[info.field_name]
        return _enum_or_raw(value, enum_cls)


class ServiceDocument(BaseModel):
    name: str = "Service"
    console: MixerModel
    room: RoomDocument = Field(default_factory=RoomDocument)
    band_composition: BandComposition = BandComposition.LIVE
    drum_configuration: DrumConfiguration = DrumConfiguration.OPEN
    detail_level: DetailLevel = DetailLevel.DETAILED
    channels: list[ChannelDocument] = Field(default_factory=list)
    setlist: list[SongDocument] = Field(default_factory=list)

    @field_validator("console", "band_composition", "drum_configuration", "detail_level", mode="before")
    @classmethod
    def _parse_enums(cls, value: Any, info: ValidationInfo) -> Any:
        enum_cls = {
            "console": MixerModel,
            "band_composition": BandComposition,
            "drum_configuration": DrumConfiguration,
            "detail_level": DetailLevel,
        }[info.field_name]
        return _enum_or_raw(value, enum_cls)

    def to_domain(self) -> Service:
        return Service(
            name=self.name,
            console=self.console,
            room=Room(size=self.room.size, surface=self.room.surface),
            band_composition=self.band_composition,
            drum_configuration=self.drum_configuration,
            channels=tuple(channel.to_domain() for channel in self.channels),
            setlist=tuple(song.to_domain() for song in self.setlist),
            detail_level=self.detail_level,
        )


class SnapshotEqBandDocument(BaseModel):
    frequency_hz: float = Field(..., gt=0.0)
    gain_db: float
    q: float | None = Field(None, gt=0.0)


class SnapshotChannelDocument(BaseModel):
    number: int = Field(..., ge=0)
    name: str = ""
    gain_db: float | None = None
    fader_db: float | None = None
    hpf_hz: float | None = None
    phantom_power: bool = False
    pad: bool = False
    eq_bands: list[SnapshotEqBandDocument] = Field(default_factory=list)
    comp_threshold_db: float | None = None
    comp_ratio: float | None = None

    def to_domain(self) -> SnapshotChannel:
        return SnapshotChannel(
            number=self.number,
            name=self.name,
            gain_db=self.gain_db,
            fader_db=self.fader_db,
            hpf_hz=self.hpf_hz,
            phantom_power=self.phantom_power,
            pad=self.pad,
            eq_bands=tuple(SnapshotEqBand(band.frequency_hz, band.gain_db, band.q) for band in self.eq_bands),
            comp_threshold_db=self.comp_threshold_db,
            comp_ratio=self.comp_ratio,
        )


class SnapshotDocument(BaseModel):
    name: str = "Snapshot"
    console: MixerModel
    channels: list[SnapshotChannelDocument] = Field(default_factory=list)

    @field_validator("console", mode="before")
    @classmethod
    def _parse_console(cls, value: Any) -> Any:
        return _enum_or_raw(value, MixerModel)

    def to_domain(self) -> MixerSnapshot:
        return MixerSnapshot(
            name=self.name,
            console=self.console,
            channels=tuple(channel.to_domain() for channel in self.channels),
        )


class SPLPreferenceDocument(BaseModel):
    target_db: float = Field(90.0, ge=60.0, le=120.0)
    mode: SPLFlaggingMode = SPLFlaggingMode.BALANCED
    calibration_offset_db: float | None = None

    @field_validator("mode", mode="before")
    @classmethod
    def _parse_mode(cls, value: Any) -> Any:
        return _enum_or_raw(value, SPLFlaggingMode)

    def to_domain(self) -> SPLPreference:
        return SPLPreference(
            target_db=self.target_db,
            mode=self.mode,
            calibration_offset_db=self.calibration_offset_db,
        )


class AnalyzeRequest(BaseModel):
    service: ServiceDocument
    snapshot: SnapshotDocument
    channel_mapping: dict[int, InputSource] = Field(default_factory=dict)
    spl_preference: SPLPreferenceDocument | None = None

    @field_validator("channel_mapping", mode="before")
    @classmethod
    def _parse_mapping(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {number: _enum_or_raw(source, InputSource) for number, source in value.items()}


def to_payload(result: Any) -> dict[str, Any]:
    """Plain-dict view of an engine result suitable for JSON encoding."""

    if not is_dataclass(result):
        raise TypeError(f"Expected a dataclass result, got {type(result).__name__}.")
    return _plain(asdict(result))


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {_plain(key): _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value
