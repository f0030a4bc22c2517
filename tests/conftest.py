import pytest

from stagemix.domain.console import MixerModel
from stagemix.domain.models import (
    DetailLevel,
    InputChannel,
    MicType,
    MusicalKey,
    Room,
    RoomSize,
    RoomSurface,
    Service,
    SetlistSong,
    SongIntensity,
    VocalProfile,
    VocalRange,
    VocalStyle,
)
from stagemix.domain.sources import InputSource


@pytest.fixture
def band_channels():
    return (
        InputChannel("Kick", InputSource.KICK),
        InputChannel("Snare", InputSource.SNARE),
        InputChannel("OH L", InputSource.OVERHEAD_LEFT),
        InputChannel("Bass", InputSource.BASS_DI),
        InputChannel("Keys", InputSource.DIGITAL_PIANO),
        InputChannel("Acoustic", InputSource.ACOUSTIC_GUITAR_DI),
        InputChannel(
            "Lead Vocal",
            InputSource.LEAD_VOCAL,
            VocalProfile(VocalRange.TENOR, VocalStyle.CONTEMPORARY, MicType.DYNAMIC),
        ),
        InputChannel("BV 1", InputSource.BACKING_VOCAL),
        InputChannel("Pastor", InputSource.PASTOR_HANDHELD),
        InputChannel("Click", InputSource.CLICK_TRACK),
    )


@pytest.fixture
def setlist():
    return (
        SetlistSong("Opener", MusicalKey.G, 128, SongIntensity.DRIVING),
        SetlistSong("Reflection", MusicalKey.D, 72, SongIntensity.SOFT),
        SetlistSong("Closer", MusicalKey.A, 140, SongIntensity.ALL_OUT),
    )


@pytest.fixture
def make_service(band_channels, setlist):
    def _make(**overrides) -> Service:
        values = {
            "name": "Sunday AM",
            "console": MixerModel.X32,
            "room": Room(RoomSize.MEDIUM, RoomSurface.MIXED),
            "channels": band_channels,
            "setlist": setlist,
            "detail_level": DetailLevel.FULL,
        }
        values.update(overrides)
        return Service(**values)

    return _make


@pytest.fixture
def service(make_service) -> Service:
    return make_service()
