"""Plain-language advisories attached to channels and to the whole service."""

from __future__ import annotations

from stagemix.domain.models import (
    BandComposition,
    DetailLevel,
    DrumConfiguration,
    InputChannel,
    MicType,
    RoomSize,
    Service,
    SongIntensity,
    VocalProfile,
    VocalStyle,
)
from stagemix.domain.services import require_complete_table
from stagemix.domain.sources import InputCategory, InputSource

RT60_NOTE_THRESHOLD_SECONDS: dict[RoomSize, float] = {
    RoomSize.SMALL: 1.0,
    RoomSize.MEDIUM: 1.6,
    RoomSize.LARGE: 2.2,
}
COMFORTABLE_CHANNEL_COUNT: dict[RoomSize, int] = {
    RoomSize.SMALL: 16,
    RoomSize.MEDIUM: 32,
    RoomSize.LARGE: 64,
}
ENERGY_BUILD_MIN_SONGS = 3

require_complete_table(RT60_NOTE_THRESHOLD_SECONDS, RoomSize, "RT60_NOTE_THRESHOLD_SECONDS")
require_complete_table(COMFORTABLE_CHANNEL_COUNT, RoomSize, "COMFORTABLE_CHANNEL_COUNT")


def channel_notes(
    channel: InputChannel,
    profile: VocalProfile | None,
    profile_defaulted: bool,
    service: Service,
) -> tuple[str, ...]:
    source = channel.source
    notes: list[str] = []

    if profile_defaulted and profile is not None:
        notes.append(
            f"No vocal profile was given; assumed a {profile.range.value} {profile.style.value} voice on a {profile.mic_type.value} mic."
        )
    if source.is_acoustic_drum:
        if service.drum_configuration is DrumConfiguration.OPEN:
            notes.append("Open drum stage: expect kit bleed into nearby vocal mics.")
        elif service.drum_configuration is DrumConfiguration.SHIELD and source in (
            InputSource.OVERHEAD_LEFT,
            InputSource.OVERHEAD_RIGHT,
        ):
            notes.append("Shield reflections can make overheads harsh; angle them away from the panels.")
    if service.room.has_low_end_problem and source in (InputSource.KICK, InputSource.BASS_DI, InputSource.BASS_AMP):
        notes.append("This room builds up low end; keep low boosts modest and trust the HPF on other channels.")
    if source.is_line_level and service.detail_level is DetailLevel.ESSENTIALS and source.category is not InputCategory.PLAYBACK:
        notes.append("Line/DI source: set gain so the loudest passage peaks around -18 dBFS, not by ear.")
    if profile is not None and profile.style is VocalStyle.GOSPEL:
        notes.append("Gospel dynamics swing wide; ride this fader through the builds.")
    if profile is not None and profile.mic_type is MicType.LAVALIER:
        notes.append("Lavalier: check clip placement for clothing rustle before the service.")
    if source is InputSource.CLICK_TRACK:
        notes.append("Click track: route to in-ear monitors only, never to the main mix.")
    return tuple(notes)


def service_notes(service: Service) -> tuple[str, ...]:
    notes: list[str] = []
    room = service.room
    active = service.active_channels

    threshold = RT60_NOTE_THRESHOLD_SECONDS[room.size]
    if room.rt60_seconds > threshold:
        notes.append(
            f"Estimated RT60 of {room.rt60_seconds:.1f}s is long for a {room.size.value} room; "
            "expect smeared low end and keep stage volume down."
        )

    has_acoustic_drums = any(channel.source.is_acoustic_drum for channel in active)
    if room.size is RoomSize.SMALL and service.drum_configuration is DrumConfiguration.OPEN and has_acoustic_drums:
        notes.append(
            "A full acoustic kit on an open stage will overpower a small room; "
            "consider a drum shield or an electronic kit to reduce stage volume."
        )

    limit = COMFORTABLE_CHANNEL_COUNT[room.size]
    if len(active) > limit:
        notes.append(
            f"{len(active)} active inputs is a lot for a {room.size.value} room; "
            "consider combining or muting channels that do not carry the song."
        )

    songs = service.setlist
    if len(songs) > 1 and len({song.key for song in songs}) == 1:
        notes.append(
            f"Every song is in {songs[0].key.value}; the same low-frequency build-up will repeat all set, "
            "so carve the key-specific EQ once and leave it."
        )
    if len(songs) >= ENERGY_BUILD_MIN_SONGS and songs[-1].intensity in (SongIntensity.DRIVING, SongIntensity.ALL_OUT):
        notes.append("The set builds to a high-energy finish; leave fader headroom for the last songs.")
    if service.band_composition is BandComposition.HYBRID and any(
        channel.source.category is InputCategory.PLAYBACK for channel in active
    ):
        notes.append("Hybrid band: check tracks and live players are time-aligned before doors open.")
    return tuple(notes)
