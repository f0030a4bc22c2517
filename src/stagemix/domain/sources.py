"""Input sources and the per-source property table the engines read from.

Every :class:`InputSource` member must have a :class:`SourceTraits` entry;
the table is checked when the module is imported so a newly added source
without traits fails immediately instead of silently falling through.

Level windows are dB SPL at the capsule for microphones and dBu for line
sources. Frequencies are in Hz.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from stagemix.domain.services import require_complete_table


class InputCategory(str, Enum):
    """Broad family an input source belongs to."""

    VOCALS = "vocals"
    SPEECH = "speech"
    DRUMS = "drums"
    BASS = "bass"
    GUITARS = "guitars"
    KEYS = "keys"
    ORCHESTRAL = "orchestral"
    PLAYBACK = "playback"


class MicKind(str, Enum):
    """Transducer family, which decides how wide a starting gain window is."""

    DYNAMIC = "dynamic"
    CONDENSER = "condenser"
    LINE = "line"


class InputSource(str, Enum):
    """Closed set of sources an input channel can carry."""

    GRAND_PIANO = "grand-piano"
    UPRIGHT_PIANO = "upright-piano"
    DIGITAL_PIANO = "digital-piano"
    SYNTH = "synth"
    ORGAN_ELECTRIC = "organ-electric"
    ORGAN_PIPE = "organ-pipe"
    ACOUSTIC_GUITAR_DI = "acoustic-guitar-di"
    ACOUSTIC_GUITAR_MIC = "acoustic-guitar-mic"
    ELECTRIC_GUITAR_AMP = "electric-guitar-amp"
    ELECTRIC_GUITAR_MODELER = "electric-guitar-modeler"
    BASS_DI = "bass-di"
    BASS_AMP = "bass-amp"
    KICK = "kick"
    SNARE = "snare"
    HI_HAT = "hi-hat"
    TOM_HIGH = "tom-high"
    TOM_MID = "tom-mid"
    TOM_FLOOR = "tom-floor"
    OVERHEAD_LEFT = "overhead-left"
    OVERHEAD_RIGHT = "overhead-right"
    CAJON = "cajon"
    DJEMBE = "djembe"
    PERCUSSION = "percussion"
    ELECTRONIC_DRUMS = "electronic-drums"
    LEAD_VOCAL = "lead-vocal"
    BACKING_VOCAL = "backing-vocal"
    CHOIR = "choir"
    PASTOR_HANDHELD = "pastor-handheld"
    PASTOR_LAPEL = "pastor-lapel"
    PASTOR_HEADSET = "pastor-headset"
    VIOLIN = "violin"
    VIOLA = "viola"
    CELLO = "cello"
    TRUMPET = "trumpet"
    SAXOPHONE = "saxophone"
    FLUTE = "flute"
    TRACKS_LEFT = "tracks-left"
    TRACKS_RIGHT = "tracks-right"
    CLICK_TRACK = "click-track"
    VIDEO_PLAYBACK = "video-playback"

    @property
    def traits(self) -> "SourceTraits":
        return SOURCE_TRAITS[self]

    @property
    def category(self) -> InputCategory:
        return SOURCE_TRAITS[self].category

    @property
    def is_line_level(self) -> bool:
        return SOURCE_TRAITS[self].mic_kind is MicKind.LINE

    @property
    def is_acoustic_drum(self) -> bool:
        return self.category is InputCategory.DRUMS and self is not InputSource.ELECTRONIC_DRUMS

    @property
    def needs_vocal_profile(self) -> bool:
        return self.category in (InputCategory.VOCALS, InputCategory.SPEECH)


@dataclass(frozen=True, slots=True)
class SourceTraits:
    """Static engineering baselines for one input source."""

    display_name: str
    category: InputCategory
    mic_kind: MicKind
    level_range: tuple[float, float]
    base_hpf_hz: float | None
    fader_baseline_db: float | None
    nominal_range_hz: tuple[float, float]
    mud_cut_hz: float | None = None
    presence_boost: tuple[float, float] | None = None
    low_boost: tuple[float, float] | None = None

    @property
    def level_midpoint(self) -> float:
        low, high = self.level_range
        return (low + high) / 2.0


_K = InputCategory
_M = MicKind
_LINE_LEVEL = (-10.0, 4.0)
_DI_LEVEL = (-20.0, 0.0)

SOURCE_TRAITS: dict[InputSource, SourceTraits] = {
    InputSource.GRAND_PIANO: SourceTraits("Grand Piano", _K.KEYS, _M.CONDENSER, (85.0, 100.0), 60.0, -5.0, (60.0, 2000.0), 250.0, (6000.0, 1.5)),
    InputSource.UPRIGHT_PIANO: SourceTraits("Upright Piano", _K.KEYS, _M.CONDENSER, (82.0, 98.0), 60.0, -5.0, (60.0, 2000.0), 250.0, (5000.0, 1.5)),
    InputSource.DIGITAL_PIANO: SourceTraits("Digital Piano", _K.KEYS, _M.LINE, _LINE_LEVEL, 60.0, -5.0, (60.0, 2000.0), 300.0, (4000.0, 1.0)),
    InputSource.SYNTH: SourceTraits("Synth / Pad", _K.KEYS, _M.LINE, _LINE_LEVEL, 50.0, -10.0, (60.0, 4000.0), 300.0),
    InputSource.ORGAN_ELECTRIC: SourceTraits("Organ (Electric)", _K.KEYS, _M.LINE, _LINE_LEVEL, 50.0, -8.0, (50.0, 2000.0), 300.0),
    InputSource.ORGAN_PIPE: SourceTraits("Organ (Pipe)", _K.KEYS, _M.CONDENSER, (80.0, 100.0), None, -8.0, (30.0, 2000.0), 300.0),
    InputSource.ACOUSTIC_GUITAR_DI: SourceTraits("Acoustic Guitar (DI)", _K.GUITARS, _M.LINE, _DI_LEVEL, 80.0, -5.0, (80.0, 1200.0), 200.0, (5000.0, 2.0)),
    InputSource.ACOUSTIC_GUITAR_MIC: SourceTraits("Acoustic Guitar (Mic)", _K.GUITARS, _M.CONDENSER, (80.0, 95.0), 80.0, -5.0, (80.0, 1200.0), 200.0, (5000.0, 2.0)),
    InputSource.ELECTRIC_GUITAR_AMP: SourceTraits("Electric Guitar (Amp)", _K.GUITARS, _M.DYNAMIC, (95.0, 115.0), 80.0, -5.0, (80.0, 1500.0), 400.0, (3000.0, 1.5)),
    InputSource.ELECTRIC_GUITAR_MODELER: SourceTraits("Electric Guitar (Modeler)", _K.GUITARS, _M.LINE, _LINE_LEVEL, 80.0, -5.0, (80.0, 1500.0), 350.0, (3000.0, 1.0)),
    InputSource.BASS_DI: SourceTraits("Bass Guitar (DI)", _K.BASS, _M.LINE, _DI_LEVEL, None, -3.0, (40.0, 400.0), 250.0, (800.0, 1.0), (80.0, 1.5)),
    InputSource.BASS_AMP: SourceTraits("Bass Guitar (Amp)", _K.BASS, _M.DYNAMIC, (95.0, 115.0), None, -3.0, (40.0, 400.0), 250.0, (800.0, 1.0), (80.0, 1.5)),
    InputSource.KICK: SourceTraits("Kick Drum", _K.DRUMS, _M.DYNAMIC, (110.0, 135.0), None, -3.0, (40.0, 120.0), 400.0, (4000.0, 3.0), (70.0, 2.0)),
    InputSource.SNARE: SourceTraits("Snare Drum", _K.DRUMS, _M.DYNAMIC, (110.0, 130.0), 100.0, -5.0, (150.0, 1000.0), 800.0, (5000.0, 2.0), (200.0, 2.0)),
    InputSource.HI_HAT: SourceTraits("Hi-Hat", _K.DRUMS, _M.CONDENSER, (95.0, 115.0), 200.0, -10.0, (3000.0, 12000.0)),
    InputSource.TOM_HIGH: SourceTraits("Tom (High)", _K.DRUMS, _M.DYNAMIC, (105.0, 125.0), 100.0, -8.0, (150.0, 600.0), 400.0, (4000.0, 1.5)),
    InputSource.TOM_MID: SourceTraits("Tom (Mid)", _K.DRUMS, _M.DYNAMIC, (105.0, 125.0), 80.0, -8.0, (100.0, 500.0), 400.0, (4000.0, 1.5)),
    InputSource.TOM_FLOOR: SourceTraits("Tom (Floor)", _K.DRUMS, _M.DYNAMIC, (105.0, 125.0), 60.0, -8.0, (70.0, 300.0), 350.0, (4000.0, 1.5)),
    InputSource.OVERHEAD_LEFT: SourceTraits("Overhead L", _K.DRUMS, _M.CONDENSER, (95.0, 115.0), 100.0, -10.0, (200.0, 12000.0), 400.0),
    InputSource.OVERHEAD_RIGHT: SourceTraits("Overhead R", _K.DRUMS, _M.CONDENSER, (95.0, 115.0), 100.0, -10.0, (200.0, 12000.0), 400.0),
    InputSource.CAJON: SourceTraits("Cajon", _K.DRUMS, _M.DYNAMIC, (100.0, 120.0), 60.0, -5.0, (60.0, 800.0), 500.0, (3500.0, 2.0), (100.0, 2.0)),
    InputSource.DJEMBE: SourceTraits("Djembe", _K.DRUMS, _M.DYNAMIC, (100.0, 120.0), 70.0, -6.0, (70.0, 800.0), 450.0, (3000.0, 1.5)),
    InputSource.PERCUSSION: SourceTraits("Percussion", _K.DRUMS, _M.CONDENSER, (90.0, 110.0), 150.0, -8.0, (300.0, 8000.0)),
    InputSource.ELECTRONIC_DRUMS: SourceTraits("Electronic Drums", _K.DRUMS, _M.LINE, _LINE_LEVEL, None, -5.0, (40.0, 8000.0)),
    InputSource.LEAD_VOCAL: SourceTraits("Lead Vocal", _K.VOCALS, _M.DYNAMIC, (85.0, 105.0), 100.0, 0.0, (100.0, 1000.0), 300.0),
    InputSource.BACKING_VOCAL: SourceTraits("Backing Vocal", _K.VOCALS, _M.DYNAMIC, (80.0, 100.0), 120.0, -5.0, (100.0, 1000.0), 300.0),
    InputSource.CHOIR: SourceTraits("Choir", _K.VOCALS, _M.CONDENSER, (70.0, 90.0), 120.0, -6.0, (130.0, 1000.0), 300.0),
    InputSource.PASTOR_HANDHELD: SourceTraits("Pastor (Handheld)", _K.SPEECH, _M.DYNAMIC, (80.0, 100.0), 100.0, 0.0, (100.0, 800.0), 250.0),
    InputSource.PASTOR_LAPEL: SourceTraits("Pastor (Lapel)", _K.SPEECH, _M.CONDENSER, (65.0, 85.0), 120.0, 0.0, (100.0, 800.0), 250.0),
    InputSource.PASTOR_HEADSET: SourceTraits("Pastor (Headset)", _K.SPEECH, _M.CONDENSER, (75.0, 95.0), 120.0, 0.0, (100.0, 800.0), 250.0),
    InputSource.VIOLIN: SourceTraits("Violin", _K.ORCHESTRAL, _M.CONDENSER, (80.0, 100.0), 150.0, -6.0, (196.0, 3500.0), 350.0, (3000.0, 1.0)),
    InputSource.VIOLA: SourceTraits("Viola", _K.ORCHESTRAL, _M.CONDENSER, (80.0, 100.0), 150.0, -6.0, (130.0, 2500.0), 350.0),
    InputSource.CELLO: SourceTraits("Cello", _K.ORCHESTRAL, _M.CONDENSER, (80.0, 100.0), 50.0, -6.0, (65.0, 1000.0), 300.0),
    InputSource.TRUMPET: SourceTraits("Trumpet", _K.ORCHESTRAL, _M.DYNAMIC, (95.0, 115.0), 120.0, -6.0, (165.0, 1000.0), 350.0),
    InputSource.SAXOPHONE: SourceTraits("Saxophone", _K.ORCHESTRAL, _M.DYNAMIC, (90.0, 110.0), 100.0, -6.0, (100.0, 900.0), 350.0),
    InputSource.FLUTE: SourceTraits("Flute", _K.ORCHESTRAL, _M.CONDENSER, (80.0, 100.0), 200.0, -8.0, (260.0, 2100.0)),
    InputSource.TRACKS_LEFT: SourceTraits("Tracks L", _K.PLAYBACK, _M.LINE, _LINE_LEVEL, None, -8.0, (30.0, 16000.0)),
    InputSource.TRACKS_RIGHT: SourceTraits("Tracks R", _K.PLAYBACK, _M.LINE, _LINE_LEVEL, None, -8.0, (30.0, 16000.0)),
    # A click never reaches the house mix, so its fader starts closed.
    InputSource.CLICK_TRACK: SourceTraits("Click Track", _K.PLAYBACK, _M.LINE, _LINE_LEVEL, None, None, (1000.0, 4000.0)),
    InputSource.VIDEO_PLAYBACK: SourceTraits("Video Playback", _K.PLAYBACK, _M.LINE, _LINE_LEVEL, None, -8.0, (60.0, 12000.0)),
}

require_complete_table(SOURCE_TRAITS, InputSource, "SOURCE_TRAITS")
