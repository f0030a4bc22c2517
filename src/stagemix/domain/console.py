"""Console models and their capability descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from stagemix.domain.services import require_complete_table


class MixerModel(str, Enum):
    """Supported digital mixing consoles."""

    AVANTIS = "avantis"
    SQ = "sq"
    DLIVE = "dlive"
    X32 = "x32"
    M32 = "m32"
    YAMAHA_TF = "yamaha-tf"
    YAMAHA_CL = "yamaha-cl"
    SOUNDCRAFT_SI = "soundcraft-si"
    PRESONUS_SL = "presonus-sl"

    @property
    def spec(self) -> "ConsoleSpec":
        return CONSOLE_SPECS[self]


@dataclass(frozen=True, slots=True)
class ConsoleSpec:
    """Capability descriptor for a console's input channel strip."""

    display_name: str
    short_name: str
    gain_range_db: tuple[float, float]
    fader_range_db: tuple[float, float]
    eq_band_count: int
    reference_gain_at_94_spl_db: float

    @property
    def max_gain_db(self) -> float:
        return self.gain_range_db[1]

    @property
    def min_gain_db(self) -> float:
        return self.gain_range_db[0]

    def is_compatible_with(self, other: "ConsoleSpec") -> bool:
        """Two consoles stage gain identically when preamp range and calibration match."""

        return (
            self.gain_range_db == other.gain_range_db
            and self.reference_gain_at_94_spl_db == other.reference_gain_at_94_spl_db
        )


_STANDARD_FADER_RANGE_DB = (-120.0, 10.0)
_YAMAHA_FADER_RANGE_DB = (-138.0, 10.0)

CONSOLE_SPECS: dict[MixerModel, ConsoleSpec] = {
    MixerModel.AVANTIS: ConsoleSpec("Allen & Heath Avantis", "Avantis", (5.0, 60.0), _STANDARD_FADER_RANGE_DB, 4, 22.0),
    MixerModel.SQ: ConsoleSpec("Allen & Heath SQ", "SQ", (0.0, 60.0), _STANDARD_FADER_RANGE_DB, 4, 22.0),
    MixerModel.DLIVE: ConsoleSpec("Allen & Heath dLive", "dLive", (0.0, 60.0), _STANDARD_FADER_RANGE_DB, 8, 22.0),
    MixerModel.X32: ConsoleSpec("Behringer X32", "X32", (0.0, 60.0), _STANDARD_FADER_RANGE_DB, 6, 28.0),
    MixerModel.M32: ConsoleSpec("Midas M32", "M32", (0.0, 60.0), _STANDARD_FADER_RANGE_DB, 6, 28.0),
    MixerModel.YAMAHA_TF: ConsoleSpec("Yamaha TF Series", "TF", (-6.0, 66.0), _YAMAHA_FADER_RANGE_DB, 4, 32.0),
    MixerModel.YAMAHA_CL: ConsoleSpec("Yamaha CL/QL Series", "CL/QL", (-6.0, 66.0), _YAMAHA_FADER_RANGE_DB, 4, 32.0),
    MixerModel.SOUNDCRAFT_SI: ConsoleSpec("Soundcraft Si Series", "Si", (-5.0, 58.0), _STANDARD_FADER_RANGE_DB, 4, 30.0),
    MixerModel.PRESONUS_SL: ConsoleSpec("PreSonus StudioLive", "StudioLive", (0.0, 60.0), _STANDARD_FADER_RANGE_DB, 6, 30.0),
}

require_complete_table(CONSOLE_SPECS, MixerModel, "CONSOLE_SPECS")
