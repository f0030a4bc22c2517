"""Mixer snapshot import from console show-file exports.

The CSV reader understands the sectioned export written by console editor
software: free-form preamble lines, then a ``[Channels]`` section whose first
non-empty row is a header. Header names vary between firmware versions, so
columns are matched against a set of aliases after stripping punctuation and
case ("HPF Freq", "hpf_freq" and "HPF (Hz)" all land on the same column).
Cells that cannot be parsed are treated as missing readings.
"""

from __future__ import annotations

import csv
import io
import json
import re
from dataclasses import dataclass
from pathlib import Path

from stagemix.domain.console import MixerModel
from stagemix.domain.models import MixerSnapshot, SnapshotChannel, SnapshotEqBand
from stagemix.domain.services import is_finite_reading
from stagemix.options import SnapshotFormat, snapshot_format_for_suffix

CHANNELS_SECTION = "[channels]"
MAX_EQ_BANDS = 8

_TRUE_VALUES = {"on", "1", "true", "yes", "y", "in"}

_COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "number": ("ch", "chno", "channel", "chan", "no", "number"),
    "name": ("name", "label", "channelname"),
    "gain": ("gain", "preampgain", "inputgain", "gaindb"),
    "fader": ("fader", "level", "faderdb", "faderlevel"),
    "hpf_hz": ("hpf", "hpffreq", "hpffrequency", "hpfhz", "highpass", "hpffreqhz"),
    "hpf_on": ("hpfon", "hpfin", "hpfenabled", "hpfactive"),
    "phantom": ("48v", "phantom", "phantompower"),
    "pad": ("pad",),
    "comp_threshold": ("compthr", "compthreshold", "compressorthreshold", "compthresh"),
    "comp_ratio": ("compratio", "compressorratio", "ratio"),
}


@dataclass(frozen=True, slots=True)
class SnapshotImportError(ValueError):
    code: str
    message: str

    def __str__(self) -> str:
        return self.message

    def as_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


def _normalize_header(raw: str) -> str:
    return re.sub(r"[^a-z0-9]", "", raw.strip().lower().replace("#", "no"))


def _column_index(headers: list[str]) -> dict[str, int]:
    normalized = [_normalize_header(header) for header in headers]
    columns: dict[str, int] = {}
    for field_name, aliases in _COLUMN_ALIASES.items():
        for position, header in enumerate(normalized):
            if header in aliases:
                columns[field_name] = position
                break
    for band in range(1, MAX_EQ_BANDS + 1):
        for suffix, field_suffix in (("freq", "freq"), ("frequency", "freq"), ("hz", "freq"), ("gain", "gain"), ("q", "q")):
            key = f"eq{band}_{field_suffix}"
            if key in columns:
                continue
            target = f"eq{band}{suffix}"
            if target in normalized:
                columns[key] = normalized.index(target)
    return columns


def parse_number(raw: str | None) -> float | None:
    """Parse console-formatted numbers such as ``"-5.5 dB"``, ``"1.2k"`` or ``"120Hz"``."""

    if raw is None:
        return None
    text = raw.strip().lower()
    if not text or text in {"-", "off", "-inf", "inf", "n/a"}:
        return None
    multiplier = 1.0
    text = re.sub(r"\s*(db|dbu|hz|ms|:1)$", "", text)
    if text.endswith("khz"):
        text, multiplier = text[:-3], 1000.0
    elif text.endswith("k"):
        text, multiplier = text[:-1], 1000.0
    try:
        value = float(text) * multiplier
    except ValueError:
        return None
    return value if is_finite_reading(value) else None


def parse_flag(raw: str | None) -> bool:
    return raw is not None and raw.strip().lower() in _TRUE_VALUES


def _cell(row: list[str], columns: dict[str, int], field_name: str) -> str | None:
    position = columns.get(field_name)
    if position is None or position >= len(row):
        return None
    return row[position]


def _channel_from_row(row: list[str], columns: dict[str, int], fallback_number: int) -> SnapshotChannel:
    number = parse_number(_cell(row, columns, "number"))
    hpf_hz = parse_number(_cell(row, columns, "hpf_hz"))
    if "hpf_on" in columns and not parse_flag(_cell(row, columns, "hpf_on")):
        hpf_hz = None

    eq_bands: list[SnapshotEqBand] = []
    for band in range(1, MAX_EQ_BANDS + 1):
        frequency = parse_number(_cell(row, columns, f"eq{band}_freq"))
        gain = parse_number(_cell(row, columns, f"eq{band}_gain"))
        if frequency is None or gain is None:
            continue
        eq_bands.append(SnapshotEqBand(frequency, gain, parse_number(_cell(row, columns, f"eq{band}_q"))))

    return SnapshotChannel(
        number=int(number) if number is not None else fallback_number,
        name=(_cell(row, columns, "name") or "").strip(),
        gain_db=parse_number(_cell(row, columns, "gain")),
        fader_db=parse_number(_cell(row, columns, "fader")),
        hpf_hz=hpf_hz,
        phantom_power=parse_flag(_cell(row, columns, "phantom")),
        pad=parse_flag(_cell(row, columns, "pad")),
        eq_bands=tuple(eq_bands),
        comp_threshold_db=parse_number(_cell(row, columns, "comp_threshold")),
        comp_ratio=parse_number(_cell(row, columns, "comp_ratio")),
    )


def parse_snapshot_csv(text: str, console: MixerModel, name: str = "Imported snapshot") -> MixerSnapshot:
    """Parse a sectioned console CSV export into a snapshot."""

    if not text.strip():
        raise SnapshotImportError("empty_file", "Snapshot file is empty.")

    lines = text.lstrip("\ufeff").splitlines()
    start = next(
        (position for position, line in enumerate(lines) if line.strip().lower().strip(",") == CHANNELS_SECTION),
        None,
    )
    if start is None:
        raise SnapshotImportError("no_channels_section", "Snapshot file has no [Channels] section.")

    section: list[str] = []
    for line in lines[start + 1 :]:
        if line.strip().startswith("["):
            break
        section.append(line)

    rows = [row for row in csv.reader(io.StringIO("\n".join(section))) if any(cell.strip() for cell in row)]
    if not rows:
        raise SnapshotImportError("no_header_row", "The [Channels] section has no header row.")

    columns = _column_index(rows[0])
    if "name" not in columns:
        raise SnapshotImportError("no_header_row", "The [Channels] header row has no channel name column.")

    channels = tuple(_channel_from_row(row, columns, position) for position, row in enumerate(rows[1:], start=1))
    return MixerSnapshot(name=name, console=console, channels=channels)


def parse_snapshot_json(text: str, console: MixerModel | None = None, name: str | None = None) -> MixerSnapshot:
    """Parse a JSON snapshot document; ``console``/``name`` fill in missing fields."""

    from stagemix.interfaces.schemas import SnapshotDocument

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SnapshotImportError("invalid_json", f"Snapshot JSON is malformed: {exc.msg}.") from exc
    if not isinstance(payload, dict):
        raise SnapshotImportError("invalid_json", "Snapshot JSON must be an object.")
    if console is not None:
        payload.setdefault("console", console.value)
    if name is not None:
        payload.setdefault("name", name)
    try:
        document = SnapshotDocument.model_validate(payload)
    except ValueError as exc:
        raise SnapshotImportError("invalid_snapshot", str(exc)) from exc
    return document.to_domain()


def load_snapshot(path: Path, console: MixerModel | None = None) -> MixerSnapshot:
    """Read a snapshot file, choosing the parser from its suffix."""

    try:
        snapshot_format = snapshot_format_for_suffix(path.suffix)
    except ValueError as exc:
        raise SnapshotImportError("unsupported_format", f"Unsupported snapshot file: {path.name}.") from exc
    if not path.exists() or not path.is_file():
        raise SnapshotImportError("file_not_found", f"Snapshot file not found: {path}")

    text = path.read_text(encoding="utf-8-sig")
    if snapshot_format is SnapshotFormat.JSON:
        return parse_snapshot_json(text, console=console, name=path.stem)
    if console is None:
        raise SnapshotImportError("console_required", "A console model is required to import a CSV snapshot.")
    return parse_snapshot_csv(text, console, name=path.stem)
