"""Shared option enums and parsing helpers for the CLI and API."""

from __future__ import annotations

from enum import Enum
from typing import TypeVar


class SnapshotFormat(str, Enum):
    """File formats accepted when importing a mixer snapshot."""

    CSV = "csv"
    JSON = "json"


class ReportFormat(str, Enum):
    """How command results are rendered."""

    TEXT = "text"
    JSON = "json"


EnumT = TypeVar("EnumT", bound=Enum)


def enum_values(enum_cls: type[EnumT]) -> tuple[str, ...]:
    """Return enum values for UI/API hinting in declaration order."""

    return tuple(str(member.value) for member in enum_cls)


def parse_case_insensitive_enum(raw_value: str, enum_cls: type[EnumT]) -> EnumT:
    """Parse enum values case-insensitively and raise ValueError with allowed values."""

    normalized = raw_value.strip().lower()
    for member in enum_cls:
        if str(member.value).lower() == normalized:
            return member

    allowed = ", ".join(enum_values(enum_cls))
    enum_name = enum_cls.__name__
    raise ValueError(f"Invalid {enum_name}: '{raw_value}'. Allowed values: {allowed}.")


def snapshot_format_for_suffix(suffix: str) -> SnapshotFormat:
    """Map a file suffix such as ``.csv`` onto a snapshot format."""

    return parse_case_insensitive_enum(suffix.lstrip("."), SnapshotFormat)
