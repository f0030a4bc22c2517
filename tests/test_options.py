import pytest

from stagemix.domain.console import MixerModel
from stagemix.options import (
    ReportFormat,
    SnapshotFormat,
    enum_values,
    parse_case_insensitive_enum,
    snapshot_format_for_suffix,
)


def test_parse_case_insensitive_enum_accepts_uppercase() -> None:
    parsed = parse_case_insensitive_enum("YAMAHA-CL", MixerModel)
    assert parsed is MixerModel.YAMAHA_CL


def test_parse_case_insensitive_enum_rejects_unknown_value() -> None:
    try:
        parse_case_insensitive_enum("mackie", MixerModel)
    except ValueError as error:
        assert "Allowed values" in str(error)
        assert "avantis" in str(error)
    else:
        raise AssertionError("Expected ValueError for unknown enum value")


def test_enum_values_match_expected_order() -> None:
    assert enum_values(ReportFormat) == ("text", "json")
    assert enum_values(SnapshotFormat) == ("csv", "json")


def test_snapshot_format_for_suffix() -> None:
    assert snapshot_format_for_suffix(".CSV") is SnapshotFormat.CSV
    assert snapshot_format_for_suffix("json") is SnapshotFormat.JSON
    with pytest.raises(ValueError):
        snapshot_format_for_suffix(".scn")
