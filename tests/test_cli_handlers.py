from pathlib import Path
import json

import pytest

from stagemix.domain.models import DetailLevel
from stagemix.domain.results import AnalysisGrade
from stagemix.domain.sources import InputSource
from stagemix.interfaces import cli_handlers

SERVICE = {
    "name": "Sunday AM",
    "console": "sq",
    "detail_level": "detailed",
    "channels": [
        {"label": "Kick", "source": "kick"},
        {"label": "Lead Vocal", "source": "lead-vocal"},
    ],
    "setlist": [{"title": "Opener", "key": "G"}],
}


def _write(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    return path


def test_parse_channel_mapping() -> None:
    mapping = cli_handlers.parse_channel_mapping(["3=snare", " 12 = Lead-Vocal "])

    assert mapping == {3: InputSource.SNARE, 12: InputSource.LEAD_VOCAL}


@pytest.mark.parametrize("entry", ["snare", "x=snare", "3=cowbell"])
def test_parse_channel_mapping_rejects_malformed_entries(entry: str) -> None:
    with pytest.raises(ValueError):
        cli_handlers.parse_channel_mapping([entry])


def test_load_service_applies_detail_override(tmp_path: Path) -> None:
    path = _write(tmp_path / "service.json", json.dumps(SERVICE))

    service = cli_handlers.load_service(path, detail_level=DetailLevel.ESSENTIALS)

    assert service.detail_level is DetailLevel.ESSENTIALS
    assert [channel.label for channel in service.channels] == ["Kick", "Lead Vocal"]


def test_recommend_from_path_writes_report_json(tmp_path: Path) -> None:
    service_path = _write(tmp_path / "service.json", json.dumps(SERVICE))
    config_path = _write(tmp_path / "engine.yaml", "tuning_profile: conservative\n")
    report_path = tmp_path / "reports" / "recommendation.json"

    recommendation = cli_handlers.recommend_from_path(
        service_path,
        config_path=config_path,
        report_json=report_path,
        correlation_id="cid-1",
    )

    payload = json.loads(report_path.read_text())
    assert len(payload["channels"]) == len(recommendation.channels) == 2
    assert payload["service"]["name"] == "Sunday AM"
    lines = cli_handlers.format_recommendation(recommendation)
    assert lines[0].startswith("Kick: gain ")
    assert any(line.startswith("  EQ ") for line in lines)


def test_analyze_from_paths_grades_csv_snapshot(tmp_path: Path) -> None:
    service_path = _write(tmp_path / "service.json", json.dumps(SERVICE))
    snapshot_path = _write(
        tmp_path / "soundcheck.csv",
        "Show,Sunday\n[Channels]\nCh,Name,Gain,Fader\n1,Kick,40,0\n2,Ch 2,16,0\n3,Spare,10,0\n",
    )
    report_path = tmp_path / "analysis.json"

    analysis = cli_handlers.analyze_from_paths(
        service_path,
        snapshot_path,
        mapping_entries=["2=lead-vocal"],
        calibration_offset_db=100.0,
        report_json=report_path,
        correlation_id="cid-2",
    )

    assert analysis.snapshot_name == "soundcheck"
    assert [delta.source for delta in analysis.deltas] == [InputSource.KICK, InputSource.LEAD_VOCAL]
    assert [channel.name for channel in analysis.unmapped] == ["Spare"]
    assert analysis.grade is not AnalysisGrade.CLEAN
    assert analysis.spl_estimate is not None
    assert json.loads(report_path.read_text())["snapshot_name"] == "soundcheck"

    lines = cli_handlers.format_analysis(analysis)
    assert lines[0].startswith(f"soundcheck: {analysis.grade.label} (")
    assert any("unmapped (unrecognized-name)" in line for line in lines)
    assert any(line.startswith("Estimated level") for line in lines)


def test_infer_labels_keeps_input_order() -> None:
    assert cli_handlers.infer_labels(["BV 1", "Spare"]) == [("BV 1", InputSource.BACKING_VOCAL), ("Spare", None)]
