from fastapi.testclient import TestClient

from stagemix.api import app


client = TestClient(app)

SERVICE = {
    "name": "Sunday AM",
    "console": "X32",
    "detail_level": "full",
    "channels": [
        {"label": "Kick", "source": "kick"},
        {
            "label": "Lead Vocal",
            "source": "LEAD-VOCAL",
            "vocal_profile": {"range": "tenor", "style": "contemporary", "mic_type": "dynamic"},
        },
    ],
    "setlist": [{"title": "Opener", "key": "G", "intensity": "driving"}],
}

SNAPSHOT_CSV = b"[Channels]\nCh,Name,Gain,Fader\n1,Kick,2.0,-3\n2,Lead Vocal,16,0\n"


def test_health() -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_recommend_returns_channels_and_correlation_header() -> None:
    response = client.post("/recommend", json=SERVICE, headers={"X-Correlation-Id": "corr-api"})

    assert response.status_code == 200
    assert response.headers["x-correlation-id"] == "corr-api"
    assert response.headers["x-policy-version"] == "v1"
    payload = response.json()
    assert [item["channel"]["label"] for item in payload["channels"]] == ["Kick", "Lead Vocal"]
    assert payload["channels"][0]["gain_range_db"] == [0.0, 4.5]
    assert payload["channels"][1]["compressor"] is not None


def test_recommend_rejects_unknown_tuning_profile() -> None:
    response = client.post("/recommend?tuning=LOUD", json=SERVICE)

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["code"] == "invalid_query_parameter"
    assert detail["parameter"] == "tuning"
    assert detail["allowed_values"] == ["conservative", "default"]


def test_recommend_accepts_tuning_profile_case_insensitively() -> None:
    response = client.post("/recommend?tuning=Conservative", json=SERVICE)

    assert response.status_code == 200


def test_recommend_rejects_unknown_console() -> None:
    response = client.post("/recommend", json={**SERVICE, "console": "mackie"})

    assert response.status_code == 422


def test_analyze_grades_snapshot() -> None:
    request = {
        "service": SERVICE,
        "snapshot": {
            "name": "Soundcheck",
            "console": "x32",
            "channels": [{"number": 5, "name": "Ch 5", "gain_db": 2.0}],
        },
        "channel_mapping": {"5": "kick"},
    }

    response = client.post("/analyze", json=request)

    assert response.status_code == 200
    payload = response.json()
    assert payload["snapshot_name"] == "Soundcheck"
    assert payload["deltas"][0]["source"] == "kick"
    assert payload["deltas"][0]["classification"] == "within"
    assert payload["grade"] == "clean"


def test_analyze_rejects_incompatible_console() -> None:
    request = {"service": SERVICE, "snapshot": {"console": "sq", "channels": []}}

    response = client.post("/analyze", json=request)

    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "console_mismatch"


def test_snapshot_import_parses_csv_export() -> None:
    response = client.post(
        "/snapshots/import?console=SQ",
        files={"snapshot": ("sunday.csv", SNAPSHOT_CSV, "text/csv")},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["name"] == "sunday"
    assert payload["console"] == "sq"
    assert [channel["name"] for channel in payload["channels"]] == ["Kick", "Lead Vocal"]


def test_snapshot_import_parses_json_export() -> None:
    body = b'{"console": "dlive", "channels": [{"number": 3, "name": "Bass", "gain_db": 10}]}'

    response = client.post("/snapshots/import", files={"snapshot": ("evening.json", body, "application/json")})

    assert response.status_code == 200
    assert response.json()["channels"][0]["gain_db"] == 10.0


def test_snapshot_import_requires_console_for_csv() -> None:
    response = client.post("/snapshots/import", files={"snapshot": ("sunday.csv", SNAPSHOT_CSV, "text/csv")})

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "console_required"


def test_snapshot_import_rejects_unsupported_files() -> None:
    unsupported = client.post("/snapshots/import?console=sq", files={"snapshot": ("show.scn", b"data", "text/plain")})
    undecodable = client.post("/snapshots/import?console=sq", files={"snapshot": ("show.csv", b"\xff\xfe\xfa", "text/csv")})

    assert unsupported.status_code == 415
    assert unsupported.json()["detail"]["code"] == "unsupported_format"
    assert undecodable.status_code == 415
    assert undecodable.json()["detail"]["code"] == "invalid_encoding"


def test_snapshot_import_rejects_unknown_console() -> None:
    response = client.post(
        "/snapshots/import?console=mackie",
        files={"snapshot": ("sunday.csv", SNAPSHOT_CSV, "text/csv")},
    )

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["parameter"] == "console"
    assert "avantis" in detail["allowed_values"]


def test_infer_reports_source_and_rule() -> None:
    assert client.get("/infer", params={"label": "Click Track"}).json() == {
        "label": "Click Track",
        "source": "click-track",
        "rule": "click",
    }
    assert client.get("/infer", params={"label": "Spare"}).json()["source"] is None
