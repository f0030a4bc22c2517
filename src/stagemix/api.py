"""FastAPI interface for StageMix."""

from typing import Any
from uuid import uuid4

from fastapi import FastAPI, File, Header, HTTPException, Query, UploadFile
from fastapi.responses import JSONResponse

from .domain.console import MixerModel
from .domain.policies import DEFAULT_MASKING_POLICY, DEFAULT_TOLERANCE_POLICY
from .inference import matching_rule
from .interfaces.api_handlers import (
    ConsoleMismatchError,
    SnapshotImportError,
    analyze_document,
    import_snapshot_bytes,
    recommend_document,
)
from .interfaces.schemas import AnalyzeRequest, ServiceDocument, to_payload
from .options import SnapshotFormat, enum_values, parse_case_insensitive_enum
from .recommendation import RECOMMENDATION_TUNINGS

app = FastAPI(title="StageMix API", version="0.1.0")

_UNSUPPORTED_IMPORT_CODES = {"unsupported_format", "invalid_encoding"}


def _resolve_tuning_profile(tuning: str) -> str:
    normalized = tuning.strip().lower()
    if normalized not in RECOMMENDATION_TUNINGS:
        raise HTTPException(
            status_code=400,
            detail={
                "code": "invalid_query_parameter",
                "message": f"Unknown tuning profile '{tuning}'.",
                "parameter": "tuning",
                "allowed_values": sorted(RECOMMENDATION_TUNINGS),
            },
        )
    return normalized


def _json_response(payload: dict[str, Any], correlation_id: str, policy_version: str) -> JSONResponse:
    response = JSONResponse(content=payload)
    response.headers["X-Correlation-Id"] = correlation_id
    response.headers["X-Policy-Version"] = policy_version
    return response


@app.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint."""

    return {"status": "ok"}


@app.post("/recommend")
def recommend(
    document: ServiceDocument,
    tuning: str = Query("default", description="Named recommendation tuning profile."),
    x_correlation_id: str | None = Header(default=None, alias="X-Correlation-Id"),
) -> JSONResponse:
    """Generate starting settings for every channel of a service."""

    tuning_profile = _resolve_tuning_profile(tuning)
    correlation_id = x_correlation_id or str(uuid4())
    recommendation = recommend_document(document, tuning_profile, correlation_id)
    return _json_response(to_payload(recommendation), correlation_id, DEFAULT_MASKING_POLICY.policy_version)


@app.post("/analyze")
def analyze(
    request: AnalyzeRequest,
    tuning: str = Query("default", description="Named recommendation tuning profile."),
    x_correlation_id: str | None = Header(default=None, alias="X-Correlation-Id"),
) -> JSONResponse:
    """Compare a mixer snapshot against the recommendation for its service."""

    tuning_profile = _resolve_tuning_profile(tuning)
    correlation_id = x_correlation_id or str(uuid4())
    try:
        analysis = analyze_document(request, tuning_profile, correlation_id)
    except ConsoleMismatchError as error:
        raise HTTPException(status_code=409, detail=error.as_dict()) from error
    return _json_response(to_payload(analysis), correlation_id, DEFAULT_TOLERANCE_POLICY.policy_version)


@app.post("/snapshots/import")
async def import_snapshot(
    snapshot: UploadFile = File(..., description="Console snapshot export (CSV or JSON)"),
    console: str | None = Query(None, description="Console model; required for CSV exports."),
) -> dict[str, Any]:
    """Parse an uploaded console export into a snapshot document."""

    parsed_console = None
    if console is not None:
        try:
            parsed_console = parse_case_insensitive_enum(console, MixerModel)
        except ValueError as error:
            raise HTTPException(
                status_code=400,
                detail={
                    "code": "invalid_query_parameter",
                    "message": str(error),
                    "parameter": "console",
                    "allowed_values": list(enum_values(MixerModel)),
                },
            ) from error

    filename = snapshot.filename or "snapshot.csv"
    suffix = filename.rsplit(".", 1)[-1] if "." in filename else ""
    payload = await snapshot.read()
    try:
        try:
            snapshot_format = parse_case_insensitive_enum(suffix, SnapshotFormat)
        except ValueError as error:
            raise SnapshotImportError("unsupported_format", f"Unsupported snapshot file: {filename}.") from error
        stem = filename.rsplit(".", 1)[0]
        parsed = import_snapshot_bytes(payload, snapshot_format, parsed_console, name=stem)
    except SnapshotImportError as error:
        status = 415 if error.code in _UNSUPPORTED_IMPORT_CODES else 400
        raise HTTPException(status_code=status, detail=error.as_dict()) from error

    return to_payload(parsed)


@app.get("/infer")
def infer_source(label: str = Query(..., description="Console channel name to classify.")) -> dict[str, Any]:
    """Guess the input source behind a channel name."""

    rule = matching_rule(label)
    return {
        "label": label,
        "source": rule.source.value if rule else None,
        "rule": rule.name if rule else None,
    }
