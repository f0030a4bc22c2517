"""CLI interface for StageMix."""

import json
from pathlib import Path
from uuid import uuid4

import typer

from .delta import ConsoleMismatchError
from .domain.console import MixerModel
from .domain.models import DetailLevel, SPLFlaggingMode
from .interfaces.cli_handlers import (
    analyze_from_paths,
    format_analysis,
    format_recommendation,
    infer_labels,
    recommend_from_path,
)
from .interfaces.schemas import to_payload
from .options import ReportFormat
from .snapshot_import import SnapshotImportError

app = typer.Typer(help="StageMix live-sound mixer assistant")


def _emit(result: object, lines: list[str], output_format: ReportFormat) -> None:
    if output_format is ReportFormat.JSON:
        typer.echo(json.dumps(to_payload(result), indent=2))
        return
    for line in lines:
        typer.echo(line)


@app.command("recommend")
def recommend_command(
    service: Path = typer.Option(..., "--service", "-s", help="Path to the service description JSON"),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Optional engine config (JSON or YAML).",
    ),
    detail_level: DetailLevel | None = typer.Option(
        None,
        "--detail-level",
        case_sensitive=False,
        help="Override the service detail level: essentials, detailed, or full.",
    ),
    output_format: ReportFormat = typer.Option(
        ReportFormat.TEXT,
        "--format",
        case_sensitive=False,
        help="Render results as text or json.",
    ),
    report_json: Path | None = typer.Option(
        None,
        "--report-json",
        help="Optional path to write the recommendation JSON.",
    ),
) -> None:
    """Recommend starting gain, fader, HPF, EQ and dynamics for every channel."""

    correlation_id = str(uuid4())
    try:
        recommendation = recommend_from_path(
            service,
            config_path=config,
            detail_level=detail_level,
            report_json=report_json,
            correlation_id=correlation_id,
        )
    except ValueError as error:
        raise typer.BadParameter(str(error)) from error
    _emit(recommendation, format_recommendation(recommendation), output_format)
    if output_format is ReportFormat.TEXT:
        typer.echo(f"Correlation ID: {correlation_id}")


@app.command("analyze")
def analyze_command(
    service: Path = typer.Option(..., "--service", "-s", help="Path to the service description JSON"),
    snapshot: Path = typer.Option(
        ..., "--snapshot", "-n", help="Path to the console snapshot export (CSV or JSON)"
    ),
    mapping: list[str] = typer.Option(
        [],
        "--map",
        "-m",
        help="Explicit channel mapping as NUMBER=SOURCE; repeat for each channel.",
    ),
    console: MixerModel | None = typer.Option(
        None,
        "--console",
        case_sensitive=False,
        help="Console model of the snapshot; defaults to the service console.",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Optional engine config (JSON or YAML).",
    ),
    spl_target: float | None = typer.Option(
        None,
        "--spl-target",
        help="Target level in dB SPL for the level estimate.",
    ),
    spl_mode: SPLFlaggingMode | None = typer.Option(
        None,
        "--spl-mode",
        case_sensitive=False,
        help="How far over target is tolerated: strict, balanced, or variable.",
    ),
    calibration_offset: float | None = typer.Option(
        None,
        "--calibration-offset",
        help="Meter calibration offset in dB; enables the SPL estimate.",
    ),
    output_format: ReportFormat = typer.Option(
        ReportFormat.TEXT,
        "--format",
        case_sensitive=False,
        help="Render results as text or json.",
    ),
    report_json: Path | None = typer.Option(
        None,
        "--report-json",
        help="Optional path to write the analysis JSON.",
    ),
) -> None:
    """Grade a console snapshot against the recommendation for a service."""

    correlation_id = str(uuid4())
    try:
        analysis = analyze_from_paths(
            service,
            snapshot,
            mapping_entries=mapping,
            config_path=config,
            console=console,
            spl_target_db=spl_target,
            spl_mode=spl_mode,
            calibration_offset_db=calibration_offset,
            report_json=report_json,
            correlation_id=correlation_id,
        )
    except (SnapshotImportError, ConsoleMismatchError) as error:
        typer.echo(f"[{error.code}] {error.message}", err=True)
        raise typer.Exit(code=2) from error
    except ValueError as error:
        raise typer.BadParameter(str(error)) from error

    _emit(analysis, format_analysis(analysis), output_format)
    if output_format is ReportFormat.TEXT:
        typer.echo(f"Correlation ID: {correlation_id}")


@app.command("infer")
def infer_command(
    labels: list[str] = typer.Argument(..., help="Console channel names to classify."),
) -> None:
    """Guess the input source behind each channel name."""

    for label, source in infer_labels(labels):
        typer.echo(f"{label}: {source.value if source else 'unrecognized'}")


def main() -> None:
    app(prog_name="stagemix")


if __name__ == "__main__":
    main()
