from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import json

from pydantic import BaseModel, Field, field_validator, model_validator

from stagemix.domain.models import SongIntensity, SPLFlaggingMode, SPLPreference
from stagemix.domain.policies import DeltaTolerancePolicy, MaskingPolicy
from stagemix.recommendation import (
    RECOMMENDATION_TUNINGS,
    RecommendationTuning,
    resolve_recommendation_tuning,
)


class MaskingConfig(BaseModel):
    half_bandwidth_octaves: float = Field(1.0, gt=0.0, le=3.0)
    high_severity_score: float = Field(1.1, gt=0.0)
    moderate_severity_score: float = Field(0.6, gt=0.0)
    intensity_weights: dict[SongIntensity, float] = Field(
        default_factory=lambda: {
            SongIntensity.SOFT: 0.0,
            SongIntensity.MEDIUM: 0.15,
            SongIntensity.DRIVING: 0.3,
            SongIntensity.ALL_OUT: 0.45,
        }
    )

    @model_validator(mode="after")
    def _validate_order(self) -> "MaskingConfig":
        if self.moderate_severity_score > self.high_severity_score:
            raise ValueError("moderate_severity_score must not exceed high_severity_score.")
        return self

    def to_policy(self) -> MaskingPolicy:
        return MaskingPolicy(
            policy_id="key-masking-configured",
            half_bandwidth_octaves=self.half_bandwidth_octaves,
            intensity_weights=dict(self.intensity_weights),
            high_severity_score=self.high_severity_score,
            moderate_severity_score=self.moderate_severity_score,
        )


class ToleranceConfig(BaseModel):
    gain_db: float = Field(3.0, ge=0.0, le=20.0)
    fader_db: float = Field(2.0, ge=0.0, le=20.0)
    hpf_relative: float = Field(0.15, ge=0.0, le=1.0)
    eq_frequency_match_relative: float = Field(0.25, gt=0.0, le=1.0)
    eq_gain_db: float = Field(3.0, ge=0.0)
    unrecommended_boost_db: float = Field(4.0, ge=0.0)
    compressor_threshold_db: float = Field(6.0, ge=0.0)
    compressor_ratio: float = Field(1.5, ge=0.0)
    good_fraction: float = Field(0.8, ge=0.0, le=1.0)
    needs_attention_fraction: float = Field(0.5, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _validate_fractions(self) -> "ToleranceConfig":
        if self.needs_attention_fraction > self.good_fraction:
            raise ValueError("needs_attention_fraction must not exceed good_fraction.")
        return self

    def to_policy(self) -> DeltaTolerancePolicy:
        return DeltaTolerancePolicy(policy_id="delta-tolerance-configured", **self.model_dump())


class SPLConfig(BaseModel):
    target_db: float = Field(90.0, ge=60.0, le=120.0)
    mode: SPLFlaggingMode = SPLFlaggingMode.BALANCED
    calibration_offset_db: float | None = None

    def to_preference(self) -> SPLPreference:
        return SPLPreference(
            target_db=self.target_db,
            mode=self.mode,
            calibration_offset_db=self.calibration_offset_db,
        )


class EngineConfig(BaseModel):
    tuning_profile: str = "default"
    masking: MaskingConfig = Field(default_factory=MaskingConfig)
    tolerance: ToleranceConfig = Field(default_factory=ToleranceConfig)
    spl: SPLConfig = Field(default_factory=SPLConfig)

    @field_validator("tuning_profile")
    @classmethod
    def _validate_tuning_profile(cls, value: str) -> str:
        if value not in RECOMMENDATION_TUNINGS:
            allowed = ", ".join(sorted(RECOMMENDATION_TUNINGS))
            raise ValueError(f"tuning_profile must be one of: {allowed}.")
        return value

    def recommendation_tuning(self) -> RecommendationTuning:
        tuning = resolve_recommendation_tuning(self.tuning_profile)
        return replace(tuning, masking=self.masking.to_policy())

    def tolerance_policy(self) -> DeltaTolerancePolicy:
        return self.tolerance.to_policy()


def load_engine_config(path: Path) -> EngineConfig:
    data = _load_config_data(path)
    return EngineConfig.model_validate(data)


def _load_config_data(path: Path) -> dict:
    if path.suffix.lower() in {".yaml", ".yml"}:
        try:
            import yaml
        except ImportError as exc:
            raise ImportError("PyYAML is required to load YAML configs.") from exc

        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}

    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)
