"""Public package exports for StageMix with lazy imports."""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    "InputChannel",
    "InputSource",
    "MixerModel",
    "MixerSnapshot",
    "Service",
    "SetlistSong",
    "SPLPreference",
    "MixerAnalysis",
    "MixerSettingRecommendation",
    "generate",
    "analyze",
    "infer",
    "ConsoleMismatchError",
    "SnapshotImportError",
    "load_snapshot",
    "LatestResultRunner",
]

_EXPORT_MODULES: dict[str, str] = {
    "InputChannel": "stagemix.domain.models",
    "InputSource": "stagemix.domain.sources",
    "MixerModel": "stagemix.domain.console",
    "MixerSnapshot": "stagemix.domain.models",
    "Service": "stagemix.domain.models",
    "SetlistSong": "stagemix.domain.models",
    "SPLPreference": "stagemix.domain.models",
    "MixerAnalysis": "stagemix.domain.results",
    "MixerSettingRecommendation": "stagemix.domain.results",
    "generate": "stagemix.recommendation",
    "analyze": "stagemix.delta",
    "infer": "stagemix.inference",
    "ConsoleMismatchError": "stagemix.delta",
    "SnapshotImportError": "stagemix.snapshot_import",
    "load_snapshot": "stagemix.snapshot_import",
    "LatestResultRunner": "stagemix.application.latest_result",
}


def __getattr__(name: str) -> Any:
    if name not in _EXPORT_MODULES:
        raise AttributeError(f"module 'stagemix' has no attribute {name!r}")

    module = import_module(_EXPORT_MODULES[name])
    value = getattr(module, name)
    globals()[name] = value
    return value
