from .config import (
    EngineConfig,
    MaskingConfig,
    SPLConfig,
    ToleranceConfig,
    load_engine_config,
)

__all__ = [
    "EngineConfig",
    "MaskingConfig",
    "SPLConfig",
    "ToleranceConfig",
    "load_engine_config",
]
