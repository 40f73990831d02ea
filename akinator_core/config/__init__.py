"""Akinator Core — Модуль конфігурації"""
from .settings import (
    EngineConfig,
    get_default_config,
    ConfirmConfig,
    AlgoConfig,
    FlowConfig,
    EffectiveConfirmThresholdParams,
    DataQualityConfig,
    PopularityConfig,
    CoverageMode,
)
from .loader import save_config, load_config, parse_config, save_yaml, load_yaml

__all__ = [
    "EngineConfig",
    "get_default_config",
    "ConfirmConfig",
    "AlgoConfig",
    "FlowConfig",
    "EffectiveConfirmThresholdParams",
    "DataQualityConfig",
    "PopularityConfig",
    "CoverageMode",
    "save_config",
    "load_config",
    "parse_config",
    "save_yaml",
    "load_yaml",
]
