"""Seedable setpoint trajectory generator and its host driver."""

from .generator import (
    ConfigError,
    SetPointConfig,
    SetPointGenerator,
    SetPointState,
    advance,
    sample_segment,
)
from .driver import DataVector, DataVectorImpl, ExternalDriver, SetPointDriver
from .state_description import SetPointStateDescription
from .config_loader import load_config, write_properties

__all__ = [
    "ConfigError",
    "SetPointConfig",
    "SetPointGenerator",
    "SetPointState",
    "advance",
    "sample_segment",
    "DataVector",
    "DataVectorImpl",
    "ExternalDriver",
    "SetPointDriver",
    "SetPointStateDescription",
    "load_config",
    "write_properties",
]
