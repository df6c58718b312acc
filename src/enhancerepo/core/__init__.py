"""
Core functionality for enhancerepo.

This package provides configuration management and console output.
"""

from enhancerepo.core.config import (
    ConfigLoader,
    EnhanceConfig,
    PatternsConfig,
    SuseDataConfig,
    load_config,
)
from enhancerepo.core.output import OutputLevel, Outputter

__all__ = [
    "ConfigLoader",
    "EnhanceConfig",
    "OutputLevel",
    "Outputter",
    "PatternsConfig",
    "SuseDataConfig",
    "load_config",
]
