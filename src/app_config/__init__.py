"""Application configuration management for the Kite rebalancer."""

from .models import (
    AppConfig,
    KiteConfig,
    RebalanceConfig,
    LoggingConfig,
)
from .loader import load_config, get_config, reset_config

__all__ = [
    "AppConfig",
    "KiteConfig",
    "RebalanceConfig",
    "LoggingConfig",
    "load_config",
    "get_config",
    "reset_config",
]
