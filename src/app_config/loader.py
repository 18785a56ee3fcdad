"""Configuration loader with validation and singleton access."""

import logging
import os
import yaml
from pathlib import Path
from typing import Optional

from .models import AppConfig

logger = logging.getLogger(__name__)

# Global config singleton
_config: Optional[AppConfig] = None

# Secrets are usually kept out of config.yaml
ENV_OVERRIDES = {
    "KITE_API_KEY": ("kite", "api_key"),
    "KITE_API_SECRET": ("kite", "api_secret"),
    "KITE_ACCESS_TOKEN": ("kite", "access_token"),
    "KITE_EXCHANGE": ("kite", "exchange"),
}


def _apply_env_overrides(raw_config: dict) -> dict:
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            raw_config.setdefault(section, {})
            raw_config[section][key] = value
            logger.debug(f"Using {env_name} for {section}.{key}")
    return raw_config


def load_config(config_path: Optional[str | Path] = None) -> AppConfig:
    """
    Load and validate configuration from YAML file.

    Environment variables listed in ENV_OVERRIDES take precedence over the
    file. Without a path, configuration comes from defaults and environment.

    Args:
        config_path: Path to config.yaml file

    Returns:
        Validated AppConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config validation fails
        yaml.YAMLError: If YAML parsing fails
    """
    global _config

    raw_config = {}
    if config_path is not None:
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        logger.info(f"Loading configuration from: {config_path}")

        with open(config_path, 'r') as f:
            raw_config = yaml.safe_load(f) or {}

        if not isinstance(raw_config, dict):
            raise ValueError(f"Invalid configuration: expected a mapping in {config_path}")

    raw_config = _apply_env_overrides(raw_config)

    try:
        _config = AppConfig(**raw_config)
    except Exception as e:
        logger.error(f"Configuration validation failed: {e}")
        raise ValueError(f"Invalid configuration: {e}") from e

    # Log loaded configuration for audit trail (never the secrets)
    logger.info("Configuration loaded successfully:")
    logger.info(f"  Exchange: {_config.kite.exchange}")
    logger.info(f"  Product: {_config.kite.product}")
    logger.info(f"  Request timeout: {_config.kite.request_timeout_seconds}s")
    logger.info(f"  Excluded symbols: {', '.join(_config.rebalance.excluded_symbols) or '-'}")
    logger.info(f"  Limit order symbols: {', '.join(_config.rebalance.limit_order_symbols) or '-'}")
    logger.info(f"  Limit depth level: {_config.rebalance.limit_depth_level}")
    logger.info(f"  Benchmark: {_config.rebalance.benchmark_symbol or '-'}")

    return _config


def get_config() -> AppConfig:
    """
    Get the current loaded configuration.

    Returns:
        Current AppConfig instance

    Raises:
        RuntimeError: If config hasn't been loaded yet
    """
    if _config is None:
        raise RuntimeError(
            "Configuration not loaded. Call load_config() first."
        )
    return _config


def reset_config():
    """Forget the loaded configuration."""
    global _config
    _config = None
