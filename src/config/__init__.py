"""Configuration module -- exports Settings and the provider-file loader."""

from src.config.loader import GatewayConfig, load_config, parse_config
from src.config.settings import Settings

__all__ = ["GatewayConfig", "Settings", "load_config", "parse_config"]
