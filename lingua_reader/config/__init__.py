"""Configuration management for Lingua Reader."""

from .config import LinguaReaderConfig
from .config_manager import ConfigManager
from .defaults import create_default_config

__all__ = ["LinguaReaderConfig", "ConfigManager", "create_default_config"]
