"""
Configuration management
"""

from .settings import TrackerConfig, create_config, validate_config

__all__ = ["TrackerConfig", "create_config", "validate_config"]
