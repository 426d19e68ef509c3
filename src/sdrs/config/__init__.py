"""Configuration module for SDRS."""

from sdrs.config.settings import Environment, Settings, get_settings

__all__ = ["Environment", "Settings", "get_settings"]
