"""Utility modules for SDRS."""

from sdrs.utils.exceptions import ConfigurationError, SdrsError

__all__ = [
    "SdrsError",
    "ConfigurationError",
]
