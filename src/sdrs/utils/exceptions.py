"""Custom exceptions for SDRS."""


class SdrsError(Exception):
    """Base exception for all SDRS errors."""

    pass


class ConfigurationError(SdrsError):
    """Error in configuration or settings."""

    pass
