"""
Base error hierarchy for pocketstream.
"""


class PocketStreamError(Exception):
    """Base class for all pocketstream errors."""

    pass


class ConfigurationError(PocketStreamError):
    """Error raised when a configuration value is invalid."""

    pass
