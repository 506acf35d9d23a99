"""
Custom exceptions for BPTracker.

The calculation core is total over its inputs and never raises for sparse or
degenerate data. These exceptions cover the boundary instead: malformed
payloads handed to the API and invalid configuration.
"""


class BPTrackerError(Exception):
    """Base exception for all BPTracker errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class RecordParsingError(BPTrackerError):
    """A health record payload could not be turned into a domain record."""

    def __init__(self, message: str, field: str = None, value=None):
        details = {}
        if field:
            details['field'] = field
        if value is not None:
            details['value'] = str(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class ConfigurationError(BPTrackerError):
    """Invalid or missing configuration."""

    def __init__(self, message: str, config_key: str = None):
        details = {}
        if config_key:
            details['config_key'] = config_key
        super().__init__(message, details)
        self.config_key = config_key
