"""Custom exceptions for BMail."""


class BmailError(Exception):
    """Base exception for all BMail errors."""


class ConfigurationError(BmailError):
    """Exception raised for configuration related errors."""


class FixtureError(BmailError):
    """Exception raised when seed data cannot be loaded or is malformed."""
