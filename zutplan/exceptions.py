"""Custom exceptions for zutplan."""


class ZutPlanError(Exception):
    """Base exception for all zutplan errors."""


class UpstreamError(ZutPlanError):
    """Raised when the timetable service cannot be reached or answers garbage."""


class ConfigurationError(ZutPlanError):
    """Raised for invalid configuration values."""
