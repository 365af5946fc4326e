# rotation_rtpc/rotation_rtpc/exceptions.py
"""
Custom exceptions for the rotation RTPC library.
"""


class RotationRtpcError(Exception):
    """Base exception class for all rotation RTPC library errors."""
    def __init__(self, message, *args, sampler=None, source=None):
        super().__init__(message, *args)
        self.message = message
        self.sampler = sampler
        self.source = source

    def __str__(self):
        base_message = super().__str__()

        details = []
        if self.sampler is not None:
            details.append(f"Sampler: {self.sampler}")
        if self.source is not None:
            details.append(f"Source: {self.source}")

        if details:
            return f"{base_message} ({', '.join(details)})"
        return base_message


class ConfigurationError(RotationRtpcError):
    """Errors related to sampler, window or channel configuration."""


class MappingError(RotationRtpcError):
    """Errors raised by the range mappers for unusable ranges."""


class TabularDataError(RotationRtpcError):
    """Errors related to loading tabular randomization data."""


class TabularFormatError(TabularDataError):
    """A tabular row could not be parsed."""

    def __init__(self, message, row=None, source=None):
        super().__init__(message, source=source)
        self.row = row

    def __str__(self):
        base_msg = super().__str__()
        if self.row is not None:
            return f"{base_msg} - Row: {self.row!r}"
        return base_msg


class DataSourceNotFoundError(TabularDataError):
    """The requested tabular data source does not exist."""
