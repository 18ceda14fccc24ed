"""Custom error types for the Mandalart planner."""

from typing import Optional


class MandalartError(Exception):
    """Base error for planner operations."""
    pass


class ConfigError(MandalartError):
    """Missing or invalid configuration."""

    def __init__(self, message: str, problems: Optional[list[str]] = None):
        super().__init__(message)
        self.problems = problems or []


class GenerationError(MandalartError):
    """The generation endpoint failed, timed out or returned no text."""

    def __init__(self, message: str, provider: str = None):
        super().__init__(message)
        self.provider = provider


class ParseError(MandalartError):
    """No JSON object could be extracted from the model output."""

    def __init__(self, message: str, raw_text: str = None):
        super().__init__(message)
        self.raw_text = raw_text


class ValidationError(MandalartError):
    """Model output does not match the expected schema."""

    def __init__(self, message: str, raw_text: str = None, errors: Optional[list] = None):
        super().__init__(message)
        self.raw_text = raw_text
        self.errors = errors or []


class AuthError(MandalartError):
    """Bad credentials or missing/invalid session."""
    pass


class ExportError(MandalartError):
    """Grid rasterization or file write failed."""
    pass


class PersistenceError(MandalartError):
    """A history store write or read failed."""

    def __init__(self, message: str, operation: str = None):
        super().__init__(message)
        self.operation = operation


class BusyError(MandalartError):
    """A generation request is already in flight for this session."""
    pass


class InvalidTransitionError(MandalartError):
    """Requested step change is not allowed from the current step."""

    def __init__(self, message: str, from_step: str = None, to_step: str = None):
        super().__init__(message)
        self.from_step = from_step
        self.to_step = to_step
