"""
Error types raised by the mediatools core.

All errors inherit from MediaToolsError for easy catching. None of them are
retried internally; recovery is up to the caller.
"""


class MediaToolsError(Exception):
    """Base exception for all mediatools failures."""


class UnsupportedParamError(MediaToolsError):
    """Raised when a parameter name has no known CLI mapping."""

    def __init__(self, message: str, param_name: str = ""):
        self.param_name = param_name
        super().__init__(message)


class UnsupportedParamValueError(MediaToolsError):
    """Raised when a parameter value cannot be rendered for the CLI."""


class ParamValidationError(MediaToolsError):
    """Raised when a cross-parameter rule is violated."""

    def __init__(self, message: str, errors=None):
        self.errors = list(errors) if errors else [message]
        super().__init__(message)


class InvalidArgumentError(MediaToolsError, ValueError):
    """Raised when a structurally wrong argument is passed to an API."""
