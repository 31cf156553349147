"""Deckhand exception hierarchy."""

from typing import Optional


class DeckhandError(Exception):
    """Base exception for all Deckhand errors."""

    def __init__(self, message: str, context: Optional[str] = None):
        self.message = message
        self.context = context
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with optional context."""
        if self.context:
            return f"{self.message}\nContext: {self.context}"
        return self.message


class ConfigurationError(DeckhandError):
    """Raised when the deployment configuration is invalid or missing."""

    pass


class ConfigurationNotFoundError(ConfigurationError):
    """Raised when the configuration file does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f'The configuration file "{path}" does not exist.')


class ConfigurationSyntaxError(ConfigurationError):
    """Raised when the configuration file is not valid JSON."""

    def __init__(self, path: str, line: int, column: int, reason: str):
        self.path = path
        self.line = line
        self.column = column
        super().__init__(
            f'The configuration file "{path}" contains invalid JSON.',
            context=f"line {line}, column {column}: {reason}",
        )


class ConfigurationValidationError(ConfigurationError):
    """Raised when the configuration does not match the expected schema."""

    def __init__(self, path: str, errors: list):
        self.path = path
        self.errors = errors
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in errors
        )
        super().__init__(
            f'The configuration file "{path}" does not match the schema.',
            context=details,
        )


class ConnectionConfigurationError(DeckhandError):
    """Raised when a host connection cannot be constructed."""

    pass


class DispatcherLockedError(DeckhandError):
    """Raised when registering listeners on a locked dispatcher."""

    pass


class TaskRuntimeError(DeckhandError, RuntimeError):
    """Raised by a task when a deployment-blocking operation fails."""

    def __init__(self, message: str, task=None, context: Optional[str] = None):
        self.task = task
        super().__init__(message, context=context)
