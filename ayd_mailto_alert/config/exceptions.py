"""Custom exceptions for configuration management."""

from typing import Any, Dict, List, Optional


class ConfigurationError(Exception):
    """
    Exception raised when configuration resolution or validation fails.

    This exception can store multiple validation errors and format them
    in a human-readable way with helpful suggestions. It also carries
    diagnostic context (SMTP server, sender address) known at the time of
    failure, so that the failure report can tell "bad config" apart from
    "bad recipient".
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize ConfigurationError.

        Args:
            message: Primary error message
            errors: List of specific validation errors
            suggestions: List of helpful suggestions to fix the errors
            context: Diagnostic fields for the failure report
        """
        self.message = message
        self.errors = errors or []
        self.suggestions = suggestions or []
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with all errors and suggestions."""
        parts = [self.message]

        if self.errors:
            parts.append("\nValidation Errors:")
            for i, error in enumerate(self.errors, 1):
                parts.append(f"  {i}. {error}")

        if self.suggestions:
            parts.append("\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"  - {suggestion}")

        return "\n".join(parts)


class MissingFieldError(ConfigurationError):
    """A required SMTP setting was not provided by any source."""

    def __init__(self, field: str, context: Optional[Dict[str, Any]] = None):
        """
        Initialize MissingFieldError.

        Args:
            field: Environment variable name of the missing setting, e.g. SMTP_SERVER
            context: Diagnostic fields for the failure report
        """
        self.field = field
        super().__init__(f"{field} is required", context=context)
