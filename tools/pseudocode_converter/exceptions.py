"""
Custom exception hierarchy for the Pseudocode Converter

Parsing and generation degrade instead of failing (unknown lines become
comments, unknown nodes become placeholder lines), so the only errors raised
to callers are about the request itself: an unknown language tag or invalid
options/configuration.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ErrorContext:
    """
    Context information for an error occurrence
    """

    line_number: int | None = None
    code_snippet: str | None = None
    suggestions: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def add_suggestion(self, suggestion: str):
        """Add a suggestion for fixing the error"""
        if suggestion not in self.suggestions:
            self.suggestions.append(suggestion)

    def format_location(self) -> str:
        """Format the error location"""
        if self.line_number is not None:
            return f"line {self.line_number}"
        return "unknown location"


class ConverterError(Exception):
    """
    Base exception for all converter errors

    Provides rich error context and formatting capabilities
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        """
        Initialize the converter error

        Args:
            message: Main error message
            context: Optional error context with location and suggestions
            cause: Optional underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()
        self.cause = cause

    def add_suggestion(self, suggestion: str):
        """Add a suggestion for fixing the error"""
        self.context.add_suggestion(suggestion)

    def format_error(self, include_suggestions: bool = True) -> str:
        """
        Format the error message with full context

        Args:
            include_suggestions: Whether to include fix suggestions

        Returns:
            Formatted error message
        """
        parts = [f"{self.__class__.__name__}: {self.message}"]

        location = self.context.format_location()
        if location != "unknown location":
            parts.append(f"  Location: {location}")

        if self.context.code_snippet:
            parts.append(f"  Code: {self.context.code_snippet}")

        if include_suggestions and self.context.suggestions:
            parts.append("\n  Suggestions:")
            for i, suggestion in enumerate(self.context.suggestions, 1):
                parts.append(f"    {i}. {suggestion}")

        if self.cause:
            parts.append(f"\n  Caused by: {type(self.cause).__name__}: {self.cause}")

        return "\n".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Serializable view used by the CLI and the HTTP layer"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "suggestions": list(self.context.suggestions),
            "metadata": dict(self.context.metadata),
        }

    def __str__(self) -> str:
        return self.format_error()


class UnsupportedLanguageError(ConverterError, ValueError):
    """
    Raised when a source or target tag is not recognized, or names a
    language that has no parser/emitter registered.
    """

    def __init__(
        self,
        language: str,
        role: str = "target",
        supported: Iterable[str] | None = None,
        **kwargs,
    ):
        """
        Args:
            language: The tag that was requested
            role: "source" or "target"
            supported: Tags that would have been accepted
        """
        super().__init__(f"Unsupported {role} language: {language}", **kwargs)
        self.language = language
        self.role = role
        self.supported = sorted(supported or [])

        self.context.metadata["language"] = language
        self.context.metadata["role"] = role
        if self.supported:
            self.context.metadata["supported"] = self.supported
            self.add_suggestion(f"Use one of: {', '.join(self.supported)}")
        if role == "source":
            self.add_suggestion("Omit the source language to auto-detect it")


class ConfigurationError(ConverterError):
    """
    Error in converter configuration or generation options
    """

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        config_value: Any | None = None,
        **kwargs,
    ):
        """
        Initialize configuration error

        Args:
            message: Error message
            config_key: Configuration key that caused the error
            config_value: Invalid configuration value
            **kwargs: Additional context arguments
        """
        super().__init__(message, **kwargs)

        if config_key:
            self.context.metadata["config_key"] = config_key

        if config_value is not None:
            self.context.metadata["config_value"] = config_value

        if config_key:
            self._add_config_suggestions(config_key)

    def _add_config_suggestions(self, key: str):
        """Add suggestions for configuration errors"""
        if key.endswith("indent_size"):
            self.add_suggestion("Use a positive integer for indent_size (2 or 4 are common)")
        elif key.endswith("indent_char"):
            self.add_suggestion("indent_char must be a single space or a tab")
        elif key.endswith("default_target") or key.endswith("default_source"):
            self.add_suggestion("Run `pseudoconv languages` to list the available tags")
