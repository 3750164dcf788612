"""
Error types for rspec-outline configuration and file handling.

The structural parser never raises: it reports problems as a
``ParseFailure`` result. These exceptions cover the layers around it.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class OutlineError(Exception):
    """Base exception for all rspec-outline errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ConfigError(OutlineError):
    """
    Raised when a configuration file cannot be loaded.

    Examples:
    - Invalid TOML
    - Wrong value types (e.g. ``spec_dirs = "spec"``)
    - Unknown log level
    """

    pass


class SpecFileError(OutlineError):
    """
    Raised when a requested file cannot be outlined.

    Examples:
    - File does not end in the spec suffix
    - File is missing or unreadable
    - Line number outside the file
    """

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        file: Path to the file where the error occurred
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional source snippet around the error location
    """

    file: Path
    line: int
    column: int = 1
    snippet: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "rspec_outline.toml:3:1"
        """
        location = f"{self.file}:{self.line}:{self.column}"
        if self.snippet:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format snippet with line numbers and an error marker."""
        if not self.snippet:
            return ""

        lines = self.snippet.split("\n")
        formatted = []

        # Snippet shows up to 2 lines before the error line
        start_line = max(1, self.line - 2)

        for i, line in enumerate(lines):
            line_num = start_line + i
            prefix = f"{line_num:4d} | "
            formatted.append(prefix + line)

            if line_num == self.line:
                marker_pos = len(prefix) + self.column - 1
                formatted.append(" " * marker_pos + "^^^")

        return "\n".join(formatted)


def make_config_error(
    message: str,
    file: Path | None = None,
    line: int | None = None,
    column: int | None = None,
    snippet: str | None = None,
) -> ConfigError:
    """
    Helper to create a ConfigError with optional context.

    Args:
        message: Error description
        file: Optional configuration file path
        line: Optional line number
        column: Optional column number
        snippet: Optional source lines ending at the error line

    Returns:
        ConfigError with context if a location was provided
    """
    if file and line:
        context = ErrorContext(file=file, line=line, column=column or 1, snippet=snippet)
        return ConfigError(message, context)
    return ConfigError(message)


def make_spec_file_error(message: str, file: Path, line: int | None = None) -> SpecFileError:
    """Helper to create a SpecFileError pointing at a file (and line, if known)."""
    if line:
        return SpecFileError(message, ErrorContext(file=file, line=line))
    return SpecFileError(f"{file}: {message}")
