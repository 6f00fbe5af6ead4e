"""Error codes and error handling utilities for Copyous theming."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for theme build and runtime operations."""

    # Resource errors
    RESOURCE_NOT_FOUND = auto()
    RESOURCE_REGISTER_FAILED = auto()
    IMPORT_NOT_FOUND = auto()

    # File errors
    FILE_READ_FAILED = auto()
    FILE_WRITE_FAILED = auto()
    FILE_ACCESS_DENIED = auto()
    DECODE_FAILED = auto()

    # Template errors
    SCSS_SYNTAX = auto()
    SCSS_COMPILE_FAILED = auto()
    TEMPLATE_UNKNOWN_PLACEHOLDER = auto()
    TEMPLATE_MISSING_VALUE = auto()

    # Presentation errors
    STYLESHEET_LOAD_FAILED = auto()
    STYLESHEET_UNLOAD_FAILED = auto()

    # Configuration errors
    CONFIG_INVALID = auto()

    OPERATION_FAILED = auto()


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.RESOURCE_NOT_FOUND: "A theme resource was not found in the resource bundle.",
    ErrorCode.RESOURCE_REGISTER_FAILED: "The theme resource bundle could not be registered.",
    ErrorCode.IMPORT_NOT_FOUND: "A stylesheet import could not be resolved.",

    ErrorCode.FILE_READ_FAILED: "The file could not be read.",
    ErrorCode.FILE_WRITE_FAILED: "The file could not be written. Check folder permissions.",
    ErrorCode.FILE_ACCESS_DENIED: "Access denied. Check file permissions.",
    ErrorCode.DECODE_FAILED: "The file is not valid UTF-8 text.",

    ErrorCode.SCSS_SYNTAX: "The stylesheet source has a syntax error.",
    ErrorCode.SCSS_COMPILE_FAILED: "The stylesheet source could not be compiled by Sass.",
    ErrorCode.TEMPLATE_UNKNOWN_PLACEHOLDER: "The template references an unknown color placeholder.",
    ErrorCode.TEMPLATE_MISSING_VALUE: "No value was provided for a template placeholder.",

    ErrorCode.STYLESHEET_LOAD_FAILED: "The stylesheet could not be loaded.",
    ErrorCode.STYLESHEET_UNLOAD_FAILED: "The stylesheet could not be unloaded.",

    ErrorCode.CONFIG_INVALID: "The build configuration is invalid.",

    ErrorCode.OPERATION_FAILED: "Operation failed. See details for more information.",
}


@dataclass
class ThemeError(Exception):
    """Base exception for theme operations with error code and context."""

    code: ErrorCode
    message: str = ""
    path: Path | None = None
    details: dict[str, Any] = field(default_factory=dict)
    suggestion: str = ""

    def __post_init__(self) -> None:
        if not self.message:
            self.message = ERROR_MESSAGES.get(self.code, "An unexpected error occurred.")
        if not self.suggestion and self.code in ERROR_MESSAGES:
            self.suggestion = ERROR_MESSAGES[self.code]

    def __str__(self) -> str:
        parts = [self.message]
        if self.path:
            parts.append(f"\nFile: {self.path}")
        if self.details:
            details_str = " | ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"\nDetails: {details_str}")
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging or UI display."""
        return {
            "code": self.code.name,
            "message": self.message,
            "path": str(self.path) if self.path else None,
            "details": self.details,
            "suggestion": self.suggestion,
        }


def classify_exception(exc: Exception, path: Path | None = None) -> ThemeError:
    """Classify a generic exception into a ThemeError with appropriate code."""
    if isinstance(exc, ThemeError):
        return exc
    exc_str = str(exc)

    if isinstance(exc, FileNotFoundError):
        return ThemeError(ErrorCode.RESOURCE_NOT_FOUND, path=path, details={"original": exc_str})
    if isinstance(exc, PermissionError):
        return ThemeError(ErrorCode.FILE_ACCESS_DENIED, path=path, details={"original": exc_str})
    if isinstance(exc, UnicodeError):
        return ThemeError(ErrorCode.DECODE_FAILED, path=path, details={"original": exc_str})
    if isinstance(exc, OSError):
        return ThemeError(ErrorCode.FILE_READ_FAILED, path=path, details={"original": exc_str})

    return ThemeError(
        ErrorCode.OPERATION_FAILED,
        message=f"{type(exc).__name__}: {exc}",
        path=path,
        details={"original": exc_str},
    )


def format_error_for_user(error: ThemeError | Exception) -> str:
    """Format an error for display on the command line or in a dialog."""
    if isinstance(error, ThemeError):
        parts = [error.message]
        if error.details:
            parts.append(" (" + ", ".join(f"{k}={v}" for k, v in error.details.items()) + ")")
        if error.path:
            parts.append(f"\nFile: {error.path}")
        return "".join(parts)

    classified = classify_exception(error)
    return format_error_for_user(classified)
