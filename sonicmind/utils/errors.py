"""
Custom exceptions for SonicMind.

This module defines a hierarchy of exceptions for handling the error
conditions of the analysis core and its decode collaborator.
"""

from typing import Any, Optional


class SonicMindError(Exception):
    """Base exception for all SonicMind errors."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class InvalidInputError(SonicMindError):
    """Raised when a sample buffer is malformed (not merely empty)."""

    def __init__(self, message: str, field_name: Optional[str] = None):
        super().__init__(message, details={"field": field_name})
        self.field_name = field_name


class AudioLoadError(SonicMindError):
    """Raised when an audio file cannot be decoded into a sample buffer."""

    def __init__(self, message: str, file_path: Optional[str] = None):
        super().__init__(message, details={"file_path": file_path})
        self.file_path = file_path


class UnsupportedFormatError(AudioLoadError):
    """Raised when the audio container format is not supported."""

    def __init__(self, message: str, format: Optional[str] = None):
        super().__init__(message)
        self.format = format
        self.details = {"format": format}


class FileTooLargeError(AudioLoadError):
    """Raised when an audio file exceeds the configured size limit."""

    def __init__(
        self,
        message: str,
        file_size: Optional[int] = None,
        max_size: Optional[int] = None,
    ):
        super().__init__(message)
        self.file_size = file_size
        self.max_size = max_size
        self.details = {"file_size": file_size, "max_size": max_size}


class AnalysisError(SonicMindError):
    """Raised when a single analyzer fails."""

    def __init__(
        self,
        message: str,
        analyzer_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.analyzer_name = analyzer_name
        self.original_error = original_error
        self.details = {
            "analyzer_name": analyzer_name,
            "original_error": str(original_error) if original_error else None,
        }


class AnalysisTimeoutError(SonicMindError):
    """Raised when a full analysis pass exceeds its time budget."""

    def __init__(self, timeout: float, pending: Optional[list] = None):
        super().__init__(
            f"Analysis did not finish within {timeout:.3f}s",
            details={"timeout": timeout, "pending": pending or []},
        )
        self.timeout = timeout
        self.pending = pending or []


class AnalysisCancelledError(SonicMindError):
    """Raised when a caller cancels an analysis pass."""

    def __init__(self, pending: Optional[list] = None):
        super().__init__(
            "Analysis was cancelled",
            details={"pending": pending or []},
        )
        self.pending = pending or []


class ConfigurationError(SonicMindError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(message)
        self.config_key = config_key
        self.details = {"config_key": config_key}
