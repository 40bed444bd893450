"""
Utility modules for configuration, logging, and error handling.
"""

from sonicmind.utils.errors import (
    SonicMindError,
    InvalidInputError,
    AudioLoadError,
    UnsupportedFormatError,
    FileTooLargeError,
    AnalysisError,
    AnalysisTimeoutError,
    AnalysisCancelledError,
    ConfigurationError,
)
from sonicmind.utils.logging import get_logger, setup_logging, JSONFormatter
from sonicmind.utils.config import ConfigManager, load_config, get_default_config

__all__ = [
    "SonicMindError",
    "InvalidInputError",
    "AudioLoadError",
    "UnsupportedFormatError",
    "FileTooLargeError",
    "AnalysisError",
    "AnalysisTimeoutError",
    "AnalysisCancelledError",
    "ConfigurationError",
    "get_logger",
    "setup_logging",
    "JSONFormatter",
    "ConfigManager",
    "load_config",
    "get_default_config",
]
