"""
Centralized configuration constants for the ontology loader.

This module provides a single source of truth for default values, limits and
well-known vocabulary used throughout the loader.
"""

from enum import IntEnum
from typing import Final

# ============================================================================
# Exit Codes
# ============================================================================

class ExitCode(IntEnum):
    """Standard exit codes for CLI commands.

    Following Unix conventions:
    - 0: Success
    - 1: General error
    - 2: Syntax error in a document
    - 3+: Specific error categories
    """
    SUCCESS = 0
    ERROR = 1
    SYNTAX_ERROR = 2
    CONFIG_ERROR = 3
    IO_ERROR = 4
    UNRECOGNIZED_FORMAT = 5
    IMPORT_ERROR = 6
    CANCELLED = 7


# ============================================================================
# Memory Management
# ============================================================================

class MemoryLimits:
    """Memory management constants."""

    MAX_SAFE_DOCUMENT_MB: Final[int] = 500
    """Default maximum document size without explicit override (MB)."""

    MEMORY_MULTIPLIER: Final[float] = 3.5
    """RDFlib typically uses ~3-4x document size in memory."""

    MIN_AVAILABLE_MEMORY_MB: Final[int] = 256
    """Minimum available memory required before parsing (MB)."""

    LOAD_FACTOR: Final[float] = 0.7
    """Share of available memory considered safe to use."""


# ============================================================================
# Transport
# ============================================================================

class FetchConfig:
    """Network fetch defaults."""

    DEFAULT_TIMEOUT_SECONDS: Final[int] = 30
    """Default HTTP request timeout."""

    DEFAULT_MAX_ATTEMPTS: Final[int] = 3
    """Attempts for transient failures (timeouts, 429, 503)."""

    RETRY_MIN_WAIT_SECONDS: Final[int] = 1
    RETRY_MAX_WAIT_SECONDS: Final[int] = 10

    TRANSIENT_STATUS_CODES: Final[tuple] = (429, 502, 503, 504)

    REDIRECT_STATUS_CODES: Final[tuple] = (301, 302, 303, 307, 308)

    MAX_REDIRECTS: Final[int] = 10
    """Redirect hops followed before a fetch is abandoned."""

    DEFAULT_ACCEPT: Final[tuple] = (
        "application/rdf+xml",
        "text/turtle",
        "application/ld+json;q=0.9",
        "application/n-triples;q=0.9",
        "application/xml;q=0.5",
        "text/plain;q=0.1",
        "*/*;q=0.05",
    )
    """Accept header entries sent when dereferencing document locators."""

    DEFAULT_PROTOCOLS: Final[tuple] = ("http", "https", "file")
    """Locator schemes the default transport will dereference."""

    USER_AGENT: Final[str] = "ontology-loader/1.0"


# ============================================================================
# Document Sources
# ============================================================================

class SourceConfig:
    """Document source defaults."""

    IN_MEMORY_SCHEME: Final[str] = "inmemory"
    """Scheme used for generated locators of in-memory documents."""

    DEFAULT_ENCODING: Final[str] = "utf-8"

    SNIFF_WINDOW_CHARS: Final[int] = 4096
    """How much of a document format sniffers look at."""


# ============================================================================
# Logging
# ============================================================================

class LoggingConfig:
    """Logging configuration."""

    DEFAULT_LOG_LEVEL: Final[str] = "INFO"
    """Default logging level."""

    LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    """Default log format string."""

    DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
    """Default date format for logs."""

    DEFAULT_FORMAT_STYLE: Final[str] = "text"
    """Human-readable formatter style."""

    JSON_DATE_FORMAT: Final[str] = "%Y-%m-%dT%H:%M:%S.%fZ"
    """ISO-8601 timestamp format for structured logs."""

    SUPPORTED_FORMATS: Final[tuple] = ("text", "json")
    """Supported formatter styles."""
