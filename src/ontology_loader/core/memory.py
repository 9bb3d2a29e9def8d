"""
Memory Management

Pre-flight checks run before a document is handed to rdflib so oversized
documents fail with a clear OntologyIOError instead of exhausting memory.
"""

import logging
from typing import Tuple

import psutil

from ..constants import MemoryLimits

logger = logging.getLogger(__name__)


class MemoryManager:
    """
    Manage memory usage during parsing to prevent out-of-memory crashes.

    Provides pre-flight memory checks before parsing large ontology documents
    to fail gracefully with helpful error messages instead of crashing.
    """

    MIN_AVAILABLE_MB = MemoryLimits.MIN_AVAILABLE_MEMORY_MB
    MEMORY_MULTIPLIER = MemoryLimits.MEMORY_MULTIPLIER
    LOAD_FACTOR = MemoryLimits.LOAD_FACTOR

    @staticmethod
    def get_available_memory_mb() -> float:
        """
        Get available system memory in MB.

        Returns:
            Available memory in MB, or infinity if detection fails.
        """
        try:
            return psutil.virtual_memory().available / (1024 * 1024)
        except (OSError, RuntimeError) as e:
            logger.warning(f"Could not determine available memory: {e}")
            return float('inf')

    @staticmethod
    def get_memory_usage_mb() -> float:
        """Get current process memory usage in MB."""
        try:
            return psutil.Process().memory_info().rss / (1024 * 1024)
        except (OSError, RuntimeError):
            return 0.0

    @classmethod
    def check_memory_available(
        cls,
        size_mb: float,
        max_document_mb: float = MemoryLimits.MAX_SAFE_DOCUMENT_MB,
        force: bool = False,
    ) -> Tuple[bool, str]:
        """
        Check if enough memory is available to parse a document.

        Args:
            size_mb: Size of the document in MB.
            max_document_mb: Hard cap applied unless forced.
            force: If True, skip safety checks and allow large documents.

        Returns:
            Tuple of (can_proceed: bool, message: str)
        """
        estimated_usage_mb = size_mb * cls.MEMORY_MULTIPLIER

        if force:
            return True, f"Memory checks skipped for {size_mb:.1f}MB document (forced)."

        if size_mb > max_document_mb:
            return False, (
                f"Document size ({size_mb:.1f}MB) exceeds limit ({max_document_mb}MB). "
                f"Estimated memory required: ~{estimated_usage_mb:.0f}MB. "
                f"Raise max_document_mb or set force_large_documents to load it anyway."
            )

        available_mb = cls.get_available_memory_mb()
        if available_mb == float('inf'):
            return True, f"Memory check unavailable. Proceeding with {size_mb:.1f}MB document."

        if available_mb < cls.MIN_AVAILABLE_MB:
            return False, (
                f"Insufficient free memory. "
                f"Available: {available_mb:.0f}MB, "
                f"Minimum required: {cls.MIN_AVAILABLE_MB}MB."
            )

        safe_threshold_mb = available_mb * cls.LOAD_FACTOR
        if estimated_usage_mb > safe_threshold_mb:
            return False, (
                f"Document may be too large for available memory. "
                f"Size: {size_mb:.1f}MB, "
                f"estimated parsing memory: ~{estimated_usage_mb:.0f}MB, "
                f"safe threshold: {safe_threshold_mb:.0f}MB."
            )

        return True, (
            f"Memory OK: document {size_mb:.2f}MB, "
            f"estimated usage ~{estimated_usage_mb:.0f}MB of {available_mb:.0f}MB available"
        )

    @classmethod
    def log_memory_status(cls, context: str = "") -> None:
        """Log current memory status for debugging."""
        if not logger.isEnabledFor(logging.DEBUG):
            return
        prefix = f"[{context}] " if context else ""
        logger.debug(
            f"{prefix}Memory status: Process using {cls.get_memory_usage_mb():.0f}MB, "
            f"System available: {cls.get_available_memory_mb():.0f}MB"
        )
