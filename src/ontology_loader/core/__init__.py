"""
Core utilities and cross-cutting concerns for the ontology loader.

- Exception hierarchy (OntologyLoadError and subclasses)
- Cancellation handling (CancellationToken, SimpleCancellationToken)
- Memory management (MemoryManager)
- Loader configuration (LoaderConfiguration)
- URL validation (URLValidator)

Usage:
    from ontology_loader.core import LoaderConfiguration, OntologySyntaxError
    from ontology_loader.core.cancellation import setup_cancellation_handler
"""

from .errors import (
    OntologyLoadError,
    OntologySyntaxError,
    OntologyIOError,
    UnrecognizedFormatError,
    UnloadableImportError,
    LoadCancelledError,
)
from .cancellation import (
    CancellationToken,
    SimpleCancellationToken,
    setup_cancellation_handler,
    restore_default_handler,
)
from .memory import MemoryManager
from .validators import URLValidator
from .config import LoaderConfiguration, DEFAULT_CONFIGURATION

__all__ = [
    'OntologyLoadError',
    'OntologySyntaxError',
    'OntologyIOError',
    'UnrecognizedFormatError',
    'UnloadableImportError',
    'LoadCancelledError',
    'CancellationToken',
    'SimpleCancellationToken',
    'setup_cancellation_handler',
    'restore_default_handler',
    'MemoryManager',
    'URLValidator',
    'LoaderConfiguration',
    'DEFAULT_CONFIGURATION',
]
