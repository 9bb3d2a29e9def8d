"""
Shared components used across the loader.
"""

from .models import Ontology, ParseResult, MissingImport

__all__ = [
    "Ontology",
    "ParseResult",
    "MissingImport",
]
