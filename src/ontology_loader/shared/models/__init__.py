"""
Shared data models for ontology loading.

Usage:
    from ontology_loader.shared.models import Ontology, ParseResult, MissingImport
"""

from .ontology import Ontology
from .results import ParseResult, MissingImport

__all__ = [
    "Ontology",
    "ParseResult",
    "MissingImport",
]
