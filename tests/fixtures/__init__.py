"""
Centralized test fixtures for the ontology loader test suite.

This package provides reusable fixtures for testing, including:
- Ontology documents in every supported serialization
- Malformed and unsupported documents
- Import graph builders
- An in-memory transport
- Configuration fixtures

Usage:
    from fixtures import PEOPLE_TTL, ontology_ttl, InMemoryFetcher

Or use the pytest fixtures in conftest.py which import from here.
"""

from .ontology_fixtures import (
    PEOPLE_IRI,
    PEOPLE_VERSION_IRI,
    PEOPLE_TRIPLE_COUNT,
    PEOPLE_TTL,
    PEOPLE_RDFXML,
    PEOPLE_JSONLD,
    PEOPLE_NT,
    BROKEN_TTL,
    BROKEN_RDFXML,
    BROKEN_JSONLD,
    FUNCTIONAL_SYNTAX,
    OWL_XML,
    LITERAL_IMPORT_TTL,
    TWO_HEADERS_TTL,
    ANONYMOUS_TTL,
    BNODE_FIRST_TTL,
    ontology_ttl,
    generate_import_chain,
    ntriples_then_turtle,
)
from .fetchers import InMemoryFetcher
from .config_fixtures import (
    SAMPLE_LOADER_CONFIG,
    MINIMAL_LOADER_CONFIG,
)

__all__ = [
    'PEOPLE_IRI',
    'PEOPLE_VERSION_IRI',
    'PEOPLE_TRIPLE_COUNT',
    'PEOPLE_TTL',
    'PEOPLE_RDFXML',
    'PEOPLE_JSONLD',
    'PEOPLE_NT',
    'BROKEN_TTL',
    'BROKEN_RDFXML',
    'BROKEN_JSONLD',
    'FUNCTIONAL_SYNTAX',
    'OWL_XML',
    'LITERAL_IMPORT_TTL',
    'TWO_HEADERS_TTL',
    'ANONYMOUS_TTL',
    'BNODE_FIRST_TTL',
    'ontology_ttl',
    'generate_import_chain',
    'ntriples_then_turtle',
    'InMemoryFetcher',
    'SAMPLE_LOADER_CONFIG',
    'MINIMAL_LOADER_CONFIG',
]
