"""
Serialization parsers and the format registry.
"""

from .base import (
    OntologyFormat,
    ParsedDocument,
    ParseOutcome,
    Matched,
    NotMySyntax,
    SyntaxFailure,
    FormatParser,
    extract_header,
)
from .rdf_parsers import (
    RDFXML,
    JSONLD,
    NTRIPLES,
    TURTLE,
    RDFXMLFormatParser,
    JSONLDFormatParser,
    NTriplesFormatParser,
    TurtleFormatParser,
)
from .registry import FormatRegistry, create_default_registry

__all__ = [
    'OntologyFormat',
    'ParsedDocument',
    'ParseOutcome',
    'Matched',
    'NotMySyntax',
    'SyntaxFailure',
    'FormatParser',
    'extract_header',
    'RDFXML',
    'JSONLD',
    'NTRIPLES',
    'TURTLE',
    'RDFXMLFormatParser',
    'JSONLDFormatParser',
    'NTriplesFormatParser',
    'TurtleFormatParser',
    'FormatRegistry',
    'create_default_registry',
]
