"""
Ontology document loading and owl:imports resolution.

Loads an ontology document from a file, an IRI, a byte or character stream or
an in-memory string, detects its serialization (RDF/XML, JSON-LD, N-Triples,
Turtle), parses it into an rdflib-backed Ontology and transitively loads every
document it imports.

Usage:
    from ontology_loader import OntologyManager, LoaderConfiguration

    manager = OntologyManager()
    result = manager.load_ontology(
        "ontologies/pizza.owl",
        LoaderConfiguration(missing_imports_fatal=False),
    )
    print(result.format.name, result.ontology.axiom_count)
"""

from .core import (
    OntologyLoadError,
    OntologySyntaxError,
    OntologyIOError,
    UnrecognizedFormatError,
    UnloadableImportError,
    LoadCancelledError,
    CancellationToken,
    SimpleCancellationToken,
    LoaderConfiguration,
    DEFAULT_CONFIGURATION,
)
from .sources import (
    DocumentLocator,
    DocumentSource,
    StringDocumentSource,
    ReaderDocumentSource,
    StreamDocumentSource,
    FileDocumentSource,
    IRIDocumentSource,
    HTTPDocumentFetcher,
)
from .formats import OntologyFormat, FormatParser, FormatRegistry, create_default_registry
from .shared.models import Ontology, ParseResult, MissingImport
from .parser import OntologyParser
from .manager import OntologyManager

__version__ = "1.0.0"

__all__ = [
    'OntologyLoadError',
    'OntologySyntaxError',
    'OntologyIOError',
    'UnrecognizedFormatError',
    'UnloadableImportError',
    'LoadCancelledError',
    'CancellationToken',
    'SimpleCancellationToken',
    'LoaderConfiguration',
    'DEFAULT_CONFIGURATION',
    'DocumentLocator',
    'DocumentSource',
    'StringDocumentSource',
    'ReaderDocumentSource',
    'StreamDocumentSource',
    'FileDocumentSource',
    'IRIDocumentSource',
    'HTTPDocumentFetcher',
    'OntologyFormat',
    'FormatParser',
    'FormatRegistry',
    'create_default_registry',
    'Ontology',
    'ParseResult',
    'MissingImport',
    'OntologyParser',
    'OntologyManager',
]
