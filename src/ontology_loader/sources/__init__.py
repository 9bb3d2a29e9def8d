"""
Document sources, locators and transport.

Components:
- locator: DocumentLocator (normalized absolute IRI)
- document_source: DocumentSource variants and the access precedence
- reader: read_document (single read, decoding, size limits)
- transport: HTTPDocumentFetcher (requests + tenacity) for file/http(s)
"""

from .locator import DocumentLocator, normalize_iri
from .document_source import (
    DocumentSource,
    SourceAccess,
    StringDocumentSource,
    ReaderDocumentSource,
    StreamDocumentSource,
    FileDocumentSource,
    IRIDocumentSource,
)
from .transport import (
    DocumentFetcher,
    FetchedDocument,
    HTTPDocumentFetcher,
    TransientFetchError,
)
from .reader import DocumentContent, read_document, detect_encoding

__all__ = [
    'DocumentLocator',
    'normalize_iri',
    'DocumentSource',
    'SourceAccess',
    'StringDocumentSource',
    'ReaderDocumentSource',
    'StreamDocumentSource',
    'FileDocumentSource',
    'IRIDocumentSource',
    'DocumentFetcher',
    'FetchedDocument',
    'HTTPDocumentFetcher',
    'TransientFetchError',
    'DocumentContent',
    'read_document',
    'detect_encoding',
]
