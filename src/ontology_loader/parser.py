"""
Ontology Parser

Loads one document into a caller-supplied ontology and, unless disabled,
resolves its imports into sibling ontologies registered with the manager.

Format selection tries each registered serialization in priority order:

    NotMySyntax    -> try the next parser
    SyntaxFailure  -> raise OntologySyntaxError immediately
    Matched        -> merge the triples and stop

Partial state: the top-level document is merged only after it parsed
completely, but an import failure after that point leaves the ontology (and
any imports already registered) populated. Callers should discard the ontology
when parse raises.

Usage:
    manager = OntologyManager()
    parser = OntologyParser(manager)
    ontology = manager.create_ontology("http://example.org/onto")
    detected = parser.parse("ontologies/onto.ttl", ontology)
"""

import logging
import os
from typing import Any, List, Optional, Union, TYPE_CHECKING

from .core.cancellation import CancellationToken
from .core.config import DEFAULT_CONFIGURATION, LoaderConfiguration
from .core.errors import UnrecognizedFormatError
from .formats.base import Matched, OntologyFormat, ParsedDocument, SyntaxFailure
from .formats.registry import FormatRegistry, create_default_registry
from .imports import ImportResolver, ResolutionContext
from .shared.models import Ontology, ParseResult
from .sources.document_source import DocumentSource, IRIDocumentSource
from .sources.locator import DocumentLocator
from .sources.reader import DocumentContent, read_document
from .sources.transport import DocumentFetcher, HTTPDocumentFetcher

if TYPE_CHECKING:  # pragma: no cover - import for type hints only
    from .manager import OntologyManager

logger = logging.getLogger(__name__)

DocumentInput = Union[DocumentSource, DocumentLocator, str, "os.PathLike[str]"]


def as_document_source(document: Any) -> DocumentSource:
    """
    Coerce a parse input to a DocumentSource.

    DocumentSources pass through; locators, IRI strings and filesystem paths
    become locator-only sources fetched by the transport.
    """
    if isinstance(document, DocumentSource):
        return document
    return IRIDocumentSource(DocumentLocator.of(document))


class OntologyParser:
    """
    Parses ontology documents and their import closure.

    Args:
        manager: Creates and registers imported ontologies. A private
            OntologyManager is created when omitted.
        registry: Serialization parsers in priority order.
        fetcher: Transport used when a source offers no stream.
    """

    def __init__(
        self,
        manager: Optional["OntologyManager"] = None,
        registry: Optional[FormatRegistry] = None,
        fetcher: Optional[DocumentFetcher] = None,
    ):
        if manager is None:
            from .manager import OntologyManager
            manager = OntologyManager(registry=registry, fetcher=fetcher)
        self.manager = manager
        self.registry = registry if registry is not None else create_default_registry()
        self.fetcher = fetcher if fetcher is not None else HTTPDocumentFetcher()
        self._resolver = ImportResolver(self, manager)

    @property
    def name(self) -> str:
        return f"{self.__class__.__name__}({', '.join(self.registry.keys())})"

    def parse(
        self,
        document: DocumentInput,
        ontology: Ontology,
        configuration: Optional[LoaderConfiguration] = None,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> OntologyFormat:
        """
        Parse a document into ``ontology``.

        Args:
            document: DocumentSource, locator, IRI string or filesystem path.
            ontology: Target ontology, mutated in place.
            configuration: Loader options; defaults apply when omitted.
            cancellation_token: Checked before each import is loaded.

        Returns:
            The serialization detected for the top-level document.

        Raises:
            OntologySyntaxError: A serialization claimed the document and
                rejected it.
            UnrecognizedFormatError: No serialization claimed the document.
            OntologyIOError: The document could not be read.
            UnloadableImportError: An import failed and missing imports are fatal.
            LoadCancelledError: Cancellation was requested between imports.
        """
        return self.parse_with_result(document, ontology, configuration, cancellation_token).format

    def parse_with_result(
        self,
        document: DocumentInput,
        ontology: Ontology,
        configuration: Optional[LoaderConfiguration] = None,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> ParseResult:
        """Same as parse, also reporting loaded and missing imports."""
        configuration = configuration if configuration is not None else DEFAULT_CONFIGURATION
        source = as_document_source(document)
        context = ResolutionContext(configuration=configuration, cancellation_token=cancellation_token)

        logger.info(f"Parsing {source.locator}")
        context.mark_in_progress(source.locator)
        detected = self.parse_document(source, ontology, context)
        context.mark_loaded(source.locator)

        if context.missing_imports:
            logger.warning(
                f"Loaded {source.locator} with {len(context.missing_imports)} missing import(s)"
            )
        return ParseResult(
            format=detected,
            ontology=ontology,
            loaded_imports=list(context.loaded_imports),
            missing_imports=list(context.missing_imports),
        )

    def parse_document(
        self, source: DocumentSource, ontology: Ontology, context: ResolutionContext
    ) -> OntologyFormat:
        """
        Parse one document within an existing resolution tree.

        Used for the top-level document and, recursively, for every import.
        """
        configuration = context.configuration
        content = read_document(source, self.fetcher, configuration)
        document = self.select_format(content, configuration)

        added = ontology.merge(document)
        ontology.format = document.format
        logger.info(
            f"Parsed {content.locator} as {document.format.name} "
            f"({added} triples, {len(document.imports)} import(s))"
        )

        alias = self._ontology_iri_alias(document, content.locator, context)
        if alias is not None:
            context.mark_in_progress(alias)

        if configuration.follow_imports and document.imports:
            self._resolver.resolve(ontology, document.imports, context)
        elif document.imports:
            logger.debug(f"Not following {len(document.imports)} import(s) of {content.locator}")

        if alias is not None:
            context.mark_loaded(alias)
        return document.format

    def select_format(self, content: DocumentContent, configuration: LoaderConfiguration) -> ParsedDocument:
        """
        Find the serialization of a document and parse it.

        A format hint skips sniffing. Otherwise parsers registered for the
        document's media type are tried first, then the rest in priority order.

        Raises:
            OntologySyntaxError: The first parser to claim the content rejected it.
            OntologyIOError: A document the content refers to could not be read.
            UnrecognizedFormatError: The content is empty, the format hint is
                unknown, or no parser claimed the content.
        """
        locator = str(content.locator)
        if content.is_empty:
            raise UnrecognizedFormatError("Document is empty", locator=locator)

        if content.format_hint:
            parser = self.registry.get(content.format_hint)
            if parser is None:
                raise UnrecognizedFormatError(
                    f"Unknown format hint '{content.format_hint}' "
                    f"(available: {', '.join(self.registry.keys())})",
                    locator=locator,
                )
            logger.debug(f"Format hint '{content.format_hint}' for {locator}; not sniffing")
            return parser.parse(content, configuration)

        rejected: List[str] = []
        for parser in self.registry.in_detection_order(content.media_type):
            outcome = parser.try_parse(content, configuration)
            if isinstance(outcome, Matched):
                return outcome.document
            if isinstance(outcome, SyntaxFailure):
                logger.debug(f"{parser.format.name} claimed {locator} and rejected it")
                raise outcome.error
            rejected.append(parser.format.name)

        raise UnrecognizedFormatError(
            f"No registered serialization recognized the document (tried: {', '.join(rejected)})",
            locator=locator,
        )

    @staticmethod
    def _ontology_iri_alias(
        document: ParsedDocument, locator: DocumentLocator, context: ResolutionContext
    ) -> Optional[DocumentLocator]:
        """Ontology IRI, when it differs from the locator and is not yet in the closure."""
        if not document.ontology_iri:
            return None
        try:
            alias = DocumentLocator.of(document.ontology_iri)
        except (TypeError, ValueError):
            return None
        if alias == locator or context.is_known(alias):
            return None
        return alias
