"""
Format parser base types.

Each serialization parser looks at a document and answers with one of three
outcomes:

- Matched: the document is in this serialization and was parsed
- NotMySyntax: the document is not in this serialization; try the next parser
- SyntaxFailure: the document is in this serialization but malformed; stop

NotMySyntax is ordinary control data. Only SyntaxFailure turns into an
exception (OntologySyntaxError) once the caller decides to surface it.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union, TYPE_CHECKING

from rdflib import Graph, OWL, RDF, URIRef

from ..core.errors import OntologyIOError, OntologySyntaxError
from ..core.memory import MemoryManager
from ..sources.reader import DocumentContent

if TYPE_CHECKING:  # pragma: no cover - import for type hints only
    from ..core.config import LoaderConfiguration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OntologyFormat:
    """
    Identifies a concrete serialization.

    Attributes:
        key: Stable identifier used for format hints and the CLI (e.g. "turtle").
        name: Human-readable name (e.g. "Turtle").
        rdflib_format: Format name understood by rdflib.Graph.parse.
        media_types: Media types associated with the serialization.
        file_extensions: Conventional file extensions.
    """
    key: str
    name: str
    rdflib_format: str
    media_types: Tuple[str, ...] = ()
    file_extensions: Tuple[str, ...] = ()

    def __str__(self) -> str:
        return self.name


@dataclass
class ParsedDocument:
    """Triples and header information extracted from one document."""
    format: OntologyFormat
    graph: Graph
    ontology_iri: Optional[str] = None
    version_iri: Optional[str] = None
    imports: List[str] = field(default_factory=list)
    namespaces: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Matched:
    document: ParsedDocument

    @property
    def format(self) -> OntologyFormat:
        return self.document.format


@dataclass(frozen=True)
class NotMySyntax:
    format: OntologyFormat
    reason: str = ""


@dataclass(frozen=True)
class SyntaxFailure:
    error: OntologySyntaxError

    @property
    def format(self) -> Optional[OntologyFormat]:
        return self.error.format


ParseOutcome = Union[Matched, NotMySyntax, SyntaxFailure]


def _error_line(error: BaseException) -> Optional[int]:
    """Best-effort line number from the exceptions rdflib's parsers raise."""
    get_line = getattr(error, 'getLineNumber', None)
    if callable(get_line):
        try:
            return int(get_line())
        except (TypeError, ValueError):
            return None
    lineno = getattr(error, 'lineno', None)
    if isinstance(lineno, int):
        return lineno
    # notation3.BadSyntax keeps a zero-based line count
    lines = getattr(error, 'lines', None)
    if isinstance(lines, int):
        return lines + 1
    return None


def _error_message(error: BaseException) -> str:
    message = str(error).strip() or error.__class__.__name__
    first_line = message.splitlines()[0]
    return first_line[:500]


def extract_header(
    graph: Graph,
    ontology_format: OntologyFormat,
    locator: str,
    configuration: "LoaderConfiguration",
) -> Tuple[Optional[str], Optional[str], List[str]]:
    """
    Find the ontology header and the declared imports.

    Recoverable irregularities (several owl:Ontology headers, owl:imports
    objects that are not IRIs) are logged and tolerated, or raised as
    OntologySyntaxError when strict parsing is on.

    Returns:
        Tuple of (ontology IRI, version IRI, ordered import IRIs)
    """
    headers = list(dict.fromkeys(graph.subjects(RDF.type, OWL.Ontology)))
    if len(headers) > 1:
        message = f"Document declares {len(headers)} owl:Ontology headers"
        if configuration.strict_parsing:
            raise OntologySyntaxError(message, locator=locator, format=ontology_format)

    header = None
    for candidate in headers:
        if isinstance(candidate, URIRef) and str(candidate) == locator:
            header = candidate
            break
    if header is None and headers:
        header = headers[0]
    if len(headers) > 1:
        logger.warning(f"{message} in {locator}; using {header}")

    ontology_iri = str(header) if isinstance(header, URIRef) else None
    version_iri = None
    if header is not None:
        version = graph.value(header, OWL.versionIRI)
        if isinstance(version, URIRef):
            version_iri = str(version)

    imports: List[str] = []
    for _, _, target in graph.triples((None, OWL.imports, None)):
        if not isinstance(target, URIRef):
            message = f"owl:imports value {target!r} is not an IRI"
            if configuration.strict_parsing:
                raise OntologySyntaxError(message, locator=locator, format=ontology_format)
            logger.warning(f"{message} in {locator}; ignoring it")
            continue
        if str(target) not in imports:
            imports.append(str(target))

    return ontology_iri, version_iri, imports


class FormatParser(ABC):
    """
    Base class for serialization parsers backed by rdflib.

    Subclasses set ``format`` and implement ``sniff``; parsing itself is
    shared. Each parse goes into a scratch graph so a rejected document never
    leaves triples behind.
    """

    format: OntologyFormat

    @abstractmethod
    def sniff(self, content: DocumentContent) -> bool:
        """Whether the document looks like this serialization."""
        pass

    def prepare_data(self, content: DocumentContent) -> str:
        """Text handed to rdflib."""
        return content.text

    def check_references(self, content: DocumentContent, configuration: "LoaderConfiguration") -> None:
        """Refuse documents that make rdflib dereference locations the configuration forbids."""
        pass

    @property
    def key(self) -> str:
        return self.format.key

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def parse(self, content: DocumentContent, configuration: "LoaderConfiguration") -> ParsedDocument:
        """
        Parse the document without sniffing.

        Raises:
            OntologySyntaxError: If rdflib rejects the content or a strict
                irregularity is found.
            OntologyIOError: If rdflib could not read a document the content
                refers to, or the reference is not allowed.
        """
        locator = str(content.locator)
        graph = Graph()
        self.check_references(content, configuration)
        try:
            graph.parse(data=self.prepare_data(content), format=self.format.rdflib_format, publicID=locator)
        except MemoryError:
            MemoryManager.log_memory_status("After MemoryError")
            raise
        except OSError as e:
            # urllib errors from remote references (JSON-LD @context) land here
            logger.debug(f"{self.format.name} parser could not read a reference of {locator}: {e}")
            raise OntologyIOError(
                f"Could not read a document referenced by {locator}: {e}", locator=locator, cause=e
            ) from e
        except Exception as e:
            logger.debug(f"{self.format.name} parser rejected {locator}: {e}")
            raise OntologySyntaxError(
                _error_message(e),
                locator=locator,
                format=self.format,
                line=_error_line(e),
                cause=e,
            ) from e

        ontology_iri, version_iri, imports = extract_header(graph, self.format, locator, configuration)
        return ParsedDocument(
            format=self.format,
            graph=graph,
            ontology_iri=ontology_iri,
            version_iri=version_iri,
            imports=imports,
            namespaces={prefix: str(ns) for prefix, ns in graph.namespaces()},
        )

    def try_parse(self, content: DocumentContent, configuration: "LoaderConfiguration") -> ParseOutcome:
        """Sniff, then parse; never raises for syntax problems."""
        if not self.sniff(content):
            return NotMySyntax(self.format, f"content does not look like {self.format.name}")
        try:
            return Matched(self.parse(content, configuration))
        except OntologySyntaxError as e:
            return SyntaxFailure(e)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(format={self.format.key!r})"
