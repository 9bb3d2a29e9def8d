"""
RDF serialization parsers.

Sniffing only decides whether a document looks like a serialization; the
grammar itself is rdflib's. A parser that sniffs positively owns the document:
if rdflib then rejects it, that is a syntax error, not a reason to try the
next format.
"""

import json
import re
from typing import Any, Iterator, List, Optional, TYPE_CHECKING
from urllib.parse import urljoin, urlsplit

from ..core.errors import OntologyIOError
from ..core.validators.url import URLValidator
from ..sources.reader import DocumentContent
from .base import FormatParser, OntologyFormat

if TYPE_CHECKING:  # pragma: no cover - import for type hints only
    from ..core.config import LoaderConfiguration

RDF_NAMESPACE = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"

RDFXML = OntologyFormat(
    key="rdfxml",
    name="RDF/XML",
    rdflib_format="xml",
    media_types=("application/rdf+xml",),
    file_extensions=(".rdf", ".owl", ".xml"),
)
JSONLD = OntologyFormat(
    key="jsonld",
    name="JSON-LD",
    rdflib_format="json-ld",
    media_types=("application/ld+json",),
    file_extensions=(".jsonld", ".json"),
)
NTRIPLES = OntologyFormat(
    key="ntriples",
    name="N-Triples",
    rdflib_format="nt",
    media_types=("application/n-triples",),
    file_extensions=(".nt",),
)
TURTLE = OntologyFormat(
    key="turtle",
    name="Turtle",
    rdflib_format="turtle",
    media_types=("text/turtle", "application/x-turtle"),
    file_extensions=(".ttl",),
)

# XML declaration, comments and DOCTYPE (with an optional internal subset)
_XML_PROLOG = re.compile(
    r'^(?:\s*(?:<\?.*?\?>|<!--.*?-->|<!DOCTYPE[^\[>]*(?:\[.*?\])?\s*>))*',
    re.DOTALL,
)
_XML_ROOT = re.compile(r'<(?:([A-Za-z_][\w.-]*):)?([A-Za-z_][\w.-]*)[\s/>]')
_XML_ENCODING_DECL = re.compile(r'^(\s*<\?xml[^>]*?)\s+encoding\s*=\s*["\'][^"\']*["\']')

_IRI = r'<[^<>"{}|^`\\\s]*>'
_BNODE = r'_:[A-Za-z0-9_][\w.-]*'
_LITERAL = r'"(?:[^"\\\n]|\\.)*"(?:@[A-Za-z]+(?:-[A-Za-z0-9]+)*|\^\^' + _IRI + r')?'
_NT_LINE = re.compile(
    rf'^(?:{_IRI}|{_BNODE})\s*{_IRI}\s*(?:{_IRI}|{_BNODE}|{_LITERAL})\s*\.\s*(?:#.*)?$'
)

_TURTLE_DIRECTIVE = re.compile(r'^(?:@prefix|@base)\b|^(?:PREFIX|BASE)\s', re.IGNORECASE)
_TURTLE_IRI_START = re.compile(rf'^{_IRI}')
_TURTLE_PNAME_START = re.compile(r'^(?:[A-Za-z][\w.-]*)?:[^\s=]')
_EMPTY_JSON_ARRAY = re.compile(r'\ufeff?\s*\[\s*\]\s*')


def _significant_lines(text: str) -> List[str]:
    """Non-blank lines that are not whole-line comments."""
    lines = []
    for line in text.splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith('#'):
            lines.append(stripped)
    return lines


def _root_element(head: str) -> Optional[re.Match]:
    prolog = _XML_PROLOG.match(head)
    rest = head[prolog.end():].lstrip() if prolog else head
    return _XML_ROOT.match(rest)


def _context_references(node: Any) -> Iterator[str]:
    """String @context values (and @import of 1.1 contexts) anywhere in a JSON-LD tree."""
    if isinstance(node, dict):
        for key, value in node.items():
            if key == '@context':
                contexts = value if isinstance(value, list) else [value]
                for context in contexts:
                    if isinstance(context, str):
                        yield context
                    elif isinstance(context, dict) and isinstance(context.get('@import'), str):
                        yield context['@import']
            yield from _context_references(value)
    elif isinstance(node, list):
        for item in node:
            yield from _context_references(item)


class RDFXMLFormatParser(FormatParser):
    """
    RDF/XML.

    Claims XML documents whose root element is rdf:RDF, or whose root is any
    other element while the RDF namespace is declared (a single typed node
    element is valid RDF/XML). OWL/XML documents, rooted at owl:Ontology, are
    left alone.
    """

    format = RDFXML

    def prepare_data(self, content: DocumentContent) -> str:
        # Content is already decoded; rdflib re-encodes it as UTF-8
        return _XML_ENCODING_DECL.sub(r"\1", content.text, count=1)

    def sniff(self, content: DocumentContent) -> bool:
        head = content.head
        if not head.startswith('<') or 'xmlns' not in head:
            return False
        root = _root_element(head)
        if root is None:
            return False
        local_name = root.group(2)
        if local_name == 'RDF':
            return True
        return RDF_NAMESPACE in head and local_name != 'Ontology'


class JSONLDFormatParser(FormatParser):
    """
    JSON-LD: a JSON object, or an array of objects.

    A leading ``[`` alone is not enough, since Turtle blank node subjects
    (``[] a owl:Ontology``) start the same way.
    """

    format = JSONLD

    def sniff(self, content: DocumentContent) -> bool:
        head = content.head
        if head.startswith('{'):
            return True
        if not head.startswith('['):
            return False
        rest = head[1:].lstrip()
        if rest.startswith(('{', '"')):
            return True
        # "[]" alone is an empty JSON-LD document; "[] a owl:Ontology" is Turtle
        return _EMPTY_JSON_ARRAY.fullmatch(content.text) is not None

    def check_references(self, content: DocumentContent, configuration: "LoaderConfiguration") -> None:
        """
        Validate remote contexts before rdflib fetches them.

        rdflib dereferences @context IRIs itself, so they get the same scheme
        and private-network checks as any other fetched document.
        """
        try:
            tree = json.loads(content.text.lstrip('\ufeff'))
        except ValueError:
            # rdflib reports the syntax error
            return

        locator = str(content.locator)
        for reference in dict.fromkeys(_context_references(tree)):
            target = urljoin(locator, reference)
            if not urlsplit(target).scheme:
                continue
            try:
                URLValidator.validate_url(
                    target,
                    allowed_protocols=configuration.allowed_protocols,
                    allow_private_ips=configuration.allow_private_networks,
                )
            except ValueError as e:
                raise OntologyIOError(f"Refusing JSON-LD context {target}: {e}", locator=locator, cause=e) from e


class NTriplesFormatParser(FormatParser):
    """
    N-Triples.

    Every significant line of the document has to be a complete triple.
    Turtle that looks like N-Triples at first can use ``;``, ``,`` or
    directives anywhere further down.
    """

    format = NTRIPLES

    def sniff(self, content: DocumentContent) -> bool:
        lines = _significant_lines(content.text)
        if not lines:
            return False
        return all(_NT_LINE.match(line) for line in lines)


class TurtleFormatParser(FormatParser):
    """Turtle: directives, an IRI subject, a prefixed name or a blank node."""

    format = TURTLE

    def sniff(self, content: DocumentContent) -> bool:
        lines = _significant_lines(content.head)
        if not lines:
            return False
        first = lines[0]
        if _TURTLE_DIRECTIVE.match(first):
            return True
        if first.startswith('<'):
            return bool(_TURTLE_IRI_START.match(first))
        if first.startswith(('[', '(', '_:')):
            return True
        return bool(_TURTLE_PNAME_START.match(first))


BUILTIN_PARSERS = (
    RDFXMLFormatParser,
    JSONLDFormatParser,
    NTriplesFormatParser,
    TurtleFormatParser,
)
