"""
Format Registry

Ordered collection of serialization parsers. Order is priority: when more than
one parser would claim a document, the one registered first wins.

Usage:
    registry = create_default_registry()
    registry.register(MyFormatParser(), position=0)
    for parser in registry:
        outcome = parser.try_parse(content, configuration)
"""

import logging
import threading
from typing import Iterator, List, Optional, Tuple

from .base import FormatParser, OntologyFormat
from .rdf_parsers import BUILTIN_PARSERS

logger = logging.getLogger(__name__)


class FormatRegistry:
    """Thread-safe, ordered registry of FormatParser instances keyed by format key."""

    def __init__(self, parsers: Optional[List[FormatParser]] = None):
        self._parsers: List[FormatParser] = []
        self._lock = threading.Lock()
        for parser in parsers or []:
            self.register(parser)

    def register(self, parser: FormatParser, position: Optional[int] = None) -> None:
        """
        Add a parser.

        Args:
            parser: Parser instance.
            position: Priority slot; appended (lowest priority) when omitted.

        Raises:
            ValueError: If a parser for the same format key is registered.
        """
        if not isinstance(parser, FormatParser):
            raise TypeError(f"Expected a FormatParser, got {type(parser).__name__}")
        with self._lock:
            if any(existing.key == parser.key for existing in self._parsers):
                raise ValueError(f"A parser for format '{parser.key}' is already registered")
            if position is None:
                self._parsers.append(parser)
            else:
                self._parsers.insert(position, parser)
        logger.debug(f"Registered {parser!r}")

    def unregister(self, key: str) -> bool:
        """Remove the parser for a format key. Returns False if none was registered."""
        with self._lock:
            for index, parser in enumerate(self._parsers):
                if parser.key == key:
                    del self._parsers[index]
                    return True
        return False

    def get(self, key: str) -> Optional[FormatParser]:
        with self._lock:
            for parser in self._parsers:
                if parser.key == key.lower():
                    return parser
        return None

    @property
    def parsers(self) -> Tuple[FormatParser, ...]:
        """Snapshot of the parsers in priority order."""
        with self._lock:
            return tuple(self._parsers)

    def in_detection_order(self, media_type: Optional[str] = None) -> Tuple[FormatParser, ...]:
        """
        Parsers in the order they should be tried.

        Parsers registered for ``media_type`` (a declared or served
        Content-Type) move to the front; the rest keep priority order.
        """
        parsers = self.parsers
        if not media_type:
            return parsers
        media_type = media_type.split(';', 1)[0].strip().lower()
        declared = tuple(p for p in parsers if media_type in p.format.media_types)
        if not declared:
            return parsers
        return declared + tuple(p for p in parsers if p not in declared)

    @property
    def formats(self) -> Tuple[OntologyFormat, ...]:
        return tuple(parser.format for parser in self.parsers)

    def keys(self) -> List[str]:
        return [parser.key for parser in self.parsers]

    def __iter__(self) -> Iterator[FormatParser]:
        return iter(self.parsers)

    def __len__(self) -> int:
        with self._lock:
            return len(self._parsers)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None


def create_default_registry() -> FormatRegistry:
    """Registry with the built-in parsers: RDF/XML, JSON-LD, N-Triples, Turtle."""
    return FormatRegistry([parser_class() for parser_class in BUILTIN_PARSERS])
