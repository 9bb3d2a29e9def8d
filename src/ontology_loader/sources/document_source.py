"""
Document Sources

A document source is "a document reachable from one or more access forms":
a locator that is always present, plus optionally a character stream and/or a
byte stream. Streams are single-use; a source is consumed by exactly one parse
attempt and then discarded.

Consumers must honour the access precedence exposed by ``access_kind``:
character stream, then byte stream, then dereferencing the locator.

Usage:
    source = StringDocumentSource(ttl_text)
    source = FileDocumentSource("ontologies/pizza.owl")
    source = StreamDocumentSource(response_body, "http://example.org/onto")
    source = IRIDocumentSource("http://xmlns.com/foaf/0.1/")
"""

import io
import itertools
import logging
from abc import ABC
from enum import Enum
from pathlib import Path
from typing import Any, BinaryIO, Optional, TextIO, Union

from ..constants import SourceConfig
from ..core.errors import OntologyIOError
from .locator import DocumentLocator

logger = logging.getLogger(__name__)

_in_memory_counter = itertools.count(1)


def next_in_memory_locator() -> DocumentLocator:
    """Generate a unique locator for a document that has no address."""
    return DocumentLocator(f"{SourceConfig.IN_MEMORY_SCHEME}:ontology{next(_in_memory_counter)}")


class SourceAccess(str, Enum):
    """How a consumer reads a source, in order of precedence."""
    READER = "reader"
    BYTE_STREAM = "byte_stream"
    LOCATOR = "locator"


class DocumentSource(ABC):
    """
    Base class for all document sources.

    Attributes:
        locator: Normalized document locator (always present).
        format_hint: Optional format key; when set only that serialization is tried.
        media_type: Optional media type reported by whoever produced the content.
    """

    def __init__(
        self,
        locator: Any,
        format_hint: Optional[str] = None,
        media_type: Optional[str] = None,
    ):
        self._locator = DocumentLocator.of(locator)
        self.format_hint = format_hint
        self.media_type = media_type
        self._consumed = False

    @property
    def locator(self) -> DocumentLocator:
        return self._locator

    @property
    def consumed(self) -> bool:
        return self._consumed

    def has_reader(self) -> bool:
        """Whether this source can produce a character stream."""
        return False

    def has_byte_stream(self) -> bool:
        """Whether this source can produce a byte stream."""
        return False

    def get_reader(self) -> TextIO:
        """Return the single-use character stream."""
        raise OntologyIOError("Source has no character stream", locator=str(self.locator))

    def get_byte_stream(self) -> BinaryIO:
        """Return the single-use byte stream."""
        raise OntologyIOError("Source has no byte stream", locator=str(self.locator))

    @property
    def access_kind(self) -> SourceAccess:
        """Highest-precedence access form this source offers."""
        if self.has_reader():
            return SourceAccess.READER
        if self.has_byte_stream():
            return SourceAccess.BYTE_STREAM
        return SourceAccess.LOCATOR

    def _claim(self) -> None:
        if self._consumed:
            raise OntologyIOError(
                "Document source has already been consumed; sources are single-use",
                locator=str(self.locator),
            )
        self._consumed = True

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(locator={str(self.locator)!r}, access={self.access_kind.value})"


class StringDocumentSource(DocumentSource):
    """In-memory document text."""

    def __init__(
        self,
        text: str,
        locator: Optional[Any] = None,
        format_hint: Optional[str] = None,
        media_type: Optional[str] = None,
    ):
        if not isinstance(text, str):
            raise TypeError(f"text must be a string, got {type(text).__name__}")
        super().__init__(
            locator if locator is not None else next_in_memory_locator(),
            format_hint=format_hint,
            media_type=media_type,
        )
        self._text = text

    def has_reader(self) -> bool:
        return True

    def get_reader(self) -> TextIO:
        self._claim()
        return io.StringIO(self._text)


class ReaderDocumentSource(DocumentSource):
    """Caller-supplied character stream."""

    def __init__(
        self,
        reader: TextIO,
        locator: Optional[Any] = None,
        format_hint: Optional[str] = None,
        media_type: Optional[str] = None,
    ):
        super().__init__(
            locator if locator is not None else next_in_memory_locator(),
            format_hint=format_hint,
            media_type=media_type,
        )
        self._reader = reader

    def has_reader(self) -> bool:
        return True

    def get_reader(self) -> TextIO:
        self._claim()
        return self._reader


class StreamDocumentSource(DocumentSource):
    """
    Caller-supplied byte stream.

    Args:
        stream: Binary file-like object.
        locator: Locator the bytes came from.
        encoding: Declared charset, if the producer knows it.
    """

    def __init__(
        self,
        stream: BinaryIO,
        locator: Optional[Any] = None,
        encoding: Optional[str] = None,
        format_hint: Optional[str] = None,
        media_type: Optional[str] = None,
    ):
        super().__init__(
            locator if locator is not None else next_in_memory_locator(),
            format_hint=format_hint,
            media_type=media_type,
        )
        self._stream = stream
        self.encoding = encoding

    def has_byte_stream(self) -> bool:
        return True

    def get_byte_stream(self) -> BinaryIO:
        self._claim()
        return self._stream


class FileDocumentSource(DocumentSource):
    """Local file, opened lazily as a byte stream."""

    def __init__(
        self,
        path: Union[str, Path],
        format_hint: Optional[str] = None,
        media_type: Optional[str] = None,
    ):
        self.path = Path(path).expanduser().resolve()
        super().__init__(
            DocumentLocator.from_path(self.path),
            format_hint=format_hint,
            media_type=media_type,
        )
        self.encoding: Optional[str] = None

    def has_byte_stream(self) -> bool:
        return True

    def get_byte_stream(self) -> BinaryIO:
        self._claim()
        try:
            return open(self.path, 'rb')
        except FileNotFoundError as e:
            raise OntologyIOError(f"File not found: {self.path}", locator=str(self.locator), cause=e) from e
        except OSError as e:
            raise OntologyIOError(f"Cannot open {self.path}: {e}", locator=str(self.locator), cause=e) from e


class IRIDocumentSource(DocumentSource):
    """Locator only; content is fetched by the transport."""
    pass
