"""
Document Reader

Reads a document source exactly once, honouring the access precedence
(character stream, then byte stream, then fetching the locator), decodes bytes
and enforces size limits. The result is an immutable DocumentContent that every
format attempt can inspect without touching the source again.
"""

import codecs
import logging
import re
from dataclasses import dataclass
from typing import Optional, Tuple, TYPE_CHECKING

from ..constants import SourceConfig
from ..core.errors import OntologyIOError
from ..core.memory import MemoryManager
from .document_source import DocumentSource, SourceAccess
from .locator import DocumentLocator
from .transport import DocumentFetcher

if TYPE_CHECKING:  # pragma: no cover - import for type hints only
    from ..core.config import LoaderConfiguration

logger = logging.getLogger(__name__)

_BOMS = (
    (codecs.BOM_UTF32_LE, 'utf-32'),
    (codecs.BOM_UTF32_BE, 'utf-32'),
    (codecs.BOM_UTF8, 'utf-8-sig'),
    (codecs.BOM_UTF16_LE, 'utf-16'),
    (codecs.BOM_UTF16_BE, 'utf-16'),
)

_XML_DECLARATION = re.compile(rb'^\s*<\?xml[^>]*encoding\s*=\s*["\']([A-Za-z0-9._-]+)["\']')


@dataclass(frozen=True)
class DocumentContent:
    """Decoded text of one document plus what is known about where it came from."""
    locator: DocumentLocator
    text: str
    access: SourceAccess
    media_type: Optional[str] = None
    format_hint: Optional[str] = None

    @property
    def head(self) -> str:
        """Leading part of the document used for format sniffing."""
        return self.text[:SourceConfig.SNIFF_WINDOW_CHARS].lstrip('\ufeff \t\r\n')

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()

    @property
    def size_mb(self) -> float:
        return len(self.text) / (1024 * 1024)


def detect_encoding(data: bytes, declared: Optional[str] = None) -> str:
    """
    Pick the charset for a byte document.

    Order: byte order mark, declared charset, XML declaration, UTF-8.
    """
    for bom, encoding in _BOMS:
        if data.startswith(bom):
            return encoding
    if declared:
        return declared
    match = _XML_DECLARATION.match(data[:200])
    if match:
        return match.group(1).decode('ascii')
    return SourceConfig.DEFAULT_ENCODING


def decode_bytes(data: bytes, locator: DocumentLocator, declared: Optional[str] = None) -> str:
    encoding = detect_encoding(data, declared)
    try:
        return data.decode(encoding)
    except LookupError as e:
        raise OntologyIOError(f"Unknown character encoding '{encoding}'", locator=str(locator), cause=e) from e
    except UnicodeDecodeError as e:
        raise OntologyIOError(
            f"Document is not valid {encoding}: {e.reason} at byte {e.start}",
            locator=str(locator),
            cause=e,
        ) from e


def _check_size(locator: DocumentLocator, size_mb: float, configuration: "LoaderConfiguration") -> None:
    can_proceed, message = MemoryManager.check_memory_available(
        size_mb,
        max_document_mb=configuration.max_document_mb,
        force=configuration.force_large_documents,
    )
    if not can_proceed:
        logger.error(f"Memory check failed for {locator}: {message}")
        raise OntologyIOError(message, locator=str(locator))
    logger.debug(f"Memory check for {locator}: {message}")


def _read_reader(source: DocumentSource) -> str:
    reader = source.get_reader()
    try:
        return reader.read()
    except UnicodeDecodeError as e:
        raise OntologyIOError(f"Cannot decode character stream: {e}", locator=str(source.locator), cause=e) from e
    except OSError as e:
        raise OntologyIOError(f"Cannot read character stream: {e}", locator=str(source.locator), cause=e) from e
    finally:
        reader.close()


def _read_byte_stream(source: DocumentSource) -> Tuple[bytes, Optional[str]]:
    stream = source.get_byte_stream()
    try:
        data = stream.read()
    except OSError as e:
        raise OntologyIOError(f"Cannot read byte stream: {e}", locator=str(source.locator), cause=e) from e
    finally:
        stream.close()
    return data, getattr(source, 'encoding', None)


def read_document(
    source: DocumentSource,
    fetcher: DocumentFetcher,
    configuration: "LoaderConfiguration",
) -> DocumentContent:
    """
    Consume a source and return its decoded content.

    Raises:
        OntologyIOError: If the stream or fetch fails, the bytes cannot be
            decoded, or the document exceeds the configured limits.
    """
    access = source.access_kind
    locator = source.locator
    media_type = source.media_type

    if access is SourceAccess.READER:
        text = _read_reader(source)
    elif access is SourceAccess.BYTE_STREAM:
        data, declared = _read_byte_stream(source)
        _check_size(locator, len(data) / (1024 * 1024), configuration)
        text = decode_bytes(data, locator, declared)
    else:
        fetched = fetcher.fetch(locator, configuration)
        _check_size(locator, len(fetched.data) / (1024 * 1024), configuration)
        text = decode_bytes(fetched.data, locator, fetched.charset)
        media_type = media_type or fetched.media_type

    content = DocumentContent(
        locator=locator,
        text=text,
        access=access,
        media_type=media_type,
        format_hint=source.format_hint,
    )
    if access is SourceAccess.READER:
        _check_size(locator, content.size_mb, configuration)

    logger.debug(f"Read {len(text)} characters from {locator} via {access.value}")
    return content
