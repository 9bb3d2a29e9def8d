"""
Exception hierarchy for ontology loading.

Every failure surfaced by a parse is an ``OntologyLoadError`` carrying the
locator of the document that caused it and, where there is one, the
underlying exception:

- OntologySyntaxError: a serialization claimed the document but rejected it
- OntologyIOError: the document could not be read or fetched
- UnrecognizedFormatError: no registered serialization claimed the document
- UnloadableImportError: an import failed while missing imports are fatal
- LoadCancelledError: the resolution tree was cancelled between imports
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - import for type hints only
    from ..formats.base import OntologyFormat


class OntologyLoadError(Exception):
    """Base class for all loading failures."""

    def __init__(
        self,
        message: str,
        locator: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.message = message
        self.locator = locator
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.locator:
            return f"{self.message} [document: {self.locator}]"
        return self.message


class OntologySyntaxError(OntologyLoadError):
    """A serialization recognized the document but its content is malformed."""

    def __init__(
        self,
        message: str,
        locator: Optional[str] = None,
        format: Optional["OntologyFormat"] = None,
        line: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        self.format = format
        self.line = line
        super().__init__(message, locator=locator, cause=cause)

    @property
    def format_name(self) -> Optional[str]:
        return self.format.name if self.format is not None else None

    def __str__(self) -> str:
        parts = []
        if self.format is not None:
            parts.append(f"{self.format.name} syntax error")
        else:
            parts.append("Syntax error")
        if self.line is not None:
            parts.append(f"at line {self.line}")
        text = " ".join(parts) + f": {self.message}"
        if self.locator:
            text += f" [document: {self.locator}]"
        return text


class OntologyIOError(OntologyLoadError):
    """The document stream or network location could not be read."""
    pass


class UnrecognizedFormatError(OntologyLoadError):
    """No registered serialization parser claimed the document."""
    pass


class UnloadableImportError(OntologyLoadError):
    """A declared import could not be loaded and missing imports are fatal."""

    def __init__(
        self,
        import_locator: str,
        importer: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.import_locator = import_locator
        self.importer = importer
        reason = f": {cause}" if cause is not None else ""
        super().__init__(
            f"Could not load import {import_locator}{reason}",
            locator=import_locator,
            cause=cause,
        )


class LoadCancelledError(OntologyLoadError):
    """Raised when a resolution tree is cancelled before the next import."""
    pass
