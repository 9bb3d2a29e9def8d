"""
Import Resolution

Drives the transitive closure of owl:imports. Every recursive parse of one
top-level call shares a single ResolutionContext, which records each locator
the tree has touched so cycles terminate and shared dependencies load once.
Independent top-level calls get independent contexts; the manager's registry is
the only thing they share.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, TYPE_CHECKING

from .core.cancellation import CancellationToken
from .core.config import LoaderConfiguration
from .core.errors import (
    LoadCancelledError,
    OntologyIOError,
    OntologyLoadError,
    UnloadableImportError,
)
from .shared.models import MissingImport, Ontology
from .sources.document_source import DocumentSource, IRIDocumentSource
from .sources.locator import DocumentLocator

if TYPE_CHECKING:  # pragma: no cover - import for type hints only
    from .manager import OntologyManager
    from .parser import OntologyParser

logger = logging.getLogger(__name__)


class ImportState(str, Enum):
    IN_PROGRESS = "in_progress"
    LOADED = "loaded"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class ResolutionContext:
    """
    State of one resolution tree.

    Not thread-safe: a tree resolves its imports sequentially.

    Attributes:
        configuration: Options passed unchanged to every recursive parse.
        cancellation_token: Checked before each recursive import.
        depth: Current import nesting (0 for the top-level document).
        missing_imports: Failed imports, in tolerant mode.
        loaded_imports: Imports loaded by this tree, in load order.
    """
    configuration: LoaderConfiguration
    cancellation_token: Optional[CancellationToken] = None
    depth: int = 0
    missing_imports: List[MissingImport] = field(default_factory=list)
    loaded_imports: List[DocumentLocator] = field(default_factory=list)
    _closure: Dict[DocumentLocator, ImportState] = field(default_factory=dict)

    def state_of(self, locator: DocumentLocator) -> Optional[ImportState]:
        return self._closure.get(locator)

    def is_known(self, locator: DocumentLocator) -> bool:
        return locator in self._closure

    def mark_in_progress(self, locator: DocumentLocator) -> None:
        self._closure[locator] = ImportState.IN_PROGRESS

    def mark_loaded(self, locator: DocumentLocator) -> None:
        self._closure[locator] = ImportState.LOADED

    def mark_failed(self, locator: DocumentLocator) -> None:
        self._closure[locator] = ImportState.FAILED

    def mark_skipped(self, locator: DocumentLocator) -> None:
        self._closure[locator] = ImportState.SKIPPED

    @property
    def closure(self) -> Dict[DocumentLocator, ImportState]:
        return dict(self._closure)

    def check_cancelled(self) -> None:
        if self.cancellation_token is not None:
            self.cancellation_token.throw_if_cancelled()


class ImportResolver:
    """
    Loads the declared imports of a parsed ontology into sibling ontologies.

    Args:
        parser: Parser used for the recursive parses.
        manager: Creates and registers the sibling ontologies.
    """

    def __init__(self, parser: "OntologyParser", manager: "OntologyManager"):
        self._parser = parser
        self._manager = manager

    def resolve(self, ontology: Ontology, imports: List[str], context: ResolutionContext) -> None:
        """
        Load each import in declaration order.

        Raises:
            UnloadableImportError: An import failed and missing imports are fatal.
            LoadCancelledError: The token was cancelled before an import started.
        """
        importer = ontology.document_locator
        configuration = context.configuration

        for iri in imports:
            try:
                locator = DocumentLocator.of(iri)
            except (TypeError, ValueError) as e:
                self._handle_failure(
                    None, importer, OntologyIOError(f"Invalid import IRI {iri!r}: {e}", cause=e), context,
                    label=iri,
                )
                continue

            if configuration.is_ignored_import(locator):
                logger.info(f"Ignoring import {locator} declared by {importer}")
                if not context.is_known(locator):
                    context.mark_skipped(locator)
                continue

            state = context.state_of(locator)
            if state is not None:
                logger.debug(f"Import {locator} already {state.value} in this load")
                if state in (ImportState.LOADED, ImportState.IN_PROGRESS):
                    self._manager.add_import(importer, locator)
                continue

            if self._manager.contains(locator):
                logger.debug(f"Reusing already loaded ontology for {locator}")
                context.mark_loaded(locator)
                self._manager.add_import(importer, locator)
                continue

            context.check_cancelled()
            self._load_import(locator, importer, context)

    def _load_import(
        self, locator: DocumentLocator, importer: DocumentLocator, context: ResolutionContext
    ) -> None:
        configuration = context.configuration
        context.mark_in_progress(locator)
        logger.info(f"{'  ' * context.depth}Loading import {locator} (from {importer})")

        sibling = self._manager.create_ontology(locator)
        context.depth += 1
        try:
            source = self.source_for(locator, configuration)
            self._parser.parse_document(source, sibling, context)
        except (LoadCancelledError, UnloadableImportError):
            context.mark_failed(locator)
            raise
        except OntologyLoadError as e:
            self._handle_failure(locator, importer, e, context)
            return
        finally:
            context.depth -= 1

        self._manager.register(locator, sibling)
        self._manager.add_import(importer, locator)
        context.mark_loaded(locator)
        context.loaded_imports.append(locator)
        logger.info(
            f"{'  ' * context.depth}Loaded import {locator} "
            f"({sibling.axiom_count} axioms, {sibling.format})"
        )

    def _handle_failure(
        self,
        locator: Optional[DocumentLocator],
        importer: DocumentLocator,
        error: OntologyLoadError,
        context: ResolutionContext,
        label: Optional[str] = None,
    ) -> None:
        name = label or str(locator)
        if locator is not None:
            context.mark_failed(locator)

        if context.configuration.missing_imports_fatal:
            logger.error(f"Import {name} declared by {importer} could not be loaded: {error}")
            raise UnloadableImportError(name, importer=str(importer), cause=error) from error

        logger.warning(f"Skipping missing import {name} declared by {importer}: {error}")
        context.missing_imports.append(
            MissingImport(locator=locator if locator is not None else name, importer=importer, cause=error)
        )

    @staticmethod
    def source_for(locator: DocumentLocator, configuration: LoaderConfiguration) -> DocumentSource:
        """
        Build a fresh document source for an import.

        A substitution can be a DocumentSource, a zero-argument factory
        returning one, a filesystem path or another locator. Without a
        substitution the import is fetched from its own locator.
        """
        replacement = configuration.get_substitution(locator)
        if replacement is None:
            return IRIDocumentSource(locator)

        if isinstance(replacement, DocumentSource):
            source = replacement
        elif callable(replacement):
            source = replacement()
            if not isinstance(source, DocumentSource):
                raise OntologyIOError(
                    f"Substitution factory returned {type(source).__name__}, expected a DocumentSource",
                    locator=str(locator),
                )
        else:
            try:
                source = IRIDocumentSource(DocumentLocator.of(replacement))
            except (TypeError, ValueError) as e:
                raise OntologyIOError(
                    f"Invalid substitution {replacement!r}: {e}", locator=str(locator), cause=e
                ) from e

        if source.consumed:
            raise OntologyIOError(
                "Substituted document source has already been consumed; use a factory",
                locator=str(locator),
            )
        logger.debug(f"Substituting {source!r} for import {locator}")
        return source
