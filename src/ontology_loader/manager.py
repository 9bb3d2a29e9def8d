"""
Ontology Manager

Owns every loaded ontology and the import edges between them. Registration is
guarded by a re-entrant lock so independent resolution trees can load
unrelated ontologies on separate threads.

Usage:
    manager = OntologyManager()
    result = manager.load_ontology("ontologies/pizza.owl")
    for ontology in manager.get_imports_closure(result.ontology):
        print(ontology.ontology_iri, ontology.axiom_count)
"""

import logging
import threading
from typing import Any, Dict, List, Optional, Union

from .core.cancellation import CancellationToken
from .core.config import LoaderConfiguration
from .formats.registry import FormatRegistry
from .parser import OntologyParser, as_document_source
from .shared.models import MissingImport, Ontology, ParseResult
from .sources.locator import DocumentLocator
from .sources.transport import DocumentFetcher

logger = logging.getLogger(__name__)

OntologyRef = Union[Ontology, DocumentLocator, str]


class OntologyManager:
    """
    Registry of loaded ontologies.

    Ontologies are keyed by document locator and can also be looked up by
    their ontology IRI.

    Args:
        registry: Serialization parsers used by load_ontology.
        fetcher: Transport used by load_ontology.
    """

    def __init__(
        self,
        registry: Optional[FormatRegistry] = None,
        fetcher: Optional[DocumentFetcher] = None,
    ):
        self._lock = threading.RLock()
        self._ontologies: Dict[DocumentLocator, Ontology] = {}
        self._by_iri: Dict[DocumentLocator, DocumentLocator] = {}
        self._imports: Dict[DocumentLocator, List[DocumentLocator]] = {}
        self._missing: List[MissingImport] = []
        self._registry = registry
        self._fetcher = fetcher
        self._parser: Optional[OntologyParser] = None

    @property
    def parser(self) -> OntologyParser:
        with self._lock:
            if self._parser is None:
                self._parser = OntologyParser(self, registry=self._registry, fetcher=self._fetcher)
            return self._parser

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def create_ontology(self, locator: Any) -> Ontology:
        """Create an empty, unregistered ontology for a document."""
        return Ontology(DocumentLocator.of(locator))

    def register(self, locator: Any, ontology: Ontology) -> None:
        """
        Register a loaded ontology.

        Raises:
            ValueError: If a different ontology is registered for the locator.
        """
        key = DocumentLocator.of(locator)
        with self._lock:
            existing = self._ontologies.get(key)
            if existing is not None and existing is not ontology:
                raise ValueError(f"An ontology is already registered for {key}")
            self._ontologies[key] = ontology
            if ontology.ontology_iri:
                try:
                    iri = DocumentLocator.of(ontology.ontology_iri)
                except (TypeError, ValueError):
                    iri = None
                if iri is not None and iri != key:
                    self._by_iri.setdefault(iri, key)
        logger.debug(f"Registered ontology {key} ({ontology.axiom_count} axioms)")

    def _resolve_key(self, ref: OntologyRef) -> Optional[DocumentLocator]:
        if isinstance(ref, Ontology):
            return ref.document_locator
        return self._canonical(DocumentLocator.of(ref))

    def _canonical(self, key: DocumentLocator) -> DocumentLocator:
        """Edge targets recorded under an ontology IRI map to the registered locator."""
        if key in self._ontologies:
            return key
        return self._by_iri.get(key, key)

    def get_ontology(self, locator: Any) -> Optional[Ontology]:
        """Look up an ontology by document locator or ontology IRI."""
        with self._lock:
            key = self._resolve_key(locator)
            return self._ontologies.get(key) if key is not None else None

    def contains(self, locator: Any) -> bool:
        return self.get_ontology(locator) is not None

    @property
    def ontologies(self) -> List[Ontology]:
        """Registered ontologies in registration order."""
        with self._lock:
            return list(self._ontologies.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._ontologies)

    # ------------------------------------------------------------------
    # Imports
    # ------------------------------------------------------------------

    def add_import(self, importer: OntologyRef, imported: OntologyRef) -> None:
        """Record that ``importer`` imports ``imported``."""
        with self._lock:
            source = self._resolve_key(importer)
            target = self._resolve_key(imported)
            edges = self._imports.setdefault(source, [])
            if target not in edges:
                edges.append(target)

    def get_direct_imports(self, ontology: OntologyRef) -> List[Ontology]:
        """Registered ontologies imported directly, in declaration order."""
        with self._lock:
            key = self._resolve_key(ontology)
            result = []
            for target in self._imports.get(key, []):
                imported = self._ontologies.get(self._canonical(target))
                if imported is not None:
                    result.append(imported)
            return result

    def get_imports_closure(self, ontology: OntologyRef) -> List[Ontology]:
        """
        The ontology followed by everything it imports transitively.

        Unregistered starting points are included only when passed as an
        Ontology instance.
        """
        with self._lock:
            start_key = self._resolve_key(ontology)
            start = ontology if isinstance(ontology, Ontology) else self._ontologies.get(start_key)
            closure: List[Ontology] = [start] if start is not None else []
            seen = {start_key}
            queue = [start_key]
            while queue:
                current = queue.pop(0)
                for target in self._imports.get(current, []):
                    target = self._canonical(target)
                    if target in seen:
                        continue
                    seen.add(target)
                    imported = self._ontologies.get(target)
                    if imported is not None:
                        closure.append(imported)
                        queue.append(target)
            return closure

    def get_missing_imports(self) -> List[MissingImport]:
        """Imports that failed in tolerant loads performed through this manager."""
        with self._lock:
            return list(self._missing)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_ontology(
        self,
        document: Any,
        configuration: Optional[LoaderConfiguration] = None,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> ParseResult:
        """
        Load a document and its imports and register the result.

        If the document is already registered, the registered ontology is
        returned without parsing again.
        """
        source = as_document_source(document)
        existing = self.get_ontology(source.locator)
        if existing is not None and existing.format is not None:
            logger.info(f"Ontology {source.locator} is already loaded")
            return ParseResult(format=existing.format, ontology=existing)

        ontology = self.create_ontology(source.locator)
        result = self.parser.parse_with_result(source, ontology, configuration, cancellation_token)
        self.register(source.locator, ontology)
        with self._lock:
            self._missing.extend(result.missing_imports)
        return result
