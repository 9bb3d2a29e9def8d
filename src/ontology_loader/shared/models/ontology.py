"""
In-memory ontology model.

An Ontology is the mutable target a parse fills in: an rdflib Graph of axioms
plus the header information (ontology IRI, version IRI, declared imports)
taken from the owl:Ontology declaration.
"""

from typing import Dict, Iterable, List, Optional, Tuple, TYPE_CHECKING

from rdflib import Graph
from rdflib.compare import isomorphic

from ...sources.locator import DocumentLocator

if TYPE_CHECKING:  # pragma: no cover - import for type hints only
    from ...formats.base import OntologyFormat, ParsedDocument


class Ontology:
    """
    Axioms and header of one ontology document.

    Attributes:
        document_locator: Locator of the document the ontology was read from.
        graph: Axioms as RDF triples.
        ontology_iri: IRI of the owl:Ontology header, None if anonymous.
        version_iri: owl:versionIRI of the header, if any.
        format: Serialization detected by the last successful parse.

    Example:
        >>> ontology = Ontology(DocumentLocator("http://example.org/onto"))
        >>> ontology.axiom_count
        0
    """

    def __init__(self, document_locator: DocumentLocator, graph: Optional[Graph] = None):
        self.document_locator = DocumentLocator.of(document_locator)
        self.graph = graph if graph is not None else Graph()
        self.ontology_iri: Optional[str] = None
        self.version_iri: Optional[str] = None
        self.format: Optional["OntologyFormat"] = None
        self._import_declarations: List[str] = []

    @property
    def import_declarations(self) -> List[str]:
        """Declared owl:imports IRIs in declaration order."""
        return list(self._import_declarations)

    @property
    def axiom_count(self) -> int:
        return len(self.graph)

    @property
    def is_empty(self) -> bool:
        return len(self.graph) == 0

    @property
    def is_anonymous(self) -> bool:
        return self.ontology_iri is None

    @property
    def namespaces(self) -> Dict[str, str]:
        return {prefix: str(namespace) for prefix, namespace in self.graph.namespaces()}

    def add_axioms(self, triples: Iterable[Tuple]) -> int:
        """Add triples; returns how many were new."""
        before = len(self.graph)
        for triple in triples:
            self.graph.add(triple)
        return len(self.graph) - before

    def add_import_declaration(self, iri: str) -> None:
        if iri not in self._import_declarations:
            self._import_declarations.append(iri)

    def merge(self, document: "ParsedDocument") -> int:
        """
        Merge a parsed document into this ontology.

        Triples and prefixes are added, the header is taken over unless one is
        already set, and import declarations are appended in order.

        Returns:
            Number of new triples.
        """
        added = self.add_axioms(document.graph)
        for prefix, namespace in document.namespaces.items():
            if prefix:
                self.graph.bind(prefix, namespace, override=False)
        if self.ontology_iri is None:
            self.ontology_iri = document.ontology_iri
        if self.version_iri is None:
            self.version_iri = document.version_iri
        for iri in document.imports:
            self.add_import_declaration(iri)
        return added

    def is_equivalent_to(self, other: "Ontology") -> bool:
        """Same axioms up to blank node renaming, same header and imports."""
        return (
            self.ontology_iri == other.ontology_iri
            and self.version_iri == other.version_iri
            and set(self._import_declarations) == set(other.import_declarations)
            and isomorphic(self.graph, other.graph)
        )

    def __len__(self) -> int:
        return len(self.graph)

    def __repr__(self) -> str:
        return (
            f"Ontology(locator={str(self.document_locator)!r}, "
            f"iri={self.ontology_iri!r}, axioms={len(self.graph)})"
        )
