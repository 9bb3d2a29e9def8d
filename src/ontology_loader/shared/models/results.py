"""
Parse results and missing-import reports.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union, TYPE_CHECKING

from ...sources.locator import DocumentLocator

if TYPE_CHECKING:  # pragma: no cover - import for type hints only
    from ...formats.base import OntologyFormat
    from .ontology import Ontology


@dataclass
class MissingImport:
    """An import that could not be loaded while missing imports were tolerated."""
    locator: Union[DocumentLocator, str]
    importer: Optional[DocumentLocator]
    cause: BaseException

    @property
    def reason(self) -> str:
        return str(self.cause)

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "locator": str(self.locator),
            "importer": str(self.importer) if self.importer is not None else None,
            "error": self.cause.__class__.__name__,
            "reason": self.reason,
        }


@dataclass
class ParseResult:
    """
    Outcome of loading one top-level document and its imports.

    ``format`` is the serialization of the top-level document only; the
    formats of imported documents are recorded on their own ontologies.
    """
    format: "OntologyFormat"
    ontology: "Ontology"
    loaded_imports: List[DocumentLocator] = field(default_factory=list)
    missing_imports: List[MissingImport] = field(default_factory=list)

    @property
    def has_missing_imports(self) -> bool:
        return len(self.missing_imports) > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "locator": str(self.ontology.document_locator),
            "ontology_iri": self.ontology.ontology_iri,
            "version_iri": self.ontology.version_iri,
            "format": self.format.name,
            "axioms": self.ontology.axiom_count,
            "imports": self.ontology.import_declarations,
            "loaded_imports": [str(locator) for locator in self.loaded_imports],
            "missing_imports": [missing.to_dict() for missing in self.missing_imports],
        }

    def get_summary(self) -> str:
        """Generate human-readable summary of the load."""
        lines = [
            "Load Summary:",
            f"  Document: {self.ontology.document_locator}",
            f"  Format: {self.format.name}",
            f"  Ontology IRI: {self.ontology.ontology_iri or '(anonymous)'}",
            f"  Axioms: {self.ontology.axiom_count}",
            f"  Imports loaded: {len(self.loaded_imports)}",
        ]
        if self.missing_imports:
            lines.append(f"  ⚠ Missing imports: {len(self.missing_imports)}")
            for missing in self.missing_imports[:5]:
                lines.append(f"      - {missing.locator}")
                lines.append(f"        Reason: {missing.reason}")
            if len(self.missing_imports) > 5:
                lines.append(f"      ... and {len(self.missing_imports) - 5} more")
        return "\n".join(lines)
