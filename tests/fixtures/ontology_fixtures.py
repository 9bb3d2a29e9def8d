"""
Ontology document fixtures.

PEOPLE_* hold the same eight triples in each supported serialization so tests
can compare what every parser produces.
"""

from typing import Iterable, Optional

PEOPLE_IRI = "http://example.org/people"
PEOPLE_VERSION_IRI = "http://example.org/people/1.0"
PEOPLE_TRIPLE_COUNT = 8

# =============================================================================
# One ontology, four serializations
# =============================================================================

PEOPLE_TTL = """
@prefix : <http://example.org/people#> .
@prefix owl: <http://www.w3.org/2002/07/owl#> .
@prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#> .

<http://example.org/people> a owl:Ontology ;
    owl:versionIRI <http://example.org/people/1.0> .

:Person a owl:Class ;
    rdfs:label "Person" .

:Organization a owl:Class .

:worksFor a owl:ObjectProperty ;
    rdfs:domain :Person ;
    rdfs:range :Organization .
"""

PEOPLE_RDFXML = """<?xml version="1.0" encoding="utf-8"?>
<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
         xmlns:rdfs="http://www.w3.org/2000/01/rdf-schema#"
         xmlns:owl="http://www.w3.org/2002/07/owl#">
  <owl:Ontology rdf:about="http://example.org/people">
    <owl:versionIRI rdf:resource="http://example.org/people/1.0"/>
  </owl:Ontology>
  <owl:Class rdf:about="http://example.org/people#Person">
    <rdfs:label>Person</rdfs:label>
  </owl:Class>
  <owl:Class rdf:about="http://example.org/people#Organization"/>
  <owl:ObjectProperty rdf:about="http://example.org/people#worksFor">
    <rdfs:domain rdf:resource="http://example.org/people#Person"/>
    <rdfs:range rdf:resource="http://example.org/people#Organization"/>
  </owl:ObjectProperty>
</rdf:RDF>
"""

PEOPLE_JSONLD = """
{
  "@context": {
    "owl": "http://www.w3.org/2002/07/owl#",
    "rdfs": "http://www.w3.org/2000/01/rdf-schema#"
  },
  "@graph": [
    {
      "@id": "http://example.org/people",
      "@type": "owl:Ontology",
      "owl:versionIRI": {"@id": "http://example.org/people/1.0"}
    },
    {
      "@id": "http://example.org/people#Person",
      "@type": "owl:Class",
      "rdfs:label": "Person"
    },
    {
      "@id": "http://example.org/people#Organization",
      "@type": "owl:Class"
    },
    {
      "@id": "http://example.org/people#worksFor",
      "@type": "owl:ObjectProperty",
      "rdfs:domain": {"@id": "http://example.org/people#Person"},
      "rdfs:range": {"@id": "http://example.org/people#Organization"}
    }
  ]
}
"""

PEOPLE_NT = """\
<http://example.org/people> <http://www.w3.org/1999/02/22-rdf-syntax-ns#type> <http://www.w3.org/2002/07/owl#Ontology> .
<http://example.org/people> <http://www.w3.org/2002/07/owl#versionIRI> <http://example.org/people/1.0> .
<http://example.org/people#Person> <http://www.w3.org/1999/02/22-rdf-syntax-ns#type> <http://www.w3.org/2002/07/owl#Class> .
<http://example.org/people#Person> <http://www.w3.org/2000/01/rdf-schema#label> "Person" .
<http://example.org/people#Organization> <http://www.w3.org/1999/02/22-rdf-syntax-ns#type> <http://www.w3.org/2002/07/owl#Class> .
<http://example.org/people#worksFor> <http://www.w3.org/1999/02/22-rdf-syntax-ns#type> <http://www.w3.org/2002/07/owl#ObjectProperty> .
<http://example.org/people#worksFor> <http://www.w3.org/2000/01/rdf-schema#domain> <http://example.org/people#Person> .
<http://example.org/people#worksFor> <http://www.w3.org/2000/01/rdf-schema#range> <http://example.org/people#Organization> .
"""

# =============================================================================
# Malformed and unsupported content
# =============================================================================

# Claimed by Turtle (starts with @prefix), broken on line 3
BROKEN_TTL = """@prefix ex: <http://example.org/> .
ex:A a ex:B .
ex:C ex:p ex:D ex:E ex:F .
"""

BROKEN_RDFXML = """<?xml version="1.0"?>
<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
         xmlns:owl="http://www.w3.org/2002/07/owl#">
  <owl:Class rdf:about="http://example.org/A">
</rdf:RDF>
"""

BROKEN_JSONLD = """{"@context": {"ex": "http://example.org/"}, "@id": "ex:A", """

# OWL Functional Syntax: a real ontology serialization no registered parser handles
FUNCTIONAL_SYNTAX = """Prefix(:=<http://example.org/fss#>)
Ontology(<http://example.org/fss>
  Declaration(Class(:A))
)
"""

# OWL/XML: XML, but not RDF/XML
OWL_XML = """<?xml version="1.0"?>
<Ontology xmlns="http://www.w3.org/2002/07/owl#"
          xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
          ontologyIRI="http://example.org/owlxml">
  <Declaration><Class IRI="#A"/></Declaration>
</Ontology>
"""

# =============================================================================
# Header irregularities
# =============================================================================

LITERAL_IMPORT_TTL = """
@prefix owl: <http://www.w3.org/2002/07/owl#> .

<http://example.org/literal-import> a owl:Ontology ;
    owl:imports "http://example.org/not-an-iri" .
"""

TWO_HEADERS_TTL = """
@prefix owl: <http://www.w3.org/2002/07/owl#> .

<http://example.org/first> a owl:Ontology .
<http://example.org/second> a owl:Ontology .
"""

# Blank node subject on the first line; starts with "[" like a JSON array
BNODE_FIRST_TTL = """[] a <http://www.w3.org/2002/07/owl#Ontology> ;
    <http://www.w3.org/2000/01/rdf-schema#comment> "Header without an IRI" .
"""

ANONYMOUS_TTL = """
@prefix owl: <http://www.w3.org/2002/07/owl#> .
@prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#> .

[] a owl:Ontology ;
    rdfs:comment "No ontology IRI" .

<http://example.org/anon#A> a owl:Class .
"""


# =============================================================================
# Import graph builders
# =============================================================================

def ontology_ttl(iri: str, imports: Iterable[str] = (), label: Optional[str] = None) -> str:
    """
    Turtle document declaring an ontology, its imports and one class.

    Example:
        >>> print(ontology_ttl("http://example.org/a", ["http://example.org/b"]))
    """
    lines = [
        "@prefix owl: <http://www.w3.org/2002/07/owl#> .",
        "@prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#> .",
        "",
        f"<{iri}> a owl:Ontology .",
    ]
    for imported in imports:
        lines.append(f"<{iri}> owl:imports <{imported}> .")
    lines.append(f'<{iri}#Thing> a owl:Class ; rdfs:label "{label or iri}" .')
    return "\n".join(lines) + "\n"


def generate_import_chain(base: str, length: int) -> dict:
    """IRI -> Turtle for a chain base/0 -> base/1 -> ... -> base/<length-1>."""
    documents = {}
    for index in range(length):
        iri = f"{base}/{index}"
        imports = [f"{base}/{index + 1}"] if index + 1 < length else []
        documents[iri] = ontology_ttl(iri, imports)
    return documents


def ntriples_then_turtle(lines: int = 100) -> str:
    """Turtle whose first ``lines`` lines are plain N-Triples; the last statement uses ";"."""
    body = "".join(
        f"<http://example.org/s{i}> <http://example.org/p> <http://example.org/o{i}> .\n"
        for i in range(lines)
    )
    return body + (
        "<http://example.org/a> <http://example.org/p> <http://example.org/b> ;\n"
        "    <http://example.org/q> <http://example.org/c> .\n"
    )
