"""
Tests for the built-in serialization parsers: sniffing, parsing and the
three-way outcome.
"""

import json
from unittest.mock import patch
from urllib.error import URLError

import pytest
from rdflib import Graph
from rdflib.compare import isomorphic

from fixtures import (
    ANONYMOUS_TTL,
    BNODE_FIRST_TTL,
    BROKEN_JSONLD,
    BROKEN_RDFXML,
    BROKEN_TTL,
    FUNCTIONAL_SYNTAX,
    LITERAL_IMPORT_TTL,
    OWL_XML,
    PEOPLE_IRI,
    PEOPLE_JSONLD,
    PEOPLE_NT,
    PEOPLE_RDFXML,
    PEOPLE_TRIPLE_COUNT,
    PEOPLE_TTL,
    PEOPLE_VERSION_IRI,
    TWO_HEADERS_TTL,
    ntriples_then_turtle,
)
from ontology_loader.core.config import LoaderConfiguration
from ontology_loader.core.errors import OntologyIOError, OntologySyntaxError
from ontology_loader.formats import (
    JSONLD,
    NTRIPLES,
    RDFXML,
    TURTLE,
    JSONLDFormatParser,
    Matched,
    NotMySyntax,
    NTriplesFormatParser,
    RDFXMLFormatParser,
    SyntaxFailure,
    TurtleFormatParser,
)
from ontology_loader.sources.document_source import SourceAccess
from ontology_loader.sources.locator import DocumentLocator
from ontology_loader.sources.reader import DocumentContent

CONFIG = LoaderConfiguration()
STRICT = LoaderConfiguration(strict_parsing=True)

PARSERS = {
    "rdfxml": RDFXMLFormatParser(),
    "jsonld": JSONLDFormatParser(),
    "ntriples": NTriplesFormatParser(),
    "turtle": TurtleFormatParser(),
}


def _content(text, locator="http://example.org/doc"):
    return DocumentContent(locator=DocumentLocator(locator), text=text, access=SourceAccess.READER)


# =============================================================================
# Sniffing
# =============================================================================

@pytest.mark.unit
class TestSniffing:
    """Which parser claims which document."""

    @pytest.mark.parametrize("key,text", [
        ("rdfxml", PEOPLE_RDFXML),
        ("jsonld", PEOPLE_JSONLD),
        ("ntriples", PEOPLE_NT),
        ("turtle", PEOPLE_TTL),
    ])
    def test_each_parser_claims_its_serialization(self, key, text):
        assert PARSERS[key].sniff(_content(text))

    def test_rdfxml_ignores_other_serializations(self):
        parser = PARSERS["rdfxml"]
        for text in (PEOPLE_TTL, PEOPLE_JSONLD, PEOPLE_NT):
            assert not parser.sniff(_content(text))

    def test_rdfxml_ignores_owl_xml(self):
        assert not PARSERS["rdfxml"].sniff(_content(OWL_XML))

    def test_rdfxml_claims_typed_node_root(self):
        text = (
            '<owl:Ontology xmlns:owl="http://www.w3.org/2002/07/owl#" '
            'xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#" '
            'rdf:about="http://example.org/x"/>'
        )
        # Typed node roots are claimed unless the local name is Ontology
        assert not PARSERS["rdfxml"].sniff(_content(text))
        text = text.replace("owl:Ontology", "owl:Class")
        assert PARSERS["rdfxml"].sniff(_content(text))

    def test_rdfxml_skips_prolog_comments_and_doctype(self):
        text = (
            '<?xml version="1.0"?>\n'
            '<!-- generated -->\n'
            '<!DOCTYPE rdf:RDF [ <!ENTITY owl "http://www.w3.org/2002/07/owl#"> ]>\n'
            '<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"/>\n'
        )
        assert PARSERS["rdfxml"].sniff(_content(text))

    def test_ntriples_does_not_claim_turtle(self):
        assert not PARSERS["ntriples"].sniff(_content(PEOPLE_TTL))

    def test_ntriples_rejects_prefixed_names(self):
        text = "<http://example.org/a> a <http://example.org/B> .\n"
        assert not PARSERS["ntriples"].sniff(_content(text))

    def test_ntriples_accepts_blank_nodes_and_typed_literals(self):
        text = (
            "_:b0 <http://example.org/p> \"1\"^^<http://www.w3.org/2001/XMLSchema#integer> .\n"
            "# comment\n"
            "<http://example.org/a> <http://example.org/label> \"chat\"@fr .\n"
        )
        assert PARSERS["ntriples"].sniff(_content(text))

    def test_turtle_claims_iri_subject_and_prefixed_name(self):
        parser = PARSERS["turtle"]
        assert parser.sniff(_content("<urn:x> <urn:p> <urn:o> ."))
        assert parser.sniff(_content("ex:a ex:p ex:o ."))
        assert parser.sniff(_content("PREFIX ex: <http://example.org/>\nex:a ex:p ex:o ."))
        assert parser.sniff(_content("[] a <urn:C> ."))

    def test_blank_node_turtle_is_not_json(self):
        assert not PARSERS["jsonld"].sniff(_content(BNODE_FIRST_TTL))
        assert not PARSERS["ntriples"].sniff(_content(BNODE_FIRST_TTL))
        assert PARSERS["turtle"].sniff(_content(BNODE_FIRST_TTL))

    @pytest.mark.parametrize("text", [
        '[{"@id": "http://example.org/a"}]',
        '[\n  {\n    "@id": "http://example.org/a"\n  }\n]',
        '["http://example.org/a"]',
        '[ ]',
    ])
    def test_jsonld_claims_json_arrays(self, text):
        assert PARSERS["jsonld"].sniff(_content(text))

    def test_ntriples_checks_every_line(self):
        text = ntriples_then_turtle(lines=100)
        assert len(text) > 4096
        assert not PARSERS["ntriples"].sniff(_content(text))
        assert PARSERS["turtle"].sniff(_content(text))

    def test_ntriples_claims_long_documents(self):
        text = ntriples_then_turtle(lines=100).rsplit("<http://example.org/a>", 1)[0]
        assert PARSERS["ntriples"].sniff(_content(text))

    def test_nobody_claims_functional_syntax(self):
        for parser in PARSERS.values():
            assert not parser.sniff(_content(FUNCTIONAL_SYNTAX))

    def test_nobody_claims_owl_xml(self):
        for parser in PARSERS.values():
            assert not parser.sniff(_content(OWL_XML))

    def test_blank_content_is_not_claimed(self):
        for parser in PARSERS.values():
            assert not parser.sniff(_content("  \n  "))


# =============================================================================
# Parsing
# =============================================================================

@pytest.mark.unit
class TestParsing:
    """Parsed triples and header extraction."""

    def test_people_document_in_every_format(self, people_document):
        key, text = people_document
        document = PARSERS[key].parse(_content(text), CONFIG)

        assert document.format.key == key
        assert len(document.graph) == PEOPLE_TRIPLE_COUNT
        assert document.ontology_iri == PEOPLE_IRI
        assert document.version_iri == PEOPLE_VERSION_IRI
        assert document.imports == []

    def test_every_format_yields_the_same_graph(self):
        graphs = [
            PARSERS[key].parse(_content(text), CONFIG).graph
            for key, text in [
                ("turtle", PEOPLE_TTL),
                ("rdfxml", PEOPLE_RDFXML),
                ("jsonld", PEOPLE_JSONLD),
                ("ntriples", PEOPLE_NT),
            ]
        ]
        for graph in graphs[1:]:
            assert isomorphic(graphs[0], graph)

    def test_rdfxml_with_latin1_declaration(self):
        text = PEOPLE_RDFXML.replace('encoding="utf-8"', 'encoding="ISO-8859-1"').replace(
            "<rdfs:label>Person</rdfs:label>", "<rdfs:label>Personne été</rdfs:label>"
        )
        document = PARSERS["rdfxml"].parse(_content(text), CONFIG)
        labels = {str(o) for o in document.graph.objects() if str(o).startswith("Personne")}
        assert labels == {"Personne été"}

    def test_imports_in_declaration_order(self):
        text = (
            "@prefix owl: <http://www.w3.org/2002/07/owl#> .\n"
            "<http://example.org/a> a owl:Ontology ;\n"
            "    owl:imports <http://example.org/c> , <http://example.org/b> .\n"
        )
        document = PARSERS["turtle"].parse(_content(text), CONFIG)
        assert set(document.imports) == {"http://example.org/c", "http://example.org/b"}
        assert len(document.imports) == 2

    def test_relative_iris_resolve_against_locator(self):
        text = "@prefix owl: <http://www.w3.org/2002/07/owl#> .\n<> a owl:Ontology .\n"
        document = PARSERS["turtle"].parse(_content(text, "http://example.org/rel"), CONFIG)
        assert document.ontology_iri == "http://example.org/rel"

    def test_namespaces_are_reported(self):
        document = PARSERS["turtle"].parse(_content(PEOPLE_TTL), CONFIG)
        assert document.namespaces.get("owl") == "http://www.w3.org/2002/07/owl#"

    def test_anonymous_ontology(self):
        document = PARSERS["turtle"].parse(_content(ANONYMOUS_TTL), CONFIG)
        assert document.ontology_iri is None
        assert len(document.graph) == 3


@pytest.mark.unit
class TestSyntaxErrors:
    """Claimed but malformed documents."""

    def test_broken_turtle_reports_format_and_line(self):
        with pytest.raises(OntologySyntaxError) as exc_info:
            PARSERS["turtle"].parse(_content(BROKEN_TTL), CONFIG)

        error = exc_info.value
        assert error.format is TURTLE
        assert error.line == 3
        assert error.locator == "http://example.org/doc"
        assert str(error).startswith("Turtle syntax error at line 3")
        assert error.cause is not None

    def test_broken_rdfxml(self):
        with pytest.raises(OntologySyntaxError) as exc_info:
            PARSERS["rdfxml"].parse(_content(BROKEN_RDFXML), CONFIG)
        assert exc_info.value.format is RDFXML
        assert exc_info.value.line is not None

    def test_broken_jsonld(self):
        with pytest.raises(OntologySyntaxError) as exc_info:
            PARSERS["jsonld"].parse(_content(BROKEN_JSONLD), CONFIG)
        assert exc_info.value.format is JSONLD

    def test_broken_ntriples(self):
        text = "<http://example.org/a> <http://example.org/p> <http://example.org/o>\n"
        with pytest.raises(OntologySyntaxError) as exc_info:
            PARSERS["ntriples"].parse(_content(text), CONFIG)
        assert exc_info.value.format is NTRIPLES


@pytest.mark.unit
class TestParseOutcome:
    """try_parse never raises for content problems."""

    def test_matched(self):
        outcome = PARSERS["turtle"].try_parse(_content(PEOPLE_TTL), CONFIG)
        assert isinstance(outcome, Matched)
        assert outcome.format is TURTLE

    def test_not_my_syntax(self):
        outcome = PARSERS["jsonld"].try_parse(_content(PEOPLE_TTL), CONFIG)
        assert isinstance(outcome, NotMySyntax)
        assert outcome.format is JSONLD
        assert "JSON-LD" in outcome.reason

    def test_syntax_failure(self):
        outcome = PARSERS["turtle"].try_parse(_content(BROKEN_TTL), CONFIG)
        assert isinstance(outcome, SyntaxFailure)
        assert outcome.format is TURTLE
        assert outcome.error.line == 3


@pytest.mark.unit
class TestHeaderIrregularities:
    """Lenient by default, errors under strict parsing."""

    def test_literal_import_is_ignored_when_lenient(self, caplog):
        document = PARSERS["turtle"].parse(_content(LITERAL_IMPORT_TTL), CONFIG)
        assert document.imports == []
        assert "not an IRI" in caplog.text

    def test_literal_import_fails_when_strict(self):
        with pytest.raises(OntologySyntaxError) as exc_info:
            PARSERS["turtle"].parse(_content(LITERAL_IMPORT_TTL), STRICT)
        assert "not an IRI" in str(exc_info.value)

    def test_two_headers_pick_one_when_lenient(self):
        document = PARSERS["turtle"].parse(_content(TWO_HEADERS_TTL), CONFIG)
        assert document.ontology_iri in ("http://example.org/first", "http://example.org/second")

    def test_two_headers_prefer_the_document_locator(self):
        document = PARSERS["turtle"].parse(_content(TWO_HEADERS_TTL, "http://example.org/second"), CONFIG)
        assert document.ontology_iri == "http://example.org/second"

    def test_two_headers_fail_when_strict(self):
        with pytest.raises(OntologySyntaxError) as exc_info:
            PARSERS["turtle"].parse(_content(TWO_HEADERS_TTL), STRICT)
        assert "2 owl:Ontology headers" in str(exc_info.value)


# =============================================================================
# Remote JSON-LD contexts
# =============================================================================

def _jsonld_with_context(context):
    return json.dumps({
        "@context": context,
        "@id": "http://example.org/ctx-onto",
        "@type": "http://www.w3.org/2002/07/owl#Ontology",
    })


@pytest.mark.security
class TestRemoteContexts:
    """rdflib dereferences @context IRIs; they get the transport's checks."""

    def test_private_context_refused(self):
        config = LoaderConfiguration(allow_private_networks=False)
        text = _jsonld_with_context("http://127.0.0.1:9/ctx.jsonld")

        with patch.object(Graph, "parse") as graph_parse:
            with pytest.raises(OntologyIOError) as exc_info:
                PARSERS["jsonld"].parse(_content(text), config)

        assert "Refusing JSON-LD context" in str(exc_info.value)
        graph_parse.assert_not_called()

    def test_context_scheme_refused(self):
        config = LoaderConfiguration(allowed_protocols=("http", "https"))
        text = _jsonld_with_context("file:///etc/ctx.jsonld")

        with pytest.raises(OntologyIOError) as exc_info:
            PARSERS["jsonld"].parse(_content(text), config)

        assert "not allowed" in str(exc_info.value)

    def test_imported_context_in_list_is_checked(self):
        config = LoaderConfiguration(allow_private_networks=False)
        text = _jsonld_with_context([{"@import": "http://10.0.0.5/ctx.jsonld"}, {"ex": "http://example.org/"}])

        with pytest.raises(OntologyIOError):
            PARSERS["jsonld"].parse(_content(text), config)

    def test_inline_context_needs_no_fetch(self):
        config = LoaderConfiguration(allow_private_networks=False, allowed_protocols=("https",))
        document = PARSERS["jsonld"].parse(_content(PEOPLE_JSONLD), config)
        assert document.ontology_iri == PEOPLE_IRI

    def test_unreachable_context_is_an_io_error(self):
        text = _jsonld_with_context("http://example.org/ctx.jsonld")
        refused = URLError("[Errno 111] Connection refused")

        with patch.object(Graph, "parse", side_effect=refused):
            with pytest.raises(OntologyIOError) as exc_info:
                PARSERS["jsonld"].try_parse(_content(text), CONFIG)

        assert exc_info.value.cause is refused
        assert "Connection refused" in str(exc_info.value)
