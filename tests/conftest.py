"""
Pytest configuration and fixtures for the test suite.

Defines markers for selective test execution:
    pytest -m unit          # Fast unit tests
    pytest -m integration   # Whole load runs across several documents
    pytest -m security      # SSRF and transport restrictions
    pytest -m resilience    # Retries and cancellation

Fixtures are centralized in tests/fixtures/ for reuse across all test modules.
"""

import os
import sys

import pytest

# IMPORTANT: Patch tenacity's sleep function BEFORE any other imports
# This must happen before tenacity.Retrying class is defined (which captures defaults)
import tenacity.nap
tenacity.nap.sleep = lambda seconds: None

# Add src to path for imports
src_dir = os.path.join(os.path.dirname(__file__), '..', 'src')
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

# Add tests directory to path for fixtures import
tests_dir = os.path.dirname(__file__)
if tests_dir not in sys.path:
    # Ensure src directory stays ahead of tests for module resolution
    sys.path.insert(1, tests_dir)

from fixtures import (
    PEOPLE_TTL,
    PEOPLE_RDFXML,
    PEOPLE_JSONLD,
    PEOPLE_NT,
    InMemoryFetcher,
)

from ontology_loader.core.config import LoaderConfiguration
from ontology_loader.manager import OntologyManager


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "integration: Whole load runs across several documents")
    config.addinivalue_line("markers", "security: SSRF and transport restriction tests")
    config.addinivalue_line("markers", "resilience: Retry and cancellation tests")


# =============================================================================
# Document Fixtures
# =============================================================================

@pytest.fixture
def people_ttl():
    return PEOPLE_TTL


@pytest.fixture(params=[
    ("turtle", PEOPLE_TTL),
    ("rdfxml", PEOPLE_RDFXML),
    ("jsonld", PEOPLE_JSONLD),
    ("ntriples", PEOPLE_NT),
], ids=["turtle", "rdfxml", "jsonld", "ntriples"])
def people_document(request):
    """(format key, content) for the same ontology in every serialization."""
    return request.param


@pytest.fixture
def people_file(tmp_path):
    """The people ontology written to a .ttl file."""
    path = tmp_path / "people.ttl"
    path.write_text(PEOPLE_TTL, encoding='utf-8')
    return path


# =============================================================================
# Loader Fixtures
# =============================================================================

@pytest.fixture
def fetcher():
    """Empty in-memory transport; add documents with fetcher.add(iri, text)."""
    return InMemoryFetcher()


@pytest.fixture
def manager(fetcher):
    """Manager whose loads go through the in-memory transport."""
    return OntologyManager(fetcher=fetcher)


@pytest.fixture
def tolerant_config():
    return LoaderConfiguration(missing_imports_fatal=False)
