"""
Validation utilities for the ontology loader.

- url.py: URLValidator - SSRF protection for document locators
"""

from .url import URLValidator

__all__ = [
    'URLValidator',
]
