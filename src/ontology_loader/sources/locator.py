"""
Document locators.

A locator is the absolute IRI naming a document. It is the key for "already
loaded", the target of import declarations and the fallback fetch address, so
equality is defined on a normalized string form.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union
from urllib.parse import urlsplit, urlunsplit
from urllib.request import url2pathname

DEFAULT_PORTS = {'http': 80, 'https': 443}
HIERARCHICAL_SCHEMES = {'http', 'https', 'file'}


def normalize_iri(value: str) -> str:
    """
    Normalize an absolute IRI string.

    - scheme and host are lower-cased
    - default ports are dropped
    - empty http(s) paths become "/"
    - fragments are dropped for http(s) and file IRIs (they never change the
      document that is fetched)
    """
    value = value.strip()
    parts = urlsplit(value)
    scheme = parts.scheme.lower()
    if scheme not in HIERARCHICAL_SCHEMES:
        return f"{scheme}:{value[len(parts.scheme) + 1:]}"

    netloc = parts.netloc
    if parts.hostname is not None:
        host = parts.hostname.lower()
        if ':' in host:
            host = f"[{host}]"
        userinfo = ''
        if '@' in netloc:
            userinfo = netloc.rsplit('@', 1)[0] + '@'
        port = parts.port
        if port is not None and DEFAULT_PORTS.get(scheme) != port:
            host = f"{host}:{port}"
        netloc = userinfo + host

    path = parts.path
    if scheme in ('http', 'https') and not path:
        path = '/'
    return urlunsplit((scheme, netloc, path, parts.query, ''))


def _looks_like_iri(value: str) -> bool:
    scheme = urlsplit(value).scheme
    # Single letters are Windows drive letters, not schemes
    return len(scheme) > 1


@dataclass(frozen=True)
class DocumentLocator:
    """Normalized absolute IRI of a document."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError(f"Locator must be a string, got {type(self.value).__name__}")
        if not self.value.strip():
            raise ValueError("Locator cannot be empty")
        if not _looks_like_iri(self.value.strip()):
            raise ValueError(f"Locator must be an absolute IRI: {self.value!r}")
        object.__setattr__(self, 'value', normalize_iri(self.value))

    @classmethod
    def of(cls, value: Union['DocumentLocator', str, 'os.PathLike[str]', Any]) -> 'DocumentLocator':
        """
        Coerce a locator-like value.

        Accepts DocumentLocator, IRI strings (including rdflib URIRefs) and
        filesystem paths; paths and scheme-less strings become file IRIs.
        """
        if isinstance(value, DocumentLocator):
            return value
        if isinstance(value, os.PathLike):
            return cls.from_path(value)
        if isinstance(value, str):
            text = value.strip()
            if _looks_like_iri(text):
                return cls(text)
            return cls.from_path(text)
        raise TypeError(f"Cannot build a document locator from {type(value).__name__}")

    @classmethod
    def from_path(cls, path: Union[str, 'os.PathLike[str]']) -> 'DocumentLocator':
        return cls(Path(path).expanduser().resolve().as_uri())

    @property
    def scheme(self) -> str:
        return urlsplit(self.value).scheme

    @property
    def is_file(self) -> bool:
        return self.scheme == 'file'

    @property
    def is_network(self) -> bool:
        return self.scheme in ('http', 'https')

    def to_path(self) -> Path:
        """Filesystem path of a file: locator."""
        if not self.is_file:
            raise ValueError(f"Not a file locator: {self.value}")
        parts = urlsplit(self.value)
        path = url2pathname(parts.path)
        if parts.netloc and parts.netloc != 'localhost':
            path = f"//{parts.netloc}{path}"
        return Path(path)

    def __str__(self) -> str:
        return self.value
