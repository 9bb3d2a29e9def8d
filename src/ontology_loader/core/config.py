"""
Loader Configuration

Immutable option set passed unchanged down every recursive parse. Variants are
produced with ``with_options`` (or the ``with_*`` helpers) and never affect
resolutions already running with the original value.
"""

import json
import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

from ..constants import FetchConfig, MemoryLimits
from ..sources.locator import DocumentLocator

logger = logging.getLogger(__name__)


def _freeze_substitutions(mapping: Optional[Mapping[Any, Any]]) -> Mapping[DocumentLocator, Any]:
    frozen: Dict[DocumentLocator, Any] = {}
    for key, value in (mapping or {}).items():
        frozen[DocumentLocator.of(key)] = value
    return MappingProxyType(frozen)


def _freeze_locators(values: Optional[Iterable[Any]]) -> FrozenSet[DocumentLocator]:
    return frozenset(DocumentLocator.of(value) for value in (values or ()))


@dataclass(frozen=True)
class LoaderConfiguration:
    """
    Options controlling strictness, import loading and parse limits.

    Attributes:
        missing_imports_fatal: Abort the whole load when an import fails.
            When False, failed imports are reported and skipped.
        follow_imports: When False only the top-level document is parsed.
        source_substitution: Locator -> replacement document. Values may be a
            DocumentSource, a zero-argument callable returning one, a filesystem
            path or another locator string.
        strict_parsing: Turn recoverable irregularities into syntax errors.
        ignored_imports: Import locators that are never loaded.
        max_document_mb: Size cap applied to every document read.
        force_large_documents: Skip size and memory checks.
        connection_timeout: Transport timeout in seconds.
        fetch_max_attempts: Transport attempts for transient network failures.
        accept_headers: Media types sent in the HTTP Accept header.
        allowed_protocols: Locator schemes the transport may dereference.
        allow_private_networks: Permit fetching from private/loopback hosts.
    """

    missing_imports_fatal: bool = True
    follow_imports: bool = True
    source_substitution: Mapping[DocumentLocator, Any] = field(
        default_factory=lambda: MappingProxyType({})
    )
    strict_parsing: bool = False
    ignored_imports: FrozenSet[DocumentLocator] = frozenset()
    max_document_mb: float = MemoryLimits.MAX_SAFE_DOCUMENT_MB
    force_large_documents: bool = False
    connection_timeout: int = FetchConfig.DEFAULT_TIMEOUT_SECONDS
    fetch_max_attempts: int = FetchConfig.DEFAULT_MAX_ATTEMPTS
    accept_headers: Tuple[str, ...] = FetchConfig.DEFAULT_ACCEPT
    allowed_protocols: Tuple[str, ...] = FetchConfig.DEFAULT_PROTOCOLS
    allow_private_networks: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, 'source_substitution', _freeze_substitutions(self.source_substitution))
        object.__setattr__(self, 'ignored_imports', _freeze_locators(self.ignored_imports))
        object.__setattr__(self, 'accept_headers', tuple(self.accept_headers))
        object.__setattr__(
            self, 'allowed_protocols', tuple(p.lower() for p in self.allowed_protocols)
        )

        if self.max_document_mb <= 0:
            raise ValueError(f"max_document_mb must be positive, got {self.max_document_mb}")
        if self.connection_timeout <= 0:
            raise ValueError(f"connection_timeout must be positive, got {self.connection_timeout}")
        if self.fetch_max_attempts < 1:
            raise ValueError(f"fetch_max_attempts must be at least 1, got {self.fetch_max_attempts}")

    # ------------------------------------------------------------------
    # Variants
    # ------------------------------------------------------------------

    def with_options(self, **changes: Any) -> 'LoaderConfiguration':
        """Return a copy with the given options replaced."""
        return replace(self, **changes)

    def with_missing_imports_fatal(self, fatal: bool) -> 'LoaderConfiguration':
        return self.with_options(missing_imports_fatal=fatal)

    def with_follow_imports(self, follow: bool) -> 'LoaderConfiguration':
        return self.with_options(follow_imports=follow)

    def with_strict_parsing(self, strict: bool) -> 'LoaderConfiguration':
        return self.with_options(strict_parsing=strict)

    def with_substitution(self, locator: Any, replacement: Any) -> 'LoaderConfiguration':
        """Return a copy that redirects ``locator`` to ``replacement``."""
        substitutions = dict(self.source_substitution)
        substitutions[DocumentLocator.of(locator)] = replacement
        return self.with_options(source_substitution=substitutions)

    def with_ignored_import(self, locator: Any) -> 'LoaderConfiguration':
        return self.with_options(ignored_imports=self.ignored_imports | {DocumentLocator.of(locator)})

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_substitution(self, locator: Any) -> Optional[Any]:
        return self.source_substitution.get(DocumentLocator.of(locator))

    def is_ignored_import(self, locator: Any) -> bool:
        return DocumentLocator.of(locator) in self.ignored_imports

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'LoaderConfiguration':
        """
        Create a configuration from a dictionary.

        Accepts either the options at top level or under a ``"loader"`` key.
        Unknown keys are logged and ignored.
        """
        loader_config = config_dict.get('loader', config_dict)
        if not isinstance(loader_config, dict):
            raise ValueError(f"'loader' section must be an object, got {type(loader_config).__name__}")

        known = {f.name for f in fields(cls)}
        options: Dict[str, Any] = {}
        for key, value in loader_config.items():
            if key not in known:
                logger.warning(f"Ignoring unknown loader option: {key}")
                continue
            options[key] = value

        for list_option in ('accept_headers', 'allowed_protocols', 'ignored_imports'):
            if list_option in options and isinstance(options[list_option], str):
                raise ValueError(f"{list_option} must be a list, got a string")

        if 'source_substitution' in options and not isinstance(options['source_substitution'], dict):
            raise ValueError("source_substitution must be an object mapping locators to documents")

        return cls(**options)

    @classmethod
    def from_file(cls, config_path: str) -> 'LoaderConfiguration':
        """Load configuration from a JSON file."""
        if not config_path:
            raise ValueError("config_path cannot be empty")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_dict = json.load(f)
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file {config_path}: {e}")

        if not isinstance(config_dict, dict):
            raise ValueError(f"Configuration file must contain a JSON object, got {type(config_dict).__name__}")

        # Relative substitution paths are resolved against the config file
        loader_section = config_dict.get('loader', config_dict)
        substitutions = loader_section.get('source_substitution') if isinstance(loader_section, dict) else None
        if isinstance(substitutions, dict):
            base_dir = Path(config_path).resolve().parent
            resolved = {}
            for locator, target in substitutions.items():
                if isinstance(target, str) and '://' not in target and not Path(target).is_absolute():
                    target = str(base_dir / target)
                resolved[locator] = target
            loader_section['source_substitution'] = resolved

        return cls.from_dict(config_dict)


DEFAULT_CONFIGURATION = LoaderConfiguration()
