"""
CLI command implementations.

- BaseCommand: logging setup shared by all commands
- LoadCommand: load a document and its imports, print a summary or report
- FormatsCommand: list registered serializations in detection order
"""

import argparse
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from ..constants import ExitCode, LoggingConfig
from ..core.cancellation import (
    SimpleCancellationToken,
    restore_default_handler,
    setup_cancellation_handler,
)
from ..core.config import LoaderConfiguration
from ..core.errors import (
    LoadCancelledError,
    OntologyIOError,
    OntologyLoadError,
    OntologySyntaxError,
    UnloadableImportError,
    UnrecognizedFormatError,
)
from ..core.validators.url import URLValidator
from ..formats.registry import FormatRegistry, create_default_registry
from ..manager import OntologyManager
from ..shared.models import ParseResult
from ..sources.document_source import DocumentSource, FileDocumentSource, IRIDocumentSource
from .helpers import (
    load_configuration,
    load_logging_section,
    print_footer,
    print_header,
    setup_logging,
)

logger = logging.getLogger(__name__)


class BaseCommand(ABC):
    """
    Base class for CLI commands.

    Subclasses implement execute() and return an ExitCode.
    """

    def setup_logging_from_args(self, args: argparse.Namespace) -> None:
        """Command-line flags win over the "logging" section of --config."""
        log_config = load_logging_section(getattr(args, 'config', None))
        setup_logging(
            level=getattr(args, 'log_level', None) or log_config.get('level', LoggingConfig.DEFAULT_LOG_LEVEL),
            log_file=getattr(args, 'log_file', None) or log_config.get('file'),
            format_style=getattr(args, 'log_format', None) or log_config.get('format', LoggingConfig.DEFAULT_FORMAT_STYLE),
        )

    @abstractmethod
    def execute(self, args: argparse.Namespace) -> int:
        """
        Execute the command.

        Args:
            args: Parsed command-line arguments.

        Returns:
            Exit code (0 for success, non-zero for error).
        """
        pass


def _parse_substitution(value: str) -> Dict[str, str]:
    iri, sep, location = value.partition('=')
    if not sep or not iri.strip() or not location.strip():
        raise ValueError(f"Invalid --substitute value '{value}'; expected IRI=LOCATION")
    return {iri.strip(): location.strip()}


class LoadCommand(BaseCommand):
    """
    Load a document and its import closure.

    Usage:
        load <document> [options]
    """

    def __init__(self, manager: Optional[OntologyManager] = None):
        self._manager = manager

    def build_configuration(self, args: argparse.Namespace) -> LoaderConfiguration:
        """Configuration file first, then command-line overrides."""
        configuration = load_configuration(getattr(args, 'config', None))
        changes: Dict[str, Any] = {}
        if getattr(args, 'no_imports', False):
            changes['follow_imports'] = False
        if getattr(args, 'tolerant', False):
            changes['missing_imports_fatal'] = False
        if getattr(args, 'strict', False):
            changes['strict_parsing'] = True
        if getattr(args, 'force_memory', False):
            changes['force_large_documents'] = True
        if getattr(args, 'timeout', None) is not None:
            changes['connection_timeout'] = args.timeout
        if changes:
            configuration = configuration.with_options(**changes)

        for iri in getattr(args, 'ignore_import', None) or []:
            configuration = configuration.with_ignored_import(iri)
        for value in getattr(args, 'substitute', None) or []:
            for iri, location in _parse_substitution(value).items():
                configuration = configuration.with_substitution(iri, location)
        return configuration

    @staticmethod
    def build_source(document: str, format_hint: Optional[str] = None) -> DocumentSource:
        if URLValidator.is_url(document) or document.lower().startswith('file:'):
            return IRIDocumentSource(document, format_hint=format_hint)
        return FileDocumentSource(document, format_hint=format_hint)

    def execute(self, args: argparse.Namespace) -> int:
        self.setup_logging_from_args(args)

        try:
            configuration = self.build_configuration(args)
        except FileNotFoundError as e:
            print(f"✗ {e}")
            return ExitCode.CONFIG_ERROR
        except (TypeError, ValueError) as e:
            print(f"✗ Invalid configuration: {e}")
            return ExitCode.CONFIG_ERROR

        manager = self._manager if self._manager is not None else OntologyManager()
        token = SimpleCancellationToken()
        previous_handler = setup_cancellation_handler(token)
        try:
            source = self.build_source(args.document, getattr(args, 'format_hint', None))
            result = manager.load_ontology(source, configuration, cancellation_token=token)
        except (TypeError, ValueError) as e:
            print(f"✗ Invalid document: {e}")
            return ExitCode.ERROR
        except OntologySyntaxError as e:
            print(f"✗ {e}")
            return ExitCode.SYNTAX_ERROR
        except UnrecognizedFormatError as e:
            print(f"✗ {e}")
            return ExitCode.UNRECOGNIZED_FORMAT
        except UnloadableImportError as e:
            print(f"✗ {e}")
            print("  Use --tolerant to load anyway, or --substitute/--ignore-import for this import.")
            return ExitCode.IMPORT_ERROR
        except OntologyIOError as e:
            print(f"✗ {e}")
            return ExitCode.IO_ERROR
        except LoadCancelledError as e:
            print(f"✗ {e}")
            return ExitCode.CANCELLED
        except OntologyLoadError as e:
            print(f"✗ {e}")
            return ExitCode.ERROR
        finally:
            restore_default_handler(previous_handler)

        report = self.build_report(result, manager)
        if getattr(args, 'json', False):
            print(json.dumps(report, indent=2))
        else:
            print_header("Ontology Loaded")
            print(result.get_summary())
            print_footer()

        output = getattr(args, 'output', None)
        if output:
            output_path = Path(output)
            try:
                output_path.parent.mkdir(parents=True, exist_ok=True)
                with open(output_path, 'w', encoding='utf-8') as f:
                    json.dump(report, f, indent=2)
            except OSError as e:
                print(f"✗ Could not write report: {e}")
                return ExitCode.IO_ERROR
            print(f"Report saved to: {output_path}")

        if result.has_missing_imports:
            print(f"⚠ {len(result.missing_imports)} import(s) could not be loaded")
        else:
            print("✓ Load successful!")
        return ExitCode.SUCCESS

    @staticmethod
    def build_report(result: ParseResult, manager: OntologyManager) -> Dict[str, Any]:
        report = result.to_dict()
        report["closure"] = [
            {
                "locator": str(ontology.document_locator),
                "ontology_iri": ontology.ontology_iri,
                "format": ontology.format.name if ontology.format else None,
                "axioms": ontology.axiom_count,
            }
            for ontology in manager.get_imports_closure(result.ontology)
        ]
        return report


class FormatsCommand(BaseCommand):
    """List registered serializations in the order they are tried."""

    def __init__(self, registry: Optional[FormatRegistry] = None):
        self._registry = registry

    def execute(self, args: argparse.Namespace) -> int:
        self.setup_logging_from_args(args)
        registry = self._registry if self._registry is not None else create_default_registry()
        print_header("Supported formats (detection order)")
        for index, fmt in enumerate(registry.formats, start=1):
            extensions = ", ".join(fmt.file_extensions) or "-"
            media_types = ", ".join(fmt.media_types) or "-"
            print(f"  {index}. {fmt.name} [{fmt.key}]")
            print(f"       media types: {media_types}")
            print(f"       extensions:  {extensions}")
        print_footer()
        return ExitCode.SUCCESS
