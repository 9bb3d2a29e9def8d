"""
CLI argument parser configuration.

Command Structure:
    - load <document> [--format KEY] [--no-imports] [--tolerant] ...
    - formats
"""

import argparse
from typing import Optional

from ..constants import LoggingConfig


# ============================================================================
# Shared Flag Group Builders
# ============================================================================

def add_logging_flags(parser: argparse.ArgumentParser) -> None:
    """Add logging flags."""
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        type=str.upper,
        default=None,
        help=f'Log level (default: {LoggingConfig.DEFAULT_LOG_LEVEL})'
    )
    parser.add_argument(
        '--log-format',
        choices=list(LoggingConfig.SUPPORTED_FORMATS),
        default=None,
        help='Log output style (default: text)'
    )
    parser.add_argument(
        '--log-file',
        help='Also write logs to this file'
    )


def add_config_flags(parser: argparse.ArgumentParser) -> None:
    """Add configuration file flag."""
    parser.add_argument(
        '--config', '-c',
        help='Path to a JSON configuration file (options under "loader")'
    )


def add_import_flags(parser: argparse.ArgumentParser) -> None:
    """Add import-resolution flags."""
    parser.add_argument(
        '--no-imports',
        action='store_true',
        help='Parse only the given document; do not load owl:imports'
    )
    parser.add_argument(
        '--tolerant',
        action='store_true',
        help='Report imports that cannot be loaded instead of failing'
    )
    parser.add_argument(
        '--ignore-import',
        action='append',
        default=[],
        metavar='IRI',
        help='Never load this import (repeatable)'
    )
    parser.add_argument(
        '--substitute',
        action='append',
        default=[],
        metavar='IRI=LOCATION',
        help='Load import IRI from a local path or another IRI (repeatable)'
    )


def add_parsing_flags(parser: argparse.ArgumentParser) -> None:
    """Add parsing and resource flags."""
    parser.add_argument(
        '--format',
        dest='format_hint',
        help='Skip detection and parse the document as this format (see "formats")'
    )
    parser.add_argument(
        '--strict',
        action='store_true',
        help='Treat recoverable irregularities as syntax errors'
    )
    parser.add_argument(
        '--force-memory',
        action='store_true',
        help='Skip document size and memory safety checks (use with caution)'
    )
    parser.add_argument(
        '--timeout',
        type=int,
        default=None,
        help='Network timeout in seconds'
    )


# ============================================================================
# Main Parser Factory
# ============================================================================

def create_argument_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    """
    Create and configure the main argument parser.

    Returns:
        Configured ArgumentParser with all subcommands.
    """
    parser = argparse.ArgumentParser(
        prog=prog,
        description="Load ontology documents and resolve their owl:imports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Load a local document and everything it imports
    %(prog)s load ontologies/pizza.owl

    # Load from the web, tolerating unreachable imports
    %(prog)s load http://xmlns.com/foaf/0.1/ --tolerant

    # Use a local copy for an import and write a JSON report
    %(prog)s load onto.ttl --substitute http://example.org/base=base.ttl --output report.json

    # List supported serializations
    %(prog)s formats
        """,
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')
    _add_load_parser(subparsers)
    _add_formats_parser(subparsers)
    return parser


def _add_load_parser(subparsers: argparse._SubParsersAction) -> None:
    """Add the load command parser."""
    parser = subparsers.add_parser(
        'load',
        help='Load a document and its imports'
    )
    parser.add_argument('document', help='File path or IRI of the document to load')
    add_config_flags(parser)
    add_parsing_flags(parser)
    add_import_flags(parser)
    add_logging_flags(parser)
    parser.add_argument(
        '--output', '-o',
        help='Write a JSON load report to this path'
    )
    parser.add_argument(
        '--json',
        action='store_true',
        help='Print the load report as JSON instead of a summary'
    )


def _add_formats_parser(subparsers: argparse._SubParsersAction) -> None:
    """Add the formats command parser."""
    parser = subparsers.add_parser(
        'formats',
        help='List supported serializations in detection order'
    )
    add_logging_flags(parser)
