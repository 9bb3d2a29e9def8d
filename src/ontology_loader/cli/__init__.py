"""
Command-line interface.
"""

from .commands import BaseCommand, LoadCommand, FormatsCommand
from .helpers import JSONFormatter, setup_logging
from .parsers import create_argument_parser

__all__ = [
    'BaseCommand',
    'LoadCommand',
    'FormatsCommand',
    'JSONFormatter',
    'setup_logging',
    'create_argument_parser',
]
