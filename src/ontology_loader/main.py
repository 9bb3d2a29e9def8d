"""
Command-line entry point.

Usage:
    ontology-loader load ontologies/pizza.owl
    ontology-loader load http://xmlns.com/foaf/0.1/ --tolerant --json
    ontology-loader formats
"""

import sys
from typing import List, Optional

from .cli.commands import FormatsCommand, LoadCommand
from .cli.parsers import create_argument_parser
from .constants import ExitCode

COMMANDS = {
    'load': LoadCommand,
    'formats': FormatsCommand,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_argument_parser(prog="ontology-loader")
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return ExitCode.ERROR

    command = COMMANDS[args.command]()
    try:
        return int(command.execute(args))
    except KeyboardInterrupt:
        print("\n✗ Interrupted")
        return ExitCode.CANCELLED


if __name__ == '__main__':
    sys.exit(main())
