"""
NamesCommand — Display names of every named definition

Default output is the flat JSON map {hash: display name} consumed by
the presentation layer; --plain prints one "hash  name" line per entry.
"""

from ..commands.base import BaseCommand
from ..presentation.console import safe_print
from ..presentation.export import names_to_json


class NamesCommand(BaseCommand):
    """Command for the Names extraction."""

    def names(self, plain: bool = False, compact: bool = False) -> int:
        display_names = self.codebase.names

        if not plain:
            safe_print(names_to_json(display_names, pretty=not compact).decode())
            return 0

        hash_length = self.config.render.hash_length
        for h, text in sorted(display_names.items(), key=lambda item: (item[1], item[0])):
            safe_print(f"#{h.short(hash_length)}  {text}")
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

def register_parser(subparsers):
    """Register names command parser."""
    p = subparsers.add_parser('names', help='Print display names of named definitions')
    p.add_argument('--plain', action='store_true',
                   help='One "hash  name" line per definition instead of JSON')
    p.add_argument('--compact', action='store_true',
                   help='Single-line JSON')
    return p


def handle(cli, args):
    """Handle names command dispatch."""
    return cli._names_cmd.names(plain=args.plain, compact=args.compact)
