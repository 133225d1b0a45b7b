"""
ShowCommand — Render one definition's source

Queries resolve by full name, name suffix or #hash prefix. Ambiguous
and unresolved queries print candidates and exit non-zero; a definition
the store lacks raises DefinitionNotFound, reported by the launcher.
"""

import sys

from ..commands.base import BaseCommand
from ..core.resolver import DefinitionResolver, ResolveStatus, format_resolve_result
from ..presentation.console import safe_print
from ..presentation.render import DefinitionKind


class ShowCommand(BaseCommand):
    """Command for on-demand definition rendering."""

    def show(self, query: str, types_only: bool = False) -> int:
        resolver = DefinitionResolver(self.codebase.branch)
        result = resolver.resolve(query, types_only=types_only)

        if result.status != ResolveStatus.FOUND:
            print(format_resolve_result(result), file=sys.stderr)
            return 1

        target = result.target
        kind = DefinitionKind.TYPE if target.is_type else DefinitionKind.TERM
        safe_print(self.renderer.render(target.reference, target.names, kind))
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

def register_parser(subparsers):
    """Register show command parser."""
    p = subparsers.add_parser('show', help='Render the source of a definition')
    p.add_argument('query', help='Name, name suffix, or #hash prefix')
    p.add_argument('--type', dest='types_only', action='store_true',
                   help='Only match type declarations')
    return p


def handle(cli, args):
    """Handle show command dispatch."""
    return cli._show_cmd.show(args.query, types_only=args.types_only)
