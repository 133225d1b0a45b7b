"""
GraphCommand — Print the function call graph

JSON goes to stdout; the warnings summary goes to stderr so the JSON
stays machine-readable.
"""

import sys

from ..commands.base import BaseCommand
from ..presentation.console import safe_print
from ..presentation.export import graph_to_json


class GraphCommand(BaseCommand):
    """Command for the FunctionCallGraph extraction."""

    def graph(self, compact: bool = False, stats: bool = False) -> int:
        codebase = self.codebase
        safe_print(graph_to_json(codebase.graph, pretty=not compact).decode())

        if codebase.warnings:
            print(f"{len(codebase.warnings)} definition(s) skipped:", file=sys.stderr)
            for warning in codebase.warnings:
                print(f"  {warning.message}", file=sys.stderr)

        if stats:
            edges = sum(len(targets) for targets in codebase.graph.values())
            print(
                f"nodes: {len(codebase.graph)}  edges: {edges}  missing: {len(codebase.warnings)}",
                file=sys.stderr
            )
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

def register_parser(subparsers):
    """Register graph command parser."""
    p = subparsers.add_parser('graph', help='Print the call graph as JSON')
    p.add_argument('--compact', action='store_true', help='Single-line JSON')
    p.add_argument('--stats', action='store_true', help='Print node/edge counts to stderr')
    return p


def handle(cli, args):
    """Handle graph command dispatch."""
    return cli._graph_cmd.graph(compact=args.compact, stats=args.stats)
