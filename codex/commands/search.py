"""
SearchCommand — Fuzzy search over display names
"""

from ..commands.base import BaseCommand
from ..core.names import search_names
from ..presentation.console import safe_print


class SearchCommand(BaseCommand):

    def search(self, query: str, limit: int = 10) -> int:
        hits = search_names(self.codebase.names, query, limit=limit)
        if not hits:
            print(f"No names match \"{query}\".")
            return 1

        hash_length = self.config.render.hash_length
        for hit in hits:
            safe_print(f"{hit.score:5.1f}  #{hit.hash.short(hash_length)}  {hit.display_name}")
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

def register_parser(subparsers):
    """Register search command parser."""
    p = subparsers.add_parser('search', help='Fuzzy search definition names')
    p.add_argument('query', help='Words to look for (dots count as spaces)')
    p.add_argument('--limit', '-n', type=int, default=10, help='Maximum results (default: 10)')
    return p


def handle(cli, args):
    """Handle search command dispatch."""
    return cli._search_cmd.search(args.query, limit=args.limit)
