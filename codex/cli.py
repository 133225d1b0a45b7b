"""
CLI -- Thin launcher over a codebase snapshot

Loads the snapshot once (names + call graph), then hands the pieces to
the selected command. Rendering happens per request, never in bulk.

Exit status:
    0  success
    1  no codebase found, definition missing, or query not resolved
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .config import ConfigManager
from .core.errors import CodebaseNotFound, CodexError
from .core.loader import CodebaseInfo, load_codebase
from .presentation.render import DefinitionRenderer

logger = logging.getLogger(__name__)


class CodexCLI:
    """Command-line interface for the codebase explorer."""

    def __init__(self, project_dir: Path):
        self.project_dir = Path(project_dir)
        self.config_manager = ConfigManager(self.project_dir)
        self.config = self.config_manager.load()

        self._codebase: Optional[CodebaseInfo] = None
        self._renderer: Optional[DefinitionRenderer] = None

        # Command handlers (composition)
        from .commands.names_cmd import NamesCommand
        from .commands.graph_cmd import GraphCommand
        from .commands.show import ShowCommand
        from .commands.search import SearchCommand
        from .commands.config_cmd import ConfigCommand

        self._names_cmd = NamesCommand(self)
        self._graph_cmd = GraphCommand(self)
        self._show_cmd = ShowCommand(self)
        self._search_cmd = SearchCommand(self)
        self._config_cmd = ConfigCommand(self)

    @property
    def codebase_path(self) -> Path:
        return self.config.codebase.resolve(self.project_dir)

    @property
    def codebase(self) -> CodebaseInfo:
        """
        Snapshot contents, loaded on first use.

        Raises:
            CodebaseNotFound: no snapshot at codebase_path
        """
        if self._codebase is None:
            self._codebase = load_codebase(self.codebase_path, workers=self.config.graph.workers)
        return self._codebase

    @property
    def renderer(self) -> DefinitionRenderer:
        if self._renderer is None:
            render = self.config.render
            self._renderer = DefinitionRenderer(
                self.codebase.store,
                self.codebase.branch,
                width=render.width,
                hash_length=render.hash_length,
                suffixify=render.suffixify,
            )
        return self._renderer


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codex",
        description="Codex -- Content-addressed code explorer",
        epilog="Names and call graph up front. Source on demand."
    )

    parser.add_argument(
        '--project', '-p',
        default=os.environ.get("CODEX_PROJECT_PATH", "."),
        help='Project directory (default: CODEX_PROJECT_PATH or current)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Log debug output to stderr'
    )

    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'codex {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Register all commands from command modules (self-registration pattern)
    from .commands import register_all
    register_all(subparsers)
    return parser


def main(argv=None) -> int:
    """
    Main entry point for the Codex CLI.

    Returns the process exit status; the console script exits with it.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if not args.command:
        parser.print_help()
        return 0

    from .commands import dispatch, get_registered_commands

    if args.command not in get_registered_commands():
        print(f"Error: Unknown command: {args.command}", file=sys.stderr)
        parser.print_help()
        return 1

    cli = CodexCLI(Path(args.project))

    try:
        status = dispatch(args.command, cli, args)
    except CodebaseNotFound as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except CodexError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return status or 0


if __name__ == '__main__':
    sys.exit(main())
