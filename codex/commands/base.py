"""
BaseCommand — Shared foundation for all CLI commands

Provides access to CLI resources via composition.
Commands receive the CLI instance and access its resources through properties.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..cli import CodexCLI


class BaseCommand:
    """
    Base class for CLI commands with access to shared resources.

    Commands don't reload the codebase; they access it via the CLI instance,
    which loads it once on first use.
    """

    def __init__(self, cli: 'CodexCLI'):
        self._cli = cli

    # -------------------------------------------------------------------------
    # Core resources (convenience properties)
    # -------------------------------------------------------------------------

    @property
    def project_dir(self):
        """Project root directory."""
        return self._cli.project_dir

    @property
    def config(self):
        """Application configuration."""
        return self._cli.config

    @property
    def codebase(self):
        """Loaded snapshot: store, branch, names and call graph."""
        return self._cli.codebase

    @property
    def renderer(self):
        """Definition renderer configured from render.* settings."""
        return self._cli.renderer
