"""
ConfigCommand — Display and change configuration

Does not need a codebase: works before the snapshot path is set up.
"""

import sys

from ..commands.base import BaseCommand


class ConfigCommand(BaseCommand):
    """Command for configuration management."""

    def show_config(self) -> int:
        """Show current configuration."""
        print(self._cli.config_manager.display())
        return 0

    def set_config(self, key: str, value: str, scope: str = "project") -> int:
        """Set a configuration value."""
        manager = self._cli.config_manager
        error = manager.set(key, value, scope)
        if error:
            print(f"Error: {error}", file=sys.stderr)
            return 1

        path = manager.project_config_path if scope == "project" else manager.user_config_path
        print(f"Set {key} = {manager.get(key)}")
        print(f"Saved to {path}")
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

def register_parser(subparsers):
    """Register config command parser."""
    p = subparsers.add_parser('config', help='View or set configuration')
    p.add_argument('--set', nargs=2, metavar=('KEY', 'VALUE'),
                   help='Set config value (e.g., render.width 100)')
    p.add_argument('--user', action='store_true',
                   help='Apply to user config instead of project')
    return p


def handle(cli, args):
    """Handle config command dispatch."""
    if args.set:
        key, value = args.set
        scope = "user" if args.user else "project"
        return cli._config_cmd.set_config(key, value, scope)
    return cli._config_cmd.show_config()
