"""
Configuration — Centralized settings management

Config hierarchy (highest to lowest priority):
  1. Project config (.codex/config.yaml)
  2. User config (~/.codex/config.yaml)
  3. Environment variables (CODEX_*)
  4. Defaults
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CODEBASE_PATH = ".codex/v1"

# Environment variable -> (section, setting, converter)
ENV_OVERRIDES = {
    "CODEX_CODEBASE_PATH": ("codebase", "path", str),
    "CODEX_RENDER_WIDTH": ("render", "width", int),
    "CODEX_GRAPH_WORKERS": ("graph", "workers", int),
}


@dataclass
class CodebaseConfig:
    """Where the snapshot lives (relative paths resolve against the project)."""
    path: str = DEFAULT_CODEBASE_PATH

    def resolve(self, project_dir: Path) -> Path:
        path = Path(self.path).expanduser()
        return path if path.is_absolute() else Path(project_dir) / path

    def validate(self) -> Optional[str]:
        if not self.path:
            return "codebase.path must not be empty"
        return None


@dataclass
class RenderConfig:
    """Definition rendering preferences."""
    width: int = 80
    hash_length: int = 10
    suffixify: bool = False

    def validate(self) -> Optional[str]:
        if self.width < 20:
            return f"render.width must be >= 20 (got {self.width})"
        if not 3 <= self.hash_length <= 64:
            return f"render.hash_length must be between 3 and 64 (got {self.hash_length})"
        return None


@dataclass
class GraphConfig:
    """Call graph construction."""
    workers: int = 4

    def validate(self) -> Optional[str]:
        if self.workers < 1:
            return f"graph.workers must be >= 1 (got {self.workers})"
        return None


@dataclass
class Config:
    """Application configuration."""
    codebase: CodebaseConfig = field(default_factory=CodebaseConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    graph: GraphConfig = field(default_factory=GraphConfig)

    def validate(self) -> Optional[str]:
        for section in (self.codebase, self.render, self.graph):
            error = section.validate()
            if error:
                return error
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "codebase": {
                "path": self.codebase.path
            },
            "render": {
                "width": self.render.width,
                "hash_length": self.render.hash_length,
                "suffixify": self.render.suffixify
            },
            "graph": {
                "workers": self.graph.workers
            }
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary."""
        codebase_data = data.get("codebase", {})
        render_data = data.get("render", {})
        graph_data = data.get("graph", {})

        return cls(
            codebase=CodebaseConfig(
                path=str(codebase_data.get("path", DEFAULT_CODEBASE_PATH))
            ),
            render=RenderConfig(
                width=int(render_data.get("width", 80)),
                hash_length=int(render_data.get("hash_length", 10)),
                suffixify=_to_bool(render_data.get("suffixify", False))
            ),
            graph=GraphConfig(
                workers=int(graph_data.get("workers", 4))
            )
        )


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.lower() in ("true", "1", "yes", "on")
    return bool(value)


# Settings accepted by ConfigManager.set(): key -> converter
SETTINGS = {
    "codebase.path": str,
    "render.width": int,
    "render.hash_length": int,
    "render.suffixify": _to_bool,
    "graph.workers": int,
}


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Project config (.codex/config.yaml)
      2. User config (~/.codex/config.yaml)
      3. Environment
      4. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".codex"
    USER_CONFIG_FILE = USER_CONFIG_DIR / "config.yaml"
    PROJECT_CONFIG_DIR = ".codex"
    PROJECT_CONFIG_FILE = "config.yaml"

    def __init__(self, project_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self._config: Optional[Config] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.PROJECT_CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self.USER_CONFIG_FILE

    def load(self) -> Config:
        """Load configuration from all sources."""
        if self._config is not None:
            return self._config

        # Layer 1 (lowest): environment
        config_data: Dict[str, Any] = {}
        for env_key, (section, setting, convert) in ENV_OVERRIDES.items():
            value = os.environ.get(env_key)
            if value:
                try:
                    config_data.setdefault(section, {})[setting] = convert(value)
                except ValueError:
                    logger.warning("Ignoring %s=%r (not a valid %s)", env_key, value, convert.__name__)

        # Layer 2: user config, Layer 3: project config
        for path in (self.user_config_path, self.project_config_path):
            config_data = self._merge(config_data, self._read(path))

        self._config = Config.from_dict(config_data)
        return self._config

    def _read(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Ignoring malformed config %s: %s", path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring config %s: expected a mapping", path)
            return {}
        return self._coerce(data, path)

    def _coerce(self, data: Dict[str, Any], path: Path) -> Dict[str, Any]:
        """Keep only known settings whose values convert; warn about the rest."""
        result: Dict[str, Any] = {}
        for section, values in data.items():
            if not isinstance(values, dict):
                logger.warning("Ignoring section %r in %s: expected a mapping", section, path)
                continue
            for setting, value in values.items():
                key = f"{section}.{setting}"
                if key not in SETTINGS:
                    logger.warning("Ignoring unknown setting %s in %s", key, path)
                    continue
                try:
                    result.setdefault(section, {})[setting] = SETTINGS[key](value)
                except (TypeError, ValueError):
                    logger.warning("Ignoring %s=%r in %s (not a valid %s)", key, value, path, SETTINGS[key].__name__)
        return result

    def save_project(self, config: Config):
        """Save configuration to project config file."""
        self._save(self.project_config_path, config)

    def save_user(self, config: Config):
        """Save configuration to user config file."""
        self._save(self.user_config_path, config)

    def _save(self, path: Path, config: Config):
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)
        self._config = config

    def set(self, key: str, value: str, scope: str = "project") -> Optional[str]:
        """
        Set a configuration value.

        Args:
            key: Dot-separated key (e.g., "render.width")
            value: Value to set
            scope: "project" or "user"

        Returns:
            Error message or None if successful
        """
        if key not in SETTINGS:
            return f"Unknown setting: {key}. Valid: {', '.join(SETTINGS)}"

        try:
            converted = SETTINGS[key](value)
        except ValueError:
            return f"Invalid value for {key}: {value!r}"

        data = self.load().to_dict()
        section, setting = key.split(".")
        data[section][setting] = converted
        config = Config.from_dict(data)

        error = config.validate()
        if error:
            return error

        if scope == "project":
            self.save_project(config)
        else:
            self.save_user(config)
        return None

    def get(self, key: str) -> Optional[str]:
        """Get a configuration value."""
        parts = key.split(".")
        if len(parts) != 2:
            return None
        section, setting = parts
        value = self.load().to_dict().get(section, {}).get(setting)
        if value is None:
            return None
        if isinstance(value, bool):
            return str(value).lower()
        return str(value)

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result

    def display(self) -> str:
        """Format config for display."""
        config = self.load()
        lines = [
            "Configuration:",
            "",
            "Codebase:",
            f"  Path: {config.codebase.path}",
            f"  Resolved: {config.codebase.resolve(self.project_dir)}",
            "",
            "Render:",
            f"  Width: {config.render.width}",
            f"  Hash length: {config.render.hash_length}",
            f"  Suffixify: {str(config.render.suffixify).lower()}",
            "",
            "Graph:",
            f"  Workers: {config.graph.workers}",
            "",
            "Config files:",
            f"  User: {self.user_config_path}",
            f"  Project: {self.project_config_path}",
        ]
        return "\n".join(lines)


# Convenience function
def get_config(project_dir: Optional[Path] = None) -> Config:
    """Load configuration for a project."""
    return ConfigManager(project_dir).load()
