"""
Codex — Content-addressed code explorer

Loads a codebase snapshot once, then answers three questions:
- What is every definition called? (Names)
- What does each definition reference? (FunctionCallGraph)
- What does this one definition look like? (rendered on demand)

Usage:
    codex names
    codex graph --stats
    codex show base.List.map
    codex show '#3b1f' --type
    codex search "list map"
    codex config --set render.width 100
"""

__version__ = "0.1.0"

# Core layer (data)
from .core.references import (
    Hash, Builtin, Derived, Reference, ConstructorKind, DirectRef, ConstructorRef, Referent, Name,
)
from .core.branch import Relation, NamingBranch
from .core.store import CodebaseStore, SnapshotWriter
from .core.errors import (
    CodexError, CodebaseNotFound, StoreError, DefinitionNotFound, InternalInvariantViolation,
)
from .core.names import NameResolution, resolve_names, search_names, NAME_NOT_FOUND
from .core.graph import DependencyGraphBuilder, FunctionCallGraph, GraphWarning, build_graph
from .core.loader import CodebaseInfo, load_codebase

# Presentation layer
from .presentation.render import DefinitionRenderer, DefinitionKind, render

# Config (stays at root)
from .config import Config, ConfigManager, get_config

__all__ = [
    # Core
    'Hash', 'Builtin', 'Derived', 'Reference', 'ConstructorKind', 'DirectRef', 'ConstructorRef',
    'Referent', 'Name',
    'Relation', 'NamingBranch',
    'CodebaseStore', 'SnapshotWriter',
    'CodexError', 'CodebaseNotFound', 'StoreError', 'DefinitionNotFound', 'InternalInvariantViolation',
    'NameResolution', 'resolve_names', 'search_names', 'NAME_NOT_FOUND',
    'DependencyGraphBuilder', 'FunctionCallGraph', 'GraphWarning', 'build_graph',
    'CodebaseInfo', 'load_codebase',
    # Presentation
    'DefinitionRenderer', 'DefinitionKind', 'render',
    # Config
    'Config', 'ConfigManager', 'get_config',
]
