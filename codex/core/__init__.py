"""
Core — Data layer for the explorer

Contains the foundational data structures:
- References: hashes, references, referents, names
- Syntax: term/type/declaration ASTs and the reference-collecting traversal
- Branch: the naming relations of a snapshot
- Store: read-only snapshot access (plus a writer for imports and tests)
- Names: display name resolution
- Graph: function call graph construction
- Resolver: query -> definition lookup
"""

from .references import (
    Hash, Builtin, Derived, Reference, ConstructorKind, DirectRef, ConstructorRef, Referent, Name,
    reference_of,
)
from .syntax import walk, collect_references, dependencies
from .branch import Relation, NamingBranch
from .store import CodebaseStore, SnapshotWriter, content_hash
from .errors import (
    CodexError, CodebaseNotFound, StoreError, DefinitionNotFound, InternalInvariantViolation,
)
from .names import NameResolution, NameStatus, resolve_names, search_names, SearchHit
from .graph import DependencyGraphBuilder, FunctionCallGraph, GraphBuildResult, GraphWarning, build_graph
from .resolver import DefinitionResolver, ResolveStatus, ResolveResult, Target
from .loader import CodebaseInfo, load_codebase
