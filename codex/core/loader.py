"""
Loader — One-shot extraction of names and call graph from a snapshot

Control flow:
    open store (fail fast if absent)
      -> read root naming branch
      -> resolve names (RefMap, DisplayNames)
      -> build call graph over the RefMap hashes

Everything returned is immutable for the rest of the session; rendering
happens later, per selection, against the same store and branch.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping

from .branch import NamingBranch
from .graph import DependencyGraphBuilder, FunctionCallGraph, GraphWarning
from .names import NameResolution, resolve_names
from .references import Hash
from .store import CodebaseStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CodebaseInfo:
    store: CodebaseStore
    branch: NamingBranch
    resolution: NameResolution
    graph: FunctionCallGraph
    warnings: List[GraphWarning]

    @property
    def names(self) -> Mapping[Hash, str]:
        return self.resolution.display_names


def load_codebase(path: Path, workers: int = 1) -> CodebaseInfo:
    """
    Load a snapshot and compute its names and call graph.

    Raises:
        CodebaseNotFound: no snapshot at path
    """
    store = CodebaseStore.open(path)
    branch = store.get_root_branch()
    resolution = resolve_names(branch)

    result = DependencyGraphBuilder(store, workers=workers).build(resolution.hashes)
    if result.warnings:
        logger.info("%d definition(s) could not be fetched", len(result.warnings))

    return CodebaseInfo(
        store=store,
        branch=branch,
        resolution=resolution,
        graph=result.graph,
        warnings=result.warnings,
    )
