"""
Dependency Graph — Which definitions mention which others

FunctionCallGraph maps each hash to the set of hashes its definition
references directly. Built once per snapshot, in batch.

Invariants:
- Builtins never appear, neither as keys nor as edge targets
- Every edge target is also a key (targets outside the requested set are
  fetched too, possibly ending up with empty edges)
- Each hash is fetched exactly once, so cycles terminate
- A missing definition is a warning, never a failure: the node is kept
  with no outgoing edges
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

from .errors import StoreError
from .references import Hash
from .syntax import dependencies

logger = logging.getLogger(__name__)

FunctionCallGraph = Dict[Hash, FrozenSet[Hash]]
Fetch = Callable[[Hash], Optional[Any]]


@dataclass(frozen=True)
class GraphWarning:
    """Non-fatal problem found while building the graph."""
    hash: Hash
    message: str


@dataclass
class GraphBuildResult:
    graph: FunctionCallGraph = field(default_factory=dict)
    warnings: List[GraphWarning] = field(default_factory=list)

    def stats(self) -> Dict[str, int]:
        return {
            "nodes": len(self.graph),
            "edges": sum(len(targets) for targets in self.graph.values()),
            "missing": len(self.warnings),
        }


class DependencyGraphBuilder:
    """
    Builds FunctionCallGraph from a read-only store.

    Works with any definition shape: edges come from the generic
    reference-collecting traversal in syntax.py. Per-hash work is
    independent, so it runs on a thread pool when workers > 1.
    """

    def __init__(self, store: Any, workers: int = 1, fetch: Optional[Fetch] = None):
        """
        Args:
            store: Snapshot reader (CodebaseStore or compatible)
            workers: Thread count for fetch-and-scan; 1 runs sequentially
            fetch: Definition lookup, defaults to store.get_definition
        """
        self.store = store
        self.workers = max(1, workers)
        self._fetch = fetch or store.get_definition

    def build(self, hashes: Iterable[Hash]) -> GraphBuildResult:
        """Fetch and scan every hash (and every hash they reach) once."""
        result = GraphBuildResult()
        frontier = set(hashes)
        seen: Set[Hash] = set()

        while frontier:
            seen |= frontier
            discovered: Set[Hash] = set()
            for h, edges, warning in self._scan_all(sorted(frontier)):
                result.graph[h] = edges
                if warning is not None:
                    result.warnings.append(warning)
                discovered |= edges
            frontier = discovered - seen

        result.warnings.sort(key=lambda w: w.hash)
        logger.debug("Built call graph: %s", result.stats())
        return result

    def _scan_all(self, hashes: List[Hash]) -> List[Tuple[Hash, FrozenSet[Hash], Optional[GraphWarning]]]:
        if self.workers == 1 or len(hashes) < 2:
            return [self._scan(h) for h in hashes]

        with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="codex-graph-") as pool:
            return list(pool.map(self._scan, hashes))

    def _scan(self, h: Hash) -> Tuple[Hash, FrozenSet[Hash], Optional[GraphWarning]]:
        try:
            definition = self._fetch(h)
        except StoreError as e:
            message = f"Skipping reference (unreadable definition): {h}: {e}"
            logger.warning(message)
            return h, frozenset(), GraphWarning(hash=h, message=message)

        if definition is None:
            message = f"Skipping reference (can't find definition): {h}"
            logger.warning(message)
            return h, frozenset(), GraphWarning(hash=h, message=message)
        return h, dependencies(definition), None


def build_graph(store: Any, hashes: Iterable[Hash], workers: int = 1) -> GraphBuildResult:
    """Convenience wrapper around DependencyGraphBuilder."""
    return DependencyGraphBuilder(store, workers=workers).build(hashes)
