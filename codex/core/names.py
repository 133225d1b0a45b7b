"""
Name Resolution — Deterministic display names for hashed definitions

Turns the naming layer's many-to-many relation into a flat table:

    Hash -> display text

Every named, non-builtin referent gets exactly one entry:
- no names      -> "<name not found>"
- one name      -> that name
- several names -> lexicographically first name + " (conflicted)"

Builtins are dropped; they never own a display name.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional, Tuple

from rapidfuzz import fuzz, process

from .branch import NamingBranch
from .errors import InternalInvariantViolation
from .references import Builtin, Derived, Hash, Name, Referent, reference_of, referent_sort_key


NAME_NOT_FOUND = "<name not found>"
CONFLICT_MARKER = " (conflicted)"


class NameStatus(Enum):
    """How many names a definition carries."""
    NAMED = "named"
    CONFLICTED = "conflicted"
    UNNAMED = "unnamed"


def name_status(names: FrozenSet[Name]) -> NameStatus:
    if not names:
        return NameStatus.UNNAMED
    if len(names) == 1:
        return NameStatus.NAMED
    return NameStatus.CONFLICTED


def primary_name(names: FrozenSet[Name]) -> Optional[Name]:
    """Canonical pick among several names: lexicographic on the text."""
    if not names:
        return None
    return min(names)


def text_from_names(names: FrozenSet[Name]) -> str:
    status = name_status(names)
    if status == NameStatus.UNNAMED:
        return NAME_NOT_FOUND
    if status == NameStatus.NAMED:
        return next(iter(names)).text
    return primary_name(names).text + CONFLICT_MARKER


@dataclass(frozen=True)
class NameResolution:
    """
    Result of resolving a branch.

    ref_map: every non-builtin referent -> hash of its definition
    display_names: hash -> display text (one entry per hash in ref_map)
    """
    ref_map: Mapping[Referent, Hash]
    display_names: Mapping[Hash, str]
    conflicts: FrozenSet[Hash] = field(default_factory=frozenset)

    @property
    def hashes(self) -> FrozenSet[Hash]:
        return frozenset(self.ref_map.values())


def build_ref_map(branch: NamingBranch) -> Dict[Referent, Hash]:
    """Keep referents whose reference is derived, mapped to their hash."""
    ref_map: Dict[Referent, Hash] = {}
    for referent in branch.terms.domain:
        match reference_of(referent):
            case Builtin():
                continue
            case Derived(hash=h):
                ref_map[referent] = h
            case other:
                raise TypeError(f"Not a reference: {other!r}")
    return ref_map


def resolve_names(branch: NamingBranch) -> NameResolution:
    """
    Resolve a naming branch into RefMap and DisplayNames.

    When several referents share one hash (a type's constructors), the
    first referent in referent order decides the display text.

    Raises:
        InternalInvariantViolation: a referent in ref_map vanished from the
            relation it was derived from.
    """
    name_map = branch.terms.domain
    ref_map = build_ref_map(branch)

    display_names: Dict[Hash, str] = {}
    conflicts = set()
    for referent in sorted(ref_map, key=referent_sort_key):
        h = ref_map[referent]
        if h in display_names:
            continue

        names = name_map.get(referent)
        if names is None:
            raise InternalInvariantViolation("Name not found", hash_value=h, subject=referent)

        display_names[h] = text_from_names(names)
        if name_status(names) == NameStatus.CONFLICTED:
            conflicts.add(h)

    return NameResolution(
        ref_map=MappingProxyType(ref_map),
        display_names=MappingProxyType(display_names),
        conflicts=frozenset(conflicts),
    )


# =============================================================================
# Search
# =============================================================================

@dataclass
class SearchHit:
    hash: Hash
    display_name: str
    score: float


def _search_key(text: str) -> str:
    return text.replace(".", " ").lower()


def search_names(
    display_names: Mapping[Hash, str],
    query: str,
    limit: int = 10,
    cutoff: float = 50.0
) -> List[SearchHit]:
    """
    Fuzzy search over display names.

    Dotted segments are compared as words, so "map list" finds
    "base.List.map". Ties are broken by name, then hash.
    """
    query = query.strip()
    if not query:
        return []

    matches: List[Tuple[str, float, Hash]] = process.extract(
        query,
        dict(display_names),
        scorer=fuzz.token_set_ratio,
        processor=_search_key,
        score_cutoff=cutoff,
        limit=None,
    )

    hits = [SearchHit(hash=h, display_name=text, score=score) for text, score, h in matches]
    hits.sort(key=lambda hit: (-hit.score, hit.display_name, hit.hash))
    return hits[:limit]
