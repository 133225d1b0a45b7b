"""
Definition Resolver — Find the definition a user is asking for

Enables users to reference definitions by:
- Full name ("base.List.map")
- Name suffix ("List.map", "map")
- Hash prefix ("#3b1f", 4+ characters)

Type names and term names are both searched. Provides clear feedback on
ambiguous or missing matches.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Optional

from .branch import NamingBranch
from .references import (
    Builtin, ConstructorRef, Derived, DirectRef, Name, Reference, Referent,
    reference_of, reference_sort_key,
)

MIN_PREFIX_LENGTH = 4


class ResolveStatus(Enum):
    """Resolution outcome."""
    FOUND = "found"
    AMBIGUOUS = "ambiguous"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Target:
    """A definition that can be rendered."""
    reference: Reference
    is_type: bool
    names: FrozenSet[Name] = frozenset()

    @property
    def label(self) -> str:
        if self.names:
            return min(self.names).text
        match self.reference:
            case Builtin(tag=tag):
                return f"##{tag}"
            case Derived(hash=h):
                return f"#{h.short()}"
            case _:
                raise TypeError(f"Not a reference: {self.reference!r}")


@dataclass
class ResolveResult:
    """Result of query resolution."""
    status: ResolveStatus
    target: Optional[Target] = None
    candidates: List[Target] = field(default_factory=list)
    query: str = ""


class DefinitionResolver:
    """
    Resolution strategies (in order):
    1. Exact name
    2. Hash prefix, for queries starting with "#"
    3. Name suffix
    4. Hash prefix, for bare hex of 4+ chars
    """

    def __init__(self, branch: NamingBranch):
        self.branch = branch

    def resolve(self, query: str, types_only: bool = False) -> ResolveResult:
        query = query.strip()
        if not query:
            return ResolveResult(status=ResolveStatus.NOT_FOUND, query=query)

        # Strategy 1: Exact name
        matches = self._by_name(Name(query), types_only)
        if matches:
            return self._result(matches, query)

        # Strategy 2: Explicit hash prefix
        if query.startswith("#"):
            matches = self._by_prefix(query[1:], types_only)
            if matches:
                return self._result(matches, query)

        # Strategy 3: Name suffix
        matches = self._by_suffix(Name(query), types_only)
        if matches:
            return self._result(matches, query)

        # Strategy 4: Bare hex prefix
        if _is_hex(query):
            matches = self._by_prefix(query, types_only)
        return self._result(matches, query)

    # -------------------------------------------------------------------------
    # Strategies
    # -------------------------------------------------------------------------

    def _term_target(self, referent: Referent) -> Optional[Target]:
        # Constructors are shown through their type declaration
        match referent:
            case DirectRef(reference=reference):
                return Target(reference, False, self.branch.term_names(referent))
            case ConstructorRef(reference=reference):
                return Target(reference, True, self.branch.type_names(reference))
            case _:
                raise TypeError(f"Not a referent: {referent!r}")

    def _type_target(self, reference: Reference) -> Target:
        return Target(reference, True, self.branch.type_names(reference))

    def _by_name(self, name: Name, types_only: bool) -> List[Target]:
        targets = {self._type_target(r) for r in self.branch.types_named(name)}
        if not types_only:
            targets |= {self._term_target(r) for r in self.branch.terms_named(name)}
        return _sorted(targets)

    def _by_prefix(self, prefix: str, types_only: bool) -> List[Target]:
        if len(prefix) < MIN_PREFIX_LENGTH:
            return []
        return self._by_hash_prefix(prefix.lower(), types_only)

    def _by_hash_prefix(self, prefix: str, types_only: bool) -> List[Target]:
        targets = set()
        for reference in self.branch.types.domain:
            if _hash_startswith(reference, prefix):
                targets.add(self._type_target(reference))
        if not types_only:
            for referent in self.branch.terms.domain:
                if _hash_startswith(reference_of(referent), prefix):
                    targets.add(self._term_target(referent))
        return _sorted(targets)

    def _by_suffix(self, suffix: Name, types_only: bool) -> List[Target]:
        targets = set()
        for name, references in self.branch.types.range.items():
            if _has_suffix(name, suffix):
                targets |= {self._type_target(r) for r in references}
        if not types_only:
            for name, referents in self.branch.terms.range.items():
                if _has_suffix(name, suffix):
                    targets |= {self._term_target(r) for r in referents}
        return _sorted(targets)

    def _result(self, matches: List[Target], query: str) -> ResolveResult:
        if len(matches) == 1:
            return ResolveResult(status=ResolveStatus.FOUND, target=matches[0], query=query)
        if matches:
            return ResolveResult(status=ResolveStatus.AMBIGUOUS, candidates=matches[:10], query=query)
        return ResolveResult(status=ResolveStatus.NOT_FOUND, query=query)


def _is_hex(value: str) -> bool:
    return all(c in "0123456789abcdefABCDEF" for c in value)


def _hash_startswith(reference: Reference, prefix: str) -> bool:
    match reference:
        case Builtin():
            return False
        case Derived(hash=h):
            return h.value.startswith(prefix)
        case _:
            raise TypeError(f"Not a reference: {reference!r}")


def _has_suffix(name: Name, suffix: Name) -> bool:
    segments = suffix.segments
    return name.segments[-len(segments):] == segments


def _sorted(targets) -> List[Target]:
    return sorted(targets, key=lambda t: (t.label, t.is_type, reference_sort_key(t.reference)))


def format_resolve_result(result: ResolveResult) -> str:
    """Format resolution result for user display."""
    if result.status == ResolveStatus.FOUND:
        kind = "type" if result.target.is_type else "term"
        return f"Found: {kind} {result.target.label}"

    if result.status == ResolveStatus.AMBIGUOUS:
        lines = [f"Multiple matches for \"{result.query}\":\n"]
        for i, target in enumerate(result.candidates, 1):
            kind = "type" if target.is_type else "term"
            lines.append(f"  {i}. {target.label} ({kind})")
        lines.append("\nUse a longer name or a #hash prefix.")
        return "\n".join(lines)

    return f"No match for \"{result.query}\".\n\nTry: codex search {result.query}"
