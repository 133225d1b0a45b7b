"""
PrettyPrintEnv — Naming environment used while printing

Substitutes hashes with names drawn from a NamingBranch:
- named:            lexicographically first name (or its shortest
                    unambiguous suffix when suffixify is on)
- unnamed derived:  "#" + hash prefix
- unnamed builtin:  "##" + tag
"""

from typing import Dict, FrozenSet, Optional, Set

from ..core.branch import NamingBranch, Relation
from ..core.references import (
    Builtin, ConstructorKind, ConstructorRef, Derived, DirectRef, Name, Reference, Referent,
)

DEFAULT_HASH_LENGTH = 10


def hash_qualified(reference: Reference, hash_length: int = DEFAULT_HASH_LENGTH) -> str:
    match reference:
        case Builtin(tag=tag):
            return f"##{tag}"
        case Derived(hash=h):
            return f"#{h.short(hash_length)}"
        case _:
            raise TypeError(f"Not a reference: {reference!r}")


def _suffix_index(relation: Relation) -> Dict[Name, Set]:
    index: Dict[Name, Set] = {}
    for subject, name in relation.pairs():
        for suffix in name.suffixes():
            index.setdefault(suffix, set()).add(subject)
    return index


def _pick(names: FrozenSet[Name], subject, suffix_index: Optional[Dict[Name, Set]]) -> Optional[str]:
    if not names:
        return None
    if suffix_index is None:
        return min(names).text

    candidates = []
    for name in names:
        for suffix in name.suffixes():
            if suffix_index.get(suffix) == {subject}:
                candidates.append(suffix)
        candidates.append(name)
    best = min(candidates, key=lambda n: (len(n.segments), n.text))
    return best.text


class PrettyPrintEnv:
    """Maps referents and references to the text a printer shows."""

    def __init__(
        self,
        branch: NamingBranch,
        hash_length: int = DEFAULT_HASH_LENGTH,
        suffixify: bool = False
    ):
        self.branch = branch
        self.hash_length = hash_length
        self.suffixify = suffixify
        self._term_suffixes = _suffix_index(branch.terms) if suffixify else None
        self._type_suffixes = _suffix_index(branch.types) if suffixify else None

    def term_name(self, referent: Referent) -> str:
        name = _pick(self.branch.term_names(referent), referent, self._term_suffixes)
        if name is not None:
            return name

        match referent:
            case DirectRef(reference=reference):
                return hash_qualified(reference, self.hash_length)
            case ConstructorRef(reference=reference, index=index):
                return f"{hash_qualified(reference, self.hash_length)}#{index}"
            case _:
                raise TypeError(f"Not a referent: {referent!r}")

    def type_name(self, reference: Reference) -> str:
        name = _pick(self.branch.type_names(reference), reference, self._type_suffixes)
        if name is not None:
            return name
        return hash_qualified(reference, self.hash_length)

    def constructor_name(self, reference: Reference, index: int, kind: ConstructorKind) -> Optional[str]:
        """Name of a constructor, or None when the branch has none."""
        return _pick(
            self.branch.term_names(ConstructorRef(reference, index, kind)),
            ConstructorRef(reference, index, kind),
            self._term_suffixes,
        )
