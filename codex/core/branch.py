"""
NamingBranch — Immutable snapshot of the naming layer

The naming layer is a many-to-many relation: one definition may carry
zero, one or many names, and one name may denote several definitions.
A branch is built once from a snapshot and never mutated; every component
that needs names receives the branch explicitly.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Generic, Hashable, Iterable, Iterator, Mapping, Tuple, TypeVar

from .references import Name, Reference, Referent

D = TypeVar("D", bound=Hashable)
R = TypeVar("R", bound=Hashable)


class Relation(Generic[D, R]):
    """Immutable many-to-many relation with O(1) lookup in both directions."""

    def __init__(self, pairs: Iterable[Tuple[D, R]] = ()):
        domain: Dict[D, set] = {}
        range_: Dict[R, set] = {}
        for d, r in pairs:
            domain.setdefault(d, set()).add(r)
            range_.setdefault(r, set()).add(d)
        self._domain = MappingProxyType({d: frozenset(rs) for d, rs in domain.items()})
        self._range = MappingProxyType({r: frozenset(ds) for r, ds in range_.items()})

    @property
    def domain(self) -> Mapping[D, FrozenSet[R]]:
        """Forward map: left element -> set of right elements."""
        return self._domain

    @property
    def range(self) -> Mapping[R, FrozenSet[D]]:
        """Reverse map: right element -> set of left elements."""
        return self._range

    def lookup_dom(self, d: D) -> FrozenSet[R]:
        return self._domain.get(d, frozenset())

    def lookup_ran(self, r: R) -> FrozenSet[D]:
        return self._range.get(r, frozenset())

    def pairs(self) -> Iterator[Tuple[D, R]]:
        for d, rs in self._domain.items():
            for r in rs:
                yield d, r

    def __len__(self) -> int:
        return sum(len(rs) for rs in self._domain.values())

    def __contains__(self, pair) -> bool:
        d, r = pair
        return r in self._domain.get(d, ())

    def __eq__(self, other) -> bool:
        if not isinstance(other, Relation):
            return NotImplemented
        return dict(self._domain) == dict(other._domain)

    def __hash__(self) -> int:
        return hash(frozenset(self.pairs()))

    def __repr__(self) -> str:
        return f"Relation({len(self)} pairs)"


@dataclass(frozen=True)
class NamingBranch:
    """
    Names for terms (including constructors) and for types.

    terms: Referent <-> Name
    types: Reference <-> Name
    """
    terms: Relation = field(default_factory=Relation)
    types: Relation = field(default_factory=Relation)

    @classmethod
    def from_pairs(
        cls,
        terms: Iterable[Tuple[Referent, Name]] = (),
        types: Iterable[Tuple[Reference, Name]] = ()
    ) -> 'NamingBranch':
        return cls(terms=Relation(terms), types=Relation(types))

    def term_names(self, referent: Referent) -> FrozenSet[Name]:
        return self.terms.lookup_dom(referent)

    def type_names(self, reference: Reference) -> FrozenSet[Name]:
        return self.types.lookup_dom(reference)

    def terms_named(self, name: Name) -> FrozenSet[Referent]:
        return self.terms.lookup_ran(name)

    def types_named(self, name: Name) -> FrozenSet[Reference]:
        return self.types.lookup_ran(name)
