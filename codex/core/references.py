"""
References — Identity of definitions in a content-addressed codebase

Every definition is identified by the hash of its content, never by name.
Names live in a separate naming layer (see branch.py).

Variants:
- Reference: Builtin(tag) | Derived(hash)
- Referent:  DirectRef(reference) | ConstructorRef(reference, index, kind)

Consumers dispatch on these with match statements; every match ends in a
case that raises, so a new variant cannot be silently ignored.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple, Union


@dataclass(frozen=True, order=True)
class Hash:
    """Opaque content hash. Ordering exists only for deterministic iteration."""
    value: str

    def __str__(self) -> str:
        return self.value

    def short(self, length: int = 10) -> str:
        return self.value[:length]


@dataclass(frozen=True)
class Builtin:
    """A primitive provided by the runtime. Never stored, never hashed."""
    tag: str


@dataclass(frozen=True)
class Derived:
    """A definition physically present in the store."""
    hash: Hash


Reference = Union[Builtin, Derived]


class ConstructorKind(Enum):
    DATA = "data"
    EFFECT = "effect"


@dataclass(frozen=True)
class DirectRef:
    """The reference denotes a term directly."""
    reference: Reference


@dataclass(frozen=True)
class ConstructorRef:
    """The reference denotes one constructor of a type declaration."""
    reference: Reference
    index: int
    kind: ConstructorKind = ConstructorKind.DATA


Referent = Union[DirectRef, ConstructorRef]


@dataclass(frozen=True, order=True)
class Name:
    """
    Dotted, human-readable identifier (e.g. "base.List.map").

    Not unique: one hash may carry many names and one name may point at
    different hashes in different branches.
    """
    text: str

    @classmethod
    def from_segments(cls, segments) -> 'Name':
        return cls(".".join(segments))

    @property
    def segments(self) -> Tuple[str, ...]:
        return tuple(self.text.split("."))

    @property
    def last_segment(self) -> str:
        return self.segments[-1]

    def suffixes(self) -> Iterator['Name']:
        """Yield trailing segment paths, longest first."""
        segments = self.segments
        for i in range(len(segments)):
            yield Name.from_segments(segments[i:])

    def __str__(self) -> str:
        return self.text


def reference_of(referent: Referent) -> Reference:
    """Underlying reference carried by either referent variant."""
    match referent:
        case DirectRef(reference=reference):
            return reference
        case ConstructorRef(reference=reference):
            return reference
        case _:
            raise TypeError(f"Not a referent: {referent!r}")


def derived_hash(reference: Reference):
    """Hash of a derived reference, None for builtins."""
    match reference:
        case Builtin():
            return None
        case Derived(hash=h):
            return h
        case _:
            raise TypeError(f"Not a reference: {reference!r}")


def reference_sort_key(reference: Reference) -> Tuple[int, str]:
    match reference:
        case Builtin(tag=tag):
            return (0, tag)
        case Derived(hash=h):
            return (1, h.value)
        case _:
            raise TypeError(f"Not a reference: {reference!r}")


def referent_sort_key(referent: Referent) -> Tuple:
    """Direct references first, then constructors by index."""
    match referent:
        case DirectRef(reference=reference):
            return (0, reference_sort_key(reference), -1)
        case ConstructorRef(reference=reference, index=index):
            return (1, reference_sort_key(reference), index)
        case _:
            raise TypeError(f"Not a referent: {referent!r}")
