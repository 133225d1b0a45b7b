"""
Syntax — Stored definition shapes (terms, types, declarations)

All nodes are frozen dataclasses so that a generic traversal can reach
every nested value without knowing the concrete node classes:

    walk(node)                -> every nested node (like ast.walk)
    collect_references(node)  -> every embedded Reference
    dependencies(node)        -> hashes of the derived references

The dependency graph builder relies only on collect_references(), so new
definition shapes work as long as they are dataclasses.
"""

from dataclasses import dataclass, fields, is_dataclass
from typing import Any, FrozenSet, Iterator, Optional, Tuple, Union

from .references import (
    Builtin, ConstructorKind, ConstructorRef, Derived, DirectRef, Hash, Reference,
)


# =============================================================================
# Types
# =============================================================================

@dataclass(frozen=True)
class TypeRef:
    reference: Reference


@dataclass(frozen=True)
class TypeVar:
    name: str


@dataclass(frozen=True)
class TypeApp:
    fn: 'Type'
    arg: 'Type'


@dataclass(frozen=True)
class TypeArrow:
    domain: 'Type'
    codomain: 'Type'  # a TypeEffect codomain prints as ->{E}


@dataclass(frozen=True)
class TypeEffect:
    effects: Tuple['Type', ...]
    body: 'Type'


@dataclass(frozen=True)
class TypeForall:
    var: str
    body: 'Type'


Type = Union[TypeRef, TypeVar, TypeApp, TypeArrow, TypeEffect, TypeForall]


# =============================================================================
# Patterns
# =============================================================================

@dataclass(frozen=True)
class PVar:
    name: str


@dataclass(frozen=True)
class PUnbound:
    pass


@dataclass(frozen=True)
class PLit:
    value: Any


@dataclass(frozen=True)
class PConstructor:
    reference: Reference
    index: int
    args: Tuple['Pattern', ...] = ()
    kind: ConstructorKind = ConstructorKind.DATA


Pattern = Union[PVar, PUnbound, PLit, PConstructor]


# =============================================================================
# Terms
# =============================================================================

@dataclass(frozen=True)
class Var:
    name: str


@dataclass(frozen=True)
class Ref:
    """Reference to another term."""
    reference: Reference


@dataclass(frozen=True)
class Constructor:
    """Data constructor of the type at `reference`."""
    reference: Reference
    index: int


@dataclass(frozen=True)
class Request:
    """Operation of the ability at `reference`."""
    reference: Reference
    index: int


@dataclass(frozen=True)
class Lit:
    value: Any  # int, float, str or bool


@dataclass(frozen=True)
class Apply:
    fn: 'Term'
    args: Tuple['Term', ...]


@dataclass(frozen=True)
class Lam:
    params: Tuple[str, ...]
    body: 'Term'


@dataclass(frozen=True)
class Binding:
    name: str
    value: 'Term'


@dataclass(frozen=True)
class Let:
    bindings: Tuple[Binding, ...]
    body: 'Term'


@dataclass(frozen=True)
class If:
    cond: 'Term'
    then: 'Term'
    otherwise: 'Term'


@dataclass(frozen=True)
class MatchCase:
    pattern: Pattern
    body: 'Term'
    guard: Optional['Term'] = None


@dataclass(frozen=True)
class Match:
    scrutinee: 'Term'
    cases: Tuple[MatchCase, ...]


@dataclass(frozen=True)
class Ann:
    term: 'Term'
    type: Type


@dataclass(frozen=True)
class Seq:
    items: Tuple['Term', ...]


Term = Union[Var, Ref, Constructor, Request, Lit, Apply, Lam, Let, If, Match, Ann, Seq]


# =============================================================================
# Declarations
# =============================================================================

@dataclass(frozen=True)
class ConstructorDecl:
    name: str  # fallback when the naming layer has no name for it
    fields: Tuple[Type, ...] = ()


@dataclass(frozen=True)
class DataDeclaration:
    modifier: str  # "structural" | "unique"
    bound: Tuple[str, ...]
    constructors: Tuple[ConstructorDecl, ...]


@dataclass(frozen=True)
class OperationDecl:
    name: str
    signature: Type


@dataclass(frozen=True)
class EffectDeclaration:
    modifier: str
    bound: Tuple[str, ...]
    operations: Tuple[OperationDecl, ...]


TypeDecl = Union[DataDeclaration, EffectDeclaration]


# =============================================================================
# Generic traversal
# =============================================================================

_REFERENCE_TYPES = (Builtin, Derived, DirectRef, ConstructorRef, Hash)


def _children(value: Any) -> Iterator[Any]:
    if isinstance(value, tuple):
        yield from value
    elif is_dataclass(value) and not isinstance(value, _REFERENCE_TYPES):
        for f in fields(value):
            yield getattr(value, f.name)


def walk(node: Any) -> Iterator[Any]:
    """Yield node and every nested syntax node, depth-first."""
    stack = [node]
    while stack:
        current = stack.pop()
        if is_dataclass(current) and not isinstance(current, _REFERENCE_TYPES):
            yield current
        stack.extend(reversed(list(_children(current))))


def collect_references(node: Any) -> Iterator[Reference]:
    """Yield every Reference embedded anywhere in node."""
    stack = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, (Builtin, Derived)):
            yield current
            continue
        stack.extend(_children(current))


def dependencies(node: Any) -> FrozenSet[Hash]:
    """Hashes of all derived references in node. Builtins are dropped."""
    hashes = set()
    for reference in collect_references(node):
        match reference:
            case Builtin():
                continue
            case Derived(hash=h):
                hashes.add(h)
            case _:
                raise TypeError(f"Not a reference: {reference!r}")
    return frozenset(hashes)
