"""
DefinitionRenderer — Full source text of one definition, on demand

Invoked once per user selection, never batched. Builtins render as a
fixed placeholder without touching the store; derived definitions are
fetched, printed with names from the branch, and flattened to plain text.

A missing definition is fatal for that one render (DefinitionNotFound):
callers are expected to pick definitions that the dependency graph
already fetched successfully.
"""

import logging
from enum import Enum
from typing import Any, FrozenSet, Iterable, List, Optional

from ..core.branch import NamingBranch
from ..core.errors import DefinitionNotFound, StoreError
from ..core.names import NAME_NOT_FOUND, primary_name
from ..core.references import Builtin, Derived, Hash, Name, Reference
from ..core.syntax import Ann, DataDeclaration, EffectDeclaration, Term
from .env import DEFAULT_HASH_LENGTH, PrettyPrintEnv
from .pretty import Segment, render as layout, to_plain
from .printer import DeclPrinter, TermPrinter

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 80
BUILTIN_TERM = "<builtin>"
BUILTIN_TYPE = "<builtin type>"


class DefinitionKind(Enum):
    TERM = "term"
    TYPE = "type"


def display_name(names: Iterable[Name]) -> Name:
    """Header name: canonical first name, or the not-found placeholder."""
    chosen = primary_name(frozenset(names))
    return chosen if chosen is not None else Name(NAME_NOT_FOUND)


def term_with_type_annotation(store: Any, h: Hash) -> Optional[Term]:
    """
    Fetch a term, annotated with its stored type when it has none.

    An existing annotation is never replaced. A failed type lookup leaves
    the term unannotated.
    """
    term = store.get_term(h)
    if term is None:
        return None
    if isinstance(term, Ann):
        return term

    try:
        typ = store.get_type_of(h)
    except StoreError as e:
        logger.debug("Type lookup failed for %s: %s", h, e)
        return term

    if typ is None:
        return term
    return Ann(term, typ)


class DefinitionRenderer:
    """
    Renders terms and type declarations from a snapshot.

    Usage:
        renderer = DefinitionRenderer(store, branch)
        text = renderer.render_term(Derived(h), branch.term_names(DirectRef(Derived(h))))
    """

    def __init__(
        self,
        store: Any,
        branch: NamingBranch,
        width: int = DEFAULT_WIDTH,
        hash_length: int = DEFAULT_HASH_LENGTH,
        suffixify: bool = False
    ):
        self.store = store
        self.width = width
        self.env = PrettyPrintEnv(branch, hash_length=hash_length, suffixify=suffixify)
        self._terms = TermPrinter(self.env)
        self._decls = DeclPrinter(self.env)

    def render(self, reference: Reference, names: Iterable[Name],
               kind: DefinitionKind = DefinitionKind.TERM) -> str:
        if kind == DefinitionKind.TYPE:
            return self.render_type(reference, names)
        return self.render_term(reference, names)

    def render_term(self, reference: Reference, names: Iterable[Name]) -> str:
        return to_plain(self.term_segments(reference, names))

    def render_type(self, reference: Reference, names: Iterable[Name]) -> str:
        return to_plain(self.type_segments(reference, names))

    def term_segments(self, reference: Reference, names: Iterable[Name]) -> List[Segment]:
        """Styled layout of a term; render_term() flattens it."""
        name = display_name(names)
        match reference:
            case Builtin():
                return [(BUILTIN_TERM, None)]
            case Derived(hash=h):
                term = term_with_type_annotation(self.store, h)
                if term is None:
                    raise DefinitionNotFound(h, name=name, kind="term")
                return layout(self._terms.binding(name.text, term), self.width)
            case _:
                raise TypeError(f"Not a reference: {reference!r}")

    def type_segments(self, reference: Reference, names: Iterable[Name]) -> List[Segment]:
        name = display_name(names)
        match reference:
            case Builtin():
                return [(BUILTIN_TYPE, None)]
            case Derived(hash=h):
                decl = self.store.get_type_declaration(h)
                match decl:
                    case None:
                        raise DefinitionNotFound(h, name=name, kind="type")
                    case DataDeclaration():
                        doc = self._decls.data_declaration(reference, name.text, decl)
                    case EffectDeclaration():
                        doc = self._decls.effect_declaration(reference, name.text, decl)
                    case _:
                        raise TypeError(f"Not a type declaration: {decl!r}")
                return layout(doc, self.width)
            case _:
                raise TypeError(f"Not a reference: {reference!r}")


def render(store: Any, branch: NamingBranch, reference: Reference, names: FrozenSet[Name],
           kind: DefinitionKind = DefinitionKind.TERM, width: int = DEFAULT_WIDTH) -> str:
    """One-shot rendering of a single definition."""
    return DefinitionRenderer(store, branch, width=width).render(reference, names, kind)
