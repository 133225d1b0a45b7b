"""
Pretty — Width-aware document layout

A small Wadler-style pretty printer. Printers build a Doc tree; render()
lays it out for a column width, choosing for each group whether it fits
on the current line (flat) or must break.

Output is a list of styled segments. Styles mark syntax roles (keyword,
type reference, literal...) for callers that highlight; to_plain() drops
them and returns text.

Usage:
    doc = group(concat(text("f"), nest(2, concat(line, text("x")))))
    pretty(doc, width=80)   # "f x"
    pretty(doc, width=2)    # "f\n  x"
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union


class SyntaxElement(Enum):
    """Syntax role of a rendered fragment."""
    TERM_REFERENCE = "term_reference"
    TYPE_REFERENCE = "type_reference"
    CONSTRUCTOR = "constructor"
    REQUEST = "request"
    VARIABLE = "variable"
    KEYWORD = "keyword"
    LITERAL = "literal"
    OPERATOR = "operator"
    DELIMITER = "delimiter"
    BINDING_NAME = "binding_name"
    TYPE_OPERATOR = "type_operator"


@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class Line:
    """Breaks to a newline, or renders as `flat` when the group fits."""
    flat: str = " "


@dataclass(frozen=True)
class HardLine:
    """Always a newline; forces enclosing groups to break."""


@dataclass(frozen=True)
class Nest:
    indent: int
    doc: 'Doc'


@dataclass(frozen=True)
class Concat:
    docs: Tuple['Doc', ...]


@dataclass(frozen=True)
class Group:
    doc: 'Doc'


@dataclass(frozen=True)
class Styled:
    style: SyntaxElement
    doc: 'Doc'


Doc = Union[Text, Line, HardLine, Nest, Concat, Group, Styled]
Segment = Tuple[str, Optional[SyntaxElement]]

EMPTY = Text("")
line = Line(" ")
softbreak = Line("")
hardline = HardLine()


def text(value: str, style: Optional[SyntaxElement] = None) -> Doc:
    doc = Text(value)
    return Styled(style, doc) if style is not None else doc


def concat(*docs: Doc) -> Doc:
    return Concat(tuple(docs))


def nest(indent: int, doc: Doc) -> Doc:
    return Nest(indent, doc)


def group(doc: Doc) -> Doc:
    return Group(doc)


def styled(style: SyntaxElement, doc: Doc) -> Doc:
    return Styled(style, doc)


def join(separator: Doc, docs: Iterable[Doc]) -> Doc:
    parts: List[Doc] = []
    for i, doc in enumerate(docs):
        if i:
            parts.append(separator)
        parts.append(doc)
    return Concat(tuple(parts))


def parenthesize(doc: Doc, when: bool = True) -> Doc:
    if not when:
        return doc
    return concat(text("(", SyntaxElement.DELIMITER), doc, text(")", SyntaxElement.DELIMITER))


# =============================================================================
# Layout
# =============================================================================

# Work item: (indent, flat, style, doc)
_Item = Tuple[int, bool, Optional[SyntaxElement], Doc]


def _fits(remaining: int, own: List[_Item], rest: List[_Item]) -> bool:
    """
    Whether `own` (flat) plus the rest of the document up to its next
    line break fits in `remaining` columns.
    """
    stack = list(own)
    rest_index = len(rest)
    while remaining >= 0:
        if not stack:
            if rest_index == 0:
                return True
            rest_index -= 1
            stack.append(rest[rest_index])

        indent, flat, style, doc = stack.pop()
        if isinstance(doc, Text):
            remaining -= len(doc.text)
        elif isinstance(doc, Line):
            if not flat:
                return True
            remaining -= len(doc.flat)
        elif isinstance(doc, HardLine):
            return not flat
        elif isinstance(doc, Nest):
            stack.append((indent + doc.indent, flat, style, doc.doc))
        elif isinstance(doc, Concat):
            stack.extend((indent, flat, style, d) for d in reversed(doc.docs))
        elif isinstance(doc, Group):
            stack.append((indent, flat, style, doc.doc))
        elif isinstance(doc, Styled):
            stack.append((indent, flat, doc.style, doc.doc))
        else:
            raise TypeError(f"Not a document: {doc!r}")
    return False


def render(doc: Doc, width: int = 80) -> List[Segment]:
    """Lay out doc for the given width into styled segments."""
    segments: List[Segment] = []
    column = 0
    stack: List[_Item] = [(0, False, None, doc)]

    while stack:
        indent, flat, style, current = stack.pop()
        if isinstance(current, Text):
            if current.text:
                segments.append((current.text, style))
                column += len(current.text)
        elif isinstance(current, Line):
            if flat:
                if current.flat:
                    segments.append((current.flat, style))
                    column += len(current.flat)
            else:
                segments.append(("\n" + " " * indent, None))
                column = indent
        elif isinstance(current, HardLine):
            segments.append(("\n" + " " * indent, None))
            column = indent
        elif isinstance(current, Nest):
            stack.append((indent + current.indent, flat, style, current.doc))
        elif isinstance(current, Concat):
            stack.extend((indent, flat, style, d) for d in reversed(current.docs))
        elif isinstance(current, Group):
            if flat:
                stack.append((indent, True, style, current.doc))
            else:
                fits = _fits(width - column, [(indent, True, style, current.doc)], stack)
                stack.append((indent, fits, style, current.doc))
        elif isinstance(current, Styled):
            stack.append((indent, flat, current.style, current.doc))
        else:
            raise TypeError(f"Not a document: {current!r}")

    return segments


def to_plain(segments: Iterable[Segment]) -> str:
    """Drop styling; strip trailing spaces left by indentation."""
    raw = "".join(part for part, _ in segments)
    return "\n".join(row.rstrip() for row in raw.split("\n"))


def pretty(doc: Doc, width: int = 80) -> str:
    return to_plain(render(doc, width))
