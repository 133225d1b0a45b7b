"""
Printers — Surface syntax for terms, types and declarations

Each printer turns a stored definition into a Doc (see pretty.py), looking
up display names through a PrettyPrintEnv. Layout decisions (where lines
break) are left to the Doc groups so one printer serves every width.

Precedence levels used below:
    0   top level: lambdas, if, match, let, annotations
    5   operands of infix operators
    10  arguments of an application
"""

from typing import List, Tuple

from ..core.references import ConstructorKind, ConstructorRef, DirectRef, Reference
from ..core.syntax import (
    Ann, Apply, Constructor, ConstructorDecl, DataDeclaration, EffectDeclaration,
    If, Lam, Let, Lit, Match, MatchCase, PConstructor, PLit, PUnbound, PVar, Ref, Request, Seq,
    Term, Type, TypeApp, TypeArrow, TypeEffect, TypeForall, TypeRef, TypeVar, Var,
)
from .env import PrettyPrintEnv
from .pretty import (
    Doc, SyntaxElement, concat, group, hardline, join, line, nest, parenthesize, softbreak, text,
)

INDENT = 2

S = SyntaxElement


def keyword(word: str) -> Doc:
    return text(word, S.KEYWORD)


def is_operator(name: str) -> bool:
    """Symbolic names (last segment like "+" or "++") print infix."""
    if name.startswith("#"):
        return False
    last = name.rsplit(".", 1)[-1] if not name.endswith(".") else name
    return bool(last) and not (last[0].isalnum() or last[0] in "_#'")


def literal(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n").replace("\t", "\\t")
        return f'"{escaped}"'
    return repr(value)


# =============================================================================
# Types
# =============================================================================

class TypePrinter:
    def __init__(self, env: PrettyPrintEnv):
        self.env = env

    def signature(self, typ: Type) -> Doc:
        """Top-level type with its leading quantifiers left implicit."""
        while isinstance(typ, TypeForall):
            typ = typ.body
        return self.type(typ, 0)

    def type(self, typ: Type, prec: int = 0) -> Doc:
        match typ:
            case TypeRef(reference=reference):
                return text(self.env.type_name(reference), S.TYPE_REFERENCE)
            case TypeVar(name=name):
                return text(name, S.VARIABLE)
            case TypeApp():
                fn, args = _spine(typ)
                parts = [self.type(fn, 10)] + [self.type(a, 10) for a in args]
                return parenthesize(group(nest(INDENT, join(line, parts))), prec >= 10)
            case TypeArrow(domain=domain, codomain=codomain):
                return parenthesize(self._arrow(domain, codomain), prec >= 1)
            case TypeEffect(effects=effects, body=body):
                doc = concat(self._effects(effects), text(" "), self.type(body, 10))
                return parenthesize(doc, prec >= 10)
            case TypeForall():
                variables = []
                while isinstance(typ, TypeForall):
                    variables.append(typ.var)
                    typ = typ.body
                doc = concat(
                    keyword("forall"), text(" "), text(" ".join(variables), S.VARIABLE),
                    text(".", S.TYPE_OPERATOR), text(" "), self.type(typ, 0),
                )
                return parenthesize(doc, prec > 0)
            case _:
                raise TypeError(f"Not a type: {typ!r}")

    def _effects(self, effects: Tuple[Type, ...]) -> Doc:
        inner = join(text(", ", S.DELIMITER), [self.type(e, 0) for e in effects])
        return concat(text("{", S.DELIMITER), inner, text("}", S.DELIMITER))

    def _arrow(self, domain: Type, codomain: Type) -> Doc:
        parts: List[Doc] = [self.type(domain, 1)]
        while True:
            if isinstance(codomain, TypeEffect):
                arrow = concat(text("->", S.TYPE_OPERATOR), self._effects(codomain.effects))
                codomain = codomain.body
            else:
                arrow = text("->", S.TYPE_OPERATOR)

            if isinstance(codomain, TypeArrow):
                parts.append(concat(arrow, text(" "), self.type(codomain.domain, 1)))
                codomain = codomain.codomain
            else:
                parts.append(concat(arrow, text(" "), self.type(codomain, 1)))
                break
        return group(join(line, parts))


def _spine(typ: TypeApp) -> Tuple[Type, List[Type]]:
    args = []
    while isinstance(typ, TypeApp):
        args.append(typ.arg)
        typ = typ.fn
    return typ, list(reversed(args))


# =============================================================================
# Terms
# =============================================================================

class TermPrinter:
    def __init__(self, env: PrettyPrintEnv):
        self.env = env
        self.types = TypePrinter(env)

    def binding(self, name: str, term: Term) -> Doc:
        """
        Top-level binding. An annotation becomes a signature line:

            name : Type
            name x = body
        """
        if isinstance(term, Ann):
            signature = group(concat(
                text(name, S.BINDING_NAME), text(" :", S.TYPE_OPERATOR),
                nest(INDENT, concat(line, self.types.signature(term.type))),
            ))
            return concat(signature, hardline, self._binding(name, term.term))
        return self._binding(name, term)

    def _binding(self, name: str, term: Term) -> Doc:
        lhs = [text(name, S.BINDING_NAME)]
        body = term
        if isinstance(term, Lam):
            lhs.extend(text(p, S.VARIABLE) for p in term.params)
            body = term.body
        head = concat(join(text(" "), lhs), text(" ="))

        if isinstance(body, Let):
            return concat(head, nest(INDENT, concat(hardline, self._block(body))))
        return group(concat(head, nest(INDENT, concat(line, self.term(body, 0)))))

    def _block(self, let: Let) -> Doc:
        lines = [self._binding(b.name, b.value) for b in let.bindings]
        lines.append(self.term(let.body, 0))
        return join(hardline, lines)

    def term(self, term: Term, prec: int = 0) -> Doc:
        match term:
            case Var(name=name):
                return text(name, S.VARIABLE)
            case Ref(reference=reference):
                return text(self.env.term_name(DirectRef(reference)), S.TERM_REFERENCE)
            case Constructor(reference=reference, index=index):
                name = self.env.term_name(ConstructorRef(reference, index, ConstructorKind.DATA))
                return text(name, S.CONSTRUCTOR)
            case Request(reference=reference, index=index):
                name = self.env.term_name(ConstructorRef(reference, index, ConstructorKind.EFFECT))
                return text(name, S.REQUEST)
            case Lit(value=value):
                return text(literal(value), S.LITERAL)
            case Apply(fn=fn, args=args):
                return self._apply(fn, args, prec)
            case Lam(params=params, body=body):
                doc = group(concat(
                    join(text(" "), [text(p, S.VARIABLE) for p in params]),
                    text(" ->", S.OPERATOR),
                    nest(INDENT, concat(line, self.term(body, 0))),
                ))
                return parenthesize(doc, prec > 0)
            case Let():
                doc = concat(keyword("let"), nest(INDENT, concat(hardline, self._block(term))))
                return parenthesize(doc, prec > 0)
            case If(cond=cond, then=then, otherwise=otherwise):
                doc = group(concat(
                    keyword("if"), text(" "), self.term(cond, 0), text(" "), keyword("then"),
                    nest(INDENT, concat(line, self.term(then, 0))),
                    line, keyword("else"),
                    nest(INDENT, concat(line, self.term(otherwise, 0))),
                ))
                return parenthesize(doc, prec > 0)
            case Match(scrutinee=scrutinee, cases=cases):
                doc = concat(
                    keyword("match"), text(" "), self.term(scrutinee, 0), text(" "), keyword("with"),
                    nest(INDENT, concat(*[concat(hardline, self._case(c)) for c in cases])),
                )
                return parenthesize(doc, prec > 0)
            case Ann(term=inner, type=typ):
                doc = concat(self.term(inner, 5), text(" :", S.TYPE_OPERATOR), text(" "), self.types.type(typ, 0))
                return parenthesize(doc, prec > 0)
            case Seq(items=items):
                inner = join(concat(text(",", S.DELIMITER), line), [self.term(i, 0) for i in items])
                return group(concat(
                    text("[", S.DELIMITER), nest(1, concat(softbreak, inner)), softbreak, text("]", S.DELIMITER),
                ))
            case _:
                raise TypeError(f"Not a term: {term!r}")

    def _apply(self, fn: Term, args: Tuple[Term, ...], prec: int) -> Doc:
        if isinstance(fn, Ref) and len(args) == 2:
            name = self.env.term_name(DirectRef(fn.reference))
            if is_operator(name):
                doc = group(concat(
                    self.term(args[0], 6), text(" "), text(name, S.OPERATOR),
                    nest(INDENT, concat(line, self.term(args[1], 6))),
                ))
                return parenthesize(doc, prec > 5)

        parts = [self.term(fn, 10)] + [self.term(a, 10) for a in args]
        doc = group(concat(parts[0], nest(INDENT, concat(*[concat(line, p) for p in parts[1:]]))))
        return parenthesize(doc, prec >= 10)

    def _case(self, case: MatchCase) -> Doc:
        head = [self.pattern(case.pattern, 0)]
        if case.guard is not None:
            head.extend([text(" | ", S.DELIMITER), self.term(case.guard, 0)])
        return group(concat(
            *head, text(" ->", S.OPERATOR),
            nest(INDENT, concat(line, self.term(case.body, 0))),
        ))

    def pattern(self, pattern, prec: int = 0) -> Doc:
        match pattern:
            case PVar(name=name):
                return text(name, S.VARIABLE)
            case PUnbound():
                return text("_", S.VARIABLE)
            case PLit(value=value):
                return text(literal(value), S.LITERAL)
            case PConstructor(reference=reference, index=index, args=args, kind=kind):
                name = text(self.env.term_name(ConstructorRef(reference, index, kind)), S.CONSTRUCTOR)
                if not args:
                    return name
                doc = join(text(" "), [name] + [self.pattern(a, 10) for a in args])
                return parenthesize(doc, prec >= 10)
            case _:
                raise TypeError(f"Not a pattern: {pattern!r}")


# =============================================================================
# Declarations
# =============================================================================

class DeclPrinter:
    def __init__(self, env: PrettyPrintEnv):
        self.env = env
        self.types = TypePrinter(env)

    def _header(self, modifier: str, word: str, name: str, bound: Tuple[str, ...]) -> List[Doc]:
        parts = [keyword(modifier), keyword(word), text(name, S.TYPE_REFERENCE)]
        parts.extend(text(v, S.VARIABLE) for v in bound)
        return parts

    def _member_name(self, reference: Reference, index: int, kind: ConstructorKind,
                     type_name: str, fallback: str) -> str:
        name = self.env.constructor_name(reference, index, kind) or fallback
        prefix = type_name + "."
        if name.startswith(prefix) and len(name) > len(prefix):
            return name[len(prefix):]
        return name

    def data_declaration(self, reference: Reference, name: str, decl: DataDeclaration) -> Doc:
        """
        structural type Optional a = None | Some a

        Breaks as one constructor per line when too wide.
        """
        header = join(text(" "), self._header(decl.modifier, "type", name, decl.bound))
        if not decl.constructors:
            return header

        constructors = [
            self._constructor(reference, i, c, name) for i, c in enumerate(decl.constructors)
        ]
        alternatives = [concat(text("= ", S.DELIMITER), constructors[0])]
        alternatives.extend(concat(text("| ", S.DELIMITER), c) for c in constructors[1:])
        return group(concat(header, nest(INDENT, concat(*[concat(line, a) for a in alternatives]))))

    def _constructor(self, reference: Reference, index: int, constructor: ConstructorDecl, type_name: str) -> Doc:
        name = self._member_name(reference, index, ConstructorKind.DATA, type_name, constructor.name)
        parts = [text(name, S.CONSTRUCTOR)] + [self.types.type(f, 10) for f in constructor.fields]
        return join(text(" "), parts)

    def effect_declaration(self, reference: Reference, name: str, decl: EffectDeclaration) -> Doc:
        """
        structural ability Ask a where
          ask : {Ask a} a
        """
        header = concat(
            join(text(" "), self._header(decl.modifier, "ability", name, decl.bound)),
            text(" "), keyword("where"),
        )
        operations = []
        for i, op in enumerate(decl.operations):
            op_name = self._member_name(reference, i, ConstructorKind.EFFECT, name, op.name)
            operations.append(group(concat(
                text(op_name, S.REQUEST), text(" :", S.TYPE_OPERATOR),
                nest(INDENT, concat(line, self.types.signature(op.signature))),
            )))
        if not operations:
            return header
        return concat(header, nest(INDENT, concat(*[concat(hardline, op) for op in operations])))
