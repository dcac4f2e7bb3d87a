"""Grammar specifications with EBNF-style expressions, and their lowering to plain rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from .grammar import Grammar

FIRRTL_TERMINALS: tuple[str, ...] = (
    "id",
    "newline",
    "indent",
    "dedent",
    '"."',
    '","',
    '"("',
    '")"',
    '"<"',
    '">"',
    '"{|"',
    '"|}"',
    '"["',
    '"]"',
    '"{"',
    '"}"',
    '":"',
    '"="',
    '"=>"',
    '"data-type"',
    '"read-latency"',
    '"write-latency"',
    '"read-under-write"',
    '"readwriter"',
    '"writer"',
    '"reader"',
    '"formal"',
    '"layer"',
    '"attach"',
    '"depth"',
    '"invalidate"',
    '"connect"',
    '"undefined"',
    '"new"',
    '"old"',
    '"mem"',
    '"enablelayer"',
    '"Probe"',
    '"RWProbe"',
    '"flip"',
    '"UInt"',
    '"SInt"',
    '"Analog"',
    '"Clock"',
    '"Reset"',
    '"AsyncReset"',
    '"Integer"',
    '"String"',
    '"List"',
    '"probe"',
    '"rwprobe"',
    '"read"',
    '"force"',
    '"force_initial"',
    '"release"',
    '"release_initial"',
    '"mux"',
    '"stop"',
    '"assert"',
    '"printf"',
    '"fprintf"',
    '"fflush"',
    '"const"',
    '"intrinsic"',
    '"skip"',
    '"layerblock"',
    '"module"',
    '"parameter"',
    '"defname"',
    '"extmodule"',
    '"of"',
    '"public"',
    '"type"',
    '"inst"',
    '"wire"',
    '"reg"',
    '"regreset"',
    '"node"',
    '"input"',
    '"output"',
    '"cover"',
    '"assume"',
    '"match"',
    '"else"',
    '"when"',
    '"propassign"',
    '"define"',
    '"circuit"',
    "property_primop_varexpr_keyword",
    "property_primop_2expr_keyword",
    "primop_1expr2int_keyword",
    "primop_1expr1int_keyword",
    "primop_1expr_keyword",
    "primop_2expr_keyword",
    "type_constable",
    "int",
    "info",
    "string_dq",
    "string_sq",
    "string",
    "version",
    "annotations",
)


class SymbolExpr:
    """Base of the expressions that can stand on the right-hand side of a rule."""

    __slots__ = ()

    def alt_of_seqs(self) -> list["SymbolExpr"]:
        """The alternatives of this expression, each meant to be a sequence."""
        return [Seq((self,))]

    def needs_split(self) -> bool:
        """Whether this expression holds an alternative, repetition or option."""
        return False

    def is_compound(self) -> bool:
        """Whether this expression must be replaced by a fresh nonterminal."""
        return False

    def definition(self) -> list["GrammarRule"]:
        """The rules defining the fresh nonterminal that stands for this expression."""
        raise ValueError(f"No definition for {self!r}")

    def to_list(self) -> list[str]:
        """The symbol names of a flat sequence."""
        raise ValueError(f"Can't to_vec: {self!r}")

    def _fresh_name(self) -> str:
        return f"<{self!r}>"


@dataclass(frozen=True, repr=False)
class Alt(SymbolExpr):
    """A choice between alternatives."""

    items: tuple[SymbolExpr, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    def alt_of_seqs(self) -> list[SymbolExpr]:
        return list(self.items)

    def needs_split(self) -> bool:
        return True

    def is_compound(self) -> bool:
        return True

    def __repr__(self) -> str:
        return " | ".join(repr(item) for item in self.items)


@dataclass(frozen=True, repr=False)
class Seq(SymbolExpr):
    """A sequence of expressions; empty for the empty string."""

    items: tuple[SymbolExpr, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    def alt_of_seqs(self) -> list[SymbolExpr]:
        return [self]

    def needs_split(self) -> bool:
        return any(item.needs_split() for item in self.items)

    def is_compound(self) -> bool:
        return any(item.needs_split() for item in self.items)

    def to_list(self) -> list[str]:
        return [name for item in self.items for name in item.to_list()]

    def __repr__(self) -> str:
        if not self.items:
            return "SEQ()"
        return "SEQ(" + " , ".join(repr(item) for item in self.items) + ")"


@dataclass(frozen=True, repr=False)
class Term(SymbolExpr):
    """A terminal symbol."""

    name: str

    def to_list(self) -> list[str]:
        return [self.name]

    def __repr__(self) -> str:
        return self.name


@dataclass(frozen=True, repr=False)
class Nonterm(SymbolExpr):
    """A nonterminal symbol."""

    name: str

    def to_list(self) -> list[str]:
        return [self.name]

    def __repr__(self) -> str:
        return self.name


@dataclass(frozen=True, repr=False)
class Star(SymbolExpr):
    """Zero or more repetitions."""

    inner: SymbolExpr

    def needs_split(self) -> bool:
        return True

    def is_compound(self) -> bool:
        return True

    def definition(self) -> list["GrammarRule"]:
        lhs = self._fresh_name()
        return [
            GrammarRule(lhs, Seq(())),
            GrammarRule(lhs, Seq((Nonterm(lhs), self.inner))),
        ]

    def __repr__(self) -> str:
        return f"{{ {self.inner!r} }}"


@dataclass(frozen=True, repr=False)
class Opt(SymbolExpr):
    """An optional expression."""

    inner: SymbolExpr

    def needs_split(self) -> bool:
        return True

    def is_compound(self) -> bool:
        return True

    def definition(self) -> list["GrammarRule"]:
        lhs = self._fresh_name()
        return [GrammarRule(lhs, Seq(())), GrammarRule(lhs, self.inner)]

    def __repr__(self) -> str:
        return f"[ {self.inner!r} ]"


@dataclass(frozen=True, repr=False)
class Group(SymbolExpr):
    """A parenthesised expression."""

    inner: SymbolExpr

    def needs_split(self) -> bool:
        return self.inner.needs_split()

    def is_compound(self) -> bool:
        return True

    def definition(self) -> list["GrammarRule"]:
        return [GrammarRule(self._fresh_name(), self.inner)]

    def __repr__(self) -> str:
        return f"({self.inner!r})"


@dataclass(frozen=True, repr=False)
class GrammarRule:
    """A rule whose right-hand side may be any expression."""

    lhs: str
    rhs: SymbolExpr

    def is_simple(self) -> bool:
        """Whether the right-hand side needs no further lowering."""
        return not self.rhs.is_compound()

    def split(self) -> list["GrammarRule"]:
        """One rule per alternative, with compound parts moved into fresh rules."""
        result: list[GrammarRule] = []
        for seq in self.rhs.alt_of_seqs():
            if not isinstance(seq, Seq):
                raise ValueError(f"Expected a sequence in {self!r}, found {seq!r}")
            items: list[SymbolExpr] = []
            for item in seq.items:
                if item.is_compound():
                    result.extend(item.definition())
                    items.append(Nonterm(f"<{item!r}>"))
                else:
                    items.append(item)
            result.append(GrammarRule(self.lhs, Seq(tuple(items))))
        return result

    def __repr__(self) -> str:
        return f"{self.lhs} -> {self.rhs!r}"


@dataclass
class GrammarSpec:
    """A list of rules with expression right-hand sides; the first is the start rule."""

    rules: list[GrammarRule] = field(default_factory=list)

    def split(self) -> None:
        """Lower every rule in place until all of them are simple."""
        pending = list(self.rules)
        done: list[GrammarRule] = []
        while pending:
            rule = pending.pop()
            if rule.is_simple():
                done.append(rule)
            else:
                pending.extend(rule.split())
        self.rules = done

    def nonterminals(self) -> set[str]:
        """The names on the left-hand side of some rule."""
        return {rule.lhs for rule in self.rules}

    def to_grammar(self, terminals: Iterable[str] = FIRRTL_TERMINALS) -> Grammar:
        """Build a Grammar declaring the nonterminals, then ``terminals``, then the rules."""
        builder = Grammar.new()
        for name in dict.fromkeys(rule.lhs for rule in self.rules):
            builder.symbol(name)
        for name in terminals:
            builder.symbol(name)
        for rule in self.rules:
            builder.rule(rule.lhs, rule.rhs.to_list())
        return builder.build()


def pos_to_line(text: str, pos: int) -> int:
    """The 1-based line number of character offset ``pos`` in ``text``."""
    return 1 + text.count("\n", 0, max(pos, 0))


def _names(items: Sequence[str]) -> list[str]:
    return list(items)