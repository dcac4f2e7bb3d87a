"""Context-free grammars: symbols, rules, LR(0) items and item sets."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional


class SymbolKind(Enum):
    """Whether a symbol appears on the left-hand side of some rule."""

    TERMINAL = "terminal"
    NONTERMINAL = "nonterminal"


@dataclass(frozen=True)
class _RuleData:
    lhs: int
    rhs: tuple[int, ...]


class GrammarBuilder:
    """Accumulates symbols and rules, then produces an immutable Grammar."""

    def __init__(self) -> None:
        self._symbols: list[str] = []
        self._rules: list[_RuleData] = []

    def symbol(self, name: str) -> "GrammarBuilder":
        """Declare a symbol. Returns the builder for chaining."""
        self._symbols.append(str(name))
        return self

    def rule(self, lhs: str, rhs: Iterable[str]) -> "GrammarBuilder":
        """Add the rule ``lhs -> rhs``; every name must already be declared."""
        self._rules.append(
            _RuleData(
                lhs=self._symbol_index(lhs),
                rhs=tuple(self._symbol_index(name) for name in rhs),
            )
        )
        return self

    def build(self) -> "Grammar":
        """Freeze the declared symbols and rules into a Grammar."""
        return Grammar(self._symbols, self._rules)

    def _symbol_index(self, name: str) -> int:
        try:
            return self._symbols.index(name)
        except ValueError:
            raise ValueError(f"No such symbol: {name}") from None


class Grammar:
    """An immutable context-free grammar. Rule 0 is the start rule."""

    def __init__(self, symbols: Iterable[str], rules: Iterable[_RuleData]) -> None:
        self._symbol_names: tuple[str, ...] = tuple(symbols)
        self._rules: tuple[_RuleData, ...] = tuple(rules)
        self._lhs_indices = frozenset(rule.lhs for rule in self._rules)
        self._nullables: Optional[frozenset[int]] = None

    @staticmethod
    def new() -> GrammarBuilder:
        """Start building a new grammar."""
        return GrammarBuilder()

    def start_rule(self) -> "Rule":
        if not self._rules:
            raise ValueError("Grammar has no rules")
        return Rule(self, 0)

    def symbols(self) -> list["Symbol"]:
        return [Symbol(self, index) for index in range(len(self._symbol_names))]

    def terminals(self) -> list["Symbol"]:
        return [symbol for symbol in self.symbols() if symbol.is_terminal()]

    def nonterminals(self) -> list["Symbol"]:
        return [symbol for symbol in self.symbols() if symbol.is_nonterminal()]

    def symbol(self, name: str) -> Optional["Symbol"]:
        """Look up a symbol by name, or return None."""
        try:
            return Symbol(self, self._symbol_names.index(name))
        except ValueError:
            return None

    def rules(self) -> list["Rule"]:
        return [Rule(self, index) for index in range(len(self._rules))]

    def rules_for(self, symbol: "Symbol") -> list["Rule"]:
        """All rules whose left-hand side is ``symbol``, in declaration order."""
        return [rule for rule in self.rules() if rule.lhs == symbol]

    def nullables(self) -> set["Symbol"]:
        """The symbols that can derive the empty string."""
        if self._nullables is None:
            nullable: set[int] = set()
            changed = True
            while changed:
                changed = False
                for data in self._rules:
                    if data.lhs not in nullable and all(i in nullable for i in data.rhs):
                        nullable.add(data.lhs)
                        changed = True
            self._nullables = frozenset(nullable)
        return {Symbol(self, index) for index in self._nullables}

    def __repr__(self) -> str:
        return "\n".join(repr(rule) for rule in self.rules())


class Symbol:
    """A reference to one symbol of a grammar."""

    __slots__ = ("grammar", "index")

    def __init__(self, grammar: Grammar, index: int) -> None:
        self.grammar = grammar
        self.index = index

    @property
    def name(self) -> str:
        return self.grammar._symbol_names[self.index]

    @property
    def kind(self) -> SymbolKind:
        return SymbolKind.NONTERMINAL if self.is_nonterminal() else SymbolKind.TERMINAL

    def is_terminal(self) -> bool:
        return self.index not in self.grammar._lhs_indices

    def is_nonterminal(self) -> bool:
        return self.index in self.grammar._lhs_indices

    def is_nullable(self) -> bool:
        return self in self.grammar.nullables()

    def firsts(self) -> set["Symbol"]:
        """The terminals that can begin a derivation of this symbol."""
        return self._firsts_except({self})

    def _firsts_except(self, excepts: set["Symbol"]) -> set["Symbol"]:
        result: set[Symbol] = set()
        nonterminals: set[Symbol] = set()

        for rule in self.grammar.rules():
            if rule.lhs == self and rule.rhs:
                first = rule.rhs[0]
                if first.is_terminal():
                    result.add(first)
                else:
                    nonterminals.add(first)

        new_excepts = excepts | {self}
        for nonterminal in nonterminals:
            if nonterminal not in excepts:
                result |= nonterminal._firsts_except(new_excepts)

        if self.is_nullable():
            result |= self.follows_except(new_excepts)

        return result

    def follows(self) -> set["Symbol"]:
        """The terminals that can come right after this symbol."""
        return self.follows_except({self})

    def follows_except(self, excepts: set["Symbol"]) -> set["Symbol"]:
        """Like follows(), without expanding the nonterminals in ``excepts``."""
        result: set[Symbol] = set()
        nonterminals: set[Symbol] = set()

        for rule in self.grammar.rules():
            rhs = rule.rhs
            if not rhs:
                nonterminals.add(rule.lhs)
                continue
            for sym, follow in zip(rhs, rhs[1:]):
                if sym == self:
                    if follow.is_terminal():
                        result.add(follow)
                    else:
                        nonterminals.add(follow)
            if rhs[-1] == self:
                nonterminals.add(rule.lhs)

        new_excepts = set(excepts) | {self}
        for nonterminal in nonterminals:
            if nonterminal not in excepts:
                result |= nonterminal.firsts()
                if nonterminal.is_nullable():
                    result |= nonterminal.follows_except(new_excepts)

        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Symbol):
            return NotImplemented
        return self.grammar is other.grammar and self.index == other.index

    def __hash__(self) -> int:
        return hash(self.index)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return self.name


class Rule:
    """A reference to one rule of a grammar."""

    __slots__ = ("grammar", "index")

    def __init__(self, grammar: Grammar, index: int) -> None:
        self.grammar = grammar
        self.index = index

    @property
    def _data(self) -> _RuleData:
        return self.grammar._rules[self.index]

    @property
    def lhs(self) -> Symbol:
        return Symbol(self.grammar, self._data.lhs)

    @property
    def rhs(self) -> tuple[Symbol, ...]:
        return tuple(Symbol(self.grammar, index) for index in self._data.rhs)

    def item(self, pos: int) -> "Item":
        """The LR(0) item of this rule with the dot before position ``pos``."""
        if not 0 <= pos <= len(self._data.rhs):
            raise ValueError(f"Item position {pos} out of range for rule {self!r}")
        return Item(self, pos)

    def name(self) -> str:
        return repr(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rule):
            return NotImplemented
        return self.grammar is other.grammar and self.index == other.index

    def __hash__(self) -> int:
        return hash(self.index)

    def __repr__(self) -> str:
        return "".join([f"{self.lhs} ->", *(f" {sym}" for sym in self.rhs)])


@dataclass(frozen=True)
class Item:
    """An LR(0) item: a rule with a position marker."""

    rule: Rule
    pos: int

    @property
    def grammar(self) -> Grammar:
        return self.rule.grammar

    @property
    def lhs(self) -> Symbol:
        return self.rule.lhs

    @property
    def rhs(self) -> tuple[Symbol, ...]:
        return self.rule.rhs

    def next_symbol(self) -> Optional[Symbol]:
        """The symbol right after the dot, or None at the end."""
        rhs = self.rhs
        return rhs[self.pos] if self.pos < len(rhs) else None

    def step(self) -> "Item":
        """The item with the dot moved one symbol to the right."""
        return Item(self.rule, self.pos + 1)

    def is_finished(self) -> bool:
        return self.pos == len(self.rhs)

    def __repr__(self) -> str:
        rhs = self.rhs
        parts = [f"{self.lhs} ->"]
        parts.extend(f" {sym}" for sym in rhs[: self.pos])
        parts.append(" .")
        parts.extend(f" {sym}" for sym in rhs[self.pos :])
        return "".join(parts)


class ItemSet:
    """An ordered, duplicate-free collection of LR(0) items."""

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, grammar: Grammar, items: Iterable[Item] = ()) -> None:
        self.grammar = grammar
        self._items: list[Item] = list(items)

    @staticmethod
    def empty(grammar: Grammar) -> "ItemSet":
        return ItemSet(grammar)

    @staticmethod
    def singleton(item: Item) -> "ItemSet":
        """The closure of the set holding just ``item``."""
        return ItemSet(item.grammar, [item]).closure()

    @property
    def items(self) -> tuple[Item, ...]:
        return tuple(self._items)

    def is_empty(self) -> bool:
        return not self._items

    def insert(self, item: Item) -> bool:
        """Add ``item`` unless already present; return whether it was added."""
        if item in self._items:
            return False
        self._items.append(item)
        return True

    def follow(self, symbol: Symbol) -> "ItemSet":
        """The closure of the items reached by shifting ``symbol``."""
        stepped = [item.step() for item in self._items if item.next_symbol() == symbol]
        return ItemSet(self.grammar, stepped).closure()

    def closure(self) -> "ItemSet":
        """This set extended with the start items of every nonterminal after a dot."""
        items = list(self._items)
        expanded: set[Symbol] = set()
        added = True
        while added:
            added = False
            new_items: list[Item] = []
            for item in items:
                symbol = item.next_symbol()
                if symbol is None or not symbol.is_nonterminal() or symbol in expanded:
                    continue
                expanded.add(symbol)
                for rule in self.grammar.rules_for(symbol):
                    new_items.append(rule.item(0))
                    added = True
            for item in new_items:
                if item not in items:
                    items.append(item)
        return ItemSet(self.grammar, items)

    def __iter__(self) -> Iterator[Item]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ItemSet):
            return NotImplemented
        return self.grammar is other.grammar and self._items == other._items

    def __repr__(self) -> str:
        return "\n".join(repr(item) for item in self._items)