"""LR(0) parse tables built from a grammar, and a shift-reduce machine that runs them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from .grammar import Grammar, ItemSet, Rule, Symbol

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Shift:
    """Push the symbol and move to ``state``."""

    state: int

    def __repr__(self) -> str:
        return f"Shift({self.state})"


@dataclass(frozen=True)
class Reduce:
    """Replace the right-hand side of ``rule`` on the stack with its left-hand side."""

    rule: Rule

    def __repr__(self) -> str:
        return f"Reduce({self.rule!r})"


@dataclass(frozen=True)
class Halt:
    """Accept the input."""

    def __repr__(self) -> str:
        return "Halt"


Action = Union[Shift, Reduce, Halt]
ActionKey = tuple[int, Optional[Symbol]]


class ParseTable:
    """The LR(0) states of a grammar and the actions for each (state, lookahead).

    A lookahead of ``None`` stands for the end of input.
    """

    def __init__(self, grammar: Grammar) -> None:
        self.grammar = grammar
        self.states: list[ItemSet] = self._build_states()
        self.actions: dict[ActionKey, list[Action]] = self._build_actions()

    def _build_states(self) -> list[ItemSet]:
        start = ItemSet.singleton(self.grammar.start_rule().item(0))
        states: list[ItemSet] = []
        remaining = [start]
        symbols = self.grammar.symbols()

        while remaining:
            state = remaining.pop()
            if state in states:
                continue
            for symbol in symbols:
                successor = state.follow(symbol)
                if successor.is_empty():
                    continue
                if successor not in states:
                    remaining.append(successor)
            states.append(state)

        return states

    def _build_actions(self) -> dict[ActionKey, list[Action]]:
        lookaheads: list[Optional[Symbol]] = [*self.grammar.symbols(), None]
        actions: dict[ActionKey, list[Action]] = {
            (index, lookahead): []
            for index, _ in enumerate(self.states)
            for lookahead in lookaheads
        }

        for index, state in enumerate(self.states):
            for item in state:
                symbol = item.next_symbol()
                if symbol is not None:
                    shift = Shift(self.state_index(state.follow(symbol)))
                    bucket = actions[(index, symbol)]
                    if shift not in bucket:
                        bucket.append(shift)
                else:
                    reduce = Reduce(item.rule)
                    for follow in item.lhs.follows():
                        actions[(index, follow)].append(reduce)
                    actions[(index, None)].append(reduce)

        actions[(0, self.grammar.start_rule().lhs)].insert(0, Halt())
        return actions

    def state_index(self, itemset: ItemSet) -> int:
        """The index of the state equal to ``itemset``."""
        for index, state in enumerate(self.states):
            if state == itemset:
                return index
        raise ValueError(f"Not a state of this table:\n{itemset!r}")

    def describe(self) -> str:
        """A readable dump of every state's actions."""
        lines = ["Parse Table"]
        symbols = self.grammar.symbols()
        for index, _ in enumerate(self.states):
            lines.append(f"    State {index}")
            for symbol in symbols:
                lines.append(f"        on {symbol} => {self.actions[(index, symbol)]!r}")
            lines.append(f"        on $ => {self.actions[(index, None)]!r}")
            lines.append("")
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        return f"ParseTable(states={len(self.states)})"


class Machine:
    """A shift-reduce machine driven by a ParseTable."""

    def __init__(self, table: ParseTable) -> None:
        self.table = table
        self.head: list[Optional[Symbol]] = []
        self.stack: list[tuple[int, Symbol]] = []
        self.halted = False
        self.steps = 0

    @property
    def state(self) -> int:
        """The current state: the one on top of the stack, or the start state."""
        return self.stack[-1][0] if self.stack else 0

    def step(self, symbol: Optional[Symbol]) -> Optional[Action]:
        """Perform the single action for ``symbol`` in the current state and return it."""
        state = self.state
        _log.debug("STEP:   %d", self.steps)
        _log.debug("SYMBOL: %r", symbol)
        _log.debug("STACK:  %r", self.stack)
        _log.debug("STATE:  %d", state)
        for line in repr(self.table.states[state]).splitlines():
            _log.debug("    %s", line)

        actions = self.table.actions.get((state, symbol))
        action: Optional[Action] = None

        if actions is not None:
            if len(actions) != 1:
                shown = "$" if symbol is None else str(symbol)
                raise ValueError(
                    f"Expected exactly one action in state {state} on {shown}, "
                    f"found {actions!r}"
                )
            action = actions[0]

            if isinstance(action, Shift):
                _log.debug("ACTION: SHIFT %d", action.state)
                if symbol is None:
                    raise ValueError("Cannot shift the end of input")
                self.stack.append((action.state, symbol))
            elif isinstance(action, Reduce):
                _log.debug("ACTION: REDUCE %r", action.rule)
                self.head.insert(0, action.rule.lhs)
                if symbol is not None:
                    self.head.insert(0, symbol)
                count = len(action.rule.rhs)
                if count > len(self.stack):
                    raise ValueError(f"Stack underflow reducing {action.rule!r}")
                if count:
                    del self.stack[-count:]
            else:
                _log.debug("ACTION: HALT")
                self.halted = True

        self.steps += 1
        return action

    def run(self, tokens: Iterable[Symbol]) -> None:
        """Feed ``tokens`` to the machine until it halts."""
        source = iter(tokens)
        while not self.halted:
            symbol = self.head.pop() if self.head else next(source, None)
            self.step(symbol)

    def __repr__(self) -> str:
        return (
            f"Machine(state={self.state}, stack={self.stack!r}, "
            f"halted={self.halted}, steps={self.steps})"
        )