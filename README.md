# firlr

Tools for building LR(0) parsers, aimed at the FIRRTL hardware description
language. It has no dependencies beyond the standard library.

- `firlr.grammar`: context-free grammars (`Grammar`, `GrammarBuilder`,
  `Symbol`, `Rule`), nullable symbols, FIRST and FOLLOW sets, LR(0) items
  (`Item`) and item sets with closure (`ItemSet`).
- `firlr.lr0`: LR(0) parse tables (`ParseTable`) with `Shift`, `Reduce` and
  `Halt` actions, and a shift/reduce `Machine` that runs them.
- `firlr.tokenizer`: an indentation-aware FIRRTL lexer (`FirrtlLexer`,
  `tokenize`, `format_tokens`) that emits `Indent` and `Dedent` tokens.
- `firlr.metagrammar`: EBNF-style rule expressions (`Alt`, `Seq`, `Term`,
  `Nonterm`, `Star`, `Opt`, `Group`) that `GrammarSpec.split` lowers into
  plain rules, and `GrammarSpec.to_grammar` turns into a `Grammar`.
- `firlr.demo`: a small circuit grammar and a command that prints its parse
  table and runs it on a file.

## Installation

```
pip install .
```

## Defining a grammar

```python
from firlr.grammar import Grammar

grammar = (
    Grammar.new()
    .symbol("A")
    .symbol("x")
    .symbol("y")
    .rule("A", ["x"])
    .rule("A", ["y"])
    .build()
)

a = grammar.symbol("A")
print(sorted(str(s) for s in a.firsts()))   # ['x', 'y']
print(grammar.nullables())                  # set()
```

Symbols must be declared with `symbol` before a rule names them; otherwise
`rule` raises `ValueError`. Symbols that never appear on the left of a rule
are terminals. The first rule is the start rule. `Grammar.symbol(name)`
returns `None` for an unknown name.

## Building a parse table

```python
from firlr.lr0 import ParseTable, Machine

table = ParseTable(grammar)
print(table.describe())
machine = Machine(table)
```

`table.actions` maps `(state index, symbol)` to a list of actions; the symbol
`None` stands for the end of input. `Machine.step` performs the one action
for a lookahead and raises `ValueError` when there is not exactly one.
`Machine.run` feeds an iterable of `Symbol`s until the machine halts. Each
step is logged at debug level through the `firlr.lr0` logger. The machine
only accepts or rejects; it does not build a parse tree.

## Tokenizing FIRRTL

```python
from firlr.tokenizer import tokenize

for token in tokenize("circuit Main :\n    skip\n"):
    print(token)
```

Spaces and tabs and `;` comments are skipped. Only `circuit`, `module`,
`skip`, `input` and `output` are keywords; other words are `Id` tokens.
Unrecognised input raises `LexError`.

## Lowering EBNF rules

```python
from firlr.metagrammar import GrammarSpec, GrammarRule, Seq, Star, Nonterm, Term

spec = GrammarSpec([GrammarRule("list", Seq((Term("x"), Star(Nonterm("item")))))])
spec.split()
for rule in spec.rules:
    print(rule)
```

Each compound part gets a fresh nonterminal named after its expression, such
as `<{ item }>`. `to_grammar` declares the nonterminals, then the given
terminals (by default the FIRRTL terminal names in `FIRRTL_TERMINALS`), then
the rules. `pos_to_line` turns a character offset into a 1-based line number.

## Commands

Print the token stream of a FIRRTL file, or of a built-in sample when no file
is given (exit status 1 on a lexing error):

```
firlr-tokenize path/to/design.fir
```

Build the demonstration circuit grammar, print it with its nullables and
parse table, then run the machine on the tokens of a FIRRTL file:

```
firlr-demo path/to/design.fir
```

As it stands, the demonstration grammar's rules name symbols it never
declares (`decl_module` and others), so `demo_grammar()` raises `ValueError`
and `firlr-demo` prints the error and exits with status 1.

## What it does not do

There is no reader for grammar text files: EBNF rules are built in Python
with the `firlr.metagrammar` classes. There is no complete FIRRTL grammar and
no parser that produces a syntax tree.