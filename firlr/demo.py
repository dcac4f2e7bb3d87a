"""A demonstration driver: a small FIRRTL grammar, its LR(0) table, and a parse run."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator, Optional, Sequence

from .grammar import Grammar, Symbol
from .lr0 import Machine, ParseTable
from .tokenizer import FirrtlLexer, LexKind, Token, TokenKind

_LEX_NAMES: dict[LexKind, str] = {
    LexKind.VERSION: "VERSION",
    LexKind.NEWLINE: "NEWLINE",
    LexKind.KW_CIRCUIT: "KW_CIRCUIT",
    LexKind.ID: "ID",
    LexKind.INFO: "INFO",
    LexKind.CURLY_LEFT: "CURLYLEFT",
    LexKind.CURLY_RIGHT: "CURLYRIGHT",
    LexKind.BRACKET_LEFT: "BRACKETlEFT",
    LexKind.BRACKET_RIGHT: "BRACKETRIGHT",
    LexKind.PAREN_LEFT: "PARENLEFT",
    LexKind.PAREN_RIGHT: "PARENRIGHT",
    LexKind.ANG_LEFT: "ANGLEFT",
    LexKind.ANG_RIGHT: "ANGRIGHT",
    LexKind.COMMA: "COMMA",
    LexKind.COLON: "COLON",
    LexKind.EQ: "EQ",
    LexKind.DOT: "DOT",
    LexKind.STRING: "STRING",
    LexKind.KW_MODULE: "KW_MODULE",
    LexKind.KW_SKIP: "KW_SKIP",
    LexKind.KW_INPUT: "KW_INPUT",
    LexKind.KW_OUTPUT: "KW_OUTPUT",
}

_MARKER_NAMES: dict[TokenKind, str] = {
    TokenKind.NEWLINE: "NEWLINE",
    TokenKind.INDENT: "INDENT",
    TokenKind.DEDENT: "DEDENT",
}

_SYMBOLS = (
    "start",
    "circuit",
    "{decl}",
    "decl",
    "KW_CIRCUIT",
    "KW_MODULE",
    "KW_SKIP",
    "KW_INPUT",
    "KW_OUTPUT",
    "KW_PUBLIC",
    "NEWLINE",
    "DEDENT",
    "INDENT",
    "VERSION",
    "ID",
    "INFO",
    "COMMA",
    "COLON",
    "EQ",
    "DOT",
    "STRING",
)

_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("start", ("circuit",)),
    (
        "circuit",
        ("VERSION", "NEWLINE", "KW_CIRCUIT", "ID", "INFO", "COLON", "NEWLINE", "INDENT", "DEDENT"),
    ),
    (
        "circuit",
        ("VERSION", "NEWLINE", "KW_CIRCUIT", "ID", "COLON", "NEWLINE", "INDENT", "{decl}", "DEDENT"),
    ),
    ("{decl}", ()),
    ("{decl}", ("{decl}", "decl")),
    ("decl", ("decl_module",)),
    (
        "decl_module",
        (
            "[public]",
            "KW_MODULE",
            "ID",
            "{enablelayer}",
            "COLON",
            "[info]",
            "NEWLINE",
            "INDENT",
            "SKIP",
            "{stmt}",
            "DEDENT",
        ),
    ),
    ("[public]", ()),
    ("[public]", ("KW_PUBLIC",)),
)


def demo_grammar() -> Grammar:
    """Build the demonstration grammar; raises ValueError for an undeclared symbol."""
    builder = Grammar.new()
    for name in _SYMBOLS:
        builder.symbol(name)
    for lhs, rhs in _RULES:
        builder.rule(lhs, rhs)
    return builder.build()


def token_symbol_name(token: Token) -> str:
    """The grammar symbol name that a lexer token is fed to the parser as."""
    if token.kind is TokenKind.LEX:
        if token.lex is None or token.lex.kind not in _LEX_NAMES:
            raise ValueError(f"Token has no grammar symbol: {token}")
        return _LEX_NAMES[token.lex.kind]
    return _MARKER_NAMES[token.kind]


def _symbols(grammar: Grammar, source: str) -> Iterator[Symbol]:
    for token in FirrtlLexer(source):
        name = token_symbol_name(token)
        symbol = grammar.symbol(name)
        if symbol is None:
            raise ValueError(f"Could not find symbol {name!r}")
        yield symbol


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Show the grammar and its parse table, then parse the named FIRRTL file."""
    args = list(sys.argv[1:] if argv is None else argv)
    err = sys.stderr
    try:
        grammar = demo_grammar()
        print("Grammar:", file=err)
        print(repr(grammar), file=err)
        print(file=err)
        print(f"Nullables: {grammar.nullables()!r}", file=err)

        table = ParseTable(grammar)
        print(table.describe(), file=err)

        if not args:
            print("usage: demo FILE", file=err)
            return 2
        source = Path(args[0]).read_text(encoding="utf-8")

        print("Execute:", file=err)
        Machine(table).run(_symbols(grammar, source))
    except (ValueError, OSError) as error:
        print(f"error: {error}", file=err)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())