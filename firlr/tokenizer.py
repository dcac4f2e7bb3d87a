"""An indentation-aware lexer for FIRRTL source text."""

from __future__ import annotations

import re
import sys
from collections import deque
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional, Sequence


class LexKind(Enum):
    """The kinds of raw token the scanner recognises."""

    COMMENT = "Comment"
    VERSION = "Version"
    NEWLINE = "Newline"
    KW_CIRCUIT = "KwCircuit"
    KW_MODULE = "KwModule"
    KW_SKIP = "KwSkip"
    KW_INPUT = "KwInput"
    KW_OUTPUT = "KwOutput"
    ID = "Id"
    INFO = "Info"
    CURLY_LEFT = "CurlyLeft"
    CURLY_RIGHT = "CurlyRight"
    BRACKET_LEFT = "BracketLeft"
    BRACKET_RIGHT = "BracketRight"
    PAREN_LEFT = "ParenLeft"
    PAREN_RIGHT = "ParenRight"
    ANG_LEFT = "AngLeft"
    ANG_RIGHT = "AngRight"
    COMMA = "Comma"
    COLON = "Colon"
    EQ = "Eq"
    DOT = "Dot"
    STRING = "String"


@dataclass(frozen=True)
class LexToken:
    """A raw token with its text and span; ``indent`` is set for newlines."""

    kind: LexKind
    text: str
    start: int
    end: int
    indent: int = 0

    def __str__(self) -> str:
        if self.kind is LexKind.NEWLINE:
            return f"Newline({self.indent})"
        return self.kind.value


class TokenKind(Enum):
    """The kinds of token the indentation-aware lexer yields."""

    LEX = "Lex"
    NEWLINE = "Newline"
    INDENT = "Indent"
    DEDENT = "Dedent"


@dataclass(frozen=True)
class Token:
    """A token: a raw token, or a newline, indent or dedent marker."""

    kind: TokenKind
    lex: Optional[LexToken] = None

    @property
    def text(self) -> str:
        return self.lex.text if self.lex is not None else ""

    def __str__(self) -> str:
        if self.kind is TokenKind.LEX and self.lex is not None:
            return str(self.lex)
        return self.kind.value


class LexError(ValueError):
    """Raised when the input holds text that no token matches."""

    def __init__(self, source: str, position: int) -> None:
        self.position = position
        self.line = source.count("\n", 0, position) + 1
        snippet = source[position : position + 10]
        super().__init__(f"Unrecognized input at line {self.line} (offset {position}): {snippet!r}")


_SKIP = re.compile(r"(?:[ \t]+|;[^\n]*)*")

_PATTERNS: tuple[tuple[LexKind, re.Pattern[str]], ...] = (
    (LexKind.VERSION, re.compile(r"FIRRTL version \d+\.\d+\.\d+")),
    (LexKind.NEWLINE, re.compile(r"\n( )*")),
    (LexKind.ID, re.compile(r"\w+|`[^`]+`")),
    (LexKind.INFO, re.compile(r"@\[[^\]]*]")),
    (LexKind.STRING, re.compile(r'"(?:\\"|[^"])*"')),
)

_LITERALS: tuple[tuple[str, LexKind], ...] = (
    ("circuit", LexKind.KW_CIRCUIT),
    ("module", LexKind.KW_MODULE),
    ("skip", LexKind.KW_SKIP),
    ("input", LexKind.KW_INPUT),
    ("output", LexKind.KW_OUTPUT),
    ("{", LexKind.CURLY_LEFT),
    ("}", LexKind.CURLY_RIGHT),
    ("[", LexKind.BRACKET_LEFT),
    ("]", LexKind.BRACKET_RIGHT),
    ("(", LexKind.PAREN_LEFT),
    (")", LexKind.PAREN_RIGHT),
    ("<", LexKind.ANG_LEFT),
    (">", LexKind.ANG_RIGHT),
    (",", LexKind.COMMA),
    (":", LexKind.COLON),
    ("=", LexKind.EQ),
    (".", LexKind.DOT),
)


class FirrtlLexer:
    """Iterates over the tokens of FIRRTL source, turning leading spaces into indents."""

    def __init__(self, source: str) -> None:
        self.source = source
        self._pos = 0
        self._queue: deque[Token] = deque()
        self._indents: list[int] = []

    def indent_level(self) -> int:
        """The current indentation width, 0 at top level."""
        return self._indents[-1] if self._indents else 0

    def _redent(self, level: int) -> None:
        if level > self.indent_level():
            self._indents.append(level)
            self._queue.append(Token(TokenKind.INDENT))
        else:
            while level < self.indent_level():
                self._indents.pop()
                self._queue.append(Token(TokenKind.DEDENT))

    def _scan(self) -> Optional[LexToken]:
        source = self.source
        pos = _SKIP.match(source, self._pos).end()
        self._pos = pos
        if pos >= len(source):
            return None

        best_length = 0
        best_priority = -1
        best_kind: Optional[LexKind] = None
        best_match: Optional[re.Match[str]] = None

        for kind, pattern in _PATTERNS:
            match = pattern.match(source, pos)
            if match and (match.end() - pos, 0) > (best_length, best_priority):
                best_length, best_priority, best_kind, best_match = match.end() - pos, 0, kind, match
        for text, kind in _LITERALS:
            if source.startswith(text, pos) and (len(text), 1) > (best_length, best_priority):
                best_length, best_priority, best_kind, best_match = len(text), 1, kind, None

        if best_kind is None or best_length == 0:
            raise LexError(source, pos)

        end = pos + best_length
        self._pos = end
        indent = best_length - 1 if best_kind is LexKind.NEWLINE else 0
        return LexToken(best_kind, source[pos:end], pos, end, indent)

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        if self._queue:
            return self._queue.popleft()

        lex = self._scan()
        if lex is None:
            self._redent(0)
            if self._queue:
                return self._queue.popleft()
            raise StopIteration
        if lex.kind is LexKind.NEWLINE:
            self._redent(lex.indent)
            return Token(TokenKind.NEWLINE)
        return Token(TokenKind.LEX, lex)


def tokenize(source: str) -> list[Token]:
    """All tokens of ``source``."""
    return list(FirrtlLexer(source))


def _debug_str(text: str) -> str:
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


def format_tokens(source: str) -> str:
    """Render the token stream of ``source`` laid out by its indentation."""
    parts: list[str] = []
    level = 0
    for token in FirrtlLexer(source):
        if token.kind is TokenKind.NEWLINE:
            parts.append(f"{token}\n{' ' * level}")
        elif token.kind is TokenKind.INDENT:
            level += 4
            parts.append(f"{token}\n{' ' * level}")
        elif token.kind is TokenKind.DEDENT:
            level -= 4
            parts.append(f"{token}\n{' ' * level}")
        else:
            parts.append(f"{token}({_debug_str(token.text)}) ")
    return "".join(parts)


_SAMPLE = """
circuit Main :
    public module Top :
        input  inp : UInt<1>
        output out : UInt<1>
        connect out, inp
        """


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Print the tokens of the named file, or of a built-in sample."""
    args = list(sys.argv[1:] if argv is None else argv)
    text = Path(args[0]).read_text(encoding="utf-8") if args else _SAMPLE
    try:
        output = format_tokens(text)
    except LexError as error:
        print(error, file=sys.stderr)
        return 1
    sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())