from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List

logger = logging.getLogger(__name__)


class TokenKind(Enum):
    LITERAL = "literal"
    ASSIGN = "assign"
    NEWLINE = "newline"
    EOF = "eof"
    COMMENT = "comment"
    DOUBLE_QUOTE = "double_quote"
    SINGLE_QUOTE = "single_quote"
    WHITESPACE = "whitespace"


@dataclass(frozen=True)
class Position:
    line: int
    column: int


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str


class EnvSyntaxError(RuntimeError):
    """Base class for malformed `.env` content.

    Subclasses carry the line of the offending token and, where the parser
    knows it, the column. Two errors are equal when kind and fields match.
    """

    def __init__(self, message: str, line: int, column: int | None = None) -> None:
        super().__init__(message)
        self.line = line
        self.column = column

    @property
    def position(self) -> Position | None:
        if self.column is None:
            return None
        return Position(self.line, self.column)

    def _fields(self) -> tuple:
        return (self.line, self.column)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._fields() == other._fields()

    def __hash__(self) -> int:
        return hash((type(self), self._fields()))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"


class UnexpectedToken(EnvSyntaxError):
    def __init__(self, expected: str, found: str, line: int, column: int) -> None:
        super().__init__(
            f"Unexpected token: expected {expected} but found '{found}' at line {line}, character {column}",
            line,
            column,
        )
        self.expected = expected
        self.found = found

    def _fields(self) -> tuple:
        return (self.expected, self.found, self.line, self.column)


class MissingAssignmentOperator(EnvSyntaxError):
    def __init__(self, key: str, line: int, column: int) -> None:
        super().__init__(
            f"Missing assignment operator for key '{key}' on line {line}, character {column}",
            line,
            column,
        )
        self.key = key

    def _fields(self) -> tuple:
        return (self.key, self.line, self.column)


class ExpectedValueButFoundAssignment(EnvSyntaxError):
    def __init__(self, line: int, column: int) -> None:
        super().__init__(
            f"Expected value but found assignment operator at line {line}, character {column}",
            line,
            column,
        )


class MissingKey(EnvSyntaxError):
    def __init__(self, line: int) -> None:
        super().__init__(f"Key missing on line {line}", line)


class MissingValue(EnvSyntaxError):
    def __init__(self, line: int) -> None:
        super().__init__(f"Value missing on line {line}", line)


class FoundOnlyKey(EnvSyntaxError):
    def __init__(self, line: int) -> None:
        super().__init__(f"Only found key on line {line}, expected assignment operator and value", line)


class UnclosedValue(EnvSyntaxError):
    def __init__(self, line: int) -> None:
        super().__init__(f"Key or value was not closed from line {line}", line)


class Tokenizer:
    SYMBOLS = {
        "=": TokenKind.ASSIGN,
        " ": TokenKind.WHITESPACE,
        "#": TokenKind.COMMENT,
        "\n": TokenKind.NEWLINE,
        '"': TokenKind.DOUBLE_QUOTE,
        "'": TokenKind.SINGLE_QUOTE,
    }

    def __init__(self, text: str) -> None:
        self.text = text

    def tokens(self) -> List[Token]:
        result = [Token(self.SYMBOLS.get(char, TokenKind.LITERAL), char) for char in self.text]
        result.append(Token(TokenKind.EOF, ""))
        return result


def tokenize(text: str) -> List[Token]:
    return Tokenizer(text).tokens()


def parse(tokens: Iterable[Token]) -> dict[str, str]:
    return _Parser().parse(tokens)


def process(text: str) -> dict[str, str]:
    """Tokenize and parse `.env` text into a key/value mapping.

    Raises the first EnvSyntaxError found; no partial mapping is returned.
    """
    return parse(tokenize(text))


class ParserState(Enum):
    AWAITING_KEY = "awaiting_key"
    AWAITING_VALUE = "awaiting_value"
    IN_SINGLE_QUOTE = "in_single_quote"
    IN_DOUBLE_QUOTE = "in_double_quote"
    AFTER_VALUE = "after_value"
    IN_COMMENT = "in_comment"


_QUOTE_NAMES = {
    TokenKind.SINGLE_QUOTE: "single quotation mark",
    TokenKind.DOUBLE_QUOTE: "double quotation mark",
}

_QUOTE_STATES = {
    TokenKind.SINGLE_QUOTE: ParserState.IN_SINGLE_QUOTE,
    TokenKind.DOUBLE_QUOTE: ParserState.IN_DOUBLE_QUOTE,
}


class _Parser:
    def __init__(self) -> None:
        self.entries: dict[str, str] = {}
        self.state = ParserState.AWAITING_KEY
        self.line = 1
        self.column = 0
        self.entry_line = 1
        self.quote_line = 1
        self.key: List[str] = []
        self.value: List[str] = []
        self.assigned = False
        self.done = False
        self.transitions: dict[tuple[ParserState, TokenKind], Callable[[Token], None]] = self._build_transitions()

    def _build_transitions(self) -> dict[tuple[ParserState, TokenKind], Callable[[Token], None]]:
        S, T = ParserState, TokenKind
        table: dict[tuple[ParserState, TokenKind], Callable[[Token], None]] = {
            (S.AWAITING_KEY, T.LITERAL): self._append_key,
            (S.AWAITING_KEY, T.ASSIGN): self._assign,
            (S.AWAITING_KEY, T.WHITESPACE): self._reject_whitespace_in_key,
            (S.AWAITING_KEY, T.SINGLE_QUOTE): self._reject_quoted_key,
            (S.AWAITING_KEY, T.DOUBLE_QUOTE): self._reject_quoted_key,
            (S.AWAITING_VALUE, T.LITERAL): self._append_value,
            (S.AWAITING_VALUE, T.ASSIGN): self._reject_assignment,
            (S.AWAITING_VALUE, T.WHITESPACE): self._end_value,
            (S.AWAITING_VALUE, T.SINGLE_QUOTE): self._open_quote,
            (S.AWAITING_VALUE, T.DOUBLE_QUOTE): self._open_quote,
            (S.AFTER_VALUE, T.LITERAL): self._reject_trailing,
            (S.AFTER_VALUE, T.ASSIGN): self._reject_assignment,
            (S.AFTER_VALUE, T.WHITESPACE): self._ignore,
            (S.AFTER_VALUE, T.SINGLE_QUOTE): self._reject_trailing,
            (S.AFTER_VALUE, T.DOUBLE_QUOTE): self._reject_trailing,
        }
        for state in (S.AWAITING_KEY, S.AWAITING_VALUE, S.AFTER_VALUE):
            table[(state, T.COMMENT)] = self._start_comment
            table[(state, T.NEWLINE)] = self._finish_line
            table[(state, T.EOF)] = self._finish_input
        for kind in T:
            table[(S.IN_COMMENT, kind)] = self._ignore
        table[(S.IN_COMMENT, T.NEWLINE)] = self._finish_line
        table[(S.IN_COMMENT, T.EOF)] = self._finish_input
        for state, closing in ((S.IN_SINGLE_QUOTE, T.SINGLE_QUOTE), (S.IN_DOUBLE_QUOTE, T.DOUBLE_QUOTE)):
            for kind in T:
                table[(state, kind)] = self._append_value
            table[(state, closing)] = self._close_quote
            table[(state, T.NEWLINE)] = self._quoted_newline
            table[(state, T.EOF)] = self._unclosed
        return table

    def parse(self, tokens: Iterable[Token]) -> dict[str, str]:
        for token in tokens:
            self.column += 1
            self.transitions[(self.state, token.kind)](token)
            if self.done:
                break
        if not self.done:
            # Running out of tokens is end of input.
            self.column += 1
            self.transitions[(self.state, TokenKind.EOF)](Token(TokenKind.EOF, ""))
        logger.debug(f"Parsed {len(self.entries)} entries over {self.line} line(s)")
        return self.entries

    def _append_key(self, token: Token) -> None:
        self.key.append(token.value)

    def _append_value(self, token: Token) -> None:
        self.value.append(token.value)

    def _assign(self, token: Token) -> None:
        self.assigned = True
        self.state = ParserState.AWAITING_VALUE

    def _end_value(self, token: Token) -> None:
        self.state = ParserState.AFTER_VALUE

    def _start_comment(self, token: Token) -> None:
        self.state = ParserState.IN_COMMENT

    def _ignore(self, token: Token) -> None:
        pass

    def _open_quote(self, token: Token) -> None:
        if self.value:
            raise UnexpectedToken(
                "value, whitespace, newline, or comment", _QUOTE_NAMES[token.kind], self.line, self.column
            )
        self.quote_line = self.line
        self.state = _QUOTE_STATES[token.kind]

    def _close_quote(self, token: Token) -> None:
        self.state = ParserState.AFTER_VALUE

    def _quoted_newline(self, token: Token) -> None:
        self.value.append(token.value)
        self._advance_line()

    def _unclosed(self, token: Token) -> None:
        raise UnclosedValue(self.quote_line)

    def _reject_whitespace_in_key(self, token: Token) -> None:
        raise UnexpectedToken("key or comment symbol", " ", self.line, self.column)

    def _reject_quoted_key(self, token: Token) -> None:
        raise UnexpectedToken("key or assignment operator", _QUOTE_NAMES[token.kind], self.line, self.column)

    def _reject_assignment(self, token: Token) -> None:
        raise ExpectedValueButFoundAssignment(self.line, self.column)

    def _reject_trailing(self, token: Token) -> None:
        found = _QUOTE_NAMES.get(token.kind, token.value)
        raise UnexpectedToken("comment or new line", found, self.line, self.column)

    def _finish_line(self, token: Token) -> None:
        self._commit()
        self._advance_line()
        self._reset()

    def _finish_input(self, token: Token) -> None:
        self._commit()
        self.done = True

    def _commit(self) -> None:
        key = "".join(self.key)
        value = "".join(self.value)
        if not key and not value and not self.assigned:
            return
        if self.assigned and not key:
            raise MissingKey(self.entry_line)
        if self.assigned and not value:
            raise MissingValue(self.entry_line)
        if not self.assigned:
            raise FoundOnlyKey(self.entry_line)
        if key in self.entries:
            logger.debug(f"Key '{key}' redefined on line {self.entry_line}")
        self.entries[key] = value

    def _advance_line(self) -> None:
        self.line += 1
        self.column = 0

    def _reset(self) -> None:
        self.state = ParserState.AWAITING_KEY
        self.key.clear()
        self.value.clear()
        self.assigned = False
        self.entry_line = self.line


__all__ = [
    "EnvSyntaxError",
    "ExpectedValueButFoundAssignment",
    "FoundOnlyKey",
    "MissingAssignmentOperator",
    "MissingKey",
    "MissingValue",
    "ParserState",
    "Position",
    "Token",
    "TokenKind",
    "Tokenizer",
    "UnclosedValue",
    "UnexpectedToken",
    "parse",
    "process",
    "tokenize",
]
