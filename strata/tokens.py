"""
Lexical types.

Defines the token kinds produced by the tokenizer and the token stream
consumed by the parser.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import List, Optional


class TokenType(enum.Enum):
    """Kinds of spans the tokenizer splits a template into."""
    TEXT = "TEXT"
    BLOCK = "BLOCK"          # {% ... %}
    VARIABLE = "VARIABLE"    # {{ ... }}
    COMMENT = "COMMENT"      # {# ... #}


@dataclass(frozen=True)
class Token:
    """
    Token with position information for error diagnostics.

    For BLOCK, VARIABLE and COMMENT tokens the value is the trimmed inner
    text; for TEXT tokens it is the literal text.
    """
    type: TokenType
    value: str
    lineno: int = 1      # Line where the token starts (1-based)

    def __repr__(self) -> str:
        return f"Token({self.type.value}, {self.value!r}, line {self.lineno})"


class TokenStream:
    """
    Ordered token stream with LIFO push-back.

    Tokens are appended while the stream is open. Once closed the stream
    is consumed with next(); tokens re-injected with push() are returned
    before any buffered token, most recently pushed first.
    """

    def __init__(self, tokens: Optional[List[Token]] = None):
        self._tokens: List[Token] = list(tokens or [])
        self._pushed: List[Token] = []
        self._position = 0
        self._closed = False

    def append(self, token: Token) -> None:
        """Adds one token to a stream that is not closed yet."""
        if self._closed:
            raise RuntimeError("cannot write to closed token stream")
        self._tokens.append(token)

    def close(self) -> TokenStream:
        """Closes the stream for writing and returns it."""
        if self._closed:
            raise RuntimeError("cannot close closed token stream")
        self._closed = True
        return self

    @property
    def closed(self) -> bool:
        return self._closed

    def next(self) -> Token:
        """
        Returns the next token.

        Raises:
            StopIteration: If the stream is exhausted
        """
        if self._pushed:
            return self._pushed.pop()
        if self._position >= len(self._tokens):
            raise StopIteration
        token = self._tokens[self._position]
        self._position += 1
        return token

    def push(self, token: Token) -> None:
        """Re-injects a token so that it is consumed again before buffered ones."""
        self._pushed.append(token)

    def eos(self) -> bool:
        """True when neither pushed-back nor buffered tokens remain."""
        return not self._pushed and self._position >= len(self._tokens)

    def __iter__(self):
        return self

    def __next__(self) -> Token:
        return self.next()

    def __len__(self) -> int:
        return len(self._pushed) + len(self._tokens) - self._position


__all__ = ["TokenType", "Token", "TokenStream"]
