"""
Argument lexer for tag and variable contents.

Turns free-form text such as ``user.name|truncate 20, "..."`` into a
structured argument list:

    [Name("user.name"), FilterCall("truncate", (20, "..."))]

Grammar (whitespace is always skipped):

    name       → [a-zA-Z_][a-zA-Z0-9_]* ("." [a-zA-Z0-9_]+)*
    number     → digits ("." digits?)?
    string     → '...' | "..."   (escapes: \\\\ \\n \\t \\" \\')
    separator  → ","
    filter     → "|" name argument*

A pipe opens a filter group that lasts until the next pipe or the end
of input; there is no other filter terminator.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Tuple, Union

from .errors import TemplateSyntaxError


@dataclass(frozen=True)
class Name:
    """Dotted variable path, resolved against the context at render time."""
    path: str

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class FilterCall:
    """One stage of a filter chain: filter name plus literal or Name arguments."""
    name: str
    args: Tuple[Any, ...] = ()


# Literal numbers and strings are kept as plain int/float/str values
Argument = Union[Name, int, float, str, FilterCall]


class LexState(enum.Enum):
    INITIAL = "initial"
    FILTER = "filter"


class ArgumentLexer:
    """
    Two-state scanner over the interior of a tag.

    Yields (kind, value) pairs where kind is one of NAME, NUMBER, STRING,
    SEPARATOR, FILTER_START and FILTER_END.
    """

    WHITESPACE_RE = re.compile(r"\s+")
    NAME_RE = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*(?:\.[a-zA-Z0-9_]+)*")
    PIPE_RE = re.compile(r"\|")
    SEPARATOR_RE = re.compile(r",")
    STRING_RE = re.compile(
        r'"([^"\\]*(?:\\.[^"\\]*)*)"'
        r"|"
        r"'([^'\\]*(?:\\.[^'\\]*)*)'",
        re.DOTALL,
    )
    NUMBER_RE = re.compile(r"\d+(?:\.\d*)?")

    def __init__(self, text: str):
        self.text = text

    def lex(self) -> Iterator[Tuple[str, Optional[str]]]:
        """
        Scans the text.

        Raises:
            TemplateSyntaxError: On a character no rule accepts
        """
        text = self.text
        position = 0
        state = LexState.INITIAL

        while position < len(text):
            match = self.WHITESPACE_RE.match(text, position)
            if match:
                position = match.end()
                continue

            match = self.PIPE_RE.match(text, position)
            if match:
                if state is LexState.FILTER:
                    # A second pipe closes the previous filter and opens the next
                    yield "FILTER_END", None
                state = LexState.FILTER
                yield "FILTER_START", None
                position = match.end()
                continue

            for kind, pattern in (
                ("SEPARATOR", self.SEPARATOR_RE),
                ("NAME", self.NAME_RE),
                ("STRING", self.STRING_RE),
                ("NUMBER", self.NUMBER_RE),
            ):
                match = pattern.match(text, position)
                if match:
                    yield kind, match.group(0)
                    position = match.end()
                    break
            else:
                where = "block tag" if state is LexState.INITIAL else "filter definition"
                raise TemplateSyntaxError(
                    f"unexpected character '{text[position]}' in {where}: {text!r}"
                )

        if state is LexState.FILTER:
            yield "FILTER_END", None


_STRING_ESCAPES = {"\\": "\\", "n": "\n", "t": "\t", '"': '"', "'": "'"}
_STRING_ESCAPE_RE = re.compile(r"\\([\\nt'\"])")


def unquote(literal: str) -> str:
    """Strips the quotes of a string literal and resolves its escapes."""
    return _STRING_ESCAPE_RE.sub(lambda m: _STRING_ESCAPES[m.group(1)], literal[1:-1])


def _convert(kind: str, value: str) -> Union[Name, int, float, str]:
    if kind == "NAME":
        return Name(value)
    if kind == "NUMBER":
        return float(value) if "." in value else int(value)
    return unquote(value)


def _make_filter(buffer: List[Any], text: str) -> FilterCall:
    if not buffer:
        raise TemplateSyntaxError(f"empty filter in {text!r}")
    head = buffer[0]
    if not isinstance(head, Name):
        raise TemplateSyntaxError(f"filter name expected, got {head!r} in {text!r}")
    return FilterCall(head.path, tuple(buffer[1:]))


def parse_arguments(text: str) -> List[Argument]:
    """
    Parses tag contents into a flat argument list.

    Leading bare values come first, followed by one FilterCall per pipe
    group in source order.

    Examples:
        >>> parse_arguments("item in seq")
        [Name(path='item'), Name(path='in'), Name(path='seq')]
        >>> parse_arguments("user.name|lower|replace 'a', 'b'")
        [Name(path='user.name'), FilterCall(name='lower', args=()), FilterCall(name='replace', args=('a', 'b'))]
    """
    result: List[Argument] = []
    filter_buffer: Optional[List[Any]] = None

    for kind, value in ArgumentLexer(text).lex():
        if kind == "FILTER_START":
            filter_buffer = []
        elif kind == "FILTER_END":
            result.append(_make_filter(filter_buffer or [], text))
            filter_buffer = None
        elif kind == "SEPARATOR":
            continue
        else:
            target = result if filter_buffer is None else filter_buffer
            target.append(_convert(kind, value))

    return result


def split_arguments(arguments: List[Argument]) -> Tuple[List[Any], List[FilterCall]]:
    """Separates the subject values from the filter chain."""
    values = [arg for arg in arguments if not isinstance(arg, FilterCall)]
    filters = [arg for arg in arguments if isinstance(arg, FilterCall)]
    return values, filters


__all__ = [
    "Name",
    "FilterCall",
    "Argument",
    "ArgumentLexer",
    "LexState",
    "parse_arguments",
    "split_arguments",
    "unquote",
]
