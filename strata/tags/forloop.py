"""
Loop tag.

    {% for item in items %}
      {{ loop.index }}: {{ item }}
    {% else %}
      nothing
    {% endfor %}

Inside the body ``loop`` exposes index, index0, revindex, revindex0,
first, last, length, even, odd, and parent (the enclosing loop's record).

Values that are not both iterable and sized render the else body.
"""

from __future__ import annotations

from collections.abc import Iterable, Sized
from typing import Any, Dict, Optional

from ..arguments import Name, split_arguments
from ..constants import RESERVED_NAMES
from ..context import Context
from ..nodes import Output, Tag


class ForLoop(Tag):

    def __init__(self, parser, argstring):
        super().__init__(parser, argstring)
        values, self.filters = split_arguments(parser.parse_arguments(argstring))

        if (
            len(values) != 3
            or values[1] != Name("in")
            or not isinstance(values[0], Name)
            or "." in values[0].path
        ):
            parser.fail("invalid syntax for for-loop tag")
        if values[0].path in RESERVED_NAMES:
            parser.fail(f"cannot bind reserved name '{values[0].path}' in for-loop tag")

        self.target = values[0].path
        self.iterable = values[2]

        self.body = parser.parse_until(lambda name, args: name in ("else", "endfor"), closing="endfor")
        self.else_body = None
        if parser.stopped_at == "else":
            self.else_body = parser.parse_until(lambda name, args: name == "endfor", closing="endfor")

    def render(self, context: Context, output: Output) -> None:
        iterable = context.evaluate(self.iterable, self.filters)
        length = len(iterable) if isinstance(iterable, Iterable) and isinstance(iterable, Sized) else 0

        if length > 0:
            parent = context.get("loop")
            # One frame for the whole loop, rebound on every iteration
            context.push()
            try:
                for index, item in enumerate(iterable):
                    if index == length:
                        break
                    context[self.target] = item
                    context["loop"] = _loop_record(parent, index, length)
                    self.body.render(context, output)
            finally:
                context.pop()
        elif self.else_body is not None:
            self.else_body.render(context, output)


def _loop_record(parent: Optional[Dict[str, Any]], index: int, length: int) -> Dict[str, Any]:
    return {
        "parent": parent,
        "index": index + 1,
        "index0": index,
        "revindex": length - index,
        "revindex0": length - index - 1,
        "first": index == 0,
        "last": index == length - 1,
        "length": length,
        "even": index % 2 == 1,
        "odd": index % 2 == 0,
    }
