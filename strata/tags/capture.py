"""
Capture tag.

    {% capture as title %}{{ user.name }}'s page{% endcapture %}

Renders the body and binds the text in the innermost frame, so the
variable disappears together with the enclosing scope.
"""

from __future__ import annotations

import re

from ..constants import RESERVED_NAMES
from ..context import Context
from ..nodes import Output, Tag, render_to_string

_CAPTURE_RE = re.compile(r"^as\s+([a-zA-Z_][a-zA-Z0-9_]*)$")


class Capture(Tag):

    def __init__(self, parser, argstring):
        super().__init__(parser, argstring)
        match = _CAPTURE_RE.match(argstring)
        if not match:
            parser.fail("syntax for capture tag: {% capture as <variable> %}")
        self.name = match.group(1)
        if self.name in RESERVED_NAMES:
            parser.fail(f"cannot capture into reserved name '{self.name}'")
        self.body = parser.parse_until(lambda name, args: name == "endcapture", closing="endcapture")

    def render(self, context: Context, output: Output) -> None:
        context[self.name] = render_to_string(self.body, context)
