"""
Debug tag: dumps every visible context variable.
"""

from __future__ import annotations

import pprint

from ..context import Context
from ..nodes import Output, Tag


class Debug(Tag):

    def __init__(self, parser, argstring):
        super().__init__(parser, argstring)
        if argstring.strip():
            parser.fail("debug tag takes no arguments")

    def render(self, context: Context, output: Output) -> None:
        output.append(pprint.pformat(context.flatten()).strip())
