"""
Include tag.

    {% include "partials/header.html" %}

The named template is loaded and parsed together with the including
one, its name resolved relative to the includer. It renders with the
current context.
"""

from __future__ import annotations

import re

from ..context import Context
from ..nodes import Output, Tag

_LITERAL_RE = re.compile(r"^([\"'])(.*?)\1$")


class Include(Tag):

    def __init__(self, parser, argstring):
        super().__init__(parser, argstring)
        match = _LITERAL_RE.match(argstring.strip())
        if not match:
            parser.fail("include tag requires a quoted template name")
        self.template_name = match.group(2)
        self.nodelist = parser.load_local(self.template_name)

    def render(self, context: Context, output: Output) -> None:
        self.nodelist.render(context, output)
