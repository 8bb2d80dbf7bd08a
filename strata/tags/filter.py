"""
Filter block.

    {% filter lower|truncate 20 %}...{% endfilter %}

Renders the body and passes the text through the filter chain.
"""

from __future__ import annotations

from ..context import Context
from ..nodes import Output, Tag, render_to_string, to_text


class FilterBlock(Tag):

    def __init__(self, parser, argstring):
        super().__init__(parser, argstring)
        if not argstring.strip():
            parser.fail("filter tag requires at least one filter")
        # The chain reuses the variable filter syntax
        self.filters = tuple(parser.parse_arguments("|" + argstring))
        self.body = parser.parse_until(lambda name, args: name == "endfilter", closing="endfilter")

    def render(self, context: Context, output: Output) -> None:
        text = to_text(context.apply_filters(render_to_string(self.body, context), self.filters))
        if text:
            output.append(text)
