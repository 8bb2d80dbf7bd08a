"""
Conditional tag.

    {% if user.is_admin %}...{% else %}...{% endif %}
    {% if not items|length %}...{% endif %}
"""

from __future__ import annotations

from ..arguments import Name, split_arguments
from ..context import Context, is_truthy
from ..nodes import Output, Tag


class If(Tag):

    def __init__(self, parser, argstring):
        super().__init__(parser, argstring)
        values, self.filters = split_arguments(parser.parse_arguments(argstring))

        if len(values) == 2 and values[0] == Name("not"):
            self.negated = True
            self.item = values[1]
        elif len(values) == 1:
            self.negated = False
            self.item = values[0]
        else:
            parser.fail("invalid syntax for if tag")

        self.body = parser.parse_until(lambda name, args: name in ("else", "endif"), closing="endif")
        self.else_body = None
        if parser.stopped_at == "else":
            self.else_body = parser.parse_until(lambda name, args: name == "endif", closing="endif")

    def render(self, context: Context, output: Output) -> None:
        value = is_truthy(context.evaluate(self.item, self.filters))
        if value != self.negated:
            self.body.render(context, output)
        elif self.else_body is not None:
            self.else_body.render(context, output)
