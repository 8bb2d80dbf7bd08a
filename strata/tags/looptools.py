"""
Loop helper tags.

``cycle`` emits the next of its items on every render, which is handy
for alternating rows:

    {% for row in rows %}
      <tr class="{% cycle 'odd', 'even' %}">...</tr>
    {% endfor %}

``ifchanged`` renders its body only when something changed since the
previous render. Without an argument the rendered body itself is
compared; with one argument the resolved value is:

    {% for entry in entries %}
      {% ifchanged entry.date %}<h3>{{ entry.date }}</h3>{% endifchanged %}
    {% endfor %}
"""

from __future__ import annotations

from ..arguments import split_arguments
from ..context import Context
from ..nodes import Output, Tag, render_to_string, to_text

_UNSET = object()


class Cycle(Tag):

    def __init__(self, parser, argstring):
        super().__init__(parser, argstring)
        values, filters = split_arguments(parser.parse_arguments(argstring))
        if filters:
            parser.fail("cycle tag does not accept filters")
        if not values:
            parser.fail("at least one item is required for cycle")
        self.items = tuple(values)

    def render(self, context: Context, output: Output) -> None:
        position = (context.get_state(self, -1) + 1) % len(self.items)
        context.set_state(self, position)
        output.append(to_text(context.evaluate(self.items[position])))


class IfChanged(Tag):

    def __init__(self, parser, argstring):
        super().__init__(parser, argstring)
        values, self.filters = split_arguments(parser.parse_arguments(argstring))
        if len(values) > 1 or (self.filters and not values):
            parser.fail("ifchanged tag takes at most one argument")
        self.item = values[0] if values else _UNSET
        self.body = parser.parse_until(lambda name, args: name == "endifchanged", closing="endifchanged")

    def render(self, context: Context, output: Output) -> None:
        last = context.get_state(self, _UNSET)

        if self.item is _UNSET:
            text = render_to_string(self.body, context)
            if text != last:
                output.append(text)
                context.set_state(self, text)
            return

        value = context.evaluate(self.item, self.filters)
        if last is _UNSET or value != last:
            self.body.render(context, output)
            context.set_state(self, value)
