"""
Template inheritance.

A parent template defines named blocks:

    <title>{% block title %}Site{% endblock %}</title>

A child replaces them and may pull in the overridden content with
``block.super``:

    {% extends "base.html" %}
    {% block title %}Page | {{ block.super }}{% endblock %}

Each Block keeps a stack of layers, the parent's body at index 0 and
every override on top. Extends appends the child's bodies to the
parent's Block nodes at parse time and afterwards renders the parent
tree. Chains of any length collapse onto the root ancestor's blocks.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterator, List, Optional

from ..context import Context
from ..nodes import NodeList, Output, Tag

logger = logging.getLogger(__name__)

_BLOCK_NAME_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
_LITERAL_RE = re.compile(r"^([\"'])(.*?)\1$")


class Deferred(Mapping):
    """
    Read-only record whose callable values are computed on access.

    Membership checks and iteration never evaluate anything, so the
    expensive ``super`` rendering only happens when a template asks for it.
    """

    def __init__(self, values: Dict[str, Any]):
        self._values = dict(values)

    def __getitem__(self, key: str) -> Any:
        value = self._values[key]
        return value() if callable(value) else value

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Deferred({sorted(self._values)!r})"


class Block(Tag):

    def __init__(self, parser, argstring):
        super().__init__(parser, argstring)
        name = argstring.strip()
        if not _BLOCK_NAME_RE.match(name):
            parser.fail(f"invalid block name {name!r}")
        self.name = name

        # Registered before the body so that nested blocks follow their parent
        blocks: Dict[str, Block] = parser.storage.setdefault("blocks", {})
        if name in blocks:
            parser.fail(f"block '{name}' defined twice")
        blocks[name] = self

        closing: Dict[str, str] = {}

        def at_endblock(keyword: str, args: str) -> bool:
            if keyword == "endblock":
                closing["name"] = args.strip()
                return True
            return False

        body = parser.parse_until(at_endblock, closing="endblock")
        closing_name = closing.get("name", "")
        if closing_name and closing_name != name:
            parser.fail(f"endblock '{closing_name}' does not match block '{name}'")
        self.body = body
        self.layers: List[NodeList] = [body]

    def add_layer(self, nodelist: NodeList) -> None:
        """Stacks an overriding body on top of the current ones."""
        self.layers.append(nodelist)

    def render(self, context: Context, output: Output, index: Optional[int] = None) -> None:
        if index is None:
            index = len(self.layers) - 1

        context.push({
            "block": Deferred({
                "super": self._super_renderer(context, index),
                "depth": len(self.layers) - index,
                "name": self.name,
            })
        }, holds_state=False)
        try:
            self.layers[index].render(context, output)
        finally:
            context.pop()

    def _super_renderer(self, context: Context, index: int) -> Callable[[], str]:
        def render_super() -> str:
            if index == 0:
                return ""
            buffer: Output = []
            self.render(context, buffer, index - 1)
            return "".join(buffer)
        return render_super


class Extends(Tag):

    def __init__(self, parser, argstring):
        super().__init__(parser, argstring)
        if not (parser.first and parser.depth == 1):
            parser.fail("extends tag must be the first tag of the template")

        match = _LITERAL_RE.match(argstring.strip())
        if not match:
            parser.fail("extends tag requires a quoted template name")
        self.template_name = match.group(2)

        # The rest of the child only contributes blocks
        parser.parse_all()
        own_blocks: Dict[str, Block] = parser.storage.get("blocks", {})

        self.parent = parser.load_local(self.template_name)
        parent_blocks: Dict[str, Block] = {}
        if self.parent.parser is not None:
            parent_blocks = self.parent.parser.storage.get("blocks", {})

        effective = dict(parent_blocks)
        for name, block in own_blocks.items():
            target = parent_blocks.get(name)
            if target is None:
                effective[name] = block
            else:
                target.add_layer(block.body)
                # Nested overrides render through their own node, so both share one stack
                block.layers = target.layers
                logger.debug(
                    f"Block '{name}' of '{parser.name}' stacked on '{self.template_name}' "
                    f"({len(target.layers)} layers)"
                )
        # Grandchildren extend this template through the merged registry
        parser.storage["blocks"] = effective

    def render(self, context: Context, output: Output) -> None:
        self.parent.render(context, output)


__all__ = ["Deferred", "Block", "Extends"]
