"""
Tests for the recursive-descent parser and the tag registry.
"""

import pytest

from strata.arguments import Name
from strata.errors import TemplateRuntimeError, TemplateSyntaxError
from strata.nodes import NodeList, Tag, TextNode, VariableNode
from strata.parser import Parser
from strata.registry import TagRegistry
from strata.tags import create_tag_registry


class Marker(Tag):
    """Test tag recording the parser state it was created in."""

    def __init__(self, parser, argstring):
        super().__init__(parser, argstring)
        self.argstring = argstring
        self.depth = parser.depth

    def render(self, context, output):
        output.append(f"<{self.argstring}>")


class Wrapper(Tag):
    """Test tag with a body closed by 'endwrap'."""

    def __init__(self, parser, argstring):
        super().__init__(parser, argstring)
        self.body = parser.parse_until(lambda name, args: name == "endwrap", closing="endwrap")

    def render(self, context, output):
        output.append("[")
        self.body.render(context, output)
        output.append("]")


class TestParser:

    def setup_method(self):
        self.tags = TagRegistry()
        self.tags.register("marker", Marker)
        self.tags.register("wrap", Wrapper)

    def parse(self, source, name=None):
        return Parser.from_source(source, self.tags, name=name).parse_all()

    def test_text_and_variables(self):
        nodes = self.parse("Hi {{ user.name|upper }}")

        assert isinstance(nodes, NodeList)
        assert isinstance(nodes[0], TextNode)
        assert isinstance(nodes[1], VariableNode)
        assert nodes[1].name == Name("user.name")
        assert nodes[1].filters[0].name == "upper"

    def test_comments_produce_no_nodes(self):
        assert len(self.parse("{# nothing #}")) == 0

    def test_tag_receives_argument_text(self):
        nodes = self.parse("{% marker a, b %}")
        assert nodes[0].argstring == "a, b"

    def test_nested_bodies_track_depth(self):
        nodes = self.parse("{% wrap %}{% marker %}{% endwrap %}")

        wrapper = nodes[0]
        assert wrapper.body[0].depth == 2

    def test_unknown_tag(self):
        with pytest.raises(TemplateSyntaxError, match="unknown tag 'nope'"):
            self.parse("{% nope %}")

    def test_unterminated_body(self):
        with pytest.raises(TemplateSyntaxError, match="unexpected end of template, expected 'endwrap'"):
            self.parse("{% wrap %}text")

    def test_stray_terminator_is_unknown(self):
        with pytest.raises(TemplateSyntaxError, match="unknown tag 'endwrap'"):
            self.parse("text{% endwrap %}")

    def test_variable_requires_single_name(self):
        with pytest.raises(TemplateSyntaxError, match="invalid syntax for variable node"):
            self.parse("{{ a b }}")

        with pytest.raises(TemplateSyntaxError, match="invalid syntax for variable node"):
            self.parse("{{ 'literal' }}")

    def test_syntax_errors_carry_location(self):
        with pytest.raises(TemplateSyntaxError) as exc:
            self.parse("one\ntwo\n{% nope %}", name="page.html")

        assert exc.value.lineno == 3
        assert exc.value.template_name == "page.html"
        assert "in 'page.html', line 3" in str(exc.value)

    def test_argument_errors_carry_location(self):
        with pytest.raises(TemplateSyntaxError) as exc:
            self.parse("\n{{ a|; }}")
        assert exc.value.lineno == 2

    def test_first_flag(self):
        parser = Parser.from_source("  \n{# c #}{% marker %}", self.tags)
        assert parser.first
        parser.parse_all()
        assert not parser.first

    def test_load_local_without_loader(self):
        parser = Parser.from_source("", self.tags)
        with pytest.raises(TemplateRuntimeError, match="no loader defined"):
            parser.load_local("base.html")

    def test_nodelist_remembers_parser(self):
        parser = Parser.from_source("x", self.tags)
        nodes = parser.parse_all()
        assert nodes.parser is parser


class TestTagRegistry:

    def setup_method(self):
        self.registry = TagRegistry()

    def test_register_and_lookup(self):
        self.registry.register("marker", Marker)

        assert "marker" in self.registry
        assert self.registry.get("marker") is Marker
        assert self.registry.get("missing") is None

    def test_overwrite_warns(self, caplog):
        self.registry.register("marker", Marker)
        with caplog.at_level("WARNING"):
            self.registry.register("marker", Wrapper)

        assert self.registry.get("marker") is Wrapper
        assert "overwrites" in caplog.text

    def test_unregister(self):
        self.registry.register("marker", Marker)
        self.registry.unregister("marker")
        self.registry.unregister("marker")
        assert "marker" not in self.registry

    def test_copy_is_independent(self):
        self.registry.register("marker", Marker)
        copy = self.registry.copy()
        copy.unregister("marker")

        assert "marker" in self.registry

    def test_builtin_tags(self):
        assert create_tag_registry().names() == [
            "block", "capture", "cycle", "debug", "extends",
            "filter", "for", "if", "ifchanged", "include",
        ]
