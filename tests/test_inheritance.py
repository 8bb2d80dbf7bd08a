"""
Tests for block/extends inheritance and the include tag.
"""

import pytest

from strata.errors import TemplateNotFound, TemplateRuntimeError, TemplateSyntaxError
from strata import TemplateEngine


class TestExtends:

    @pytest.fixture(autouse=True)
    def _base(self, templates):
        templates["base"] = "<{% block title %}Base{% endblock %}>|{% block body %}B{% endblock %}"

    def test_override(self, engine, templates):
        templates["child"] = '{% extends "base" %}{% block title %}Child{% endblock %}'
        assert engine.get_template("child").render() == "<Child>|B"

    def test_super(self, engine, templates):
        templates["child"] = '{% extends "base" %}{% block title %}{{ block.super }}+C{% endblock %}'
        assert engine.get_template("child").render() == "<Base+C>|B"

    def test_three_level_super_chain(self, engine, templates):
        templates["mid"] = '{% extends "base" %}{% block title %}M({{ block.super }}){% endblock %}'
        templates["leaf"] = (
            "{% extends 'mid' %}"
            "{% block title %}L({{ block.super }}){% endblock %}"
            "{% block body %}LB{% endblock %}"
        )

        assert engine.get_template("leaf").render() == "<L(M(Base))>|LB"
        assert engine.get_template("mid").render() == "<M(Base)>|B"

    def test_grandchild_overrides_block_mid_level_left_alone(self, engine, templates):
        templates["mid"] = '{% extends "base" %}{% block title %}M{% endblock %}'
        templates["leaf"] = '{% extends "mid" %}{% block body %}LB{% endblock %}'

        assert engine.get_template("leaf").render() == "<M>|LB"

    def test_content_outside_blocks_is_ignored(self, engine, templates):
        templates["child"] = '{% extends "base" %}ignored {{ x }}{% block title %}T{% endblock %}'
        assert engine.get_template("child").render(x=1) == "<T>|B"

    def test_blocks_unknown_to_parent_are_not_rendered(self, engine, templates):
        templates["child"] = '{% extends "base" %}{% block extra %}E{% endblock %}'
        assert engine.get_template("child").render() == "<Base>|B"

    def test_block_variables_use_render_context(self, engine, templates):
        templates["child"] = '{% extends "base" %}{% block body %}{{ user }}{% endblock %}'
        assert engine.get_template("child").render(user="Ann") == "<Base>|Ann"

    def test_repeated_renders_are_stable(self, engine, templates):
        templates["child"] = '{% extends "base" %}{% block title %}{{ block.super }}!{% endblock %}'
        template = engine.get_template("child")

        assert template.render() == "<Base!>|B"
        assert template.render() == "<Base!>|B"

    def test_siblings_do_not_share_layers(self, engine, templates):
        templates["one"] = '{% extends "base" %}{% block title %}1{% endblock %}'
        templates["two"] = '{% extends "base" %}{% block title %}2{{ block.super }}{% endblock %}'
        one = engine.get_template("one")
        two = engine.get_template("two")

        assert one.render() == "<1>|B"
        assert two.render() == "<2Base>|B"

    def test_leading_whitespace_and_comments_allowed(self, engine, templates):
        templates["child"] = '  \n{# layout #}{% extends "base" %}{% block body %}X{% endblock %}'
        assert engine.get_template("child").render() == "<Base>|X"

    def test_relative_names(self, engine, templates):
        templates["pages/base"] = "[{% block a %}{% endblock %}]"
        templates["pages/child"] = '{% extends "base" %}{% block a %}rel{% endblock %}'
        templates["pages/abs"] = '{% extends "/base" %}{% block title %}abs{% endblock %}'

        assert engine.get_template("pages/child").render() == "[rel]"
        assert engine.get_template("pages/abs").render() == "<abs>|B"

    def test_must_come_first(self, engine):
        with pytest.raises(TemplateSyntaxError, match="must be the first tag"):
            engine.compile('x{% extends "base" %}')

    def test_not_allowed_in_nested_body(self, engine):
        with pytest.raises(TemplateSyntaxError, match="must be the first tag"):
            engine.compile('{% if x %}{% extends "base" %}{% endif %}')

    def test_requires_quoted_name(self, engine):
        with pytest.raises(TemplateSyntaxError, match="quoted template name"):
            engine.compile("{% extends base %}")

    def test_missing_parent(self, engine):
        with pytest.raises(TemplateNotFound) as exc:
            engine.compile('{% extends "nope" %}')
        assert exc.value.name == "nope"

    def test_circular_extends(self, engine, templates):
        templates["a"] = '{% extends "b" %}'
        templates["b"] = '{% extends "a" %}'

        with pytest.raises(TemplateRuntimeError, match="circular template reference: a -> b -> a"):
            engine.get_template("a")

    def test_no_loader(self):
        with pytest.raises(TemplateRuntimeError, match="no loader defined"):
            TemplateEngine().compile('{% extends "base" %}')


class TestBlock:

    def test_renders_own_body_without_parent(self, engine):
        assert engine.compile("[{% block a %}x{% endblock %}]").render() == "[x]"

    def test_super_at_root_layer_is_empty(self, engine):
        assert engine.compile("{% block a %}[{{ block.super }}]{% endblock %}").render() == "[]"

    def test_name_and_depth(self, engine, templates):
        templates["base"] = "{% block a %}{{ block.name }}{{ block.depth }}{% endblock %}"
        templates["child"] = '{% extends "base" %}{% block a %}{{ block.depth }}-{{ block.super }}{% endblock %}'

        assert engine.get_template("child").render() == "1-a2"

    def test_block_record_is_scoped(self, engine):
        assert engine.compile("{% block a %}{% endblock %}[{{ block.name }}]").render() == "[]"

    def test_nested_blocks(self, engine, templates):
        templates["nb"] = "{% block outer %}O[{% block inner %}I{% endblock %}]{% endblock %}"
        templates["inner"] = '{% extends "nb" %}{% block inner %}X{% endblock %}'
        templates["outer"] = '{% extends "nb" %}{% block outer %}<{{ block.super }}>{% endblock %}'

        assert engine.get_template("inner").render() == "O[X]"
        assert engine.get_template("outer").render() == "<O[I]>"

    def test_grandchild_overrides_block_nested_in_middle_override(self, engine, templates):
        templates["a"] = "{% block outer %}({% block inner %}A{% endblock %}){% endblock %}"
        templates["b"] = '{% extends "a" %}{% block outer %}[{% block inner %}B{% endblock %}]{% endblock %}'
        templates["c"] = '{% extends "b" %}{% block inner %}C{% endblock %}'
        templates["d"] = '{% extends "b" %}{% block inner %}C+{{ block.super }}{% endblock %}'

        assert engine.get_template("c").render() == "[C]"
        assert engine.get_template("d").render() == "[C+B]"
        assert engine.get_template("b").render() == "[B]"

    def test_block_introduced_by_middle_template(self, engine, templates):
        templates["base"] = "{% block content %}C{% endblock %}"
        templates["mid"] = '{% extends "base" %}{% block content %}M{% block side %}S{% endblock %}{% endblock %}'
        templates["leaf"] = '{% extends "mid" %}{% block side %}LS{% endblock %}'

        assert engine.get_template("mid").render() == "MS"
        assert engine.get_template("leaf").render() == "MLS"

    def test_endblock_name(self, engine):
        assert engine.compile("{% block a %}x{% endblock a %}").render() == "x"

        with pytest.raises(TemplateSyntaxError, match="endblock 'b' does not match block 'a'"):
            engine.compile("{% block a %}x{% endblock b %}")

    def test_duplicate_name(self, engine):
        with pytest.raises(TemplateSyntaxError, match="block 'a' defined twice"):
            engine.compile("{% block a %}{% endblock %}{% block a %}{% endblock %}")

    @pytest.mark.parametrize("name", ["", "1a", "a b", "a-b"])
    def test_invalid_name(self, engine, name):
        with pytest.raises(TemplateSyntaxError, match="invalid block name"):
            engine.compile(f"{{% block {name} %}}{{% endblock %}}")

    def test_unterminated(self, engine):
        with pytest.raises(TemplateSyntaxError, match="expected 'endblock'"):
            engine.compile("{% block a %}x")


class TestInclude:

    def test_renders_with_current_context(self, engine, templates):
        templates["item"] = "<{{ x }}>"
        source = "{% for x in items %}{% include 'item' %}{% endfor %}"

        assert engine.compile(source).render(items=[1, 2]) == "<1><2>"

    def test_relative_to_includer(self, engine, templates):
        templates["pages/index"] = '{% include "part" %}|{% include "/top" %}'
        templates["pages/part"] = "P"
        templates["top"] = "T"

        assert engine.get_template("pages/index").render() == "P|T"

    def test_included_blocks_are_separate(self, engine, templates):
        templates["part"] = "{% block a %}inner{% endblock %}"
        assert engine.compile("{% block a %}outer{% endblock %}{% include 'part' %}").render() == "outerinner"

    def test_requires_quoted_name(self, engine):
        with pytest.raises(TemplateSyntaxError, match="quoted template name"):
            engine.compile("{% include part %}")

    def test_missing(self, engine):
        with pytest.raises(TemplateNotFound, match="Template 'nope' not found"):
            engine.compile("{% include 'nope' %}")

    def test_self_include(self, engine, templates):
        templates["loop"] = "{% include 'loop' %}"
        with pytest.raises(TemplateRuntimeError, match="circular"):
            engine.get_template("loop")
