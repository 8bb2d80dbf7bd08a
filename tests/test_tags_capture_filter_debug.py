"""
Tests for the capture, filter and debug tags.
"""

import pytest

from strata.errors import TemplateRuntimeError, TemplateSyntaxError
from tests.infrastructure import render_source


class TestCapture:

    def test_binds_rendered_body(self, engine):
        source = "{% capture as greeting %}Hello {{ name }}{% endcapture %}[{{ greeting|upper }}]"
        assert render_source(engine, source, name="Ann") == "[HELLO ANN]"

    def test_emits_nothing_itself(self, engine):
        assert render_source(engine, "a{% capture as x %}b{% endcapture %}c") == "ac"

    def test_does_not_modify_namespace(self, engine):
        data = {"x": "orig"}
        result = engine.compile("{% capture as x %}new{% endcapture %}{{ x }}").render(data)

        assert result == "new"
        assert data == {"x": "orig"}

    def test_invalid_syntax(self, engine):
        with pytest.raises(TemplateSyntaxError, match="syntax for capture tag"):
            engine.compile("{% capture greeting %}{% endcapture %}")

    @pytest.mark.parametrize("name", ["nil", "true", "false", "strata"])
    def test_reserved_names(self, engine, name):
        with pytest.raises(TemplateSyntaxError, match=f"reserved name '{name}'"):
            engine.compile(f"{{% capture as {name} %}}x{{% endcapture %}}")


class TestFilterBlock:

    def test_applies_chain_to_body(self, engine):
        source = "{% filter upper|replace 'A', 'x' %}abc {{ name }}{% endfilter %}"
        assert render_source(engine, source, name="ann") == "xBC xNN"

    def test_single_filter(self, engine):
        assert render_source(engine, "{% filter escape %}<b>{% endfilter %}") == "&lt;b&gt;"

    def test_requires_filter(self, engine):
        with pytest.raises(TemplateSyntaxError, match="requires at least one filter"):
            engine.compile("{% filter %}x{% endfilter %}")

    def test_unknown_filter_fails_at_render(self, engine):
        template = engine.compile("{% filter nope %}x{% endfilter %}")
        with pytest.raises(TemplateRuntimeError, match="filter 'nope' missing"):
            template.render()


class TestDebug:

    def test_dumps_visible_variables(self, engine):
        result = render_source(engine, "{% debug %}", x=1)

        assert "'x': 1" in result
        assert "'nil': None" in result
        assert "'strata'" in result

    def test_inside_block_shows_record_keys_only(self, engine):
        result = render_source(engine, "{% block a %}{% debug %}{% endblock %}")
        assert "Deferred(['depth', 'name', 'super'])" in result

    def test_takes_no_arguments(self, engine):
        with pytest.raises(TemplateSyntaxError, match="takes no arguments"):
            engine.compile("{% debug x %}")
