from strata.errors import TemplateError, TemplateNotFound, TemplateRuntimeError, TemplateSyntaxError


def test_message_without_location():
    assert str(TemplateError("boom")) == "boom"


def test_message_with_location():
    err = TemplateSyntaxError("bad tag", "page.html", 4)

    assert str(err) == "bad tag (in 'page.html', line 4)"
    assert err.message == "bad tag"
    assert isinstance(err, TemplateError)


def test_message_with_line_only():
    assert str(TemplateRuntimeError("x", lineno=2)) == "x (line 2)"


def test_not_found():
    err = TemplateNotFound("a.html", "b.html")

    assert err.name == "a.html"
    assert str(err) == "Template 'a.html' not found (in 'b.html')"
