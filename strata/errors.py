"""
Exception hierarchy for the template engine.

All expected errors that should be reported to the template author
inherit from TemplateError. Errors raised inside user-supplied filters
or loaders are not wrapped and propagate with full tracebacks.
"""

from __future__ import annotations

from typing import Optional


class TemplateError(Exception):
    """
    Base class for all user-facing template errors.

    Carries optional template name and line number for diagnostics.
    """

    def __init__(self, message: str, template_name: Optional[str] = None, lineno: Optional[int] = None):
        self.message = message
        self.template_name = template_name
        self.lineno = lineno
        super().__init__(self._format())

    def _format(self) -> str:
        location = []
        if self.template_name:
            location.append(f"in '{self.template_name}'")
        if self.lineno is not None:
            location.append(f"line {self.lineno}")
        if not location:
            return self.message
        return f"{self.message} ({', '.join(location)})"


class TemplateSyntaxError(TemplateError):
    """Malformed tag, expression or argument syntax. Fatal to compilation."""
    pass


class TemplateRuntimeError(TemplateError):
    """Structural failure during rendering (missing filter, no loader)."""
    pass


class TemplateNotFound(TemplateError):
    """A loader could not resolve a template name."""

    def __init__(self, name: str, template_name: Optional[str] = None):
        self.name = name
        super().__init__(f"Template '{name}' not found", template_name)


__all__ = [
    "TemplateError",
    "TemplateSyntaxError",
    "TemplateRuntimeError",
    "TemplateNotFound",
]
