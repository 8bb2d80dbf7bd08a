"""
Template engine: the object that owns tag and filter registries and a
loader, compiles sources and renders trees.

Independent engines can coexist in one process; nothing is global except
the lazily created default engine behind the module-level compile() and
render() helpers.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Mapping, Optional, Union

from . import constants
from .config import EngineConfig
from .context import Context
from .errors import TemplateRuntimeError
from .filters import create_filter_registry
from .loaders import CachingFileSystemLoader, FileSystemLoader, Loader
from .nodes import NodeList, Output
from .parser import Parser
from .registry import FilterRegistry, TagRegistry
from .tags import create_tag_registry
from .template import Template
from .version import tool_version

logger = logging.getLogger(__name__)


class TemplateEngine:
    """
    Compiles and renders templates with one set of tags, filters and a loader.
    """

    def __init__(
        self,
        tags: Optional[TagRegistry] = None,
        filters: Optional[FilterRegistry] = None,
        loader: Optional[Loader] = None,
        globals: Optional[Mapping[str, Any]] = None,
    ):
        """
        Args:
            tags: Tag registry; a fresh one with the built-in tags if omitted
            filters: Filter registry; a fresh one with the standard filters if omitted
            loader: Loader for extends/include and get_template(); bound to this engine
            globals: Values visible to every render unless the namespace defines them
        """
        self.tags = tags if tags is not None else create_tag_registry()
        self.filters = filters if filters is not None else create_filter_registry()
        self.globals: Dict[str, Any] = dict(globals or {})
        self.loader: Optional[Loader] = None
        if loader is not None:
            self.set_loader(loader)

        self.metadata: Dict[str, Any] = {
            "block_start": constants.BLOCK_START,
            "block_end": constants.BLOCK_END,
            "var_start": constants.VAR_START,
            "var_end": constants.VAR_END,
            "comment_start": constants.COMMENT_START,
            "comment_end": constants.COMMENT_END,
            "version": tool_version(),
        }

    @classmethod
    def from_config(cls, cfg: EngineConfig) -> TemplateEngine:
        """Creates an engine with a filesystem loader when a directory is configured."""
        loader: Optional[Loader] = None
        if cfg.dirname is not None:
            if cfg.cache_size > 0:
                loader = CachingFileSystemLoader(cfg.dirname, cfg.suffix, amount=cfg.cache_size)
            else:
                loader = FileSystemLoader(cfg.dirname, cfg.suffix)
        return cls(loader=loader, globals=cfg.globals)

    def set_loader(self, loader: Loader) -> None:
        loader.engine = self
        self.loader = loader

    # ======= Compilation =======

    def parse(self, source: str, name: Optional[str] = None) -> NodeList:
        """
        Parses a source into a node tree.

        Raises:
            TemplateSyntaxError: On malformed template syntax
        """
        parser = Parser.from_source(source, self.tags, self.loader, name)
        nodelist = parser.parse_all()
        logger.debug(f"Parsed template {name or '<string>'}: {len(nodelist)} top-level nodes")
        return nodelist

    def compile(self, source: str, name: Optional[str] = None) -> Template:
        """Parses a source into a reusable Template."""
        return Template(self.parse(source, name), self, name)

    def get_template(self, name: str) -> Template:
        """
        Loads a template through the loader.

        Raises:
            TemplateRuntimeError: If no loader is configured
            TemplateNotFound: If the loader cannot resolve the name
        """
        if self.loader is None:
            raise TemplateRuntimeError(f"no loader defined, cannot load '{name}'")
        return self.loader.get_template(name)

    # ======= Rendering =======

    def new_context(self, namespace: Any = None) -> Context:
        """
        Creates the context for one render.

        Frames from bottom to top: the namespace, the reserved frame
        (nil, true, false, the metadata record and globals the namespace
        does not define), and an empty frame for template-level bindings.
        """
        if namespace is None:
            namespace = {}

        reserved: Dict[str, Any] = {
            name: value
            for name, value in self.globals.items()
            if name not in constants.RESERVED_NAMES and name not in namespace
        }
        reserved.update({
            "nil": None,
            "true": True,
            "false": False,
            constants.META_NAME: dict(self.metadata),
        })

        context = Context(namespace, self.filters)
        context.push(reserved)
        context.push()
        return context

    def render(self, tree: Union[Template, NodeList], namespace: Any = None) -> str:
        """Renders a Template or node tree against a namespace."""
        nodelist = tree.nodelist if isinstance(tree, Template) else tree
        output: Output = []
        nodelist.render(self.new_context(namespace), output)
        return "".join(output)


_default_engine: Optional[TemplateEngine] = None
_default_lock = threading.Lock()


def default_engine() -> TemplateEngine:
    """Returns the process-wide engine used by compile() and render()."""
    global _default_engine
    with _default_lock:
        if _default_engine is None:
            _default_engine = TemplateEngine()
        return _default_engine


def compile(source: str, name: Optional[str] = None) -> Template:
    """Compiles a source with the default engine."""
    return default_engine().compile(source, name)


def render(tree: Union[Template, NodeList, str], namespace: Any = None) -> str:
    """
    Renders with the default engine.

    A string is compiled first; a Template renders with the engine that compiled it.
    """
    if isinstance(tree, str):
        tree = compile(tree)
    if isinstance(tree, Template):
        return tree.engine.render(tree, namespace)
    return default_engine().render(tree, namespace)


__all__ = ["TemplateEngine", "default_engine", "compile", "render"]
