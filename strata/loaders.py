"""
Template loaders.

A loader turns a template name into a parsed node tree. Names are
slash-separated and resolved relative to the template that references
them (``extends``/``include``); a leading slash makes a name absolute.
Path segments starting with a dot are dropped, so names can never
escape the template root.
"""

from __future__ import annotations

import logging
import posixpath
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional, Tuple

from .errors import TemplateNotFound, TemplateRuntimeError
from .nodes import NodeList

if TYPE_CHECKING:
    from .engine import TemplateEngine
    from .template import Template

logger = logging.getLogger(__name__)


def resolve_name(name: str, parent: Optional[str] = None) -> str:
    """
    Resolves a template name against the name of the referencing template.

    Raises:
        TemplateNotFound: If nothing is left of the name after sanitising
    """
    parts = [part for part in name.split("/") if part and not part.startswith(".")]
    if not parts:
        raise TemplateNotFound(name, parent)
    base = posixpath.dirname(parent) if parent and not name.startswith("/") else ""
    return posixpath.join(base, *parts) if base else posixpath.join(*parts)


class Loader(ABC):
    """
    Base class for all loaders.

    Subclasses implement get_source(); parsing, circular reference
    detection and Template construction are shared. A loader is bound to
    the engine that owns it, whose tags and filters it parses with.
    """

    def __init__(self):
        self.engine: Optional[TemplateEngine] = None
        self._local = threading.local()

    @abstractmethod
    def get_source(self, name: str, parent: Optional[str] = None) -> Tuple[str, str]:
        """
        Reads a template source.

        Args:
            name: Template name as written in the referencing template
            parent: Name of the referencing template, if any

        Returns:
            (source, resolved_name)

        Raises:
            TemplateNotFound: If the name cannot be resolved
        """
        pass

    def load_local(self, name: str, parent: Optional[str] = None) -> NodeList:
        """
        Loads and parses a template, always afresh.

        Inheritance merges modify the trees they load, so extends and
        include go through this method rather than the cache.

        Raises:
            TemplateNotFound: If the name cannot be resolved
            TemplateRuntimeError: On circular extends/include references
        """
        source, resolved = self.get_source(name, parent)
        return self._parse(source, resolved, parent)

    def load_cached(self, name: str, parent: Optional[str] = None) -> NodeList:
        """Loads a template, possibly from a cache. Defaults to load_local()."""
        return self.load_local(name, parent)

    def get_template(self, name: str) -> Template:
        """Loads a template for rendering by the application."""
        from .template import Template

        return Template(self.load_cached(name), self._require_engine(), name)

    def _parse(self, source: str, resolved: str, parent: Optional[str]) -> NodeList:
        engine = self._require_engine()

        loading: List[str] = self._loading_stack()
        if resolved in loading:
            chain = " -> ".join(loading + [resolved])
            raise TemplateRuntimeError(f"circular template reference: {chain}", parent)

        loading.append(resolved)
        try:
            return engine.parse(source, resolved)
        finally:
            loading.pop()

    def _loading_stack(self) -> List[str]:
        stack = getattr(self._local, "stack", None)
        if stack is None:
            stack = self._local.stack = []
        return stack

    def _require_engine(self) -> TemplateEngine:
        if self.engine is None:
            raise TemplateRuntimeError("loader is not bound to an engine")
        return self.engine


class FileSystemLoader(Loader):
    """
    Loads templates from a directory.

    Args:
        dirname: Root folder of the templates
        suffix: Appended to names that do not already end with it (e.g. ".html")
    """

    def __init__(self, dirname: str | Path, suffix: str = ""):
        super().__init__()
        self.dirname = Path(dirname)
        self.suffix = suffix

    def path_for(self, name: str, parent: Optional[str] = None) -> Tuple[Path, str]:
        """
        Returns the file path and resolved name for a template name.

        Raises:
            TemplateNotFound: If the file does not exist
        """
        resolved = resolve_name(name, parent)
        if self.suffix and not resolved.endswith(self.suffix):
            resolved += self.suffix
        path = self.dirname / resolved
        if not path.is_file():
            logger.debug(f"Template '{name}' not found at {path}")
            raise TemplateNotFound(name, parent)
        logger.debug(f"Template '{name}' resolved to {path}")
        return path, resolved

    def get_source(self, name: str, parent: Optional[str] = None) -> Tuple[str, str]:
        path, resolved = self.path_for(name, parent)
        return path.read_text(encoding="utf-8"), resolved


class CachingFileSystemLoader(FileSystemLoader):
    """
    Filesystem loader that keeps parsed trees in memory.

    The cache is cleared completely once it holds ``amount`` templates.
    Concurrent load_cached() calls for the same name parse it only once.
    """

    def __init__(self, dirname: str | Path, suffix: str = "", amount: int = 20):
        super().__init__(dirname, suffix)
        self.amount = amount
        self._cache: Dict[str, NodeList] = {}
        self._lock = threading.Lock()

    def load_cached(self, name: str, parent: Optional[str] = None) -> NodeList:
        path, resolved = self.path_for(name, parent)
        key = str(path)

        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                logger.debug(f"Template cache hit: {resolved}")
                return cached

            logger.debug(f"Template cache miss: {resolved}")
            nodelist = self._parse(path.read_text(encoding="utf-8"), resolved, parent)
            if len(self._cache) >= self.amount:
                self._cache.clear()
            self._cache[key] = nodelist
            return nodelist

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)


class DictLoader(Loader):
    """Loads templates from an in-memory mapping of names to sources."""

    def __init__(self, templates: Mapping[str, str]):
        super().__init__()
        self.templates = templates

    def get_source(self, name: str, parent: Optional[str] = None) -> Tuple[str, str]:
        resolved = resolve_name(name, parent)
        if resolved not in self.templates:
            raise TemplateNotFound(name, parent)
        return self.templates[resolved], resolved


__all__ = [
    "Loader",
    "FileSystemLoader",
    "CachingFileSystemLoader",
    "DictLoader",
    "resolve_name",
]
