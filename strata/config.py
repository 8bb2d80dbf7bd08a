"""
Engine configuration.

Read from the ``templates:`` mapping of a YAML file:

    templates:
      dirname: ./templates
      suffix: .html
      cache_size: 20
      globals:
        site_name: Example
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from ruamel.yaml import YAML

from .errors import TemplateError

_yaml = YAML(typ="safe")

DEFAULT_CACHE_SIZE = 20


@dataclass
class EngineConfig:
    dirname: Optional[str] = None
    suffix: str = ""
    cache_size: int = DEFAULT_CACHE_SIZE
    globals: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> EngineConfig:
        """Builds a configuration from the ``templates`` mapping."""
        dirname = data.get("dirname")
        globals_ = data.get("globals") or {}
        if not isinstance(globals_, dict):
            raise TemplateError("templates.globals must be a mapping")
        try:
            cache_size = int(data.get("cache_size", DEFAULT_CACHE_SIZE))
        except (TypeError, ValueError) as e:
            raise TemplateError(f"templates.cache_size must be an integer: {e}") from e
        if cache_size < 0:
            raise TemplateError("templates.cache_size must not be negative")
        return cls(
            dirname=str(dirname) if dirname is not None else None,
            suffix=str(data.get("suffix", "") or ""),
            cache_size=cache_size,
            globals=dict(globals_),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"suffix": self.suffix, "cache_size": self.cache_size}
        if self.dirname is not None:
            result["dirname"] = self.dirname
        if self.globals:
            result["globals"] = dict(self.globals)
        return result


def read_yaml_map(path: Path) -> Dict[str, Any]:
    """
    Reads a YAML file that must contain a mapping.

    A missing file reads as an empty mapping.

    Raises:
        TemplateError: If the document is not a mapping
    """
    if not path.is_file():
        return {}
    raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise TemplateError(f"YAML must be a mapping: {path}")
    return raw


def load_config(path: Path) -> EngineConfig:
    """
    Loads the engine configuration from a YAML file.

    Relative template directories are resolved against the file's folder.
    """
    raw = read_yaml_map(path)
    section = raw.get("templates") or {}
    if not isinstance(section, dict):
        raise TemplateError(f"'templates' must be a mapping: {path}")

    cfg = EngineConfig.from_dict(section)
    if cfg.dirname is not None and not Path(cfg.dirname).is_absolute():
        cfg.dirname = str((path.parent / cfg.dirname).resolve())
    return cfg


__all__ = ["EngineConfig", "load_config", "read_yaml_map", "DEFAULT_CACHE_SIZE"]
