from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import EngineConfig, load_config, read_yaml_map
from .engine import TemplateEngine
from .errors import TemplateError
from .jsonic import dumps as jdumps
from .version import tool_version


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="strata",
        description="Strata template engine",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("--verbose", action="store_true", help="log debug messages to stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_render = sub.add_parser("render", help="Render a template to stdout")
    sp_render.add_argument("name", help="template name relative to the template directory")
    sp_render.add_argument("--dir", help="template directory (overrides the config)")
    sp_render.add_argument("--suffix", help="suffix appended to template names, e.g. .html")
    sp_render.add_argument("--config", help="YAML config file with a 'templates' mapping")
    sp_render.add_argument("--data", help="YAML or JSON file with the render namespace")
    sp_render.add_argument(
        "--set",
        action="append",
        metavar="KEY=VALUE",
        help="extra variable for the namespace (can be given several times)",
    )

    sp_list = sub.add_parser("list", help="Registered entities (JSON)")
    sp_list.add_argument("what", choices=["tags", "filters"], help="what to list")

    return p


def _configure_logging(verbose: bool) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    root = logging.getLogger("strata")
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _engine_config(ns: argparse.Namespace) -> EngineConfig:
    cfg = load_config(Path(ns.config)) if ns.config else EngineConfig()
    if ns.dir:
        cfg.dirname = ns.dir
    if ns.suffix is not None:
        cfg.suffix = ns.suffix
    if cfg.dirname is None:
        cfg.dirname = str(Path.cwd())
    return cfg


def _parse_sets(values: Optional[List[str]]) -> Dict[str, Any]:
    """Parses KEY=VALUE pairs; values are plain strings."""
    result: Dict[str, Any] = {}
    for item in values or []:
        if "=" not in item:
            raise ValueError(f"Invalid --set value '{item}'. Expected 'KEY=VALUE'")
        key, value = item.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError(f"Invalid --set value '{item}'. Key is empty")
        result[key] = value
    return result


def _load_namespace(ns: argparse.Namespace) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    if ns.data:
        path = Path(ns.data)
        if not path.is_file():
            raise ValueError(f"Data file not found: {path}")
        # JSON is a subset of YAML, one reader covers both
        data = read_yaml_map(path)
    data.update(_parse_sets(ns.set))
    return data


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _configure_logging(bool(ns.verbose))

    try:
        if ns.cmd == "render":
            engine = TemplateEngine.from_config(_engine_config(ns))
            template = engine.get_template(ns.name)
            sys.stdout.write(template.render(_load_namespace(ns)))
            return 0

        if ns.cmd == "list":
            engine = TemplateEngine()
            if ns.what == "tags":
                data: Dict[str, Any] = {"tags": engine.tags.names()}
            else:
                data = {"filters": engine.filters.names()}
            sys.stdout.write(jdumps(data))
            return 0

    except TemplateError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
