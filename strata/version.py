from __future__ import annotations

from importlib import metadata


def tool_version() -> str:
    """
    Single way to obtain the installed package version.
    Does not depend on other modules (avoids import cycles).
    """
    for dist in ("strata-templates", "strata"):
        try:
            return metadata.version(dist)
        except metadata.PackageNotFoundError:
            continue
    return "0.0.0"


__all__ = ["tool_version"]
