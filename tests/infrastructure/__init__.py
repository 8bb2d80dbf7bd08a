"""
Shared test infrastructure.

Modules:
- file_utils: Creating template files and directories
- rendering_utils: Compiling and rendering template sources
- cli_utils: Running the command line interface
"""

from .file_utils import write
from .rendering_utils import render_source
from .cli_utils import run_cli, jload

__all__ = [
    "write",
    "render_source",
    "run_cli", "jload",
]
