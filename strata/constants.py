"""
Fixed template delimiters.

The tokenizer checks for block tags first, then variables, then
comments. If a comment start were a prefix of the block start it
would never match.
"""

from __future__ import annotations

BLOCK_START = "{%"
BLOCK_END = "%}"
VAR_START = "{{"
VAR_END = "}}"
COMMENT_START = "{#"
COMMENT_END = "#}"

# Name of the metadata record injected into every render
META_NAME = "strata"

# Names the engine binds in the reserved frame; templates may read them only
RESERVED_NAMES = frozenset({"nil", "true", "false", META_NAME})

__all__ = [
    "BLOCK_START",
    "BLOCK_END",
    "VAR_START",
    "VAR_END",
    "COMMENT_START",
    "COMMENT_END",
    "META_NAME",
    "RESERVED_NAMES",
]
