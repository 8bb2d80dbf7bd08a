"""
Render context.

The context is a stack of variable-binding frames. The bottom frame is
the caller's namespace and is never popped; tags push and pop frames
above it. Lookup walks the frames from top to bottom and the first hit
wins.

Per-render state of individual nodes (cycle position, change-detection
memory) is stored in frames under a key derived from the node id, so a
compiled tree can be rendered by independent contexts at the same time.
"""

from __future__ import annotations

import numbers
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Protocol, Tuple, runtime_checkable

from .arguments import FilterCall, Name
from .registry import FilterRegistry

_INTEGER_RE = re.compile(r"^-?\d+$")
_MISSING = object()


@runtime_checkable
class TemplateAccessible(Protocol):
    """
    Capability of host objects that expose accessors to templates.

    Only names for which is_template_accessible() returns True are ever
    read from the object; callables are invoked without arguments.
    """

    def is_template_accessible(self, name: str) -> bool:
        ...


@dataclass(frozen=True)
class _StateKey:
    node_id: int


class Context:
    """
    Layered variable namespace used during a single render.
    """

    def __init__(self, namespace: Any = None, filters: Optional[FilterRegistry] = None):
        """
        Args:
            namespace: Root frame; any object supporting ``in`` and ``[]``
            filters: Filters available to apply_filters()
        """
        self._frames: List[Any] = [namespace if namespace is not None else {}]
        # Parallel to _frames: whether a frame may receive new node state
        self._holds_state: List[bool] = [True]
        self.filters = filters if filters is not None else FilterRegistry()

    # ======= Frame stack =======

    def push(self, frame: Optional[Dict[Any, Any]] = None, holds_state: bool = True) -> None:
        """
        Pushes a new frame, empty by default.

        Frames pushed with holds_state=False only expose values; node state
        first set while they are on top lands in the frame below.
        """
        self._frames.append(frame if frame is not None else {})
        self._holds_state.append(holds_state)

    def pop(self) -> Optional[Dict[Any, Any]]:
        """Pops and returns the top frame; the root frame is never removed."""
        if len(self._frames) > 1:
            self._holds_state.pop()
            return self._frames.pop()
        return None

    @property
    def depth(self) -> int:
        return len(self._frames)

    def __setitem__(self, name: Any, value: Any) -> None:
        """Binds a name in the innermost frame."""
        self._frames[-1][name] = value

    def __getitem__(self, name: Any) -> Any:
        for frame in reversed(self._frames):
            if name in frame:
                return frame[name]
        raise KeyError(name)

    def __contains__(self, name: Any) -> bool:
        return any(name in frame for frame in self._frames)

    def get(self, name: Any, default: Any = None) -> Any:
        try:
            return self[name]
        except KeyError:
            return default

    def keys(self) -> List[str]:
        """Visible variable names; node state keys are not included."""
        return list(self.flatten())

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def items(self) -> List[Tuple[str, Any]]:
        return list(self.flatten().items())

    def flatten(self) -> Dict[str, Any]:
        """Merges all frames into one dict, upper frames shadowing lower ones."""
        result: Dict[str, Any] = {}
        for frame in self._frames:
            for key in _frame_keys(frame):
                if isinstance(key, str):
                    result[key] = frame[key]
        return result

    # ======= Node state =======

    def get_state(self, node: Any, default: Any = None) -> Any:
        """Returns render-time state stored for a node."""
        return self.get(_StateKey(node.node_id), default)

    def set_state(self, node: Any, value: Any) -> None:
        """
        Stores render-time state for a node.

        Updates the frame already holding the node's state, otherwise binds
        it in the innermost frame that holds state.
        """
        key = _StateKey(node.node_id)
        for frame in reversed(self._frames):
            if key in frame:
                frame[key] = value
                return
        for frame, holds_state in zip(reversed(self._frames), reversed(self._holds_state)):
            if holds_state:
                frame[key] = value
                return

    # ======= Resolution =======

    def resolve(self, path: str) -> Any:
        """
        Resolves a dotted path.

        Every segment is tried as a mapping key, then as an integer index,
        then as an accessor the object explicitly allows. If all fail the
        result is None; resolution never raises.
        """
        current: Any = self
        for part in path.split("."):
            current = _lookup(current, part)
            if current is _MISSING:
                return None
        return current

    def apply_filters(self, value: Any, filters: Iterable[FilterCall]) -> Any:
        """
        Passes value through a filter chain, left to right.

        Name arguments are resolved before each call.

        Raises:
            TemplateRuntimeError: If a filter is not registered
        """
        for call in filters:
            func = self.filters.lookup(call.name)
            args = [self.resolve(arg.path) if isinstance(arg, Name) else arg for arg in call.args]
            value = func(self, value, *args)
        return value

    def evaluate(self, value: Any, filters: Iterable[FilterCall] = ()) -> Any:
        """Resolves a Name (literals pass through) and applies filters."""
        if isinstance(value, Name):
            value = self.resolve(value.path)
        return self.apply_filters(value, filters)

    def __repr__(self) -> str:
        return f"Context({self.flatten()!r})"


def _frame_keys(frame: Any) -> Iterable[Any]:
    keys = getattr(frame, "keys", None)
    return list(keys()) if callable(keys) else []


def _is_mapping(obj: Any) -> bool:
    if isinstance(obj, Mapping):
        return True
    return hasattr(obj, "keys") and hasattr(obj, "__getitem__") and hasattr(obj, "__contains__")


def _lookup(obj: Any, part: str) -> Any:
    # 1. Key lookup
    if _is_mapping(obj) and part in obj:
        return obj[part]

    # 2. Indexed lookup; accessor names never start with a digit
    if _INTEGER_RE.match(part):
        index = int(part)
        if isinstance(obj, Sequence):
            if -len(obj) <= index < len(obj):
                return obj[index]
            return _MISSING
        if _is_mapping(obj) and index in obj:
            return obj[index]
        return _MISSING

    # 3. Whitelisted accessor
    if isinstance(obj, TemplateAccessible) and obj.is_template_accessible(part):
        attr = getattr(obj, part, _MISSING)
        if attr is _MISSING:
            return _MISSING
        return attr() if callable(attr) else attr

    return _MISSING


def is_truthy(value: Any) -> bool:
    """
    Template truthiness.

    None and False are false; numbers are true when non-zero; sized
    values are true when non-empty; everything else is true.
    """
    if value is None or value is False:
        return False
    if isinstance(value, numbers.Number):
        return value != 0
    if hasattr(value, "__len__"):
        return len(value) > 0
    return True


__all__ = ["Context", "TemplateAccessible", "is_truthy"]
