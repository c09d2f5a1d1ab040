"""Box tree, coordinate conversion and runtime overrides."""

from layout.coords import to_bottom_origin
from layout.defaults import DEFAULT_LAYOUT, PAGE_HEIGHT, new_request_layout
from layout.overrides import OverrideResult, apply_overrides, collect_override_params, resolve_path
from layout.tree import LayoutFrozenError, LayoutTree

__all__ = [
    "DEFAULT_LAYOUT",
    "PAGE_HEIGHT",
    "LayoutFrozenError",
    "LayoutTree",
    "OverrideResult",
    "apply_overrides",
    "collect_override_params",
    "new_request_layout",
    "resolve_path",
    "to_bottom_origin",
]
