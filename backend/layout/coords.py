"""Top-origin / bottom-origin conversion for box y coordinates."""
from __future__ import annotations

from models import Box


def to_bottom_origin(box: Box, canvas_height: float) -> Box:
    """
    Return `box` with y measured from the bottom edge of the canvas.

    Top-origin boxes are converted (y' = H - y - h) and re-tagged, so feeding
    the result back in is a no-op. Bottom-origin boxes are returned as-is.
    """
    if canvas_height < 0:
        raise ValueError(f"canvas_height must be >= 0, got {canvas_height}")
    if not box.y_origin_top:
        return box
    return box.model_copy(update={"y": canvas_height - box.y - box.h, "y_origin_top": False})


def box_top(box: Box, canvas_height: float) -> float:
    """Bottom-origin y of the box's top edge."""
    bottom = to_bottom_origin(box, canvas_height)
    return bottom.y + bottom.h
