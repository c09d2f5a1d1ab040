from __future__ import annotations

import pytest

from layout.coords import box_top, to_bottom_origin
from models import Box


def test_top_origin_box_is_converted_once():
    box = Box(x=70, y=100, w=200, h=40, y_origin_top=True)
    converted = to_bottom_origin(box, 792)
    assert converted.y == 792 - 100 - 40
    assert converted.y_origin_top is False
    assert converted.x == 70 and converted.w == 200 and converted.h == 40

    # Feeding the result back in must not flip it again
    assert to_bottom_origin(converted, 792) == converted


def test_bottom_origin_box_is_unchanged():
    box = Box(y=50, w=10, h=5)
    assert to_bottom_origin(box, 792) is box


def test_negative_canvas_height_is_rejected():
    with pytest.raises(ValueError):
        to_bottom_origin(Box(w=1), -1)


def test_box_top_is_bottom_origin_top_edge():
    assert box_top(Box(y=100, w=10, h=40, y_origin_top=True), 792) == 692
    assert box_top(Box(y=100, w=10, h=40), 792) == 140
