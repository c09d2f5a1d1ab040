from __future__ import annotations

import pytest

from layout.defaults import DEFAULT_LAYOUT, new_request_layout
from layout.tree import LayoutFrozenError, LayoutTree
from models import Align, Box


def _tree() -> LayoutTree:
    return LayoutTree.from_dict(
        {
            "p1": {"name": {"x": 10, "y": 20, "w": 100, "h": 14}},
            "boxA": {"examA_1": {"x": 0, "y": 0, "w": 50}},
        }
    )


def test_from_dict_builds_boxes_and_groups():
    tree = _tree()
    assert tree.keys() == ["p1", "boxA"]
    name = tree.box(["p1", "name"])
    assert isinstance(name, Box)
    assert name.x == 10 and name.w == 100
    assert name.align is Align.LEFT
    assert name.max_lines == 1
    assert isinstance(tree.get(["boxA"]), LayoutTree)
    assert tree.box(["boxA"]) is None
    assert tree.get(["p1", "name", "deeper"]) is None
    assert tree.get(["missing"]) is None


def test_box_accepts_camel_case_aliases():
    box = Box.model_validate({"w": 10, "maxLines": 3, "lineGap": 4, "yOriginIsTop": True})
    assert box.max_lines == 3
    assert box.line_gap == 4
    assert box.y_origin_top is True


@pytest.mark.parametrize("bad", [{"w": 0}, {"w": 10, "size": 0}, {"w": 10, "maxLines": 0}, {"w": 10, "h": -1}])
def test_box_rejects_invalid_geometry(bad):
    with pytest.raises(ValueError):
        Box.model_validate(bad)


def test_default_layout_is_frozen():
    assert DEFAULT_LAYOUT.frozen
    with pytest.raises(LayoutFrozenError):
        DEFAULT_LAYOUT.set_box("x", Box(w=1))
    with pytest.raises(LayoutFrozenError):
        DEFAULT_LAYOUT.ensure_group("p9")


def test_request_layout_is_independent_copy():
    first = new_request_layout()
    second = new_request_layout()
    assert not first.frozen
    assert first == DEFAULT_LAYOUT

    first.ensure_group("p4").ensure_group("p4Text").set_box("chart", Box(w=99))
    assert first.box(["p4", "p4Text", "chart"]).w == 99
    assert second.box(["p4", "p4Text", "chart"]).w == 240
    assert DEFAULT_LAYOUT.box(["p4", "p4Text", "chart"]).w == 240


def test_ensure_group_and_set_box_refuse_kind_changes():
    tree = _tree()
    with pytest.raises(TypeError):
        tree.ensure_group("p1").ensure_group("name")
    with pytest.raises(TypeError):
        tree.set_box("p1", Box(w=1))


def test_iter_boxes_yields_full_paths():
    paths = [path for path, _ in _tree().iter_boxes()]
    assert paths == [("p1", "name"), ("boxA", "examA_1")]


def test_default_layout_has_every_page():
    assert DEFAULT_LAYOUT.keys() == [f"p{i}" for i in range(1, 9)]
    for path, box in DEFAULT_LAYOUT.iter_boxes():
        assert box.y_origin_top, path
