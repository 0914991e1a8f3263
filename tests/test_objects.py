"""Tests for object decoding and shape resolution."""

import pytest

from tiled_json.errors import ParsingError
from tiled_json.objects import (
    EllipseShape, MapObject, Point, PointShape, PolygonShape, PolylineShape,
    RectShape, Text, TextShape, UnknownShape, resolve_shape,
)
from tiled_json.properties import BoolProperty


def obj(**fields):
    record = {"id": 1, "name": "", "type": "", "x": 0, "y": 0,
              "rotation": 0, "visible": True}
    record.update(fields)
    return record


class TestResolveShape:
    def test_point(self) -> None:
        assert resolve_shape({"point": True}) == PointShape()

    def test_point_wins_over_size(self) -> None:
        assert resolve_shape(obj(point=True, width=0, height=0)) == PointShape()

    def test_rect(self) -> None:
        assert resolve_shape(obj(width=32, height=16)) == RectShape(32.0, 16.0)

    def test_ellipse(self) -> None:
        shape = resolve_shape(obj(ellipse=True, width=8, height=4.5))
        assert shape == EllipseShape(8.0, 4.5)

    def test_ellipse_without_size_is_unknown(self) -> None:
        assert resolve_shape({"ellipse": True}) == UnknownShape()

    def test_polyline(self) -> None:
        shape = resolve_shape(obj(width=0, height=0,
                                  polyline=[{"x": 0, "y": 0}, {"x": 5, "y": -3.5}]))
        assert shape == PolylineShape((Point(0.0, 0.0), Point(5.0, -3.5)))

    def test_polygon(self) -> None:
        points = [{"x": 0, "y": 0}, {"x": 10, "y": 0}, {"x": 5, "y": 8}]
        shape = resolve_shape(obj(width=0, height=0, polygon=points))
        assert isinstance(shape, PolygonShape)
        assert [p.x for p in shape.points] == [0.0, 10.0, 5.0]

    def test_malformed_polygon_falls_through_to_rect(self) -> None:
        shape = resolve_shape(obj(width=3, height=4, polygon=[{"x": 1}]))
        assert shape == RectShape(3.0, 4.0)

    def test_text(self) -> None:
        shape = resolve_shape(obj(width=100, height=20,
                                  text={"text": "Hello", "wrap": True,
                                        "fontfamily": "serif", "pixelsize": 12}))
        assert shape == TextShape(Text("Hello", True, "serif", 12), 100.0, 20.0)

    def test_text_defaults(self) -> None:
        shape = resolve_shape(obj(width=10, height=10, text={"text": "Hi"}))
        assert shape == TextShape(Text("Hi"), 10.0, 10.0)

    def test_text_with_bad_record_is_rect(self) -> None:
        shape = resolve_shape(obj(width=10, height=10, text={"wrap": True}))
        assert shape == RectShape(10.0, 10.0)

    def test_false_flags_still_select_the_shape(self) -> None:
        shape = resolve_shape(obj(point=False, width=2, height=2))
        assert shape == PointShape()
        shape = resolve_shape(obj(ellipse=False, width=2, height=2))
        assert shape == EllipseShape(2.0, 2.0)

    def test_non_boolean_flag_is_ignored(self) -> None:
        shape = resolve_shape(obj(point="yes", ellipse=1, width=2, height=2))
        assert shape == RectShape(2.0, 2.0)

    def test_unrecognized_fields(self) -> None:
        assert resolve_shape({"capsule": {"radius": 4}}) == UnknownShape()

    def test_size_must_be_numeric(self) -> None:
        assert resolve_shape({"width": "32", "height": 16}) == UnknownShape()
        assert resolve_shape({"width": True, "height": 16}) == UnknownShape()

    def test_size_too_large_for_float_is_unknown(self) -> None:
        assert resolve_shape({"width": 10 ** 400, "height": 1}) == UnknownShape()

    def test_polygon_point_too_large_falls_through(self) -> None:
        shape = resolve_shape(obj(width=4, height=4,
                                  polygon=[{"x": 10 ** 400, "y": 0}]))
        assert shape == RectShape(4.0, 4.0)

    def test_text_with_huge_size_is_unknown(self) -> None:
        shape = resolve_shape({"text": {"text": "Hi"}, "width": 10 ** 400,
                               "height": 1})
        assert shape == UnknownShape()

    def test_order_ellipse_before_polyline(self) -> None:
        shape = resolve_shape(obj(ellipse=True, width=1, height=1,
                                  polyline=[{"x": 0, "y": 0}]))
        assert shape == EllipseShape(1.0, 1.0)


class TestMapObject:
    def test_fields(self) -> None:
        record = obj(id=7, name="door", type="trigger", x=10.5, y=20,
                     rotation=90, visible=False, width=16, height=32, gid=3,
                     properties=[{"name": "locked", "type": "bool", "value": True}])
        decoded = MapObject.from_json(record)
        assert decoded.id == 7
        assert decoded.name == "door"
        assert decoded.type == "trigger"
        assert (decoded.x, decoded.y) == (10.5, 20.0)
        assert decoded.rotation == 90.0
        assert decoded.visible is False
        assert decoded.shape == RectShape(16.0, 32.0)
        assert decoded.gid == 3
        assert decoded.properties == {"locked": BoolProperty(True)}

    def test_unknown_shape_still_decodes(self) -> None:
        decoded = MapObject.from_json(obj())
        assert decoded.shape == UnknownShape()
        assert decoded.properties is None

    def test_class_field_used_when_type_absent(self) -> None:
        record = obj(**{"class": "npc"})
        del record["type"]
        assert MapObject.from_json(record).type == "npc"

    def test_defaults_for_optional_fields(self) -> None:
        decoded = MapObject.from_json({"id": 1, "x": 0, "y": 0, "point": True})
        assert decoded.name == ""
        assert decoded.rotation == 0.0
        assert decoded.visible is True
        assert decoded.gid is None

    def test_missing_position(self) -> None:
        with pytest.raises(ParsingError, match="objects\\[0\\]"):
            MapObject.from_json({"id": 1, "y": 0}, "objects[0]")

    def test_wrong_kind(self) -> None:
        with pytest.raises(ParsingError, match="objects\\[0\\].x"):
            MapObject.from_json(obj(x="left"), "objects[0]")

    def test_malformed_properties_are_dropped(self) -> None:
        decoded = MapObject.from_json(obj(point=True, properties={"a": 1}))
        assert decoded.properties is None

    def test_position_out_of_float_range(self) -> None:
        with pytest.raises(ParsingError, match="out of range"):
            MapObject.from_json(obj(x=10 ** 400, point=True), "objects[0]")
