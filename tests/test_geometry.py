from __future__ import annotations

import math
import sys
import unittest
from pathlib import Path as FsPath

TESTS_DIR = FsPath(__file__).resolve().parent
PROJECT_ROOT = TESTS_DIR.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from drawme.geometry import (
    BoundingBox,
    Circle,
    CurveTo,
    Isometry,
    LineTo,
    MoveTo,
    Path,
    Point,
    QuadTo,
    Rectangle,
    Rotation,
    RoundedRectangle,
    Vector,
    fmt,
)


def _close(a: Point, b: Point) -> bool:
    return math.isclose(a.x, b.x, abs_tol=1e-9) and math.isclose(a.y, b.y, abs_tol=1e-9)


class PointTests(unittest.TestCase):
    def test_arithmetic(self) -> None:
        p = Point(1, 2)
        self.assertEqual(p + Vector(3, 4), Point(4, 6))
        self.assertEqual(Point(5, 5) - Point(1, 2), Vector(4, 3))
        self.assertEqual(Point(5, 5) - Vector(1, 2), Point(4, 3))
        self.assertEqual(Point.of((1, 2)), p)
        self.assertEqual(Point(1, 5).min(Point(3, 2)), Point(1, 2))
        self.assertEqual(Point(1, 5).max(Point(3, 2)), Point(3, 5))

    def test_rotate_around(self) -> None:
        turned = Point(2, 1).rotate_around(Rotation.from_degrees(90), Point(1, 1))
        self.assertTrue(_close(turned, Point(1, 2)), turned)

    def test_isometry_rotates_then_translates(self) -> None:
        iso = Isometry.at((10, 0), Rotation.from_degrees(90))
        self.assertTrue(_close(iso.apply((1, 0)), Point(10, 1)))

    def test_fmt(self) -> None:
        self.assertEqual(fmt(5.0), "5")
        self.assertEqual(fmt(-0.0), "0")
        self.assertEqual(fmt(2.5), "2.5")
        self.assertEqual(fmt(1 / 3), "0.333")


class PathTests(unittest.TestCase):
    def test_builder_keeps_order(self) -> None:
        path = Path().move_to((0, 0)).line_to((1, 0)).quad_to((2, 0), (2, 1)).curve_to((2, 2), (1, 3), (0, 3))
        self.assertEqual([type(c) for c in path], [MoveTo, LineTo, QuadTo, CurveTo])
        self.assertEqual(len(path), 4)
        self.assertEqual(path.to_svg_data(), "M 0 0 L 1 0 Q 2 0 2 1 C 2 2 1 3 0 3")

    def test_bounding_box_uses_defining_points(self) -> None:
        path = Path().move_to((1, 2)).quad_to((5, -1), (3, 4))
        box = path.bounding_box()
        self.assertEqual(box.closest, Point(1, -1))
        self.assertEqual(box.farthest, Point(5, 4))

    def test_bounding_box_of_negative_path_does_not_include_origin(self) -> None:
        box = Path().move_to((-5, -5)).line_to((-2, -3)).bounding_box()
        self.assertEqual(box.farthest, Point(-2, -3))

    def test_empty_path(self) -> None:
        path = Path()
        self.assertTrue(path.is_empty())
        self.assertIsNone(path.bounding_box())
        self.assertEqual(path.to_svg_data(), "")

    def test_point_refs_write_through(self) -> None:
        path = Path().move_to((0, 0)).line_to((1, 1))
        for ref in path.point_refs():
            ref.set(ref.get() + Vector(10, 0))
        self.assertEqual(path.locations(), [Point(10, 0), Point(11, 1)])


class RectangleTests(unittest.TestCase):
    def test_path_is_closed_outline(self) -> None:
        path = Rectangle(Point(0, 0), Point(4, 4)).to_path()
        self.assertEqual(
            path.commands,
            (
                MoveTo(Point(0, 0)),
                LineTo(Point(4, 0)),
                LineTo(Point(4, 4)),
                LineTo(Point(0, 4)),
                LineTo(Point(0, 0)),
            ),
        )

    def test_constructors(self) -> None:
        rect = Rectangle.from_dimensions_and_center((4, 2), (5, 5))
        self.assertEqual((rect.closest, rect.farthest), (Point(3, 4), Point(7, 6)))
        rect = Rectangle.from_dimensions_and_offset((1, 1), (2, 3))
        self.assertEqual(rect.dimensions, Vector(2, 3))
        self.assertEqual(rect.center, Point(2, 2.5))

    def test_rotation_turns_corners_about_center(self) -> None:
        rect = Rectangle(Point(0, 0), Point(2, 2)).with_rotation(Rotation.from_degrees(90))
        self.assertTrue(_close(rect.top_left(), Point(2, 0)))
        self.assertEqual(rect.top_left_raw(), Point(0, 0))

    def test_rounded_rectangle_path(self) -> None:
        rounded = RoundedRectangle.uniform((0, 0), (10, 10), 2)
        path = rounded.to_path()
        self.assertEqual(len(path), 9)
        self.assertIsInstance(path.commands[0], MoveTo)
        self.assertEqual(path.commands[0].point, Point(0, 2))
        self.assertEqual(path.commands[1], QuadTo(Point(0, 0), Point(2, 0)))
        self.assertEqual(path.commands[-1], LineTo(Point(0, 2)))

    def test_rounded_rectangle_without_radii_is_plain(self) -> None:
        rounded = RoundedRectangle(Rectangle(Point(0, 0), Point(1, 1)))
        self.assertTrue(rounded.corners_are_zero())
        self.assertEqual(len(rounded.to_path()), 5)


class BoundingBoxTests(unittest.TestCase):
    def test_grows_componentwise_and_never_shrinks(self) -> None:
        box = BoundingBox()
        self.assertTrue(box.extend_to((5, 1)))
        self.assertTrue(box.extend_to((2, 7)))
        self.assertFalse(box.extend_to((-3, -3)))
        self.assertEqual((box.width, box.height), (5, 7))
        self.assertEqual(box.view_box(), "0 0 5 7")

    def test_circle_box(self) -> None:
        box = Circle(Point(5, 5), 3).bounding_box()
        self.assertEqual((box.closest, box.farthest), (Point(2, 2), Point(8, 8)))


if __name__ == "__main__":
    unittest.main()
