from __future__ import annotations

import sys
import unittest
from pathlib import Path as FsPath

TESTS_DIR = FsPath(__file__).resolve().parent
PROJECT_ROOT = TESTS_DIR.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from drawme.color import (
    BLACK,
    BLUE,
    RED,
    LinearGradient,
    Ownership,
    Paint,
    Rgb,
    Rgba,
    linear_gradient,
    parse_color,
    radial_gradient,
)
from drawme.geometry import Rotation
from drawme.style import DrawStyle, Fill, Override, Stroke, StrokeWidth


class ColorTests(unittest.TestCase):
    def test_css(self) -> None:
        self.assertEqual(BLACK.css(), "rgb(0, 0, 0)")
        self.assertEqual(Rgba(1, 2, 3, 0.5).css(), "rgba(1, 2, 3, 0.5)")

    def test_channel_validation(self) -> None:
        with self.assertRaises(ValueError):
            Rgb(256, 0, 0)
        with self.assertRaises(ValueError):
            Rgb(0, -1, 0)
        with self.assertRaises(ValueError):
            Rgba(0, 0, 0, 1.5)

    def test_parse_color(self) -> None:
        self.assertEqual(parse_color("red"), RED)
        self.assertEqual(parse_color("#0000ff"), BLUE)
        self.assertEqual(parse_color("#ff000080"), Rgba(255, 0, 0, 0.502))
        with self.assertRaises(ValueError):
            parse_color("not-a-color")

    def test_gradient_stop_offsets_are_fractions(self) -> None:
        with self.assertRaises(ValueError):
            linear_gradient(0, [(RED, 1.5)])
        with self.assertRaises(ValueError):
            linear_gradient(0, [])
        gradient = radial_gradient((0.5, 0.5), [(RED, 0), (BLUE, 1)])
        self.assertEqual(gradient.stops, ((RED, 0.0), (BLUE, 1.0)))


class PaintTests(unittest.TestCase):
    def setUp(self) -> None:
        self.gradient = linear_gradient(Rotation.from_degrees(45), [(RED, 0), (BLUE, 1)])

    def test_shallow_borrows_and_to_owned_copies(self) -> None:
        owned = Paint(self.gradient)
        borrowed = owned.shallow()
        self.assertTrue(borrowed.is_borrowed)
        self.assertIs(borrowed.value, self.gradient)
        again = borrowed.to_owned()
        self.assertEqual(again.ownership, Ownership.OWNED)
        self.assertEqual(again.value, self.gradient)
        self.assertIsNot(again.value, self.gradient)

    def test_equality_ignores_ownership(self) -> None:
        self.assertEqual(Paint(self.gradient), Paint(self.gradient).shallow())
        self.assertNotEqual(Paint(self.gradient), Paint(RED))

    def test_solid_paint_shallow_is_identity(self) -> None:
        paint = Paint(RED)
        self.assertIs(paint.shallow(), paint)
        self.assertEqual(paint.css(), "rgb(255, 0, 0)")

    def test_gradient_has_no_css(self) -> None:
        with self.assertRaises(ValueError):
            Paint(self.gradient).css()

    def test_of_parses_strings(self) -> None:
        self.assertEqual(Paint.of("black"), Paint(BLACK))
        self.assertIsInstance(Paint.of(self.gradient).value, LinearGradient)


class OverrideTests(unittest.TestCase):
    def test_three_states(self) -> None:
        self.assertTrue(Override.inherit().is_inherit)
        self.assertTrue(Override.absent().is_absent)
        self.assertTrue(Override.of(2.0).is_set)
        self.assertTrue(Override.absent().is_set)
        self.assertEqual(Override.of(None), Override.absent())
        self.assertIsNone(Override.absent().get())
        self.assertEqual(Override.of(3).get(), 3)

    def test_resolve(self) -> None:
        parent = Override.of(4.0)
        self.assertEqual(Override.inherit().resolve(parent), parent)
        self.assertEqual(Override.absent().resolve(parent), Override.absent())
        self.assertEqual(Override.of(1.0).resolve(parent), Override.of(1.0))


class DrawStyleTests(unittest.TestCase):
    def test_default_inherits_everything(self) -> None:
        style = DrawStyle()
        self.assertTrue(style.is_empty())
        self.assertIsNone(style.fill_paint())
        self.assertIsNone(style.width())

    def test_new_treats_none_as_absent(self) -> None:
        style = DrawStyle.new(fill=RED, stroke=None)
        self.assertEqual(style.fill_paint(), Paint(RED))
        self.assertTrue(style.stroke.is_absent)
        self.assertTrue(style.stroke_width.is_inherit)

    def test_setters_and_clear(self) -> None:
        style = DrawStyle().set_fill("blue").set_stroke_width(2)
        self.assertEqual(style.fill_paint(), Paint(BLUE))
        self.assertEqual(style.width(), 2.0)
        style.set_fill(None)
        self.assertTrue(style.fill.is_absent)
        style.clear_fill()
        self.assertTrue(style.fill.is_inherit)

    def test_combine_is_fieldwise(self) -> None:
        parent = DrawStyle.new(fill=RED, stroke=BLUE, stroke_width=3)
        child = DrawStyle.new(stroke=None)
        resolved = child.combine(parent)
        self.assertEqual(resolved.fill_paint(), Paint(RED))
        self.assertIsNone(resolved.stroke_paint())
        self.assertTrue(resolved.stroke.is_absent)
        self.assertEqual(resolved.width(), 3.0)

    def test_fragments_compose(self) -> None:
        style = Fill("red") | Stroke("blue", 2)
        self.assertIsInstance(style, DrawStyle)
        self.assertEqual(style.fill_paint(), Paint(RED))
        self.assertEqual(style.stroke_paint(), Paint(BLUE))
        self.assertEqual(style.width(), 2.0)

        layered = style | StrokeWidth(5)
        self.assertEqual(layered.width(), 5.0)
        self.assertEqual(layered.fill_paint(), Paint(RED))

    def test_from_style_reads_accessors_independently(self) -> None:
        style = DrawStyle.from_style(Stroke(None))
        self.assertTrue(style.fill.is_inherit)
        self.assertTrue(style.stroke.is_absent)
        self.assertTrue(style.stroke_width.is_inherit)

    def test_clone_shallow_borrows_gradients(self) -> None:
        gradient = linear_gradient(0, [(RED, 0), (BLUE, 1)])
        style = DrawStyle.fill_only(gradient)
        clone = style.clone_shallow()
        self.assertTrue(clone.fill_paint().is_borrowed)
        self.assertFalse(clone.to_owned().fill_paint().is_borrowed)
        self.assertEqual(clone, style)


if __name__ == "__main__":
    unittest.main()
