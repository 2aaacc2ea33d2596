from __future__ import annotations

import sys
import unittest
from pathlib import Path as FsPath

TESTS_DIR = FsPath(__file__).resolve().parent
PROJECT_ROOT = TESTS_DIR.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from drawme.canvas import ImageSource, RecordingCanvas, Styled
from drawme.color import BLACK, BLUE, GREEN, RED, Paint, linear_gradient
from drawme.drawing import DrawCircle, DrawImage, DrawPath, Drawing
from drawme.geometry import Circle, Path, Point, Rectangle, RoundedRectangle, Vector
from drawme.style import DrawStyle, Fill, Stroke, StrokeWidth


def _circle(x: float = 0, y: float = 0, r: float = 1) -> DrawCircle:
    return DrawCircle(Point(x, y), r)


class CascadeTests(unittest.TestCase):
    def test_fields_resolve_independently(self) -> None:
        root = Drawing(None, DrawStyle.new(fill=RED, stroke=BLUE, stroke_width=2))
        child = Drawing(_circle(), DrawStyle.new(stroke=None))
        grandchild = Drawing(_circle(1, 1), DrawStyle.new(fill=GREEN))
        child.add_child(grandchild)
        root.add_child(child)

        first, second = list(root.instructions())
        self.assertEqual(first.fill_paint(), Paint(RED))
        self.assertIsNone(first.stroke_paint())
        self.assertEqual(first.stroke_width(), 2.0)

        # Absent is inherited like a value.
        self.assertEqual(second.fill_paint(), Paint(GREEN))
        self.assertIsNone(second.stroke_paint())
        self.assertTrue(second.style.stroke.is_absent)
        self.assertEqual(second.stroke_width(), 2.0)

    def test_cleared_fill_suppresses_ancestor_fill(self) -> None:
        root = Drawing(None, DrawStyle.new(fill=RED, stroke_width=3))
        child = Drawing(_circle(), DrawStyle.new(fill=None))
        child.add_child(Drawing(_circle(1, 1)))
        root.add_child(child)

        for instruction in root.instructions():
            self.assertIsNone(instruction.fill_paint())
            self.assertTrue(instruction.style.fill.is_absent)
            self.assertEqual(instruction.stroke_width(), 3.0)

    def test_cleared_width_suppresses_ancestor_width(self) -> None:
        root = Drawing(None, DrawStyle.new(stroke=BLUE, stroke_width=5))
        child = Drawing(_circle(), DrawStyle.new(stroke_width=None))
        child.add_child(Drawing(_circle(1, 1)))
        root.add_child(child)

        instructions = list(root.instructions())
        self.assertEqual(len(instructions), 2)
        for instruction in instructions:
            self.assertIsNone(instruction.stroke_width())
            self.assertTrue(instruction.style.stroke_width.is_absent)
            self.assertEqual(instruction.stroke_paint(), Paint(BLUE))

    def test_empty_tree_yields_nothing(self) -> None:
        self.assertEqual(list(Drawing().instructions()), [])
        self.assertEqual(list(Drawing.from_style(Fill(RED)).add_child(Drawing()).instructions()), [])

    def test_root_inherit_means_unset(self) -> None:
        instructions = list(Drawing(_circle()).instructions())
        self.assertEqual(len(instructions), 1)
        style = instructions[0].style
        self.assertTrue(style.is_empty())
        self.assertIsNone(style.fill_paint())

    def test_pre_order_left_to_right(self) -> None:
        root = Drawing(_circle(0))
        a = Drawing(_circle(1)).add_child(Drawing(_circle(2)))
        b = Drawing(_circle(3))
        root.extend_children([a, b])
        xs = [instr.command.position.x for instr in root.iter()]
        self.assertEqual(xs, [0, 1, 2, 3])

    def test_group_nodes_do_not_yield_but_cascade(self) -> None:
        root = Drawing.from_style(Fill(BLACK))
        group = Drawing.from_style(StrokeWidth(4))
        group.add_child(Drawing(_circle()))
        root.add_child(group)
        instructions = list(root.instructions())
        self.assertEqual(len(instructions), 1)
        self.assertEqual(instructions[0].fill_paint(), Paint(BLACK))
        self.assertEqual(instructions[0].stroke_width(), 4.0)

    def test_siblings_do_not_leak_style(self) -> None:
        root = Drawing()
        root.add_child(Drawing(_circle(), Fill(RED)))
        root.add_child(Drawing(_circle()))
        first, second = list(root.instructions())
        self.assertEqual(first.fill_paint(), Paint(RED))
        self.assertIsNone(second.fill_paint())

    def test_deep_tree_does_not_recurse(self) -> None:
        root = Drawing(_circle())
        node = root
        for _ in range(2000):
            child = Drawing(_circle())
            node.add_child(child)
            node = child
        self.assertEqual(sum(1 for _ in root.instructions()), 2001)

    def test_resolved_gradient_is_borrowed_until_owned(self) -> None:
        gradient = linear_gradient(0, [(RED, 0), (BLUE, 1)])
        root = Drawing(_circle(), Fill(gradient))
        instruction = next(root.instructions())
        self.assertTrue(instruction.fill_paint().is_borrowed)
        self.assertFalse(instruction.to_owned().fill_paint().is_borrowed)


class DrawingTests(unittest.TestCase):
    def test_nodes_built_from_one_style_stay_independent(self) -> None:
        shared = DrawStyle.fill_only(RED)
        a = Drawing(_circle(), shared)
        b = Drawing(_circle(1, 1), shared)
        a.set_fill(BLUE)
        a.adjust_style(lambda style: style.set_stroke_width(2))

        self.assertEqual(a.style().fill_paint(), Paint(BLUE))
        self.assertEqual(b.style().fill_paint(), Paint(RED))
        self.assertIsNone(b.style().width())
        self.assertEqual(shared.fill_paint(), Paint(RED))
        self.assertTrue(shared.stroke_width.is_inherit)

        c = Drawing(_circle()).set_style(shared)
        c.set_stroke(GREEN)
        self.assertTrue(shared.stroke.is_inherit)

    def test_stored_style_owns_its_gradients(self) -> None:
        gradient = linear_gradient(0, [(RED, 0), (BLUE, 1)])
        node = Drawing(_circle(), Fill(gradient))
        borrowed = node.style()
        self.assertTrue(borrowed.fill_paint().is_borrowed)
        node.set_style(borrowed | StrokeWidth(2))
        self.assertFalse(node._style.fill_paint().is_borrowed)
        self.assertEqual(node.style().width(), 2.0)

    def test_primitives_become_commands(self) -> None:
        self.assertIsInstance(Drawing(Path().move_to((0, 0))).command(), DrawPath)
        self.assertIsInstance(Drawing(Circle(Point(1, 1), 2)).command(), DrawCircle)
        self.assertIsInstance(Drawing(Rectangle(Point(0, 0), Point(1, 1))).command(), DrawPath)
        self.assertIsInstance(Drawing(RoundedRectangle.uniform((0, 0), (4, 4), 1)).command(), DrawPath)
        self.assertIsInstance(Drawing(ImageSource("a.png")).command(), DrawImage)
        with self.assertRaises(TypeError):
            Drawing(42)

    def test_tree_ownership(self) -> None:
        root = Drawing()
        child = Drawing(_circle())
        root.add_child(child)
        with self.assertRaises(ValueError):
            Drawing().add_child(child)
        with self.assertRaises(ValueError):
            child.add_child(root)
        self.assertEqual(root.num_drawings(), 2)
        self.assertEqual(root.children(), (child,))

    def test_locations_and_translate(self) -> None:
        root = Drawing(_circle(1, 1))
        root.add_child(Drawing(Path().move_to((0, 0)).line_to((2, 3))))
        self.assertEqual(root.locations(), [Point(1, 1), Point(0, 0), Point(2, 3)])
        root.translate(Vector(10, 10))
        self.assertEqual(root.locations(), [Point(11, 11), Point(10, 10), Point(12, 13)])
        box = root.bounding_box()
        self.assertEqual((box.closest, box.farthest), (Point(10, 10), Point(12, 13)))

    def test_command_mut_edits_are_seen(self) -> None:
        drawing = Drawing(_circle(1, 1, 1))
        drawing.command_mut().radius = 9
        self.assertEqual(next(drawing.instructions()).command.radius, 9)

    def test_style_setters(self) -> None:
        drawing = Drawing(_circle()).set_fill("red").set_stroke(None).set_stroke_width(3)
        style = drawing.style()
        self.assertEqual(style.fill_paint(), Paint(RED))
        self.assertTrue(style.stroke.is_absent)
        drawing.adjust_style(lambda s: s.clear_stroke())
        self.assertTrue(drawing.style().stroke.is_inherit)

    def test_draw_forwards_resolved_styles(self) -> None:
        root = Drawing.from_style(Stroke(BLUE, 1))
        root.add_child(Drawing(_circle(5, 5, 3)))
        root.add_child(Drawing(Path().move_to((0, 0)).line_to((1, 1)), Fill(RED)))
        canvas = root.draw_onto(RecordingCanvas)
        self.assertEqual(canvas.methods(), ["circle", "path"])
        self.assertEqual(canvas.calls[0].style.stroke_paint(), Paint(BLUE))
        self.assertEqual(canvas.calls[1].style.fill_paint(), Paint(RED))
        self.assertEqual(canvas.calls[1].style.width(), 1.0)

    def test_from_styled(self) -> None:
        styled = Circle(Point(2, 2), 1).with_style(Fill(RED))
        self.assertIsInstance(styled, Styled)
        drawing = Drawing.from_styled(styled)
        self.assertEqual(drawing.style().fill_paint(), Paint(RED))


class StyledTests(unittest.TestCase):
    def test_rectangle_goes_through_canvas_rectangle(self) -> None:
        canvas = RecordingCanvas()
        Rectangle(Point(0, 0), Point(2, 2)).with_style(Fill(RED)).draw(canvas)
        self.assertEqual(canvas.methods(), ["rectangle", "path"])
        self.assertEqual(len(canvas.calls[1].args[0]), 5)

    def test_draw_onto_factory(self) -> None:
        canvas = Circle(Point(1, 1), 1).with_style(DrawStyle()).draw_onto(RecordingCanvas)
        self.assertEqual(canvas.methods(), ["circle"])


if __name__ == "__main__":
    unittest.main()
