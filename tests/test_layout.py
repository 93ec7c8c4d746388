import unittest
from dataclasses import replace

from recording_canvas import Rect, RecordingCanvas

from drawers import DrawerOptions, draw_label
from fonts import resolve_font
from label_types import FontInfo, Label, LineColor
from zpl import parse

HELLO_FONT = FontInfo(name="0", height=30, width=30)


def _draw(zpl: bytes, dpmm: int = 8) -> tuple[RecordingCanvas, list[str]]:
    canvas = RecordingCanvas()
    (label,) = parse(zpl)
    diagnostics = draw_label(label, canvas, DrawerOptions(dpmm=dpmm))
    return canvas, diagnostics


class TextPlacementTests(unittest.TestCase):
    def test_origin_places_baseline_below_top(self) -> None:
        canvas, diagnostics = _draw(b"^XA^FO50,50^A0N,30,30^FDHELLO^FS^XZ")
        settings = resolve_font(HELLO_FONT, 1.0)
        self.assertEqual(diagnostics, [])
        (run,) = canvas.texts
        self.assertEqual(run.text, "HELLO")
        self.assertEqual(run.font_name, "Helvetica-Bold")
        self.assertAlmostEqual(run.x, 50)
        self.assertAlmostEqual(run.y, 50 + 0.75 * settings.line_height)

    def test_higher_density_doubles_text_geometry(self) -> None:
        for zpl in (
            b"^XA^FO50,50^A0N,30,30^FDHELLO^FS^XZ",
            b"^XA^FO50,50^A0R,30,20^FDHELLO^FS^XZ",
            b"^XA^FO50,50^A0N,30,30^FB300,3,4,C,10^FDone two three four five^FS^XZ",
        ):
            with self.subTest(zpl=zpl):
                low, _ = _draw(zpl, dpmm=8)
                high, _ = _draw(zpl, dpmm=16)
                self.assertEqual(len(high.texts), len(low.texts))
                for small, large in zip(low.texts, high.texts):
                    self.assertEqual(large.text, small.text)
                    self.assertAlmostEqual(large.x, 2 * small.x)
                    self.assertAlmostEqual(large.y, 2 * small.y)
                    self.assertAlmostEqual(large.size, 2 * small.size)
                    self.assertAlmostEqual(large.width, 2 * small.width)

    def test_higher_density_doubles_barcode_geometry(self) -> None:
        zpl = b"^XA^BY2^FO10,20^BCR,50,N^FD1234^FS^FO5,300^GB80,40,3^FS^XZ"
        low, _ = _draw(zpl, dpmm=8)
        high, _ = _draw(zpl, dpmm=16)
        self.assertEqual(len(high.rects), len(low.rects))
        for small, large in zip(low.rects, high.rects):
            self.assertAlmostEqual(large.x, 2 * small.x)
            self.assertAlmostEqual(large.y, 2 * small.y)
            self.assertAlmostEqual(large.width, 2 * small.width)
            self.assertAlmostEqual(large.height, 2 * small.height)

    def test_label_density_sets_native_scale(self) -> None:
        (parsed,) = parse(b"^XA^FT50,50^A0N,30^FDa^FS^XZ")
        canvas = RecordingCanvas()
        draw_label(replace(parsed, dpmm=16), canvas, DrawerOptions(dpmm=8))
        self.assertAlmostEqual(canvas.texts[0].x, 25)
        self.assertAlmostEqual(canvas.texts[0].y, 25)

    def test_typeset_uses_baseline_directly(self) -> None:
        canvas, _ = _draw(b"^XA^FT50,50^A0N,30,30^FDHELLO^FS^XZ")
        self.assertAlmostEqual(canvas.texts[0].x, 50)
        self.assertAlmostEqual(canvas.texts[0].y, 50)

    def test_rotated_origin_offsets(self) -> None:
        settings = resolve_font(HELLO_FONT, 1.0)
        height = settings.line_height
        width = settings.width("HELLO") * settings.scale_x

        canvas, _ = _draw(b"^XA^FO50,50^A0R,30,30^FDHELLO^FS^XZ")
        run = canvas.texts[0]
        self.assertEqual(run.rotation, 90)
        self.assertAlmostEqual(run.x, 50 + height / 4)
        self.assertAlmostEqual(run.y, 50)

        canvas, _ = _draw(b"^XA^FO50,50^A0I,30,30^FDHELLO^FS^XZ")
        run = canvas.texts[0]
        self.assertEqual(run.rotation, 180)
        self.assertAlmostEqual(run.x, 50 + width)
        self.assertAlmostEqual(run.y, 50 + height / 4)

        canvas, _ = _draw(b"^XA^FO50,50^A0B,30,30^FDHELLO^FS^XZ")
        run = canvas.texts[0]
        self.assertEqual(run.rotation, 270)
        self.assertAlmostEqual(run.x, 50 + 3 * height / 4)
        self.assertAlmostEqual(run.y, 50 + width)

    def test_rotation_does_not_leak(self) -> None:
        canvas, _ = _draw(
            b"^XA^FO50,50^A0R,30^FDone^FS^FO10,10^BCB,40^FD1234^FS^FO5,5^A0N,30^FDtwo^FS^XZ"
        )
        self.assertEqual(canvas.depth, 1)
        self.assertEqual(canvas.texts[-1].rotation, 0)

    def test_first_field_without_position_starts_below_home(self) -> None:
        canvas, _ = _draw(b"^XA^LH10,20^FT^A0N,30,30^FDa^FS^FDb^FS^XZ")
        settings = resolve_font(HELLO_FONT, 1.0)
        first = canvas.texts[0]
        self.assertAlmostEqual(first.x, 10)
        self.assertAlmostEqual(first.y, 20 + 0.75 * settings.line_height)
        self.assertGreater(first.y - settings.ascent, 0)

    def test_fields_without_position_stack_below_previous(self) -> None:
        canvas, _ = _draw(b"^XA^FO10,10^A0N,30,30^FDa^FS^FT^A0N,30,30^FDb^FS^XZ")
        settings = resolve_font(HELLO_FONT, 1.0)
        first, second = canvas.texts
        self.assertAlmostEqual(second.x, first.x)
        self.assertAlmostEqual(second.y, first.y + settings.line_height)

    def test_label_home_offsets_fields(self) -> None:
        canvas, _ = _draw(b"^XA^LH20,30^FT10,10^A0N,30^FDa^FS^XZ")
        self.assertAlmostEqual(canvas.texts[0].x, 30)
        self.assertAlmostEqual(canvas.texts[0].y, 40)

    def test_right_field_alignment_ends_at_origin(self) -> None:
        canvas, _ = _draw(b"^XA^FT200,50,1^A0N,30,30^FDab^FS^XZ")
        run = canvas.texts[0]
        self.assertAlmostEqual(run.x + run.width, 200)

    def test_font_b_is_upper_cased(self) -> None:
        canvas, _ = _draw(b"^XA^FO10,10^ABN,20,10^FDhello^FS^XZ")
        self.assertEqual(canvas.texts[0].text, "HELLO")
        self.assertEqual(canvas.texts[0].font_name, "Courier-Bold")

    def test_unknown_font_falls_back(self) -> None:
        canvas, diagnostics = _draw(b"^XA^FO10,10^AQN,20^FDx^FS^XZ")
        self.assertEqual(diagnostics, [])
        self.assertEqual(canvas.texts[0].font_name, "Courier")


class TextBlockTests(unittest.TestCase):
    def test_center_alignment(self) -> None:
        canvas, _ = _draw(b"^XA^FO10,10^A0N,30,30^FB400,1,0,C^FDhi^FS^XZ")
        settings = resolve_font(HELLO_FONT, 1.0)
        run = canvas.texts[0]
        self.assertAlmostEqual(run.x, 10 + (400 - settings.width("hi")) / 2)

    def test_justified_lines_span_block(self) -> None:
        canvas, _ = _draw(b"^XA^FO10,10^A0N,30,30^FB400,2,0,J^FDaa bb cc\\&dd^FS^XZ")
        texts = {run.text: run for run in canvas.texts}
        self.assertEqual(set(texts), {"aa", "bb", "cc", "dd"})
        self.assertAlmostEqual(texts["aa"].x, 10)
        self.assertAlmostEqual(texts["cc"].x + texts["cc"].width, 410)
        self.assertAlmostEqual(texts["dd"].x, 10)
        self.assertGreater(texts["dd"].y, texts["aa"].y)

    def test_max_lines_truncates(self) -> None:
        canvas, _ = _draw(b"^XA^FO10,10^A0N,30^FB400,2^FDa\\&b\\&c^FS^XZ")
        self.assertEqual([run.text for run in canvas.texts], ["a", "b"])

    def test_rotated_block_first_line_matches_full_block(self) -> None:
        short, _ = _draw(b"^XA^FO100,100^A0R,30,30^FB400,4^FDone^FS^XZ")
        full, _ = _draw(b"^XA^FO100,100^A0R,30,30^FB400,4^FDone\\&b\\&c\\&d^FS^XZ")
        first = short.texts[0]
        matching = next(run for run in full.texts if run.text == "one")
        self.assertAlmostEqual(first.x, matching.x)
        self.assertAlmostEqual(first.y, matching.y)

    def test_zero_width_block_is_skipped(self) -> None:
        canvas, diagnostics = _draw(b"^XA^FO1,1^FB0,1^FDx^FS^FO5,5^FDok^FS^XZ")
        self.assertEqual([run.text for run in canvas.texts], ["ok"])
        self.assertEqual(len(diagnostics), 1)
        self.assertIn("TextField", diagnostics[0])


class BarcodeLayoutTests(unittest.TestCase):
    def test_code128_bars(self) -> None:
        canvas, _ = _draw(b"^XA^BY2^FO10,20^BCN,50,N^FD1234^FS^XZ")
        self.assertEqual(canvas.texts, [])
        self.assertAlmostEqual(min(rect.x for rect in canvas.rects), 10)
        self.assertAlmostEqual(max(rect.x + rect.width for rect in canvas.rects), 10 + 114)
        for rect in canvas.rects:
            self.assertAlmostEqual(rect.y, 20)
            self.assertAlmostEqual(rect.height, 50)
            self.assertTrue(rect.filled)

    def test_typeset_barcode_sits_on_baseline(self) -> None:
        canvas, _ = _draw(b"^XA^FT10,100^BCN,50,N^FD1234^FS^XZ")
        self.assertAlmostEqual(canvas.rects[0].y, 50)

    def test_interpretation_line_below_bars(self) -> None:
        canvas, _ = _draw(b"^XA^FO10,20^BCN,50,Y^FD1234^FS^XZ")
        (run,) = canvas.texts
        self.assertEqual(run.text, "1234")
        self.assertGreater(run.y, 70)

    def test_unsupported_symbology_is_reported(self) -> None:
        canvas, diagnostics = _draw(b"^XA^FO1,1^BXN,10^FDdm^FS^FO5,5^FDok^FS^XZ")
        self.assertEqual(len(diagnostics), 1)
        self.assertIn("datamatrix", diagnostics[0])
        self.assertEqual([run.text for run in canvas.texts], ["ok"])

    def test_qrcode_modules(self) -> None:
        canvas, diagnostics = _draw(b"^XA^FO0,0^BQN,2,4^FDLA,hello^FS^XZ")
        self.assertEqual(diagnostics, [])
        self.assertEqual(canvas.texts, [])
        self.assertAlmostEqual(max(rect.x + rect.width for rect in canvas.rects), 21 * 4)
        self.assertAlmostEqual(max(rect.y + rect.height for rect in canvas.rects), 21 * 4)


class GraphicLayoutTests(unittest.TestCase):
    def test_outlined_box(self) -> None:
        canvas, _ = _draw(b"^XA^FO10,10^GB100,50,3^FS^XZ")
        self.assertEqual(canvas.rects, [Rect(10, 10, 100, 50, 0, LineColor.BLACK, False)])

    def test_thick_box_is_filled(self) -> None:
        canvas, _ = _draw(b"^XA^LH20,30^FO10,10^GB100,4,4,W^FS^XZ")
        self.assertEqual(canvas.rects, [Rect(30, 40, 100, 4, 0, LineColor.WHITE, True)])

    def test_diagonal_directions(self) -> None:
        canvas, _ = _draw(b"^XA^FO0,0^GD40,30,2^FS^FO0,0^GD40,30,2,,L^FS^XZ")
        right, left = canvas.lines
        self.assertEqual(right[:2], ((0, 30), (40, 0)))
        self.assertEqual(left[:2], ((0, 0), (40, 30)))

    def test_circle(self) -> None:
        canvas, _ = _draw(b"^XA^FO10,10^GC40,2^FS^FO100,100^GC20,10^FS^XZ")
        outline, disc = canvas.circles
        self.assertEqual(outline, ((30, 30), 19, 2, False))
        self.assertEqual(disc, ((110, 110), 10, 10, True))


class DispatchTests(unittest.TestCase):
    def test_unknown_element_type(self) -> None:
        with self.assertRaises(TypeError):
            draw_label(Label(elements=("not an element",)), RecordingCanvas(), DrawerOptions())


if __name__ == "__main__":
    unittest.main()
