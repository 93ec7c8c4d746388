import unittest

from reportlab.pdfbase.pdfmetrics import stringWidth

from drawers.utils import justified_word_offsets, wrap_text_to_width


class WrapTextTests(unittest.TestCase):
    def test_empty(self) -> None:
        self.assertEqual(wrap_text_to_width("", "Helvetica", 12, 100), [])
        self.assertEqual(wrap_text_to_width("Hello", "Helvetica", 12, 0), [])

    def test_single_line(self) -> None:
        self.assertEqual(
            wrap_text_to_width("Hello world", "Helvetica", 12, 1000), ["Hello world"]
        )

    def test_enforces_width(self) -> None:
        max_width = 30
        lines = wrap_text_to_width("Hello world", "Helvetica", 12, max_width)
        self.assertGreater(len(lines), 1)
        for line in lines:
            self.assertLessEqual(stringWidth(line, "Helvetica", 12), max_width)

    def test_long_word_is_split(self) -> None:
        lines = wrap_text_to_width("Supercalifragilistic", "Helvetica", 12, 40)
        self.assertGreater(len(lines), 1)
        self.assertEqual("".join(lines), "Supercalifragilistic")

    def test_forced_line_break(self) -> None:
        self.assertEqual(
            wrap_text_to_width("one\\&two\\&\\&three", "Helvetica", 12, 1000),
            ["one", "two", "", "three"],
        )


class JustifyTests(unittest.TestCase):
    def test_words_span_width(self) -> None:
        words = ["aa", "bb", "cc"]
        offsets = justified_word_offsets(words, "Helvetica", 12, 200, 14)
        self.assertEqual(offsets[0], 0)
        self.assertAlmostEqual(offsets[-1] + stringWidth("cc", "Helvetica", 12), 200)

    def test_overfull_line_keeps_minimum_gap(self) -> None:
        words = ["aaaa", "bbbb"]
        offsets = justified_word_offsets(words, "Helvetica", 12, 10, 20)
        self.assertAlmostEqual(offsets[1], stringWidth("aaaa", "Helvetica", 12) + 6)

    def test_single_word(self) -> None:
        self.assertEqual(justified_word_offsets(["solo"], "Helvetica", 12, 200, 14), [0.0])


if __name__ == "__main__":
    unittest.main()
