"""Shared text helpers for the element drawers."""

from __future__ import annotations

from typing import List

from reportlab.pdfbase.pdfmetrics import stringWidth

# Hard line break inside ^FB field data.
BLOCK_LINE_BREAK = "\\&"

# Word gap used when a justified line is already wider than the block.
MIN_JUSTIFY_GAP = 0.3


def wrap_text_to_width(
    text: str,
    font_name: str,
    font_size: float,
    max_width: float,
) -> List[str]:
    """Greedily wrap ``text`` into lines no wider than ``max_width``.

    ``\\&`` forces a line break; a single word wider than the block is broken
    by character.
    """

    if not text or max_width <= 0:
        return []

    lines: List[str] = []
    for paragraph in text.split(BLOCK_LINE_BREAK):
        wrapped = _wrap_paragraph(paragraph, font_name, font_size, max_width)
        lines.extend(wrapped or [""])
    return lines


def _wrap_paragraph(
    text: str,
    font_name: str,
    font_size: float,
    max_width: float,
) -> List[str]:
    words = text.split()
    if not words:
        return []

    lines: List[str] = []
    current: List[str] = []
    for word in words:
        tentative = " ".join(current + [word]) if current else word
        if stringWidth(tentative, font_name, font_size) <= max_width:
            current.append(word)
            continue

        if current:
            lines.append(" ".join(current))
            current = []
            if stringWidth(word, font_name, font_size) <= max_width:
                current = [word]
                continue

        # single word exceeds width; perform character-level wrap
        partial = ""
        for ch in word:
            candidate = partial + ch
            if stringWidth(candidate, font_name, font_size) > max_width and partial:
                lines.append(partial)
                partial = ch
            else:
                partial = candidate
        if partial:
            current = [partial]

    if current:
        lines.append(" ".join(current))
    return lines


def justified_word_offsets(
    words: List[str],
    font_name: str,
    font_size: float,
    max_width: float,
    line_height: float,
) -> List[float]:
    """Return the x offset of every word so the line spans ``max_width``."""

    widths = [stringWidth(word, font_name, font_size) for word in words]
    gaps = len(words) - 1
    gap = 0.0
    if gaps > 0:
        gap = (max_width - sum(widths)) / gaps
        if gap < 0:
            gap = line_height * MIN_JUSTIFY_GAP

    offsets: List[float] = []
    cursor = 0.0
    for width in widths:
        offsets.append(cursor)
        cursor += width + gap
    return offsets
