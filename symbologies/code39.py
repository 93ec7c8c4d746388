"""Code 39 encoder (``^B3``)."""

from __future__ import annotations

from zpl.errors import InvalidSymbolDataError

from .base import ModuleOptions, SymbolEncoder, SymbolMatrix, bars_to_row

# Value order used by the mod 43 check character.
CHARSET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ-. $/+%"

# Nine elements per character, bar first; 1 marks a wide element.
PATTERNS = {
    "0": "000110100", "1": "100100001", "2": "001100001", "3": "101100000",
    "4": "000110001", "5": "100110000", "6": "001110000", "7": "000100101",
    "8": "100100100", "9": "001100100", "A": "100001001", "B": "001001001",
    "C": "101001000", "D": "000011001", "E": "100011000", "F": "001011000",
    "G": "000001101", "H": "100001100", "I": "001001100", "J": "000011100",
    "K": "100000011", "L": "001000011", "M": "101000010", "N": "000010011",
    "O": "100010010", "P": "001010010", "Q": "000000111", "R": "100000110",
    "S": "001000110", "T": "000010110", "U": "110000001", "V": "011000001",
    "W": "111000000", "X": "010010001", "Y": "110010000", "Z": "011010000",
    "-": "010000101", ".": "110000100", " ": "011000100", "$": "010101000",
    "/": "010100010", "+": "010001010", "%": "000101010", "*": "010010100",
}


def check_character(data: str) -> str:
    return CHARSET[sum(CHARSET.index(char) for char in data) % 43]


class Encoder(SymbolEncoder):
    tag = "code39"

    def encode(self, data: str, options: ModuleOptions) -> SymbolMatrix:
        payload = data.upper()
        if not payload:
            raise InvalidSymbolDataError(self.tag, "no data")
        invalid = sorted({char for char in payload if char not in CHARSET})
        if invalid:
            raise InvalidSymbolDataError(
                self.tag, f"unsupported characters {''.join(invalid)!r}"
            )
        if options.check_digit:
            payload += check_character(payload)

        narrow = max(options.module_width, 1)
        wide = max(int(round(narrow * options.ratio)), narrow + 1)
        widths: list[int] = []
        for position, char in enumerate(f"*{payload}*"):
            if position:
                # inter-character gap continues the bar/space alternation
                widths.append(narrow)
            widths.extend(wide if flag == "1" else narrow for flag in PATTERNS[char])

        return SymbolMatrix(
            rows=(bars_to_row(widths),),
            cell_width=1,
            cell_height=options.height,
            text=f"*{payload}*",
        )
