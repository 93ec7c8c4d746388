"""Code 128 encoder (``^BC``) with automatic code set B/C switching."""

from __future__ import annotations

from typing import List

from zpl.errors import InvalidSymbolDataError

from .base import ModuleOptions, SymbolEncoder, SymbolMatrix, bars_to_row

PATTERNS = (
    "212222", "222122", "222221", "121223", "121322", "131222", "122213",
    "122312", "132212", "221213", "221312", "231212", "112232", "122132",
    "122231", "113222", "123122", "123221", "223211", "221132", "221231",
    "213212", "223112", "312131", "311222", "321122", "321221", "312212",
    "322112", "322211", "212123", "212321", "232121", "111323", "131123",
    "131321", "112313", "132113", "132311", "211313", "231113", "231311",
    "112133", "112331", "132131", "113123", "113321", "133121", "313121",
    "211331", "231131", "213113", "213311", "213131", "311123", "311321",
    "331121", "312113", "312311", "332111", "314111", "221411", "431111",
    "111224", "111422", "121124", "121421", "141122", "141221", "112214",
    "112412", "122114", "122411", "142112", "142211", "241211", "221114",
    "413111", "241112", "134111", "111242", "121142", "121241", "114212",
    "124112", "124211", "411212", "421112", "421211", "212141", "214121",
    "412121", "111143", "111341", "131141", "114113", "114311", "411113",
    "411311", "113141", "114131", "311141", "411131", "211412", "211214",
    "211232", "2331112",
)

CODE_C = 99
CODE_B = 100
START_B = 104
START_C = 105
STOP = 106

# ZPL invocation codes accepted at the start of the field data.
_FORCE_B = ">:"
_FORCE_C = ">;"


def _digit_run(data: str, start: int) -> int:
    end = start
    while end < len(data) and data[end].isdigit():
        end += 1
    return end - start


def _b_value(char: str) -> int:
    value = ord(char) - 32
    if not 0 <= value <= 94:
        raise InvalidSymbolDataError("code128", f"character {char!r} not in code set B")
    return value


def encode_values(data: str) -> List[int]:
    """Return the symbol values for ``data``, including start, checksum and stop."""

    force_b = data.startswith(_FORCE_B)
    force_c = data.startswith(_FORCE_C)
    if force_b or force_c:
        data = data[2:]
    if not data:
        raise InvalidSymbolDataError("code128", "no data")

    if force_c:
        use_c = True
    elif force_b:
        use_c = False
    else:
        run = _digit_run(data, 0)
        use_c = run >= 4 or (run == len(data) and run % 2 == 0)

    values = [START_C if use_c else START_B]
    index = 0
    while index < len(data):
        run = _digit_run(data, index)
        if use_c:
            if run >= 2:
                values.append(int(data[index:index + 2]))
                index += 2
                continue
            if force_c and not data[index].isdigit():
                raise InvalidSymbolDataError("code128", "code set C accepts digits only")
            values.append(CODE_B)
            use_c = False
            continue

        if not force_b and run >= 4 and run % 2 == 0:
            values.append(CODE_C)
            use_c = True
            continue
        values.append(_b_value(data[index]))
        index += 1

    checksum = values[0] + sum(pos * value for pos, value in enumerate(values[1:], start=1))
    values.append(checksum % 103)
    values.append(STOP)
    return values


class Encoder(SymbolEncoder):
    tag = "code128"

    def encode(self, data: str, options: ModuleOptions) -> SymbolMatrix:
        module = max(options.module_width, 1)
        widths = [
            int(digit) * module
            for value in encode_values(data)
            for digit in PATTERNS[value]
        ]
        text = data[2:] if data.startswith((_FORCE_B, _FORCE_C)) else data
        return SymbolMatrix(
            rows=(bars_to_row(widths),),
            cell_width=1,
            cell_height=options.height,
            text=text,
        )
