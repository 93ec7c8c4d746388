"""Split a raw ZPL byte stream into command tokens."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_FORMAT_PREFIX = "^"
DEFAULT_CONTROL_PREFIX = "~"
DEFAULT_SEPARATOR = ","

# Commands whose parameter is literal text running up to the next ^FS or ^XZ.
_LITERAL_COMMANDS = frozenset({"FD", "FV"})
_LITERAL_TERMINATORS = ("FS", "XZ")

_DELIMITER_COMMANDS = {
    "CC": "format_prefix",
    "CT": "control_prefix",
    "CD": "separator",
}


@dataclass
class LexerConfig:
    """Delimiters in effect while scanning; mutated by ``CC``, ``CT`` and ``CD``."""

    format_prefix: str = DEFAULT_FORMAT_PREFIX
    control_prefix: str = DEFAULT_CONTROL_PREFIX
    separator: str = DEFAULT_SEPARATOR

    def is_prefix(self, char: str) -> bool:
        return char == self.format_prefix or char == self.control_prefix


@dataclass(frozen=True)
class Token:
    """One command: two-letter mnemonic plus its raw parameter text."""

    mnemonic: str
    parameters: str = ""
    control_prefixed: bool = False
    separator: str = DEFAULT_SEPARATOR

    def fields(self) -> list[str]:
        """Return the parameters split on the separator active at scan time."""

        if not self.parameters:
            return []
        return self.parameters.split(self.separator)


def decode_bytes(data: bytes) -> str:
    """Decode a ZPL buffer, accepting UTF-8 (``^CI28``) or legacy Latin-1."""

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def tokenize(data: bytes | str, config: LexerConfig | None = None) -> list[Token]:
    """Scan ``data`` left to right and return its command tokens in order."""

    text = data if isinstance(data, str) else decode_bytes(data)
    config = config if config is not None else LexerConfig()

    tokens: list[Token] = []
    pos = 0
    length = len(text)
    while pos < length:
        char = text[pos]
        if not config.is_prefix(char):
            pos += 1
            continue

        control = char != config.format_prefix
        raw_mnemonic = text[pos + 1:pos + 3]
        mnemonic = raw_mnemonic.upper()
        pos += 1 + len(raw_mnemonic)

        if mnemonic in _DELIMITER_COMMANDS:
            # The new delimiter is the single character after the mnemonic,
            # even when it equals one of the current prefixes.
            new_char = text[pos:pos + 1]
            pos += len(new_char)
            if new_char and new_char not in "\r\n":
                setattr(config, _DELIMITER_COMMANDS[mnemonic], new_char)
            tokens.append(Token(mnemonic, new_char, control, config.separator))
            continue

        if mnemonic in _LITERAL_COMMANDS and not control:
            end = _literal_end(text, pos, config)
        else:
            end = _next_prefix(text, pos, config)

        tokens.append(
            Token(
                mnemonic=mnemonic,
                parameters=_strip_line_breaks(text[pos:end]),
                control_prefixed=control,
                separator=config.separator,
            )
        )
        pos = end

    return tokens


def _literal_end(text: str, start: int, config: LexerConfig) -> int:
    ends = [
        index
        for index in (text.find(config.format_prefix + term, start) for term in _LITERAL_TERMINATORS)
        if index >= 0
    ]
    return min(ends, default=len(text))


def _next_prefix(text: str, start: int, config: LexerConfig) -> int:
    for index in range(start, len(text)):
        if config.is_prefix(text[index]):
            return index
    return len(text)


def _strip_line_breaks(value: str) -> str:
    return value.replace("\r", "").replace("\n", "")


__all__ = ["LexerConfig", "Token", "decode_bytes", "tokenize"]
