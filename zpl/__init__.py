"""ZPL tokenizer and command interpreter."""

from __future__ import annotations

from .errors import ParseError, RenderError
from .parser import parse
from .tokenizer import LexerConfig, Token, tokenize

__all__ = ["LexerConfig", "ParseError", "RenderError", "Token", "parse", "tokenize"]
