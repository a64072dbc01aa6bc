# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Template tokenizer.

Tokens come from the lark basic lexer built over `grammar.lark`, so the token
set can never drift from what the call parser accepts. Lark token types are
folded into the small `TokenKind` vocabulary that tooling such as editors and
highlighters works with.

`parse_call` does not consume `Lexer`: it feeds lark's own tokens straight
into the interactive LALR parser, because those carry the terminal types the
grammar is keyed on. `Lexer` is a parallel view over the same `CALL_GRAMMAR`
scan, with the same offsets and the same `LexError` reporting (`lex_error`).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Iterator

from lark import Lark
from lark.exceptions import UnexpectedCharacters

from voltc.core.errors import LexError

logger = logging.getLogger(__name__)

GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
GRAMMAR_SRC = GRAMMAR_PATH.read_text()

# Shared by the tokenizer (`lex`) and the call parser (`parse_interactive`).
CALL_GRAMMAR = Lark(
	GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="call",
	propagate_positions=True,
	maybe_placeholders=False,
)

_QUOTES = ("'", '"')


class TokenKind(Enum):
	IDENT = auto()
	LPAREN = auto()
	RPAREN = auto()
	COMMA = auto()
	STRING = auto()
	NUMBER = auto()
	OPERATOR = auto()
	COLON = auto()
	LBRACKET = auto()
	RBRACKET = auto()
	EOF = auto()


_KIND_BY_TERMINAL = {
	"NAME": TokenKind.IDENT,
	"TRUE": TokenKind.IDENT,
	"FALSE": TokenKind.IDENT,
	"NULL": TokenKind.IDENT,
	"LPAR": TokenKind.LPAREN,
	"RPAR": TokenKind.RPAREN,
	"COMMA": TokenKind.COMMA,
	"STRING": TokenKind.STRING,
	"NUMBER": TokenKind.NUMBER,
	"COLON": TokenKind.COLON,
	"LSQB": TokenKind.LBRACKET,
	"RSQB": TokenKind.RBRACKET,
	"DOT": TokenKind.OPERATOR,
	"TILDE": TokenKind.OPERATOR,
	"PLUS": TokenKind.OPERATOR,
	"MINUS": TokenKind.OPERATOR,
	"STAR": TokenKind.OPERATOR,
	"SLASH": TokenKind.OPERATOR,
	"PERCENT": TokenKind.OPERATOR,
}


@dataclass(frozen=True)
class Token:
	kind: TokenKind
	text: str
	offset: int


def lex_error(exc: UnexpectedCharacters, source: str, base: int) -> LexError:
	"""Convert a lark character error into a LexError at an absolute offset."""
	offset = base + exc.pos_in_stream
	ch = source[offset] if offset < len(source) else ""
	if ch in _QUOTES:
		return LexError("unterminated string literal", offset=offset)
	return LexError(f"unexpected character {ch!r}", offset=offset)


class Lexer:
	"""
	Lazily tokenizes a template fragment.

	`tokens()` may be called any number of times; every call starts a fresh
	scan, so a Lexer can be shared by readers that each walk the stream once.
	"""

	def __init__(self, source: str) -> None:
		self.source = source

	def tokens(self, offset: int = 0) -> Iterator[Token]:
		if offset < 0 or offset > len(self.source):
			raise ValueError(f"offset {offset} outside source of length {len(self.source)}")
		text = self.source[offset:]
		try:
			for tok in CALL_GRAMMAR.lex(text):
				yield Token(kind=_KIND_BY_TERMINAL[tok.type], text=str(tok), offset=offset + tok.start_pos)
		except UnexpectedCharacters as exc:
			err = lex_error(exc, self.source, offset)
			logger.debug("lex error at %d: %s", err.offset, err.message)
			raise err from None
		yield Token(kind=TokenKind.EOF, text="", offset=len(self.source))

	def __iter__(self) -> Iterator[Token]:
		return self.tokens()


def tokenize(source: str, offset: int = 0) -> list[Token]:
	"""Eagerly tokenize `source` (convenience for tests and tooling)."""
	return list(Lexer(source).tokens(offset))


__all__ = ["CALL_GRAMMAR", "GRAMMAR_SRC", "Lexer", "Token", "TokenKind", "lex_error", "tokenize"]
