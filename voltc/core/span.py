# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lightweight source span representation used by diagnostics.

Every stage reports locations as absolute character offsets into the template
fragment. Line/column are derived lazily from the source text when a
diagnostic is rendered, so the lexer/parser never have to track them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source location (offset plus best-effort 1-based line/column)."""

	file: Optional[str] = None
	offset: Optional[int] = None
	line: Optional[int] = None
	column: Optional[int] = None

	@classmethod
	def from_offset(cls, source: Optional[str], offset: Optional[int], *, file: Optional[str] = None) -> "Span":
		"""
		Construct a Span for `offset` within `source`.

		Offsets past the end of the source are clamped so EOF errors still get a
		usable line/column.
		"""
		if offset is None:
			return cls(file=file)
		if source is None:
			return cls(file=file, offset=offset)
		pos = max(0, min(offset, len(source)))
		line = source.count("\n", 0, pos) + 1
		line_start = source.rfind("\n", 0, pos) + 1
		return cls(file=file, offset=offset, line=line, column=pos - line_start + 1)


__all__ = ["Span"]
