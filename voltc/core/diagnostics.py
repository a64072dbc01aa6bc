"""
Common diagnostic structure for the compile pipeline.

Errors raised by the stages are converted into diagnostics at the compiler
boundary; the CLI renders them as text or JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .span import Span


@dataclass
class Diagnostic:
	"""Represents a compiler diagnostic (error/warning/etc.)."""

	message: str
	code: str | None = None
	# Pipeline phase that produced the diagnostic (lexer/parser/resolver/emitter).
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Source location (Span() denotes unknown).
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def to_json(self) -> dict:
		"""Render to a structured JSON-friendly dict."""
		return {
			"phase": self.phase,
			"code": self.code,
			"message": self.message,
			"severity": self.severity,
			"file": self.span.file,
			"offset": self.span.offset,
			"line": self.span.line,
			"column": self.span.column,
			"notes": list(self.notes),
		}

	def format(self) -> str:
		"""Render as `file:line:column: severity: message` (notes on following lines)."""
		f = self.span.file or "<input>"
		l = self.span.line if self.span.line is not None else "?"
		c = self.span.column if self.span.column is not None else "?"
		out = f"{f}:{l}:{c}: {self.severity}: {self.message}"
		for note in self.notes:
			out += f"\n  note: {note}"
		return out


__all__ = ["Diagnostic"]
