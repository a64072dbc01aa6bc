# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Error taxonomy for the call compiler.

Compile-time errors derive from `CompileError` and always carry the source
offset of the offending token. They are `ValueError` subclasses so callers that
only care about "bad input" can catch them generically, while the compiler
converts them into structured diagnostics.

Configuration-time errors (`RegistryError`, `ConfigError`) are raised while the
host sets up the compiler and never carry a source offset.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .diagnostics import Diagnostic
from .span import Span


class CompileError(ValueError):
	"""Base class for errors reported by one compile invocation."""

	phase = "compile"
	code = "E-COMPILE"

	def __init__(self, message: str, *, offset: int, notes: Sequence[str] = ()) -> None:
		super().__init__(message)
		self.message = message
		self.offset = offset
		self.notes = list(notes)

	def to_diagnostic(self, source: Optional[str] = None, *, file: Optional[str] = None) -> Diagnostic:
		return Diagnostic(
			message=self.message,
			code=self.code,
			phase=self.phase,
			severity="error",
			span=Span.from_offset(source, self.offset, file=file),
			notes=list(self.notes),
		)


class LexError(CompileError):
	"""Unterminated string literal or unrecognized character."""

	phase = "lexer"
	code = "E-LEX"


class ParseError(CompileError):
	"""Malformed call syntax (unbalanced parens, malformed argument list, ...)."""

	phase = "parser"
	code = "E-PARSE"


class ResolutionError(CompileError):
	"""Raised when a call cannot be matched against the function registry."""

	phase = "resolver"
	code = "E-RESOLVE"


class UnknownFunctionError(ResolutionError):
	code = "E-UNKNOWN-FUNCTION"

	def __init__(self, name: str, *, offset: int, suggestions: Sequence[str] = ()) -> None:
		notes = [f"did you mean '{s}'?" for s in suggestions]
		super().__init__(f"unknown function '{name}'", offset=offset, notes=notes)
		self.name = name
		self.suggestions = list(suggestions)


class ArityError(ResolutionError):
	code = "E-ARITY"

	def __init__(
		self,
		message: str,
		*,
		offset: int,
		name: str,
		min_arity: int,
		max_arity: Optional[int],
		actual: int,
	) -> None:
		super().__init__(message, offset=offset)
		self.name = name
		self.min_arity = min_arity
		self.max_arity = max_arity
		self.actual = actual


class UnknownArgumentError(ResolutionError):
	code = "E-UNKNOWN-ARGUMENT"

	def __init__(self, message: str, *, offset: int, name: str, argument: str) -> None:
		super().__init__(message, offset=offset)
		self.name = name
		self.argument = argument


class DuplicateArgumentError(ResolutionError):
	code = "E-DUPLICATE-ARGUMENT"

	def __init__(self, message: str, *, offset: int, name: str, argument: str) -> None:
		super().__init__(message, offset=offset)
		self.name = name
		self.argument = argument


class EmitError(CompileError):
	"""An emission template could not be rendered for the bound arguments."""

	phase = "emitter"
	code = "E-EMIT"


class RegistryError(ValueError):
	"""Invalid registration or registration after the registry was sealed."""


class ConfigError(ValueError):
	"""Malformed compiler configuration (options or function definition files)."""


__all__ = [
	"ArityError",
	"CompileError",
	"ConfigError",
	"DuplicateArgumentError",
	"EmitError",
	"LexError",
	"ParseError",
	"RegistryError",
	"ResolutionError",
	"UnknownArgumentError",
	"UnknownFunctionError",
]
