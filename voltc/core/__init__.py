# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Shared diagnostics/location/error types used by every stage."""

from .diagnostics import Diagnostic
from .errors import (
	ArityError,
	CompileError,
	ConfigError,
	DuplicateArgumentError,
	EmitError,
	LexError,
	ParseError,
	RegistryError,
	ResolutionError,
	UnknownArgumentError,
	UnknownFunctionError,
)
from .span import Span

__all__ = [
	"ArityError",
	"CompileError",
	"ConfigError",
	"Diagnostic",
	"DuplicateArgumentError",
	"EmitError",
	"LexError",
	"ParseError",
	"RegistryError",
	"ResolutionError",
	"Span",
	"UnknownArgumentError",
	"UnknownFunctionError",
]
