# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Call compiler pipeline.

One compilation is a strict linear pipeline with no backtracking:

  source text -> tokens (lexer)
              -> CallExpr (parser)
              -> ResolvedCall (resolver)
              -> PHP code (emitter)

The first error at any stage aborts the pipeline; callers get either the
complete emitted code or a single structured error, never partial output.
A compiler owns no per-compilation state, so one instance may serve several
threads once its registry is sealed (which the constructor does).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from voltc.builtins import default_registry
from voltc.config import CompilerOptions
from voltc.core.diagnostics import Diagnostic
from voltc.core.errors import CompileError, ParseError
from voltc.emitter import PhpEmitter
from voltc.parser import parse_call
from voltc.parser.ast import CallExpr
from voltc.registry import FunctionRegistry
from voltc.resolver import CallResolver

logger = logging.getLogger(__name__)


@dataclass
class CompileResult:
	"""Outcome of `CallCompiler.compile`: `code` is None iff diagnostics were produced."""

	code: Optional[str]
	end: Optional[int] = None
	diagnostics: List[Diagnostic] = field(default_factory=list)

	@property
	def ok(self) -> bool:
		return self.code is not None


class CallCompiler:
	def __init__(self, registry: FunctionRegistry, options: Optional[CompilerOptions] = None) -> None:
		self.options = options or CompilerOptions()
		self.registry = registry
		self.registry.seal()
		self.resolver = CallResolver(registry, self.options.precedence)
		self.emitter = PhpEmitter(self.resolver, self.options)

	def parse(self, source: str, offset: int = 0) -> CallExpr:
		call = parse_call(source, offset)
		if not self.options.allow_trailing_input:
			rest = source[call.end :]
			if rest.strip():
				trailing = call.end + (len(rest) - len(rest.lstrip()))
				raise ParseError("unexpected input after call expression", offset=trailing)
		return call

	def compile_call(self, source: str, offset: int = 0) -> str:
		"""Compile the call at `offset`; raises a CompileError subclass on failure."""
		call = self.parse(source, offset)
		code = self.emitter.emit_call(call)
		logger.debug("compiled '%s' -> %s", call.callee, code)
		return code

	def compile(self, source: str, offset: int = 0, *, file: Optional[str] = None) -> CompileResult:
		"""Like `compile_call`, but report failures as diagnostics instead of raising."""
		try:
			call = self.parse(source, offset)
			code = self.emitter.emit_call(call)
		except CompileError as exc:
			logger.debug("compile failed in %s at %d: %s", exc.phase, exc.offset, exc.message)
			return CompileResult(code=None, diagnostics=[exc.to_diagnostic(source, file=file)])
		return CompileResult(code=code, end=call.end)


def compile_call(
	source: str,
	registry: Optional[FunctionRegistry] = None,
	options: Optional[CompilerOptions] = None,
) -> str:
	"""One-shot helper: compile `source` against `registry` (builtins by default)."""
	return CallCompiler(registry if registry is not None else default_registry(), options).compile_call(source)


__all__ = ["CallCompiler", "CompileResult", "compile_call"]
