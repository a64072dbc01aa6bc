# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
PHP emitter for resolved calls.

Scope:
  - Leaf string literals are escaped for PHP; everything the emitter produces
    from a nested call is inserted verbatim (never re-escaped).
  - Variables become `$name`, attribute access `$obj->attr`, Volt's `~`
    concatenation becomes PHP `.`.
  - Binary operands get parentheses only when PHP precedence requires them;
    call results get parentheses only when the descriptor asks for them.

The emitter is pure: it builds strings and never performs I/O.
"""

from __future__ import annotations

import logging
from typing import Dict, Sequence

from voltc.config import CompilerOptions
from voltc.core.errors import EmitError
from voltc.parser.ast import ArrayLiteral, Attr, Binary, CallExpr, Expr, Literal, Name, Unary
from voltc.registry import CallableKind, EmitFn, FunctionDescriptor
from voltc.resolver import CallResolver, ResolvedCall

logger = logging.getLogger(__name__)

MACRO_CALL = "$this->callMacro('{name}', [{args}])"

# Template operator -> (PHP operator, precedence). Higher binds tighter; all
# of these are left-associative in PHP 8.
_BINARY_OPS: Dict[str, tuple[str, int]] = {
	"~": (".", 1),
	"+": ("+", 2),
	"-": ("-", 2),
	"*": ("*", 3),
	"/": ("/", 3),
	"%": ("%", 3),
}
_UNARY_PREC = 4
_ATOM_PREC = 5

_PHP_DQ_ESCAPES = {
	"\\": "\\\\",
	'"': '\\"',
	"$": "\\$",
	"\n": "\\n",
	"\t": "\\t",
	"\r": "\\r",
	"\v": "\\v",
	"\f": "\\f",
	"\x1b": "\\e",
}


def _is_control(ch: str) -> bool:
	code = ord(ch)
	return code < 0x20 or code == 0x7F


def php_string(value: str) -> str:
	"""
	Render `value` as a PHP string literal.

	Single quotes are used unless the value holds control characters, which
	only have a readable spelling inside double quotes.
	"""
	if not any(_is_control(ch) for ch in value):
		return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"
	out = []
	for ch in value:
		if ch in _PHP_DQ_ESCAPES:
			out.append(_PHP_DQ_ESCAPES[ch])
		elif _is_control(ch):
			out.append(f"\\x{ord(ch):02x}")
		else:
			out.append(ch)
	return '"' + "".join(out) + '"'


def render_template(template: str, name: str, args: Sequence[str], *, offset: int) -> str:
	try:
		return template.format(*args, name=name, args=", ".join(args))
	except IndexError:
		raise EmitError(
			f"template for '{name}' references a slot beyond the {len(args)} bound argument(s)",
			offset=offset,
		) from None
	except (AttributeError, KeyError, TypeError, ValueError) as exc:
		raise EmitError(f"invalid emission template for '{name}': {exc}", offset=offset) from None


def _call_template(decl: FunctionDescriptor, fn: EmitFn, args: Sequence[str], offset: int) -> str:
	code = fn(decl.name, list(args))
	if not isinstance(code, str):
		raise EmitError(
			f"{decl.kind.value} '{decl.name}' produced {type(code).__name__}, expected str",
			offset=offset,
		)
	return code


def php_number(raw: str) -> str:
	"""Drop leading zeros from the integer part; PHP reads `08` as a bad octal."""
	whole, dot, frac = raw.partition(".")
	return (whole.lstrip("0") or "0") + dot + frac


class PhpEmitter:
	def __init__(self, resolver: CallResolver, options: CompilerOptions | None = None) -> None:
		self.resolver = resolver
		self.options = options or CompilerOptions()

	def emit_call(self, call: CallExpr) -> str:
		resolved = self.resolver.resolve(call, self.emit_expr)
		return self.render(resolved, offset=call.offset)

	def render(self, resolved: ResolvedCall, *, offset: int = 0) -> str:
		decl = resolved.descriptor
		args = resolved.bound_args
		code = self._render_kind(decl, args, offset)
		if decl.parenthesize:
			code = f"({code})"
		logger.debug("emitted %s '%s': %s", decl.kind.value, decl.name, code)
		return code

	def _render_kind(self, decl: FunctionDescriptor, args: Sequence[str], offset: int) -> str:
		if decl.kind is CallableKind.BUILTIN or decl.kind is CallableKind.EXTENSION:
			template = decl.emit_template
		elif decl.kind is CallableKind.MACRO:
			template = MACRO_CALL if decl.emit_template is None else decl.emit_template
		else:
			raise AssertionError(f"unhandled callable kind {decl.kind!r}")
		if callable(template):
			return _call_template(decl, template, args, offset)
		if not isinstance(template, str):
			raise EmitError(f"{decl.kind.value} '{decl.name}' has no usable emission template", offset=offset)
		return render_template(template, decl.name, args, offset=offset)

	def emit_expr(self, expr: Expr) -> str:
		return self._emit(expr)[0]

	def _emit(self, expr: Expr) -> tuple[str, int]:
		"""Emit `expr`, returning the code and the precedence of its outermost operator."""
		if isinstance(expr, CallExpr):
			return self.emit_call(expr), _ATOM_PREC
		if isinstance(expr, Literal):
			if expr.kind == "string":
				return php_string(str(expr.value)), _ATOM_PREC
			if expr.kind in ("int", "float"):
				return php_number(expr.raw), _ATOM_PREC
			return expr.raw, _ATOM_PREC
		if isinstance(expr, Name):
			return f"{self.options.variable_prefix}{expr.ident}", _ATOM_PREC
		if isinstance(expr, Attr):
			target, prec = self._emit(expr.value)
			if prec < _ATOM_PREC:
				target = f"({target})"
			return f"{target}->{expr.attr}", _ATOM_PREC
		if isinstance(expr, ArrayLiteral):
			return "[" + ", ".join(self.emit_expr(e) for e in expr.elements) + "]", _ATOM_PREC
		if isinstance(expr, Unary):
			operand, prec = self._emit(expr.operand)
			if prec < _UNARY_PREC or operand.startswith("-"):
				operand = f"({operand})"
			return f"{expr.op}{operand}", _UNARY_PREC
		if isinstance(expr, Binary):
			php_op, prec = _BINARY_OPS[expr.op]
			left, lprec = self._emit(expr.left)
			right, rprec = self._emit(expr.right)
			if lprec < prec:
				left = f"({left})"
			if rprec <= prec:
				right = f"({right})"
			return f"{left} {php_op} {right}", prec
		raise EmitError(f"cannot emit {type(expr).__name__}", offset=expr.offset)


__all__ = ["MACRO_CALL", "PhpEmitter", "php_number", "php_string", "render_template"]
