from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Union


class Expr:
    """Base class for argument expressions; `offset` is the first character of the node."""

    offset: int


@dataclass
class Name(Expr):
    offset: int
    ident: str


LiteralValue = Union[str, int, float, bool, None]


@dataclass
class Literal(Expr):
	"""
	Literal argument value.

	`kind` is one of `string`, `int`, `float`, `bool`, `null`. For strings,
	`value` holds the decoded text (escapes already applied) so the emitter can
	re-escape it for the target grammar. `raw` keeps the source spelling for
	numbers so `1.50` is not normalized to `1.5`.
	"""

	offset: int
	kind: str
	value: LiteralValue
	raw: str


@dataclass
class Attr(Expr):
    offset: int
    value: Expr
    attr: str


@dataclass
class Unary(Expr):
    offset: int
    op: str
    operand: Expr


@dataclass
class Binary(Expr):
    offset: int
    op: str
    left: Expr
    right: Expr


@dataclass
class ArrayLiteral(Expr):
    offset: int
    elements: List[Expr] = field(default_factory=list)


@dataclass
class KwArg:
    name: str
    value: Expr
    offset: int


@dataclass
class CallExpr(Expr):
	"""
	A call-expression node: `callee(args..., name: value, ...)`.

	`kwargs` maps argument name to its expression; keys are unique and keep
	call-site order. `offset` is the offset of the callee identifier and `end`
	is the offset just past the closing parenthesis.
	"""

	offset: int
	callee: str
	args: List[Expr] = field(default_factory=list)
	kwargs: Dict[str, KwArg] = field(default_factory=dict)
	end: int = 0

	@property
	def arg_count(self) -> int:
		return len(self.args) + len(self.kwargs)


__all__ = [
	"ArrayLiteral",
	"Attr",
	"Binary",
	"CallExpr",
	"Expr",
	"KwArg",
	"Literal",
	"LiteralValue",
	"Name",
	"Unary",
]
