# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Call-expression parser.

Tokens from the shared lark lexer are fed one at a time into an interactive
LALR parser. Feeding stops at the `)` that closes the call, so the parser
consumes exactly one call expression and reports where it ended; whatever
follows belongs to the host template compiler.

The parse tree is then adapted into `voltc.parser.ast` nodes. Checks that the
grammar cannot express (named-before-positional ordering, duplicate names)
happen in the adapter and are reported as `ParseError` as well.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Tuple

from lark import Token, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, UnexpectedToken

from voltc.core.errors import ParseError

from .ast import ArrayLiteral, Attr, Binary, CallExpr, Expr, KwArg, Literal, Name, Unary
from .lexer import CALL_GRAMMAR, lex_error

logger = logging.getLogger(__name__)

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\\": "\\", "'": "'", '"': '"'}
_ESCAPE_RE = re.compile(r"\\([\s\S])")

# Deepest bracket nesting accepted inside one call; the AST builder and the
# emitter recurse once per level.
MAX_NESTING = 64
# Operator chains (including `.` access) build one nested node per operator.
MAX_OPERATORS = 256
_OPERATOR_TYPES = frozenset({"DOT", "TILDE", "PLUS", "MINUS", "STAR", "SLASH", "PERCENT"})

_TOKEN_DESCRIPTIONS = {
	"LPAR": "'('",
	"RPAR": "')'",
	"LSQB": "'['",
	"RSQB": "']'",
	"COMMA": "','",
	"COLON": "':'",
	"$END": "end of input",
}


def decode_string(raw: str) -> str:
	"""
	Decode a STRING token (quotes included) into its value.

	Recognized escapes: `\\\\`, `\\'`, `\\"`, `\\n`, `\\t`, `\\r`. Any other
	backslash sequence is kept verbatim, matching PHP's treatment of unknown
	escapes.
	"""
	body = raw[1:-1]
	return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(0)), body)


def _describe(tok: Token) -> str:
	if tok.type in _TOKEN_DESCRIPTIONS:
		return _TOKEN_DESCRIPTIONS[tok.type]
	return f"'{tok}'"


def _parse_error(exc: UnexpectedToken, tok: Token, prev: Optional[Token], base: int) -> ParseError:
	"""Map a grammar rejection of `tok` to a ParseError with a useful message/offset."""
	offset = base + tok.start_pos
	prev_type = prev.type if prev is not None else None
	if tok.type == "COMMA" and prev_type in ("COMMA", "LPAR", "LSQB"):
		return ParseError("empty argument", offset=offset)
	if tok.type in ("RPAR", "RSQB") and prev_type == "COMMA":
		return ParseError(f"trailing comma before {_describe(tok)}", offset=base + prev.start_pos)
	if prev is None:
		return ParseError(f"expected a function name, got {_describe(tok)}", offset=offset)
	expected = sorted(_TOKEN_DESCRIPTIONS.get(e, e) for e in (exc.expected or ()))
	notes = [f"expected one of: {', '.join(expected)}"] if expected else []
	return ParseError(f"unexpected {_describe(tok)}", offset=offset, notes=notes)


def parse_call(source: str, offset: int = 0) -> CallExpr:
	"""
	Parse the call expression that starts at `offset` in `source`.

	Consumes tokens up to and including the matching `)`; `CallExpr.end` tells
	the caller where the call ended. Raises `LexError` or `ParseError`.
	"""
	if offset < 0 or offset > len(source):
		raise ValueError(f"offset {offset} outside source of length {len(source)}")
	text = source[offset:]
	ip = CALL_GRAMMAR.parse_interactive(text)
	depth = 0
	operators = 0
	prev: Optional[Token] = None
	closing: Optional[Token] = None
	try:
		for tok in CALL_GRAMMAR.lex(text):
			try:
				ip.feed_token(tok)
			except UnexpectedToken as exc:
				raise _parse_error(exc, tok, prev, offset) from None
			if tok.type in ("LPAR", "LSQB"):
				depth += 1
				if depth > MAX_NESTING:
					raise ParseError(f"nesting too deep (more than {MAX_NESTING} levels)", offset=offset + tok.start_pos)
			elif tok.type in _OPERATOR_TYPES:
				operators += 1
				if operators > MAX_OPERATORS:
					raise ParseError(f"expression too long (more than {MAX_OPERATORS} operators)", offset=offset + tok.start_pos)
			elif tok.type in ("RPAR", "RSQB"):
				depth -= 1
				if depth == 0:
					closing = tok
					break
			prev = tok
	except UnexpectedCharacters as exc:
		raise lex_error(exc, source, offset) from None

	if closing is None:
		if prev is None:
			raise ParseError("expected a function call", offset=len(source))
		if depth == 0:
			raise ParseError(f"expected '(' after '{prev}'", offset=len(source))
		raise ParseError("unbalanced parentheses: expected ')'", offset=len(source))
	try:
		tree = ip.feed_eof(closing)
	except UnexpectedInput as exc:
		raise ParseError("incomplete call expression", offset=offset + closing.end_pos) from exc
	call = _build_call(tree, offset)
	logger.debug("parsed call '%s' (%d args) at %d..%d", call.callee, call.arg_count, call.offset, call.end)
	return call


def _build_call(tree: Tree, base: int) -> CallExpr:
	name_tok = tree.children[0]
	rpar_tok = tree.children[-1]
	args_node = next((c for c in tree.children if isinstance(c, Tree) and _name(c) == "arguments"), None)
	args, kwargs = _build_call_args(args_node, base)
	return CallExpr(
		offset=base + name_tok.start_pos,
		callee=str(name_tok),
		args=args,
		kwargs=kwargs,
		end=base + rpar_tok.end_pos,
	)


def _build_call_args(node: Tree | None, base: int) -> Tuple[List[Expr], Dict[str, KwArg]]:
	args: List[Expr] = []
	kwargs: Dict[str, KwArg] = {}
	if node is None:
		return args, kwargs
	positional_done = False
	for arg in node.children:
		if not isinstance(arg, Tree):
			continue
		if _name(arg) == "kwarg":
			positional_done = True
			kwarg = _build_kwarg(arg, base)
			if kwarg.name in kwargs:
				raise ParseError(f"duplicate named argument '{kwarg.name}'", offset=kwarg.offset)
			kwargs[kwarg.name] = kwarg
		else:
			expr = _build_expr(arg, base)
			if positional_done:
				raise ParseError("positional argument cannot follow named arguments", offset=expr.offset)
			args.append(expr)
	return args, kwargs


def _build_kwarg(tree: Tree, base: int) -> KwArg:
	name_token = next(child for child in tree.children if isinstance(child, Token) and child.type == "NAME")
	value_node = next(child for child in tree.children if isinstance(child, Tree))
	return KwArg(name=str(name_token), value=_build_expr(value_node, base), offset=base + name_token.start_pos)


def _build_expr(node: Tree, base: int) -> Expr:
	name = _name(node)
	offset = _offset(node, base)
	if name == "call":
		return _build_call(node, base)
	if name == "name":
		return Name(offset=offset, ident=str(node.children[0]))
	if name == "string":
		raw = str(node.children[0])
		return Literal(offset=offset, kind="string", value=decode_string(raw), raw=raw)
	if name == "number":
		raw = str(node.children[0])
		if "." in raw:
			return Literal(offset=offset, kind="float", value=float(raw), raw=raw)
		return Literal(offset=offset, kind="int", value=int(raw), raw=raw)
	if name == "true":
		return Literal(offset=offset, kind="bool", value=True, raw="true")
	if name == "false":
		return Literal(offset=offset, kind="bool", value=False, raw="false")
	if name == "null":
		return Literal(offset=offset, kind="null", value=None, raw="null")
	if name == "group":
		return _build_expr(_subtrees(node)[0], base)
	if name == "array":
		return ArrayLiteral(offset=offset, elements=[_build_expr(c, base) for c in _subtrees(node)])
	if name == "attr":
		target = _subtrees(node)[0]
		attr_tok = node.children[-1]
		return Attr(offset=offset, value=_build_expr(target, base), attr=str(attr_tok))
	if name == "neg":
		return Unary(offset=offset, op="-", operand=_build_expr(_subtrees(node)[0], base))
	if name == "binary":
		left, op_tok, right = node.children
		return Binary(
			offset=offset,
			op=str(op_tok),
			left=_build_expr(left, base),
			right=_build_expr(right, base),
		)
	raise ValueError(f"Unexpected expression node: {name}")


def _subtrees(node: Tree) -> List[Tree]:
	return [c for c in node.children if isinstance(c, Tree)]


def _offset(tree: Tree, base: int) -> int:
	return base + tree.meta.start_pos


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)


__all__ = ["MAX_NESTING", "MAX_OPERATORS", "decode_string", "parse_call"]
