# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
import pytest

from voltc.core.errors import LexError, ParseError
from voltc.parser import MAX_NESTING, MAX_OPERATORS, parse_call
from voltc.parser.ast import ArrayLiteral, Attr, Binary, CallExpr, Literal, Name, Unary


def test_parse_positional_arguments() -> None:
	call = parse_call("date('Y-m-d', ts)")
	assert call.callee == "date"
	assert call.offset == 0
	assert call.end == len("date('Y-m-d', ts)")
	assert len(call.args) == 2
	assert call.args[0] == Literal(offset=5, kind="string", value="Y-m-d", raw="'Y-m-d'")
	assert call.args[1] == Name(offset=14, ident="ts")
	assert call.kwargs == {}


def test_parse_no_arguments() -> None:
	call = parse_call("time()")
	assert call.callee == "time"
	assert call.args == [] and call.kwargs == {}
	assert call.arg_count == 0


def test_parse_named_arguments_keep_call_site_order() -> None:
	call = parse_call("paginate(items, limit: 5, offset: page)")
	assert [type(a) for a in call.args] == [Name]
	assert list(call.kwargs) == ["limit", "offset"]
	assert call.kwargs["limit"].value == Literal(offset=23, kind="int", value=5, raw="5")
	assert call.kwargs["limit"].offset == 16
	assert call.arg_count == 3


def test_parse_nested_call() -> None:
	call = parse_call("outer(inner(1), 2)")
	inner = call.args[0]
	assert isinstance(inner, CallExpr)
	assert inner.callee == "inner"
	assert inner.offset == 6
	assert inner.end == 14
	assert call.end == 18


def test_parse_literals() -> None:
	call = parse_call(r"f('it\'s', " + r'"a\"b\n", 1.50, 7, true, false, null)')
	values = [(a.kind, a.value) for a in call.args]
	assert values == [
		("string", "it's"),
		("string", 'a"b\n'),
		("float", 1.5),
		("int", 7),
		("bool", True),
		("bool", False),
		("null", None),
	]
	assert call.args[2].raw == "1.50"


def test_unknown_escape_is_kept() -> None:
	call = parse_call(r"f('C:\path')")
	assert call.args[0].value == r"C:\path"


def test_operator_precedence() -> None:
	call = parse_call("f(1 + 2 * 3)")
	expr = call.args[0]
	assert isinstance(expr, Binary) and expr.op == "+"
	assert isinstance(expr.right, Binary) and expr.right.op == "*"


def test_grouping_overrides_precedence() -> None:
	expr = parse_call("f((1 + 2) * 3)").args[0]
	assert isinstance(expr, Binary) and expr.op == "*"
	assert isinstance(expr.left, Binary) and expr.left.op == "+"
	assert expr.offset == 2


def test_concat_is_left_associative() -> None:
	expr = parse_call("f(a ~ b ~ c)").args[0]
	assert isinstance(expr, Binary) and expr.op == "~"
	assert isinstance(expr.left, Binary)
	assert expr.right == Name(offset=10, ident="c")


def test_attribute_unary_and_array() -> None:
	call = parse_call("f(post.author.name, -x, [1, 'a'])")
	attr = call.args[0]
	assert isinstance(attr, Attr) and attr.attr == "name"
	assert isinstance(attr.value, Attr) and attr.value.attr == "author"
	assert call.args[1] == Unary(offset=20, op="-", operand=Name(offset=21, ident="x"))
	arr = call.args[2]
	assert isinstance(arr, ArrayLiteral)
	assert [e.value for e in arr.elements] == [1, "a"]


def test_parse_at_offset_stops_after_closing_paren() -> None:
	src = "{{ date('Y') }}"
	call = parse_call(src, 3)
	assert call.callee == "date"
	assert call.offset == 3
	assert call.end == 12


def test_empty_argument_between_commas() -> None:
	with pytest.raises(ParseError) as excinfo:
		parse_call("fn(1,,2)")
	assert excinfo.value.offset == 5
	assert excinfo.value.message == "empty argument"


def test_leading_comma_is_empty_argument() -> None:
	with pytest.raises(ParseError) as excinfo:
		parse_call("fn(,)")
	assert excinfo.value.offset == 3


def test_trailing_comma_is_rejected() -> None:
	with pytest.raises(ParseError) as excinfo:
		parse_call("fn(1,)")
	assert excinfo.value.offset == 4
	assert "trailing comma" in excinfo.value.message


def test_unbalanced_parentheses() -> None:
	with pytest.raises(ParseError) as excinfo:
		parse_call("fn(1, (2)")
	assert excinfo.value.offset == len("fn(1, (2)")
	assert "unbalanced" in excinfo.value.message


def test_missing_open_paren() -> None:
	with pytest.raises(ParseError) as excinfo:
		parse_call("fn")
	assert excinfo.value.offset == 2


def test_call_must_start_with_a_name() -> None:
	with pytest.raises(ParseError) as excinfo:
		parse_call("(1)")
	assert excinfo.value.offset == 0
	with pytest.raises(ParseError):
		parse_call("true(1)")


def test_empty_input() -> None:
	with pytest.raises(ParseError):
		parse_call("")


def test_positional_after_named() -> None:
	with pytest.raises(ParseError) as excinfo:
		parse_call("fn(a: 1, 2)")
	assert excinfo.value.offset == 9


def test_duplicate_named_argument() -> None:
	with pytest.raises(ParseError) as excinfo:
		parse_call("fn(a: 1, a: 2)")
	assert excinfo.value.offset == 9
	assert "duplicate" in excinfo.value.message


def test_malformed_argument_expression() -> None:
	with pytest.raises(ParseError) as excinfo:
		parse_call("fn(1 2)")
	assert excinfo.value.offset == 5
	assert excinfo.value.notes


def test_named_argument_requires_plain_name() -> None:
	with pytest.raises(ParseError) as excinfo:
		parse_call("fn(a.b: 1)")
	assert excinfo.value.offset == 6


def test_lex_error_propagates_through_parser() -> None:
	with pytest.raises(LexError) as excinfo:
		parse_call("fn('abc")
	assert excinfo.value.offset == 3


def test_nesting_limit() -> None:
	parse_call("f(" * MAX_NESTING + ")" * MAX_NESTING)
	with pytest.raises(ParseError) as excinfo:
		parse_call("f(" * 200 + ")" * 200)
	# The first '(' past the limit; each "f(" is two characters.
	assert excinfo.value.offset == 2 * (MAX_NESTING + 1) - 1
	assert "nesting too deep" in excinfo.value.message


def test_bracket_nesting_counts_toward_limit() -> None:
	with pytest.raises(ParseError) as excinfo:
		parse_call("f(" + "[" * 100 + "]" * 100 + ")")
	assert "nesting too deep" in excinfo.value.message


def test_operator_chain_limit() -> None:
	parse_call("f(" + "+".join(["1"] * (MAX_OPERATORS + 1)) + ")")
	with pytest.raises(ParseError) as excinfo:
		parse_call("f(" + "+".join(["1"] * 1000) + ")")
	assert excinfo.value.offset == 3 + 2 * MAX_OPERATORS
	assert "too long" in excinfo.value.message
