# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Resolver tests: lookup, arity and named-argument binding."""

import pytest

from voltc.core.errors import ArityError, DuplicateArgumentError, UnknownArgumentError, UnknownFunctionError
from voltc.parser import parse_call
from voltc.parser.ast import Literal, Name
from voltc.registry import CallableKind, FunctionRegistry, Param
from voltc.resolver import CallResolver


def _resolver() -> CallResolver:
	reg = FunctionRegistry()
	reg.register("pair", CallableKind.EXTENSION, 1, 2, "pair({args})")
	reg.register(
		"fetch",
		CallableKind.EXTENSION,
		0,
		3,
		"fetch({args})",
		params=(Param("items", "[]"), Param("offset", "0"), Param("limit")),
	)
	reg.register("fmt", CallableKind.EXTENSION, 0, None, "fmt({args})")
	return CallResolver(reg)


def test_unknown_function_on_empty_registry() -> None:
	resolver = CallResolver(FunctionRegistry())
	with pytest.raises(UnknownFunctionError) as excinfo:
		resolver.bind(parse_call("doesNotExist(1,2)"))
	assert excinfo.value.offset == 0
	assert excinfo.value.name == "doesNotExist"


def test_unknown_function_offset_inside_template() -> None:
	resolver = CallResolver(FunctionRegistry())
	with pytest.raises(UnknownFunctionError) as excinfo:
		resolver.bind(parse_call("{{ doesNotExist(1,2) }}", 3))
	assert excinfo.value.offset == 3


def test_unknown_function_suggestions() -> None:
	with pytest.raises(UnknownFunctionError) as excinfo:
		_resolver().bind(parse_call("piar(1)"))
	assert "pair" in excinfo.value.suggestions
	assert excinfo.value.notes == ["did you mean 'pair'?"]


@pytest.mark.parametrize("src", ["pair()", "pair(1, 2, 3)"])
def test_arity_rejected(src: str) -> None:
	with pytest.raises(ArityError) as excinfo:
		_resolver().bind(parse_call(src))
	err = excinfo.value
	assert (err.min_arity, err.max_arity) == (1, 2)
	assert err.actual in (0, 3)
	assert "1 to 2" in err.message


@pytest.mark.parametrize("src, count", [("pair(1)", 1), ("pair(1, 2)", 2)])
def test_arity_accepted(src: str, count: int) -> None:
	binding = _resolver().bind(parse_call(src))
	assert len(binding.slots) == count


def test_named_argument_counts_toward_arity() -> None:
	with pytest.raises(ArityError):
		_resolver().bind(parse_call("fetch(1, 2, 3, limit: 4)"))


def test_named_arguments_bind_to_declared_slots() -> None:
	binding = _resolver().bind(parse_call("fetch(limit: 5, offset: 2)"))
	# items is filled from its default; offset and limit land in their slots.
	assert binding.slots[0] == "[]"
	assert binding.slots[1] == Literal(offset=24, kind="int", value=2, raw="2")
	assert binding.slots[2] == Literal(offset=13, kind="int", value=5, raw="5")


def test_trailing_unbound_slots_are_dropped() -> None:
	binding = _resolver().bind(parse_call("fetch(rows)"))
	assert binding.slots == (Name(offset=6, ident="rows"),)


def test_gap_without_default_is_missing_argument() -> None:
	reg = FunctionRegistry()
	reg.register("f", CallableKind.EXTENSION, 0, 2, "f({args})", params=(Param("a"), Param("b")))
	with pytest.raises(ArityError) as excinfo:
		CallResolver(reg).bind(parse_call("f(b: 1)"))
	assert "'a'" in excinfo.value.message


def test_unknown_named_argument() -> None:
	with pytest.raises(UnknownArgumentError) as excinfo:
		_resolver().bind(parse_call("fetch(size: 5)"))
	assert excinfo.value.argument == "size"
	assert excinfo.value.offset == 6


def test_named_argument_without_declared_params() -> None:
	with pytest.raises(UnknownArgumentError) as excinfo:
		_resolver().bind(parse_call("fmt(1, width: 5)"))
	assert "does not accept named arguments" in excinfo.value.message


def test_named_argument_for_positional_slot() -> None:
	with pytest.raises(DuplicateArgumentError) as excinfo:
		_resolver().bind(parse_call("fetch(rows, items: other)"))
	assert excinfo.value.argument == "items"


def test_resolve_emits_arguments_in_slot_order() -> None:
	seen = []

	def emit(expr) -> str:
		seen.append(expr)
		return f"<{expr.value}>"

	resolved = _resolver().resolve(parse_call("fetch(limit: 5, offset: 2)"), emit)
	assert resolved.bound_args == ("[]", "<2>", "<5>")
	assert resolved.descriptor.name == "fetch"
	# Defaults are target code and are never passed to the emitter.
	assert len(seen) == 2


def test_precedence_controls_which_descriptor_wins() -> None:
	reg = FunctionRegistry()
	reg.register("box", CallableKind.EXTENSION, 0, 0, "ext()")
	reg.register("box", CallableKind.MACRO, 0, 0, None)
	call = parse_call("box()")
	assert CallResolver(reg).lookup(call).kind is CallableKind.EXTENSION
	macro_first = (CallableKind.MACRO, CallableKind.BUILTIN, CallableKind.EXTENSION)
	assert CallResolver(reg, macro_first).lookup(call).kind is CallableKind.MACRO
