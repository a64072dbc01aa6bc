# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
import pytest

from voltc.builtins import default_registry
from voltc.compiler import CallCompiler
from voltc.registry import CallableKind, FunctionRegistry, Param


@pytest.fixture
def registry() -> FunctionRegistry:
	"""
	Builtins plus a couple of extensions/macros used across the tests.

	`pair` has arity 1..2, `paginate` declares named parameter slots, `widget`
	is a macro.
	"""
	reg = default_registry()
	reg.register("pair", CallableKind.EXTENSION, 1, 2, "pair({args})")
	reg.register(
		"paginate",
		CallableKind.EXTENSION,
		0,
		3,
		"$this->paginate({args})",
		params=(Param("items", "[]"), Param("offset", "0"), Param("limit", "null")),
	)
	reg.register("widget", CallableKind.MACRO, 0, None, None, params=(Param("title"), Param("css", "''")))
	return reg


@pytest.fixture
def compiler(registry: FunctionRegistry) -> CallCompiler:
	return CallCompiler(registry)
