# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Volt builtin functions and tag helpers.

Each entry maps a template-level function to the PHP the view engine runs.
Templates are `str.format` patterns: `{args}` is the comma-joined argument
list, `{0}`, `{1}`, ... address single bound slots.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from voltc.registry import CallableKind, FunctionRegistry, Param

_NULL = "null"

# name, min_arity, max_arity, template, params
_Builtin = Tuple[str, int, Optional[int], str, Sequence[Param]]

BUILTINS: Tuple[_Builtin, ...] = (
	("content", 0, 0, "$this->getContent()", ()),
	("get_content", 0, 0, "$this->getContent()", ()),
	("partial", 1, 2, "$this->partial({args})", (Param("path"), Param("params", _NULL))),
	(
		"url",
		0,
		4,
		"$this->url->get({args})",
		(Param("uri", _NULL), Param("args", _NULL), Param("local", _NULL), Param("base_uri", _NULL)),
	),
	("static_url", 0, 1, "$this->url->getStatic({args})", (Param("uri", _NULL),)),
	("date", 1, 2, "date({args})", (Param("format"), Param("timestamp", _NULL))),
	("time", 0, 0, "time()", ()),
	("dump", 0, None, "var_dump({args})", ()),
	("constant", 1, 1, "constant({args})", (Param("name"),)),
	("version", 0, 0, "\\Phalcon\\Version::get()", ()),
	("version_id", 0, 0, "\\Phalcon\\Version::getId()", ()),
	("preload", 1, 2, "$this->preload({args})", (Param("href"), Param("attributes", "[]"))),
)

TAG_HELPERS: Tuple[_Builtin, ...] = (
	("link_to", 1, None, "$this->tag->linkTo([{args}])", (Param("parameters"), Param("text", _NULL), Param("local", "true"))),
	("image", 0, None, "$this->tag->image([{args}])", (Param("parameters", _NULL), Param("local", "true"))),
	("stylesheet_link", 0, 2, "$this->tag->stylesheetLink({args})", (Param("parameters", _NULL), Param("local", "true"))),
	("javascript_include", 0, 2, "$this->tag->javascriptInclude({args})", (Param("parameters", _NULL), Param("local", "true"))),
	("text_field", 1, None, "$this->tag->textField([{args}])", (Param("parameters"),)),
	("submit_button", 1, None, "$this->tag->submitButton([{args}])", (Param("parameters"),)),
	("form", 0, None, "$this->tag->form([{args}])", (Param("action", _NULL),)),
	("end_form", 0, 0, "$this->tag->endForm()", ()),
)


def register_builtins(registry: FunctionRegistry, *, tag_helpers: bool = True) -> FunctionRegistry:
	"""Register the builtin functions (and, by default, tag helpers) into `registry`."""
	entries = BUILTINS + (TAG_HELPERS if tag_helpers else ())
	for name, min_arity, max_arity, template, params in entries:
		registry.register(name, CallableKind.BUILTIN, min_arity, max_arity, template, params=params)
	return registry


def default_registry() -> FunctionRegistry:
	"""A fresh, unsealed registry holding the standard builtins."""
	return register_builtins(FunctionRegistry())


__all__ = ["BUILTINS", "TAG_HELPERS", "default_registry", "register_builtins"]
