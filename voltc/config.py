# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Compiler configuration.

`CompilerOptions` carries the per-compiler policy knobs. Extensions and macros
can also be declared in JSON files so hosts (and the CLI) do not need Python
code to teach the compiler new functions:

    {
      "functions": [
        {"name": "price", "kind": "extension", "min_arity": 1, "max_arity": 2,
         "template": "\\App\\Format::price({args})",
         "params": [{"name": "amount"}, {"name": "currency", "default": "'EUR'"}]},
        {"name": "widget", "kind": "macro", "min_arity": 0, "max_arity": null}
      ]
    }

Builtins are fixed by the compiler and cannot be declared from files.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Tuple

from voltc.core.errors import ConfigError, RegistryError
from voltc.registry import DEFAULT_PRECEDENCE, CallableKind, FunctionDescriptor, FunctionRegistry, Param

logger = logging.getLogger(__name__)

_FILE_KINDS = {"extension": CallableKind.EXTENSION, "macro": CallableKind.MACRO}
_ENTRY_KEYS = {"name", "kind", "min_arity", "max_arity", "template", "params", "parenthesize"}


@dataclass(frozen=True)
class CompilerOptions:
	"""Policy knobs for one compiler instance."""

	# Lookup order when a name is registered under several kinds.
	precedence: Tuple[CallableKind, ...] = DEFAULT_PRECEDENCE
	# Prefix put in front of template variables (`post` -> `$post`).
	variable_prefix: str = "$"
	# When False, anything but whitespace after the call's `)` is a ParseError.
	allow_trailing_input: bool = False

	def __post_init__(self) -> None:
		if len(set(self.precedence)) != len(self.precedence) or set(self.precedence) != set(CallableKind):
			raise ConfigError(
				"precedence must list each of builtin, extension, macro exactly once, got "
				+ ", ".join(getattr(k, "value", str(k)) for k in self.precedence)
			)


def _entry_error(path: Path, index: int, message: str) -> ConfigError:
	return ConfigError(f"{path}: functions[{index}]: {message}")


def _parse_params(path: Path, index: int, raw: Any) -> List[Param]:
	if raw is None:
		return []
	if not isinstance(raw, list):
		raise _entry_error(path, index, "'params' must be a list")
	params: List[Param] = []
	for p in raw:
		if isinstance(p, str):
			params.append(Param(p))
			continue
		if not isinstance(p, Mapping) or "name" not in p:
			raise _entry_error(path, index, f"invalid parameter {p!r}")
		default = p.get("default")
		if default is not None and not isinstance(default, str):
			raise _entry_error(path, index, f"default of parameter '{p['name']}' must be a string of PHP code")
		params.append(Param(p["name"], default))
	return params


def _parse_arity(path: Path, index: int, entry: Mapping[str, Any]) -> Tuple[int, int | None]:
	min_arity = entry.get("min_arity", 0)
	max_arity = entry.get("max_arity", min_arity)
	if not isinstance(min_arity, int) or isinstance(min_arity, bool):
		raise _entry_error(path, index, "'min_arity' must be an integer")
	if max_arity is not None and (not isinstance(max_arity, int) or isinstance(max_arity, bool)):
		raise _entry_error(path, index, "'max_arity' must be an integer or null")
	return min_arity, max_arity


def load_functions(path: Path, registry: FunctionRegistry) -> List[FunctionDescriptor]:
	"""
	Register the extensions/macros declared in the JSON file at `path`.

	Every problem is reported as a ConfigError naming the file and the entry.
	"""
	try:
		data = json.loads(Path(path).read_text(encoding="utf-8"))
	except OSError as exc:
		raise ConfigError(f"cannot read function definitions: {exc}") from exc
	except json.JSONDecodeError as exc:
		raise ConfigError(f"{path}: invalid JSON: {exc}") from exc
	if not isinstance(data, Mapping) or not isinstance(data.get("functions"), list):
		raise ConfigError(f"{path}: expected an object with a 'functions' list")

	registered: List[FunctionDescriptor] = []
	for index, entry in enumerate(data["functions"]):
		if not isinstance(entry, Mapping):
			raise _entry_error(path, index, "entry must be an object")
		unknown = set(entry) - _ENTRY_KEYS
		if unknown:
			raise _entry_error(path, index, f"unknown key(s): {', '.join(sorted(unknown))}")
		kind = _FILE_KINDS.get(entry.get("kind", "extension"))
		if kind is None:
			raise _entry_error(path, index, f"kind must be 'extension' or 'macro', got {entry.get('kind')!r}")
		template = entry.get("template")
		if template is not None and not isinstance(template, str):
			raise _entry_error(path, index, "'template' must be a string")
		min_arity, max_arity = _parse_arity(path, index, entry)
		try:
			decl = registry.register(
				entry.get("name"),
				kind,
				min_arity,
				max_arity,
				template,
				params=_parse_params(path, index, entry.get("params")),
				parenthesize=bool(entry.get("parenthesize", False)),
			)
		except RegistryError as exc:
			raise _entry_error(path, index, str(exc)) from exc
		registered.append(decl)
	logger.info("loaded %d function(s) from %s", len(registered), path)
	return registered


__all__ = ["CompilerOptions", "load_functions"]
