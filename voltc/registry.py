# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Function registry for call resolution.

Stores one descriptor per (name, kind) for builtins, user extensions and
macros. The registry itself does not validate call sites; it only answers
"which descriptor does this name refer to" under a precedence order. The
resolver applies arity and argument-binding rules on top.

Lifecycle: the host registers everything up front, then seals the registry.
After `seal()` the registry is read-only and may be shared by any number of
concurrent compilations; `clear()` tears it down for reuse.
"""

from __future__ import annotations

import logging
import re
import string
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from voltc.core.errors import RegistryError

logger = logging.getLogger(__name__)

IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
RESERVED_NAMES = frozenset({"true", "false", "null"})


class CallableKind(Enum):
	BUILTIN = "builtin"
	EXTENSION = "extension"
	MACRO = "macro"


# Builtins win over extensions, which win over macros.
DEFAULT_PRECEDENCE: Tuple[CallableKind, ...] = (
	CallableKind.BUILTIN,
	CallableKind.EXTENSION,
	CallableKind.MACRO,
)

# A template is either a `str.format` pattern or a callable receiving the callee
# name and the emitted argument strings.
EmitFn = Callable[[str, Sequence[str]], str]
EmitTemplate = Union[str, EmitFn, None]


@dataclass(frozen=True)
class Param:
	"""Declared parameter slot; `default` is target code used to fill a gap."""

	name: str
	default: Optional[str] = None


@dataclass(frozen=True)
class FunctionDescriptor:
	"""Registry entry for a builtin, extension or macro."""

	name: str
	kind: CallableKind
	min_arity: int
	max_arity: Optional[int]  # None means unbounded (variadic tail)
	emit_template: EmitTemplate
	params: Tuple[Param, ...] = ()
	parenthesize: bool = False

	def accepts(self, count: int) -> bool:
		if count < self.min_arity:
			return False
		return self.max_arity is None or count <= self.max_arity

	def arity_label(self) -> str:
		if self.max_arity is None:
			return f"at least {self.min_arity}"
		if self.min_arity == self.max_arity:
			return f"exactly {self.min_arity}"
		return f"{self.min_arity} to {self.max_arity}"

	def slot_of(self, param_name: str) -> Optional[int]:
		for idx, param in enumerate(self.params):
			if param.name == param_name:
				return idx
		return None


def _check_ident(what: str, name: object) -> None:
	if not isinstance(name, str) or not IDENT_RE.match(name):
		raise RegistryError(f"invalid {what} name {name!r}")
	if name in RESERVED_NAMES:
		raise RegistryError(f"{what} name '{name}' is reserved")


def _check_template(name: str, template: str, max_arity: Optional[int]) -> None:
	"""
	Reject format fields other than `{name}`, `{args}` and `{N}`.

	Conversions, format specs and attribute/index chains would run against the
	emitted PHP strings, so they are refused up front.
	"""
	try:
		fields = [f for f in string.Formatter().parse(template) if f[1] is not None]
	except ValueError as exc:
		raise RegistryError(f"'{name}': invalid emission template {template!r}: {exc}") from None
	for _, field, spec, conversion in fields:
		if conversion is not None or spec:
			raise RegistryError(f"'{name}': template field '{{{field}}}' may not use conversions or format specs")
		if field in ("name", "args"):
			continue
		if not field.isdigit():
			raise RegistryError(f"'{name}': unsupported template field '{{{field}}}'")
		if max_arity is not None and int(field) >= max_arity:
			raise RegistryError(f"'{name}': template field '{{{field}}}' is beyond max_arity {max_arity}")


class FunctionRegistry:
	"""
	Store function descriptors bucketed by name and kind.

	Registration is single-writer: all `register` calls must happen before the
	registry is sealed and handed to compilers. Lookups never mutate state, so a
	sealed registry needs no locking.
	"""

	def __init__(self) -> None:
		self._by_name: Dict[str, Dict[CallableKind, FunctionDescriptor]] = {}
		self._sealed = False

	@property
	def sealed(self) -> bool:
		return self._sealed

	def seal(self) -> None:
		if not self._sealed:
			logger.debug("sealing function registry with %d names", len(self._by_name))
		self._sealed = True

	def clear(self) -> None:
		"""Drop every registration and accept new ones again."""
		self._by_name.clear()
		self._sealed = False

	def register(
		self,
		name: str,
		kind: CallableKind,
		min_arity: int,
		max_arity: Optional[int],
		emit_template: EmitTemplate,
		*,
		params: Iterable[Param] = (),
		parenthesize: bool = False,
	) -> FunctionDescriptor:
		if self._sealed:
			raise RegistryError(f"cannot register '{name}': registry is sealed")
		_check_ident("function", name)
		if not isinstance(kind, CallableKind):
			raise RegistryError(f"invalid kind {kind!r} for '{name}'")
		if min_arity < 0:
			raise RegistryError(f"'{name}': min_arity must be >= 0, got {min_arity}")
		if max_arity is not None and max_arity < min_arity:
			raise RegistryError(f"'{name}': max_arity {max_arity} is below min_arity {min_arity}")
		params_t = tuple(params)
		seen: set[str] = set()
		for param in params_t:
			_check_ident("parameter", param.name)
			if param.name in seen:
				raise RegistryError(f"'{name}': duplicate parameter '{param.name}'")
			seen.add(param.name)
		if max_arity is not None and len(params_t) > max_arity:
			raise RegistryError(f"'{name}': declares {len(params_t)} parameters but max_arity is {max_arity}")
		if kind is CallableKind.BUILTIN and not isinstance(emit_template, str):
			raise RegistryError(f"builtin '{name}' requires a string emission template")
		if kind is CallableKind.EXTENSION and emit_template is None:
			raise RegistryError(f"extension '{name}' requires an emission template")
		if isinstance(emit_template, str):
			_check_template(name, emit_template, max_arity)
		elif emit_template is not None and not callable(emit_template):
			raise RegistryError(f"'{name}': emission template must be a string or callable, got {type(emit_template).__name__}")
		bucket = self._by_name.setdefault(name, {})
		if kind in bucket:
			raise RegistryError(f"duplicate {kind.value} '{name}'")
		decl = FunctionDescriptor(
			name=name,
			kind=kind,
			min_arity=min_arity,
			max_arity=max_arity,
			emit_template=emit_template,
			params=params_t,
			parenthesize=parenthesize,
		)
		bucket[kind] = decl
		if len(bucket) > 1:
			winner = self.lookup(name)
			for other in bucket.values():
				if other is not winner:
					logger.warning("%s '%s' is shadowed by %s '%s'", other.kind.value, name, winner.kind.value, name)
		logger.debug("registered %s '%s' (%s args)", kind.value, name, decl.arity_label())
		return decl

	def lookup(
		self, name: str, precedence: Sequence[CallableKind] = DEFAULT_PRECEDENCE
	) -> Optional[FunctionDescriptor]:
		bucket = self._by_name.get(name)
		if not bucket:
			return None
		for kind in precedence:
			decl = bucket.get(kind)
			if decl is not None:
				return decl
		return None

	def candidates(self, name: str) -> List[FunctionDescriptor]:
		"""Every descriptor registered under `name`, in default precedence order."""
		bucket = self._by_name.get(name, {})
		return [bucket[k] for k in DEFAULT_PRECEDENCE if k in bucket]

	def names(self) -> List[str]:
		return sorted(self._by_name)

	def __contains__(self, name: object) -> bool:
		return name in self._by_name

	def __len__(self) -> int:
		return len(self._by_name)


__all__ = [
	"CallableKind",
	"DEFAULT_PRECEDENCE",
	"EmitFn",
	"EmitTemplate",
	"FunctionDescriptor",
	"FunctionRegistry",
	"IDENT_RE",
	"Param",
]
