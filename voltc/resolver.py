# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Call resolution atop FunctionRegistry.

Rules:
- Lookup by name under a fixed precedence (builtins, extensions, macros by
  default); the first kind that has the name wins.
- Arity counts every supplied argument, positional and named.
- Positional arguments fill parameter slots left to right; named arguments
  bind to the slot of the declared parameter with that name.
- A gap before the last bound slot is filled with the parameter default;
  trailing unbound slots are dropped.

Errors are reported one at a time: the first problem aborts resolution.
"""

from __future__ import annotations

import difflib
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple, Union

from voltc.core.errors import ArityError, DuplicateArgumentError, UnknownArgumentError, UnknownFunctionError
from voltc.parser.ast import CallExpr, Expr
from voltc.registry import DEFAULT_PRECEDENCE, CallableKind, FunctionDescriptor, FunctionRegistry

logger = logging.getLogger(__name__)

# A bound slot holds either the call-site expression or the default's target code.
BoundSlot = Union[Expr, str]


@dataclass(frozen=True)
class CallBinding:
	"""Arguments of one call arranged in the descriptor's slot order."""

	descriptor: FunctionDescriptor
	slots: Tuple[BoundSlot, ...]


@dataclass(frozen=True)
class ResolvedCall:
	"""A resolved call with every argument already emitted, in emission order."""

	descriptor: FunctionDescriptor
	bound_args: Tuple[str, ...]


class CallResolver:
	def __init__(
		self,
		registry: FunctionRegistry,
		precedence: Sequence[CallableKind] = DEFAULT_PRECEDENCE,
	) -> None:
		self.registry = registry
		self.precedence = tuple(precedence)

	def lookup(self, call: CallExpr) -> FunctionDescriptor:
		decl = self.registry.lookup(call.callee, self.precedence)
		if decl is None:
			suggestions = difflib.get_close_matches(call.callee, self.registry.names(), n=3)
			raise UnknownFunctionError(call.callee, offset=call.offset, suggestions=suggestions)
		return decl

	def check_arity(self, decl: FunctionDescriptor, call: CallExpr) -> None:
		actual = call.arg_count
		if decl.accepts(actual):
			return
		raise ArityError(
			f"'{decl.name}' expects {decl.arity_label()} argument(s), got {actual}",
			offset=call.offset,
			name=decl.name,
			min_arity=decl.min_arity,
			max_arity=decl.max_arity,
			actual=actual,
		)

	def bind(self, call: CallExpr) -> CallBinding:
		decl = self.lookup(call)
		self.check_arity(decl, call)
		slots: List[Optional[BoundSlot]] = list(call.args)
		for kwarg in call.kwargs.values():
			idx = decl.slot_of(kwarg.name)
			if idx is None:
				if decl.params:
					declared = ", ".join(p.name for p in decl.params)
					msg = f"'{decl.name}' has no parameter named '{kwarg.name}' (parameters: {declared})"
				else:
					msg = f"'{decl.name}' does not accept named arguments"
				raise UnknownArgumentError(msg, offset=kwarg.offset, name=decl.name, argument=kwarg.name)
			if idx < len(call.args):
				raise DuplicateArgumentError(
					f"argument '{kwarg.name}' of '{decl.name}' is already given positionally",
					offset=kwarg.offset,
					name=decl.name,
					argument=kwarg.name,
				)
			while len(slots) <= idx:
				slots.append(None)
			slots[idx] = kwarg.value
		bound: List[BoundSlot] = []
		for idx, slot in enumerate(slots):
			if slot is not None:
				bound.append(slot)
				continue
			param = decl.params[idx]
			if param.default is None:
				raise ArityError(
					f"'{decl.name}' is missing argument '{param.name}'",
					offset=call.offset,
					name=decl.name,
					min_arity=decl.min_arity,
					max_arity=decl.max_arity,
					actual=call.arg_count,
				)
			bound.append(param.default)
		logger.debug("bound %s '%s' with %d slot(s)", decl.kind.value, decl.name, len(bound))
		return CallBinding(descriptor=decl, slots=tuple(bound))

	def resolve(self, call: CallExpr, emit_arg: Callable[[Expr], str]) -> ResolvedCall:
		"""
		Bind `call` and emit each bound argument with `emit_arg`.

		Defaults are already target code and pass through untouched.
		"""
		binding = self.bind(call)
		args = tuple(slot if isinstance(slot, str) else emit_arg(slot) for slot in binding.slots)
		return ResolvedCall(descriptor=binding.descriptor, bound_args=args)


__all__ = ["BoundSlot", "CallBinding", "CallResolver", "ResolvedCall"]
