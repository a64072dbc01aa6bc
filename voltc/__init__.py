# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
voltc: compiles Volt template call expressions into PHP.

Stages:
  parser: lark-backed lexer + call-expression parser (AST)
  resolver: registry lookup, arity checks, argument binding
  emitter: PHP code generation
"""

from voltc.builtins import default_registry
from voltc.compiler import CallCompiler, CompileResult, compile_call
from voltc.config import CompilerOptions
from voltc.registry import CallableKind, FunctionDescriptor, FunctionRegistry, Param

__all__ = [
	"CallCompiler",
	"CallableKind",
	"CompileResult",
	"CompilerOptions",
	"FunctionDescriptor",
	"FunctionRegistry",
	"Param",
	"compile_call",
	"default_registry",
]
