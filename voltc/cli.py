# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command-line front-end: compile one call expression and print the PHP.

Examples:
  voltc "link_to('posts/' ~ post.id, text: post.title)"
  voltc --file call.volt --functions app_functions.json --json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from voltc.builtins import default_registry
from voltc.compiler import CallCompiler
from voltc.config import CompilerOptions, load_functions
from voltc.core.errors import ConfigError
from voltc.registry import FunctionRegistry

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog="voltc", description="Compile a Volt call expression to PHP")
	src = parser.add_mutually_exclusive_group(required=True)
	src.add_argument("expression", nargs="?", help="Call expression, e.g. \"date('Y', ts)\"")
	src.add_argument("-f", "--file", type=Path, help="Read the call expression from a file")
	parser.add_argument(
		"--functions",
		dest="function_files",
		action="append",
		type=Path,
		default=[],
		help="JSON file declaring extensions/macros (repeatable)",
	)
	parser.add_argument("--no-builtins", action="store_true", help="Start from an empty registry")
	parser.add_argument(
		"--allow-trailing-input",
		action="store_true",
		help="Ignore anything after the closing ')' instead of reporting it",
	)
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit the result as JSON (exit_code plus code or diagnostics)",
	)
	parser.add_argument("-v", "--verbose", action="count", default=0, help="Log pipeline stages (-vv for debug)")
	return parser


def _configure_logging(verbosity: int) -> None:
	level = logging.WARNING
	if verbosity == 1:
		level = logging.INFO
	elif verbosity >= 2:
		level = logging.DEBUG
	logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


def main(argv: list[str] | None = None) -> int:
	"""
	Compile a single call expression.

	With --json, prints `{"exit_code": ..., "code": ...}` on success or
	`{"exit_code": 1, "diagnostics": [...]}` on failure; otherwise prints the PHP
	to stdout and human-readable diagnostics to stderr.
	"""
	args = _build_parser().parse_args(argv)
	_configure_logging(args.verbose)

	if args.file is not None:
		try:
			source = args.file.read_text(encoding="utf-8").rstrip("\n")
		except OSError as exc:
			print(f"voltc: cannot read {args.file}: {exc}", file=sys.stderr)
			return 2
		source_name = str(args.file)
	else:
		source = args.expression
		source_name = "<input>"

	registry = FunctionRegistry() if args.no_builtins else default_registry()
	try:
		for path in args.function_files:
			load_functions(path, registry)
	except ConfigError as exc:
		if args.json:
			print(json.dumps({"exit_code": 2, "diagnostics": [{"phase": "config", "message": str(exc), "severity": "error"}]}))
		else:
			print(f"voltc: {exc}", file=sys.stderr)
		return 2

	logger.debug("compiling %s with %d registered name(s)", source_name, len(registry))
	compiler = CallCompiler(registry, CompilerOptions(allow_trailing_input=args.allow_trailing_input))
	result = compiler.compile(source, file=source_name)
	if args.json:
		if result.ok:
			print(json.dumps({"exit_code": 0, "code": result.code}))
		else:
			print(json.dumps({"exit_code": 1, "diagnostics": [d.to_json() for d in result.diagnostics]}))
		return 0 if result.ok else 1
	if not result.ok:
		for diag in result.diagnostics:
			print(diag.format(), file=sys.stderr)
		return 1
	print(result.code)
	return 0


__all__ = ["main"]
