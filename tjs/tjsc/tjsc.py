# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
tjsc command-line checker.

Discovers every source file under a root directory, parses them, verifies
local imports point at existing modules, and runs a full workspace build.
Exactly one error is reported on failure (all members of an import cycle
share it). With --json the output mirrors the editor diagnostics.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from lark import UnexpectedInput

from tjs.tjsc.build import BuildResult, build_workspace
from tjs.tjsc.core.config import MAX_SUGGESTIONS, SUGGESTION_DISTANCE, CheckerConfig
from tjs.tjsc.core.diagnostics import Diagnostic
from tjs.tjsc.imports import ImportResolver
from tjs.tjsc.modules import SourceModule, create_module, find_missing_imports
from tjs.tjsc.parser.parser import ParseError
from tjs.tjsc.report import PHASE_PARSE, PHASE_RESOLVE, diagnostic_for, diagnostics_for_failure, syntax_problem
from tjs.tjsc.typecheck.types import spell

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
	logging.basicConfig(
		level=logging.DEBUG if verbose else logging.WARNING,
		format="%(asctime)s - %(levelname)s - %(message)s",
	)


def discover_sources(root: Path, suffixes: Sequence[str]) -> List[Path]:
	"""Source files under `root`, sorted, skipping node_modules and dot-directories."""
	found: List[Path] = []
	for path in sorted(root.rglob("*")):
		if not path.is_file() or path.suffix not in suffixes:
			continue
		rel = path.relative_to(root)
		if any(part == "node_modules" or part.startswith(".") for part in rel.parts[:-1]):
			continue
		found.append(path)
	return found


def _excerpt(diag: Diagnostic, modules: Dict[str, SourceModule]) -> List[str]:
	"""Source line a diagnostic points at, with a caret under its column."""
	mod = modules.get(diag.span.file or "")
	if mod is None or diag.span.line is None:
		return []
	text = mod.line(diag.span.line)
	if not text:
		return []
	column = diag.span.column or 1
	return [f"    {text}", "    " + " " * (column - 1) + "^"]


def check_directory(
	root: Path, config: CheckerConfig
) -> Tuple[List[Diagnostic], Dict[str, SourceModule], Optional[BuildResult]]:
	"""
	Parse and build every module under `root`.

	Returns (diagnostics, modules, build result or None when the build did
	not run).
	"""
	root = root.resolve()
	files = discover_sources(root, config.source_suffixes)
	logger.info("found %d source file(s) under %s", len(files), root)
	resolver = ImportResolver(lambda p: Path(p).is_file())
	modules: Dict[str, SourceModule] = {}
	for path in files:
		key = str(path)
		try:
			text = path.read_text(encoding="utf-8")
			modules[key] = create_module(text, key, root=str(root), resolver=resolver)
		except (UnexpectedInput, ParseError) as exc:
			return [diagnostic_for(syntax_problem(exc), phase=PHASE_PARSE, file=key)], modules, None
	missing = find_missing_imports(modules.values())
	if missing:
		mod, err = missing[0]
		return [diagnostic_for(err, phase=PHASE_RESOLVE, file=mod.path)], modules, None
	result = build_workspace(modules, config=config)
	if result.failure is not None:
		return diagnostics_for_failure(result.failure, modules), modules, result
	return [], modules, result


def main(argv: list[str] | None = None) -> int:
	"""
	Check a directory of tjs modules.

	With --json, prints {"exit_code", "diagnostics": [...]} on stdout;
	otherwise prints human-readable messages to stderr.
	"""
	parser = argparse.ArgumentParser(description="tjs static checker")
	parser.add_argument("root", type=Path, nargs="?", default=Path("."), help="Workspace root directory")
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit diagnostics as JSON (phase/message/severity/file/line/column)",
	)
	parser.add_argument(
		"--print-types",
		action="store_true",
		help="Print each module's inferred declaration types after a successful check",
	)
	parser.add_argument(
		"--max-suggestions",
		type=int,
		default=MAX_SUGGESTIONS,
		help="Maximum number of 'did you mean' suggestions for undefined names",
	)
	parser.add_argument(
		"--suggestion-distance",
		type=int,
		default=SUGGESTION_DISTANCE,
		help="Maximum edit distance for 'did you mean' suggestions",
	)
	parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
	args = parser.parse_args(argv)
	_configure_logging(args.verbose)

	if not args.root.is_dir():
		parser.error(f"not a directory: {args.root}")
	try:
		config = CheckerConfig(max_suggestions=args.max_suggestions, suggestion_distance=args.suggestion_distance)
	except ValueError as exc:
		parser.error(str(exc))

	diagnostics, modules, result = check_directory(args.root, config)
	exit_code = 1 if diagnostics else 0

	if args.json:
		payload = {"exit_code": exit_code, "diagnostics": [d.to_json() for d in diagnostics]}
		print(json.dumps(payload))
		return exit_code

	for diag in diagnostics:
		print(diag.format(), file=sys.stderr)
		for line in _excerpt(diag, modules):
			print(line, file=sys.stderr)
	if exit_code == 0:
		if args.print_types and result is not None:
			for output in result.outputs.values():
				print(f"{output.module.relative_path}:")
				for name, ty in output.declaration_types.items():
					print(f"  {name}: {spell(ty)}")
		print(f"checked {len(modules)} module(s), no errors")
	return exit_code


__all__ = ["check_directory", "discover_sources", "main"]
