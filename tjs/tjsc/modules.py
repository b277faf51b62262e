# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source modules as the build sees them.

A SourceModule bundles the parsed program with its import list (specifiers
already resolved to workspace paths) and its export names. Modules are
rebuilt from scratch whenever their text changes.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Tuple

from tjs.tjsc.core.config import DEFAULT_EXPORT_NAME
from tjs.tjsc.errors import MissingModuleError
from tjs.tjsc.imports import is_relative_specifier
from tjs.tjsc.parser.ast import (
	ArrayPattern,
	ExportDefaultDeclaration,
	ExportNamedDeclaration,
	Identifier,
	ImportDeclaration,
	ObjectPattern,
	Program,
)
from tjs.tjsc.parser.parser import parse_program

Resolver = Callable[[str, str], Optional[str]]


@dataclass
class ModuleImport:
	"""
	One import declaration.

	`specifiers` pairs each local name with the exported name it reads:
	`__default__` for a default import, `*` for a namespace import.
	"""

	source: str
	resolved_path: Optional[str]
	specifiers: List[Tuple[str, str]]
	node: ImportDeclaration


@dataclass
class SourceModule:
	path: str
	relative_path: str
	source: str
	program: Program
	imports: List[ModuleImport] = field(default_factory=list)
	exports: List[str] = field(default_factory=list)
	source_lines: List[str] = field(init=False)

	def __post_init__(self) -> None:
		self.source_lines = self.source.splitlines()

	def line(self, lineno: int) -> str:
		"""1-based source line, or "" when out of range."""
		if 1 <= lineno <= len(self.source_lines):
			return self.source_lines[lineno - 1]
		return ""


def extract_exports(program: Program) -> List[str]:
	"""
	Names a module exports, in declaration order.

	`export default` contributes `__default__`; pattern declarations export
	every bound name.
	"""
	names: List[str] = []
	for stmt in program.body:
		if isinstance(stmt, ExportNamedDeclaration):
			if stmt.declaration is not None:
				for decl in stmt.declaration.declarations:
					names.extend(_bound_names(decl.id))
			names.extend(spec.exported for spec in stmt.specifiers)
		elif isinstance(stmt, ExportDefaultDeclaration):
			names.append(DEFAULT_EXPORT_NAME)
	return names


def _bound_names(target) -> List[str]:
	if isinstance(target, Identifier):
		return [target.name]
	if isinstance(target, ObjectPattern):
		return [p.value.name for p in target.properties]
	if isinstance(target, ArrayPattern):
		return [e.name for e in target.elements]
	return []


def collect_imports(program: Program, path: str, resolver: Resolver) -> List[ModuleImport]:
	"""Resolve every import source and record it on the declaration node too."""
	imports: List[ModuleImport] = []
	for stmt in program.body:
		if not isinstance(stmt, ImportDeclaration):
			continue
		stmt.resolved_path = resolver(stmt.source, path)
		imports.append(
			ModuleImport(
				source=stmt.source,
				resolved_path=stmt.resolved_path,
				specifiers=[(spec.local.name, spec.imported) for spec in stmt.specifiers],
				node=stmt,
			)
		)
	return imports


def create_module(source: str, path: str, *, root: str, resolver: Resolver) -> SourceModule:
	"""
	Parse `source` and build a SourceModule for `path`.

	Syntax errors propagate (`lark.UnexpectedInput` or `ParseError`); the
	caller decides how to report them.
	"""
	program = parse_program(source)
	return SourceModule(
		path=path,
		relative_path=posixpath.relpath(path, root) if root else path,
		source=source,
		program=program,
		imports=collect_imports(program, path, resolver),
		exports=extract_exports(program),
	)


def find_missing_imports(modules: Iterable[SourceModule]) -> List[Tuple[SourceModule, MissingModuleError]]:
	"""Relative imports that did not resolve to a workspace module."""
	missing: List[Tuple[SourceModule, MissingModuleError]] = []
	for mod in modules:
		for imp in mod.imports:
			if imp.resolved_path is None and is_relative_specifier(imp.source):
				target = posixpath.normpath(posixpath.join(posixpath.dirname(mod.path), imp.source))
				missing.append((mod, MissingModuleError(imp.node, imp.source, target)))
	return missing


__all__ = [
	"ModuleImport",
	"SourceModule",
	"collect_imports",
	"create_module",
	"extract_exports",
	"find_missing_imports",
]
