# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Editor-facing workspace.

Holds the current text of every open or discovered module, rebuilds the
whole workspace on demand and answers hover queries from the last build.
Transport (document sync, JSON-RPC) belongs to the language-server front
end; this class only decides what to publish.

Diagnostics are published per file. A file that had diagnostics after the
previous rebuild and has none now gets an explicit empty list, so a client
never keeps a stale error around. A syntax error anywhere stops the build, so
errors from later phases stay published on the files that still parse: they
were not re-checked and may still hold.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from lark import UnexpectedInput

from tjs.tjsc.build import BuildResult, build_workspace
from tjs.tjsc.core.config import CheckerConfig
from tjs.tjsc.core.diagnostics import Diagnostic
from tjs.tjsc.imports import ImportResolver
from tjs.tjsc.modules import SourceModule, create_module
from tjs.tjsc.parser.parser import ParseError
from tjs.tjsc.report import PHASE_PARSE, diagnostic_for, diagnostics_for_failure, syntax_problem
from tjs.tjsc.typecheck.types import Type, spell

logger = logging.getLogger(__name__)


@dataclass
class WorkspaceReport:
	"""
	Result of one rebuild.

	`diagnostics` maps every file that needs publishing to its list, empty
	lists included.
	"""

	diagnostics: Dict[str, List[Diagnostic]] = field(default_factory=dict)
	build: Optional[BuildResult] = None

	@property
	def ok(self) -> bool:
		return not any(self.diagnostics.values())


class Workspace:
	def __init__(self, root: str, *, config: CheckerConfig | None = None) -> None:
		self.root = posixpath.normpath(root)
		self.config = config or CheckerConfig()
		self._sources: Dict[str, str] = {}
		self._modules: Dict[str, SourceModule] = {}
		self._published: Dict[str, List[Diagnostic]] = {}
		self.last_build: Optional[BuildResult] = None

	def _key(self, path: str) -> str:
		if not posixpath.isabs(path):
			path = posixpath.join(self.root, path)
		return posixpath.normpath(path)

	def paths(self) -> List[str]:
		return sorted(self._sources)

	def update_module(self, path: str, text: str) -> None:
		"""Replace (or add) a module's text; takes effect on the next rebuild."""
		self._sources[self._key(path)] = text

	def remove_module(self, path: str) -> None:
		self._sources.pop(self._key(path), None)

	def find_module(self, path: str) -> Optional[SourceModule]:
		"""Module from the last rebuild, if it parsed."""
		return self._modules.get(self._key(path))

	def rebuild(self) -> WorkspaceReport:
		"""Reparse and recheck everything, then compute what to publish."""
		report = WorkspaceReport()
		resolver = ImportResolver.for_paths(self._sources)
		modules: Dict[str, SourceModule] = {}
		for path in sorted(self._sources):
			try:
				modules[path] = create_module(self._sources[path], path, root=self.root, resolver=resolver)
			except (UnexpectedInput, ParseError) as exc:
				logger.info("%s: syntax error", path)
				diag = diagnostic_for(syntax_problem(exc), phase=PHASE_PARSE, file=path)
				report.diagnostics.setdefault(path, []).append(diag)
		self._modules = modules

		held: Dict[str, List[Diagnostic]] = {}
		if report.diagnostics:
			# Type tables of the previous build describe the old text.
			self.last_build = None
			for path, diags in self._published.items():
				if path in modules and any(d.phase != PHASE_PARSE for d in diags):
					held[path] = diags
		else:
			build = build_workspace(modules, config=self.config)
			self.last_build = build
			report.build = build
			if build.failure is not None:
				for diag in diagnostics_for_failure(build.failure, modules):
					report.diagnostics.setdefault(diag.span.file or "", []).append(diag)

		current = {path: diags for path, diags in report.diagnostics.items() if diags}
		for stale in sorted(set(self._published) - set(current) - set(held)):
			report.diagnostics[stale] = []
		current.update(held)
		self._published = current
		return report

	def type_at(self, path: str, line: int, column: int) -> Optional[Type]:
		"""Inferred type at a 1-based position, from the last successful check of that module."""
		build = self.last_build
		if build is None:
			return None
		key = self._key(path)
		output = build.outputs.get(key)
		if output is not None:
			return output.hover.type_at(line, column)
		failure = build.failure
		if failure is None or failure.module is None or failure.module.path != key:
			return None
		# Partial table: types recorded before the module's first error.
		if build.failed_hover is not None:
			return build.failed_hover.type_at(line, column)
		return None

	def hover(self, path: str, line: int, column: int) -> Optional[str]:
		ty = self.type_at(path, line, column)
		return spell(ty) if ty is not None else None


__all__ = ["Workspace", "WorkspaceReport"]
