# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Module dependency graph and topological ordering.

The graph maps a module path to the resolved paths it imports. Ordering is a
DFS with three-state marking (unvisited / on-stack / done); a back-edge to an
on-stack node is an import cycle.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence

from tjs.tjsc.modules import SourceModule


@dataclass(frozen=True)
class SortResult:
	"""Either `order` (dependencies first) or `cycle` (closing node repeated)."""

	order: tuple[str, ...] = ()
	cycle: Optional[tuple[str, ...]] = None

	@property
	def ok(self) -> bool:
		return self.cycle is None


def build_dependency_graph(modules: Iterable[SourceModule]) -> dict[str, list[str]]:
	"""
	Collect each module's resolved import paths.

	Unresolved imports (bare specifiers or missing files) are left out, and
	duplicate imports of the same module collapse to a single edge.
	"""
	graph: dict[str, list[str]] = {}
	for mod in modules:
		deps: list[str] = []
		for imp in mod.imports:
			if imp.resolved_path is not None and imp.resolved_path not in deps:
				deps.append(imp.resolved_path)
		graph[mod.path] = deps
	return graph


def topological_sort(graph: Mapping[str, Sequence[str]]) -> SortResult:
	"""
	Order `graph` so every dependency precedes its dependents.

	Nodes that only appear as dependencies are leaves with no dependencies of
	their own. On a cycle the result carries the path from the closing node
	back to itself, e.g. `("a", "b", "a")`; a self-import is `("a", "a")`.
	"""
	done: set[str] = set()
	stack: list[str] = []
	onstack: set[str] = set()
	order: list[str] = []

	def dfs(n: str) -> list[str] | None:
		stack.append(n)
		onstack.add(n)
		for m in graph.get(n, ()):
			if m in onstack:
				return stack[stack.index(m):] + [m]
			if m not in done:
				c = dfs(m)
				if c is not None:
					return c
		stack.pop()
		onstack.remove(n)
		done.add(n)
		order.append(n)
		return None

	for n in graph:
		if n not in done:
			c = dfs(n)
			if c is not None:
				return SortResult(cycle=tuple(c))
	return SortResult(order=tuple(order))


__all__ = ["SortResult", "build_dependency_graph", "topological_sort"]
