# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Per-module record of inferred types, keyed by AST node id, for hover queries."""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from tjs.tjsc.parser.ast import Node
from tjs.tjsc.typecheck.subst import Substitution
from tjs.tjsc.typecheck.types import Type


class HoverTable:
	def __init__(self) -> None:
		self._entries: Dict[int, Tuple[Node, Type]] = {}

	def __len__(self) -> int:
		return len(self._entries)

	def record(self, node: Node, ty: Type) -> None:
		self._entries[node.node_id] = (node, ty)

	def finalize(self, subst: Substitution) -> None:
		"""Apply the session's final substitution to every recorded type."""
		self._entries = {nid: (node, subst.apply(ty)) for nid, (node, ty) in self._entries.items()}

	def type_of(self, node: Node) -> Optional[Type]:
		entry = self._entries.get(node.node_id)
		return entry[1] if entry is not None else None

	def type_at(self, line: int, column: int) -> Optional[Type]:
		"""Type of the innermost recorded node whose span contains (line, column)."""
		best: Optional[Tuple[Node, Type]] = None
		for node, ty in self._entries.values():
			loc = node.loc
			if not ((loc.line, loc.column) <= (line, column) < (loc.end_line, loc.end_column)):
				continue
			if best is None or _narrower(loc, best[0].loc):
				best = (node, ty)
		return best[1] if best is not None else None


def _narrower(a, b) -> bool:
	"""True when span `a` starts later, or starts together and ends sooner, than `b`."""
	if (a.line, a.column) != (b.line, b.column):
		return (a.line, a.column) > (b.line, b.column)
	return (a.end_line, a.end_column) < (b.end_line, b.end_column)


__all__ = ["HoverTable"]
