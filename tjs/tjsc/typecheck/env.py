# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Typing environment: a stack of name -> Type/Scheme frames."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from tjs.tjsc.typecheck.subst import Substitution
from tjs.tjsc.typecheck.types import Type, free_type_vars


class TypeEnv:
	def __init__(self) -> None:
		self._frames: List[Dict[str, Type]] = [{}]

	def push(self) -> None:
		self._frames.append({})

	def pop(self) -> None:
		if len(self._frames) == 1:
			raise RuntimeError("cannot pop the module frame")
		self._frames.pop()

	@contextmanager
	def frame(self) -> Iterator[None]:
		"""Scope a function body: push on entry, pop on exit."""
		self.push()
		try:
			yield
		finally:
			self.pop()

	def bind(self, name: str, ty: Type) -> None:
		self._frames[-1][name] = ty

	def unbind(self, name: str) -> None:
		"""Drop `name` from the innermost frame (used before generalizing a pre-bound declaration)."""
		self._frames[-1].pop(name, None)

	def lookup(self, name: str) -> Optional[Type]:
		for frame in reversed(self._frames):
			if name in frame:
				return frame[name]
		return None

	def names(self) -> List[str]:
		seen: List[str] = []
		for frame in self._frames:
			seen.extend(n for n in frame if n not in seen)
		return seen

	def free_type_vars(self, subst: Substitution) -> set[int]:
		"""Free variables across all frames, after applying `subst`."""
		out: set[int] = set()
		for frame in self._frames:
			for ty in frame.values():
				out.update(free_type_vars(subst.apply(ty)))
		return out


__all__ = ["TypeEnv"]
