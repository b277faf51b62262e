# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Published module interfaces for one workspace build."""

from __future__ import annotations

from typing import Dict, Iterator, Mapping, Optional

from tjs.tjsc.typecheck.types import Type


class InterfaceRegistry:
	"""
	Append-only map from module path to its exported name -> Type/Scheme map.

	A fresh registry is created for every build; publishing the same path
	twice within one build is a driver bug.
	"""

	def __init__(self) -> None:
		self._interfaces: Dict[str, Dict[str, Type]] = {}

	def publish(self, path: str, interface: Mapping[str, Type]) -> None:
		if path in self._interfaces:
			raise ValueError(f"interface for {path} already published")
		self._interfaces[path] = dict(interface)

	def get(self, path: str) -> Optional[Mapping[str, Type]]:
		return self._interfaces.get(path)

	def __contains__(self, path: object) -> bool:
		return path in self._interfaces

	def __iter__(self) -> Iterator[str]:
		return iter(self._interfaces)

	def __len__(self) -> int:
		return len(self._interfaces)


__all__ = ["InterfaceRegistry"]
