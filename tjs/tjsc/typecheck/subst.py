# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Substitution arena for one inference session.

Slots are addressed by type-variable id. A slot is written once, by `bind`,
after the occurs check has run, so chains of variables are never cyclic.
"""

from __future__ import annotations

from typing import Dict

from tjs.tjsc.typecheck.types import FunctionType, PrimitiveType, Scheme, Type, TypeVar


class Substitution:
	def __init__(self) -> None:
		self._slots: Dict[int, Type] = {}

	def __len__(self) -> int:
		return len(self._slots)

	def __contains__(self, var_id: int) -> bool:
		return var_id in self._slots

	def bind(self, var_id: int, ty: Type) -> None:
		if var_id in self._slots:
			raise RuntimeError(f"type variable t{var_id} is already bound")
		self._slots[var_id] = ty

	def resolve(self, ty: Type) -> Type:
		"""Chase variable bindings until reaching an unbound var or a non-var type."""
		while isinstance(ty, TypeVar) and ty.id in self._slots:
			ty = self._slots[ty.id]
		return ty

	def apply(self, ty: Type) -> Type:
		"""Rewrite `ty` with every binding applied; a scheme's quantifiers stay untouched."""
		return self._apply(ty, frozenset())

	def _apply(self, ty: Type, masked: frozenset[int]) -> Type:
		if isinstance(ty, PrimitiveType):
			return ty
		if isinstance(ty, TypeVar):
			if ty.id in masked or ty.id not in self._slots:
				return ty
			return self._apply(self._slots[ty.id], masked)
		if isinstance(ty, FunctionType):
			return FunctionType(tuple(self._apply(p, masked) for p in ty.params), self._apply(ty.ret, masked))
		if isinstance(ty, Scheme):
			return Scheme(ty.quantifiers, self._apply(ty.body, masked | frozenset(ty.quantifiers)))
		raise TypeError(f"not a type: {ty!r}")


__all__ = ["Substitution"]
