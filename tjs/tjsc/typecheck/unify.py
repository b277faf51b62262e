# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Unification over a mutable `Substitution`."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from tjs.tjsc.typecheck.subst import Substitution
from tjs.tjsc.typecheck.types import FunctionType, PrimitiveType, Scheme, Type, TypeVar, occurs_in


class UnifyErrorKind(str, Enum):
	TYPE_MISMATCH = "typeMismatch"
	OCCURS_CHECK = "occursCheck"
	ARITY_MISMATCH = "arityMismatch"
	PARAM_MISMATCH = "paramMismatch"
	RETURN_MISMATCH = "returnMismatch"


class UnificationError(Exception):
	"""
	Raised when two types cannot be made equal.

	For function types the failure is attributed to the outermost position:
	`PARAM_MISMATCH` with `param_index`, or `RETURN_MISMATCH`. The nested
	failure is kept in `cause`.
	"""

	def __init__(
		self,
		kind: UnifyErrorKind,
		left: Type,
		right: Type,
		*,
		param_index: Optional[int] = None,
		cause: Optional["UnificationError"] = None,
	) -> None:
		super().__init__(f"{kind.value}: {left} ~ {right}")
		self.kind = kind
		self.left = left
		self.right = right
		self.param_index = param_index
		self.cause = cause


def unify(t1: Type, t2: Type, subst: Substitution) -> None:
	"""Make `t1` and `t2` equal by extending `subst`, or raise UnificationError."""
	a = subst.resolve(t1)
	b = subst.resolve(t2)
	if isinstance(a, Scheme) or isinstance(b, Scheme):
		raise TypeError("type schemes must be instantiated before unification")
	if isinstance(a, TypeVar):
		_bind_var(a, b, subst)
		return
	if isinstance(b, TypeVar):
		_bind_var(b, a, subst)
		return
	if isinstance(a, PrimitiveType) and isinstance(b, PrimitiveType):
		if a.name != b.name:
			raise UnificationError(UnifyErrorKind.TYPE_MISMATCH, a, b)
		return
	if isinstance(a, FunctionType) and isinstance(b, FunctionType):
		if len(a.params) != len(b.params):
			raise UnificationError(UnifyErrorKind.ARITY_MISMATCH, a, b)
		for i, (p, q) in enumerate(zip(a.params, b.params)):
			try:
				unify(p, q, subst)
			except UnificationError as exc:
				raise UnificationError(UnifyErrorKind.PARAM_MISMATCH, a, b, param_index=i, cause=exc) from exc
		try:
			unify(a.ret, b.ret, subst)
		except UnificationError as exc:
			raise UnificationError(UnifyErrorKind.RETURN_MISMATCH, a, b, cause=exc) from exc
		return
	raise UnificationError(UnifyErrorKind.TYPE_MISMATCH, a, b)


def _bind_var(var: TypeVar, ty: Type, subst: Substitution) -> None:
	if isinstance(ty, TypeVar) and ty.id == var.id:
		return
	if occurs_in(var.id, subst.apply(ty)):
		raise UnificationError(UnifyErrorKind.OCCURS_CHECK, var, ty)
	subst.bind(var.id, ty)


__all__ = ["UnifyErrorKind", "UnificationError", "unify"]
