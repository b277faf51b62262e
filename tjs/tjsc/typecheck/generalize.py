# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Let-polymorphism: generalize at bindings, instantiate at uses."""

from __future__ import annotations

from typing import Dict

from tjs.tjsc.typecheck.env import TypeEnv
from tjs.tjsc.typecheck.subst import Substitution
from tjs.tjsc.typecheck.types import FunctionType, PrimitiveType, Scheme, Type, TypeVar, TypeVarSupply, free_type_vars


def generalize(env: TypeEnv, ty: Type, subst: Substitution) -> Type:
	"""
	Quantify the free variables of `ty` that no active environment frame mentions.

	Quantifiers keep first-occurrence order. With nothing to quantify the
	substituted type is returned as-is (no empty Scheme).
	"""
	ty = subst.apply(ty)
	env_vars = env.free_type_vars(subst)
	quantifiers = tuple(v for v in free_type_vars(ty) if v not in env_vars)
	if not quantifiers:
		return ty
	return Scheme(quantifiers, ty)


def instantiate(ty: Type, supply: TypeVarSupply) -> Type:
	"""Replace a scheme's quantifiers with fresh variables; other types pass through."""
	if not isinstance(ty, Scheme):
		return ty
	mapping = {q: supply.fresh() for q in ty.quantifiers}
	return _rename(ty.body, mapping)


def _rename(ty: Type, mapping: Dict[int, TypeVar]) -> Type:
	if isinstance(ty, TypeVar):
		return mapping.get(ty.id, ty)
	if isinstance(ty, FunctionType):
		return FunctionType(tuple(_rename(p, mapping) for p in ty.params), _rename(ty.ret, mapping))
	if isinstance(ty, PrimitiveType):
		return ty
	# Nested schemes do not arise from generalize(); keep inner binders intact.
	inner = {k: v for k, v in mapping.items() if k not in ty.quantifiers}
	return Scheme(ty.quantifiers, _rename(ty.body, inner))


__all__ = ["generalize", "instantiate"]
