# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Type representation for inference.

Types are immutable values. Type variables are identified by an integer id
drawn from a per-session `TypeVarSupply`; a `Scheme` quantifies a tuple of
those ids over a body type.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Tuple, Union


class TypeKind(Enum):
	"""Coarse type classification."""

	PRIMITIVE = "primitive"
	FUNCTION = "function"
	VAR = "var"
	SCHEME = "scheme"


@dataclass(frozen=True)
class PrimitiveType:
	name: str  # number | string | boolean | null

	@property
	def kind(self) -> TypeKind:
		return TypeKind.PRIMITIVE

	def __str__(self) -> str:
		return self.name


@dataclass(frozen=True)
class FunctionType:
	params: Tuple["Type", ...]
	ret: "Type"

	@property
	def kind(self) -> TypeKind:
		return TypeKind.FUNCTION

	def __str__(self) -> str:
		return spell(self)


@dataclass(frozen=True)
class TypeVar:
	id: int

	@property
	def kind(self) -> TypeKind:
		return TypeKind.VAR

	def __str__(self) -> str:
		return f"t{self.id}"


@dataclass(frozen=True)
class Scheme:
	"""`forall quantifiers. body`; quantifiers are type-variable ids."""

	quantifiers: Tuple[int, ...]
	body: "Type"

	@property
	def kind(self) -> TypeKind:
		return TypeKind.SCHEME

	def __str__(self) -> str:
		return spell(self)


Type = Union[PrimitiveType, FunctionType, TypeVar, Scheme]

NUMBER = PrimitiveType("number")
STRING = PrimitiveType("string")
BOOLEAN = PrimitiveType("boolean")
NULL = PrimitiveType("null")


class TypeVarSupply:
	"""Fresh type-variable ids for one inference session (ids start at 1)."""

	def __init__(self) -> None:
		self._last = 0

	def fresh(self) -> TypeVar:
		self._last += 1
		return TypeVar(self._last)


def walk(ty: Type) -> Iterator[Type]:
	"""Pre-order traversal of a type and its components."""
	yield ty
	if isinstance(ty, FunctionType):
		for p in ty.params:
			yield from walk(p)
		yield from walk(ty.ret)
	elif isinstance(ty, Scheme):
		yield from walk(ty.body)


def free_type_vars(ty: Type) -> list[int]:
	"""
	Ids of free type variables in first-occurrence order.

	A scheme's quantified ids are bound, so they are excluded.
	"""
	bound = set(ty.quantifiers) if isinstance(ty, Scheme) else set()
	seen: list[int] = []
	for t in walk(ty):
		if isinstance(t, TypeVar) and t.id not in bound and t.id not in seen:
			seen.append(t.id)
	return seen


def occurs_in(var_id: int, ty: Type) -> bool:
	return any(isinstance(t, TypeVar) and t.id == var_id for t in walk(ty))


def spell(ty: Type) -> str:
	"""
	Human-readable rendering.

	Schemes name their quantifiers `'a`, `'b`, ... in quantifier order; free
	variables print as `t<id>`.
	"""
	names: Dict[int, str] = {}
	if isinstance(ty, Scheme):
		for i, q in enumerate(ty.quantifiers):
			names[q] = _var_name(i)
		ty = ty.body
	return _spell(ty, names)


def _var_name(i: int) -> str:
	letters = "abcdefghijklmnopqrstuvwxyz"
	suffix = "" if i < len(letters) else str(i // len(letters))
	return "'" + letters[i % len(letters)] + suffix


def _spell(ty: Type, names: Dict[int, str]) -> str:
	if isinstance(ty, PrimitiveType):
		return ty.name
	if isinstance(ty, TypeVar):
		return names.get(ty.id, str(ty))
	if isinstance(ty, FunctionType):
		params = ", ".join(_spell(p, names) for p in ty.params)
		return f"({params}) -> {_spell(ty.ret, names)}"
	if isinstance(ty, Scheme):
		return spell(ty)
	raise TypeError(f"not a type: {ty!r}")


__all__ = [
	"TypeKind",
	"PrimitiveType",
	"FunctionType",
	"TypeVar",
	"Scheme",
	"Type",
	"NUMBER",
	"STRING",
	"BOOLEAN",
	"NULL",
	"TypeVarSupply",
	"walk",
	"free_type_vars",
	"occurs_in",
	"spell",
]
