# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Per-module inference state.

One `InferenceSession` owns the type-variable supply, the substitution, the
environment and the hover table for a single module. Nothing in it is shared
across modules or builds.
"""

from __future__ import annotations

from typing import NoReturn

from tjs.tjsc.core.config import CheckerConfig
from tjs.tjsc.errors import CheckError
from tjs.tjsc.parser.ast import Node
from tjs.tjsc.typecheck.env import TypeEnv
from tjs.tjsc.typecheck.hover import HoverTable
from tjs.tjsc.typecheck.subst import Substitution
from tjs.tjsc.typecheck.types import Type, TypeVar, TypeVarSupply
from tjs.tjsc.typecheck.unify import unify


class InferenceFailure(Exception):
	"""Carries the first structured error out of expression inference."""

	def __init__(self, error: CheckError) -> None:
		super().__init__(type(error).__name__)
		self.error = error


class InferenceSession:
	def __init__(self, config: CheckerConfig | None = None) -> None:
		self.config = config or CheckerConfig()
		self.supply = TypeVarSupply()
		self.subst = Substitution()
		self.env = TypeEnv()
		self.hover = HoverTable()

	def fresh(self) -> TypeVar:
		return self.supply.fresh()

	def unify(self, t1: Type, t2: Type) -> None:
		unify(t1, t2, self.subst)

	def apply(self, ty: Type) -> Type:
		return self.subst.apply(ty)

	def record(self, node: Node, ty: Type) -> Type:
		self.hover.record(node, ty)
		return ty

	def fail(self, error: CheckError) -> NoReturn:
		raise InferenceFailure(error)


__all__ = ["InferenceFailure", "InferenceSession"]
