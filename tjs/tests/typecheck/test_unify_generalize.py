# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Unification, substitution, generalization and type spelling."""

from __future__ import annotations

import pytest

from tjs.tjsc.typecheck.env import TypeEnv
from tjs.tjsc.typecheck.generalize import generalize, instantiate
from tjs.tjsc.typecheck.subst import Substitution
from tjs.tjsc.typecheck.types import (
	BOOLEAN,
	NUMBER,
	STRING,
	FunctionType,
	Scheme,
	TypeKind,
	TypeVar,
	TypeVarSupply,
	free_type_vars,
	spell,
)
from tjs.tjsc.typecheck.unify import UnificationError, UnifyErrorKind, unify


def test_supply_starts_at_one() -> None:
	supply = TypeVarSupply()
	assert [supply.fresh().id for _ in range(3)] == [1, 2, 3]


def test_unify_binds_variables_and_resolves_chains() -> None:
	s = Substitution()
	unify(TypeVar(1), TypeVar(2), s)
	unify(TypeVar(2), NUMBER, s)
	assert s.resolve(TypeVar(1)) == NUMBER
	assert s.apply(FunctionType((TypeVar(1),), TypeVar(2))) == FunctionType((NUMBER,), NUMBER)


def test_unify_same_variable_is_noop() -> None:
	s = Substitution()
	unify(TypeVar(1), TypeVar(1), s)
	assert len(s) == 0


def test_primitive_mismatch() -> None:
	with pytest.raises(UnificationError) as info:
		unify(NUMBER, STRING, Substitution())
	assert info.value.kind is UnifyErrorKind.TYPE_MISMATCH


def test_occurs_check() -> None:
	with pytest.raises(UnificationError) as info:
		unify(TypeVar(1), FunctionType((TypeVar(1),), NUMBER), Substitution())
	assert info.value.kind is UnifyErrorKind.OCCURS_CHECK


def test_function_failures_name_the_position() -> None:
	f2 = FunctionType((NUMBER, NUMBER), NUMBER)
	with pytest.raises(UnificationError) as info:
		unify(f2, FunctionType((NUMBER,), NUMBER), Substitution())
	assert info.value.kind is UnifyErrorKind.ARITY_MISMATCH

	with pytest.raises(UnificationError) as info:
		unify(f2, FunctionType((NUMBER, STRING), NUMBER), Substitution())
	assert info.value.kind is UnifyErrorKind.PARAM_MISMATCH
	assert info.value.param_index == 1
	assert info.value.cause.kind is UnifyErrorKind.TYPE_MISMATCH

	with pytest.raises(UnificationError) as info:
		unify(f2, FunctionType((NUMBER, NUMBER), BOOLEAN), Substitution())
	assert info.value.kind is UnifyErrorKind.RETURN_MISMATCH


def test_schemes_must_be_instantiated_first() -> None:
	with pytest.raises(TypeError):
		unify(Scheme((1,), TypeVar(1)), NUMBER, Substitution())


def test_bind_is_write_once() -> None:
	s = Substitution()
	s.bind(1, NUMBER)
	assert 1 in s
	with pytest.raises(RuntimeError):
		s.bind(1, STRING)


def test_apply_leaves_scheme_quantifiers_alone() -> None:
	s = Substitution()
	s.bind(1, NUMBER)
	s.bind(2, STRING)
	scheme = Scheme((1,), FunctionType((TypeVar(1),), TypeVar(2)))
	assert s.apply(scheme) == Scheme((1,), FunctionType((TypeVar(1),), STRING))


def test_generalize_skips_environment_variables() -> None:
	env = TypeEnv()
	env.bind("y", TypeVar(2))
	ty = FunctionType((TypeVar(1),), TypeVar(2))
	assert generalize(env, ty, Substitution()) == Scheme((1,), ty)


def test_generalize_without_free_variables_returns_type() -> None:
	ty = FunctionType((NUMBER,), NUMBER)
	assert generalize(TypeEnv(), ty, Substitution()) == ty


def test_instantiate_uses_fresh_variables() -> None:
	supply = TypeVarSupply()
	supply.fresh()
	scheme = Scheme((1,), FunctionType((TypeVar(1),), TypeVar(1)))
	first = instantiate(scheme, supply)
	second = instantiate(scheme, supply)
	assert first == FunctionType((TypeVar(2),), TypeVar(2))
	assert second == FunctionType((TypeVar(3),), TypeVar(3))
	assert instantiate(NUMBER, supply) == NUMBER


def test_free_type_vars_in_first_occurrence_order() -> None:
	ty = FunctionType((TypeVar(3), TypeVar(1), TypeVar(3)), TypeVar(2))
	assert free_type_vars(ty) == [3, 1, 2]
	assert free_type_vars(Scheme((3,), ty)) == [1, 2]


def test_spell() -> None:
	assert spell(NUMBER) == "number"
	assert spell(FunctionType((NUMBER, STRING), BOOLEAN)) == "(number, string) -> boolean"
	assert spell(FunctionType((), NUMBER)) == "() -> number"
	assert spell(Scheme((4, 2), FunctionType((TypeVar(4),), TypeVar(2)))) == "('a) -> 'b"
	assert spell(FunctionType((TypeVar(7),), TypeVar(7))) == "(t7) -> t7"


def test_env_frames() -> None:
	env = TypeEnv()
	env.bind("a", NUMBER)
	with env.frame():
		env.bind("b", STRING)
		assert env.lookup("a") == NUMBER
		assert env.names() == ["a", "b"]
	assert env.lookup("b") is None
	with pytest.raises(RuntimeError):
		env.pop()


def test_type_kinds() -> None:
	assert NUMBER.kind is TypeKind.PRIMITIVE
	assert FunctionType((), NUMBER).kind is TypeKind.FUNCTION
	assert TypeVar(1).kind is TypeKind.VAR
	assert Scheme((1,), TypeVar(1)).kind is TypeKind.SCHEME


def test_unify_binds_variable_on_the_right() -> None:
	s = Substitution()
	unify(NUMBER, TypeVar(1), s)
	assert s.resolve(TypeVar(1)) == NUMBER
	unify(FunctionType((STRING,), TypeVar(2)), TypeVar(3), s)
	assert s.apply(TypeVar(3)) == FunctionType((STRING,), TypeVar(2))


def _up_to_renaming(s: Substitution, a, b) -> str:
	# Generalizing in an empty environment names free variables 'a, 'b, ... by first occurrence.
	return spell(generalize(TypeEnv(), FunctionType((a, b), BOOLEAN), s))


@pytest.mark.parametrize(
	"left, right",
	[
		(TypeVar(1), TypeVar(2)),
		(NUMBER, TypeVar(1)),
		(TypeVar(1), FunctionType((TypeVar(2),), NUMBER)),
		(
			FunctionType((TypeVar(1), TypeVar(2)), TypeVar(1)),
			FunctionType((NUMBER, TypeVar(3)), TypeVar(3)),
		),
		(
			FunctionType((FunctionType((TypeVar(1),), TypeVar(2)),), TypeVar(2)),
			FunctionType((TypeVar(3),), TypeVar(4)),
		),
	],
)
def test_unify_is_symmetric(left, right) -> None:
	forward = Substitution()
	unify(left, right, forward)
	backward = Substitution()
	unify(right, left, backward)
	assert forward.apply(left) == forward.apply(right)
	assert backward.apply(left) == backward.apply(right)
	assert _up_to_renaming(forward, left, right) == _up_to_renaming(backward, left, right)
