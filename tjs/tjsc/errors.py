# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Structured error values produced by the checker passes.

These carry data, not text: `tjs.tjsc.report` renders them into
Diagnostics. Each class has a stable `code` tag that JSON output and tests can
match on. A pass stops at its first error, so at most one of these is
produced per build.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional

from tjs.tjsc.parser.ast import ImportDeclaration, ImportSpecifier, Node
from tjs.tjsc.typecheck.types import Type


class CheckError:
	"""Base of all error values; every subclass exposes the offending `node`."""

	code: ClassVar[str] = "error"


# --- structural ------------------------------------------------------------


@dataclass(frozen=True)
class CycleError(CheckError):
	"""Import cycle; `path` starts and ends with the same module."""

	code: ClassVar[str] = "cycle"
	path: tuple[str, ...]
	node: Optional[Node] = None


@dataclass(frozen=True)
class NameNotExportedError(CheckError):
	code: ClassVar[str] = "name-not-exported"
	import_node: ImportDeclaration
	specifier: ImportSpecifier
	available_exports: tuple[str, ...]

	@property
	def node(self) -> Node:
		return self.specifier


@dataclass(frozen=True)
class MissingModuleError(CheckError):
	"""Relative import whose target is not in the workspace (CLI only)."""

	code: ClassVar[str] = "missing-module"
	import_node: ImportDeclaration
	specifier: str
	resolved_path: str

	@property
	def node(self) -> Node:
		return self.import_node


@dataclass(frozen=True)
class SyntaxProblem(CheckError):
	code: ClassVar[str] = "syntax"
	message: str
	line: Optional[int] = None
	column: Optional[int] = None
	node: Optional[Node] = None


# --- scope -----------------------------------------------------------------


@dataclass(frozen=True)
class UndefinedVariableError(CheckError):
	code: ClassVar[str] = "undefined-variable"
	name: str
	node: Node
	suggestions: tuple[str, ...] = ()


@dataclass(frozen=True)
class DuplicateDeclarationError(CheckError):
	"""`first_node` is the existing binding, `second_node` the redeclaration."""

	code: ClassVar[str] = "duplicate-declaration"
	name: str
	first_node: Node
	second_node: Node

	@property
	def node(self) -> Node:
		return self.second_node


# --- coverage --------------------------------------------------------------


@dataclass(frozen=True)
class UnsupportedError(CheckError):
	code: ClassVar[str] = "unsupported"
	node: Node
	stage: Optional[str] = None


# --- type ------------------------------------------------------------------


@dataclass(frozen=True)
class BinaryExpressionMismatch(CheckError):
	code: ClassVar[str] = "binary-mismatch"
	node: Node
	operand_types: tuple[Type, Type]
	allowed_types: tuple[Type, ...] = ()


@dataclass(frozen=True)
class BinaryExpressionUnsupportedType(CheckError):
	code: ClassVar[str] = "binary-unsupported-type"
	node: Node
	offending_side: str  # "left" | "right"
	offending_type: Type
	allowed_types: tuple[Type, ...]


@dataclass(frozen=True)
class UnaryExpressionUnsupportedType(CheckError):
	code: ClassVar[str] = "unary-unsupported-type"
	node: Node
	operand_type: Type
	allowed_types: tuple[Type, ...]


@dataclass(frozen=True)
class ArityMismatch(CheckError):
	code: ClassVar[str] = "arity-mismatch"
	node: Node
	expected: int
	actual: int
	fn_name: Optional[str] = None


@dataclass(frozen=True)
class ParamMismatch(CheckError):
	"""`argument` is the call argument whose type disagreed with the parameter."""

	code: ClassVar[str] = "param-mismatch"
	node: Node
	param_index: int
	expected_type: Type
	actual_type: Type
	fn_name: Optional[str] = None
	argument: Optional[Node] = None


@dataclass(frozen=True)
class CallError(CheckError):
	"""Callee is not a function, or the call would build an infinite type."""

	code: ClassVar[str] = "call-error"
	node: Node
	callee_type: Type
	reason: str


@dataclass(frozen=True)
class ConditionalMismatch(CheckError):
	"""`part` is "test" (non-boolean test) or "branches" (branches disagree)."""

	code: ClassVar[str] = "conditional-mismatch"
	node: Node
	part: str
	types: tuple[Type, ...] = ()


@dataclass(frozen=True)
class InfiniteTypeError(CheckError):
	code: ClassVar[str] = "infinite-type"
	node: Node
	name: str
	type: Type


__all__ = [
	"CheckError",
	"CycleError",
	"NameNotExportedError",
	"MissingModuleError",
	"SyntaxProblem",
	"UndefinedVariableError",
	"DuplicateDeclarationError",
	"UnsupportedError",
	"BinaryExpressionMismatch",
	"BinaryExpressionUnsupportedType",
	"UnaryExpressionUnsupportedType",
	"ArityMismatch",
	"ParamMismatch",
	"CallError",
	"ConditionalMismatch",
	"InfiniteTypeError",
]
