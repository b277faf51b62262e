# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
AST for the analyzed JavaScript subset.

Class names follow the ESTree node kinds so error values and diagnostics can
name a node by `type(node).__name__`. Every node carries a `Located` span and
a per-parse `node_id` that hover tables key on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass(frozen=True)
class Located:
	"""1-based source span; `end_column` is exclusive."""

	line: int
	column: int
	end_line: int
	end_column: int


class Node:
	loc: Located
	node_id: int

	@property
	def kind(self) -> str:
		return type(self).__name__


class Expr(Node):
	pass


class Stmt(Node):
	pass


# --- expressions -----------------------------------------------------------


@dataclass(eq=False)
class Identifier(Expr):
	name: str
	loc: Located
	node_id: int = 0


@dataclass(eq=False)
class Literal(Expr):
	"""`value` is an int, float, str, bool or None; `raw` keeps the source text."""

	value: object
	raw: str
	loc: Located
	node_id: int = 0


@dataclass(eq=False)
class UnaryExpression(Expr):
	operator: str
	argument: Expr
	loc: Located
	node_id: int = 0


@dataclass(eq=False)
class BinaryExpression(Expr):
	operator: str
	left: Expr
	right: Expr
	loc: Located
	node_id: int = 0


@dataclass(eq=False)
class LogicalExpression(Expr):
	operator: str
	left: Expr
	right: Expr
	loc: Located
	node_id: int = 0


@dataclass(eq=False)
class ConditionalExpression(Expr):
	test: Expr
	consequent: Expr
	alternate: Expr
	loc: Located
	node_id: int = 0


@dataclass(eq=False)
class CallExpression(Expr):
	callee: Expr
	arguments: List[Expr]
	loc: Located
	node_id: int = 0


@dataclass(eq=False)
class MemberExpression(Expr):
	object: Expr
	property: Expr
	computed: bool
	loc: Located
	node_id: int = 0


@dataclass(eq=False)
class AssignmentExpression(Expr):
	target: Expr
	value: Expr
	loc: Located
	node_id: int = 0


@dataclass(eq=False)
class Property(Node):
	key: str
	value: Expr
	shorthand: bool
	loc: Located
	node_id: int = 0


@dataclass(eq=False)
class ObjectExpression(Expr):
	properties: List[Property]
	loc: Located
	node_id: int = 0


@dataclass(eq=False)
class ArrayExpression(Expr):
	elements: List[Expr]
	loc: Located
	node_id: int = 0


@dataclass(eq=False)
class ArrowFunctionExpression(Expr):
	"""`params` are Identifiers or destructuring patterns; `body` is an Expr or a BlockStatement."""

	params: List[Node]
	body: Union[Expr, "BlockStatement"]
	loc: Located
	node_id: int = 0


# --- patterns --------------------------------------------------------------


@dataclass(eq=False)
class PatternProperty(Node):
	"""`{ key: value }` inside an object pattern; shorthand when key == value.name."""

	key: str
	value: Identifier
	loc: Located
	node_id: int = 0


@dataclass(eq=False)
class ObjectPattern(Node):
	properties: List[PatternProperty]
	loc: Located
	node_id: int = 0


@dataclass(eq=False)
class ArrayPattern(Node):
	elements: List[Identifier]
	loc: Located
	node_id: int = 0


Pattern = Union[Identifier, ObjectPattern, ArrayPattern]


# --- statements ------------------------------------------------------------


@dataclass(eq=False)
class VariableDeclarator(Node):
	id: Pattern
	init: Optional[Expr]
	loc: Located
	node_id: int = 0


@dataclass(eq=False)
class VariableDeclaration(Stmt):
	kind_keyword: str  # let / const / var
	declarations: List[VariableDeclarator]
	loc: Located
	node_id: int = 0


@dataclass(eq=False)
class ExpressionStatement(Stmt):
	expression: Expr
	loc: Located
	node_id: int = 0


@dataclass(eq=False)
class ReturnStatement(Stmt):
	argument: Optional[Expr]
	loc: Located
	node_id: int = 0


@dataclass(eq=False)
class BlockStatement(Stmt):
	body: List[Stmt]
	loc: Located
	node_id: int = 0


@dataclass(eq=False)
class FunctionDeclaration(Stmt):
	id: Identifier
	params: List[Identifier]
	body: BlockStatement
	loc: Located
	node_id: int = 0


@dataclass(eq=False)
class ImportSpecifier(Node):
	"""
	One imported binding.

	`imported` is the exported name looked up in the source module: the
	default-export key for default imports and `*` for namespace imports.
	"""

	local: Identifier
	imported: str
	form: str  # "named" | "default" | "namespace"
	loc: Located
	node_id: int = 0


@dataclass(eq=False)
class ImportDeclaration(Stmt):
	source: str
	specifiers: List[ImportSpecifier]
	loc: Located
	node_id: int = 0
	# Filled by module creation once the import resolver has run.
	resolved_path: Optional[str] = None


@dataclass(eq=False)
class ExportSpecifier(Node):
	local: Identifier
	exported: str
	loc: Located
	node_id: int = 0


@dataclass(eq=False)
class ExportNamedDeclaration(Stmt):
	"""Either `export <declaration>` or `export { a, b as c }`."""

	declaration: Optional[VariableDeclaration]
	specifiers: List[ExportSpecifier]
	loc: Located
	node_id: int = 0


@dataclass(eq=False)
class ExportDefaultDeclaration(Stmt):
	declaration: Expr
	loc: Located
	node_id: int = 0


@dataclass(eq=False)
class ExportAllDeclaration(Stmt):
	source: str
	loc: Located
	node_id: int = 0


@dataclass(eq=False)
class Program(Node):
	body: List[Stmt] = field(default_factory=list)
	loc: Located = field(default_factory=lambda: Located(1, 1, 1, 1))
	node_id: int = 0


__all__ = [
	"Located",
	"Node",
	"Expr",
	"Stmt",
	"Identifier",
	"Literal",
	"UnaryExpression",
	"BinaryExpression",
	"LogicalExpression",
	"ConditionalExpression",
	"CallExpression",
	"MemberExpression",
	"AssignmentExpression",
	"Property",
	"ObjectExpression",
	"ArrayExpression",
	"ArrowFunctionExpression",
	"PatternProperty",
	"ObjectPattern",
	"ArrayPattern",
	"Pattern",
	"VariableDeclarator",
	"VariableDeclaration",
	"ExpressionStatement",
	"ReturnStatement",
	"BlockStatement",
	"FunctionDeclaration",
	"ImportSpecifier",
	"ImportDeclaration",
	"ExportSpecifier",
	"ExportNamedDeclaration",
	"ExportDefaultDeclaration",
	"ExportAllDeclaration",
	"Program",
]
