# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lexical name resolution.

Checks that every referenced name is declared, that no name is declared
twice anywhere in the active scope stack (shadowing is an error, not a
feature), and that imports only ask for names their source module exports.

The resolver keeps a single error slot. The first error wins; every visit
checks the slot before descending so traversal stops right after it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from tjs.tjsc.core.config import NAMESPACE_IMPORT, CheckerConfig
from tjs.tjsc.core.suggest import suggest_names
from tjs.tjsc.errors import (
	CheckError,
	DuplicateDeclarationError,
	NameNotExportedError,
	UndefinedVariableError,
	UnsupportedError,
)
from tjs.tjsc.modules import SourceModule
from tjs.tjsc.parser.ast import (
	ArrayExpression,
	ArrayPattern,
	ArrowFunctionExpression,
	BinaryExpression,
	BlockStatement,
	CallExpression,
	ConditionalExpression,
	ExportDefaultDeclaration,
	ExportNamedDeclaration,
	ExpressionStatement,
	Identifier,
	ImportDeclaration,
	Literal,
	LogicalExpression,
	Node,
	ObjectExpression,
	ObjectPattern,
	Program,
	ReturnStatement,
	UnaryExpression,
	VariableDeclaration,
)


@dataclass(frozen=True)
class NameCheckResult:
	error: Optional[CheckError] = None

	@property
	def ok(self) -> bool:
		return self.error is None


class NameResolver:
	"""Scope-stack walker for one module."""

	def __init__(
		self,
		exports_by_path: Mapping[str, Sequence[str]],
		config: CheckerConfig | None = None,
	) -> None:
		self._exports_by_path = exports_by_path
		self._config = config or CheckerConfig()
		self._scopes: List[Dict[str, Node]] = [{}]
		self.error: Optional[CheckError] = None
		self._visitors: Dict[type, Callable[[Node], None]] = {
			Program: self._visit_program,
			Identifier: self._visit_identifier,
			Literal: self._visit_literal,
			UnaryExpression: self._visit_unary,
			BinaryExpression: self._visit_binary,
			LogicalExpression: self._visit_binary,
			ConditionalExpression: self._visit_conditional,
			CallExpression: self._visit_call,
			ArrowFunctionExpression: self._visit_arrow,
			ObjectExpression: self._visit_object,
			ArrayExpression: self._visit_array,
			VariableDeclaration: self._visit_var_decl,
			ExportNamedDeclaration: self._visit_export_named,
			ExportDefaultDeclaration: self._visit_export_default,
			ImportDeclaration: self._visit_import,
			BlockStatement: self._visit_block,
			ReturnStatement: self._visit_return,
			ExpressionStatement: self._visit_expr_stmt,
		}

	# --- scope operations -------------------------------------------------

	def declare(self, name: str, node: Node) -> None:
		if self.error is not None:
			return
		for scope in self._scopes:
			if name in scope:
				self.error = DuplicateDeclarationError(name, first_node=scope[name], second_node=node)
				return
		self._scopes[-1][name] = node

	def reference(self, name: str, node: Node) -> None:
		if self.error is not None:
			return
		if any(name in scope for scope in self._scopes):
			return
		suggestions = suggest_names(
			name,
			self.names_in_scope(),
			max_distance=self._config.suggestion_distance,
			limit=self._config.max_suggestions,
		)
		self.error = UndefinedVariableError(name, node, tuple(suggestions))

	def names_in_scope(self) -> List[str]:
		return [name for scope in self._scopes for name in scope]

	def push_scope(self) -> None:
		self._scopes.append({})

	def pop_scope(self) -> None:
		if len(self._scopes) == 1:
			raise RuntimeError("cannot pop the module scope")
		self._scopes.pop()

	# --- traversal ---------------------------------------------------------

	def visit(self, node: Optional[Node]) -> None:
		if self.error is not None or node is None:
			return
		visitor = self._visitors.get(type(node))
		if visitor is None:
			self.error = UnsupportedError(node, stage="namecheck")
			return
		visitor(node)

	def _visit_all(self, nodes: Sequence[Node]) -> None:
		for n in nodes:
			if self.error is not None:
				return
			self.visit(n)

	def _visit_program(self, node: Program) -> None:
		self._visit_all(node.body)

	def _visit_identifier(self, node: Identifier) -> None:
		self.reference(node.name, node)

	def _visit_literal(self, node: Literal) -> None:
		return None

	def _visit_unary(self, node: UnaryExpression) -> None:
		self.visit(node.argument)

	def _visit_binary(self, node: BinaryExpression | LogicalExpression) -> None:
		self.visit(node.left)
		self.visit(node.right)

	def _visit_conditional(self, node: ConditionalExpression) -> None:
		self._visit_all([node.test, node.consequent, node.alternate])

	def _visit_call(self, node: CallExpression) -> None:
		self.visit(node.callee)
		self._visit_all(node.arguments)

	def _visit_arrow(self, node: ArrowFunctionExpression) -> None:
		self.push_scope()
		try:
			for param in node.params:
				if not isinstance(param, Identifier):
					self.error = self.error or UnsupportedError(param, stage="namecheck")
					return
				self.declare(param.name, param)
			self.visit(node.body)
		finally:
			self.pop_scope()

	def _visit_object(self, node: ObjectExpression) -> None:
		self._visit_all([p.value for p in node.properties])

	def _visit_array(self, node: ArrayExpression) -> None:
		self._visit_all(node.elements)

	def _visit_var_decl(self, node: VariableDeclaration) -> None:
		for decl in node.declarations:
			if self.error is not None:
				return
			target = decl.id
			if isinstance(target, Identifier):
				self.declare(target.name, target)
			elif isinstance(target, ObjectPattern):
				for prop in target.properties:
					self.declare(prop.value.name, prop.value)
			elif isinstance(target, ArrayPattern):
				for elem in target.elements:
					self.declare(elem.name, elem)
			else:
				self.error = UnsupportedError(target, stage="namecheck")
				return
			# Declared before the initializer so self-reference resolves.
			self.visit(decl.init)

	def _visit_export_named(self, node: ExportNamedDeclaration) -> None:
		if node.declaration is not None:
			self.visit(node.declaration)
			return
		for spec in node.specifiers:
			self.reference(spec.local.name, spec.local)

	def _visit_export_default(self, node: ExportDefaultDeclaration) -> None:
		self.visit(node.declaration)

	def _visit_import(self, node: ImportDeclaration) -> None:
		exports = self._exports_for(node)
		for spec in node.specifiers:
			if self.error is not None:
				return
			if spec.imported != NAMESPACE_IMPORT and spec.imported not in exports:
				self.error = NameNotExportedError(node, spec, tuple(exports))
				return
			self.declare(spec.local.name, spec.local)

	def _exports_for(self, node: ImportDeclaration) -> Sequence[str]:
		if node.resolved_path is None:
			return ()
		return self._exports_by_path.get(node.resolved_path, ())

	def _visit_block(self, node: BlockStatement) -> None:
		self._visit_all(node.body)

	def _visit_return(self, node: ReturnStatement) -> None:
		self.visit(node.argument)

	def _visit_expr_stmt(self, node: ExpressionStatement) -> None:
		self.visit(node.expression)


def check_module(
	module: SourceModule,
	exports_by_path: Mapping[str, Sequence[str]],
	*,
	config: CheckerConfig | None = None,
) -> NameCheckResult:
	"""Name-check one module; `exports_by_path` holds every workspace module's export names."""
	resolver = NameResolver(exports_by_path, config)
	resolver.visit(module.program)
	return NameCheckResult(resolver.error)


__all__ = ["NameCheckResult", "NameResolver", "check_module"]
