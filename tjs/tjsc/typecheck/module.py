# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Module-level inference driver.

Walks a module's top-level statements in source order, binds declarations
and imports in the module frame, and collects the export interface. The
first failure aborts the module; its structured error is returned on the
result rather than raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from tjs.tjsc.core.config import DEFAULT_EXPORT_NAME, NAMESPACE_IMPORT, CheckerConfig
from tjs.tjsc.errors import CheckError, NameNotExportedError, UndefinedVariableError, UnsupportedError
from tjs.tjsc.modules import SourceModule
from tjs.tjsc.parser.ast import (
	ExportDefaultDeclaration,
	ExportNamedDeclaration,
	ExpressionStatement,
	ImportDeclaration,
	Stmt,
	VariableDeclaration,
)
from tjs.tjsc.typecheck.expression import infer_expr, infer_variable_declaration
from tjs.tjsc.typecheck.generalize import generalize
from tjs.tjsc.typecheck.hover import HoverTable
from tjs.tjsc.typecheck.interfaces import InterfaceRegistry
from tjs.tjsc.typecheck.session import InferenceFailure, InferenceSession
from tjs.tjsc.typecheck.types import Type, spell

logger = logging.getLogger(__name__)


@dataclass
class ModuleInference:
	"""Outcome of inferring one module."""

	interface: Dict[str, Type] = field(default_factory=dict)
	declaration_types: Dict[str, Type] = field(default_factory=dict)
	hover: HoverTable = field(default_factory=HoverTable)
	error: Optional[CheckError] = None

	@property
	def ok(self) -> bool:
		return self.error is None


def infer_module(
	module: SourceModule,
	registry: InterfaceRegistry,
	*,
	config: CheckerConfig | None = None,
) -> ModuleInference:
	"""
	Infer `module` against the interfaces already in `registry`.

	Every imported module must have been published before this runs; the
	build orders modules so that holds.
	"""
	session = InferenceSession(config)
	result = ModuleInference(hover=session.hover)
	try:
		for stmt in module.program.body:
			_infer_statement(session, stmt, registry, result)
	except InferenceFailure as failure:
		result.error = failure.error
	session.hover.finalize(session.subst)
	if result.ok:
		for name, ty in result.declaration_types.items():
			logger.debug("%s: %s : %s", module.relative_path, name, spell(ty))
	return result


def _infer_statement(
	session: InferenceSession,
	stmt: Stmt,
	registry: InterfaceRegistry,
	result: ModuleInference,
) -> None:
	if isinstance(stmt, VariableDeclaration):
		result.declaration_types.update(infer_variable_declaration(session, stmt))
		return
	if isinstance(stmt, ExportNamedDeclaration):
		if stmt.declaration is not None:
			bound = infer_variable_declaration(session, stmt.declaration)
			result.declaration_types.update(bound)
			result.interface.update(bound)
			return
		for spec in stmt.specifiers:
			ty = session.env.lookup(spec.local.name)
			if ty is None:
				session.fail(UndefinedVariableError(spec.local.name, spec.local))
			session.record(spec.local, ty)
			result.interface[spec.exported] = ty
		return
	if isinstance(stmt, ExportDefaultDeclaration):
		ty = generalize(session.env, infer_expr(session, stmt.declaration), session.subst)
		session.env.bind(DEFAULT_EXPORT_NAME, ty)
		result.declaration_types[DEFAULT_EXPORT_NAME] = ty
		result.interface[DEFAULT_EXPORT_NAME] = ty
		return
	if isinstance(stmt, ImportDeclaration):
		_bind_import(session, stmt, registry)
		return
	if isinstance(stmt, ExpressionStatement):
		infer_expr(session, stmt.expression)
		return
	session.fail(UnsupportedError(stmt, stage="typecheck"))


def _bind_import(session: InferenceSession, stmt: ImportDeclaration, registry: InterfaceRegistry) -> None:
	if not stmt.specifiers:
		return
	interface = registry.get(stmt.resolved_path) if stmt.resolved_path is not None else None
	if interface is None and stmt.resolved_path is not None:
		raise RuntimeError(f"interface for {stmt.resolved_path} requested before it was published")
	for spec in stmt.specifiers:
		if spec.imported == NAMESPACE_IMPORT:
			session.fail(UnsupportedError(spec, stage="typecheck"))
		ty = interface.get(spec.imported) if interface is not None else None
		if ty is None:
			available = tuple(interface) if interface is not None else ()
			session.fail(NameNotExportedError(stmt, spec, available))
		session.env.bind(spec.local.name, ty)
		session.record(spec.local, ty)


__all__ = ["ModuleInference", "infer_module"]
