# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Expression and binding inference (Algorithm W).

Every `infer_*` function returns the node's type or raises InferenceFailure
with a structured error. Inferred types are recorded on the session's hover
table as they are produced; the module driver applies the final
substitution once the module is done.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Sequence, Tuple

from tjs.tjsc.core.suggest import suggest_names
from tjs.tjsc.errors import (
	ArityMismatch,
	BinaryExpressionMismatch,
	BinaryExpressionUnsupportedType,
	CallError,
	CheckError,
	ConditionalMismatch,
	InfiniteTypeError,
	ParamMismatch,
	UnaryExpressionUnsupportedType,
	UndefinedVariableError,
	UnsupportedError,
)
from tjs.tjsc.parser.ast import (
	ArrowFunctionExpression,
	BinaryExpression,
	BlockStatement,
	CallExpression,
	ConditionalExpression,
	Expr,
	ExpressionStatement,
	Identifier,
	Literal,
	LogicalExpression,
	Node,
	ReturnStatement,
	UnaryExpression,
	VariableDeclaration,
)
from tjs.tjsc.typecheck.generalize import generalize, instantiate
from tjs.tjsc.typecheck.session import InferenceSession
from tjs.tjsc.typecheck.types import BOOLEAN, NULL, NUMBER, STRING, FunctionType, Type
from tjs.tjsc.typecheck.unify import UnificationError, UnifyErrorKind

ARITHMETIC_OPERATORS = frozenset({"+", "-", "*", "/", "%", "**", "|", "&", "^", "<<", ">>", ">>>"})
COMPARISON_OPERATORS = frozenset({"<", ">", "<=", ">="})
EQUALITY_OPERATORS = frozenset({"==", "!=", "===", "!=="})
EQUALITY_OPERAND_TYPES = (NUMBER, STRING, BOOLEAN)

_STAGE = "typecheck"


def infer_expr(session: InferenceSession, node: Expr) -> Type:
	handler = _HANDLERS.get(type(node))
	if handler is None:
		session.fail(UnsupportedError(node, stage=_STAGE))
	return session.record(node, handler(session, node))


def _infer_identifier(session: InferenceSession, node: Identifier) -> Type:
	ty = session.env.lookup(node.name)
	if ty is None:
		cfg = session.config
		suggestions = suggest_names(
			node.name,
			session.env.names(),
			max_distance=cfg.suggestion_distance,
			limit=cfg.max_suggestions,
		)
		session.fail(UndefinedVariableError(node.name, node, tuple(suggestions)))
	return instantiate(ty, session.supply)


def _infer_literal(session: InferenceSession, node: Literal) -> Type:
	value = node.value
	# bool is checked first: it is an int subclass.
	if isinstance(value, bool):
		return BOOLEAN
	if isinstance(value, (int, float)):
		return NUMBER
	if isinstance(value, str):
		return STRING
	if value is None:
		return NULL
	session.fail(UnsupportedError(node, stage=_STAGE))


def _infer_unary(session: InferenceSession, node: UnaryExpression) -> Type:
	if node.operator in ("-", "+", "~"):
		expected = NUMBER
	elif node.operator == "!":
		expected = BOOLEAN
	else:
		session.fail(UnsupportedError(node, stage=_STAGE))
	operand = infer_expr(session, node.argument)
	try:
		session.unify(operand, expected)
	except UnificationError:
		session.fail(UnaryExpressionUnsupportedType(node, session.apply(operand), (expected,)))
	return expected


def _infer_binary(session: InferenceSession, node: BinaryExpression) -> Type:
	op = node.operator
	if op not in ARITHMETIC_OPERATORS and op not in COMPARISON_OPERATORS and op not in EQUALITY_OPERATORS:
		session.fail(UnsupportedError(node, stage=_STAGE))
	left = infer_expr(session, node.left)
	right = infer_expr(session, node.right)
	allowed = EQUALITY_OPERAND_TYPES if op in EQUALITY_OPERATORS else (NUMBER,)
	try:
		session.unify(left, right)
	except UnificationError:
		session.fail(BinaryExpressionMismatch(node, (session.apply(left), session.apply(right)), allowed))
	if op in EQUALITY_OPERATORS:
		return BOOLEAN
	try:
		session.unify(left, NUMBER)
	except UnificationError:
		session.fail(BinaryExpressionUnsupportedType(node, "left", session.apply(left), allowed))
	return NUMBER if op in ARITHMETIC_OPERATORS else BOOLEAN


def _infer_logical(session: InferenceSession, node: LogicalExpression) -> Type:
	if node.operator not in ("&&", "||"):
		session.fail(UnsupportedError(node, stage=_STAGE))
	for side, operand_node in (("left", node.left), ("right", node.right)):
		operand = infer_expr(session, operand_node)
		try:
			session.unify(operand, BOOLEAN)
		except UnificationError:
			session.fail(BinaryExpressionUnsupportedType(node, side, session.apply(operand), (BOOLEAN,)))
	return BOOLEAN


def _infer_conditional(session: InferenceSession, node: ConditionalExpression) -> Type:
	test = infer_expr(session, node.test)
	try:
		session.unify(test, BOOLEAN)
	except UnificationError:
		session.fail(ConditionalMismatch(node, "test", (session.apply(test),)))
	consequent = infer_expr(session, node.consequent)
	alternate = infer_expr(session, node.alternate)
	try:
		session.unify(consequent, alternate)
	except UnificationError:
		session.fail(ConditionalMismatch(node, "branches", (session.apply(consequent), session.apply(alternate))))
	return consequent


def _infer_arrow(session: InferenceSession, node: ArrowFunctionExpression) -> Type:
	with session.env.frame():
		params: List[Type] = []
		for param in node.params:
			if not isinstance(param, Identifier):
				session.fail(UnsupportedError(param, stage=_STAGE))
			var = session.fresh()
			session.env.bind(param.name, var)
			session.record(param, var)
			params.append(var)
		if isinstance(node.body, BlockStatement):
			ret = _infer_block_body(session, node.body)
		else:
			ret = infer_expr(session, node.body)
	return FunctionType(tuple(session.apply(p) for p in params), session.apply(ret))


def _infer_block_body(session: InferenceSession, block: BlockStatement) -> Type:
	"""
	Block bodies are declarations and expression statements ending in
	`return <expr>`; anything else is unsupported.
	"""
	body = block.body
	if not body or not isinstance(body[-1], ReturnStatement) or body[-1].argument is None:
		session.fail(UnsupportedError(block, stage=_STAGE))
	for stmt in body[:-1]:
		if isinstance(stmt, VariableDeclaration):
			infer_variable_declaration(session, stmt)
		elif isinstance(stmt, ExpressionStatement):
			infer_expr(session, stmt.expression)
		else:
			session.fail(UnsupportedError(stmt, stage=_STAGE))
	return infer_expr(session, body[-1].argument)


def _infer_call(session: InferenceSession, node: CallExpression) -> Type:
	callee = infer_expr(session, node.callee)
	args = [infer_expr(session, arg) for arg in node.arguments]
	ret = session.fresh()
	try:
		session.unify(callee, FunctionType(tuple(args), ret))
	except UnificationError as exc:
		session.fail(_diagnose_call(session, node, callee, args, exc))
	return ret


def _diagnose_call(
	session: InferenceSession,
	node: CallExpression,
	callee: Type,
	args: Sequence[Type],
	exc: UnificationError,
) -> CheckError:
	fn_name = node.callee.name if isinstance(node.callee, Identifier) else None
	resolved = session.apply(callee)
	if not isinstance(resolved, FunctionType):
		reason = "not-callable" if exc.kind is UnifyErrorKind.TYPE_MISMATCH else exc.kind.value
		return CallError(node, resolved, reason)
	if len(resolved.params) != len(args):
		return ArityMismatch(node, expected=len(resolved.params), actual=len(args), fn_name=fn_name)
	if exc.kind is UnifyErrorKind.PARAM_MISMATCH and exc.param_index is not None:
		i = exc.param_index
		return ParamMismatch(
			node,
			param_index=i,
			expected_type=resolved.params[i],
			actual_type=session.apply(args[i]),
			fn_name=fn_name,
			argument=node.arguments[i],
		)
	return CallError(node, resolved, exc.kind.value)


def infer_variable_declaration(session: InferenceSession, decl: VariableDeclaration) -> List[Tuple[str, Type]]:
	"""
	Infer each declarator in order and bind its generalized type.

	The name is pre-bound to a fresh variable so a function initializer can
	call itself; generalization then runs against the environment without
	that self binding.
	"""
	bound: List[Tuple[str, Type]] = []
	for declarator in decl.declarations:
		target = declarator.id
		if not isinstance(target, Identifier):
			session.fail(UnsupportedError(target, stage=_STAGE))
		if declarator.init is None:
			session.fail(UnsupportedError(declarator, stage=_STAGE))
		name = target.name
		self_var = session.fresh()
		session.env.bind(name, self_var)
		session.record(target, self_var)
		init = infer_expr(session, declarator.init)
		try:
			session.unify(self_var, init)
		except UnificationError:
			session.fail(InfiniteTypeError(declarator, name, session.apply(init)))
		session.env.unbind(name)
		scheme = generalize(session.env, self_var, session.subst)
		session.env.bind(name, scheme)
		session.record(target, scheme)
		bound.append((name, scheme))
	return bound


_HANDLERS: Dict[type, Callable[[InferenceSession, Node], Type]] = {
	Identifier: _infer_identifier,
	Literal: _infer_literal,
	UnaryExpression: _infer_unary,
	BinaryExpression: _infer_binary,
	LogicalExpression: _infer_logical,
	ConditionalExpression: _infer_conditional,
	ArrowFunctionExpression: _infer_arrow,
	CallExpression: _infer_call,
}


__all__ = [
	"ARITHMETIC_OPERATORS",
	"COMPARISON_OPERATORS",
	"EQUALITY_OPERATORS",
	"infer_expr",
	"infer_variable_declaration",
]
