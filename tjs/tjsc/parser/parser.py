from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional

from lark import Lark, Token, Tree

from tjs.tjsc.core.config import DEFAULT_EXPORT_NAME, NAMESPACE_IMPORT
from tjs.tjsc.parser.ast import (
	ArrayExpression,
	ArrayPattern,
	ArrowFunctionExpression,
	AssignmentExpression,
	BinaryExpression,
	BlockStatement,
	CallExpression,
	ConditionalExpression,
	ExportAllDeclaration,
	ExportDefaultDeclaration,
	ExportNamedDeclaration,
	ExportSpecifier,
	Expr,
	ExpressionStatement,
	FunctionDeclaration,
	Identifier,
	ImportDeclaration,
	ImportSpecifier,
	Literal,
	Located,
	LogicalExpression,
	MemberExpression,
	Node,
	ObjectExpression,
	ObjectPattern,
	PatternProperty,
	Program,
	Property,
	ReturnStatement,
	Stmt,
	UnaryExpression,
	VariableDeclaration,
	VariableDeclarator,
)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}
_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)

# Deeper expressions are rejected before later phases recurse over them.
MAX_EXPRESSION_DEPTH = 200


class ParseError(ValueError):
	"""
	User-facing syntax error raised by the AST builder (not by the grammar).

	The cover grammar for `( ... )` accepts more than JavaScript does; the
	builder rejects what cannot be a parenthesized expression or an arrow
	parameter list. Drivers report it like a lark syntax error.
	"""

	def __init__(self, message: str, *, loc: Optional[Located]) -> None:
		super().__init__(message)
		self.loc = loc


class BlockBracePostLex:
	"""Retype `{` after `=>` or `)` so block bodies never look like object literals."""

	always_accept = ()

	def process(self, stream):
		prev_type: Optional[str] = None
		for token in stream:
			if token.type == "_LBRACE" and prev_type in ("_ARROW", "_RPAR"):
				token = Token.new_borrow_pos("_BLOCK_LBRACE", token.value, token)
			prev_type = token.type
			yield token


_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="program",
	propagate_positions=True,
	maybe_placeholders=False,
	postlex=BlockBracePostLex(),
)


def parse_program(source: str) -> Program:
	"""
	Parse a module's source text into a Program.

	Raises `lark.UnexpectedInput` for grammar-level syntax errors and
	`ParseError` for constructs the builder rejects. Node ids are assigned in
	construction order, starting at 1, and are unique within the Program.
	"""
	tree = _PARSER.parse(source)
	try:
		return _AstBuilder().build_program(tree)
	except RecursionError:
		raise ParseError("program is nested too deeply", loc=None) from None


class _AstBuilder:
	def __init__(self) -> None:
		self._last_id = 0
		self._depth = 0

	def _id(self) -> int:
		self._last_id += 1
		return self._last_id

	# --- statements --------------------------------------------------------

	def build_program(self, tree: Tree) -> Program:
		body = [self._build_stmt(child) for child in tree.children]
		loc = _loc(tree) if not tree.meta.empty else Located(1, 1, 1, 1)
		return Program(body=body, loc=loc, node_id=self._id())

	def _build_stmt(self, tree: Tree) -> Stmt:
		kind = _name(tree)
		if kind == "var_decl":
			return self._build_var_decl(tree)
		if kind == "expr_stmt":
			return ExpressionStatement(
				expression=self._build_expr(tree.children[0]), loc=_loc(tree), node_id=self._id()
			)
		if kind == "return_stmt":
			arg = self._build_expr(tree.children[0]) if tree.children else None
			return ReturnStatement(argument=arg, loc=_loc(tree), node_id=self._id())
		if kind == "block":
			return self._build_block(tree)
		if kind == "function_decl":
			*names, body = tree.children
			ident, *params = [self._build_identifier(n) for n in names]
			return FunctionDeclaration(
				id=ident, params=params, body=self._build_block(body), loc=_loc(tree), node_id=self._id()
			)
		if kind == "import_decl":
			return self._build_import(tree)
		if kind == "export_declaration":
			decl = self._build_var_decl(tree.children[0])
			return ExportNamedDeclaration(declaration=decl, specifiers=[], loc=_loc(tree), node_id=self._id())
		if kind == "export_specifiers":
			specs = [self._build_export_spec(s) for s in tree.children]
			return ExportNamedDeclaration(declaration=None, specifiers=specs, loc=_loc(tree), node_id=self._id())
		if kind == "export_default":
			return ExportDefaultDeclaration(
				declaration=self._build_expr(tree.children[0]), loc=_loc(tree), node_id=self._id()
			)
		if kind == "export_all":
			source_tok = tree.children[-1]
			return ExportAllDeclaration(source=_decode_string(source_tok), loc=_loc(tree), node_id=self._id())
		raise ParseError(f"unexpected statement '{kind}'", loc=_loc(tree))

	def _build_block(self, tree: Tree) -> BlockStatement:
		body = [self._build_stmt(child) for child in tree.children]
		return BlockStatement(body=body, loc=_loc(tree), node_id=self._id())

	def _build_var_decl(self, tree: Tree) -> VariableDeclaration:
		keyword, *declarators = tree.children
		decls: List[VariableDeclarator] = []
		for d in declarators:
			target = self._build_binding(d.children[0])
			init = self._build_expr(d.children[1]) if len(d.children) > 1 else None
			decls.append(VariableDeclarator(id=target, init=init, loc=_loc(d), node_id=self._id()))
		return VariableDeclaration(
			kind_keyword=keyword.value, declarations=decls, loc=_loc(tree), node_id=self._id()
		)

	def _build_binding(self, tree: Tree) -> Node:
		kind = _name(tree)
		if kind == "name":
			return self._build_identifier(tree)
		if kind == "object_pattern":
			props = []
			for prop in tree.children:
				names = [self._build_identifier(n) for n in prop.children]
				props.append(
					PatternProperty(key=names[0].name, value=names[-1], loc=_loc(prop), node_id=self._id())
				)
			return ObjectPattern(properties=props, loc=_loc(tree), node_id=self._id())
		if kind == "array_pattern":
			elems = [self._build_identifier(n) for n in tree.children]
			return ArrayPattern(elements=elems, loc=_loc(tree), node_id=self._id())
		raise ParseError(f"unexpected binding target '{kind}'", loc=_loc(tree))

	def _build_import(self, tree: Tree) -> ImportDeclaration:
		*clauses, source_tok = tree.children
		specs: List[ImportSpecifier] = []
		for clause in clauses:
			kind = _name(clause)
			if kind == "default_import":
				local = self._build_identifier(clause.children[0])
				specs.append(
					ImportSpecifier(
						local=local, imported=DEFAULT_EXPORT_NAME, form="default", loc=_loc(clause), node_id=self._id()
					)
				)
			elif kind == "namespace_import":
				local = self._build_identifier(clause.children[-1])
				specs.append(
					ImportSpecifier(
						local=local, imported=NAMESPACE_IMPORT, form="namespace", loc=_loc(clause), node_id=self._id()
					)
				)
			elif kind == "named_imports":
				for spec in clause.children:
					head = spec.children[0]
					local = self._build_identifier(spec.children[-1])
					if _name(head) == "default_name":
						# `{ default as x }` is the default import spelled out.
						imported, form = DEFAULT_EXPORT_NAME, "default"
					else:
						imported, form = _name_value(head), "named"
					specs.append(
						ImportSpecifier(local=local, imported=imported, form=form, loc=_loc(spec), node_id=self._id())
					)
		return ImportDeclaration(
			source=_decode_string(source_tok), specifiers=specs, loc=_loc(tree), node_id=self._id()
		)

	def _build_export_spec(self, tree: Tree) -> ExportSpecifier:
		local = self._build_identifier(tree.children[0])
		tail = tree.children[-1]
		exported = DEFAULT_EXPORT_NAME if _name(tail) == "default_name" else _name_value(tail)
		return ExportSpecifier(local=local, exported=exported, loc=_loc(tree), node_id=self._id())

	# --- expressions -------------------------------------------------------

	def _build_identifier(self, tree: Tree) -> Identifier:
		tok = tree.children[0]
		return Identifier(name=tok.value, loc=_loc_from_token(tok), node_id=self._id())

	def _build_expr(self, tree: Tree | Token) -> Expr:
		self._depth += 1
		try:
			if self._depth > MAX_EXPRESSION_DEPTH:
				loc = _loc_from_token(tree) if isinstance(tree, Token) else _loc(tree)
				raise ParseError("expression is nested too deeply", loc=loc)
			return self._build_expr_node(tree)
		finally:
			self._depth -= 1

	def _build_expr_node(self, tree: Tree | Token) -> Expr:
		if isinstance(tree, Token):
			raise ParseError(f"unexpected token {tree.value!r}", loc=_loc_from_token(tree))
		kind = _name(tree)
		if kind == "name":
			return self._build_identifier(tree)
		if kind == "literal":
			return self._build_literal(tree.children[0])
		if kind == "paren":
			if len(tree.children) != 1:
				raise ParseError("expected an expression inside parentheses", loc=_loc(tree))
			return self._build_expr(tree.children[0])
		if kind == "binary_expr":
			left, op, right = tree.children
			return BinaryExpression(
				operator=op.value,
				left=self._build_expr(left),
				right=self._build_expr(right),
				loc=_loc(tree),
				node_id=self._id(),
			)
		if kind == "logical_expr":
			left, op, right = tree.children
			return LogicalExpression(
				operator=op.value,
				left=self._build_expr(left),
				right=self._build_expr(right),
				loc=_loc(tree),
				node_id=self._id(),
			)
		if kind == "unary_expr":
			op, arg = tree.children
			return UnaryExpression(
				operator=op.value, argument=self._build_expr(arg), loc=_loc(tree), node_id=self._id()
			)
		if kind == "conditional_expr":
			test, cons, alt = (self._build_expr(c) for c in tree.children)
			return ConditionalExpression(
				test=test, consequent=cons, alternate=alt, loc=_loc(tree), node_id=self._id()
			)
		if kind == "call_expr":
			callee, *args = tree.children
			return CallExpression(
				callee=self._build_expr(callee),
				arguments=[self._build_expr(a) for a in args],
				loc=_loc(tree),
				node_id=self._id(),
			)
		if kind == "member_expr":
			obj, prop_tok = tree.children
			prop = Identifier(name=prop_tok.value, loc=_loc_from_token(prop_tok), node_id=self._id())
			return MemberExpression(
				object=self._build_expr(obj), property=prop, computed=False, loc=_loc(tree), node_id=self._id()
			)
		if kind == "index_expr":
			obj, index = tree.children
			return MemberExpression(
				object=self._build_expr(obj),
				property=self._build_expr(index),
				computed=True,
				loc=_loc(tree),
				node_id=self._id(),
			)
		if kind == "assignment":
			target, value = tree.children
			return AssignmentExpression(
				target=self._build_expr(target), value=self._build_expr(value), loc=_loc(tree), node_id=self._id()
			)
		if kind == "arrow_fn":
			return self._build_arrow(tree)
		if kind == "object":
			return self._build_object(tree)
		if kind == "array":
			return ArrayExpression(
				elements=[self._build_expr(c) for c in tree.children], loc=_loc(tree), node_id=self._id()
			)
		raise ParseError(f"unexpected expression '{kind}'", loc=_loc(tree))

	def _build_literal(self, tok: Token) -> Literal:
		value: object
		if tok.type == "NUMBER":
			text = tok.value
			if text[:2] in ("0x", "0X"):
				value = int(text, 16)
			elif any(c in text for c in ".eE"):
				value = float(text)
			else:
				value = int(text)
		elif tok.type == "STRING":
			value = _decode_string(tok)
		elif tok.type == "TRUE":
			value = True
		elif tok.type == "FALSE":
			value = False
		else:
			value = None
		return Literal(value=value, raw=tok.value, loc=_loc_from_token(tok), node_id=self._id())

	def _build_object(self, tree: Tree) -> ObjectExpression:
		props: List[Property] = []
		for prop in tree.children:
			if _name(prop) == "shorthand_property":
				value = self._build_identifier(prop.children[0])
				props.append(Property(key=value.name, value=value, shorthand=True, loc=_loc(prop), node_id=self._id()))
				continue
			key_node, value_node = prop.children
			key = _decode_string(key_node) if isinstance(key_node, Token) else _name_value(key_node)
			props.append(
				Property(
					key=key, value=self._build_expr(value_node), shorthand=False, loc=_loc(prop), node_id=self._id()
				)
			)
		return ObjectExpression(properties=props, loc=_loc(tree), node_id=self._id())

	def _build_arrow(self, tree: Tree) -> ArrowFunctionExpression:
		head, body = tree.children
		if _name(head) == "name":
			params: List[Node] = [self._build_identifier(head)]
		else:
			params = [self._to_param(self._build_expr(c)) for c in head.children]
		built_body: Expr | BlockStatement
		if _name(body) == "block":
			built_body = self._build_block(body)
		else:
			built_body = self._build_expr(body)
		return ArrowFunctionExpression(params=params, body=built_body, loc=_loc(tree), node_id=self._id())

	def _to_param(self, expr: Expr) -> Node:
		"""Reinterpret a cover-grammar element as an arrow parameter."""
		if isinstance(expr, Identifier):
			return expr
		if isinstance(expr, ObjectExpression) and all(isinstance(p.value, Identifier) for p in expr.properties):
			props = [
				PatternProperty(key=p.key, value=p.value, loc=p.loc, node_id=self._id())  # type: ignore[arg-type]
				for p in expr.properties
			]
			return ObjectPattern(properties=props, loc=expr.loc, node_id=self._id())
		if isinstance(expr, ArrayExpression) and all(isinstance(e, Identifier) for e in expr.elements):
			return ArrayPattern(elements=list(expr.elements), loc=expr.loc, node_id=self._id())  # type: ignore[arg-type]
		raise ParseError("invalid arrow function parameter", loc=expr.loc)


def _decode_string(tok: Token | Tree) -> str:
	raw = tok.value if isinstance(tok, Token) else _name_value(tok)
	body = raw[1:-1]
	return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), body)


def _name_value(tree: Tree) -> str:
	"""Text of a `name` subtree."""
	return tree.children[0].value


def _loc(tree: Tree) -> Located:
	meta = tree.meta
	return Located(line=meta.line, column=meta.column, end_line=meta.end_line, end_column=meta.end_column)


def _loc_from_token(token: Token) -> Located:
	return Located(line=token.line, column=token.column, end_line=token.end_line, end_column=token.end_column)


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)


__all__ = ["MAX_EXPRESSION_DEPTH", "ParseError", "parse_program"]
