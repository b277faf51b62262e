# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest
from lark import UnexpectedInput

from tjs.tjsc.core.config import DEFAULT_EXPORT_NAME, NAMESPACE_IMPORT
from tjs.tjsc.parser import ast
from tjs.tjsc.parser import parser as p


def _init(prog: ast.Program, index: int = 0) -> ast.Expr:
	stmt = prog.body[index]
	assert isinstance(stmt, ast.VariableDeclaration)
	init = stmt.declarations[0].init
	assert init is not None
	return init


def test_parse_let_declaration() -> None:
	prog = p.parse_program("let a = 1;")
	assert len(prog.body) == 1
	decl = prog.body[0]
	assert isinstance(decl, ast.VariableDeclaration)
	assert decl.kind_keyword == "let"
	assert isinstance(decl.declarations[0].id, ast.Identifier)
	assert decl.declarations[0].id.name == "a"
	lit = decl.declarations[0].init
	assert isinstance(lit, ast.Literal) and lit.value == 1


def test_parse_multiple_declarators_and_kinds() -> None:
	prog = p.parse_program("const a = 1, b = 'x'; var c = true;")
	first, second = prog.body
	assert first.kind_keyword == "const"
	assert [d.id.name for d in first.declarations] == ["a", "b"]
	assert first.declarations[1].init.value == "x"
	assert second.kind_keyword == "var"
	assert second.declarations[0].init.value is True


def test_semicolons_are_optional() -> None:
	prog = p.parse_program("let a = 1\nlet b = a\n")
	assert [type(s) for s in prog.body] == [ast.VariableDeclaration, ast.VariableDeclaration]


def test_parse_arrow_with_parenthesized_params() -> None:
	fn = _init(p.parse_program("const add = (a, b) => a + b;"))
	assert isinstance(fn, ast.ArrowFunctionExpression)
	assert [prm.name for prm in fn.params] == ["a", "b"]
	assert isinstance(fn.body, ast.BinaryExpression)
	assert fn.body.operator == "+"


def test_parse_arrow_single_and_empty_params() -> None:
	prog = p.parse_program("let id = x => x; let k = () => 1;")
	ident = _init(prog, 0)
	const = _init(prog, 1)
	assert [prm.name for prm in ident.params] == ["x"]
	assert const.params == []


def test_parse_arrow_block_body() -> None:
	fn = _init(p.parse_program("let f = x => { let y = x; return y; };"))
	assert isinstance(fn.body, ast.BlockStatement)
	assert [type(s) for s in fn.body.body] == [ast.VariableDeclaration, ast.ReturnStatement]


def test_parenthesized_object_is_expression_body() -> None:
	fn = _init(p.parse_program("let f = x => ({ a: x, x });"))
	assert isinstance(fn.body, ast.ObjectExpression)
	assert [(prop.key, prop.shorthand) for prop in fn.body.properties] == [("a", False), ("x", True)]


def test_destructuring_arrow_params_become_patterns() -> None:
	fn = _init(p.parse_program("let f = ({ a, b: c }, [d]) => a;"))
	obj, arr = fn.params
	assert isinstance(obj, ast.ObjectPattern)
	assert [(prop.key, prop.value.name) for prop in obj.properties] == [("a", "a"), ("b", "c")]
	assert isinstance(arr, ast.ArrayPattern)
	assert [e.name for e in arr.elements] == ["d"]


def test_parse_declaration_patterns() -> None:
	prog = p.parse_program("let { a, b: c } = o; let [x, y] = arr;")
	obj = prog.body[0].declarations[0].id
	arr = prog.body[1].declarations[0].id
	assert isinstance(obj, ast.ObjectPattern)
	assert [prop.value.name for prop in obj.properties] == ["a", "c"]
	assert isinstance(arr, ast.ArrayPattern)
	assert [e.name for e in arr.elements] == ["x", "y"]


def test_binary_precedence_and_associativity() -> None:
	expr = _init(p.parse_program("let v = 1 + 2 * 3 - 4;"))
	assert expr.operator == "-"
	assert expr.left.operator == "+"
	assert expr.left.right.operator == "*"
	power = _init(p.parse_program("let v = 2 ** 3 ** 2;"))
	assert power.operator == "**"
	assert isinstance(power.left, ast.Literal)
	assert power.right.operator == "**"


def test_comparison_logical_and_conditional() -> None:
	expr = _init(p.parse_program("let v = a < b && c !== d ? x : y;"))
	assert isinstance(expr, ast.ConditionalExpression)
	assert isinstance(expr.test, ast.LogicalExpression)
	assert expr.test.operator == "&&"
	assert expr.test.left.operator == "<"
	assert expr.test.right.operator == "!=="


def test_unary_operators() -> None:
	prog = p.parse_program("let a = -x; let b = !y; let c = typeof z;")
	assert [_init(prog, i).operator for i in range(3)] == ["-", "!", "typeof"]


def test_calls_and_member_access() -> None:
	call = _init(p.parse_program("let r = f(1, g(2))(3);"))
	assert isinstance(call, ast.CallExpression)
	assert isinstance(call.callee, ast.CallExpression)
	assert len(call.callee.arguments) == 2
	member = _init(p.parse_program("let m = a.b[c];"))
	assert isinstance(member, ast.MemberExpression) and member.computed
	assert isinstance(member.object, ast.MemberExpression) and not member.object.computed


def test_parse_import_forms() -> None:
	prog = p.parse_program(
		"""
import a, { b, c as d } from "./m.js";
import * as ns from './n.js';
import "./side.js";
"""
	)
	named, namespace, bare = prog.body
	assert named.source == "./m.js"
	assert [(s.local.name, s.imported, s.form) for s in named.specifiers] == [
		("a", DEFAULT_EXPORT_NAME, "default"),
		("b", "b", "named"),
		("d", "c", "named"),
	]
	assert [(s.local.name, s.imported) for s in namespace.specifiers] == [("ns", NAMESPACE_IMPORT)]
	assert bare.source == "./side.js" and bare.specifiers == []
	assert named.resolved_path is None


def test_parse_export_forms() -> None:
	prog = p.parse_program(
		"""
export const x = 1;
export default x;
export { x as y, x };
export * from "./m.js";
"""
	)
	decl, default, specs, star = prog.body
	assert isinstance(decl, ast.ExportNamedDeclaration) and decl.declaration is not None
	assert isinstance(default, ast.ExportDefaultDeclaration)
	assert isinstance(specs, ast.ExportNamedDeclaration) and specs.declaration is None
	assert [(s.local.name, s.exported) for s in specs.specifiers] == [("x", "y"), ("x", "x")]
	assert isinstance(star, ast.ExportAllDeclaration) and star.source == "./m.js"


def test_export_default_object_literal() -> None:
	prog = p.parse_program("export default { a: 1 };")
	assert isinstance(prog.body[0].declaration, ast.ObjectExpression)


def test_literals_and_escapes() -> None:
	prog = p.parse_program("let a = 0x1f; let b = 1.5e2; let c = null; let d = 'it\\'s\\n';")
	assert _init(prog, 0).value == 31
	assert _init(prog, 1).value == 150.0
	assert _init(prog, 2).value is None
	assert _init(prog, 3).value == "it's\n"


def test_comments_are_ignored() -> None:
	prog = p.parse_program("// leading\nlet a = 1; /* block\ncomment */ let b = 2;")
	assert len(prog.body) == 2


def test_spans_are_one_based_with_exclusive_end() -> None:
	prog = p.parse_program("let a = 1;\nlet bb = a;")
	ident = prog.body[1].declarations[0].id
	assert (ident.loc.line, ident.loc.column, ident.loc.end_line, ident.loc.end_column) == (2, 5, 2, 7)


def test_node_ids_are_unique() -> None:
	prog = p.parse_program("let f = (a, b) => a + b; let r = f(1, 2);")
	fn = _init(prog, 0)
	call = _init(prog, 1)
	ids = [prog.node_id, fn.node_id, fn.body.node_id, call.node_id, *(a.node_id for a in call.arguments)]
	assert len(set(ids)) == len(ids)
	assert all(i > 0 for i in ids)


def test_unsupported_constructs_still_parse() -> None:
	prog = p.parse_program("function f(a) { return a; }\nx = 1;")
	assert isinstance(prog.body[0], ast.FunctionDeclaration)
	assert isinstance(prog.body[1].expression, ast.AssignmentExpression)


def test_syntax_error_rejected() -> None:
	with pytest.raises(UnexpectedInput):
		p.parse_program("let = ;")


def test_invalid_arrow_param_rejected() -> None:
	with pytest.raises(p.ParseError):
		p.parse_program("let f = (1) => 1;")


def test_empty_parens_without_arrow_rejected() -> None:
	with pytest.raises(p.ParseError):
		p.parse_program("let a = ();")


def test_from_and_as_are_ordinary_names() -> None:
	prog = p.parse_program("let from = 1;\nlet as = from;")
	assert [d.declarations[0].id.name for d in prog.body] == ["from", "as"]
	assert _init(prog, 1).name == "from"

	prog = p.parse_program('import { from as as } from "./m.js";')
	(spec,) = prog.body[0].specifiers
	assert (spec.local.name, spec.imported, spec.form) == ("as", "from", "named")


def test_default_in_import_and_export_specifiers() -> None:
	prog = p.parse_program('import { default as d, x } from "./m.js";\nlet y = 1;\nexport { y as default };')
	imp, _, exp = prog.body
	assert [(s.local.name, s.imported, s.form) for s in imp.specifiers] == [
		("d", DEFAULT_EXPORT_NAME, "default"),
		("x", "x", "named"),
	]
	(spec,) = exp.specifiers
	assert (spec.local.name, spec.exported) == ("y", DEFAULT_EXPORT_NAME)

	with pytest.raises(UnexpectedInput):
		p.parse_program("let default = 1;")
	with pytest.raises(UnexpectedInput):
		p.parse_program('import { default } from "./m.js";')


def test_expression_nesting_is_limited() -> None:
	prog = p.parse_program("let a = 1" + " + 1" * 150 + ";")
	assert isinstance(_init(prog), ast.BinaryExpression)

	with pytest.raises(p.ParseError) as info:
		p.parse_program("let a = 1" + " + 1" * 600 + ";")
	assert str(info.value) == "expression is nested too deeply"
	assert info.value.loc.line == 1
	assert p.MAX_EXPRESSION_DEPTH == 200
