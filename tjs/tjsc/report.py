# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Turn structured check errors into Diagnostics.

Messages are plain text; colouring and source excerpts are left to whatever
prints the Diagnostic.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from lark import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from tjs.tjsc.build import PHASE_CYCLE, BuildFailure
from tjs.tjsc.core.config import DEFAULT_EXPORT_NAME
from tjs.tjsc.core.diagnostics import Diagnostic
from tjs.tjsc.core.span import Span
from tjs.tjsc.errors import (
	ArityMismatch,
	BinaryExpressionMismatch,
	BinaryExpressionUnsupportedType,
	CallError,
	CheckError,
	ConditionalMismatch,
	CycleError,
	DuplicateDeclarationError,
	InfiniteTypeError,
	MissingModuleError,
	NameNotExportedError,
	ParamMismatch,
	SyntaxProblem,
	UnaryExpressionUnsupportedType,
	UndefinedVariableError,
	UnsupportedError,
)
from tjs.tjsc.modules import SourceModule
from tjs.tjsc.parser.ast import BinaryExpression, LogicalExpression, UnaryExpression
from tjs.tjsc.parser.parser import ParseError
from tjs.tjsc.typecheck.types import Type, spell

PHASE_PARSE = "parse"
PHASE_RESOLVE = "resolve"


def _types(types: Sequence[Type]) -> str:
	return " | ".join(spell(t) for t in types)


def _operator(node) -> str:
	if isinstance(node, (BinaryExpression, LogicalExpression, UnaryExpression)):
		return node.operator
	return "?"


def _undefined(err: UndefinedVariableError) -> Tuple[str, List[str]]:
	notes = [f"did you mean: {', '.join(err.suggestions)}?"] if err.suggestions else []
	return f"'{err.name}' is not defined", notes


def _duplicate(err: DuplicateDeclarationError) -> Tuple[str, List[str]]:
	first = err.first_node.loc
	return f"'{err.name}' is already declared", [f"first declared at {first.line}:{first.column}"]


def _not_exported(err: NameNotExportedError) -> Tuple[str, List[str]]:
	source = err.import_node.source
	if err.specifier.imported == DEFAULT_EXPORT_NAME:
		msg = f"module '{source}' has no default export"
	else:
		msg = f"'{err.specifier.imported}' is not exported by '{source}'"
	shown = [n if n != DEFAULT_EXPORT_NAME else "default" for n in err.available_exports]
	note = f"available exports: {', '.join(shown)}" if shown else "module exports nothing"
	return msg, [note]


def _unsupported(err: UnsupportedError) -> Tuple[str, List[str]]:
	notes = [f"rejected during {err.stage}"] if err.stage else []
	return f"unsupported syntax: {err.node.kind}", notes


def _binary_mismatch(err: BinaryExpressionMismatch) -> Tuple[str, List[str]]:
	left, right = err.operand_types
	notes = [f"allowed operand types: {_types(err.allowed_types)}"] if err.allowed_types else []
	return f"operands of '{_operator(err.node)}' have different types: {spell(left)} and {spell(right)}", notes


def _binary_unsupported(err: BinaryExpressionUnsupportedType) -> Tuple[str, List[str]]:
	return (
		f"{err.offending_side} operand of '{_operator(err.node)}' has type {spell(err.offending_type)}",
		[f"expected {_types(err.allowed_types)}"],
	)


def _unary_unsupported(err: UnaryExpressionUnsupportedType) -> Tuple[str, List[str]]:
	return (
		f"operand of '{_operator(err.node)}' has type {spell(err.operand_type)}",
		[f"expected {_types(err.allowed_types)}"],
	)


def _arity(err: ArityMismatch) -> Tuple[str, List[str]]:
	callee = f"'{err.fn_name}'" if err.fn_name else "function"
	return f"{callee} expects {err.expected} argument(s) but was called with {err.actual}", []


def _param(err: ParamMismatch) -> Tuple[str, List[str]]:
	callee = f"'{err.fn_name}'" if err.fn_name else "function"
	return (
		f"argument {err.param_index + 1} of {callee} has type {spell(err.actual_type)}",
		[f"expected {spell(err.expected_type)}"],
	)


def _call(err: CallError) -> Tuple[str, List[str]]:
	if err.reason == "not-callable":
		return f"cannot call a value of type {spell(err.callee_type)}", []
	return f"call cannot be typed ({err.reason})", [f"callee type: {spell(err.callee_type)}"]


def _conditional(err: ConditionalMismatch) -> Tuple[str, List[str]]:
	if err.part == "test":
		return f"condition must be boolean, got {_types(err.types)}", []
	return f"branches of conditional have different types: {' and '.join(spell(t) for t in err.types)}", []


def _infinite(err: InfiniteTypeError) -> Tuple[str, List[str]]:
	return f"'{err.name}' would have an infinite type", [f"initializer type: {spell(err.type)}"]


def _cycle(err: CycleError) -> Tuple[str, List[str]]:
	return f"import cycle detected: {' -> '.join(err.path)}", []


def _missing(err: MissingModuleError) -> Tuple[str, List[str]]:
	return f"cannot find module '{err.specifier}'", [f"looked for {err.resolved_path}"]


def _syntax(err: SyntaxProblem) -> Tuple[str, List[str]]:
	return err.message, []


_DESCRIBERS: Dict[type, Callable[..., Tuple[str, List[str]]]] = {
	UndefinedVariableError: _undefined,
	DuplicateDeclarationError: _duplicate,
	NameNotExportedError: _not_exported,
	UnsupportedError: _unsupported,
	BinaryExpressionMismatch: _binary_mismatch,
	BinaryExpressionUnsupportedType: _binary_unsupported,
	UnaryExpressionUnsupportedType: _unary_unsupported,
	ArityMismatch: _arity,
	ParamMismatch: _param,
	CallError: _call,
	ConditionalMismatch: _conditional,
	InfiniteTypeError: _infinite,
	CycleError: _cycle,
	MissingModuleError: _missing,
	SyntaxProblem: _syntax,
}


def describe(error: CheckError) -> Tuple[str, List[str]]:
	"""Message and notes for `error`."""
	return _DESCRIBERS[type(error)](error)


def error_span(error: CheckError, file: Optional[str]) -> Span:
	if isinstance(error, ParamMismatch) and error.argument is not None:
		return Span.from_loc(error.argument.loc, file=file)
	if isinstance(error, SyntaxProblem):
		return Span(file=file, line=error.line, column=error.column)
	node = getattr(error, "node", None)
	if node is None:
		return Span(file=file)
	return Span.from_loc(node.loc, file=file)


def diagnostic_for(error: CheckError, *, phase: str, file: Optional[str]) -> Diagnostic:
	message, notes = describe(error)
	return Diagnostic(
		message=message,
		code=error.code,
		phase=phase,
		severity="error",
		span=error_span(error, file),
		notes=notes,
	)


def diagnostics_for_failure(
	failure: BuildFailure,
	modules: Mapping[str, SourceModule] | None = None,
) -> List[Diagnostic]:
	"""
	Diagnostics for a failed build.

	Cycles yield one diagnostic per module on the cycle, anchored at the
	import that continues it; every other failure yields exactly one.
	"""
	if failure.phase != PHASE_CYCLE or not isinstance(failure.error, CycleError):
		file = failure.module.path if failure.module is not None else None
		return [diagnostic_for(failure.error, phase=failure.phase, file=file)]
	message, _ = describe(failure.error)
	path = failure.error.path
	edges = [f"{a} imports {b}" for a, b in zip(path, path[1:])]
	out: List[Diagnostic] = []
	for a, b in zip(path, path[1:]):
		span = Span(file=a)
		mod = (modules or {}).get(a)
		if mod is not None:
			for imp in mod.imports:
				if imp.resolved_path == b:
					span = Span.from_loc(imp.node.loc, file=a)
					break
		out.append(Diagnostic(message=message, code=CycleError.code, phase=PHASE_CYCLE, span=span, notes=list(edges)))
	return out


def syntax_problem(exc: Exception) -> SyntaxProblem:
	"""Convert a lark or builder syntax error into a SyntaxProblem."""
	if isinstance(exc, ParseError):
		loc = exc.loc
		return SyntaxProblem(str(exc), loc.line if loc else None, loc.column if loc else None)
	if isinstance(exc, UnexpectedToken):
		if exc.token.type == "$END":
			return SyntaxProblem("unexpected end of input", exc.line, exc.column)
		return SyntaxProblem(f"unexpected token {exc.token.value!r}", exc.line, exc.column)
	if isinstance(exc, UnexpectedCharacters):
		return SyntaxProblem(f"unexpected character {exc.char!r}", exc.line, exc.column)
	if isinstance(exc, UnexpectedEOF):
		return SyntaxProblem("unexpected end of input", None, None)
	if isinstance(exc, UnexpectedInput):
		return SyntaxProblem("invalid syntax", getattr(exc, "line", None), getattr(exc, "column", None))
	raise TypeError(f"not a syntax error: {exc!r}")


__all__ = [
	"PHASE_PARSE",
	"PHASE_RESOLVE",
	"describe",
	"diagnostic_for",
	"diagnostics_for_failure",
	"error_span",
	"syntax_problem",
]
