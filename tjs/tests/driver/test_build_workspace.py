# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Whole-workspace builds: ordering, interfaces and first-failure reporting."""

from __future__ import annotations

from tjs.tjsc.build import PHASE_CYCLE, PHASE_NAMECHECK, PHASE_TYPECHECK
from tjs.tjsc.core.config import DEFAULT_EXPORT_NAME
from tjs.tjsc.errors import CycleError, NameNotExportedError, ParamMismatch, UndefinedVariableError
from tjs.tjsc.test_helpers import build_sources
from tjs.tjsc.typecheck.types import NUMBER, STRING, FunctionType, spell


def test_types_flow_across_modules() -> None:
	res = build_sources(
		{
			"main.js": """
				import double, { id } from "./math.js";
				let four = double(2);
				let label = id("x");
			""",
			"math.js": """
				export const id = x => x;
				export default n => n * 2;
			""",
		}
	)
	assert res.ok, res.failure
	assert list(res.outputs) == ["/ws/math.js", "/ws/main.js"]
	main = res.outputs["/ws/main.js"]
	assert main.declaration_types == {"four": NUMBER, "label": STRING}
	math = res.registry.get("/ws/math.js")
	assert math[DEFAULT_EXPORT_NAME] == FunctionType((NUMBER,), NUMBER)
	assert spell(math["id"]) == "('a) -> 'a"


def test_transitive_chain_builds_in_dependency_order() -> None:
	res = build_sources(
		{
			"a.js": 'import { b } from "./b.js";\nexport const a = b + 1;',
			"b.js": 'import { c } from "./c.js";\nexport const b = c * 2;',
			"c.js": "export const c = 1;",
		}
	)
	assert res.ok
	assert list(res.outputs) == ["/ws/c.js", "/ws/b.js", "/ws/a.js"]


def test_cycle_stops_the_build() -> None:
	res = build_sources(
		{
			"a.js": 'import { b } from "./b.js";\nexport const a = 1;',
			"b.js": 'import { a } from "./a.js";\nexport const b = 2;',
		}
	)
	assert not res.ok
	assert res.failure.phase == PHASE_CYCLE
	assert isinstance(res.failure.error, CycleError)
	assert res.failure.error.path == ("/ws/a.js", "/ws/b.js", "/ws/a.js")
	assert res.failure.module is None
	assert res.outputs == {}


def test_namecheck_failure_names_the_module() -> None:
	res = build_sources(
		{
			"main.js": 'import { nope } from "./lib.js";',
			"lib.js": "export const yes = 1;",
		}
	)
	assert res.failure.phase == PHASE_NAMECHECK
	assert isinstance(res.failure.error, NameNotExportedError)
	assert res.failure.module.path == "/ws/main.js"
	assert list(res.outputs) == ["/ws/lib.js"]


def test_namecheck_runs_before_inference() -> None:
	res = build_sources({"main.js": "let a = 1 + 'x';\nlet b = missing;"})
	assert res.failure.phase == PHASE_NAMECHECK
	assert isinstance(res.failure.error, UndefinedVariableError)


def test_type_error_in_importer_after_dependency_published() -> None:
	res = build_sources(
		{
			"main.js": 'import { inc } from "./lib.js";\nlet r = inc("one");',
			"lib.js": "export const inc = n => n + 1;",
		}
	)
	assert res.failure.phase == PHASE_TYPECHECK
	err = res.failure.error
	assert isinstance(err, ParamMismatch)
	assert err.fn_name == "inc"
	assert "/ws/lib.js" in res.registry
	assert res.failed_hover is not None


def test_bare_imports_are_ignored() -> None:
	res = build_sources({"main.js": 'import "lodash";\nlet a = 1;'})
	assert res.ok
