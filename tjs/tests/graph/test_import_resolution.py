# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from tjs.tjsc.core.config import DEFAULT_EXPORT_NAME
from tjs.tjsc.imports import ImportResolver, is_relative_specifier, resolve_import
from tjs.tjsc.modules import find_missing_imports
from tjs.tjsc.test_helpers import load_module, load_modules


def _exists(*paths: str):
	known = set(paths)
	return known.__contains__


def test_relative_specifiers_resolve_against_importer_directory() -> None:
	exists = _exists("/ws/lib/util.js", "/ws/shared.js")
	assert resolve_import("./util.js", "/ws/lib/main.js", exists) == "/ws/lib/util.js"
	assert resolve_import("../shared.js", "/ws/lib/main.js", exists) == "/ws/shared.js"
	assert resolve_import("./../lib/./util.js", "/ws/lib/main.js", exists) == "/ws/lib/util.js"


def test_absolute_specifier_is_normalized() -> None:
	assert resolve_import("/ws//lib/../shared.js", "/ws/a.js", _exists("/ws/shared.js")) == "/ws/shared.js"


def test_bare_specifiers_never_resolve() -> None:
	assert not is_relative_specifier("react")
	assert resolve_import("react", "/ws/a.js", lambda p: True) is None


def test_missing_file_does_not_resolve() -> None:
	assert resolve_import("./nope.js", "/ws/a.js", _exists()) is None


def test_resolver_over_known_paths() -> None:
	resolver = ImportResolver.for_paths(["/ws/a.js", "/ws/sub/../b.js"])
	assert resolver("./b.js", "/ws/a.js") == "/ws/b.js"
	assert resolver("./c.js", "/ws/a.js") is None


def test_module_records_imports_and_exports() -> None:
	mods = load_modules(
		{
			"main.js": """
				import def, { x as y } from "./lib.js";
				import * as ns from "./lib.js";
				export const { a, b: c } = def;
				export default y;
				export { a as renamed };
			""",
			"lib.js": "export const x = 1; export default x;",
		}
	)
	main = mods["/ws/main.js"]
	assert main.relative_path == "main.js"
	assert [imp.resolved_path for imp in main.imports] == ["/ws/lib.js", "/ws/lib.js"]
	assert main.imports[0].specifiers == [("def", DEFAULT_EXPORT_NAME), ("y", "x")]
	assert main.imports[1].specifiers == [("ns", "*")]
	assert main.imports[0].node.resolved_path == "/ws/lib.js"
	assert main.exports == ["a", "c", DEFAULT_EXPORT_NAME, "renamed"]
	assert mods["/ws/lib.js"].exports == ["x", DEFAULT_EXPORT_NAME]


def test_source_lines_are_one_based() -> None:
	mod = load_module("let a = 1;\nlet b = 2;\n")
	assert mod.line(2) == "let b = 2;"
	assert mod.line(0) == ""
	assert mod.line(3) == ""


def test_missing_relative_imports_are_reported() -> None:
	mods = load_modules(
		{
			"main.js": 'import { a } from "./gone.js";\nimport lodash from "lodash";\n',
		}
	)
	missing = find_missing_imports(mods.values())
	assert len(missing) == 1
	mod, err = missing[0]
	assert mod.path == "/ws/main.js"
	assert err.specifier == "./gone.js"
	assert err.resolved_path == "/ws/gone.js"
	assert err.node is err.import_node
