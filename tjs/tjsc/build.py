# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Workspace build orchestration.

A build takes every parsed module in the workspace, orders them by their
imports and runs name checking then type inference on each, publishing each
module's interface before any importer is checked. The first failure stops
the build and is reported with the phase it came from.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from tjs.tjsc.core.config import CheckerConfig
from tjs.tjsc.errors import CheckError, CycleError
from tjs.tjsc.graph import build_dependency_graph, topological_sort
from tjs.tjsc.modules import SourceModule
from tjs.tjsc.namecheck import check_module
from tjs.tjsc.typecheck.hover import HoverTable
from tjs.tjsc.typecheck.interfaces import InterfaceRegistry
from tjs.tjsc.typecheck.module import infer_module
from tjs.tjsc.typecheck.types import Type

logger = logging.getLogger(__name__)

PHASE_CYCLE = "cycle"
PHASE_NAMECHECK = "namecheck"
PHASE_TYPECHECK = "typecheck"


@dataclass
class ModuleOutput:
	module: SourceModule
	declaration_types: Dict[str, Type]
	interface: Dict[str, Type]
	hover: HoverTable


@dataclass(frozen=True)
class BuildFailure:
	"""`module` is None for cycle failures, which span several modules."""

	phase: str
	error: CheckError
	module: Optional[SourceModule] = None


@dataclass
class BuildResult:
	outputs: Dict[str, ModuleOutput] = field(default_factory=dict)
	registry: InterfaceRegistry = field(default_factory=InterfaceRegistry)
	failure: Optional[BuildFailure] = None
	# Type-inference hover data for the module that failed type checking.
	failed_hover: Optional[HoverTable] = None

	@property
	def ok(self) -> bool:
		return self.failure is None


def build_workspace(
	modules: Mapping[str, SourceModule],
	*,
	config: CheckerConfig | None = None,
) -> BuildResult:
	"""
	Check every module in `modules` (keyed by absolute path).

	Outputs for modules that completed before a failure are kept on the
	result so editors can still answer hover queries for them.
	"""
	config = config or CheckerConfig()
	result = BuildResult()
	exports_by_path = {path: list(mod.exports) for path, mod in modules.items()}

	sort = topological_sort(build_dependency_graph(modules.values()))
	if sort.cycle is not None:
		logger.info("import cycle: %s", " -> ".join(sort.cycle))
		result.failure = BuildFailure(PHASE_CYCLE, CycleError(sort.cycle))
		return result

	for path in sort.order:
		mod = modules.get(path)
		if mod is None:
			# Dependency known only through an import edge; nothing to check.
			continue
		logger.debug("checking %s", mod.relative_path)
		names = check_module(mod, exports_by_path, config=config)
		if names.error is not None:
			logger.info("%s: namecheck failed (%s)", mod.relative_path, names.error.code)
			result.failure = BuildFailure(PHASE_NAMECHECK, names.error, mod)
			return result
		inferred = infer_module(mod, result.registry, config=config)
		if inferred.error is not None:
			logger.info("%s: typecheck failed (%s)", mod.relative_path, inferred.error.code)
			result.failure = BuildFailure(PHASE_TYPECHECK, inferred.error, mod)
			result.failed_hover = inferred.hover
			return result
		result.registry.publish(path, inferred.interface)
		result.outputs[path] = ModuleOutput(
			module=mod,
			declaration_types=inferred.declaration_types,
			interface=inferred.interface,
			hover=inferred.hover,
		)
	logger.info("checked %d module(s)", len(result.outputs))
	return result


__all__ = [
	"PHASE_CYCLE",
	"PHASE_NAMECHECK",
	"PHASE_TYPECHECK",
	"BuildFailure",
	"BuildResult",
	"ModuleOutput",
	"build_workspace",
]
