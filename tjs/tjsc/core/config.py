# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Checker configuration and reserved names shared across passes."""

from __future__ import annotations

from dataclasses import dataclass

# Export key used for `export default <expr>` and for default imports.
DEFAULT_EXPORT_NAME = "__default__"
# Imported-name sentinel recorded for `import * as ns from "..."`.
NAMESPACE_IMPORT = "*"

MAX_SUGGESTIONS = 5
SUGGESTION_DISTANCE = 2


@dataclass(frozen=True)
class CheckerConfig:
	"""
	Presentation policy knobs for a build.

	`max_suggestions` and `suggestion_distance` control the "did you mean"
	list attached to undefined-variable errors. `source_suffixes` drives file
	discovery in the CLI.
	"""

	max_suggestions: int = MAX_SUGGESTIONS
	suggestion_distance: int = SUGGESTION_DISTANCE
	source_suffixes: tuple[str, ...] = (".js", ".mjs")

	def __post_init__(self) -> None:
		if self.max_suggestions < 0:
			raise ValueError("max_suggestions must be non-negative")
		if self.suggestion_distance < 0:
			raise ValueError("suggestion_distance must be non-negative")


__all__ = [
	"CheckerConfig",
	"DEFAULT_EXPORT_NAME",
	"NAMESPACE_IMPORT",
	"MAX_SUGGESTIONS",
	"SUGGESTION_DISTANCE",
]
