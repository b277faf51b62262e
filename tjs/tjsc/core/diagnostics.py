"""
Common diagnostic structure for the CLI and the editor workspace.

The core passes never build these directly: they return structured error
values (see `tjs.tjsc.errors`) and `tjs.tjsc.report` turns the first failure
of a build into a Diagnostic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from tjs.tjsc.core.span import Span


@dataclass
class Diagnostic:
	"""Represents a checker diagnostic (error/warning/etc.)."""

	message: str
	code: str | None = None
	# Phase label: parse, resolve, cycle, namecheck or typecheck.
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Source location (Span() denotes unknown).
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def to_json(self) -> dict[str, Any]:
		return {
			"phase": self.phase,
			"code": self.code,
			"message": self.message,
			"severity": self.severity,
			"file": self.span.file,
			"line": self.span.line,
			"column": self.span.column,
			"notes": list(self.notes),
		}

	def format(self) -> str:
		"""Plain `file:line:col: phase error: message` rendering used by the CLI."""
		where = self.span.file or "<unknown>"
		if self.span.line is not None:
			where = f"{where}:{self.span.line}:{self.span.column}"
		label = f"{self.phase} {self.severity}" if self.phase else self.severity
		lines = [f"{where}: {label}: {self.message}"]
		lines.extend(f"  note: {n}" for n in self.notes)
		return "\n".join(lines)


__all__ = ["Diagnostic"]
