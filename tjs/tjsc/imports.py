# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Import specifier resolution.

Only relative (`./x.js`, `../x.js`) and absolute (`/x.js`) specifiers name
workspace modules. Everything else is a bare/external reference and never
becomes a dependency. File existence is a caller-supplied predicate so the
core stays free of I/O.
"""

from __future__ import annotations

import posixpath
from typing import Callable, Iterable, Optional

ModuleExists = Callable[[str], bool]


def is_relative_specifier(specifier: str) -> bool:
	return specifier.startswith(".") or specifier.startswith("/")


def resolve_import(specifier: str, importer_path: str, module_exists: ModuleExists) -> Optional[str]:
	"""
	Resolve `specifier` as seen from the module at `importer_path`.

	Returns the normalized absolute path, or None for bare specifiers and for
	local paths that `module_exists` rejects.
	"""
	if not is_relative_specifier(specifier):
		return None
	if specifier.startswith("/"):
		candidate = posixpath.normpath(specifier)
	else:
		candidate = posixpath.normpath(posixpath.join(posixpath.dirname(importer_path), specifier))
	if not module_exists(candidate):
		return None
	return candidate


class ImportResolver:
	"""`resolve_import` with the existence predicate bound once per build."""

	def __init__(self, module_exists: ModuleExists) -> None:
		self._module_exists = module_exists

	def __call__(self, specifier: str, importer_path: str) -> Optional[str]:
		return resolve_import(specifier, importer_path, self._module_exists)

	@classmethod
	def for_paths(cls, paths: Iterable[str]) -> "ImportResolver":
		"""Resolver over an in-memory module set."""
		known = frozenset(posixpath.normpath(p) for p in paths)
		return cls(known.__contains__)


__all__ = ["ModuleExists", "ImportResolver", "is_relative_specifier", "resolve_import"]
