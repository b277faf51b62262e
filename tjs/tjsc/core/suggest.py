# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Fuzzy "did you mean" suggestions for undefined names."""

from __future__ import annotations

from typing import Iterable

from tjs.tjsc.core.config import MAX_SUGGESTIONS, SUGGESTION_DISTANCE


def edit_distance(a: str, b: str) -> int:
	"""Levenshtein distance between two strings (single-row DP)."""
	if a == b:
		return 0
	if not a:
		return len(b)
	if not b:
		return len(a)
	prev = list(range(len(b) + 1))
	for i, ca in enumerate(a, start=1):
		cur = [i]
		for j, cb in enumerate(b, start=1):
			cost = 0 if ca == cb else 1
			cur.append(min(prev[j] + 1, cur[j - 1] + 1, prev[j - 1] + cost))
		prev = cur
	return prev[-1]


def suggest_names(
	name: str,
	candidates: Iterable[str],
	*,
	max_distance: int = SUGGESTION_DISTANCE,
	limit: int = MAX_SUGGESTIONS,
) -> list[str]:
	"""
	Return candidates within `max_distance` edits of `name`.

	Comparison is case-insensitive. Results are ordered by distance, then
	lexicographically, and truncated to `limit`.
	"""
	needle = name.lower()
	scored: list[tuple[int, str]] = []
	for cand in set(candidates):
		dist = edit_distance(needle, cand.lower())
		if dist <= max_distance:
			scored.append((dist, cand))
	scored.sort()
	return [cand for _, cand in scored[:limit]]


__all__ = ["edit_distance", "suggest_names"]
