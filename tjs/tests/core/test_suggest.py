# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from tjs.tjsc.core.config import CheckerConfig
from tjs.tjsc.core.suggest import edit_distance, suggest_names


def test_edit_distance() -> None:
	assert edit_distance("", "abc") == 3
	assert edit_distance("kitten", "sitting") == 3
	assert edit_distance("same", "same") == 0
	assert edit_distance("ab", "ba") == 2


def test_suggestions_sorted_by_distance_then_name() -> None:
	names = ["total", "tota", "tutal", "other", "Total"]
	assert suggest_names("total", names) == ["Total", "total", "tota", "tutal"]


def test_suggestions_are_limited() -> None:
	names = [f"x{i}" for i in range(10)]
	assert suggest_names("x", names) == ["x0", "x1", "x2", "x3", "x4"]
	assert suggest_names("x", names, limit=2) == ["x0", "x1"]


def test_no_candidate_close_enough() -> None:
	assert suggest_names("alpha", ["omega", "beta"], max_distance=1) == []


def test_config_rejects_negative_values() -> None:
	with pytest.raises(ValueError):
		CheckerConfig(max_suggestions=-1)
	with pytest.raises(ValueError):
		CheckerConfig(suggestion_distance=-2)
	assert CheckerConfig().source_suffixes == (".js", ".mjs")
