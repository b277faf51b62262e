# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Shared primitives for tjsc passes (spans, diagnostics, configuration)."""
