# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
tjsc: static checker for the tjs JavaScript subset.

Pipeline: parse -> dependency graph -> topological order -> per module
(name check -> type inference -> publish interface).
"""

__version__ = "0.1.0"
