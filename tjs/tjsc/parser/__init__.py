# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Reference front end: lark grammar plus the dataclass AST it builds."""

from tjs.tjsc.parser import ast
from tjs.tjsc.parser.parser import ParseError, parse_program

__all__ = ["ast", "ParseError", "parse_program"]
