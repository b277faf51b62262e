# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Hindley-Milner type inference for tjs modules.

Entry point is `tjs.tjsc.typecheck.module.infer_module`; the submodules hold
the type representation, substitution, unification and let-polymorphism
helpers it is built from.
"""
