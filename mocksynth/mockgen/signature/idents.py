# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Names of the synthesized mock struct and its private module."""

from __future__ import annotations

from typing import Optional

from mocksynth.mockgen.parser import ast as A


def gen_mock_ident(ident: A.Ident) -> A.Ident:
	return A.Ident(f"Mock{ident.name}", span=ident.span)


def gen_mod_ident(struct: A.Ident, trait: Optional[A.Ident] = None) -> A.Ident:
	"""
	Module holding a mock's expectation types: `__mock_Foo` for a struct's
	inherent methods, `__mock_Foo_Bar` for its implementation of trait `Bar`.
	"""
	if trait is None:
		return A.Ident(f"__mock_{struct.name}", span=struct.span)
	return A.Ident(f"__mock_{struct.name}_{trait.name}", span=struct.span)


__all__ = ["gen_mock_ident", "gen_mod_ident"]
