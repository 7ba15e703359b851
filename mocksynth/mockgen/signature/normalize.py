# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Argument normalization for mocked methods.

Generated code forwards every argument by name into the expectation
machinery, so each parameter needs exactly one plain binding. `mut` on a
binding only matters inside the real method body, which a mock does not have;
it is dropped so the generated signature does not trigger unused-mut lints.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence, Tuple

from mocksynth.mockgen.core.diagnostics import Diagnostic, report
from mocksynth.mockgen.parser import ast as A

PHASE = "normalize"

MSG_UNNAMED = "mocked methods must have named arguments"
MSG_BY_REF = "by-reference argument bindings are not supported"
MSG_SUBPAT = "subpattern bindings are not supported"
MSG_PATTERN = "unsupported argument pattern"


def _demutify_arg(arg: A.FnArg, diagnostics: Optional[list[Diagnostic]]) -> A.FnArg:
	if isinstance(arg, A.SelfArg):
		if arg.kind is A.ReceiverKind.VALUE and arg.mutable:
			return replace(arg, mutable=False)
		return arg
	pat = arg.pat
	if isinstance(pat, A.WildPat):
		report(MSG_UNNAMED, diagnostics, pat.span, phase=PHASE)
		return arg
	if not isinstance(pat, A.IdentPat):
		report(MSG_PATTERN, diagnostics, pat.span, phase=PHASE)
		return arg
	ok = True
	if pat.by_ref:
		report(MSG_BY_REF, diagnostics, pat.span, phase=PHASE)
		ok = False
	if pat.subpat is not None:
		report(MSG_SUBPAT, diagnostics, pat.span, phase=PHASE)
		ok = False
	if not ok or not pat.mutable:
		return arg
	return replace(arg, pat=replace(pat, mutable=False))


def demutify_inputs(
	inputs: Sequence[A.FnArg],
	diagnostics: Optional[list[Diagnostic]] = None,
) -> Tuple[A.FnArg, ...]:
	"""
	Return `inputs` with every `mut` binding cleared.

	Rejected bindings (wildcards, `ref x`, `x @ pat`, destructuring patterns)
	are reported and passed through untouched; every argument is checked, so
	one call reports all of a method's problems. Without a diagnostics sink
	the first problem raises RuntimeError.
	"""
	return tuple(_demutify_arg(arg, diagnostics) for arg in inputs)


__all__ = [
	"demutify_inputs",
	"MSG_UNNAMED",
	"MSG_BY_REF",
	"MSG_SUBPAT",
	"MSG_PATTERN",
]
