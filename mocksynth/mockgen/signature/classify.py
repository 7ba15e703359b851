# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Method signature classification.

`classify_method` turns one declared method into everything the emitter
needs to generate its expectation plumbing:

  * whether it is static (no receiver) and whether it has its own generics,
  * the names of its expectation types,
  * `call` vs `call_mut` dispatch, chosen by the mutability of a returned
    reference,
  * positional stand-in arguments (`p0`, `p1`, ...) plus the expressions that
    hand each real argument to a matcher by reference.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from mocksynth.mockgen.core.diagnostics import Diagnostic, report
from mocksynth.mockgen.parser import ast as A
from mocksynth.mockgen.rewrite import deimplify
from .generics import merge_generics
from .normalize import demutify_inputs

PHASE = "classify"

STATIC_LIFETIME = "static"
# `'_` names whichever lifetime elision would pick.
ELIDED_LIFETIME = "_"
EXPECTATION = "Expectation"
EXPECTATIONS = "Expectations"
GENERIC_EXPECTATIONS = "GenericExpectations"


class CallKind(Enum):
	"""Which expectation entry point a mocked method dispatches through."""

	CALL = "call"
	CALL_MUT = "call_mut"


@dataclass(frozen=True)
class MethodTypes:
	"""Derived facts about one mocked method."""

	is_static: bool
	is_generic: bool
	# `foo::Expectation<T>`: one expectation of this method.
	expectation: A.TypeExpr
	# `foo::Expectations` or `foo::GenericExpectations`.
	expectations: A.TypeExpr
	# Type of the field holding the expectations on the mock struct.
	expect_obj: A.TypeExpr
	call: CallKind
	# Arguments with positional names, references stripped to their pointee.
	altargs: Tuple[A.CapturedArg, ...]
	# One expression per argument, each exactly one reference deep.
	matchexprs: Tuple[A.Expr, ...]
	# Types of `matchexprs`, in the same order.
	match_types: Tuple[A.TypeExpr, ...]
	# Declared argument types, receiver excluded.
	arg_types: Tuple[A.TypeExpr, ...]
	# Inputs after normalization (receiver `mut` and binding `mut` cleared).
	inputs: Tuple[A.FnArg, ...]
	# Return type after `impl Trait` erasure; None for unit.
	output: Optional[A.TypeExpr]


def _names(ident: A.Ident, last: str, type_args: Tuple[A.GenericArg, ...]) -> A.PathType:
	args = A.AngleArgs(args=type_args) if type_args else None
	path = A.Path(segments=(A.PathSegment(ident=ident), A.PathSegment(ident=A.Ident(last, span=ident.span), args=args)))
	return A.PathType(path=path, span=ident.span)


def _call_kind(output: Optional[A.TypeExpr], diagnostics: Optional[list[Diagnostic]]) -> CallKind:
	if not isinstance(output, A.RefType):
		return CallKind.CALL
	if output.lifetime not in (None, STATIC_LIFETIME, ELIDED_LIFETIME):
		report("non-'static non-'self lifetimes are not yet supported", diagnostics, output.span, phase=PHASE)
	return CallKind.CALL_MUT if output.mutable else CallKind.CALL


def classify_method(
	sig: A.MethodSig,
	generics: Optional[A.Generics] = None,
	*,
	diagnostics: Optional[list[Diagnostic]] = None,
) -> MethodTypes:
	"""
	Classify `sig`, optionally declared inside an item with `generics`.

	Problems (unsupported bindings, borrowed returns with a named lifetime)
	are reported and classification carries on with what it can use.
	"""
	inputs = demutify_inputs(sig.inputs, diagnostics)
	merged = merge_generics(generics, sig.generics) if generics is not None else sig.generics
	type_args = merged.type_args()
	is_generic = bool(sig.generics.params)

	is_static = True
	altargs: List[A.CapturedArg] = []
	matchexprs: List[A.Expr] = []
	match_types: List[A.TypeExpr] = []
	arg_types: List[A.TypeExpr] = []
	for i, arg in enumerate(inputs):
		if isinstance(arg, A.SelfArg):
			is_static = False
			continue
		arg_types.append(arg.ty)
		# Other patterns were already reported by the normalizer.
		if not isinstance(arg.pat, A.IdentPat):
			continue
		expr = A.PathExpr(ident=arg.pat.ident, span=arg.pat.span)
		if isinstance(arg.ty, A.RefType):
			matchexprs.append(expr)
			match_types.append(arg.ty)
			alt_ty = arg.ty.elem
		else:
			matchexprs.append(A.RefExpr(expr=expr, span=arg.span))
			match_types.append(A.RefType(elem=arg.ty, span=arg.ty.span))
			alt_ty = arg.ty
		alt = A.IdentPat(ident=A.Ident(f"p{i}", span=arg.span), span=arg.span)
		altargs.append(A.CapturedArg(pat=alt, ty=alt_ty, span=arg.span))

	output = deimplify(sig.output)
	call = _call_kind(output, diagnostics)

	expectations = _names(sig.ident, GENERIC_EXPECTATIONS if is_generic else EXPECTATIONS, ())
	if is_generic:
		expect_obj = expectations
	else:
		expect_obj = _names(sig.ident, EXPECTATIONS, type_args)

	return MethodTypes(
		is_static=is_static,
		is_generic=is_generic,
		expectation=_names(sig.ident, EXPECTATION, type_args),
		expectations=expectations,
		expect_obj=expect_obj,
		call=call,
		altargs=tuple(altargs),
		matchexprs=tuple(matchexprs),
		match_types=tuple(match_types),
		arg_types=tuple(arg_types),
		inputs=inputs,
		output=output,
	)


__all__ = ["CallKind", "MethodTypes", "classify_method"]
