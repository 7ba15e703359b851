# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Type-expression rewrite passes.

Pipeline placement (per method, driven by `mockgen.plan_item`):

  return type: deimplify -> deselfify -> supersuperfy
  argument types:                        supersuperfy

Passes:
  * `deimplify`: `impl A + B` in return position becomes `Box<dyn A + B>`.
    Only the top-level return type is touched, and it must run before any
    other pass sees that type.
  * `Deselfify`: `Self` becomes the mock's own type name, so constructor-like
    methods (`fn new() -> Self`) return the mock.
  * `Supersuperfy`: `super::X` becomes `super::super::super::X` for items that
    are emitted two modules deeper than their declaration.

All passes are copy-on-write: the input tree is never modified and subtrees a
pass leaves alone are shared with the output (a pass that changes nothing
returns the very same object).

Shapes a pass cannot see inside (macro invocations, verbatim tokens) are
reported as diagnostics. Two shapes are hard errors instead: `impl Trait`
reaching a walking pass means the driver ran the passes out of order, and
bare `fn(..)` types are not implemented yet. `has_impl_trait` lets the driver
find argument-position `impl Trait` before handing a type to a pass.
"""

from __future__ import annotations

from dataclasses import replace
from enum import Enum
from typing import Optional, Sequence, Tuple, TypeVar

from mocksynth.mockgen.core.diagnostics import Diagnostic, report
from mocksynth.mockgen.parser import ast as A

_T = TypeVar("_T")

SELF_TYPE = "Self"
SUPER = "super"


def _same(old: Sequence[object], new: Sequence[object]) -> bool:
	return len(old) == len(new) and all(a is b for a, b in zip(old, new))


def _keep(old: Tuple[_T, ...], new: Sequence[_T]) -> Tuple[_T, ...]:
	"""Return `old` when every element survived unchanged, else the new tuple."""
	return old if _same(old, new) else tuple(new)


class TypeRewriter:
	"""
	Structural walk over a type expression that rebuilds only what changed.

	Subclasses hook `rewrite_segment`, `rewrite_path` or individual
	`_visit_type_*` methods. Dispatch is by node class name; a node class with
	no visitor is an internal error.
	"""

	phase = "rewrite"
	# Message for shapes the walker cannot look inside.
	opaque_message = "type `{text}` is not supported in this position"

	def __init__(self, diagnostics: Optional[list[Diagnostic]] = None) -> None:
		self.diagnostics = diagnostics

	# Public entry point -------------------------------------------------

	def rewrite(self, ty: A.TypeExpr) -> A.TypeExpr:
		method = getattr(self, f"_visit_type_{type(ty).__name__}", None)
		if method is None:
			raise NotImplementedError(f"No rewrite for type {type(ty).__name__}")
		return method(ty)

	def _report(self, msg: str, span) -> None:
		report(msg, self.diagnostics, span, phase=self.phase)

	# Paths --------------------------------------------------------------

	def rewrite_path(self, path: A.Path) -> A.Path:
		segments = [self.rewrite_segment(seg) for seg in path.segments]
		if _same(path.segments, segments):
			return path
		return replace(path, segments=tuple(segments))

	def rewrite_segment(self, seg: A.PathSegment) -> A.PathSegment:
		args = seg.args
		if isinstance(args, A.AngleArgs):
			new_args = _keep(args.args, [self.rewrite_generic_arg(a) for a in args.args])
			if new_args is not args.args:
				return replace(seg, args=A.AngleArgs(args=new_args))
		elif isinstance(args, A.ParenArgs):
			inputs = _keep(args.inputs, [self.rewrite(t) for t in args.inputs])
			output = self.rewrite(args.output) if args.output is not None else None
			if inputs is not args.inputs or output is not args.output:
				return replace(seg, args=A.ParenArgs(inputs=inputs, output=output))
		return seg

	def rewrite_generic_arg(self, arg: A.GenericArg) -> A.GenericArg:
		if isinstance(arg, A.TypeArg):
			ty = self.rewrite(arg.ty)
			return arg if ty is arg.ty else A.TypeArg(ty)
		if isinstance(arg, A.BindingArg):
			ty = self.rewrite(arg.ty)
			return arg if ty is arg.ty else replace(arg, ty=ty)
		return arg

	def rewrite_bound(self, bound: A.TypeParamBound) -> A.TypeParamBound:
		if isinstance(bound, A.TraitBound):
			path = self.rewrite_path(bound.path)
			return bound if path is bound.path else replace(bound, path=path)
		return bound

	# Visitors -----------------------------------------------------------

	def _visit_elem(self, ty):
		elem = self.rewrite(ty.elem)
		return ty if elem is ty.elem else replace(ty, elem=elem)

	_visit_type_SliceType = _visit_elem
	_visit_type_ArrayType = _visit_elem
	_visit_type_PtrType = _visit_elem
	_visit_type_RefType = _visit_elem
	_visit_type_ParenType = _visit_elem
	_visit_type_GroupType = _visit_elem

	def _visit_type_TupleType(self, ty: A.TupleType) -> A.TypeExpr:
		elems = _keep(ty.elems, [self.rewrite(t) for t in ty.elems])
		return ty if elems is ty.elems else replace(ty, elems=elems)

	def _visit_type_PathType(self, ty: A.PathType) -> A.TypeExpr:
		if ty.qself is not None:
			self._report("qualified-self paths are not supported", ty.span)
		path = self.rewrite_path(ty.path)
		if path is ty.path:
			return ty
		qself = ty.qself
		if qself is not None:
			# Segments added in front belong to the trait part of the path.
			qself = replace(qself, position=qself.position + len(path.segments) - len(ty.path.segments))
		return replace(ty, path=path, qself=qself)

	def _visit_type_TraitObjectType(self, ty: A.TraitObjectType) -> A.TypeExpr:
		bounds = _keep(ty.bounds, [self.rewrite_bound(b) for b in ty.bounds])
		return ty if bounds is ty.bounds else replace(ty, bounds=bounds)

	def _visit_type_BareFnType(self, ty: A.BareFnType) -> A.TypeExpr:
		raise NotImplementedError("function pointer types are not supported by mockgen rewrite passes yet")

	def _visit_type_ImplTraitType(self, ty: A.ImplTraitType) -> A.TypeExpr:
		raise AssertionError("impl Trait reached a rewrite pass; deimplify must run on the return type first (driver bug)")

	def _visit_leaf(self, ty):
		return ty

	_visit_type_InferType = _visit_leaf
	_visit_type_NeverType = _visit_leaf

	def _visit_opaque(self, ty):
		self._report(self.opaque_message.format(text=ty.text), ty.span)
		return ty

	_visit_type_MacroType = _visit_opaque
	_visit_type_VerbatimType = _visit_opaque


def deimplify(output: Optional[A.TypeExpr]) -> Optional[A.TypeExpr]:
	"""
	Replace an `impl Trait` return type with `Box<dyn Trait>`.

	A stored return value needs a nameable type; the user-supplied return
	closure boxes whatever concrete type it produces. Only the top-level type
	is inspected.
	"""
	if not isinstance(output, A.ImplTraitType):
		return output
	obj = A.TraitObjectType(bounds=output.bounds, span=output.span)
	box = A.PathSegment(
		ident=A.Ident("Box", span=output.span),
		args=A.AngleArgs(args=(A.TypeArg(obj),)),
	)
	return A.PathType(path=A.Path(segments=(box,)), span=output.span)


class Deselfify(TypeRewriter):
	"""
	Replace every `Self` path segment with `actual`.

	A trait object whose only bound is the interface being mocked (or `Self`)
	collapses into the mock type itself: a constructor declared to return
	`Box<dyn Foo>` from trait `Foo` returns `Box<MockFoo>`. A sole bound
	naming any other trait keeps its `dyn` wrapper, since nothing says the
	mock implements that trait. Without `interface`, only `Self` bounds
	collapse.
	"""

	opaque_message = "type `{text}` is not supported as a return type"

	def __init__(
		self,
		actual: A.Ident,
		*,
		interface: Optional[str] = None,
		diagnostics: Optional[list[Diagnostic]] = None,
	) -> None:
		super().__init__(diagnostics)
		self.actual = actual
		self.interface = interface

	def rewrite_segment(self, seg: A.PathSegment) -> A.PathSegment:
		seg = super().rewrite_segment(seg)
		if seg.ident.name == SELF_TYPE:
			return replace(seg, ident=A.Ident(self.actual.name, span=seg.ident.span))
		return seg

	def _names_mock(self, bound: A.TypeParamBound) -> bool:
		if not isinstance(bound, A.TraitBound) or bound.maybe:
			return False
		last = bound.path.last_name()
		return last == SELF_TYPE or (self.interface is not None and last == self.interface)

	def _visit_type_TraitObjectType(self, ty: A.TraitObjectType) -> A.TypeExpr:
		if len(ty.bounds) == 1 and self._names_mock(ty.bounds[0]):
			last = ty.bounds[0].path.segments[-1]
			args = super().rewrite_segment(last).args
			seg = A.PathSegment(ident=A.Ident(self.actual.name, span=last.ident.span), args=args)
			return A.PathType(path=A.Path(segments=(seg,)), span=ty.span)
		trait_bounds = [b for b in ty.bounds if isinstance(b, A.TraitBound)]
		if len(ty.bounds) > 1 and any(_mentions_self(b.path) for b in trait_bounds):
			self._report("trait objects with multiple bounds cannot refer to `Self`", ty.span)
		return super()._visit_type_TraitObjectType(ty)


def _mentions_self(path: A.Path) -> bool:
	return any(seg.ident.name == SELF_TYPE for seg in path.segments)


class Supersuperfy(TypeRewriter):
	"""
	Re-root `super::`-relative paths two module levels deeper.

	Mock items live in a private module nested inside the module that holds
	the mock struct, so one `super` hop written at the declaration site has to
	become three hops at the emission site.
	"""

	def rewrite_path(self, path: A.Path) -> A.Path:
		path = super().rewrite_path(path)
		if path.leading_colon or path.first_name() != SUPER:
			return path
		first = path.segments[0]
		extra = tuple(A.PathSegment(ident=A.Ident(SUPER, span=first.ident.span)) for _ in range(2))
		return replace(path, segments=extra + path.segments)


def deselfify(
	ty: A.TypeExpr,
	actual: A.Ident,
	*,
	interface: Optional[str] = None,
	diagnostics: Optional[list[Diagnostic]] = None,
) -> A.TypeExpr:
	return Deselfify(actual, interface=interface, diagnostics=diagnostics).rewrite(ty)


def supersuperfy(ty: A.TypeExpr, *, diagnostics: Optional[list[Diagnostic]] = None) -> A.TypeExpr:
	return Supersuperfy(diagnostics).rewrite(ty)


class _ImplTraitScan(TypeRewriter):
	"""Walk without reporting or failing; only note `impl Trait` nodes."""

	def __init__(self) -> None:
		super().__init__(None)
		self.found = False

	def _report(self, msg: str, span) -> None:
		pass

	def _visit_type_BareFnType(self, ty: A.BareFnType) -> A.TypeExpr:
		for t in ty.inputs:
			self.rewrite(t)
		if ty.output is not None:
			self.rewrite(ty.output)
		return ty

	def _visit_type_ImplTraitType(self, ty: A.ImplTraitType) -> A.TypeExpr:
		self.found = True
		return ty


def has_impl_trait(ty: A.TypeExpr) -> bool:
	"""True when `impl Trait` appears anywhere in `ty` (argument-position generics)."""
	scan = _ImplTraitScan()
	scan.rewrite(ty)
	return scan.found


class RewritePass(Enum):
	DEIMPLIFY = "deimplify"
	DESELFIFY = "deselfify"
	SUPERSUPERFY = "supersuperfy"


def apply_pass(
	ty: A.TypeExpr,
	pass_: RewritePass,
	*,
	actual: Optional[A.Ident] = None,
	interface: Optional[str] = None,
	diagnostics: Optional[list[Diagnostic]] = None,
) -> A.TypeExpr:
	"""Run one pass selected by `pass_`; `actual` is required for DESELFIFY."""
	if pass_ is RewritePass.DEIMPLIFY:
		out = deimplify(ty)
		assert out is not None
		return out
	if pass_ is RewritePass.DESELFIFY:
		if actual is None:
			raise ValueError("deselfify needs the mock type identifier (actual=...)")
		return deselfify(ty, actual, interface=interface, diagnostics=diagnostics)
	return supersuperfy(ty, diagnostics=diagnostics)


__all__ = [
	"TypeRewriter",
	"Deselfify",
	"Supersuperfy",
	"RewritePass",
	"apply_pass",
	"deimplify",
	"deselfify",
	"has_impl_trait",
	"supersuperfy",
]
