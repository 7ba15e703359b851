# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Canonical source-text rendering of declaration AST nodes.

Used by the driver's plan output and by tests, which compare rendered text
rather than deep node structures. Output is deterministic and uses one space
after commas, `dyn` on every trait object and no trailing commas.
"""

from __future__ import annotations

from typing import Iterable, Optional

from .parser import ast as A


def _join(parts: Iterable[str]) -> str:
	return ", ".join(parts)


def render_lifetime(name: str) -> str:
	return f"'{name}"


def render_bound(bound: A.TypeParamBound) -> str:
	if isinstance(bound, A.OutlivesBound):
		return render_lifetime(bound.lifetime)
	prefix = "?" if bound.maybe else ""
	return prefix + render_path(bound.path)


def render_bounds(bounds: Iterable[A.TypeParamBound]) -> str:
	return " + ".join(render_bound(b) for b in bounds)


def render_generic_arg(arg: A.GenericArg) -> str:
	if isinstance(arg, A.TypeArg):
		return render_type(arg.ty)
	if isinstance(arg, A.LifetimeArg):
		return render_lifetime(arg.lifetime)
	if isinstance(arg, A.BindingArg):
		return f"{arg.ident.name} = {render_type(arg.ty)}"
	return arg.text


def render_segment(seg: A.PathSegment) -> str:
	if seg.args is None:
		return seg.ident.name
	if isinstance(seg.args, A.AngleArgs):
		if not seg.args.args:
			return seg.ident.name
		return f"{seg.ident.name}<{_join(render_generic_arg(a) for a in seg.args.args)}>"
	out = f"{seg.ident.name}({_join(render_type(t) for t in seg.args.inputs)})"
	if seg.args.output is not None:
		out += f" -> {render_type(seg.args.output)}"
	return out


def render_path(path: A.Path) -> str:
	text = "::".join(render_segment(s) for s in path.segments)
	return "::" + text if path.leading_colon else text


def render_type(ty: A.TypeExpr) -> str:
	if isinstance(ty, A.PathType):
		if ty.qself is None:
			return render_path(ty.path)
		pos = ty.qself.position
		head = A.Path(segments=ty.path.segments[:pos])
		rest = "::".join(render_segment(s) for s in ty.path.segments[pos:])
		if pos:
			return f"<{render_type(ty.qself.ty)} as {render_path(head)}>::{rest}"
		return f"<{render_type(ty.qself.ty)}>::{rest}"
	if isinstance(ty, A.RefType):
		out = "&"
		if ty.lifetime is not None:
			out += render_lifetime(ty.lifetime) + " "
		if ty.mutable:
			out += "mut "
		return out + render_type(ty.elem)
	if isinstance(ty, A.PtrType):
		return ("*mut " if ty.mutable else "*const ") + render_type(ty.elem)
	if isinstance(ty, A.SliceType):
		return f"[{render_type(ty.elem)}]"
	if isinstance(ty, A.ArrayType):
		return f"[{render_type(ty.elem)}; {ty.length}]"
	if isinstance(ty, A.TupleType):
		if len(ty.elems) == 1:
			return f"({render_type(ty.elems[0])},)"
		return f"({_join(render_type(t) for t in ty.elems)})"
	if isinstance(ty, A.ParenType):
		return f"({render_type(ty.elem)})"
	if isinstance(ty, A.GroupType):
		return render_type(ty.elem)
	if isinstance(ty, A.BareFnType):
		out = f"fn({_join(render_type(t) for t in ty.inputs)})"
		if ty.output is not None:
			out += f" -> {render_type(ty.output)}"
		return out
	if isinstance(ty, A.TraitObjectType):
		return f"dyn {render_bounds(ty.bounds)}"
	if isinstance(ty, A.ImplTraitType):
		return f"impl {render_bounds(ty.bounds)}"
	if isinstance(ty, A.InferType):
		return "_"
	if isinstance(ty, A.NeverType):
		return "!"
	if isinstance(ty, (A.MacroType, A.VerbatimType)):
		return ty.text
	return "<invalid type>"


def render_vis(vis: A.Visibility) -> str:
	"""Render a visibility modifier; private renders as the empty string."""
	if isinstance(vis, A.Public):
		return "pub"
	if isinstance(vis, A.Crate):
		return "crate"
	if isinstance(vis, A.Restricted):
		if vis.has_in:
			return f"pub(in {render_path(vis.path)})"
		return f"pub({render_path(vis.path)})"
	return ""


def render_generic_param(param: A.GenericParam) -> str:
	if isinstance(param, A.TypeParam):
		out = param.ident.name
		if param.bounds:
			out += f": {render_bounds(param.bounds)}"
		if param.default is not None:
			out += f" = {render_type(param.default)}"
		return out
	if isinstance(param, A.LifetimeParam):
		out = render_lifetime(param.ident.name)
		if param.bounds:
			out += ": " + " + ".join(render_lifetime(b) for b in param.bounds)
		return out
	return f"const {param.ident.name}: {render_type(param.ty)}"


def render_generics(generics: A.Generics) -> str:
	"""The declaration form: `<T: Clone, 'a>` (no where clause)."""
	if not generics.has_brackets or not generics.params:
		return ""
	return f"<{_join(render_generic_param(p) for p in generics.params)}>"


def render_predicate(pred: A.WherePredicate) -> str:
	if isinstance(pred, A.PredicateType):
		return f"{render_type(pred.bounded_ty)}: {render_bounds(pred.bounds)}".rstrip()
	if isinstance(pred, A.PredicateLifetime):
		bounds = " + ".join(render_lifetime(b) for b in pred.bounds)
		return f"{render_lifetime(pred.lifetime)}: {bounds}".rstrip()
	return f"{render_type(pred.lhs_ty)} = {render_type(pred.rhs_ty)}"


def render_where(generics: A.Generics) -> str:
	wc = generics.where_clause
	if wc is None or not wc.predicates:
		return ""
	return "where " + _join(render_predicate(p) for p in wc.predicates)


def render_pat(pat: A.Pat) -> str:
	if isinstance(pat, A.IdentPat):
		out = ""
		if pat.by_ref:
			out += "ref "
		if pat.mutable:
			out += "mut "
		out += pat.ident.name
		if pat.subpat is not None:
			out += f" @ {render_pat(pat.subpat)}"
		return out
	if isinstance(pat, A.WildPat):
		return "_"
	if isinstance(pat, A.TuplePat):
		return f"({_join(render_pat(p) for p in pat.elems)})"
	return "<invalid pattern>"


def render_fn_arg(arg: A.FnArg) -> str:
	if isinstance(arg, A.SelfArg):
		if arg.kind is A.ReceiverKind.VALUE:
			return "mut self" if arg.mutable else "self"
		out = "&"
		if arg.lifetime is not None:
			out += render_lifetime(arg.lifetime) + " "
		if arg.kind is A.ReceiverKind.REF_MUT:
			out += "mut "
		return out + "self"
	return f"{render_pat(arg.pat)}: {render_type(arg.ty)}"


def render_expr(expr: A.Expr) -> str:
	if isinstance(expr, A.PathExpr):
		return expr.ident.name
	if isinstance(expr, A.RefExpr):
		return ("&mut " if expr.mutable else "&") + render_expr(expr.expr)
	return "<invalid expr>"


def render_method(sig: A.MethodSig, *, output: Optional[A.TypeExpr] = None) -> str:
	"""
	Render a method declaration without a trailing `;`.

	`output` overrides the signature's return type, so callers can show a
	signature with a rewritten return without rebuilding the MethodSig.
	"""
	ret = output if output is not None else sig.output
	vis = render_vis(sig.vis)
	out = f"{vis} fn " if vis else "fn "
	out += sig.ident.name + render_generics(sig.generics)
	out += f"({_join(render_fn_arg(a) for a in sig.inputs)})"
	if ret is not None:
		out += f" -> {render_type(ret)}"
	where = render_where(sig.generics)
	if where:
		out += " " + where
	return out


__all__ = [
	"render_bound",
	"render_bounds",
	"render_expr",
	"render_fn_arg",
	"render_generic_arg",
	"render_generics",
	"render_method",
	"render_pat",
	"render_path",
	"render_predicate",
	"render_type",
	"render_vis",
	"render_where",
]
