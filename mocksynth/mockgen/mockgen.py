# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
mockgen driver: declaration file in, per-method mock plan out.

A plan is everything the mock emitter needs for one `trait` or `impl` item:
the mock struct and module names, and for each method its normalized
signature, its rewritten types, the visibility of its expectation types and
its classification. Pass order per method:

  classify (demutify inputs, merge generics, deimplify return)
  -> deselfify return -> supersuperfy argument and return types
  -> expectation visibility
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass, replace
from pathlib import Path
from typing import List, Optional, Tuple

from mocksynth.mockgen.core.diagnostics import Diagnostic, has_errors, report
from mocksynth.mockgen.core.span import Span
from mocksynth.mockgen.parser import parse_decl_path
from mocksynth.mockgen.parser import ast as A
from mocksynth.mockgen.render import (
	render_expr,
	render_fn_arg,
	render_generics,
	render_method,
	render_type,
	render_vis,
	render_where,
)
from mocksynth.mockgen.rewrite import deselfify, has_impl_trait, supersuperfy
from mocksynth.mockgen.signature import (
	MethodTypes,
	classify_method,
	expectation_visibility,
	gen_mock_ident,
	gen_mod_ident,
)

# Expectation types live in `mod __mock_Foo { mod method { .. } }` below the
# mock struct.
DEFAULT_LEVELS = 2


@dataclass(frozen=True)
class MethodPlan:
	sig: A.MethodSig
	# Visibility of the method's expectation types.
	vis: A.Visibility
	arg_types: Tuple[A.TypeExpr, ...]
	output: Optional[A.TypeExpr]
	types: MethodTypes


@dataclass(frozen=True)
class MockPlan:
	mock_ident: A.Ident
	mod_ident: A.Ident
	interface: Optional[str]
	generics: A.Generics
	methods: Tuple[MethodPlan, ...]
	span: Span


def _lift_arg_type(ty: A.TypeExpr, diagnostics: list[Diagnostic]) -> A.TypeExpr:
	if has_impl_trait(ty):
		# Would need a synthesized type parameter; left as written.
		report("`impl Trait` arguments are not supported", diagnostics, ty.span, phase="driver")
		return ty
	return supersuperfy(ty, diagnostics=diagnostics)


def _plan_method(
	sig: A.MethodSig,
	*,
	mock_ident: A.Ident,
	interface: Optional[str],
	generics: A.Generics,
	default_vis: A.Visibility,
	levels: int,
	diagnostics: list[Diagnostic],
) -> MethodPlan:
	types = classify_method(sig, generics, diagnostics=diagnostics)
	output = types.output
	if output is not None:
		output = deselfify(output, mock_ident, interface=interface, diagnostics=diagnostics)
		output = supersuperfy(output, diagnostics=diagnostics)
	arg_types = tuple(_lift_arg_type(ty, diagnostics) for ty in types.arg_types)
	vis = sig.vis if not isinstance(sig.vis, A.Inherited) else default_vis
	return MethodPlan(
		sig=replace(sig, inputs=types.inputs),
		vis=expectation_visibility(vis, levels),
		arg_types=arg_types,
		output=output,
		types=types,
	)


def plan_item(
	item: A.Item,
	*,
	levels: int = DEFAULT_LEVELS,
	diagnostics: list[Diagnostic],
) -> Optional[MockPlan]:
	"""
	Plan the mock for one item.

	Returns None (after reporting) for an impl whose self type is not a plain
	path, since there is no struct name to derive the mock's names from.
	"""
	if isinstance(item, A.TraitItem):
		struct = item.ident
		mod_ident = gen_mod_ident(struct)
		interface: Optional[str] = item.ident.name
		default_vis = item.vis
	else:
		if not isinstance(item.self_ty, A.PathType) or item.self_ty.qself is not None:
			report("mocked impl blocks must name a struct type", diagnostics, item.self_ty.span, phase="driver")
			return None
		last = item.self_ty.path.segments[-1]
		struct = last.ident
		if item.trait_path is not None:
			trait = item.trait_path.segments[-1].ident
			mod_ident = gen_mod_ident(struct, trait)
			interface = trait.name
		else:
			mod_ident = gen_mod_ident(struct)
			interface = None
		default_vis = A.Inherited()
	mock_ident = gen_mock_ident(struct)
	methods = tuple(
		_plan_method(
			sig,
			mock_ident=mock_ident,
			interface=interface,
			generics=item.generics,
			default_vis=default_vis,
			levels=levels,
			diagnostics=diagnostics,
		)
		for sig in item.methods
	)
	return MockPlan(
		mock_ident=mock_ident,
		mod_ident=mod_ident,
		interface=interface,
		generics=item.generics,
		methods=methods,
		span=item.span,
	)


def plan_decls(decl_file: A.DeclFile, *, levels: int = DEFAULT_LEVELS) -> Tuple[List[MockPlan], List[Diagnostic]]:
	"""Plan every item of a parsed declaration file, collecting all diagnostics."""
	diagnostics: List[Diagnostic] = []
	plans: List[MockPlan] = []
	for item in decl_file.items:
		plan = plan_item(item, levels=levels, diagnostics=diagnostics)
		if plan is not None:
			plans.append(plan)
	return plans, diagnostics


def _opt_type(ty: Optional[A.TypeExpr]) -> Optional[str]:
	return render_type(ty) if ty is not None else None


def _method_to_json(mp: MethodPlan) -> dict:
	types = mp.types
	return {
		"name": mp.sig.ident.name,
		"signature": render_method(mp.sig, output=mp.output),
		"vis": render_vis(mp.vis),
		"is_static": types.is_static,
		"is_generic": types.is_generic,
		"call": types.call.value,
		"expectation": render_type(types.expectation),
		"expectations": render_type(types.expectations),
		"expect_obj": render_type(types.expect_obj),
		"altargs": [render_fn_arg(a) for a in types.altargs],
		"matchexprs": [render_expr(e) for e in types.matchexprs],
		"match_types": [render_type(t) for t in types.match_types],
		"arg_types": [render_type(t) for t in mp.arg_types],
		"output": _opt_type(mp.output),
	}


def plan_to_json(plan: MockPlan) -> dict:
	"""Render a plan to a JSON-friendly dict of canonical source strings."""
	return {
		"mock": plan.mock_ident.name,
		"module": plan.mod_ident.name,
		"interface": plan.interface,
		"generics": render_generics(plan.generics),
		"where": render_where(plan.generics),
		"methods": [_method_to_json(m) for m in plan.methods],
	}


def _diag_to_json(diag: Diagnostic, phase: str, source: Path) -> dict:
	"""Render a Diagnostic to a structured JSON-friendly dict."""
	file = diag.span.file if diag.span.file is not None else str(source)
	return {
		"phase": diag.phase or phase,
		"message": diag.message,
		"severity": diag.severity,
		"file": file,
		"line": diag.span.line,
		"column": diag.span.column,
		"notes": list(diag.notes),
	}


def _print_plan(plan: MockPlan) -> None:
	header = f"{plan.mock_ident.name}{render_generics(plan.generics)} (module {plan.mod_ident.name})"
	if plan.interface is not None:
		header += f" implements {plan.interface}"
	print(header)
	for mp in plan.methods:
		data = _method_to_json(mp)
		print(f"  {data['signature']}")
		print(f"    vis: {data['vis']}")
		print(f"    call: {data['call']} static: {data['is_static']} generic: {data['is_generic']}")
		print(f"    expectation: {data['expectation']}")
		print(f"    expect_obj: {data['expect_obj']}")
		if data["altargs"]:
			print(f"    altargs: {', '.join(data['altargs'])}")
			print(f"    matchexprs: {', '.join(data['matchexprs'])}")


def main(argv: list[str] | None = None) -> int:
	"""
	Parse declaration files and print a mock plan for every item.

	With --json, prints plans plus structured diagnostics
	(phase/message/severity/file/line/column) and an exit_code; otherwise
	prints plans to stdout and human-readable diagnostics to stderr.
	"""
	parser = argparse.ArgumentParser(prog="mockgen", description="mock synthesis planner")
	parser.add_argument("source", type=Path, nargs="+", help="Path(s) to declaration file(s)")
	parser.add_argument(
		"--levels",
		type=int,
		default=DEFAULT_LEVELS,
		help="How many modules below the mock struct expectation types are emitted (default: 2)",
	)
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit plans and diagnostics as JSON",
	)
	args = parser.parse_args(argv)
	if args.levels < 1:
		parser.error("--levels must be at least 1")

	plans: List[MockPlan] = []
	diags: List[Tuple[Diagnostic, Path]] = []
	for source_path in args.source:
		if not source_path.exists():
			msg = f"source not found: {source_path}"
			diags.append((Diagnostic(message=msg, phase="driver", span=Span(file=str(source_path))), source_path))
			continue
		decl_file, parse_diags = parse_decl_path(source_path)
		diags.extend((d, source_path) for d in parse_diags)
		if decl_file is None:
			continue
		file_plans, plan_diags = plan_decls(decl_file, levels=args.levels)
		plans.extend(file_plans)
		diags.extend((d, source_path) for d in plan_diags)

	exit_code = 1 if has_errors([d for d, _ in diags]) else 0
	if args.json:
		payload = {
			"exit_code": exit_code,
			"plans": [plan_to_json(p) for p in plans],
			"diagnostics": [_diag_to_json(d, "driver", src) for d, src in diags],
		}
		print(json.dumps(payload))
		return exit_code

	for plan in plans:
		_print_plan(plan)
	for d, src in diags:
		span = d.span if d.span.file is not None else replace(d.span, file=str(src))
		loc = span.format() if span.is_known() else f"{span.file}:?:?"
		print(f"{loc}: {d.severity}: {d.message}", file=sys.stderr)
	return exit_code


__all__ = ["MethodPlan", "MockPlan", "main", "plan_decls", "plan_item", "plan_to_json"]
