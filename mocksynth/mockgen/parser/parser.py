# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
lark-based parser for mockgen declaration files.

The grammar (`grammar.lark`) describes Rust-like `trait` and `impl` items
whose methods carry no bodies. This module owns the LALR parser instance and
the builder that turns lark trees into the frozen AST in `ast.py`.

Tokens the builder needs to inspect (`mut`, `ref`, `self`, `->`, ...) are
named terminals in the grammar so they survive tree construction; plain
punctuation is anonymous and filtered out by lark.
"""

from __future__ import annotations

from pathlib import Path as FsPath
from typing import List, Optional, Sequence

from lark import Lark, Token, Tree

from .ast import (
	AngleArgs,
	ArrayType,
	BareFnType,
	BindingArg,
	CapturedArg,
	ConstArg,
	ConstParam,
	Crate,
	DeclFile,
	FnArg,
	GenericArg,
	GenericParam,
	Generics,
	Ident,
	IdentPat,
	ImplItem,
	ImplTraitType,
	InferType,
	Inherited,
	LifetimeArg,
	LifetimeParam,
	MacroType,
	MethodSig,
	NeverType,
	OutlivesBound,
	ParenArgs,
	ParenType,
	Pat,
	Path,
	PathSegment,
	PathType,
	PredicateEq,
	PredicateLifetime,
	PredicateType,
	PtrType,
	Public,
	QSelf,
	ReceiverKind,
	RefType,
	Restricted,
	SelfArg,
	SliceType,
	TraitBound,
	TraitItem,
	TraitObjectType,
	TupleType,
	TuplePat,
	TypeArg,
	TypeExpr,
	TypeParam,
	TypeParamBound,
	Visibility,
	WhereClause,
	WherePredicate,
	WildPat,
)
from mocksynth.mockgen.core.span import Span

_GRAMMAR_PATH = FsPath(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="contextual",
	start=["decl_file", "type_only", "method", "generics", "visibility"],
	propagate_positions=True,
	maybe_placeholders=False,
)

_VIS_NODES = {"vis_public", "vis_restricted", "vis_restricted_in", "vis_crate"}
_TYPE_NODES = {
	"path_type",
	"qself_type",
	"ref_type",
	"ref_dyn",
	"ptr_type",
	"slice_type",
	"array_type",
	"tuple_type",
	"paren_type",
	"never_type",
	"infer_type",
	"bare_fn_type",
	"macro_type",
	"impl_trait_type",
	"trait_object_type",
}


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)


def _trees(tree: Tree, *names: str) -> List[Tree]:
	"""Child trees of `tree`, optionally filtered by rule name."""
	return [c for c in tree.children if isinstance(c, Tree) and (not names or _name(c) in names)]


def _tokens(tree: Tree, *types: str) -> List[Token]:
	return [c for c in tree.children if isinstance(c, Token) and (not types or c.type in types)]


def _has_token(tree: Tree, tok_type: str) -> bool:
	return any(isinstance(c, Token) and c.type == tok_type for c in tree.children)


def _lifetime_name(tok: Token) -> str:
	return tok.value[1:]  # strip the leading quote


def _is_type_node(node: object) -> bool:
	return isinstance(node, Tree) and _name(node) in _TYPE_NODES


class _TreeBuilder:
	"""Builds AST nodes from lark trees, stamping spans with the source file."""

	def __init__(self, file: Optional[str]) -> None:
		self.file = file

	# --- spans/idents ---

	def _span(self, tree: Tree) -> Span:
		return Span.from_loc(tree.meta, file=self.file)

	def _tok_span(self, tok: Token) -> Span:
		return Span(
			file=self.file,
			line=tok.line,
			column=tok.column,
			end_line=tok.end_line,
			end_column=tok.end_column,
			raw=tok,
		)

	def _ident(self, tok: Token) -> Ident:
		return Ident(tok.value, span=self._tok_span(tok))

	# --- items ---

	def build_decl_file(self, tree: Tree) -> DeclFile:
		items = []
		for child in _trees(tree):
			kind = _name(child)
			if kind == "trait_item":
				items.append(self.build_trait_item(child))
			elif kind == "impl_item":
				items.append(self.build_impl_item(child))
			else:
				raise AssertionError(f"unexpected top-level node {kind!r} (grammar/builder mismatch)")
		return DeclFile(items=tuple(items), file=self.file)

	def build_trait_item(self, tree: Tree) -> TraitItem:
		vis: Visibility = Inherited()
		generics = Generics()
		where: Optional[WhereClause] = None
		methods: List[MethodSig] = []
		for child in _trees(tree):
			kind = _name(child)
			if kind in _VIS_NODES:
				vis = self.build_visibility(child)
			elif kind == "generics":
				generics = self.build_generics(child)
			elif kind == "where_clause":
				where = self.build_where_clause(child)
			elif kind == "method":
				methods.append(self.build_method(child))
			# Supertrait bounds (`trait Foo: Bar`) do not affect the mock's methods.
		name_tok = _tokens(tree, "NAME")[0]
		return TraitItem(
			ident=self._ident(name_tok),
			generics=_with_where(generics, where),
			vis=vis,
			methods=tuple(methods),
			span=self._span(tree),
		)

	def build_impl_item(self, tree: Tree) -> ImplItem:
		generics = Generics()
		where: Optional[WhereClause] = None
		methods: List[MethodSig] = []
		head_path: Optional[Path] = None
		self_ty: Optional[TypeExpr] = None
		seen_for = False
		for child in tree.children:
			if isinstance(child, Token):
				if child.type == "FOR":
					seen_for = True
				continue
			kind = _name(child)
			if kind == "generics":
				generics = self.build_generics(child)
			elif kind == "path" and head_path is None:
				head_path = self.build_path(child)
			elif seen_for and self_ty is None and _is_type_node(child):
				self_ty = self.build_type(child)
			elif kind == "where_clause":
				where = self.build_where_clause(child)
			elif kind == "method":
				methods.append(self.build_method(child))
		assert head_path is not None, "impl item without a path (grammar/builder mismatch)"
		if seen_for:
			trait_path: Optional[Path] = head_path
		else:
			trait_path = None
			self_ty = PathType(path=head_path, span=self._span(tree))
		assert self_ty is not None
		return ImplItem(
			self_ty=self_ty,
			trait_path=trait_path,
			generics=_with_where(generics, where),
			methods=tuple(methods),
			span=self._span(tree),
		)

	def build_method(self, tree: Tree) -> MethodSig:
		vis: Visibility = Inherited()
		generics = Generics()
		where: Optional[WhereClause] = None
		inputs: Sequence[FnArg] = ()
		output: Optional[TypeExpr] = None
		after_arrow = False
		for child in tree.children:
			if isinstance(child, Token):
				if child.type == "ARROW":
					after_arrow = True
				continue
			kind = _name(child)
			if kind in _VIS_NODES:
				vis = self.build_visibility(child)
			elif kind == "generics":
				generics = self.build_generics(child)
			elif kind == "fn_args":
				inputs = tuple(self.build_fn_arg(arg) for arg in _trees(child))
			elif kind == "where_clause":
				where = self.build_where_clause(child)
			elif after_arrow and output is None:
				output = self.build_type(child)
		name_tok = _tokens(tree, "NAME")[0]
		return MethodSig(
			ident=self._ident(name_tok),
			inputs=tuple(inputs),
			output=output,
			generics=_with_where(generics, where),
			vis=vis,
			span=self._span(tree),
		)

	# --- arguments and patterns ---

	def build_fn_arg(self, tree: Tree) -> FnArg:
		kind = _name(tree)
		if kind == "ref_receiver":
			lt = _tokens(tree, "LIFETIME")
			return SelfArg(
				kind=ReceiverKind.REF_MUT if _has_token(tree, "MUT") else ReceiverKind.REF,
				lifetime=_lifetime_name(lt[0]) if lt else None,
				span=self._span(tree),
			)
		if kind == "value_receiver":
			return SelfArg(kind=ReceiverKind.VALUE, mutable=_has_token(tree, "MUT"), span=self._span(tree))
		if kind == "captured_arg":
			pat_node, ty_node = _trees(tree)
			return CapturedArg(pat=self.build_pattern(pat_node), ty=self.build_type(ty_node), span=self._span(tree))
		raise AssertionError(f"unexpected fn argument node {kind!r} (grammar/builder mismatch)")

	def build_pattern(self, tree: Tree) -> Pat:
		kind = _name(tree)
		if kind == "ident_pat":
			sub = _trees(tree)
			return IdentPat(
				ident=self._ident(_tokens(tree, "NAME")[0]),
				by_ref=_has_token(tree, "REF"),
				mutable=_has_token(tree, "MUT"),
				subpat=self.build_pattern(sub[0]) if sub else None,
				span=self._span(tree),
			)
		if kind == "wild_pat":
			return WildPat(span=self._span(tree))
		if kind == "tuple_pat":
			return TuplePat(elems=tuple(self.build_pattern(p) for p in _trees(tree)), span=self._span(tree))
		raise AssertionError(f"unexpected pattern node {kind!r} (grammar/builder mismatch)")

	# --- visibility ---

	def build_visibility(self, tree: Tree) -> Visibility:
		kind = _name(tree)
		if kind == "vis_public":
			return Public()
		if kind == "vis_crate":
			return Crate()
		if kind == "vis_restricted":
			target = _tokens(_trees(tree, "vis_target")[0])[0]
			return Restricted(path=Path.from_idents(self._ident(target)))
		if kind == "vis_restricted_in":
			return Restricted(path=self.build_path(_trees(tree, "path")[0]), has_in=True)
		raise AssertionError(f"unexpected visibility node {kind!r} (grammar/builder mismatch)")

	# --- generics ---

	def build_generics(self, tree: Tree) -> Generics:
		params: List[GenericParam] = []
		for child in _trees(tree):
			kind = _name(child)
			if kind == "type_param":
				bounds_nodes = _trees(child, "bounds")
				default_nodes = [c for c in _trees(child) if _is_type_node(c)]
				params.append(
					TypeParam(
						ident=self._ident(_tokens(child, "NAME")[0]),
						bounds=self.build_bounds(bounds_nodes[0]) if bounds_nodes else (),
						default=self.build_type(default_nodes[0]) if default_nodes else None,
					)
				)
			elif kind == "lifetime_param":
				lt_tok = _tokens(child, "LIFETIME")[0]
				lb = _trees(child, "lifetime_bounds")
				params.append(
					LifetimeParam(
						ident=Ident(_lifetime_name(lt_tok), span=self._tok_span(lt_tok)),
						bounds=self.build_lifetime_bounds(lb[0]) if lb else (),
					)
				)
			elif kind == "const_param":
				ty_node = [c for c in _trees(child) if _is_type_node(c)][0]
				params.append(ConstParam(ident=self._ident(_tokens(child, "NAME")[0]), ty=self.build_type(ty_node)))
			else:
				raise AssertionError(f"unexpected generic param node {kind!r} (grammar/builder mismatch)")
		return Generics(params=tuple(params), has_brackets=True)

	def build_lifetime_bounds(self, tree: Tree) -> tuple[str, ...]:
		return tuple(_lifetime_name(tok) for tok in _tokens(tree, "LIFETIME"))

	def build_where_clause(self, tree: Tree) -> WhereClause:
		preds: List[WherePredicate] = []
		for child in _trees(tree):
			kind = _name(child)
			if kind == "type_predicate":
				bounds_nodes = _trees(child, "bounds")
				ty_node = [c for c in _trees(child) if _is_type_node(c)][0]
				preds.append(
					PredicateType(
						bounded_ty=self.build_type(ty_node),
						bounds=self.build_bounds(bounds_nodes[0]) if bounds_nodes else (),
					)
				)
			elif kind == "lifetime_predicate":
				lb = _trees(child, "lifetime_bounds")
				preds.append(
					PredicateLifetime(
						lifetime=_lifetime_name(_tokens(child, "LIFETIME")[0]),
						bounds=self.build_lifetime_bounds(lb[0]) if lb else (),
					)
				)
			elif kind == "eq_predicate":
				lhs, rhs = [c for c in _trees(child) if _is_type_node(c)]
				preds.append(PredicateEq(lhs_ty=self.build_type(lhs), rhs_ty=self.build_type(rhs)))
			else:
				raise AssertionError(f"unexpected where predicate node {kind!r} (grammar/builder mismatch)")
		return WhereClause(predicates=tuple(preds))

	def build_bounds(self, tree: Tree) -> tuple[TypeParamBound, ...]:
		out: List[TypeParamBound] = []
		for child in _trees(tree):
			kind = _name(child)
			if kind == "trait_bound":
				out.append(TraitBound(path=self.build_path(_trees(child, "path")[0])))
			elif kind == "maybe_bound":
				out.append(TraitBound(path=self.build_path(_trees(child, "path")[0]), maybe=True))
			elif kind == "outlives_bound":
				out.append(OutlivesBound(lifetime=_lifetime_name(_tokens(child, "LIFETIME")[0])))
			else:
				raise AssertionError(f"unexpected bound node {kind!r} (grammar/builder mismatch)")
		return tuple(out)

	# --- paths ---

	def build_path(self, tree: Tree) -> Path:
		return Path(segments=tuple(self.build_path_segment(seg) for seg in _trees(tree, "path_segment")))

	def build_path_segment(self, tree: Tree) -> PathSegment:
		ident_tok = _tokens(tree)[0]
		args_nodes = _trees(tree)
		args: AngleArgs | ParenArgs | None = None
		if args_nodes:
			node = args_nodes[0]
			if _name(node) == "angle_args":
				args = AngleArgs(args=tuple(self.build_generic_arg(a) for a in _trees(node)))
			else:
				args = self.build_paren_args(node)
		return PathSegment(ident=self._ident(ident_tok), args=args)

	def build_paren_args(self, tree: Tree) -> ParenArgs:
		inputs: List[TypeExpr] = []
		output: Optional[TypeExpr] = None
		after_arrow = False
		for child in tree.children:
			if isinstance(child, Token):
				after_arrow = after_arrow or child.type == "ARROW"
				continue
			if after_arrow:
				output = self.build_type(child)
			else:
				inputs.append(self.build_type(child))
		return ParenArgs(inputs=tuple(inputs), output=output)

	def build_generic_arg(self, tree: Tree) -> GenericArg:
		kind = _name(tree)
		if kind == "type_arg":
			return TypeArg(self.build_type(_trees(tree)[0]))
		if kind == "lifetime_arg":
			return LifetimeArg(_lifetime_name(_tokens(tree)[0]))
		if kind == "binding_arg":
			return BindingArg(ident=self._ident(_tokens(tree, "NAME")[0]), ty=self.build_type(_trees(tree)[0]))
		if kind == "const_arg":
			return ConstArg(_tokens(tree)[0].value)
		raise AssertionError(f"unexpected generic argument node {kind!r} (grammar/builder mismatch)")

	# --- types ---

	def build_type(self, tree: Tree) -> TypeExpr:
		kind = _name(tree)
		span = self._span(tree)
		children = _trees(tree)
		if kind == "type_only":
			return self.build_type(children[0])
		if kind == "path_type":
			return PathType(path=self.build_path(children[0]), span=span)
		if kind == "qself_type":
			qself_ty = self.build_type(children[0])
			trait_path = self.build_path(_trees(tree, "path")[0])
			rest = [self.build_path_segment(seg) for seg in _trees(tree, "path_segment")]
			return PathType(
				path=Path(segments=trait_path.segments + tuple(rest)),
				qself=QSelf(ty=qself_ty, position=len(trait_path.segments)),
				span=span,
			)
		if kind == "ref_type":
			lt = _tokens(tree, "LIFETIME")
			return RefType(
				elem=self.build_type(children[0]),
				lifetime=_lifetime_name(lt[0]) if lt else None,
				mutable=_has_token(tree, "MUT"),
				span=span,
			)
		if kind == "ref_dyn":
			bound = TraitBound(path=self.build_path(children[0]))
			return TraitObjectType(bounds=(bound,), span=span)
		if kind == "ptr_type":
			return PtrType(elem=self.build_type(children[0]), mutable=_has_token(tree, "MUT"), span=span)
		if kind == "slice_type":
			return SliceType(elem=self.build_type(children[0]), span=span)
		if kind == "array_type":
			len_tok = _tokens(_trees(tree, "array_len")[0])[0]
			return ArrayType(elem=self.build_type(children[0]), length=len_tok.value, span=span)
		if kind == "tuple_type":
			return TupleType(elems=tuple(self.build_type(c) for c in children), span=span)
		if kind == "paren_type":
			return ParenType(elem=self.build_type(children[0]), span=span)
		if kind == "never_type":
			return NeverType(span=span)
		if kind == "infer_type":
			return InferType(span=span)
		if kind == "bare_fn_type":
			inputs: List[TypeExpr] = []
			output: Optional[TypeExpr] = None
			after_arrow = False
			for child in tree.children:
				if isinstance(child, Token):
					after_arrow = after_arrow or child.type == "ARROW"
					continue
				if after_arrow:
					output = self.build_type(child)
				else:
					inputs.append(self.build_type(child))
			return BareFnType(inputs=tuple(inputs), output=output, span=span)
		if kind == "macro_type":
			name_tok = _tokens(tree, "NAME")[0]
			args_tok = _tokens(tree, "MACRO_ARGS")[0]
			return MacroType(text=f"{name_tok.value}!{args_tok.value}", span=span)
		if kind == "impl_trait_type":
			return ImplTraitType(bounds=self.build_bounds(_trees(tree, "bounds")[0]), span=span)
		if kind == "trait_object_type":
			return TraitObjectType(bounds=self.build_bounds(_trees(tree, "bounds")[0]), span=span)
		raise AssertionError(f"unexpected type node {kind!r} (grammar/builder mismatch)")


def _with_where(generics: Generics, where: Optional[WhereClause]) -> Generics:
	if where is None:
		return generics
	return Generics(params=generics.params, where_clause=where, has_brackets=generics.has_brackets)


def parse_decls(source: str, *, file: Optional[str] = None) -> DeclFile:
	"""Parse a whole declaration file. Raises `lark.exceptions.UnexpectedInput` on syntax errors."""
	tree = _PARSER.parse(source, start="decl_file")
	return _TreeBuilder(file).build_decl_file(tree)


def parse_type(source: str) -> TypeExpr:
	tree = _PARSER.parse(source, start="type_only")
	return _TreeBuilder(None).build_type(tree)


def parse_method(source: str) -> MethodSig:
	"""Parse one bodiless method declaration, e.g. `fn foo(&self, x: u32) -> u64;`."""
	text = source if source.rstrip().endswith(";") else source + ";"
	tree = _PARSER.parse(text, start="method")
	return _TreeBuilder(None).build_method(tree)


def parse_generics(source: str) -> Generics:
	tree = _PARSER.parse(source, start="generics")
	return _TreeBuilder(None).build_generics(tree)


def parse_visibility(source: str) -> Visibility:
	"""Parse a visibility modifier; the empty string means private (`Inherited`)."""
	if not source.strip():
		return Inherited()
	tree = _PARSER.parse(source, start="visibility")
	return _TreeBuilder(None).build_visibility(tree)


__all__ = [
	"parse_decls",
	"parse_type",
	"parse_method",
	"parse_generics",
	"parse_visibility",
]
