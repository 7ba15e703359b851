# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Declaration AST shared by the parser, the rewrite passes and the driver.

Every node is a frozen dataclass and every child sequence is a tuple: passes
never mutate a tree, they build a new one and share the subtrees they did not
touch. Spans are carried for diagnostics only and are excluded from equality,
so two trees parsed from different places compare equal when their shapes do.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from mocksynth.mockgen.core.span import Span


def _span_field():
	return field(default_factory=Span, compare=False, repr=False)


@dataclass(frozen=True)
class Ident:
	"""An identifier plus the place it came from. Compared by name only."""

	name: str
	span: Span = _span_field()

	def __str__(self) -> str:
		return self.name


# --- Type expressions ---


class TypeExpr:
	span: Span


@dataclass(frozen=True)
class SliceType(TypeExpr):
	elem: TypeExpr
	span: Span = _span_field()


@dataclass(frozen=True)
class ArrayType(TypeExpr):
	elem: TypeExpr
	length: str  # Literal or const-generic name, kept as source text.
	span: Span = _span_field()


@dataclass(frozen=True)
class PtrType(TypeExpr):
	elem: TypeExpr
	mutable: bool = False
	span: Span = _span_field()


@dataclass(frozen=True)
class RefType(TypeExpr):
	elem: TypeExpr
	lifetime: Optional[str] = None  # Without the leading quote: "static", "a".
	mutable: bool = False
	span: Span = _span_field()


@dataclass(frozen=True)
class TupleType(TypeExpr):
	elems: Tuple[TypeExpr, ...] = ()
	span: Span = _span_field()


@dataclass(frozen=True)
class ParenType(TypeExpr):
	elem: TypeExpr
	span: Span = _span_field()


@dataclass(frozen=True)
class GroupType(TypeExpr):
	"""Invisible grouping (what macro expansion leaves around a substituted type)."""

	elem: TypeExpr
	span: Span = _span_field()


@dataclass(frozen=True)
class BareFnType(TypeExpr):
	inputs: Tuple[TypeExpr, ...] = ()
	output: Optional[TypeExpr] = None
	span: Span = _span_field()


@dataclass(frozen=True)
class TraitObjectType(TypeExpr):
	bounds: Tuple["TypeParamBound", ...]
	span: Span = _span_field()


@dataclass(frozen=True)
class ImplTraitType(TypeExpr):
	bounds: Tuple["TypeParamBound", ...]
	span: Span = _span_field()


@dataclass(frozen=True)
class InferType(TypeExpr):
	span: Span = _span_field()


@dataclass(frozen=True)
class NeverType(TypeExpr):
	span: Span = _span_field()


@dataclass(frozen=True)
class MacroType(TypeExpr):
	"""A type produced by a macro invocation (`name!(...)`); opaque to every pass."""

	text: str
	span: Span = _span_field()


@dataclass(frozen=True)
class VerbatimType(TypeExpr):
	"""Raw tokens we could not give a shape to; opaque to every pass."""

	text: str
	span: Span = _span_field()


@dataclass(frozen=True)
class QSelf:
	"""
	The `<T as Trait>` prefix of a qualified path.

	`position` is the number of leading segments of the accompanying path
	that spell the trait: `<T as a::Tr>::X` has path `a::Tr::X`, position 2.
	"""

	ty: TypeExpr
	position: int = 0


@dataclass(frozen=True)
class PathType(TypeExpr):
	path: "Path"
	qself: Optional[QSelf] = None
	span: Span = _span_field()


# --- Paths ---


@dataclass(frozen=True)
class TypeArg:
	ty: TypeExpr


@dataclass(frozen=True)
class LifetimeArg:
	lifetime: str


@dataclass(frozen=True)
class BindingArg:
	"""Associated-type equality constraint inside angle brackets: `Item = u32`."""

	ident: Ident
	ty: TypeExpr


@dataclass(frozen=True)
class ConstArg:
	text: str


GenericArg = TypeArg | LifetimeArg | BindingArg | ConstArg


@dataclass(frozen=True)
class AngleArgs:
	args: Tuple[GenericArg, ...] = ()


@dataclass(frozen=True)
class ParenArgs:
	"""Fn-sugar arguments: the `(A, B) -> R` of `Fn(A, B) -> R`."""

	inputs: Tuple[TypeExpr, ...] = ()
	output: Optional[TypeExpr] = None


@dataclass(frozen=True)
class PathSegment:
	ident: Ident
	args: AngleArgs | ParenArgs | None = None


@dataclass(frozen=True)
class Path:
	segments: Tuple[PathSegment, ...]
	leading_colon: bool = False

	@staticmethod
	def from_idents(*idents: Ident | str) -> "Path":
		"""Build an argument-less path (`a::b::c`) from identifiers or names."""
		segs = tuple(PathSegment(ident=i if isinstance(i, Ident) else Ident(i)) for i in idents)
		return Path(segments=segs)

	def first_name(self) -> Optional[str]:
		return self.segments[0].ident.name if self.segments else None

	def last_name(self) -> Optional[str]:
		return self.segments[-1].ident.name if self.segments else None


# --- Bounds ---


@dataclass(frozen=True)
class TraitBound:
	path: Path
	maybe: bool = False  # `?Sized`


@dataclass(frozen=True)
class OutlivesBound:
	lifetime: str


TypeParamBound = TraitBound | OutlivesBound


# --- Generics ---


@dataclass(frozen=True)
class TypeParam:
	ident: Ident
	bounds: Tuple[TypeParamBound, ...] = ()
	default: Optional[TypeExpr] = None

	@property
	def key(self) -> tuple[str, str]:
		return ("type", self.ident.name)


@dataclass(frozen=True)
class LifetimeParam:
	ident: Ident  # Without the leading quote.
	bounds: Tuple[str, ...] = ()

	@property
	def key(self) -> tuple[str, str]:
		return ("lifetime", self.ident.name)


@dataclass(frozen=True)
class ConstParam:
	ident: Ident
	ty: TypeExpr

	@property
	def key(self) -> tuple[str, str]:
		return ("const", self.ident.name)


GenericParam = TypeParam | LifetimeParam | ConstParam


@dataclass(frozen=True)
class PredicateType:
	bounded_ty: TypeExpr
	bounds: Tuple[TypeParamBound, ...] = ()

	@property
	def key(self) -> tuple[str, object]:
		return ("type", self.bounded_ty)


@dataclass(frozen=True)
class PredicateLifetime:
	lifetime: str
	bounds: Tuple[str, ...] = ()

	@property
	def key(self) -> tuple[str, object]:
		return ("lifetime", self.lifetime)


@dataclass(frozen=True)
class PredicateEq:
	lhs_ty: TypeExpr
	rhs_ty: TypeExpr

	@property
	def key(self) -> tuple[str, object]:
		return ("eq", self.lhs_ty)


WherePredicate = PredicateType | PredicateLifetime | PredicateEq


@dataclass(frozen=True)
class WhereClause:
	predicates: Tuple[WherePredicate, ...] = ()


@dataclass(frozen=True)
class Generics:
	"""
	Generic parameters of an item plus its where clause.

	`has_brackets` distinguishes "no generics at all" (the empty state that
	`merge_generics` treats as its identity) from an explicit `<>`.
	"""

	params: Tuple[GenericParam, ...] = ()
	where_clause: Optional[WhereClause] = None
	has_brackets: bool = False

	@property
	def is_empty(self) -> bool:
		return not self.has_brackets

	def type_args(self) -> Tuple[GenericArg, ...]:
		"""
		Arguments that apply this parameter list to a type (`<T, 'a, N>`).

		Bounds and defaults are dropped; that is the form used after a type name
		inside an impl (`Foo<T>` for `impl<T: Clone> ... Foo<T>`).
		"""
		out: list[GenericArg] = []
		for param in self.params:
			if isinstance(param, TypeParam):
				out.append(TypeArg(PathType(Path.from_idents(param.ident))))
			elif isinstance(param, LifetimeParam):
				out.append(LifetimeArg(param.ident.name))
			else:
				out.append(ConstArg(param.ident.name))
		return tuple(out)


# --- Visibility ---


@dataclass(frozen=True)
class Inherited:
	"""No visibility keyword: private to the enclosing module."""


@dataclass(frozen=True)
class Public:
	pass


@dataclass(frozen=True)
class Crate:
	"""The bare `crate` visibility keyword."""


@dataclass(frozen=True)
class Restricted:
	"""`pub(crate)`, `pub(super)`, `pub(self)` or `pub(in some::path)`."""

	path: Path
	has_in: bool = False


Visibility = Inherited | Public | Crate | Restricted


# --- Patterns and arguments ---


class Pat:
	span: Span


@dataclass(frozen=True)
class IdentPat(Pat):
	ident: Ident
	by_ref: bool = False
	mutable: bool = False
	subpat: Optional[Pat] = None
	span: Span = _span_field()


@dataclass(frozen=True)
class WildPat(Pat):
	span: Span = _span_field()


@dataclass(frozen=True)
class TuplePat(Pat):
	elems: Tuple[Pat, ...] = ()
	span: Span = _span_field()


class ReceiverKind(Enum):
	"""How an instance method takes `self`."""

	VALUE = "value"
	REF = "ref"
	REF_MUT = "ref_mut"


@dataclass(frozen=True)
class SelfArg:
	kind: ReceiverKind
	mutable: bool = False  # `mut self`; only meaningful for VALUE.
	lifetime: Optional[str] = None  # `&'a self`
	span: Span = _span_field()


@dataclass(frozen=True)
class CapturedArg:
	pat: Pat
	ty: TypeExpr
	span: Span = _span_field()


FnArg = SelfArg | CapturedArg


# --- Expressions (only what matching expressions need) ---


class Expr:
	span: Span


@dataclass(frozen=True)
class PathExpr(Expr):
	ident: Ident
	span: Span = _span_field()


@dataclass(frozen=True)
class RefExpr(Expr):
	expr: Expr
	mutable: bool = False
	span: Span = _span_field()


# --- Declarations ---


@dataclass(frozen=True)
class MethodSig:
	ident: Ident
	inputs: Tuple[FnArg, ...] = ()
	output: Optional[TypeExpr] = None  # None: no `->` (unit return).
	generics: Generics = field(default_factory=Generics)
	vis: Visibility = field(default_factory=Inherited)
	span: Span = _span_field()

	@property
	def receiver(self) -> Optional[ReceiverKind]:
		for arg in self.inputs:
			if isinstance(arg, SelfArg):
				return arg.kind
		return None


@dataclass(frozen=True)
class TraitItem:
	ident: Ident
	generics: Generics = field(default_factory=Generics)
	vis: Visibility = field(default_factory=Inherited)
	methods: Tuple[MethodSig, ...] = ()
	span: Span = _span_field()


@dataclass(frozen=True)
class ImplItem:
	"""`impl<..> Type { .. }` or `impl<..> Trait for Type { .. }`."""

	self_ty: TypeExpr
	trait_path: Optional[Path] = None
	generics: Generics = field(default_factory=Generics)
	methods: Tuple[MethodSig, ...] = ()
	span: Span = _span_field()


Item = TraitItem | ImplItem


@dataclass(frozen=True)
class DeclFile:
	items: Tuple[Item, ...] = ()
	file: Optional[str] = None


__all__ = [
	"Ident",
	"TypeExpr",
	"SliceType",
	"ArrayType",
	"PtrType",
	"RefType",
	"TupleType",
	"ParenType",
	"GroupType",
	"BareFnType",
	"TraitObjectType",
	"ImplTraitType",
	"InferType",
	"NeverType",
	"MacroType",
	"VerbatimType",
	"QSelf",
	"PathType",
	"TypeArg",
	"LifetimeArg",
	"BindingArg",
	"ConstArg",
	"GenericArg",
	"AngleArgs",
	"ParenArgs",
	"PathSegment",
	"Path",
	"TraitBound",
	"OutlivesBound",
	"TypeParamBound",
	"TypeParam",
	"LifetimeParam",
	"ConstParam",
	"GenericParam",
	"PredicateType",
	"PredicateLifetime",
	"PredicateEq",
	"WherePredicate",
	"WhereClause",
	"Generics",
	"Inherited",
	"Public",
	"Crate",
	"Restricted",
	"Visibility",
	"Pat",
	"IdentPat",
	"WildPat",
	"TuplePat",
	"ReceiverKind",
	"SelfArg",
	"CapturedArg",
	"FnArg",
	"Expr",
	"PathExpr",
	"RefExpr",
	"MethodSig",
	"TraitItem",
	"ImplItem",
	"Item",
	"DeclFile",
]
