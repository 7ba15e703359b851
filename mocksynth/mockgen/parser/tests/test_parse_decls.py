from pathlib import Path

import pytest
from lark.exceptions import UnexpectedInput

from mocksynth.mockgen.parser import ast as A
from mocksynth.mockgen.parser import (
	parse_decl_path,
	parse_decls,
	parse_decls_collecting,
	parse_generics,
	parse_method,
	parse_visibility,
)
from mocksynth.mockgen.render import render_method

SRC = """
// a trait and two impls
pub trait Foo<T: Clone> where T: Default {
	fn foo(&self, x: u32) -> u64;
	fn bar(x: &mut u32);
}

impl<T> Bar for Baz<T> {
	fn new() -> Self;
}

impl Qux {
	pub(crate) fn get(&mut self) -> &mut Vec<u8>;
}
"""


def test_parse_items() -> None:
	decls = parse_decls(SRC, file="decls.rs")
	assert decls.file == "decls.rs"
	trait, trait_impl, inherent = decls.items

	assert isinstance(trait, A.TraitItem)
	assert trait.ident.name == "Foo"
	assert trait.vis == A.Public()
	assert [p.key for p in trait.generics.params] == [("type", "T")]
	assert trait.generics.where_clause is not None
	assert len(trait.generics.where_clause.predicates) == 1
	assert [m.ident.name for m in trait.methods] == ["foo", "bar"]

	assert isinstance(trait_impl, A.ImplItem)
	assert trait_impl.trait_path is not None
	assert trait_impl.trait_path.last_name() == "Bar"
	assert trait_impl.self_ty.path.last_name() == "Baz"
	assert trait_impl.generics.has_brackets

	assert isinstance(inherent, A.ImplItem)
	assert inherent.trait_path is None
	assert inherent.self_ty.path.last_name() == "Qux"
	assert inherent.generics.is_empty
	assert isinstance(inherent.methods[0].vis, A.Restricted)


def test_spans_carry_file_and_line() -> None:
	decls = parse_decls(SRC, file="decls.rs")
	foo = decls.items[0].methods[0]
	assert foo.span.file == "decls.rs"
	assert foo.span.line == 4
	assert foo.ident.span.line == 4


def test_method_receivers() -> None:
	assert parse_method("fn a(self)").receiver is A.ReceiverKind.VALUE
	assert parse_method("fn a(mut self)").inputs[0].mutable
	assert parse_method("fn a(&self)").receiver is A.ReceiverKind.REF
	assert parse_method("fn a(&'x mut self)").receiver is A.ReceiverKind.REF_MUT
	assert parse_method("fn a(&'x mut self)").inputs[0].lifetime == "x"
	assert parse_method("fn a(x: u32)").receiver is None


def test_method_patterns() -> None:
	sig = parse_method("fn a(mut x: u32, ref y: u8, _: i8, z @ w: u16, (p, q): (u8, u8));")
	pats = [arg.pat for arg in sig.inputs]
	assert isinstance(pats[0], A.IdentPat) and pats[0].mutable
	assert isinstance(pats[1], A.IdentPat) and pats[1].by_ref
	assert isinstance(pats[2], A.WildPat)
	assert isinstance(pats[3], A.IdentPat) and pats[3].subpat == A.IdentPat(ident=A.Ident("w"))
	assert isinstance(pats[4], A.TuplePat) and len(pats[4].elems) == 2


def test_method_generics_and_where() -> None:
	sig = parse_method("fn get<'a, T: Clone + 'a, const N: usize>(&'a self, t: [T; N]) -> &'a T where T: Send")
	assert [p.key for p in sig.generics.params] == [("lifetime", "a"), ("type", "T"), ("const", "N")]
	assert len(sig.generics.params[1].bounds) == 2
	assert render_method(sig) == "fn get<'a, T: Clone + 'a, const N: usize>(&'a self, t: [T; N]) -> &'a T where T: Send"


def test_parse_generics_defaults_and_empty() -> None:
	g = parse_generics("<T = u32, 'a: 'b + 'c>")
	assert g.params[0].default == A.PathType(path=A.Path.from_idents("u32"))
	assert g.params[1].bounds == ("b", "c")
	empty = parse_generics("<>")
	assert empty.has_brackets
	assert not empty.is_empty
	assert empty.params == ()


@pytest.mark.parametrize(
	("text", "expected"),
	[
		("", A.Inherited()),
		("pub", A.Public()),
		("crate", A.Crate()),
		("pub(crate)", A.Restricted(path=A.Path.from_idents("crate"))),
		("pub(super)", A.Restricted(path=A.Path.from_idents("super"))),
		("pub(self)", A.Restricted(path=A.Path.from_idents("self"))),
		("pub(in crate::a)", A.Restricted(path=A.Path.from_idents("crate", "a"), has_in=True)),
	],
)
def test_parse_visibility(text: str, expected: A.Visibility) -> None:
	assert parse_visibility(text) == expected


def test_syntax_error_raises() -> None:
	with pytest.raises(UnexpectedInput):
		parse_decls("trait { }")


def test_collecting_converts_syntax_errors() -> None:
	decls, diags = parse_decls_collecting("trait Foo {\n\tfn foo(&self) -> ;\n}\n", file="bad.rs")
	assert decls is None
	assert len(diags) == 1
	d = diags[0]
	assert d.phase == "parser"
	assert d.severity == "error"
	assert d.span.file == "bad.rs"
	assert d.span.line == 2
	assert "\n" not in d.message


def test_collecting_success_has_no_diagnostics() -> None:
	decls, diags = parse_decls_collecting(SRC)
	assert diags == []
	assert decls is not None and len(decls.items) == 3


def test_parse_decl_path(tmp_path: Path) -> None:
	src = tmp_path / "decls.rs"
	src.write_text(SRC)
	decls, diags = parse_decl_path(src)
	assert diags == []
	assert decls.items[0].span.file == str(src)
