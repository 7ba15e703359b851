from mocksynth.mockgen.parser import ast as A
from mocksynth.mockgen.parser import parse_decls, parse_generics, parse_method
from mocksynth.mockgen.render import render_generics, render_where
from mocksynth.mockgen.signature import merge_generics


def test_empty_is_identity() -> None:
	g = parse_generics("<T: Clone, 'a>")
	assert merge_generics(A.Generics(), g) is g
	assert merge_generics(g, A.Generics()) is g
	assert merge_generics(A.Generics(), A.Generics()) == A.Generics()


def test_explicit_empty_brackets_are_not_the_identity() -> None:
	g = parse_generics("<T>")
	merged = merge_generics(parse_generics("<>"), g)
	assert merged is not g
	assert [p.key for p in merged.params] == [("type", "T")]


def test_params_deduplicated_by_kind_and_name() -> None:
	x = parse_generics("<T: Clone, 'a>")
	y = parse_generics("<T: Copy, U, 'a, 'b, const T: usize>")
	merged = merge_generics(x, y)
	assert [p.key for p in merged.params] == [
		("type", "T"),
		("lifetime", "a"),
		("type", "U"),
		("lifetime", "b"),
		("const", "T"),
	]
	# The first side wins; bounds are never compared.
	assert render_generics(merged) == "<T: Clone, 'a, U, 'b, const T: usize>"


def test_where_predicates_deduplicated_by_left_hand_side() -> None:
	item = parse_decls("trait Foo<T> where T: Clone, 'a: 'b { }").items[0].generics
	method = parse_method("fn foo<U>(&self) where T: Copy, U: Debug, 'a: 'c").generics
	merged = merge_generics(item, method)
	assert render_where(merged) == "where T: Clone, 'a: 'b, U: Debug"


def test_where_clause_on_one_side_only() -> None:
	item = parse_generics("<T>")
	method = parse_method("fn foo<U>(&self) where U: Debug").generics
	assert merge_generics(item, method).where_clause is method.where_clause
	assert merge_generics(method, item).where_clause is method.where_clause


def test_inputs_are_not_modified() -> None:
	x = parse_generics("<T>")
	y = parse_generics("<U>")
	merge_generics(x, y)
	assert len(x.params) == 1 and len(y.params) == 1
