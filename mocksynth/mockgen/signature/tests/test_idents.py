from mocksynth.mockgen.core.span import Span
from mocksynth.mockgen.parser import ast as A
from mocksynth.mockgen.signature import gen_mock_ident, gen_mod_ident


def test_mock_ident() -> None:
	assert gen_mock_ident(A.Ident("Foo")).name == "MockFoo"


def test_mod_ident() -> None:
	assert gen_mod_ident(A.Ident("Foo")).name == "__mock_Foo"
	assert gen_mod_ident(A.Ident("Foo"), A.Ident("Bar")).name == "__mock_Foo_Bar"


def test_spans_are_preserved() -> None:
	span = Span(file="a.rs", line=3, column=8)
	foo = A.Ident("Foo", span=span)
	assert gen_mock_ident(foo).span == span
	assert gen_mod_ident(foo, A.Ident("Bar")).span == span
