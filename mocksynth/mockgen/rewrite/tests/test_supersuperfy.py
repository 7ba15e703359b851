import pytest

from mocksynth.mockgen.core.diagnostics import Diagnostic
from mocksynth.mockgen.parser import ast as A
from mocksynth.mockgen.parser import parse_type
from mocksynth.mockgen.render import render_type
from mocksynth.mockgen.rewrite import TypeRewriter, supersuperfy


@pytest.mark.parametrize(
	("text", "expected"),
	[
		("super::Foo", "super::super::super::Foo"),
		("super::a::Foo<u8>", "super::super::super::a::Foo<u8>"),
		("Vec<super::Foo>", "Vec<super::super::super::Foo>"),
		("&'a mut [super::Foo]", "&'a mut [super::super::super::Foo]"),
		("*const (u8, super::Foo)", "*const (u8, super::super::super::Foo)"),
		("Box<dyn super::Tr<Out = super::X>>", "Box<dyn super::super::super::Tr<Out = super::super::super::X>>"),
		("Box<dyn Fn(super::A) -> super::B>", "Box<dyn Fn(super::super::super::A) -> super::super::super::B>"),
	],
)
def test_super_paths_are_lifted(text: str, expected: str) -> None:
	assert render_type(supersuperfy(parse_type(text))) == expected


@pytest.mark.parametrize("text", ["Foo", "crate::Foo", "self::Foo", "a::super::Foo", "[u8; 4]", "_"])
def test_other_paths_are_unchanged(text: str) -> None:
	ty = parse_type(text)
	assert supersuperfy(ty) is ty


def test_lifting_composes() -> None:
	twice = supersuperfy(supersuperfy(parse_type("super::Foo")))
	assert [s.ident.name for s in twice.path.segments] == ["super"] * 5 + ["Foo"]


def test_qualified_self_is_reported_and_still_lifted() -> None:
	diags: list[Diagnostic] = []
	out = supersuperfy(parse_type("<T as super::Tr>::Out"), diagnostics=diags)
	assert [d.message for d in diags] == ["qualified-self paths are not supported"]
	assert render_type(out) == "<T as super::super::super::Tr>::Out"


def test_macro_type_is_reported() -> None:
	diags: list[Diagnostic] = []
	ty = parse_type("m!(x)")
	assert supersuperfy(ty, diagnostics=diags) is ty
	assert len(diags) == 1
	assert diags[0].message == "type `m!(x)` is not supported in this position"


def test_macro_type_without_sink_raises() -> None:
	with pytest.raises(RuntimeError, match="not supported"):
		supersuperfy(parse_type("m!(x)"))


def test_verbatim_type_is_reported() -> None:
	diags: list[Diagnostic] = []
	supersuperfy(A.VerbatimType(text="typeof(x)"), diagnostics=diags)
	assert diags[0].message == "type `typeof(x)` is not supported in this position"


def test_function_pointer_is_not_implemented() -> None:
	with pytest.raises(NotImplementedError):
		supersuperfy(parse_type("Vec<fn(u32) -> u64>"))


def test_unknown_node_is_not_implemented() -> None:
	with pytest.raises(NotImplementedError):
		TypeRewriter().rewrite(object())  # type: ignore[arg-type]


def test_group_type_is_walked() -> None:
	ty = A.GroupType(elem=parse_type("super::X"))
	assert render_type(supersuperfy(ty)) == "super::super::super::X"
