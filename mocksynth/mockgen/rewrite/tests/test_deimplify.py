import pytest

from mocksynth.mockgen.parser import parse_type
from mocksynth.mockgen.render import render_type
from mocksynth.mockgen.rewrite import RewritePass, apply_pass, deimplify, has_impl_trait, supersuperfy


def test_impl_trait_becomes_boxed_trait_object() -> None:
	out = deimplify(parse_type("impl Iterator<Item = u32> + Send"))
	assert render_type(out) == "Box<dyn Iterator<Item = u32> + Send>"


def test_other_types_are_returned_as_is() -> None:
	ty = parse_type("Vec<u32>")
	assert deimplify(ty) is ty
	assert deimplify(None) is None


def test_only_top_level_is_erased() -> None:
	ty = parse_type("Option<impl Debug>")
	assert deimplify(ty) is ty
	# A walking pass that meets the leftover means the driver skipped erasure.
	with pytest.raises(AssertionError, match="driver bug"):
		supersuperfy(ty, diagnostics=[])


def test_apply_pass_dispatch() -> None:
	ty = parse_type("impl Clone")
	assert render_type(apply_pass(ty, RewritePass.DEIMPLIFY)) == "Box<dyn Clone>"
	with pytest.raises(ValueError):
		apply_pass(parse_type("Self"), RewritePass.DESELFIFY)


@pytest.mark.parametrize(
	("text", "found"),
	[
		("impl std::fmt::Debug", True),
		("Vec<impl Debug>", True),
		("&mut (u8, impl Clone)", True),
		("Box<dyn Fn(impl Debug) -> u8>", True),
		("fn(impl Debug)", True),
		("Vec<u32>", False),
		("Box<dyn Debug>", False),
		("m!(u8)", False),
	],
)
def test_has_impl_trait(text: str, found: bool) -> None:
	assert has_impl_trait(parse_type(text)) is found
