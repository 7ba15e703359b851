# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Visibility of items emitted below the declaration's own module.

Expectation types are emitted `levels` modules deeper than the mocked item.
Relative visibilities must be re-rooted so the same set of modules can still
see them; absolute ones (`pub`, `crate`, `pub(crate)`, `pub(in crate::x)`)
mean the same thing at any depth.
"""

from __future__ import annotations

from mocksynth.mockgen.core.span import Span
from mocksynth.mockgen.parser import ast as A

CRATE = "crate"
SELF = "self"
SUPER = "super"


def _supers(levels: int, span: Span) -> tuple[A.PathSegment, ...]:
	return tuple(A.PathSegment(ident=A.Ident(SUPER, span=span)) for _ in range(levels))


def expectation_visibility(vis: A.Visibility, levels: int) -> A.Visibility:
	"""
	Compute the visibility an item `levels` modules down needs to be seen
	exactly where `vis` made the original visible.

	Private (`Inherited`) becomes `pub(in super::...)` reaching back up to the
	declaring module. `pub(super)` and `pub(in path)` gain `levels` leading
	`super`s; a leading `self` names the declaring module and is replaced by
	them. Crate-rooted and public visibilities are returned unchanged.
	"""
	if levels < 1:
		raise ValueError(f"levels must be at least 1, got {levels}")
	if isinstance(vis, A.Inherited):
		return A.Restricted(path=A.Path(segments=_supers(levels, Span())), has_in=True)
	if isinstance(vis, A.Restricted):
		first = vis.path.first_name()
		if first == CRATE:
			return vis
		rest = vis.path.segments
		span = rest[0].ident.span if rest else Span()
		if first == SELF:
			rest = rest[1:]
		return A.Restricted(path=A.Path(segments=_supers(levels, span) + rest), has_in=True)
	return vis


__all__ = ["expectation_visibility"]
