# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Union of two generic parameter lists (item generics + method generics)."""

from __future__ import annotations

from typing import Iterable, List, Optional, TypeVar

from mocksynth.mockgen.parser import ast as A

_K = TypeVar("_K")


def _union(first: Iterable[_K], second: Iterable[_K]) -> tuple[_K, ...]:
	"""`first`, then each element of `second` whose key `first` does not already have."""
	out: List[_K] = list(first)
	seen = {x.key for x in out}  # type: ignore[attr-defined]
	for x in second:
		if x.key not in seen:  # type: ignore[attr-defined]
			seen.add(x.key)  # type: ignore[attr-defined]
			out.append(x)
	return tuple(out)


def _merge_where(x: Optional[A.WhereClause], y: Optional[A.WhereClause]) -> Optional[A.WhereClause]:
	if x is None:
		return y
	if y is None:
		return x
	return A.WhereClause(predicates=_union(x.predicates, y.predicates))


def merge_generics(x: A.Generics, y: A.Generics) -> A.Generics:
	"""
	Merge two generic parameter lists.

	A side with no angle brackets at all is the identity. Otherwise the result
	keeps every parameter of `x` and appends those of `y` whose `(kind, name)`
	is new; where predicates are merged the same way, keyed by their
	left-hand side. Bounds are never compared: `T: Clone` and `T: Copy` are
	the same parameter and the one from `x` wins.
	"""
	if x.is_empty:
		return y
	if y.is_empty:
		return x
	return A.Generics(
		params=_union(x.params, y.params),
		where_clause=_merge_where(x.where_clause, y.where_clause),
		has_brackets=True,
	)


__all__ = ["merge_generics"]
