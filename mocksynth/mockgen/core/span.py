# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lightweight source span representation used by diagnostics.

A Span can wrap whatever location object the front-end provides (a lark
`Token` or tree `Meta`) via the `raw` field while also carrying optional
file/line/column info when available.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source span (best-effort file/line/column plus raw parser loc)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None
	raw: Any = field(default=None, compare=False, repr=False)

	@classmethod
	def from_loc(cls, loc: Any, *, file: Optional[str] = None) -> "Span":
		"""
		Construct a Span from an existing parser/location object.

		If `loc` is already a Span, it is returned unchanged (with `file` filled
		in when it was missing); otherwise the parser-specific object is stored in
		`raw` so richer renderers can recover details later.
		"""
		if loc is None:
			return cls(file=file)
		if isinstance(loc, cls):
			if file is not None and loc.file is None:
				return replace(loc, file=file)
			return loc
		# lark tree metas for empty rules carry no position at all.
		if getattr(loc, "empty", False):
			return cls(file=file, raw=loc)
		return cls(
			file=file or getattr(loc, "file", None) or getattr(loc, "filename", None),
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
			end_line=getattr(loc, "end_line", None),
			end_column=getattr(loc, "end_column", None),
			raw=loc,
		)

	def is_known(self) -> bool:
		return self.line is not None

	def format(self) -> str:
		"""Render `file:line:col` with whatever parts are known."""
		parts = []
		if self.file:
			parts.append(self.file)
		if self.line is not None:
			col = self.column if self.column is not None else 0
			parts.append(f"{self.line}:{col}")
		return ":".join(parts) if parts else "<unknown location>"


__all__ = ["Span"]
