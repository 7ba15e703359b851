"""
mockgen declaration parser.

`parser.parse_decls` raises lark errors directly (handy in tests); the driver
uses `parse_decls_collecting`, which turns syntax errors into parser-phase
diagnostics so a run can report them alongside everything else.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

from lark.exceptions import UnexpectedInput

from . import ast as parser_ast
from .parser import parse_decls, parse_generics, parse_method, parse_type, parse_visibility
from mocksynth.mockgen.core.diagnostics import Diagnostic
from mocksynth.mockgen.core.span import Span


def _syntax_message(err: UnexpectedInput) -> str:
	# lark's str() includes a multi-line context dump; the first line is the
	# useful part for a one-line diagnostic.
	text = str(err).strip()
	return text.splitlines()[0] if text else "syntax error"


def parse_decls_collecting(
	source: str, *, file: Optional[str] = None
) -> Tuple[Optional[parser_ast.DeclFile], List[Diagnostic]]:
	"""
	Parse a declaration file, converting syntax errors into diagnostics.

	Returns `(decl_file, diagnostics)`; `decl_file` is None when parsing failed.
	"""
	try:
		return parse_decls(source, file=file), []
	except UnexpectedInput as err:
		span = Span(
			file=file,
			line=getattr(err, "line", None),
			column=getattr(err, "column", None),
			raw=err,
		)
		return None, [Diagnostic(message=_syntax_message(err), phase="parser", severity="error", span=span)]


def parse_decl_path(path: Path) -> Tuple[Optional[parser_ast.DeclFile], List[Diagnostic]]:
	"""Read and parse a declaration file from disk."""
	return parse_decls_collecting(path.read_text(), file=str(path))


__all__ = [
	"parser_ast",
	"parse_decls",
	"parse_decls_collecting",
	"parse_decl_path",
	"parse_generics",
	"parse_method",
	"parse_type",
	"parse_visibility",
]
