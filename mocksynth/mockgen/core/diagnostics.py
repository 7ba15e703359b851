# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Common diagnostic structure for the parser, the signature passes and the driver.

Passes never stop at the first user error: they append to a caller-owned
`list[Diagnostic]` and keep going, so one run can surface every problem in a
declaration. Internal contract breaks (pass ordering bugs, shapes we have not
implemented yet) are *not* diagnostics; they raise.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .span import Span


@dataclass
class Diagnostic:
	"""Represents a generator diagnostic (error/warning/etc.)."""

	message: str
	code: str | None = None
	# Optional phase label ("parser", "normalize", "rewrite", "classify", ...).
	#
	# Every pass reports into the same run-wide sink; the phase keeps JSON
	# output and test expectations unambiguous.
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Source location (Span() denotes unknown).
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		# Normalize missing spans to the sentinel Span() so downstream tooling
		# can rely on a structured object instead of None.
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()


def report(
	msg: str,
	diagnostics: Optional[list[Diagnostic]],
	span: Span | None,
	*,
	phase: str | None = None,
	notes: Optional[list[str]] = None,
) -> None:
	"""Append a diagnostic if a sink is provided, otherwise raise RuntimeError."""
	if diagnostics is not None:
		diagnostics.append(Diagnostic(message=msg, phase=phase, severity="error", span=span, notes=notes or []))
	else:
		raise RuntimeError(msg)


def has_errors(diagnostics: list[Diagnostic]) -> bool:
	return any(d.severity == "error" for d in diagnostics)


__all__ = ["Diagnostic", "report", "has_errors"]
