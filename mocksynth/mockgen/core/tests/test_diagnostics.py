import pytest

from mocksynth.mockgen.core.diagnostics import Diagnostic, has_errors, report
from mocksynth.mockgen.core.span import Span


def test_report_appends_to_sink() -> None:
	sink: list[Diagnostic] = []
	span = Span(file="a.rs", line=3, column=7)
	report("bad thing", sink, span, phase="normalize", notes=["try this"])
	assert len(sink) == 1
	d = sink[0]
	assert d.message == "bad thing"
	assert d.phase == "normalize"
	assert d.severity == "error"
	assert d.span == span
	assert d.notes == ["try this"]


def test_report_without_sink_raises() -> None:
	with pytest.raises(RuntimeError, match="bad thing"):
		report("bad thing", None, Span())


def test_missing_span_is_normalized() -> None:
	d = Diagnostic(message="x", span=None)  # type: ignore[arg-type]
	assert d.span == Span()
	assert not d.span.is_known()


def test_has_errors_ignores_warnings() -> None:
	assert not has_errors([])
	assert not has_errors([Diagnostic(message="w", severity="warning")])
	assert has_errors([Diagnostic(message="w", severity="warning"), Diagnostic(message="e")])
