from types import SimpleNamespace

from mocksynth.mockgen.core.span import Span


def test_format_known_and_unknown() -> None:
	assert Span(file="f.rs", line=2, column=5).format() == "f.rs:2:5"
	assert Span(line=2).format() == "2:0"
	assert Span().format() == "<unknown location>"


def test_from_loc_copies_position_and_keeps_raw() -> None:
	loc = SimpleNamespace(line=4, column=1, end_line=4, end_column=9)
	span = Span.from_loc(loc, file="x.rs")
	assert (span.file, span.line, span.column, span.end_line, span.end_column) == ("x.rs", 4, 1, 4, 9)
	assert span.raw is loc


def test_from_loc_empty_meta_has_no_position() -> None:
	span = Span.from_loc(SimpleNamespace(empty=True), file="x.rs")
	assert span.file == "x.rs"
	assert not span.is_known()


def test_from_loc_fills_missing_file_on_span() -> None:
	span = Span(line=1, column=1)
	assert Span.from_loc(span, file="y.rs").file == "y.rs"
	assert Span.from_loc(Span(file="z.rs"), file="y.rs").file == "z.rs"
	assert Span.from_loc(None, file="y.rs") == Span(file="y.rs")


def test_raw_is_not_compared() -> None:
	assert Span(line=1, raw=object()) == Span(line=1, raw=object())
