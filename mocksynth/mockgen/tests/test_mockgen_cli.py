from __future__ import annotations

import json
import re
from pathlib import Path

import pytest

from mocksynth.mockgen.mockgen import main

GOOD = """
trait Foo {
	fn foo(&self, x: u32) -> u64;
}
"""


def _write(tmp_path: Path, text: str, name: str = "decls.rs") -> Path:
	src = tmp_path / name
	src.write_text(text)
	return src


def test_json_success(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write(tmp_path, GOOD)
	assert main([str(src), "--json"]) == 0
	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 0
	assert payload["diagnostics"] == []
	assert [p["mock"] for p in payload["plans"]] == ["MockFoo"]
	assert payload["plans"][0]["methods"][0]["vis"] == "pub(in super::super)"


def test_json_levels(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write(tmp_path, GOOD)
	assert main([str(src), "--json", "--levels", "1"]) == 0
	payload = json.loads(capsys.readouterr().out)
	assert payload["plans"][0]["methods"][0]["vis"] == "pub(in super)"


def test_json_reports_diagnostics(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write(tmp_path, "trait Foo { fn foo(&self, _: u32); }\n")
	assert main([str(src), "--json"]) == 1
	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 1
	(diag,) = payload["diagnostics"]
	assert diag["phase"] == "normalize"
	assert diag["severity"] == "error"
	assert diag["file"] == str(src)
	assert diag["line"] == 1
	assert diag["notes"] == []
	# The plan is still produced.
	assert len(payload["plans"]) == 1


def test_json_syntax_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write(tmp_path, "trait {\n")
	assert main([str(src), "--json"]) == 1
	payload = json.loads(capsys.readouterr().out)
	assert payload["plans"] == []
	assert payload["diagnostics"][0]["phase"] == "parser"


def test_multiple_sources(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	a = _write(tmp_path, GOOD, "a.rs")
	b = _write(tmp_path, "trait Bar { fn bar(&mut self) -> &mut u8; }", "b.rs")
	assert main([str(a), str(b), "--json"]) == 0
	payload = json.loads(capsys.readouterr().out)
	assert [p["mock"] for p in payload["plans"]] == ["MockFoo", "MockBar"]


def test_missing_source(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	missing = tmp_path / "nope.rs"
	assert main([str(missing)]) == 1
	err = capsys.readouterr().err
	assert f"{missing}:?:?: error: source not found" in err


def test_text_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write(tmp_path, GOOD + "trait Bad { fn b(&self, ref x: u32); }\n")
	assert main([str(src)]) == 1
	captured = capsys.readouterr()
	assert "MockFoo (module __mock_Foo) implements Foo" in captured.out
	assert "fn foo(&self, x: u32) -> u64" in captured.out
	assert re.search(rf"{re.escape(str(src))}:5:\d+: error: ", captured.err)
	assert "error: by-reference argument bindings are not supported" in captured.err


def test_levels_must_be_positive(tmp_path: Path) -> None:
	src = _write(tmp_path, GOOD)
	with pytest.raises(SystemExit) as excinfo:
		main([str(src), "--levels", "0"])
	assert excinfo.value.code == 2


def test_json_impl_trait_argument(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write(tmp_path, "trait Foo {\n\tfn foo(&self, x: impl std::fmt::Debug) -> u32;\n\tfn bar(&self);\n}\n")
	assert main([str(src), "--json"]) == 1
	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 1
	(diag,) = payload["diagnostics"]
	assert diag["phase"] == "driver"
	assert diag["message"] == "`impl Trait` arguments are not supported"
	assert diag["line"] == 2
	(plan,) = payload["plans"]
	assert [m["name"] for m in plan["methods"]] == ["foo", "bar"]
