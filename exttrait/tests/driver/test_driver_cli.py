# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
from pathlib import Path

import pytest

from exttrait.driver import main


GOOD = "#[ext(WExt)]\nimpl W {\n\tfn f(&self) {}\n}\n"
BAD = "#[ext]\nimpl Display for W {\n\tfn f(&self) {}\n}\n"


def _write(tmp_path: Path, name: str, text: str) -> Path:
	path = tmp_path / name
	path.write_text(text, encoding="utf-8")
	return path


def test_output_file_written(tmp_path: Path) -> None:
	src = _write(tmp_path, "lib.rs", GOOD)
	out = tmp_path / "out.rs"
	assert main([str(src), "-o", str(out)]) == 0
	assert out.read_text(encoding="utf-8") == (
		"trait WExt {\n\tfn f(&self);\n}\nimpl WExt for W {\n\tfn f(&self) {}\n}\n"
	)


def test_stdout_when_no_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write(tmp_path, "lib.rs", GOOD)
	assert main([str(src)]) == 0
	captured = capsys.readouterr()
	assert captured.out.startswith("trait WExt {")
	assert captured.err == ""


def test_json_reports_errors_and_exit_code(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write(tmp_path, "bad.rs", BAD)
	assert main([str(src), "--json"]) == 1
	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 1
	assert "outputs" not in payload
	(diag,) = payload["diagnostics"]
	assert diag["code"] == "E-EXT-ALREADY-IMPLEMENTS"
	assert diag["phase"] == "transform"
	assert diag["file"] == str(src)
	assert diag["line"] == 2


def test_json_success_includes_outputs(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write(tmp_path, "lib.rs", GOOD)
	assert main([str(src), "--json"]) == 0
	payload = json.loads(capsys.readouterr().out)
	assert payload["diagnostics"] == []
	assert payload["outputs"][0]["file"] == str(src)
	assert payload["outputs"][0]["text"].startswith("trait WExt {")


def test_human_diagnostics_go_to_stderr(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write(tmp_path, "bad.rs", BAD)
	out = tmp_path / "out.rs"
	assert main([str(src), "-o", str(out)]) == 1
	assert not out.exists()
	err = capsys.readouterr().err
	assert f"{src}:2:1: error:" in err
	assert "[E-EXT-ALREADY-IMPLEMENTS]" in err


def test_output_with_several_sources_is_a_usage_error(tmp_path: Path) -> None:
	a = _write(tmp_path, "a.rs", GOOD)
	b = _write(tmp_path, "b.rs", GOOD)
	with pytest.raises(SystemExit) as excinfo:
		main([str(a), str(b), "-o", str(tmp_path / "out.rs")])
	assert excinfo.value.code == 2


def test_prefix_and_hash_options_change_derived_names(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write(tmp_path, "lib.rs", "#[ext]\nimpl W { fn f(&self) {} }\n")
	assert main([str(src), "--prefix", "WAuto"]) == 0
	default_hash = capsys.readouterr().out
	assert default_hash.startswith("trait WAuto")
	assert main([str(src), "--prefix", "WAuto", "--hash", "blake2b"]) == 0
	assert capsys.readouterr().out != default_hash


def test_custom_attribute_option(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write(tmp_path, "lib.rs", "#[extend(WExt)]\nimpl W { fn f(&self) {} }\n")
	assert main([str(src), "--attr", "extend"]) == 0
	assert capsys.readouterr().out.startswith("trait WExt {")


def test_missing_file_reports_driver_diagnostic(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	missing = tmp_path / "nope.rs"
	assert main([str(missing), "--json"]) == 1
	payload = json.loads(capsys.readouterr().out)
	(diag,) = payload["diagnostics"]
	assert diag["phase"] == "driver"
	assert diag["code"] == "E-EXT-IO"
	assert diag["file"] == str(missing)


def test_invalid_prefix_is_a_usage_error(tmp_path: Path) -> None:
	src = _write(tmp_path, "lib.rs", GOOD)
	with pytest.raises(SystemExit) as excinfo:
		main([str(src), "--prefix", "9bad"])
	assert excinfo.value.code == 2
