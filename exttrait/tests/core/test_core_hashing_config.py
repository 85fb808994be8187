# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from exttrait.core.config import ExtConfig, HASH_ALGORITHMS
from exttrait.core.diagnostics import Diagnostic, diag_to_json, has_errors
from exttrait.core.errors import UnsupportedMember
from exttrait.core.span import Span
from exttrait.core.xxhash64 import hash64
from exttrait.parser.ast import Located


def test_xxhash64_reference_vectors() -> None:
	assert hash64(b"") == 0xEF46DB3751D8E999
	assert hash64(b"abc") == 0x44BC2CF5AD770999


def test_xxhash64_seed_and_long_input() -> None:
	data = bytes(range(100))
	assert hash64(data) == hash64(data)
	assert hash64(data, seed=1) != hash64(data)
	assert 0 <= hash64(data) < 2**64


def test_config_defaults_and_hasher() -> None:
	cfg = ExtConfig()
	assert cfg.hash_algorithm == "xxh64"
	assert cfg.name_prefix == "__ExtTrait"
	assert cfg.attribute_names == ("ext", "ext_trait::ext")
	assert cfg.hasher() is HASH_ALGORITHMS["xxh64"]


def test_config_blake2b_is_keyed_by_seed() -> None:
	h = ExtConfig(hash_algorithm="blake2b").hasher()
	assert h(b"impl X { }", 0) != h(b"impl X { }", 1)
	assert 0 <= h(b"impl X { }", 0) < 2**64


def test_config_custom_hash_fn_overrides_algorithm() -> None:
	cfg = ExtConfig(hash_algorithm="not-checked", hash_fn=lambda data, seed: 42)
	assert cfg.hasher()(b"anything", 0) == 42


def test_config_rejects_unknown_algorithm_and_bad_prefix() -> None:
	with pytest.raises(ValueError):
		ExtConfig(hash_algorithm="md5")
	with pytest.raises(ValueError):
		ExtConfig(name_prefix="9lives")


def test_error_to_diagnostic_carries_code_location_and_notes() -> None:
	err = UnsupportedMember("bad member", member_text="struct S;", loc=Located(line=3, column=5), notes=["n1"])
	diag = err.to_diagnostic("lib.rs")
	assert diag.code == "E-EXT-UNSUPPORTED-MEMBER"
	assert diag.phase == "transform"
	assert (diag.span.file, diag.span.line, diag.span.column) == ("lib.rs", 3, 5)
	assert diag.notes == ["n1"]
	assert diag.format() == "lib.rs:3:5: error: bad member [E-EXT-UNSUPPORTED-MEMBER]\n  note: n1"


def test_diag_to_json_and_has_errors() -> None:
	warn = Diagnostic(message="w", code="W-X", phase="expand", severity="warning", span=Span(line=1, column=2))
	obj = diag_to_json(warn, "a.rs")
	assert obj == {
		"phase": "expand",
		"code": "W-X",
		"message": "w",
		"severity": "warning",
		"file": "a.rs",
		"line": 1,
		"column": 2,
		"notes": [],
	}
	assert not has_errors([warn])
	assert has_errors([warn, Diagnostic(message="e")])


def test_span_shifted_only_moves_first_line_columns() -> None:
	assert Span(line=1, column=4).shifted(9, 10) == Span(line=10, column=14)
	assert Span(line=2, column=4).shifted(9, 10) == Span(line=11, column=4)
	assert Span().shifted(3, 3) == Span()
