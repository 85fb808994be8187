# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from exttrait.core.config import ExtConfig
from exttrait.expand import NAME_COLLISION, expand_file, expand_source


def test_expand_replaces_the_attributed_impl_only() -> None:
	src = "struct Widget;\n\n#[ext(WidgetExt)]\nimpl Widget {\n\tfn size(&self) -> usize { 4 }\n}\n\nfn main() {}\n"
	result = expand_source(src, file="lib.rs")
	assert result.ok
	assert result.diagnostics == []
	assert result.text == (
		"struct Widget;\n\n"
		"trait WidgetExt {\n"
		"\tfn size(&self) -> usize;\n"
		"}\n"
		"impl WidgetExt for Widget {\n"
		"\tfn size(&self) -> usize { 4 }\n"
		"}\n\n"
		"fn main() {}\n"
	)
	assert [e.name.ident for e in result.expansions] == ["WidgetExt"]


def test_expand_generic_block() -> None:
	src = "#[ext(pub VecExt)]\nimpl<T: Clone> Vec<T> {\n\tfn dup(&self) -> Self { self.clone() }\n}\n"
	result = expand_source(src)
	assert result.text == (
		"pub trait VecExt<T> where T: Clone {\n"
		"\tfn dup(&self) -> Self;\n"
		"}\n"
		"impl<T> VecExt<T> for Vec<T> where T: Clone {\n"
		"\tfn dup(&self) -> Self { self.clone() }\n"
		"}\n"
	)


def test_doc_comments_travel_to_both_items() -> None:
	src = "/// A widget ext.\n#[ext]\nimpl Widget { fn f(&self) {} }\n"
	result = expand_source(src)
	assert result.ok
	assert result.text.count("/// A widget ext.") == 2
	assert "#[ext]" not in result.text
	ident = result.expansions[0].name.ident
	assert ident.startswith("__ExtTrait")
	assert f"trait {ident} {{" in result.text
	assert f"impl {ident} for Widget {{" in result.text


def test_crate_qualified_attribute_path() -> None:
	result = expand_source("#[ext_trait::ext(pub Ext)]\nimpl u8 { fn twice(self) -> u8 { self * 2 } }")
	assert result.ok
	assert result.text.startswith("pub trait Ext {\n")


def test_other_attributes_are_left_alone() -> None:
	src = "#[derive(Debug)]\nstruct S;\n\n#[inline]\nfn f() {}\n\nimpl S { fn g(&self) {} }\n"
	result = expand_source(src)
	assert result.text == src
	assert result.diagnostics == []
	assert result.expansions == []


def test_failing_item_is_left_unchanged_and_others_expand() -> None:
	src = "\n#[ext]\nimpl Display for W { fn f(&self) {} }\n#[ext(Good)]\nimpl G { fn g(&self) {} }\n"
	result = expand_source(src, file="lib.rs")
	assert not result.ok
	assert len(result.diagnostics) == 1
	diag = result.diagnostics[0]
	assert diag.code == "E-EXT-ALREADY-IMPLEMENTS"
	assert (diag.span.file, diag.span.line) == ("lib.rs", 3)
	assert "#[ext]\nimpl Display for W { fn f(&self) {} }" in result.text
	assert "trait Good {" in result.text


def test_bad_attribute_arguments() -> None:
	src = "#[ext(First Second)]\nimpl W { fn f(&self) {} }\n"
	result = expand_source(src, file="lib.rs")
	assert result.text == src
	diag = result.diagnostics[0]
	assert diag.code == "E-EXT-AMBIGUOUS-ARGS"
	assert diag.phase == "args"
	assert diag.span.line == 1


def test_ext_attribute_on_a_function_is_rejected() -> None:
	src = "#[ext]\nfn f() {}\n"
	result = expand_source(src)
	assert result.text == src
	diag = result.diagnostics[0]
	assert diag.code == "E-EXT-MALFORMED"
	assert diag.phase == "expand"
	assert "impl" in diag.message


def test_duplicate_ext_attribute_is_rejected() -> None:
	result = expand_source("#[ext]\n#[ext(Other)]\nimpl W { fn f(&self) {} }\n")
	assert not result.ok
	assert result.diagnostics[0].message == "duplicate ext attribute on one item"
	assert result.diagnostics[0].span.line == 2


def test_unsupported_member_location_is_in_file_coordinates() -> None:
	src = "fn a() {}\n#[ext]\nimpl W {\n\tfn f(&self) {}\n\tstruct Inner;\n}\n"
	result = expand_source(src)
	diag = result.diagnostics[0]
	assert diag.code == "E-EXT-UNSUPPORTED-MEMBER"
	assert diag.span.line == 5


def test_derived_name_collision_is_a_warning() -> None:
	cfg = ExtConfig(hash_fn=lambda data, seed: 1)
	src = "#[ext]\nimpl A { fn a(&self) {} }\n#[ext]\nimpl B { fn b(&self) {} }\n"
	result = expand_source(src, config=cfg)
	assert result.ok
	assert [d.code for d in result.diagnostics] == [NAME_COLLISION]
	warning = result.diagnostics[0]
	assert warning.severity == "warning"
	assert warning.span.line == 3
	assert warning.notes[0] == "first used by the impl at line 1"
	assert result.text.count("trait __ExtTrait1 {") == 2


def test_explicit_names_do_not_warn() -> None:
	src = "#[ext(Same)]\nimpl A { fn a(&self) {} }\n#[ext(Same)]\nimpl B { fn b(&self) {} }\n"
	result = expand_source(src)
	assert result.diagnostics == []


def test_custom_attribute_names() -> None:
	cfg = ExtConfig(attribute_names=("extend",))
	result = expand_source("#[extend(WExt)]\nimpl W { fn f(&self) {} }\n#[ext(Other)]\nimpl V { fn v(&self) {} }\n", config=cfg)
	assert result.ok
	assert [e.name.ident for e in result.expansions] == ["WExt"]
	assert "#[ext(Other)]\nimpl V" in result.text


def test_expand_file_reads_utf8(tmp_path) -> None:
	path = tmp_path / "lib.rs"
	path.write_text("#[ext(Ext)]\nimpl W { fn f(&self) {} }\n", encoding="utf-8")
	result = expand_file(path)
	assert result.ok
	assert result.text.startswith("trait Ext {")


def test_large_impl_block_expands_every_member() -> None:
	body = "".join(f"\tfn m{i}<T: Clone>(&self, v: Vec<T>) -> Option<T> {{ v.first().cloned() }}\n" for i in range(40))
	result = expand_source(f"#[ext(Big)]\nimpl Many {{\n{body}}}\n")
	assert result.ok
	decl, impl = result.expansions[0]
	assert len(decl.items) == len(impl.items) == 40
	assert result.text.count("-> Option<T>;") == 40
