# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from exttrait.core.errors import MalformedInput
from exttrait.parser import parse_impl
from exttrait.parser import parser as p
from exttrait.parser.ast import (
	AngleArgs,
	AssociatedType,
	ConstParam,
	Constant,
	ForeignItem,
	LifetimeBound,
	LifetimeParam,
	MacroInvocation,
	Method,
	PathType,
	SelfArg,
	TraitBound,
	TypeArg,
	TypeParam,
	TypePredicate,
	TypedArg,
	Verbatim,
	VIS_PUB,
	VIS_RESTRICTED,
)


WIDGET = """
impl Widget {
	const SIZE: usize = 4;
	pub fn describe(&self) -> usize { self.size() }
}
"""


def test_parse_inherent_block_members() -> None:
	block = p.parse_impl_block(WIDGET)
	assert block.is_inherent
	assert block.self_ty == PathType.simple("Widget")
	assert len(block.items) == 2
	const, method = block.items
	assert isinstance(const, Constant)
	assert const.name == "SIZE"
	assert const.ty == PathType.simple("usize")
	assert const.value.text == "4"
	assert isinstance(method, Method)
	assert method.vis.kind == VIS_PUB
	assert method.sig.name == "describe"
	assert method.sig.inputs == [SelfArg(reference=True)]
	assert method.sig.output == PathType.simple("usize")
	assert method.body.text == "{ self.size() }"
	assert block.source == WIDGET


def test_parse_trait_impl_header() -> None:
	block = p.parse_impl_block("impl fmt::Display for Widget { }")
	assert not block.is_inherent
	assert block.trait_ is not None
	assert [s.name for s in block.trait_.path.segments] == ["fmt", "Display"]
	assert block.self_ty == PathType.simple("Widget")


def test_parse_generics_bounds_and_where() -> None:
	block = p.parse_impl_block("impl<'a, T: Clone + 'a, const N: usize> Foo<'a, T, N> where T: Debug {}")
	params = block.generics.params
	assert isinstance(params[0], LifetimeParam) and params[0].name == "'a"
	assert isinstance(params[1], TypeParam) and params[1].name == "T"
	assert params[1].bounds == [TraitBound(path=PathType.simple("Clone")), LifetimeBound(name="'a")]
	assert isinstance(params[2], ConstParam) and params[2].ty == PathType.simple("usize")
	where = block.generics.where_clause
	assert where is not None
	assert where.predicates == [
		TypePredicate(bounded=PathType.simple("T"), bounds=[TraitBound(path=PathType.simple("Debug"))]),
	]
	seg = block.self_ty.segments[0]
	assert isinstance(seg.args, AngleArgs)
	assert seg.args.args[1] == TypeArg(ty=PathType.simple("T"))


def test_parse_member_attributes_and_doc_comments() -> None:
	block = p.parse_impl_block(
		"""
impl u8 {
	/// Adds one.
	#[inline]
	pub(crate) fn succ(self) -> u8 { self + 1 }
}
"""
	)
	method = block.items[0]
	assert isinstance(method, Method)
	assert [a.text for a in method.attrs] == ["/// Adds one.", "#[inline]"]
	assert method.vis.kind == VIS_RESTRICTED
	assert method.vis.scope == "crate"
	assert method.sig.inputs == [SelfArg()]


def test_parse_bodiless_members_are_verbatim() -> None:
	block = p.parse_impl_block("impl X { fn f(&self); const C: u8; type T; }")
	assert [type(i) for i in block.items] == [Verbatim, Verbatim, Verbatim]
	assert block.items[0].tokens.text == "fn f(&self);"
	assert block.items[1].tokens.text == "const C: u8;"


def test_parse_macro_and_foreign_items() -> None:
	block = p.parse_impl_block("impl X { foo!(1, 2); struct S; use a::b; }")
	mac, st, use = block.items
	assert isinstance(mac, MacroInvocation)
	assert mac.path == "foo"
	assert mac.tokens.text == "(1, 2)"
	assert mac.semi
	assert isinstance(st, ForeignItem) and st.kind == "struct" and st.tokens.text == "struct S;"
	assert isinstance(use, ForeignItem) and use.kind == "use"


def test_parse_associated_type_and_patterns() -> None:
	block = p.parse_impl_block(
		"""
impl X {
	type Item<'a> = &'a u8 where Self: 'a;
	fn pair(&mut self, (a, b): (u8, u8), mut n: u32) {}
}
"""
	)
	ty, method = block.items
	assert isinstance(ty, AssociatedType)
	assert ty.name == "Item"
	assert ty.generics.where_clause is not None
	assert len(ty.generics.where_clause.predicates) == 1
	assert isinstance(method, Method)
	assert method.sig.inputs[0] == SelfArg(reference=True, mutable=True)
	second = method.sig.inputs[1]
	assert isinstance(second, TypedArg)
	assert second.pattern.text == "(a, b)"
	third = method.sig.inputs[2]
	assert isinstance(third, TypedArg)
	assert third.pattern.text == "mut n"


def test_parse_malformed_block_raises_with_location() -> None:
	with pytest.raises(MalformedInput) as excinfo:
		p.parse_impl_block("impl Widget {\n\tfn describe(&self) -> {}\n}")
	assert excinfo.value.code == "E-EXT-MALFORMED"
	assert excinfo.value.loc is not None
	assert excinfo.value.loc.line == 2


def test_parse_impl_adapter_reports_diagnostic() -> None:
	block, diags = parse_impl("struct NotAnImpl;", file="x.rs")
	assert block is None
	assert len(diags) == 1
	assert diags[0].code == "E-EXT-MALFORMED"
	assert diags[0].phase == "parser"
	assert diags[0].span.file == "x.rs"


def test_token_text_ignores_layout_and_comments() -> None:
	assert p.token_text("impl  X {\n\t// note\n}") == "impl X { }"
	assert p.token_text("impl X { /// doc\n}") == "impl X { /// doc }"
