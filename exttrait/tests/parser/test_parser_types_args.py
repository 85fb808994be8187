# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from exttrait.core.errors import AmbiguousNameArguments
from exttrait.parser import parse_args
from exttrait.parser import parser as p
from exttrait.parser.ast import AngleArgs, ExtArgs, PathSegment, PathType, RefType, TypeArg, VIS_PUB, VIS_RESTRICTED
from exttrait.render import render_type


def test_parse_reference_type() -> None:
	ty = p.parse_type("&'a mut Vec<T>")
	assert ty == RefType(
		inner=PathType(segments=[PathSegment(name="Vec", args=AngleArgs(args=[TypeArg(ty=PathType.simple("T"))]))]),
		lifetime="'a",
		mutable=True,
	)


@pytest.mark.parametrize(
	"text",
	[
		"&'a mut Vec<T>",
		"<T as Iterator>::Item",
		"fn(u8) -> u8",
		"dyn Fn(&str) -> bool + Send",
		"[u8; 4]",
		"(u8,)",
		"()",
		"impl Iterator<Item = u8>",
		"Option<Box<dyn Error>>",
		"::std::vec::Vec<u8>",
		"*const [u8]",
	],
)
def test_types_render_as_written(text: str) -> None:
	assert render_type(p.parse_type(text)) == text


def test_self_alias_detection() -> None:
	assert p.parse_type("Self").is_self_alias
	assert not p.parse_type("Self::Item").is_self_alias
	assert not p.parse_type("Selfish").is_self_alias


def test_ext_args_forms() -> None:
	assert p.parse_ext_args("") == ExtArgs()
	assert p.parse_ext_args("WidgetExt") == ExtArgs(name="WidgetExt")
	only_vis = p.parse_ext_args("pub")
	assert only_vis.name is None and only_vis.vis is not None and only_vis.vis.kind == VIS_PUB
	both = p.parse_ext_args("pub(crate) VecExt")
	assert both.name == "VecExt"
	assert both.vis is not None and both.vis.kind == VIS_RESTRICTED and both.vis.scope == "crate"
	scoped = p.parse_ext_args("pub(in crate::util) Ext")
	assert scoped.vis is not None and scoped.vis.scope == "in crate::util"


def test_ext_args_rejects_two_names() -> None:
	with pytest.raises(AmbiguousNameArguments) as excinfo:
		p.parse_ext_args("First Second")
	assert excinfo.value.code == "E-EXT-AMBIGUOUS-ARGS"
	assert excinfo.value.phase == "args"


def test_parse_args_adapter_reports_diagnostic() -> None:
	args, diags = parse_args("pub pub")
	assert args is None
	assert [d.code for d in diags] == ["E-EXT-AMBIGUOUS-ARGS"]
