# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Generic parameter projection: `<A, B: Bound, 'c>` declares, `<A, B, 'c>` refers."""

from __future__ import annotations

from typing import List, Optional, Sequence

from exttrait.parser.ast import (
	AngleArgs,
	ConstArg,
	ConstParam,
	GenericArg,
	GenericParam,
	LifetimeArg,
	LifetimeParam,
	Opaque,
	PathType,
	TypeArg,
	TypeParam,
)


def project_param(param: GenericParam) -> GenericArg:
	if isinstance(param, TypeParam):
		return TypeArg(ty=PathType.simple(param.name))
	if isinstance(param, LifetimeParam):
		return LifetimeArg(name=param.name)
	if isinstance(param, ConstParam):
		return ConstArg(expr=Opaque(param.name))
	raise TypeError(f"unknown generic parameter kind: {type(param).__name__}")


def project(params: Sequence[GenericParam]) -> Optional[AngleArgs]:
	"""Argument list referring to `params` in declaration order, or None when empty."""
	if not params:
		return None
	args: List[GenericArg] = [project_param(p) for p in params]
	return AngleArgs(args=args)


def contract_path(name: str, params: Sequence[GenericParam]) -> PathType:
	"""`Name<projected args>`; a bare `Name` when there are no parameters."""
	return PathType.simple(name, project(params))


__all__ = ["contract_path", "project", "project_param"]
