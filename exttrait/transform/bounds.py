# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Where-clause stages: bound normalization and self-type relinking.

`normalize` moves inline parameter bounds (`<T: Clone>`) into the where-clause
so later stages see every constraint in one list. `relink` then makes sure a
constraint written against the literal self type also exists against `Self`
and the other way round; a trait declaration can only spell the implementing
type as `Self`, while the implementation usually spells it out.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List

from exttrait.parser.ast import (
	GenericParam,
	ImplementationBlock,
	LifetimeParam,
	LifetimePredicate,
	PathType,
	TypeExpr,
	TypeParam,
	TypePredicate,
	WhereClause,
	WherePredicate,
)

logger = logging.getLogger(__name__)


def normalize(block: ImplementationBlock) -> ImplementationBlock:
	"""
	Return a copy of `block` whose generic parameters carry no inline bounds.

	Bounds of type and lifetime parameters become where-clause predicates,
	appended after any existing predicates in parameter declaration order.
	Const parameters are left alone. A block with nothing to move is returned
	as is.
	"""
	params: List[GenericParam] = []
	moved: List[WherePredicate] = []
	for param in block.generics.params:
		if isinstance(param, TypeParam) and param.bounds:
			moved.append(TypePredicate(bounded=PathType.simple(param.name), bounds=list(param.bounds)))
			params.append(replace(param, bounds=[]))
		elif isinstance(param, LifetimeParam) and param.bounds:
			moved.append(LifetimePredicate(lifetime=param.name, bounds=list(param.bounds)))
			params.append(replace(param, bounds=[]))
		else:
			params.append(param)
	if not moved:
		return block
	where = block.generics.where_clause
	predicates = list(where.predicates) if where is not None else []
	predicates.extend(moved)
	logger.debug("normalize: moved %d inline bound list(s) into the where-clause", len(moved))
	generics = replace(block.generics, params=params, where_clause=WhereClause(predicates=predicates))
	return replace(block, generics=generics)


def _self_alias() -> PathType:
	return PathType.simple("Self")


def _is_self_alias(ty: TypeExpr) -> bool:
	return isinstance(ty, PathType) and ty.is_self_alias


def relink(block: ImplementationBlock) -> ImplementationBlock:
	"""
	Mirror predicates between the concrete self type and `Self`.

	For each `SelfTy: Bounds` predicate a `Self: Bounds` copy is appended, and
	for each `Self: Bounds` a `SelfTy: Bounds` copy; `for<...>` binders travel
	with the bounds. Copies that would duplicate an existing predicate exactly
	are skipped. Predicates on other types are not touched.
	"""
	where = block.generics.where_clause
	if where is None or _is_self_alias(block.self_ty):
		return block
	predicates: List[WherePredicate] = list(where.predicates)
	extra: List[WherePredicate] = []
	for pred in where.predicates:
		if not isinstance(pred, TypePredicate):
			continue
		if pred.bounded == block.self_ty:
			mirrored = replace(pred, bounded=_self_alias(), bounds=list(pred.bounds), lifetimes=list(pred.lifetimes))
		elif _is_self_alias(pred.bounded):
			mirrored = replace(pred, bounded=block.self_ty, bounds=list(pred.bounds), lifetimes=list(pred.lifetimes))
		else:
			continue
		if mirrored in predicates or mirrored in extra:
			continue
		extra.append(mirrored)
	if not extra:
		return block
	logger.debug("relink: added %d mirrored predicate(s)", len(extra))
	generics = replace(block.generics, where_clause=WhereClause(predicates=predicates + extra))
	return replace(block, generics=generics)


__all__ = ["normalize", "relink"]
