# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Header rewrite: `impl<..> Type` becomes `impl<..> Name<..> for Type`.

Members lose their visibility on the way: items of a trait implementation
take the trait's visibility and may not declare their own. `default`
(specialization) markers are left in place.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Sequence

from exttrait.core.errors import AlreadyImplementsInterface
from exttrait.parser.ast import (
	AssociatedType,
	Constant,
	ImplItem,
	ImplementationBlock,
	Method,
	TraitRef,
	Visibility,
)
from exttrait.render import render_path

from .generics import contract_path
from .naming import DeclarationName

logger = logging.getLogger(__name__)


def ensure_inherent(block: ImplementationBlock) -> None:
	"""Raise `AlreadyImplementsInterface` unless `block` is an inherent impl."""
	if block.trait_ is None:
		return
	trait_text = ("!" if block.trait_.negative else "") + render_path(block.trait_.path)
	raise AlreadyImplementsInterface(
		f"only inherent impls can become an ext trait; this block already implements `{trait_text}`",
		loc=block.loc,
		notes=["remove the trait from the impl header, or drop the ext attribute"],
	)


def strip_visibility(items: Sequence[ImplItem]) -> List[ImplItem]:
	out: List[ImplItem] = []
	for item in items:
		if isinstance(item, (Method, Constant, AssociatedType)) and not item.vis.is_inherited:
			out.append(replace(item, vis=Visibility()))
		else:
			out.append(item)
	return out


def retarget(block: ImplementationBlock, name: DeclarationName) -> ImplementationBlock:
	"""
	Return `block` as an implementation of `name` for its self type.

	The trait reference carries the block's own parameters projected to
	arguments, so `impl<T> Vec<T>` becomes `impl<T> Name<T> for Vec<T>`.
	"""
	trait_ref = TraitRef(path=contract_path(name.ident, block.generics.params))
	logger.debug("retarget: impl %s for self type", name.ident)
	return replace(block, trait_=trait_ref, items=strip_visibility(block.items))


__all__ = ["ensure_inherent", "retarget", "strip_visibility"]
