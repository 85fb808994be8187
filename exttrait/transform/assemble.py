# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Build the trait declaration and pair it with the rewritten implementation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Sequence, Union

from exttrait.parser.ast import (
	Generics,
	ImplementationBlock,
	TraitDecl,
	WhereClause,
)

from .members import DeclItem
from .naming import DeclarationName


@dataclass
class Expansion:
	"""
	Result of one transformation: the trait declaration, then the implementation.

	Iterating yields the two nodes in that order, so
	`decl, impl = expansion` works.
	"""

	declaration: TraitDecl
	implementation: ImplementationBlock
	name: DeclarationName

	@property
	def derived(self) -> bool:
		return self.name.derived

	def __iter__(self) -> Iterator[Union[TraitDecl, ImplementationBlock]]:
		yield self.declaration
		yield self.implementation


def build_declaration(block: ImplementationBlock, name: DeclarationName, items: Sequence[DeclItem]) -> TraitDecl:
	"""
	Trait declaration for `block`.

	`block` is expected to be normalized and relinked already: its parameters
	are the trait's parameters and its where-clause is the trait's.
	"""
	where = block.generics.where_clause
	generics = Generics(
		params=list(block.generics.params),
		where_clause=WhereClause(predicates=list(where.predicates)) if where is not None else None,
	)
	decl_items: List[DeclItem] = list(items)
	return TraitDecl(
		name=name.ident,
		items=decl_items,
		generics=generics,
		vis=name.vis,
		attrs=list(block.attrs),
		inner_attrs=list(block.inner_attrs),
		unsafety=block.unsafety,
		loc=block.loc,
	)


def assemble(
	block: ImplementationBlock,
	implementation: ImplementationBlock,
	name: DeclarationName,
	items: Sequence[DeclItem],
) -> Expansion:
	return Expansion(declaration=build_declaration(block, name, items), implementation=implementation, name=name)


__all__ = ["Expansion", "assemble", "build_declaration"]
