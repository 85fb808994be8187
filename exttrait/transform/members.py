# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Member classification and conversion to trait form.

`classify` never raises: every member is either `Converted` (with its
trait-side counterpart) or `Unsupported` (with its source text). Callers
decide what to do with unsupported members; `convert_members` reports all of
them in a single `UnsupportedMember` error.

Conversion drops what a trait declaration cannot carry: bodies, constant
values, associated type definitions, visibility and `default` markers.
Attributes, doc comments included, stay on both sides. Macro invocations and
verbatim items are copied through unchanged, which means a macro expands in
the trait and in the implementation alike.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Sequence, Union

from exttrait.core.errors import UnsupportedMember
from exttrait.parser.ast import (
	AssociatedType,
	Constant,
	ForeignItem,
	Generics,
	Located,
	MacroInvocation,
	Method,
	TraitConst,
	TraitItem,
	TraitMethod,
	TraitType,
	Verbatim,
	WhereClause,
)

logger = logging.getLogger(__name__)

DeclItem = Union[TraitItem, MacroInvocation, Verbatim]

_SUMMARY_LIMIT = 60


@dataclass(frozen=True)
class Converted:
	item: DeclItem
	source: object


@dataclass(frozen=True)
class Unsupported:
	source: object
	text: str


Classified = Union[Converted, Unsupported]


def _copy_generics(generics: Generics) -> Generics:
	where = generics.where_clause
	return Generics(
		params=list(generics.params),
		where_clause=WhereClause(predicates=list(where.predicates)) if where is not None else None,
	)


def member_text(member: object) -> str:
	tokens = getattr(member, "tokens", None)
	text = getattr(tokens, "text", None)
	if isinstance(text, str):
		return text
	return repr(member)


def classify(member: object) -> Classified:
	"""Convert one implementation member to its trait-side form."""
	if isinstance(member, Method):
		return Converted(item=TraitMethod(sig=member.sig, attrs=list(member.attrs), loc=member.loc), source=member)
	if isinstance(member, Constant):
		return Converted(
			item=TraitConst(name=member.name, ty=member.ty, attrs=list(member.attrs), loc=member.loc),
			source=member,
		)
	if isinstance(member, AssociatedType):
		return Converted(
			item=TraitType(
				name=member.name,
				generics=_copy_generics(member.generics),
				bounds=list(member.bounds),
				attrs=list(member.attrs),
				loc=member.loc,
			),
			source=member,
		)
	if isinstance(member, MacroInvocation):
		return Converted(item=replace(member, attrs=list(member.attrs)), source=member)
	if isinstance(member, Verbatim):
		return Converted(item=member, source=member)
	return Unsupported(source=member, text=member_text(member))


def _summary(text: str) -> str:
	flat = " ".join(text.split())
	if len(flat) > _SUMMARY_LIMIT:
		return flat[: _SUMMARY_LIMIT - 3] + "..."
	return flat


def _describe(member: object) -> str:
	if isinstance(member, ForeignItem):
		return f"`{member.kind}` item"
	return type(member).__name__


def convert_members(members: Sequence[object]) -> List[DeclItem]:
	"""
	Trait-side counterparts of `members`, same count and order.

	Raises `UnsupportedMember` naming the first unsupported member; any
	further ones are listed in the diagnostic notes.
	"""
	results = [classify(m) for m in members]
	rejected = [r for r in results if isinstance(r, Unsupported)]
	if rejected:
		first = rejected[0]
		notes = [f"also unsupported: `{_summary(r.text)}`" for r in rejected[1:]]
		notes.append("only methods, associated constants, associated types and macro invocations can move into an ext trait")
		loc = getattr(first.source, "loc", None)
		raise UnsupportedMember(
			f"unsupported {_describe(first.source)} in ext impl: `{_summary(first.text)}`",
			member_text=first.text,
			loc=loc if isinstance(loc, Located) else None,
			notes=notes,
		)
	converted = [r.item for r in results if isinstance(r, Converted)]
	logger.debug("convert_members: %d member(s) converted", len(converted))
	return converted


__all__ = [
	"Classified",
	"Converted",
	"DeclItem",
	"Unsupported",
	"classify",
	"convert_members",
	"member_text",
]
