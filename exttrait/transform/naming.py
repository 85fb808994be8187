# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Trait name resolution.

An explicit `#[ext(Name)]` wins. Otherwise the name is derived from a 64-bit
fingerprint of the block's raw token content: `__ExtTrait<decimal>` with the
default configuration. Two blocks that differ only in whitespace or plain
comments get the same name; any token difference changes it. Distinct blocks
can still collide, and nothing here can tell; the source expander warns when
it sees two equal derived names in one file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from exttrait.core.config import DEFAULT_CONFIG, ExtConfig
from exttrait.parser.ast import ExtArgs, ImplementationBlock, Visibility
from exttrait.parser.parser import token_text
from exttrait.render import render_impl

logger = logging.getLogger(__name__)

_MASK64 = 0xFFFFFFFFFFFFFFFF


@dataclass(frozen=True)
class DeclarationName:
	"""Resolved trait identifier plus the visibility the trait is declared with."""

	ident: str
	vis: Visibility = field(default_factory=Visibility)
	derived: bool = False


def fingerprint(raw: str, config: ExtConfig = DEFAULT_CONFIG) -> int:
	"""
	Deterministic 64-bit fingerprint of `raw`'s token content.

	The text is re-tokenized and the tokens are joined with single spaces
	before hashing, so layout does not matter. Uses `config.hasher()` with
	`config.seed`.
	"""
	data = token_text(raw).encode("utf-8")
	return config.hasher()(data, config.seed) & _MASK64


def raw_block_text(block: ImplementationBlock) -> str:
	"""Source the block was parsed from, or its rendering for hand-built blocks."""
	if block.source is not None:
		return block.source
	return render_impl(block)


def resolve_name(
	args: Optional[ExtArgs],
	block: ImplementationBlock,
	config: ExtConfig = DEFAULT_CONFIG,
) -> DeclarationName:
	"""
	Pick the trait name for `block`.

	Must run on the block exactly as the caller handed it over; every later
	stage produces a different block, and fingerprinting one of those would
	make names depend on pipeline internals.
	"""
	args = args or ExtArgs()
	vis = args.vis if args.vis is not None else Visibility()
	if args.name is not None:
		logger.debug("resolve_name: explicit name %s", args.name)
		return DeclarationName(ident=args.name, vis=vis)
	digest = fingerprint(raw_block_text(block), config)
	ident = f"{config.name_prefix}{digest}"
	logger.debug("resolve_name: derived name %s", ident)
	return DeclarationName(ident=ident, vis=vis, derived=True)


__all__ = ["DeclarationName", "fingerprint", "raw_block_text", "resolve_name"]
