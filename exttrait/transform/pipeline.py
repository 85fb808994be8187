# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Ext transformation entry points.

`transform` turns one inherent impl into a trait declaration plus an
implementation of that trait, or into a single `Diagnostic`. It is a pure
function: the caller's block is never modified and nothing is shared between
calls. `fingerprint` is the raw-content hash used for derived names.

Stage order:
  1. reject blocks that already implement a trait
  2. resolve the trait name (fingerprinting the untouched input)
  3. convert members to trait form, failing on unsupported ones
  4. move inline bounds into the where-clause
  5. mirror self-type predicates onto `Self` and back
  6. retarget the header to `impl Name<args> for Type`
  7. assemble the declaration
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from exttrait.core.config import DEFAULT_CONFIG, ExtConfig
from exttrait.core.diagnostics import Diagnostic
from exttrait.core.errors import ExtError
from exttrait.parser.ast import ExtArgs, ImplementationBlock

from . import bounds, members, naming, retarget
from .assemble import Expansion, assemble
from .naming import fingerprint

logger = logging.getLogger(__name__)


def expand_block(
	block: ImplementationBlock,
	args: Optional[ExtArgs] = None,
	config: ExtConfig = DEFAULT_CONFIG,
) -> Expansion:
	"""Raising form of `transform`; errors are `ExtError` subclasses."""
	retarget.ensure_inherent(block)
	name = naming.resolve_name(args, block, config)
	items = members.convert_members(block.items)
	normalized = bounds.normalize(block)
	relinked = bounds.relink(normalized)
	implementation = retarget.retarget(relinked, name)
	where = relinked.generics.where_clause
	logger.debug(
		"expand_block: %s with %d member(s), %d param(s), %d predicate(s)",
		name.ident,
		len(items),
		len(relinked.generics.params),
		len(where.predicates) if where is not None else 0,
	)
	return assemble(relinked, implementation, name, items)


def transform(
	block: ImplementationBlock,
	args: Optional[ExtArgs] = None,
	config: ExtConfig = DEFAULT_CONFIG,
) -> Union[Expansion, Diagnostic]:
	"""Transform `block`; failures come back as one error `Diagnostic`."""
	try:
		return expand_block(block, args, config)
	except ExtError as err:
		logger.debug("transform: %s (%s)", err.message, err.code)
		return err.to_diagnostic()


__all__ = ["Expansion", "expand_block", "fingerprint", "transform"]
