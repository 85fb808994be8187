"""
Parser front end for implementation blocks.

`parse_impl` and `parse_args` are diagnostic-returning adapters for callers
that want reports rather than exceptions. The raising entry points live in
`exttrait.parser.parser`.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from exttrait.core.diagnostics import Diagnostic
from exttrait.core.errors import ExtError

from . import ast
from . import parser as _parser
from .parser import lex, parse_ext_args, parse_impl_block, parse_type, token_text


def parse_impl(source: str, *, file: Optional[str] = None) -> Tuple[Optional[ast.ImplementationBlock], List[Diagnostic]]:
	"""Parse `source` as one implementation block, collecting diagnostics."""
	try:
		return _parser.parse_impl_block(source), []
	except ExtError as err:
		return None, [err.to_diagnostic(file)]


def parse_args(text: str, *, file: Optional[str] = None) -> Tuple[Optional[ast.ExtArgs], List[Diagnostic]]:
	"""Parse `#[ext(...)]` argument text, collecting diagnostics."""
	try:
		return _parser.parse_ext_args(text), []
	except ExtError as err:
		return None, [err.to_diagnostic(file)]


__all__ = [
	"ast",
	"lex",
	"parse_args",
	"parse_ext_args",
	"parse_impl",
	"parse_impl_block",
	"parse_type",
	"token_text",
]
