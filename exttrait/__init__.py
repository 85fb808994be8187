"""
exttrait: turn an inherent Rust impl block into an extension trait plus its
implementation.

Library entry points:
  - transform(block, args, config) -> Expansion | Diagnostic
  - fingerprint(raw, config) -> int
  - expand_source(text) for whole files with `#[ext]` attributes
"""

from exttrait.core.config import ExtConfig
from exttrait.core.diagnostics import Diagnostic
from exttrait.expand import ExpandResult, expand_source
from exttrait.parser import parse_ext_args, parse_impl_block
from exttrait.render import render_expansion
from exttrait.transform import Expansion, fingerprint, transform

__all__ = [
	"Diagnostic",
	"ExpandResult",
	"Expansion",
	"ExtConfig",
	"expand_source",
	"fingerprint",
	"parse_ext_args",
	"parse_impl_block",
	"render_expansion",
	"transform",
]
