"""
exttrait.core: shared support types used across the parser, transform and driver.

Modules:
  - diagnostics: Diagnostic record + JSON rendering
  - span: source span
  - xxhash64: block fingerprint function
  - config: naming configuration (`ExtConfig`)
  - errors: `ExtError` hierarchy raised by the parser and transform
"""

__all__ = [
	"config",
	"diagnostics",
	"errors",
	"span",
	"xxhash64",
]
