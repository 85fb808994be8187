"""
exttrait.transform: the impl-to-trait rewrite.

Modules:
  - bounds: inline bound normalization + self-type predicate relinking
  - naming: explicit / fingerprint-derived trait names
  - generics: parameter-to-argument projection
  - retarget: `impl Type` -> `impl Name<..> for Type`
  - members: member classification and trait-side conversion
  - assemble: trait declaration + `Expansion`
  - pipeline: `transform` / `fingerprint` entry points
"""

from .assemble import Expansion
from .naming import DeclarationName
from .pipeline import expand_block, fingerprint, transform

__all__ = ["DeclarationName", "Expansion", "expand_block", "fingerprint", "transform"]
