# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Transformation settings shared by the library API, the expander and the CLI.

Only naming is configurable: which fingerprint function derives unnamed trait
identifiers, its seed, the identifier prefix, and which attribute paths the
expander treats as the ext trigger.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from .xxhash64 import hash64

HashFn = Callable[[bytes, int], int]

DEFAULT_NAME_PREFIX = "__ExtTrait"
DEFAULT_ATTRIBUTE_NAMES: Tuple[str, ...] = ("ext", "ext_trait::ext")


def _blake2b64(data: bytes, seed: int) -> int:
	key = (seed & 0xFFFFFFFFFFFFFFFF).to_bytes(8, "little")
	return int.from_bytes(hashlib.blake2b(data, digest_size=8, key=key).digest(), "little")


HASH_ALGORITHMS: Dict[str, HashFn] = {
	"xxh64": hash64,
	"blake2b": _blake2b64,
}


@dataclass(frozen=True)
class ExtConfig:
	"""
	Naming configuration.

	`hash_fn`, when set, overrides `hash_algorithm`. Tests use it to force two
	different blocks onto the same derived name.
	"""

	hash_algorithm: str = "xxh64"
	seed: int = 0
	name_prefix: str = DEFAULT_NAME_PREFIX
	attribute_names: Tuple[str, ...] = DEFAULT_ATTRIBUTE_NAMES
	hash_fn: Optional[HashFn] = None

	def __post_init__(self) -> None:
		if self.hash_fn is None and self.hash_algorithm not in HASH_ALGORITHMS:
			known = ", ".join(sorted(HASH_ALGORITHMS))
			raise ValueError(f"unknown hash algorithm '{self.hash_algorithm}' (known: {known})")
		if not self.name_prefix.isidentifier():
			raise ValueError(f"name prefix '{self.name_prefix}' is not a valid identifier")

	def hasher(self) -> HashFn:
		if self.hash_fn is not None:
			return self.hash_fn
		return HASH_ALGORITHMS[self.hash_algorithm]


DEFAULT_CONFIG = ExtConfig()


__all__ = [
	"DEFAULT_ATTRIBUTE_NAMES",
	"DEFAULT_CONFIG",
	"DEFAULT_NAME_PREFIX",
	"ExtConfig",
	"HASH_ALGORITHMS",
	"HashFn",
]
