# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Pure-Python xxHash64 used to fingerprint implementation blocks.

Derived extension-trait names embed this value, so changing the function (or
the default seed) renames every unnamed trait a user has ever generated. The
seed is exposed through `ExtConfig` for callers that need a separate naming
space.
"""

from __future__ import annotations

PRIME1 = 11400714785074694791
PRIME2 = 14029467366897019727
PRIME3 = 1609587929392839161
PRIME4 = 9650029242287828579
PRIME5 = 2870177450012600261
MASK64 = 0xFFFFFFFFFFFFFFFF


def _rotl(x: int, r: int) -> int:
	return (((x << r) & MASK64) | (x >> (64 - r))) & MASK64


def _round(acc: int, lane: int) -> int:
	acc = (acc + lane * PRIME2) & MASK64
	acc = _rotl(acc, 31)
	return (acc * PRIME1) & MASK64


def _merge_round(acc: int, val: int) -> int:
	acc ^= _round(0, val)
	return (acc * PRIME1 + PRIME4) & MASK64


def hash64(data: bytes, seed: int = 0) -> int:
	"""Compute xxHash64 of `data` with the given 64-bit seed."""
	seed &= MASK64
	length = len(data)
	idx = 0
	# 32-byte stripes.
	if length >= 32:
		v1 = (seed + PRIME1 + PRIME2) & MASK64
		v2 = (seed + PRIME2) & MASK64
		v3 = seed
		v4 = (seed - PRIME1) & MASK64
		while idx <= length - 32:
			v1 = _round(v1, int.from_bytes(data[idx:idx + 8], "little"))
			v2 = _round(v2, int.from_bytes(data[idx + 8:idx + 16], "little"))
			v3 = _round(v3, int.from_bytes(data[idx + 16:idx + 24], "little"))
			v4 = _round(v4, int.from_bytes(data[idx + 24:idx + 32], "little"))
			idx += 32

		acc = (_rotl(v1, 1) + _rotl(v2, 7) + _rotl(v3, 12) + _rotl(v4, 18)) & MASK64
		acc = _merge_round(acc, v1)
		acc = _merge_round(acc, v2)
		acc = _merge_round(acc, v3)
		acc = _merge_round(acc, v4)
	else:
		acc = (seed + PRIME5) & MASK64

	acc = (acc + length) & MASK64

	while idx + 8 <= length:
		k1 = _round(0, int.from_bytes(data[idx:idx + 8], "little"))
		acc ^= k1
		acc = (_rotl(acc, 27) * PRIME1 + PRIME4) & MASK64
		idx += 8

	if idx + 4 <= length:
		k1 = int.from_bytes(data[idx:idx + 4], "little")
		acc ^= (k1 * PRIME1) & MASK64
		acc = (_rotl(acc, 23) * PRIME2 + PRIME3) & MASK64
		idx += 4

	while idx < length:
		acc ^= (data[idx] * PRIME5) & MASK64
		acc = (_rotl(acc, 11) * PRIME1) & MASK64
		idx += 1

	# Avalanche.
	acc ^= acc >> 33
	acc = (acc * PRIME2) & MASK64
	acc ^= acc >> 29
	acc = (acc * PRIME3) & MASK64
	acc ^= acc >> 32
	return acc


__all__ = ["hash64"]
