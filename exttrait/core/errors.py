# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Fatal conditions of a single ext transformation.

Every error is terminal for the block it was raised for: the pipeline converts
it into exactly one `Diagnostic` and produces no output nodes. The classes
mirror the user-facing rules so tests and tooling can match on them without
parsing message text.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from .diagnostics import Diagnostic
from .span import Span


class ExtError(ValueError):
	"""Base class for ext transformation errors."""

	code = "E-EXT"
	phase = "transform"

	def __init__(self, message: str, *, loc: object | None = None, notes: Iterable[str] = ()) -> None:
		super().__init__(message)
		self.message = message
		self.loc = loc
		self.notes: List[str] = list(notes)

	def to_diagnostic(self, file: Optional[str] = None) -> Diagnostic:
		span = Span.from_loc(self.loc)
		if file is not None and span.file is None:
			span = span.with_file(file)
		return Diagnostic(
			message=self.message,
			code=self.code,
			phase=self.phase,
			severity="error",
			span=span,
			notes=list(self.notes),
		)


class MalformedInput(ExtError):
	"""The input cannot be parsed into an implementation block."""

	code = "E-EXT-MALFORMED"
	phase = "parser"


class AlreadyImplementsInterface(ExtError):
	"""The block already implements a trait; only inherent impls are eligible."""

	code = "E-EXT-ALREADY-IMPLEMENTS"


class UnsupportedMember(ExtError):
	"""A member falls outside the closed set of convertible shapes."""

	code = "E-EXT-UNSUPPORTED-MEMBER"

	def __init__(self, message: str, *, member_text: str, loc: object | None = None, notes: Iterable[str] = ()) -> None:
		super().__init__(message, loc=loc, notes=notes)
		self.member_text = member_text


class AmbiguousNameArguments(ExtError):
	"""The attribute arguments are not `[visibility] [Name]`."""

	code = "E-EXT-AMBIGUOUS-ARGS"
	phase = "args"


__all__ = [
	"AlreadyImplementsInterface",
	"AmbiguousNameArguments",
	"ExtError",
	"MalformedInput",
	"UnsupportedMember",
]
