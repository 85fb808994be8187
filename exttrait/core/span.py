# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lightweight source span representation used by diagnostics.

A Span can wrap whatever location object the front-end provides via the `raw`
field (a parser `Located`, a lark token, ...) while also carrying optional
file/line/column info when available.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source span (best-effort file/line/column plus raw parser loc)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None
	raw: Any = None

	@classmethod
	def from_loc(cls, loc: Any) -> "Span":
		"""
		Construct a Span from an existing parser/location object.

		If `loc` is already a Span, it is returned unchanged; otherwise the
		location fields are copied out and the object is kept in `raw`.
		"""
		if loc is None:
			return cls()
		if isinstance(loc, cls):
			return loc
		return cls(
			file=getattr(loc, "file", None) or getattr(loc, "filename", None) or None,
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
			end_line=getattr(loc, "end_line", None),
			end_column=getattr(loc, "end_column", None),
			raw=loc,
		)

	def shifted(self, line_offset: int, column_offset: int = 0) -> "Span":
		"""
		Re-base a span parsed from a fragment onto its enclosing file.

		`line_offset` is the number of lines preceding the fragment; the column
		offset only applies to positions on the fragment's first line.
		"""
		if self.line is None:
			return self
		column = self.column
		if column is not None and self.line == 1:
			column += column_offset
		end_line = self.end_line + line_offset if self.end_line is not None else None
		return replace(self, line=self.line + line_offset, column=column, end_line=end_line)

	def with_file(self, file: Optional[str]) -> "Span":
		return replace(self, file=file)

	def short(self) -> str:
		"""`line:column` with `?` for unknown parts."""
		line = self.line if self.line is not None else "?"
		column = self.column if self.column is not None else "?"
		return f"{line}:{column}"


__all__ = ["Span"]
