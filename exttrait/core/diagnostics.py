# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Common diagnostic structure for the parser, transform and driver phases.

A diagnostic is a message plus an optional code, phase label, span and notes.
Core code raises `ExtError` subclasses (see `exttrait.core.errors`); the
pipeline boundary converts them into `Diagnostic` values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

from .span import Span


@dataclass
class Diagnostic:
	"""Represents a translation-time diagnostic (error/warning/note)."""

	message: str
	code: str | None = None
	# Phase that produced the diagnostic: "parser", "args", "transform" or
	# "expand". Tooling uses it to group JSON output.
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Source location (Span() denotes unknown).
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		# Normalize missing spans to the sentinel Span() so downstream tooling
		# can rely on a structured object instead of None.
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	@property
	def is_error(self) -> bool:
		return self.severity == "error"

	def format(self, source: str | None = None) -> str:
		"""Render as `file:line:col: severity: message` followed by indented notes."""
		file = self.span.file or source or "<input>"
		head = f"{file}:{self.span.short()}: {self.severity}: {self.message}"
		if self.code:
			head += f" [{self.code}]"
		lines = [head]
		lines.extend(f"  note: {note}" for note in self.notes)
		return "\n".join(lines)


def has_errors(diagnostics: Iterable[Diagnostic]) -> bool:
	return any(d.is_error for d in diagnostics)


def diag_to_json(diag: Diagnostic, source: str | None = None) -> dict:
	"""Render a Diagnostic to a structured JSON-friendly dict."""
	notes: List[str] = list(diag.notes or [])
	return {
		"phase": diag.phase,
		"code": diag.code,
		"message": diag.message,
		"severity": diag.severity,
		"file": diag.span.file or source,
		"line": diag.span.line,
		"column": diag.span.column,
		"notes": notes,
	}


__all__ = ["Diagnostic", "diag_to_json", "has_errors"]
