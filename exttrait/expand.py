# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source-level expansion of `#[ext]` impl blocks.

The expander works on tokens, not on a full Rust parse: it finds outer
attribute runs, checks whether one of the attributes is an ext attribute
(`ExtConfig.attribute_names`), and takes the `impl` item that follows up to
its matching closing brace. That item text, with the ext attribute blanked
out, goes through the parser and the transform; the rendered trait and
implementation replace the original item. Everything between items is left
byte-for-byte as it was.

A failing item is left untouched and its diagnostic is collected; other items
in the same file are still expanded.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from lark import Token

from exttrait.core.config import DEFAULT_CONFIG, ExtConfig
from exttrait.core.diagnostics import Diagnostic, has_errors
from exttrait.core.errors import ExtError, MalformedInput
from exttrait.core.span import Span
from exttrait.parser.ast import ExtArgs
from exttrait.parser.parser import lex, parse_ext_args, parse_impl_block
from exttrait.render import render_expansion
from exttrait.transform.assemble import Expansion
from exttrait.transform.pipeline import expand_block

logger = logging.getLogger(__name__)

NAME_COLLISION = "W-EXT-NAME-COLLISION"

_DOC_TOKENS = ("OUTER_DOC", "OUTER_BLOCK_DOC")
_OPEN = {"LPAR": "RPAR", "LSQB": "RSQB", "LBRACE": "RBRACE"}
_CLOSE = {v: k for k, v in _OPEN.items()}


@dataclass
class ExpandResult:
	text: str
	diagnostics: List[Diagnostic] = field(default_factory=list)
	expansions: List[Expansion] = field(default_factory=list)

	@property
	def ok(self) -> bool:
		return not has_errors(self.diagnostics)


@dataclass
class _Attr:
	start: int  # token index of `#` (or of the doc token)
	end: int  # token index one past `]`
	path: Optional[str] = None
	args_text: str = ""
	args_tok: Optional[Token] = None


@dataclass
class _Site:
	"""One ext-attributed impl item located in the source."""

	attr: _Attr
	start_tok: Token
	end_pos: int
	ext_start: int
	ext_end: int


class _Scanner:
	def __init__(self, source: str, tokens: Sequence[Token]) -> None:
		self.source = source
		self.tokens = tokens

	def matching(self, index: int) -> int:
		"""Index of the bracket closing the one at `index`, or -1."""
		stack: List[str] = []
		for i in range(index, len(self.tokens)):
			ttype = self.tokens[i].type
			if ttype in _OPEN:
				stack.append(_OPEN[ttype])
			elif ttype in _CLOSE:
				if not stack or stack.pop() != ttype:
					return -1
				if not stack:
					return i
		return -1

	def attribute(self, index: int) -> Optional[_Attr]:
		"""Outer attribute starting at token `index`, if there is one."""
		tok = self.tokens[index]
		if tok.type in _DOC_TOKENS:
			return _Attr(start=index, end=index + 1)
		if tok.type != "POUND" or index + 1 >= len(self.tokens) or self.tokens[index + 1].type != "LSQB":
			return None
		close = self.matching(index + 1)
		if close < 0:
			return None
		attr = _Attr(start=index, end=close + 1)
		inner = self.tokens[index + 2 : close]
		path_parts: List[str] = []
		i = 0
		while i < len(inner) and inner[i].type in ("NAME", "DCOLON"):
			path_parts.append(inner[i].value)
			i += 1
		attr.path = "".join(path_parts)
		rest = inner[i:]
		if rest:
			if rest[0].type != "LPAR" or self.matching(index + 2 + i) != close - 1:
				# `#[path = ...]` or similar: not an ext attribute.
				attr.path = None
				return attr
			open_tok = rest[0]
			close_tok = self.tokens[close - 1]
			attr.args_text = self.source[open_tok.end_pos : close_tok.start_pos]
			attr.args_tok = open_tok
		return attr

	def impl_end(self, index: int) -> int:
		"""Index of the `}` closing the impl item whose header starts at `index`, or -1."""
		angle = 0
		i = index
		while i < len(self.tokens):
			ttype = self.tokens[i].type
			if ttype == "LT":
				angle += 1
			elif ttype == "GT":
				angle -= 1
			elif ttype == "LBRACE" and angle <= 0:
				return self.matching(i)
			elif ttype in _OPEN:
				# Bracketed header parts: `Fn(A)`, `[T; N]`, `{ N + 1 }` const args.
				close = self.matching(i)
				if close < 0:
					return -1
				i = close
			elif ttype in ("SEMI", "RBRACE"):
				return -1
			i += 1
		return -1


def _is_impl_head(tokens: Sequence[Token], index: int) -> bool:
	i = index
	if i < len(tokens) and tokens[i].type == "NAME" and tokens[i].value == "default":
		i += 1
	if i < len(tokens) and tokens[i].type == "UNSAFE":
		i += 1
	return i < len(tokens) and tokens[i].type == "IMPL"


def _blank(text: str) -> str:
	return re.sub(r"[^\n]", " ", text)


def _span_at(tok: Token, file: Optional[str]) -> Span:
	return Span(file=file, line=tok.line, column=tok.column)


def _rebase(diag: Diagnostic, line: int, column: int, file: Optional[str]) -> Diagnostic:
	"""Move a diagnostic computed on a fragment starting at `line:column` into file coordinates."""
	span = diag.span
	if span.line is None:
		span = Span(line=line, column=column)
	else:
		span = span.shifted(line - 1, column - 1)
	return replace(diag, span=span.with_file(file))


def _find_sites(scanner: _Scanner, file: Optional[str], config: ExtConfig, diags: List[Diagnostic]) -> List[_Site]:
	tokens = scanner.tokens
	names = set(config.attribute_names)
	sites: List[_Site] = []
	i = 0
	while i < len(tokens):
		run: List[_Attr] = []
		j = i
		while j < len(tokens):
			attr = scanner.attribute(j)
			if attr is None:
				break
			run.append(attr)
			j = attr.end
		if not run:
			i += 1
			continue
		ext_attrs = [a for a in run if a.path in names]
		if not ext_attrs:
			i = j
			continue
		start_tok = tokens[run[0].start]
		if len(ext_attrs) > 1:
			diags.append(
				Diagnostic(
					message="duplicate ext attribute on one item",
					code=MalformedInput.code,
					phase="expand",
					span=_span_at(tokens[ext_attrs[1].start], file),
					notes=["keep a single ext attribute"],
				)
			)
			i = j
			continue
		if not _is_impl_head(tokens, j):
			diags.append(
				Diagnostic(
					message="ext attribute must be placed on an `impl` block",
					code=MalformedInput.code,
					phase="expand",
					span=_span_at(tokens[ext_attrs[0].start], file),
				)
			)
			i = j
			continue
		end = scanner.impl_end(j)
		if end < 0:
			diags.append(
				Diagnostic(
					message="could not find the body of the ext impl block",
					code=MalformedInput.code,
					phase="expand",
					span=_span_at(tokens[j], file),
				)
			)
			i = j + 1
			continue
		ext = ext_attrs[0]
		sites.append(
			_Site(
				attr=ext,
				start_tok=start_tok,
				end_pos=tokens[end].end_pos,
				ext_start=tokens[ext.start].start_pos,
				ext_end=tokens[ext.end - 1].end_pos,
			)
		)
		i = end + 1
	return sites


def _parse_args(site: _Site, file: Optional[str]) -> Tuple[Optional[ExtArgs], Optional[Diagnostic]]:
	try:
		return parse_ext_args(site.attr.args_text), None
	except ExtError as err:
		diag = err.to_diagnostic()
		origin = site.attr.args_tok
		if origin is None:
			return None, diag
		# Arguments start right after the `(`.
		return None, _rebase(diag, origin.line, origin.column + 1, file)


def _expand_site(source: str, site: _Site, file: Optional[str], config: ExtConfig) -> Union[Expansion, Diagnostic]:
	"""Expansion of one site, or the diagnostic that leaves it untouched."""
	args, diag = _parse_args(site, file)
	if diag is not None:
		return diag
	start = site.start_tok.start_pos
	fragment = (
		source[start : site.ext_start]
		+ _blank(source[site.ext_start : site.ext_end])
		+ source[site.ext_end : site.end_pos]
	)
	try:
		block = parse_impl_block(fragment)
		return expand_block(block, args, config)
	except ExtError as err:
		return _rebase(err.to_diagnostic(), site.start_tok.line, site.start_tok.column, file)


def _check_collisions(found: List[Tuple[_Site, Expansion]], file: Optional[str]) -> List[Diagnostic]:
	diags: List[Diagnostic] = []
	seen: Dict[str, Tuple[_Site, Expansion]] = {}
	for site, expansion in found:
		ident = expansion.name.ident
		prior = seen.get(ident)
		if prior is None:
			seen[ident] = (site, expansion)
			continue
		if not (expansion.derived or prior[1].derived):
			continue
		prior_tok = prior[0].start_tok
		diags.append(
			Diagnostic(
				message=f"derived trait name `{ident}` is used by more than one ext impl",
				code=NAME_COLLISION,
				phase="expand",
				severity="warning",
				span=_span_at(site.start_tok, file),
				notes=[
					f"first used by the impl at line {prior_tok.line}",
					"supply an explicit name with `#[ext(Name)]`",
				],
			)
		)
	return diags


def expand_source(source: str, *, file: Optional[str] = None, config: ExtConfig = DEFAULT_CONFIG) -> ExpandResult:
	"""Expand every ext impl block in `source`."""
	try:
		tokens = lex(source)
	except MalformedInput as err:
		return ExpandResult(text=source, diagnostics=[err.to_diagnostic(file)])
	diags: List[Diagnostic] = []
	sites = _find_sites(_Scanner(source, tokens), file, config, diags)
	logger.debug("expand_source: %d ext impl block(s) in %s", len(sites), file or "<input>")
	found: List[Tuple[_Site, Expansion]] = []
	pieces: List[str] = []
	cursor = 0
	for site in sites:
		expansion = _expand_site(source, site, file, config)
		if isinstance(expansion, Diagnostic):
			diags.append(expansion)
			continue
		found.append((site, expansion))
		pieces.append(source[cursor : site.start_tok.start_pos])
		pieces.append(render_expansion(expansion))
		cursor = site.end_pos
	pieces.append(source[cursor:])
	diags.extend(_check_collisions(found, file))
	return ExpandResult(text="".join(pieces), diagnostics=diags, expansions=[e for _, e in found])


def expand_file(path: Path, *, config: ExtConfig = DEFAULT_CONFIG) -> ExpandResult:
	return expand_source(path.read_text(encoding="utf-8"), file=str(path), config=config)


__all__ = ["ExpandResult", "NAME_COLLISION", "expand_file", "expand_source"]
