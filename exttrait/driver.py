# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command-line driver: expand `#[ext]` impl blocks in Rust source files.

Exit codes: 0 on success, 1 when any file produced an error diagnostic, 2 on
usage errors (argparse's own convention).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from exttrait.core.config import DEFAULT_ATTRIBUTE_NAMES, DEFAULT_NAME_PREFIX, HASH_ALGORITHMS, ExtConfig
from exttrait.core.diagnostics import Diagnostic, diag_to_json, has_errors
from exttrait.core.span import Span
from exttrait.expand import ExpandResult, expand_file

logger = logging.getLogger(__name__)


def _read_error(path: Path, err: OSError) -> ExpandResult:
	diag = Diagnostic(
		message=f"cannot read source: {err.strerror or err}",
		code="E-EXT-IO",
		phase="driver",
		span=Span(file=str(path)),
	)
	return ExpandResult(text="", diagnostics=[diag])


def _build_config(parser: argparse.ArgumentParser, args: argparse.Namespace) -> ExtConfig:
	try:
		return ExtConfig(
			hash_algorithm=args.hash,
			seed=args.seed,
			name_prefix=args.prefix,
			attribute_names=tuple(args.attrs) if args.attrs else DEFAULT_ATTRIBUTE_NAMES,
		)
	except ValueError as err:
		# parser.error exits with status 2.
		parser.error(str(err))
		raise  # unreachable; keeps the return type total


def main(argv: list[str] | None = None) -> int:
	"""
	Expand every source file and write the result to `-o` or stdout.

	With --json, prints structured diagnostics (phase/code/message/severity/
	file/line/column/notes) and an exit_code; otherwise prints human-readable
	messages to stderr.
	"""
	parser = argparse.ArgumentParser(prog="exttrait", description="Turn #[ext] inherent impls into extension traits")
	parser.add_argument("source", type=Path, nargs="+", help="Path(s) to Rust source file(s)")
	parser.add_argument("-o", "--output", type=Path, help="Write the expanded source here (single input only)")
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit diagnostics as JSON (phase/code/message/severity/file/line/column/notes)",
	)
	parser.add_argument(
		"--hash",
		choices=sorted(HASH_ALGORITHMS),
		default="xxh64",
		help="Fingerprint function for derived trait names (default: xxh64)",
	)
	parser.add_argument("--seed", type=int, default=0, help="Fingerprint seed (default: 0)")
	parser.add_argument(
		"--prefix",
		default=DEFAULT_NAME_PREFIX,
		help=f"Prefix of derived trait names (default: {DEFAULT_NAME_PREFIX})",
	)
	parser.add_argument(
		"--attr",
		dest="attrs",
		action="append",
		help="Attribute path that triggers expansion (repeatable; default: ext, ext_trait::ext)",
	)
	parser.add_argument("-v", "--verbose", action="store_true", help="Log each pipeline stage")
	args = parser.parse_args(argv)

	logging.basicConfig(
		level=logging.DEBUG if args.verbose else logging.WARNING,
		format="%(levelname)s %(name)s: %(message)s",
	)
	if args.output is not None and len(args.source) > 1:
		parser.error("-o/--output requires a single source file")
	config = _build_config(parser, args)

	results: List[tuple[Path, ExpandResult]] = []
	for path in args.source:
		try:
			result = expand_file(path, config=config)
		except OSError as err:
			result = _read_error(path, err)
		logger.debug("%s: %d expansion(s), %d diagnostic(s)", path, len(result.expansions), len(result.diagnostics))
		results.append((path, result))

	diagnostics: List[tuple[Path, Diagnostic]] = [(p, d) for p, r in results for d in r.diagnostics]
	failed = has_errors(d for _, d in diagnostics)
	exit_code = 1 if failed else 0

	if not failed:
		if args.output is not None:
			args.output.write_text(results[0][1].text, encoding="utf-8")
		elif not args.json:
			for _, result in results:
				sys.stdout.write(result.text)

	if args.json:
		payload: dict = {
			"exit_code": exit_code,
			"diagnostics": [diag_to_json(d, str(p)) for p, d in diagnostics],
		}
		if not failed and args.output is None:
			payload["outputs"] = [{"file": str(p), "text": r.text} for p, r in results]
		print(json.dumps(payload))
	else:
		for path, diag in diagnostics:
			print(diag.format(str(path)), file=sys.stderr)
	return exit_code


__all__ = ["main"]
