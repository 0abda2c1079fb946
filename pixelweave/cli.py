from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from pixelweave.config import Settings
from pixelweave.errors import CombineError
from pixelweave.services.metadata import write_metadata_json
from pixelweave.services.pipeline import combine_files


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog="pixelweave", description="Interleave the pixels of two same-format images")
	parser.add_argument("image_1", help="First input image")
	parser.add_argument("image_2", help="Second input image (same format as the first)")
	parser.add_argument("output", help="Output image path, written in the inputs' format")
	parser.add_argument("--max-pixels", type=int, default=None, help="Largest output size in pixels (overrides PIXELWEAVE_MAX_PIXELS)")
	parser.add_argument("--metadata", default=None, help="Write a JSON description of both inputs to this path")
	parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
	return parser


def main(argv: Optional[List[str]] = None) -> int:
	args = build_parser().parse_args(argv)
	logging.basicConfig(
		level=logging.DEBUG if args.verbose else logging.INFO,
		format="%(levelname)s %(name)s: %(message)s",
	)

	try:
		settings = Settings.from_env()
		if args.max_pixels is not None:
			settings = replace(settings, max_pixels=args.max_pixels)
	except ValueError as exc:
		print(f"invalid configuration: {exc}", file=sys.stderr)
		return 2

	try:
		result = combine_files(args.image_1, args.image_2, args.output, settings=settings)
	except CombineError as exc:
		print(f"error at {exc.stage_name}: {exc}", file=sys.stderr)
		return 1

	if args.metadata:
		write_metadata_json(result.inputs, Path(args.metadata))
	print(f"Saved: {result.output_path}")
	return 0


if __name__ == "__main__":
	raise SystemExit(main())
