from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

# 956x956 RGBA
DEFAULT_MAX_PIXELS = 956 * 956
BYTES_PER_PIXEL = 4


@dataclass(frozen=True)
class Settings:
	max_pixels: int = DEFAULT_MAX_PIXELS
	jobs_dir: Path = field(default_factory=lambda: Path("jobs"))
	input_dir: Path = field(default_factory=lambda: Path("pixelweave/input"))
	output_dir: Path = field(default_factory=lambda: Path("pixelweave/output"))

	def __post_init__(self) -> None:
		if isinstance(self.max_pixels, bool) or not isinstance(self.max_pixels, int):
			raise ValueError(f"max_pixels must be an integer, got {self.max_pixels!r}")
		if self.max_pixels <= 0:
			raise ValueError(f"max_pixels must be positive, got {self.max_pixels}")

	@property
	def capacity_bytes(self) -> int:
		return self.max_pixels * BYTES_PER_PIXEL

	@classmethod
	def from_env(cls) -> "Settings":
		raw = os.environ.get("PIXELWEAVE_MAX_PIXELS", str(DEFAULT_MAX_PIXELS))
		try:
			max_pixels = int(raw)
		except ValueError as exc:
			raise ValueError(f"PIXELWEAVE_MAX_PIXELS is not an integer: {raw!r}") from exc
		return cls(
			max_pixels=max_pixels,
			jobs_dir=Path(os.environ.get("PIXELWEAVE_JOBS_DIR", "jobs")),
			input_dir=Path(os.environ.get("PIXELWEAVE_INPUT_DIR", "pixelweave/input")),
			output_dir=Path(os.environ.get("PIXELWEAVE_OUTPUT_DIR", "pixelweave/output")),
		)
