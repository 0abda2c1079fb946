"""
Pillow adapters for the decode / encode / resize collaborators of the combine pipeline.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Tuple, Union

from PIL import Image, UnidentifiedImageError

from pixelweave.errors import DecodeError, EncodeError

LOGGER = logging.getLogger(__name__)

RGBA = "RGBA"
# Triangle filter
RESAMPLE_FILTER = Image.BILINEAR
# Codecs Pillow cannot write with an alpha channel
NO_ALPHA_FORMATS = {"JPEG", "MPO", "PPM", "PCX", "EPS"}


@dataclass(frozen=True)
class DecodedImage:
	"""
	A decoded input image and its source codec.

	Fields:
		path: file the image was read from.
		image: Pillow image, fully loaded.
		width / height: size in pixels.
		format: Pillow format tag of the source file ("PNG", "JPEG", ...).
		mode: Pillow mode of the decoded data ("RGB", "RGBA", "L", ...).
	"""
	path: Path
	image: Image.Image
	width: int
	height: int
	format: str
	mode: str

	@property
	def dimensions(self) -> Tuple[int, int]:
		return (self.width, self.height)

	@property
	def pixel_count(self) -> int:
		return self.width * self.height

	def rgba_bytes(self) -> bytes:
		"""Row-major RGBA8 bytes; images without alpha get a constant 255 alpha byte."""
		img = self.image if self.image.mode == RGBA else self.image.convert(RGBA)
		return img.tobytes()


def decode(file_path: Union[str, Path]) -> DecodedImage:
	path = Path(file_path)
	if not path.is_file():
		raise DecodeError(f"File not found: {path}")
	try:
		with Image.open(path) as src:
			fmt = src.format
			src.load()
			img = src.copy()
	except UnidentifiedImageError as exc:
		raise DecodeError(f"Not a recognised image: {path}") from exc
	except OSError as exc:
		raise DecodeError(f"Cannot decode {path}: {exc}") from exc
	if not fmt:
		raise DecodeError(f"Unknown image format: {path}")
	width, height = img.size
	LOGGER.debug("decoded %s: %dx%d %s (%s)", path, width, height, img.mode, fmt)
	return DecodedImage(path=path, image=img, width=width, height=height, format=fmt, mode=img.mode)


def resize(image: DecodedImage, width: int, height: int) -> DecodedImage:
	if width <= 0 or height <= 0:
		raise ValueError(f"Resize target must be positive, got {width}x{height}")
	resized = image.image.resize((width, height), RESAMPLE_FILTER)
	return DecodedImage(
		path=image.path,
		image=resized,
		width=width,
		height=height,
		format=image.format,
		mode=resized.mode,
	)


def encode(file_path: Union[str, Path], data: bytes, width: int, height: int, mode: str, fmt: str) -> Path:
	"""
	Encode raw pixel bytes to `file_path` in codec `fmt`.
	The image is rendered to memory first, so the destination is only touched once encoding succeeded.
	Codecs without alpha get the colour channels only; the alpha byte is dropped.
	"""
	path = Path(file_path)
	try:
		img = Image.frombytes(mode, (width, height), bytes(data))
		if fmt.upper() in NO_ALPHA_FORMATS and img.mode in ("RGBA", "LA"):
			img = img.convert("RGB" if img.mode == "RGBA" else "L")
		buf = BytesIO()
		img.save(buf, format=fmt)
	except (OSError, ValueError, KeyError) as exc:
		raise EncodeError(f"Cannot encode {width}x{height} {mode} as {fmt}: {exc}") from exc
	try:
		path.parent.mkdir(parents=True, exist_ok=True)
		with path.open("wb") as f:
			f.write(buf.getvalue())
	except OSError as exc:
		raise EncodeError(f"Cannot write {path}: {exc}") from exc
	return path
