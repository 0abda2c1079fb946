from __future__ import annotations

import logging
from typing import Callable, Tuple

from pixelweave.services.codec import DecodedImage, resize as default_resize

LOGGER = logging.getLogger(__name__)

Dimensions = Tuple[int, int]
Resizer = Callable[[DecodedImage, int, int], DecodedImage]


def _check_area(dim: Dimensions) -> int:
	w, h = dim
	if w <= 0 or h <= 0:
		raise ValueError(f"Zero-area image: {w}x{h}")
	return w * h


def smallest_dimensions(dim_a: Dimensions, dim_b: Dimensions) -> Dimensions:
	"""
	Pick the (width, height) pair with fewer pixels. On a tie the second pair wins.
	"""
	pix_a = _check_area(dim_a)
	pix_b = _check_area(dim_b)
	return dim_a if pix_a < pix_b else dim_b


def reconcile(image_a: DecodedImage, image_b: DecodedImage, resize: Resizer = default_resize) -> Tuple[DecodedImage, DecodedImage]:
	"""
	Bring both images to the dimensions of the smaller one (downscale only).
	The image already at the target size is returned as is.
	"""
	target_w, target_h = smallest_dimensions(image_a.dimensions, image_b.dimensions)
	target = (target_w, target_h)
	LOGGER.info("reconciled size: %dx%d", target_w, target_h)

	if image_b.dimensions == target:
		if image_a.dimensions != target:
			LOGGER.debug("resizing first image %dx%d -> %dx%d", image_a.width, image_a.height, target_w, target_h)
			image_a = resize(image_a, target_w, target_h)
	else:
		LOGGER.debug("resizing second image %dx%d -> %dx%d", image_b.width, image_b.height, target_w, target_h)
		image_b = resize(image_b, target_w, target_h)
	return image_a, image_b
