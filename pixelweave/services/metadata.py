from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List

import numpy as np
from PIL import Image

from pixelweave.services.codec import DecodedImage


def _mean_brightness(img: Image.Image) -> float:
	g = np.asarray(img.convert("L"), dtype=np.float32)
	return float(g.mean()) if g.size else 0.0


def describe_images(images: Iterable[DecodedImage]) -> Dict[str, Any]:
	records: List[Dict[str, Any]] = []
	for im in images:
		records.append({
			"filename": im.path.name,
			"width": im.width,
			"height": im.height,
			"mode": im.mode,
			"format": im.format,
			"mean_brightness": _mean_brightness(im.image),
		})
	return {"images": records}


def write_metadata_json(metadata: Dict[str, Any], out_path: Path) -> str:
	out_path.parent.mkdir(parents=True, exist_ok=True)
	with out_path.open("w", encoding="utf-8") as f:
		json.dump(metadata, f, indent=2)
	return str(out_path)
