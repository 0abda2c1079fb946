"""
Combine pipeline: load -> check formats -> reconcile sizes -> interleave -> encode.

`combine_files` is the synchronous driver shared by the CLI and the HTTP surface;
`run_job` wraps it for background execution and records progress in the status store.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from pixelweave.config import Settings
from pixelweave.errors import CombineError, FormatMismatchError, PipelineState
from pixelweave.services.codec import RGBA, decode, encode
from pixelweave.services.interleave import interleave
from pixelweave.services.metadata import describe_images
from pixelweave.services.output_buffer import OutputImage
from pixelweave.services.reconcile import reconcile
from pixelweave.services.status_store import write_status

LOGGER = logging.getLogger(__name__)

PathLike = Union[str, Path]
StateCallback = Callable[[PipelineState], None]


@dataclass
class CombineResult:
	output_path: Path
	width: int
	height: int
	format: str
	byte_length: int
	resized_first: bool
	resized_second: bool
	state: PipelineState
	inputs: Dict[str, Any] = field(default_factory=dict)

	def to_dict(self) -> Dict[str, Any]:
		return {
			"output": str(self.output_path),
			"width": self.width,
			"height": self.height,
			"format": self.format,
			"byte_length": self.byte_length,
			"resized_first": self.resized_first,
			"resized_second": self.resized_second,
			"state": self.state.value,
			"inputs": self.inputs,
		}


def combine_files(
	path_a: PathLike,
	path_b: PathLike,
	out_path: PathLike,
	settings: Optional[Settings] = None,
	on_state: Optional[StateCallback] = None,
) -> CombineResult:
	settings = settings or Settings.from_env()
	state: Optional[PipelineState] = None

	def advance(new_state: PipelineState) -> None:
		nonlocal state
		state = new_state
		LOGGER.info("pipeline state: %s", new_state.value)
		if on_state is not None:
			on_state(new_state)

	try:
		# 1) Load
		image_a = decode(path_a)
		image_b = decode(path_b)
		advance(PipelineState.LOADED)

		# 2) Both inputs must share one codec
		if image_a.format != image_b.format:
			raise FormatMismatchError(
				f"Input formats differ: {image_a.path.name} is {image_a.format}, {image_b.path.name} is {image_b.format}"
			)
		fmt = image_a.format
		inputs = describe_images([image_a, image_b])
		advance(PipelineState.FORMAT_CHECKED)

		# 3) Shrink the larger image to the smaller one
		dims_a, dims_b = image_a.dimensions, image_b.dimensions
		image_a, image_b = reconcile(image_a, image_b)
		width, height = image_a.width, image_a.height
		advance(PipelineState.SIZE_RECONCILED)

		# 4) RGBA on both sides, then alternate 4-byte chunks
		combined = interleave(image_a.rgba_bytes(), image_b.rgba_bytes())
		del image_a, image_b
		advance(PipelineState.INTERLEAVED)

		# 5) Bounded output buffer
		output = OutputImage(width=width, height=height, name=str(out_path), capacity=settings.capacity_bytes)
		output.set_data(combined)

		# 6) Encode with the validated source codec
		saved = encode(output.name, output.data, output.width, output.height, RGBA, fmt)
		advance(PipelineState.ENCODED)
	except CombineError as exc:
		if exc.stage is None:
			exc.stage = state
		raise

	return CombineResult(
		output_path=saved,
		width=width,
		height=height,
		format=fmt,
		byte_length=len(output.data),
		resized_first=dims_a != (width, height),
		resized_second=dims_b != (width, height),
		state=PipelineState.ENCODED,
		inputs=inputs,
	)


def run_job(job_id: str, path_a: Path, path_b: Path, out_path: Path, settings: Optional[Settings] = None) -> None:
	settings = settings or Settings.from_env()

	def on_state(state: PipelineState) -> None:
		write_status(job_id, {"job_id": job_id, "status": "running", "step": state.value}, settings)

	try:
		result = combine_files(path_a, path_b, out_path, settings=settings, on_state=on_state)
	except CombineError as e:
		LOGGER.warning("job %s failed at %s: %s", job_id, e.stage_name, e)
		write_status(job_id, {
			"job_id": job_id,
			"status": "error",
			"stage": e.stage_name,
			"error_type": type(e).__name__,
			"error": str(e),
		}, settings)
		return
	except Exception as e:
		LOGGER.exception("job %s crashed", job_id)
		write_status(job_id, {"job_id": job_id, "status": "error", "error_type": type(e).__name__, "error": str(e)}, settings)
		return

	data = {"job_id": job_id, "status": "completed", "step": "Done"}
	data.update(result.to_dict())
	write_status(job_id, data, settings)
