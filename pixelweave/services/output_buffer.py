from __future__ import annotations

from dataclasses import dataclass, field

from pixelweave.config import BYTES_PER_PIXEL
from pixelweave.errors import CapacityExceededError, LayoutMismatchError


@dataclass
class OutputImage:
	"""
	Result image waiting to be encoded.
	`capacity` is the largest payload (bytes) the run accepts; it comes from `Settings.capacity_bytes`.
	"""
	width: int
	height: int
	name: str
	capacity: int
	data: bytes = field(default=b"", repr=False)

	@property
	def expected_length(self) -> int:
		return self.width * self.height * BYTES_PER_PIXEL

	def set_data(self, data: bytes) -> None:
		# replace-or-reject, never a partial write
		if len(data) > self.capacity:
			raise CapacityExceededError(f"Combined data is {len(data)} bytes, capacity is {self.capacity}")
		if len(data) != self.expected_length:
			raise LayoutMismatchError(
				f"Combined data is {len(data)} bytes, {self.width}x{self.height} RGBA needs {self.expected_length}"
			)
		self.data = bytes(data)
