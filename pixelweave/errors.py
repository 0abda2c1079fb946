from __future__ import annotations

from enum import Enum
from typing import Optional


class PipelineState(str, Enum):
	LOADED = "loaded"
	FORMAT_CHECKED = "format_checked"
	SIZE_RECONCILED = "size_reconciled"
	INTERLEAVED = "interleaved"
	ENCODED = "encoded"


class CombineError(Exception):
	"""
	Base class for every failure of a combine run.
	`stage` is the last pipeline state reached before the failure (None if the inputs never loaded).
	"""

	def __init__(self, message: str, stage: Optional[PipelineState] = None) -> None:
		super().__init__(message)
		self.stage = stage

	@property
	def stage_name(self) -> str:
		return self.stage.value if self.stage is not None else "load"


class DecodeError(CombineError):
	pass


class EncodeError(CombineError):
	pass


class FormatMismatchError(CombineError):
	pass


class CapacityExceededError(CombineError):
	pass


class OutOfBoundsError(CombineError):
	pass


class LayoutMismatchError(CombineError):
	pass
