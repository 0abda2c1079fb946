from __future__ import annotations

import numpy as np

from pixelweave.errors import OutOfBoundsError

CHUNK = 4


def check_buffers(buf_a: bytes, buf_b: bytes) -> None:
	if len(buf_a) != len(buf_b):
		raise OutOfBoundsError(f"Buffer lengths differ: {len(buf_a)} != {len(buf_b)}")
	if len(buf_a) % CHUNK:
		raise OutOfBoundsError(f"Buffer length {len(buf_a)} is not a multiple of {CHUNK}")


def interleave(buf_a: bytes, buf_b: bytes) -> bytes:
	"""
	Combine two equal-length buffers chunk by chunk (4 bytes per chunk).
	The chunk starting at byte i comes from `buf_a` when i % 8 == 0, otherwise from `buf_b`;
	in chunk terms: even chunks from A, odd chunks from B.
	"""
	check_buffers(buf_a, buf_b)
	a = np.frombuffer(buf_a, dtype=np.uint8).reshape(-1, CHUNK)
	b = np.frombuffer(buf_b, dtype=np.uint8).reshape(-1, CHUNK)
	out = b.copy()
	out[0::2] = a[0::2]
	return out.tobytes()
