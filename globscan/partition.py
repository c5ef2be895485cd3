from __future__ import annotations

from typing import List, Sequence, Tuple

from .errors import ConfigurationError
from .model import Shard


def shard_bounds(total: int, workers: int) -> List[Tuple[int, int]]:
	"""``(begin, end)`` slice bounds; the last shard takes the remainder."""
	if workers < 1:
		raise ConfigurationError(f"Worker count must be at least 1, got {workers}")
	chunk = total // workers
	bounds = []
	for i in range(workers):
		begin = i * chunk
		end = total if i == workers - 1 else (i + 1) * chunk
		bounds.append((begin, end))
	return bounds


def partition(units: Sequence[str], workers: int) -> List[Shard]:
	return [Shard(index=i, units=list(units[b:e])) for i, (b, e) in enumerate(shard_bounds(len(units), workers))]
