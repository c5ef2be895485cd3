from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import List, Optional, Sequence

import structlog

from .errors import ConfigurationError, JoinTimeoutError
from .model import WorkerResult
from .worker import Worker

logger = structlog.get_logger()


@dataclass
class Task:
	shard: int
	units: int
	future: Future

	def done(self) -> bool:
		return self.future.done()


class WorkerPool:
	"""Fixed pool of threads, one per shard, with an explicit join barrier.

	``join_all`` is the only synchronization point: it returns once every
	spawned worker has finished (results in shard order), or, when a timeout
	is given and expires, sets the shared cancellation event and raises
	:class:`JoinTimeoutError`.
	"""

	def __init__(self, workers: int, cancel_event: Optional[threading.Event] = None) -> None:
		if workers < 1:
			raise ConfigurationError(f"Worker count must be at least 1, got {workers}")
		self.size = workers
		self.cancel_event = cancel_event or threading.Event()
		self._executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="globscan-worker")

	def __enter__(self) -> "WorkerPool":
		return self

	def __exit__(self, exc_type, exc, tb) -> None:
		# After a failed join the stragglers are left to notice the cancellation
		self.shutdown(wait=exc_type is None)

	def spawn(self, worker: Worker) -> Task:
		future = self._executor.submit(worker.run)
		logger.debug("worker_spawned", shard=worker.shard.index, units=len(worker.shard))
		return Task(shard=worker.shard.index, units=len(worker.shard), future=future)

	def join_all(self, tasks: Sequence[Task], timeout: Optional[float] = None) -> List[WorkerResult]:
		_, pending = wait([t.future for t in tasks], timeout=timeout)
		if pending:
			self.cancel()
			logger.error(
				"join_timeout",
				timeout=timeout,
				pending_shards=sorted(t.shard for t in tasks if not t.done()),
			)
			raise JoinTimeoutError(timeout or 0.0, len(pending))

		results: List[WorkerResult] = []
		for task in sorted(tasks, key=lambda t: t.shard):
			try:
				results.append(task.future.result())
			except Exception as e:
				logger.error("worker_crashed", shard=task.shard, error=str(e))
				results.append(
					WorkerResult(shard=task.shard, units=task.units, fatal_error=f"{type(e).__name__}: {e}")
				)
		return results

	def cancel(self) -> None:
		self.cancel_event.set()

	def shutdown(self, wait: bool = True) -> None:
		self._executor.shutdown(wait=wait, cancel_futures=True)
