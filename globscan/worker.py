from __future__ import annotations

import threading
from typing import Optional

import structlog

from .capability import AnalysisCapability
from .errors import UnitAnalysisError
from .model import Shard, UnitFailure, WorkerResult
from .normalize import make_record
from .sink import ShardSink, is_single_line

logger = structlog.get_logger()


class Worker:
	"""Runs the capability over one shard, in shard order, into its own sink.

	A unit the capability rejects with :class:`UnitAnalysisError` is logged and
	skipped. Any other exception ends this worker only: the sink is still
	finalized so the records committed so far can be merged, and the error is
	reported in the returned :class:`WorkerResult`.
	"""

	def __init__(
		self,
		shard: Shard,
		sink: ShardSink,
		capability: AnalysisCapability,
		cancel_event: Optional[threading.Event] = None,
	) -> None:
		self.shard = shard
		self.sink = sink
		self.capability = capability
		self.cancel_event = cancel_event or threading.Event()

	def run(self) -> WorkerResult:
		log = logger.bind(shard=self.shard.index, sink=self.sink.name)
		result = WorkerResult(shard=self.shard.index, units=len(self.shard))
		log.debug("worker_started", units=len(self.shard))
		unit: Optional[str] = None
		try:
			for position, unit in enumerate(self.shard.units):
				if self.cancel_event.is_set():
					result.cancelled = True
					log.warning("worker_cancelled", remaining=len(self.shard) - position)
					break
				try:
					facts = self.capability.analyze(unit)
				except UnitAnalysisError as e:
					self._unit_failed(result, log, unit, e.message)
					continue
				record = make_record(unit, facts)
				if not is_single_line(record.render()):
					self._unit_failed(result, log, unit, "record spans several lines")
					continue
				self.sink.append(record)
				result.records_written += 1
		except Exception as e:
			log.exception("worker_failed", unit=unit)
			result.fatal_error = f"{type(e).__name__}: {e}"
		finally:
			self.sink.finalize()

		log.info(
			"worker_finished",
			records=result.records_written,
			failed=len(result.failed_units),
			fatal=result.fatal_error is not None,
		)
		return result

	def _unit_failed(self, result: WorkerResult, log, unit: str, message: str) -> None:
		log.warning("unit_analysis_failed", unit=unit, error=message)
		result.failed_units.append(UnitFailure(unit=unit, shard=self.shard.index, message=message))
