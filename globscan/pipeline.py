from __future__ import annotations

import contextlib
import os
import shutil
import tempfile
from typing import Iterator, List, Optional, Sequence

import structlog

from .capability import AnalysisCapability
from .config import Settings, get_settings
from .errors import ConfigurationError
from .merge import merge_sinks, write_report
from .model import PipelineResult, Shard
from .partition import partition
from .pool import WorkerPool
from .sink import FileShardSink, MemoryShardSink, ShardSink, sink_filename
from .worker import Worker

logger = structlog.get_logger()


def validate_units(units: Sequence[str]) -> List[str]:
	if isinstance(units, (str, bytes)):
		raise ConfigurationError("Unit list must be a sequence of identifiers, not a single string")
	checked: List[str] = []
	seen = set()
	for i, unit in enumerate(units):
		if not isinstance(unit, str) or not unit.strip():
			raise ConfigurationError(f"Unit #{i} is not a valid identifier: {unit!r}")
		if unit in seen:
			raise ConfigurationError(f"Unit listed twice: {unit}")
		seen.add(unit)
		checked.append(unit)
	return checked


def validate_workers(workers: object) -> int:
	if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
		raise ConfigurationError(f"Worker count must be a positive integer, got {workers!r}")
	return workers


@contextlib.contextmanager
def shard_directory(settings: Settings) -> Iterator[Optional[str]]:
	"""Fresh per-run directory for the shard files, removed afterwards unless kept."""
	if settings.in_memory_sinks:
		yield None
		return
	if settings.shard_dir:
		os.makedirs(settings.shard_dir, exist_ok=True)
	directory = tempfile.mkdtemp(prefix="globscan-", dir=settings.shard_dir)
	try:
		yield directory
	finally:
		if settings.keep_shards:
			logger.info("shards_kept", directory=directory)
		else:
			shutil.rmtree(directory, ignore_errors=True)


def create_sinks(shards: Sequence[Shard], directory: Optional[str], prefix: str) -> List[ShardSink]:
	if directory is None:
		return [MemoryShardSink(sink_filename(prefix, s.index)) for s in shards]
	return [FileShardSink(os.path.join(directory, sink_filename(prefix, s.index))) for s in shards]


def readable_sinks(shards: Sequence[Shard], sinks: Sequence[ShardSink]) -> List[ShardSink]:
	"""Sinks that could not be finalized belong to shards already reported as fatal."""
	readable: List[ShardSink] = []
	for shard, sink in zip(shards, sinks):
		if sink.finalized:
			readable.append(sink)
		else:
			logger.error("sink_unreadable", shard=shard.index, sink=sink.name)
	return readable


def run_pipeline(
	units: Sequence[str],
	capability: AnalysisCapability,
	settings: Optional[Settings] = None,
) -> PipelineResult:
	"""Partition ``units``, analyze the shards in parallel, merge, and write the report.

	Raises :class:`ConfigurationError` before any worker starts and
	:class:`JoinTimeoutError` when the join deadline passes. Per-unit and
	per-worker failures are reported through the returned result instead.
	"""
	settings = settings or get_settings()
	units = validate_units(units)
	workers = validate_workers(settings.workers)
	if settings.join_timeout is not None and settings.join_timeout <= 0:
		raise ConfigurationError(f"Join timeout must be positive, got {settings.join_timeout}")
	if not isinstance(capability, AnalysisCapability):
		raise ConfigurationError(f"{capability!r} does not provide analyze(unit)")

	shards = partition(units, workers)
	logger.info("pipeline_started", units=len(units), workers=workers)

	with shard_directory(settings) as directory:
		sinks = create_sinks(shards, directory, settings.shard_prefix)
		with WorkerPool(workers) as pool:
			tasks = [
				pool.spawn(Worker(shard, sink, capability, pool.cancel_event))
				for shard, sink in zip(shards, sinks)
			]
			results = pool.join_all(tasks, timeout=settings.join_timeout)
		report = merge_sinks(readable_sinks(shards, sinks))

	output_path = write_report(report, settings.output_path) if settings.output_path else None
	result = PipelineResult(report=report, workers=results, output_path=output_path)

	if result.ok:
		logger.info("pipeline_finished", lines=len(report.lines))
	else:
		logger.error(
			"pipeline_failed",
			lines=len(report.lines),
			failed_units=[f.unit for f in result.failed_units],
			fatal_shards=result.fatal_shards,
		)
	return result
