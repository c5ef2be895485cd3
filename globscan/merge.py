from __future__ import annotations

import os
from typing import Iterable, List

import structlog

from .errors import SinkStateError
from .model import Report
from .sink import ShardSink

logger = structlog.get_logger()


def line_sort_key(line: str) -> bytes:
	# Byte order, not locale collation
	return line.encode("utf-8")


def merge_sinks(sinks: Iterable[ShardSink]) -> Report:
	"""Concatenate every finalized sink and sort the lot once."""
	sinks = list(sinks)
	unfinished = [s.name for s in sinks if not s.finalized]
	if unfinished:
		raise SinkStateError(f"Cannot merge unfinalized sinks: {', '.join(unfinished)}")

	lines: List[str] = []
	for sink in sinks:
		lines.extend(sink.read_lines())
	lines.sort(key=line_sort_key)
	logger.debug("sinks_merged", sinks=len(sinks), lines=len(lines))
	return Report(lines=lines)


def write_report(report: Report, path: str) -> str:
	path = os.path.abspath(path)
	parent = os.path.dirname(path)
	if parent:
		os.makedirs(parent, exist_ok=True)
	with open(path, "w", encoding="utf-8", newline="\n") as fh:
		fh.write(report.render())
	logger.info("report_written", path=path, lines=len(report.lines))
	return path
