"""Per-worker output channels.

Each worker owns exactly one sink. A sink accepts one record per unit, is
finalized by its worker once the shard is done, and only then may the merge
step read it back.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import List, Set

from .errors import SinkStateError
from .model import Record


def is_single_line(line: str) -> bool:
	return "\n" not in line and "\r" not in line


class ShardSink(ABC):
	def __init__(self, name: str) -> None:
		self.name = name
		self._units: Set[str] = set()
		self._finalized = False

	@property
	def finalized(self) -> bool:
		return self._finalized

	def __len__(self) -> int:
		return len(self._units)

	def append(self, record: Record) -> None:
		if self._finalized:
			raise SinkStateError(f"Sink {self.name} is finalized")
		if record.unit in self._units:
			raise SinkStateError(f"Sink {self.name} already holds a record for {record.unit}")
		line = record.render()
		if not is_single_line(line):
			raise SinkStateError(f"Record for {record.unit} spans several lines")
		self._write(line)
		self._units.add(record.unit)

	def finalize(self) -> None:
		if self._finalized:
			return
		self._close()
		self._finalized = True

	def read_lines(self) -> List[str]:
		if not self._finalized:
			raise SinkStateError(f"Sink {self.name} read before it was finalized")
		return self._read()

	@abstractmethod
	def _write(self, line: str) -> None:
		raise NotImplementedError

	@abstractmethod
	def _close(self) -> None:
		raise NotImplementedError

	@abstractmethod
	def _read(self) -> List[str]:
		raise NotImplementedError


class MemoryShardSink(ShardSink):
	def __init__(self, name: str) -> None:
		super().__init__(name)
		self._lines: List[str] = []

	def _write(self, line: str) -> None:
		self._lines.append(line)

	def _close(self) -> None:
		pass

	def _read(self) -> List[str]:
		return list(self._lines)


class FileShardSink(ShardSink):
	"""Line-per-record text file; finalize flushes and fsyncs it."""

	def __init__(self, path: str) -> None:
		super().__init__(os.path.basename(path))
		self.path = path
		# Exclusive create: two sinks never share a file
		self._fh = open(path, "x", encoding="utf-8", newline="\n")

	def _write(self, line: str) -> None:
		self._fh.write(line + "\n")

	def _close(self) -> None:
		try:
			self._fh.flush()
			os.fsync(self._fh.fileno())
		finally:
			self._fh.close()

	def _read(self) -> List[str]:
		with open(self.path, "r", encoding="utf-8", newline="\n") as fh:
			text = fh.read()
		# Every line is newline-terminated, so the final split element is empty
		return text.split("\n")[:-1]


def sink_filename(prefix: str, shard: int) -> str:
	return f"{prefix}{shard}.txt"
