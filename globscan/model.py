from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class Shard(BaseModel):
	model_config = ConfigDict(frozen=True)

	index: int
	units: List[str] = []

	def __len__(self) -> int:
		return len(self.units)


class Record(BaseModel):
	model_config = ConfigDict(frozen=True)

	unit: str
	display_name: str
	facts: List[str] = []

	def render(self) -> str:
		return " ".join([self.display_name, *self.facts])


class UnitFailure(BaseModel):
	unit: str
	shard: int
	message: str


class WorkerResult(BaseModel):
	shard: int
	units: int
	records_written: int = 0
	failed_units: List[UnitFailure] = []
	fatal_error: Optional[str] = None
	cancelled: bool = False

	@property
	def ok(self) -> bool:
		return self.fatal_error is None and not self.failed_units and not self.cancelled


class Report(BaseModel):
	model_config = ConfigDict(frozen=True)

	lines: List[str] = []

	def render(self) -> str:
		return "".join(line + "\n" for line in self.lines)


class PipelineResult(BaseModel):
	report: Report
	workers: List[WorkerResult] = []
	output_path: Optional[str] = None

	@property
	def failed_units(self) -> List[UnitFailure]:
		return [f for w in self.workers for f in w.failed_units]

	@property
	def fatal_shards(self) -> List[int]:
		return [w.shard for w in self.workers if w.fatal_error is not None or w.cancelled]

	@property
	def ok(self) -> bool:
		return all(w.ok for w in self.workers)
