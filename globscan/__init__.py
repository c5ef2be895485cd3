"""Parallel extraction of global variable names from source files.

Modules:
- partition.py: splits the unit list into contiguous shards.
- worker.py / pool.py: per-shard workers and the thread pool that joins them.
- sink.py / merge.py: per-worker outputs and the deterministic merge.
- ast_parse.py: the Python analyzer used by default.
- pipeline.py: ties the pieces together.
"""

from .capability import AnalysisCapability, FunctionCapability
from .ast_parse import AnalyzerOptions, PythonGlobalsAnalyzer
from .config import Settings, get_settings
from .errors import (
	CapabilityUnavailableError,
	ConfigurationError,
	GlobscanError,
	JoinTimeoutError,
	SinkStateError,
	UnitAnalysisError,
)
from .model import PipelineResult, Record, Report, Shard, WorkerResult
from .partition import partition
from .pipeline import run_pipeline

__all__ = [
	"AnalysisCapability",
	"AnalyzerOptions",
	"CapabilityUnavailableError",
	"ConfigurationError",
	"FunctionCapability",
	"GlobscanError",
	"JoinTimeoutError",
	"PipelineResult",
	"PythonGlobalsAnalyzer",
	"Record",
	"Report",
	"Settings",
	"Shard",
	"SinkStateError",
	"UnitAnalysisError",
	"WorkerResult",
	"get_settings",
	"partition",
	"run_pipeline",
]
