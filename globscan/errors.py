from __future__ import annotations

from typing import Optional


class GlobscanError(Exception):
	"""Base class for every error raised by the pipeline."""


class ConfigurationError(GlobscanError):
	"""Invalid worker count or malformed unit list; raised before any worker starts."""


class UnitAnalysisError(GlobscanError):
	"""The capability could not analyze one unit. The worker skips it and continues."""

	def __init__(self, unit: str, message: str, cause: Optional[BaseException] = None) -> None:
		super().__init__(f"{unit}: {message}")
		self.unit = unit
		self.message = message
		self.__cause__ = cause


class CapabilityUnavailableError(GlobscanError):
	"""The capability cannot be used at all. Fatal to the worker that hit it."""


class SinkStateError(GlobscanError):
	pass


class JoinTimeoutError(GlobscanError):
	def __init__(self, timeout: float, pending: int) -> None:
		super().__init__(f"{pending} worker(s) still running after {timeout:g}s")
		self.timeout = timeout
		self.pending = pending
