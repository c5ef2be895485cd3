"""The analysis capability the pipeline depends on.

A capability turns one translation unit into a sequence of fact strings.
Implementations raise :class:`UnitAnalysisError` for a unit they cannot
analyze and :class:`CapabilityUnavailableError` when they cannot work at all;
anything else escaping ``analyze`` is treated like the latter by the worker.
"""

from __future__ import annotations

from typing import Callable, Iterable, Protocol, Sequence, runtime_checkable

from .errors import UnitAnalysisError


@runtime_checkable
class AnalysisCapability(Protocol):
	def analyze(self, unit: str) -> Sequence[str]:
		...


class FunctionCapability:
	"""Adapt a plain ``unit -> facts`` callable."""

	def __init__(self, func: Callable[[str], Iterable[str]]) -> None:
		self._func = func

	def analyze(self, unit: str) -> Sequence[str]:
		facts = self._func(unit)
		if facts is None:
			raise UnitAnalysisError(unit, "analyzer returned no result")
		return list(facts)

	def __repr__(self) -> str:
		return f"FunctionCapability({getattr(self._func, '__name__', self._func)!r})"
