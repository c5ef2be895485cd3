import os
import random
import threading
import time

import pytest
import structlog

from globscan.config import Settings, reset_settings
from globscan.errors import UnitAnalysisError


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
	"""Run every test from an empty directory with no GLOBSCAN_* variables."""
	for key in list(os.environ):
		if key.startswith("GLOBSCAN_"):
			monkeypatch.delenv(key)
	monkeypatch.chdir(tmp_path)
	reset_settings()
	yield
	reset_settings()
	structlog.reset_defaults()


@pytest.fixture
def settings(tmp_path):
	return Settings(
		_env_file=None,
		workers=2,
		output_path=str(tmp_path / "out" / "output.txt"),
		shard_dir=str(tmp_path / "shards"),
	)


class FakeCapability:
	"""Returns canned facts; a value that is an exception instance is raised instead."""

	def __init__(self, facts, delay=None, seed=None):
		self.facts = dict(facts)
		self.delay = delay
		self.calls = []
		self._rng = random.Random(seed)
		self._lock = threading.Lock()

	def analyze(self, unit):
		with self._lock:
			self.calls.append(unit)
			pause = self._rng.uniform(0, self.delay) if self.delay else 0
		if pause:
			time.sleep(pause)
		value = self.facts[unit]
		if isinstance(value, BaseException):
			raise value
		return list(value)


class BlockingCapability:
	def __init__(self):
		self.release = threading.Event()
		self.started = threading.Event()

	def analyze(self, unit):
		self.started.set()
		self.release.wait(5)
		return []


def unit_error(unit, message="boom"):
	return UnitAnalysisError(unit, message)
