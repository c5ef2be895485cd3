import threading

from structlog.testing import capture_logs

from conftest import FakeCapability, unit_error
from globscan.errors import CapabilityUnavailableError
from globscan.model import Shard
from globscan.sink import MemoryShardSink
from globscan.worker import Worker


def test_records_follow_shard_order():
	capability = FakeCapability({"p/c.py": ["b", "A"], "p/a.py": [], "p/b.py": ["x"]})
	shard = Shard(index=0, units=["p/c.py", "p/a.py", "p/b.py"])
	sink = MemoryShardSink("s0")

	result = Worker(shard, sink, capability).run()

	assert capability.calls == ["p/c.py", "p/a.py", "p/b.py"]
	assert sink.finalized
	assert sink.read_lines() == ["c.py A b", "a.py", "b.py x"]
	assert result.records_written == 3
	assert result.ok


def test_unit_failure_is_logged_and_skipped():
	capability = FakeCapability({"u0": ["a"], "u1": unit_error("u1", "cannot parse"), "u2": ["b"]})
	sink = MemoryShardSink("s1")

	with capture_logs() as logs:
		result = Worker(Shard(index=1, units=["u0", "u1", "u2"]), sink, capability).run()

	assert sink.read_lines() == ["u0 a", "u2 b"]
	assert [f.unit for f in result.failed_units] == ["u1"]
	assert result.fatal_error is None
	assert not result.ok
	failures = [e for e in logs if e["event"] == "unit_analysis_failed"]
	assert failures[0]["unit"] == "u1"
	assert failures[0]["shard"] == 1
	assert failures[0]["log_level"] == "warning"


def test_fatal_error_stops_worker_but_keeps_committed_records():
	capability = FakeCapability(
		{"u0": ["a"], "u1": CapabilityUnavailableError("no parser"), "u2": ["b"]}
	)
	sink = MemoryShardSink("s0")

	with capture_logs() as logs:
		result = Worker(Shard(index=0, units=["u0", "u1", "u2"]), sink, capability).run()

	assert capability.calls == ["u0", "u1"]
	assert sink.finalized
	assert sink.read_lines() == ["u0 a"]
	assert result.fatal_error == "CapabilityUnavailableError: no parser"
	assert any(e["event"] == "worker_failed" and e["unit"] == "u1" for e in logs)


def test_unexpected_exception_is_fatal():
	capability = FakeCapability({"u0": RuntimeError("crashed")})
	result = Worker(Shard(index=2, units=["u0"]), MemoryShardSink("s2"), capability).run()
	assert result.fatal_error == "RuntimeError: crashed"


def test_cancelled_worker_stops_between_units():
	cancel = threading.Event()
	cancel.set()
	capability = FakeCapability({"u0": []})
	sink = MemoryShardSink("s0")

	result = Worker(Shard(index=0, units=["u0"]), sink, capability, cancel).run()

	assert capability.calls == []
	assert result.cancelled
	assert sink.finalized


def test_empty_shard_completes_immediately():
	sink = MemoryShardSink("s0")
	result = Worker(Shard(index=0, units=[]), sink, FakeCapability({})).run()
	assert result.ok
	assert sink.read_lines() == []


def test_multiline_record_only_drops_its_unit():
	capability = FakeCapability({"u0": ["bad\nname"], "u1": ["ok"], "u2": ["fine"]})
	sink = MemoryShardSink("s0")

	with capture_logs() as logs:
		result = Worker(Shard(index=3, units=["u0", "u1", "u2"]), sink, capability).run()

	assert capability.calls == ["u0", "u1", "u2"]
	assert sink.read_lines() == ["u1 ok", "u2 fine"]
	assert result.fatal_error is None
	assert [(f.unit, f.shard) for f in result.failed_units] == [("u0", 3)]
	assert any(e["event"] == "unit_analysis_failed" and e["unit"] == "u0" for e in logs)
