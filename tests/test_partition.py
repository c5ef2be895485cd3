import pytest

from globscan.errors import ConfigurationError
from globscan.partition import partition, shard_bounds


def units(n):
	return [f"u{i}" for i in range(n)]


def test_remainder_goes_to_last_shard():
	shards = partition(units(5), 2)
	assert [s.units for s in shards] == [["u0", "u1"], ["u2", "u3", "u4"]]
	assert [s.index for s in shards] == [0, 1]


@pytest.mark.parametrize("n", [0, 1, 3, 7, 10, 13])
@pytest.mark.parametrize("k", [1, 2, 3, 4, 8])
def test_shards_reconstruct_input(n, k):
	shards = partition(units(n), k)
	assert len(shards) == k
	assert [u for s in shards for u in s.units] == units(n)
	for s in shards[:-1]:
		assert len(s) == n // k
	assert len(shards[-1]) == n - (k - 1) * (n // k)


def test_empty_input_gives_empty_shards():
	shards = partition([], 3)
	assert [s.units for s in shards] == [[], [], []]


def test_fewer_units_than_workers():
	shards = partition(units(2), 4)
	assert [s.units for s in shards] == [[], [], [], ["u0", "u1"]]


def test_bounds_are_contiguous():
	assert shard_bounds(10, 3) == [(0, 3), (3, 6), (6, 10)]


@pytest.mark.parametrize("k", [0, -1])
def test_rejects_non_positive_worker_count(k):
	with pytest.raises(ConfigurationError):
		partition(units(3), k)
