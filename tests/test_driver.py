from __future__ import annotations

import io

import pytest

from pyroll.driver import RunConfig, RunSnapshot, run, throughput
from pyroll.error import EndOfSource, UnsupportedAlgorithm
from pyroll.rolling_hash import Algorithm, create_rolling_hash
from pyroll.sizes import KiB
from pyroll.source import SeededSource, StreamSource


class _CountingSource:
  def __init__(self, seed: int = 0):
    self.refills = 0
    self._delegate = SeededSource(seed)

  def refill(self, buffer: bytearray) -> None:
    self.refills += 1
    self._delegate.refill(buffer)


def test_run_processes_exact_target_and_reports_per_buffer() -> None:
  source = _CountingSource()
  snapshots: list[RunSnapshot] = []

  config = RunConfig(Algorithm.ADLER32, target_size=3 * KiB, buffer_size=KiB)
  result = run(config, source, reporter=snapshots.append)

  assert result.bytes_processed == 3 * KiB
  assert source.refills == 3
  assert [snap.bytes_processed for snap in snapshots] == [KiB, 2 * KiB, 3 * KiB]
  assert all(snap.stats is None for snap in snapshots)
  assert result.stats is None
  assert not result.exhausted


def test_run_reports_partial_final_buffer() -> None:
  snapshots: list[RunSnapshot] = []

  config = RunConfig('buzhash32', target_size=KiB + 100, buffer_size=KiB)
  result = run(config, SeededSource(1), reporter=snapshots.append)

  assert result.bytes_processed == KiB + 100
  assert [snap.bytes_processed for snap in snapshots] == [KiB, KiB + 100]


def test_run_collects_stats_matching_direct_rolling() -> None:
  buffer_size = 512
  target = 2 * buffer_size
  data_source = SeededSource(11)
  chunks = [bytearray(buffer_size), bytearray(buffer_size)]
  for chunk in chunks:
    data_source.refill(chunk)

  config = RunConfig(
    Algorithm.BUZHASH64, target_size=target, display_stats=True, buffer_size=buffer_size
  )
  result = run(config, StreamSource(io.BytesIO(bytes(chunks[0] + chunks[1]))))

  expected = create_rolling_hash(Algorithm.BUZHASH64)
  expected.initialize(bytes(chunks[0][:64]))
  low_bit_hits = 0
  for byte in bytes(chunks[0] + chunks[1]):
    expected.roll(byte)
    low_bit_hits += expected.value() & 1

  stats = result.stats
  assert stats is not None
  assert stats.samples == target
  assert stats.hits[1] == low_bit_hits
  assert stats.width == 64


def test_run_stats_respect_invariants() -> None:
  config = RunConfig(
    Algorithm.RABINKARP32, target_size=4 * KiB, display_stats=True, buffer_size=KiB
  )
  result = run(config, SeededSource(2))

  stats = result.stats
  assert stats is not None
  assert stats.width == 32
  counts = [stats.hits[mask] for mask in stats.masks]
  assert all(count <= result.bytes_processed for count in counts)
  assert counts[0] >= counts[-1]
  assert counts[-1] == 0


def test_run_stops_cleanly_when_stream_ends() -> None:
  snapshots: list[RunSnapshot] = []
  config = RunConfig(Algorithm.ADLER32, target_size=10 * KiB, buffer_size=KiB)

  result = run(config, StreamSource(io.BytesIO(bytes(KiB + 200))), reporter=snapshots.append)

  assert result.bytes_processed == KiB + 200
  assert result.exhausted
  assert [snap.bytes_processed for snap in snapshots] == [KiB, KiB + 200]


def test_run_requires_a_full_first_window() -> None:
  config = RunConfig(Algorithm.ADLER32, target_size=KiB, buffer_size=KiB)

  with pytest.raises(EndOfSource):
    run(config, StreamSource(io.BytesIO(bytes(10))))


def test_run_rejects_unknown_algorithm_before_reading() -> None:
  source = _CountingSource()

  with pytest.raises(UnsupportedAlgorithm):
    run(RunConfig('unknown_algo', target_size=KiB, buffer_size=KiB), source)

  assert source.refills == 0


def test_run_with_zero_target_rolls_nothing() -> None:
  snapshots: list[RunSnapshot] = []
  config = RunConfig(Algorithm.ADLER32, target_size=0, buffer_size=KiB)
  result = run(config, SeededSource(0), snapshots.append)

  assert result.bytes_processed == 0
  assert snapshots == []
  assert result.throughput is None


def test_config_rejects_buffer_smaller_than_window() -> None:
  with pytest.raises(ValueError):
    RunConfig(Algorithm.ADLER32, target_size=KiB, buffer_size=32, window_size=64)


def test_throughput_uses_integer_nanoseconds() -> None:
  assert throughput(10**9, 10**9) == 10**9
  assert throughput(3, 2) == 1_500_000_000
  assert throughput(2**60, 1) == 2**60 * 10**9


def test_throughput_degenerate_cases() -> None:
  assert throughput(0, 10**9) is None
  assert throughput(1024, 0) is None
