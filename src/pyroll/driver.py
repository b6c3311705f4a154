from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from .error import EndOfSource
from .masks import generate_masks
from .rolling_hash import DEFAULT_WINDOW_SIZE, Algorithm, RollingHash, create_rolling_hash
from .sizes import MiB
from .source import ByteSource
from .stats import MaskStats

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 1 * MiB


@dataclass(frozen=True)
class RunConfig:
  algorithm: Algorithm | str
  target_size: int
  display_stats: bool = False
  buffer_size: int = DEFAULT_BUFFER_SIZE
  window_size: int = DEFAULT_WINDOW_SIZE

  def __post_init__(self) -> None:
    if self.target_size < 0:
      raise ValueError('target_size must not be negative')
    if self.buffer_size < self.window_size:
      raise ValueError('buffer_size must hold at least one window')


@dataclass(frozen=True)
class RunSnapshot:
  """Progress handed to the reporter each time a buffer is used up."""

  bytes_processed: int
  target_size: int
  stats: MaskStats | None


ProgressReporter = Callable[[RunSnapshot], None]


@dataclass
class RunState:
  total: int = 0
  offset: int = 0
  started_ns: int = 0


@dataclass(frozen=True)
class RunResult:
  algorithm: Algorithm
  bytes_processed: int
  elapsed_ns: int
  stats: MaskStats | None
  exhausted: bool = False

  @property
  def throughput(self) -> int | None:
    return throughput(self.bytes_processed, self.elapsed_ns)


def throughput(total_bytes: int, elapsed_ns: int) -> int | None:
  """
  Bytes per second, or ``None`` when nothing was measured.

  Integer arithmetic keeps large byte counts over short runs exact.
  """
  if total_bytes <= 0 or elapsed_ns <= 0:
    return None
  return total_bytes * 1_000_000_000 // elapsed_ns


def _fill(source: ByteSource, buffer: bytearray) -> int:
  try:
    source.refill(buffer)
  except EndOfSource as exc:
    logger.info('Source exhausted: %s', exc)
    return exc.filled
  return len(buffer)


def _consume(roll: RollingHash, stats: MaskStats | None, data: memoryview) -> None:
  roll_byte = roll.roll

  if stats is None:
    for byte in data:
      roll_byte(byte)
    return

  value = roll.value
  record = stats.record
  for byte in data:
    roll_byte(byte)
    record(value())


def run(
  config: RunConfig, source: ByteSource, reporter: ProgressReporter | None = None
) -> RunResult:
  """
  Roll ``config.target_size`` bytes from ``source`` through the configured checksum.

  Memory stays bounded by a single ``config.buffer_size`` buffer however large the
  target is. When statistics are enabled every rolled value is checked against
  the 64 boundary masks.
  """
  algorithm = Algorithm.parse(config.algorithm)
  roll = create_rolling_hash(algorithm, config.window_size)
  stats = MaskStats(generate_masks(), width=roll.width) if config.display_stats else None

  buffer = bytearray(config.buffer_size)
  capacity = len(buffer)
  view = memoryview(buffer)
  state = RunState(started_ns=time.perf_counter_ns())

  logger.debug(
    'Rolling %d bytes through %s (window %d, buffer %d)',
    config.target_size,
    algorithm.value,
    config.window_size,
    capacity,
  )

  limit = _fill(source, buffer)
  if limit < config.window_size:
    raise EndOfSource(limit, config.window_size)

  roll.initialize(view[: config.window_size])
  exhausted = limit < capacity

  while state.total < config.target_size:
    if state.offset >= limit:
      if exhausted:
        break

      limit = _fill(source, buffer)
      exhausted = limit < capacity
      state.offset = 0
      logger.debug('Refilled buffer with %d bytes at %d', limit, state.total)

      if limit == 0:
        break

    span = min(limit - state.offset, config.target_size - state.total)
    _consume(roll, stats, view[state.offset : state.offset + span])
    state.offset += span
    state.total += span

    if reporter is not None and (state.offset >= limit or state.total >= config.target_size):
      reporter(RunSnapshot(state.total, config.target_size, stats))

  elapsed_ns = time.perf_counter_ns() - state.started_ns

  return RunResult(
    algorithm=algorithm,
    bytes_processed=state.total,
    elapsed_ns=elapsed_ns,
    stats=stats,
    exhausted=exhausted and state.total < config.target_size,
  )
