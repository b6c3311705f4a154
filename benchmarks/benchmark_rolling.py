from __future__ import annotations

import argparse
from dataclasses import dataclass

from pyroll.driver import RunConfig, RunResult, run
from pyroll.rolling_hash import Algorithm
from pyroll.sizes import format_bytes, format_duration, parse_size
from pyroll.source import SeededSource


@dataclass(slots=True)
class BenchmarkResult:
  algorithm: Algorithm
  plain: RunResult
  with_stats: RunResult


def run_benchmark(
  *, algorithm: Algorithm, size: int, buffer_size: int, seed: int
) -> BenchmarkResult:
  plain = run(RunConfig(algorithm, target_size=size, buffer_size=buffer_size), SeededSource(seed))
  with_stats = run(
    RunConfig(algorithm, target_size=size, display_stats=True, buffer_size=buffer_size),
    SeededSource(seed),
  )

  return BenchmarkResult(algorithm=algorithm, plain=plain, with_stats=with_stats)


def _format_rate(result: RunResult) -> str:
  rate = result.throughput
  return f'{format_bytes(rate)}/s' if rate is not None else 'n/a'


def main() -> None:
  parser = argparse.ArgumentParser(description='Compare the throughput of every rolling checksum.')
  parser.add_argument('--size', default='4M', help='How much data to roll per algorithm')
  parser.add_argument('--buffer-size', default='1M', help='Read buffer size')
  parser.add_argument('--seed', type=int, default=1337, help='Seed for the generated data')

  args = parser.parse_args()
  size = parse_size(args.size)
  buffer_size = parse_size(args.buffer_size)

  print('=== Rolling Checksum Benchmark ===')
  print(f'Data per run     : {format_bytes(size)}')
  print(f'Buffer size      : {format_bytes(buffer_size)}')
  print()

  for algorithm in Algorithm:
    result = run_benchmark(algorithm=algorithm, size=size, buffer_size=buffer_size, seed=args.seed)
    print(
      f'{algorithm.value:<17}: {format_duration(result.plain.elapsed_ns)} '
      f'({_format_rate(result.plain)})'
    )
    print(
      f'  with stats     : {format_duration(result.with_stats.elapsed_ns)} '
      f'({_format_rate(result.with_stats)})'
    )


if __name__ == '__main__':
  main()
