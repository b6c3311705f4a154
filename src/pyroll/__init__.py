from .driver import RunConfig, RunResult, RunSnapshot, run, throughput
from .error import (
  ConfigurationError,
  EndOfSource,
  InvalidWindowSize,
  RollError,
  UnsupportedAlgorithm,
)
from .masks import generate_masks
from .rolling_hash import (
  Adler32,
  Algorithm,
  BuzHash32,
  BuzHash64,
  RabinKarp32,
  RollingHash,
  create_rolling_hash,
)
from .source import ByteSource, RandomSource, SeededSource, StreamSource
from .stats import MaskStats

__all__ = [
  'Adler32',
  'Algorithm',
  'BuzHash32',
  'BuzHash64',
  'ByteSource',
  'ConfigurationError',
  'EndOfSource',
  'InvalidWindowSize',
  'MaskStats',
  'RabinKarp32',
  'RandomSource',
  'RollError',
  'RollingHash',
  'RunConfig',
  'RunResult',
  'RunSnapshot',
  'SeededSource',
  'StreamSource',
  'UnsupportedAlgorithm',
  'create_rolling_hash',
  'generate_masks',
  'run',
  'throughput',
]
