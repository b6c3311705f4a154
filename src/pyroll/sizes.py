from __future__ import annotations

import re
from fractions import Fraction

from .error import ConfigurationError

KiB = 1024
MiB = 1024 * KiB
GiB = 1024 * MiB

MAX_SIZE = (1 << 64) - 1

_UNITS = ('E', 'P', 'T', 'G', 'M', 'K')

_MULTIPLIERS = {
  'B': 1,
  'K': KiB,
  'M': MiB,
  'G': GiB,
  'T': 1024 * GiB,
  'P': 1024**2 * GiB,
  'E': 1024**3 * GiB,
}

_SIZE_RE = re.compile(r'^\s*(\d+(?:\.\d+)?)\s*([KMGTPE]?)(I?B)?\s*$', re.IGNORECASE)


def parse_size(text: str) -> int:
  """
  Parse a human byte quantity such as ``256M``, ``1.5GiB`` or ``512KB``.

  All units are binary multiples. A bare number needs the ``B`` unit.
  """
  match = _SIZE_RE.match(text)

  if match is None or not (match.group(2) or match.group(3)):
    raise ConfigurationError(
      f'{text!r}: byte quantity must be a positive number with a unit like M, MB, MiB, G or GiB'
    )

  number, unit, suffix = match.groups()
  if unit == '' and suffix.upper() == 'IB':
    raise ConfigurationError(f'{text!r}: unknown unit')

  size = int(Fraction(number) * _MULTIPLIERS[unit.upper() or 'B'])

  if size <= 0:
    raise ConfigurationError(f'{text!r}: byte quantity must be positive')
  if size > MAX_SIZE:
    raise ConfigurationError(f'{text!r}: byte quantity does not fit in 64 bits')

  return size


def format_bytes(value: int) -> str:
  for idx, unit in enumerate(_UNITS):
    multiplier = _MULTIPLIERS[unit]
    if value >= multiplier:
      scaled = value / multiplier
      # 1023.95K and up would print as 1024.0K
      if idx > 0 and round(scaled, 1) >= 1024:
        unit = _UNITS[idx - 1]
        scaled = value / _MULTIPLIERS[unit]
      return f'{scaled:.1f}{unit}'
  return f'{value}B'


def format_duration(elapsed_ns: int) -> str:
  seconds = elapsed_ns / 1e9
  if seconds < 1:
    return f'{seconds * 1000:.1f}ms'
  if seconds < 60:
    return f'{seconds:.2f}s'
  minutes, seconds = divmod(seconds, 60)
  return f'{int(minutes)}m{seconds:05.2f}s'
