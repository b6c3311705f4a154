from __future__ import annotations

import random
from abc import ABC, abstractmethod
from enum import Enum

from .error import InvalidWindowSize, UnsupportedAlgorithm

DEFAULT_WINDOW_SIZE = 64
DEFAULT_TABLE_SEED = 0x62757A68


class Algorithm(str, Enum):
  """Registered rolling checksums, selectable by name."""

  ADLER32 = 'adler32'
  RABINKARP32 = 'rabinkarp32'
  BUZHASH32 = 'buzhash32'
  BUZHASH64 = 'buzhash64'

  @classmethod
  def parse(cls, name: str | Algorithm) -> Algorithm:
    if isinstance(name, cls):
      return name

    try:
      return cls(name.strip().lower())
    except ValueError:
      raise UnsupportedAlgorithm(name, [algorithm.value for algorithm in cls]) from None


class RollingHash(ABC):
  """
  A checksum over a fixed-size window that can slide forward one byte at a time.

  The window is kept as a ring buffer so that ``roll`` never rescans it. A fresh
  instance behaves as if it had been initialized over ``window_size`` zero bytes.
  """

  width: int = 32

  def __init__(self, window_size: int = DEFAULT_WINDOW_SIZE):
    if window_size <= 0:
      raise ValueError('window_size must be positive')
    self.window_size = window_size
    self.initialize(bytes(window_size))

  def initialize(self, window: bytes | bytearray | memoryview) -> None:
    if len(window) != self.window_size:
      raise InvalidWindowSize(self.window_size, len(window))

    self._window = bytearray(window)
    self._oldest = 0
    self._reset(self._window)

  def roll(self, byte: int) -> None:
    oldest = self._oldest
    leave = self._window[oldest]
    self._window[oldest] = byte
    oldest += 1
    self._oldest = 0 if oldest == self.window_size else oldest
    self._update(leave, byte)

  @abstractmethod
  def value(self) -> int: ...

  def digest(self) -> bytes:
    return self.value().to_bytes(self.width // 8, 'big')

  @property
  def window(self) -> bytes:
    return bytes(self._window[self._oldest :] + self._window[: self._oldest])

  @abstractmethod
  def _reset(self, window: bytearray) -> None: ...

  @abstractmethod
  def _update(self, leave: int, enter: int) -> None: ...


class Adler32(RollingHash):
  """
  Rolling Adler-32. The value always equals ``zlib.adler32`` of the current window.

  See https://rsync.samba.org/tech_report/node3.html for the rolling variant.
  """

  _MOD = 65521

  def _reset(self, window: bytearray) -> None:
    n = len(window)
    self.a = (1 + sum(window)) % self._MOD
    self.b = (n + sum((n - idx) * byte for idx, byte in enumerate(window))) % self._MOD

  def _update(self, leave: int, enter: int) -> None:
    self.a = (self.a - leave + enter) % self._MOD
    self.b = (self.b - self.window_size * leave - 1 + self.a) % self._MOD

  def value(self) -> int:
    return (self.b << 16) | self.a


class RabinKarp32(RollingHash):
  """Polynomial Rabin-Karp hash, ``sum(byte * BASE ** (n - 1 - i))`` modulo 2**32."""

  BASE = 16777619
  _MASK = (1 << 32) - 1

  def _reset(self, window: bytearray) -> None:
    self._leave_factor = pow(self.BASE, len(window), 1 << 32)
    h = 0
    for byte in window:
      h = (h * self.BASE + byte) & self._MASK
    self.h = h

  def _update(self, leave: int, enter: int) -> None:
    self.h = (self.h * self.BASE + enter - leave * self._leave_factor) & self._MASK

  def value(self) -> int:
    return self.h


def generate_buzhash_table(width: int, seed: int = DEFAULT_TABLE_SEED) -> tuple[int, ...]:
  rng = random.Random(seed)
  return tuple(rng.getrandbits(width) for _ in range(256))


class _BuzHash(RollingHash):
  """
  Cyclic polynomial hash: the XOR of ``rotl(table[byte], distance from the newest byte)``.

  Subclasses fix the output width; the table is derived from ``seed``.
  """

  def __init__(self, window_size: int = DEFAULT_WINDOW_SIZE, seed: int = DEFAULT_TABLE_SEED):
    self._mask = (1 << self.width) - 1
    self.table = generate_buzhash_table(self.width, seed)
    super().__init__(window_size)

  def _rotl(self, value: int, shift: int) -> int:
    shift %= self.width
    if shift == 0:
      return value
    return ((value << shift) | (value >> (self.width - shift))) & self._mask

  def _reset(self, window: bytearray) -> None:
    h = 0
    for byte in window:
      h = self._rotl(h, 1) ^ self.table[byte]
    self.h = h

  def _update(self, leave: int, enter: int) -> None:
    self.h = (
      self._rotl(self.h, 1) ^ self._rotl(self.table[leave], self.window_size) ^ self.table[enter]
    )

  def value(self) -> int:
    return self.h


class BuzHash32(_BuzHash):
  width = 32


class BuzHash64(_BuzHash):
  width = 64


_ALGORITHMS: dict[Algorithm, type[RollingHash]] = {
  Algorithm.ADLER32: Adler32,
  Algorithm.RABINKARP32: RabinKarp32,
  Algorithm.BUZHASH32: BuzHash32,
  Algorithm.BUZHASH64: BuzHash64,
}


def create_rolling_hash(
  name: str | Algorithm, window_size: int = DEFAULT_WINDOW_SIZE
) -> RollingHash:
  return _ALGORITHMS[Algorithm.parse(name)](window_size)
