from __future__ import annotations

import os
import random
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Protocol

from .error import EndOfSource


class ByteSource(Protocol):
  """
  Supplies the bytes that get rolled through the checksum.

  ``refill`` must fill ``buffer`` completely or raise ``EndOfSource`` with the
  number of valid leading bytes. Sources are read forward only.
  """

  def refill(self, buffer: bytearray) -> None: ...


class RandomSource:
  """Fresh bytes from the operating system's random generator; never runs out."""

  def refill(self, buffer: bytearray) -> None:
    memoryview(buffer)[:] = os.urandom(len(buffer))


class SeededSource:
  """Reproducible pseudo-random bytes."""

  def __init__(self, seed: int):
    self._rng = random.Random(seed)

  def refill(self, buffer: bytearray) -> None:
    memoryview(buffer)[:] = self._rng.randbytes(len(buffer))


class StreamSource:
  """Reads from a binary stream, e.g. ``/dev/urandom`` or a file of real data."""

  def __init__(self, stream: BinaryIO):
    self.stream = stream

  def refill(self, buffer: bytearray) -> None:
    view = memoryview(buffer)
    filled = 0

    while filled < len(buffer):
      count = self.stream.readinto(view[filled:])
      if not count:
        raise EndOfSource(filled, len(buffer))
      filled += count


@contextmanager
def open_source(path: Path | None) -> Iterator[ByteSource]:
  if path is None:
    yield RandomSource()
    return

  with Path(path).open('rb') as fh:
    yield StreamSource(fh)
