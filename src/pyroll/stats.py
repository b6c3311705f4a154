from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from .masks import generate_masks, mask_bits


def digest_to_int(digest: bytes) -> int:
  """Pack checksum bytes big-endian; narrower checksums land in the low-order bits."""
  return int.from_bytes(digest, 'big')


@dataclass(frozen=True)
class MaskRow:
  mask: int
  bits: int
  hits: int
  every: int | None
  reachable: bool


@dataclass
class MaskStats:
  """
  Counts, for every mask, how many recorded values had all of the mask's bits set.

  Masks must be ordered from least to most strict with each one a superset of the
  previous, which lets ``record`` stop at the first mask that fails.
  """

  masks: tuple[int, ...] = field(default_factory=generate_masks)
  width: int = 64
  samples: int = 0
  hits: dict[int, int] = field(init=False)

  def __post_init__(self) -> None:
    self.hits = dict.fromkeys(self.masks, 0)

  def record(self, value: int) -> None:
    self.samples += 1
    hits = self.hits

    for mask in self.masks:
      if value & mask != mask:
        break
      hits[mask] += 1

  def is_reachable(self, mask: int) -> bool:
    return mask_bits(mask) <= self.width

  def expected_chunk_size(self, mask: int, total_bytes: int) -> int | None:
    hits = self.hits[mask]
    if hits == 0:
      return None
    return total_bytes // hits

  def rows(self, total_bytes: int) -> Iterator[MaskRow]:
    for mask in self.masks:
      yield MaskRow(
        mask=mask,
        bits=mask_bits(mask),
        hits=self.hits[mask],
        every=self.expected_chunk_size(mask, total_bytes),
        reachable=self.is_reachable(mask),
      )
