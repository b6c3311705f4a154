MASK_COUNT = 64

_ONES = (1 << MASK_COUNT) - 1


def generate_masks() -> tuple[int, ...]:
  """
  Return the 64 boundary masks in ascending strictness.

  Mask ``i`` has its low ``i + 1`` bits set, so a random value satisfies it with
  probability ``1 / 2 ** (i + 1)``.
  """
  return tuple(_ONES >> (MASK_COUNT - 1 - i) for i in range(MASK_COUNT))


def mask_bits(mask: int) -> int:
  return mask.bit_length()
