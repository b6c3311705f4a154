class RollError(Exception):
  """Base class for every failure surfaced by pyroll."""


class ConfigurationError(RollError):
  """The run cannot start because an option is invalid."""


class UnsupportedAlgorithm(ConfigurationError):
  def __init__(self, name: str, known: list[str]):
    super().__init__(f'{name}: unrecognized checksum (expected one of {", ".join(known)})')
    self.name = name


class InvalidWindowSize(RollError):
  def __init__(self, expected: int, actual: int):
    super().__init__(f'window must be exactly {expected} bytes, got {actual}')
    self.expected = expected
    self.actual = actual


class EndOfSource(RollError):
  """
  Raised by a byte source that could not fill the whole buffer.

  ``filled`` holds the number of leading buffer bytes that are valid.
  """

  def __init__(self, filled: int, capacity: int):
    super().__init__(f'source ended after {filled} of {capacity} bytes')
    self.filled = filled
    self.capacity = capacity
