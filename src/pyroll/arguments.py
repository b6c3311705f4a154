from __future__ import annotations

import argparse
import typing as t
from dataclasses import dataclass
from pathlib import Path

from .rolling_hash import DEFAULT_WINDOW_SIZE, Algorithm


class HelpFormatter(argparse.HelpFormatter):
  """
  Help formatter that keeps each option on one line and appends its default.
  """

  def __init__(
    self,
    prog: str,
    indent_increment: int = 2,
    max_help_position: int = 40,
    width: t.Optional[int] = None,
  ):
    super().__init__(prog, indent_increment, max_help_position, width)

  def _format_action_invocation(self, action: argparse.Action) -> str:
    if not action.option_strings:
      return self._format_args(action, action.dest)

    if isinstance(action, argparse._HelpAction):
      return '-h --help'

    option = action.option_strings[-1]

    if action.nargs == 0:
      return option

    metavar = self._metavar_formatter(action, action.dest.upper())(1)[0]
    return f'{option} {metavar}'

  def _format_action(self, action: argparse.Action) -> str:
    if isinstance(action, argparse._HelpAction):
      help_text = 'Show this help message and exit'
    else:
      help_text = action.help or ''

    if action.default not in (None, False, argparse.SUPPRESS):
      help_text = f'{help_text} (default: {action.default})'

    return f'  {self._format_action_invocation(action):<24} {help_text}\n'


@dataclass
class Arguments:
  """
  Parsed command-line arguments. Values stay raw strings where the engine validates them.
  """

  sum: str
  stats: bool
  size: str
  buffer_size: str
  window: int
  input: t.Optional[Path]
  verbose: bool

  @staticmethod
  def from_args(argv: t.Optional[t.Sequence[str]] = None) -> Arguments:
    parser = argparse.ArgumentParser(
      prog='pyroll',
      description='Measure how often rolling checksums hit content-defined chunk boundaries.',
      formatter_class=HelpFormatter,
    )

    parser.add_argument(
      '--sum',
      default=Algorithm.ADLER32.value,
      metavar='|'.join(algorithm.value for algorithm in Algorithm),
      help='Rolling checksum to evaluate.',
    )

    parser.add_argument(
      '--stats',
      action='store_true',
      help='Print how often each boundary mask matches.',
    )

    parser.add_argument('--size', default='256M', help='How much data to roll.')

    parser.add_argument('--buffer-size', default='1M', help='Size of the read buffer.')

    parser.add_argument(
      '--window',
      type=int,
      default=DEFAULT_WINDOW_SIZE,
      help='Rolling window size in bytes.',
    )

    parser.add_argument(
      '--input',
      type=Path,
      help='Read data from this file instead of the system random generator.',
    )

    parser.add_argument(
      '-v',
      '--verbose',
      action='store_true',
      help='Log debug output to stderr.',
    )

    return Arguments(**vars(parser.parse_args(argv)))
