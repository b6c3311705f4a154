from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import (
  BarColumn,
  Progress,
  TaskID,
  TaskProgressColumn,
  TextColumn,
  TimeElapsedColumn,
)
from rich.table import Table

from pyroll.arguments import Arguments
from pyroll.driver import ProgressReporter, RunConfig, RunResult, RunSnapshot, run
from pyroll.error import ConfigurationError, RollError
from pyroll.rolling_hash import Algorithm
from pyroll.sizes import format_bytes, format_duration, parse_size
from pyroll.source import open_source


def _build_config(args: Arguments) -> RunConfig:
  algorithm = Algorithm.parse(args.sum)
  target_size = parse_size(args.size)
  buffer_size = parse_size(args.buffer_size)

  if args.window <= 0:
    raise ConfigurationError('--window must be a positive integer')

  if buffer_size < args.window:
    raise ConfigurationError('--buffer-size must be at least as large as --window')

  return RunConfig(
    algorithm=algorithm,
    target_size=target_size,
    display_stats=args.stats,
    buffer_size=buffer_size,
    window_size=args.window,
  )


def _configure_logging(err_console: Console, verbose: bool) -> None:
  logging.basicConfig(
    level=logging.DEBUG if verbose else logging.WARNING,
    format='%(message)s',
    handlers=[RichHandler(console=err_console, show_path=False)],
    force=True,
  )


def _render_table(snapshot: RunSnapshot) -> Table:
  stats = snapshot.stats
  if stats is None:
    raise RollError('mask table requested for a run without statistics')

  table = Table(title=f'Byte count: {format_bytes(snapshot.bytes_processed)}')
  table.add_column('Mask')
  table.add_column('Bits', justify='right')
  table.add_column('Every', justify='right')

  for row in stats.rows(snapshot.bytes_processed):
    if not row.reachable:
      every = f'unreachable ({stats.width}-bit sum)'
    elif row.every is None:
      every = 'NaN'
    else:
      every = format_bytes(row.every)

    table.add_row(f'0x{row.mask:016x}', f'{row.bits:02d}', every)

  return table


def _make_table_reporter(console: Console) -> ProgressReporter:
  def reporter(snapshot: RunSnapshot) -> None:
    console.clear()
    console.print(_render_table(snapshot))

  return reporter


def _make_line_reporter(console: Console, target_size: int) -> Tuple[ProgressReporter, Progress]:
  progress = Progress(
    TextColumn('Byte count: {task.fields[byte_count]}'),
    BarColumn(),
    TaskProgressColumn(),
    TimeElapsedColumn(),
    console=console,
    transient=True,
    disable=not console.is_interactive,
  )

  task_id: TaskID = progress.add_task('Rolling', total=target_size, byte_count=format_bytes(0))

  def reporter(snapshot: RunSnapshot) -> None:
    progress.update(
      task_id,
      completed=snapshot.bytes_processed,
      byte_count=format_bytes(snapshot.bytes_processed),
    )

  return reporter, progress


def _print_summary(result: RunResult, console: Console) -> None:
  rate = result.throughput
  rate_text = f'{format_bytes(rate)}/s' if rate is not None else 'n/a'

  console.print(
    f'Rolled {format_bytes(result.bytes_processed)} of data '
    f'in {format_duration(result.elapsed_ns)} ({rate_text}).'
  )

  if result.exhausted:
    console.print('[bold yellow]Input ended before the requested size was reached.[/]')


def main(argv: Optional[Sequence[str]] = None) -> int:
  arguments = Arguments.from_args(argv)

  console, err_console = Console(), Console(stderr=True)
  _configure_logging(err_console, arguments.verbose)

  try:
    config = _build_config(arguments)

    with open_source(arguments.input) as source:
      if config.display_stats:
        result = run(config, source, reporter=_make_table_reporter(console))
      else:
        reporter, progress = _make_line_reporter(console, config.target_size)
        with progress:
          result = run(config, source, reporter=reporter)
  except (RollError, OSError) as exc:
    err_console.print(f'[bold red]error:[/] {escape(str(exc))}')
    return 1
  except Exception as exc:  # pragma: no cover - CLI guardrail
    err_console.print(f'[bold red]error:[/] {escape(str(exc))}')
    return 1

  _print_summary(result, console)

  return 0


if __name__ == '__main__':
  raise SystemExit(main())
