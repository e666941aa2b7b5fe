from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import BinaryIO, List, NoReturn, Optional, Sequence

from htmltrim.core.interfaces.logging import LoggerFactoryProtocol, LoggerLikeProtocol
from htmltrim.logging.factory import DefaultLoggerFactory
from htmltrim.logging.helpers import get_logger
from htmltrim.processing.trimmer import WhitespaceTrimmer, remove
from htmltrim.runtime.config import TrimConfig, TrimSwitch

logger: LoggerLikeProtocol = get_logger('htmltrim')


class CliError(Exception):
    """Raised for user-facing CLI failures (missing input, unwritable output)."""


def _configure_logging(
    enable_json: bool,
    level: int,
    factory: Optional[LoggerFactoryProtocol] = None,
) -> None:
    """Configure process-wide logging once, either JSON or plain text."""
    prev = getattr(_configure_logging, '_configured_mode', None)
    if prev is not None and prev == (bool(enable_json), level):
        return
    if factory is None:
        factory = DefaultLoggerFactory(json_logs=enable_json, level=level)
    global logger
    logger = factory.get_logger('htmltrim')
    setattr(_configure_logging, '_configured_mode', (bool(enable_json), level))


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog='htmltrim',
        description='Strip HTML comments and redundant whitespace, leaving <pre> blocks untouched.',
    )
    p.add_argument('files', nargs='*', metavar='FILE',
                   help="HTML files to trim; '-' or no FILE reads stdin")
    p.add_argument('-o', '--output', metavar='OUT',
                   help='write the result to OUT instead of stdout')
    p.add_argument('--disable', action='store_true',
                   help='pass input through unchanged')
    p.add_argument('--stats', action='store_true',
                   help='log byte counts before and after trimming')
    p.add_argument('--json-logs', action='store_true',
                   help='emit log lines as JSON')
    return p


def _read_input(name: str, stdin: BinaryIO) -> bytes:
    if name == '-':
        return stdin.read()
    path = Path(name)
    try:
        return path.read_bytes()
    except OSError as exc:
        raise CliError(f'cannot read {path}: {exc.strerror or exc}') from exc


class HtmlTrim:
    """Top-level façade for command-style execution."""

    @staticmethod
    def run(
        argv: Sequence[str],
        *,
        stdin: Optional[BinaryIO] = None,
        stdout: Optional[BinaryIO] = None,
    ) -> bytes:
        """Trim the inputs named in `argv` and return the concatenated result.

        The result is written to `--output` when given, else to `stdout`.
        """
        ns = _build_parser().parse_args(list(argv))
        cfg = TrimConfig.from_env()
        _configure_logging(ns.json_logs or cfg.json_logs, cfg.log_level)

        switch = TrimSwitch(enabled=cfg.enabled and not ns.disable)
        trimmer = WhitespaceTrimmer(logger=get_logger('processing.trimmer'))
        source = stdin if stdin is not None else sys.stdin.buffer

        outputs: List[bytes] = []
        for name in ns.files or ['-']:
            page = _read_input(name, source)
            trimmed = remove(page, switch=switch, trimmer=trimmer)
            if ns.stats:
                logger.info('✔ %s: %d → %d bytes', name, len(page), len(trimmed))
            outputs.append(trimmed)

        result = b''.join(outputs)
        if ns.output:
            out = Path(ns.output)
            try:
                out.write_bytes(result)
            except OSError as exc:
                raise CliError(f'cannot write {out}: {exc.strerror or exc}') from exc
            logger.info('✔ trimmed output written to %s', out)
        else:
            sink = stdout if stdout is not None else sys.stdout.buffer
            sink.write(result)
            sink.flush()
        return result


def main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """Entry point for `python -m htmltrim` and the `htmltrim` script."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        HtmlTrim.run(args)
        raise SystemExit(0)
    except CliError as exc:
        logger.error('⚠  %s', exc)
        raise SystemExit(1)
    except KeyboardInterrupt:
        logger.error('Interrupted by user.')
        raise SystemExit(130)
    except BrokenPipeError:
        raise SystemExit(0)
    except Exception as exc:
        if os.getenv('DEBUG') == '1':
            raise
        logger.error('Unexpected error: %s', exc)
        raise SystemExit(1)


if __name__ == '__main__':
    main()
