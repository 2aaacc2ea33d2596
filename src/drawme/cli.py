"""Command-line interface for drawme render/measure workflows."""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import traceback
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from .errors import DrawingError, MeasurementError, SceneError, UnsupportedOperationError
from .geometry import fmt
from .resources import load_cheatsheet
from .scene import render_scene
from .text import FontStyle, PillowTextMeasurer

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

logger = logging.getLogger(__name__)


@dataclass
class CliError(Exception):
    code: str
    message: str
    hint: Optional[str] = None
    exit_code: int = 1
    file: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None
    retryable: bool = True


class UsageError(Exception):
    pass


class FriendlyArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # pragma: no cover - argparse callback
        raise UsageError(message)


def _build_parser() -> argparse.ArgumentParser:
    parser = FriendlyArgumentParser(
        prog="drawme",
        description="Render JSON scenes to SVG and measure text.",
    )
    parser.add_argument("--error-format", choices=["text", "json"], default="text")
    parser.add_argument("--debug", action="store_true")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (default: $DRAWME_LOG_LEVEL or WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command")

    render_parser = subparsers.add_parser("render", help="Render a JSON scene to SVG")
    render_parser.add_argument("input", nargs="?", help="Input .json scene file")
    render_parser.add_argument("--text", help="Raw JSON scene source")
    render_parser.add_argument("--stdout", action="store_true", help="Write SVG to stdout")
    render_parser.add_argument("-o", "--output", help="Output .svg path")

    measure_parser = subparsers.add_parser("measure", help="Print the advance width of TEXT")
    measure_parser.add_argument("text", help="Text to measure")
    measure_parser.add_argument("--font-size", type=float, default=15.0)
    measure_parser.add_argument("--font-family", default="sans-serif")
    measure_parser.add_argument("--font-path", help="Explicit .ttf/.ttc font file")

    subparsers.add_parser("cheatsheet", help="Print the scene format quick reference")

    return parser


def _read_input(path: Optional[str], text: Optional[str]) -> tuple[str, str, Optional[Path]]:
    if path and text is not None:
        raise CliError(
            "E_ARGS",
            "--text cannot be combined with file input",
            hint="Use either FILE or --text.",
            exit_code=2,
        )

    if text is not None:
        return text, "<text>", None

    if path:
        input_path = Path(path)
        if not input_path.exists():
            raise CliError(
                "E_IO_READ",
                f"input file not found: {input_path}",
                exit_code=2,
                file=str(input_path),
            )
        try:
            return input_path.read_text(encoding="utf-8"), str(input_path), input_path
        except OSError as exc:
            raise CliError(
                "E_IO_READ",
                f"failed to read input file: {input_path}",
                hint=str(exc),
                exit_code=2,
                file=str(input_path),
            )

    if sys.stdin.isatty():
        raise CliError(
            "E_ARGS",
            "no input provided",
            hint="Use a subcommand with FILE, --text, or pipe stdin.",
            exit_code=2,
        )

    data = sys.stdin.read()
    if not data.strip():
        raise CliError(
            "E_ARGS",
            "stdin was empty",
            hint="Pipe a JSON scene into stdin.",
            exit_code=2,
        )
    return data, "<stdin>", None


def _write_text(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise CliError(
            "E_IO_WRITE",
            f"failed to write output file: {path}",
            hint=str(exc),
            exit_code=4,
            file=str(path),
        )


def _error_from_exception(exc: Exception) -> CliError:
    if isinstance(exc, CliError):
        return exc
    if isinstance(exc, json.JSONDecodeError):
        return CliError(
            "E_PARSE_JSON",
            f"failed to parse JSON: {exc.msg}",
            hint="Ensure the scene is valid JSON (double quotes, no trailing commas).",
            exit_code=2,
            line=exc.lineno,
            column=exc.colno,
        )
    if isinstance(exc, SceneError):
        return CliError(
            exc.code,
            exc.message,
            hint="Run `drawme cheatsheet` for the scene format.",
            exit_code=3,
        )
    if isinstance(exc, UnsupportedOperationError):
        return CliError(
            "E_UNSUPPORTED",
            str(exc),
            hint="Remove the command or render with a backend that supports it.",
            exit_code=4,
            retryable=False,
        )
    if isinstance(exc, (MeasurementError, DrawingError)):
        return CliError(
            "E_MEASURE",
            str(exc),
            hint="Check the font family/path and that the font size is positive.",
            exit_code=3,
        )
    if isinstance(exc, ValueError):
        return CliError(
            "E_SCENE",
            str(exc),
            hint="Check scene values such as colors and gradient stops.",
            exit_code=3,
        )
    return CliError(
        "E_INTERNAL",
        str(exc) or exc.__class__.__name__,
        hint="Re-run with --debug to see traceback.",
        exit_code=1,
        retryable=False,
    )


def _emit_error(err: CliError, *, error_format: str) -> None:
    if error_format == "json":
        payload = {
            "ok": False,
            "code": err.code,
            "message": err.message,
            "file": err.file,
            "line": err.line,
            "column": err.column,
            "hint": err.hint,
            "retryable": err.retryable,
        }
        sys.stderr.write(json.dumps(payload) + "\n")
        return

    sys.stderr.write(f"error[{err.code}]: {err.message}\n")
    if err.hint:
        sys.stderr.write(f"hint: {err.hint}\n")


def _configure_logging(level_name: Optional[str], debug: bool) -> None:
    if debug:
        level_name = "DEBUG"
    if level_name is None:
        level_name = os.getenv("DRAWME_LOG_LEVEL", "WARNING").upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        raise CliError(
            "E_ARGS",
            f"unknown log level: {level_name}",
            hint=f"Use one of: {', '.join(LOG_LEVELS)}.",
            exit_code=2,
        )
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


def _handle_render(args: argparse.Namespace) -> int:
    if args.stdout and args.output:
        raise CliError(
            "E_ARGS",
            "--stdout and --output are mutually exclusive",
            hint="Choose either --stdout or --output.",
            exit_code=2,
        )

    source, source_name, source_path = _read_input(args.input, args.text)
    logger.info("rendering scene from %s", source_name)
    svg_text = render_scene(source, PillowTextMeasurer())

    if args.stdout or (source_path is None and not args.output):
        sys.stdout.write(svg_text)
        sys.stdout.write("\n")
        return 0

    output_path = Path(args.output) if args.output else source_path.with_suffix(".svg")
    _write_text(output_path, svg_text)
    print(f"Wrote {output_path}")
    return 0


def _handle_measure(args: argparse.Namespace) -> int:
    if args.font_size <= 0:
        raise CliError(
            "E_ARGS",
            "--font-size must be > 0",
            hint="Use a positive size like 12 or 15.",
            exit_code=2,
        )
    if args.font_path and not Path(args.font_path).expanduser().exists():
        raise CliError(
            "E_IO_READ",
            f"font file not found: {args.font_path}",
            exit_code=2,
            file=args.font_path,
        )
    font = FontStyle(family=args.font_family, size=args.font_size, path=args.font_path)
    width = PillowTextMeasurer().measure_text_width(args.text, font)
    print(fmt(width))
    return 0


def main(argv: Optional[Iterable[str]] = None) -> int:
    raw_argv = list(argv) if argv is not None else sys.argv[1:]
    parser = _build_parser()

    if not raw_argv:
        err = CliError(
            "E_ARGS",
            "missing subcommand",
            hint="Use one of: render, measure, cheatsheet.",
            exit_code=2,
        )
        _emit_error(err, error_format="text")
        return err.exit_code

    debug_enabled = "--debug" in raw_argv or os.getenv("DRAWME_DEBUG") == "1"
    error_format = "text"
    if "--error-format" in raw_argv:
        idx = raw_argv.index("--error-format")
        if idx + 1 < len(raw_argv):
            error_format = raw_argv[idx + 1]

    try:
        args = parser.parse_args(raw_argv)
        error_format = args.error_format
        _configure_logging(args.log_level, debug_enabled)

        if args.command == "render":
            return _handle_render(args)
        if args.command == "measure":
            return _handle_measure(args)
        if args.command == "cheatsheet":
            print(load_cheatsheet())
            return 0

        raise CliError(
            "E_ARGS",
            "missing subcommand",
            hint="Use one of: render, measure, cheatsheet.",
            exit_code=2,
        )
    except UsageError as exc:
        err = CliError(
            "E_ARGS",
            str(exc),
            hint="Use subcommands: render, measure, cheatsheet.",
            exit_code=2,
        )
        _emit_error(err, error_format=error_format)
        return err.exit_code
    except Exception as exc:  # pragma: no cover - exercised in integration tests
        err = _error_from_exception(exc)
        _emit_error(err, error_format=error_format)
        if debug_enabled:
            traceback.print_exc(file=sys.stderr)
        return err.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
