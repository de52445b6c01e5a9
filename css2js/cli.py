"""CLI entry point for css2js.

Examples:
  css2js convert styles/site.css -o dist
  cat site.css | css2js convert --no-split-on-newline > site.js
  css2js serve --port 18080
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any, BinaryIO

from css2js.config import VERSION, ConvertConfig, config_from_env
from css2js.converter import CssFile, convert_buffer, convert_files, convert_stream
from css2js.env import env_int
from css2js.logging_setup import configure_console_logging
from css2js.wrapper import load_wrapper_template

logger = logging.getLogger(__name__)


def app(argv: list[str] | None = None) -> None:
    """Console script entrypoint."""
    raise SystemExit(main(argv))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="css2js",
        description="Embed CSS into JavaScript that injects a <style> element when executed.",
    )
    parser.add_argument("--version", action="version", version=f"css2js {VERSION}")

    sub = parser.add_subparsers(dest="cmd", required=True)

    p_convert = sub.add_parser("convert", help="Convert CSS files (or stdin) to JavaScript")
    p_convert.add_argument("files", nargs="*", type=Path, help="CSS files; none or '-' reads stdin")
    p_convert.add_argument("--out", "-o", type=Path, default=None, help="Output directory (default: beside input)")
    p_convert.add_argument("--encoding", "-e", default=None, help="Input encoding (default: utf-8)")
    p_convert.add_argument(
        "--chunk-size",
        type=int,
        default=0,
        help="Stream input in chunks of this many bytes (0 reads each file at once)",
    )
    p_convert.add_argument(
        "--no-split-on-newline",
        dest="split_on_newline",
        action="store_const",
        const=False,
        default=None,
        help="Keep the output on one string literal",
    )
    p_convert.add_argument(
        "--no-trim-spaces-before-newline",
        dest="trim_spaces_before_newline",
        action="store_const",
        const=False,
        default=None,
        help="Keep spaces and tabs at line ends",
    )
    p_convert.add_argument(
        "--no-trim-trailing-newline",
        dest="trim_trailing_newline",
        action="store_const",
        const=False,
        default=None,
        help="Keep the final newline as an escaped \\n",
    )
    p_convert.add_argument("--prefix", default=None, help="Custom text before the escaped CSS")
    p_convert.add_argument("--suffix", default=None, help="Custom text after the escaped CSS")
    p_convert.add_argument("--template", type=Path, default=None, help="Wrapper template file with a $$$ placeholder")
    p_convert.add_argument("--verbose", "-v", action="store_true", help="Log progress to stderr")

    p_serve = sub.add_parser("serve", help="Run the HTTP conversion service")
    p_serve.add_argument("--host", default=os.getenv("CSS2JS_HOST", "127.0.0.1"))
    p_serve.add_argument("--port", type=int, default=env_int("CSS2JS_PORT", 18080))

    args = parser.parse_args(argv)

    if args.cmd == "convert":
        return _cmd_convert(args)
    if args.cmd == "serve":
        return _cmd_serve(args)

    parser.print_help()
    return 2


def _config_from_args(args: Any) -> ConvertConfig:
    prefix, suffix = args.prefix, args.suffix
    if args.template is not None:
        tpl_prefix, tpl_suffix = load_wrapper_template(args.template)
        prefix = tpl_prefix if prefix is None else prefix
        suffix = tpl_suffix if suffix is None else suffix

    return config_from_env(
        split_on_newline=args.split_on_newline,
        trim_spaces_before_newline=args.trim_spaces_before_newline,
        trim_trailing_newline=args.trim_trailing_newline,
        prefix=prefix,
        suffix=suffix,
    )


async def _read_chunks(f: BinaryIO, chunk_size: int) -> AsyncIterator[bytes]:
    while True:
        b = await asyncio.to_thread(f.read, chunk_size)
        if not b:
            break
        yield b


async def _read_file_chunks(path: Path, chunk_size: int) -> AsyncIterator[bytes]:
    with path.open("rb") as f:
        async for b in _read_chunks(f, chunk_size):
            yield b


def _output_path(result_path: str, out_dir: Path | None) -> Path:
    p = Path(result_path)
    return out_dir / p.name if out_dir is not None else p


def _cmd_convert(args: Any) -> int:
    configure_console_logging(logging.INFO if args.verbose else logging.WARNING)

    try:
        config = _config_from_args(args)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    chunk_size = int(args.chunk_size)
    if chunk_size < 0:
        print("Error: --chunk-size must be >= 0", file=sys.stderr)
        return 2

    paths: list[Path] = list(args.files)
    if not paths or paths == [Path("-")]:
        return _convert_stdio(config, args.encoding, chunk_size)

    files: list[CssFile] = []
    failed = 0
    for path in paths:
        if chunk_size:
            files.append(CssFile(path=str(path), contents=_read_file_chunks(path, chunk_size), encoding=args.encoding))
            continue
        try:
            files.append(CssFile(path=str(path), contents=path.read_bytes(), encoding=args.encoding))
        except OSError as e:
            print(f"Error: {path}: {e}", file=sys.stderr)
            failed += 1

    results = asyncio.run(convert_files(files, config))

    for src, result in zip(files, results):
        if isinstance(result, Exception):
            print(f"Error: {src.path}: {result}", file=sys.stderr)
            failed += 1
            continue

        dst = _output_path(result.path, args.out)
        try:
            dst.parent.mkdir(parents=True, exist_ok=True)
            dst.write_bytes(result.contents)  # type: ignore[arg-type]
        except OSError as e:
            print(f"Error: {dst}: {e}", file=sys.stderr)
            failed += 1
            continue
        logger.info("wrote %s", dst)

    return 1 if failed else 0


def _convert_stdio(config: ConvertConfig, encoding: str | None, chunk_size: int) -> int:
    src = sys.stdin.buffer
    dst = sys.stdout.buffer

    if not chunk_size:
        dst.write(convert_buffer(src.read(), config, encoding))
        dst.flush()
        return 0

    async def _run() -> None:
        async for part in convert_stream(_read_chunks(src, chunk_size), config, encoding):
            dst.write(part)
        dst.flush()

    asyncio.run(_run())
    return 0


def _cmd_serve(args: Any) -> int:
    import uvicorn

    uvicorn.run("css2js.api:app", host=args.host, port=int(args.port))
    return 0


if __name__ == "__main__":
    app()
