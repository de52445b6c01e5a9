from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterable, AsyncIterator, Iterable
from dataclasses import dataclass, replace
from pathlib import PurePath

from css2js.config import ConvertConfig
from css2js.decoding import StreamDecoder, StreamEncoder, decode_buffer
from css2js.escaping.transcoder import EscapingTranscoder, transcode_text
from css2js.wrapper import wrap

logger = logging.getLogger(__name__)

PLUGIN_NAME = "css2js"


class Css2JsError(RuntimeError):
    def __init__(self, message: str, plugin_name: str = PLUGIN_NAME) -> None:
        super().__init__(message)
        self.plugin_name = plugin_name


class UnsupportedSourceError(Css2JsError):
    pass


@dataclass
class CssFile:
    path: str
    contents: bytes | AsyncIterable[bytes] | None = None
    encoding: str | None = None

    def is_null(self) -> bool:
        return self.contents is None

    def is_buffer(self) -> bool:
        return isinstance(self.contents, (bytes, bytearray, memoryview))

    def is_stream(self) -> bool:
        return isinstance(self.contents, AsyncIterable)


def replace_extension(path: str, ext: str = ".js") -> str:
    p = PurePath(path)
    if not p.name:
        return path
    return str(p.with_suffix(ext))


def convert_buffer_with_encoding(
    data: bytes, config: ConvertConfig, encoding: str | None = None
) -> tuple[bytes, str]:
    """Convert a complete CSS buffer; return (JavaScript bytes, encoding used)."""

    text, enc = decode_buffer(bytes(data), encoding)
    return wrap(transcode_text(text, config), config).encode(enc, errors="replace"), enc


def convert_buffer(data: bytes, config: ConvertConfig, encoding: str | None = None) -> bytes:
    """Convert a complete CSS buffer into the wrapped JavaScript, same encoding."""

    return convert_buffer_with_encoding(data, config, encoding)[0]


async def convert_stream(
    chunks: AsyncIterable[bytes],
    config: ConvertConfig,
    encoding: str | None = None,
) -> AsyncIterator[bytes]:
    """Convert a stream of CSS byte chunks into a stream of JavaScript bytes.

    The next source chunk is only pulled when the consumer asks for more
    output. If the source fails, the error propagates and no suffix is written.
    """

    decoder = StreamDecoder(encoding)
    encoder = StreamEncoder(decoder.encoding)
    transcoder = EscapingTranscoder(config)

    yield encoder.encode(config.wrapper_prefix)

    async for chunk in chunks:
        out = encoder.encode(transcoder.feed(decoder.decode(chunk)))
        if out:
            yield out

    tail = transcoder.feed(decoder.finish()) + transcoder.flush()
    yield encoder.encode(tail + config.wrapper_suffix) + encoder.finish()


def convert_file(file: CssFile, config: ConvertConfig) -> CssFile:
    """Convert one file, keeping its shape (null, buffer or stream)."""

    if file.is_null():
        return file

    if file.is_buffer():
        logger.debug("converting buffer: %s", file.path)
        contents = convert_buffer(file.contents, config, file.encoding)  # type: ignore[arg-type]
        return replace(file, path=replace_extension(file.path), contents=contents)

    if file.is_stream():
        logger.debug("converting stream: %s", file.path)
        contents = convert_stream(file.contents, config, file.encoding)  # type: ignore[arg-type]
        return replace(file, path=replace_extension(file.path), contents=contents)

    raise UnsupportedSourceError("Unhandled file source type.")


async def _collect(stream: AsyncIterable[bytes]) -> bytes:
    parts: list[bytes] = []
    async for part in stream:
        parts.append(part)
    return b"".join(parts)


async def _run_job(file: CssFile, config: ConvertConfig) -> CssFile:
    out = convert_file(file, config)
    if out.is_stream():
        out = replace(out, contents=await _collect(out.contents))  # type: ignore[arg-type]
    return out


async def convert_files(files: Iterable[CssFile], config: ConvertConfig) -> list[CssFile | Exception]:
    """Run independent conversion jobs concurrently.

    Streamed results are collected into buffers. A failing job reports its
    error in its own slot and does not affect the others.
    """

    async def _guarded(f: CssFile) -> CssFile | Exception:
        try:
            return await _run_job(f, config)
        except Css2JsError as e:
            logger.warning("%s: %s", f.path, e)
            return e
        except Exception as e:
            logger.exception("conversion failed: %s", f.path)
            return e

    return list(await asyncio.gather(*(_guarded(f) for f in files)))
