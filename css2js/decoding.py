from __future__ import annotations

import codecs
import logging

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"


def resolve_encoding(encoding: str | None) -> str:
    """Return a usable codec name, falling back to the default encoding."""

    name = str(encoding or "").strip()
    if not name:
        return DEFAULT_ENCODING
    try:
        return codecs.lookup(name).name
    except LookupError:
        logger.warning("unknown encoding %r; falling back to %s", name, DEFAULT_ENCODING)
        return DEFAULT_ENCODING


def decode_buffer(data: bytes, encoding: str | None) -> tuple[str, str]:
    """Decode a complete buffer and return (text, encoding actually used)."""

    enc = resolve_encoding(encoding)
    try:
        return data.decode(enc), enc
    except UnicodeDecodeError as e:
        logger.warning("cannot decode input as %s (%s); falling back to %s", enc, e, DEFAULT_ENCODING)
    return data.decode(DEFAULT_ENCODING, errors="replace"), DEFAULT_ENCODING


class StreamDecoder:
    """Incremental decoder that tolerates characters split across chunks.

    The first decode error switches the rest of the stream to the default
    encoding with replacement characters instead of failing the job.
    """

    def __init__(self, encoding: str | None) -> None:
        self.encoding = resolve_encoding(encoding)
        self._decoder = codecs.getincrementaldecoder(self.encoding)(errors="strict")
        self._fallen_back = False

    @property
    def fallen_back(self) -> bool:
        return self._fallen_back

    def decode(self, data: bytes) -> str:
        return self._decode(data, final=False)

    def finish(self) -> str:
        return self._decode(b"", final=True)

    def _decode(self, data: bytes, *, final: bool) -> str:
        try:
            return self._decoder.decode(data, final=final)
        except UnicodeDecodeError as e:
            if self._fallen_back:
                raise
            logger.warning(
                "cannot decode stream as %s (%s); falling back to %s", self.encoding, e, DEFAULT_ENCODING
            )
            # Bytes the failed decoder was still holding belong in front of this chunk.
            held, _flag = self._decoder.getstate()
            self._decoder = codecs.getincrementaldecoder(DEFAULT_ENCODING)(errors="replace")
            self._fallen_back = True
            return self._decoder.decode(held + data, final=final)


class StreamEncoder:
    """Incremental encoder so stateful codecs (e.g. utf-16) write one BOM per job.

    Characters the job encoding cannot represent (only possible after a decode
    fallback) are replaced.
    """

    def __init__(self, encoding: str) -> None:
        self.encoding = encoding
        self._encoder = codecs.getincrementalencoder(encoding)(errors="replace")

    def encode(self, text: str) -> bytes:
        return self._encoder.encode(text)

    def finish(self) -> bytes:
        return self._encoder.encode("", final=True)
