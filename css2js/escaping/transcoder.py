"""Streaming CSS-to-JavaScript-string transcoder.

Escapes CSS text chunk by chunk, handling cross-chunk boundaries with a small
state machine so the streamed output is identical to escaping the whole text
at once.
"""

from __future__ import annotations

from enum import Enum, auto

from css2js.config import ConvertConfig
from css2js.escaping.rules import escape_css

# Characters whose meaning depends on what follows them: trailing newlines,
# spaces before a newline, and the "\r" of a "\r\n" pair.
_DEFERRED_CHARS = " \t\r\n"


class _State(Enum):
    """State machine states for the pending tail."""

    IDLE = auto()  # Nothing held back
    PENDING = auto()  # Holding a whitespace/line-break run from the last chunk


class EscapingTranscoder:
    """Stateful escaper for one conversion job.

    Handles:
    - Backslash and double quote escaping
    - Line endings split across chunks (`\\r` | `\\n`)
    - Trailing newlines that only turn out to be trailing at end of input
    """

    def __init__(self, config: ConvertConfig) -> None:
        self.config = config
        self._state = _State.IDLE
        self._pending = ""

    @property
    def pending(self) -> str:
        return self._pending

    def feed(self, chunk: str) -> str:
        """Escape a chunk and return the part that is safe to emit now.

        Args:
            chunk: Decoded text, in arrival order

        Returns:
            Escaped text (may be empty when the chunk is all whitespace)
        """
        if not chunk:
            return ""

        text = self._pending + chunk
        self._pending = ""
        self._state = _State.IDLE

        head = text.rstrip(_DEFERRED_CHARS)
        if len(head) < len(text):
            self._pending = text[len(head) :]
            self._state = _State.PENDING

        # `head` is empty or ends with a visible character, so escaping it as
        # if it ended the input cannot trim anything.
        return escape_css(head, self.config)

    def flush(self) -> str:
        """Resolve the pending tail now that the input has ended.

        Returns:
            Escaped tail (trailing newlines trimmed or inlined per config)
        """
        result = ""
        if self._state == _State.PENDING:
            result = escape_css(self._pending, self.config)
        self.reset()
        return result

    def reset(self) -> None:
        """Drop any pending tail for reuse."""
        self._state = _State.IDLE
        self._pending = ""


def transcode_text(text: str, config: ConvertConfig) -> str:
    """One-shot escape for a complete text.

    Runs the same path as streaming with a single chunk.
    """
    t = EscapingTranscoder(config)
    result = t.feed(text)
    result += t.flush()
    return result
