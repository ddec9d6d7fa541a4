"""Chunk-boundary safe text accumulation for one output stream."""

from __future__ import annotations

import codecs
import logging

__all__ = ["StreamAccumulator"]

logger = logging.getLogger(__name__)


class StreamAccumulator:
    """Decodes raw byte chunks of one stream into a growing text buffer.

    An incomplete multi-byte sequence at the end of a chunk stays inside the
    incremental decoder until the next chunk completes it, so a character
    split across two reads is never turned into replacement characters.

    Example:
        acc = StreamAccumulator()
        acc.feed(b"\\xe5\\xa5")
        acc.feed(b"\\xbd")
        acc.freeze()  # "好"
    """

    def __init__(self, encoding: str = "utf-8", errors: str = "replace") -> None:
        self.encoding = encoding
        self.errors = errors
        self._decoder = codecs.getincrementaldecoder(encoding)(errors=errors)
        self._parts: list[str] = []
        self._frozen: str | None = None

    @property
    def frozen(self) -> bool:
        return self._frozen is not None

    @property
    def pending(self) -> bytes:
        """Bytes held back because they do not form a complete character yet."""
        return self._decoder.getstate()[0]

    @property
    def text(self) -> str:
        """Text decoded so far (excluding pending bytes until frozen)."""
        if self._frozen is not None:
            return self._frozen
        return "".join(self._parts)

    def feed(self, chunk: bytes) -> None:
        """Decode ``chunk`` and append the result.

        Raises:
            RuntimeError: If the buffer was already frozen
            UnicodeDecodeError: If ``errors="strict"`` and the bytes are invalid
        """
        if self._frozen is not None:
            raise RuntimeError("cannot feed a frozen stream buffer")
        text = self._decoder.decode(chunk)
        if text:
            self._parts.append(text)

    def freeze(self) -> str:
        """Flush the decoder and fix the buffer contents.

        A truncated sequence left at end of stream is decoded with
        ``errors="replace"`` even under a strict handler, since no later
        chunk can complete it.

        Returns:
            The final text; repeated calls return the same value
        """
        if self._frozen is None:
            tail = self.pending
            try:
                rest = self._decoder.decode(b"", final=True)
            except UnicodeDecodeError:
                logger.debug(f"Truncated {self.encoding} sequence at end of stream: {tail!r}")
                rest = tail.decode(self.encoding, errors="replace")
            if rest:
                self._parts.append(rest)
            self._frozen = "".join(self._parts)
            self._parts = []
        return self._frozen
