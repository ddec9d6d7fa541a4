"""StreamAccumulator tests."""

from __future__ import annotations

import pytest

from async_spawn.runtime.stream import StreamAccumulator


class TestChunkBoundaries:
    """Multi-byte characters split across chunks."""

    def test_three_byte_character_split_two_one(self):
        acc = StreamAccumulator()
        acc.feed(b"\xe5\xa5")
        assert acc.text == ""
        assert acc.pending == b"\xe5\xa5"
        acc.feed(b"\xbd")
        assert acc.freeze() == "好"

    def test_four_byte_character_split_byte_by_byte(self):
        acc = StreamAccumulator()
        for byte in "😀".encode():
            acc.feed(bytes([byte]))
        assert acc.freeze() == "😀"

    def test_split_in_middle_of_text(self):
        data = "naïve café 日本語".encode()
        acc = StreamAccumulator()
        acc.feed(data[:7])
        acc.feed(data[7:15])
        acc.feed(data[15:])
        assert acc.freeze() == "naïve café 日本語"

    def test_other_encoding(self):
        data = "é".encode("utf-16-le")
        acc = StreamAccumulator(encoding="utf-16-le")
        acc.feed(data[:1])
        acc.feed(data[1:])
        assert acc.freeze() == "é"


class TestFreeze:
    """Freezing behaviour."""

    def test_truncated_tail_is_replaced(self):
        acc = StreamAccumulator()
        acc.feed(b"ok\xe5\xa5")
        assert acc.freeze() == "ok\ufffd"

    def test_truncated_tail_under_strict_handler(self):
        acc = StreamAccumulator(errors="strict")
        acc.feed(b"ok\xe5")
        assert acc.freeze().startswith("ok")
        assert acc.frozen

    def test_invalid_bytes_under_strict_handler_raise(self):
        acc = StreamAccumulator(errors="strict")
        with pytest.raises(UnicodeDecodeError):
            acc.feed(b"\xff\xfe")

    def test_freeze_is_idempotent(self):
        acc = StreamAccumulator()
        acc.feed(b"abc")
        assert acc.freeze() == "abc"
        assert acc.freeze() == "abc"
        assert acc.text == "abc"

    def test_feed_after_freeze_raises(self):
        acc = StreamAccumulator()
        acc.freeze()
        with pytest.raises(RuntimeError, match="frozen"):
            acc.feed(b"late")

    def test_empty_stream(self):
        assert StreamAccumulator().freeze() == ""
