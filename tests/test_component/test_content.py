"""Tests for ContentData -- lazy, cached decoding of response bytes."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from resting.component import content as content_module
from resting.component.content import ContentData
from resting.exceptions import DecodeError
from resting.models import EncodingType


class TestRawAccess:
    def test_length_and_bytes(self) -> None:
        data = ContentData(b'{"name":"A"}', EncodingType.UTF_8)
        assert data.content_length == 12
        assert data.bytes == b'{"name":"A"}'

    def test_empty_body(self) -> None:
        data = ContentData(b"")
        assert data.content_length == 0
        assert data.bytes == b""
        assert data.text() == ""

    def test_bytearray_is_copied_to_bytes(self) -> None:
        raw = bytearray(b"abc")
        data = ContentData(raw)
        raw[0] = ord("z")
        assert data.bytes == b"abc"


class TestLazyDecoding:
    def test_text_is_idempotent(self) -> None:
        data = ContentData("héllo".encode("utf-8"), EncodingType.UTF_8)
        first = data.text()
        second = data.text()
        assert first == "héllo"
        assert first is second

    def test_decodes_only_once(self) -> None:
        data = ContentData(b"payload", EncodingType.UTF_8)
        with patch.object(
            content_module, "_decode_bytes", wraps=content_module._decode_bytes
        ) as spy:
            data.text()
            data.text()
            str(data)
        assert spy.call_count == 1

    def test_not_decoded_before_first_access(self) -> None:
        with patch.object(content_module, "_decode_bytes") as spy:
            ContentData(b"payload")
        spy.assert_not_called()

    @pytest.mark.parametrize(
        ("encoding", "text"),
        [
            (EncodingType.UTF_16, "grüß"),
            (EncodingType.UTF_16LE, "grüß"),
            (EncodingType.ISO_8859_1, "café"),
            (EncodingType.ASCII, "plain"),
        ],
    )
    def test_declared_encodings(self, encoding: EncodingType, text: str) -> None:
        data = ContentData(text.encode(encoding.codec), encoding)
        assert data.text() == text

    def test_codec_name_string(self) -> None:
        data = ContentData("café".encode("cp1252"), "cp1252")
        assert data.text() == "café"


class TestDecodeErrors:
    def test_invalid_bytes_raise(self) -> None:
        data = ContentData(b"\xff\xfe\xfa\x00ok", EncodingType.UTF_8)
        with pytest.raises(DecodeError, match="not valid utf-8"):
            data.text()

    def test_failure_is_not_cached_as_empty(self) -> None:
        data = ContentData(b"\xff\xff", EncodingType.UTF_8)
        with pytest.raises(DecodeError):
            data.text()
        with pytest.raises(DecodeError):
            data.text()

    def test_non_ascii_under_ascii(self) -> None:
        data = ContentData("é".encode("utf-8"), EncodingType.ASCII)
        with pytest.raises(DecodeError):
            data.text()

    def test_binary_has_no_text(self) -> None:
        data = ContentData(b"\x89PNG\r\n", EncodingType.BINARY)
        with pytest.raises(DecodeError, match="binary"):
            data.text()

    def test_unregistered_codec(self) -> None:
        data = ContentData(b"abc", "no-such-codec")
        with pytest.raises(DecodeError, match="not registered"):
            data.text()


class TestRendering:
    def test_str_is_text(self) -> None:
        assert str(ContentData(b"hello")) == "hello"

    def test_str_of_binary_is_placeholder(self) -> None:
        data = ContentData(b"\x00\x01\x02", EncodingType.BINARY)
        assert str(data) == "<3 bytes of binary content>"

    def test_text_or_none(self) -> None:
        assert ContentData(b"\xff", EncodingType.UTF_8).text_or_none() is None
        assert ContentData(b"ok").text_or_none() == "ok"
