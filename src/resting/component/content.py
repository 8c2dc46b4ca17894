"""Byte-to-text cache for one response body."""

from __future__ import annotations

import codecs
from typing import Optional, Union

from resting.exceptions import DecodeError
from resting.models import EncodingType


def _decode_bytes(raw: bytes, codec: str) -> str:
    return raw.decode(codec, errors="strict")


class ContentData:
    """Raw response bytes plus their lazily decoded text.

    The text is decoded on the first call to :meth:`text` and cached; later
    calls return the same string object. The cache is not guarded, so the
    first call must not race with another thread.

    Args:
        raw: The body bytes.
        charset: An :class:`~resting.models.EncodingType` or any Python
            codec name.
    """

    __slots__ = ("_raw", "_charset", "_text")

    def __init__(self, raw: bytes, charset: Union[EncodingType, str] = EncodingType.UTF_8) -> None:
        self._raw = bytes(raw)
        self._charset = charset
        self._text: Optional[str] = None

    @property
    def charset(self) -> Union[EncodingType, str]:
        return self._charset

    @property
    def content_length(self) -> int:
        return len(self._raw)

    @property
    def bytes(self) -> bytes:
        return self._raw

    def text(self) -> str:
        """Return the decoded body, decoding at most once.

        Raises:
            DecodeError: If the charset is ``BINARY`` or not a registered
                codec, or if the bytes are invalid under it.
        """
        if self._text is None:
            codec = self._resolve_codec()
            try:
                self._text = _decode_bytes(self._raw, codec)
            except UnicodeDecodeError as exc:
                raise DecodeError(
                    f"Content is not valid {codec} text: {exc.reason} at byte {exc.start}"
                ) from exc
        return self._text

    def _resolve_codec(self) -> str:
        if isinstance(self._charset, EncodingType):
            codec = self._charset.codec
            if codec is None:
                raise DecodeError("Content is declared binary and has no text form")
        else:
            codec = self._charset
        try:
            return codecs.lookup(codec).name
        except LookupError as exc:
            raise DecodeError(f"Encoding '{codec}' is not registered") from exc

    def text_or_none(self) -> Optional[str]:
        try:
            return self.text()
        except DecodeError:
            return None

    def __str__(self) -> str:
        text = self.text_or_none()
        if text is None:
            return f"<{self.content_length} bytes of binary content>"
        return text

    def __repr__(self) -> str:
        return f"ContentData(length={self.content_length}, charset={self._charset!s})"
