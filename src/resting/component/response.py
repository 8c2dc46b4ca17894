"""Capture of one HTTP round trip: status, headers and body.

A :class:`ServiceResponse` drains and closes the :class:`httpx.Response` it
is built from, so the transport connection is released before any
transformation work starts. Every failure while doing so is raised as a
typed error; a half-built response never escapes the constructor.
"""

from __future__ import annotations

from typing import Optional, Union

import httpx

from resting.component.content import ContentData
from resting.exceptions import BodyReadError, ConstructionError
from resting.models import EncodingType, Header


class ServiceResponse:
    """Wrapper for a REST response.

    Args:
        response: A completed (possibly still streaming) :class:`httpx.Response`.
        encoding: Charset used to decode the body in :meth:`body_text`.

    Raises:
        ConstructionError: If *response* is ``None`` or reports a status
            code outside 100..599.
        BodyReadError: If reading the body stream fails.
    """

    def __init__(
        self,
        response: Optional[httpx.Response],
        encoding: Union[EncodingType, str] = EncodingType.UTF_8,
    ) -> None:
        if response is None:
            raise ConstructionError(
                "HTTP response is missing; check the availability of the endpoint service"
            )
        try:
            status_code = response.status_code
            if not 100 <= status_code <= 599:
                raise ConstructionError(f"Invalid HTTP status code {status_code}")
            header_encoding = response.headers.encoding
            headers = tuple(
                Header(name.decode(header_encoding), value.decode(header_encoding))
                for name, value in response.headers.raw
            )
            try:
                body = response.read()
            except (httpx.StreamError, httpx.TransportError, OSError) as exc:
                raise BodyReadError(f"Failed to read response body: {exc}") from exc
        finally:
            response.close()

        self._status_code = status_code
        self._headers = headers
        self._content = ContentData(body, encoding)

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def headers(self) -> tuple[Header, ...]:
        """Response headers in the order received, with their original casing."""
        return self._headers

    @property
    def content(self) -> ContentData:
        return self._content

    @property
    def is_success(self) -> bool:
        return 200 <= self._status_code < 300

    @property
    def content_type(self) -> Optional[str]:
        return self.header("content-type")

    def header(self, name: str) -> Optional[str]:
        """Return the first value of header *name* (case-insensitive), or ``None``."""
        wanted = name.lower()
        for header in self._headers:
            if header.name.lower() == wanted:
                return header.value
        return None

    def body_text(self) -> str:
        """Decoded body. Raises :class:`~resting.exceptions.DecodeError` when undecodable."""
        return self._content.text()

    def body_bytes(self) -> bytes:
        return self._content.bytes

    def body_length(self) -> int:
        return self._content.content_length

    def describe(self) -> str:
        """Multi-line, human-readable summary for diagnostics."""
        lines = [
            "ServiceResponse",
            "---------------",
            f"HTTP Status: {self._status_code}",
            "Headers:",
        ]
        lines.extend(f"{header.name} : {header.value}" for header in self._headers)
        lines.append("Response body:")
        lines.append(str(self._content))
        lines.append("---------------")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"ServiceResponse(status_code={self._status_code}, length={self.body_length()})"
