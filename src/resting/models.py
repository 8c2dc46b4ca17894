"""Canonical models shared across all resting modules.

The models fall into three groups:

**Enumerations** -- :class:`Verb`, :class:`EncodingType` and
:class:`TransformationType` name the knobs a caller can turn.

**Request description** -- :class:`Header`, :class:`RequestParams`,
:class:`URLContext`, the three payload models and the four verb-tagged
service contexts. A context is the complete, frozen description of one
pending HTTP request; :func:`make_context` is the only place that decides
which payload a verb may carry.

**Transformation inputs** -- :class:`TimeoutConfig` and :class:`Alias`.

All request models use Pydantic v2 with ``frozen=True`` so that a context
cannot change between the moment it is built and the moment the accessor
consumes it.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from pathlib import Path
from typing import Annotated, Any, Iterable, Iterator, Literal, NamedTuple, Optional, Sequence, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from resting.exceptions import ConfigurationError

DEFAULT_PORT = 80


# --- Enumerations ---


class Verb(str, enum.Enum):
    """HTTP verbs supported by the service contexts."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @classmethod
    def _missing_(cls, value: object) -> Optional[Verb]:
        if isinstance(value, str):
            upper = value.upper()
            for member in cls:
                if member.value == upper:
                    return member
        return None


class EncodingType(str, enum.Enum):
    """Character encodings a response body or message payload may declare.

    ``BINARY`` marks content that has no text form at all; decoding it
    raises :class:`~resting.exceptions.DecodeError`.
    """

    UTF_8 = "utf-8"
    UTF_16 = "utf-16"
    UTF_16BE = "utf-16-be"
    UTF_16LE = "utf-16-le"
    ASCII = "ascii"
    ISO_8859_1 = "iso-8859-1"
    BINARY = "binary"

    @classmethod
    def _missing_(cls, value: object) -> Optional[EncodingType]:
        # Accept "UTF8", "utf_8", "ISO-8859-1" and friends.
        if isinstance(value, str):
            wanted = value.lower().replace("_", "-").replace("-", "")
            for member in cls:
                if member.value.replace("-", "") == wanted:
                    return member
        return None

    @property
    def codec(self) -> Optional[str]:
        """Python codec name, or ``None`` for :attr:`BINARY`."""
        if self is EncodingType.BINARY:
            return None
        return self.value


class TransformationType(str, enum.Enum):
    """Document formats a :class:`~resting.transform.base.Transformer` understands."""

    JSON = "json"
    XML = "xml"

    @classmethod
    def _missing_(cls, value: object) -> Optional[TransformationType]:
        if isinstance(value, str):
            lower = value.lower()
            for member in cls:
                if member.value == lower:
                    return member
        return None


# --- Request description ---


class Header(NamedTuple):
    """One HTTP header as a name/value pair. Header sequences may repeat names."""

    name: str
    value: str

    @classmethod
    def parse(cls, raw: str) -> Header:
        """Parse a ``"Name: value"`` string.

        Raises:
            ConfigurationError: If *raw* has no colon or an empty name.
        """
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise ConfigurationError(f"Invalid header '{raw}', expected 'Name: value'")
        return cls(name.strip(), value.strip())


def coerce_headers(
    headers: Union[Mapping[str, str], Iterable[Union[Header, tuple[str, str]]], None],
) -> tuple[Header, ...]:
    """Normalise a header mapping or pair sequence into a tuple of :class:`Header`."""
    if headers is None:
        return ()
    if isinstance(headers, Mapping):
        return tuple(Header(str(k), str(v)) for k, v in headers.items())
    return tuple(Header(str(name), str(value)) for name, value in headers)


class RequestParams(BaseModel):
    """Ordered key/value request parameters.

    Keys may repeat; HTTP allows ``?tag=a&tag=b``. Values are stored as
    strings.

    Example::

        params = RequestParams().add("q", "shoes").add("tag", "a").add("tag", "b")
    """

    pairs: list[tuple[str, str]] = Field(default_factory=list)

    def add(self, key: str, value: Any) -> RequestParams:
        """Append one parameter and return ``self`` for chaining."""
        self.pairs.append((key, str(value)))
        return self

    def items(self) -> list[tuple[str, str]]:
        return list(self.pairs)

    def as_multidict(self) -> dict[str, list[str]]:
        """Group values by key, keeping first-seen key order."""
        grouped: dict[str, list[str]] = {}
        for key, value in self.pairs:
            grouped.setdefault(key, []).append(value)
        return grouped

    def __len__(self) -> int:
        return len(self.pairs)

    def __bool__(self) -> bool:
        return bool(self.pairs)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> RequestParams:
        """Build params from a mapping; sequence values expand into repeated keys."""
        params = cls()
        for key, value in mapping.items():
            if isinstance(value, (list, tuple)):
                for item in value:
                    params.add(key, item)
            else:
                params.add(key, value)
        return params

    @classmethod
    def coerce(
        cls,
        value: Union[RequestParams, Mapping[str, Any], Iterable[tuple[str, Any]], None],
    ) -> RequestParams:
        """Accept params, a mapping, or a sequence of pairs."""
        if value is None:
            return cls()
        if isinstance(value, RequestParams):
            return value
        if isinstance(value, Mapping):
            return cls.from_mapping(value)
        params = cls()
        for key, item in value:
            params.add(key, item)
        return params


class URLContext(BaseModel):
    """Target of a request: a host URL plus the port to reach it on.

    A port left at :data:`DEFAULT_PORT` does not override the URL: a port
    embedded in the URL is kept, and so is the ``https`` default (443).
    Any other port replaces the one embedded in the URL.
    """

    model_config = ConfigDict(frozen=True)

    url: str
    port: int = DEFAULT_PORT

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        try:
            parsed = httpx.URL(value)
        except httpx.InvalidURL as exc:
            raise ValueError(f"invalid URL '{value}': {exc}") from exc
        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise ValueError(f"URL '{value}' must be absolute with an http or https scheme")
        return value

    @field_validator("port")
    @classmethod
    def _check_port(cls, value: int) -> int:
        if not 1 <= value <= 65535:
            raise ValueError(f"port {value} is outside 1..65535")
        return value

    @property
    def target_url(self) -> str:
        """The URL with :attr:`port` applied."""
        url = httpx.URL(self.url)
        if self.port == DEFAULT_PORT and (url.port is not None or url.scheme == "https"):
            return str(url)
        return str(url.copy_with(port=self.port))


class FormPayload(BaseModel):
    """Request parameters: a query string for GET/DELETE, a form body for POST/PUT."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["form"] = "form"
    params: tuple[tuple[str, str], ...] = ()


class MessagePayload(BaseModel):
    """A raw message body sent with the given encoding."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["message"] = "message"
    message: str
    encoding: EncodingType = EncodingType.UTF_8


class FilePayload(BaseModel):
    """File content sent as the request body."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["file"] = "file"
    path: Path
    encoding: EncodingType = EncodingType.UTF_8
    binary: bool = False


Payload = Annotated[
    Union[FormPayload, MessagePayload, FilePayload],
    Field(discriminator="kind"),
]


class _ServiceContextBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    target: URLContext
    headers: tuple[Header, ...] = ()
    encoding: EncodingType = EncodingType.UTF_8
    """Charset used to decode the response body."""


class GetServiceContext(_ServiceContextBase):
    verb: Literal[Verb.GET] = Verb.GET
    payload: FormPayload = Field(default_factory=FormPayload)


class DeleteServiceContext(_ServiceContextBase):
    verb: Literal[Verb.DELETE] = Verb.DELETE
    payload: FormPayload = Field(default_factory=FormPayload)


class PostServiceContext(_ServiceContextBase):
    verb: Literal[Verb.POST] = Verb.POST
    payload: Payload = Field(default_factory=FormPayload)


class PutServiceContext(_ServiceContextBase):
    verb: Literal[Verb.PUT] = Verb.PUT
    payload: Payload = Field(default_factory=FormPayload)


ServiceContext = Annotated[
    Union[GetServiceContext, PostServiceContext, PutServiceContext, DeleteServiceContext],
    Field(discriminator="verb"),
]

_CONTEXT_TYPES: dict[Verb, type[_ServiceContextBase]] = {
    Verb.GET: GetServiceContext,
    Verb.POST: PostServiceContext,
    Verb.PUT: PutServiceContext,
    Verb.DELETE: DeleteServiceContext,
}


def make_context(
    verb: Union[Verb, str],
    url: str,
    port: int = DEFAULT_PORT,
    *,
    params: Union[RequestParams, Mapping[str, Any], Sequence[tuple[str, Any]], None] = None,
    message: Optional[str] = None,
    file: Union[str, Path, None] = None,
    encoding: Union[EncodingType, str] = EncodingType.UTF_8,
    binary: bool = False,
    headers: Union[Mapping[str, str], Iterable[Union[Header, tuple[str, str]]], None] = None,
) -> Union[GetServiceContext, PostServiceContext, PutServiceContext, DeleteServiceContext]:
    """Build the service context for *verb* with exactly one payload.

    Args:
        verb: HTTP verb (enum member or case-insensitive name).
        url: Absolute http(s) URL of the endpoint.
        port: Port to reach the endpoint on.
        params: Request parameters.
        message: Raw message body (POST/PUT only).
        file: Path of a file to send as the body (POST/PUT only).
        encoding: Encoding of the message/file payload and of the response.
        binary: Send *file* as ``application/octet-stream``.
        headers: Additional request headers.

    Returns:
        The verb-specific, frozen service context.

    Raises:
        ConfigurationError: If more than one payload is supplied, the verb
            does not accept the payload, or any value fails validation.
    """
    try:
        verb = Verb(verb)
        resolved_encoding = EncodingType(encoding)
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc

    supplied = [
        name
        for name, value in (("params", params), ("message", message), ("file", file))
        if value is not None
    ]
    if len(supplied) > 1:
        raise ConfigurationError(
            f"Only one payload may be supplied per request, got: {', '.join(supplied)}"
        )
    if verb in (Verb.GET, Verb.DELETE) and (message is not None or file is not None):
        raise ConfigurationError(f"{verb.value} requests only accept request parameters")

    try:
        payload: Union[FormPayload, MessagePayload, FilePayload]
        if message is not None:
            payload = MessagePayload(message=message, encoding=resolved_encoding)
        elif file is not None:
            payload = FilePayload(path=Path(file), encoding=resolved_encoding, binary=binary)
        else:
            payload = FormPayload(params=tuple(RequestParams.coerce(params).items()))

        return _CONTEXT_TYPES[verb](
            target=URLContext(url=url, port=port),
            headers=coerce_headers(headers),
            encoding=resolved_encoding,
            payload=payload,
        )
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid request configuration: {exc}") from exc


# --- Transformation inputs ---


class TimeoutConfig(BaseModel):
    """Connection and socket timeouts in seconds. ``None`` or ``0`` means no timeout."""

    model_config = ConfigDict(frozen=True)

    connect: Optional[float] = None
    socket: Optional[float] = None

    @field_validator("connect", "socket")
    @classmethod
    def _zero_means_none(cls, value: Optional[float]) -> Optional[float]:
        if value is None or value == 0:
            return None
        if value < 0:
            raise ValueError("timeouts must not be negative")
        return value

    def to_httpx(self) -> httpx.Timeout:
        """Socket timeout covers read and write; connect timeout covers connect and pool."""
        return httpx.Timeout(
            connect=self.connect,
            read=self.socket,
            write=self.socket,
            pool=self.connect,
        )


class Alias(Mapping[str, Any]):
    """Binds top-level document keys to the entity type of their collection.

    Used to pull several differently-typed collections out of one response::

        Alias({"products": Product, "orders": Order})

    Raises:
        ConfigurationError: If *types* is ``None`` or empty.
    """

    def __init__(self, types: Optional[Mapping[str, Any]]):
        if not types:
            raise ConfigurationError("An alias map with at least one key is required")
        self._types = dict(types)

    def __getitem__(self, key: str) -> Any:
        return self._types[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def __repr__(self) -> str:
        names = ", ".join(f"{k}={getattr(v, '__name__', v)}" for k, v in self._types.items())
        return f"Alias({names})"

    @classmethod
    def coerce(cls, value: Union[Alias, Mapping[str, Any], None]) -> Alias:
        if isinstance(value, Alias):
            return value
        return cls(value)
