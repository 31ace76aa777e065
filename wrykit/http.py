"""HTTP request and response types exchanged with a web view."""

from __future__ import annotations

import string
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Iterable, Iterator, Union

from .errors import (
    InvalidHeaderNameError,
    InvalidHeaderValueError,
    InvalidMethodError,
    InvalidStatusCodeError,
    WryError,
)

_TOKEN_CHARS = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~")
_MAX_HEADER_NAME_LEN = (1 << 16) - 1

BodyLike = Union[bytes, bytearray, memoryview, str]


class Method(str):
    """An HTTP method: one of the standard ones or a valid extension token."""

    GET: ClassVar[Method]
    POST: ClassVar[Method]
    PUT: ClassVar[Method]
    DELETE: ClassVar[Method]
    HEAD: ClassVar[Method]
    OPTIONS: ClassVar[Method]
    CONNECT: ClassVar[Method]
    PATCH: ClassVar[Method]
    TRACE: ClassVar[Method]

    def __new__(cls, value: str) -> Method:
        if not value or any(ch not in _TOKEN_CHARS for ch in value):
            raise InvalidMethodError(f"invalid HTTP method {value!r}")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"Method({str.__repr__(self)})"


for _name in ("GET", "POST", "PUT", "DELETE", "HEAD", "OPTIONS", "CONNECT", "PATCH", "TRACE"):
    setattr(Method, _name, Method(_name))


class Version(Enum):
    """HTTP protocol versions."""

    HTTP_09 = "HTTP/0.9"
    HTTP_10 = "HTTP/1.0"
    HTTP_11 = "HTTP/1.1"
    HTTP_2 = "HTTP/2.0"
    HTTP_3 = "HTTP/3.0"


def parse_method(value: Method | str | bytes) -> Method:
    """Return ``value`` as a :class:`Method`, raising InvalidMethodError if invalid."""
    if isinstance(value, Method):
        return value
    if isinstance(value, (bytes, bytearray)):
        try:
            value = bytes(value).decode("ascii")
        except UnicodeDecodeError:
            raise InvalidMethodError(f"invalid HTTP method {bytes(value)!r}") from None
    if not isinstance(value, str):
        raise InvalidMethodError(f"invalid HTTP method {value!r}")
    return Method(value)


def parse_status(value: int | str | bytes) -> int:
    """Return ``value`` as a status code in the range 100..999."""
    if isinstance(value, bool):
        raise InvalidStatusCodeError(f"invalid status code {value!r}")
    if isinstance(value, int):
        if 100 <= value < 1000:
            return value
        raise InvalidStatusCodeError(f"invalid status code {value!r}")
    if isinstance(value, (bytes, bytearray)):
        try:
            value = bytes(value).decode("ascii")
        except UnicodeDecodeError:
            raise InvalidStatusCodeError(f"invalid status code {bytes(value)!r}") from None
    if isinstance(value, str) and len(value) == 3 and all(ch in string.digits for ch in value):
        code = int(value)
        if code >= 100:
            return code
    raise InvalidStatusCodeError(f"invalid status code {value!r}")


def validate_header_name(name: str | bytes) -> str:
    """Return the lower-cased header name, raising InvalidHeaderNameError if invalid."""
    if isinstance(name, (bytes, bytearray)):
        try:
            name = bytes(name).decode("ascii")
        except UnicodeDecodeError:
            raise InvalidHeaderNameError(f"invalid header name {bytes(name)!r}") from None
    if not isinstance(name, str):
        raise InvalidHeaderNameError(f"invalid header name {name!r}")
    if (
        not name
        or len(name) > _MAX_HEADER_NAME_LEN
        or any(ch not in _TOKEN_CHARS for ch in name)
    ):
        raise InvalidHeaderNameError(f"invalid header name {name!r}")
    return name.lower()


def validate_header_value(value: str | bytes | int) -> str:
    """Return the header value as text, raising InvalidHeaderValueError if invalid."""
    if isinstance(value, bool):
        raise InvalidHeaderValueError(f"invalid header value {value!r}")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
        if any(b != 9 and (b < 32 or b == 127) for b in raw):
            raise InvalidHeaderValueError(f"invalid header value {raw!r}")
        return raw.decode("latin-1")
    if isinstance(value, str):
        if any(ch != "\t" and not (32 <= ord(ch) < 127) for ch in value):
            raise InvalidHeaderValueError(f"invalid header value {value!r}")
        return value
    raise InvalidHeaderValueError(f"invalid header value {value!r}")


class HeaderMap:
    """A multi-map of header names to values; names are case-insensitive."""

    def __init__(self, pairs: Iterable[tuple[str, str | bytes | int]] = ()) -> None:
        self._entries: dict[str, list[str]] = {}
        for name, value in pairs:
            self.append(name, value)

    def append(self, name: str | bytes, value: str | bytes | int) -> None:
        """Add a value under ``name``, keeping any values already there."""
        key = validate_header_name(name)
        text = validate_header_value(value)
        self._entries.setdefault(key, []).append(text)

    def get(self, name: str) -> str | None:
        """Return the first value stored under ``name``, or None."""
        values = self._entries.get(name.lower())
        return values[0] if values else None

    def get_all(self, name: str) -> list[str]:
        """Return every value stored under ``name``, in insertion order."""
        return list(self._entries.get(name.lower(), ()))

    def keys(self) -> list[str]:
        return list(self._entries)

    def copy(self) -> HeaderMap:
        clone = HeaderMap()
        clone._entries = {key: list(values) for key, values in self._entries.items()}
        return clone

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._entries

    def __iter__(self) -> Iterator[tuple[str, str]]:
        for key, values in self._entries.items():
            for value in values:
                yield key, value

    def __len__(self) -> int:
        return sum(len(values) for values in self._entries.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeaderMap):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"HeaderMap({list(self)!r})"


def _to_body(body: BodyLike) -> bytes:
    if isinstance(body, str):
        return body.encode("utf-8")
    return bytes(body)


@dataclass
class RequestParts:
    """The head of a request: method, URI and headers."""

    method: Method = Method.GET
    uri: str = ""
    headers: HeaderMap = field(default_factory=HeaderMap)


@dataclass
class Request:
    """An HTTP request coming from the web view."""

    body: bytes = b""
    head: RequestParts = field(default_factory=RequestParts)

    @property
    def method(self) -> Method:
        return self.head.method

    @property
    def uri(self) -> str:
        return self.head.uri

    @property
    def headers(self) -> HeaderMap:
        return self.head.headers

    def into_parts(self) -> tuple[RequestParts, bytes]:
        """Return the head and the body."""
        return self.head, self.body


class RequestBuilder:
    """Builds a :class:`Request`; the first error is raised by :meth:`body`."""

    def __init__(self) -> None:
        self._parts = RequestParts()
        self._error: WryError | None = None

    def method(self, method: Method | str | bytes) -> RequestBuilder:
        if self._error is None:
            try:
                self._parts.method = parse_method(method)
            except WryError as exc:
                self._error = exc
        return self

    def uri(self, uri: str) -> RequestBuilder:
        if self._error is None:
            self._parts.uri = str(uri)
        return self

    def header(self, key: str | bytes, value: str | bytes | int) -> RequestBuilder:
        if self._error is None:
            try:
                self._parts.headers.append(key, value)
            except WryError as exc:
                self._error = exc
        return self

    def body(self, body: BodyLike) -> Request:
        """Return the request, or raise the first error met while building."""
        if self._error is not None:
            raise self._error
        head = RequestParts(self._parts.method, self._parts.uri, self._parts.headers.copy())
        return Request(_to_body(body), head)


@dataclass
class ResponseParts:
    """The head of a response: status, version, headers and mimetype."""

    status: int = 200
    version: Version = Version.HTTP_11
    headers: HeaderMap = field(default_factory=HeaderMap)
    mimetype: str | None = None


@dataclass
class Response:
    """An HTTP response handed back to the web view."""

    body: bytes = b""
    head: ResponseParts = field(default_factory=ResponseParts)

    @property
    def status(self) -> int:
        return self.head.status

    @property
    def mimetype(self) -> str | None:
        return self.head.mimetype

    @property
    def version(self) -> Version:
        return self.head.version

    @property
    def headers(self) -> HeaderMap:
        return self.head.headers


class ResponseBuilder:
    """Builds a :class:`Response`; the first error is raised by :meth:`body`."""

    def __init__(self) -> None:
        self._parts = ResponseParts()
        self._error: WryError | None = None

    def mimetype(self, mimetype: str) -> ResponseBuilder:
        if self._error is None:
            self._parts.mimetype = str(mimetype)
        return self

    def status(self, status: int | str | bytes) -> ResponseBuilder:
        if self._error is None:
            try:
                self._parts.status = parse_status(status)
            except WryError as exc:
                self._error = exc
        return self

    def version(self, version: Version) -> ResponseBuilder:
        if self._error is None:
            self._parts.version = Version(version)
        return self

    def header(self, key: str | bytes, value: str | bytes | int) -> ResponseBuilder:
        if self._error is None:
            try:
                self._parts.headers.append(key, value)
            except WryError as exc:
                self._error = exc
        return self

    def body(self, body: BodyLike) -> Response:
        """Return the response, or raise the first error met while building."""
        if self._error is not None:
            raise self._error
        head = ResponseParts(
            self._parts.status,
            self._parts.version,
            self._parts.headers.copy(),
            self._parts.mimetype,
        )
        return Response(_to_body(body), head)