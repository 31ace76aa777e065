import pytest

from wrykit.errors import (
    InvalidHeaderNameError,
    InvalidHeaderValueError,
    InvalidMethodError,
    InvalidStatusCodeError,
)
from wrykit.http import (
    HeaderMap,
    Method,
    Request,
    RequestBuilder,
    RequestParts,
    Response,
    ResponseBuilder,
    ResponseParts,
    Version,
    parse_method,
    parse_status,
    validate_header_name,
    validate_header_value,
)


def test_response_doc_example():
    response = ResponseBuilder().status(202).body("hello!".encode())
    assert response.status == 202
    assert response.body == b"hello!"


def test_response_defaults():
    response = ResponseBuilder().body(b"")
    assert response.status == 200
    assert response.version is Version.HTTP_11
    assert response.version.value == "HTTP/1.1"
    assert response.mimetype is None
    assert len(response.headers) == 0


def test_default_response_and_request():
    assert Response() == Response(b"", ResponseParts())
    assert Request().method == Method.GET
    assert Request().uri == ""
    assert Request().body == b""


def test_response_mimetype_and_headers():
    response = (
        ResponseBuilder()
        .header("Connection", "Keep-Alive")
        .header("Accept-Ranges", "bytes")
        .header("Content-Length", 409600)
        .mimetype("video/mp4")
        .status(206)
        .body(b"data")
    )
    assert response.mimetype == "video/mp4"
    assert response.status == 206
    assert response.headers.get("accept-ranges") == "bytes"
    assert response.headers.get("content-length") == "409600"
    assert "CONNECTION" in response.headers


def test_invalid_header_value_raised_at_body():
    builder = ResponseBuilder().header("Foo", "Bar\r\n")
    with pytest.raises(InvalidHeaderValueError):
        builder.body(b"")


def test_first_error_wins():
    builder = ResponseBuilder().status(42).header("bad name", "x")
    with pytest.raises(InvalidStatusCodeError):
        builder.body(b"")


def test_request_builder():
    request = (
        RequestBuilder()
        .method("POST")
        .uri("wry://examples/form.html")
        .header("Range", "bytes=0-")
        .body(b"a=1&b=2")
    )
    assert request.method == Method.POST
    assert request.uri == "wry://examples/form.html"
    assert request.headers.get("range") == "bytes=0-"
    head, body = request.into_parts()
    assert isinstance(head, RequestParts)
    assert head.uri == request.uri
    assert body == b"a=1&b=2"


def test_request_builder_invalid_method():
    builder = RequestBuilder().method("GE T")
    with pytest.raises(InvalidMethodError):
        builder.body(b"")


def test_request_body_from_str_is_utf8():
    request = RequestBuilder().body("héllo")
    assert request.body.decode("utf-8") == "héllo"


def test_built_requests_do_not_share_headers():
    builder = RequestBuilder().header("a", "1")
    first = builder.body(b"")
    builder.header("a", "2")
    second = builder.body(b"")
    assert first.headers.get_all("a") == ["1"]
    assert second.headers.get_all("a") == ["1", "2"]


@pytest.mark.parametrize("bad", ["", "GE T", "PO\nST", b"\xff"])
def test_parse_method_invalid(bad):
    with pytest.raises(InvalidMethodError):
        parse_method(bad)


@pytest.mark.parametrize("good", [100, 200, 206, 999])
def test_parse_status_int(good):
    assert parse_status(good) == good


def test_parse_status_text():
    assert parse_status("206") == 206
    assert parse_status(b"202") == 202


@pytest.mark.parametrize("bad", [99, 1000, -1, True, "20a", "099", "2000", ""])
def test_parse_status_invalid(bad):
    with pytest.raises(InvalidStatusCodeError):
        parse_status(bad)


def test_header_name_lowercased():
    assert validate_header_name("Content-Range") == "content-range"


@pytest.mark.parametrize("bad", ["", "bad name", "colon:", "é"])
def test_header_name_invalid(bad):
    with pytest.raises(InvalidHeaderNameError):
        validate_header_name(bad)


def test_header_value_accepts_tab_and_int():
    assert validate_header_value("a\tb") == "a\tb"
    assert validate_header_value(409600) == "409600"


@pytest.mark.parametrize("bad", ["Bar\r\n", "\x7f", "é", True])
def test_header_value_invalid(bad):
    with pytest.raises(InvalidHeaderValueError):
        validate_header_value(bad)


def test_header_map_multi_values_in_order():
    headers = HeaderMap()
    headers.append("Set-Cookie", "one")
    headers.append("set-cookie", "two")
    headers.append("X-Other", "three")
    assert headers.get("SET-COOKIE") == "one"
    assert headers.get_all("set-cookie") == ["one", "two"]
    assert len(headers) == 3
    assert list(headers) == [
        ("set-cookie", "one"),
        ("set-cookie", "two"),
        ("x-other", "three"),
    ]
    assert headers.get("missing") is None
    assert headers.get_all("missing") == []


def test_header_map_equality_and_copy():
    headers = HeaderMap([("A", "1"), ("b", "2")])
    clone = headers.copy()
    assert clone == headers
    clone.append("a", "3")
    assert clone != headers
    assert headers.get_all("a") == ["1"]


def test_version_builder():
    response = ResponseBuilder().version(Version.HTTP_2).body(b"")
    assert response.version is Version.HTTP_2