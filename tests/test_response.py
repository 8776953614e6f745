"""Tests for decoy.http.response — chainable immutable Response."""

import pytest

from decoy.http.response import Response, not_found, response


class TestResponse:
    def test_defaults(self) -> None:
        resp = Response()
        assert resp.status == 200
        assert resp.body == ""
        assert resp.content_type == "text/html; charset=utf-8"
        assert resp.headers == ()

    def test_chaining_returns_new(self) -> None:
        base = Response("hi")
        changed = base.with_status(201).with_header("X-A", "1").with_content_type("text/plain")

        assert changed.status == 201
        assert changed.headers == (("X-A", "1"),)
        assert changed.content_type == "text/plain"
        assert base.status == 200
        assert base.headers == ()

    def test_with_headers(self) -> None:
        resp = Response().with_headers({"X-A": "1", "X-B": "2"})
        assert resp.header("x-b") == "2"
        assert resp.header("X-C") is None

    def test_body_conversions(self) -> None:
        assert Response("é").body_bytes == "é".encode()
        assert Response(b"raw").text == "raw"

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            Response().status = 500  # type: ignore[misc]


class TestHelpers:
    def test_response(self) -> None:
        resp = response("<secret/>", status=202, content_type="text/xml", headers={"X-Decoy": "1"})
        assert resp.text == "<secret/>"
        assert resp.status == 202
        assert resp.content_type == "text/xml"
        assert resp.headers == (("X-Decoy", "1"),)

    def test_not_found(self) -> None:
        resp = not_found()
        assert resp.status == 404
        assert resp.body == b""
