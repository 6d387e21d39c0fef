"""Tests for the requests based transport and the body pretty printer."""

import pytest

import http_request
from req_struct import HttpMethod


class FakeResponse:

    def __init__(self, text="", status_code=200, reason="OK",
                 headers=None):
        self.text = text
        self.status_code = status_code
        self.reason = reason
        self.headers = headers if headers is not None else {}


@pytest.fixture
def sent(monkeypatch):
    calls = []
    reply = FakeResponse(
        text='{"b": 1, "a": [1, 2]}',
        status_code=201,
        reason="Created",
        headers={"Content-Type": "application/json", "X-B": "2"},
    )

    def fake_request(method, url, data=None):
        calls.append((method, url, data))
        return reply

    monkeypatch.setattr(http_request.requests, "request", fake_request)
    return calls


class TestRequest:

    def test_get_ignores_body(self, sent):
        response = http_request.request(HttpMethod.GET, "http://x/", "{}")
        assert sent == [("GET", "http://x/", None)]
        assert response.status == 201
        assert str(response) == "201 Created"

    def test_post_sends_body(self, sent):
        http_request.request(HttpMethod.POST, "http://x/", '{"k": "ü"}')
        assert sent == [("POST", "http://x/", '{"k": "ü"}'.encode())]

    def test_empty_body_sends_nothing(self, sent):
        http_request.request(HttpMethod.DELETE, "http://x/", "")
        assert sent == [("DELETE", "http://x/", None)]

    def test_headers_keep_order(self, sent):
        response = http_request.request(HttpMethod.PUT, "http://x/", "")
        assert response.headers == [("Content-Type", "application/json"),
                                    ("X-B", "2")]

    def test_body_is_pretty_printed(self, sent):
        response = http_request.request(HttpMethod.GET, "http://x/", "")
        assert response.body[0] == "{"
        assert '  "b": 1,' in response.body

    def test_delay_measured(self, sent):
        response = http_request.request(HttpMethod.GET, "http://x/", "")
        assert response.delay.total_seconds() >= 0

    def test_no_handler(self, sent):
        assert http_request.request(HttpMethod.PATCH, "http://x/", "") \
            is None
        assert sent == []


class TestPrettyPrint:

    def test_json_is_indented(self):
        assert http_request.pretty_print('{"a":[1]}') == [
            "{",
            '  "a": [',
            "    1",
            "  ]",
            "}",
        ]

    def test_plain_text_split_into_lines(self):
        assert http_request.pretty_print("one\ntwo") == ["one", "two"]

    def test_empty_body(self):
        assert http_request.pretty_print("") == []

    def test_unicode_kept(self):
        assert http_request.pretty_print('"日本"') == ['"日本"']

    def test_nesting_too_deep_kept_as_text(self):
        nested = "[" * 100000 + "]" * 100000
        assert http_request.pretty_print(nested) == [nested]
