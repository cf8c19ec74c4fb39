"""
Tests for net/headers.py.
"""

import pytest

from fcgishim.net.exceptions import GatewayRequestError
from fcgishim.net.headers import header_name, request_line, translate_headers


@pytest.mark.unit
class TestHeaderName:
    @pytest.mark.parametrize(
        "key,expected",
        [
            ("HOST", "Host"),
            ("X_FORWARDED_FOR", "X-Forwarded-For"),
            ("CONTENT_LENGTH", "Content-Length"),
            ("ACCEPT_ENCODING", "Accept-Encoding"),
        ],
    )
    def test_header_name(self, key, expected):
        assert header_name(key) == expected


@pytest.mark.unit
class TestTranslateHeaders:
    def test_http_variables_become_headers(self):
        environ = {
            "HTTP_HOST": "example.com",
            "HTTP_X_FORWARDED_FOR": "10.0.0.1",
        }

        assert translate_headers(environ) == [
            ("Host", "example.com"),
            ("X-Forwarded-For", "10.0.0.1"),
        ]

    def test_content_variables_kept(self):
        environ = {"CONTENT_LENGTH": "5", "CONTENT_TYPE": "text/plain"}

        assert translate_headers(environ) == [
            ("Content-Length", "5"),
            ("Content-Type", "text/plain"),
        ]

    def test_other_cgi_variables_dropped(self):
        environ = {
            "PATH_INFO": "/ping",
            "QUERY_STRING": "a=1",
            "REMOTE_ADDR": "127.0.0.1",
            "SERVER_PROTOCOL": "HTTP/1.1",
            "HTTP_ACCEPT": "*/*",
        }

        assert translate_headers(environ) == [("Accept", "*/*")]

    def test_empty_content_variables_dropped(self):
        """Web servers commonly pass CONTENT_LENGTH="" for bodiless requests."""
        environ = {"CONTENT_LENGTH": "", "CONTENT_TYPE": ""}

        assert translate_headers(environ) == []

    def test_environment_order_preserved(self):
        environ = {"HTTP_B": "2", "CONTENT_TYPE": "x/y", "HTTP_A": "1"}

        assert [name for name, _ in translate_headers(environ)] == [
            "B",
            "Content-Type",
            "A",
        ]


@pytest.mark.unit
class TestRequestLine:
    def test_request_line(self):
        environ = {"REQUEST_METHOD": "GET", "REQUEST_URI": "/ping?x=1"}

        assert request_line(environ) == "GET /ping?x=1 HTTP/1.0"

    def test_protocol_always_http10(self):
        environ = {
            "REQUEST_METHOD": "POST",
            "REQUEST_URI": "/",
            "SERVER_PROTOCOL": "HTTP/1.1",
        }

        assert request_line(environ).endswith(" HTTP/1.0")

    @pytest.mark.parametrize(
        "environ",
        [
            {"REQUEST_URI": "/"},
            {"REQUEST_METHOD": "GET"},
            {"REQUEST_METHOD": "", "REQUEST_URI": "/"},
        ],
    )
    def test_missing_fields(self, environ):
        with pytest.raises(GatewayRequestError):
            request_line(environ)
