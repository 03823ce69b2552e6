# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import httpx

from readyguard.config import ProbeSettings
from readyguard.http import HttpRequest, HttpResponse, HttpxClient, StubHttpClient, error_response, status_response


class FakeHttpxClient:
    def __init__(self, status_code=200, chunks=(b'{"status":"ok"}',), exc=None):
        self.status_code = status_code
        self.chunks = chunks
        self.exc = exc
        self.requests = []
        self.closed = False

    def stream(self, method, url, headers=None, timeout=None, follow_redirects=None):
        self.requests.append(
            {"method": method, "url": url, "headers": headers, "timeout": timeout, "follow_redirects": follow_redirects}
        )
        if self.exc is not None:
            raise self.exc
        fake = self

        class Resp:
            status_code = fake.status_code
            headers = httpx.Headers({"Content-Type": "application/json"})
            encoding = "utf-8"

            def __init__(self, response_url: str):
                self.url = httpx.URL(response_url)

            def iter_bytes(self):
                yield from fake.chunks

        class _Ctx:
            def __enter__(self):
                return Resp(url)

            def __exit__(self, exc_type, exc, tb):  # noqa: ARG002
                return None

        return _Ctx()

    def close(self):
        self.closed = True


def test_httpx_client_returns_status_and_body():
    inner = FakeHttpxClient(status_code=200)
    client = HttpxClient(ProbeSettings(user_agent="UA/1.0", timeout=2.0), client=inner)
    resp = client.request(HttpRequest(url="http://svc:3000/health"))
    assert resp.ok is True
    assert resp.is_success is True
    assert resp.status_code == 200
    assert resp.text == '{"status":"ok"}'
    assert inner.requests[0]["headers"]["User-Agent"] == "UA/1.0"
    assert inner.requests[0]["timeout"] == 2.0
    assert inner.requests[0]["method"] == "GET"


def test_httpx_client_request_timeout_overrides_settings():
    inner = FakeHttpxClient()
    client = HttpxClient(ProbeSettings(timeout=4.0), client=inner)
    client.request(HttpRequest(url="http://svc/health", timeout=1.5))
    assert inner.requests[0]["timeout"] == 1.5


def test_httpx_client_bounds_body():
    inner = FakeHttpxClient(status_code=500, chunks=(b"x" * 100, b"y" * 100))
    client = HttpxClient(ProbeSettings(max_body_chars=10), client=inner)
    resp = client.request(HttpRequest(url="http://svc/health"))
    assert resp.ok is True
    assert resp.is_success is False
    assert resp.text == "x" * 10
    assert resp.meta["body_truncated"] is True


def test_httpx_client_never_raises():
    request = httpx.Request("GET", "http://svc/health")
    inner = FakeHttpxClient(exc=httpx.ConnectError("connection refused", request=request))
    client = HttpxClient(ProbeSettings(), client=inner)
    resp = client.request(HttpRequest(url="http://svc/health"))
    assert resp.ok is False
    assert resp.status_code is None
    assert resp.error_category == "CONNECTION_ERROR"
    assert resp.error_message == "connection refused"
    assert resp.error_type == "ConnectError"

    inner.exc = httpx.ReadTimeout("timed out", request=request)
    assert client.request(HttpRequest(url="http://svc/health")).error_category == "TIMEOUT"

    client.close()
    assert inner.closed is True


def test_is_success_is_exactly_2xx():
    assert HttpResponse(ok=True, status_code=200).is_success
    assert HttpResponse(ok=True, status_code=299).is_success
    assert not HttpResponse(ok=True, status_code=199).is_success
    assert not HttpResponse(ok=True, status_code=300).is_success
    assert not HttpResponse(ok=True, status_code=503).is_success
    assert not HttpResponse(ok=False, status_code=200).is_success
    assert not HttpResponse(ok=True).is_success


def test_stub_client_serves_sequences_and_repeats_last():
    url = "http://svc/health"
    stub = StubHttpClient({url: [status_response(500), status_response(200)]})
    assert stub.request(HttpRequest(url=url)).status_code == 500
    assert stub.request(HttpRequest(url=url)).status_code == 200
    assert stub.request(HttpRequest(url=url)).status_code == 200
    assert len(stub.requests) == 3

    missing = stub.request(HttpRequest(url="http://other/health"))
    assert missing.ok is False
    assert missing.error_message == "No stubbed response configured"


def test_error_response_helper():
    resp = error_response("TIMEOUT")
    assert resp.ok is False
    assert resp.error_category == "TIMEOUT"
    assert resp.error_message == "TIMEOUT"
