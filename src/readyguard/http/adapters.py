# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Programmable HttpClient doubles for tests and dry runs."""

from __future__ import annotations

from collections.abc import Iterable

from .client import HttpClient
from .models import HttpRequest, HttpResponse


class StubHttpClient(HttpClient):
    """
    Deterministic, programmable HttpClient.

    Each URL maps to a sequence of responses served in order; the last one
    repeats once the sequence is exhausted.
    """

    def __init__(self, responses: dict[str, HttpResponse | Iterable[HttpResponse]] | None = None):
        self._responses: dict[str, list[HttpResponse]] = {}
        self.requests: list[HttpRequest] = []
        for url, value in (responses or {}).items():
            self.add(url, value)

    def add(self, url: str, response: HttpResponse | Iterable[HttpResponse]) -> None:
        if isinstance(response, HttpResponse):
            self._responses[url] = [response]
        else:
            self._responses[url] = list(response)

    def request(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        queue = self._responses.get(request.url)
        if not queue:
            return HttpResponse(
                ok=False,
                url=request.url,
                error_category="CONNECTION_ERROR",
                error_message="No stubbed response configured",
            )
        if len(queue) > 1:
            return queue.pop(0)
        return queue[0]

    def close(self) -> None:
        return None


def status_response(status_code: int, text: str = "", url: str | None = None) -> HttpResponse:
    """Shorthand for a transport-level successful response with the given status."""
    return HttpResponse(ok=True, status_code=status_code, text=text, url=url)


def error_response(category: str, message: str = "", url: str | None = None) -> HttpResponse:
    """Shorthand for a transport failure (no HTTP response received)."""
    return HttpResponse(ok=False, url=url, error_category=category, error_message=message or category)
