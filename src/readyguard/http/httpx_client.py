# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

import httpx

from ..config import ProbeSettings
from ..errors import categorize_exception
from .client import HttpClient
from .models import HttpRequest, HttpResponse


class HttpxClient(HttpClient):
    """Synchronous httpx client wrapper with a bounded body read."""

    def __init__(self, settings: ProbeSettings | None = None, client: httpx.Client | None = None):
        self.settings = settings or ProbeSettings()
        self._client = client or httpx.Client(
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
        )

    def request(self, request: HttpRequest) -> HttpResponse:
        headers = dict(request.headers or {})
        headers.setdefault("User-Agent", self.settings.user_agent)
        timeout = request.timeout if request.timeout is not None else self.settings.timeout
        # Characters and bytes differ for multi-byte bodies; reading up to 4 bytes per
        # character is enough to fill the character budget.
        max_bytes = max(1, self.settings.max_body_chars) * 4

        try:
            with self._client.stream(
                request.method,
                request.url,
                headers=headers,
                timeout=timeout,
                follow_redirects=request.allow_redirects,
            ) as resp:
                content = bytearray()
                truncated = False
                for chunk in resp.iter_bytes():
                    if not chunk:
                        continue
                    remaining = max_bytes - len(content)
                    if len(chunk) > remaining:
                        content.extend(chunk[:remaining])
                        truncated = True
                        break
                    content.extend(chunk)

                encoding = resp.encoding or "utf-8"
                try:
                    text = bytes(content).decode(encoding, errors="replace")
                except LookupError:
                    text = bytes(content).decode("utf-8", errors="replace")
                if len(text) > self.settings.max_body_chars:
                    text = text[: self.settings.max_body_chars]
                    truncated = True

            return HttpResponse(
                ok=True,
                status_code=resp.status_code,
                headers=dict(resp.headers),
                text=text,
                url=str(resp.url),
                meta={"body_truncated": truncated},
            )
        except Exception as exc:  # noqa: BLE001
            category = categorize_exception(exc)
            return HttpResponse(
                ok=False,
                url=request.url,
                error_category=category.value,
                error_message=str(exc) or type(exc).__name__,
                error_type=type(exc).__name__,
            )

    def close(self) -> None:
        self._client.close()
