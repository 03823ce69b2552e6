# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Readiness: one HTTP GET against the health endpoint, classified by status code only."""

from __future__ import annotations

import logging

from ..config import ProbeSettings
from ..errors import ErrorCategory
from ..http.client import HttpClient
from ..http.models import HttpRequest
from ..models import AttemptOutcome, ProbeTarget

logger = logging.getLogger(__name__)


class ReadinessCheck:
    """
    Issue a single GET and classify the result.

    Only 200-299 counts as healthy; the body is never parsed and is carried
    through for diagnostics. The probe has no side effects on the target.
    """

    def __init__(self, http_client: HttpClient, settings: ProbeSettings | None = None):
        self.http_client = http_client
        self.settings = settings or ProbeSettings()

    def probe(self, target: ProbeTarget) -> AttemptOutcome:
        request = HttpRequest(
            url=target.url,
            method="GET",
            headers={"Accept": "application/json"},
            timeout=self.settings.timeout,
            allow_redirects=self.settings.allow_redirects,
        )
        try:
            response = self.http_client.request(request)
        except Exception as exc:  # noqa: BLE001
            # HttpClient implementations should not raise; adapters sometimes do.
            logger.debug("http client raised for %s", target.url, exc_info=True)
            return AttemptOutcome.unreachable(ErrorCategory.UNKNOWN_ERROR.value, f"{type(exc).__name__}: {exc}")

        if not response.ok or response.status_code is None:
            return AttemptOutcome.unreachable(
                response.error_category or ErrorCategory.UNKNOWN_ERROR.value,
                response.error_message or "",
            )

        body = (response.text or "")[: self.settings.max_body_chars]
        if response.is_success:
            return AttemptOutcome.healthy(response.status_code, body)
        return AttemptOutcome.unhealthy(response.status_code, body)
