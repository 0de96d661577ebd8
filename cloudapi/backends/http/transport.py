"""requests-based HTTP transport."""

from __future__ import annotations

import requests

DEFAULT_TIMEOUT = 30


class RequestsTransport:
    def __init__(self, timeout: float = DEFAULT_TIMEOUT, session: requests.Session | None = None):
        self._session = session or requests.Session()
        self._session.headers.update({"Accept": "application/xml"})
        self._timeout = timeout

    def request(
        self,
        method: str,
        url: str,
        *,
        auth: tuple[str, str] | None = None,
        params: dict | None = None,
        data: dict | None = None,
    ) -> tuple[int, str]:
        """Send one request with HTTP basic auth.

        Returns (status_code, body_text).
        """
        response = self._session.request(
            method,
            url,
            auth=auth,
            params=params,
            data=data,
            timeout=self._timeout,
        )
        return response.status_code, response.text

    def close(self) -> None:
        self._session.close()
