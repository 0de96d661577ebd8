"""Error taxonomy for the cloud API client.

Every failed request surfaces as one of these exceptions. Status code
interpretation lives in raise_for_status() so the catalog, the accessors and
the action handles all agree on what a response means.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET

logger = logging.getLogger(__name__)


class CloudAPIError(Exception):
    """Base class for all client errors."""


class AuthFailure(CloudAPIError):
    """Credentials were rejected by the server."""

    def __init__(self, message: str = "Authentication failed", url: str | None = None):
        super().__init__(message)
        self.message = message
        self.url = url


class BackendFailure(CloudAPIError):
    """The server (or the network) failed to fulfil a request."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        cause: str | None = None,
        details: dict | None = None,
        url: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.cause = cause
        self.details = details
        self.url = url

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"[{self.status}] {self.cause or 'error'}: {self.message}"


class NotFound(BackendFailure):
    """The requested resource does not exist (HTTP 404)."""


class ValidationFailure(BackendFailure):
    """Request parameters failed a precondition check."""


def parse_error_body(body: str) -> tuple[str | None, str | None, dict | None]:
    """Extract (cause, message, details) from an XML error document.

    Non-XML bodies yield no cause and no details.
    """
    try:
        root = ET.fromstring(body)
    except ET.ParseError:
        return None, None, None

    cause = None
    message = None
    details = {}
    for child in root:
        text = (child.text or "").strip()
        if child.tag == "kind":
            cause = text or None
        elif child.tag == "message":
            message = text or None
        elif len(child):
            details[child.tag] = {
                **child.attrib,
                **{sub.tag: (sub.text or "").strip() for sub in child},
            }
        else:
            details[child.tag] = text or dict(child.attrib)

    return cause, message, details or None


def raise_for_status(status: int, body: str, url: str) -> None:
    """Raise the exception matching a non-2xx response; no-op on success."""
    if 200 <= status < 300:
        return

    if status in (401, 403):
        raise AuthFailure(f"Authentication failed for {url}", url=url)

    cause, message, details = parse_error_body(body or "")
    if message is None:
        text = (body or "").strip()
        message = text[:200] if text and not text.startswith("<") else f"HTTP {status}"

    logger.debug("Request to %s failed: status=%s cause=%s", url, status, cause)

    if status == 404:
        exc_class = NotFound
        cause = cause or "not_found"
    elif status == 400 or cause == "validation_failure":
        exc_class = ValidationFailure
    else:
        exc_class = BackendFailure

    raise exc_class(message, status=status, cause=cause, details=details, url=url)
