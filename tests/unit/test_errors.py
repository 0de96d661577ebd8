"""Unit tests for response status interpretation."""

from __future__ import annotations

import pytest

from cloudapi.core.errors import (
    AuthFailure,
    BackendFailure,
    NotFound,
    ValidationFailure,
    parse_error_body,
    raise_for_status,
)


@pytest.mark.parametrize("status", [200, 201, 204, 299])
def test_success_statuses_do_not_raise(status):
    raise_for_status(status, "", "http://x")


@pytest.mark.parametrize(
    "status,body,expected",
    [
        (401, "", AuthFailure),
        (403, "<error><kind>auth_exception</kind></error>", AuthFailure),
        (404, "", NotFound),
        (400, "<error><kind>validation_failure</kind><message>bad</message></error>", ValidationFailure),
        (500, "<error><kind>validation_failure</kind></error>", ValidationFailure),
        (500, "<error><kind>backend_error</kind></error>", BackendFailure),
        (502, "Bad Gateway", BackendFailure),
    ],
)
def test_error_statuses_map_to_exception_types(status, body, expected):
    with pytest.raises(expected):
        raise_for_status(status, body, "http://x")


def test_plain_text_body_becomes_the_message():
    with pytest.raises(BackendFailure) as exc_info:
        raise_for_status(503, "Service Unavailable", "http://x")

    exc = exc_info.value
    assert exc.status == 503
    assert exc.cause is None
    assert exc.message == "Service Unavailable"
    assert exc.details is None
    assert str(exc) == "[503] error: Service Unavailable"


def test_not_found_defaults_its_cause():
    with pytest.raises(NotFound) as exc_info:
        raise_for_status(404, "", "http://x/images/missing")

    assert exc_info.value.cause == "not_found"
    assert exc_info.value.url == "http://x/images/missing"


def test_parse_error_body_collects_details():
    cause, message, details = parse_error_body(
        "<error status='500' url='/api/instances'>"
        "<kind>backend_error</kind>"
        "<message> Quota exceeded </message>"
        "<backend driver='ec2'><code>InstanceLimitExceeded</code></backend>"
        "<retry_after>30</retry_after>"
        "</error>"
    )

    assert cause == "backend_error"
    assert message == "Quota exceeded"
    assert details == {
        "backend": {"driver": "ec2", "code": "InstanceLimitExceeded"},
        "retry_after": "30",
    }


def test_parse_error_body_ignores_non_xml():
    assert parse_error_body("<<<") == (None, None, None)
