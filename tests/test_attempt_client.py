import logging

import pytest
import requests

from attempt_client import AttemptClient, AttemptRecord

RECORD = AttemptRecord(
    shape="Square",
    attention_score=100,
    precision_score=100,
    assistance_count=2,
    duration_ms=15000,
)


class FakeResponse:
    def __init__(self, status_code: int, payload) -> None:
        self.status_code = status_code
        self._payload = payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)

    def json(self):
        return self._payload


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.requests: list[tuple] = []
        self.closed = False

    def post(self, url, json=None, timeout=None):
        self.requests.append(("POST", url, json, timeout))
        if self.error is not None:
            raise self.error
        return self.response

    def get(self, url, timeout=None):
        self.requests.append(("GET", url, None, timeout))
        if self.error is not None:
            raise self.error
        return self.response

    def close(self) -> None:
        self.closed = True


def test_payload_uses_wire_field_names() -> None:
    assert RECORD.to_payload() == {
        "shape": "Square",
        "attentionScore": 100,
        "precisionScore": 100,
        "assistanceCount": 2,
        "durationMs": 15000,
    }


def test_create_attempt_posts_payload() -> None:
    stored = {"id": 1, **RECORD.to_payload(), "completedAt": "2026-01-01T00:00:00+00:00"}
    session = FakeSession(FakeResponse(201, stored))
    client = AttemptClient("http://api.test/", timeout=3.0, session=session)

    assert client.create_attempt(RECORD) == stored
    assert session.requests == [("POST", "http://api.test/attempts", RECORD.to_payload(), 3.0)]
    client.close()
    assert session.closed


def test_get_attempts_lists_records() -> None:
    session = FakeSession(FakeResponse(200, [{"id": 1}, {"id": 2}]))
    client = AttemptClient("http://api.test", session=session)
    assert [a["id"] for a in client.get_attempts()] == [1, 2]
    assert session.requests[0][:2] == ("GET", "http://api.test/attempts")
    client.close()


def test_submit_runs_in_background_and_returns_future() -> None:
    session = FakeSession(FakeResponse(201, {"id": 7}))
    client = AttemptClient("http://api.test", session=session)
    future = client.submit(RECORD)
    assert future.result(timeout=5) == {"id": 7}
    client.close()


def test_submit_failure_is_logged_not_raised(caplog) -> None:
    session = FakeSession(error=requests.ConnectionError("refused"))
    client = AttemptClient("http://api.test", session=session)

    with caplog.at_level(logging.WARNING, logger="attempt_client"):
        future = client.submit(RECORD)
        client.close()

    assert isinstance(future.exception(timeout=5), requests.ConnectionError)
    assert "Failed to submit attempt for Square" in caplog.text


def test_http_error_surfaces_on_future() -> None:
    session = FakeSession(FakeResponse(400, {"message": "Required", "field": "durationMs"}))
    client = AttemptClient("http://api.test", session=session)
    future = client.submit(RECORD)
    with pytest.raises(requests.HTTPError):
        future.result(timeout=5)
    client.close()
