"""
tests/test_clickup_connector.py

Unit tests for ClickUpConnector using a fake ``requests.Session``.
"""

from __future__ import annotations

import unittest
from typing import Any

import requests

from app.config import TrackerHTTPSettings
from app.connectors.base import DecodeError, TransportError
from app.connectors.clickup_connector import ClickUpConnector
from app.domain.tracker import TaskFilter


class _FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, invalid_json: bool = False) -> None:
        self.status_code = status_code
        self._payload = payload
        self._invalid_json = invalid_json

    def json(self) -> Any:
        if self._invalid_json:
            raise ValueError("not json")
        return self._payload


class _FakeSession:
    """
    Serves queued responses per URL and records every call.
    """

    def __init__(self, routes: dict[str, list[Any]]) -> None:
        self._routes = {url: list(responses) for url, responses in routes.items()}
        self.calls: list[dict[str, Any]] = []

    def request(self, *, method: str, url: str, params: Any, headers: dict[str, str], timeout: float) -> Any:
        self.calls.append({"method": method, "url": url, "params": params, "headers": headers, "timeout": timeout})
        queue = self._routes.get(url)
        if not queue:
            raise AssertionError(f"unexpected request {url}")
        response = queue.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


BASE = "https://tracker.test/api/v2"


def _settings() -> TrackerHTTPSettings:
    return TrackerHTTPSettings(token="pk_test", base_url=BASE, timeout_seconds=5.0, rate_limit_per_second=0.0)


def _task_payload(task_id: str) -> dict[str, Any]:
    return {
        "id": task_id,
        "name": f"Task {task_id}",
        "date_done": "1760500000000",
        "assignees": [{"email": "dev@studio.io", "username": "dev"}],
        "custom_fields": [
            {"id": "lv", "name": "PLA Difficult", "type": "number", "value": "2"},
            {
                "id": "gn",
                "name": "Game Name",
                "type": "drop_down",
                "value": 0,
                "type_config": {"options": [{"id": "p0", "name": "P01 Alpha", "orderindex": 0}]},
            },
            {"id": "tl", "name": "Tool/CTST PLA", "type": "labels", "value": ["x", {"id": "y"}]},
            {"id": "loc", "name": "Location", "type": "location", "value": {"lat": 1}},
        ],
    }


class TestClickUpConnector(unittest.TestCase):
    def test_fetch_space_walks_lists_and_pages(self) -> None:
        session = _FakeSession(
            {
                f"{BASE}/space/sp1/list": [_FakeResponse(payload={"lists": [{"id": "l1", "name": "Sprint"}]})],
                f"{BASE}/list/l1/task": [
                    _FakeResponse(payload={"tasks": [_task_payload("a")], "last_page": False}),
                    _FakeResponse(payload={"tasks": [_task_payload("b")], "last_page": True}),
                ],
            }
        )
        connector = ClickUpConnector(http_settings=_settings(), session=session)  # type: ignore[arg-type]

        result = connector.fetch_space("sp1", TaskFilter(tag="pla"))

        self.assertEqual(result.lists_fetched, 1)
        self.assertEqual([task.id for task in result.tasks], ["a", "b"])
        pages = [dict(call["params"])["page"] for call in session.calls if call["url"].endswith("/task")]
        self.assertEqual(pages, [0, 1])
        self.assertEqual(session.calls[0]["headers"]["Authorization"], "pk_test")

    def test_empty_page_stops_pagination(self) -> None:
        session = _FakeSession(
            {f"{BASE}/list/l1/task": [_FakeResponse(payload={"tasks": [], "last_page": False})]}
        )
        connector = ClickUpConnector(http_settings=_settings(), session=session)  # type: ignore[arg-type]
        self.assertEqual(connector.fetch_all("l1", TaskFilter()), [])
        self.assertEqual(len(session.calls), 1)

    def test_filter_params_are_sent(self) -> None:
        session = _FakeSession(
            {f"{BASE}/list/l1/task": [_FakeResponse(payload={"tasks": [], "last_page": True})]}
        )
        connector = ClickUpConnector(http_settings=_settings(), session=session)  # type: ignore[arg-type]
        connector.fetch_all("l1", TaskFilter(tag="cpp", done_after_ms=10, done_before_ms=20))

        params = session.calls[0]["params"]
        self.assertIn(("tags[]", "cpp"), params)
        self.assertIn(("statuses[]", "COMPLETED"), params)
        self.assertIn(("date_done_gt", 10), params)
        self.assertIn(("date_done_lt", 20), params)

    def test_decodes_custom_fields(self) -> None:
        session = _FakeSession(
            {f"{BASE}/list/l1/task": [_FakeResponse(payload={"tasks": [_task_payload("a")], "last_page": True})]}
        )
        connector = ClickUpConnector(http_settings=_settings(), session=session)  # type: ignore[arg-type]
        task = connector.fetch_all("l1", TaskFilter())[0]

        fields = {field.name: field for field in task.custom_fields}
        self.assertEqual(fields["PLA Difficult"].value, "2")
        self.assertEqual(fields["Game Name"].options[0].label, "P01 Alpha")
        self.assertEqual(fields["Tool/CTST PLA"].value, ["x", "y"])
        self.assertIsNone(fields["Location"].value)
        self.assertEqual(task.assignees[0].email, "dev@studio.io")

    def test_non_2xx_is_transport_error(self) -> None:
        session = _FakeSession({f"{BASE}/space/sp1/list": [_FakeResponse(status_code=401, payload={})]})
        connector = ClickUpConnector(http_settings=_settings(), session=session)  # type: ignore[arg-type]
        with self.assertRaises(TransportError):
            connector.list_lists("sp1")

    def test_timeout_is_transport_error(self) -> None:
        session = _FakeSession({f"{BASE}/space/sp1/list": [requests.Timeout("slow")]})
        connector = ClickUpConnector(http_settings=_settings(), session=session)  # type: ignore[arg-type]
        with self.assertRaises(TransportError):
            connector.list_lists("sp1")
        self.assertEqual(len(session.calls), 1)

    def test_invalid_json_is_decode_error(self) -> None:
        session = _FakeSession({f"{BASE}/space/sp1/list": [_FakeResponse(invalid_json=True)]})
        connector = ClickUpConnector(http_settings=_settings(), session=session)  # type: ignore[arg-type]
        with self.assertRaises(DecodeError):
            connector.list_lists("sp1")

    def test_unexpected_shape_is_decode_error(self) -> None:
        session = _FakeSession({f"{BASE}/list/l1/task": [_FakeResponse(payload={"items": []})]})
        connector = ClickUpConnector(http_settings=_settings(), session=session)  # type: ignore[arg-type]
        with self.assertRaises(DecodeError):
            connector.list_tasks("l1", TaskFilter(), 0)

    def test_list_failure_mid_space_propagates(self) -> None:
        session = _FakeSession(
            {
                f"{BASE}/space/sp1/list": [_FakeResponse(payload={"lists": [{"id": "l1"}, {"id": "l2"}]})],
                f"{BASE}/list/l1/task": [_FakeResponse(payload={"tasks": [_task_payload("a")], "last_page": True})],
                f"{BASE}/list/l2/task": [_FakeResponse(status_code=500, payload={})],
            }
        )
        connector = ClickUpConnector(http_settings=_settings(), session=session)  # type: ignore[arg-type]
        with self.assertRaises(TransportError):
            connector.fetch_space("sp1", TaskFilter())


if __name__ == "__main__":
    unittest.main()
