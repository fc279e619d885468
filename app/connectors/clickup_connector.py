"""
app/connectors/clickup_connector.py

ClickUp connector: space listing, paginated task fetch and payload decoding.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from app.config import TrackerHTTPSettings
from app.connectors.base import BaseConnector, DecodeError
from app.domain.tracker import (
    Assignee,
    CustomField,
    FieldOption,
    FieldValue,
    RawTask,
    SpaceFetchResult,
    TaskFilter,
    TaskListRef,
    TaskPage,
)

logger = logging.getLogger(__name__)


class ClickUpConnector(BaseConnector):
    """
    Read-only client for the ClickUp v2 list and task endpoints.
    """

    def __init__(
        self,
        *,
        http_settings: TrackerHTTPSettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(source="clickup", http_settings=http_settings, session=session)
        self._base_url = http_settings.base_url.rstrip("/")

    def list_lists(self, space_id: str) -> list[TaskListRef]:
        payload = self._request_json(method="GET", url=f"{self._base_url}/space/{space_id}/list")
        if not isinstance(payload, dict) or not isinstance(payload.get("lists"), list):
            raise DecodeError(f"{self.source}: unexpected list payload for space {space_id}.")

        refs: list[TaskListRef] = []
        for item in payload["lists"]:
            if not isinstance(item, dict) or item.get("id") is None:
                raise DecodeError(f"{self.source}: list entry without id in space {space_id}.")
            refs.append(TaskListRef(id=str(item["id"]), name=str(item.get("name") or "")))
        return refs

    def list_tasks(self, list_id: str, task_filter: TaskFilter, page: int) -> TaskPage:
        params = [*task_filter.to_params(), ("page", page)]
        payload = self._request_json(
            method="GET",
            url=f"{self._base_url}/list/{list_id}/task",
            params=params,
        )
        if not isinstance(payload, dict) or not isinstance(payload.get("tasks"), list):
            raise DecodeError(f"{self.source}: unexpected task payload list={list_id} page={page}.")

        tasks = [self._decode_task(item, list_id=list_id) for item in payload["tasks"]]
        return TaskPage(tasks=tasks, is_last_page=bool(payload.get("last_page", False)))

    def fetch_all(self, list_id: str, task_filter: TaskFilter) -> list[RawTask]:
        """
        Walk pages until the tracker reports the last page or returns nothing.
        """

        collected: list[RawTask] = []
        page = 0
        while True:
            result = self.list_tasks(list_id, task_filter, page)
            collected.extend(result.tasks)
            if result.is_last_page or not result.tasks:
                break
            page += 1

        logger.debug(
            "Fetched list source=%s list_id=%s pages=%s tasks=%s",
            self.source,
            list_id,
            page + 1,
            len(collected),
        )
        return collected

    def fetch_space(self, space_id: str, task_filter: TaskFilter) -> SpaceFetchResult:
        """
        Fetch tasks from every list in a space. Any list failure propagates.
        """

        lists = self.list_lists(space_id)
        tasks: list[RawTask] = []
        for task_list in lists:
            tasks.extend(self.fetch_all(task_list.id, task_filter))

        logger.info(
            "Fetched space source=%s space_id=%s lists=%s tasks=%s tag=%r",
            self.source,
            space_id,
            len(lists),
            len(tasks),
            task_filter.tag,
        )
        return SpaceFetchResult(space_id=space_id, tasks=tasks, lists_fetched=len(lists))

    # ------------------------------------------------------------------
    # Payload decoding
    # ------------------------------------------------------------------

    def _decode_task(self, item: Any, *, list_id: str) -> RawTask:
        if not isinstance(item, dict) or item.get("id") is None:
            raise DecodeError(f"{self.source}: task entry without id in list {list_id}.")

        raw_assignees = item.get("assignees") or []
        raw_fields = item.get("custom_fields") or []
        if not isinstance(raw_assignees, list) or not isinstance(raw_fields, list):
            raise DecodeError(f"{self.source}: malformed task {item.get('id')} in list {list_id}.")

        assignees = tuple(
            Assignee(email=entry.get("email"), username=entry.get("username"))
            for entry in raw_assignees
            if isinstance(entry, dict)
        )
        custom_fields = tuple(
            self._decode_custom_field(entry) for entry in raw_fields if isinstance(entry, dict)
        )

        date_done = item.get("date_done")
        return RawTask(
            id=str(item["id"]),
            name=str(item.get("name") or ""),
            date_done=str(date_done) if date_done not in (None, "") else None,
            assignees=assignees,
            custom_fields=custom_fields,
        )

    def _decode_custom_field(self, entry: dict[str, Any]) -> CustomField:
        type_config = entry.get("type_config")
        raw_options = type_config.get("options") if isinstance(type_config, dict) else None

        options: list[FieldOption] = []
        for option in raw_options or []:
            if not isinstance(option, dict) or option.get("id") is None:
                continue
            order_index = option.get("orderindex")
            options.append(
                FieldOption(
                    id=str(option["id"]),
                    label=str(option.get("name") or option.get("label") or ""),
                    order_index=order_index if isinstance(order_index, int) else None,
                )
            )

        return CustomField(
            id=str(entry.get("id") or ""),
            name=str(entry.get("name") or ""),
            type=str(entry.get("type") or ""),
            value=_decode_value(entry.get("value")),
            options=tuple(options),
        )


def _decode_value(value: Any) -> FieldValue:
    """
    Narrow a decoded JSON value to the closed set of custom-field shapes.

    Object values (people, location and similar field types) carry nothing
    the pipeline reads and decode to ``None``.
    """

    if value is None or isinstance(value, (int, float, str)):
        return value
    if isinstance(value, list):
        items: list[str] = []
        for element in value:
            if isinstance(element, dict):
                if element.get("id") is not None:
                    items.append(str(element["id"]))
            elif element is not None:
                items.append(str(element))
        return items
    return None
