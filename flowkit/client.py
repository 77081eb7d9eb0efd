"""Client for scheduling and managing workflow instances."""

from __future__ import annotations

import contextlib
import enum
import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Protocol

from flowkit.state import OrchestrationMetadata, Status, convert_status_list
from flowkit.workflow import Metadata, convert_metadata

Option = Callable[[dict[str, Any]], None]


class TaskHubClient(Protocol):
    """The part of the engine client a workflow client needs."""

    def schedule_new_orchestration(self, workflow: str, **options: Any) -> Any: ...

    def fetch_orchestration_metadata(
        self, instance_id: str, **options: Any
    ) -> OrchestrationMetadata: ...

    def wait_for_orchestration_start(
        self, instance_id: str, **options: Any
    ) -> OrchestrationMetadata: ...

    def wait_for_orchestration_completion(
        self, instance_id: str, **options: Any
    ) -> OrchestrationMetadata: ...

    def terminate_orchestration(self, instance_id: str, **options: Any) -> None: ...

    def raise_event(self, instance_id: str, event_name: str, **options: Any) -> None: ...

    def suspend_orchestration(self, instance_id: str, reason: str) -> None: ...

    def resume_orchestration(self, instance_id: str, reason: str) -> None: ...

    def purge_orchestration_state(self, instance_id: str, **options: Any) -> None: ...


class CreateWorkflowAction(enum.IntEnum):
    """What to do when a workflow is scheduled with an id already in use."""

    ERROR = 0
    IGNORE = 1
    TERMINATE = 2


@dataclass
class WorkflowIDReusePolicy:
    """Which statuses allow an instance id to be reused, and how."""

    operation_status: list[Status] = field(default_factory=list)
    action: CreateWorkflowAction = CreateWorkflowAction.ERROR


def _to_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def _setter(key: str, value: Any) -> Option:
    def configure(options: dict[str, Any]) -> None:
        options[key] = value

    return configure


def with_instance_id(instance_id: str) -> Option:
    """Option setting the instance id of a new workflow."""
    return _setter("instance_id", instance_id)


def with_input(input: Any) -> Option:
    """Option passing a JSON-serialisable input to a new workflow."""
    encoded = _to_json(input)
    return _setter("input", encoded)


def with_raw_input(input: str) -> Option:
    """Option passing an already serialised input to a new workflow."""
    return _setter("input", input)


def with_start_time(start_time: datetime) -> Option:
    """Option setting when a new workflow is to start."""
    return _setter("start_time", start_time)


def with_reuse_id_policy(policy: WorkflowIDReusePolicy) -> Option:
    """Option setting the instance id reuse policy of a new workflow."""
    converted = {
        "operation_status": convert_status_list(policy.operation_status),
        "action": CreateWorkflowAction(policy.action),
    }
    return _setter("reuse_id_policy", converted)


def with_fetch_payloads(fetch_payloads: bool) -> Option:
    """Option choosing whether inputs and outputs are fetched with metadata."""
    return _setter("fetch_payloads", fetch_payloads)


def with_event_payload(data: Any) -> Option:
    """Option sending a JSON-serialisable payload with an event."""
    encoded = _to_json(data)
    return _setter("data", encoded)


def with_raw_event_data(data: str) -> Option:
    """Option sending an already serialised payload with an event."""
    return _setter("data", data)


def with_output(data: Any) -> Option:
    """Option defining a JSON-serialisable output when terminating a workflow."""
    encoded = _to_json(data)
    return _setter("output", encoded)


def with_raw_output(data: str) -> Option:
    """Option defining an already serialised output when terminating a workflow."""
    return _setter("output", data)


def with_recursive_terminate(recursive: bool) -> Option:
    """Option choosing whether child workflows are terminated too."""
    return _setter("recursive", recursive)


def with_recursive_purge(recursive: bool) -> Option:
    """Option choosing whether child workflows are purged too."""
    return _setter("recursive", recursive)


def _collect(opts: tuple[Option, ...]) -> dict[str, Any]:
    options: dict[str, Any] = {}
    for configure in opts:
        configure(options)
    return options


def _require_id(instance_id: str) -> None:
    if not instance_id:
        raise ValueError("no workflow id specified")


class Client:
    """Schedules, inspects and controls workflow instances."""

    def __init__(self, task_hub_client: TaskHubClient, close: Callable[[], None]) -> None:
        self._hub = task_hub_client
        self._close = close

    def schedule_new_workflow(self, workflow: str, *args: Option) -> str:
        """Start a workflow and return its instance id."""
        if not workflow:
            raise ValueError("no workflow specified")
        return str(self._hub.schedule_new_orchestration(workflow, **_collect(args)))

    def fetch_workflow_metadata(self, instance_id: str, *args: Option) -> Metadata:
        """Return the metadata of a workflow instance."""
        _require_id(instance_id)
        raw = self._hub.fetch_orchestration_metadata(instance_id, **_collect(args))
        return convert_metadata(raw)

    def wait_for_workflow_start(self, instance_id: str, *args: Option) -> Metadata:
        """Wait until a workflow has started and return its metadata."""
        _require_id(instance_id)
        raw = self._hub.wait_for_orchestration_start(instance_id, **_collect(args))
        return convert_metadata(raw)

    def wait_for_workflow_completion(self, instance_id: str, *args: Option) -> Metadata:
        """Wait until a workflow has completed and return its metadata."""
        _require_id(instance_id)
        raw = self._hub.wait_for_orchestration_completion(instance_id, **_collect(args))
        return convert_metadata(raw)

    def terminate_workflow(self, instance_id: str, *args: Option) -> None:
        """Stop a workflow instance."""
        _require_id(instance_id)
        self._hub.terminate_orchestration(instance_id, **_collect(args))

    def raise_event(self, instance_id: str, event_name: str, *args: Option) -> None:
        """Send a named event to a workflow instance."""
        _require_id(instance_id)
        if not event_name:
            raise ValueError("no event name specified")
        self._hub.raise_event(instance_id, event_name, **_collect(args))

    def suspend_workflow(self, instance_id: str, reason: str) -> None:
        """Pause a workflow instance."""
        _require_id(instance_id)
        self._hub.suspend_orchestration(instance_id, reason)

    def resume_workflow(self, instance_id: str, reason: str) -> None:
        """Resume a suspended workflow instance."""
        _require_id(instance_id)
        self._hub.resume_orchestration(instance_id, reason)

    def purge_workflow(self, instance_id: str, *args: Option) -> None:
        """Remove the state of a terminated or completed workflow instance."""
        _require_id(instance_id)
        self._hub.purge_orchestration_state(instance_id, **_collect(args))

    def close(self) -> None:
        """Close the connection, ignoring errors from closing it."""
        with contextlib.suppress(OSError):
            self._close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()