"""Worker that registers workflows and activities and serves work items."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Protocol

from flowkit.activity_context import ActivityContext
from flowkit.context import WorkflowContext

logger = logging.getLogger(__name__)

Workflow = Callable[[WorkflowContext], Any]
Activity = Callable[[ActivityContext], Any]


class TaskHubClient(Protocol):
    """The part of the engine client a worker needs."""

    def start_work_item_listener(
        self, stop_event: threading.Event, registry: TaskRegistry
    ) -> None: ...


class TaskRegistry:
    """Named orchestrators and activities known to a worker."""

    def __init__(self) -> None:
        self.orchestrators: dict[str, Callable[[Any], Any]] = {}
        self.activities: dict[str, Callable[[Any], Any]] = {}

    def add_orchestrator(self, name: str, orchestrator: Callable[[Any], Any]) -> None:
        """Register an orchestrator; a name may be registered only once."""
        if name in self.orchestrators:
            raise ValueError(f"orchestrator named '{name}' is already registered")
        self.orchestrators[name] = orchestrator

    def add_activity(self, name: str, activity: Callable[[Any], Any]) -> None:
        """Register an activity; a name may be registered only once."""
        if name in self.activities:
            raise ValueError(f"activity named '{name}' is already registered")
        self.activities[name] = activity


def get_function_name(func: Any) -> str:
    """Return the name of a function; anonymous and missing functions are rejected."""
    if func is None:
        raise ValueError("nil function name")
    name = getattr(func, "__name__", None)
    if not name:
        raise ValueError("unnamed function")
    if name == "<lambda>":
        raise ValueError("anonymous function name")
    return name


def wrap_workflow(workflow: Workflow) -> Callable[[Any], Any]:
    """Turn a workflow function into an orchestrator taking the engine context."""

    def orchestrator(orchestration_context: Any) -> Any:
        return workflow(WorkflowContext(orchestration_context))

    return orchestrator


def wrap_activity(activity: Activity) -> Callable[[Any], Any]:
    """Turn an activity function into one taking the engine context.

    A failure is re-raised as RuntimeError naming the activity.
    """

    def run(task_context: Any) -> Any:
        try:
            return activity(ActivityContext(task_context))
        except Exception as err:
            try:
                name = get_function_name(activity)
            except ValueError:
                name = ""
            raise RuntimeError(f"activity {name} failed: {err}") from err

    return run


class WorkflowWorker:
    """Serves registered workflows and activities from the engine."""

    def __init__(self, task_hub_client: TaskHubClient, close: Callable[[], None]) -> None:
        self.tasks = TaskRegistry()
        self._client = task_hub_client
        self._close = close
        self._stop_event: threading.Event | None = None

    def register_workflow(self, workflow: Workflow) -> None:
        """Register a workflow under its function name."""
        try:
            name = get_function_name(workflow)
        except ValueError as err:
            raise ValueError(f"failed to get workflow decorator: {err}") from err
        self.tasks.add_orchestrator(name, wrap_workflow(workflow))

    def register_activity(self, activity: Activity) -> None:
        """Register an activity under its function name."""
        try:
            name = get_function_name(activity)
        except ValueError as err:
            raise ValueError(f"failed to get activity decorator: {err}") from err
        self.tasks.add_activity(name, wrap_activity(activity))

    def start(self) -> None:
        """Start listening for work items for everything registered so far."""
        stop_event = threading.Event()
        self._stop_event = stop_event
        try:
            self._client.start_work_item_listener(stop_event, self.tasks)
        except Exception as err:
            raise RuntimeError(f"failed to start work stream: {err}") from err
        logger.info("work item listener started")

    def shutdown(self) -> None:
        """Stop listening and close the connection."""
        if self._stop_event is None:
            raise RuntimeError("worker has not been started")
        self._stop_event.set()
        self._close()
        logger.info("work item listener shutdown")

    def __enter__(self) -> WorkflowWorker:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()