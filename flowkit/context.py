"""Context handed to a running workflow function."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Protocol

from flowkit.activity_context import (
    CallActivityOption,
    build_call_activity_options,
)
from flowkit.workflow import (
    CallChildWorkflowOption,
    build_call_child_workflow_options,
)


class OrchestrationContext(Protocol):
    """What the engine provides to a running orchestration."""

    id: Any
    name: str
    is_replaying: bool
    current_time_utc: datetime

    def get_input(self) -> Any: ...

    def set_custom_status(self, custom_status: str) -> None: ...

    def call_activity(self, activity: Any, **kwargs: Any) -> Any: ...

    def call_sub_orchestrator(self, workflow: Any, **kwargs: Any) -> Any: ...

    def create_timer(self, duration: timedelta) -> Any: ...

    def wait_for_single_event(self, event_name: str, timeout: timedelta) -> Any: ...

    def continue_as_new(self, new_input: Any, **kwargs: Any) -> None: ...


class WorkflowContext:
    """Gives a workflow access to its input, time and durable tasks."""

    def __init__(self, orchestration_context: OrchestrationContext) -> None:
        self._ctx = orchestration_context

    def get_input(self) -> Any:
        """Return the decoded input of the workflow."""
        return self._ctx.get_input()

    def name(self) -> str:
        """Return the name of the workflow."""
        return self._ctx.name

    def instance_id(self) -> str:
        """Return the id of the running workflow instance."""
        return str(self._ctx.id)

    def current_utc_datetime(self) -> datetime:
        """Return the replay-safe current workflow time in UTC."""
        return self._ctx.current_time_utc

    def is_replaying(self) -> bool:
        """Return whether the workflow is being replayed."""
        return self._ctx.is_replaying

    def set_custom_status(self, custom_status: str) -> None:
        """Attach a custom status to the workflow."""
        self._ctx.set_custom_status(custom_status)

    def call_activity(self, activity: Any, *args: CallActivityOption) -> Any:
        """Schedule an activity and return its task.

        Returns None if one of the options cannot be applied.
        """
        try:
            options = build_call_activity_options(*args)
        except (TypeError, ValueError):
            return None
        return self._ctx.call_activity(
            activity,
            raw_input=options.raw_input,
            retry_policy=options.get_retry_policy(),
        )

    def call_child_workflow(self, workflow: Any, *args: CallChildWorkflowOption) -> Any:
        """Schedule a child workflow and return its task.

        Returns None if one of the options cannot be applied.
        """
        try:
            options = build_call_child_workflow_options(*args)
        except (TypeError, ValueError):
            return None
        kwargs: dict[str, Any] = {
            "raw_input": options.raw_input,
            "retry_policy": options.get_retry_policy(),
        }
        if options.instance_id:
            kwargs["instance_id"] = options.instance_id
        return self._ctx.call_sub_orchestrator(workflow, **kwargs)

    def create_timer(self, duration: timedelta) -> Any:
        """Return a task that completes after the given duration."""
        return self._ctx.create_timer(duration)

    def wait_for_external_event(self, event_name: str, timeout: timedelta) -> Any:
        """Return a task waiting for the named event, or None if no name is given."""
        if not event_name:
            return None
        return self._ctx.wait_for_single_event(event_name, timeout)

    def continue_as_new(self, new_input: Any, keep_events: bool) -> None:
        """Restart the workflow with a new input, optionally keeping pending events."""
        if keep_events:
            self._ctx.continue_as_new(new_input, keep_unprocessed_events=True)
        else:
            self._ctx.continue_as_new(new_input)