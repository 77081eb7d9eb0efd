"""Workflow metadata and the options used when calling a child workflow."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from flowkit.activity_context import RetryPolicy, marshal_data
from flowkit.state import OrchestrationMetadata, Status

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass
class FailureDetails:
    """Why a workflow failed, possibly with a chain of inner failures."""

    type: str = ""
    message: str = ""
    stack_trace: str = ""
    inner_failure: Optional[FailureDetails] = None
    is_non_retriable: bool = False


@dataclass
class Metadata:
    """Metadata of a workflow instance."""

    instance_id: str = ""
    name: str = ""
    runtime_status: Status = Status.RUNNING
    created_at: datetime = _EPOCH
    last_updated_at: datetime = _EPOCH
    serialized_input: str = ""
    serialized_output: str = ""
    serialized_custom_status: str = ""
    failure_details: Optional[FailureDetails] = None


def convert_metadata(orchestration_metadata: OrchestrationMetadata) -> Metadata:
    """Build workflow metadata from orchestration metadata."""
    raw = orchestration_metadata
    metadata = Metadata(
        instance_id=raw.instance_id,
        name=raw.name,
        runtime_status=Status(int(raw.runtime_status)),
        created_at=raw.created_at if raw.created_at is not None else _EPOCH,
        last_updated_at=raw.last_updated_at if raw.last_updated_at is not None else _EPOCH,
        serialized_input=raw.input or "",
        serialized_output=raw.output or "",
        serialized_custom_status=raw.custom_status or "",
    )
    failure = raw.failure_details
    if failure is not None:
        details = FailureDetails(
            type=failure.error_type,
            message=failure.error_message,
            stack_trace=failure.stack_trace or "",
            is_non_retriable=failure.is_non_retriable,
        )
        current = details
        inner = failure.inner_failure
        while inner is not None:
            current.inner_failure = FailureDetails(
                type=inner.error_type,
                message=inner.error_message,
                stack_trace=inner.stack_trace or "",
            )
            current = current.inner_failure
            inner = inner.inner_failure
        metadata.failure_details = details
    return metadata


@dataclass
class CallChildWorkflowOptions:
    """Options collected for a single child workflow call."""

    instance_id: str = ""
    raw_input: Optional[str] = None
    retry_policy: Optional[RetryPolicy] = None

    def get_retry_policy(self) -> Optional[RetryPolicy]:
        """Return a copy of the retry policy, or None if none is set."""
        if self.retry_policy is None:
            return None
        return dataclasses.replace(self.retry_policy)


CallChildWorkflowOption = Callable[[CallChildWorkflowOptions], None]


def child_workflow_input(input: Any) -> CallChildWorkflowOption:
    """Option passing a JSON-serialisable input to the child workflow."""

    def configure(opts: CallChildWorkflowOptions) -> None:
        try:
            data = marshal_data(input)
        except (TypeError, ValueError) as err:
            raise ValueError(f"failed to marshal input data to JSON: {err}") from err
        opts.raw_input = data.decode("utf-8") if data is not None else ""

    return configure


def child_workflow_raw_input(input: str) -> CallChildWorkflowOption:
    """Option passing an already serialised input to the child workflow."""

    def configure(opts: CallChildWorkflowOptions) -> None:
        opts.raw_input = input

    return configure


def child_workflow_instance_id(instance_id: str) -> CallChildWorkflowOption:
    """Option setting the instance id of the child workflow."""

    def configure(opts: CallChildWorkflowOptions) -> None:
        opts.instance_id = instance_id

    return configure


def child_workflow_retry_policy(policy: RetryPolicy) -> CallChildWorkflowOption:
    """Option setting the retry policy of the child workflow call."""

    def configure(opts: CallChildWorkflowOptions) -> None:
        opts.retry_policy = dataclasses.replace(policy)

    return configure


def build_call_child_workflow_options(*args: CallChildWorkflowOption) -> CallChildWorkflowOptions:
    """Apply the given options in order; an option's error propagates."""
    options = CallChildWorkflowOptions()
    for configure in args:
        configure(options)
    return options


def new_task_slice(length: int) -> list:
    """Return a list of empty slots for tasks to be run in parallel."""
    if length < 0:
        raise ValueError("length must not be negative")
    return [None] * length