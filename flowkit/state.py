"""Workflow runtime statuses and the orchestration metadata they come from."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime


class OrchestrationStatus(enum.IntEnum):
    """Runtime status values as reported by the orchestration engine."""

    RUNNING = 0
    COMPLETED = 1
    CONTINUED_AS_NEW = 2
    FAILED = 3
    CANCELED = 4
    TERMINATED = 5
    PENDING = 6
    SUSPENDED = 7


class Status(enum.IntEnum):
    """Status of a workflow instance as seen by users of this package."""

    RUNNING = 0
    COMPLETED = 1
    CONTINUED_AS_NEW = 2
    FAILED = 3
    CANCELED = 4
    TERMINATED = 5
    PENDING = 6
    SUSPENDED = 7
    UNKNOWN = 8

    @classmethod
    def _missing_(cls, value: object) -> Status | None:
        if isinstance(value, int):
            return cls.UNKNOWN
        return None

    def __str__(self) -> str:
        return self.name

    def runtime_status(self) -> OrchestrationStatus:
        """Return the engine status matching this status.

        Raises ValueError for UNKNOWN, which has no engine counterpart.
        """
        try:
            return OrchestrationStatus[self.name]
        except KeyError:
            raise ValueError(f"status {self.name} has no runtime status") from None


@dataclass
class OrchestrationFailureDetails:
    """Failure information recorded for an orchestration."""

    error_type: str = ""
    error_message: str = ""
    stack_trace: str | None = None
    inner_failure: OrchestrationFailureDetails | None = None
    is_non_retriable: bool = False


@dataclass
class OrchestrationMetadata:
    """Raw metadata of an orchestration instance."""

    instance_id: str = ""
    name: str = ""
    runtime_status: int = OrchestrationStatus.RUNNING
    created_at: datetime | None = None
    last_updated_at: datetime | None = None
    input: str | None = None
    output: str | None = None
    custom_status: str | None = None
    failure_details: OrchestrationFailureDetails | None = None


@dataclass
class WorkflowState:
    """State of a workflow, backed by its orchestration metadata."""

    metadata: OrchestrationMetadata = field(default_factory=OrchestrationMetadata)

    def runtime_status(self) -> Status:
        """Return the workflow status held in the metadata."""
        return Status(int(self.metadata.runtime_status))


def convert_status_list(statuses) -> list[OrchestrationStatus]:
    """Convert workflow statuses to engine runtime statuses."""
    return [status.runtime_status() for status in statuses]