"""Activity context and the options used when calling an activity."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable, Protocol


class TaskActivityContext(Protocol):
    """What the engine provides to a running activity."""

    def get_input(self) -> Any: ...

    def context(self) -> Any: ...


class ActivityContext:
    """Context handed to an activity function."""

    def __init__(self, task_context: TaskActivityContext) -> None:
        self._ctx = task_context

    def get_input(self) -> Any:
        """Return the decoded input of the activity."""
        return self._ctx.get_input()

    def context(self) -> Any:
        """Return the engine context of the activity."""
        return self._ctx.context()


@dataclass
class RetryPolicy:
    """How a failed activity or child workflow is retried."""

    max_attempts: int = 0
    initial_retry_interval: timedelta = timedelta(0)
    backoff_coefficient: float = 0.0
    max_retry_interval: timedelta = timedelta(0)
    retry_timeout: timedelta = timedelta(0)


@dataclass
class CallActivityOptions:
    """Options collected for a single activity call."""

    raw_input: str | None = None
    retry_policy: RetryPolicy | None = None

    def get_retry_policy(self) -> RetryPolicy | None:
        """Return a copy of the retry policy, or None if none is set."""
        if self.retry_policy is None:
            return None
        return dataclasses.replace(self.retry_policy)


CallActivityOption = Callable[[CallActivityOptions], None]


def marshal_data(input: Any) -> bytes | None:
    """Encode a value as compact JSON bytes; None stays None."""
    if input is None:
        return None
    return json.dumps(
        input, separators=(",", ":"), ensure_ascii=False, allow_nan=False
    ).encode("utf-8")


def activity_input(input: Any) -> CallActivityOption:
    """Option passing a JSON-serialisable input to the activity."""

    def configure(opts: CallActivityOptions) -> None:
        data = marshal_data(input)
        opts.raw_input = data.decode("utf-8") if data is not None else ""

    return configure


def activity_raw_input(input: str) -> CallActivityOption:
    """Option passing an already serialised input to the activity."""

    def configure(opts: CallActivityOptions) -> None:
        opts.raw_input = input

    return configure


def activity_retry_policy(policy: RetryPolicy) -> CallActivityOption:
    """Option setting the retry policy of the activity call."""

    def configure(opts: CallActivityOptions) -> None:
        opts.retry_policy = dataclasses.replace(policy)

    return configure


def build_call_activity_options(*args: CallActivityOption) -> CallActivityOptions:
    """Apply the given options in order; an option's error propagates."""
    options = CallActivityOptions()
    for configure in args:
        configure(options)
    return options