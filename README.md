# flowkit

flowkit is a toolkit for writing durable workflows and the activities they call,
running them on a worker and managing them from a client. All of this goes
through a task hub client that talks to the workflow engine.

## Installation

```
pip install flowkit
```

To run the test suite:

```
pip install "flowkit[test]"
```

## Writing workflows and activities

A workflow is a function that takes a `WorkflowContext`. An activity is a
function that takes an `ActivityContext`. Both return their result, and errors
are raised as exceptions.

```python
from flowkit.activity_context import activity_input, activity_retry_policy, RetryPolicy
from flowkit.workflow import child_workflow_input, child_workflow_instance_id


def greet(ctx):
    name = ctx.get_input()
    return f"Hello, {name}!"


def order_workflow(ctx):
    order = ctx.get_input()
    ctx.set_custom_status("processing")
    greeting = ctx.call_activity(
        greet,
        activity_input(order["customer"]),
        activity_retry_policy(RetryPolicy(max_attempts=3)),
    )
    shipping = ctx.call_child_workflow(
        "shipping_workflow",
        child_workflow_input(order),
        child_workflow_instance_id(f"{ctx.instance_id()}-shipping"),
    )
    return greeting, shipping
```

Inside a workflow, use `ctx.current_utc_datetime()` instead of the wall clock.
It gives the workflow's own time, which stays the same when the workflow is
replayed. `ctx.is_replaying()` tells whether a replay is in progress.

- Timers are created with `ctx.create_timer(duration)`.
- External events are awaited with `ctx.wait_for_external_event(event_name, timeout)`. An empty event name gives `None`.
- A workflow restarts itself with `ctx.continue_as_new(new_input, keep_events)`.

`call_activity` and `call_child_workflow` return `None` if one of their options
cannot be applied.

Inputs given through `activity_input` and `child_workflow_input` are encoded as
compact JSON. Use `activity_raw_input` and `child_workflow_raw_input` to pass a
string unchanged.

`flowkit.workflow.convert_metadata` turns an `OrchestrationMetadata` record into
a `Metadata` value, including any chain of `FailureDetails`.

## Running a worker

`WorkflowWorker` registers workflows and activities under their function names
and serves them through a task hub client:

```python
from flowkit.worker import WorkflowWorker

worker = WorkflowWorker(task_hub_client, close=connection_close)
worker.register_workflow(order_workflow)
worker.register_activity(greet)
worker.start()
# ...
worker.shutdown()
```

The worker can also be used as a context manager, which starts it on entry and
shuts it down on exit.

- Only named functions can be registered. Lambdas are rejected.
- A name can be registered only once.
- If an activity fails, its error is re-raised as a `RuntimeError` that names the activity.

## Managing workflows

`Client` schedules workflows and manages them by instance id:

```python
from flowkit.client import (
    Client,
    CreateWorkflowAction,
    WorkflowIDReusePolicy,
    with_input,
    with_instance_id,
    with_reuse_id_policy,
    with_fetch_payloads,
    with_event_payload,
)
from flowkit.state import Status

client = Client(task_hub_client, close=connection_close)

instance_id = client.schedule_new_workflow(
    "order_workflow",
    with_instance_id("order-42"),
    with_input({"customer": "Ada"}),
    with_reuse_id_policy(
        WorkflowIDReusePolicy([Status.COMPLETED], CreateWorkflowAction.IGNORE)
    ),
)

client.raise_event(instance_id, "approved", with_event_payload({"by": "manager"}))
metadata = client.wait_for_workflow_completion(instance_id, with_fetch_payloads(True))
print(metadata.runtime_status, metadata.serialized_output)

client.purge_workflow(instance_id)
client.close()
```

The client also offers:

- `fetch_workflow_metadata`
- `wait_for_workflow_start`
- `terminate_workflow`, with `with_output`, `with_raw_output` and `with_recursive_terminate`
- `suspend_workflow`
- `resume_workflow`

`purge_workflow` accepts `with_recursive_purge`. A call made with an empty
instance id, workflow name or event name raises `ValueError` before the engine
is contacted.

Workflow status values are members of `Status`. `str(status)` gives names such
as `RUNNING`, `COMPLETED` and `SUSPENDED`. Any value outside the known range
gives `UNKNOWN`.

## Checking the linter version

`flowkit-check-lint` reads the linter version pinned under
`jobs.build.env` in a CI workflow file. It asks the installed linter for its
version, then prints whether the major and minor versions match. The workflow
file path is an optional argument:

```
flowkit-check-lint path/to/workflow.yaml
```

## What flowkit does not do

flowkit does not include a connection to a workflow engine. `Client` and
`WorkflowWorker` are given a task hub client object and a close function, and
every engine operation is delegated to that object. There is no built-in
transport, server or storage.