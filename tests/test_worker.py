import threading

import pytest

from flowkit.activity_context import ActivityContext
from flowkit.context import WorkflowContext
from flowkit.worker import (
    TaskRegistry,
    WorkflowWorker,
    get_function_name,
    wrap_activity,
    wrap_workflow,
)


def sample_workflow(ctx):
    return ("workflow", ctx.name())


def sample_activity(ctx):
    return ("activity", ctx.get_input())


def failing_activity(ctx):
    raise ValueError("boom")


class FakeTaskHubClient:
    def __init__(self, error=None):
        self.error = error
        self.started_with = None

    def start_work_item_listener(self, stop_event, registry):
        if self.error is not None:
            raise self.error
        self.started_with = (stop_event, registry)


class FakeOrchestration:
    name = "wf-name"


class FakeActivityTask:
    def get_input(self):
        return 7

    def context(self):
        return None


def make_worker(client=None):
    closed = []
    worker = WorkflowWorker(client or FakeTaskHubClient(), lambda: closed.append(True))
    return worker, closed


def test_register_workflow():
    worker, _ = make_worker()
    worker.register_workflow(sample_workflow)
    assert list(worker.tasks.orchestrators) == ["sample_workflow"]


def test_register_workflow_anonymous():
    worker, _ = make_worker()
    with pytest.raises(ValueError, match="failed to get workflow decorator"):
        worker.register_workflow(lambda ctx: None)
    assert worker.tasks.orchestrators == {}


def test_register_activity():
    worker, _ = make_worker()
    worker.register_activity(sample_activity)
    assert list(worker.tasks.activities) == ["sample_activity"]


def test_register_activity_anonymous():
    worker, _ = make_worker()
    with pytest.raises(ValueError, match="failed to get activity decorator"):
        worker.register_activity(lambda ctx: None)


def test_register_twice_rejected():
    worker, _ = make_worker()
    worker.register_workflow(sample_workflow)
    with pytest.raises(ValueError, match="already registered"):
        worker.register_workflow(sample_workflow)


def test_registry_activity_duplicate():
    registry = TaskRegistry()
    registry.add_activity("a", sample_activity)
    with pytest.raises(ValueError):
        registry.add_activity("a", sample_activity)
    assert registry.activities == {"a": sample_activity}


def test_wrap_workflow_passes_workflow_context():
    orchestrator = wrap_workflow(sample_workflow)
    assert orchestrator(FakeOrchestration()) == ("workflow", "wf-name")


def test_wrap_workflow_gives_workflow_context():
    seen = []
    orchestrator = wrap_workflow(lambda ctx: seen.append(ctx))
    orchestrator(FakeOrchestration())
    assert isinstance(seen[0], WorkflowContext) and seen[0].name() == "wf-name"


def test_wrap_activity_returns_result():
    run = wrap_activity(sample_activity)
    assert run(FakeActivityTask()) == ("activity", 7)


def test_wrap_activity_gives_activity_context():
    seen = []
    run = wrap_activity(lambda ctx: seen.append(ctx))
    run(FakeActivityTask())
    assert isinstance(seen[0], ActivityContext) and seen[0].get_input() == 7


def test_wrap_activity_failure_names_activity():
    run = wrap_activity(failing_activity)
    with pytest.raises(RuntimeError, match="activity failing_activity failed: boom"):
        run(FakeActivityTask())


def test_get_function_name():
    assert get_function_name(sample_workflow) == "sample_workflow"


def test_get_function_name_none():
    with pytest.raises(ValueError, match="nil function name"):
        get_function_name(None)


def test_get_function_name_lambda():
    with pytest.raises(ValueError, match="anonymous function name"):
        get_function_name(lambda: None)


def test_start_and_shutdown():
    client = FakeTaskHubClient()
    worker, closed = make_worker(client)
    worker.register_workflow(sample_workflow)
    worker.start()
    stop_event, registry = client.started_with
    assert registry is worker.tasks
    assert not stop_event.is_set()
    worker.shutdown()
    assert stop_event.is_set()
    assert closed == [True]


def test_start_failure():
    worker, _ = make_worker(FakeTaskHubClient(error=ConnectionError("no sidecar")))
    with pytest.raises(RuntimeError, match="failed to start work stream: no sidecar"):
        worker.start()


def test_shutdown_before_start():
    worker, closed = make_worker()
    with pytest.raises(RuntimeError):
        worker.shutdown()
    assert closed == []


def test_context_manager():
    client = FakeTaskHubClient()
    worker, closed = make_worker(client)
    with worker as running:
        assert running is worker
        stop_event = client.started_with[0]
        assert isinstance(stop_event, threading.Event)
    assert stop_event.is_set()
    assert closed == [True]