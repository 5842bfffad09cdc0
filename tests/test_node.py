import httpx
import pytest

from linklite.core.errors import RemoteLogicalFailureError, RemoteRequestError, ResponseFormatError
from linklite.core.models import QueryTask
from linklite.core.outcomes import (
    Acknowledged, Failed, NoTaskWaiting, TaskReturned, cancel_outcome, fetch_outcome, submit_outcome,
)
from linklite.core.transport import BaseClientTransport
from linklite.node import CollectionNode


class ScriptedTransport(BaseClientTransport):
    """Client transport that replays prepared answers and logs every call."""

    def __init__(self, fetched=None, fetch_error=None, report_error=None):
        self.fetched = fetched
        self.fetch_error = fetch_error
        self.report_error = report_error
        self.calls = []

    async def fetch_query(self, collection_id):
        self.calls.append(("fetch", collection_id))
        if self.fetch_error:
            raise self.fetch_error
        return self.fetched

    async def submit_query_result(self, task_id, count):
        self.calls.append(("submit", task_id, count))
        if self.report_error:
            raise self.report_error

    async def cancel_query_task(self, task_id):
        self.calls.append(("cancel", task_id))
        if self.report_error:
            raise self.report_error


async def count_rows(task: QueryTask) -> int:
    return 42


async def broken_engine(task: QueryTask) -> int:
    raise RuntimeError("unsupported query")


# ------------------------------------------
# Outcome helpers
# ------------------------------------------
async def test_fetch_outcome_variants():
    assert await fetch_outcome(ScriptedTransport(), "site-1") == NoTaskWaiting("site-1")

    task = QueryTask(task_id="abc")
    assert await fetch_outcome(ScriptedTransport(fetched=task), "site-1") == TaskReturned(task)

    error = RemoteRequestError("Fetch Query Endpoint", 502)
    outcome = await fetch_outcome(ScriptedTransport(fetch_error=error), "site-1")
    assert outcome == Failed(error)
    with pytest.raises(RemoteRequestError):
        outcome.reraise()


async def test_report_outcomes():
    assert await submit_outcome(ScriptedTransport(), "abc", 1) == Acknowledged()
    assert await cancel_outcome(ScriptedTransport(), "abc") == Acknowledged()

    error = RemoteLogicalFailureError("Submit Results Endpoint", "ERROR", '{"status": "ERROR"}')
    outcome = await cancel_outcome(ScriptedTransport(report_error=error), "abc")
    assert isinstance(outcome, Failed)
    assert outcome.error is error


async def test_outcome_helpers_do_not_capture_connectivity_faults():
    transport = ScriptedTransport(fetch_error=httpx.ConnectError("refused"))

    with pytest.raises(httpx.ConnectError):
        await fetch_outcome(transport, "site-1")


# ------------------------------------------
# CollectionNode
# ------------------------------------------
async def test_poll_once_without_task_only_fetches():
    transport = ScriptedTransport()
    node = CollectionNode("site-1", transport, count_rows)

    outcome = await node.poll_once()

    assert isinstance(outcome, NoTaskWaiting)
    assert transport.calls == [("fetch", "site-1")]


async def test_poll_once_submits_count():
    transport = ScriptedTransport(fetched=QueryTask(task_id="abc"))
    node = CollectionNode("site-1", transport, count_rows)

    outcome = await node.poll_once()

    assert outcome == Acknowledged()
    assert transport.calls == [("fetch", "site-1"), ("submit", "abc", 42)]


async def test_poll_once_cancels_when_execution_fails():
    transport = ScriptedTransport(fetched=QueryTask(task_id="abc"))
    node = CollectionNode("site-1", transport, broken_engine)

    outcome = await node.poll_once()

    assert outcome == Acknowledged()
    assert transport.calls == [("fetch", "site-1"), ("cancel", "abc")]


async def test_poll_once_cancels_when_engine_returns_no_count():
    async def silent_engine(task):
        return None

    transport = ScriptedTransport(fetched=QueryTask(task_id="abc"))
    node = CollectionNode("site-1", transport, silent_engine)

    await node.poll_once()

    assert transport.calls == [("fetch", "site-1"), ("cancel", "abc")]


async def test_poll_once_returns_fetch_failure():
    error = ResponseFormatError("Fetch Query Endpoint", "garbage")
    transport = ScriptedTransport(fetch_error=error)
    node = CollectionNode("site-1", transport, count_rows)

    outcome = await node.poll_once()

    assert outcome == Failed(error)
    assert transport.calls == [("fetch", "site-1")]


async def test_poll_once_returns_report_failure():
    error = RemoteRequestError("Submit Results Endpoint", 500)
    transport = ScriptedTransport(fetched=QueryTask(task_id="abc"), report_error=error)
    node = CollectionNode("site-1", transport, count_rows)

    outcome = await node.poll_once()

    assert outcome == Failed(error)


async def test_poll_once_survives_unreachable_remote():
    transport = ScriptedTransport(fetch_error=httpx.ConnectError("refused"))
    node = CollectionNode("site-1", transport, count_rows)

    assert await node.poll_once() is None


async def test_heartbeat_loop_runs_requested_cycles():
    transport = ScriptedTransport()
    node = CollectionNode("site-1", transport, count_rows, polling_interval=0)

    await node.heartbeat_loop(max_cycles=3)

    assert transport.calls == [("fetch", "site-1")] * 3


async def test_heartbeat_loop_requires_collection_id():
    node = CollectionNode("", ScriptedTransport(), count_rows)

    with pytest.raises(ValueError):
        await node.heartbeat_loop(max_cycles=1)
