"""Tagged result values for client calls.

Callers that prefer explicit branching over ``try``/``except`` use the
``*_outcome`` helpers and match on what comes back. Connectivity faults from
the transport are not converted and still propagate.
"""
from dataclasses import dataclass
from typing import Union

from linklite.core.errors import RemoteLogicalFailureError, RemoteRequestError, ResponseFormatError
from linklite.core.models import QueryTask
from linklite.core.transport import BaseClientTransport

ClientError = Union[RemoteRequestError, ResponseFormatError, RemoteLogicalFailureError]
CLIENT_ERRORS = (RemoteRequestError, ResponseFormatError, RemoteLogicalFailureError)


@dataclass(frozen=True)
class Acknowledged:
    """A submit or cancel was accepted with status OK."""


@dataclass(frozen=True)
class NoTaskWaiting:
    collection_id: str


@dataclass(frozen=True)
class TaskReturned:
    task: QueryTask


@dataclass(frozen=True)
class Failed:
    error: ClientError

    def reraise(self):
        raise self.error


Outcome = Union[Acknowledged, NoTaskWaiting, TaskReturned, Failed]


async def fetch_outcome(transport: BaseClientTransport, collection_id: str) -> Outcome:
    try:
        task = await transport.fetch_query(collection_id)
    except CLIENT_ERRORS as e:
        return Failed(e)
    return NoTaskWaiting(collection_id) if task is None else TaskReturned(task)


async def submit_outcome(transport: BaseClientTransport, task_id: str, count: int) -> Outcome:
    try:
        await transport.submit_query_result(task_id, count)
    except CLIENT_ERRORS as e:
        return Failed(e)
    return Acknowledged()


async def cancel_outcome(transport: BaseClientTransport, task_id: str) -> Outcome:
    try:
        await transport.cancel_query_task(task_id)
    except CLIENT_ERRORS as e:
        return Failed(e)
    return Acknowledged()
