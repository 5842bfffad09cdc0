import abc
from typing import Optional

from linklite.core.broker import BaseTaskBroker
from linklite.core.models import QueryTask


class BaseServerTransport(abc.ABC):
    """Abstract interface for the network layer serving the query-distribution API."""
    def __init__(self, broker: BaseTaskBroker):
        self.broker = broker

    @abc.abstractmethod
    async def run(self, host: str, port: int) -> None:
        pass


class BaseClientTransport(abc.ABC):
    """Abstract interface for the collection-side connector to the query-distribution API."""

    @abc.abstractmethod
    async def fetch_query(self, collection_id: str) -> Optional[QueryTask]:
        """Returns the next waiting task for the collection, or None if there is none."""
        pass

    @abc.abstractmethod
    async def submit_query_result(self, task_id: str, count: int) -> None:
        pass

    @abc.abstractmethod
    async def cancel_query_task(self, task_id: str) -> None:
        pass

    async def aclose(self) -> None:
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
