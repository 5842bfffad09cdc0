import abc
from typing import Any, Dict, Optional


class BaseTaskBroker(abc.ABC):
    """Abstract interface for the state behind the query-distribution API."""

    @abc.abstractmethod
    async def enqueue_task(self, collection_id: str, task: Dict[str, Any]) -> str:
        """Queues a task for a collection and returns its task id."""
        pass

    @abc.abstractmethod
    async def next_task(self, collection_id: str) -> Optional[Dict[str, Any]]:
        """Hands out the oldest waiting task, marking it outstanding. None if the queue is empty."""
        pass

    @abc.abstractmethod
    async def record_result(self, task_id: str, count: Optional[int]) -> bool:
        """Stores a result (or a cancellation when count is None). False if the task is not outstanding."""
        pass

    @abc.abstractmethod
    async def get_result(self, task_id: str) -> Optional[Dict[str, Any]]:
        """Retrieves the recorded outcome of a task."""
        pass
