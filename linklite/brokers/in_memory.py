import asyncio
import uuid
from typing import Any, Dict, List, Optional

from linklite.core.broker import BaseTaskBroker


class InMemoryBroker(BaseTaskBroker):
    """Zero-dependency broker strictly for local simulation/CI."""
    def __init__(self):
        self.queues: Dict[str, List[Dict[str, Any]]] = {}
        self.outstanding: Dict[str, Dict[str, Any]] = {}
        self.results: Dict[str, Dict[str, Any]] = {}
        self.lock = asyncio.Lock()

    async def enqueue_task(self, collection_id: str, task: Dict[str, Any]) -> str:
        task_id = task.get("task_id") or str(uuid.uuid4())
        async with self.lock:
            self.queues.setdefault(collection_id, []).append({**task, "task_id": task_id})
        return task_id

    async def next_task(self, collection_id: str) -> Optional[Dict[str, Any]]:
        async with self.lock:
            queue = self.queues.get(collection_id)
            if not queue:
                return None
            task = queue.pop(0)
            self.outstanding[task["task_id"]] = task
            return task

    async def record_result(self, task_id: str, count: Optional[int]) -> bool:
        async with self.lock:
            if self.outstanding.pop(task_id, None) is None:
                return False
            self.results[task_id] = {"task_id": task_id, "count": count, "cancelled": count is None}
            return True

    async def get_result(self, task_id: str) -> Optional[Dict[str, Any]]:
        async with self.lock:
            return self.results.get(task_id)
