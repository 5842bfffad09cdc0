import asyncio
from typing import Awaitable, Callable, Optional

import httpx

from linklite.core.config import DEFAULT_POLLING_INTERVAL, get_logger
from linklite.core.models import QueryTask
from linklite.core.outcomes import Failed, Outcome, TaskReturned, cancel_outcome, fetch_outcome, submit_outcome
from linklite.core.transport import BaseClientTransport

logger = get_logger(__name__)


class CollectionNode:
    """The collection-side poller. Wakes up, fetches, executes, reports, sleeps."""

    def __init__(
            self,
            collection_id: str,
            transport: BaseClientTransport,
            execute_fn: Callable[[QueryTask], Awaitable[int]],
            polling_interval: int = DEFAULT_POLLING_INTERVAL,
    ):
        self.collection_id = collection_id
        self.transport = transport
        self.execute_fn = execute_fn  # Query engine; any exception means the task gets cancelled
        self.polling_interval = polling_interval

    async def poll_once(self) -> Optional[Outcome]:
        """Runs one fetch/execute/report cycle and returns how it ended.

        Returns None when the remote could not be reached at all.
        """
        try:
            outcome = await fetch_outcome(self.transport, self.collection_id)
            if not isinstance(outcome, TaskReturned):
                if isinstance(outcome, Failed):
                    logger.error(f"[{self.collection_id}] Fetching query failed: {outcome.error}")
                return outcome

            task = outcome.task
            logger.info(f"[{self.collection_id}] Processing Task: {task.task_id}")
            try:
                count = await self.execute_fn(task)
                if not isinstance(count, int) or isinstance(count, bool):
                    raise TypeError(f"query engine returned {count!r} instead of a count")
            except Exception as e:
                logger.error(f"[{self.collection_id}] Query {task.task_id} could not be executed: {e}")
                outcome = await cancel_outcome(self.transport, task.task_id)
            else:
                outcome = await submit_outcome(self.transport, task.task_id, count)

            if isinstance(outcome, Failed):
                logger.error(f"[{self.collection_id}] Reporting task {task.task_id} failed: {outcome.error}")
            return outcome

        except httpx.RequestError as e:
            logger.error(f"[{self.collection_id}] Query distribution API unreachable: {e}")
            return None

    async def heartbeat_loop(self, max_cycles: Optional[int] = None):
        if not self.collection_id:
            raise ValueError("A collection id is required to poll for query tasks")

        logger.info(f"[{self.collection_id}] Polling for query tasks every {self.polling_interval}s...")
        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            await self.poll_once()
            cycles += 1
            if max_cycles is None or cycles < max_cycles:
                await asyncio.sleep(self.polling_interval)
