from typing import Any, Dict, Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Response
from pydantic import BaseModel, Field

from linklite.core.broker import BaseTaskBroker
from linklite.core.config import APP_VERSION, get_logger
from linklite.core.models import QueryTaskResult, SUCCESS_STATUS
from linklite.core.transport import BaseServerTransport

# Configure module-level logger
logger = get_logger(__name__)

FAILURE_STATUS = "ERROR"


# ==========================================
# 1. Pydantic Data Models
# ==========================================
class FetchQueryRequest(BaseModel):
    collection_id: str = Field(..., description="The collection (biobank) asking for work")


class TaskSubmission(BaseModel):
    collection_id: str = Field(..., description="Collection whose queue receives the task")
    task_id: Optional[str] = Field(None, description="Explicit task id; generated when omitted")
    query: Dict[str, Any] = Field(default_factory=dict, description="Opaque query payload")


# ==========================================
# 2. Stub Query-Distribution API
# ==========================================
class FastAPIServer(BaseServerTransport):
    """
    Local stand-in for the remote query-distribution API.
    Mirrors its contract, including 2xx answers that carry a failure status.
    """

    def __init__(
            self,
            broker: BaseTaskBroker,
            fetch_query_endpoint: str = "/link_connector_api/task/nextjob",
            submit_result_endpoint: str = "/link_connector_api/task/result",
    ):
        super().__init__(broker)
        self.fetch_query_endpoint = "/" + fetch_query_endpoint.lstrip("/")
        self.submit_result_endpoint = "/" + submit_result_endpoint.lstrip("/")
        self.app = FastAPI(
            title="LinkLite Query Distribution Stub",
            version=APP_VERSION,
            description="Query task queue for local collection-node simulation."
        )
        self._setup_routes()

    def _setup_routes(self):
        """Maps HTTP endpoints to the underlying Broker logic."""

        @self.app.post(self.fetch_query_endpoint)
        async def fetch_query(request: FetchQueryRequest):
            """1. Collections poll this endpoint for their next task."""
            task = await self.broker.next_task(request.collection_id)
            if task is None:
                return Response(status_code=204)
            logger.info(f"Collection {request.collection_id} pulled task {task['task_id']}.")
            return task

        @self.app.post(self.submit_result_endpoint)
        async def submit_result(result: QueryTaskResult):
            """2. Collections post a count here, or a null count to cancel."""
            accepted = await self.broker.record_result(result.task_id, result.count)
            if not accepted:
                logger.warning(f"Result for unknown or closed task {result.task_id} rejected.")
                return {"status": FAILURE_STATUS}
            logger.info(f"Task {result.task_id} closed (count={result.count}).")
            return {"status": SUCCESS_STATUS}

        @self.app.post("/api/v1/tasks", status_code=201)
        async def enqueue_task(submission: TaskSubmission):
            """3. Operators drop a new query into a collection's queue."""
            task = dict(submission.query)
            if submission.task_id:
                task["task_id"] = submission.task_id
            task_id = await self.broker.enqueue_task(submission.collection_id, task)
            logger.info(f"Queued task {task_id} for {submission.collection_id}.")
            return {"task_id": task_id}

        @self.app.get("/api/v1/tasks/{task_id}/result")
        async def get_result(task_id: str):
            """4. Operators read back what a collection reported."""
            result = await self.broker.get_result(task_id)
            if result is None:
                raise HTTPException(status_code=404, detail=f"No result for task {task_id}")
            return result

    async def run(self, host: str = "0.0.0.0", port: int = 8010):
        """Starts the Uvicorn web server."""
        logger.info(f"Booting LinkLite stub API on {host}:{port}")

        try:
            await uvicorn.Server(
                config=uvicorn.Config(self.app, host=host, port=port, log_level="info")
            ).serve()
        except Exception as e:
            logger.critical(f"Server encountered a fatal error: {e}", exc_info=True)
            raise
