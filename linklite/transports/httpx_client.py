from typing import Optional

import httpx
from pydantic import ValidationError

from linklite.core.config import ConnectorApiOptions
from linklite.core.errors import RemoteLogicalFailureError, RemoteRequestError, ResponseFormatError
from linklite.core.models import QueryTask, QueryTaskResult, ResultResponse
from linklite.core.observer import ClientObserver, LoggingObserver
from linklite.core.transport import BaseClientTransport

FETCH_QUERY_ENDPOINT = "Fetch Query Endpoint"
SUBMIT_RESULT_ENDPOINT = "Submit Results Endpoint"


class QueryTaskClient(BaseClientTransport):
    """Asynchronous connector a collection uses to pull query tasks and push results.

    Holds no per-call state, so one instance can serve concurrent callers.
    Connectivity faults (``httpx.RequestError``) are not wrapped.
    """

    def __init__(
            self,
            options: ConnectorApiOptions,
            observer: Optional[ClientObserver] = None,
            http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.options = options
        self.observer = observer or LoggingObserver()
        self.base_url = options.base_url.rstrip("/") + "/"
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient()

    def _url(self, endpoint: str) -> str:
        # Relative to base_url, including any path the base carries
        return self.base_url + endpoint.lstrip("/")

    async def fetch_query(self, collection_id: str) -> Optional[QueryTask]:
        """
        Try and get a job for a collection.
        Returns the task to run, or None if none are waiting.
        """
        response = await self.http_client.post(
            self._url(self.options.fetch_query_endpoint),
            json={"collection_id": collection_id},
        )

        if not response.is_success:
            self.observer.request_failed(FETCH_QUERY_ENDPOINT, response.status_code)
            raise RemoteRequestError(FETCH_QUERY_ENDPOINT, response.status_code)

        if response.status_code == httpx.codes.NO_CONTENT:
            self.observer.no_task_waiting(collection_id)
            return None

        body = response.text
        try:
            task = QueryTask.model_validate_json(body)
        except ValidationError as e:
            self.observer.invalid_response(FETCH_QUERY_ENDPOINT, body, e)
            raise ResponseFormatError(FETCH_QUERY_ENDPOINT, body, e) from e

        self.observer.task_found(task)
        return task

    async def submit_query_result(self, task_id: str, count: int) -> None:
        if count is None:
            raise ValueError("count is required; use cancel_query_task to cancel a task")
        await self._post_result(task_id, count)

    async def cancel_query_task(self, task_id: str) -> None:
        await self._post_result(task_id)

    async def _post_result(self, task_id: str, count: Optional[int] = None) -> None:
        """Post to the results endpoint; a 2xx only counts if the body also says OK."""
        payload = QueryTaskResult(task_id=task_id, count=count)
        response = await self.http_client.post(
            self._url(self.options.submit_result_endpoint),
            json=payload.model_dump(),
        )

        if not response.is_success:
            self.observer.request_failed(SUBMIT_RESULT_ENDPOINT, response.status_code)
            raise RemoteRequestError(SUBMIT_RESULT_ENDPOINT, response.status_code)

        body = response.text
        try:
            result = ResultResponse.model_validate_json(body)
        except ValidationError as e:
            self.observer.invalid_response(SUBMIT_RESULT_ENDPOINT, body, e)
            raise ResponseFormatError(SUBMIT_RESULT_ENDPOINT, body, e) from e

        if not result.is_success:
            self.observer.unsuccessful_result(SUBMIT_RESULT_ENDPOINT, body)
            raise RemoteLogicalFailureError(SUBMIT_RESULT_ENDPOINT, result.status, body)

        self.observer.result_acknowledged(task_id, count)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()
