from typing import Optional

from linklite.core.config import get_logger
from linklite.core.models import QueryTask

logger = get_logger(__name__)


class ClientObserver:
    """Receives notifications about what the client saw on the wire.

    Every hook is a no-op here, so subclasses only override what they need.
    """

    def no_task_waiting(self, collection_id: str) -> None:
        pass

    def task_found(self, task: QueryTask) -> None:
        pass

    def request_failed(self, endpoint: str, status_code: int) -> None:
        pass

    def invalid_response(self, endpoint: str, body: str, error: Exception) -> None:
        pass

    def unsuccessful_result(self, endpoint: str, body: str) -> None:
        pass

    def result_acknowledged(self, task_id: str, count: Optional[int]) -> None:
        pass


class LoggingObserver(ClientObserver):
    """Default observer: writes each event to the project logger."""

    def no_task_waiting(self, collection_id: str) -> None:
        logger.info(f"No Query Tasks waiting for {collection_id}")

    def task_found(self, task: QueryTask) -> None:
        logger.info(f"Found Query Task with Id: {task.task_id}")

    def request_failed(self, endpoint: str, status_code: int) -> None:
        logger.error(f"{endpoint} Request failed: {status_code}")

    def invalid_response(self, endpoint: str, body: str, error: Exception) -> None:
        logger.error(f"Invalid Response Format from {endpoint}: {error}")
        logger.debug(f"Invalid Response Body: {body}")

    def unsuccessful_result(self, endpoint: str, body: str) -> None:
        logger.error(f"Unsuccessful Response from {endpoint}")
        logger.debug(f"Response Body: {body}")

    def result_acknowledged(self, task_id: str, count: Optional[int]) -> None:
        if count is None:
            logger.info(f"Query Task {task_id} cancelled")
        else:
            logger.info(f"Result for Query Task {task_id} submitted: {count}")
