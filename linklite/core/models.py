from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

SUCCESS_STATUS = "OK"


class QueryTask(BaseModel):
    """A query issued by the remote service for one collection.

    Only the task id is interpreted here; the rest of the payload is kept
    untouched for whatever executes the query.
    """
    model_config = ConfigDict(extra="allow", frozen=True)

    task_id: str = Field(..., description="Opaque id assigned by the remote service")

    @property
    def payload(self) -> dict:
        return dict(self.model_extra or {})


class QueryTaskResult(BaseModel):
    """Body of a submit-result request. A missing count means cancellation."""
    task_id: str
    count: Optional[int] = Field(None, description="Query result, or None to cancel the task")

    @property
    def is_cancellation(self) -> bool:
        return self.count is None


class ResultResponse(BaseModel):
    # Required, but null is a valid (failing) status
    status: Optional[str] = Field(...)

    @property
    def is_success(self) -> bool:
        return self.status == SUCCESS_STATUS
