import logging
import os
from pathlib import Path

import colorlog
from colorlog import ColoredFormatter
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from linklite.core.errors import ConfigurationError

load_dotenv()

ROOT_DIR = Path(__file__).resolve().parent.parent.parent

LOG_LEVEL = os.getenv("LINKLITE_LOG_LEVEL", "INFO")
APP_VERSION = "0.1.0"

DEFAULT_POLLING_INTERVAL = 5

handler = colorlog.StreamHandler()
handler.setFormatter(ColoredFormatter(
    '%(log_color)s%(asctime)s - %(levelname)s - %(name)s - %(message)s',
    log_colors={
        'INFO': 'green',
        'DEBUG': 'cyan',
        'WARNING': 'yellow',
        'ERROR': 'red',
        'CRITICAL': 'bold_red'
    }
))


def get_logger(module_name: str):
    logger = colorlog.getLogger(module_name)
    if handler not in logger.handlers:
        logger.addHandler(handler)
    logger.setLevel(level=LOG_LEVEL)
    return logger


def mute_transport_logging(level=logging.WARNING):
    # The HTTP stack logs every request at INFO
    for name in ("httpx", "httpcore", "uvicorn.access"):
        lg = logging.getLogger(name)
        lg.setLevel(level)


mute_transport_logging()


def _require_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise ConfigurationError(f"Missing required environment variable: {name}")
    return value


class ConnectorApiOptions(BaseModel):
    """Where the query-distribution API lives. Fixed for the client's lifetime."""
    model_config = ConfigDict(frozen=True)

    base_url: str = Field(..., min_length=1, description="Base URL of the remote service")
    fetch_query_endpoint: str = Field(..., description="Path of the fetch endpoint, relative to base_url")
    submit_result_endpoint: str = Field(..., description="Path of the submit/cancel endpoint, relative to base_url")

    @classmethod
    def from_env(cls) -> "ConnectorApiOptions":
        return cls(
            base_url=_require_env("RQUEST_BASE_URL"),
            fetch_query_endpoint=_require_env("RQUEST_FETCH_QUERY_ENDPOINT"),
            submit_result_endpoint=_require_env("RQUEST_SUBMIT_RESULT_ENDPOINT"),
        )


class PollingOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    query_polling_interval: int = Field(DEFAULT_POLLING_INTERVAL, gt=0, description="Seconds between fetches")
    collection_id: str = Field("", description="Collection (biobank) id polled for tasks")

    @classmethod
    def from_env(cls) -> "PollingOptions":
        interval = os.getenv("RQUEST_QUERY_POLLING_INTERVAL")
        try:
            return cls(
                query_polling_interval=int(interval) if interval else DEFAULT_POLLING_INTERVAL,
                collection_id=os.getenv("RQUEST_COLLECTION_ID", ""),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid polling configuration: {e}") from e
