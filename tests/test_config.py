import pytest
from pydantic import ValidationError

from linklite.core.config import ConnectorApiOptions, PollingOptions
from linklite.core.errors import ConfigurationError


@pytest.fixture
def rquest_env(monkeypatch):
    monkeypatch.setenv("RQUEST_BASE_URL", "https://rquest.example.org/connector")
    monkeypatch.setenv("RQUEST_FETCH_QUERY_ENDPOINT", "task/nextjob")
    monkeypatch.setenv("RQUEST_SUBMIT_RESULT_ENDPOINT", "task/result")
    return monkeypatch


def test_api_options_from_env(rquest_env):
    options = ConnectorApiOptions.from_env()

    assert options.base_url == "https://rquest.example.org/connector"
    assert options.fetch_query_endpoint == "task/nextjob"
    assert options.submit_result_endpoint == "task/result"


def test_api_options_missing_variable(rquest_env):
    rquest_env.delenv("RQUEST_SUBMIT_RESULT_ENDPOINT")

    with pytest.raises(ConfigurationError, match="RQUEST_SUBMIT_RESULT_ENDPOINT"):
        ConnectorApiOptions.from_env()


def test_api_options_are_immutable(rquest_env):
    options = ConnectorApiOptions.from_env()

    with pytest.raises(ValidationError):
        options.base_url = "https://elsewhere.example.org"


def test_polling_options_defaults(monkeypatch):
    monkeypatch.delenv("RQUEST_QUERY_POLLING_INTERVAL", raising=False)
    monkeypatch.delenv("RQUEST_COLLECTION_ID", raising=False)

    options = PollingOptions.from_env()

    assert options.query_polling_interval == 5
    assert options.collection_id == ""


def test_polling_options_from_env(monkeypatch):
    monkeypatch.setenv("RQUEST_QUERY_POLLING_INTERVAL", "30")
    monkeypatch.setenv("RQUEST_COLLECTION_ID", "RQ-CC-1234")

    options = PollingOptions.from_env()

    assert options.query_polling_interval == 30
    assert options.collection_id == "RQ-CC-1234"


@pytest.mark.parametrize("interval", ["soon", "0", "-5"])
def test_polling_options_rejects_bad_interval(monkeypatch, interval):
    monkeypatch.setenv("RQUEST_QUERY_POLLING_INTERVAL", interval)

    with pytest.raises(ConfigurationError):
        PollingOptions.from_env()
