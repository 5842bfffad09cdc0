import asyncio

import httpx

from linklite.brokers.in_memory import InMemoryBroker
from linklite.core.config import ConnectorApiOptions, get_logger
from linklite.core.models import QueryTask
from linklite.node import CollectionNode
from linklite.transports.fastapi_server import FastAPIServer
from linklite.transports.httpx_client import QueryTaskClient

logger = get_logger(__name__)

HOST, PORT = "127.0.0.1", 8010
BASE_URL = f"http://{HOST}:{PORT}"


async def mock_query_engine(task: QueryTask) -> int:
    await asyncio.sleep(1)  # Simulating query execution time
    if task.payload.get("unsupported"):
        raise RuntimeError("query uses features this collection cannot evaluate")
    return 42


async def main():
    broker = InMemoryBroker()
    server = FastAPIServer(broker)
    options = ConnectorApiOptions(
        base_url=BASE_URL,
        fetch_query_endpoint=server.fetch_query_endpoint,
        submit_result_endpoint=server.submit_result_endpoint,
    )

    async with QueryTaskClient(options) as client:
        node_a = CollectionNode("Biobank_A", client, mock_query_engine, polling_interval=2)
        node_b = CollectionNode("Biobank_B", client, mock_query_engine, polling_interval=2)

        # Simulate a researcher distributing queries
        async def simulate_queries():
            await asyncio.sleep(3)
            async with httpx.AsyncClient(base_url=BASE_URL) as operator:
                await operator.post("/api/v1/tasks", json={"collection_id": "Biobank_A", "task_id": "req_1"})
                await operator.post("/api/v1/tasks", json={
                    "collection_id": "Biobank_B", "task_id": "req_2", "query": {"unsupported": True}
                })
                await asyncio.sleep(5)
                for task_id in ("req_1", "req_2"):
                    response = await operator.get(f"/api/v1/tasks/{task_id}/result")
                    logger.info(f"[Researcher] {task_id}: {response.json()}")

        await asyncio.gather(
            server.run(HOST, PORT),
            node_a.heartbeat_loop(),
            node_b.heartbeat_loop(),
            simulate_queries()
        )


if __name__ == "__main__":
    asyncio.run(main())
