import argparse
import asyncio
import json
import os

from dotenv import load_dotenv

from linklite.core.config import ConnectorApiOptions, PollingOptions, get_logger
from linklite.core.models import QueryTask
from linklite.node import CollectionNode
from linklite.transports.httpx_client import QueryTaskClient

logger = get_logger(__name__)


async def main(env_file: str):
    load_dotenv(env_file, override=True)

    # 1. Load configurations
    api_options = ConnectorApiOptions.from_env()
    polling_options = PollingOptions.from_env()
    with open(os.getenv("COUNTS_FILE")) as f:
        counts = json.load(f)

    logger.info(f"Booting Collection Node: {polling_options.collection_id}")

    async def lookup_count(task: QueryTask) -> int:
        """
        Stand-in query engine: looks up precomputed counts keyed by project.
        Anything it cannot answer raises, which cancels the task.
        """
        return int(counts[task.payload["project"]])

    async with QueryTaskClient(api_options) as client:
        node = CollectionNode(
            collection_id=polling_options.collection_id,
            transport=client,
            execute_fn=lookup_count,
            polling_interval=polling_options.query_polling_interval,
        )

        logger.info("Listening for distributed queries...")
        await node.heartbeat_loop()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="LinkLite Collection Node")
    parser.add_argument("--config", type=str, required=True, help="Path to the .env profile")
    args = parser.parse_args()
    asyncio.run(main(args.config))
