"""
Example usage of interceptors with HttpClient.

This example wires up the bundled interceptors against a public echo API:
- LoggingInterceptor logs every request and response
- CacheInterceptor answers repeated GETs without touching the network
- RetryInterceptor resends requests whose transport call failed
- a small custom interceptor adds a correlation id to every request
"""

import asyncio
import logging
import uuid

from fetch_client import CacheInterceptor
from fetch_client import HttpClient
from fetch_client import HttpResponseError
from fetch_client import Interceptor
from fetch_client import LoggingInterceptor
from fetch_client import RetryInterceptor
from fetch_client import json

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def add_correlation_id(request):
    request.headers["X-Correlation-Id"] = str(uuid.uuid4())
    return request


async def main():
    client = HttpClient(timeout=10.0)
    client.configure_with(
        lambda config: config.with_base_url("https://httpbin.org/")
        .with_defaults({"headers": {"Accept": "application/json"}})
        .with_interceptor(Interceptor(request=add_correlation_id))
        .with_interceptor(LoggingInterceptor())
        .with_interceptor(CacheInterceptor(ttl=30))
        .with_interceptor(RetryInterceptor(client.transport, attempts=3))
        .use_standard_configuration()
    )

    async with client:
        first = await client.fetch("get")
        logger.info(f"First call: {first.status}")

        # Served by CacheInterceptor, the transport is not called again
        second = await client.fetch("get")
        logger.info(f"Second call: {second.status}")

        created = await client.fetch("post", {"method": "POST", "body": json({"name": "demo"})})
        logger.info(f"Echoed body: {(await created.json())['json']}")

        try:
            await client.fetch("status/404")
        except HttpResponseError as exc:
            logger.info(f"Rejected as expected: {exc.response.status}")


if __name__ == "__main__":
    asyncio.run(main())
