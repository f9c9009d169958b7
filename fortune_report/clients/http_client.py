import logging
from typing import Optional

import aiohttp

logger = logging.getLogger(__name__)

# 进程内唯一的共享 aiohttp.ClientSession
async_aiohttp_client: Optional[aiohttp.ClientSession] = None


def initialize_shared_client() -> aiohttp.ClientSession:
    """Create the shared session at startup. Must be called inside a running event loop."""
    global async_aiohttp_client
    if async_aiohttp_client is None or async_aiohttp_client.closed:
        logger.info("Creating shared aiohttp.ClientSession...")
        connector = aiohttp.TCPConnector(limit=100, enable_cleanup_closed=True)
        # 超时沿用 aiohttp 默认值
        async_aiohttp_client = aiohttp.ClientSession(connector=connector)
    else:
        logger.warning("Shared aiohttp.ClientSession already open, skipping re-initialization.")
    return async_aiohttp_client


async def close_shared_client():
    global async_aiohttp_client
    if async_aiohttp_client and not async_aiohttp_client.closed:
        await async_aiohttp_client.close()
        logger.info("Shared aiohttp.ClientSession closed.")
    async_aiohttp_client = None
