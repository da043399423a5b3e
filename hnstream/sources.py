import logging

import httpx

from hnstream.config import RequestConfig
from hnstream.errors import FatalFetchError

logger = logging.getLogger(__name__)


async def fetch_story_ids(client: httpx.AsyncClient, config: RequestConfig) -> list:
    """Fetch the ordered list of new story ids, most recent first."""
    url = config.list_url()
    resp = await client.get(url, headers=dict(config.headers))
    if not resp.is_success:
        raise FatalFetchError(url, resp.status_code)
    ids = resp.json()
    if not isinstance(ids, list):
        raise FatalFetchError(url, message="Story list is not a JSON array")
    logger.info("Fetched %d story ids", len(ids))
    return ids


async def fetch_item(client: httpx.AsyncClient, config: RequestConfig, story_id) -> str | None:
    """Fetch one item body, verbatim.

    A non-success status is logged and returns None so the caller can skip
    the id. Transport errors are left to propagate.
    """
    url = config.item_url(story_id)
    resp = await client.get(url, headers=dict(config.headers))
    if not resp.is_success:
        logger.error("Failed to fetch %s, skipping", resp.url)
        return None
    return resp.text
