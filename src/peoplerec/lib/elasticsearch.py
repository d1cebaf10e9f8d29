"""Shared Elasticsearch utilities.

Helpers for creating the client and working with Elasticsearch responses
that are used by the profile store.
"""

import logging
import os

from elastic_transport import ObjectApiResponse
from elasticsearch import AsyncElasticsearch

logger = logging.getLogger(__name__)

DEFAULT_ES_URL = "http://localhost:9200"


def create_es_client() -> AsyncElasticsearch:
    """Build an ``AsyncElasticsearch`` client from ``ES_URL`` / ``ES_API_KEY``."""
    url = os.environ.get("ES_URL", DEFAULT_ES_URL)
    api_key = os.environ.get("ES_API_KEY") or None
    logger.info("Connecting to Elasticsearch at %s", url)
    return AsyncElasticsearch(url, api_key=api_key)


def unwrap_es_response(resp) -> dict:
    """Unwrap an Elasticsearch response, handling both ObjectApiResponse and dict.

    Raises ``TypeError`` if the response type is unexpected.
    """
    if isinstance(resp, ObjectApiResponse):
        return resp.body
    elif isinstance(resp, dict):
        return resp
    else:
        logger.error("Unexpected Elasticsearch response type: %s", type(resp))
        raise TypeError(f"Unexpected Elasticsearch response type: {type(resp)}")


def iter_hits(resp) -> list[dict]:
    """Return the list of hits from a search response (possibly empty)."""
    data = unwrap_es_response(resp)
    return data.get("hits", {}).get("hits", []) or []
