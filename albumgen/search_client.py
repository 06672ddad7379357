"""Client for the external text-to-image search service.

The service embeds a text query and returns gallery filenames ranked by
similarity. Request body: {"text": "..."}; response body: {"filenames": [...]},
most relevant first.
"""

import os

import requests

SEARCH_ENDPOINT = os.environ.get("ALBUMGEN_SEARCH_URL", "http://localhost:8000/search")
SEARCH_TIMEOUT = 30
MAX_MATCHES = 16


class SearchServiceError(Exception):
    """Raised when the search service cannot be reached or answers badly."""
    pass


def search_images(text, endpoint=SEARCH_ENDPOINT, timeout=SEARCH_TIMEOUT):
    """Send a text query to the search service.

    Args:
        text: Free-text description of the photos wanted
        endpoint: URL of the search endpoint
        timeout: Request timeout in seconds

    Returns:
        Ranked list of bare filenames, most relevant first

    Raises:
        SearchServiceError: On an empty query, transport failure, non-2xx
            status or a body that is not {"filenames": [str, ...]}
    """
    if not text or not text.strip():
        raise SearchServiceError("Search text is empty")

    try:
        response = requests.post(endpoint, json={"text": text.strip()}, timeout=timeout)
        response.raise_for_status()
        payload = response.json()
    except requests.RequestException as e:
        raise SearchServiceError(f"Search request to {endpoint} failed: {e}") from e
    except ValueError as e:
        raise SearchServiceError(f"Search service returned invalid JSON: {e}") from e

    filenames = payload.get("filenames") if isinstance(payload, dict) else None
    if not isinstance(filenames, list) or not all(isinstance(f, str) for f in filenames):
        raise SearchServiceError("Search response has no 'filenames' list")
    return filenames


def top_matches(filenames, limit=MAX_MATCHES):
    """The best `limit` matches, order preserved."""
    return list(filenames)[:limit]
