# =============================================================================
# core/http.py  -  Shared HTTP plumbing for the data.go.kr APIs
# =============================================================================
#
# Both public APIs wrap their payload in the same envelope:
#
#   {"response": {"header": {"resultCode": "...", "resultMsg": "..."},
#                 "body":   {"items": {"item": [...]},
#                            "numOfRows": 10, "pageNo": 1, "totalCount": 42}}}
#
# Only the success code differs ("00" for weather, "0000" for tourism).
# get_envelope() performs the GET, checks the header, and hands back the body.
# No retries: a failed request raises and the caller decides.
# =============================================================================

import json
import logging
from urllib.error import URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from core.errors import ApiFormatError, ApiResponseError, ApiTransportError

logger = logging.getLogger(__name__)


def build_query(params: dict) -> str:
    """URL-encode params, dropping None and empty-string values."""
    kept = {k: v for k, v in params.items() if v is not None and v != ""}
    return urlencode({k: str(v) for k, v in kept.items()})


def get_envelope(
    url: str,
    params: dict,
    *,
    timeout: float,
    service: str,
    success_code: str,
) -> dict:
    """GET `url` with `params` and return the envelope's body.

    Raises:
        ApiTransportError: network/HTTP failure.
        ApiFormatError: undecodable bytes or a non-JSON, non-object answer (the
            APIs reply with an XML error page for bad service keys).
        ApiResponseError: the header's resultCode is not `success_code`.
    """
    full_url = f"{url}?{build_query(params)}"
    logger.debug("GET %s", url)

    try:
        req = Request(full_url, headers={"Accept": "application/json"})
        with urlopen(req, timeout=timeout) as response:
            raw = response.read()
    except (URLError, OSError) as e:
        raise ApiTransportError(f"{service} request failed: {e}") from e

    try:
        data = json.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise ApiFormatError(f"{service} returned a response that is not UTF-8") from e
    except json.JSONDecodeError as e:
        raise ApiFormatError(
            f"{service} returned a non-JSON response: {raw[:120]!r}"
        ) from e

    if not isinstance(data, dict):
        raise ApiFormatError(f"{service} returned {type(data).__name__}, not an envelope")
    envelope = data.get("response")
    if not isinstance(envelope, dict):
        envelope = {}
    header = envelope.get("header")
    if not isinstance(header, dict):
        header = {}
    result_code = header.get("resultCode")
    if result_code != success_code:
        raise ApiResponseError(
            service,
            str(result_code),
            header.get("resultMsg") or f"{service} API error",
        )
    body = envelope.get("body")
    return body if isinstance(body, dict) else {}


def extract_items(body: dict) -> list[dict]:
    """Normalize body["items"]["item"] into a list.

    The APIs send a list for many rows, a bare object for one row, and an
    empty string instead of an object when there are no rows at all.
    Rows that are not objects are dropped.
    """
    items = body.get("items")
    if not isinstance(items, dict):
        return []
    item = items.get("item")
    if item is None:
        return []
    rows = item if isinstance(item, list) else [item]
    return [row for row in rows if isinstance(row, dict)]
