"""
Request builder utilities for ark_sdk.client.
"""
import logging
from typing import Any, Dict, Optional, Union
from urllib.parse import quote, urlencode

from .types import QueryParams

logger = logging.getLogger(__name__)

BASIC_TOKEN_TYPE = "Basic"


def build_url(
    base_url: str,
    route: str = "",
    query: Optional[QueryParams] = None,
) -> str:
    """
    Join a route to the base URL.

    Each route segment is percent-escaped, so identifiers containing
    reserved characters stay inside their segment.
    """
    url = base_url
    if route:
        escaped = "/".join(quote(segment, safe="") for segment in route.split("/"))
        if not url.endswith("/") and not escaped.startswith("/"):
            url += "/"
        elif url.endswith("/") and escaped.startswith("/"):
            escaped = escaped[1:]
        url += escaped

    if query:
        query_str = urlencode({k: _query_value(v) for k, v in query.items() if v is not None})
        if query_str:
            separator = "&" if "?" in url else "?"
            url = f"{url}{separator}{query_str}"

    return url


def _query_value(value: Union[str, int, bool]) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_auth_header(
    token: str,
    token_type: str,
    auth_header_name: str,
) -> Dict[str, str]:
    """
    Auth header for a token.

    ``Basic`` tokens are already base64 credentials and always go under
    Authorization; other types render as ``{token_type} {token}`` under
    the configured header name.
    """
    if not token:
        return {}
    if token_type == BASIC_TOKEN_TYPE:
        return {"Authorization": f"{BASIC_TOKEN_TYPE} {token}"}
    if token_type:
        return {auth_header_name: f"{token_type} {token}"}
    return {auth_header_name: token}


def build_headers(
    default_headers: Dict[str, str],
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, str]:
    """Merge per-request headers over the client's headers."""
    result = dict(default_headers)
    if headers:
        result.update(headers)
    return result


def build_body(
    json_data: Optional[Any] = None,
    serializer: Optional[Any] = None,
) -> Optional[str]:
    """Serialize a JSON body, if any."""
    if json_data is not None and serializer:
        return serializer.serialize(json_data)
    return None
