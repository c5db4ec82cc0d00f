"""
Cookie blob encoding.

Credentials carry cookies as base64 of a JSON document. Both a plain
``{"name": "value"}`` object and a list of ``{"name": ..., "value": ...}``
records are accepted.
"""
import base64
import binascii
import json
import logging
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

COOKIES_METADATA_KEY = "cookies"


def decode_cookie_blob(blob: str) -> Dict[str, str]:
    """
    Decode a base64 JSON cookie blob.

    Raises:
        ValueError: If the blob is not base64 JSON of a supported shape
    """
    try:
        raw = base64.b64decode(blob, validate=True)
        document = json.loads(raw)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid cookie blob: {e}") from e

    if isinstance(document, dict):
        return {str(name): str(value) for name, value in document.items()}
    if isinstance(document, list):
        cookies: Dict[str, str] = {}
        for entry in document:
            if not isinstance(entry, dict) or "name" not in entry:
                raise ValueError("Invalid cookie blob: cookie records need a name")
            cookies[str(entry["name"])] = str(entry.get("value", ""))
        return cookies
    raise ValueError("Invalid cookie blob: expected a JSON object or list")


def encode_cookie_blob(cookies: Mapping[str, str]) -> str:
    """Encode cookies as base64 of a JSON object."""
    return base64.b64encode(json.dumps(dict(cookies)).encode("utf-8")).decode("ascii")


def cookies_from_metadata(metadata: Mapping[str, Any]) -> Optional[Dict[str, str]]:
    """
    Cookies carried in credential metadata, or None when absent.

    A malformed blob is logged and ignored; the token alone may still be
    enough to authenticate.
    """
    blob = metadata.get(COOKIES_METADATA_KEY)
    if not blob:
        return None
    try:
        return decode_cookie_blob(blob)
    except ValueError as e:
        logger.warning(f"cookies_from_metadata: Ignoring cookie metadata: {e}")
        return None
