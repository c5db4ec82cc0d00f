"""
Helpers for masking secrets before they reach logs or traces.
"""
from typing import Dict, Iterable, Mapping, Optional

SENSITIVE_HEADERS = frozenset({"authorization", "x-api-key", "cookie", "set-cookie"})


def mask_sensitive(value: Optional[str], visible_chars: int = 10) -> str:
    """Mask sensitive value for safe logging."""
    if value is None:
        return "<None>"
    if not isinstance(value, str):
        return "<invalid-type>"
    if len(value) <= visible_chars:
        return "*" * len(value)
    return value[:visible_chars] + "*" * (len(value) - visible_chars)


def mask_headers(
    headers: Mapping[str, str],
    extra_sensitive: Iterable[str] = (),
    visible_chars: int = 15,
) -> Dict[str, str]:
    """Mask auth and cookie headers, plus any extra header names given."""
    sensitive = SENSITIVE_HEADERS | {name.lower() for name in extra_sensitive}
    masked = dict(headers)
    for key in masked:
        if key.lower() in sensitive:
            masked[key] = mask_sensitive(masked[key], visible_chars)
    return masked
