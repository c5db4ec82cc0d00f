"""
Configuration for ark_sdk.client.
"""
import json
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Union
from urllib.parse import urlparse

from ..credentials import DEFAULT_AUTH_HEADER_NAME, DEFAULT_TOKEN_TYPE, ArkCredential
from .._version import __version__
from ..settings import load_settings


USER_AGENT = f"ark-sdk-core/{__version__}"


@dataclass
class TimeoutConfig:
    """Timeout configuration in seconds."""

    connect: float = 5.0
    read: float = 30.0
    write: float = 10.0


@dataclass
class ClientConfig:
    """
    Service client configuration.

    ``verify_ssl`` and ``trace`` default to the environment settings when
    left as None.
    """

    base_url: str
    token: str = ""
    token_type: str = DEFAULT_TOKEN_TYPE
    auth_header_name: str = DEFAULT_AUTH_HEADER_NAME
    headers: Dict[str, str] = field(default_factory=dict)
    cookies: Dict[str, str] = field(default_factory=dict)
    timeout: Union[TimeoutConfig, float, None] = None
    verify_ssl: Optional[bool] = None
    refresh_callback: Optional[Callable[[Any], Any]] = None
    trace: Optional[bool] = None


# The base URL of a service client built by the tenant-aware factory can be
# replaced after resolution, either by a fixed URL or by a callable that
# receives the credential and the resolved URL.
BaseUrlOverride = Union[str, Callable[[ArkCredential, str], str], None]


@dataclass(frozen=True)
class ServiceProfile:
    """
    Per-backend client variations, kept as data.

    Attributes:
        service_name: Host label of the backend (empty for the tenant root host)
        separator: Placed between tenant subdomain and service name
        base_path: Path appended to the resolved URL
        extra_headers: Headers the backend requires on every call
        base_url_override: Replacement base URL, fixed or computed
    """

    service_name: str = ""
    separator: str = "."
    base_path: str = ""
    extra_headers: Dict[str, str] = field(default_factory=dict)
    base_url_override: BaseUrlOverride = None


@dataclass
class ResolvedConfig:
    """Client configuration with defaults applied."""

    base_url: str
    token: str
    token_type: str
    auth_header_name: str
    headers: Dict[str, str]
    cookies: Dict[str, str]
    timeout: TimeoutConfig
    verify_ssl: bool
    refresh_callback: Optional[Callable[[Any], Any]]
    trace: bool


class DefaultSerializer:
    """Default JSON serializer."""

    def serialize(self, data: Any) -> str:
        """Serialize data to JSON string."""
        return json.dumps(data)

    def deserialize(self, text: str) -> Any:
        """Deserialize JSON string to data."""
        return json.loads(text)


default_serializer = DefaultSerializer()


def to_snake_case(name: str) -> str:
    """
    Convert a camelCase, PascalCase or kebab-case key to snake_case.

    Acronyms stay together: ``userID`` -> ``user_id``,
    ``HTTPProxy`` -> ``http_proxy``.
    """
    name = re.sub(r"[\s\-.]+", "_", name)
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    return name.lower()


def snake_case_keys(data: Any) -> Any:
    """Recursively convert dict keys to snake_case; values are kept."""
    if isinstance(data, dict):
        return {
            to_snake_case(key) if isinstance(key, str) else key: snake_case_keys(value)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [snake_case_keys(item) for item in data]
    return data


def normalize_base_url(base_url: str) -> str:
    """Prefix https:// when no scheme is present."""
    if base_url and "://" not in base_url:
        return "https://" + base_url
    return base_url


def normalize_timeout(timeout: Union[TimeoutConfig, float, None]) -> TimeoutConfig:
    """Normalize timeout config, defaulting from settings."""
    if timeout is None:
        settings = load_settings()
        return TimeoutConfig(
            connect=settings.ARK_SDK_CONNECT_TIMEOUT,
            read=settings.ARK_SDK_READ_TIMEOUT,
            write=settings.ARK_SDK_WRITE_TIMEOUT,
        )
    if isinstance(timeout, (int, float)):
        return TimeoutConfig(connect=timeout, read=timeout, write=timeout)
    return timeout


def validate_base_url(base_url: str) -> None:
    """Validate a normalized base URL."""
    if not base_url:
        raise ValueError("base_url is required")
    parsed = urlparse(base_url)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError(f"Invalid base_url: {base_url}")


def resolve_config(config: ClientConfig) -> ResolvedConfig:
    """Resolve client configuration with defaults."""
    base_url = normalize_base_url(config.base_url)
    validate_base_url(base_url)
    if not config.auth_header_name:
        raise ValueError("auth_header_name must be a non-empty string")

    settings = load_settings()
    verify_ssl = settings.verify_certificates if config.verify_ssl is None else config.verify_ssl
    trace = settings.ARK_SDK_HTTP_TRACE if config.trace is None else config.trace

    return ResolvedConfig(
        base_url=base_url,
        token=config.token or "",
        token_type=config.token_type or DEFAULT_TOKEN_TYPE,
        auth_header_name=config.auth_header_name,
        headers=dict(config.headers),
        cookies=dict(config.cookies),
        timeout=normalize_timeout(config.timeout),
        verify_ssl=verify_ssl,
        refresh_callback=config.refresh_callback,
        trace=trace,
    )
