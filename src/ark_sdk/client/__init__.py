"""
HTTP service clients for ark_sdk.

Exports:
    - SyncServiceClient / AsyncServiceClient: base-URL-bound httpx clients
    - IspServiceClient / AsyncIspServiceClient: tenant-aware clients
    - create_isp_service_client, from_credential, refresh_client: factories
    - ClientConfig, TimeoutConfig, ServiceProfile: configuration
    - snake_case_keys: recursive camelCase to snake_case key conversion
    - ArkResponse, raise_for_status: responses
"""
from .types import ArkResponse, HttpMethod, QueryParams, RefreshCallback, AsyncRefreshCallback
from .config import (
    ClientConfig,
    ResolvedConfig,
    ServiceProfile,
    TimeoutConfig,
    normalize_base_url,
    resolve_config,
    snake_case_keys,
    to_snake_case,
)
from .request_builder import build_auth_header, build_url
from .cookies import cookies_from_metadata, decode_cookie_blob, encode_cookie_blob
from .base_client import AsyncServiceClient, SyncServiceClient
from .response import raise_for_status
from .isp import (
    ISP_DEFAULT_HEADERS,
    AsyncIspServiceClient,
    IspServiceClient,
    create_isp_service_client,
    from_credential,
    issuer_base_url,
    refresh_client,
)

__all__ = [
    "ArkResponse",
    "HttpMethod",
    "QueryParams",
    "RefreshCallback",
    "AsyncRefreshCallback",
    "ClientConfig",
    "ResolvedConfig",
    "ServiceProfile",
    "TimeoutConfig",
    "normalize_base_url",
    "resolve_config",
    "snake_case_keys",
    "to_snake_case",
    "build_auth_header",
    "build_url",
    "cookies_from_metadata",
    "decode_cookie_blob",
    "encode_cookie_blob",
    "SyncServiceClient",
    "AsyncServiceClient",
    "raise_for_status",
    "ISP_DEFAULT_HEADERS",
    "IspServiceClient",
    "AsyncIspServiceClient",
    "create_isp_service_client",
    "from_credential",
    "issuer_base_url",
    "refresh_client",
]
