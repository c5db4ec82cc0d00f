"""
Tenant-aware service clients.

Builds service clients whose base URL is derived from the tenant (token
claims, explicit subdomain or URL, or the username) and which carry the
headers the platform expects on every call.
"""
import logging
from typing import Dict, Optional, Union
from urllib.parse import urlparse

import httpx

from ..credentials import (
    DEFAULT_AUTH_HEADER_NAME,
    DEFAULT_TOKEN_TYPE,
    ArkCredential,
    Authenticator,
)
from ..env import DeploymentEnvironment
from ..masking import mask_sensitive
from ..tenant import (
    ResolvedEndpoint,
    decode_unverified_claims,
    env_from_credential,
    resolve_service_url,
    tenant_id_from_token,
)
from .base_client import AsyncServiceClient, SyncServiceClient, _ServiceClientBase
from .config import ClientConfig, ServiceProfile
from .cookies import cookies_from_metadata
from .types import AsyncRefreshCallback, RefreshCallback

logger = logging.getLogger(__name__)

ISP_DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "*/*",
    "Connection": "keep-alive",
}


class _IspClientMixin:
    """Tenant details shared by the sync and async tenant-aware clients."""

    _endpoint: ResolvedEndpoint

    @property
    def endpoint(self) -> ResolvedEndpoint:
        """Result of tenant resolution at construction."""
        return self._endpoint

    @property
    def tenant_env(self) -> DeploymentEnvironment:
        return self._endpoint.environment

    def tenant_id(self) -> str:
        """
        ``tenant_id`` claim of the current token.

        Raises:
            ArkTenantResolutionError: If the token has no tenant id
        """
        return tenant_id_from_token(self.token)  # type: ignore[attr-defined]


class IspServiceClient(_IspClientMixin, SyncServiceClient):
    """Synchronous tenant-aware service client."""

    def __init__(
        self,
        endpoint: ResolvedEndpoint,
        config: ClientConfig,
        httpx_client: Optional[httpx.Client] = None,
    ):
        self._endpoint = endpoint
        super().__init__(config, httpx_client)


class AsyncIspServiceClient(_IspClientMixin, AsyncServiceClient):
    """Asynchronous tenant-aware service client."""

    def __init__(
        self,
        endpoint: ResolvedEndpoint,
        config: ClientConfig,
        httpx_client: Optional[httpx.AsyncClient] = None,
    ):
        self._endpoint = endpoint
        super().__init__(config, httpx_client)


AnyIspClient = Union[IspServiceClient, AsyncIspServiceClient]


def _origin(base_url: str) -> str:
    parsed = urlparse(base_url)
    return f"{parsed.scheme}://{parsed.netloc}"


def create_isp_service_client(
    service_name: str = "",
    tenant_subdomain: str = "",
    base_tenant_url: str = "",
    tenant_env: Union[DeploymentEnvironment, str, None] = None,
    token: str = "",
    token_type: str = DEFAULT_TOKEN_TYPE,
    auth_header_name: str = DEFAULT_AUTH_HEADER_NAME,
    separator: str = ".",
    base_path: str = "",
    cookies: Optional[Dict[str, str]] = None,
    extra_headers: Optional[Dict[str, str]] = None,
    refresh_callback: Union[RefreshCallback, AsyncRefreshCallback, None] = None,
    async_client: bool = False,
    httpx_client: Union[httpx.Client, httpx.AsyncClient, None] = None,
    trace: Optional[bool] = None,
) -> AnyIspClient:
    """
    Create a tenant-aware service client.

    The base URL is resolved from the token, subdomain or tenant URL (see
    resolve_service_url) and ``base_path`` is appended. Origin and Referer
    are set to the resolved host.

    Raises:
        ArkTenantResolutionError: If no tenant subdomain can be derived
    """
    endpoint = resolve_service_url(
        service_name=service_name,
        tenant_subdomain=tenant_subdomain,
        base_tenant_url=base_tenant_url,
        tenant_env=tenant_env,
        token=token,
        separator=separator,
    )

    base_url = endpoint.base_url
    if base_path:
        base_url = f"{base_url}/{base_path.strip('/')}"

    origin = _origin(endpoint.base_url)
    headers = dict(ISP_DEFAULT_HEADERS)
    headers["Origin"] = origin
    headers["Referer"] = origin
    if extra_headers:
        headers.update(extra_headers)

    config = ClientConfig(
        base_url=base_url,
        token=token,
        token_type=token_type,
        auth_header_name=auth_header_name,
        headers=headers,
        cookies=dict(cookies or {}),
        refresh_callback=refresh_callback,
        trace=trace,
    )

    logger.info(
        f"create_isp_service_client: service='{service_name}' base_url={base_url} "
        f"env={endpoint.environment.value} token={mask_sensitive(token)}"
    )
    if async_client:
        return AsyncIspServiceClient(endpoint, config, httpx_client)
    return IspServiceClient(endpoint, config, httpx_client)


def from_credential(
    credential: ArkCredential,
    profile: ServiceProfile,
    refresh_callback: Union[RefreshCallback, AsyncRefreshCallback, None] = None,
    async_client: bool = False,
    httpx_client: Union[httpx.Client, httpx.AsyncClient, None] = None,
    trace: Optional[bool] = None,
) -> AnyIspClient:
    """
    Create a tenant-aware client from a credential and a service profile.

    The username supplies the tenant URL and environment when it is under
    a known root domain; otherwise the ``env`` metadata hint, then
    DEPLOY_ENV. Cookies in the credential metadata are installed.
    """
    base_tenant_url, env = env_from_credential(credential)
    client = create_isp_service_client(
        service_name=profile.service_name,
        base_tenant_url=base_tenant_url,
        tenant_env=env,
        token=credential.token,
        token_type=credential.token_type,
        auth_header_name=credential.auth_header_name,
        separator=profile.separator,
        base_path=profile.base_path,
        cookies=cookies_from_metadata(credential.metadata),
        extra_headers=profile.extra_headers,
        refresh_callback=refresh_callback,
        async_client=async_client,
        httpx_client=httpx_client,
        trace=trace,
    )

    override = profile.base_url_override
    if override is not None:
        base_url = override if isinstance(override, str) else override(credential, client.base_url)
        if base_url:
            client.base_url = base_url
    return client


def refresh_client(client: _ServiceClientBase, authenticator: Authenticator) -> None:
    """
    Refresh a client's token and cookies from an authenticator.

    Errors from the authenticator propagate and leave the client unchanged.
    """
    credential = authenticator.load_credential(refresh=True)
    client.update_token(credential.token, credential.token_type)
    cookies = cookies_from_metadata(credential.metadata)
    if cookies:
        client.update_cookies(cookies)
    logger.info(
        f"refresh_client: refreshed {client.base_url} via '{authenticator.authenticator_name}'"
    )


def issuer_base_url(credential: ArkCredential, resolved_base_url: str) -> str:
    """
    Base URL of the token issuer (``iss`` claim), for backends that must
    be called on the identity host that issued the token.

    Falls back to the resolved URL when the claim is missing.
    """
    issuer = decode_unverified_claims(credential.token).get("iss")
    if not isinstance(issuer, str) or not issuer:
        return resolved_base_url
    if "://" not in issuer:
        issuer = "https://" + issuer
    parsed = urlparse(issuer)
    if not parsed.netloc:
        return resolved_base_url
    return f"{parsed.scheme}://{parsed.netloc}"
