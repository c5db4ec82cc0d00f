"""
ark_sdk - Shared core of a multi-service tenant SDK.

Turns a bearer credential into an authenticated HTTP client for a named
backend service, resolves the tenant host from tokens, subdomains or URLs,
refreshes credentials on request, and lists paginated endpoints lazily.

Usage:
    from ark_sdk import (
        ArkApi, ArkCredential, ArkIspBaseService, ServiceConfig,
        ServiceProfile, StaticAuthenticator,
    )

    class NetworksService(ArkIspBaseService):
        SERVICE_CONFIG = ServiceConfig("cmgr", required_authenticator_names=("isp",))
        SERVICE_PROFILE = ServiceProfile(service_name="connectormanagement")

    api = ArkApi([StaticAuthenticator("isp", ArkCredential(token=jwt_token))])
    with api.service(NetworksService).list_pages("api/pool-service/networks", dict) as pages:
        for page in pages:
            ...
"""
from ._version import __version__
from .errors import (
    ArkAuthenticatorNotFoundError,
    ArkError,
    ArkMissingAuthenticatorError,
    ArkPaginationError,
    ArkRegistrationConflictError,
    ArkServerStatusError,
    ArkServiceNotFoundError,
    ArkTenantResolutionError,
    ArkTransportError,
)
from .settings import ArkSdkSettings, get_settings, load_settings
from .env import DeploymentEnvironment, ROOT_DOMAIN, get_deploy_env, is_gov_cloud
from .credentials import ArkCredential, Authenticator, StaticAuthenticator
from .tenant import ResolvedEndpoint, resolve_service_url, tenant_id_from_token
from .client import (
    ArkResponse,
    AsyncIspServiceClient,
    AsyncServiceClient,
    ClientConfig,
    IspServiceClient,
    ServiceProfile,
    SyncServiceClient,
    TimeoutConfig,
    create_isp_service_client,
    from_credential,
    issuer_base_url,
    raise_for_status,
    refresh_client,
)
from .pagination import (
    AsyncPageIterator,
    ContinuationTokenStrategy,
    NextLinkStrategy,
    Page,
    PageFilter,
    PageIterator,
    PaginationOutcome,
    alist_pages,
    list_pages,
)
from .services import (
    ArkApi,
    ArkBaseService,
    ArkIspBaseService,
    ServiceConfig,
    ServiceRegistry,
    register_service,
    select_authenticators,
    service_registry,
)


__all__ = [
    # Errors
    "ArkError",
    "ArkTenantResolutionError",
    "ArkTransportError",
    "ArkServerStatusError",
    "ArkRegistrationConflictError",
    "ArkServiceNotFoundError",
    "ArkMissingAuthenticatorError",
    "ArkAuthenticatorNotFoundError",
    "ArkPaginationError",
    # Settings
    "ArkSdkSettings",
    "get_settings",
    "load_settings",
    # Environment
    "DeploymentEnvironment",
    "ROOT_DOMAIN",
    "get_deploy_env",
    "is_gov_cloud",
    # Credentials
    "ArkCredential",
    "Authenticator",
    "StaticAuthenticator",
    # Tenant
    "ResolvedEndpoint",
    "resolve_service_url",
    "tenant_id_from_token",
    # Client
    "ArkResponse",
    "ClientConfig",
    "TimeoutConfig",
    "ServiceProfile",
    "SyncServiceClient",
    "AsyncServiceClient",
    "IspServiceClient",
    "AsyncIspServiceClient",
    "create_isp_service_client",
    "from_credential",
    "issuer_base_url",
    "raise_for_status",
    "refresh_client",
    # Pagination
    "Page",
    "PageFilter",
    "PageIterator",
    "AsyncPageIterator",
    "PaginationOutcome",
    "ContinuationTokenStrategy",
    "NextLinkStrategy",
    "list_pages",
    "alist_pages",
    # Services
    "ServiceConfig",
    "ServiceRegistry",
    "service_registry",
    "register_service",
    "select_authenticators",
    "ArkBaseService",
    "ArkIspBaseService",
    "ArkApi",
]
