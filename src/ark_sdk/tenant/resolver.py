"""
Tenant host resolution.

Derives the base URL of a tenant service from, in order of authority:
token claims, an explicit subdomain, an explicit tenant URL, and finally
the email domain in the token's ``unique_name`` claim.

Tokens are decoded WITHOUT signature verification. The claims are a
routing hint used to pick a host name, never a trust boundary; the
backend authenticates the token on every request.
"""
import logging
from typing import Any, Dict, Optional, Tuple, Union
from urllib.parse import urlparse

import jwt

from ..credentials import ArkCredential
from ..env import (
    ROOT_DOMAIN,
    DeploymentEnvironment,
    environment_for_domain,
    get_deploy_env,
    parse_environment,
)
from ..errors import ArkTenantResolutionError
from .types import ResolvedEndpoint

logger = logging.getLogger(__name__)

SHELL_DOMAIN_PREFIX = "shell."

EnvInput = Union[DeploymentEnvironment, str, None]


def decode_unverified_claims(token: str) -> Dict[str, Any]:
    """
    Decode JWT claims without verifying the signature.

    Raises:
        ArkTenantResolutionError: If the token is not a decodable JWT
    """
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError as e:
        logger.error(f"decode_unverified_claims: Failed to decode token: {e}")
        raise ArkTenantResolutionError(f"Failed to decode token claims: {e}") from e
    return claims


def resolve_tenant_env(tenant_env: EnvInput = None) -> DeploymentEnvironment:
    """Explicit environment, else DEPLOY_ENV, else production."""
    env = parse_environment(tenant_env)
    if env is not None:
        return env
    return get_deploy_env()


def _subdomain_from_url(base_tenant_url: str) -> str:
    """First host label of a tenant URL; scheme is optional."""
    if "://" not in base_tenant_url:
        base_tenant_url = "https://" + base_tenant_url
    hostname = urlparse(base_tenant_url).hostname or ""
    return hostname.split(".")[0]


def _subdomain_from_unique_name(
    unique_name: str,
) -> Optional[Tuple[str, str, DeploymentEnvironment]]:
    """Match the email domain of ``unique_name`` against known root domains."""
    parts = unique_name.split("@")
    if len(parts) < 2:
        return None
    domain_part = parts[1]
    for env, root_domain in ROOT_DOMAIN.items():
        index = domain_part.find(root_domain)
        if index == -1:
            continue
        subdomain = domain_part[:index].rstrip(".")
        if subdomain:
            return subdomain, root_domain, env
    return None


def resolve_service_url(
    service_name: str = "",
    tenant_subdomain: str = "",
    base_tenant_url: str = "",
    tenant_env: EnvInput = None,
    token: str = "",
    separator: str = ".",
) -> ResolvedEndpoint:
    """
    Resolve the base URL of a tenant service.

    Args:
        service_name: Host label of the service; empty for the tenant root host
        tenant_subdomain: Explicit tenant subdomain
        base_tenant_url: Explicit tenant URL, scheme optional
        tenant_env: Explicit environment; DEPLOY_ENV and then prod when unset
        token: Bearer token whose claims may name the tenant
        separator: Placed between the subdomain and the service name

    Returns:
        ResolvedEndpoint with base_url ``https://{sub}{sep}{service}.{root}``
        or ``https://{sub}.{root}`` when service_name is empty

    Raises:
        ArkTenantResolutionError: If no subdomain can be derived
    """
    env = resolve_tenant_env(tenant_env)
    platform_domain = ROOT_DOMAIN[env]
    chosen_subdomain = ""

    if token:
        claims = decode_unverified_claims(token)
        subdomain_claim = claims.get("subdomain")
        if isinstance(subdomain_claim, str) and subdomain_claim:
            chosen_subdomain = subdomain_claim
            logger.debug(f"resolve_service_url: subdomain from token claim: {chosen_subdomain}")
        platform_claim = claims.get("platform_domain")
        if isinstance(platform_claim, str) and platform_claim:
            platform_domain = platform_claim
            if platform_domain.startswith(SHELL_DOMAIN_PREFIX) and service_name:
                platform_domain = platform_domain[len(SHELL_DOMAIN_PREFIX):]
            claim_env = environment_for_domain(platform_domain)
            if claim_env is not None:
                env = claim_env
            logger.debug(
                f"resolve_service_url: platform domain from token claim: {platform_domain}, env={env.value}"
            )

    if not chosen_subdomain and tenant_subdomain:
        chosen_subdomain = tenant_subdomain
        logger.debug(f"resolve_service_url: using explicit subdomain: {chosen_subdomain}")

    if not chosen_subdomain and base_tenant_url:
        chosen_subdomain = _subdomain_from_url(base_tenant_url)
        logger.debug(
            f"resolve_service_url: subdomain from tenant url {base_tenant_url}: {chosen_subdomain}"
        )

    if not chosen_subdomain and token:
        claims = decode_unverified_claims(token)
        unique_name = claims.get("unique_name")
        if isinstance(unique_name, str):
            match = _subdomain_from_unique_name(unique_name)
            if match is not None:
                chosen_subdomain, platform_domain, env = match
                logger.debug(
                    f"resolve_service_url: subdomain from unique_name: {chosen_subdomain}, env={env.value}"
                )

    if not chosen_subdomain:
        logger.error(
            f"resolve_service_url: Failed to resolve tenant subdomain for service '{service_name}'"
        )
        raise ArkTenantResolutionError("Failed to resolve tenant subdomain")

    if service_name:
        base_url = f"https://{chosen_subdomain}{separator}{service_name}.{platform_domain}"
    else:
        base_url = f"https://{chosen_subdomain}.{platform_domain}"

    logger.debug(f"resolve_service_url: resolved {base_url}")
    return ResolvedEndpoint(
        base_url=base_url,
        environment=env,
        subdomain=chosen_subdomain,
        root_domain=platform_domain,
    )


def tenant_id_from_token(token: str) -> str:
    """
    Read the ``tenant_id`` claim of a token.

    Raises:
        ArkTenantResolutionError: If the token is empty or lacks the claim
    """
    if not token:
        raise ArkTenantResolutionError("Failed to retrieve tenant id")
    tenant_id = decode_unverified_claims(token).get("tenant_id")
    if not isinstance(tenant_id, str) or not tenant_id:
        raise ArkTenantResolutionError("Failed to retrieve tenant id")
    return tenant_id


def env_from_credential(credential: ArkCredential) -> Tuple[str, DeploymentEnvironment]:
    """
    Derive the base tenant URL hint and environment from a credential.

    A username under a known root domain (``user@tenant.cyberark.cloud``)
    provides both. Otherwise the ``env`` metadata hint is used, then
    DEPLOY_ENV, then production.
    """
    base_tenant_url = ""
    env: Optional[DeploymentEnvironment] = None
    username = credential.username or ""
    if "@" in username:
        for candidate_env, root_domain in ROOT_DOMAIN.items():
            if root_domain in username:
                base_tenant_url = username.split("@")[1]
                env = candidate_env
                break
    if env is None:
        env = parse_environment(credential.metadata.get("env"))
    if env is None:
        env = get_deploy_env()
    logger.debug(f"env_from_credential: base_tenant_url={base_tenant_url!r}, env={env.value}")
    return base_tenant_url, env
