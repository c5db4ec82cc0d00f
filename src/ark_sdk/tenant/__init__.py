"""
Tenant resolution for ark_sdk.
"""
from .types import ResolvedEndpoint
from .resolver import (
    decode_unverified_claims,
    env_from_credential,
    resolve_service_url,
    resolve_tenant_env,
    tenant_id_from_token,
)

__all__ = [
    "ResolvedEndpoint",
    "decode_unverified_claims",
    "env_from_credential",
    "resolve_service_url",
    "resolve_tenant_env",
    "tenant_id_from_token",
]
