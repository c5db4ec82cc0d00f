"""
Type definitions for tenant resolution.
"""
from dataclasses import dataclass

from ..env import DeploymentEnvironment


@dataclass(frozen=True)
class ResolvedEndpoint:
    """Fully-qualified base URL of a tenant service and its environment."""

    base_url: str
    environment: DeploymentEnvironment
    subdomain: str
    root_domain: str
