"""
Deployment environments and their root domains.

Each environment maps to one root DNS domain. The mapping is used both to
build tenant host names and to infer the environment back from a host or
from a token's platform domain.
"""
import logging
import re
from enum import Enum
from typing import Dict, Optional

from .settings import load_settings

logger = logging.getLogger(__name__)

DEPLOY_ENV = "DEPLOY_ENV"
IDENTITY_TENANT_NAME = "isp"


class DeploymentEnvironment(str, Enum):
    """Deployment environment of a tenant."""

    PROD = "prod"
    GOV_PROD = "gov-prod"


ROOT_DOMAIN: Dict[DeploymentEnvironment, str] = {
    DeploymentEnvironment.PROD: "cyberark.cloud",
    DeploymentEnvironment.GOV_PROD: "cyberarkgov.cloud",
}

IDENTITY_ENV_URLS: Dict[DeploymentEnvironment, str] = {
    DeploymentEnvironment.PROD: "idaptive.app",
    DeploymentEnvironment.GOV_PROD: "id.cyberarkgov.cloud",
}

IDENTITY_TENANT_NAMES: Dict[DeploymentEnvironment, str] = {
    DeploymentEnvironment.PROD: IDENTITY_TENANT_NAME,
    DeploymentEnvironment.GOV_PROD: IDENTITY_TENANT_NAME,
}

IDENTITY_GENERATED_SUFFIX_PATTERN: Dict[DeploymentEnvironment, str] = {
    DeploymentEnvironment.PROD: r"cyberark\.cloud\.\d.*",
    DeploymentEnvironment.GOV_PROD: r"cyberarkgov\.cloud\.\d.*",
}


def parse_environment(value: Optional[str]) -> Optional[DeploymentEnvironment]:
    """
    Convert a raw string into a DeploymentEnvironment.

    Returns None for empty input. Unknown values are logged and ignored.
    """
    if value is None or value == "":
        return None
    if isinstance(value, DeploymentEnvironment):
        return value
    try:
        return DeploymentEnvironment(value)
    except ValueError:
        logger.warning(f"parse_environment: Unknown deployment environment '{value}', ignoring")
        return None


def get_deploy_env() -> DeploymentEnvironment:
    """
    Return the process-wide default environment.

    Reads DEPLOY_ENV; falls back to production when unset or unknown.
    """
    env = parse_environment(load_settings().DEPLOY_ENV)
    if env is None:
        logger.debug("get_deploy_env: DEPLOY_ENV not set, defaulting to prod")
        return DeploymentEnvironment.PROD
    return env


def environment_for_domain(domain: str) -> Optional[DeploymentEnvironment]:
    """Exact match of a root domain to its environment."""
    for env, root_domain in ROOT_DOMAIN.items():
        if root_domain == domain:
            return env
    return None


def check_if_identity_generated_suffix(tenant_suffix: str, env: DeploymentEnvironment) -> bool:
    """Check whether a tenant suffix looks auto-generated for the environment."""
    pattern = IDENTITY_GENERATED_SUFFIX_PATTERN.get(env)
    if pattern is None:
        return False
    return re.match(pattern, tenant_suffix) is not None


def is_gov_cloud() -> bool:
    """True when AWS_REGION (or AWS_DEFAULT_REGION) names a GovCloud region."""
    settings = load_settings()
    region_name = settings.AWS_REGION or settings.AWS_DEFAULT_REGION or ""
    return region_name.startswith("us-gov")
