"""
Tests for tenant/resolver.py
Logic testing: resolution order, environment overrides, error paths
"""
import logging

import pytest

from ark_sdk.credentials import ArkCredential
from ark_sdk.env import DeploymentEnvironment
from ark_sdk.errors import ArkTenantResolutionError
from ark_sdk.tenant import (
    decode_unverified_claims,
    env_from_credential,
    resolve_service_url,
    resolve_tenant_env,
    tenant_id_from_token,
)


class TestTokenClaims:
    # Happy Path: subdomain and platform domain claims, tenant root host
    def test_root_host_from_claims(self, token_factory):
        token = token_factory(subdomain="acme", platform_domain="cyberark.cloud")
        endpoint = resolve_service_url(token=token)
        assert endpoint.base_url == "https://acme.cyberark.cloud"
        assert endpoint.subdomain == "acme"
        assert endpoint.environment is DeploymentEnvironment.PROD

    # Happy Path: service name inserted before the root domain
    def test_service_host_from_claims(self, token_factory):
        token = token_factory(subdomain="acme", platform_domain="cyberark.cloud")
        endpoint = resolve_service_url(service_name="dpa", token=token, separator=".")
        assert endpoint.base_url == "https://acme.dpa.cyberark.cloud"

    # Path: custom separator
    def test_dash_separator(self, token_factory):
        token = token_factory(subdomain="acme", platform_domain="cyberark.cloud")
        endpoint = resolve_service_url(service_name="jit", token=token, separator="-")
        assert endpoint.base_url == "https://acme-jit.cyberark.cloud"

    # Decision: shell. prefix stripped when a service name is given
    def test_shell_prefix_stripped_for_service(self, token_factory):
        token = token_factory(subdomain="acme", platform_domain="shell.cyberark.cloud")
        endpoint = resolve_service_url(service_name="dpa", token=token)
        assert endpoint.base_url == "https://acme.dpa.cyberark.cloud"
        assert endpoint.root_domain == "cyberark.cloud"

    # Decision: shell. prefix kept for the tenant root host
    def test_shell_prefix_kept_without_service(self, token_factory):
        token = token_factory(subdomain="acme", platform_domain="shell.cyberark.cloud")
        endpoint = resolve_service_url(token=token)
        assert endpoint.base_url == "https://acme.shell.cyberark.cloud"

    # Decision: platform domain overrides the environment
    def test_platform_domain_overrides_env(self, token_factory, monkeypatch):
        monkeypatch.setenv("DEPLOY_ENV", "prod")
        token = token_factory(subdomain="acme", platform_domain="cyberarkgov.cloud")
        endpoint = resolve_service_url(service_name="dpa", token=token)
        assert endpoint.base_url == "https://acme.dpa.cyberarkgov.cloud"
        assert endpoint.environment is DeploymentEnvironment.GOV_PROD

    # Decision: subdomain claim outranks explicit inputs
    def test_claim_outranks_explicit_subdomain(self, token_factory):
        token = token_factory(subdomain="acme")
        endpoint = resolve_service_url(
            token=token, tenant_subdomain="other", base_tenant_url="https://third.cyberark.cloud"
        )
        assert endpoint.subdomain == "acme"


class TestExplicitInputs:
    # Decision: explicit subdomain outranks explicit URL
    def test_explicit_subdomain(self):
        endpoint = resolve_service_url(
            service_name="dpa", tenant_subdomain="acme", base_tenant_url="https://other.cyberark.cloud"
        )
        assert endpoint.base_url == "https://acme.dpa.cyberark.cloud"

    # Boundary: scheme present or absent in explicit URL
    @pytest.mark.parametrize(
        "base_tenant_url",
        ["https://acme.cyberark.cloud", "acme.cyberark.cloud", "acme.cyberark.cloud/some/path"],
    )
    def test_subdomain_from_url(self, base_tenant_url):
        endpoint = resolve_service_url(base_tenant_url=base_tenant_url)
        assert endpoint.subdomain == "acme"
        assert endpoint.base_url == "https://acme.cyberark.cloud"

    # Decision: explicit environment
    def test_explicit_env(self):
        endpoint = resolve_service_url(
            service_name="dpa", tenant_subdomain="acme", tenant_env=DeploymentEnvironment.GOV_PROD
        )
        assert endpoint.base_url == "https://acme.dpa.cyberarkgov.cloud"

    # Decision: DEPLOY_ENV used when no environment given
    def test_deploy_env_hint(self, monkeypatch):
        monkeypatch.setenv("DEPLOY_ENV", "gov-prod")
        endpoint = resolve_service_url(tenant_subdomain="acme")
        assert endpoint.base_url == "https://acme.cyberarkgov.cloud"


class TestUniqueNameFallback:
    # Path: subdomain derived from the email domain of unique_name
    def test_unique_name(self, token_factory):
        token = token_factory(unique_name="admin@acme.cyberark.cloud")
        endpoint = resolve_service_url(service_name="dpa", token=token)
        assert endpoint.base_url == "https://acme.dpa.cyberark.cloud"

    # Decision: unique_name under the gov domain switches environment
    def test_unique_name_gov(self, token_factory):
        token = token_factory(unique_name="admin@acme.cyberarkgov.cloud")
        endpoint = resolve_service_url(token=token)
        assert endpoint.base_url == "https://acme.cyberarkgov.cloud"
        assert endpoint.environment is DeploymentEnvironment.GOV_PROD

    # Error Path: unrelated email domain
    def test_unique_name_unknown_domain(self, token_factory):
        token = token_factory(unique_name="admin@example.com")
        with pytest.raises(ArkTenantResolutionError):
            resolve_service_url(token=token)


class TestResolutionErrors:
    # Error Path: nothing to resolve from
    def test_no_inputs(self, caplog):
        with caplog.at_level(logging.ERROR, logger="ark_sdk.tenant.resolver"):
            with pytest.raises(ArkTenantResolutionError, match="Failed to resolve tenant subdomain"):
                resolve_service_url(service_name="dpa")
        assert "Failed to resolve tenant subdomain" in caplog.text

    # Error Path: token is not a JWT
    def test_invalid_token(self):
        with pytest.raises(ArkTenantResolutionError, match="Failed to decode token claims"):
            resolve_service_url(token="not-a-jwt")

    def test_decode_unverified_claims(self, token_factory):
        assert decode_unverified_claims(token_factory(a="b")) == {"a": "b"}


class TestIdempotence:
    def test_same_inputs_same_url(self, token_factory):
        token = token_factory(subdomain="acme", platform_domain="shell.cyberark.cloud")
        inputs = dict(
            service_name="dpa",
            tenant_subdomain="x",
            base_tenant_url="y.cyberark.cloud",
            tenant_env="prod",
            token=token,
        )
        assert resolve_service_url(**inputs).base_url == resolve_service_url(**inputs).base_url


class TestTenantHelpers:
    def test_resolve_tenant_env_string(self):
        assert resolve_tenant_env("gov-prod") is DeploymentEnvironment.GOV_PROD
        assert resolve_tenant_env(None) is DeploymentEnvironment.PROD

    def test_tenant_id(self, acme_token):
        assert tenant_id_from_token(acme_token) == "tenant-123"

    # Error Path: missing claim or empty token
    def test_tenant_id_missing(self, token_factory):
        with pytest.raises(ArkTenantResolutionError, match="Failed to retrieve tenant id"):
            tenant_id_from_token(token_factory(subdomain="acme"))
        with pytest.raises(ArkTenantResolutionError):
            tenant_id_from_token("")

    # Decision: username under a root domain gives URL and env
    def test_env_from_username(self):
        credential = ArkCredential(token="t", username="admin@acme.cyberarkgov.cloud")
        assert env_from_credential(credential) == (
            "acme.cyberarkgov.cloud",
            DeploymentEnvironment.GOV_PROD,
        )

    # Decision: metadata env hint when username has no root domain
    def test_env_from_metadata(self):
        credential = ArkCredential(token="t", username="admin", metadata={"env": "gov-prod"})
        assert env_from_credential(credential) == ("", DeploymentEnvironment.GOV_PROD)

    # Decision: DEPLOY_ENV last
    def test_env_from_deploy_env(self, monkeypatch):
        monkeypatch.setenv("DEPLOY_ENV", "gov-prod")
        credential = ArkCredential(token="t")
        assert env_from_credential(credential) == ("", DeploymentEnvironment.GOV_PROD)
