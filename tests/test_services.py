"""
Tests for the services package
Logic testing: registration conflicts, authenticator selection, service wiring
"""
import logging

import httpx
import pytest

from ark_sdk.client import AsyncIspServiceClient, IspServiceClient, ServiceProfile
from ark_sdk.credentials import ArkCredential, StaticAuthenticator
from ark_sdk.errors import (
    ArkAuthenticatorNotFoundError,
    ArkMissingAuthenticatorError,
    ArkRegistrationConflictError,
    ArkServiceNotFoundError,
)
from ark_sdk.pagination import PaginationOutcome
from ark_sdk.services import (
    ArkApi,
    ArkBaseService,
    ArkIspBaseService,
    ServiceConfig,
    ServiceRegistry,
    register_service,
    select_authenticators,
    service_registry,
)

CMGR_CONFIG = ServiceConfig("cmgr", required_authenticator_names=("isp",))


class CmgrService(ArkIspBaseService):
    SERVICE_CONFIG = CMGR_CONFIG
    SERVICE_PROFILE = ServiceProfile(service_name="connectormanagement", base_path="api/pool-service")


class AsyncCmgrService(CmgrService):
    ASYNC_CLIENT = True


class AuditService(ArkBaseService):
    SERVICE_NAME = "audit"


def authenticator(name, token="t"):
    return StaticAuthenticator(name, ArkCredential(token=token))


@pytest.fixture
def registry():
    return ServiceRegistry()


@pytest.fixture
def default_registry():
    service_registry.clear()
    yield service_registry
    service_registry.clear()


class TestServiceConfig:
    def test_sequences_become_tuples(self):
        config = ServiceConfig("x", required_authenticator_names=["isp"], optional_authenticator_names=["a"])
        assert config.required_authenticator_names == ("isp",)
        assert config.optional_authenticator_names == ("a",)

    # Error Path: a bare string is not a list of names
    def test_string_names_rejected(self):
        with pytest.raises(ValueError, match="required_authenticator_names must be a sequence of names, not a str"):
            ServiceConfig("svc", required_authenticator_names="isp")
        with pytest.raises(ValueError, match="optional_authenticator_names"):
            ServiceConfig("svc", optional_authenticator_names="pvwa")

    # Error Path: empty name
    def test_empty_name(self):
        with pytest.raises(ValueError, match="service_name must be a non-empty string"):
            ServiceConfig("")


class TestServiceRegistry:
    def test_register_and_get(self, registry):
        registry.register(CMGR_CONFIG)
        assert registry.get_service_config("cmgr") is CMGR_CONFIG
        assert registry.has_service("cmgr")
        assert "cmgr" in registry
        assert len(registry) == 1

    # Error Path: duplicate name keeps the first registration
    def test_duplicate_rejected(self, registry, caplog):
        first = ServiceConfig("dpa", required_authenticator_names=("isp",))
        second = ServiceConfig("dpa", required_authenticator_names=("other",))
        registry.register(first)
        with caplog.at_level(logging.ERROR, logger="ark_sdk.services.registry"):
            with pytest.raises(ArkRegistrationConflictError, match=r"Service \[dpa\] is already registered"):
                registry.register(second)
        assert registry.get_service_config("dpa") is first
        assert "already registered" in caplog.text

    # Error Path: unknown name
    def test_missing(self, registry):
        with pytest.raises(ArkServiceNotFoundError, match=r"Service \[nope\] is not registered"):
            registry.get_service_config("nope")
        with pytest.raises(KeyError):
            registry.get_service_config("nope")

    def test_listing_order(self, registry):
        a, b, c = ServiceConfig("a"), ServiceConfig("b"), ServiceConfig("c")
        registry.register(a, top_level=True)
        registry.register(b)
        registry.register(c, top_level=True)
        assert registry.all_service_configs() == [a, b, c]
        assert registry.top_level_service_configs() == [a, c]

    def test_clear(self, registry):
        registry.register(ServiceConfig("a"), top_level=True)
        registry.clear()
        assert registry.all_service_configs() == []
        assert registry.top_level_service_configs() == []
        assert not registry.has_service("a")

    def test_default_registry(self, default_registry):
        config = register_service(ServiceConfig("sia"), top_level=True)
        assert default_registry.get_service_config("sia") is config
        with pytest.raises(ArkRegistrationConflictError):
            register_service(ServiceConfig("sia"))


class TestSelectAuthenticators:
    # Path: required first in declaration order, then optional
    def test_order(self):
        config = ServiceConfig(
            "x", required_authenticator_names=("b", "a"), optional_authenticator_names=("c", "d")
        )
        a, b, c, extra = authenticator("a"), authenticator("b"), authenticator("c"), authenticator("z")
        selected = select_authenticators(config, [c, extra, a, b])
        assert selected == [b, a, c]

    # Error Path: all missing names reported
    def test_missing(self):
        config = ServiceConfig("x", required_authenticator_names=("isp", "pvwa"))
        with pytest.raises(ArkMissingAuthenticatorError) as exc_info:
            select_authenticators(config, [authenticator("other")])
        assert exc_info.value.missing == ["isp", "pvwa"]
        assert str(exc_info.value) == "x missing required authenticators for service: isp, pvwa"

    # Decision: first authenticator of a name wins
    def test_first_wins(self):
        config = ServiceConfig("x", required_authenticator_names=("isp",))
        first, second = authenticator("isp", "1"), authenticator("isp", "2")
        assert select_authenticators(config, [first, second]) == [first]


class TestArkBaseService:
    # Error Path: required authenticator missing
    def test_missing_required(self):
        class Svc(ArkBaseService):
            SERVICE_CONFIG = ServiceConfig("svc", required_authenticator_names=("isp",))

        with pytest.raises(ArkMissingAuthenticatorError, match="svc missing required authenticators"):
            Svc()

    # Happy Path: unrelated authenticator dropped
    def test_exposes_only_matching(self):
        class Svc(ArkBaseService):
            SERVICE_CONFIG = ServiceConfig("svc", required_authenticator_names=("isp",))

        isp, unrelated = authenticator("isp"), authenticator("pvwa")
        service = Svc(isp, unrelated)
        assert service.authenticators == [isp]
        assert service.authenticator("isp") is isp
        assert service.has_authenticator("isp")
        assert not service.has_authenticator("pvwa")
        with pytest.raises(ArkAuthenticatorNotFoundError, match="svc failed to find authenticator pvwa"):
            service.authenticator("pvwa")

    # Path: config looked up by name in an injected registry
    def test_registry_lookup(self, registry):
        registry.register(ServiceConfig("audit", optional_authenticator_names=("isp",)))
        isp = authenticator("isp")
        service = AuditService(isp, registry=registry)
        assert service.service_config.service_name == "audit"
        assert service.authenticators == [isp]

    # Error Path: name not registered
    def test_registry_lookup_missing(self, registry):
        with pytest.raises(ArkServiceNotFoundError):
            AuditService(registry=registry)

    # Decision: explicit config wins
    def test_explicit_config(self):
        service = AuditService(config=ServiceConfig("custom"))
        assert service.service_config.service_name == "custom"
        assert repr(service) == "AuditService(service='custom')"

    # Error Path: class declares nothing
    def test_no_config(self):
        class Bare(ArkBaseService):
            pass

        with pytest.raises(ValueError, match="declares neither SERVICE_CONFIG nor SERVICE_NAME"):
            Bare()


class TestArkIspBaseService:
    def test_client_wiring(self, isp_authenticator, recording_handler):
        handler = recording_handler(
            lambda request: httpx.Response(200, json={"resources": [{"id": "n1"}], "page": {}})
        )
        service = CmgrService(isp_authenticator, httpx_client=httpx.Client(transport=httpx.MockTransport(handler)))
        assert isinstance(service.client, IspServiceClient)
        assert service.client.base_url == "https://acme.connectormanagement.cyberark.cloud/api/pool-service"

        with service.list_pages("networks", dict) as pages:
            collected = list(pages)
        assert collected[0].items == [{"id": "n1"}]
        assert pages.outcome is PaginationOutcome.EXHAUSTED
        assert str(handler.requests[0].url).startswith(
            "https://acme.connectormanagement.cyberark.cloud/api/pool-service/networks"
        )
        with pytest.raises(TypeError, match="use list_pages"):
            service.alist_pages("networks", dict)
        service.close()

    # Path: refresh goes through the isp authenticator
    def test_refresh_via_authenticator(self, acme_credential, sync_http):
        refreshed = []

        def refresher(current):
            refreshed.append(current)
            return ArkCredential(token="fresh")

        isp = StaticAuthenticator("isp", acme_credential, refresher)
        service = CmgrService(isp, httpx_client=sync_http)
        assert service.client.refresh_connection() is True
        assert service.client.token == "fresh"
        assert len(refreshed) == 1

    # Error Path: missing isp authenticator
    def test_missing_isp(self):
        with pytest.raises(ArkMissingAuthenticatorError):
            CmgrService(authenticator("pvwa"))

    @pytest.mark.asyncio
    async def test_async_client(self, isp_authenticator):
        handler = lambda request: httpx.Response(200, json={"resources": [], "page": {}})
        service = AsyncCmgrService(
            isp_authenticator, httpx_client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
        )
        assert isinstance(service.client, AsyncIspServiceClient)
        async with service.alist_pages("networks", dict) as pages:
            collected = [page async for page in pages]
        assert len(collected) == 1
        assert await service.client.refresh_connection() is True
        with pytest.raises(TypeError, match="use alist_pages"):
            service.list_pages("networks", dict)
        with pytest.raises(TypeError, match="use aclose"):
            service.close()
        await service.aclose()


class TestArkApi:
    def test_service_cached(self, registry, isp_authenticator):
        registry.register(ServiceConfig("audit", required_authenticator_names=("isp",)))
        api = ArkApi([isp_authenticator, authenticator("pvwa")], registry=registry)
        first = api.service(AuditService)
        assert api.service(AuditService) is first
        assert first.authenticators == [isp_authenticator]

    def test_clear_services(self, registry, isp_authenticator):
        registry.register(ServiceConfig("audit"))
        api = ArkApi([isp_authenticator], registry=registry)
        first = api.service(AuditService)
        api.clear_services()
        assert api.service(AuditService) is not first

    def test_authenticator_lookup(self, isp_authenticator):
        api = ArkApi([isp_authenticator])
        assert api.authenticator("isp") is isp_authenticator
        assert api.authenticators == [isp_authenticator]
        with pytest.raises(ArkAuthenticatorNotFoundError, match="pvwa is not supported or not found"):
            api.authenticator("pvwa")

    # Error Path: construction failure is not cached
    def test_missing_authenticator(self, isp_authenticator):
        api = ArkApi([authenticator("pvwa")])
        with pytest.raises(ArkMissingAuthenticatorError):
            api.service(CmgrService)
        assert api._services == {}

    def test_isp_service(self, isp_authenticator):
        api = ArkApi([isp_authenticator])
        service = api.service(CmgrService)
        assert service.client.base_url.startswith("https://acme.connectormanagement.cyberark.cloud")
        service.close()
