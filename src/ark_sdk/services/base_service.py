"""
Service base classes.

A service holds the authenticators its config asks for and, for tenant
services, a client built from the ``isp`` credential.
"""
import logging
from typing import Any, ClassVar, Dict, List, Optional, Sequence, Type, TypeVar, Union

import httpx

from ..client.config import ServiceProfile
from ..client.isp import AsyncIspServiceClient, IspServiceClient, from_credential, refresh_client
from ..credentials import Authenticator
from ..env import IDENTITY_TENANT_NAME
from ..errors import ArkAuthenticatorNotFoundError, ArkMissingAuthenticatorError
from ..pagination import AsyncPageIterator, PageFilter, PageIterator, PageStrategy
from ..pagination import alist_pages as _alist_pages
from ..pagination import list_pages as _list_pages
from .registry import ServiceConfig, ServiceRegistry, service_registry

logger = logging.getLogger(__name__)

T = TypeVar("T")


def select_authenticators(
    config: ServiceConfig,
    authenticators: Sequence[Authenticator],
) -> List[Authenticator]:
    """
    Pick the authenticators a service uses.

    Required names come first in declaration order, then optional names
    that were supplied. The first authenticator of a given name wins.

    Raises:
        ArkMissingAuthenticatorError: If any required name is not supplied
    """
    by_name: Dict[str, Authenticator] = {}
    for authenticator in authenticators:
        by_name.setdefault(authenticator.authenticator_name, authenticator)

    missing = [
        name for name in config.required_authenticator_names if name not in by_name
    ]
    if missing:
        logger.error(
            f"select_authenticators: {config.service_name} missing {', '.join(missing)}"
        )
        raise ArkMissingAuthenticatorError(config.service_name, missing)

    selected = [by_name[name] for name in config.required_authenticator_names]
    for name in config.optional_authenticator_names:
        if name in by_name and by_name[name] not in selected:
            selected.append(by_name[name])
    return selected


class ArkBaseService:
    """
    Base class of all services.

    Subclasses declare SERVICE_CONFIG, or SERVICE_NAME to look the config
    up in the registry.
    """

    SERVICE_CONFIG: ClassVar[Optional[ServiceConfig]] = None
    SERVICE_NAME: ClassVar[str] = ""

    def __init__(
        self,
        *authenticators: Authenticator,
        config: Optional[ServiceConfig] = None,
        registry: Optional[ServiceRegistry] = None,
    ):
        self._config = config or self.resolve_service_config(registry)
        self._authenticators = select_authenticators(self._config, authenticators)
        logger.debug(
            f"{type(self).__name__}.__init__: service={self._config.service_name} "
            f"authenticators={[a.authenticator_name for a in self._authenticators]}"
        )

    @classmethod
    def resolve_service_config(cls, registry: Optional[ServiceRegistry] = None) -> ServiceConfig:
        """
        Class config, else the registry entry for SERVICE_NAME.

        Raises:
            ArkServiceNotFoundError: If SERVICE_NAME is not registered
            ValueError: If the class declares neither attribute
        """
        if cls.SERVICE_CONFIG is not None:
            return cls.SERVICE_CONFIG
        if not cls.SERVICE_NAME:
            raise ValueError(f"{cls.__name__} declares neither SERVICE_CONFIG nor SERVICE_NAME")
        return (registry or service_registry).get_service_config(cls.SERVICE_NAME)

    @property
    def service_config(self) -> ServiceConfig:
        return self._config

    @property
    def authenticators(self) -> List[Authenticator]:
        return list(self._authenticators)

    def authenticator(self, authenticator_name: str) -> Authenticator:
        """
        Raises:
            ArkAuthenticatorNotFoundError: If the service does not hold it
        """
        for authenticator in self._authenticators:
            if authenticator.authenticator_name == authenticator_name:
                return authenticator
        raise ArkAuthenticatorNotFoundError(authenticator_name, owner=self._config.service_name)

    def has_authenticator(self, authenticator_name: str) -> bool:
        return any(a.authenticator_name == authenticator_name for a in self._authenticators)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(service={self._config.service_name!r})"


class ArkIspBaseService(ArkBaseService):
    """
    Base class of tenant services.

    The client is built from the ``isp`` authenticator's credential using
    SERVICE_PROFILE, and refreshes itself through that authenticator.
    Set ASYNC_CLIENT to get an AsyncIspServiceClient.
    """

    SERVICE_PROFILE: ClassVar[ServiceProfile] = ServiceProfile()
    ASYNC_CLIENT: ClassVar[bool] = False

    client: Union[IspServiceClient, AsyncIspServiceClient]

    def __init__(
        self,
        *authenticators: Authenticator,
        config: Optional[ServiceConfig] = None,
        registry: Optional[ServiceRegistry] = None,
        httpx_client: Union[httpx.Client, httpx.AsyncClient, None] = None,
    ):
        super().__init__(*authenticators, config=config, registry=registry)
        self._isp_auth = self.authenticator(IDENTITY_TENANT_NAME)
        credential = self._isp_auth.load_credential()
        self.client = from_credential(
            credential,
            self.SERVICE_PROFILE,
            refresh_callback=self._refresh_client,
            async_client=self.ASYNC_CLIENT,
            httpx_client=httpx_client,
        )

    def _refresh_client(self, client: Any) -> None:
        refresh_client(client, self._isp_auth)

    def list_pages(
        self,
        route: str,
        item_type: Type[T],
        filters: Optional[PageFilter] = None,
        strategy: Optional[PageStrategy] = None,
        name: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
        raise_on_error: bool = False,
    ) -> PageIterator[T]:
        """Lazily list an endpoint of this service (sync client)."""
        if not isinstance(self.client, IspServiceClient):
            raise TypeError(f"{type(self).__name__} has an async client; use alist_pages")
        return _list_pages(
            self.client, route, item_type, filters, strategy, name, params, raise_on_error
        )

    def alist_pages(
        self,
        route: str,
        item_type: Type[T],
        filters: Optional[PageFilter] = None,
        strategy: Optional[PageStrategy] = None,
        name: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
        raise_on_error: bool = False,
    ) -> AsyncPageIterator[T]:
        """Lazily list an endpoint of this service (async client)."""
        if not isinstance(self.client, AsyncIspServiceClient):
            raise TypeError(f"{type(self).__name__} has a sync client; use list_pages")
        return _alist_pages(
            self.client, route, item_type, filters, strategy, name, params, raise_on_error
        )

    def close(self) -> None:
        """
        Close a sync client.

        Raises:
            TypeError: If the service holds an async client
        """
        if not isinstance(self.client, IspServiceClient):
            raise TypeError(f"{type(self).__name__} has an async client; use aclose")
        self.client.close()

    async def aclose(self) -> None:
        """Close the client, sync or async."""
        if isinstance(self.client, AsyncIspServiceClient):
            await self.client.close()
        else:
            self.client.close()
