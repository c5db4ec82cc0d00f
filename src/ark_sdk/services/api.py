"""
Entry point holding authenticators and the services built from them.
"""
import logging
import threading
from typing import Dict, List, Optional, Sequence, Type, TypeVar

from ..credentials import Authenticator
from ..errors import ArkAuthenticatorNotFoundError
from .base_service import ArkBaseService
from .registry import ServiceRegistry, service_registry

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=ArkBaseService)


class ArkApi:
    """
    Builds services on first use and caches them per service class.

    Usage:
        api = ArkApi([StaticAuthenticator("isp", credential)])
        networks = api.service(CmgrService)
    """

    def __init__(
        self,
        authenticators: Sequence[Authenticator],
        registry: Optional[ServiceRegistry] = None,
    ):
        self._authenticators: List[Authenticator] = list(authenticators)
        self._registry = registry or service_registry
        self._services: Dict[type, ArkBaseService] = {}
        self._lock = threading.Lock()

    @property
    def authenticators(self) -> List[Authenticator]:
        return list(self._authenticators)

    def authenticator(self, authenticator_name: str) -> Authenticator:
        """
        Raises:
            ArkAuthenticatorNotFoundError: If no authenticator has that name
        """
        for authenticator in self._authenticators:
            if authenticator.authenticator_name == authenticator_name:
                return authenticator
        raise ArkAuthenticatorNotFoundError(authenticator_name)

    def service(self, service_cls: Type[S]) -> S:
        """
        The cached instance of a service class, built on first request.

        Raises:
            ArkMissingAuthenticatorError: If a required authenticator is absent
            ArkServiceNotFoundError: If the class config is not registered
        """
        with self._lock:
            service = self._services.get(service_cls)
            if service is None:
                logger.info(f"service: Building {service_cls.__name__}")
                service = service_cls(*self._authenticators, registry=self._registry)
                self._services[service_cls] = service
        return service  # type: ignore[return-value]

    def clear_services(self) -> None:
        """Drop cached services; the next request rebuilds them."""
        with self._lock:
            self._services.clear()
