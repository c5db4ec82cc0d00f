"""
Service registry.

Each service module declares a ServiceConfig naming the authenticators it
needs and registers it once at import time. Lookups by name are used when
a service is built without an explicit config.

A process-wide default registry (``service_registry``) backs the
module-level ``register_service()``; tests and embedders can construct
their own ServiceRegistry and inject it instead.
"""
import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ..errors import ArkRegistrationConflictError, ArkServiceNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceConfig:
    """
    Static description of a service.

    Attributes:
        service_name: Unique name of the service
        required_authenticator_names: Authenticators that must all be supplied
        optional_authenticator_names: Authenticators used when supplied
    """

    service_name: str
    required_authenticator_names: Tuple[str, ...] = field(default_factory=tuple)
    optional_authenticator_names: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.service_name or not isinstance(self.service_name, str):
            raise ValueError("service_name must be a non-empty string")
        for attr in ("required_authenticator_names", "optional_authenticator_names"):
            names = getattr(self, attr)
            if isinstance(names, str):
                raise ValueError(f"{attr} must be a sequence of names, not a str")
            object.__setattr__(self, attr, tuple(names))


class ServiceRegistry:
    """Name-keyed store of ServiceConfig entries; names are never replaced."""

    def __init__(self) -> None:
        logger.debug("ServiceRegistry.__init__: Initializing registry")
        self._configs: Dict[str, ServiceConfig] = {}
        self._top_level: List[str] = []
        self._lock = threading.Lock()

    def register(self, config: ServiceConfig, top_level: bool = False) -> ServiceConfig:
        """
        Register a service config.

        Raises:
            ArkRegistrationConflictError: If the name is already registered;
                the first registration is kept
        """
        name = config.service_name
        with self._lock:
            if name in self._configs:
                logger.error(f"register: Service '{name}' is already registered")
                raise ArkRegistrationConflictError(name)
            self._configs[name] = config
            if top_level:
                self._top_level.append(name)
        logger.info(f"register: Registered service '{name}' (top_level={top_level})")
        return config

    def get_service_config(self, service_name: str) -> ServiceConfig:
        """
        Raises:
            ArkServiceNotFoundError: If the name is not registered
        """
        config = self._configs.get(service_name)
        if config is None:
            logger.debug(f"get_service_config: Service '{service_name}' not registered")
            raise ArkServiceNotFoundError(service_name)
        return config

    def all_service_configs(self) -> List[ServiceConfig]:
        """All configs, in registration order."""
        return list(self._configs.values())

    def top_level_service_configs(self) -> List[ServiceConfig]:
        """Configs registered with ``top_level=True``, in registration order."""
        return [self._configs[name] for name in self._top_level]

    def has_service(self, service_name: str) -> bool:
        return service_name in self._configs

    def clear(self) -> None:
        """Remove all entries. Useful for testing."""
        logger.info("clear: Clearing service registry")
        with self._lock:
            self._configs.clear()
            self._top_level.clear()

    def __len__(self) -> int:
        return len(self._configs)

    def __contains__(self, service_name: object) -> bool:
        return service_name in self._configs


# Default process-wide registry
service_registry = ServiceRegistry()


def register_service(config: ServiceConfig, top_level: bool = False) -> ServiceConfig:
    """Register a service config in the default registry."""
    return service_registry.register(config, top_level=top_level)
