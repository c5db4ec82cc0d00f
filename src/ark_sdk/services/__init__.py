"""
Services for ark_sdk.

Exports:
    - ServiceConfig, ServiceRegistry, service_registry, register_service
    - select_authenticators, ArkBaseService, ArkIspBaseService
    - ArkApi
"""
from .registry import ServiceConfig, ServiceRegistry, register_service, service_registry
from .base_service import ArkBaseService, ArkIspBaseService, select_authenticators
from .api import ArkApi

__all__ = [
    "ServiceConfig",
    "ServiceRegistry",
    "service_registry",
    "register_service",
    "select_authenticators",
    "ArkBaseService",
    "ArkIspBaseService",
    "ArkApi",
]
