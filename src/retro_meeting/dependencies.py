"""
FastAPI dependencies for external providers

Tests override these through ``app.dependency_overrides``.
"""
from functools import lru_cache

from .config import config
from .services.billing_gateway import BillingGateway, get_billing_gateway
from .services.storage_provider import StorageProvider, get_storage_provider


@lru_cache()
def get_gateway() -> BillingGateway:
    return get_billing_gateway(config)


@lru_cache()
def get_storage() -> StorageProvider:
    return get_storage_provider(config)
