"""Catalog repositories package."""

from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.repositories.interfaces import ICatalogRepository
from modules.products.repositories.memory_repository import InMemoryCatalogRepository

__all__ = ["ICatalogRepository", "InMemoryCatalogRepository", "ProductDjangoRepository"]
