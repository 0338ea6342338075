"""
Repository layer for data access.
"""

from .product_repository import ProductRepository, InMemoryProductStore, get_product_repository

__all__ = ["ProductRepository", "InMemoryProductStore", "get_product_repository"]
