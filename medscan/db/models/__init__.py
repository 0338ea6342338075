"""
Database models for MedScan.
"""

from .product import Product

__all__ = ["Product"]
