"""
Product record models shared by the resolution pipeline, the record store
and the HTTP layer.
"""

import re
from typing import Optional
from enum import Enum
from datetime import date
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProductCategory(str, Enum):
    """Regulatory category of a product."""
    PRESCRIPTION = "Prescription"
    OTC = "OTC"

    @property
    def display_name(self) -> str:
        """Label used by list and form views."""
        if self is ProductCategory.PRESCRIPTION:
            return "Prescription"
        return "Over-The-Counter"


class ProductRecord(BaseModel):
    """
    Canonical product record produced by a lookup.

    The barcode is fixed at creation; name, description, manufacturer,
    expiration date and category may be edited by the user before the
    record is persisted.
    """

    model_config = ConfigDict(validate_assignment=True)

    name: str
    description: str = ""
    manufacturer: str = "Unknown"
    barcode: str = Field(frozen=True, min_length=1, max_length=14)
    expiration_date: Optional[date] = None
    category: ProductCategory = ProductCategory.OTC

    @field_validator("name")
    def validate_name(cls, v):
        """A record always carries a readable name."""
        v = v.strip()
        if not v:
            raise ValueError("Product name cannot be blank")
        return v

    @field_validator("barcode")
    def validate_barcode_digits(cls, v):
        """Barcodes are stored in their canonical digit-only form."""
        if not re.fullmatch(r"[0-9]+", v):
            raise ValueError("Barcode must contain only digits")
        return v
