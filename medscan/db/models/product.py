"""
Stored product records.
"""

from datetime import date, timedelta
from sqlalchemy import Column, String, Date, DateTime, Uuid
from sqlalchemy.sql import func
import uuid

from medscan.db.database import Base
from medscan.models.product import ProductRecord, ProductCategory


class Product(Base):
    """A product the user has scanned and kept, keyed by id and by barcode."""

    __tablename__ = "products"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    barcode = Column(String(14), unique=True, index=True, nullable=False)

    name = Column(String(255), nullable=False)
    description = Column(String(1024), nullable=False, default="")
    manufacturer = Column(String(255), nullable=False, default="Unknown")
    category = Column(String(20), nullable=False, default=ProductCategory.OTC.value)
    expiration_date = Column(Date, nullable=False)

    # Metadata
    date_added = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Product(id={self.id}, barcode={self.barcode}, name={self.name})>"

    @staticmethod
    def default_expiration(today: date = None) -> date:
        """Expiration assumed for a record saved without one: a year from now."""
        today = today or date.today()
        try:
            return today.replace(year=today.year + 1)
        except ValueError:
            # Feb 29
            return today + timedelta(days=365)

    def apply(self, record: ProductRecord):
        """Copy the editable fields of a record onto this row."""
        self.name = record.name
        self.description = record.description
        self.manufacturer = record.manufacturer
        self.category = record.category.value
        self.expiration_date = record.expiration_date or self.default_expiration()

    def to_record(self) -> ProductRecord:
        return ProductRecord(
            name=self.name,
            description=self.description,
            manufacturer=self.manufacturer,
            barcode=self.barcode,
            expiration_date=self.expiration_date,
            category=ProductCategory(self.category),
        )
