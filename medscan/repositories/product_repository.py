"""
Product record stores.

`ProductRepository` persists records with SQLAlchemy; `InMemoryProductStore`
keeps them in a dict for callers without a database.
"""

from typing import Optional, Dict
from sqlalchemy.orm import Session
import uuid
import structlog

from medscan.db.models.product import Product
from medscan.models.product import ProductRecord
from medscan.services.barcode.interfaces import IProductRecordStore

logger = structlog.get_logger(__name__)


class ProductRepository(IProductRecordStore):
    """Repository for stored product records."""

    def __init__(self, db: Session):
        self.db = db

    def _get_row(self, barcode: str) -> Optional[Product]:
        return self.db.query(Product).filter(Product.barcode == barcode).first()

    async def find_by_barcode(self, barcode: str) -> Optional[ProductRecord]:
        """Exact-match lookup by canonical barcode."""
        row = self._get_row(barcode)
        return row.to_record() if row else None

    async def find_by_id(self, record_id: uuid.UUID) -> Optional[ProductRecord]:
        row = self.db.query(Product).filter(Product.id == record_id).first()
        return row.to_record() if row else None

    async def exists(self, barcode: str) -> bool:
        return self.db.query(Product.id).filter(Product.barcode == barcode).first() is not None

    async def upsert(self, record: ProductRecord) -> ProductRecord:
        """
        Insert or update the record stored under the record's barcode.
        The last writer wins.
        """
        row = self._get_row(record.barcode)
        created = row is None
        if created:
            row = Product(barcode=record.barcode)
            self.db.add(row)

        row.apply(record)
        self.db.commit()
        self.db.refresh(row)

        logger.info("Product saved", barcode=record.barcode, name=record.name, created=created)
        return row.to_record()

    async def delete(self, barcode: str) -> bool:
        row = self._get_row(barcode)
        if row is None:
            return False

        self.db.delete(row)
        self.db.commit()

        logger.info("Product deleted", barcode=barcode)
        return True


class InMemoryProductStore(IProductRecordStore):
    """Dict-backed record store; records are copied in and out."""

    def __init__(self, records: Optional[Dict[str, ProductRecord]] = None):
        self._records: Dict[str, ProductRecord] = {}
        self._ids: Dict[str, uuid.UUID] = {}
        for record in (records or {}).values():
            self._put(record)

    def _put(self, record: ProductRecord) -> ProductRecord:
        stored = record.model_copy()
        self._records[record.barcode] = stored
        self._ids.setdefault(record.barcode, uuid.uuid4())
        return stored.model_copy()

    def id_for(self, barcode: str) -> Optional[uuid.UUID]:
        return self._ids.get(barcode)

    async def find_by_barcode(self, barcode: str) -> Optional[ProductRecord]:
        record = self._records.get(barcode)
        return record.model_copy() if record else None

    async def find_by_id(self, record_id: uuid.UUID) -> Optional[ProductRecord]:
        for barcode, known_id in self._ids.items():
            if known_id == record_id:
                return await self.find_by_barcode(barcode)
        return None

    async def exists(self, barcode: str) -> bool:
        return barcode in self._records

    async def upsert(self, record: ProductRecord) -> ProductRecord:
        return self._put(record)

    async def delete(self, barcode: str) -> bool:
        if barcode not in self._records:
            return False
        del self._records[barcode]
        del self._ids[barcode]
        return True


def get_product_repository(db: Session) -> ProductRepository:
    """Factory function for ProductRepository."""
    return ProductRepository(db)
