"""
Unit tests for the product record stores.
"""

from datetime import date

import pytest

from medscan.db.models.product import Product
from medscan.models.product import ProductRecord, ProductCategory
from medscan.repositories.product_repository import InMemoryProductStore


def make_record(**overrides) -> ProductRecord:
    fields = {
        "name": "Claritin 24-Hour Allergy Relief",
        "description": "Loratadine 10mg Tablets (30 count)",
        "manufacturer": "Bayer",
        "barcode": "041100010174",
    }
    fields.update(overrides)
    return ProductRecord(**fields)


class TestProductRepository:
    """Test the SQLAlchemy-backed store."""

    @pytest.mark.asyncio
    async def test_upsert_creates_record(self, product_repository):
        saved = await product_repository.upsert(make_record(expiration_date=date(2027, 3, 1)))

        assert saved.barcode == "041100010174"
        assert saved.expiration_date == date(2027, 3, 1)
        assert await product_repository.exists("041100010174") is True

        found = await product_repository.find_by_barcode("041100010174")
        assert found == saved

    @pytest.mark.asyncio
    async def test_missing_expiration_defaults_to_one_year(self, product_repository):
        saved = await product_repository.upsert(make_record())

        assert saved.expiration_date == Product.default_expiration()

    @pytest.mark.asyncio
    async def test_last_writer_wins(self, product_repository, db_session):
        await product_repository.upsert(make_record())
        await product_repository.upsert(make_record(name="Claritin (bathroom cabinet)",
                                                    category=ProductCategory.PRESCRIPTION))

        found = await product_repository.find_by_barcode("041100010174")
        assert found.name == "Claritin (bathroom cabinet)"
        assert found.category == ProductCategory.PRESCRIPTION
        assert db_session.query(Product).count() == 1

    @pytest.mark.asyncio
    async def test_find_by_id(self, product_repository, db_session):
        await product_repository.upsert(make_record())
        row = db_session.query(Product).first()

        found = await product_repository.find_by_id(row.id)

        assert found.barcode == "041100010174"

    @pytest.mark.asyncio
    async def test_missing_records(self, product_repository):
        assert await product_repository.find_by_barcode("123456789012") is None
        assert await product_repository.exists("123456789012") is False
        assert await product_repository.delete("123456789012") is False

    @pytest.mark.asyncio
    async def test_delete(self, product_repository):
        await product_repository.upsert(make_record())

        assert await product_repository.delete("041100010174") is True
        assert await product_repository.exists("041100010174") is False


class TestDefaultExpiration:

    def test_one_year_later(self):
        assert Product.default_expiration(date(2026, 10, 19)) == date(2027, 10, 19)

    def test_leap_day(self):
        assert Product.default_expiration(date(2028, 2, 29)) == date(2029, 2, 28)


class TestInMemoryProductStore:

    @pytest.mark.asyncio
    async def test_round_trip(self, memory_store):
        record = make_record()
        await memory_store.upsert(record)

        found = await memory_store.find_by_barcode(record.barcode)

        assert found == record
        assert await memory_store.exists(record.barcode)

    @pytest.mark.asyncio
    async def test_records_are_copied(self, memory_store):
        record = make_record()
        await memory_store.upsert(record)
        record.name = "Changed after save"

        found = await memory_store.find_by_barcode(record.barcode)
        found.name = "Changed after read"

        assert (await memory_store.find_by_barcode(record.barcode)).name == "Claritin 24-Hour Allergy Relief"

    @pytest.mark.asyncio
    async def test_find_by_id_and_delete(self):
        store = InMemoryProductStore({"041100010174": make_record()})
        record_id = store.id_for("041100010174")

        assert (await store.find_by_id(record_id)).barcode == "041100010174"
        assert await store.delete("041100010174") is True
        assert await store.delete("041100010174") is False
        assert await store.find_by_id(record_id) is None
