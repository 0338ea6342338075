"""
UPCitemdb source.
General retail product database; the free trial endpoint needs no key.

API Documentation : https://devs.upcitemdb.com/
"""

from typing import Dict, Any

from medscan.models.product import ProductRecord
from .interfaces import BarcodeProvider, AdapterErrorKind
from .http_source import HttpProductSource
from .formatter import strip_hyphens


class UPCItemDBService(HttpProductSource):
    """Lookup of retail UPC/EAN codes on UPCitemdb."""

    provider = BarcodeProvider.UPCITEMDB

    BASE_URL = "https://api.upcitemdb.com/prod/trial/lookup"

    def __init__(self, base_url: str = BASE_URL, **kwargs):
        super().__init__(base_url, **kwargs)

    def build_params(self, variant: str) -> Dict[str, str]:
        return {"upc": strip_hyphens(variant)}

    def parse_response(self, data: Dict[str, Any], barcode: str) -> ProductRecord:
        items = data.get("items") or []
        if not items:
            raise self._error("Product not found", AdapterErrorKind.NOT_FOUND, barcode)

        item = items[0]
        title = (item.get("title") or "").strip()
        if not title:
            raise self._error("Item has no title", AdapterErrorKind.DECODE_ERROR, barcode)

        # Brand falls back to the first word of the title
        brand = (item.get("brand") or "").strip() or title.split(" ")[0]

        return ProductRecord(
            name=title,
            description=(item.get("description") or "").strip() or "OTC Medication",
            manufacturer=brand or "Unknown",
            barcode=barcode,
        )
