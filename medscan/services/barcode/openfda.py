"""
openFDA NDC directory source.
Primary regulatory database for drug products, queried by product NDC.

API Documentation : https://open.fda.gov/apis/drug/ndc/
"""

from typing import Dict, Any, List

from medscan.models.product import ProductRecord, ProductCategory
from .interfaces import BarcodeProvider, AdapterErrorKind
from .http_source import HttpProductSource
from .formatter import query_variants


class OpenFDAService(HttpProductSource):
    """
    Lookup against openFDA's `drug/ndc.json` endpoint.

    The search is tried quoted, unquoted, then without hyphens, since the
    directory indexes `product_ndc` in its dashed form but scanned codes are
    not always grouped the same way.
    """

    provider = BarcodeProvider.OPENFDA

    BASE_URL = "https://api.fda.gov/drug/ndc.json"

    def __init__(self, base_url: str = BASE_URL, **kwargs):
        super().__init__(base_url, **kwargs)

    def build_variants(self, formatted_code: str) -> List[str]:
        return query_variants(formatted_code)

    def build_params(self, variant: str) -> Dict[str, str]:
        return {"search": f"product_ndc:{variant}", "limit": "1"}

    def parse_response(self, data: Dict[str, Any], barcode: str) -> ProductRecord:
        results = data.get("results") or []
        if not results:
            raise self._error("No results found", AdapterErrorKind.NOT_FOUND, barcode)

        result = results[0]
        name = (result.get("brand_name") or "").strip() or (result.get("generic_name") or "").strip()
        if not name:
            raise self._error("Result has no product name", AdapterErrorKind.DECODE_ERROR, barcode)

        pharm_class = result.get("pharm_class") or []
        description = (
            result.get("dosage_form") or
            ", ".join(pharm_class) or
            "No description available"
        )

        product_type = (result.get("product_type") or "").upper()
        category = ProductCategory.PRESCRIPTION if "PRESCRIPTION" in product_type else ProductCategory.OTC

        return ProductRecord(
            name=name,
            description=description,
            manufacturer=result.get("labeler_name") or "Unknown",
            barcode=barcode,
            category=category,
        )
