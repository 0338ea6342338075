"""
RxNorm source (NLM RxNav).
Pharmaceutical nomenclature database; resolves an NDC to its RxNorm concept.

API Documentation : https://lhncbc.nlm.nih.gov/RxNav/APIs/api-RxNorm.getNDCStatus.html
"""

from typing import Dict, Any

from medscan.models.product import ProductRecord
from .interfaces import BarcodeProvider, AdapterErrorKind
from .http_source import HttpProductSource
from .formatter import strip_hyphens


class RxNormService(HttpProductSource):
    """
    Lookup through RxNav's `ndcstatus.json`.

    RxNorm names clinical concepts, not packages, so the record carries the
    concept name and its RxCUI; it has no manufacturer information.
    """

    provider = BarcodeProvider.RXNORM

    BASE_URL = "https://rxnav.nlm.nih.gov/REST/ndcstatus.json"

    def __init__(self, base_url: str = BASE_URL, **kwargs):
        super().__init__(base_url, **kwargs)

    def build_params(self, variant: str) -> Dict[str, str]:
        return {"ndc": strip_hyphens(variant)}

    def parse_response(self, data: Dict[str, Any], barcode: str) -> ProductRecord:
        status = data.get("ndcStatus") or {}
        rxcui = status.get("rxcui")
        if not rxcui:
            raise self._error("No RxCUI found", AdapterErrorKind.NOT_FOUND, barcode)

        name = (status.get("conceptName") or "").strip()
        if not name:
            raise self._error("Concept has no name", AdapterErrorKind.DECODE_ERROR, barcode)

        return ProductRecord(
            name=name,
            description=f"RxNorm ID: {rxcui}",
            manufacturer="Unknown",
            barcode=barcode,
        )
