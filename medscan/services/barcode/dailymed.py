"""
DailyMed source (NLM).
Secondary pharmaceutical database of structured product labels (SPL).

API Documentation : https://dailymed.nlm.nih.gov/dailymed/app-support-web-services.cfm
"""

import re
from typing import Dict, Any

from medscan.models.product import ProductRecord
from .interfaces import BarcodeProvider, AdapterErrorKind
from .http_source import HttpProductSource

# SPL titles end with the labeler in brackets: "CLARITIN (LORATADINE) TABLET [BAYER HEALTHCARE LLC]"
_LABELER_RE = re.compile(r"\s*\[([^\]]+)\]\s*$")


class DailyMedService(HttpProductSource):
    """Lookup of SPLs by NDC through `services/v2/spls.json`."""

    provider = BarcodeProvider.DAILYMED

    BASE_URL = "https://dailymed.nlm.nih.gov/dailymed/services/v2/spls.json"

    def __init__(self, base_url: str = BASE_URL, **kwargs):
        super().__init__(base_url, **kwargs)

    def build_params(self, variant: str) -> Dict[str, str]:
        return {"ndc": variant}

    def parse_response(self, data: Dict[str, Any], barcode: str) -> ProductRecord:
        spls = data.get("data") or []
        if not spls:
            raise self._error("No SPL found", AdapterErrorKind.NOT_FOUND, barcode)

        spl = spls[0]
        title = (spl.get("title") or "").strip()

        manufacturer = "Unknown"
        match = _LABELER_RE.search(title)
        if match:
            manufacturer = match.group(1).strip()
            title = title[:match.start()].strip()

        if not title:
            raise self._error("SPL has no title", AdapterErrorKind.DECODE_ERROR, barcode)

        return ProductRecord(
            name=title,
            description=f"DailyMed SPL {spl.get('setid') or ''}".strip(),
            manufacturer=manufacturer,
            barcode=barcode,
        )
