"""
Static table of verified products, consulted before any network lookup.
"""

from typing import Dict, Optional, List
from dataclasses import dataclass
import structlog

from medscan.models.product import ProductRecord

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class KnownProduct:
    name: str
    description: str
    manufacturer: str


_CLARITIN_30 = KnownProduct(
    name="Claritin 24-Hour Allergy Relief",
    description="Loratadine 10mg Tablets (30 count)",
    manufacturer="Bayer",
)

_CVS_ALLERGY_30 = KnownProduct(
    name="CVS Health Allergy Relief",
    description="Loratadine 10mg Tablets (30 count)",
    manufacturer="CVS Health",
)

KNOWN_PRODUCTS: Dict[str, KnownProduct] = {
    # Claritin
    "041100010174": _CLARITIN_30,
    "41100010174": _CLARITIN_30,
    "041100766613": _CLARITIN_30,
    "041100010167": KnownProduct(
        name="Claritin 24-Hour Allergy Relief",
        description="Loratadine 10mg Tablets (10 count)",
        manufacturer="Bayer",
    ),
    # CVS Health
    "050428462701": _CVS_ALLERGY_30,
    "50428462701": _CVS_ALLERGY_30,
}


class OverrideTable:
    """
    Exact-match table of known barcodes.

    Entries recorded before the normalization rules settled may differ from
    the normalized code by one leading zero, so a miss on the code itself is
    retried with one zero removed, then with one zero added.
    """

    def __init__(self, entries: Optional[Dict[str, KnownProduct]] = None):
        self._entries = dict(KNOWN_PRODUCTS if entries is None else entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, code: str) -> bool:
        return self._match(code) is not None

    @staticmethod
    def _candidates(code: str) -> List[str]:
        candidates = [code]
        if code.startswith("0"):
            candidates.append(code[1:])
        candidates.append("0" + code)
        return candidates

    def _match(self, code: str) -> Optional[KnownProduct]:
        if not code:
            return None
        for candidate in self._candidates(code):
            entry = self._entries.get(candidate)
            if entry is not None:
                return entry
        return None

    def lookup(self, code: str) -> Optional[ProductRecord]:
        """Return a fresh record for `code`, or None when it is not listed."""
        entry = self._match(code)
        if entry is None:
            return None
        logger.info("Found in known products table", barcode=code, name=entry.name)
        return ProductRecord(
            name=entry.name,
            description=entry.description,
            manufacturer=entry.manufacturer,
            barcode=code,
        )


# Process-wide, read-only instance.
default_override_table = OverrideTable()
