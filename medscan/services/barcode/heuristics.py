"""
Last-resort guesses for codes that no source recognised.

Only the manufacturer families listed here are guessed; any other code is
left unresolved.
"""

from typing import Optional, Tuple
from dataclasses import dataclass
import structlog

from medscan.models.product import ProductRecord

logger = structlog.get_logger(__name__)

HEURISTIC_CONFIDENCE = 0.3


@dataclass(frozen=True)
class ManufacturerFamily:
    fragments: Tuple[str, ...]
    name: str
    description: str
    manufacturer: str

    def matches(self, code: str) -> bool:
        return any(fragment in code for fragment in self.fragments)


# Checked in order; the first family with a matching fragment wins.
MANUFACTURER_FAMILIES = (
    ManufacturerFamily(
        fragments=("041100", "41100"),
        name="Claritin Product",
        description="Loratadine Allergy Relief",
        manufacturer="Bayer",
    ),
    ManufacturerFamily(
        fragments=("05042", "5042"),
        name="CVS Health Product",
        description="CVS Brand Medication",
        manufacturer="CVS Health",
    ),
)


def guess_product(code: str) -> Optional[ProductRecord]:
    """Synthesize a generic record from a recognised manufacturer fragment."""
    for family in MANUFACTURER_FAMILIES:
        if family.matches(code):
            logger.info("Heuristic manufacturer match", barcode=code, manufacturer=family.manufacturer)
            return ProductRecord(
                name=family.name,
                description=family.description,
                manufacturer=family.manufacturer,
                barcode=code,
            )
    return None
