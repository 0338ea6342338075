"""
Rendering of canonical codes into the form each product source expects.
"""

from typing import List, Optional

from .interfaces import CanonicalCode, Symbology

# NDC segment lengths by total digit count (labeler-product-package).
NDC_SEGMENTS = {
    11: (5, 4, 2),
    10: (5, 3, 2),
}


def _group(digits: str, segments) -> str:
    parts = []
    start = 0
    for size in segments:
        parts.append(digits[start:start + size])
        start += size
    return "-".join(parts)


def format_for_api(code: CanonicalCode, symbology: Optional[Symbology] = None) -> str:
    """
    Format a code for source queries.

    NDC codes are hyphen-grouped 5-4-2 (11 digits) or 5-3-2 (10 digits);
    everything else is returned as bare digits. Only hyphens are ever added,
    so `strip_hyphens` recovers the original digits. `symbology` overrides
    the one carried by the code.
    """
    symbology = symbology or code.symbology
    if symbology == Symbology.NDC and len(code.digits) in NDC_SEGMENTS:
        return _group(code.digits, NDC_SEGMENTS[len(code.digits)])
    return code.digits


def strip_hyphens(formatted: str) -> str:
    return formatted.replace("-", "")


def query_variants(formatted: str) -> List[str]:
    """Quoted, unquoted and unhyphenated forms of a formatted code, deduplicated in order."""
    candidates = [f'"{formatted}"', formatted, strip_hyphens(formatted)]
    variants: List[str] = []
    for candidate in candidates:
        if candidate not in variants:
            variants.append(candidate)
    return variants
