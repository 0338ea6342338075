"""
Normalization and classification of raw scanner or keyboard input.

Scanners are known to prepend extra zeros to UPC/EAN codes, so the cleaned
digits go through a small set of zero-stripping rules before the symbology
is inferred from length and prefix.
"""

import re
import structlog

from .interfaces import CanonicalCode, Symbology

logger = structlog.get_logger(__name__)

_NON_DIGIT_RE = re.compile(r"[^0-9]")

# Labeler prefixes known to belong to pharmaceutical labelers (CVS brand).
NDC_LABELER_PREFIXES = ("05042",)

# Leading digits that mark a 10/11 digit code as an NDC.
NDC_LEADING_DIGITS = ("3", "4")

_PADDED_LENGTHS = (13, 14)


def clean_digits(raw: str) -> str:
    """Strip every non-digit character."""
    return _NON_DIGIT_RE.sub("", raw or "")


def normalize_digits(raw: str) -> str:
    """
    Clean raw input and undo known scanner zero-padding.

    - "00..." loses exactly one leading zero.
    - "0..." of 13 or 14 digits loses its leading zero (a padded UPC-A or
      EAN-13). A single zero on any other length is kept.
    - A triple-zero scan of 13 or 14 digits that still carries "00" after the
      first rule is stripped once more by the padded-length rule.
    """
    cleaned = clean_digits(raw)
    normalized = cleaned

    if normalized.startswith("00"):
        normalized = normalized[1:]
        if normalized.startswith("00") and len(normalized) in _PADDED_LENGTHS:
            normalized = normalized[1:]
    elif normalized.startswith("0") and len(normalized) in _PADDED_LENGTHS:
        normalized = normalized[1:]

    logger.debug("Barcode normalized", raw=raw, cleaned=cleaned, normalized=normalized)
    return normalized


def classify(digits: str) -> Symbology:
    """Infer the symbology of a digit string from its length and prefix."""
    length = len(digits)

    if length in (10, 11):
        if digits.startswith(NDC_LABELER_PREFIXES) or digits.startswith(NDC_LEADING_DIGITS):
            return Symbology.NDC
        return Symbology.UNKNOWN

    if length == 12:
        return Symbology.UPC_A
    if length == 13:
        return Symbology.EAN_13

    return Symbology.UNKNOWN


def normalize(raw: str) -> CanonicalCode:
    """Normalize raw input into a classified CanonicalCode."""
    digits = normalize_digits(raw)
    return CanonicalCode(digits=digits, symbology=classify(digits))
