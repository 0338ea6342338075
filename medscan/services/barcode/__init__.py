"""
Barcode resolution services for MedScan.
Resolves scanned or typed product codes into canonical product records.

Architecture : Factory Pattern + Strategy Pattern + Dependency Injection
Usage : one pipeline per application, sources tried in priority order

Example:
    from medscan.services.barcode import create_resolution_pipeline
    from medscan.repositories import InMemoryProductStore

    pipeline = create_resolution_pipeline(InMemoryProductStore())
    outcome = await pipeline.resolve("0050428462701")
    if outcome.found:
        print(outcome.record.name, outcome.source)
"""

from .interfaces import (
    IProductSource,
    IProductRecordStore,
    CanonicalCode,
    Symbology,
    BarcodeProvider,
    LookupSource,
    LookupStatus,
    LookupOutcome,
    SourceFailure,
    AdapterErrorKind,
    BarcodeServiceError,
    BarcodeValidationError,
    AdapterError,
    SourcesExhaustedError,
    LookupCancelledError
)

from .normalizer import normalize, classify
from .formatter import format_for_api
from .overrides import OverrideTable, default_override_table
from .heuristics import guess_product
from .openfda import OpenFDAService
from .upcitemdb import UPCItemDBService
from .rxnorm import RxNormService
from .dailymed import DailyMedService
from .pipeline import ResolutionPipeline
from .manager import BarcodeSourceFactory, create_resolution_pipeline

__all__ = [
    # Interfaces
    "IProductSource",
    "IProductRecordStore",
    "CanonicalCode",
    "Symbology",
    "BarcodeProvider",
    "LookupSource",
    "LookupStatus",
    "LookupOutcome",
    "SourceFailure",
    "AdapterErrorKind",

    # Exceptions
    "BarcodeServiceError",
    "BarcodeValidationError",
    "AdapterError",
    "SourcesExhaustedError",
    "LookupCancelledError",

    # Code handling
    "normalize",
    "classify",
    "format_for_api",
    "OverrideTable",
    "default_override_table",
    "guess_product",

    # Sources
    "OpenFDAService",
    "UPCItemDBService",
    "RxNormService",
    "DailyMedService",

    # Pipeline
    "ResolutionPipeline",
    "BarcodeSourceFactory",
    "create_resolution_pipeline",
]
