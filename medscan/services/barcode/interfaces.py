"""
Interfaces for barcode resolution services.
Defines the contracts shared by product sources, the record store and the
resolution pipeline.

Architecture Pattern : Interface Segregation Principle (ISP)
Inspiration : Repository Pattern, Strategy Pattern
"""

from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any, Union
from dataclasses import dataclass, field
from enum import Enum
import uuid
import structlog

from medscan.models.product import ProductRecord

logger = structlog.get_logger(__name__)


class Symbology(str, Enum):
    """Barcode formats recognised by the classifier."""
    UPC_A = "upc_a"
    EAN_13 = "ean_13"
    NDC = "ndc"
    UNKNOWN = "unknown"


class BarcodeProvider(str, Enum):
    """External product sources, named as they appear in configuration."""
    OPENFDA = "openfda"
    UPCITEMDB = "upcitemdb"
    RXNORM = "rxnorm"
    DAILYMED = "dailymed"


class LookupSource(str, Enum):
    """Stage of the pipeline that answered a lookup."""
    LOCAL_STORE = "local_store"
    OVERRIDE = "override"
    OPENFDA = "openfda"
    UPCITEMDB = "upcitemdb"
    RXNORM = "rxnorm"
    DAILYMED = "dailymed"
    HEURISTIC = "heuristic"


class LookupStatus(str, Enum):
    FOUND = "found"
    INVALID_INPUT = "invalid_input"
    CANCELLED = "cancelled"
    EXHAUSTED = "exhausted"


class AdapterErrorKind(str, Enum):
    """Recoverable failure categories reported by product sources."""
    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"
    DECODE_ERROR = "decode_error"
    NOT_FOUND = "not_found"


MAX_CODE_LENGTH = 14


@dataclass(frozen=True)
class CanonicalCode:
    """
    Digit-only barcode together with its inferred symbology.

    An empty or over-long code is representable so that callers can reject
    it explicitly; `is_valid` tells them whether a lookup may proceed.
    """
    digits: str
    symbology: Symbology = Symbology.UNKNOWN

    @property
    def is_valid(self) -> bool:
        return 1 <= len(self.digits) <= MAX_CODE_LENGTH

    def __str__(self) -> str:
        return self.digits

    def __len__(self) -> int:
        return len(self.digits)


@dataclass
class SourceFailure:
    """One entry of the per-source error log kept by the pipeline."""
    source: str
    kind: AdapterErrorKind
    message: str = ""
    attempts: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "kind": self.kind.value,
            "message": self.message,
            "attempts": self.attempts,
        }


class BarcodeServiceError(Exception):
    """Base error for barcode resolution services."""

    def __init__(self, message: str, provider: str = "", barcode: str = "", original_error: Exception = None):
        super().__init__(message)
        self.provider = provider
        self.barcode = barcode
        self.original_error = original_error


class BarcodeValidationError(BarcodeServiceError):
    """Raised when a raw code does not normalize to a usable barcode."""
    pass


class AdapterError(BarcodeServiceError):
    """Recoverable failure of a single product source."""

    def __init__(self, message: str, kind: AdapterErrorKind, status: Optional[int] = None,
                 attempts: int = 1, **kwargs):
        super().__init__(message, **kwargs)
        self.kind = kind
        self.status = status
        self.attempts = attempts


class SourcesExhaustedError(BarcodeServiceError):
    """No stage of the pipeline produced a record."""

    def __init__(self, message: str, failures: List[SourceFailure] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.failures = failures or []


class LookupCancelledError(BarcodeServiceError):
    """The caller cancelled the lookup before it completed."""
    pass


@dataclass
class LookupOutcome:
    """
    Result of one resolution request.

    Exactly one of the following holds:
    - FOUND: `record` is set and `source` names the stage that produced it.
    - INVALID_INPUT: the raw code normalized to nothing usable.
    - CANCELLED: the caller cancelled before the next stage started.
    - EXHAUSTED: every stage missed; `failures` lists each source's error in
      the order the sources were tried.
    """
    status: LookupStatus
    code: Optional[CanonicalCode] = None
    record: Optional[ProductRecord] = None
    # Built-in stages are LookupSource members; a custom source keeps its provider name
    source: Optional[Union[LookupSource, str]] = None
    confidence: float = 0.0
    failures: List[SourceFailure] = field(default_factory=list)
    heuristic_matched: bool = False

    @property
    def found(self) -> bool:
        return self.status == LookupStatus.FOUND

    @property
    def source_name(self) -> Optional[str]:
        if isinstance(self.source, LookupSource):
            return self.source.value
        return self.source

    @classmethod
    def success(cls, code: CanonicalCode, record: ProductRecord, source: Union[LookupSource, str],
                confidence: float, failures: List[SourceFailure] = None) -> "LookupOutcome":
        return cls(
            status=LookupStatus.FOUND,
            code=code,
            record=record,
            source=source,
            confidence=confidence,
            failures=list(failures or []),
            heuristic_matched=source == LookupSource.HEURISTIC,
        )

    @classmethod
    def invalid_input(cls, code: Optional[CanonicalCode] = None) -> "LookupOutcome":
        return cls(status=LookupStatus.INVALID_INPUT, code=code)

    @classmethod
    def cancelled(cls, code: Optional[CanonicalCode] = None,
                  failures: List[SourceFailure] = None) -> "LookupOutcome":
        return cls(status=LookupStatus.CANCELLED, code=code, failures=list(failures or []))

    @classmethod
    def exhausted(cls, code: CanonicalCode, failures: List[SourceFailure]) -> "LookupOutcome":
        return cls(status=LookupStatus.EXHAUSTED, code=code, failures=list(failures))

    def unwrap(self) -> ProductRecord:
        """
        Return the resolved record or raise the matching error.

        Raises:
            BarcodeValidationError: the input was not a usable barcode
            LookupCancelledError: the lookup was cancelled
            SourcesExhaustedError: every source missed
        """
        barcode = self.code.digits if self.code else ""
        if self.status == LookupStatus.FOUND:
            return self.record
        if self.status == LookupStatus.INVALID_INPUT:
            raise BarcodeValidationError("Please enter a valid barcode", barcode=barcode)
        if self.status == LookupStatus.CANCELLED:
            raise LookupCancelledError("Lookup cancelled", barcode=barcode)
        raise SourcesExhaustedError(
            f"No product found for barcode: {barcode}",
            failures=self.failures,
            barcode=barcode,
        )


class IProductSource(ABC):
    """
    Interface for external product sources.

    Responsibilities:
    - Translate a formatted code into one request per query variant
    - Map the provider's response onto a ProductRecord
    - Report every miss as an AdapterError
    """

    @abstractmethod
    async def query(self, formatted_code: str, cancel_event=None) -> ProductRecord:
        """
        Look a product up by its API-formatted code.

        Args:
            formatted_code: Code as rendered by the API formatter
            cancel_event: Optional asyncio.Event; once set, no further
                variant request is started

        Returns:
            ProductRecord with at least a name

        Raises:
            AdapterError: on timeout, HTTP error, decode error or empty result
        """
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Name of the provider, as recorded in failure logs."""
        pass

    async def close(self):
        """Release network resources held by the source."""
        pass


class IProductRecordStore(ABC):
    """
    Durable store of resolved and user-edited product records.

    The pipeline only reads through `find_by_barcode`; writes belong to the
    caller once the user accepts a record.
    """

    @abstractmethod
    async def find_by_barcode(self, barcode: str) -> Optional[ProductRecord]:
        pass

    @abstractmethod
    async def find_by_id(self, record_id: uuid.UUID) -> Optional[ProductRecord]:
        pass

    @abstractmethod
    async def exists(self, barcode: str) -> bool:
        pass

    @abstractmethod
    async def upsert(self, record: ProductRecord) -> ProductRecord:
        pass

    @abstractmethod
    async def delete(self, barcode: str) -> bool:
        pass
