"""
Resolution pipeline: raw scanner input -> canonical product record.

Stages run strictly in order and stop at the first record:
local record store -> override table -> product sources -> heuristic guess.
Sources are never raced; their order encodes how much each is trusted.
"""

import asyncio
from typing import List, Optional, Sequence, Union
import structlog

from medscan.models.product import ProductRecord
from .interfaces import (
    IProductSource, IProductRecordStore, LookupOutcome, LookupSource,
    SourceFailure, AdapterError, LookupCancelledError, CanonicalCode
)
from .normalizer import normalize
from .formatter import format_for_api
from .overrides import OverrideTable, default_override_table
from .heuristics import guess_product, HEURISTIC_CONFIDENCE

logger = structlog.get_logger(__name__)

KNOWN_CONFIDENCE = 1.0
SOURCE_CONFIDENCE = 0.9


def _lookup_source(source: IProductSource) -> Union[LookupSource, str]:
    """Stage label for a source; sources outside the built-in set keep their own name."""
    try:
        return LookupSource(source.provider_name)
    except ValueError:
        return source.provider_name


class ResolutionPipeline:
    """
    Resolves raw codes against an injected store, override table and sources.

    Concurrent `resolve` calls share only the read-only override table; each
    call keeps its own failure log.
    """

    def __init__(self,
                 store: Optional[IProductRecordStore],
                 sources: Sequence[IProductSource],
                 overrides: Optional[OverrideTable] = None):
        self.store = store
        self.sources = list(sources)
        self.overrides = overrides if overrides is not None else default_override_table

    async def resolve(self, raw: str, cancel_event: Optional[asyncio.Event] = None) -> LookupOutcome:
        """
        Resolve a raw scanned or typed code.

        Args:
            raw: Decoded scanner string or manual entry
            cancel_event: Set by the caller to stop before the next stage;
                a request already in flight completes or times out normally

        Returns:
            LookupOutcome; misses are reported in it, never raised
        """
        def cancelled() -> bool:
            return cancel_event is not None and cancel_event.is_set()

        if cancelled():
            logger.info("Lookup cancelled before start", raw=raw)
            return LookupOutcome.cancelled()

        code = normalize(raw)
        if not code.is_valid:
            logger.info("Invalid barcode input", raw=raw, normalized=code.digits)
            return LookupOutcome.invalid_input(code)

        logger.info("Resolving barcode", barcode=code.digits, symbology=code.symbology.value)

        # Local record store
        if cancelled():
            return LookupOutcome.cancelled(code)
        record = await self._find_in_store(code)
        if record is not None:
            logger.info("Found in local store", barcode=code.digits, name=record.name)
            return LookupOutcome.success(code, record, LookupSource.LOCAL_STORE, KNOWN_CONFIDENCE)

        # Known products
        if cancelled():
            return LookupOutcome.cancelled(code)
        record = self.overrides.lookup(code.digits)
        if record is not None:
            return LookupOutcome.success(code, record, LookupSource.OVERRIDE, KNOWN_CONFIDENCE)

        # External sources, in priority order
        formatted = format_for_api(code)
        failures: List[SourceFailure] = []

        for source in self.sources:
            if cancelled():
                return LookupOutcome.cancelled(code, failures)

            try:
                record = await source.query(formatted, cancel_event=cancel_event)
            except LookupCancelledError:
                return LookupOutcome.cancelled(code, failures)
            except AdapterError as e:
                logger.warning(
                    "Product source failed",
                    barcode=code.digits,
                    provider=source.provider_name,
                    kind=e.kind.value,
                    error=str(e)
                )
                failures.append(SourceFailure(
                    source=source.provider_name,
                    kind=e.kind,
                    message=str(e),
                    attempts=e.attempts
                ))
                continue

            logger.info(
                "Product found with source",
                barcode=code.digits,
                provider=source.provider_name,
                name=record.name
            )
            return LookupOutcome.success(
                code, record, _lookup_source(source), SOURCE_CONFIDENCE, failures
            )

        # Heuristic guess
        if cancelled():
            return LookupOutcome.cancelled(code, failures)
        record = guess_product(code.digits)
        if record is not None:
            return LookupOutcome.success(code, record, LookupSource.HEURISTIC, HEURISTIC_CONFIDENCE, failures)

        logger.info("Product not found in any source", barcode=code.digits, failures=len(failures))
        return LookupOutcome.exhausted(code, failures)

    async def _find_in_store(self, code: CanonicalCode) -> Optional[ProductRecord]:
        if self.store is None:
            return None
        try:
            return await self.store.find_by_barcode(code.digits)
        except Exception as e:
            logger.warning("Local store lookup failed", barcode=code.digits, error=str(e))
            return None

    async def close(self):
        """Close the network resources held by every source."""
        for source in self.sources:
            try:
                await source.close()
            except Exception as e:
                logger.warning("Failed to close source", provider=source.provider_name, error=str(e))
