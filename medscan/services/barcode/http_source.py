"""
Shared HTTP plumbing for JSON product sources.

Architecture Pattern : Template Method + Async/Await
Each concrete source only decides which query variants to try, how to build
request parameters, and how to map the decoded JSON onto a ProductRecord.
"""

import asyncio
import aiohttp
from abc import abstractmethod
from typing import Optional, Dict, Any, List
import structlog

from medscan.models.product import ProductRecord
from .interfaces import (
    IProductSource, BarcodeProvider, AdapterError, AdapterErrorKind,
    LookupCancelledError
)
from .formatter import strip_hyphens

logger = structlog.get_logger(__name__)


class HttpProductSource(IProductSource):
    """
    Base class for sources answering one HTTPS GET with a JSON document.

    Network timeouts are bounded per request by `timeout` seconds.
    """

    provider: BarcodeProvider

    def __init__(self,
                 base_url: str,
                 timeout: float = 10,
                 user_agent: str = "MedScan/1.0"):
        """
        Args:
            base_url: Endpoint queried by every variant
            timeout: Total timeout of one request, in seconds
            user_agent: User-Agent header sent with each request
        """
        self.base_url = base_url
        self.timeout = timeout
        self.user_agent = user_agent

        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Return the open HTTP session, creating it on first use."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            headers = {
                "User-Agent": self.user_agent,
                "Accept": "application/json",
            }
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers=headers
            )
        return self._session

    async def close(self):
        if self._session and not self._session.closed:
            await self._session.close()

    @property
    def provider_name(self) -> str:
        return self.provider.value

    def build_variants(self, formatted_code: str) -> List[str]:
        """Query strings to try, in order. Most sources have a single one."""
        return [formatted_code]

    @abstractmethod
    def build_params(self, variant: str) -> Dict[str, str]:
        """Query parameters for one variant."""
        pass

    @abstractmethod
    def parse_response(self, data: Dict[str, Any], barcode: str) -> ProductRecord:
        """
        Map a decoded response onto a record.

        Raises:
            AdapterError: NOT_FOUND for an empty result set, DECODE_ERROR for
                a result without a usable name
        """
        pass

    def _error(self, message: str, kind: AdapterErrorKind, barcode: str, **kwargs) -> AdapterError:
        return AdapterError(message, kind, provider=self.provider_name, barcode=barcode, **kwargs)

    async def query(self, formatted_code: str, cancel_event=None) -> ProductRecord:
        barcode = strip_hyphens(formatted_code)
        last_error: Optional[AdapterError] = None
        attempts = 0

        for variant in self.build_variants(formatted_code):
            if cancel_event is not None and cancel_event.is_set():
                if last_error is None:
                    raise LookupCancelledError(
                        "Lookup cancelled", provider=self.provider_name, barcode=barcode
                    )
                break

            attempts += 1
            try:
                return await self._fetch(variant, barcode)
            except AdapterError as e:
                logger.info(
                    "Source variant failed",
                    provider=self.provider_name,
                    variant=variant,
                    kind=e.kind.value,
                    error=str(e)
                )
                last_error = e

        last_error.attempts = attempts
        raise last_error

    async def _fetch(self, variant: str, barcode: str) -> ProductRecord:
        session = await self._get_session()
        params = self.build_params(variant)

        logger.info(
            "Querying product source",
            provider=self.provider_name,
            barcode=barcode,
            url=self.base_url,
            params=params
        )

        try:
            async with session.get(self.base_url, params=params) as response:
                if response.status == 404:
                    raise self._error("Product not found", AdapterErrorKind.NOT_FOUND, barcode, status=404)

                if not 200 <= response.status < 300:
                    raise self._error(
                        f"HTTP {response.status}: {response.reason}",
                        AdapterErrorKind.HTTP_STATUS,
                        barcode,
                        status=response.status
                    )

                try:
                    data = await response.json(content_type=None)
                except ValueError as e:
                    raise self._error(
                        f"Invalid JSON response: {e}",
                        AdapterErrorKind.DECODE_ERROR,
                        barcode,
                        original_error=e
                    )

        except asyncio.TimeoutError as e:
            raise self._error("Request timeout", AdapterErrorKind.TIMEOUT, barcode, original_error=e)
        except aiohttp.ClientError as e:
            raise self._error(
                f"Network error: {str(e)}",
                AdapterErrorKind.HTTP_STATUS,
                barcode,
                original_error=e
            )

        if not isinstance(data, dict):
            raise self._error("Unexpected response shape", AdapterErrorKind.DECODE_ERROR, barcode)

        try:
            return self.parse_response(data, barcode)
        except (KeyError, TypeError, AttributeError, IndexError, ValueError) as e:
            raise self._error(
                f"Unexpected response schema: {e}",
                AdapterErrorKind.DECODE_ERROR,
                barcode,
                original_error=e
            )
