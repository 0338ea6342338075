"""
Factory and assembly of the resolution pipeline.

Architecture Pattern : Factory + Dependency Injection
The pipeline receives its record store, override table and sources at
construction; nothing here is a process-wide singleton except the
read-only override table.
"""

from typing import Optional, List, Sequence
import structlog

from medscan.core.config import Settings, settings as default_settings
from .interfaces import IProductSource, IProductRecordStore, BarcodeProvider
from .openfda import OpenFDAService
from .upcitemdb import UPCItemDBService
from .rxnorm import RxNormService
from .dailymed import DailyMedService
from .overrides import OverrideTable
from .pipeline import ResolutionPipeline

logger = structlog.get_logger(__name__)


class BarcodeSourceFactory:
    """
    Factory creating product sources by provider.

    Pattern : Factory Method + Strategy
    """

    @staticmethod
    def create_source(provider: BarcodeProvider, **kwargs) -> IProductSource:
        """
        Create a product source for a provider.

        Args:
            provider: Provider to build
            **kwargs: base_url, timeout, user_agent

        Returns:
            Product source instance

        Raises:
            ValueError: If the provider is not supported
        """
        provider = BarcodeProvider(provider)

        if provider == BarcodeProvider.OPENFDA:
            return OpenFDAService(**kwargs)
        elif provider == BarcodeProvider.UPCITEMDB:
            return UPCItemDBService(**kwargs)
        elif provider == BarcodeProvider.RXNORM:
            return RxNormService(**kwargs)
        elif provider == BarcodeProvider.DAILYMED:
            return DailyMedService(**kwargs)
        else:
            raise ValueError(f"Unsupported barcode provider: {provider}")

    @staticmethod
    def create_sources(config: Settings) -> List[IProductSource]:
        """Create the configured sources in priority order."""
        endpoints = {
            BarcodeProvider.OPENFDA: config.openfda_ndc_url,
            BarcodeProvider.UPCITEMDB: config.upcitemdb_lookup_url,
            BarcodeProvider.RXNORM: config.rxnorm_ndcstatus_url,
            BarcodeProvider.DAILYMED: config.dailymed_spls_url,
        }

        sources = []
        for name in config.source_names:
            provider = BarcodeProvider(name)
            sources.append(BarcodeSourceFactory.create_source(
                provider,
                base_url=endpoints[provider],
                timeout=config.source_timeout,
                user_agent=config.user_agent
            ))
        return sources


def create_resolution_pipeline(store: Optional[IProductRecordStore],
                               config: Optional[Settings] = None,
                               sources: Optional[Sequence[IProductSource]] = None,
                               overrides: Optional[OverrideTable] = None) -> ResolutionPipeline:
    """
    Assemble a pipeline around an injected record store.

    Args:
        store: Record store consulted before any other stage
        config: Settings used to build sources when `sources` is not given
        sources: Explicit sources, in priority order
        overrides: Override table; the process-wide table by default

    Returns:
        ResolutionPipeline
    """
    config = config or default_settings
    if sources is None:
        sources = BarcodeSourceFactory.create_sources(config)

    pipeline = ResolutionPipeline(store=store, sources=sources, overrides=overrides)

    logger.info(
        "Resolution pipeline created",
        sources=[source.provider_name for source in pipeline.sources],
        store=type(store).__name__ if store is not None else None
    )
    return pipeline
