"""
FastAPI dependencies for the record store and the resolution pipeline.
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from medscan.db.database import get_sync_session
from medscan.repositories.product_repository import ProductRepository
from medscan.services.barcode import IProductRecordStore, ResolutionPipeline


def get_product_store(db: Session = Depends(get_sync_session)) -> IProductRecordStore:
    """Record store scoped to the request's database session."""
    return ProductRepository(db)


def get_resolution_pipeline(
    request: Request,
    store: IProductRecordStore = Depends(get_product_store)
) -> ResolutionPipeline:
    """
    Pipeline bound to the request's store.

    Sources (and their HTTP sessions) live for the whole application and are
    created in the lifespan handler.
    """
    return ResolutionPipeline(
        store=store,
        sources=request.app.state.sources,
        overrides=request.app.state.overrides
    )
