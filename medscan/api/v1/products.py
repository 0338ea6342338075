"""
Product resolution and record management endpoints.
"""

from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import BaseModel
import structlog

from medscan.core.dependencies import get_product_store, get_resolution_pipeline
from medscan.models.product import ProductRecord
from medscan.services.barcode import (
    IProductRecordStore, ResolutionPipeline, LookupStatus
)

logger = structlog.get_logger(__name__)

router = APIRouter()


# Pydantic models for responses

class ResolveResponse(BaseModel):
    barcode: str
    symbology: str
    source: str
    confidence: float
    record: ProductRecord
    failures: List[Dict[str, Any]] = []


class FailureDetail(BaseModel):
    error: str
    message: str
    barcode: Optional[str] = None
    failures: List[Dict[str, Any]] = []


# API Endpoints

@router.get("/resolve", response_model=ResolveResponse)
async def resolve_product(
    code: str = Query(..., description="Raw scanned or typed code"),
    pipeline: ResolutionPipeline = Depends(get_resolution_pipeline)
):
    """Resolve a raw code into a product record. Nothing is saved."""
    outcome = await pipeline.resolve(code)

    if outcome.status == LookupStatus.INVALID_INPUT:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=FailureDetail(
                error="invalid_input",
                message="Please enter a valid barcode",
                barcode=outcome.code.digits if outcome.code else None,
            ).model_dump()
        )

    if outcome.status == LookupStatus.EXHAUSTED:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=FailureDetail(
                error="not_found",
                message=f"No medication found for barcode: {outcome.code.digits}. You can add it manually.",
                barcode=outcome.code.digits,
                failures=[failure.to_dict() for failure in outcome.failures],
            ).model_dump()
        )

    return ResolveResponse(
        barcode=outcome.code.digits,
        symbology=outcome.code.symbology.value,
        source=outcome.source_name,
        confidence=outcome.confidence,
        record=outcome.record,
        failures=[failure.to_dict() for failure in outcome.failures],
    )


@router.get("/{barcode}", response_model=ProductRecord)
async def get_product(
    barcode: str,
    store: IProductRecordStore = Depends(get_product_store)
):
    """Get a stored product by its canonical barcode."""
    record = await store.find_by_barcode(barcode)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found"
        )
    return record


@router.put("", response_model=ProductRecord)
async def save_product(
    record: ProductRecord,
    store: IProductRecordStore = Depends(get_product_store)
):
    """Save a resolved, possibly user-edited, product record."""
    return await store.upsert(record)


@router.delete("/{barcode}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    barcode: str,
    store: IProductRecordStore = Depends(get_product_store)
):
    """Delete a stored product."""
    deleted = await store.delete(barcode)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
