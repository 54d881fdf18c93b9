from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from typing import Optional
import logging

from grocery.core.errors import ClientInputError, StoreError
from grocery.db.session import get_store
from grocery.models.product import Product
from grocery.services.catalog import reset_catalog
from grocery.services.validation import validate_plu

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/ResetDemo", response_class=PlainTextResponse)
async def reset_demo(store=Depends(get_store)):
    """Clear the catalog, rebuild the PLU index and insert the sample items"""
    try:
        await reset_catalog(store)
    except StoreError as e:
        logger.error(f"Failed to reset demo catalog: {str(e)}")
        return PlainTextResponse(f"Error refreshing demo - {e}", status_code=400)

    return "Refreshed Demo database"

@router.get("/Product", response_model=Product)
async def get_product(PLU: Optional[str] = None, store=Depends(get_store)):
    try:
        plu = validate_plu(PLU)
        document = await store.get_product(plu)
    except ClientInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError as e:
        raise HTTPException(status_code=400, detail=f"Error: {e}")

    if not document:
        raise HTTPException(status_code=404, detail="Product not found")
    return Product.from_document(document)
