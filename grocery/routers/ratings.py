from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from typing import Optional
import logging

from grocery.core.errors import ClientInputError, StoreError
from grocery.services.rating import RatingEngine, get_rating_engine
from grocery.services.validation import validate_rating_input

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/ProductReview", response_class=PlainTextResponse)
async def product_review(
    PLU: Optional[str] = None,
    Rating: Optional[str] = None,
    engine: RatingEngine = Depends(get_rating_engine),
):
    """Add a 1-5 star rating to a product and return its new average"""
    try:
        submission = validate_rating_input(PLU, Rating)
        result = await engine.submit(submission)
    except ClientInputError as e:
        logger.warning(f"Rejected rating PLU={PLU!r} Rating={Rating!r}: {str(e)}")
        return PlainTextResponse(str(e), status_code=400)
    except StoreError as e:
        logger.error(f"Rating for PLU={PLU!r} was not applied: {str(e)}")
        return PlainTextResponse(f"Error: {e}", status_code=400)

    return result.message()
