import re
from typing import Optional

from grocery.core.errors import MissingOrInvalidProductKey, RatingOutOfRange
from grocery.models.rating import MAX_RATING, MIN_RATING, RatingSubmission

# Query parameters are 32-bit integers
INT32_MIN = -2**31
INT32_MAX = 2**31 - 1

_INTEGER = re.compile(r"^\s*[+-]?[0-9]{1,10}\s*$")

def parse_int(raw: Optional[str]) -> Optional[int]:
    """Integer value of a query parameter, or None when missing or not a 32-bit whole number"""
    if raw is None or not _INTEGER.match(raw):
        return None
    value = int(raw)
    if value < INT32_MIN or value > INT32_MAX:
        return None
    return value

def validate_plu(raw_plu: Optional[str]) -> int:
    plu = parse_int(raw_plu)
    # Zero and negative PLUs are accepted, as the reference handler does
    if plu is None:
        raise MissingOrInvalidProductKey()
    return plu

def validate_rating_input(raw_plu: Optional[str], raw_rating: Optional[str]) -> RatingSubmission:
    plu = validate_plu(raw_plu)

    rating = parse_int(raw_rating)
    if rating is None:
        raise RatingOutOfRange("Please pass a Rating parameter")
    if rating < MIN_RATING or rating > MAX_RATING:
        raise RatingOutOfRange()

    return RatingSubmission(plu=plu, rating=rating)
