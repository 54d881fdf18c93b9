from pydantic import BaseModel, Field

MIN_RATING = 1
MAX_RATING = 5

class RatingSubmission(BaseModel):
    plu: int
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)

class RatingResult(BaseModel):
    plu: int
    rating: int
    average: float

    def message(self) -> str:
        return f"Added Rating of {self.rating} to {self.plu}.  Average rating is {self.average}"
