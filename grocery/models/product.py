from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

class ProductRating(BaseModel):
    Rating: int = Field(..., ge=1, le=5)  # 1-5 stars

class Product(BaseModel):
    PLU: int
    Description: Optional[str] = None  # Missing on products created by a rating upsert
    Ratings: List[ProductRating] = Field(default_factory=list)
    AverageRating: Optional[float] = None

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Product":
        return cls(**{k: v for k, v in document.items() if k != "_id"})

    def to_document(self) -> Dict[str, Any]:
        # Unset fields stay out of the stored document
        return self.model_dump(exclude_none=True)

DEFAULT_RATING = 3

def sample_products() -> List[Product]:
    """Demo catalog inserted by a reset, each item starting with one default rating"""
    return [
        Product(PLU=4011, Description="Bananas", Ratings=[ProductRating(Rating=DEFAULT_RATING)]),
        Product(PLU=3283, Description="Apples", Ratings=[ProductRating(Rating=DEFAULT_RATING)]),
    ]
