from typing import List

from pydantic import BaseModel

from recipesuggest.features.recipes.domain.models import Review


class ReviewsResponse(BaseModel):
    reviews: List[Review]
    average_rating: float
    review_count: int
