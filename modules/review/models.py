"""
Review Module - Models
========================
Review: a buyer's rating/comment on a product.
ProductRatingStats: aggregated star distribution.
CanReview: the API's own answer to "may I review this product?".
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


RATING_MIN = 1
RATING_MAX = 5
TITLE_MAX_LENGTH = 200
COMMENT_MAX_LENGTH = 2000


class Review(BaseModel):
    id: str
    product_id: str
    user_id: Optional[str] = None
    order_id: Optional[str] = None
    rating: int
    title: Optional[str] = None
    comment: Optional[str] = None
    is_verified_purchase: bool = False   # computed by the API, never sent
    is_approved: bool = True
    helpful_count: int = 0
    user_name: Optional[str] = None
    user_avatar: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReviewPage(BaseModel):
    reviews: List[Review] = Field(default_factory=list)
    total_reviews: int = 0
    page: int = 1
    limit: int = 10

    @field_validator("reviews", mode="before")
    @classmethod
    def _null_reviews(cls, v):
        return [] if v is None else v

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 1
        return max(1, -(-self.total_reviews // self.limit))

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


class ProductRatingStats(BaseModel):
    product_id: str
    average_rating: float = 0.0
    total_reviews: int = 0
    five_star_count: int = 0
    four_star_count: int = 0
    three_star_count: int = 0
    two_star_count: int = 0
    one_star_count: int = 0

    @property
    def distribution(self) -> Dict[int, int]:
        return {
            5: self.five_star_count,
            4: self.four_star_count,
            3: self.three_star_count,
            2: self.two_star_count,
            1: self.one_star_count,
        }

    def percentage(self, stars: int) -> int:
        """Share of reviews with the given star count, rounded to whole percent."""
        if not self.total_reviews:
            return 0
        return round(self.distribution.get(stars, 0) * 100 / self.total_reviews)


class CanReview(BaseModel):
    can_review: bool = False
    reason: str = ""
    existing_review_id: Optional[str] = None


class CreateReviewRequest(BaseModel):
    product_id: str
    order_id: Optional[str] = None       # may be left out when only one order qualifies
    rating: int
    title: Optional[str] = None
    comment: Optional[str] = None


class UpdateReviewRequest(BaseModel):
    rating: Optional[int] = None
    title: Optional[str] = None
    comment: Optional[str] = None
