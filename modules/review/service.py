"""
Review Service - Business Logic
==================================
List, create, edit and delete product reviews; rating stats; "helpful".
Creation goes through the eligibility gate first.
"""

import logging
from typing import Optional

from common.api_client import ApiClient
from common.exceptions import ApiRequestError, NepifyError, NotFoundError, ValidationError
from modules.review.eligibility import ReviewEligibility, check_eligibility
from modules.review.models import (
    COMMENT_MAX_LENGTH, RATING_MAX, RATING_MIN, TITLE_MAX_LENGTH,
    CanReview, CreateReviewRequest, ProductRatingStats, Review, ReviewPage,
    UpdateReviewRequest,
)

logger = logging.getLogger("nepify.review")

DEFAULT_PAGE_SIZE = 10


def _clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


def validate_review_fields(rating: Optional[int], title: Optional[str], comment: Optional[str]):
    if rating is not None and not RATING_MIN <= rating <= RATING_MAX:
        raise ValidationError(f"Rating must be between {RATING_MIN} and {RATING_MAX}")
    if title and len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Title must be at most {TITLE_MAX_LENGTH} characters")
    if comment and len(comment) > COMMENT_MAX_LENGTH:
        raise ValidationError(f"Comment must be at most {COMMENT_MAX_LENGTH} characters")


class ReviewService:

    # ------------------------------------------
    # Read
    # ------------------------------------------

    def list_reviews(self, api: ApiClient, product_id: str, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> ReviewPage:
        page = max(1, page)
        limit = max(1, limit)
        resp = api.get(f"/reviews/product/{product_id}", params={"page": page, "limit": limit})
        if not isinstance(resp.data, dict):
            return ReviewPage(page=page, limit=limit)
        return ReviewPage.model_validate(resp.data)

    def get_stats(self, api: ApiClient, product_id: str) -> ProductRatingStats:
        resp = api.get(f"/reviews/product/{product_id}/stats")
        if not isinstance(resp.data, dict):
            return ProductRatingStats(product_id=product_id)
        return ProductRatingStats.model_validate({"product_id": product_id, **resp.data})

    def get_review(self, api: ApiClient, review_id: str) -> Review:
        resp = api.get(f"/reviews/{review_id}")
        if not resp.data:
            raise NotFoundError("Review not found")
        return Review.model_validate(resp.data)

    def can_review(self, api: ApiClient, product_id: str) -> CanReview:
        resp = api.get(f"/reviews/can-review/{product_id}")
        return CanReview.model_validate(resp.data or {})

    def eligibility(self, api: ApiClient, product_id: str) -> ReviewEligibility:
        """
        Local gate (delivered orders with the product) plus the API's note of
        an existing review. The API lookup is advisory; if it fails the
        local gate decides alone.
        """
        existing = None
        try:
            existing = self.can_review(api, product_id).existing_review_id
        except NepifyError as e:
            logger.info(f"can-review lookup failed for {product_id}: {e.message}")
        return check_eligibility(api, product_id, existing_review_id=existing)

    # ------------------------------------------
    # Create Review
    # ------------------------------------------

    def create_review(
        self,
        api: ApiClient,
        data: CreateReviewRequest,
        eligibility: Optional[ReviewEligibility] = None,
    ) -> Review:
        title = _clean_text(data.title)
        comment = _clean_text(data.comment)
        validate_review_fields(data.rating, title, comment)

        eligibility = eligibility or self.eligibility(api, data.product_id)
        order_id = eligibility.select(data.order_id)

        body = {"product_id": data.product_id, "order_id": order_id, "rating": data.rating}
        if title:
            body["title"] = title
        if comment:
            body["comment"] = comment

        resp = api.post("/reviews", body)
        if not resp.success or not resp.data:
            raise ApiRequestError(resp.error or resp.message or "Failed to submit review")
        review = Review.model_validate(resp.data)
        logger.info(f"Review {review.id} created for product {data.product_id} (order {order_id})")
        return review

    # ------------------------------------------
    # Edit / Delete
    # ------------------------------------------

    def update_review(self, api: ApiClient, review_id: str, data: UpdateReviewRequest) -> Review:
        changes = data.model_dump(exclude_none=True)
        for key in ("title", "comment"):
            if key in changes:
                changes[key] = changes[key].strip()
        if not changes:
            raise ValidationError("Nothing to update")
        validate_review_fields(changes.get("rating"), changes.get("title"), changes.get("comment"))

        resp = api.put(f"/reviews/{review_id}", changes)
        if not resp.success:
            raise ApiRequestError(resp.error or resp.message or "Failed to update review")
        logger.info(f"Review {review_id} updated: {sorted(changes)}")
        return self.get_review(api, review_id)

    def delete_review(self, api: ApiClient, review_id: str) -> str:
        resp = api.delete(f"/reviews/{review_id}")
        if not resp.success:
            raise ApiRequestError(resp.error or resp.message or "Failed to delete review")
        logger.info(f"Review {review_id} deleted")
        return resp.message or "Review deleted"

    # ------------------------------------------
    # Helpful
    # ------------------------------------------

    def mark_helpful(self, api: ApiClient, review_id: str) -> str:
        """Sent on every click; whether repeats count is up to the API."""
        resp = api.post(f"/reviews/{review_id}/helpful")
        if not resp.success:
            raise ApiRequestError(resp.error or resp.message or "Failed to mark review as helpful")
        return resp.message or "Marked as helpful"


review_service = ReviewService()
