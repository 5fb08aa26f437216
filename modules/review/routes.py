"""
Review Module - Routes
========================
Public: product reviews and rating stats.
Buyer: eligibility check, submit, edit, delete, mark helpful.
"""

from fastapi import APIRouter, Depends, Query

from common.api_client import ApiClient
from modules.auth.deps import get_api, require_login
from modules.review.models import CreateReviewRequest, UpdateReviewRequest
from modules.review.service import DEFAULT_PAGE_SIZE, review_service

router = APIRouter(tags=["reviews"])


# ==========================================
# ⭐ Product Reviews
# ==========================================

@router.get("/products/{product_id}/reviews")
async def product_reviews(
    product_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=50),
    api: ApiClient = Depends(get_api),
):
    result = review_service.list_reviews(api, product_id, page, limit)
    return {
        "success": True,
        "message": "",
        "data": {
            "reviews": result.reviews,
            "total_reviews": result.total_reviews,
            "page": result.page,
            "limit": result.limit,
            "total_pages": result.total_pages,
            "has_next": result.has_next,
        },
    }


@router.get("/products/{product_id}/reviews/stats")
async def product_review_stats(product_id: str, api: ApiClient = Depends(get_api)):
    stats = review_service.get_stats(api, product_id)
    return {
        "success": True,
        "message": "",
        "data": {
            "stats": stats,
            "percentages": {stars: stats.percentage(stars) for stars in stats.distribution},
        },
    }


@router.get("/products/{product_id}/reviews/eligibility")
async def review_eligibility(product_id: str, api: ApiClient = Depends(require_login)):
    gate = review_service.eligibility(api, product_id)
    return {"success": True, "message": gate.reason, "data": gate.as_dict()}


# ==========================================
# ✍️ Submit / Edit / Delete
# ==========================================

@router.post("/reviews", status_code=201)
async def submit_review(data: CreateReviewRequest, api: ApiClient = Depends(require_login)):
    review = review_service.create_review(api, data)
    return {"success": True, "message": "Thanks for your review", "data": review}


@router.put("/reviews/{review_id}")
async def edit_review(review_id: str, data: UpdateReviewRequest, api: ApiClient = Depends(require_login)):
    review = review_service.update_review(api, review_id, data)
    return {"success": True, "message": "Review updated", "data": review}


@router.delete("/reviews/{review_id}")
async def delete_review(review_id: str, api: ApiClient = Depends(require_login)):
    message = review_service.delete_review(api, review_id)
    return {"success": True, "message": message}


# ==========================================
# 👍 Helpful
# ==========================================

@router.post("/reviews/{review_id}/helpful")
async def mark_helpful(review_id: str, api: ApiClient = Depends(require_login)):
    message = review_service.mark_helpful(api, review_id)
    return {"success": True, "message": message}
