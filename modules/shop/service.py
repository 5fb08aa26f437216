"""
Shop Module - Service Layer
==============================
Shop creation (validated locally first), lookups, listing and the
vendor's own shop statistics.
"""

import logging
from typing import Optional

from common.api_client import ApiClient
from common.exceptions import ApiRequestError, NotFoundError, ValidationError
from common.helpers import slugify
from modules.shop.models import (
    DESCRIPTION_MAX_LENGTH, DESCRIPTION_MIN_LENGTH, NAME_MAX_LENGTH, NAME_MIN_LENGTH,
    Shop, ShopCreate, ShopPage, ShopStats,
)

logger = logging.getLogger("nepify.shop")


class ShopService:

    # ==========================================
    # Create
    # ==========================================

    def validate(self, data: ShopCreate) -> ShopCreate:
        """Trimmed copy of the form, or ValidationError naming the first problem."""
        name = data.name.strip()
        description = data.description.strip()
        if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
            raise ValidationError(
                f"Shop name must be {NAME_MIN_LENGTH} to {NAME_MAX_LENGTH} characters"
            )
        if not DESCRIPTION_MIN_LENGTH <= len(description) <= DESCRIPTION_MAX_LENGTH:
            raise ValidationError(
                f"Description must be {DESCRIPTION_MIN_LENGTH} to {DESCRIPTION_MAX_LENGTH} characters"
            )
        if not slugify(name):
            raise ValidationError("Shop name needs at least one letter or digit")

        optional = {
            key: (value.strip() or None) if isinstance(value, str) else value
            for key, value in data.model_dump(exclude={"name", "description"}).items()
        }
        return ShopCreate(name=name, description=description, **optional)

    def preview_slug(self, name: str) -> str:
        return slugify(name)

    def create_shop(self, api: ApiClient, data: ShopCreate) -> Shop:
        data = self.validate(data)
        resp = api.post("/shops", data.model_dump(exclude_none=True))
        if not resp.success or not resp.data:
            raise ApiRequestError(resp.error or resp.message or "Failed to create shop")
        shop = Shop.model_validate(resp.data)
        logger.info(f"Shop created: {shop.name} ({shop.slug})")
        return shop

    # ==========================================
    # Lookups
    # ==========================================

    def get_my_shop(self, api: ApiClient) -> Optional[Shop]:
        """The caller's shop, or None for a vendor who has not created one yet."""
        try:
            resp = api.get("/shops/my")
        except ApiRequestError as e:
            if e.status_code == 404:
                return None
            raise
        return Shop.model_validate(resp.data) if resp.data else None

    def get_shop(self, api: ApiClient, shop_id: str) -> Shop:
        resp = api.get(f"/shops/{shop_id}")
        if not resp.data:
            raise NotFoundError("Shop not found")
        return Shop.model_validate(resp.data)

    def get_shop_by_slug(self, api: ApiClient, slug: str) -> Shop:
        resp = api.get(f"/shops/slug/{slug}")
        if not resp.data:
            raise NotFoundError("Shop not found")
        return Shop.model_validate(resp.data)

    def list_shops(
        self,
        api: ApiClient,
        page: int = 1,
        page_size: int = 20,
        search: Optional[str] = None,
        active_only: bool = False,
    ) -> ShopPage:
        params = {
            "page": max(1, page),
            "page_size": max(1, page_size),
            "search": search.strip() if search and search.strip() else None,
            "active": "true" if active_only else None,
        }
        resp = api.get("/shops", params=params)
        if not isinstance(resp.data, dict):
            return ShopPage(page=params["page"], page_size=params["page_size"])
        return ShopPage.model_validate(resp.data)

    def get_my_stats(self, api: ApiClient) -> ShopStats:
        resp = api.get("/my-shop/stats")
        if not resp.data:
            raise NotFoundError("Shop not found")
        return ShopStats.model_validate(resp.data)


shop_service = ShopService()
