"""
Catalog Module - Service Layer
================================
Product listing with search, price range and sort.

The API accepts the filters as query parameters, but the observed server
returns the whole catalog, so the same filters are applied again locally.
"""

from typing import List

from common.api_client import ApiClient
from common.exceptions import ResponseParseError
from modules.catalog.models import Product, ProductQuery, ProductSort


class CatalogService:

    def list_products(self, api: ApiClient, query: ProductQuery = None) -> List[Product]:
        query = query or ProductQuery()
        resp = api.get("/products", params=query.as_params())
        products = [Product.model_validate(p) for p in (resp.data or [])]
        return self.apply_query(products, query)

    def get_product(self, api: ApiClient, product_id: str) -> Product:
        resp = api.get(f"/products/{product_id}")
        if not resp.data:
            raise ResponseParseError("Product payload missing")
        return Product.model_validate(resp.data)

    def apply_query(self, products: List[Product], query: ProductQuery) -> List[Product]:
        result = [p for p in products if p.is_active]

        if query.search and query.search.strip():
            term = query.search.strip().lower()
            result = [
                p for p in result
                if term in p.name.lower() or term in (p.description or "").lower()
            ]
        if query.min_price is not None:
            result = [p for p in result if p.price >= query.min_price]
        if query.max_price is not None:
            result = [p for p in result if p.price <= query.max_price]

        if query.sort == ProductSort.PRICE_ASC:
            result.sort(key=lambda p: p.price)
        elif query.sort == ProductSort.PRICE_DESC:
            result.sort(key=lambda p: p.price, reverse=True)
        elif query.sort == ProductSort.NAME_ASC:
            result.sort(key=lambda p: p.name.lower())
        else:
            result.sort(key=lambda p: p.created_at.timestamp() if p.created_at else 0, reverse=True)
        return result


catalog_service = CatalogService()
