"""
Cart Module - Cart State Manager
===================================
Local mirror of the authoritative server-side cart.

Rules:
  - every mutation is followed by a full refetch (never a local-only edit),
    so subtotals and stock always come from the server
  - a failed fetch resets the mirror instead of keeping stale data
  - mutations on one mirror are serialized by a lock
  - each refetch gets a sequence number; a response that arrives after a
    newer refetch was issued is dropped
"""

import enum
import logging
import threading
from typing import Optional

from pydantic import ValidationError as PayloadError

from common.api_client import ApiClient
from common.exceptions import (
    ApiRequestError, AuthenticationError, CartValidationError, NepifyError,
)
from modules.cart.models import Cart
from modules.cart.service import CartService, cart_service

logger = logging.getLogger("nepify.cart")


class CartStatus(str, enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    LOADING = "loading"
    EMPTY = "empty"
    POPULATED = "populated"


class CartState:

    def __init__(self, api: ApiClient, service: CartService = cart_service):
        self._api = api
        self._service = service
        self.cart: Optional[Cart] = None
        self.loading = False
        self._mutation_lock = threading.RLock()
        self._seq_lock = threading.Lock()
        self._issued_seq = 0

    # ==========================================
    # Read
    # ==========================================

    @property
    def count(self) -> int:
        return self.cart.item_count if self.cart else 0

    @property
    def status(self) -> CartStatus:
        if not self._api.is_authenticated:
            return CartStatus.UNAUTHENTICATED
        if self.loading:
            return CartStatus.LOADING
        if self.cart is None or self.cart.is_empty:
            return CartStatus.EMPTY
        return CartStatus.POPULATED

    def refresh(self) -> Optional[Cart]:
        """Refetch the cart. Any failure leaves an absent cart behind."""
        if not self._api.is_authenticated:
            self.cart = None
            return None

        seq = self._next_seq()
        self.loading = True
        try:
            cart = self._service.fetch_cart(self._api)
        except NepifyError as e:
            logger.warning(f"Failed to fetch cart: {e.message}")
            cart = None
        except PayloadError as e:
            logger.warning(f"Cart payload rejected: {e.error_count()} invalid field(s)")
            cart = None
        finally:
            self.loading = False

        self._apply(seq, cart)
        return self.cart

    # ==========================================
    # Mutations
    # ==========================================

    def add(self, product_id: str, quantity: int = 1, stock_quantity: Optional[int] = None) -> Optional[Cart]:
        """
        Add `quantity` units of a product.
        Stock is taken from the argument (product page) or from the
        line already in the mirror; when known, the resulting line
        quantity may not exceed it.
        """
        if quantity < 1:
            raise CartValidationError("Quantity must be at least 1")

        existing = self.cart.find_item(product_id) if self.cart else None
        if stock_quantity is None and existing:
            stock_quantity = existing.stock_quantity
        if stock_quantity is not None:
            in_cart = existing.quantity if existing else 0
            if in_cart + quantity > stock_quantity:
                raise CartValidationError(
                    f"Only {stock_quantity} in stock ({in_cart} already in your cart)"
                )

        return self._mutate(lambda: self._service.add_item(self._api, product_id, quantity))

    def update_quantity(self, item_id: str, quantity: int) -> Optional[Cart]:
        if quantity < 1:
            raise CartValidationError("Quantity must be at least 1. Remove the item instead.")
        item = self.cart.get_item(item_id) if self.cart else None
        if item and quantity > item.stock_quantity:
            raise CartValidationError(f"Only {item.stock_quantity} in stock")
        return self._mutate(lambda: self._service.update_item(self._api, item_id, quantity))

    def remove(self, item_id: str) -> Optional[Cart]:
        return self._mutate(lambda: self._service.remove_item(self._api, item_id))

    def clear(self) -> Optional[Cart]:
        return self._mutate(lambda: self._service.clear_cart(self._api))

    def sign_out(self):
        """Discard the mirror; in-flight refetches are ignored."""
        self._next_seq()
        self.cart = None
        self.loading = False

    # ==========================================
    # Private helpers
    # ==========================================

    def _mutate(self, call) -> Optional[Cart]:
        if not self._api.is_authenticated:
            raise AuthenticationError()
        with self._mutation_lock:
            self.loading = True
            try:
                resp = call()
            finally:
                self.loading = False
            if not resp.success:
                raise ApiRequestError(resp.error or resp.message or "Cart update failed")
            return self.refresh()

    def _next_seq(self) -> int:
        with self._seq_lock:
            self._issued_seq += 1
            return self._issued_seq

    def _apply(self, seq: int, cart: Optional[Cart]) -> bool:
        with self._seq_lock:
            if seq != self._issued_seq:
                logger.debug(f"Dropping stale cart response #{seq} (latest #{self._issued_seq})")
                return False
            if cart is not None:
                errors = cart.consistency_errors()
                if errors:
                    logger.warning(f"Cart {cart.id} payload inconsistent: {'; '.join(errors)}")
            self.cart = cart
            return True
