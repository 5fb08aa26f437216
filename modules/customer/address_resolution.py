"""
Customer Module - Checkout Address Resolution
================================================
Decides, once when checkout loads, which address the form starts with:

  1. the user's default address            → mode "saved"
  2. else the first saved address          → mode "saved"
     (server lists default first, then most recent)
  3. else an empty form with is_default on  → mode "new"
     (a user's first address is always their default)

The result is never empty and never ambiguous: exactly one of the three.
"""

import enum
import logging
from typing import Optional

from common.api_client import ApiClient
from common.exceptions import AddressValidationError, NepifyError, ValidationError
from modules.customer.address_models import Address, AddressInput
from modules.customer.address_service import AddressService, address_service

logger = logging.getLogger("nepify.address")


class AddressMode(str, enum.Enum):
    SAVED = "saved"
    NEW = "new"


class AddressResolution:

    def __init__(self, saved: Optional[Address] = None, mode: Optional[AddressMode] = None):
        self.saved = saved
        if mode is None:
            mode = AddressMode.SAVED if saved else AddressMode.NEW
        if mode == AddressMode.SAVED and not saved:
            raise ValidationError("No saved address to use")
        self.mode = mode
        self.form = saved.to_input() if mode == AddressMode.SAVED else self._blank_form()

    @property
    def has_saved(self) -> bool:
        return self.saved is not None

    # ------------------------------------------
    # Mode toggling (any time before submit)
    # ------------------------------------------

    def use_saved(self):
        if not self.has_saved:
            raise ValidationError("No saved address to use")
        self.mode = AddressMode.SAVED
        self.form = self.saved.to_input()

    def use_new(self):
        self.mode = AddressMode.NEW
        self.form = self._blank_form()

    def update_form(self, **fields):
        """Edit the inline form. The saved-mode form is read-only."""
        if self.mode == AddressMode.SAVED:
            raise ValidationError("Switch to a new address to edit it")
        self.form = self.form.model_copy(update=fields)

    # ------------------------------------------
    # Submit
    # ------------------------------------------

    def validate(self):
        if self.mode == AddressMode.NEW:
            missing = self.form.missing_fields()
            if missing:
                raise AddressValidationError(missing)

    def checkout_fields(self) -> dict:
        """Order payload fragment: a saved-address reference or an inline address."""
        self.validate()
        if self.mode == AddressMode.SAVED:
            return {"shipping_address_id": self.saved.id}
        return {"shipping_address": self.form.cleaned().model_dump()}

    def as_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "saved_address": self.saved,
            "form": self.form,
        }

    def _blank_form(self) -> AddressInput:
        # Without a saved address the new one stays the user's only address
        return AddressInput(is_default=not self.has_saved)


def resolve_checkout_address(api: ApiClient, service: AddressService = address_service) -> AddressResolution:
    try:
        default = service.get_default(api)
    except NepifyError as e:
        logger.info(f"Default address lookup failed, falling back to list: {e.message}")
        default = None
    if default:
        return AddressResolution(saved=default)

    try:
        addresses = service.list_addresses(api)
    except NepifyError as e:
        logger.info(f"Address list lookup failed, starting with a new address: {e.message}")
        addresses = []
    if addresses:
        return AddressResolution(saved=addresses[0])

    return AddressResolution()
