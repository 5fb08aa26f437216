"""
Customer Module - Address Book Service
=========================================
List / create / update / delete / set-default against the remote API.
Required fields are checked locally before any write.
"""

import logging
from typing import List, Optional

from common.api_client import ApiClient
from common.exceptions import AddressValidationError, ApiRequestError
from modules.customer.address_models import Address, AddressInput

logger = logging.getLogger("nepify.address")


class AddressService:

    def list_addresses(self, api: ApiClient) -> List[Address]:
        """Server order: default first, then most recently created."""
        resp = api.get("/addresses")
        return [Address.model_validate(a) for a in (resp.data or [])]

    def get_default(self, api: ApiClient) -> Optional[Address]:
        """
        Default address, or None when the user has none.
        The API answers 404 when no default exists.
        """
        try:
            resp = api.get("/addresses/default")
        except ApiRequestError as e:
            if e.status_code == 404:
                return None
            raise
        if resp.success and resp.data:
            return Address.model_validate(resp.data)
        return None

    def create_address(self, api: ApiClient, data: AddressInput) -> Address:
        data = self._validated(data)
        resp = api.post("/addresses", data.model_dump())
        logger.info("Address created")
        return Address.model_validate(resp.data)

    def update_address(self, api: ApiClient, address_id: str, data: AddressInput) -> Address:
        data = self._validated(data)
        resp = api.put(f"/addresses/{address_id}", data.model_dump())
        return Address.model_validate(resp.data)

    def delete_address(self, api: ApiClient, address_id: str) -> str:
        resp = api.delete(f"/addresses/{address_id}")
        return resp.message or "Address deleted"

    def set_default(self, api: ApiClient, address_id: str) -> str:
        resp = api.patch(f"/addresses/{address_id}/default")
        return resp.message or "Default address updated"

    # ==========================================
    # Private helpers
    # ==========================================

    def _validated(self, data: AddressInput) -> AddressInput:
        missing = data.missing_fields()
        if missing:
            raise AddressValidationError(missing)
        return data.cleaned()


address_service = AddressService()
