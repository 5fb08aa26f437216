"""
Address Book Routes
=====================
Saved addresses: list, add, edit, delete, make default.
"""

from fastapi import APIRouter, Depends

from common.api_client import ApiClient
from modules.auth.deps import require_login
from modules.customer.address_models import AddressInput
from modules.customer.address_service import address_service

router = APIRouter(tags=["addresses"])


# ==========================================
# 📬 Addresses
# ==========================================

@router.get("/addresses")
async def address_list(api: ApiClient = Depends(require_login)):
    addresses = address_service.list_addresses(api)
    return {"success": True, "message": "", "data": addresses}


@router.post("/addresses", status_code=201)
async def address_add(data: AddressInput, api: ApiClient = Depends(require_login)):
    address = address_service.create_address(api, data)
    return {"success": True, "message": "Address saved", "data": address}


@router.put("/addresses/{address_id}")
async def address_edit(address_id: str, data: AddressInput, api: ApiClient = Depends(require_login)):
    address = address_service.update_address(api, address_id, data)
    return {"success": True, "message": "Address updated", "data": address}


@router.delete("/addresses/{address_id}")
async def address_delete(address_id: str, api: ApiClient = Depends(require_login)):
    message = address_service.delete_address(api, address_id)
    return {"success": True, "message": message}


@router.post("/addresses/{address_id}/default")
async def address_set_default(address_id: str, api: ApiClient = Depends(require_login)):
    message = address_service.set_default(api, address_id)
    return {"success": True, "message": message}
