"""
Customer Module - Address Models
===================================
Address: saved shipping/billing location owned by one user.
AddressInput: inline form payload (address book form or checkout form).
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from config.settings import DEFAULT_COUNTRY
from common.helpers import is_blank


REQUIRED_ADDRESS_FIELDS = ("full_name", "phone", "address_line1", "city", "country")


class AddressInput(BaseModel):
    full_name: str = ""
    phone: str = ""
    address_line1: str = ""
    address_line2: Optional[str] = None
    city: str = ""
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: str = DEFAULT_COUNTRY
    is_default: bool = False

    def missing_fields(self) -> List[str]:
        return [f for f in REQUIRED_ADDRESS_FIELDS if is_blank(getattr(self, f))]

    def cleaned(self) -> "AddressInput":
        """Strip surrounding whitespace; empty optional fields become None."""
        data = self.model_dump()
        for key, value in data.items():
            if isinstance(value, str):
                value = value.strip()
                if key not in REQUIRED_ADDRESS_FIELDS and not value:
                    value = None
                data[key] = value
        return AddressInput(**data)


class Address(BaseModel):
    id: str
    user_id: Optional[str] = None
    full_name: str
    phone: str
    address_line1: str
    address_line2: Optional[str] = None
    city: str
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: str
    is_default: bool = False
    address_type: str = "shipping"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_input(self) -> AddressInput:
        return AddressInput(**self.model_dump(include=set(AddressInput.model_fields)))
