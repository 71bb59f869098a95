"""Domain entities and their wire representations."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel, to_pascal


class ProductEntity(BaseModel):
    """A product as exchanged with the CRUD API (PascalCase keys, ``_id``)."""
    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra='ignore',
    )

    product_name: Optional[str] = None
    product_code: Optional[str] = None
    img: Optional[str] = None
    unit_price: Optional[str] = None
    qty: Optional[str] = None
    total_price: Optional[str] = None
    created_date: Optional[datetime] = None
    id: Optional[str] = Field(default=None, alias="_id")

    def to_wire(self) -> Dict[str, Any]:
        """Request body for create/update calls."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class LoginRequest(BaseModel):
    model_config = ConfigDict(extra='forbid')

    email: str = Field(min_length=3)
    password: str = Field(min_length=1)


class LoginResponse(BaseModel):
    """Token pair found under ``data`` in the login response."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='ignore')

    access_token: str = Field(min_length=1)
    refresh_token: Optional[str] = None
