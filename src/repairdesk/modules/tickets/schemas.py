"""Pydantic schemas for repair tickets.

Field names are snake_case in Python and camelCase on the wire, matching
the stored column names.
"""

import enum
import re
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import Field, field_validator

from repairdesk.core.constants import (
    DEFAULT_WARRANTY,
    IMEI_LENGTH,
    MAX_BRAND_LENGTH,
    MAX_NAME_LENGTH,
    MAX_NUMBER_LENGTH,
)
from repairdesk.core.schemas import CamelModel, reject_null


IMEI_PATTERN = re.compile(rf"^[0-9]{{{IMEI_LENGTH}}}$")


class TicketStatus(str, enum.Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


def validate_imei(value: str) -> str:
    """Require exactly 15 digits.

    Raises:
        ValueError: If the IMEI is not 15 numeric characters
    """
    value = value.strip()
    if not IMEI_PATTERN.match(value):
        raise ValueError(f"IMEI must be exactly {IMEI_LENGTH} digits and numeric only")
    return value


# ============================================================
# Requests
# ============================================================


class TicketCreate(CamelModel):
    """Request to open a repair ticket.

    Repair number and SPU are always generated; the serial number is
    generated only when none is supplied.
    """

    client_id: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    customer_name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    contact: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    imei_no: str
    brand: str = Field(..., min_length=1, max_length=MAX_BRAND_LENGTH)
    model: str = Field(..., min_length=1, max_length=MAX_BRAND_LENGTH)
    serial_no: str | None = Field(None, max_length=MAX_NAME_LENGTH)
    software_version: str | None = Field(None, max_length=MAX_BRAND_LENGTH)
    warranty: str = Field(DEFAULT_WARRANTY, max_length=MAX_NUMBER_LENGTH)
    sim_card: bool = False
    memory_card: bool = False
    charger: bool = False
    battery: bool = False
    water_damaged: bool = False
    loan_equipment: bool = False
    equipment_obs: str | None = None
    repair_obs: str | None = None
    selected_services: list[str] = Field(default_factory=list)
    condition: str | None = None
    problem: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    status: TicketStatus = TicketStatus.PENDING

    @field_validator("imei_no")
    @classmethod
    def check_imei(cls, v: str) -> str:
        return validate_imei(v)

    @field_validator("client_id")
    @classmethod
    def check_client_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Client id is required")
        return v.strip()


class TicketUpdate(CamelModel):
    """Partial update; only fields that were sent are written."""

    client_id: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    customer_name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    contact: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    imei_no: str | None = None
    brand: str | None = Field(None, min_length=1, max_length=MAX_BRAND_LENGTH)
    model: str | None = Field(None, min_length=1, max_length=MAX_BRAND_LENGTH)
    serial_no: str | None = Field(None, max_length=MAX_NAME_LENGTH)
    software_version: str | None = Field(None, max_length=MAX_BRAND_LENGTH)
    warranty: str | None = Field(None, max_length=MAX_NUMBER_LENGTH)
    sim_card: bool | None = None
    memory_card: bool | None = None
    charger: bool | None = None
    battery: bool | None = None
    water_damaged: bool | None = None
    loan_equipment: bool | None = None
    equipment_obs: str | None = None
    repair_obs: str | None = None
    selected_services: list[str] | None = None
    condition: str | None = None
    problem: str | None = Field(None, min_length=1)
    price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    status: TicketStatus | None = None

    @field_validator("imei_no")
    @classmethod
    def check_imei(cls, v: str | None) -> str | None:
        return validate_imei(v) if v is not None else v

    @field_validator("customer_name", "contact", "imei_no", "brand", "model", "problem", "price")
    @classmethod
    def check_not_null(cls, v: Any) -> Any:
        return reject_null(v)


# ============================================================
# Responses
# ============================================================


class TicketResponse(CamelModel):
    id: str
    user_id: str
    repair_number: str
    spu: str | None
    client_id: str | None
    customer_name: str
    contact: str
    imei_no: str
    brand: str
    model: str
    serial_no: str | None
    software_version: str | None
    warranty: str | None
    sim_card: bool | None
    memory_card: bool | None
    charger: bool | None
    battery: bool | None
    water_damaged: bool | None
    loan_equipment: bool | None
    equipment_obs: str | None
    repair_obs: str | None
    selected_services: list[str] | None
    condition: str | None
    problem: str
    price: float
    status: TicketStatus | None
    created_at: datetime | None
    updated_at: datetime | None


class DeletedTicketResponse(TicketResponse):
    deleted_at: datetime | None


class TicketListResponse(CamelModel):
    items: list[TicketResponse]
    total: int
    limit: int
    offset: int


class DeletedTicketListResponse(CamelModel):
    items: list[DeletedTicketResponse]
    total: int
    limit: int
    offset: int
