"""Billing record models validated at the data-access boundary.

Records arrive as JSON exported from the hospital's document store, with
camelCase keys (``serviceName``, ``ipdId``, ...). Python field names are
accepted as well. Payments may be a list or a keyed mapping (the store's
native shape); mappings are flattened with the key used as payment id.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

logger = logging.getLogger(__name__)

SERVICE_TYPE = "service"
DOCTOR_VISIT_TYPE = "doctorvisit"


class BillingRecordError(Exception):
    """Raised when a billing record cannot be read or fails validation."""
    pass


def _blank_to_none(value: Any) -> Any:
    # The store writes "" for unset dates and optional text
    if isinstance(value, str) and not value.strip():
        return None
    return value


OptionalDatetime = Annotated[Optional[datetime], BeforeValidator(_blank_to_none)]
OptionalStr = Annotated[Optional[str], BeforeValidator(_blank_to_none)]


class ServiceItem(BaseModel):
    """A hospital service or consultant visit charged to an admission."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    service_name: str = Field("", alias="serviceName")
    doctor_name: OptionalStr = Field(None, alias="doctorName")
    type: Literal["service", "doctorvisit"] = SERVICE_TYPE
    amount: float = Field(0.0, ge=0)
    created_at: OptionalDatetime = Field(None, alias="createdAt")


class Payment(BaseModel):
    """A deposit or payment recorded against an admission."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: Optional[str] = None
    amount: float = Field(0.0, ge=0)
    payment_type: str = Field("cash", alias="paymentType")
    date: OptionalDatetime = None


class BillingRecord(BaseModel):
    """One IPD admission with its charges, payments and discount.

    Attributes:
        patient_id: Patient key in the store
        ipd_id: Admission key
        name: Patient name
        mobile_number: Patient mobile number
        amount: Deposit collected so far
        discount: Discount in rupees
        room_type: Optional ward/room type
        bed: Optional bed identifier
        created_at: Registration date/time
        discharge_date: Set once discharged (makes the invoice final)
        services: Service and consultant line items
        payments: Recorded payments
    """

    model_config = ConfigDict(populate_by_name=True)

    patient_id: str = Field(..., alias="patientId")
    ipd_id: str = Field(..., alias="ipdId")
    name: str
    mobile_number: str = Field("", alias="mobileNumber")
    amount: float = Field(0.0, ge=0)
    discount: float = Field(0.0, ge=0)
    room_type: OptionalStr = Field(None, alias="roomType")
    bed: OptionalStr = None
    created_at: OptionalDatetime = Field(None, alias="createdAt")
    discharge_date: OptionalDatetime = Field(None, alias="dischargeDate")
    services: List[ServiceItem] = Field(default_factory=list)
    payments: List[Payment] = Field(default_factory=list)

    @field_validator("discount", mode="before")
    @classmethod
    def default_discount(cls, value: Any) -> Any:
        return 0.0 if value in (None, "") else value

    @field_validator("services", "payments", mode="before")
    @classmethod
    def flatten_keyed_mapping(cls, value: Any, info: ValidationInfo) -> Any:
        """Accept the store's ``{key: item}`` mapping shape as well as lists."""
        if value is None:
            return []
        if isinstance(value, dict):
            items = []
            for key, item in value.items():
                if info.field_name == "payments" and isinstance(item, dict):
                    item = {"id": str(key), **item}
                items.append(item)
            return items
        return value

    @property
    def is_discharged(self) -> bool:
        return self.discharge_date is not None


def parse_billing_record(data: Union[dict, str]) -> BillingRecord:
    """Validate a billing record from a dict or JSON string.

    Raises:
        BillingRecordError: If validation fails
    """
    try:
        if isinstance(data, str):
            return BillingRecord.model_validate_json(data)
        return BillingRecord.model_validate(data)
    except ValidationError as e:
        raise BillingRecordError(f"Invalid billing record: {e}") from e


def load_billing_record(path: Union[str, Path]) -> BillingRecord:
    """Load and validate a billing record from a JSON file.

    Args:
        path: Path to JSON file

    Returns:
        Validated BillingRecord

    Raises:
        BillingRecordError: If the file is unreadable, not JSON, or invalid
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise BillingRecordError(f"Billing record not found: {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise BillingRecordError(f"Failed to read billing record {path}: {e}") from e

    if not isinstance(data, dict):
        raise BillingRecordError(f"Billing record must be a JSON object: {path}")

    record = parse_billing_record(data)
    logger.debug(
        f"Loaded billing record {record.ipd_id} with {len(record.services)} services "
        f"and {len(record.payments)} payments"
    )
    return record
