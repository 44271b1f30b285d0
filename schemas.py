# schemas.py

from pydantic import BaseModel, ConfigDict, Field, AliasChoices
from typing import Any, List, Optional, Union


class ResponseEnvelope(BaseModel):
    """Uniform result returned by every courier operation."""
    success: bool
    code: int
    message: str
    data: Any = None


class ValidationResult(BaseModel):
    status: bool
    message: str = "valid"
    error: Any = ""
    # field -> messages, kept for callers that want every error
    errors: dict = {}


class City(BaseModel):
    id: Union[int, str]
    name: Optional[str] = None
    allowed_as_origin: bool = Field(
        default=False, validation_alias=AliasChoices("allowed_as_origin", "allow_as_origin", "allowedAsOrigin")
    )
    allowed_as_destination: bool = Field(
        default=False,
        validation_alias=AliasChoices("allowed_as_destination", "allow_as_destination", "allowedAsDestination"),
    )

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ConsignmentBatchItem(BaseModel):
    """A packet as submitted inside an LCS batch booking."""
    booked_packet_weight: Any = None
    booked_packet_vol_weight_w: Any = 0
    booked_packet_vol_weight_h: Any = 0
    booked_packet_vol_weight_l: Any = 0
    booked_packet_no_piece: Any = 1
    booked_packet_collect_amount: Any = None
    booked_packet_order_id: Any = None
    origin_city: Any = "self"
    destination_city: Any = None
    booked_packet_cn: Any = ""
    shipment_id: Any = 101
    shipment_name_eng: Any = "self"
    shipment_email: Any = "self"
    shipment_phone: Any = "self"
    shipment_address: Any = "self"
    consignment_name_eng: Any = None
    consignment_email: Any = ""
    consignment_phone: Any = None
    consignment_phone_two: Any = ""
    consignment_phone_three: Any = ""
    consignment_address: Any = None
    special_instructions: Any = ""
    shipment_type: Any = "overnight"
    custom_data: Any = []
    return_address: Any = ""
    return_city: Any = ""
    is_vpc: Any = 0

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def from_order(cls, order: dict) -> "ConsignmentBatchItem":
        # omitted or null optional fields fall back to the defaults above
        return cls(**{k: v for k, v in (order or {}).items() if v is not None})


class CountryInfo(BaseModel):
    short_code: str
    dial_code: str
    name: str
    currency: str
    supported: bool = True


class CourierList(BaseModel):
    couriers: List[str]
