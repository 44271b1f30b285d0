# services/couriers/validation.py
"""
Rule tables for courier requests.

Each operation declares its field rules as a pydantic model. The helpers below
turn pydantic errors into a ValidationResult, so callers never see an exception
for bad input. Booking validation also checks the origin/destination against
the courier's live city list, fetched through an injected lookup.
"""

import logging
from datetime import date, datetime
from typing import Annotated, Any, Callable, ClassVar, Dict, Iterable, List, Literal, Optional, Type

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    ValidationError,
    model_validator,
)

from schemas import City, ValidationResult

log = logging.getLogger("couriers.validation")

CityLookup = Callable[[], Iterable[City]]

MAX_CN_NUMBERS = 50
SELF_ORIGIN = "self"


def _date_with_format(fmt: str):
    def parse(value: Any) -> Any:
        if isinstance(value, (date, datetime)):
            return value
        if not isinstance(value, str):
            raise ValueError(f"must be a date in {fmt} format")
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            raise ValueError(f"must be a date in {fmt} format")
    return parse


def _present(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError("is required")
    return value


def _collection(value: Any) -> Any:
    if value is not None and not isinstance(value, (dict, list)):
        raise ValueError("must be an array")
    return value


Text = Annotated[str, StringConstraints(min_length=1)]
# city ids, load sheet ids: int or string, just not empty
Identifier = Annotated[Any, AfterValidator(_present)]
JsonArray = Annotated[Any, AfterValidator(_collection)]
YmdDate = Annotated[date, BeforeValidator(_date_with_format("%Y-%m-%d"))]
DmyDate = Annotated[date, BeforeValidator(_date_with_format("%d-%m-%Y"))]


class RuleSet(BaseModel):
    model_config = ConfigDict(extra="allow")

    # (field, pydantic error type) -> message; "*" matches any error type
    messages: ClassVar[Dict[tuple, str]] = {}

    @classmethod
    def message_for(cls, field: str, err_type: str, default: str) -> str:
        return cls.messages.get((field, err_type)) or cls.messages.get((field, "*")) or default


def _distinct(values: List[Any], field: str) -> None:
    if len(set(values)) != len(values):
        raise ValueError(f"{field} must not contain duplicate values")


# ----------------------- LCS -----------------------

class LCSBookingRequest(RuleSet):
    booked_packet_weight: int = Field(ge=1)
    booked_packet_no_piece: int = Field(ge=1)
    booked_packet_collect_amount: float = Field(ge=0)
    booked_packet_order_id: Text
    origin_city: Identifier
    destination_city: Identifier
    shipment_id: int
    shipment_name_eng: Text
    shipment_email: EmailStr
    shipment_phone: Text
    shipment_address: Text
    consignment_name_eng: Text
    consignment_phone: Text
    consignment_address: Text
    special_instructions: Optional[str] = None
    shipment_type: Optional[str] = None
    custom_data: JsonArray = None
    return_address: Optional[str] = None
    return_city: Optional[int] = None
    is_vpc: Optional[Literal[0, 1]] = None


class LCSPacketRequest(RuleSet):
    """Per-item rules for batch booking."""
    booked_packet_weight: float = Field(ge=1)
    booked_packet_collect_amount: float = Field(ge=0)
    booked_packet_order_id: Text
    destination_city: float
    consignment_name_eng: Text
    consignment_phone: Text
    consignment_address: Text


class ConsignmentNumbers(RuleSet):
    cn_numbers: List[str] = Field(min_length=1, max_length=MAX_CN_NUMBERS)

    @model_validator(mode="after")
    def _check_distinct(self):
        _distinct(self.cn_numbers, "cn_numbers")
        return self


class ShipmentOrderIds(RuleSet):
    shipment_order_id: List[str] = Field(min_length=1)

    @model_validator(mode="after")
    def _check_distinct(self):
        _distinct(self.shipment_order_id, "shipment_order_id")
        return self


class BookedPacketStatusRange(RuleSet):
    from_date: DmyDate
    to_date: DmyDate

    @model_validator(mode="after")
    def _check_order(self):
        if self.from_date > self.to_date:
            raise ValueError("From date cannot be after To date.")
        return self


class ShipperAdviceFilter(RuleSet):
    from_date: YmdDate
    to_date: YmdDate
    origin_city: Optional[int] = None
    destination_city: Optional[int] = None

    @model_validator(mode="after")
    def _check_order(self):
        if self.to_date < self.from_date:
            raise ValueError("to_date must be a date after or equal to from_date")
        return self


class PaginatedAdviceFilter(RuleSet):
    start: int = Field(ge=0)
    length: int = Field(ge=1, le=100)
    dateFrom: Optional[YmdDate] = None
    toDate: Optional[YmdDate] = None
    product: Optional[str] = None
    status: Optional[str] = None
    origionID: Optional[int] = None
    destinationID: Optional[int] = None
    Cn_number: Optional[str] = None

    @model_validator(mode="after")
    def _check_order(self):
        if self.dateFrom and self.toDate and self.toDate < self.dateFrom:
            raise ValueError("toDate must be a date after or equal to dateFrom")
        return self


class ActivityLogFilter(RuleSet):
    start: int = Field(ge=0)
    length: int = Field(ge=1, le=100)
    product: Optional[str] = None
    status: Optional[str] = None
    Cn_number: Optional[str] = None


class TariffFilter(RuleSet):
    packet_weight: float = Field(ge=1)
    shipment_type: int
    origin_city: int
    destination_city: int
    cod_amount: float = Field(ge=0)


class ShipperLookup(RuleSet):
    request_param: Text
    request_value: Text


class ShipperAdviceUpdate(BaseModel):
    id: int
    cn_number: Text
    shipper_advice_status: Literal["RA", "RT"]
    shipper_remarks: Optional[str] = None


class ShipperAdviceUpdates(RuleSet):
    data: List[ShipperAdviceUpdate] = Field(min_length=1, max_length=MAX_CN_NUMBERS)


class ShipperRegistration(RuleSet):
    shipment_name: Text
    shipment_email: EmailStr
    shipment_phone: Text
    shipment_address: Text
    city_id: Identifier
    bank_id: Optional[int] = None
    bank_account_no: Optional[str] = None
    bank_account_title: Optional[str] = None
    bank_branch: Optional[str] = None
    bank_account_iban_no: Optional[str] = None
    cnic: Optional[str] = None
    return_address: Optional[str] = None


class LoadSheetRequest(RuleSet):
    loadSheetId: Identifier
    response_type: str = "PDF"


# ----------------------- TCS -----------------------

class TCSBookingRequest(RuleSet):
    consigneeName: Text
    consigneeAddress: Text
    consigneeMobNo: Annotated[str, StringConstraints(min_length=10, max_length=11)]
    consigneeEmail: EmailStr
    originCityName: Text
    destinationCityName: Text
    weight: int
    pieces: int = Field(ge=1)
    codAmount: Text
    customerReferenceNo: Text
    services: Text
    productDetails: Text

    messages: ClassVar[Dict[tuple, str]] = {
        ("consigneeName", "missing"): "Consignee Name is required",
        ("consigneeName", "*"): "Consignee Name should be string",
        ("consigneeAddress", "missing"): "Consignee Address is required",
        ("consigneeAddress", "*"): "Consignee Address should be string",
        ("consigneeMobNo", "missing"): "Consignee Mobile Number is required",
        ("consigneeMobNo", "*"): "Consignee Mobile Number should be a string of 10 to 11 characters",
        ("consigneeEmail", "missing"): "Consignee Email is required",
        ("consigneeEmail", "*"): "Consignee Email should be a valid email address",
        ("originCityName", "missing"): "origin city or office city is required.",
        ("originCityName", "*"): "Origin City name should be string.",
        ("destinationCityName", "missing"): "Destination City is required",
        ("destinationCityName", "*"): "Destination City should be in string",
        ("weight", "missing"): "Weight is required",
        ("weight", "*"): "Weight should be in integer format.",
        ("pieces", "missing"): "Pieces or Quantity is required",
        ("pieces", "greater_than_equal"): "Pieces or Quantity should be a non negative number",
        ("pieces", "*"): "Pieces or Quantity should be a valid integer",
        ("codAmount", "missing"): "COD Amount is required",
        ("codAmount", "*"): "COD Amount should be in string",
        ("customerReferenceNo", "missing"): "Customer Reference Number is required",
        ("customerReferenceNo", "*"): "Customer Reference Number should be a valid string",
        ("services", "missing"): "services is a required field.",
        ("services", "*"): "services should be in string",
        ("productDetails", "missing"): "Product Title or Description is required",
        ("productDetails", "*"): "Product Title or Description should be in string format.",
    }


# ----------------------- helpers -----------------------

def _collect_errors(rules: Type[RuleSet], exc: ValidationError) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ())]
        field = ".".join(loc) or "__root__"
        if err["type"] == "missing":
            default = f"The {field} field is required."
        elif err["type"] == "value_error" and not loc:
            # model-level checks carry their own wording
            default = str(err.get("ctx", {}).get("error") or err["msg"])
        else:
            default = f"{field}: {err['msg']}"
        message = rules.message_for(loc[0] if loc else field, err["type"], default)
        errors.setdefault(field, []).append(message)
    return errors


def check(rules: Type[RuleSet], data: Any) -> ValidationResult:
    """Validate ``data`` against a rule table without raising."""
    if not isinstance(data, dict):
        return ValidationResult(status=False, message="Validation Error", error="Payload must be an object")
    try:
        rules.model_validate(data)
    except ValidationError as exc:
        errors = _collect_errors(rules, exc)
        flat = [m for msgs in errors.values() for m in msgs]
        return ValidationResult(status=False, message="; ".join(flat), error=flat[0], errors=errors)
    return ValidationResult(status=True)


def check_consignment_numbers(data: Any) -> ValidationResult:
    return check(ConsignmentNumbers, data)


def _find_city(cities: List[City], city_id: Any) -> Optional[City]:
    # ids arrive as int or numeric string depending on the caller
    wanted = str(city_id).strip()
    for city in cities:
        if str(city.id).strip() == wanted:
            return city
    return None


def validate_create_booking(data: Any, city_lookup: CityLookup) -> ValidationResult:
    """Field rules, then origin/destination eligibility against the live city list."""
    result = check(LCSBookingRequest, data)
    if not result.status:
        return result

    try:
        cities = list(city_lookup())
    except Exception as e:
        log.warning("City list fetch failed during booking validation: %s", e)
        return ValidationResult(status=False, message="Unable to fetch cities data", error="Cities data fetch error")

    origin = data["origin_city"]
    if not (isinstance(origin, str) and origin.strip().lower() == SELF_ORIGIN):
        origin_city = _find_city(cities, origin)
        if not origin_city or not origin_city.allowed_as_origin:
            return ValidationResult(
                status=False,
                message="Invalid origin city",
                error="Selected origin city is not allowed for shipping",
            )

    destination_city = _find_city(cities, data["destination_city"])
    if not destination_city or not destination_city.allowed_as_destination:
        return ValidationResult(
            status=False,
            message="Invalid destination city",
            error="Selected destination city is not allowed for delivery",
        )

    return ValidationResult(status=True)


def validate_packet(order: Any, index: int) -> ValidationResult:
    result = check(LCSPacketRequest, order)
    if result.status:
        return ValidationResult(status=True, message="Validation Success")
    return ValidationResult(
        status=False,
        message=f"Validation failed at packet index {index}",
        error=result.error,
        errors=result.errors,
    )
