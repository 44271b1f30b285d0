# services/couriers/lcs.py
import json
from typing import Any, Dict, List, Optional

import httpx

from schemas import City, ConsignmentBatchItem, CountryInfo, ResponseEnvelope
from services.storage import save_load_sheet
from settings import LCSConfig
from .base import ADAPTER_ERRORS, BaseCourier
from .common import envelope_from_error, failure, parse_json, provider_status, success
from .errors import ProviderRejection
from .validation import (
    ActivityLogFilter,
    BookedPacketStatusRange,
    CityLookup,
    ConsignmentNumbers,
    LoadSheetRequest,
    PaginatedAdviceFilter,
    ShipmentOrderIds,
    ShipperAdviceFilter,
    ShipperAdviceUpdates,
    ShipperLookup,
    ShipperRegistration,
    TariffFilter,
    check,
    validate_create_booking,
    validate_packet,
)

FORMAT_SUFFIX = "/format/json/"


def _status_not_zero(body: Any) -> bool:
    return provider_status(body) not in (None, 0)


def _batch_accepted(body: Any) -> bool:
    # only an explicit 0 fails a batch; a missing flag is taken as accepted
    return isinstance(body, dict) and provider_status(body) != 0


class LCSCourier(BaseCourier):
    """
    Leopards Courier (LCS) merchant API.

    Every endpoint lives under ``<base_url><endpoint>/format/json/`` and takes
    ``api_key`` / ``api_password`` in the body (POST) or the query string (GET).
    The JSON answer carries ``status`` 1/0 independently of the HTTP status.

      - Cities:   POST getAllCities             -> city_list
      - Book:     POST bookPacket               -> track_number, slip_link
      - Batch:    POST batchBookPacket
      - Track:    POST trackBookedPacket        -> packet_list
      - Cancel:   POST cancelBookedPackets
      - Sheets:   POST generateLoadSheet / downloadLoadSheet
      - Reports:  shipperAdviceList, getPaymentDetails, getTariffDetails, ...
    """

    name = "lcs"

    def __init__(self, config: LCSConfig, client: Optional[httpx.Client] = None,
                 city_lookup: Optional[CityLookup] = None):
        super().__init__(config, client)
        self.city_lookup: CityLookup = city_lookup or self.fetch_cities

    # ----------------------- helpers -----------------------
    def _url(self, endpoint: str) -> str:
        return f"{self.config.base_url}{endpoint}{FORMAT_SUFFIX}"

    def _credentials(self, method: str):
        return {}, {"api_key": self.config.api_key, "api_password": self.config.password}

    @staticmethod
    def map_packet(order: Dict[str, Any]) -> Dict[str, Any]:
        return ConsignmentBatchItem.from_order(order).model_dump()

    def fetch_cities(self) -> List[City]:
        """Authoritative city list; raises when LCS cannot be reached."""
        body = parse_json(self.request("getAllCities", "POST"))
        if not isinstance(body, dict) or not isinstance(body.get("city_list"), list):
            raise ProviderRejection("Unable to fetch cities data", body)
        return [City.model_validate(c) for c in body["city_list"]]

    # ----------------------- core -----------------------
    def list_cities(self) -> ResponseEnvelope:
        try:
            body = parse_json(self.request("getAllCities", "POST"))
        except ADAPTER_ERRORS as e:
            return envelope_from_error(e)
        cities = body.get("city_list", []) if isinstance(body, dict) else []
        return success("Cities Response", cities)

    def create_booking(self, data: Dict[str, Any]) -> ResponseEnvelope:
        validation = validate_create_booking(data, self.city_lookup)
        if not validation.status:
            return failure(validation.message, validation.error)

        payload = dict(data)
        if isinstance(payload.get("custom_data"), (dict, list)):
            payload["custom_data"] = json.dumps(payload["custom_data"])

        try:
            body = parse_json(self.request("bookPacket", "POST", payload))
        except ADAPTER_ERRORS as e:
            return envelope_from_error(e)

        if provider_status(body) == 1:
            return success("Booking Response", {
                "track_number": body.get("track_number"),
                "slip_link": body.get("slip_link"),
            }, 201)
        return failure("Unable to Create Booking", body, 400)

    def cancel_booking(self, consignment_number: str) -> ResponseEnvelope:
        """``consignment_number`` may hold several CNs separated by commas."""
        if not consignment_number:
            return failure("Invalid Consignment Number")

        try:
            body = parse_json(self.request("cancelBookedPackets", "POST", {"cn_numbers": consignment_number}))
        except ADAPTER_ERRORS as e:
            return envelope_from_error(e)

        if not _status_not_zero(body):
            error = body.get("error") if isinstance(body, dict) else body
            return failure("Unable to Cancel Booking", error, 400)
        return success("Booking Response", body)

    def track_shipment(self, tracking_number: str) -> ResponseEnvelope:
        if not tracking_number:
            return failure("Invalid Tracking Number")

        # empty answers and status 0 look the same as an outage here
        return self.fetch(
            "trackBookedPacket", "POST", {"track_numbers": tracking_number},
            message="Tracking Response", key="packet_list",
            accept=_status_not_zero,
            failure_message="Service Down. Error Tracking Shipment", failure_code=400,
        )

    def countries_list(self) -> ResponseEnvelope:
        # LCS only delivers inside Pakistan
        pakistan = CountryInfo(short_code="PK", dial_code="+92", name="Pakistan", currency="PKR")
        return success("Supported countries for LCS delivery", {"countries": [pakistan.model_dump()]})

    # ----------------------- batch & load sheets -----------------------
    def batch_book_packets(self, orders: List[Dict[str, Any]]) -> ResponseEnvelope:
        """
        Books every order in one ``batchBookPacket`` call.

        Items are validated one by one, but unless ``strict_batch_validation``
        is configured an invalid item is only logged and still submitted.
        A shipper (``shipment_id``) must exist before LCS accepts a batch.
        """
        packets = []
        for index, order in enumerate(orders or []):
            result = validate_packet(order, index)
            if not result.status:
                if self.config.strict_batch_validation:
                    return failure(result.message, result.errors)
                self.log.warning("%s: %s (submitted anyway)", result.message, result.error)
            packets.append(self.map_packet(order if isinstance(order, dict) else {}))

        return self.fetch(
            "batchBookPacket", "POST", {"packets": packets},
            message="Booking Response", accept=_batch_accepted,
            failure_message="Batch Book Packet Error",
        )

    def generate_load_sheet(self, cn_numbers: List[str]) -> ResponseEnvelope:
        payload = {
            "cn_numbers": list(cn_numbers or []),
            "courier_name": self.config.courier_name,
            "courier_code": self.config.courier_code,
        }
        try:
            body = parse_json(self.request("generateLoadSheet", "POST", payload))
        except ADAPTER_ERRORS as e:
            return envelope_from_error(e)

        if provider_status(body) == 0:
            # only the first CN's error is reported
            first_cn = payload["cn_numbers"][0] if payload["cn_numbers"] else ""
            errors = body.get("error") if isinstance(body.get("error"), dict) else {}
            return failure("Unable to Generate Load Sheet", {
                "error": errors.get(first_cn, "Unknown error"),
                "cn_number": first_cn,
            }, 400)
        return success("Load Sheet Response", body)

    def download_load_sheet(self, data: Dict[str, Any]) -> ResponseEnvelope:
        validation = check(LoadSheetRequest, data)
        if not validation.status:
            return failure("Validation Error", validation.errors)

        response_type = str(data.get("response_type") or "PDF").upper()
        payload = {"load_sheet_id": data["loadSheetId"], "response_type": response_type}
        try:
            response = self.request("downloadLoadSheet", "POST", payload)
            if response_type == "PDF":
                url = save_load_sheet(response.content, self.config.storage_dir, self.config.public_base_url)
                return success("Success", url)
            return success("Download Sheet Response", parse_json(response))
        except ADAPTER_ERRORS as e:
            return envelope_from_error(e)
        except OSError as e:
            self.log.error("Could not store load sheet %s: %s", data.get("loadSheetId"), e)
            return failure("Failed to download load sheet", str(e), 500)

    # ----------------------- shippers -----------------------
    def create_shipper(self, data: Dict[str, Any]) -> ResponseEnvelope:
        validation = check(ShipperRegistration, data)
        if not validation.status:
            return failure("Validation Error", validation.errors)

        result = self.send("createShipper", "POST", data)
        if not result.success:
            return result
        return success("Shipper Created Successfully", result.data)

    def get_shipper_details(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        validation = check(ShipperLookup, filters)
        if not validation.status:
            return failure("Validation Error", validation.errors)

        return self.fetch(
            "getShipperDetails", "GET",
            {"request_param": filters["request_param"], "request_value": filters["request_value"]},
            message="Shipper Details Retrieved", key="shipper_detail",
        )

    # ----------------------- reports -----------------------
    def get_booked_packet_statuses(self, from_date: str, to_date: str) -> ResponseEnvelope:
        """Last known status of every packet booked between two DD-MM-YYYY dates."""
        validation = check(BookedPacketStatusRange, {"from_date": from_date, "to_date": to_date})
        if not validation.status:
            if "from_date" in validation.errors or "to_date" in validation.errors:
                return failure("Invalid date format. Use DD-MM-YYYY", validation.errors)
            return failure(validation.error, validation.errors)

        result = self.fetch(
            "getBookedPacketLastStatus", "GET", {"from_date": from_date, "to_date": to_date},
            message="Booked Packet Last Statuses", key="packet_list",
        )
        if result.success and not result.data:
            return failure("No packets found in the given date range.")
        return result

    def get_shipper_advice_list(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        """
        Packets that carry courier advice (exception code plus pending reason)
        in a date range, optionally narrowed by origin/destination city.
        """
        validation = check(ShipperAdviceFilter, filters)
        if not validation.status:
            return failure("Validation Error", validation.errors)

        parsed = ShipperAdviceFilter.model_validate(filters)
        payload = {"from_date": filters["from_date"], "to_date": filters["to_date"]}
        for key in ("origin_city", "destination_city"):
            if getattr(parsed, key):
                payload[key] = getattr(parsed, key)

        return self.fetch(
            "shipperAdviceList", "POST", payload,
            message="Shipper Advice List", key="packet_list",
        )

    def get_paginated_shipper_advice_list(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        validation = check(PaginatedAdviceFilter, filters)
        if not validation.status:
            return failure("Validation Error", validation.errors)

        return self.fetch(
            "shipperAdviceList", "POST", dict(filters),
            message="Paginated Shipper Advice List", key="packet_list",
        )

    def update_shipper_advice(self, payload: Dict[str, Any]) -> ResponseEnvelope:
        validation = check(ShipperAdviceUpdates, payload)
        if not validation.status:
            return failure("Validation Error", validation.errors)

        return self.fetch(
            "updateShipperAdvice", "POST", {"data": payload["data"]},
            message="Shipper Advice Updated Successfully", key="updated_list",
        )

    def get_shipment_details_by_order_id(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        validation = check(ShipmentOrderIds, filters)
        if not validation.status:
            return failure("Validation Error", validation.errors)

        return self.fetch(
            "getShipmentDetailsByOrderID", "POST", {"shipment_order_id": filters["shipment_order_id"]},
            message="Shipment Details Retrieved", key="data",
        )

    def list_banks(self) -> ResponseEnvelope:
        return self.fetch(
            "getBankList", "GET",
            message="Banks List", key="bank_list",
            failure_message="Unable to fetch banks data",
        )

    def get_payment_details(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        validation = check(ConsignmentNumbers, filters)
        if not validation.status:
            return failure("Validation Error", validation.errors)

        return self.fetch(
            "getPaymentDetails", "GET", {"cn_numbers": ",".join(filters["cn_numbers"])},
            message="Payment Details Retrieved", key="payment_list",
        )

    def get_tariff_details(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        validation = check(TariffFilter, filters)
        if not validation.status:
            return failure("Validation Error", validation.errors)

        params = {k: filters[k] for k in ("packet_weight", "shipment_type", "origin_city", "destination_city", "cod_amount")}
        return self.fetch(
            "getTariffDetails", "GET", params,
            message="Tariff Details Retrieved",
        )

    def get_shipping_charges(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        validation = check(ConsignmentNumbers, filters)
        if not validation.status:
            return failure("Validation Error", validation.errors)

        return self.fetch(
            "getShippingCharges", "GET", {"cn_numbers": ",".join(filters["cn_numbers"])},
            message="Shipping Charges Retrieved", key="data",
        )

    def get_electronic_pod(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        validation = check(ConsignmentNumbers, filters)
        if not validation.status:
            return failure("Validation Error", validation.errors)

        # the E-POD endpoint names the parameter in the singular
        return self.fetch(
            "getElectronicProofOfDelivery", "GET", {"cn_number": ",".join(filters["cn_numbers"])},
            message="Electronic Proof of Delivery Retrieved", key="epod_list",
        )

    def get_activity_log(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        validation = check(ActivityLogFilter, filters)
        if not validation.status:
            return failure("Validation Error", validation.errors)

        return self.fetch(
            "activityLog", "POST", dict(filters),
            message="Activity Log Retrieved",
        )
