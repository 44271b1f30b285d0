# services/couriers/tcs.py
import re
from typing import Any, Dict, Optional

import httpx

from schemas import ResponseEnvelope
from settings import TCSConfig
from .base import ADAPTER_ERRORS, BaseCourier
from .common import envelope_from_error, failure, parse_json, success
from .validation import TCSBookingRequest, check

SUCCESS_CODE = "0200"


def _return_code(body: Any) -> Optional[str]:
    """TCS reports the outcome as a zero-padded code, e.g. "0200" or "0401"."""
    if not isinstance(body, dict):
        return None
    status = body.get("returnStatus") if isinstance(body.get("returnStatus"), dict) else body
    code = status.get("code")
    if code is None:
        return None
    return str(code).zfill(4)


def _consignment_number(body: Dict[str, Any]) -> Optional[str]:
    if body.get("consignmentNo"):
        return str(body["consignmentNo"])
    reply = body.get("bookingReply")
    # "Your generated CN is: 779412326902", bare or under "result"
    text = reply.get("result") if isinstance(reply, dict) else reply
    match = re.search(r"(\d{6,})", str(text or ""))
    return match.group(1) if match else None


class TCSCourier(BaseCourier):
    """
    TCS e-commerce API.

    Authentication travels in the ``X-IBM-Client-Id`` header; order writes also
    carry ``userName``/``password`` in the body. Tracking uses its own URL.

      - Book:    POST create-order
      - Cancel:  PUT  cancel-order
      - Track:   GET  <tracking_url>?ConsignmentNo=...
      - Lookups: GET  countries / origins / cities
      - Returns: POST reverse-logistics
    """

    name = "tcs"

    def __init__(self, config: TCSConfig, client: Optional[httpx.Client] = None):
        super().__init__(config, client)

    def _url(self, endpoint: str) -> str:
        return f"{self.config.base_url}{endpoint}"

    def _credentials(self, method: str):
        headers = {"X-IBM-Client-Id": self.config.client_id}
        if method == "GET":
            return headers, {}
        return headers, {"userName": self.config.username, "password": self.config.password}

    def track_shipment(self, tracking_number: str) -> ResponseEnvelope:
        if not tracking_number:
            return failure("Invalid Tracking Number")
        try:
            response = self.request("", "GET", {"ConsignmentNo": tracking_number}, url=self.config.tracking_url)
            body = parse_json(response)
        except ADAPTER_ERRORS as e:
            return envelope_from_error(e)
        if not body:
            return failure("Service Down. Error Tracking Shipment", body, 400)
        return success("Tracking Response", body)

    def create_booking(self, data: Dict[str, Any]) -> ResponseEnvelope:
        """
        COD booking. TCS answers with a return code:
        0200 ok, 0401 unauthorized, 0404 not found, 0405 method not allowed,
        0406 not acceptable, 0429 too many requests, 0500/0503 server side.
        """
        validation = check(TCSBookingRequest, data)
        if not validation.status:
            return failure("Validation Error", validation.errors)

        try:
            body = parse_json(self.request("create-order", "POST", data))
        except ADAPTER_ERRORS as e:
            return envelope_from_error(e)

        if _return_code(body) == SUCCESS_CODE:
            return success("Booking Response", {
                "track_number": _consignment_number(body),
                "slip_link": body.get("slipLink"),
            }, 201)
        return failure("Unable to Create Booking", body, 400)

    def cancel_booking(self, consignment_number: str) -> ResponseEnvelope:
        if not consignment_number:
            return failure("Invalid Consignment Number")
        try:
            body = parse_json(self.request("cancel-order", "PUT", {"consignmentNumber": consignment_number}))
        except ADAPTER_ERRORS as e:
            return envelope_from_error(e)

        if _return_code(body) != SUCCESS_CODE:
            return failure("Unable to Cancel Booking", body, 400)
        return success("Booking Response", body)

    def reverse_logistics(self, payload: Dict[str, Any]) -> ResponseEnvelope:
        return self.send("reverse-logistics", "POST", payload)

    def countries_list(self) -> ResponseEnvelope:
        return self.send("countries", "GET")

    def origins_list(self) -> ResponseEnvelope:
        return self.send("origins", "GET")

    def list_cities(self) -> ResponseEnvelope:
        return self.send("cities", "GET")
