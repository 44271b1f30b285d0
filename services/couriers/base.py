# /services/couriers/base.py
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Tuple
import json
import logging

import httpx

from schemas import ResponseEnvelope
from .common import classify_response, envelope_from_error, mask_secrets, not_supported, parse_json, provider_status, success
from .errors import CourierError, ProviderRejection

# failures an adapter converts into envelopes instead of raising
ADAPTER_ERRORS = (CourierError, httpx.HTTPError, ValueError)


def status_is_one(body: Any) -> bool:
    return provider_status(body) == 1


class BaseCourier(ABC):
    """
    Shared contract for every courier adapter.

    Each public operation returns a ResponseEnvelope. Operations a courier
    does not offer keep the default implementation below and answer with the
    "Not Supported for this Client" failure.
    """

    name: str = ""

    def __init__(self, config, client: Optional[httpx.Client] = None):
        self.config = config
        self._owns_client = client is None
        self.client = client or httpx.Client(timeout=getattr(config, "timeout", 45.0))
        self.log = logging.getLogger(f"couriers.{self.name}")

    # ----------------------- transport -----------------------
    @abstractmethod
    def _url(self, endpoint: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def _credentials(self, method: str) -> Tuple[Dict[str, str], Dict[str, Any]]:
        """Return (headers, payload fields) that authenticate a request."""
        raise NotImplementedError

    def request(
        self,
        endpoint: str,
        method: str = "POST",
        payload: Optional[Dict[str, Any]] = None,
        inject_credentials: bool = True,
        url: Optional[str] = None,
    ) -> httpx.Response:
        method = method.upper()
        url = url or self._url(endpoint)
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        body = dict(payload or {})
        if inject_credentials:
            auth_headers, auth_fields = self._credentials(method)
            headers.update(auth_headers)
            body = {**auth_fields, **body}

        self.log.info("%s REQUEST -> %s %s | Headers: %s | Body: %s",
                      self.name.upper(), method, url, mask_secrets(headers),
                      json.dumps(mask_secrets(body), ensure_ascii=False, default=str)[:2000])

        if method == "GET":
            response = self.client.get(url, params=body, headers=headers)
        else:
            response = self.client.request(method, url, json=body, headers=headers)

        self.log.info("%s RESPONSE <- %s | CT=%s | Body[:800]=%r", self.name.upper(), response.status_code,
                      response.headers.get("content-type"), response.text[:800] if self._is_text(response) else "<binary>")
        return classify_response(response, self.name)

    @staticmethod
    def _is_text(response: httpx.Response) -> bool:
        ct = (response.headers.get("content-type") or "").lower()
        return not ct or "json" in ct or "text" in ct

    def send(
        self,
        endpoint: str,
        method: str = "POST",
        payload: Optional[Dict[str, Any]] = None,
        inject_credentials: bool = True,
    ) -> ResponseEnvelope:
        try:
            response = self.request(endpoint, method, payload, inject_credentials)
            return success("Success", parse_json(response))
        except ADAPTER_ERRORS as e:
            return envelope_from_error(e)

    def fetch(
        self,
        endpoint: str,
        method: str = "POST",
        payload: Optional[Dict[str, Any]] = None,
        *,
        message: str,
        key: Optional[str] = None,
        default: Any = None,
        accept: Callable[[Any], bool] = status_is_one,
        failure_message: str = "API returned unsuccessful status",
        failure_code: int = 422,
        code: int = 200,
    ) -> ResponseEnvelope:
        """Send, require the courier status flag, unwrap ``key`` from the body."""
        try:
            body = parse_json(self.request(endpoint, method, payload))
            if not accept(body):
                raise ProviderRejection(failure_message, body, failure_code)
        except ADAPTER_ERRORS as e:
            return envelope_from_error(e)
        if key is None:
            return success(message, body, code)
        return success(message, body.get(key, [] if default is None else default), code)

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    # ----------------------- capabilities -----------------------
    @abstractmethod
    def track_shipment(self, tracking_number: str) -> ResponseEnvelope:
        raise NotImplementedError

    @abstractmethod
    def create_booking(self, data: Dict[str, Any]) -> ResponseEnvelope:
        raise NotImplementedError

    @abstractmethod
    def cancel_booking(self, consignment_number: str) -> ResponseEnvelope:
        raise NotImplementedError

    def countries_list(self) -> ResponseEnvelope:
        return not_supported()

    def origins_list(self) -> ResponseEnvelope:
        return not_supported()

    def list_cities(self) -> ResponseEnvelope:
        return not_supported()

    def batch_book_packets(self, orders: List[Dict[str, Any]]) -> ResponseEnvelope:
        return not_supported()

    def generate_load_sheet(self, cn_numbers: List[str]) -> ResponseEnvelope:
        return not_supported()

    def create_shipper(self, data: Dict[str, Any]) -> ResponseEnvelope:
        return not_supported()

    def download_load_sheet(self, data: Dict[str, Any]) -> ResponseEnvelope:
        return not_supported()

    def get_booked_packet_statuses(self, from_date: str, to_date: str) -> ResponseEnvelope:
        return not_supported()

    def get_shipper_advice_list(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        return not_supported()

    def get_shipment_details_by_order_id(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        return not_supported()

    def list_banks(self) -> ResponseEnvelope:
        return not_supported()

    def get_payment_details(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        return not_supported()

    def get_tariff_details(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        return not_supported()

    def get_shipping_charges(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        return not_supported()

    def get_shipper_details(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        return not_supported()

    def get_electronic_pod(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        return not_supported()

    def get_paginated_shipper_advice_list(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        return not_supported()

    def get_activity_log(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        return not_supported()

    def update_shipper_advice(self, payload: Dict[str, Any]) -> ResponseEnvelope:
        return not_supported()

    def reverse_logistics(self, payload: Dict[str, Any]) -> ResponseEnvelope:
        return not_supported()
