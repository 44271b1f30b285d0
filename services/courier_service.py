# /services/courier_service.py

import logging
from typing import Any, Dict, List, Optional

import httpx

from schemas import ResponseEnvelope
from services.couriers import select_provider
from services.couriers.base import BaseCourier
from services.couriers.common import failure
from settings import Settings, settings as default_settings

logger = logging.getLogger("couriers.gateway")


class CourierGateway:
    """
    Single entry point for every courier operation.

    The adapter is chosen once, at construction, and every call is forwarded
    to it unchanged. Unknown provider names raise UnsupportedProviderError
    here; after that, every outcome is a ResponseEnvelope.
    """

    def __init__(
        self,
        provider: Optional[str] = None,
        settings: Optional[Settings] = None,
        client: Optional[httpx.Client] = None,
    ):
        settings = settings or default_settings
        self._courier = select_provider(provider or settings.DEFAULT_COURIER, settings, client)
        self.provider_name = self._courier.name
        logger.info("Courier gateway ready for '%s'", self.provider_name)

    @property
    def courier(self) -> BaseCourier:
        return self._courier

    def _dispatch(self, operation: str, *args: Any) -> ResponseEnvelope:
        try:
            return getattr(self._courier, operation)(*args)
        except Exception as e:
            logger.error("%s.%s failed: %s", self.provider_name, operation, e, exc_info=True)
            return failure("API Exception", str(e), 500)

    def close(self) -> None:
        self._courier.close()

    def __enter__(self) -> "CourierGateway":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ----------------------- delegated operations -----------------------
    def track_shipment(self, tracking_number: str) -> ResponseEnvelope:
        return self._dispatch("track_shipment", tracking_number)

    def create_booking(self, data: Dict[str, Any]) -> ResponseEnvelope:
        return self._dispatch("create_booking", data)

    def cancel_booking(self, consignment_number: str) -> ResponseEnvelope:
        return self._dispatch("cancel_booking", consignment_number)

    def countries_list(self) -> ResponseEnvelope:
        return self._dispatch("countries_list")

    def origins_list(self) -> ResponseEnvelope:
        return self._dispatch("origins_list")

    def list_cities(self) -> ResponseEnvelope:
        return self._dispatch("list_cities")

    def batch_book_packets(self, orders: List[Dict[str, Any]]) -> ResponseEnvelope:
        return self._dispatch("batch_book_packets", orders)

    def generate_load_sheet(self, cn_numbers: List[str]) -> ResponseEnvelope:
        return self._dispatch("generate_load_sheet", cn_numbers)

    def create_shipper(self, data: Dict[str, Any]) -> ResponseEnvelope:
        return self._dispatch("create_shipper", data)

    def download_load_sheet(self, data: Dict[str, Any]) -> ResponseEnvelope:
        return self._dispatch("download_load_sheet", data)

    def get_booked_packet_statuses(self, from_date: str, to_date: str) -> ResponseEnvelope:
        return self._dispatch("get_booked_packet_statuses", from_date, to_date)

    def get_shipper_advice_list(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        return self._dispatch("get_shipper_advice_list", filters)

    def get_shipment_details_by_order_id(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        return self._dispatch("get_shipment_details_by_order_id", filters)

    def list_banks(self) -> ResponseEnvelope:
        return self._dispatch("list_banks")

    def get_payment_details(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        return self._dispatch("get_payment_details", filters)

    def get_tariff_details(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        return self._dispatch("get_tariff_details", filters)

    def get_shipping_charges(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        return self._dispatch("get_shipping_charges", filters)

    def get_shipper_details(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        return self._dispatch("get_shipper_details", filters)

    def get_electronic_pod(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        return self._dispatch("get_electronic_pod", filters)

    def get_paginated_shipper_advice_list(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        return self._dispatch("get_paginated_shipper_advice_list", filters)

    def get_activity_log(self, filters: Dict[str, Any]) -> ResponseEnvelope:
        return self._dispatch("get_activity_log", filters)

    def update_shipper_advice(self, payload: Dict[str, Any]) -> ResponseEnvelope:
        return self._dispatch("update_shipper_advice", payload)

    def reverse_logistics(self, payload: Dict[str, Any]) -> ResponseEnvelope:
        return self._dispatch("reverse_logistics", payload)
