# /routes/couriers.py

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse
from typing import Any, Dict, Iterator, List, Optional

import httpx

from schemas import CourierList, ResponseEnvelope
from services.courier_service import CourierGateway
from services.couriers import registered_couriers
from settings import Settings, settings as app_settings


data_router = APIRouter(prefix='/api/couriers', tags=['Couriers API'])


def get_settings() -> Settings:
    return app_settings


def get_http_client() -> Optional[httpx.Client]:
    # None lets every adapter open its own client with the configured timeout
    return None


def get_gateway(
    courier: str,
    settings: Settings = Depends(get_settings),
    client: Optional[httpx.Client] = Depends(get_http_client),
) -> Iterator[CourierGateway]:
    gateway = CourierGateway(courier, settings, client)
    try:
        yield gateway
    finally:
        gateway.close()


def respond(envelope: ResponseEnvelope) -> JSONResponse:
    return JSONResponse(status_code=envelope.code, content=envelope.model_dump(mode="json"))


@data_router.get("", response_model=CourierList)
def list_couriers():
    return CourierList(couriers=registered_couriers())


# ----------------------- bookings -----------------------
@data_router.get("/{courier}/track/{tracking_number}")
def track_shipment(tracking_number: str, gateway: CourierGateway = Depends(get_gateway)):
    return respond(gateway.track_shipment(tracking_number))


@data_router.post("/{courier}/bookings")
def create_booking(data: Dict[str, Any] = Body(...), gateway: CourierGateway = Depends(get_gateway)):
    return respond(gateway.create_booking(data))


@data_router.post("/{courier}/bookings/batch")
def batch_book_packets(orders: List[Dict[str, Any]] = Body(...), gateway: CourierGateway = Depends(get_gateway)):
    return respond(gateway.batch_book_packets(orders))


@data_router.delete("/{courier}/bookings/{consignment_number}")
def cancel_booking(consignment_number: str, gateway: CourierGateway = Depends(get_gateway)):
    return respond(gateway.cancel_booking(consignment_number))


@data_router.post("/{courier}/reverse-logistics")
def reverse_logistics(payload: Dict[str, Any] = Body(...), gateway: CourierGateway = Depends(get_gateway)):
    return respond(gateway.reverse_logistics(payload))


# ----------------------- lookups -----------------------
@data_router.get("/{courier}/countries")
def countries_list(gateway: CourierGateway = Depends(get_gateway)):
    return respond(gateway.countries_list())


@data_router.get("/{courier}/origins")
def origins_list(gateway: CourierGateway = Depends(get_gateway)):
    return respond(gateway.origins_list())


@data_router.get("/{courier}/cities")
def list_cities(gateway: CourierGateway = Depends(get_gateway)):
    return respond(gateway.list_cities())


@data_router.get("/{courier}/banks")
def list_banks(gateway: CourierGateway = Depends(get_gateway)):
    return respond(gateway.list_banks())


# ----------------------- load sheets -----------------------
@data_router.post("/{courier}/load-sheets")
def generate_load_sheet(cn_numbers: List[str] = Body(..., embed=True), gateway: CourierGateway = Depends(get_gateway)):
    return respond(gateway.generate_load_sheet(cn_numbers))


@data_router.post("/{courier}/load-sheets/download")
def download_load_sheet(data: Dict[str, Any] = Body(...), gateway: CourierGateway = Depends(get_gateway)):
    return respond(gateway.download_load_sheet(data))


# ----------------------- shippers & advice -----------------------
@data_router.post("/{courier}/shippers")
def create_shipper(data: Dict[str, Any] = Body(...), gateway: CourierGateway = Depends(get_gateway)):
    return respond(gateway.create_shipper(data))


@data_router.get("/{courier}/shippers")
def get_shipper_details(
    request_param: str = Query(...),
    request_value: str = Query(...),
    gateway: CourierGateway = Depends(get_gateway),
):
    return respond(gateway.get_shipper_details({"request_param": request_param, "request_value": request_value}))


@data_router.post("/{courier}/advice")
def get_shipper_advice_list(filters: Dict[str, Any] = Body(...), gateway: CourierGateway = Depends(get_gateway)):
    return respond(gateway.get_shipper_advice_list(filters))


@data_router.post("/{courier}/advice/paginated")
def get_paginated_shipper_advice_list(filters: Dict[str, Any] = Body(...), gateway: CourierGateway = Depends(get_gateway)):
    return respond(gateway.get_paginated_shipper_advice_list(filters))


@data_router.put("/{courier}/advice")
def update_shipper_advice(payload: Dict[str, Any] = Body(...), gateway: CourierGateway = Depends(get_gateway)):
    return respond(gateway.update_shipper_advice(payload))


# ----------------------- reports -----------------------
@data_router.get("/{courier}/packets/statuses")
def get_booked_packet_statuses(
    from_date: str = Query(...),
    to_date: str = Query(...),
    gateway: CourierGateway = Depends(get_gateway),
):
    return respond(gateway.get_booked_packet_statuses(from_date, to_date))


@data_router.post("/{courier}/shipments/by-order")
def get_shipment_details_by_order_id(filters: Dict[str, Any] = Body(...), gateway: CourierGateway = Depends(get_gateway)):
    return respond(gateway.get_shipment_details_by_order_id(filters))


@data_router.post("/{courier}/payments")
def get_payment_details(filters: Dict[str, Any] = Body(...), gateway: CourierGateway = Depends(get_gateway)):
    return respond(gateway.get_payment_details(filters))


@data_router.post("/{courier}/tariffs")
def get_tariff_details(filters: Dict[str, Any] = Body(...), gateway: CourierGateway = Depends(get_gateway)):
    return respond(gateway.get_tariff_details(filters))


@data_router.post("/{courier}/charges")
def get_shipping_charges(filters: Dict[str, Any] = Body(...), gateway: CourierGateway = Depends(get_gateway)):
    return respond(gateway.get_shipping_charges(filters))


@data_router.post("/{courier}/epod")
def get_electronic_pod(filters: Dict[str, Any] = Body(...), gateway: CourierGateway = Depends(get_gateway)):
    return respond(gateway.get_electronic_pod(filters))


@data_router.post("/{courier}/activity-log")
def get_activity_log(filters: Dict[str, Any] = Body(...), gateway: CourierGateway = Depends(get_gateway)):
    return respond(gateway.get_activity_log(filters))
