import json
from typing import Any, Callable, Dict, List, Optional, Union

import httpx
import pytest

from schemas import City
from settings import Settings

Reply = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]

CITIES = [
    {"id": 789, "name": "Lahore", "allow_as_origin": True, "allow_as_destination": True},
    {"id": 475, "name": "Karachi", "allow_as_origin": True, "allow_as_destination": True},
    {"id": 12, "name": "Gilgit", "allow_as_origin": False, "allow_as_destination": False},
]


class FakeUpstream:
    """
    Stands in for a courier API. Replies are keyed by a path segment
    (``bookPacket``, ``create-order``...); every request is recorded.
    """

    def __init__(self, routes: Optional[Dict[str, Reply]] = None):
        self.routes: Dict[str, Reply] = dict(routes or {})
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        segments = request.url.path.strip("/").split("/")
        for segment, reply in self.routes.items():
            if segment in segments:
                return reply(request) if callable(reply) else reply
        return httpx.Response(404, json={"status": 0, "error": "no route"})

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    def calls(self, segment: str) -> List[httpx.Request]:
        return [r for r in self.requests if segment in r.url.path.strip("/").split("/")]

    @staticmethod
    def body(request: httpx.Request) -> Dict[str, Any]:
        return json.loads(request.content)


def make_settings(tmp_path, **overrides) -> Settings:
    values = dict(
        TCS_CLIENT_ID="tcs-client-id",
        TCS_BASE_URL="https://tcs.test/ecom/api/",
        TCS_USERNAME="merchant",
        TCS_PASSWORD="tcs-secret",
        TCS_TRACKING_URL="https://tcs.test/tracking/api/GetDynamicTrackDetail",
        LCS_MODE="sandbox",
        LCS_STAGING_URL="https://lcs.test/api/",
        LCS_PRODUCTION_URL="https://lcs-live.test/api/",
        LCS_API_KEY="lcs-key",
        LCS_PASSWORD="lcs-secret",
        LCS_COURIER_NAME="Parcel Hub",
        LCS_COURIER_CODE="PH",
        STORAGE_DIR=str(tmp_path / "storage"),
        PUBLIC_BASE_URL="https://files.test/storage",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def app_settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def cities():
    return [City.model_validate(c) for c in CITIES]


@pytest.fixture
def booking():
    return {
        "booked_packet_weight": 500,
        "booked_packet_no_piece": 1,
        "booked_packet_collect_amount": 2500,
        "booked_packet_order_id": "ORD-1001",
        "origin_city": 789,
        "destination_city": 475,
        "shipment_id": 101,
        "shipment_name_eng": "Parcel Hub Store",
        "shipment_email": "store@example.com",
        "shipment_phone": "03001234567",
        "shipment_address": "12 Mall Road, Lahore",
        "consignment_name_eng": "Ali Raza",
        "consignment_phone": "03211234567",
        "consignment_address": "House 5, Clifton, Karachi",
    }


@pytest.fixture
def packet():
    return {
        "booked_packet_weight": 300,
        "booked_packet_collect_amount": 1200,
        "booked_packet_order_id": "ORD-2001",
        "destination_city": 475,
        "consignment_name_eng": "Sara Khan",
        "consignment_phone": "03331234567",
        "consignment_address": "Block 2, Gulshan, Karachi",
    }
