import httpx
import pytest
from fastapi.testclient import TestClient

import main
from main import app
from routes.couriers import get_http_client, get_settings
from services.couriers.common import NOT_SUPPORTED
from tests.conftest import CITIES


@pytest.fixture
def api(app_settings, upstream):
    app.dependency_overrides[get_settings] = lambda: app_settings
    app.dependency_overrides[get_http_client] = upstream.client
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def test_lists_couriers(api):
    response = api.get("/api/couriers")
    assert response.status_code == 200
    assert response.json() == {"couriers": ["lcs", "tcs"]}


def test_unknown_courier_is_404(api, upstream):
    response = api.get("/api/couriers/dhl/cities")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["data"] == {"supported": ["lcs", "tcs"]}
    assert upstream.requests == []


def test_tracking(api, upstream):
    upstream.routes["trackBookedPacket"] = httpx.Response(200, json={"status": 1, "packet_list": [{"track_number": "LE1"}]})

    response = api.get("/api/couriers/lcs/track/LE1")

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "code": 200,
        "message": "Tracking Response",
        "data": [{"track_number": "LE1"}],
    }


def test_envelope_code_is_the_http_status(api, upstream, booking):
    upstream.routes["getAllCities"] = httpx.Response(200, json={"status": 1, "city_list": CITIES})
    booking["destination_city"] = 999

    response = api.post("/api/couriers/lcs/bookings", json=booking)

    assert response.status_code == 422
    assert response.json()["message"] == "Invalid destination city"


def test_booking_created(api, upstream):
    upstream.routes["create-order"] = httpx.Response(200, json={"code": "0200", "consignmentNo": "779412326902"})
    order = {
        "consigneeName": "Ali Raza",
        "consigneeAddress": "House 5, Clifton",
        "consigneeMobNo": "03211234567",
        "consigneeEmail": "ali@example.com",
        "originCityName": "Lahore",
        "destinationCityName": "Karachi",
        "weight": 1,
        "pieces": 1,
        "codAmount": "2500",
        "customerReferenceNo": "ORD-1001",
        "services": "O",
        "productDetails": "Shoes",
    }

    response = api.post("/api/couriers/tcs/bookings", json=order)

    assert response.status_code == 201
    assert response.json()["data"]["track_number"] == "779412326902"


def test_unsupported_operation(api):
    response = api.get("/api/couriers/tcs/banks")

    assert response.status_code == 422
    assert response.json()["message"] == NOT_SUPPORTED


def test_load_sheet_body(api, upstream):
    upstream.routes["generateLoadSheet"] = httpx.Response(200, json={"status": 1, "load_sheet_id": 42})

    response = api.post("/api/couriers/lcs/load-sheets", json={"cn_numbers": ["LE1", "LE2"]})

    assert response.status_code == 200
    assert upstream.body(upstream.requests[0])["cn_numbers"] == ["LE1", "LE2"]


def test_booked_packet_statuses_query(api, upstream):
    upstream.routes["getBookedPacketLastStatus"] = httpx.Response(200, json={"status": 1, "packet_list": [{"cn": "LE1"}]})

    response = api.get("/api/couriers/lcs/packets/statuses", params={"from_date": "01-03-2024", "to_date": "31-03-2024"})

    assert response.status_code == 200
    assert response.json()["data"] == [{"cn": "LE1"}]


def test_upstream_timeout_surfaces_as_504(api, upstream):
    upstream.routes["api"] = httpx.Response(504)

    response = api.get("/api/couriers/lcs/cities")

    assert response.status_code == 504
    assert response.json()["message"] == "LCS API Gateway Timeout (504)"


def test_storage_folder_is_created_on_startup(tmp_path, monkeypatch):
    folder = tmp_path / "served"
    monkeypatch.setattr(main.settings, "STORAGE_DIR", str(folder))
    assert not folder.exists()

    with TestClient(app):
        pass

    assert folder.is_dir()
