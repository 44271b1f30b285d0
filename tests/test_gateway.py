import httpx
import pytest

from services.courier_service import CourierGateway
from services.couriers import registered_couriers, select_provider
from services.couriers.common import NOT_SUPPORTED
from services.couriers.errors import UnsupportedProviderError
from services.couriers.lcs import LCSCourier
from services.couriers.tcs import TCSCourier
from tests.conftest import CITIES, make_settings


def test_registry_lists_both_couriers():
    assert registered_couriers() == ["lcs", "tcs"]


def test_unknown_provider_fails_before_any_call(app_settings, upstream):
    with pytest.raises(UnsupportedProviderError) as excinfo:
        CourierGateway("dhl", app_settings, upstream.client())

    assert isinstance(excinfo.value, ValueError)
    assert excinfo.value.supported == ["lcs", "tcs"]
    assert upstream.requests == []


@pytest.mark.parametrize("name,expected", [("tcs", TCSCourier), (" LCS ", LCSCourier), ("Tcs", TCSCourier)])
def test_provider_names_are_case_insensitive(app_settings, name, expected):
    courier = select_provider(name, app_settings, httpx.Client())
    assert isinstance(courier, expected)


def test_default_courier_is_used_without_a_name(tmp_path):
    gateway = CourierGateway(settings=make_settings(tmp_path, DEFAULT_COURIER="lcs"), client=httpx.Client())
    assert gateway.provider_name == "lcs"


def test_adapter_receives_its_own_config(app_settings):
    courier = select_provider("lcs", app_settings, httpx.Client())
    assert courier.config.api_key == "lcs-key"
    assert courier.config.base_url == "https://lcs.test/api/"


def test_operations_are_delegated(app_settings, upstream):
    upstream.routes["trackBookedPacket"] = httpx.Response(200, json={"status": 1, "packet_list": [{"track_number": "LE1"}]})
    gateway = CourierGateway("lcs", app_settings, upstream.client())

    result = gateway.track_shipment("LE1")

    assert gateway.provider_name == "lcs"
    assert result.success is True
    assert result.data == [{"track_number": "LE1"}]


def test_booking_through_gateway_checks_cities(app_settings, upstream, booking):
    upstream.routes["getAllCities"] = httpx.Response(200, json={"status": 1, "city_list": CITIES})
    upstream.routes["bookPacket"] = httpx.Response(200, json={"status": 1, "track_number": "LE1", "slip_link": "s"})
    booking["destination_city"] = 12
    gateway = CourierGateway("lcs", app_settings, upstream.client())

    result = gateway.create_booking(booking)

    assert result.message == "Invalid destination city"
    assert upstream.calls("bookPacket") == []


def test_unsupported_capability_is_an_envelope(app_settings, upstream):
    gateway = CourierGateway("tcs", app_settings, upstream.client())

    result = gateway.list_banks()

    assert result.success is False
    assert result.code == 422
    assert result.message == NOT_SUPPORTED


def test_unexpected_adapter_error_becomes_an_envelope(app_settings, upstream, monkeypatch):
    gateway = CourierGateway("lcs", app_settings, upstream.client())

    def explode():
        raise RuntimeError("adapter bug")

    monkeypatch.setattr(gateway.courier, "list_cities", explode)

    result = gateway.list_cities()

    assert result.success is False
    assert result.code == 500
    assert result.message == "API Exception"
    assert result.data == "adapter bug"


def test_list_operations_are_repeatable(app_settings, upstream):
    upstream.routes["getBankList"] = httpx.Response(200, json={"status": 1, "bank_list": [{"id": 1, "name": "HBL"}]})
    gateway = CourierGateway("lcs", app_settings, upstream.client())

    assert gateway.list_banks() == gateway.list_banks()
    assert gateway.countries_list() == gateway.countries_list()


def test_context_manager_closes_owned_client(app_settings):
    with CourierGateway("tcs", app_settings) as gateway:
        client = gateway.courier.client
        assert client.timeout.read == app_settings.HTTP_TIMEOUT

    assert client.is_closed


def test_injected_client_is_left_open(app_settings, upstream):
    client = upstream.client()
    with CourierGateway("lcs", app_settings, client):
        pass

    assert not client.is_closed
