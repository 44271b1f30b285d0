# services/couriers/errors.py
from typing import Any, Optional


class CourierError(Exception):
    """Base class for failures raised inside a courier adapter."""


class UnsupportedProviderError(CourierError, ValueError):
    def __init__(self, name: str, supported: Optional[list] = None):
        self.name = name
        self.supported = supported or []
        hint = f" (supported: {', '.join(self.supported)})" if self.supported else ""
        super().__init__(f"Unsupported courier provider: {name!r}{hint}")


class GatewayTimeoutError(CourierError):
    def __init__(self, courier: str):
        self.courier = courier
        super().__init__(f"{courier.upper()} API Gateway Timeout (504)")


class TransportError(CourierError):
    def __init__(self, status_code: int, body: Any = None):
        self.status_code = status_code
        self.body = body
        super().__init__("Service Down or Invalid API Key")


class ProviderRejection(CourierError):
    """The courier answered 2xx but flagged the request as failed."""

    def __init__(self, message: str, body: Any = None, code: int = 422):
        self.body = body
        self.code = code
        super().__init__(message)
