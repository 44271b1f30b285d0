# services/couriers/common.py
import json
import logging
from typing import Any, Dict, Optional

import httpx

from schemas import ResponseEnvelope
from .errors import GatewayTimeoutError, ProviderRejection, TransportError

log = logging.getLogger("parcelhub")

NOT_SUPPORTED = "Not Supported for this Client"

_SECRET_KEYS = {"api_key", "api_password", "password", "x-ibm-client-id", "authorization"}


def mask_secrets(values: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {k: ("***" if str(k).lower() in _SECRET_KEYS else v) for k, v in (values or {}).items()}


def _log_envelope(level: int, label: str, envelope: ResponseEnvelope) -> None:
    try:
        body = json.dumps(envelope.data, ensure_ascii=False, default=str)[:2000]
    except (TypeError, ValueError):
        body = repr(envelope.data)[:2000]
    log.log(level, "===== %s ====== %s | %s", label, envelope.message, body)


def success(message: str, data: Any = None, code: int = 200) -> ResponseEnvelope:
    envelope = ResponseEnvelope(success=True, code=code, message=message, data=data)
    _log_envelope(logging.INFO, "Success", envelope)
    return envelope


def failure(message: str, data: Any = None, code: int = 422) -> ResponseEnvelope:
    envelope = ResponseEnvelope(success=False, code=code, message=message, data=data)
    _log_envelope(logging.WARNING, "Failure", envelope)
    return envelope


def not_supported() -> ResponseEnvelope:
    return failure(NOT_SUPPORTED, None, 422)


def classify_response(response: httpx.Response, courier: str) -> httpx.Response:
    """504 -> GatewayTimeoutError, any other non-2xx -> TransportError. Never retries."""
    if response.status_code == 504:
        raise GatewayTimeoutError(courier)
    if not response.is_success:
        try:
            body = response.json()
        except ValueError:
            body = response.text[:500]
        raise TransportError(response.status_code, body)
    return response


def parse_json(response: httpx.Response) -> Any:
    if not response.content or not response.content.strip():
        return None
    return response.json()


def provider_status(body: Any) -> Optional[int]:
    if not isinstance(body, dict) or body.get("status") in (None, ""):
        return None
    try:
        return int(body["status"])
    except (TypeError, ValueError):
        return None


def envelope_from_error(exc: Exception) -> ResponseEnvelope:
    """Every failure path of an adapter ends up here."""
    if isinstance(exc, GatewayTimeoutError):
        return failure(str(exc), None, 504)
    if isinstance(exc, TransportError):
        return failure(str(exc), {"code": exc.status_code}, 400)
    if isinstance(exc, ProviderRejection):
        return failure(str(exc), exc.body, exc.code)
    return failure("API Exception", str(exc), 500)
